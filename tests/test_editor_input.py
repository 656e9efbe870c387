"""
Unit tests for editor_input.py
"""

from dscript_parser.dscript_parser import EXAMPLE_DSCRIPT, validate
from dscript_parser.editor_input import apply_edit, error_line_numbers, is_allowed_input


def test_allowed_input():
    assert is_allowed_input("INITIATEMYNETWORK IRISSCANNING\nADDONELAYER")
    assert not is_allowed_input("addonelayer")
    assert not is_allowed_input("ADDONELAYER2")
    assert not is_allowed_input("")


def test_apply_edit_rejects_disallowed_characters():
    assert apply_edit("ADDONELAYER", "ADDONELAYER;") == "ADDONELAYER"


def test_apply_edit_accepts_blank_text():
    """Clearing the editor is always allowed"""
    assert apply_edit("ADDONELAYER", "") == ""
    assert apply_edit("ADDONELAYER", "  \n") == "  \n"


def test_apply_edit_truncates_to_ten_lines():
    new = "\n".join(["ADDONELAYER"] * 12)
    accepted = apply_edit("", new)
    assert accepted.split("\n") == ["ADDONELAYER"] * 10


def test_error_line_numbers():
    errors = validate("INITIATEMYNETWORK\nADDONELAYER\nOOPS\nADDSPECIALLAYER\nRUNMEPLEASENOW").errors
    assert error_line_numbers(errors) == {1, 3, 5}


def test_example_script_is_valid():
    assert validate(EXAMPLE_DSCRIPT).is_valid

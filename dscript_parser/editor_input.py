"""
Editor input guard for D-Script.

The script editor only accepts uppercase letters and whitespace and never
holds more than MAX_LINES raw lines. These helpers apply the same rules to
text coming from a terminal or a file before it reaches the validator.
"""

import logging
import re
from typing import Iterable, Set

from dscript_parser.dscript_parser import MAX_LINES

logger = logging.getLogger(__name__)

ALLOWED_INPUT = re.compile(r'^[A-Z\s]+$')
LINE_TAG = re.compile(r'^Line (\d+):')


def is_allowed_input(text: str) -> bool:
    return bool(ALLOWED_INPUT.match(text))


def apply_edit(previous: str, new: str) -> str:
    """
    Return the buffer contents after an edit.
    Disallowed, non-blank edits are rejected and the previous text is kept;
    accepted edits are cut down to the first MAX_LINES raw lines.
    """
    if new.strip() and not is_allowed_input(new):
        logger.debug("Rejected edit with characters outside A-Z and whitespace")
        return previous

    lines = new.split('\n')
    if len(lines) > MAX_LINES:
        logger.debug("Truncated edit from %d to %d lines", len(lines), MAX_LINES)
        return '\n'.join(lines[:MAX_LINES])
    return new


def error_line_numbers(errors: Iterable[str]) -> Set[int]:
    """Line numbers that carry at least one error"""
    numbers = set()
    for error in errors:
        match = LINE_TAG.match(error)
        if match:
            numbers.add(int(match.group(1)))
    return numbers

#!/usr/bin/env python3
"""
D-Script Validation Parser
Validates D-Script network scripts line by line and reports every problem
with the line it was found on. Focuses on validation and error reporting;
configuration extraction lives in dscript_engine.dscript_converter.

A D-Script looks like:

    INITIATEMYNETWORK IRISSCANNING
    ADDONELAYER
    ADDONELAYER
    ADDSPECIALLAYER
    RUNMEPLEASE
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


# ============================================================================
# Grammar
# ============================================================================

INIT_KEYWORD = "INITIATEMYNETWORK"
DEFAULT_LAYER_KEYWORD = "ADDONELAYER"
SPECIAL_LAYER_KEYWORD = "ADDSPECIALLAYER"
RUN_KEYWORD = "RUNMEPLEASE"

MIN_LINES = 5
MAX_LINES = 10
MIN_DEFAULT_LAYERS = 2
MAX_DEFAULT_LAYERS = 4
MIN_SPECIAL_LAYERS = 1
MAX_SPECIAL_LAYERS = 4


class NetworkKind(Enum):
    IRISSCANNING = "IRISSCANNING"
    IMAGERECOG = "IMAGERECOG"
    CLIMATEPRED = "CLIMATEPRED"

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["NetworkKind"]:
        """Return the kind named by token, or None if it names none"""
        if not token:
            return None
        try:
            return cls(token)
        except ValueError:
            return None


class LinePosition(Enum):
    FIRST = "FIRST"
    MIDDLE = "MIDDLE"
    LAST = "LAST"


@dataclass(frozen=True)
class ScriptLine:
    number: int
    text: str


@dataclass(frozen=True)
class InitCommand:
    network_type: NetworkKind


@dataclass(frozen=True)
class AddDefaultLayer:
    pass


@dataclass(frozen=True)
class AddSpecialLayer:
    pass


@dataclass(frozen=True)
class RunCommand:
    pass


Command = Union[InitCommand, AddDefaultLayer, AddSpecialLayer, RunCommand]


# ============================================================================
# Error Reporting
# ============================================================================

@dataclass
class ValidationError:
    """A validation problem, tied to a line or to the whole script"""
    message: str
    line_number: Optional[int] = None
    line_text: str = ""
    suggestion: Optional[str] = None

    @property
    def text(self) -> str:
        """The plain error string shown to the user"""
        if self.line_number is None:
            return self.message
        return f"Line {self.line_number}: {self.message}"

    def render(self, color: bool = True) -> str:
        red, reset = ("\033[91m", "\033[0m") if color else ("", "")
        result = f"{red}ERROR{reset}: {self.text}"
        if self.line_number is not None:
            result += f"\n  > {self.line_text}"
        if self.suggestion:
            result += f"\n  Fix: {self.suggestion}"
        return result

    def __str__(self):
        return self.render()


@dataclass
class ValidationResult:
    issues: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> List[str]:
        return [issue.text for issue in self.issues]


# ============================================================================
# Line Tokenizer
# ============================================================================

def tokenize_lines(text: str) -> List[ScriptLine]:
    """
    Split raw script text into trimmed, non-blank lines.
    Blank lines are dropped and do not consume a line number.
    """
    stripped = (line.strip() for line in text.split('\n'))
    lines = [ScriptLine(number, line)
             for number, line in enumerate((s for s in stripped if s), start=1)]
    logger.debug("Tokenized %d non-blank line(s)", len(lines))
    return lines


def position_of(index: int, total: int) -> LinePosition:
    """The first line wins over the last when a script has a single line"""
    if index == 0:
        return LinePosition.FIRST
    if index == total - 1:
        return LinePosition.LAST
    return LinePosition.MIDDLE


def parse_command(line: ScriptLine, position: LinePosition) -> Tuple[Optional[Command], Optional[str]]:
    """
    Interpret one line according to where it sits in the script.
    Returns (command, None) on success or (None, message) on failure.
    """
    if position is LinePosition.FIRST:
        parts = line.text.split(' ')
        if parts[0] != INIT_KEYWORD:
            return None, f"Must start with {INIT_KEYWORD}"
        kind = NetworkKind.from_token(parts[1] if len(parts) > 1 else None)
        if kind is None:
            return None, "Invalid network type. Use IRISSCANNING, IMAGERECOG, or CLIMATEPRED"
        return InitCommand(kind), None

    if position is LinePosition.LAST:
        if line.text != RUN_KEYWORD:
            return None, f"Last line must be {RUN_KEYWORD}"
        return RunCommand(), None

    if line.text == DEFAULT_LAYER_KEYWORD:
        return AddDefaultLayer(), None
    if line.text == SPECIAL_LAYER_KEYWORD:
        return AddSpecialLayer(), None
    return None, f"Invalid command. Use {DEFAULT_LAYER_KEYWORD} or {SPECIAL_LAYER_KEYWORD}"


# ============================================================================
# D-Script Validator
# ============================================================================

class DScriptValidator:
    """
    Validation parser for D-Script.
    Collects every problem instead of stopping at the first one.
    """

    SUGGESTIONS = {
        LinePosition.FIRST: f"{INIT_KEYWORD} IRISSCANNING|IMAGERECOG|CLIMATEPRED",
        LinePosition.MIDDLE: f"{DEFAULT_LAYER_KEYWORD} or {SPECIAL_LAYER_KEYWORD}",
        LinePosition.LAST: RUN_KEYWORD,
    }

    def __init__(self):
        self.issues: List[ValidationError] = []
        self.has_initiate = False
        self.has_run = False
        self.default_layer_count = 0
        self.special_layer_count = 0
        self.network_type: Optional[NetworkKind] = None

    def validate(self, text: str) -> ValidationResult:
        """Main validation entry point"""
        lines = tokenize_lines(text)

        self._check_line_count(lines)
        self._check_lines(lines)
        self._check_totals()

        logger.debug("Validation finished with %d error(s)", len(self.issues))
        return ValidationResult(list(self.issues))

    # ========================================================================
    # Checks
    # ========================================================================

    def _check_line_count(self, lines: List[ScriptLine]):
        if len(lines) < MIN_LINES:
            self._add_error(
                f"Script must have at least {MIN_LINES} lines "
                f"(including {INIT_KEYWORD} and {RUN_KEYWORD})"
            )
        if len(lines) > MAX_LINES:
            self._add_error(f"Script exceeds maximum of {MAX_LINES} lines")

    def _check_lines(self, lines: List[ScriptLine]):
        for index, line in enumerate(lines):
            position = position_of(index, len(lines))
            command, problem = parse_command(line, position)
            logger.debug("Line %d (%s): %r -> %s", line.number, position.value,
                         line.text, command or problem)

            if problem:
                self._add_error(problem, line, self.SUGGESTIONS[position])
            elif isinstance(command, InitCommand):
                self.has_initiate = True
                self.network_type = command.network_type
            elif isinstance(command, RunCommand):
                self.has_run = True
            elif isinstance(command, AddDefaultLayer):
                self.default_layer_count += 1
                if self.default_layer_count > MAX_DEFAULT_LAYERS:
                    self._add_error(
                        f"Maximum {MAX_DEFAULT_LAYERS} default layers allowed", line,
                        f"Remove a {DEFAULT_LAYER_KEYWORD} line"
                    )
            elif isinstance(command, AddSpecialLayer):
                self.special_layer_count += 1
                if self.special_layer_count > MAX_SPECIAL_LAYERS:
                    self._add_error(
                        f"Maximum {MAX_SPECIAL_LAYERS} special layers allowed", line,
                        f"Remove a {SPECIAL_LAYER_KEYWORD} line"
                    )

    def _check_totals(self):
        if self.default_layer_count < MIN_DEFAULT_LAYERS:
            self._add_error(
                f"Script must have at least {MIN_DEFAULT_LAYERS} default layers ({DEFAULT_LAYER_KEYWORD})"
            )
        if self.special_layer_count < MIN_SPECIAL_LAYERS:
            self._add_error(
                f"Script must have at least {MIN_SPECIAL_LAYERS} special layer ({SPECIAL_LAYER_KEYWORD})"
            )
        if not self.has_initiate:
            self._add_error(f"Missing {INIT_KEYWORD} command")
        if not self.has_run:
            self._add_error(f"Missing {RUN_KEYWORD} command as the last line")

    def _add_error(self, message: str, line: Optional[ScriptLine] = None, suggestion: str = None):
        """Add an error to the list"""
        self.issues.append(ValidationError(
            message,
            line.number if line else None,
            line.text if line else "",
            suggestion
        ))


# ============================================================================
# Main Validation Functions
# ============================================================================

def validate(script_text: str) -> ValidationResult:
    """Validate D-Script text. Never raises."""
    return DScriptValidator().validate(script_text)


def validate_dscript(text: str) -> Tuple[bool, List[ValidationError]]:
    """
    Validate D-Script text.
    Returns (is_valid, issues)
    """
    result = validate(text)
    return result.is_valid, result.issues


def validate_file(filepath: str) -> Tuple[bool, List[ValidationError]]:
    """
    Validate a D-Script file.
    Returns (is_valid, issues)
    """
    try:
        with open(filepath, 'r') as f:
            content = f.read()
        return validate_dscript(content)
    except (IOError, UnicodeDecodeError) as e:
        error = ValidationError(
            f"Cannot read file: {e}",
            None,
            "",
            "Check file path and permissions"
        )
        return False, [error]


def print_validation_report(issues: List[ValidationError], color: bool = True):
    """Pretty print validation results"""
    if issues:
        print("\n" + "=" * 60)
        print(f"ERRORS ({len(issues)})")
        print("=" * 60)
        for issue in issues:
            print(issue.render(color))
            print()
        print(f"\n✗ Validation failed with {len(issues)} error(s)")
    else:
        print("\n✓ Validation successful - no errors found")


# ============================================================================
# CLI Interface
# ============================================================================

EXAMPLE_DSCRIPT = """INITIATEMYNETWORK IRISSCANNING
ADDONELAYER
ADDONELAYER
ADDSPECIALLAYER
RUNMEPLEASE"""


def main(argv=None) -> int:
    import argparse
    import json

    parser = argparse.ArgumentParser(
        description='D-Script Validation Parser - Validate D-Script network scripts',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                      # Validate the built-in example
  %(prog)s network.ds           # Validate a file
  %(prog)s network.ds --quiet   # Only show errors
  %(prog)s network.ds --json    # Output as JSON
        """
    )
    parser.add_argument(
        'file',
        nargs='?',
        help='D-Script file to validate (optional, uses the example script if not provided)'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Quiet mode - only show errors, no headers or summary'
    )
    parser.add_argument(
        '-j', '--json',
        action='store_true',
        help='Output validation results as JSON'
    )
    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output - log every validation step'
    )
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(levelname)s - %(message)s')

    color = not args.no_color
    if args.file:
        title = f"D-Script Validation Parser - Validating: {args.file}"
        is_valid, issues = validate_file(args.file)
    else:
        title = "D-Script Validation Parser - Validating built-in example"
        is_valid, issues = validate_dscript(EXAMPLE_DSCRIPT)

    if args.json:
        output = {
            'valid': is_valid,
            'error_count': len(issues),
            'errors': [
                {
                    'message': issue.message,
                    'line': issue.line_number,
                    'text': issue.line_text,
                    'suggestion': issue.suggestion,
                    'display': issue.text,
                }
                for issue in issues
            ]
        }
        print(json.dumps(output, indent=2))
    elif args.quiet:
        for issue in issues:
            print(issue.render(color))
    else:
        print("=" * 60)
        print(title)
        print("=" * 60)
        print_validation_report(issues, color)
        print("\n" + "=" * 60)
        print("Summary:")
        print(f"  Valid: {is_valid}")
        print(f"  Errors: {len(issues)}")
        print("=" * 60)

    # Exit code for CI/CD
    return 0 if is_valid else 1


if __name__ == "__main__":
    import sys
    sys.exit(main())

"""
Validation errors reported to an editing surface.
Every entry is an error; skipped input elsewhere is only logged.
"""
from enum import Enum
from dataclasses import dataclass
from typing import List


class ErrorType(Enum):
    SYNTAX = "syntax"                            # malformed word
    MISSING_INSTRUCTION = "missing_instruction"  # content but no words


@dataclass(frozen=True)
class GCodeError:
    """One rejected line, with the offending span in the original text."""
    line_number: int
    char_start: int
    char_end: int
    message: str
    error_type: ErrorType

    def __str__(self):
        return f"Line {self.line_number}: {self.message}"


class ErrorCollector:
    """Accumulates errors for a single validation pass, kept in document order."""

    def __init__(self):
        self.errors: List[GCodeError] = []

    def add_error(self, line_number: int, char_start: int, char_end: int,
                  message: str, error_type: ErrorType) -> GCodeError:
        error = GCodeError(line_number, char_start, char_end, message, error_type)
        self.errors.append(error)
        return error

    def get_errors_for_line(self, line_number: int) -> List[GCodeError]:
        return [error for error in self.errors if error.line_number == line_number]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def clear(self):
        self.errors = []

    def get_all_errors(self) -> List[GCodeError]:
        """Errors ordered by line, then by position within the line."""
        return sorted(self.errors, key=lambda e: (e.line_number, e.char_start))

    def get_messages(self) -> List[str]:
        """Errors formatted as 'Line N: message' for an editor panel."""
        return [str(error) for error in self.get_all_errors()]

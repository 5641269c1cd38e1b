"""
Strict syntax validation of G-code documents.

Validation is independent of parsing and stricter: words are matched
case-sensitively against the accepted forms, and each line reports at most
one error.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

from core.lexer import strip_comment
from utils.errors import ErrorCollector, ErrorType, GCodeError


@dataclass
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    details: List[GCodeError] = field(default_factory=list)


class GCodeValidator:
    """Checks every line of a document against the accepted word forms."""

    LINE_INDEX_PATTERN = re.compile(r'^N\d+$', re.ASCII)
    CODE_PATTERN = re.compile(r'^[GMT]\d+$', re.ASCII)
    PARAMETER_PATTERN = re.compile(r'^[XYZEFHSIJKR][-+]?\d*\.?\d*$', re.ASCII)
    TOKEN_PATTERN = re.compile(r'\S+')

    def __init__(self):
        self.error_collector = ErrorCollector()

    def validate(self, document: Optional[str]) -> ValidationResult:
        """Validate a document, collecting one error per offending line."""
        self.error_collector.clear()
        if document:
            for index, line in enumerate(document.split('\n')):
                self._validate_line(line, index + 1)

        details = self.error_collector.get_all_errors()
        return ValidationResult(
            is_valid=not self.error_collector.has_errors(),
            errors=self.error_collector.get_messages(),
            details=details,
        )

    def _validate_line(self, line: str, line_number: int):
        clean_line = strip_comment(line)
        if not clean_line:
            return

        offset = line.index(clean_line)
        tokens = list(self.TOKEN_PATTERN.finditer(clean_line))
        if tokens and self.LINE_INDEX_PATTERN.match(tokens[0].group()):
            tokens = tokens[1:]

        if not tokens:
            self.error_collector.add_error(
                line_number, offset, offset + len(clean_line),
                f'missing instruction "{clean_line}"',
                ErrorType.MISSING_INSTRUCTION
            )
            return

        for token in tokens:
            word = token.group()
            if self.CODE_PATTERN.match(word) or self.PARAMETER_PATTERN.match(word):
                continue
            self.error_collector.add_error(
                line_number, offset + token.start(), offset + token.end(),
                f'invalid instruction or parameter "{word}"',
                ErrorType.SYNTAX
            )
            return

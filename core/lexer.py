"""
G-code lexer turning raw text into Instruction records.

Parsing never fails: malformed words are dropped and the rest of the line is
kept. Use core.validator for strict syntax checking.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from core.canonical import (
    CODE_LETTERS,
    COORDINATE_LETTERS,
    LINE_INDEX_LETTER,
    PARAMETER_LETTERS,
    Instruction,
    InstructionType,
    resolve_code,
)

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass
class ParseStats:
    """Document statistics gathered while parsing."""
    total_lines: int = 0
    valid_commands: int = 0
    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0
    min_z: float = 0.0
    max_z: float = 0.0

    def as_dict(self) -> Dict[str, float]:
        return {
            'total_lines': self.total_lines,
            'valid_commands': self.valid_commands,
            'min_x': self.min_x, 'max_x': self.max_x,
            'min_y': self.min_y, 'max_y': self.max_y,
            'min_z': self.min_z, 'max_z': self.max_z,
        }


@dataclass
class ParseResult:
    instructions: List[Instruction] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)


def strip_comment(line: str) -> str:
    """Drop everything after the first ';' and surrounding whitespace."""
    return line.split(';', 1)[0].strip()


def parse_number(text: str) -> Optional[Number]:
    """Parse a word value: float when it has a decimal point, int otherwise."""
    try:
        value = float(text) if '.' in text else int(text)
        if not math.isfinite(value):
            return None
    except (ValueError, OverflowError):
        return None
    return value


class GCodeLexer:
    """Tokenizes G-code lines into instructions."""

    def parse_line(self, raw: str, line_number: int) -> Optional[Instruction]:
        """Parse one line. Returns None for blank and comment-only lines."""
        clean_line = strip_comment(raw)
        if not clean_line:
            return None

        params: Dict[str, Number] = {}
        n_number: Optional[int] = None
        instruction_type = InstructionType.OTHER
        last_code: Optional[int] = None

        for part in clean_line.split():
            part = part.upper()

            if part.startswith(LINE_INDEX_LETTER):
                value = parse_number(part[1:])
                n_number = int(value) if value is not None else None
                continue

            letter = part[0]
            value = parse_number(part[1:])
            if value is None:
                logger.debug("Line %d: dropping unparseable word %r", line_number, part)
                continue

            if letter in CODE_LETTERS:
                code = int(value)
                resolved = resolve_code(letter, code)
                if resolved is not None:
                    instruction_type = resolved
                params[letter] = code
                last_code = code
            elif letter in PARAMETER_LETTERS:
                params[letter] = value
                if letter in COORDINATE_LETTERS and 'G' not in params:
                    instruction_type = InstructionType.FEED_MOVE
                    params['G'] = 1

        return Instruction(
            type=instruction_type,
            line_number=line_number,
            params=params,
            n_number=n_number,
            code=last_code if instruction_type is InstructionType.OTHER else None,
            raw=raw,
        )

    def parse_document(self, content: Optional[str]) -> Optional[ParseResult]:
        """
        Parse a whole document.

        Args:
            content: Raw G-code text

        Returns:
            ParseResult with instructions and axis bounds, or None for an
            empty document
        """
        if not content:
            return None

        lines = content.split('\n')
        instructions: List[Instruction] = []
        bounds: Dict[str, List[float]] = {}

        for index, line in enumerate(lines):
            instruction = self.parse_line(line, index + 1)
            if instruction is None:
                continue
            instructions.append(instruction)

            for axis in ('X', 'Y', 'Z'):
                value = instruction.get(axis)
                if value is None:
                    continue
                if axis in bounds:
                    low, high = bounds[axis]
                    bounds[axis] = [min(low, value), max(high, value)]
                else:
                    bounds[axis] = [value, value]

        stats = ParseStats(total_lines=len(lines), valid_commands=len(instructions))
        for axis, (low, high) in bounds.items():
            setattr(stats, f"min_{axis.lower()}", low)
            setattr(stats, f"max_{axis.lower()}", high)

        logger.info("Parsed %d instructions from %d lines", len(instructions), len(lines))
        return ParseResult(instructions=instructions, stats=stats)

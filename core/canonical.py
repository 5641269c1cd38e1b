"""
Defines the instruction records produced by the lexer.

An instruction is one non-blank line of G-code reduced to a closed set of
instruction types plus the numeric words found on that line. The path
generator dispatches on the type only; everything it does not understand
arrives as OTHER with the raw code preserved.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional


class InstructionType(Enum):
    RAPID_MOVE = "G0"
    FEED_MOVE = "G1"
    ARC_CW = "G2"
    ARC_CCW = "G3"
    HOME = "G28"
    SET_ABSOLUTE = "G90"
    SET_INCREMENTAL = "G91"

    # Auxiliary codes, recognized but without effect on the toolpath
    PLANE_XY = "G17"
    CUTTER_COMP_OFF = "G40"
    TOOL_LENGTH_OFFSET = "G43"
    METRIC_UNITS = "G71"
    SPINDLE_ON = "M03"
    TOOL_CHANGE = "M06"
    SET_HOTEND_TEMP = "M104"
    SET_BED_TEMP = "M140"
    FAN_ON = "M106"
    FAN_OFF = "M107"
    TOOL_SELECT = "T"

    OTHER = "OTHER"

    @property
    def is_linear_move(self) -> bool:
        return self in (InstructionType.RAPID_MOVE, InstructionType.FEED_MOVE)

    @property
    def is_arc(self) -> bool:
        return self in (InstructionType.ARC_CW, InstructionType.ARC_CCW)


# Letters whose value selects the instruction type
CODE_LETTERS = ("G", "M", "T")

# Letters stored as plain parameters
PARAMETER_LETTERS = ("X", "Y", "Z", "E", "F", "H", "S", "I", "J", "K", "R")

# Presence of any of these without a G word makes the line a feed move
COORDINATE_LETTERS = ("X", "Y", "Z", "E")

LINE_INDEX_LETTER = "N"

CODE_TABLE: Dict[str, Dict[int, InstructionType]] = {
    "G": {
        0: InstructionType.RAPID_MOVE,
        1: InstructionType.FEED_MOVE,
        2: InstructionType.ARC_CW,
        3: InstructionType.ARC_CCW,
        28: InstructionType.HOME,
        90: InstructionType.SET_ABSOLUTE,
        91: InstructionType.SET_INCREMENTAL,
        40: InstructionType.CUTTER_COMP_OFF,
        17: InstructionType.PLANE_XY,
        71: InstructionType.METRIC_UNITS,
        43: InstructionType.TOOL_LENGTH_OFFSET,
    },
    "M": {
        3: InstructionType.SPINDLE_ON,
        6: InstructionType.TOOL_CHANGE,
        104: InstructionType.SET_HOTEND_TEMP,
        140: InstructionType.SET_BED_TEMP,
        106: InstructionType.FAN_ON,
        107: InstructionType.FAN_OFF,
    },
}


def resolve_code(letter: str, code: int) -> Optional[InstructionType]:
    """Map a code word to its instruction type, or None if it is not enumerated.

    Every T word is a tool selection regardless of its number.
    """
    if letter == "T":
        return InstructionType.TOOL_SELECT
    return CODE_TABLE.get(letter, {}).get(code)


@dataclass(frozen=True)
class Instruction:
    """One parsed line of G-code."""
    type: InstructionType
    line_number: int
    params: Mapping[str, float] = field(default_factory=dict)
    n_number: Optional[int] = None
    code: Optional[int] = None  # raw numeric code, kept for OTHER
    raw: str = ""

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def has(self, letter: str) -> bool:
        return letter in self.params

    def get(self, letter: str, default: Optional[float] = None) -> Optional[float]:
        return self.params.get(letter, default)

    def __hash__(self):
        return hash((self.type, self.line_number, tuple(sorted(self.params.items())),
                     self.n_number, self.code, self.raw))

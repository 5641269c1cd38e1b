"""
Toolpath geometry produced by the path generator.
A segment is a maximal run of points sharing move type and extruding state.
"""
import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple
from enum import Enum

from core.canonical import InstructionType


class MoveType(Enum):
    RAPID = "rapid"
    FEED = "feed"
    ARC_CW = "arc_cw"
    ARC_CCW = "arc_ccw"

    @classmethod
    def from_instruction(cls, instruction_type: InstructionType) -> 'MoveType':
        return _MOVE_TYPES[instruction_type]

    @property
    def is_arc(self) -> bool:
        return self in (MoveType.ARC_CW, MoveType.ARC_CCW)


_MOVE_TYPES = {
    InstructionType.RAPID_MOVE: MoveType.RAPID,
    InstructionType.FEED_MOVE: MoveType.FEED,
    InstructionType.ARC_CW: MoveType.ARC_CW,
    InstructionType.ARC_CCW: MoveType.ARC_CCW,
}


@dataclass(frozen=True)
class Point3D:
    """Represents a 3D point."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_list(self) -> List[float]:
        """Convert to list format."""
        return [self.x, self.y, self.z]

    def distance_to(self, other: 'Point3D') -> float:
        """Calculate distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx*dx + dy*dy + dz*dz)

    def offset(self, dx: float, dy: float, dz: float) -> 'Point3D':
        return Point3D(self.x + dx, self.y + dy, self.z + dz)


@dataclass(frozen=True)
class ArcParams:
    """IJK offsets of an arc center from the arc start, as written on the line."""
    i: Optional[float] = None
    j: Optional[float] = None
    k: Optional[float] = None

    def offset(self) -> Tuple[float, float, float]:
        return self.i or 0.0, self.j or 0.0, self.k or 0.0


@dataclass(frozen=True)
class PathPoint:
    position: Point3D
    move_type: MoveType
    feed_rate: Optional[float]
    extrusion: float
    line_number: int
    arc: Optional[ArcParams] = None

    def with_arc(self, arc: ArcParams) -> 'PathPoint':
        return replace(self, arc=arc)


@dataclass
class PathSegment:
    """A non-empty run of points with one move type and one extruding state."""
    move_type: MoveType
    is_extruding: bool
    points: List[PathPoint] = field(default_factory=list)

    def matches(self, move_type: MoveType, is_extruding: bool) -> bool:
        return self.move_type == move_type and self.is_extruding == is_extruding

    def length(self) -> float:
        """Sum of straight point-to-point distances."""
        return sum(a.position.distance_to(b.position)
                   for a, b in zip(self.points, self.points[1:]))

    def line_numbers(self) -> List[int]:
        return sorted({point.line_number for point in self.points})


def bounding_box(segments: List[PathSegment]) -> Tuple[Point3D, Point3D]:
    """Bounding box over every point of every segment."""
    points = [point.position for segment in segments for point in segment.points]
    if not points:
        return Point3D(0, 0, 0), Point3D(0, 0, 0)
    return (
        Point3D(min(p.x for p in points), min(p.y for p in points), min(p.z for p in points)),
        Point3D(max(p.x for p in points), max(p.y for p in points), max(p.z for p in points)),
    )

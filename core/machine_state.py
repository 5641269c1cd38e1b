"""
Machine state tracked by the path generator.

The state is an immutable value: every instruction produces a new state from
the previous one, so any step of the interpretation can be replayed or
inspected on its own. Extrusion is always accumulated in absolute mode; none
of the supported instructions switch it.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional
from enum import Enum

from core.canonical import Instruction
from core.geometry import Point3D


class DistanceMode(Enum):
    ABSOLUTE = "G90"
    INCREMENTAL = "G91"


@dataclass(frozen=True)
class MachineState:
    """Modal state carried from one instruction to the next."""
    position: Point3D = Point3D()
    extrusion: float = 0.0
    distance_mode: DistanceMode = DistanceMode.ABSOLUTE
    feed_rate: float = 0.0

    def is_distance_mode_absolute(self) -> bool:
        """Check if distance mode is absolute (G90)."""
        return self.distance_mode == DistanceMode.ABSOLUTE

    def resolve_position(self, instruction: Instruction) -> Point3D:
        """Target position of a move; axes without a word keep their value."""
        coords = []
        for axis, current in zip('XYZ', self.position.to_list()):
            value = instruction.get(axis)
            if value is None:
                coords.append(current)
            elif self.is_distance_mode_absolute():
                coords.append(float(value))
            else:
                coords.append(current + value)
        return Point3D(*coords)

    def resolve_extrusion(self, instruction: Instruction) -> float:
        value = instruction.get('E')
        if value is None:
            return self.extrusion
        return float(value)

    def moved_to(self, position: Point3D, extrusion: Optional[float] = None) -> 'MachineState':
        return replace(
            self,
            position=position,
            extrusion=self.extrusion if extrusion is None else extrusion,
        )

    def with_distance_mode(self, mode: DistanceMode) -> 'MachineState':
        return replace(self, distance_mode=mode)

    def with_feed_rate(self, feed_rate: float) -> 'MachineState':
        return replace(self, feed_rate=float(feed_rate))

    def get_state_summary(self) -> Dict[str, Any]:
        """Get a summary of the current machine state for debugging."""
        return {
            'position': self.position.to_list(),
            'extrusion': self.extrusion,
            'distance_mode': self.distance_mode.value,
            'feed_rate': self.feed_rate,
        }

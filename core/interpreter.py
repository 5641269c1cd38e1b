"""
Path generator folding an instruction list into toolpath segments.
"""
import logging
from typing import List, Optional

from core.canonical import Instruction, InstructionType
from core.geometry import ArcParams, MoveType, PathPoint, PathSegment, Point3D
from core.machine_state import DistanceMode, MachineState

logger = logging.getLogger(__name__)

MIN_ARC_RADIUS = 0.001


class SegmentBuilder:
    """Collects finished segments and the one currently being extended."""

    def __init__(self):
        self.segments: List[PathSegment] = []
        self.current: Optional[PathSegment] = None

    def ensure(self, move_type: MoveType, is_extruding: bool) -> PathSegment:
        """Return the open segment, starting a new one on a type/extrusion change."""
        if self.current is None or not self.current.matches(move_type, is_extruding):
            self.start(move_type, is_extruding)
        return self.current

    def start(self, move_type: MoveType, is_extruding: bool) -> PathSegment:
        self.close()
        self.current = PathSegment(move_type=move_type, is_extruding=is_extruding)
        return self.current

    def close(self):
        if self.current is not None and self.current.points:
            self.segments.append(self.current)
        self.current = None

    def append(self, point: PathPoint):
        self.current.points.append(point)

    def replace_last(self, point: PathPoint):
        self.current.points[-1] = point

    def finish(self) -> List[PathSegment]:
        self.close()
        return self.segments


class GCodePathGenerator:
    """Interprets instructions into absolute-coordinate path segments."""

    def __init__(self):
        self.state = MachineState()
        self.builder = SegmentBuilder()

    def reset(self):
        self.state = MachineState()
        self.builder = SegmentBuilder()

    def generate_path(self, instructions: List[Instruction]) -> List[PathSegment]:
        """
        Generate toolpath segments for an ordered instruction list.
        Each call starts from a fresh machine state.
        """
        self.reset()
        for instruction in instructions:
            self.state = self.step(self.state, instruction)
        segments = self.builder.finish()
        logger.info("Generated %d segments from %d instructions",
                    len(segments), len(instructions))
        return segments

    def step(self, state: MachineState, instruction: Instruction) -> MachineState:
        """Apply one instruction to a state, emitting points into the builder."""
        kind = instruction.type

        if kind is InstructionType.HOME:
            # Home neither reads nor updates the feed rate
            return self._process_home(state, instruction)

        if kind.is_linear_move:
            state = self._process_linear_move(state, instruction)
        elif kind.is_arc:
            state = self._process_arc_move(state, instruction)
        elif kind is InstructionType.SET_ABSOLUTE:
            state = state.with_distance_mode(DistanceMode.ABSOLUTE)
        elif kind is InstructionType.SET_INCREMENTAL:
            state = state.with_distance_mode(DistanceMode.INCREMENTAL)

        feed_rate = instruction.get('F')
        if feed_rate is not None:
            state = state.with_feed_rate(feed_rate)
        return state

    def _process_linear_move(self, state: MachineState, instruction: Instruction) -> MachineState:
        """G0/G1 - straight move to the target position."""
        move_type = MoveType.from_instruction(instruction.type)
        new_position = state.resolve_position(instruction)
        new_extrusion = state.resolve_extrusion(instruction)
        is_extruding = new_extrusion > state.extrusion

        self.builder.ensure(move_type, is_extruding)
        self.builder.append(PathPoint(
            position=new_position,
            move_type=move_type,
            feed_rate=state.feed_rate,
            extrusion=new_extrusion,
            line_number=instruction.line_number,
        ))
        return state.moved_to(new_position, new_extrusion)

    def _process_arc_move(self, state: MachineState, instruction: Instruction) -> MachineState:
        """G2/G3 - circular move around a center given by IJK offsets."""
        move_type = MoveType.from_instruction(instruction.type)
        start = state.position
        end = state.resolve_position(instruction)

        if end.x == start.x and end.y == start.y:
            logger.debug("Line %d: arc start and end coincide in XY, skipping",
                         instruction.line_number)
            return state

        arc = ArcParams(instruction.get('I'), instruction.get('J'), instruction.get('K'))
        center = start.offset(*arc.offset())
        radius = center.distance_to(start)
        if radius < MIN_ARC_RADIUS:
            logger.warning("Line %d: invalid arc, radius %.6f from center %s",
                           instruction.line_number, radius, center.to_list())
            return state

        new_extrusion = state.resolve_extrusion(instruction)
        is_extruding = new_extrusion > state.extrusion

        segment = self.builder.ensure(move_type, is_extruding)
        if not segment.points:
            self.builder.append(PathPoint(
                position=start,
                move_type=move_type,
                feed_rate=state.feed_rate,
                extrusion=state.extrusion,
                line_number=instruction.line_number,
                arc=arc,
            ))
        else:
            self.builder.replace_last(segment.points[-1].with_arc(arc))

        self.builder.append(PathPoint(
            position=end,
            move_type=move_type,
            feed_rate=state.feed_rate,
            extrusion=new_extrusion,
            line_number=instruction.line_number,
            arc=arc,
        ))
        logger.debug("Line %d: arc %s -> %s, center %s, radius %.3f",
                     instruction.line_number, start.to_list(), end.to_list(),
                     center.to_list(), radius)
        return state.moved_to(end, new_extrusion)

    def _process_home(self, state: MachineState, instruction: Instruction) -> MachineState:
        """G28 - return the named axes (all axes when none are named) to zero."""
        named = [axis for axis in 'XYZ' if instruction.has(axis)] or ['X', 'Y', 'Z']
        coords = [0.0 if axis in named else value
                  for axis, value in zip('XYZ', state.position.to_list())]
        home = Point3D(*coords)

        self.builder.start(MoveType.RAPID, False)
        self.builder.append(PathPoint(
            position=home,
            move_type=MoveType.RAPID,
            feed_rate=None,
            extrusion=state.extrusion,
            line_number=instruction.line_number,
        ))
        return state.moved_to(home)

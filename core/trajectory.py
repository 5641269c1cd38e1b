"""
Trajectory synthesis: turns path segments into time-stamped animation frames.

Timing assumes the tool moves at one constant speed along the whole path.
Frame times are a running sum over every pair in order, so each segment's
time base depends on the exact duration of everything before it.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from config.playback_config import PlaybackConfig
from core.geometry import MoveType, PathPoint, PathSegment, Point3D
from utils.geometry import arc_center, arc_point, arc_sweep, estimate_arc_length, lerp

logger = logging.getLogger(__name__)

MIN_LINEAR_STEPS = 10
MIN_ARC_STEPS = 50


@dataclass(frozen=True)
class AnimationFrame:
    position: Point3D
    segment_index: int
    point_index: int
    time: float  # seconds from playback start


@dataclass(frozen=True)
class SpeedCalibration:
    """Playback speed derived from the toolpath, in units per minute."""
    speed: float
    min_speed: float
    max_speed: float
    total_distance: float


def _round_up(value: float, step: float) -> float:
    return math.ceil(value / step) * step


def calibrate_speed(segments: List[PathSegment],
                    config: Optional[PlaybackConfig] = None) -> SpeedCalibration:
    """
    Pick a playback speed so the whole path plays in about
    config.target_duration seconds.

    Linear segments contribute their point-to-point distances, arc segments
    the chord from first to last point. Hops under config.noise_floor are
    ignored.
    """
    config = config or PlaybackConfig()

    hops = []
    for segment in segments:
        if segment.move_type.is_arc:
            pairs = [(segment.points[0], segment.points[-1])]
        else:
            pairs = zip(segment.points, segment.points[1:])
        for p1, p2 in pairs:
            distance = p1.position.distance_to(p2.position)
            if distance >= config.noise_floor:
                hops.append((distance, abs(p2.position.z - p1.position.z)))

    total_distance = sum(distance for distance, _ in hops)
    if total_distance <= 0:
        return SpeedCalibration(
            speed=config.min_speed,
            min_speed=config.min_speed,
            max_speed=_round_up(config.min_speed * config.max_speed_factor, config.speed_step),
            total_distance=0.0,
        )

    speed = total_distance * 60.0 / config.target_duration

    z_distance = sum(dz for _, dz in hops)
    if z_distance / total_distance > config.z_travel_ratio:
        speed *= config.z_travel_factor

    short_hops = sum(1 for distance, _ in hops if distance < config.short_hop_length)
    if short_hops / len(hops) > config.short_hop_ratio:
        speed *= config.short_hop_factor

    speed = max(_round_up(speed, config.speed_step), config.min_speed)
    max_speed = _round_up(speed * config.max_speed_factor, config.speed_step)
    speed = min(speed, max_speed)

    logger.info("Calibrated playback speed %.0f units/min over %.2f units",
                speed, total_distance)
    return SpeedCalibration(
        speed=speed,
        min_speed=config.min_speed,
        max_speed=max_speed,
        total_distance=total_distance,
    )


class TrajectorySynthesizer:
    """Expands path segments into frames spaced for constant-speed playback."""

    def __init__(self):
        self.frames: List[AnimationFrame] = []
        self.elapsed = 0.0
        self.last_position: Optional[Point3D] = None

    def synthesize(self, segments: List[PathSegment], speed: float) -> List[AnimationFrame]:
        """
        Build the frame list for a set of segments.

        Args:
            segments: Ordered path segments
            speed: Playback speed in units per minute

        Returns:
            Frames sorted by time, starting at 0
        """
        if speed <= 0:
            raise ValueError(f"Playback speed must be positive, got {speed}")

        self.frames = []
        self.elapsed = 0.0
        self.last_position = None
        units_per_second = speed / 60.0

        for segment_index, segment in enumerate(segments):
            points = segment.points
            if len(points) == 1:
                if self.last_position is None:
                    self._emit(points[0].position, segment_index, 0, 0.0)
                    self.last_position = points[0].position
                    continue
                self._expand_pair(segment, segment_index, 0,
                                  self.last_position, points[0], None, units_per_second)
                continue

            for point_index in range(1, len(points)):
                p1, p2 = points[point_index - 1], points[point_index]
                self._expand_pair(segment, segment_index, point_index,
                                  p1.position, p2, p1, units_per_second)

        frames = sorted(self.frames, key=lambda frame: frame.time)
        logger.info("Synthesized %d frames, %.2f s of playback", len(frames), self.elapsed)
        return frames

    def _expand_pair(self, segment: PathSegment, segment_index: int, point_index: int,
                     start: Point3D, target: PathPoint, source: Optional[PathPoint],
                     units_per_second: float):
        arc = source.arc if source is not None else None
        if segment.move_type.is_arc and arc is not None:
            length = self._expand_arc(start, target.position, arc.offset(),
                                      segment.move_type == MoveType.ARC_CW,
                                      segment_index, point_index, units_per_second)
        else:
            length = self._expand_line(start, target.position,
                                       segment_index, point_index, units_per_second)
        self.elapsed += length / units_per_second
        self.last_position = target.position

    def _expand_line(self, p1: Point3D, p2: Point3D, segment_index: int,
                     point_index: int, units_per_second: float) -> float:
        distance = p1.distance_to(p2)
        duration = distance / units_per_second
        steps = max(MIN_LINEAR_STEPS, math.ceil(2 * distance))
        for step in range(steps + 1):
            t = step / steps
            position = Point3D(lerp(p1.x, p2.x, t), lerp(p1.y, p2.y, t), lerp(p1.z, p2.z, t))
            self._emit(position, segment_index, point_index, self.elapsed + duration * t)
        return distance

    def _expand_arc(self, p1: Point3D, p2: Point3D, offset, clockwise: bool,
                    segment_index: int, point_index: int, units_per_second: float) -> float:
        i, j, k = offset
        # Only the in-plane center is used; center Z from K never enters the math
        cx, cy, _cz = arc_center(p1.x, p1.y, p1.z, i, j, k)
        radius = math.hypot(p1.x - cx, p1.y - cy)
        start_angle = math.atan2(p1.y - cy, p1.x - cx)
        end_angle = math.atan2(p2.y - cy, p2.x - cx)
        sweep = arc_sweep(start_angle, end_angle, clockwise)

        length = estimate_arc_length(cx, cy, radius, start_angle, sweep, p1.z, p2.z)
        duration = length / units_per_second
        steps = max(MIN_ARC_STEPS, math.ceil(2 * length))
        for step in range(steps + 1):
            t = step / steps
            x, y = arc_point(cx, cy, radius, start_angle + sweep * t)
            position = Point3D(x, y, lerp(p1.z, p2.z, t))
            self._emit(position, segment_index, point_index, self.elapsed + duration * t)
        return length

    def _emit(self, position: Point3D, segment_index: int, point_index: int, time: float):
        self.frames.append(AnimationFrame(position, segment_index, point_index, time))

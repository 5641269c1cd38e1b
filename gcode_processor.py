"""
Main G-code processor interface.
Holds one document and the artifacts derived from it: validation errors,
parsed instructions, toolpath segments and, on demand, animation frames.
"""
import logging
from typing import List, Dict, Any, Optional, Tuple

from config.playback_config import ConfigManager, PlaybackConfig
from core.geometry import PathSegment, bounding_box
from core.lexer import GCodeLexer, ParseResult, ParseStats
from core.interpreter import GCodePathGenerator
from core.simulation_controller import SimulationController
from core.trajectory import (
    AnimationFrame,
    SpeedCalibration,
    TrajectorySynthesizer,
    calibrate_speed,
)
from core.validator import GCodeValidator
from utils.errors import GCodeError

logger = logging.getLogger(__name__)


class GCodeProcessor:
    """
    Main interface for G-code processing.
    Provides a simple API for text editors and 3D visualization tools.
    """

    def __init__(self, config: Optional[PlaybackConfig] = None):
        self.config = config or ConfigManager.default()
        self.lexer = GCodeLexer()
        self.validator = GCodeValidator()
        self.path_generator = GCodePathGenerator()
        self.synthesizer = TrajectorySynthesizer()

        self.raw_content = ""
        self.validation_errors: List[str] = []
        self.parse_result: Optional[ParseResult] = None
        self.segments: List[PathSegment] = []
        self.calibration: Optional[SpeedCalibration] = None
        self.speed = self.config.min_speed
        self._frames: Optional[List[AnimationFrame]] = None

    # Document methods

    def set_content(self, content: str) -> bool:
        """Replace the document text and validate it."""
        self.raw_content = content or ""
        return self.validate_content()

    def validate_content(self) -> bool:
        result = self.validator.validate(self.raw_content)
        self.validation_errors = result.errors
        return result.is_valid

    def is_valid(self) -> bool:
        return not self.validation_errors

    def parse_content(self) -> Optional[ParseResult]:
        """
        Parse the current document and rebuild the toolpath.

        Returns:
            The parse result, or None when the document is empty or invalid
        """
        if not self.raw_content:
            return None
        if not self.validate_content():
            logger.info("Document has %d validation errors, not parsing",
                        len(self.validation_errors))
            return None

        self.parse_result = self.lexer.parse_document(self.raw_content)
        self.segments = self.path_generator.generate_path(self.parse_result.instructions)
        self.calibration = calibrate_speed(self.segments, self.config)
        self.speed = self.calibration.speed
        self._frames = None
        return self.parse_result

    def clear_content(self):
        self.raw_content = ""
        self.validation_errors = []
        self.parse_result = None
        self.segments = []
        self.calibration = None
        self.speed = self.config.min_speed
        self._frames = None

    # Error methods for editor integration

    def get_validation_errors(self) -> List[str]:
        return list(self.validation_errors)

    def get_error_details(self) -> List[GCodeError]:
        """Structured errors with character spans from the last validation."""
        return self.validator.error_collector.get_all_errors()

    def get_errors_for_line(self, line_number: int) -> List[GCodeError]:
        return self.validator.error_collector.get_errors_for_line(line_number)

    def get_machine_state(self) -> Dict[str, Any]:
        """Modal state left after the last generated toolpath."""
        return self.path_generator.state.get_state_summary()

    # Geometry methods for 3D visualization

    def get_segments(self) -> List[PathSegment]:
        return self.segments

    def get_segments_for_line(self, line_number: int) -> List[int]:
        """Indices of the segments holding points produced by a source line."""
        return [index for index, segment in enumerate(self.segments)
                if line_number in segment.line_numbers()]

    def get_bounding_box(self) -> Tuple[List[float], List[float]]:
        """
        Get the bounding box of all geometry.

        Returns:
            Tuple of (min_point, max_point) as [x, y, z] lists
        """
        min_point, max_point = bounding_box(self.segments)
        return min_point.to_list(), max_point.to_list()

    def get_stats(self) -> ParseStats:
        if self.parse_result is None:
            return ParseStats()
        return self.parse_result.stats

    # Playback methods

    def set_speed(self, speed: float):
        """Change the playback speed (units/min); frames are rebuilt on next use."""
        if speed <= 0:
            raise ValueError(f"Playback speed must be positive, got {speed}")
        self.speed = speed
        self._frames = None

    def get_frames(self) -> List[AnimationFrame]:
        """Animation frames for the current segments, computed on first request."""
        if self._frames is None:
            self._frames = self.synthesizer.synthesize(self.segments, self.speed)
        return self._frames

    def create_playback(self) -> SimulationController:
        return SimulationController(self.get_frames(), self.config.frame_interval)

    def reset_playback(self):
        self._frames = None

    def get_toolpath_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the toolpath for display purposes.

        Returns:
            Dictionary with toolpath summary information
        """
        min_point, max_point = self.get_bounding_box()
        travel_length = sum(s.length() for s in self.segments if not s.is_extruding)
        extrude_length = sum(s.length() for s in self.segments if s.is_extruding)

        return {
            'stats': self.get_stats().as_dict(),
            'total_segments': len(self.segments),
            'extruding_segments': sum(1 for s in self.segments if s.is_extruding),
            'travel_length': travel_length,
            'extrude_length': extrude_length,
            'bounding_box': {
                'min': min_point,
                'max': max_point,
                'size': [
                    max_point[0] - min_point[0],
                    max_point[1] - min_point[1],
                    max_point[2] - min_point[2]
                ]
            },
            'speed': self.speed,
            'speed_range': [
                self.calibration.min_speed if self.calibration else self.config.min_speed,
                self.calibration.max_speed if self.calibration else self.config.min_speed,
            ],
        }

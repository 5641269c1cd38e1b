"""Tests for the document-level processor."""

import pytest

from config.playback_config import PlaybackConfig
from core.geometry import MoveType
from core.simulation_controller import SimulationController
from gcode_processor import GCodeProcessor

SAMPLE = """\
; sample part
G90
G28
G0 X0 Y0 Z0.2 F3000
G1 X20 Y0 E1 F1200
G1 X20 Y20 E2
G2 X40 Y20 I10 J0 E3
G0 X0 Y0
"""


@pytest.fixture
def processor() -> GCodeProcessor:
    return GCodeProcessor()


@pytest.fixture
def loaded(processor: GCodeProcessor) -> GCodeProcessor:
    processor.set_content(SAMPLE)
    processor.parse_content()
    return processor


class TestDocument:
    """Tests for content handling and validation."""

    def test_empty_content_is_not_parsed(self, processor: GCodeProcessor) -> None:
        processor.set_content("")
        assert processor.parse_content() is None
        assert processor.get_segments() == []

    def test_invalid_content_is_not_parsed(self, processor: GCodeProcessor) -> None:
        assert processor.set_content("G1 X10\nG1 XABC") is False
        assert processor.parse_content() is None
        assert processor.get_validation_errors() == [
            'Line 2: invalid instruction or parameter "XABC"'
        ]
        assert processor.get_error_details()[0].line_number == 2
        assert processor.get_errors_for_line(1) == []
        assert processor.get_errors_for_line(2)[0].char_start == 3

    def test_huge_coordinate_does_not_break_parsing(self, processor: GCodeProcessor) -> None:
        assert processor.set_content("G1 X0\nG1 X" + "9" * 400 + ".0 Y5")
        assert processor.parse_content() is not None
        assert processor.get_bounding_box() == ([0, 0, 0], [0, 5, 0])
        assert processor.get_frames()

    def test_parse_builds_segments(self, loaded: GCodeProcessor) -> None:
        assert loaded.is_valid()
        types = [s.move_type for s in loaded.get_segments()]
        assert types == [MoveType.RAPID, MoveType.FEED, MoveType.ARC_CW, MoveType.RAPID]
        stats = loaded.get_stats()
        assert stats.valid_commands == 7
        assert (stats.min_x, stats.max_x) == (0, 40)

    def test_clear_content(self, loaded: GCodeProcessor) -> None:
        loaded.clear_content()
        assert loaded.get_segments() == []
        assert loaded.get_stats().valid_commands == 0
        assert loaded.get_frames() == []

    def test_segments_for_line(self, loaded: GCodeProcessor) -> None:
        assert loaded.get_segments_for_line(7) == [2]
        assert loaded.get_segments_for_line(1) == []

    def test_machine_state_after_parse(self, loaded: GCodeProcessor) -> None:
        state = loaded.get_machine_state()
        assert state["position"] == [0, 0, 0.2]
        assert state["extrusion"] == 3
        assert state["distance_mode"] == "G90"
        assert state["feed_rate"] == 1200

    def test_bounding_box(self, loaded: GCodeProcessor) -> None:
        min_point, max_point = loaded.get_bounding_box()
        assert min_point == [0, 0, 0]
        assert max_point == [40, 20, 0.2]


class TestPlayback:
    """Tests for lazy frame computation and invalidation."""

    def test_frames_are_cached(self, loaded: GCodeProcessor) -> None:
        frames = loaded.get_frames()
        assert frames
        assert loaded.get_frames() is frames
        assert frames[0].time == 0

    def test_speed_change_invalidates_frames(self, loaded: GCodeProcessor) -> None:
        frames = loaded.get_frames()
        loaded.set_speed(loaded.speed * 2)
        faster = loaded.get_frames()
        assert faster is not frames
        assert faster[-1].time == pytest.approx(frames[-1].time / 2)

    def test_reparse_invalidates_frames(self, loaded: GCodeProcessor) -> None:
        frames = loaded.get_frames()
        loaded.set_content("G1 X0\nG1 X5")
        loaded.parse_content()
        assert loaded.get_frames() is not frames

    def test_reset_playback_invalidates_frames(self, loaded: GCodeProcessor) -> None:
        frames = loaded.get_frames()
        loaded.reset_playback()
        assert loaded.get_frames() is not frames

    def test_invalid_speed(self, loaded: GCodeProcessor) -> None:
        with pytest.raises(ValueError):
            loaded.set_speed(0)

    def test_create_playback(self, loaded: GCodeProcessor) -> None:
        playback = loaded.create_playback()
        assert isinstance(playback, SimulationController)
        assert playback.frames is loaded.get_frames()
        assert playback.frame_interval == loaded.config.frame_interval

    def test_speed_is_calibrated(self) -> None:
        processor = GCodeProcessor(PlaybackConfig(target_duration=1.0))
        processor.set_content("G1 X0\nG1 X10")
        processor.parse_content()
        assert processor.speed == 600
        assert processor.calibration.max_speed == 900


class TestSummary:
    def test_toolpath_summary(self, loaded: GCodeProcessor) -> None:
        summary = loaded.get_toolpath_summary()
        assert summary['total_segments'] == 4
        assert summary['extruding_segments'] == 2
        assert summary['extrude_length'] == pytest.approx(40)
        assert summary['bounding_box']['size'] == pytest.approx([40, 20, 0.2])
        assert summary['speed'] == loaded.speed
        low, high = summary['speed_range']
        assert low <= loaded.speed <= high

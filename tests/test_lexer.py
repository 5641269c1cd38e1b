"""Tests for line parsing and document statistics."""

import pytest

from core.canonical import Instruction, InstructionType
from core.lexer import GCodeLexer, ParseStats


@pytest.fixture
def lexer() -> GCodeLexer:
    return GCodeLexer()


class TestParseLine:
    """Tests for turning single lines into instructions."""

    @pytest.mark.parametrize("line", ["", "   ", "; just a comment", "   ; indented comment"])
    def test_blank_and_comment_lines_are_skipped(self, lexer: GCodeLexer, line: str) -> None:
        assert lexer.parse_line(line, 1) is None

    def test_feed_move_with_parameters(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G1 X10 Y0 F1000", 3)
        assert instruction.type is InstructionType.FEED_MOVE
        assert instruction.line_number == 3
        assert dict(instruction.params) == {"G": 1, "X": 10, "Y": 0, "F": 1000}
        assert instruction.raw == "G1 X10 Y0 F1000"

    def test_comment_is_stripped(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G0 X5 ; move X5 Y9", 1)
        assert instruction.type is InstructionType.RAPID_MOVE
        assert dict(instruction.params) == {"G": 0, "X": 5}

    def test_line_index_is_parsed_and_skipped(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("N10 G0 X5", 1)
        assert instruction.n_number == 10
        assert "N" not in instruction.params
        assert instruction.type is InstructionType.RAPID_MOVE

    def test_integer_and_float_values(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G1 X2 Y1.5 Z-.5", 1)
        assert isinstance(instruction.params["X"], int)
        assert instruction.params["Y"] == 1.5
        assert instruction.params["Z"] == -0.5

    def test_unparseable_values_are_dropped(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G1 XABC Y2 Z", 1)
        assert dict(instruction.params) == {"G": 1, "Y": 2}

    @pytest.mark.parametrize("value", ["9" * 400 + ".0", "1.0e999", "1.5E400"])
    def test_non_finite_values_are_dropped(self, lexer: GCodeLexer, value: str) -> None:
        instruction = lexer.parse_line(f"G1 X{value} Y2", 1)
        assert dict(instruction.params) == {"G": 1, "Y": 2}

    def test_oversized_integer_is_dropped(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G1 X" + "9" * 400 + " Y2", 1)
        assert dict(instruction.params) == {"G": 1, "Y": 2}

    def test_unknown_letters_are_dropped(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G1 X1 P5 Q2", 1)
        assert dict(instruction.params) == {"G": 1, "X": 1}

    def test_lowercase_words_are_accepted(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("g2 x10 y0 i5 j0", 1)
        assert instruction.type is InstructionType.ARC_CW
        assert instruction.params["I"] == 5

    @pytest.mark.parametrize("line, expected", [
        ("G0", InstructionType.RAPID_MOVE),
        ("G1", InstructionType.FEED_MOVE),
        ("G2", InstructionType.ARC_CW),
        ("G3", InstructionType.ARC_CCW),
        ("G28", InstructionType.HOME),
        ("G90", InstructionType.SET_ABSOLUTE),
        ("G91", InstructionType.SET_INCREMENTAL),
        ("G17", InstructionType.PLANE_XY),
        ("G40", InstructionType.CUTTER_COMP_OFF),
        ("G43 H1", InstructionType.TOOL_LENGTH_OFFSET),
        ("G71", InstructionType.METRIC_UNITS),
        ("M03 S1000", InstructionType.SPINDLE_ON),
        ("M06", InstructionType.TOOL_CHANGE),
        ("M104 S200", InstructionType.SET_HOTEND_TEMP),
        ("M140 S60", InstructionType.SET_BED_TEMP),
        ("M106", InstructionType.FAN_ON),
        ("M107", InstructionType.FAN_OFF),
        ("T1", InstructionType.TOOL_SELECT),
    ])
    def test_code_table(self, lexer: GCodeLexer, line: str, expected: InstructionType) -> None:
        assert lexer.parse_line(line, 1).type is expected

    def test_unknown_code_keeps_raw_value(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G21", 1)
        assert instruction.type is InstructionType.OTHER
        assert instruction.code == 21
        assert instruction.params["G"] == 21

    def test_unknown_code_does_not_override_known_code(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("G1 G21", 1)
        assert instruction.type is InstructionType.FEED_MOVE
        assert instruction.code is None


class TestDefaultType:
    """Coordinate words on a line without a G word make it a feed move."""

    @pytest.mark.parametrize("line", ["X10 Y5", "E2.5", "Z0.2 F300"])
    def test_bare_coordinates_become_feed_move(self, lexer: GCodeLexer, line: str) -> None:
        instruction = lexer.parse_line(line, 1)
        assert instruction.type is InstructionType.FEED_MOVE
        assert instruction.params["G"] == 1

    def test_explicit_rapid_is_kept(self, lexer: GCodeLexer) -> None:
        assert lexer.parse_line("G0 X10", 1).type is InstructionType.RAPID_MOVE

    def test_later_g_word_overrides_default(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("X10 G0", 1)
        assert instruction.type is InstructionType.RAPID_MOVE
        assert instruction.params["G"] == 0

    def test_m_code_with_coordinates_becomes_feed_move(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("M3 X5", 1)
        assert instruction.type is InstructionType.FEED_MOVE
        assert instruction.params["M"] == 3

    def test_feed_word_alone_does_not_trigger_default(self, lexer: GCodeLexer) -> None:
        instruction = lexer.parse_line("F1200", 1)
        assert instruction.type is InstructionType.OTHER
        assert instruction.code is None


class TestParseDocument:
    """Tests for whole-document parsing and statistics."""

    @pytest.mark.parametrize("content", [None, ""])
    def test_empty_document(self, lexer: GCodeLexer, content) -> None:
        assert lexer.parse_document(content) is None

    def test_line_numbers_are_one_based(self, lexer: GCodeLexer) -> None:
        result = lexer.parse_document("G1 X1\n\n; comment\nG1 X2")
        assert [i.line_number for i in result.instructions] == [1, 4]
        assert result.stats.total_lines == 4
        assert result.stats.valid_commands == 2

    def test_axis_bounds(self, lexer: GCodeLexer) -> None:
        result = lexer.parse_document("G1 X-5 Y2\nG1 X10 Z3\nG1 Z-1")
        stats = result.stats
        assert (stats.min_x, stats.max_x) == (-5, 10)
        assert (stats.min_y, stats.max_y) == (2, 2)
        assert (stats.min_z, stats.max_z) == (-1, 3)

    def test_no_coordinates_gives_zero_bounds(self, lexer: GCodeLexer) -> None:
        result = lexer.parse_document("G90\nM104 S200\nG28")
        stats = result.stats
        assert [stats.min_x, stats.max_x, stats.min_y,
                stats.max_y, stats.min_z, stats.max_z] == [0, 0, 0, 0, 0, 0]

    def test_parsing_is_idempotent(self, lexer: GCodeLexer) -> None:
        content = "G90\nN5 G1 X10 Y5 E1 F1500\nG2 X20 Y5 I5 J0\nM107"
        first = lexer.parse_document(content)
        second = lexer.parse_document(content)
        assert first.instructions == second.instructions
        assert first.stats == second.stats

    def test_stats_as_dict(self) -> None:
        stats = ParseStats(total_lines=3, valid_commands=2, max_x=4.0)
        data = stats.as_dict()
        assert data["total_lines"] == 3
        assert data["max_x"] == 4.0
        assert data["min_z"] == 0.0


class TestInstruction:
    def test_params_are_read_only(self) -> None:
        instruction = Instruction(InstructionType.FEED_MOVE, 1, {"X": 1})
        with pytest.raises(TypeError):
            instruction.params["X"] = 2

    def test_params_are_copied(self) -> None:
        params = {"X": 1}
        instruction = Instruction(InstructionType.FEED_MOVE, 1, params)
        params["X"] = 5
        assert instruction.get("X") == 1

"""Tests for the markdown table extractor."""

from timelog.engine.errors import WarningKind
from timelog.engine.tables import extract_tables, is_separator_line, iter_log_rows, split_row

SIMPLE = """\
# 2026-02-10

| Time | Hierarchy |
|------|-----------|
| 09:00 | Work > Proj > Debug |
| 09:30 | Personal |

Some trailing text.
"""


class TestSeparatorLine:
    def test_plain_separator(self):
        assert is_separator_line("|---|---|")

    def test_aligned_separator_with_spaces(self):
        assert is_separator_line("  | :--- | ---: |")

    def test_data_row_is_not_separator(self):
        assert not is_separator_line("| 09:00 | Work |")

    def test_horizontal_rule_is_not_separator(self):
        assert not is_separator_line("---")


class TestSplitRow:
    def test_border_pipes_removed(self):
        assert split_row("| a | b |") == ["a", "b"]

    def test_interior_empty_cell_preserved(self):
        assert split_row("| a |  | c |") == ["a", "", "c"]

    def test_trailing_empty_cell_preserved(self):
        assert split_row("| a | b |  |") == ["a", "b", ""]

    def test_missing_trailing_pipe(self):
        assert split_row("| a | b") == ["a", "b"]

    def test_escaped_pipe_kept_in_cell(self):
        assert split_row(r"| 09:00 | [[Proj\|Project]] |") == ["09:00", "[[Proj|Project]]"]


class TestExtractTables:
    def test_simple_table(self):
        tables = extract_tables(SIMPLE)
        assert len(tables) == 1
        assert tables[0].header == ["Time", "Hierarchy"]
        assert tables[0].rows == [["09:00", "Work > Proj > Debug"], ["09:30", "Personal"]]
        assert tables[0].line == 3
        assert tables[0].row_lines == [5, 6]

    def test_no_separator_yields_nothing(self):
        assert extract_tables("| a | b |\n| 1 | 2 |\n") == []

    def test_separator_on_first_line_ignored(self):
        assert extract_tables("|---|---|\n| 1 | 2 |\n") == []

    def test_multiple_tables(self):
        text = SIMPLE + "\n| A | B |\n|---|---|\n| 1 | 2 |\n"
        tables = extract_tables(text)
        assert len(tables) == 2
        assert tables[1].header == ["A", "B"]
        assert tables[1].rows == [["1", "2"]]

    def test_table_ends_at_non_table_line(self):
        text = "| A |\n|---|\n| 1 |\ntext\n| 2 |\n"
        tables = extract_tables(text)
        assert tables[0].rows == [["1"]]

    def test_indented_table(self):
        text = "  | A | B |\n  |---|---|\n  | 1 | 2 |\n"
        assert extract_tables(text)[0].rows == [["1", "2"]]

    def test_mismatched_row_skipped_with_warning(self):
        text = "| A | B |\n|---|---|\n| 1 | 2 | 3 |\n| 4 | 5 |\n"
        warnings = []
        tables = extract_tables(text, source="00_Daily/2026-02-10.md", warnings=warnings)
        assert tables[0].rows == [["4", "5"]]
        assert tables[0].row_lines == [4]
        assert len(warnings) == 1
        assert warnings[0].kind == WarningKind.ROW_SHAPE_MISMATCH
        assert warnings[0].source == "00_Daily/2026-02-10.md"
        assert warnings[0].line == 3

    def test_short_row_skipped(self):
        text = "| A | B | C |\n|---|---|---|\n| 1 | 2 |\n"
        warnings = []
        assert extract_tables(text, warnings=warnings)[0].rows == []
        assert warnings[0].kind == WarningKind.ROW_SHAPE_MISMATCH

    def test_warnings_optional(self):
        text = "| A | B |\n|---|---|\n| 1 |\n"
        assert extract_tables(text)[0].rows == []


class TestLogRows:
    def test_rows_zipped_to_header(self):
        rows = list(iter_log_rows(SIMPLE))
        assert rows == [
            {"Time": "09:00", "Hierarchy": "Work > Proj > Debug"},
            {"Time": "09:30", "Hierarchy": "Personal"},
        ]

    def test_duplicate_header_keeps_last_cell(self):
        text = "| Tag | Tag |\n|---|---|\n| first | second |\n"
        assert list(iter_log_rows(text)) == [{"Tag": "second"}]

    def test_empty_cell_maps_to_empty_string(self):
        text = "| Time | Hierarchy |\n|---|---|\n| 10:00 |  |\n"
        assert list(iter_log_rows(text)) == [{"Time": "10:00", "Hierarchy": ""}]

"""
Tests for tree table loading (Layer 1: Raw Input -> HeadedTable).

The CSV dialect is deliberately plain:
1. '"' is kept as part of the cell, so string leaves survive loading
2. Cells are stripped, blank lines skipped with a warning
3. The delimiter is configurable
4. Column order is irrelevant; cells are looked up by heading
"""

import pytest
from tdtree.errors import TableError
from tdtree.examples import GRADING_CSV
from tdtree.table import (
    REQUIRED_HEADINGS,
    HeadedTable,
    parse_table_file,
    parse_table_string,
    table_from_records,
)


class TestParseTableString:
    """CSV text to HeadedTable."""

    def test_headings_and_rows(self):
        table = parse_table_string(GRADING_CSV)
        assert table.headings == list(REQUIRED_HEADINGS)
        assert table.row_count() == 3
        assert table.cell(1, "Node ID") == "pass"
        assert table.cell(0, "True") == "[pass]"

    def test_quotes_preserved(self):
        """A quoted leaf must stay quoted, otherwise it stops being a string literal."""
        table = parse_table_string(GRADING_CSV)
        assert table.cell(1, "True") == '"A"'

    def test_backslashes_preserved(self):
        table = parse_table_string(
            "Node ID,Attribute,Operator,Operand,True,False\n"
            "root,#code,match,\\d+\\.\\d+,1,0\n"
        )
        assert table.cell(0, "Operand") == "\\d+\\.\\d+"

    def test_cells_stripped(self):
        table = parse_table_string(
            "Node ID , Attribute,Operator,Operand,True,False\n"
            " root ,#age , ge, 18, \"adult\" , \"minor\"\n"
        )
        assert table.column_names() == set(REQUIRED_HEADINGS)
        assert table.cell(0, "Node ID") == "root"
        assert table.cell(0, "True") == '"adult"'

    def test_pipe_operand_is_one_cell(self):
        table = parse_table_string(
            "Node ID,Attribute,Operator,Operand,True,False\n"
            "root,#colour,within,red|green|blue,1,0\n"
        )
        assert table.cell(0, "Operand") == "red|green|blue"

    def test_custom_delimiter(self):
        table = parse_table_string(
            "Node ID;Attribute;Operator;Operand;True;False\n"
            "root;#name;match;a,b;1;0\n",
            delimiter=";",
        )
        assert table.cell(0, "Operand") == "a,b"

    def test_delimiter_from_environment(self, monkeypatch):
        monkeypatch.setenv("TDTREE_CSV_DELIMITER", "\t")
        table = parse_table_string("Node ID\tAttribute\nroot\t#age\n")
        assert table.cell(0, "Attribute") == "#age"

    def test_blank_lines_skipped_with_warning(self):
        content = GRADING_CSV.replace("\npass", "\n\npass")
        with pytest.warns(UserWarning, match="blank line"):
            table = parse_table_string(content)
        assert table.row_count() == 3

    def test_short_rows_read_as_empty(self):
        table = parse_table_string("Node ID,Attribute,Operator,Operand,True,False\nroot,#age\n")
        assert table.cell(0, "False") == ""

    def test_too_many_cells(self):
        with pytest.raises(TableError, match="Line 2"):
            parse_table_string("Node ID,Attribute\nroot,#age,extra\n")

    def test_empty(self):
        with pytest.raises(TableError, match="empty"):
            parse_table_string("\n\n")

    def test_duplicate_headings(self):
        with pytest.raises(TableError, match="Duplicate"):
            parse_table_string("Node ID,Node ID\nroot,root\n")


class TestParseTableFile:
    """Loading from disk."""

    def test_file(self, tmp_path):
        path = tmp_path / "grades.csv"
        path.write_text(GRADING_CSV, encoding="utf-8")
        table = parse_table_file(str(path))
        assert table.row_count() == 3
        assert table.cell(2, "False") == '"C"'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            parse_table_file(str(tmp_path / "nope.csv"))


class TestHeadedTable:
    """Grid access."""

    def test_unknown_column(self):
        table = HeadedTable.from_rows(["A"], [["1"]])
        with pytest.raises(KeyError):
            table.cell(0, "B")

    def test_records(self):
        table = HeadedTable.from_rows(["A", "B"], [["1", "2"], ["3"]])
        assert table.records() == [{"A": "1", "B": "2"}, {"A": "3", "B": ""}]


class TestTableFromRecords:
    """Mappings to HeadedTable."""

    def test_required_headings_first(self):
        table = table_from_records([
            {"Comment": "top", "Node ID": "root", "Attribute": "#age", "Operator": "ge",
             "Operand": 18, "True": '"adult"', "False": '"minor"'},
        ])
        assert table.headings == list(REQUIRED_HEADINGS) + ["Comment"]
        assert table.cell(0, "Operand") == "18"

    def test_none_becomes_empty(self):
        table = table_from_records([{"Node ID": "root", "Operand": None}])
        assert table.cell(0, "Operand") == ""
        assert table.cell(0, "True") == ""

    def test_explicit_headings(self):
        table = table_from_records([{"a": 1, "b": 2}], headings=["b"])
        assert table.headings == ["b"]
        assert table.cell(0, "b") == "2"

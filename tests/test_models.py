"""
Unit tests for models.py
"""

import dataclasses

import pytest
from sql_dumper.models import (
    DumpOptions,
    DumpStats,
    InsertMode,
    ObjectDescriptor,
    TableStats,
)


class TestInsertMode:
    """Tests for InsertMode enum."""

    def test_values_are_sql_verbs(self):
        assert InsertMode.INSERT.value == "INSERT"
        assert InsertMode.INSERT_IGNORE.value == "INSERT IGNORE"
        assert InsertMode.REPLACE.value == "REPLACE"

    def test_parse_verb(self):
        assert InsertMode.parse("INSERT IGNORE") == InsertMode.INSERT_IGNORE

    def test_parse_member_name_case_insensitive(self):
        assert InsertMode.parse("insert_ignore") == InsertMode.INSERT_IGNORE
        assert InsertMode.parse("replace") == InsertMode.REPLACE

    def test_parse_member(self):
        assert InsertMode.parse(InsertMode.REPLACE) is InsertMode.REPLACE

    def test_parse_invalid_raises(self):
        with pytest.raises(ValueError):
            InsertMode.parse("UPSERT")


class TestDumpOptions:
    """Tests for DumpOptions dataclass."""

    def test_defaults(self):
        options = DumpOptions()
        assert options.include_tables == frozenset()
        assert options.exclude_tables == frozenset()
        assert options.create_tables is True
        assert options.create_database is False
        assert options.drop_tables is False
        assert options.drop_database is False
        assert options.insert_data is True
        assert options.delete_data_first is False
        assert options.insert_mode == InsertMode.INSERT
        assert options.safe_mode is True
        assert options.rows_per_statement is None

    def test_immutable(self):
        options = DumpOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.safe_mode = False

    def test_table_lists_become_frozensets(self):
        options = DumpOptions(include_tables=["a", "b"], exclude_tables={"c"})
        assert options.include_tables == frozenset({"a", "b"})
        assert isinstance(options.exclude_tables, frozenset)

    def test_insert_mode_from_string(self):
        options = DumpOptions(insert_mode="REPLACE")
        assert options.insert_mode == InsertMode.REPLACE

    def test_invalid_rows_per_statement(self):
        with pytest.raises(ValueError):
            DumpOptions(rows_per_statement=0)


class TestDumpOptionsFromConfig:
    """Tests for DumpOptions.from_config."""

    def test_empty_config(self):
        assert DumpOptions.from_config({}) == DumpOptions()
        assert DumpOptions.from_config(None) == DumpOptions()

    def test_full_config(self):
        options = DumpOptions.from_config({
            "include_tables": ["users"],
            "exclude_tables": ["logs"],
            "drop_tables": True,
            "insert_mode": "insert ignore",
            "safe_mode": False,
            "rows_per_statement": 100,
        })
        assert options.include_tables == frozenset({"users"})
        assert options.exclude_tables == frozenset({"logs"})
        assert options.drop_tables is True
        assert options.insert_mode == InsertMode.INSERT_IGNORE
        assert options.safe_mode is False
        assert options.rows_per_statement == 100

    def test_single_table_string(self):
        options = DumpOptions.from_config({"exclude_tables": "logs"})
        assert options.exclude_tables == frozenset({"logs"})

    def test_null_table_list(self):
        options = DumpOptions.from_config({"include_tables": None})
        assert options.include_tables == frozenset()

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError) as exc_info:
            DumpOptions.from_config({"safemode": True})
        assert "safemode" in str(exc_info.value)


class TestObjectDescriptor:
    """Tests for ObjectDescriptor dataclass."""

    def test_defaults(self):
        obj = ObjectDescriptor(name="users")
        assert obj.definition_text == ""
        assert obj.rows is None


class TestStats:
    """Tests for TableStats and DumpStats."""

    def test_table_stats_defaults(self):
        stats = TableStats(table="users")
        assert stats.rows_dumped == 0
        assert stats.dropped is False
        assert stats.created is False
        assert stats.truncated is False

    def test_dump_stats_totals(self):
        stats = DumpStats()
        stats.tables.append(TableStats(table="a", rows_dumped=3))
        stats.tables.append(TableStats(table="b"))
        assert stats.total_tables == 2

    def test_dump_stats_lists_independent(self):
        first = DumpStats()
        second = DumpStats()
        first.tables.append(TableStats(table="a"))
        assert second.tables == []

"""
Data models and enums for SQL Dumper.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Iterator, Optional


class InsertMode(Enum):
    """Statement verb used for row insertion."""
    INSERT = "INSERT"
    INSERT_IGNORE = "INSERT IGNORE"
    REPLACE = "REPLACE"

    @classmethod
    def parse(cls, value: "str | InsertMode") -> "InsertMode":
        """Accept either the SQL verb or the member name, case-insensitively."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().upper()
        for mode in cls:
            if text in (mode.value, mode.name):
                return mode
        raise ValueError(f"Unsupported insert mode: {value!r}")


class BitValue(bytes):
    """Raw contents of a BIT column, most significant byte first."""


@dataclass(frozen=True)
class DumpOptions:
    """Options controlling one dump generation. Never mutated once built."""
    include_tables: frozenset[str] = frozenset()
    exclude_tables: frozenset[str] = frozenset()
    create_tables: bool = True
    create_database: bool = False
    drop_tables: bool = False
    drop_database: bool = False
    insert_data: bool = True
    delete_data_first: bool = False
    insert_mode: InsertMode = InsertMode.INSERT
    safe_mode: bool = True
    rows_per_statement: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, 'include_tables', frozenset(self.include_tables))
        object.__setattr__(self, 'exclude_tables', frozenset(self.exclude_tables))
        object.__setattr__(self, 'insert_mode', InsertMode.parse(self.insert_mode))
        if self.rows_per_statement is not None and self.rows_per_statement < 1:
            raise ValueError("rows_per_statement must be a positive integer")

    @classmethod
    def from_config(cls, dump_config: Optional[dict[str, Any]]) -> "DumpOptions":
        """
        Create DumpOptions from the 'dump' section of the configuration file.

        Unknown keys are rejected so that typos do not silently fall back
        to defaults.
        """
        dump_config = dump_config or {}
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(dump_config) - known)
        if unknown:
            raise ValueError(f"Unknown dump option(s): {', '.join(unknown)}")

        settings = dict(dump_config)
        for key in ('include_tables', 'exclude_tables'):
            if settings.get(key) is None:
                settings.pop(key, None)
            elif isinstance(settings[key], str):
                settings[key] = [settings[key]]
        return cls(**settings)


@dataclass
class ObjectDescriptor:
    """A catalog object being processed by the assembler."""
    name: str
    definition_text: str = ""
    rows: Optional[Iterator[dict[str, Any]]] = None


@dataclass
class TableStats:
    """Statistics for a single table in a dump."""
    table: str
    rows_dumped: int = 0
    dropped: bool = False
    created: bool = False
    truncated: bool = False


@dataclass
class DumpStats:
    """Overall dump statistics."""
    tables: list[TableStats] = field(default_factory=list)
    total_rows: int = 0

    @property
    def total_tables(self) -> int:
        return len(self.tables)

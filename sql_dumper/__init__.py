"""
SQL Dumper
==========
Generates a re-playable SQL script (schema + data) from a live MySQL
database, with support for:
- Include/exclude table filters
- DROP/CREATE statements for tables and the database
- Safe mode (IF EXISTS / IF NOT EXISTS guards)
- INSERT, INSERT IGNORE and REPLACE data statements
- Atomic file output with optional compression
"""

from .assembler import DumpAssembler, generate_dump
from .config import ConfigLoader
from .connection import DatabaseConnection
from .data_exporter import DataExporter
from .errors import DatabaseConnectionError, DumperError, DumpWriteError, QueryError
from .escaper import ValueEscaper
from .main import main
from .models import BitValue, DumpOptions, DumpStats, InsertMode, ObjectDescriptor, TableStats
from .schema import SchemaIntrospector
from .utils import format_timestamp, quote_identifier, replace_first, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    "generate_dump",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DataExporter",
    "DumpAssembler",
    "SchemaIntrospector",
    "ValueEscaper",
    # Errors
    "DatabaseConnectionError",
    "DumperError",
    "DumpWriteError",
    "QueryError",
    # Models
    "BitValue",
    "DumpOptions",
    "DumpStats",
    "InsertMode",
    "ObjectDescriptor",
    "TableStats",
    # Utilities
    "format_timestamp",
    "quote_identifier",
    "replace_first",
    "setup_logging",
]

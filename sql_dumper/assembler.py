"""
Dump orchestration for SQL Dumper.
"""

import fnmatch
import gzip
import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO, Union

from .data_exporter import DataExporter
from .errors import DumpWriteError
from .escaper import ValueEscaper
from .models import DumpOptions, DumpStats, ObjectDescriptor, TableStats
from .schema import SchemaIntrospector
from .utils import format_timestamp, quote_identifier

TOOL_NAME = 'sql-dumper'
RULE = '-- ' + '-' * 76

PREAMBLE = (
    "/*!40101 SET @OLD_CHARACTER_SET_CLIENT=@@CHARACTER_SET_CLIENT */;\n"
    "/*!40101 SET NAMES {charset} */;\n"
    "/*!40103 SET @OLD_TIME_ZONE=@@TIME_ZONE */;\n"
    "/*!40103 SET TIME_ZONE='+00:00' */;\n"
    "/*!40014 SET @OLD_FOREIGN_KEY_CHECKS=@@FOREIGN_KEY_CHECKS, FOREIGN_KEY_CHECKS=0 */;\n"
    "/*!40101 SET @OLD_SQL_MODE=@@SQL_MODE, SQL_MODE='NO_AUTO_VALUE_ON_ZERO' */;\n"
    "/*!40111 SET @OLD_SQL_NOTES=@@SQL_NOTES, SQL_NOTES=0 */;\n"
)

POSTAMBLE = (
    "/*!40103 SET TIME_ZONE=IFNULL(@OLD_TIME_ZONE, 'system') */;\n"
    "/*!40101 SET SQL_MODE=IFNULL(@OLD_SQL_MODE, '') */;\n"
    "/*!40014 SET FOREIGN_KEY_CHECKS=IFNULL(@OLD_FOREIGN_KEY_CHECKS, 1) */;\n"
    "/*!40101 SET CHARACTER_SET_CLIENT=@OLD_CHARACTER_SET_CLIENT */;\n"
    "/*!40111 SET SQL_NOTES=IFNULL(@OLD_SQL_NOTES, 1) */;"
)


class DumpAssembler:
    """
    Builds a complete SQL dump of the connection's current database.

    Objects are processed one after another in the order the server lists
    them. No snapshot is taken across tables, so rows read from a later
    table may include writes made after an earlier table was read.

    The connection is borrowed, not owned: open and close it around the
    calls. One generation at a time per connection.
    """

    def __init__(self, connection, clock: Optional[Callable[[], datetime]] = None):
        self.connection = connection
        self.clock = clock or (lambda: datetime.now().astimezone())
        self.stats = DumpStats()

    def _compile_patterns(self, patterns: frozenset[str], names: list[str]) -> list[re.Pattern]:
        """
        Compile table filters.

        An entry equal to a listed table name matches that table only, even
        when it contains '*', '?' or '['. Other entries are shell-style
        wildcards; plain names only match themselves.
        """
        catalog = set(names)
        compiled = []
        for pattern in sorted(patterns):
            if pattern in catalog:
                compiled.append(re.compile(re.escape(pattern) + r'\Z'))
            else:
                compiled.append(re.compile(fnmatch.translate(pattern)))
        return compiled

    def select_objects(self, names: list[str], options: DumpOptions) -> list[str]:
        """
        Apply the include whitelist, then the exclude blacklist.

        The server's listing order is kept as is: it is not sorted and does
        not follow foreign-key dependencies.
        """
        include = self._compile_patterns(options.include_tables, names)
        exclude = self._compile_patterns(options.exclude_tables, names)

        selected = []
        for name in names:
            if include and not any(p.match(name) for p in include):
                logging.debug(f"Table '{name}' not in include list")
                continue
            if any(p.match(name) for p in exclude):
                logging.debug(f"Table '{name}' excluded")
                continue
            selected.append(name)

        skipped = len(names) - len(selected)
        if skipped:
            logging.info(f"Skipped {skipped} table(s) by include/exclude filters")
        return selected

    def generate_dump(self, options: DumpOptions) -> str:
        """Generate the dump document. Any error aborts the whole dump."""
        self.stats = DumpStats()
        schema = SchemaIntrospector(self.connection, options)
        exporter = DataExporter(self.connection, ValueEscaper(self.connection.escape_literal))
        database = self.connection.database

        parts = [self._header(), PREAMBLE.format(charset=self.connection.character_set_name()) + "\n"]

        if options.drop_database:
            parts.append(f"-- Deleting database {database}\n{schema.drop_database_statement(database)}\n\n")
        if options.create_database:
            parts.append(f"-- Creating database {database}\n{schema.create_database_statement(database)}\n\n")

        tables = self.select_objects(schema.list_objects(), options)
        logging.info(f"Dumping {len(tables)} table(s) from '{database}'")

        for table in tables:
            parts.append(self._dump_object(ObjectDescriptor(name=table), schema, exporter, options))

        parts.append(POSTAMBLE)
        logging.info(f"Dump generated: {self.stats.total_tables} table(s), {self.stats.total_rows} row(s)")
        return ''.join(parts)

    def _header(self) -> str:
        from . import __version__

        lines = [
            RULE,
            f"-- Host:              {self.connection.host}",
            f"-- Server version:    {self.connection.server_version()}",
            f"-- Generated in:      {format_timestamp(self.clock())}",
            f"-- Dump generated by: {TOOL_NAME} {__version__}",
            RULE,
        ]
        return "\n".join(lines) + "\n\n"

    def _dump_object(
        self,
        obj: ObjectDescriptor,
        schema: SchemaIntrospector,
        exporter: DataExporter,
        options: DumpOptions
    ) -> str:
        """Render drop, create and data sections for one table."""
        table = obj.name
        table_stats = TableStats(table=table)
        parts = []

        if options.drop_tables:
            parts.append(f"-- Deleting table {table}\n{schema.drop_table_statement(table)}\n\n")
            table_stats.dropped = True

        if options.create_tables:
            obj.definition_text = schema.create_table_statement(table)
            if obj.definition_text:
                parts.append(f"-- Creating table {table}\n{obj.definition_text}\n\n")
                table_stats.created = True

        if options.insert_data:
            obj.rows = exporter.export_rows(table)
            try:
                inserts, row_count = exporter.render_insert_blocks(
                    table, obj.rows, options.insert_mode, options.rows_per_statement
                )
            finally:
                # Release the result set if rendering stopped part way
                close = getattr(obj.rows, 'close', None)
                if close is not None:
                    close()
            if row_count:
                if options.delete_data_first:
                    parts.append(f"-- Deleting data from {table}\nTRUNCATE TABLE {quote_identifier(table)};\n\n")
                    table_stats.truncated = True
                parts.append(f"-- Inserting data into {table}\n{inserts}\n\n")
            table_stats.rows_dumped = row_count

        self.stats.tables.append(table_stats)
        self.stats.total_rows += table_stats.rows_dumped
        logging.info(f"  ✓ {table}: {table_stats.rows_dumped} rows")
        return ''.join(parts)

    def dump_to_stream(self, options: DumpOptions, stream: TextIO) -> None:
        """Generate the dump and write it to an open text stream."""
        document = self.generate_dump(options)
        try:
            stream.write(document)
            stream.flush()
        except OSError as e:
            raise DumpWriteError(f"Failed to write dump: {e}") from e

    def dump_to_file(
        self,
        options: DumpOptions,
        path: Union[str, Path],
        compress: bool = False
    ) -> Path:
        """
        Generate the dump and write it to a file atomically.

        The document goes to a temporary file next to the target which is
        then renamed over it, so readers never see a partial dump. With
        compress the file is gzipped and '.gz' is appended to the name.
        """
        output_path = Path(path)
        if compress and output_path.suffix != '.gz':
            output_path = Path(str(output_path) + '.gz')

        directory = output_path.parent
        if not directory.is_dir() or not os.access(directory, os.W_OK):
            raise DumpWriteError(
                f"Target directory does not exist or is not writable: {directory}",
                str(output_path)
            )

        document = self.generate_dump(options)
        data = document.encode('utf-8')
        if compress:
            data = gzip.compress(data)

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                mode='wb', dir=directory, prefix=f".{output_path.name}.",
                suffix='.tmp', delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(data)
            os.replace(tmp_name, output_path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise DumpWriteError(f"Failed to write dump: {e}", str(output_path)) from e

        logging.info(f"Dump written to {output_path}")
        return output_path


def generate_dump(connection, options: DumpOptions) -> str:
    """Generate a dump of the connection's database with the given options."""
    return DumpAssembler(connection).generate_dump(options)

"""
Row export and INSERT rendering for SQL Dumper.
"""

from itertools import islice
from typing import Any, Iterable, Iterator, Optional

from .escaper import ValueEscaper
from .models import InsertMode
from .utils import quote_identifier


class DataExporter:
    """Streams the rows of one table and renders them as INSERT statements."""

    DEFAULT_CHUNK_SIZE = 1000

    def __init__(self, connection, escaper: ValueEscaper, chunk_size: int = DEFAULT_CHUNK_SIZE):
        self.connection = connection
        self.escaper = escaper
        self.chunk_size = chunk_size

    def export_rows(self, table: str) -> Iterator[dict[str, Any]]:
        """Lazily fetch every row of a table."""
        return self.connection.iter_query(
            f"SELECT * FROM {quote_identifier(table)}", self.chunk_size
        )

    def render_insert_block(
        self,
        table: str,
        rows: Iterable[dict[str, Any]],
        insert_mode: InsertMode
    ) -> str:
        """
        Render rows as a single INSERT statement.

        The column list comes from the first row; all rows of one query
        share its columns and their order. Returns an empty string when
        there are no rows.
        """
        statement, _ = self._render_statement(table, iter(rows), insert_mode)
        return statement

    def render_insert_blocks(
        self,
        table: str,
        rows: Iterable[dict[str, Any]],
        insert_mode: InsertMode,
        rows_per_statement: Optional[int] = None
    ) -> tuple[str, int]:
        """
        Render rows as one or more INSERT statements.

        Returns the rendered text and the number of rows written. With
        rows_per_statement unset every row goes into one statement.
        """
        rows = iter(rows)
        if rows_per_statement is None:
            return self._render_statement(table, rows, insert_mode)

        statements = []
        columns = None
        rows_written = 0
        while True:
            batch = list(islice(rows, rows_per_statement))
            if not batch:
                break
            if columns is None:
                columns = list(batch[0].keys())
            statement, count = self._render_statement(table, iter(batch), insert_mode, columns)
            statements.append(statement)
            rows_written += count

        return '\n'.join(statements), rows_written

    def _render_statement(
        self,
        table: str,
        rows: Iterator[dict[str, Any]],
        insert_mode: InsertMode,
        columns: Optional[list[str]] = None
    ) -> tuple[str, int]:
        first = next(rows, None)
        if first is None:
            return '', 0
        if columns is None:
            columns = list(first.keys())

        quoted_columns = ', '.join(quote_identifier(col) for col in columns)
        value_lines = [self._render_tuple(first, columns)]
        value_lines.extend(self._render_tuple(row, columns) for row in rows)

        statement = (
            f"{insert_mode.value} INTO {quote_identifier(table)} ({quoted_columns}) VALUES"
            + ', '.join(value_lines)
            + ';'
        )
        return statement, len(value_lines)

    def _render_tuple(self, row: dict[str, Any], columns: list[str]) -> str:
        values = ', '.join(self.escaper.escape(row[col]) for col in columns)
        return f"\n  ({values})"

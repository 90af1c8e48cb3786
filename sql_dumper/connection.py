"""
Database connection management for SQL Dumper.
"""

import logging
from typing import Any, Iterator, Optional, Union

import mysql.connector
from mysql.connector import Error as MySQLError
from mysql.connector.constants import FieldType
from mysql.connector.conversion import MySQLConverter

from .errors import DatabaseConnectionError, QueryError
from .models import BitValue
from .utils import quote_identifier


class DatabaseConnection:
    """
    Owns one MySQL connection and exposes the queries the dump engine needs.

    Open and close it with a ``with`` block; the engine only borrows it.
    Not safe for concurrent use.
    """

    DEFAULT_HOST = 'localhost'
    DEFAULT_PORT = 3306
    DEFAULT_USER = 'root'
    DEFAULT_CHARSET = 'utf8mb4'
    DEFAULT_CHUNK_SIZE = 1000

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        user: str = DEFAULT_USER,
        password: str = '',
        database: Optional[str] = None,
        charset: str = DEFAULT_CHARSET
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.charset = charset
        self.connection = None
        self._converter = MySQLConverter(charset)
        self._text_encoding = 'utf-8' if charset.lower().startswith('utf8') else charset

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "DatabaseConnection":
        """Create a connection from the 'connection' configuration section."""
        return cls(
            host=settings.get('host', cls.DEFAULT_HOST),
            port=int(settings.get('port', cls.DEFAULT_PORT)),
            user=settings.get('user', cls.DEFAULT_USER),
            password=settings.get('password') or '',
            database=settings.get('database'),
            charset=settings.get('charset', cls.DEFAULT_CHARSET)
        )

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.charset,
                use_unicode=True
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise DatabaseConnectionError(e.msg or str(e), e.errno) from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def _require_connection(self):
        if self.connection is None:
            raise DatabaseConnectionError("Not connected to a database")
        return self.connection

    def run_query(self, query: str) -> Union[list[dict[str, Any]], bool]:
        """
        Execute a query.

        Returns the rows as column-ordered dicts, or True for statements
        that produce no result set.
        """
        connection = self._require_connection()
        try:
            cursor = connection.cursor(dictionary=True)
            try:
                cursor.execute(query)
                if not cursor.with_rows:
                    return True
                return cursor.fetchall()
            finally:
                cursor.close()
        except MySQLError as e:
            logging.error(f"Query failed: {query[:200]}: {e}")
            raise QueryError(e.msg or str(e), e.errno) from e

    def iter_query(
        self,
        query: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE
    ) -> Iterator[dict[str, Any]]:
        """
        Stream rows through an unbuffered raw cursor, fetching chunk_size rows at a time.

        Values are the server's own text for each column, decoded with the
        connection charset. BIT columns are returned as BitValue; values
        that are not valid text in that charset stay bytes.
        """
        connection = self._require_connection()
        exhausted = False
        try:
            cursor = connection.cursor(buffered=False, raw=True)
            try:
                cursor.execute(query)
                columns = [(desc[0], desc[1]) for desc in cursor.description]
                while True:
                    chunk = cursor.fetchmany(chunk_size)
                    if not chunk:
                        exhausted = True
                        break
                    for row in chunk:
                        yield self._row_from_raw(columns, row)
            finally:
                if not exhausted:
                    self._discard_pending(connection)
                cursor.close()
        except MySQLError as e:
            logging.error(f"Query failed: {query[:200]}: {e}")
            raise QueryError(e.msg or str(e), e.errno) from e

    def _row_from_raw(self, columns: list[tuple[str, int]], row) -> dict[str, Any]:
        return {
            name: self._value_from_raw(type_code, value)
            for (name, type_code), value in zip(columns, row)
        }

    def _value_from_raw(self, type_code: int, value: Any) -> Any:
        if not isinstance(value, (bytes, bytearray)):
            return value
        if type_code == FieldType.BIT:
            return BitValue(value)
        try:
            return bytes(value).decode(self._text_encoding)
        except UnicodeDecodeError:
            return bytes(value)

    def _discard_pending(self, connection) -> None:
        """Drop rows left on an abandoned unbuffered result so the cursor can close."""
        try:
            connection.consume_results()
        except MySQLError as e:
            logging.warning(f"Could not discard unread rows: {e}")

    def list_objects(self) -> list[str]:
        """Get the tables of the current database, in the order the server reports them."""
        rows = self.run_query("SHOW TABLES")
        if rows is True:
            return []
        names = []
        for row in rows:
            name = next(iter(row.values()))
            if isinstance(name, (bytes, bytearray)):
                name = name.decode('utf-8')
            names.append(name)
        return names

    def get_create_table(self, table: str) -> str:
        """Get the CREATE TABLE statement, or an empty string if none is reported."""
        rows = self.run_query(f"SHOW CREATE TABLE {quote_identifier(table)}")
        if rows is True or not rows:
            return ''
        return rows[0].get('Create Table') or ''

    def server_version(self) -> str:
        """Version string reported by the server."""
        return self._require_connection().get_server_info()

    def character_set_name(self) -> str:
        """Character set negotiated for this connection."""
        return self._require_connection().charset

    def escape_literal(self, text: str) -> str:
        """Escape text for use inside a single-quoted MySQL string literal."""
        return self._converter.escape(text)

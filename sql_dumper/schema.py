"""
Schema introspection and DDL rendering for SQL Dumper.
"""

import logging

from .models import DumpOptions
from .utils import quote_identifier, replace_first


class SchemaIntrospector:
    """Reads object names and definitions from the catalog and renders DDL."""

    CREATE_KEYWORD = 'CREATE TABLE'
    CREATE_GUARD = 'IF NOT EXISTS'
    DROP_GUARD = 'IF EXISTS'

    def __init__(self, connection, options: DumpOptions):
        self.connection = connection
        self.options = options

    def list_objects(self) -> list[str]:
        """Object names, in the order the server reports them."""
        return list(self.connection.list_objects())

    def get_definition(self, name: str) -> str:
        """Raw CREATE statement for an object, or an empty string."""
        return self.connection.get_create_table(name) or ''

    def to_idempotent_create(self, definition_text: str) -> str:
        """
        Insert an existence guard after the first CREATE TABLE in safe mode.

        This is a textual splice, not a SQL parse: it relies on the server
        emitting the keyword as the leading tokens of the definition. When the
        keyword is not found the text is returned as is.
        """
        if not self.options.safe_mode:
            return definition_text

        rewritten = replace_first(
            definition_text,
            self.CREATE_KEYWORD,
            f"{self.CREATE_KEYWORD} {self.CREATE_GUARD}"
        )
        if rewritten == definition_text:
            logging.debug(f"No '{self.CREATE_KEYWORD}' keyword found; definition left unchanged")
        return rewritten

    def create_table_statement(self, name: str) -> str:
        """Definition of the object ready for output, or an empty string if the catalog has none."""
        definition = self.get_definition(name)
        if not definition:
            return ''
        return f"{self.to_idempotent_create(definition)};"

    def drop_table_statement(self, name: str) -> str:
        return f"DROP TABLE{self._guard(self.DROP_GUARD)} {quote_identifier(name)};"

    def drop_database_statement(self, database: str) -> str:
        return f"DROP DATABASE{self._guard(self.DROP_GUARD)} {quote_identifier(database)};"

    def create_database_statement(self, database: str) -> str:
        return f"CREATE DATABASE{self._guard(self.CREATE_GUARD)} {quote_identifier(database)};"

    def _guard(self, clause: str) -> str:
        return f" {clause}" if self.options.safe_mode else ''

"""
Shared fixtures for SQL Dumper tests.
"""

from unittest import mock

import pytest


def simple_escape(text):
    """Minimal MySQL-style escaping used by the fake connection."""
    return text.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")


def make_connection(tables, database="app", host="localhost"):
    """
    Create a mock connection serving the given tables.

    tables maps table name to a (create_statement, rows) tuple and is
    listed in insertion order, like SHOW TABLES.
    """
    conn = mock.MagicMock()
    conn.host = host
    conn.database = database
    conn.server_version.return_value = "8.0.36"
    conn.character_set_name.return_value = "utf8mb4"
    conn.escape_literal.side_effect = simple_escape
    conn.list_objects.return_value = list(tables)
    conn.get_create_table.side_effect = lambda name: tables[name][0]

    def iter_query(query, chunk_size=1000):
        name = query.split("`")[1]
        return iter(tables[name][1])

    conn.iter_query.side_effect = iter_query
    return conn


@pytest.fixture
def users_table():
    """The users table with two rows."""
    return (
        "CREATE TABLE `users` (\n  `id` int NOT NULL,\n  `name` varchar(255) DEFAULT NULL\n) ENGINE=InnoDB",
        [{"id": 1, "name": "Ann"}, {"id": 2, "name": None}],
    )


@pytest.fixture
def mock_connection(users_table):
    """Connection with users, orders (with rows) and logs (empty)."""
    return make_connection({
        "users": users_table,
        "orders": (
            "CREATE TABLE `orders` (\n  `id` int NOT NULL\n) ENGINE=InnoDB",
            [{"id": 10}],
        ),
        "logs": ("CREATE TABLE `logs` (\n  `msg` text\n) ENGINE=InnoDB", []),
    })

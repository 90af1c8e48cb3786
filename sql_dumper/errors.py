"""
Error types raised by SQL Dumper.
"""

from typing import Optional


class DumperError(Exception):
    """Base class for all dumper errors."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        if self.code is not None:
            return f"[SQL {self.code}] {self.message}"
        return self.message


class DatabaseConnectionError(DumperError):
    """The connection could not be established or authenticated."""


class QueryError(DumperError):
    """A catalog or data query failed."""


class DumpWriteError(DumperError, OSError):
    """The dump destination is not writable or the write failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

"""
Value escaping for SQL Dumper.
"""

from datetime import timedelta
from typing import Any, Callable

from .models import BitValue


class ValueEscaper:
    """Renders scalar values as MySQL literals.

    NULL stays unquoted; everything else is rendered as a quoted string,
    the same way the server serializes query results as text. BIT values
    are the exception: their bytes have no text form and are written as
    bit literals.
    """

    def __init__(self, escape_literal: Callable[[str], str]):
        self.escape_literal = escape_literal

        self._stringifiers: dict[type, Callable[[Any], str]] = {
            timedelta: self._format_time,
            set: self._format_set,
            frozenset: self._format_set,
        }

    def escape(self, value: Any) -> str:
        """Format a single value for an INSERT tuple."""
        if value is None:
            return 'NULL'

        if isinstance(value, BitValue):
            return f"b'{int.from_bytes(value, 'big'):b}'"

        if isinstance(value, (bytes, bytearray)):
            try:
                text = bytes(value).decode('utf-8')
            except UnicodeDecodeError:
                # No text form; a hex literal is the only lossless rendering
                return f"X'{bytes(value).hex()}'"
        else:
            stringify = self._stringifiers.get(type(value), str)
            text = stringify(value)

        return f"'{self.escape_literal(text)}'"

    @staticmethod
    def _format_time(value: timedelta) -> str:
        """TIME columns arrive as timedelta; render them as [-]HH:MM:SS[.ffffff]."""
        total = abs(value)
        hours, remainder = divmod(total.days * 86400 + total.seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        text = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
        if total.microseconds:
            text += f".{total.microseconds:06d}"
        return f"-{text}" if value < timedelta(0) else text

    @staticmethod
    def _format_set(value: set) -> str:
        """SET members joined the way the server writes them; sorted since the column order is lost."""
        return ','.join(sorted(value))

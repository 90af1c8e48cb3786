"""
Utility functions for SQL Dumper.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO


def setup_logging(log_settings: dict[str, Any], stream: Optional[TextIO] = None) -> None:
    """Setup logging configuration. Console output goes to stdout unless another stream is given."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def quote_identifier(name: str) -> str:
    """Quote a MySQL identifier with backticks."""
    return '`' + name.replace('`', '``') + '`'


def replace_first(haystack: str, needle: str, replacement: str) -> str:
    """Replace only the first occurrence of needle; return haystack unchanged if absent."""
    pos = haystack.find(needle)
    if pos == -1:
        return haystack
    return haystack[:pos] + replacement + haystack[pos + len(needle):]


def format_timestamp(moment: datetime) -> str:
    """
    Format a timestamp for the dump header, e.g. '10/16/2026 14:03:07 +02:00 CEST'.

    Naive datetimes are interpreted in the local time zone.
    """
    if moment.tzinfo is None:
        moment = moment.astimezone()

    offset = moment.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset else 0
    sign = '-' if minutes < 0 else '+'
    hours, minutes = divmod(abs(minutes), 60)

    text = f"{moment.strftime('%m/%d/%Y %H:%M:%S')} {sign}{hours:02d}:{minutes:02d}"
    zone = moment.tzname()
    if zone:
        text += f" {zone}"
    return text

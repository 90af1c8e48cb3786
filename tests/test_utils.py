"""
Unit tests for utils.py
"""

import io
import logging
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from sql_dumper.utils import format_timestamp, quote_identifier, replace_first, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.fixture(autouse=True)
    def reset_logging(self):
        """Reset logging configuration before each test."""
        root_logger = logging.getLogger()
        # Remove all handlers
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
        # Reset level to NOTSET so basicConfig will work
        root_logger.setLevel(logging.NOTSET)
        yield
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

    def test_default_log_level(self):
        """Test default log level is INFO."""
        setup_logging({})
        assert logging.getLogger().level == logging.INFO

    def test_custom_log_level(self):
        """Test setting custom log level."""
        setup_logging({"level": "DEBUG"})
        assert logging.getLogger().level == logging.DEBUG

    def test_log_level_case_insensitive(self):
        """Test log level is case insensitive."""
        setup_logging({"level": "warning"})
        assert logging.getLogger().level == logging.WARNING

    def test_log_to_file(self):
        """Test logging to a file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "test.log"
            setup_logging({"file": str(log_file)})

            logging.info("Test message")

            assert log_file.exists()

    def test_creates_log_directory(self):
        """Test that log directory is created if it doesn't exist."""
        with tempfile.TemporaryDirectory() as tmpdir:
            log_file = Path(tmpdir) / "nested" / "dir" / "test.log"
            setup_logging({"file": str(log_file)})

            assert log_file.parent.exists()

    def test_custom_stream(self):
        """Test console output can be redirected to another stream."""
        stream = io.StringIO()
        setup_logging({}, stream=stream)

        logging.info("to the stream")

        assert "to the stream" in stream.getvalue()


class TestQuoteIdentifier:
    """Tests for quote_identifier function."""

    def test_plain_name(self):
        assert quote_identifier("users") == "`users`"

    def test_name_with_spaces(self):
        assert quote_identifier("first name") == "`first name`"

    def test_embedded_backtick_doubled(self):
        assert quote_identifier("we`ird") == "`we``ird`"


class TestReplaceFirst:
    """Tests for replace_first function."""

    def test_replaces_only_first(self):
        assert replace_first("a b a b", "a", "x") == "x b a b"

    def test_not_found_returns_input(self):
        text = "nothing here"
        assert replace_first(text, "CREATE", "X") is text

    def test_match_at_end(self):
        assert replace_first("abc", "c", "CC") == "abCC"


class TestFormatTimestamp:
    """Tests for format_timestamp function."""

    def test_utc(self):
        moment = datetime(2026, 10, 16, 9, 5, 3, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "10/16/2026 09:05:03 +00:00 UTC"

    def test_positive_offset(self):
        zone = timezone(timedelta(hours=5, minutes=30), "IST")
        moment = datetime(2026, 1, 2, 23, 59, 59, tzinfo=zone)
        assert format_timestamp(moment) == "01/02/2026 23:59:59 +05:30 IST"

    def test_negative_offset(self):
        zone = timezone(timedelta(hours=-3), "BRT")
        moment = datetime(2026, 1, 2, 0, 0, 0, tzinfo=zone)
        assert format_timestamp(moment) == "01/02/2026 00:00:00 -03:00 BRT"

    def test_naive_uses_local_zone(self):
        result = format_timestamp(datetime(2026, 1, 2, 3, 4, 5))
        assert result.startswith("01/02/2026 03:04:05 ")

"""Tests for logging configuration."""

import json
import logging
import sys

from brevly.common.logging_config import JsonFormatter, setup_logging


class TestLoggingConfig:
    """Test setup_logging."""

    def test_json_lines_are_valid_json(self, capsys):
        """Quotes and markup in messages stay valid JSON."""
        logger = setup_logging(level="INFO", json_format=True)

        logger.info('Created link: abc123 -> https://example.com/?q=a,b&x="y"')
        logger.warning('Suspicious request: GET /x?q="<script>"')

        lines = [line for line in capsys.readouterr().out.splitlines() if line]
        assert len(lines) == 2
        records = [json.loads(line) for line in lines]
        assert records[0]["message"] == 'Created link: abc123 -> https://example.com/?q=a,b&x="y"'
        assert records[1]["level"] == "WARNING"
        assert records[1]["logger"] == "brevly"

    def test_json_includes_exception(self):
        """Tracebacks are kept in an exception field."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "brevly", logging.ERROR, __file__, 1, "failed %s", ("x",),
                exc_info=sys.exc_info(),
            )

        payload = json.loads(JsonFormatter().format(record))
        assert payload["message"] == "failed x"
        assert "RuntimeError: boom" in payload["exception"]

    def test_handlers_not_stacked(self, tmp_path):
        """Calling setup twice leaves one handler per destination."""
        log_file = tmp_path / "brevly.log"
        setup_logging(level="DEBUG", log_file=str(log_file))
        logger = setup_logging(level="DEBUG", log_file=str(log_file))

        assert len(logger.handlers) == 2
        assert logger.level == logging.DEBUG

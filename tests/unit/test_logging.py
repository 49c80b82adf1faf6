"""Unit tests for logging module."""

import logging

from token_server.logging import format_request_log, get_logger, truncate_token


class TestTruncateToken:
    def test_normal_token_shows_prefix_suffix(self):
        token = "abcdefghijklmnop"
        assert truncate_token(token) == "abc...nop"

    def test_short_token_shows_asterisks(self):
        token = "abcdefgh"  # 8 chars
        assert truncate_token(token) == "***"

    def test_very_short_token_shows_asterisks(self):
        token = "abc"
        assert truncate_token(token) == "***"

    def test_empty_token_shows_asterisks(self):
        assert truncate_token("") == "***"

    def test_boundary_token_shows_prefix_suffix(self):
        token = "abcdefghi"  # 9 chars - first to show truncation
        assert truncate_token(token) == "abc...ghi"

    def test_uuid_token(self):
        token = "1b4e28ba-2fa1-11d2-883f-0016d3cca427"
        assert truncate_token(token) == "1b4...427"


class TestFormatRequestLog:
    def test_success_format(self):
        line = format_request_log(
            method="PUT",
            path="/token",
            token="abcdefghijklmnop",
            status=200,
            duration_ms=12,
        )
        assert "PUT /token" in line
        assert "abc...nop" in line
        assert "| 200 |" in line
        assert "12ms" in line
        # Check pipe-delimited format
        assert line.count("|") == 4

    def test_no_token(self):
        line = format_request_log(
            method="POST",
            path="/token",
            token=None,
            status=422,
            duration_ms=1,
        )
        assert "| - |" in line

    def test_error_format(self):
        line = format_request_log(
            method="PUT",
            path="/token",
            token="abcdefghijklmnop",
            status=404,
            duration_ms=3,
            error_message="InvalidToken",
        )
        assert "404" in line
        assert "\n    InvalidToken" in line


class TestSetupLogging:
    def test_default_level_is_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        from token_server.logging import setup_logging
        setup_logging()

        logger = logging.getLogger("token_server")
        assert logger.level == logging.INFO

    def test_respects_log_level_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        from token_server.logging import setup_logging
        setup_logging()

        logger = logging.getLogger("token_server")
        assert logger.level == logging.DEBUG

    def test_invalid_level_defaults_to_info(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        from token_server.logging import setup_logging
        setup_logging()

        logger = logging.getLogger("token_server")
        assert logger.level == logging.INFO


def test_get_logger_is_namespaced():
    assert get_logger("store").name == "token_server.store"

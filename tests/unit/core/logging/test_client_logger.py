"""
Tests for ClientLogger, formatters and logging config.
"""

import json
import logging

import httpx
import pytest
import respx

from duplex_http.core.config import ClientConfig
from duplex_http.core.http_client import HTTPClient
from duplex_http.core.logging import (
    ClientLogger,
    JSONFormatter,
    LogFormat,
    LoggingConfig,
    LogLevel,
    TextFormatter,
    get_formatter,
)

URL = "https://api.example.com/items"


def _read_json_lines(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_defaults(self):
        config = LoggingConfig()
        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.TEXT
        assert config.enable_console is True
        assert config.enable_file is False

    def test_create_normalizes_case(self):
        config = LoggingConfig.create(level="debug", format="JSON")
        assert config.level == LogLevel.DEBUG
        assert config.format == LogFormat.JSON

    def test_file_path_enables_file(self, tmp_path):
        config = LoggingConfig.create(file_path=str(tmp_path / "a.log"))
        assert config.enable_file is True

    def test_output_required(self):
        with pytest.raises(ValueError, match="needs an output"):
            LoggingConfig.create(enable_console=False)

    def test_unknown_level_rejected(self):
        with pytest.raises(ValueError):
            LoggingConfig.create(level="verbose")


class TestFormatters:
    """Tests for JSON and text formatters."""

    def _record(self, **extra):
        record = logging.LogRecord("duplex_http", logging.INFO, __file__, 1, "Request completed", None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_json_includes_extra_fields(self):
        data = json.loads(JSONFormatter().format(self._record(status_code=200, method="GET")))
        assert data["message"] == "Request completed"
        assert data["level"] == "INFO"
        assert data["status_code"] == 200
        assert data["method"] == "GET"

    def test_text_appends_pairs(self):
        line = TextFormatter().format(self._record(status_code=404))
        assert "[INFO]" in line
        assert line.endswith("status_code=404")

    def test_get_formatter(self):
        assert isinstance(get_formatter("JSON"), JSONFormatter)
        with pytest.raises(ValueError, match="Unknown format"):
            get_formatter("xml")


class TestClientLogger:
    """Tests for ClientLogger class."""

    def test_writes_file_and_masks_secrets(self, logging_config_with_file):
        logger = ClientLogger(logging_config_with_file, name="duplex_http.test.mask")
        logger.info("Request submitted", headers={"Authorization": "Bearer abc"}, url="https://x?token=abc")
        logger.close()

        entries = _read_json_lines(logging_config_with_file.file_path)
        assert entries[0]["headers"]["Authorization"] == "***REDACTED***"
        assert "abc" not in entries[0]["url"]

    def test_level_filtering(self, tmp_path):
        config = LoggingConfig.create(
            level="WARNING", format="json", enable_console=False,
            file_path=str(tmp_path / "w.log"),
        )
        with ClientLogger(config, name="duplex_http.test.level") as logger:
            logger.info("hidden")
            logger.warning("shown")

        messages = [e["message"] for e in _read_json_lines(config.file_path)]
        assert messages == ["shown"]

    def test_extra_fields_added(self, tmp_path):
        config = LoggingConfig.create(
            format="json", enable_console=False,
            file_path=str(tmp_path / "e.log"), extra_fields={"service": "orders"},
        )
        with ClientLogger(config, name="duplex_http.test.extra") as logger:
            logger.info("hello")

        assert _read_json_lines(config.file_path)[0]["service"] == "orders"

    def test_close_idempotent(self, logging_config_with_file):
        logger = ClientLogger(logging_config_with_file, name="duplex_http.test.close")
        logger.close()
        logger.close()

    def test_console_output(self, capsys):
        config = LoggingConfig.create(level="INFO", format="text")
        with ClientLogger(config, name="duplex_http.test.console") as logger:
            logger.info("to stdout", method="GET")

        assert "to stdout method=GET" in capsys.readouterr().out

    def test_same_name_instances_isolated(self, tmp_path):
        """Два логгера с одним именем пишут каждый в свой файл."""
        first = ClientLogger(
            LoggingConfig.create(format="json", enable_console=False, file_path=str(tmp_path / "1.log")),
            name="duplex_http.test.shared",
        )
        second = ClientLogger(
            LoggingConfig.create(format="json", enable_console=False, file_path=str(tmp_path / "2.log")),
            name="duplex_http.test.shared",
        )
        assert first.logger_name != second.logger_name

        first.info("one")
        first.close()
        second.info("two")
        second.close()

        assert [e["message"] for e in _read_json_lines(tmp_path / "1.log")] == ["one"]
        assert [e["message"] for e in _read_json_lines(tmp_path / "2.log")] == ["two"]


class TestHTTPClientLogging:
    """Tests for request logging through HTTPClient."""

    @respx.mock
    def test_sync_request_logged_without_token(self, logging_config_with_file, global_config):
        respx.get(URL).mock(return_value=httpx.Response(200, content=b"ok"))
        global_config.set_bearer_token("very-secret-token")
        config = ClientConfig.create(base_url="https://api.example.com", logging=logging_config_with_file)

        with HTTPClient(config=config, global_config=global_config) as client:
            client.get_sync("/items")

        with open(logging_config_with_file.file_path, encoding="utf-8") as f:
            content = f.read()
        assert "very-secret-token" not in content

        entries = _read_json_lines(logging_config_with_file.file_path)
        assert entries[0]["message"] == "Request submitted"
        assert entries[0]["logger"].startswith("duplex_http.api.example.com.")
        completed = entries[-1]
        assert completed["message"] == "Request completed"
        assert completed["status_code"] == 200
        assert completed["mode"] == "sync"

    @respx.mock
    def test_async_failure_logged_as_warning(self, logging_config_with_file, global_config):
        respx.get(URL).mock(return_value=httpx.Response(500, content=b"down"))
        config = ClientConfig.create(logging=logging_config_with_file)

        with HTTPClient(config=config, global_config=global_config) as client:
            client.get(URL).result(timeout=5)

        failed = _read_json_lines(logging_config_with_file.file_path)[-1]
        assert failed["message"] == "Request failed"
        assert failed["level"] == "WARNING"
        assert failed["error_type"] == "HttpStatusError"
        assert failed["mode"] == "async"

    @respx.mock
    def test_closing_one_client_keeps_other_logging(self, tmp_path, global_config):
        respx.get(URL).mock(return_value=httpx.Response(200, content=b"ok"))
        first_log = tmp_path / "first.log"
        second_log = tmp_path / "second.log"

        first = HTTPClient(
            config=ClientConfig.create(logging=LoggingConfig.create(
                format="json", enable_console=False, file_path=str(first_log))),
            global_config=global_config,
        )
        second = HTTPClient(
            config=ClientConfig.create(logging=LoggingConfig.create(
                format="json", enable_console=False, file_path=str(second_log))),
            global_config=global_config,
        )

        first.close()
        try:
            second.get_sync(URL)
        finally:
            second.close()

        assert first_log.read_text(encoding="utf-8") == ""
        messages = [e["message"] for e in _read_json_lines(second_log)]
        assert messages[-1] == "Request completed"

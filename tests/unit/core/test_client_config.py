"""
Tests for ClientConfig.
"""

import pytest

from duplex_http.core.config import ClientConfig
from duplex_http.core.logging import LoggingConfig


class TestClientConfig:
    """Test ClientConfig construction and immutability."""

    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url is None
        assert dict(config.headers) == {}
        assert config.verify_ssl is True
        assert config.follow_redirects is True
        assert config.logging is None

    def test_headers_frozen(self):
        config = ClientConfig.create(headers={"Accept": "*/*"})
        with pytest.raises(TypeError):
            config.headers["X"] = "y"

    def test_source_dict_not_shared(self):
        headers = {"Accept": "*/*"}
        config = ClientConfig.create(headers=headers)
        headers["X"] = "y"
        assert "X" not in config.headers

    def test_base_url_trailing_slash_stripped(self):
        assert ClientConfig.create(base_url="https://api.example.com/").base_url == "https://api.example.com"

    def test_non_str_header_rejected(self):
        with pytest.raises(TypeError):
            ClientConfig.create(headers={"X-Count": 1})

    def test_frozen(self):
        config = ClientConfig()
        with pytest.raises(AttributeError):
            config.verify_ssl = False

    def test_with_headers(self):
        logging_config = LoggingConfig.create(level="DEBUG")
        config = ClientConfig.create(
            base_url="https://api.example.com",
            headers={"Accept": "*/*"},
            logging=logging_config,
        )
        updated = config.with_headers({"X-Trace": "1"})

        assert dict(updated.headers) == {"Accept": "*/*", "X-Trace": "1"}
        assert updated.base_url == config.base_url
        assert updated.logging is logging_config
        assert dict(config.headers) == {"Accept": "*/*"}

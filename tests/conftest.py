"""
Pytest configuration and fixtures for duplex-http-client tests.
"""

import re
import ssl

import certifi
import pytest

from duplex_http.core.global_config import GlobalConfig, get_global_config
from duplex_http.core.http_client import HTTPClient
from duplex_http.core.logging.config import LoggingConfig
from duplex_http.core.transport import Transport

_PEM_BLOCK = re.compile(
    rb"-----BEGIN CERTIFICATE-----.+?-----END CERTIFICATE-----\s*",
    re.DOTALL,
)


@pytest.fixture
def global_config():
    """Isolated GlobalConfig (the process-wide one stays untouched)."""
    return GlobalConfig()


@pytest.fixture
def default_global_config():
    """Process-wide GlobalConfig, reset before and after the test."""
    config = get_global_config()
    config.reset()
    yield config
    config.reset()


@pytest.fixture
def transport(global_config):
    """Transport bound to the isolated GlobalConfig."""
    transport = Transport(global_config=global_config)
    yield transport
    transport.close()


@pytest.fixture
def client(global_config):
    """HTTP client instance for testing."""
    client = HTTPClient(headers={"Accept": "application/json"}, global_config=global_config)
    yield client
    client.close()


@pytest.fixture
def pem_certificate():
    """First certificate of the certifi bundle (valid PEM)."""
    with open(certifi.where(), "rb") as f:
        match = _PEM_BLOCK.search(f.read())
    assert match is not None
    return match.group(0)


@pytest.fixture
def der_certificate(pem_certificate):
    """Same certificate in DER form."""
    return ssl.PEM_cert_to_DER_cert(pem_certificate.decode("ascii"))


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        file_path=str(log_file)
    )

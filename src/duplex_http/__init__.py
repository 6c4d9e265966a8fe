"""Duplex HTTP Client - sync and event-driven requests over one transport."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.http_client import HTTPClient
from .core.config import ClientConfig
from .core.global_config import (
    GlobalConfig,
    get_global_config,
    set_bearer_token,
    set_root_ca,
    set_global_timeout,
    reset_global_timeout,
)
from .core.outcome import Outcome
from .core.signals import Signal
from .core.exceptions import (
    HTTPClientException,
    NetworkError,
    TransportError,
    TimeoutError,
    ConnectionError,
    TLSError,
    InvalidURLError,
    HttpStatusError,
    ConfigurationError,
)
from .core.env_config import load_from_env, apply_global_settings
from .core.logging import LoggingConfig
from .utils.files import write_file

# Set up logging - add NullHandler to prevent "No handler found" warnings
# Users can configure logging themselves using logging.getLogger('duplex_http')
logging.getLogger('duplex_http').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("duplex-http-client")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Core
    "HTTPClient",
    "Outcome",
    "Signal",

    # Config
    "ClientConfig",
    "LoggingConfig",
    "GlobalConfig",
    "get_global_config",
    "set_bearer_token",
    "set_root_ca",
    "set_global_timeout",
    "reset_global_timeout",
    "load_from_env",
    "apply_global_settings",

    # Exceptions
    "HTTPClientException",
    "NetworkError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "TLSError",
    "InvalidURLError",
    "HttpStatusError",
    "ConfigurationError",

    # Utils
    "write_file",

    # Version
    "__version__",
]

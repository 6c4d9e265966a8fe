"""Core HTTP Client модули."""

from .config import ClientConfig
from .global_config import (
    GlobalConfig,
    get_global_config,
    set_bearer_token,
    set_root_ca,
    set_global_timeout,
    reset_global_timeout,
)
from .exceptions import (
    HTTPClientException,
    NetworkError,
    TransportError,
    TimeoutError,
    ConnectionError,
    TLSError,
    InvalidURLError,
    HttpStatusError,
    ConfigurationError,
    classify_transport_exception,
)
from .headers import HeaderInjector, merge_headers
from .request import Request
from .outcome import Outcome, classify
from .operation import InFlightOperation
from .transport import Transport
from .signals import Signal
from .completion import AsyncCompletionHandler, SyncWaiter
from .http_client import HTTPClient

__all__ = [
    # Config
    "ClientConfig",
    "GlobalConfig",
    "get_global_config",
    "set_bearer_token",
    "set_root_ca",
    "set_global_timeout",
    "reset_global_timeout",
    # Core
    "HTTPClient",
    "Transport",
    "InFlightOperation",
    "Request",
    "Outcome",
    "classify",
    "HeaderInjector",
    "merge_headers",
    "Signal",
    "AsyncCompletionHandler",
    "SyncWaiter",
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
    "classify_transport_exception",
]

"""
Logging system for HTTP Client.

Example:
    >>> from duplex_http.core.logging import ClientLogger, LoggingConfig
    >>>
    >>> config = LoggingConfig.create(level="DEBUG", format="json")
    >>> logger = ClientLogger(config)
    >>> logger.info("Request submitted", method="GET", url="https://api.com")
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import ClientLogger, ExtraFieldsFilter, create_console_handler, create_file_handler
from .formatters import JSONFormatter, TextFormatter, get_formatter

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "ClientLogger",
    "ExtraFieldsFilter",
    "create_console_handler",
    "create_file_handler",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "get_formatter",
]

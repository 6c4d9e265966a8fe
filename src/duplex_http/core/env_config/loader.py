"""
Configuration loader from environment variables and .env files.
"""

import logging
from typing import Optional

from ..config import ClientConfig
from ..global_config import GlobalConfig, get_global_config
from ..logging.config import LoggingConfig
from .validator import DuplexHTTPSettings

logger = logging.getLogger(__name__)


def _settings(env_file: Optional[str]) -> DuplexHTTPSettings:
    if env_file is None:
        return DuplexHTTPSettings()
    return DuplexHTTPSettings(_env_file=env_file)


def load_from_env(env_file: Optional[str] = None, **overrides) -> ClientConfig:
    """
    Load ClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (DUPLEX_HTTP_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: base_url, headers, verify_ssl, follow_redirects

    Returns:
        ClientConfig instance

    Example:
        >>> config = load_from_env()
        >>> client = HTTPClient(config=config)

        >>> config = load_from_env(base_url="https://custom.api.com")
    """
    settings = _settings(env_file)

    logging_config = None
    if settings.log_level:
        logging_config = LoggingConfig.create(
            level=settings.log_level,
            format=settings.log_format,
            enable_console=settings.log_enable_console,
            file_path=settings.log_file_path,
        )

    return ClientConfig(
        base_url=overrides.get('base_url', settings.base_url) or None,
        headers=overrides.get('headers', settings.headers),
        verify_ssl=overrides.get('verify_ssl', settings.verify_ssl),
        follow_redirects=overrides.get('follow_redirects', settings.follow_redirects),
        logging=overrides.get('logging', logging_config),
    )


def apply_global_settings(
    global_config: Optional[GlobalConfig] = None,
    env_file: Optional[str] = None,
) -> GlobalConfig:
    """
    Push bearer token, root certificate and timeout from the environment
    into a GlobalConfig (the process-wide one by default).

    Only values that are set are applied; the rest of the config is kept.

    Raises:
        ConfigurationError: DUPLEX_HTTP_ROOT_CA_FILE cannot be loaded
    """
    settings = _settings(env_file)
    target = global_config or get_global_config()

    if settings.root_ca_file:
        target.load_root_certificate(settings.root_ca_file)
    if settings.bearer_token:
        target.set_bearer_token(settings.bearer_token)
    if settings.timeout is not None:
        target.set_timeout(settings.timeout)

    logger.info(
        "Global settings applied from environment",
        extra={
            "root_ca_file": settings.root_ca_file,
            "timeout": settings.timeout,
        },
    )
    return target

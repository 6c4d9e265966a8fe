"""
Environment configuration system for HTTP Client.

Example:
    >>> from duplex_http.core.env_config import load_from_env, apply_global_settings
    >>>
    >>> apply_global_settings()        # token, root CA, timeout -> GlobalConfig
    >>> config = load_from_env()       # headers, base_url, logging -> ClientConfig
"""

from .loader import apply_global_settings, load_from_env
from .validator import DuplexHTTPSettings

__all__ = [
    "apply_global_settings",
    "load_from_env",
    "DuplexHTTPSettings",
]

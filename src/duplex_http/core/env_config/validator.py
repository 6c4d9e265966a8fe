"""
Pydantic validators for environment configuration.
"""

from typing import Dict, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DuplexHTTPSettings(BaseSettings):
    """
    HTTP Client configuration from environment variables.

    Reads from:
    1. Environment variables (DUPLEX_HTTP_*)
    2. .env file
    3. Defaults

    Example .env file:
        DUPLEX_HTTP_BASE_URL=https://api.example.com
        DUPLEX_HTTP_HEADERS={"Accept": "application/json"}
        DUPLEX_HTTP_BEARER_TOKEN=eyJhbGciOi...
        DUPLEX_HTTP_ROOT_CA_FILE=/etc/ssl/private-ca.pem
        DUPLEX_HTTP_TIMEOUT=30
        DUPLEX_HTTP_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix='DUPLEX_HTTP_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # Per-client
    base_url: str = Field(default="", description="Base URL for relative paths")
    headers: Dict[str, str] = Field(default_factory=dict, description="Default headers (JSON object)")
    verify_ssl: bool = Field(default=True)
    follow_redirects: bool = Field(default=True)

    # Process-wide
    bearer_token: Optional[str] = Field(default=None, description="Bearer token for all clients")
    root_ca_file: Optional[str] = Field(default=None, description="Extra trusted root certificate")
    timeout: Optional[float] = Field(default=None, gt=0, description="Global timeout in seconds")

    # Logging (disabled unless a level is given)
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    log_format: Literal["json", "text"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            return v.upper() or None
        return v

    @field_validator('bearer_token', 'root_ca_file', 'log_file_path', mode='before')
    @classmethod
    def empty_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

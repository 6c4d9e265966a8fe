"""
Настройки логирования HTTPClient.

Файловый лог включается указанием file_path; ротация идёт по размеру
(см. ``logger.LOG_FILE_MAX_BYTES``).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Куда и как писать события запросов.

    Attributes:
        level: Минимальный уровень (запрос отправлен - DEBUG, завершён - INFO,
            неуспешен - WARNING)
        format: json или text
        enable_console: Писать в stdout
        file_path: Файл лога; None - без файла
        extra_fields: Поля, добавляемые к каждой записи (service, environment, ...)

    Example:
        >>> LoggingConfig.create(level="DEBUG", format="json", file_path="/var/log/api.log")
    """

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.TEXT
    enable_console: bool = True
    file_path: Optional[str] = None
    extra_fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.enable_console and not self.file_path:
            raise ValueError("Logging needs an output: enable_console or file_path")

    @property
    def enable_file(self) -> bool:
        return self.file_path is not None

    @classmethod
    def create(
        cls,
        level: str = "INFO",
        format: str = "text",
        enable_console: bool = True,
        file_path: Optional[str] = None,
        extra_fields: Optional[Dict[str, Any]] = None
    ) -> "LoggingConfig":
        """Строковые level/format без учёта регистра; неизвестное значение - ValueError."""
        return cls(
            level=LogLevel(level.upper()),
            format=LogFormat(format.lower()),
            enable_console=enable_console,
            file_path=file_path,
            extra_fields=extra_fields or {}
        )

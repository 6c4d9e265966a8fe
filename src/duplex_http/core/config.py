"""
Конфигурация экземпляра HTTPClient.

Конфиг immutable (frozen dataclass): заголовки по умолчанию задаются при
создании клиента и больше не меняются. Процессные настройки (токен,
сертификаты, таймаут) живут отдельно в GlobalConfig.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Mapping, TYPE_CHECKING
from types import MappingProxyType

if TYPE_CHECKING:
    from .logging import LoggingConfig


def _freeze_dict(d: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    """
    Convert dict to immutable MappingProxyType.

    Args:
        d: Dictionary to freeze (can be None)

    Returns:
        Immutable MappingProxyType

    Example:
        >>> frozen = _freeze_dict({"X-API-Key": "secret"})
        >>> frozen["X-New"] = "value"  # Raises TypeError
    """
    if d is None:
        return MappingProxyType({})
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class ClientConfig:
    """
    Конфигурация HTTPClient.

    Args:
        base_url: Базовый URL для относительных путей (опционально)
        headers: Заголовки по умолчанию, добавляются к каждому запросу
        verify_ssl: Проверять SSL сертификаты
        follow_redirects: Следовать редиректам
        logging: Конфигурация логирования (None = без структурных логов)

    Examples:
        >>> config = ClientConfig(headers={"Accept": "application/json"})
        >>> config = ClientConfig.create(base_url="https://api.example.com")
    """
    base_url: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    verify_ssl: bool = True
    follow_redirects: bool = True
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Normalize base_url and freeze headers."""
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', _freeze_dict(self.headers))

        for key, value in self.headers.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError("headers must map str to str")

        if self.base_url:
            normalized = self.base_url.rstrip('/')
            if normalized != self.base_url:
                object.__setattr__(self, 'base_url', normalized)

    @classmethod
    def create(
        cls,
        base_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        verify_ssl: bool = True,
        follow_redirects: bool = True,
        logging: Optional['LoggingConfig'] = None,
    ) -> 'ClientConfig':
        """
        Удобный конструктор конфигурации.

        Returns:
            ClientConfig instance
        """
        return cls(
            base_url=base_url,
            headers=headers or {},
            verify_ssl=verify_ssl,
            follow_redirects=follow_redirects,
            logging=logging,
        )

    def with_headers(self, headers: Dict[str, str]) -> 'ClientConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Args:
            headers: Заголовки для объединения с существующими

        Returns:
            Новый ClientConfig

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)

        return ClientConfig(
            base_url=self.base_url,
            headers=merged,
            verify_ssl=self.verify_ssl,
            follow_redirects=self.follow_redirects,
            logging=self.logging,
        )

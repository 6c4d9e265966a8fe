"""Immutable описание одного HTTP запроса."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

SUPPORTED_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"})
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True)
class Request:
    """
    Запрос, переданный в Transport.

    Attributes:
        method: HTTP метод (GET, HEAD, POST, PUT, PATCH, DELETE)
        url: Целевой URL (не валидируется до выполнения)
        body: Тело запроса или None
        headers: Итоговые заголовки (read-only)

    Example:
        >>> req = Request.build("post", "https://api.example.com/items", '{"x":1}')
        >>> req.method, req.body
        ('POST', b'{"x":1}')
    """

    method: str
    url: str
    body: Optional[bytes] = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        if self.method not in SUPPORTED_METHODS:
            raise ValueError(
                f"Unsupported HTTP method: {self.method}. "
                f"Available: {', '.join(sorted(SUPPORTED_METHODS))}"
            )
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    @classmethod
    def build(
        cls,
        method: str,
        url: str,
        body: Union[bytes, str, None] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> 'Request':
        """Нормализовать метод и тело (str кодируется в UTF-8)."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        elif body is not None:
            body = bytes(body)

        return cls(
            method=method.upper(),
            url=url,
            body=body,
            headers=headers or {},
        )

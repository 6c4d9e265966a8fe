# src/duplex_http/core/headers.py
"""
Сборка заголовков исходящего запроса.

Порядок: сначала заголовки экземпляра, затем Authorization из GlobalConfig.
"""

from typing import Dict, Mapping, Optional

from .global_config import GlobalConfig, get_global_config

AUTHORIZATION = "Authorization"


def merge_headers(defaults: Mapping[str, str], token: Optional[str]) -> Dict[str, str]:
    """
    Объединить заголовки по умолчанию с bearer токеном.

    Непустой токен заменяет любой Authorization экземпляра (имена
    сравниваются без учёта регистра), так что в результате ровно один
    Authorization. Пустой токен ничего не меняет.

    Args:
        defaults: Заголовки экземпляра
        token: Bearer токен ("" или None = нет токена)

    Returns:
        Новый dict заголовков (порядок сохранён)

    Example:
        >>> merge_headers({"Accept": "application/json"}, "abc")
        {'Accept': 'application/json', 'Authorization': 'Bearer abc'}
    """
    headers = dict(defaults)

    if token:
        for name in [k for k in headers if k.lower() == AUTHORIZATION.lower()]:
            del headers[name]
        headers[AUTHORIZATION] = f"Bearer {token}"

    return headers


class HeaderInjector:
    """
    Привязывает заголовки экземпляра к общему GlobalConfig.

    Токен читается в момент сборки каждого запроса, поэтому изменение
    GlobalConfig сразу видно следующему запросу.
    """

    def __init__(self, defaults: Mapping[str, str], global_config: Optional[GlobalConfig] = None):
        self._defaults = defaults
        self._global_config = global_config or get_global_config()

    @property
    def defaults(self) -> Mapping[str, str]:
        return self._defaults

    def build(self) -> Dict[str, str]:
        """Заголовки для одного запроса."""
        return merge_headers(self._defaults, self._global_config.bearer_token)

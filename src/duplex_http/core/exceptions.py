"""
Иерархия исключений HTTP Client.

Классификация:
- TransportError (status_code=0) - ответа нет: DNS, connect, TLS, таймаут
- HttpStatusError (status_code > 300) - ответ получен, но статус неуспешный
- ConfigurationError (status_code=0) - ошибка глобальной конфигурации
"""

import ssl
from typing import Optional, Union

import httpx

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(Exception):
    """Базовое исключение HTTP Client."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)


class NetworkError(HTTPClientException):
    """
    Структурированная ошибка запроса.

    Args:
        status_code: HTTP статус (0 если ответа не было)
        body: Тело ответа (bytes) или текст ошибки
        url: URL запроса

    Examples:
        >>> exc = NetworkError(404, b'{"error":"not found"}')
        >>> exc.status_code
        404
        >>> exc.message
        '{"error":"not found"}'
    """

    def __init__(
        self,
        status_code: int,
        body: Union[bytes, str] = b"",
        url: Optional[str] = None,
    ):
        if isinstance(body, str):
            body = body.encode("utf-8")

        self.status_code = status_code
        self.body = body
        self.url = url

        super().__init__(body.decode("utf-8", errors="replace"))

    def __reduce__(self):
        return (self.__class__, (self.status_code, self.body, self.url))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TRANSPORT (status_code=0)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(NetworkError):
    """
    Ошибка до получения HTTP ответа.

    Тело пустое, поэтому в message попадает описание ошибки.

    Args:
        message: Описание ошибки
        url: URL запроса
    """

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(0, b"", url)
        self.message = message
        self.args = (message,)

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message

    def __reduce__(self):
        return (self.__class__, (self.message, self.url))


class TimeoutError(TransportError):
    """Таймаут запроса (глобальный таймаут истёк)."""
    pass


class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - DNS resolution failed
    - Network unreachable
    """
    pass


class TLSError(TransportError):
    """TLS handshake или проверка сертификата не прошли."""
    pass


class InvalidURLError(TransportError):
    """URL не удалось разобрать или схема не поддерживается."""
    pass


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP STATUS (> 300)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HttpStatusError(NetworkError):
    """
    Ответ получен, но статус > 300.

    message содержит тело ответа как есть.
    """
    pass


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# CONFIGURATION (status_code=0)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(NetworkError):
    """
    Ошибка конфигурации (например, не удалось прочитать root сертификат).

    Выбрасывается сразу в месте вызова, а не при следующем запросе.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(0, message)
        self.path = path

    def __reduce__(self):
        return (self.__class__, (self.message, self.path))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# УТИЛИТЫ
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _caused_by_ssl(exc: BaseException) -> bool:
    """Проверить цепочку __cause__/__context__ на ssl.SSLError."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False


def classify_transport_exception(exc: Exception, url: str) -> TransportError:
    """
    Конвертировать исключения httpx в наши TransportError.

    Args:
        exc: Исключение из httpx (или любое другое из транспорта)
        url: URL запроса

    Returns:
        TransportError с правильной классификацией

    Examples:
        >>> our_exc = classify_transport_exception(httpx.ConnectTimeout("t"), "https://example.com")
        >>> assert isinstance(our_exc, TimeoutError)
        >>> assert our_exc.status_code == 0
    """
    detail = str(exc) or exc.__class__.__name__

    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError(f"Request timeout: {detail}", url)

    elif isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return InvalidURLError(f"Invalid URL: {detail}", url)

    elif _caused_by_ssl(exc):
        return TLSError(f"TLS error: {detail}", url)

    elif isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError)):
        return ConnectionError(f"Connection error: {detail}", url)

    elif isinstance(exc, httpx.HTTPError):
        return TransportError(f"Transport error: {detail}", url)

    else:
        # Неизвестная ошибка - оборачиваем
        return TransportError(f"Unexpected error: {detail}", url)

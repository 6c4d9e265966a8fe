"""
Классификация результата запроса.

Правило: ошибка транспорта или статус > 300 - Failure, иначе Success.
Статус 300 считается успешным; статус 0 означает, что ответа не было.
"""

from dataclasses import dataclass
from typing import Optional

from .exceptions import (
    HttpStatusError,
    NetworkError,
    TransportError,
    classify_transport_exception,
)

# Статусы строго больше порога - ошибка
FAILURE_THRESHOLD = 300


@dataclass(frozen=True)
class Outcome:
    """
    Результат одного завершённого запроса.

    Attributes:
        status_code: HTTP статус (0 - ошибка транспорта)
        body: Тело ответа
        error: NetworkError для Failure, None для Success
    """

    status_code: int
    body: bytes
    error: Optional[NetworkError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> bytes:
        """
        Вернуть тело или выбросить ошибку.

        Raises:
            NetworkError: Если запрос завершился неуспешно
        """
        if self.error is not None:
            raise self.error
        return self.body


def classify(
    transport_error: Optional[BaseException],
    status_code: int,
    body: bytes,
    url: str = "",
) -> Outcome:
    """
    Решить Success или Failure. Чистая функция, состояние не меняет.

    Args:
        transport_error: Исключение транспорта или None
        status_code: HTTP статус (0 если ответа нет)
        body: Тело ответа
        url: URL запроса (для сообщения об ошибке)

    Returns:
        Outcome

    Examples:
        >>> classify(None, 300, b"ok").ok
        True
        >>> classify(None, 301, b"moved").error.status_code
        301
    """
    if transport_error is not None:
        if isinstance(transport_error, TransportError):
            error = transport_error
        else:
            error = classify_transport_exception(transport_error, url)
        # Транспорт не дал HTTP статуса
        return Outcome(status_code=0, body=body, error=error)

    if status_code > FAILURE_THRESHOLD:
        return Outcome(
            status_code=status_code,
            body=body,
            error=HttpStatusError(status_code, body, url or None),
        )

    return Outcome(status_code=status_code, body=body)

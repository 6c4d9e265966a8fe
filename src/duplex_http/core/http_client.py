# src/duplex_http/core/http_client.py
import concurrent.futures
from typing import Dict, Optional, Union
from urllib.parse import urlparse

from .completion import AsyncCompletionHandler, SyncWaiter
from .config import ClientConfig
from .global_config import GlobalConfig, get_global_config
from .headers import HeaderInjector
from .outcome import Outcome
from .request import BODY_METHODS, Request
from .signals import Signal
from .transport import Transport
from ..utils.files import write_file
from ..utils.sanitizer import mask_headers, mask_url

Body = Union[bytes, str, None]


class HTTPClient:
    """
    HTTP клиент с двумя способами вызова поверх одного транспорта.

    Асинхронные методы (get, post, ...) возвращаются сразу. Результат
    приходит событием ``success`` или ``error`` (оба с телом ответа) и
    через возвращённый Future с Outcome.

    Синхронные методы (get_sync, post_sync, ...) блокируют вызывающий поток
    и возвращают тело ответа или выбрасывают NetworkError, если запрос
    не удался или статус > 300.

    Все запросы одного клиента идут через один Transport; bearer токен,
    доверенные сертификаты и таймаут берутся из общего GlobalConfig.

    Example:
        >>> with HTTPClient(headers={"Accept": "application/json"}) as client:
        ...     client.success.connect(lambda body: print("ok", body))
        ...     client.error.connect(lambda body: print("failed", body))
        ...     client.get("https://api.example.com/items")
        ...
        ...     try:
        ...         data = client.get_sync("https://api.example.com/items/1")
        ...     except NetworkError as e:
        ...         print(e.status_code, e.message)
    """

    def __init__(
        self,
        headers: Optional[Dict[str, str]] = None,
        *,
        config: Optional[ClientConfig] = None,
        global_config: Optional[GlobalConfig] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            headers: Заголовки по умолчанию (игнорируется, если указан config)
            config: ClientConfig instance
            global_config: Общий GlobalConfig (по умолчанию - процессный)
            transport: Готовый Transport (по умолчанию создаётся свой)

        Raises:
            ValueError: global_config и transport.global_config - разные объекты
        """
        if config is None:
            config = ClientConfig.create(headers=headers)

        self._config = config
        if global_config is None:
            global_config = transport.global_config if transport else get_global_config()
        elif transport is not None and transport.global_config is not global_config:
            # Токен и таймаут/сертификаты должны браться из одного объекта
            raise ValueError("global_config must be the same object the transport uses")

        self._global_config = global_config
        self._owns_transport = transport is None
        self._transport = transport or Transport(
            global_config=self._global_config,
            verify_ssl=config.verify_ssl,
            follow_redirects=config.follow_redirects,
        )
        self._headers = HeaderInjector(config.headers, self._global_config)

        self.success = Signal("success")
        self.error = Signal("error")

        self._logger = None
        if config.logging:
            from .logging import ClientLogger
            logger_name = "duplex_http.client"
            if config.base_url:
                domain = urlparse(config.base_url).netloc
                if domain:
                    logger_name = f"duplex_http.{domain}"
            self._logger = ClientLogger(config=config.logging, name=logger_name)

        self._sync_waiter = SyncWaiter(self._transport, self._logger)

    # ==================== Properties ====================

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def global_config(self) -> GlobalConfig:
        return self._global_config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def headers(self) -> Dict[str, str]:
        """Заголовки по умолчанию (копия)."""
        return dict(self._config.headers)

    # ==================== Управление жизненным циклом ====================

    def close(self) -> None:
        """
        Закрывает транспорт (если клиент им владеет) и логгер.

        Незавершённые асинхронные запросы завершаются событием error.
        """
        if self._owns_transport:
            self._transport.close()
        if self._logger is not None:
            self._logger.close()

    def __enter__(self) -> 'HTTPClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ==================== Внутренние методы ====================

    def _build_url(self, url: str) -> str:
        """
        Строит полный URL из base_url и endpoint.

        Абсолютные URL и клиенты без base_url используют url как есть.
        """
        base = self._config.base_url
        if not base or url.startswith(("http://", "https://")):
            return url
        return f"{base}/{url.lstrip('/')}"

    def _build_request(self, method: str, url: str, data: Body) -> Request:
        method = method.upper()
        if data is not None and method not in BODY_METHODS:
            raise ValueError(f"{method} requests do not take a body")

        request = Request.build(method, self._build_url(url), data, self._headers.build())

        if self._logger:
            self._logger.debug(
                "Request submitted",
                method=request.method,
                url=mask_url(request.url),
                headers=mask_headers(request.headers),
                body_size=len(request.body) if request.body is not None else 0,
            )
        return request

    # ==================== Асинхронные методы ====================

    def request(self, method: str, url: str, data: Body = None) -> concurrent.futures.Future:
        """
        Отправить запрос без ожидания.

        Args:
            method: HTTP метод (GET, HEAD, POST, PUT, PATCH, DELETE)
            url: URL (не проверяется до выполнения)
            data: Тело для POST/PUT/PATCH

        Returns:
            Future, который разрешается Outcome после рассылки события

        Raises:
            ValueError: Неподдерживаемый метод или тело для метода без тела
            RuntimeError: Клиент закрыт
        """
        request = self._build_request(method, url, data)
        handler = AsyncCompletionHandler(self._transport, self.success, self.error, self._logger)
        self._transport.submit(request, callback=handler)
        return handler.future

    def get(self, url: str) -> concurrent.futures.Future:
        """GET запрос (асинхронно)."""
        return self.request("GET", url)

    def head(self, url: str) -> concurrent.futures.Future:
        """HEAD запрос (асинхронно)."""
        return self.request("HEAD", url)

    def post(self, url: str, data: Body = b"") -> concurrent.futures.Future:
        """POST запрос (асинхронно)."""
        return self.request("POST", url, data)

    def put(self, url: str, data: Body = b"") -> concurrent.futures.Future:
        """PUT запрос (асинхронно)."""
        return self.request("PUT", url, data)

    def patch(self, url: str, data: Body = b"") -> concurrent.futures.Future:
        """PATCH запрос (асинхронно)."""
        return self.request("PATCH", url, data)

    def delete(self, url: str) -> concurrent.futures.Future:
        """DELETE запрос (асинхронно)."""
        return self.request("DELETE", url)

    # ==================== Синхронные методы ====================

    def request_sync(self, method: str, url: str, data: Body = None) -> bytes:
        """
        Отправить запрос и дождаться ответа.

        Returns:
            Тело ответа

        Raises:
            TransportError: Ответа нет (status_code=0)
            HttpStatusError: Статус > 300
            RuntimeError: Вызов из обработчика события (поток транспорта)
        """
        self._sync_waiter.check_caller()
        request = self._build_request(method, url, data)
        operation = self._transport.submit(request)
        return self._sync_waiter.wait(operation)

    def request_outcome(self, method: str, url: str, data: Body = None) -> Outcome:
        """
        Блокирующий запрос без исключений для неуспешного результата.

        Example:
            >>> outcome = client.request_outcome("GET", "https://api.example.com/items")
            >>> if outcome.ok:
            ...     process(outcome.body)
            ... else:
            ...     print(outcome.status_code, outcome.error.message)

        Raises:
            ValueError: Неподдерживаемый метод или тело для метода без тела
            RuntimeError: Вызов из обработчика события (поток транспорта)
        """
        self._sync_waiter.check_caller()
        request = self._build_request(method, url, data)
        operation = self._transport.submit(request)
        return self._sync_waiter.wait_outcome(operation)

    def get_sync(self, url: str) -> bytes:
        """GET запрос (блокирующий)."""
        return self.request_sync("GET", url)

    def head_sync(self, url: str) -> bytes:
        """HEAD запрос (блокирующий)."""
        return self.request_sync("HEAD", url)

    def post_sync(self, url: str, data: Body = b"") -> bytes:
        """POST запрос (блокирующий)."""
        return self.request_sync("POST", url, data)

    def put_sync(self, url: str, data: Body = b"") -> bytes:
        """PUT запрос (блокирующий)."""
        return self.request_sync("PUT", url, data)

    def patch_sync(self, url: str, data: Body = b"") -> bytes:
        """PATCH запрос (блокирующий)."""
        return self.request_sync("PATCH", url, data)

    def delete_sync(self, url: str) -> bytes:
        """DELETE запрос (блокирующий)."""
        return self.request_sync("DELETE", url)

    # ==================== File Download ====================

    def download_sync(self, url: str, file_path: str) -> int:
        """
        Скачать ответ GET запроса в файл.

        Args:
            url: URL для загрузки
            file_path: Путь для сохранения файла

        Returns:
            Всего байт записано

        Raises:
            NetworkError: Запрос не удался (файл не создаётся)
            OSError: Ошибка записи файла
        """
        data = self.get_sync(url)
        return write_file(file_path, data)

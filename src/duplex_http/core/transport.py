# src/duplex_http/core/transport.py
"""
Single network engine owned by an HTTPClient.

One asyncio event loop runs on one dedicated daemon thread and drives an
httpx.AsyncClient. Every operation completes on that thread, so completion
callbacks never run concurrently with each other and are delivered in the
order the network finishes them. There is no worker pool.

Callers on other threads submit work with :meth:`Transport.submit` and wait
on the operation's own completion event.
"""

import asyncio
import logging
import threading
from typing import Callable, Dict, List, Optional, Set

import httpx

from .exceptions import TransportError
from .global_config import GlobalConfig, get_global_config
from .operation import InFlightOperation
from .request import Request

logger = logging.getLogger(__name__)


class Transport:
    """
    Event-loop driven executor for InFlightOperations.

    Args:
        global_config: Shared config (trust store, timeout). Read per request.
        verify_ssl: Verify server certificates
        follow_redirects: Follow 3xx responses that carry a Location

    Example:
        >>> transport = Transport()
        >>> op = transport.submit(Request.build("GET", "https://example.com"))
        >>> op.wait(5)
        True
        >>> op.status_code
        200
        >>> op.dispose()
        >>> transport.close()
    """

    def __init__(
        self,
        global_config: Optional[GlobalConfig] = None,
        verify_ssl: bool = True,
        follow_redirects: bool = True,
    ):
        self._global_config = global_config or get_global_config()
        self._verify_ssl = verify_ssl
        self._follow_redirects = follow_redirects

        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._closed = False

        # Touched only from the loop thread
        self._client: Optional[httpx.AsyncClient] = None
        self._client_trust_version = -1
        self._retired_clients: List[httpx.AsyncClient] = []
        self._client_users: Dict[httpx.AsyncClient, int] = {}
        self._tasks: Dict[asyncio.Task, InFlightOperation] = {}

        # Submitted but not yet disposed
        self._in_flight: Set[InFlightOperation] = set()

    @property
    def global_config(self) -> GlobalConfig:
        return self._global_config

    @property
    def closed(self) -> bool:
        return self._closed

    # ==================== Event loop thread ====================

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        """Start the loop thread on first use. Caller holds self._lock."""
        if self._loop is None:
            loop = asyncio.new_event_loop()
            started = threading.Event()

            def run():
                asyncio.set_event_loop(loop)
                loop.call_soon(started.set)
                loop.run_forever()

            self._thread = threading.Thread(
                target=run,
                name=f"Transport-{id(self):x}",
                daemon=True,
            )
            self._thread.start()
            started.wait()
            self._loop = loop
            logger.debug("Transport loop started (%s)", self._thread.name)
        return self._loop

    def in_loop_thread(self) -> bool:
        """True when called from this transport's completion thread."""
        return self._thread is not None and threading.current_thread() is self._thread

    def call_soon(self, callback: Callable[..., None], *args) -> None:
        """
        Queue callback on the loop, after the currently running callback.

        Used to defer disposal out of a completion callback.
        """
        if self._loop is None:
            raise RuntimeError("Transport loop is not running")
        if self.in_loop_thread():
            self._loop.call_soon(callback, *args)
        else:
            self._loop.call_soon_threadsafe(callback, *args)

    # ==================== httpx client ====================

    async def _acquire_client(self) -> httpx.AsyncClient:
        """
        Получить или пересоздать httpx клиент (только из loop потока).

        При смене trust store старый клиент закрывается сразу, если через
        него ничего не выполняется, иначе после последнего запроса.
        """
        trust_version = self._global_config.trust_version

        if self._client is None or trust_version != self._client_trust_version:
            previous = self._client

            verify = self._global_config.create_ssl_context() if self._verify_ssl else False
            self._client = httpx.AsyncClient(
                verify=verify,
                follow_redirects=self._follow_redirects,
                timeout=None,
            )
            self._client_trust_version = trust_version

            if previous is not None:
                logger.debug("Trust store changed, rebuilding transport client")
                if self._client_users.get(previous):
                    self._retired_clients.append(previous)
                else:
                    await previous.aclose()

        client = self._client
        self._client_users[client] = self._client_users.get(client, 0) + 1
        return client

    async def _release_client(self, client: httpx.AsyncClient) -> None:
        users = self._client_users.pop(client) - 1
        if users:
            self._client_users[client] = users
        elif client in self._retired_clients:
            self._retired_clients.remove(client)
            await client.aclose()
            logger.debug("Retired transport client closed")

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self._global_config.timeout)

    # ==================== Submission ====================

    def submit(
        self,
        request: Request,
        callback: Optional[Callable[[InFlightOperation], None]] = None,
    ) -> InFlightOperation:
        """
        Schedule request and return its handle immediately.

        The URL is not validated here; bad URLs complete as a transport error.

        Args:
            request: Request to execute
            callback: Called once with the operation on completion,
                on the loop thread

        Raises:
            RuntimeError: Transport is closed
        """
        operation = InFlightOperation(request, self)
        if callback is not None:
            operation.add_done_callback(callback)

        with self._lock:
            if self._closed:
                raise RuntimeError("Transport is closed")
            loop = self._ensure_loop()
            self._in_flight.add(operation)
            # Scheduled under the lock so close() always queues after it
            loop.call_soon_threadsafe(self._start, operation)

        return operation

    def _start(self, operation: InFlightOperation) -> None:
        task = self._loop.create_task(self._execute(operation))
        self._tasks[task] = operation
        task.add_done_callback(lambda t: self._tasks.pop(t, None))

    async def _execute(self, operation: InFlightOperation) -> None:
        request = operation.request
        response: Optional[httpx.Response] = None
        error: Optional[Exception] = None
        client: Optional[httpx.AsyncClient] = None

        try:
            client = await self._acquire_client()
            response = await client.request(
                request.method,
                request.url,
                content=request.body,
                headers=dict(request.headers),
                timeout=self._timeout(),
            )
        except Exception as e:
            error = e

        self._finish(operation, response, error)
        if client is not None:
            await self._release_client(client)

    def _finish(
        self,
        operation: InFlightOperation,
        response: Optional[httpx.Response],
        error: Optional[Exception],
    ) -> None:
        try:
            operation._complete(response, error)
        except Exception:
            logger.exception("Completion callback failed for %r", operation)

    def _release(self, operation: InFlightOperation) -> None:
        """Called by InFlightOperation.dispose()."""
        with self._lock:
            self._in_flight.discard(operation)

    def pending_count(self) -> int:
        """Number of submitted operations not yet disposed."""
        with self._lock:
            return len(self._in_flight)

    # ==================== Lifecycle ====================

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until callbacks already queued on the loop have run."""
        if self._loop is None or self._closed:
            return
        if self.in_loop_thread():
            raise RuntimeError("flush() cannot be called from the transport thread")
        asyncio.run_coroutine_threadsafe(asyncio.sleep(0), self._loop).result(timeout)

    async def _shutdown(self) -> None:
        tasks = dict(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        # A task canceled before its first step never ran its body
        for operation in tasks.values():
            if not operation.done():
                self._finish(
                    operation,
                    None,
                    TransportError("Operation canceled: transport closed", operation.request.url),
                )

        # Let deferred disposals queued by completion handlers run
        await asyncio.sleep(0)

        clients = self._retired_clients + ([self._client] if self._client else [])
        for client in clients:
            await client.aclose()
        self._client = None
        self._retired_clients.clear()
        self._client_users.clear()

    def close(self) -> None:
        """
        Stop the loop and release network resources. Idempotent.

        Operations still running complete as TransportError (status 0),
        so their handlers still fire exactly once.

        Raises:
            RuntimeError: Called from the transport thread itself
        """
        with self._lock:
            if self._closed:
                return
            if self.in_loop_thread():
                raise RuntimeError("Transport cannot be closed from its own completion thread")
            self._closed = True
            loop, thread = self._loop, self._thread

        if loop is None:
            return

        try:
            asyncio.run_coroutine_threadsafe(self._shutdown(), loop).result()
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()
            logger.debug("Transport loop stopped (%s)", thread.name)

    def __enter__(self) -> 'Transport':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

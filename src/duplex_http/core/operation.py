"""
Handle of one submitted request between submission and disposal.
"""

import threading
import time
import uuid
from typing import Callable, List, Optional, TYPE_CHECKING

import httpx

from .request import Request

if TYPE_CHECKING:
    from .transport import Transport


class InFlightOperation:
    """
    Live transport state of one Request.

    Owned by exactly one delivery path (async or sync). The owner observes
    completion once and then calls :meth:`dispose` exactly once.

    Completion is published through a per-operation ``threading.Event``, so a
    blocking waiter wakes up only for its own operation.

    Attributes:
        request: Submitted request
        operation_id: Unique id (used in logs)
        submitted_at: time.monotonic() at submission
    """

    def __init__(self, request: Request, transport: 'Transport'):
        self.request = request
        self.operation_id = uuid.uuid4().hex
        self.submitted_at = time.monotonic()
        self.completed_at: Optional[float] = None

        self._transport = transport
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._callbacks: List[Callable[['InFlightOperation'], None]] = []

        self._response: Optional[httpx.Response] = None
        self._transport_error: Optional[Exception] = None
        self._completed = False
        self._disposed = False

    # ==================== Completion (transport side) ====================

    def _complete(
        self,
        response: Optional[httpx.Response] = None,
        error: Optional[Exception] = None,
    ) -> None:
        """
        Record the terminal state. Called once by the transport loop.

        Signals waiters first, then runs completion callbacks in order.
        """
        with self._lock:
            if self._completed:
                raise RuntimeError(f"Operation {self.operation_id} already completed")
            self._response = response
            self._transport_error = error
            self._completed = True
            self.completed_at = time.monotonic()
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        self._done.set()

        for callback in callbacks:
            callback(self)

    def add_done_callback(self, callback: Callable[['InFlightOperation'], None]) -> None:
        """
        Run callback(operation) on completion (on the transport loop thread).

        Must be attached before the operation is scheduled;
        Transport.submit() does this for its ``callback`` argument.
        """
        with self._lock:
            if self._completed:
                raise RuntimeError(f"Operation {self.operation_id} already completed")
            self._callbacks.append(callback)

    # ==================== Waiting ====================

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until this operation completes.

        Returns:
            True if completed, False on timeout
        """
        return self._done.wait(timeout)

    # ==================== Result access ====================

    def _check_readable(self) -> None:
        if self._disposed:
            raise RuntimeError(f"Operation {self.operation_id} is disposed")
        if not self._completed:
            raise RuntimeError(f"Operation {self.operation_id} is still in flight")

    @property
    def transport_error(self) -> Optional[Exception]:
        self._check_readable()
        return self._transport_error

    @property
    def status_code(self) -> int:
        """HTTP status, 0 when no response was received."""
        self._check_readable()
        return self._response.status_code if self._response is not None else 0

    @property
    def body(self) -> bytes:
        self._check_readable()
        return self._response.content if self._response is not None else b""

    @property
    def response(self) -> Optional[httpx.Response]:
        self._check_readable()
        return self._response

    @property
    def duration(self) -> Optional[float]:
        if self.completed_at is None:
            return None
        return self.completed_at - self.submitted_at

    # ==================== Disposal ====================

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """
        Release the response and unregister from the transport.

        Raises:
            RuntimeError: Operation not completed yet, or disposed already
        """
        with self._lock:
            if not self._completed:
                raise RuntimeError(f"Operation {self.operation_id} is still in flight")
            if self._disposed:
                raise RuntimeError(f"Operation {self.operation_id} already disposed")
            self._disposed = True
            self._response = None
            self._transport_error = None

        self._transport._release(self)

    def __repr__(self) -> str:
        if self._disposed:
            state = "disposed"
        elif self._completed:
            state = "completed"
        else:
            state = "in-flight"
        return f"<InFlightOperation {self.request.method} {self.request.url} {state}>"

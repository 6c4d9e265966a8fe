# src/duplex_http/core/completion.py
"""
Доставка результата запроса вызывающему коду.

- AsyncCompletionHandler: на потоке транспорта классифицирует результат,
  шлёт событие success/error наблюдателям и отложенно освобождает операцию.
- SyncWaiter: блокирует вызывающий поток до завершения именно этой операции,
  освобождает её и возвращает тело или выбрасывает NetworkError.
"""

import concurrent.futures
from typing import Optional, TYPE_CHECKING

from .operation import InFlightOperation
from .outcome import Outcome, classify
from .signals import Signal
from .transport import Transport
from ..utils.sanitizer import mask_url

if TYPE_CHECKING:
    from .logging import ClientLogger


def _classify_operation(operation: InFlightOperation) -> Outcome:
    return classify(
        operation.transport_error,
        operation.status_code,
        operation.body,
        operation.request.url,
    )


def _log_outcome(
    logger: Optional['ClientLogger'],
    operation: InFlightOperation,
    outcome: Outcome,
    mode: str,
) -> None:
    if logger is None:
        return

    fields = dict(
        method=operation.request.method,
        url=mask_url(operation.request.url),
        status_code=outcome.status_code,
        duration_ms=round((operation.duration or 0) * 1000, 2),
        operation_id=operation.operation_id,
        mode=mode,
    )

    if outcome.ok:
        logger.info("Request completed", body_size=len(outcome.body), **fields)
    else:
        logger.warning(
            "Request failed",
            error_type=type(outcome.error).__name__,
            error=str(outcome.error)[:200],
            **fields
        )


class AsyncCompletionHandler:
    """
    Completion callback of one asynchronous request.

    Runs exactly once on the transport loop thread:

    1. classifies the operation;
    2. emits ``success(body)`` or ``error(body)`` to the client's observers
       (the error event carries the raw body, not the status code);
    3. queues disposal of the operation on the loop, then resolves
       :attr:`future` with the Outcome.

    If classification itself fails, the operation is still disposed and
    :attr:`future` fails with that exception.

    Args:
        transport: Transport that runs the operation
        success: Signal emitted for successful outcomes
        error: Signal emitted for failed outcomes
        logger: Optional structured logger
    """

    def __init__(
        self,
        transport: Transport,
        success: Signal,
        error: Signal,
        logger: Optional['ClientLogger'] = None,
    ):
        self._transport = transport
        self._success = success
        self._error = error
        self._logger = logger
        self._fired = False

        self._future: concurrent.futures.Future = concurrent.futures.Future()
        # Cancellation is not supported; a running future cannot be cancelled
        self._future.set_running_or_notify_cancel()

    @property
    def future(self) -> concurrent.futures.Future:
        """Resolves with the Outcome after observers ran and the operation was disposed."""
        return self._future

    def __call__(self, operation: InFlightOperation) -> None:
        if self._fired:
            raise RuntimeError(f"Completion for {operation.operation_id} already handled")
        self._fired = True

        outcome: Optional[Outcome] = None
        failure: Optional[Exception] = None
        try:
            outcome = _classify_operation(operation)
            _log_outcome(self._logger, operation, outcome, mode="async")
            if outcome.ok:
                self._success.emit(outcome.body)
            else:
                self._error.emit(outcome.body)
        except Exception as e:
            failure = e
            raise
        finally:
            # The operation must outlive this callback
            self._transport.call_soon(self._finalize, operation, outcome, failure)

    def _finalize(
        self,
        operation: InFlightOperation,
        outcome: Optional[Outcome],
        failure: Optional[Exception],
    ) -> None:
        try:
            operation.dispose()
        finally:
            if outcome is None:
                # Классификация упала: future всё равно должен завершиться
                self._future.set_exception(failure or RuntimeError("Completion handler aborted"))
            else:
                self._future.set_result(outcome)


class SyncWaiter:
    """
    Blocking delivery for synchronous requests.

    Waits on the operation's own completion event, so completions of other
    operations on the same transport never run inside this call.
    """

    def __init__(self, transport: Transport, logger: Optional['ClientLogger'] = None):
        self._transport = transport
        self._logger = logger

    def check_caller(self) -> None:
        """
        Refuse to block the transport thread.

        Call before submitting: a sync request issued from an observer
        would wait for a completion that only this thread can deliver.

        Raises:
            RuntimeError: Called from the transport loop thread
        """
        if self._transport.in_loop_thread():
            raise RuntimeError(
                "Synchronous requests cannot be made from a completion callback; "
                "use the asynchronous methods instead"
            )

    def wait_outcome(self, operation: InFlightOperation) -> Outcome:
        """
        Block until operation completes, dispose it, return the Outcome.

        Never raises NetworkError; the caller branches on ``outcome.ok``.
        """
        operation.wait()

        try:
            outcome = _classify_operation(operation)
        finally:
            operation.dispose()

        _log_outcome(self._logger, operation, outcome, mode="sync")
        return outcome

    def wait(self, operation: InFlightOperation) -> bytes:
        """
        Block until operation completes, dispose it, return the body.

        Raises:
            NetworkError: TransportError (status 0) or HttpStatusError (> 300)
        """
        return self.wait_outcome(operation).unwrap()

"""
Minimal observer list used for the client's success/error events.
"""

import logging
import threading
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class Signal:
    """
    Observers connected to one event.

    emit() calls every observer connected at that moment, synchronously,
    in connection order. An observer that raises is logged and skipped;
    the remaining observers still run.

    Example:
        >>> client.success.connect(lambda body: print(body))
        >>> client.error.connect(handle_error)
    """

    def __init__(self, name: str):
        self.name = name
        self._lock = threading.Lock()
        self._observers: List[Callable[..., Any]] = []

    def connect(self, observer: Callable[..., Any]) -> Callable[..., Any]:
        """
        Add an observer. Returns it, so it can be used as a decorator.
        """
        if not callable(observer):
            raise TypeError("observer must be callable")
        with self._lock:
            self._observers.append(observer)
        return observer

    def disconnect(self, observer: Callable[..., Any]) -> None:
        """Remove an observer; unknown observers are ignored."""
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def disconnect_all(self) -> None:
        with self._lock:
            self._observers.clear()

    @property
    def observers(self) -> List[Callable[..., Any]]:
        with self._lock:
            return list(self._observers)

    def emit(self, *args: Any) -> int:
        """
        Notify observers.

        Returns:
            Number of observers that completed without raising
        """
        delivered = 0
        for observer in self.observers:
            try:
                observer(*args)
                delivered += 1
            except Exception as e:
                logger.warning(f"Observer {observer!r} of '{self.name}' failed: {e}")
        return delivered

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def __repr__(self) -> str:
        return f"<Signal {self.name} observers={len(self)}>"

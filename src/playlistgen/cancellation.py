"""Cooperative cancellation shared by every stage of one run."""

import threading
from typing import Callable, List, Optional

from .errors import OperationCancelled
from .logging_config import get_logger

logger = get_logger(__name__)

Listener = Callable[[], None]


class CancellationToken:
    """A one-shot cancellation signal with listeners.

    Stages poll :meth:`raise_if_cancelled` between units of work; in-flight
    calls register a listener to be told when the signal is set.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Operation cancelled by user") -> None:
        """Set the signal and notify listeners. Later calls do nothing."""
        with self._lock:
            if self._event.is_set():
                return
            self.reason = reason
            self._event.set()
            listeners = list(self._listeners)
            self._listeners.clear()

        logger.debug("Cancellation requested: %s", reason)
        for listener in listeners:
            self._notify(listener)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; it runs at once if already cancelled.

        Returns:
            Callable that unregisters the listener
        """
        with self._lock:
            already_cancelled = self._event.is_set()
            if not already_cancelled:
                self._listeners.append(listener)

        if already_cancelled:
            self._notify(listener)

        return lambda: self.remove_listener(listener)

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelled if the signal is set."""
        if self._event.is_set():
            raise OperationCancelled()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on cancellation.

        Returns:
            True if cancelled
        """
        return self._event.wait(timeout)

    @staticmethod
    def _notify(listener: Listener) -> None:
        try:
            listener()
        except Exception as e:
            logger.error("Cancellation listener failed: %s", str(e))

"""Cooperative cancellation shared between a caller and an update."""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class UpdateCancelledError(Exception):
    """Update was cancelled before it could be scheduled."""

    pass


class CancellationRegistration:
    """Handle for a callback registered on a CancellationToken.

    Can be used as a context manager; leaving the block unregisters the
    callback.
    """

    def __init__(self, token: CancellationToken, callback: Callable[[], None]) -> None:
        self._token = token
        self._callback = callback

    def unregister(self) -> None:
        """Remove the callback. Safe to call more than once."""
        self._token._remove(self)

    def __enter__(self) -> CancellationRegistration:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unregister()


class CancellationToken:
    """A flag that the caller may trigger at any time.

    Callbacks registered with `register()` run at most once, on the thread
    that calls `cancel()`, or immediately if the token is already cancelled.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._registrations: list[CancellationRegistration] = []

    @classmethod
    def none(cls) -> CancellationToken:
        """Create a token nobody will cancel."""
        return cls()

    @property
    def is_cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation and run registered callbacks."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            pending = self._registrations
            self._registrations = []

        for registration in pending:
            self._run(registration)

    def register(self, callback: Callable[[], None]) -> CancellationRegistration:
        """Register a callback to run when the token is cancelled.

        Args:
            callback: Zero-argument callable.

        Returns:
            Registration handle used to remove the callback.
        """
        registration = CancellationRegistration(self, callback)
        with self._lock:
            if not self._event.is_set():
                self._registrations.append(registration)
                return registration

        self._run(registration)
        return registration

    def raise_if_cancelled(self) -> None:
        """Raise UpdateCancelledError if cancellation was requested."""
        if self.is_cancelled:
            raise UpdateCancelledError("Update was cancelled")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or until timeout elapses."""
        return self._event.wait(timeout)

    def _remove(self, registration: CancellationRegistration) -> None:
        with self._lock:
            if registration in self._registrations:
                self._registrations.remove(registration)

    def _run(self, registration: CancellationRegistration) -> None:
        try:
            registration._callback()
        except Exception:
            logger.debug("Cancellation callback failed", exc_info=True)

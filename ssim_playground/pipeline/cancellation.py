from __future__ import annotations

import threading
import time

from ..errors import ComparisonCancelledError, ComparisonTimeoutError


class Deadline:
    """
    Cooperative cancellation for one comparison.
    Call check() between array operations; it raises once the caller's event
    is set or the timeout has elapsed.
    """

    def __init__(self, timeout: float | None = None, cancel_event: threading.Event | None = None):
        if timeout is not None and timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.timeout = timeout
        self.cancel_event = cancel_event
        self._expires_at = time.monotonic() + timeout if timeout is not None else None

    def check(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ComparisonCancelledError("Comparison cancelled by caller")
        if self._expires_at is not None and time.monotonic() >= self._expires_at:
            raise ComparisonTimeoutError(f"Comparison exceeded {self.timeout}s")

    def __call__(self) -> None:
        self.check()

"""Deadline / cancellation signal for long candidate scans."""

from __future__ import annotations
import threading
import time
from typing import Callable, Optional


class Deadline:
    """Time budget that can also be cancelled explicitly.

    A deadline is cheap to poll and safe to share between threads: one thread
    may call :meth:`cancel` while another is scanning candidates.

    Example usage:
        deadline = Deadline(timeout=2.0)
        results = ranker.find_matches(item, candidates, deadline=deadline)
        if deadline.expired():
            ...  # results are partial
    """

    def __init__(self, timeout: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._expires_at = clock() + timeout if timeout is not None else None
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def expired(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._expires_at is not None and self._clock() >= self._expires_at


__all__ = ["Deadline"]

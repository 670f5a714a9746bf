"""
SpinLock: busy-wait mutual exclusion with cooperative yielding.

The atomic test-and-set is a non-blocking acquire on a threading.Lock.
Every failed attempt gives up the rest of the scheduling quantum with
time.sleep(0); there is no backoff, timeout or fairness.

acquire_checked()/release_checked() add a hold counter on top of the spin
and raise TooManyLocks whenever it is not exactly 1 while held. The
counter is a diagnostic: the spin provides the exclusion.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Protocol

from tasklog.errors import TooManyLocks


class Tracer(Protocol):
    def devel(self, *parts: Any, context: Any = None) -> None: ...


class AtomicCounter:
    """Integer counter whose updates are indivisible."""

    def __init__(self, value: int = 0):
        self._value = value
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def decrement(self) -> int:
        with self._lock:
            self._value -= 1
            return self._value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter({self._value})"


class SpinLock:
    """
    Busy-wait lock.

    Usage:
        lock = SpinLock()
        with lock:
            ...
        lock.acquire_checked(ctx)
        try:
            ...
        finally:
            lock.release_checked(ctx)
    """

    def __init__(self, tracer: Tracer | None = None):
        self._flag = threading.Lock()
        self._holds = AtomicCounter()
        self._tracer = tracer

    # ── Silent variants ───────────────────────────────────────────

    def try_acquire(self) -> bool:
        return self._flag.acquire(blocking=False)

    def acquire(self) -> None:
        while not self._flag.acquire(blocking=False):
            time.sleep(0)

    def release(self) -> None:
        self._flag.release()

    def __enter__(self) -> "SpinLock":
        self.acquire()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()

    @property
    def locked(self) -> bool:
        return self._flag.locked()

    @property
    def hold_count(self) -> int:
        return self._holds.value

    # ── Checked variants ──────────────────────────────────────────

    def acquire_checked(self, context: Any = None) -> None:
        """
        Spin for the lock, then bump the hold counter.
        Raises TooManyLocks if the counter is not 1 afterwards; the lock is
        released again before raising.
        """
        self._trace("Acquiring lock", context)
        self.acquire()
        count = self._holds.increment()
        if count != 1:
            self._holds.decrement()
            self.release()
            raise TooManyLocks(count, "acquire")
        self._trace("Lock acquired", context)

    def release_checked(self, context: Any = None) -> None:
        """Drop the hold counter and the lock. Raises TooManyLocks if not held once."""
        count = self._holds.value
        if count != 1:
            raise TooManyLocks(count, "release")
        self._holds.decrement()
        self.release()
        self._trace("Lock released", context)

    def _trace(self, message: str, context: Any) -> None:
        if self._tracer is not None and context is not None:
            self._tracer.devel(message, context=context)

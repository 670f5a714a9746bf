"""
ReadWriteLock built from one SpinLock and two atomic counters.

A pending writer blocks new readers through writer_intent but waits for
readers that are already in to drain. Writers can starve under a steady
stream of readers; readers are not queued.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from tasklog.sync.spinlock import AtomicCounter, SpinLock


class ReadWriteLock:
    """
    Usage:
        rw = ReadWriteLock()
        with rw.read_locked():
            ...
        with rw.write_locked():
            ...
    """

    def __init__(self) -> None:
        self._lock = SpinLock()
        self._readers = AtomicCounter()
        self._writer_intent = AtomicCounter()

    @property
    def reader_count(self) -> int:
        return self._readers.value

    @property
    def writer_intent(self) -> int:
        return self._writer_intent.value

    def acquire_read(self) -> None:
        while True:
            while self._writer_intent.value > 0:
                time.sleep(0)
            self._readers.increment()
            # A writer that announced itself meanwhile may already have seen zero readers
            if self._writer_intent.value == 0:
                return
            self._readers.decrement()

    def release_read(self) -> None:
        self._readers.decrement()

    def acquire_write(self) -> None:
        self._writer_intent.increment()
        while self._readers.value != 0:
            time.sleep(0)
        self._lock.acquire()

    def release_write(self) -> None:
        self._writer_intent.decrement()
        self._lock.release()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

"""
Synchronization primitives used by the logger.

SpinLock guards the logger's destination registry. ReadWriteLock is
exposed for other shared state.
"""

from tasklog.sync.spinlock import AtomicCounter, SpinLock
from tasklog.sync.rwlock import ReadWriteLock

__all__ = ["AtomicCounter", "SpinLock", "ReadWriteLock"]

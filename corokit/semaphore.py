"""A counting semaphore for coroutines."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Optional

from corokit.sync_wait import CoroutineHandle, suspend


class AcquireResult(Enum):
    ACQUIRED = "acquired"
    SEMAPHORE_STOPPED = "semaphore_stopped"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class Semaphore:
    """Counting semaphore whose waiters are suspended coroutines.

    Waiters are resumed last in, first out; the semaphore is not fair.
    A released unit goes straight to a waiting coroutine when there is one.
    """

    def __init__(self, least_max_value: int, starting_value: Optional[int] = None) -> None:
        if starting_value is None:
            starting_value = least_max_value
        self._least_max_value = least_max_value
        self._counter = min(starting_value, least_max_value)
        self._lock = threading.Lock()
        self._waiters: list[CoroutineHandle] = []
        self._stopped = False

    async def acquire(self) -> AcquireResult:
        """Take one unit, waiting if none is free."""
        if self._stopped:
            return AcquireResult.SEMAPHORE_STOPPED
        if self.try_acquire():
            return AcquireResult.ACQUIRED
        await suspend(self._enqueue)
        if self._stopped:
            return AcquireResult.SEMAPHORE_STOPPED
        return AcquireResult.ACQUIRED

    def _enqueue(self, handle: CoroutineHandle) -> bool:
        with self._lock:
            if self._stopped or self._take():
                return False
            self._waiters.append(handle)
            return True

    def _take(self) -> bool:
        if self._counter > 0:
            self._counter -= 1
            return True
        return False

    def release(self) -> None:
        """Give one unit back, handing it to a waiter if there is one."""
        with self._lock:
            if not self._waiters:
                self._counter += 1
                return
            to_resume = self._waiters.pop()
        to_resume.resume()

    def try_acquire(self) -> bool:
        """Take one unit if one is free, without waiting."""
        with self._lock:
            return self._take()

    def notify_waiters(self) -> None:
        """Stop the semaphore and resume every waiter with a stopped result."""
        self._stopped = True
        while True:
            with self._lock:
                if not self._waiters:
                    return
                to_resume = self._waiters.pop()
            to_resume.resume()

    def value(self) -> int:
        """The number of units currently free."""
        with self._lock:
            return self._counter
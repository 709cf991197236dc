"""A pool of worker threads that resumes coroutines scheduled onto it."""

from __future__ import annotations

import os
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Optional

from corokit.sync_wait import CoroutineHandle, suspend


def _default_thread_count() -> int:
    return os.cpu_count() or 1


@dataclass
class ThreadPoolOptions:
    """How many workers to run and what each runs when it starts and stops."""

    thread_count: int = field(default_factory=_default_thread_count)
    on_thread_start: Optional[Callable[[int], Any]] = None
    on_thread_stop: Optional[Callable[[int], Any]] = None

    def __post_init__(self) -> None:
        if self.thread_count < 0:
            raise ValueError("thread_count cannot be negative")


class ThreadPoolShutdownError(RuntimeError):
    """Raised when work is scheduled on a pool that is shutting down."""


class _ScheduleOperation:
    """Awaiting it moves the awaiting coroutine onto a pool worker."""

    __slots__ = ("_pool",)

    def __init__(self, pool: "ThreadPool") -> None:
        self._pool = pool

    def __await__(self):
        return suspend(self._pool._enqueue).__await__()


class ThreadPool:
    """Worker threads that resume queued coroutine handles in FIFO order."""

    def __init__(self, options: Optional[ThreadPoolOptions] = None) -> None:
        self._options = options if options is not None else ThreadPoolOptions()
        self._cond = threading.Condition()
        self._queue: deque[CoroutineHandle] = deque()
        self._stop = False
        self._size = 0
        self._size_lock = threading.Lock()
        self._shutdown_lock = threading.Lock()
        self._shutdown_requested = False
        self._threads = [
            threading.Thread(target=self._executor, args=(idx,), name=f"thread-pool-{idx}", daemon=True)
            for idx in range(self._options.thread_count)
        ]
        for thread in self._threads:
            thread.start()

    def schedule(self, func: Optional[Callable[..., Any]] = None, *args: Any) -> Any:
        """Without ``func``: an awaitable that moves the caller onto the pool.

        With ``func``: a coroutine that runs ``func(*args)`` on the pool and returns its result.
        """
        if func is None:
            if self._shutdown_requested:
                raise ThreadPoolShutdownError("thread pool is shutting down, unable to schedule new tasks")
            self._add_size(1)
            return _ScheduleOperation(self)
        return self._call_on_pool(func, args)

    async def _call_on_pool(self, func: Callable[..., Any], args: tuple) -> Any:
        await self.schedule()
        return func(*args)

    def resume(self, handle: Optional[CoroutineHandle]) -> None:
        """Queue an already suspended coroutine to be resumed on a worker."""
        if handle is None:
            return
        self._add_size(1)
        self._enqueue(handle)

    def shutdown(self) -> None:
        """Stop accepting work, let workers drain the queue and join them. Runs once."""
        with self._shutdown_lock:
            if self._shutdown_requested:
                return
            self._shutdown_requested = True
        with self._cond:
            self._stop = True
            self._cond.notify_all()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def size(self) -> int:
        """Number of scheduled coroutines not yet resumed to their next suspension."""
        with self._size_lock:
            return self._size

    def empty(self) -> bool:
        return self.size() == 0

    def thread_count(self) -> int:
        return self._options.thread_count

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    def _add_size(self, delta: int) -> None:
        with self._size_lock:
            self._size += delta

    def _enqueue(self, handle: CoroutineHandle) -> None:
        with self._cond:
            self._queue.append(handle)
            self._cond.notify()

    def _executor(self, idx: int) -> None:
        if self._options.on_thread_start is not None:
            self._options.on_thread_start(idx)
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._queue or self._stop)
                if not self._queue:
                    break
                handle = self._queue.popleft()
            try:
                handle.resume()
            finally:
                self._add_size(-1)
        if self._options.on_thread_stop is not None:
            self._options.on_thread_stop(idx)
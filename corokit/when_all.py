"""Awaiting a group of awaitables and collecting each one's outcome."""

from __future__ import annotations

import inspect
import threading
from collections.abc import Awaitable, Iterable, Sequence
from typing import Any, Generic, Optional, TypeVar, Union

from corokit.sync_wait import CoroutineHandle, suspend

T = TypeVar("T")


class WhenAllLatch:
    """Counts down completed tasks and resumes the awaiting coroutine after the last one.

    The count starts one above the number of tasks: the extra unit belongs to the
    awaiting coroutine, so whichever side finishes last does the resuming.
    """

    def __init__(self, count: int) -> None:
        if count < 0:
            raise ValueError("latch count cannot be negative")
        self._count = count + 1
        self._lock = threading.Lock()
        self._handle: Optional[CoroutineHandle] = None

    def is_ready(self) -> bool:
        """True once the awaiting coroutine has run to completion."""
        handle = self._handle
        return handle is not None and handle.done()

    def try_await(self, handle: CoroutineHandle) -> bool:
        """Record the awaiting coroutine; return whether it has to stay suspended."""
        with self._lock:
            self._handle = handle
            previous = self._count
            self._count -= 1
        return previous > 1

    def notify_awaitable_completed(self) -> None:
        """Count one task as finished, resuming the awaiter if it was the last."""
        with self._lock:
            previous = self._count
            self._count -= 1
            handle = self._handle
        if previous == 1 and handle is not None:
            handle.resume()


class WhenAllTask(Generic[T]):
    """Wraps one awaitable and keeps its value or the exception it raised."""

    def __init__(self, awaitable: Awaitable[T]) -> None:
        if not inspect.isawaitable(awaitable):
            raise TypeError(f"{awaitable!r} is not awaitable")
        self._awaitable = awaitable
        self._started = False
        self._finished = False
        self._value: Any = None
        self._exception: Optional[BaseException] = None

    def _start(self, latch: WhenAllLatch) -> None:
        if self._started:
            raise RuntimeError("task has already been started")
        self._started = True
        CoroutineHandle(self._run(latch)).resume()

    async def _run(self, latch: WhenAllLatch) -> None:
        try:
            self._value = await self._awaitable
        except Exception as exc:
            self._exception = exc
        self._finished = True
        latch.notify_awaitable_completed()

    def return_value(self) -> T:
        """The awaitable's result; re-raises what it raised."""
        if not self._finished:
            raise RuntimeError("task has not completed")
        if self._exception is not None:
            raise self._exception
        return self._value


TaskContainer = Union[tuple, list]


class WhenAllReadyAwaitable:
    """Starts every task when awaited and resumes once all have completed.

    Awaiting it gives back the container of :class:`WhenAllTask` objects.
    """

    def __init__(self, tasks: Sequence[WhenAllTask[Any]]) -> None:
        self._tasks = tasks
        self._latch = WhenAllLatch(len(tasks))

    def __await__(self):
        return self._wait().__await__()

    async def _wait(self) -> Any:
        if not self._latch.is_ready():
            await suspend(self._start_all)
        return self._tasks

    def _start_all(self, handle: CoroutineHandle) -> bool:
        for task in self._tasks:
            task._start(self._latch)
        return self._latch.try_await(handle)


def when_all(*args: Awaitable[Any]) -> WhenAllReadyAwaitable:
    """Await every argument; the result is a tuple of :class:`WhenAllTask`."""
    return WhenAllReadyAwaitable(tuple(WhenAllTask(a) for a in args))


def when_all_range(awaitables: Iterable[Awaitable[Any]]) -> WhenAllReadyAwaitable:
    """Await every item of an iterable; the result is a list of :class:`WhenAllTask`."""
    return WhenAllReadyAwaitable([WhenAllTask(a) for a in awaitables])
"""Driving coroutines by hand and blocking the calling thread until one finishes."""

from __future__ import annotations

import threading
from collections.abc import Awaitable, Callable, Coroutine, Generator
from typing import Any, Optional


class SyncWaitEvent:
    """A thread-level flag that callers can block on until it is set."""

    def __init__(self, initially_set: bool = False) -> None:
        self._cond = threading.Condition()
        self._set = initially_set

    def set(self) -> None:
        """Set the flag and wake every blocked thread."""
        with self._cond:
            self._set = True
            self._cond.notify_all()

    def reset(self) -> None:
        """Clear the flag."""
        with self._cond:
            self._set = False

    def wait(self) -> None:
        """Block until the flag is set."""
        with self._cond:
            self._cond.wait_for(lambda: self._set)

    def is_set(self) -> bool:
        with self._cond:
            return self._set


class _Suspension:
    """Yielded to the driver; asks it to hand its handle to ``register``."""

    __slots__ = ("register",)

    def __init__(self, register: Callable[["CoroutineHandle"], Optional[bool]]) -> None:
        self.register = register

    def __await__(self) -> Generator["_Suspension", None, None]:
        yield self


def suspend(register: Callable[["CoroutineHandle"], Optional[bool]]) -> Awaitable[None]:
    """Suspend the awaiting coroutine and pass its handle to ``register``.

    If ``register`` returns ``False`` the coroutine continues at once;
    any other return value leaves it suspended until someone resumes the handle.
    """
    return _Suspension(register)


async def _await_any(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class CoroutineHandle:
    """Owns a coroutine and steps it forward each time it is resumed."""

    def __init__(self, coroutine: Awaitable[Any]) -> None:
        if not isinstance(coroutine, Coroutine):
            coroutine = _await_any(coroutine)
        self._coro = coroutine
        self._done = False
        self._value: Any = None
        self._exception: Optional[BaseException] = None

    def resume(self) -> None:
        """Run the coroutine until it suspends again or finishes."""
        if self._done:
            raise RuntimeError("cannot resume a coroutine that has finished")
        pending: Optional[BaseException] = None
        while True:
            try:
                if pending is not None:
                    yielded = self._coro.throw(pending)
                else:
                    yielded = self._coro.send(None)
            except StopIteration as stop:
                self._value = stop.value
                self._done = True
                return
            except Exception as exc:
                self._exception = exc
                self._done = True
                return
            pending = None
            if not isinstance(yielded, _Suspension):
                pending = TypeError(f"cannot await an object that yields {yielded!r}")
                continue
            if yielded.register(self) is False:
                continue
            return

    def done(self) -> bool:
        return self._done

    def result(self) -> Any:
        """Return the coroutine's value, or raise what it raised."""
        if not self._done:
            raise RuntimeError("coroutine has not finished")
        if self._exception is not None:
            raise self._exception
        return self._value


def sync_wait(awaitable: Awaitable[Any]) -> Any:
    """Run ``awaitable`` and block the calling thread until it completes."""
    event = SyncWaitEvent()
    outcome: list[Any] = [None, None]

    async def runner() -> None:
        try:
            outcome[0] = await awaitable
        except Exception as exc:
            outcome[1] = exc
        finally:
            event.set()

    CoroutineHandle(runner()).resume()
    event.wait()
    if outcome[1] is not None:
        raise outcome[1]
    return outcome[0]
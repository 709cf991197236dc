"""Lazy, single-pass value generators."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Iterator
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class Generator(Generic[T]):
    """A single-pass iterator over the values a generator body yields.

    The body does not start running until the first value is requested.
    An exception raised in the body is raised from the iteration step.
    """

    def __init__(self, iterator: Optional[Iterator[T]] = None) -> None:
        if iterator is not None and not isinstance(iterator, Iterator):
            raise TypeError("Generator needs an iterator")
        self._it = iterator

    def __iter__(self) -> "Generator[T]":
        return self

    def __next__(self) -> T:
        if self._it is None:
            raise StopIteration
        try:
            return next(self._it)
        except BaseException:
            self._it = None
            raise


def generator(func: Callable[..., Iterator[T]]) -> Callable[..., Generator[T]]:
    """Turn a generator function into one that returns a :class:`Generator`."""
    if inspect.iscoroutinefunction(func) or inspect.isasyncgenfunction(func):
        raise TypeError("a generator body cannot await")

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Generator[T]:
        return Generator(func(*args, **kwargs))

    return wrapper
"""A host name awaiting resolution."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Hostname:
    """A host name; ordered and compared by its text."""

    data: str = ""

    def __str__(self) -> str:
        return self.data
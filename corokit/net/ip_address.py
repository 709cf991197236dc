"""IPv4 and IPv6 addresses held in binary form."""

from __future__ import annotations

import socket as _socket
from enum import IntEnum
from functools import total_ordering
from typing import Any, Union


class Domain(IntEnum):
    """Address family of an IP address."""

    IPV4 = int(_socket.AF_INET)
    IPV6 = int(_socket.AF_INET6)

    def __str__(self) -> str:
        return self.name.lower()


@total_ordering
class IpAddress:
    """An IP address of either family, stored in a zero-padded 16-byte buffer.

    Addresses order by family first and then by their bytes.
    """

    IPV4_LEN = 4
    IPV6_LEN = 16

    __slots__ = ("_domain", "_raw")

    def __init__(
        self,
        binary_address: Union[bytes, bytearray, memoryview] = b"",
        domain: Union[Domain, int] = Domain.IPV4,
    ) -> None:
        domain = Domain(domain)
        raw = bytes(binary_address)
        limit = self.IPV4_LEN if domain is Domain.IPV4 else self.IPV6_LEN
        if len(raw) > limit:
            raise ValueError("provided binary ip address is too long")
        self._domain = domain
        self._raw = raw.ljust(self.IPV6_LEN, b"\x00")

    @property
    def domain(self) -> Domain:
        return self._domain

    def data(self) -> bytes:
        """The address bytes: 4 for IPv4, 16 for IPv6."""
        if self._domain is Domain.IPV4:
            return self._raw[: self.IPV4_LEN]
        return self._raw

    @staticmethod
    def from_string(address: str, domain: Union[Domain, int] = Domain.IPV4) -> "IpAddress":
        """Parse the textual form of an address of the given family."""
        domain = Domain(domain)
        try:
            packed = _socket.inet_pton(int(domain), address)
        except (OSError, ValueError, TypeError) as exc:
            raise ValueError(f"failed to convert {address!r} to an ip address") from exc
        return IpAddress(packed, domain)

    def to_string(self) -> str:
        """The textual form of the address."""
        try:
            return _socket.inet_ntop(int(self._domain), self.data())
        except (OSError, ValueError) as exc:
            raise ValueError("failed to convert ip address to its string representation") from exc

    def _key(self) -> tuple[int, bytes]:
        return (int(self._domain), self._raw)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, IpAddress):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, IpAddress):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"IpAddress({self.to_string()!r}, {self._domain})"
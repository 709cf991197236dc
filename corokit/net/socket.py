"""Owning wrapper around an OS socket and helpers that create them."""

from __future__ import annotations

import socket as _socket
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional, Union

from corokit.net.ip_address import Domain, IpAddress


class SocketType(Enum):
    UDP = "udp"
    TCP = "tcp"


class Blocking(Enum):
    YES = "yes"
    NO = "no"


class ShutdownHow(IntEnum):
    READ = _socket.SHUT_RD
    WRITE = _socket.SHUT_WR
    READ_WRITE = _socket.SHUT_RDWR


@dataclass(frozen=True)
class SocketOptions:
    """Family, type and blocking mode for a new socket."""

    domain: Domain
    type: SocketType
    blocking: Blocking


def type_to_os(socket_type: SocketType) -> int:
    """The OS socket type constant for ``socket_type``."""
    if socket_type is SocketType.UDP:
        return _socket.SOCK_DGRAM
    if socket_type is SocketType.TCP:
        return _socket.SOCK_STREAM
    raise ValueError(f"unknown socket type {socket_type!r}")


class Socket:
    """Owns an OS socket; closing it leaves this object invalid."""

    def __init__(self, sock: Union[_socket.socket, int, None] = None) -> None:
        if isinstance(sock, int):
            sock = None if sock < 0 else _socket.socket(fileno=sock)
        self._sock: Optional[_socket.socket] = sock

    def is_valid(self) -> bool:
        """True while a descriptor is held; it may still be unusable."""
        return self._sock is not None

    def blocking(self, block: Blocking) -> bool:
        """Switch the blocking mode; False if that was not possible."""
        if self._sock is None:
            return False
        try:
            self._sock.setblocking(block is Blocking.YES)
        except OSError:
            return False
        return True

    def shutdown(self, how: ShutdownHow = ShutdownHow.READ_WRITE) -> bool:
        """Shut down the given directions; False if that failed."""
        if self._sock is None:
            return False
        try:
            self._sock.shutdown(int(how))
        except OSError:
            return False
        return True

    def close(self) -> None:
        """Close the socket and mark this object invalid."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def native_handle(self) -> int:
        """The file descriptor, or -1 when invalid."""
        return self._sock.fileno() if self._sock is not None else -1

    def detach(self) -> Optional[_socket.socket]:
        """Hand over the underlying socket object and mark this object invalid."""
        sock, self._sock = self._sock, None
        return sock

    def __enter__(self) -> "Socket":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Socket(fd={self.native_handle()})"


def make_socket(opts: SocketOptions) -> Socket:
    """Create a socket with the given options."""
    try:
        raw = _socket.socket(int(opts.domain), type_to_os(opts.type))
    except OSError as exc:
        raise RuntimeError("Failed to create socket.") from exc
    sock = Socket(raw)
    if opts.blocking is Blocking.NO and not sock.blocking(Blocking.NO):
        sock.close()
        raise RuntimeError("Failed to set socket to non-blocking mode.")
    return sock


def make_accept_socket(
    opts: SocketOptions, address: IpAddress, port: int, backlog: int = 128
) -> Socket:
    """Create a socket bound to ``address``:``port``; TCP sockets also listen."""
    sock = make_socket(opts)
    raw = sock._sock
    assert raw is not None
    try:
        try:
            raw.setsockopt(_socket.SOL_SOCKET, _socket.SO_REUSEADDR, 1)
            if hasattr(_socket, "SO_REUSEPORT"):
                raw.setsockopt(_socket.SOL_SOCKET, _socket.SO_REUSEPORT, 1)
        except OSError as exc:
            raise RuntimeError("Failed to setsockopt(SO_REUSEADDR | SO_REUSEPORT)") from exc
        try:
            raw.bind((address.to_string(), port))
        except OSError as exc:
            raise RuntimeError("Failed to bind.") from exc
        if opts.type is SocketType.TCP:
            try:
                raw.listen(backlog)
            except OSError as exc:
                raise RuntimeError("Failed to listen.") from exc
    except BaseException:
        sock.close()
        raise
    return sock
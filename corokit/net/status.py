"""Result codes for connecting, sending, receiving and TLS handshakes."""

from __future__ import annotations

import errno
from enum import Enum, IntEnum


class ConnectStatus(Enum):
    """Outcome of a connection attempt."""

    CONNECTED = "connected"
    INVALID_IP_ADDRESS = "invalid_ip_address"
    TIMEOUT = "timeout"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


class RecvStatus(IntEnum):
    """Outcome of a receive call; errno values keep their numbers."""

    OK = 0
    CLOSED = -1
    UDP_NOT_BOUND = -2
    WOULD_BLOCK = errno.EWOULDBLOCK
    TRY_AGAIN = errno.EAGAIN
    BAD_FILE_DESCRIPTOR = errno.EBADF
    CONNECTION_REFUSED = errno.ECONNREFUSED
    MEMORY_FAULT = errno.EFAULT
    INTERRUPTED = errno.EINTR
    INVALID_ARGUMENT = errno.EINVAL
    NO_MEMORY = errno.ENOMEM
    NOT_CONNECTED = errno.ENOTCONN
    NOT_A_SOCKET = errno.ENOTSOCK
    SSL_ERROR = -3

    def __str__(self) -> str:
        # Where EAGAIN differs from EWOULDBLOCK it has no name of its own.
        if self.name == "TRY_AGAIN":
            return "unknown"
        return self.name.lower()


class SendStatus(IntEnum):
    """Outcome of a send call; errno values keep their numbers."""

    OK = 0
    PERMISSION_DENIED = errno.EACCES
    WOULD_BLOCK = errno.EWOULDBLOCK
    TRY_AGAIN = errno.EAGAIN
    ALREADY_IN_PROGRESS = errno.EALREADY
    BAD_FILE_DESCRIPTOR = errno.EBADF
    CONNECTION_RESET = errno.ECONNRESET
    NO_PEER_ADDRESS = errno.EDESTADDRREQ
    MEMORY_FAULT = errno.EFAULT
    INTERRUPTED = errno.EINTR
    IS_CONNECTION = errno.EISCONN
    MESSAGE_SIZE = errno.EMSGSIZE
    OUTPUT_QUEUE_FULL = errno.ENOBUFS
    NO_MEMORY = errno.ENOMEM
    NOT_CONNECTED = errno.ENOTCONN
    NOT_A_SOCKET = errno.ENOTSOCK
    OPERATION_NOT_SUPPORTED = errno.EOPNOTSUPP
    PIPE_CLOSED = errno.EPIPE
    SSL_ERROR = -3

    def __str__(self) -> str:
        return self.name.lower()


class SslHandshakeStatus(Enum):
    """Outcome of a TLS handshake."""

    OK = "ok"
    NOT_CONNECTED = "not_connected"
    SSL_CONTEXT_REQUIRED = "ssl_context_required"
    SSL_RESOURCE_ALLOCATION_FAILED = "ssl_resource_allocation_failed"
    SSL_SET_FD_FAILURE = "ssl_set_fd_failure"
    HANDSHAKE_FAILED = "handshake_failed"
    TIMEOUT = "timeout"
    POLL_ERROR = "poll_error"
    UNEXPECTED_CLOSE = "unexpected_close"

    def __str__(self) -> str:
        return self.value


def recv_status_from_errno(err: int) -> RecvStatus:
    """The receive status for an errno value; ValueError if it has none."""
    try:
        return RecvStatus(err)
    except ValueError:
        raise ValueError(f"errno {err} has no receive status") from None


def send_status_from_errno(err: int) -> SendStatus:
    """The send status for an errno value; ValueError if it has none."""
    try:
        return SendStatus(err)
    except ValueError:
        raise ValueError(f"errno {err} has no send status") from None
import socket

import pytest

from corokit.net.ip_address import Domain, IpAddress
from corokit.net.socket import (
    Blocking,
    ShutdownHow,
    Socket,
    SocketOptions,
    SocketType,
    make_accept_socket,
    make_socket,
    type_to_os,
)

LOCALHOST = IpAddress.from_string("127.0.0.1")


def _tcp(blocking=Blocking.NO):
    return SocketOptions(Domain.IPV4, SocketType.TCP, blocking)


def test_type_to_os():
    assert type_to_os(SocketType.TCP) == socket.SOCK_STREAM
    assert type_to_os(SocketType.UDP) == socket.SOCK_DGRAM


def test_type_to_os_rejects_unknown():
    with pytest.raises(ValueError):
        type_to_os("tcp")


def test_default_socket_is_invalid():
    s = Socket()
    assert not s.is_valid()
    assert s.native_handle() == -1
    assert s.blocking(Blocking.NO) is False
    assert s.shutdown() is False


def test_make_socket_non_blocking():
    s = make_socket(_tcp())
    assert s.is_valid()
    assert s.native_handle() >= 0
    raw = s.detach()
    try:
        assert not s.is_valid()
        assert raw.getblocking() is False
        assert raw.type == socket.SOCK_STREAM
    finally:
        raw.close()


def test_make_socket_blocking():
    with make_socket(_tcp(Blocking.YES)) as s:
        raw = s.detach()
    try:
        assert raw.getblocking() is True
    finally:
        raw.close()


def test_blocking_toggle():
    with make_socket(_tcp()) as s:
        assert s.blocking(Blocking.YES) is True
        raw = s.detach()
    try:
        assert raw.getblocking() is True
    finally:
        raw.close()


def test_close_invalidates():
    s = make_socket(_tcp())
    s.close()
    assert not s.is_valid()
    assert s.native_handle() == -1
    s.close()
    assert not s.is_valid()


def test_context_manager_closes():
    with make_socket(_tcp()) as s:
        assert s.is_valid()
    assert not s.is_valid()


def test_shutdown_unconnected_fails():
    with make_socket(_tcp()) as s:
        assert s.shutdown(ShutdownHow.READ_WRITE) is False


def test_accept_socket_accepts_connection():
    server = make_accept_socket(_tcp(Blocking.YES), LOCALHOST, 0)
    raw = server.detach()
    try:
        host, port = raw.getsockname()
        assert host == "127.0.0.1"
        client = socket.create_connection((host, port), timeout=5)
        try:
            conn, _ = raw.accept()
            with Socket(conn) as accepted:
                client.sendall(b"ping")
                assert conn.recv(4) == b"ping"
                assert accepted.shutdown(ShutdownHow.WRITE) is True
                assert client.recv(4) == b""
        finally:
            client.close()
    finally:
        raw.close()


def test_udp_accept_socket_receives():
    server = make_accept_socket(SocketOptions(Domain.IPV4, SocketType.UDP, Blocking.YES), LOCALHOST, 0)
    raw = server.detach()
    raw.settimeout(5)
    try:
        assert raw.type == socket.SOCK_DGRAM
        sender = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sender.sendto(b"datagram", raw.getsockname())
            data, _ = raw.recvfrom(64)
            assert data == b"datagram"
        finally:
            sender.close()
    finally:
        raw.close()


def test_bind_to_foreign_address_fails():
    with pytest.raises(RuntimeError, match="bind"):
        make_accept_socket(_tcp(), IpAddress.from_string("203.0.113.1"), 0)


def test_socket_from_descriptor():
    raw = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    fd = raw.detach()
    with Socket(fd) as s:
        assert s.native_handle() == fd
    assert not s.is_valid()
"""Networking helpers: addresses, hostnames, status codes, sockets and TLS contexts."""

__all__ = ["ip_address", "hostname", "status", "socket", "ssl_context"]
"""TLS context shared by client and server connections."""

from __future__ import annotations

import os
import ssl
import tempfile
from enum import IntEnum
from pathlib import Path
from typing import Optional, Union

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

PathLike = Union[str, "os.PathLike[str]"]


class SslFileType(IntEnum):
    """Encoding of a certificate or key file."""

    ASN1 = 2
    PEM = 1


def _load_certificate(path: PathLike, file_type: SslFileType) -> x509.Certificate:
    try:
        data = Path(path).read_bytes()
        if file_type is SslFileType.PEM:
            return x509.load_pem_x509_certificate(data)
        return x509.load_der_x509_certificate(data)
    except (OSError, ValueError, TypeError) as exc:
        raise RuntimeError(f"Failed to load certificate file {path}") from exc


def _load_private_key(path: PathLike, file_type: SslFileType):
    try:
        data = Path(path).read_bytes()
        if file_type is SslFileType.PEM:
            return serialization.load_pem_private_key(data, password=None)
        return serialization.load_der_private_key(data, password=None)
    except (OSError, ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise RuntimeError(f"Failed to load private key file {path}") from exc


def _public_der(public_key) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )


class SslContext:
    """A TLS context, with or without a certificate and private key.

    Without them the context suits client connections and does not verify peers;
    with them it serves accepted connections using that certificate.
    """

    def __init__(
        self,
        certificate: Optional[PathLike] = None,
        certificate_type: SslFileType = SslFileType.PEM,
        private_key: Optional[PathLike] = None,
        private_key_type: SslFileType = SslFileType.PEM,
    ) -> None:
        if (certificate is None) != (private_key is None):
            raise ValueError("certificate and private key must be given together")
        try:
            if certificate is None:
                ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                ctx.check_hostname = False
                ctx.verify_mode = ssl.CERT_NONE
            else:
                ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        except ssl.SSLError as exc:
            raise RuntimeError("Failed to initialize TLS context object.") from exc
        # SSLv3 is never enabled by these protocol selections.
        if certificate is not None and private_key is not None:
            self._load(ctx, certificate, SslFileType(certificate_type), private_key, SslFileType(private_key_type))
        self._ctx = ctx

    @staticmethod
    def _load(
        ctx: ssl.SSLContext,
        certificate: PathLike,
        certificate_type: SslFileType,
        private_key: PathLike,
        private_key_type: SslFileType,
    ) -> None:
        cert = _load_certificate(certificate, certificate_type)
        key = _load_private_key(private_key, private_key_type)
        if _public_der(cert.public_key()) != _public_der(key.public_key()):
            raise RuntimeError("Certificate and private key do not match.")
        cert_pem = cert.public_bytes(serialization.Encoding.PEM)
        key_pem = key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        with tempfile.TemporaryDirectory() as tmp:
            cert_path = Path(tmp, "cert.pem")
            key_path = Path(tmp, "key.pem")
            cert_path.write_bytes(cert_pem)
            key_path.write_bytes(key_pem)
            try:
                ctx.load_cert_chain(str(cert_path), str(key_path))
            except ssl.SSLError as exc:
                raise RuntimeError("Certificate and private key do not match.") from exc

    def native_handle(self) -> ssl.SSLContext:
        """The underlying :class:`ssl.SSLContext`."""
        return self._ctx
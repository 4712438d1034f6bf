"""
HTTPS front end: uvicorn configuration with a fixed TLS policy and
per-request read timeout.
"""

import logging
import socket
import ssl
from typing import Optional

import h11
import uvicorn
from uvicorn.protocols.http.h11_impl import H11Protocol

from .config import Settings

logger = logging.getLogger(__name__)


def harden_ssl_context(ctx: ssl.SSLContext, settings: Settings) -> ssl.SSLContext:
    """
    Apply the server TLS policy: TLS 1.2 minimum and the configured ECDHE
    cipher suites in server-preferred order.

    Key-exchange groups are set from ``TLS_CURVES`` where the runtime has a
    groups API; otherwise OpenSSL's default list (which carries both P-256
    and X25519) stays in effect. ``set_ecdh_curve`` is not used because it
    pins a single curve.
    """
    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    ctx.options |= ssl.OP_CIPHER_SERVER_PREFERENCE
    ctx.set_ciphers(settings.tls_cipher_string)
    set_groups = getattr(ctx, "set_groups", None)
    if set_groups is not None and settings.TLS_CURVES:
        set_groups(":".join(settings.TLS_CURVES))
    return ctx


class ReadTimeoutH11Protocol(H11Protocol):
    """
    h11 protocol that closes the connection when a request (headers and
    body) is not fully received within ``config.read_timeout`` seconds of
    its first byte. Idle keep-alive connections are governed by
    ``timeout_keep_alive`` instead.
    """

    _read_timer = None

    def data_received(self, data: bytes) -> None:
        timeout = getattr(self.config, "read_timeout", None)
        if timeout and self._read_timer is None and self.conn.their_state is h11.IDLE:
            self._read_timer = self.loop.call_later(timeout, self._read_timed_out)
        super().data_received(data)
        if self.conn.their_state is not h11.IDLE and self.conn.their_state is not h11.SEND_BODY:
            self._cancel_read_timer()

    def connection_lost(self, exc: Optional[Exception]) -> None:
        self._cancel_read_timer()
        super().connection_lost(exc)

    def _cancel_read_timer(self) -> None:
        if self._read_timer is not None:
            self._read_timer.cancel()
            self._read_timer = None

    def _read_timed_out(self) -> None:
        self._read_timer = None
        logger.info(f"Closing connection: request not read within {self.config.read_timeout}s")
        if self.transport is not None and not self.transport.is_closing():
            self.transport.close()


class TLSServerConfig(uvicorn.Config):
    """uvicorn.Config that hardens the SSL context once it has been built."""

    def __init__(self, app, settings: Settings, **kwargs):
        self.settings = settings
        self.read_timeout = settings.READ_TIMEOUT
        kwargs.setdefault("http", ReadTimeoutH11Protocol)
        super().__init__(
            app,
            host=settings.HOST,
            port=settings.PORT,
            ssl_certfile=settings.CERT_FILE,
            ssl_keyfile=settings.KEY_FILE,
            ssl_ciphers=settings.tls_cipher_string,
            timeout_keep_alive=settings.IDLE_TIMEOUT,
            log_config=None,
            **kwargs,
        )

    def load(self) -> None:
        super().load()
        if self.ssl is not None:
            harden_ssl_context(self.ssl, self.settings)


def bind_socket(settings: Settings) -> socket.socket:
    """
    Bind the listening socket. Raises OSError when the address is in use
    or not available, instead of letting uvicorn exit the process.
    """
    family = socket.AF_INET6 if ":" in settings.HOST else socket.AF_INET
    sock = socket.socket(family=family)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((settings.HOST, settings.PORT))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def build_server(app, settings: Settings) -> uvicorn.Server:
    """Create (but do not start) the HTTPS server for ``app``."""
    config = TLSServerConfig(app, settings)
    logger.info(
        f"HTTPS server configured on {settings.HOST}:{settings.PORT} "
        f"(cert={settings.CERT_FILE})"
    )
    return uvicorn.Server(config)

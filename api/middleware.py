"""
Request logging middleware.

Logs each request line before it is handled and again, with the elapsed
time, once the response has been sent. It never changes a response that
is delivered in time.
"""

import logging
import time
from typing import Optional

from anyio import fail_after
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from errors import WriteError

logger = logging.getLogger(__name__)


def _format_elapsed(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.3f}ms"
    return f"{seconds:.3f}s"


def request_line(scope: Scope) -> str:
    """``HTTP/1.1 | [host:port] GET - /path?query`` for an HTTP scope."""
    proto = f"HTTP/{scope.get('http_version', '1.1')}"
    client = scope.get("client")
    remote = f"{client[0]}:{client[1]}" if client else "-"
    uri = scope.get("raw_path", b"").decode("latin-1") or scope.get("path", "")
    query = scope.get("query_string", b"")
    if query:
        uri = f"{uri}?{query.decode('latin-1')}"
    return f"{proto} | [{remote}] {scope.get('method', '')} - {uri}"


class RequestLoggerMiddleware:
    """
    Pure ASGI middleware wrapping every HTTP request.

    ``write_timeout`` bounds each send of the response; a client that does
    not drain the response in time gets a WriteError and the connection is
    dropped.
    """

    def __init__(self, app: ASGIApp, write_timeout: Optional[float] = None):
        self.app = app
        self.write_timeout = write_timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        line = request_line(scope)
        started = time.perf_counter()
        logger.info(line)

        async def send_wrapper(message: Message) -> None:
            try:
                with fail_after(self.write_timeout):
                    await send(message)
            except TimeoutError as e:
                logger.error(f"{line}: response not written within {self.write_timeout}s")
                raise WriteError(f"write timed out after {self.write_timeout}s") from e
            except OSError as e:
                logger.error(f"{line}: could not write response: {e}")
                raise WriteError(str(e)) from e

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed = _format_elapsed(time.perf_counter() - started)
            logger.info(f"{line}: request processed in {elapsed}")

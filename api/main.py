"""
FastAPI application for the Chameleon Sum API.

Routes (all GET, under ``/api/v1``):
    /hello  -> "Hello Chameleon"
    /sum    -> sum of the two integer query parameters
    /sumdb  -> records the sum, returns how many sums are stored
    /reset  -> deletes every stored sum (204)
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from database import SumStore
from errors import InvalidInputError, StorageError
from utils.input_parser import retrieve_numbers
from utils.log import setup_logging

from .config import Settings, settings as default_settings
from .middleware import RequestLoggerMiddleware
from .server import bind_socket, build_server

logger = logging.getLogger(__name__)

# Exit status for fatal startup failures
EXIT_STARTUP_FAILURE = 7

router = APIRouter()


def _store(request: Request) -> SumStore:
    return request.app.state.store


def _query_values(request: Request) -> dict[str, str]:
    """First value of every distinct query parameter, in URL order."""
    params = request.query_params
    return {key: params.getlist(key)[0] for key in params.keys()}


def _error(e: Exception) -> PlainTextResponse:
    return PlainTextResponse(f"Oops, something went wrong. Error: {e}", status_code=500)


# ----------------------------------------------------------------
# Endpoints
# ----------------------------------------------------------------

@router.get("/hello", response_class=PlainTextResponse)
def hello():
    """Greeting; query parameters are ignored."""
    return PlainTextResponse("Hello Chameleon")


@router.get("/sum", response_class=PlainTextResponse)
def sum_numbers(request: Request):
    """
    Add the two integer query parameters.

    Parameter names are free; exactly two must be present.
    """
    try:
        a, b = retrieve_numbers(_query_values(request))
    except InvalidInputError as e:
        logger.error(f"Error parsing operands: {e}")
        return _error(e)
    return PlainTextResponse(str(a + b))


@router.get("/sumdb", response_class=PlainTextResponse)
def sum_and_record(request: Request):
    """
    Add the two integer query parameters, store operands and result, and
    return the number of stored sums.
    """
    try:
        a, b = retrieve_numbers(_query_values(request))
        count = _store(request).record_sum(a, b)
    except (InvalidInputError, StorageError) as e:
        logger.error(f"Error recording sum: {e}")
        return _error(e)
    return PlainTextResponse(str(count))


@router.get("/reset", status_code=204, response_class=Response)
def reset(request: Request):
    """Delete every stored sum. No content on success."""
    try:
        deleted = _store(request).reset_all()
    except StorageError as e:
        logger.error(f"Error resetting sums: {e}")
        return _error(e)
    logger.info(f"Number of deleted operations: {deleted}")
    return Response(status_code=204)


# ----------------------------------------------------------------
# Application
# ----------------------------------------------------------------

def create_app(settings: Optional[Settings] = None, store: Optional[SumStore] = None) -> FastAPI:
    """
    Build the FastAPI app. The store is not initialised here; callers run
    ``store.ensure_schema()`` once before serving.
    """
    settings = settings or default_settings
    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.store = store or SumStore(settings.DB_PATH, timeout=settings.DB_TIMEOUT)
    app.include_router(router, prefix=settings.API_PREFIX)
    app.add_middleware(RequestLoggerMiddleware, write_timeout=settings.WRITE_TIMEOUT)
    return app


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chameleon Sum API (HTTPS)")
    parser.add_argument("--host", help="Bind address")
    parser.add_argument("--port", type=int, help="Listen port")
    parser.add_argument("--db", help="SQLite database file")
    parser.add_argument("--cert", help="TLS certificate file")
    parser.add_argument("--key", help="TLS private key file")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {
        "HOST": args.host,
        "PORT": args.port,
        "DB_PATH": args.db,
        "CERT_FILE": args.cert,
        "KEY_FILE": args.key,
        "LOG_LEVEL": args.log_level,
        "LOG_FILE": args.log_file,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = settings_from_args(parse_args(argv))
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    store = SumStore(settings.DB_PATH, timeout=settings.DB_TIMEOUT)
    try:
        store.ensure_schema()
    except StorageError as e:
        logger.error(f"Failed to initialise database: {e}")
        sys.exit(EXIT_STARTUP_FAILURE)
    logger.info(f"Database ready: {store.db_path}")

    app = create_app(settings, store)
    try:
        server = build_server(app, settings)
        sock = bind_socket(settings)
        server.run(sockets=[sock])
    except OSError as e:
        logger.error(f"Server failed: {e}")
        sys.exit(EXIT_STARTUP_FAILURE)
    except SystemExit as e:
        # uvicorn exits on its own for startup failures it handles itself
        if e.code in (None, 0):
            raise
        logger.error(f"Server failed to start (uvicorn exit status {e.code})")
        sys.exit(EXIT_STARTUP_FAILURE)
    if not server.started:
        sys.exit(EXIT_STARTUP_FAILURE)


if __name__ == "__main__":
    main()

"""Token server application and routes."""

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from token_server.api import (
    ApiError,
    UpdateResponsePayload,
    parse_create_payload,
    parse_remove_payload,
    parse_update_payload,
)
from token_server.config import ServerOptions
from token_server.duration.human import HumanDuration
from token_server.logging import format_request_log, get_logger
from token_server.store import TokenError, TokenStore

logger = get_logger("server")

Endpoint = Callable[[Request], Awaitable[Response]]

# Map store error codes to HTTP status codes
TOKEN_ERROR_STATUS = {
    "INVALID_TOKEN": 404,
    "META_MUST_BE_OBJECT": 422,
}


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise ApiError("Request body must be valid JSON", "INVALID_REQUEST", 400)


def _logged(handler: Endpoint) -> Endpoint:
    """Wrap a handler with error mapping and a request log line."""

    async def endpoint(request: Request) -> Response:
        start = time.perf_counter()
        error_message = None

        try:
            response = await handler(request)
        except ApiError as e:
            error_message = e.message
            response = JSONResponse(e.to_dict(), status_code=e.status_code)
        except TokenError as e:
            error_message = e.message
            response = JSONResponse(
                {"error": e.message, "code": e.code},
                status_code=TOKEN_ERROR_STATUS.get(e.code, 500),
            )
        except Exception as e:
            logger.exception("Unhandled error in %s %s", request.method, request.url.path)
            error_message = str(e)
            response = PlainTextResponse("InternalServerError", status_code=500)

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(format_request_log(
            method=request.method,
            path=request.url.path,
            token=getattr(request.state, "token", None),
            status=response.status_code,
            duration_ms=duration_ms,
            error_message=error_message,
        ))
        return response

    return endpoint


def _store(request: Request) -> TokenStore:
    return request.app.state.store


async def create_token(request: Request) -> Response:
    """POST /token"""
    payload = parse_create_payload(await _read_json(request))
    token = _store(request).create_token(payload.meta)
    request.state.token = token
    return PlainTextResponse(token)


async def update_token(request: Request) -> Response:
    """PUT /token"""
    payload = parse_update_payload(await _read_json(request))
    request.state.token = payload.token
    token, meta = _store(request).update_token(payload.token, payload.meta)
    return JSONResponse(UpdateResponsePayload(token=token, meta=meta).to_dict())


async def remove_token(request: Request) -> Response:
    """DELETE /token"""
    payload = parse_remove_payload(await _read_json(request))
    request.state.token = payload.token
    _store(request).remove_token(payload.token)
    return Response(status_code=202)


async def dump_meta(request: Request) -> Response:
    """HEAD /dump"""
    _store(request).dump_meta()
    return Response(status_code=202)


async def shutdown_server(request: Request) -> Response:
    """GET /shutdown"""
    _store(request).shutdown()
    return Response(status_code=202)


async def health(request: Request) -> Response:
    return JSONResponse({"status": "ok"})


async def purge_expired_tokens(store: TokenStore, interval: HumanDuration) -> None:
    """Remove expired tokens every interval, until cancelled."""
    while True:
        await asyncio.sleep(interval.total_seconds())
        try:
            result = store.remove_expired_tokens()
        except Exception:
            logger.exception("PURGE failed")
            continue

        if result.purged > 0:
            logger.debug("%s", result)


def create_app(options: ServerOptions, store: TokenStore | None = None) -> Starlette:
    """Create the token server application."""
    if store is None:
        store = TokenStore(token_lifetime=options.token_lifetime)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/token", _logged(create_token), methods=["POST"]),
        Route("/token", _logged(update_token), methods=["PUT"]),
        Route("/token", _logged(remove_token), methods=["DELETE"]),
    ]

    if options.dump_enabled and get_logger("store").isEnabledFor(logging.DEBUG):
        routes.append(Route("/dump", _logged(dump_meta), methods=["HEAD"]))
    elif options.dump_enabled:
        logger.warning("HEAD /dump will not provide logging; use LOG_LEVEL=DEBUG")

    if options.shutdown_enabled:
        routes.append(Route("/shutdown", _logged(shutdown_server), methods=["GET"]))

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        purging = asyncio.create_task(purge_expired_tokens(store, options.purge_interval))
        try:
            yield
        finally:
            purging.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await purging

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.store = store
    app.state.options = options
    return app

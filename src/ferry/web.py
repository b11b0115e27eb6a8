"""Starlette integration.

Wires the deferred renderer into a Starlette (or FastAPI) application:

- ``deferred(renderer)``: endpoint decorator. The handler returns a
  ``ferry.Response``; the decorator runs ``renderer.process`` on it (or
  ``renderer.catch`` when the handler raised ``ResponseError``) and converts
  the result to a Starlette response.
- ``install(app, renderer)``: registers exception handlers. A
  ``ResponseError`` is answered with its response, rendered through the same
  renderer; any ``FerryError`` becomes a plain-text response with the
  error's status code.

Requires: starlette

Example:
    ```python
    renderer = DeferredRenderer(JinjaEngine.from_directory("templates"))

    @deferred(renderer)
    def profile(request):
        ctx = Context().insert("username", "Bob")
        return attach(Response(), RenderInstruction.from_context("users/profile.html", ctx))

    app = Starlette(routes=[Route("/user", profile)])
    install(app, renderer)
    ```

"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable
from http import HTTPStatus
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from starlette.responses import Response as StarletteResponse

from ferry.exceptions import FerryError, ResponseError
from ferry.renderer import DeferredRenderer
from ferry.response import Response

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Response] | Callable[[Request], Awaitable[Response]]


def to_starlette(response: Response) -> StarletteResponse:
    """Convert a ferry Response into a Starlette response."""
    return StarletteResponse(
        content=response.body,
        status_code=response.status_code,
        headers=response.headers,
    )


def deferred(renderer: DeferredRenderer) -> Callable[[Handler], Callable[[Request], Awaitable[Any]]]:
    """Decorate a handler so its response goes through ``renderer``.

    Synchronous handlers run in Starlette's thread pool. Rendering runs in the
    request task after the handler returns.
    """

    def decorator(handler: Handler) -> Callable[[Request], Awaitable[Any]]:
        is_async = inspect.iscoroutinefunction(handler)

        @functools.wraps(handler)
        async def endpoint(request: Request) -> StarletteResponse:
            try:
                if is_async:
                    response = await handler(request)  # type: ignore[misc]
                else:
                    response = await run_in_threadpool(handler, request)
            except ResponseError as e:
                renderer.catch(e)
            return to_starlette(renderer.process(response))

        return endpoint

    return decorator


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def ferry_error_handler(request: Request, exc: Exception) -> StarletteResponse:
    assert isinstance(exc, FerryError)
    logger.warning("%s %s failed:\n%s", request.method, request.url.path, exc.format_compact())
    return PlainTextResponse(_status_phrase(exc.status_code), status_code=exc.status_code)


def exception_handlers(
    renderer: DeferredRenderer,
) -> dict[Any, Callable[[Request, Exception], Awaitable[StarletteResponse]]]:
    """Exception handlers for ``Starlette(exception_handlers=...)``.

    The ``ResponseError`` handler runs ``renderer.process`` on the error's
    response, so an error raised outside a ``deferred`` endpoint (an
    undecorated route, a dependency) still gets its page rendered. Responses
    already rendered by ``deferred`` carry no instruction and pass through.
    """

    async def response_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        assert isinstance(exc, ResponseError)
        try:
            response = renderer.process(exc.response)
        except FerryError as e:
            return await ferry_error_handler(request, e)
        return to_starlette(response)

    return {
        ResponseError: response_error_handler,
        FerryError: ferry_error_handler,
    }


def install(app: Any, renderer: DeferredRenderer) -> None:
    """Register Ferry's exception handlers on a Starlette or FastAPI app."""
    for exc_class, handler in exception_handlers(renderer).items():
        app.add_exception_handler(exc_class, handler)

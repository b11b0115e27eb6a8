"""Tests for the Starlette integration.

Requires: starlette, httpx (skips gracefully)
"""

from __future__ import annotations

import dataclasses
import math

import pytest

pytest.importorskip("starlette")
pytest.importorskip("httpx")

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.routing import Route
from starlette.testclient import TestClient

from ferry import (
    Context,
    DeferredRenderer,
    RenderInstruction,
    Response,
    ResponseError,
    SerializationError,
    attach,
)
from ferry.web import deferred, exception_handlers, install


@dataclasses.dataclass
class Item:
    name: str
    value: float


@pytest.fixture
def client(renderer: DeferredRenderer) -> TestClient:
    @deferred(renderer)
    def greet(request: Request) -> Response:
        ctx = Context().insert("name", request.query_params.get("name", "Ada"))
        return attach(Response(), RenderInstruction.from_context("greet.html", ctx))

    @deferred(renderer)
    async def item(request: Request) -> Response:
        value = float(request.query_params.get("value", "42"))
        try:
            instruction = RenderInstruction.from_value("item.html", Item("Widget", value))
        except SerializationError as e:
            raise e.with_status(400)
        return attach(Response(), instruction)

    @deferred(renderer)
    def raw(request: Request) -> Response:
        return Response(headers={"content-type": "text/plain"}, body="plain")

    @deferred(renderer)
    def not_found(request: Request) -> Response:
        page = Response(status_code=404)
        attach(page, RenderInstruction.from_context("errors/404.html", {"path": request.url.path}))
        raise ResponseError(page)

    @deferred(renderer)
    def missing(request: Request) -> Response:
        return attach(Response(), RenderInstruction.from_context("missing.html", {}))

    @deferred(renderer)
    def unusual_status(request: Request) -> Response:
        raise SerializationError("rejected").with_status(499)

    async def undecorated_gone(request: Request) -> None:
        page = Response(status_code=404)
        attach(page, RenderInstruction.from_context("errors/404.html", {"path": request.url.path}))
        raise ResponseError(page)

    async def undecorated_broken(request: Request) -> None:
        page = attach(Response(status_code=404), RenderInstruction.from_context("missing.html", {}))
        raise ResponseError(page)

    app = Starlette(
        routes=[
            Route("/greet", greet),
            Route("/item", item),
            Route("/raw", raw),
            Route("/gone", not_found),
            Route("/missing", missing),
            Route("/unusual", unusual_status),
            Route("/plain-gone", undecorated_gone),
            Route("/plain-broken", undecorated_broken),
        ]
    )
    install(app, renderer)
    return TestClient(app)


class TestDeferredEndpoint:
    def test_sync_handler_rendered(self, client: TestClient) -> None:
        response = client.get("/greet", params={"name": "Ada"})
        assert response.status_code == 200
        assert response.text == "Hello Ada"
        assert response.headers["content-type"] == "text/html"

    def test_async_handler_rendered(self, client: TestClient) -> None:
        response = client.get("/item")
        assert response.status_code == 200
        assert response.text == "Widget: 42.0"

    def test_response_without_instruction(self, client: TestClient) -> None:
        response = client.get("/raw")
        assert response.text == "plain"
        assert response.headers["content-type"] == "text/plain"

    def test_error_page_rendered(self, client: TestClient) -> None:
        response = client.get("/gone")
        assert response.status_code == 404
        assert response.text == "<h1>Not Found</h1><p>/gone</p>"
        assert response.headers["content-type"] == "text/html"

    def test_render_failure_is_internal_error(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("WARNING", logger="ferry.web"):
            response = client.get("/missing")
        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert "F-REN-001" in caplog.text

    def test_serialization_failure_classified_by_handler(self, client: TestClient) -> None:
        response = client.get("/item", params={"value": str(math.inf)})
        assert response.status_code == 400
        assert response.text == "Bad Request"

    def test_non_standard_status_keeps_classification(self, client: TestClient) -> None:
        response = client.get("/unusual")
        assert response.status_code == 499
        assert response.text == "Error"


class TestExceptionHandlers:
    """Errors raised outside a deferred endpoint still go through the renderer."""

    def test_undecorated_error_page_rendered(self, client: TestClient) -> None:
        response = client.get("/plain-gone")
        assert response.status_code == 404
        assert response.text == "<h1>Not Found</h1><p>/plain-gone</p>"
        assert response.headers["content-type"] == "text/html"

    def test_undecorated_error_page_render_failure(self, client: TestClient) -> None:
        response = client.get("/plain-broken")
        assert response.status_code == 500
        assert response.text == "Internal Server Error"

    def test_handler_mapping_for_constructor(self, renderer: DeferredRenderer) -> None:
        async def gone(request: Request) -> None:
            page = Response(status_code=410)
            attach(page, RenderInstruction.from_context("greet.html", {"name": "Gone"}))
            raise ResponseError(page)

        app = Starlette(
            routes=[Route("/", gone)],
            exception_handlers=exception_handlers(renderer),
        )
        response = TestClient(app).get("/")
        assert response.status_code == 410
        assert response.text == "Hello Gone"

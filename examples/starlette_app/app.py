"""Starlette integration -- deferred rendering in a real ASGI app.

Handlers return ferry Responses with instructions attached; the ``deferred``
decorator renders them after the handler returns. Raising ResponseError with
an attached instruction renders a custom error page through the same path.

Requires: starlette, uvicorn (optional -- skips gracefully)

Run:
    uvicorn app:app --reload
"""

from dataclasses import dataclass
from pathlib import Path

starlette = None
try:
    from starlette.applications import Starlette
    from starlette.requests import Request
    from starlette.routing import Route

    starlette = Starlette  # sentinel for importskip
except ImportError:
    pass

from ferry import (
    Context,
    DeferredRenderer,
    JinjaEngine,
    RenderInstruction,
    Response,
    ResponseError,
    SerializationError,
    attach,
)

templates_dir = Path(__file__).parent / "templates"
renderer = DeferredRenderer(JinjaEngine.from_directory(templates_dir))


@dataclass
class User:
    username: str
    my_var: str
    numbers: list[int]
    bio: str


if starlette is not None:
    from ferry.web import deferred, install

    @deferred(renderer)
    def user(request: Request) -> Response:
        """Bindings built key by key."""
        ctx = Context(username="Bob", my_var="Thing", numbers=[1, 2, 3])
        ctx.insert("bio", "<script>alert('pwnd');</script>")
        return attach(Response(), RenderInstruction.from_context("users/profile.html", ctx))

    @deferred(renderer)
    async def usertest(request: Request) -> Response:
        """A typed record; serialization failures are the caller's 400."""
        record = User("Bob", "Thing", [1, 2, 3], request.query_params.get("bio", ""))
        try:
            instruction = RenderInstruction.from_value("users/profile.html", record)
        except SerializationError as e:
            raise e.with_status(400)
        return attach(Response(), instruction)

    @deferred(renderer)
    def blob(request: Request) -> Response:
        """A raw blob; no numbers list means an empty list in the page."""
        data = {"username": "John Doe", "numbers": [], "bio": "blob"}
        return attach(Response(), RenderInstruction.from_value("users/profile.html", data))

    @deferred(renderer)
    def missing(request: Request) -> Response:
        """Custom 404 page rendered on the error path."""
        page = Response(status_code=404)
        attach(page, RenderInstruction.from_context("errors/404.html", {"path": request.url.path}))
        raise ResponseError(page)

    app = Starlette(
        routes=[
            Route("/user", user),
            Route("/usertest", usertest),
            Route("/blob", blob),
            Route("/missing", missing),
        ]
    )
    install(app, renderer)
else:
    app = None  # type: ignore[assignment]


def main() -> None:
    if starlette is None:
        print("Starlette not installed. Install with: pip install starlette uvicorn")
        return
    print("Run with: uvicorn app:app --reload")
    print("Endpoints:")
    print("  GET /user     -- context mode")
    print("  GET /usertest -- serialized dataclass")
    print("  GET /blob     -- serialized blob")
    print("  GET /missing  -- rendered 404 page")


if __name__ == "__main__":
    main()

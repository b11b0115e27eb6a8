"""Ferry — deferred template rendering for request pipelines.

Handlers describe *what* to render; one shared renderer does the rendering
after the handler returns. Handlers never touch the template engine.

Quickstart:
    >>> from ferry import Context, DeferredRenderer, JinjaEngine, RenderInstruction, Response
    >>> renderer = DeferredRenderer(JinjaEngine.from_mapping({"greet.html": "Hello {{ name }}"}))
    >>> response = Response()
    >>> ctx = Context().insert("name", "Ada")
    >>> renderer.attach(response, RenderInstruction.from_context("greet.html", ctx))
    >>> renderer.process(response).body
    'Hello Ada'

Two data modes:
- **Structured context**: bindings built key by key with ``Context``
  (``RenderInstruction.from_context``). Never fails.
- **Serialized value**: any dataclass, mapping or JSON-like value converted
  through ``serialize`` (``RenderInstruction.from_value``). Raises
  ``SerializationError`` when the value cannot be converted.

Pipeline hooks:
- ``process(response)``: run once per response after the handler
- ``catch(error)``: run on ``ResponseError``; renders the error's own
  response, then re-raises

Web frameworks:
``ferry.web`` wires both hooks into Starlette / FastAPI (requires starlette).

"""

from ferry.config import RendererConfig
from ferry.context import Context
from ferry.engine import JinjaEngine, TemplateEngine, ValueNotAMapError
from ferry.exceptions import (
    ErrorCode,
    FerryError,
    RenderError,
    ResponseError,
    SerializationError,
)
from ferry.instruction import (
    RenderData,
    RenderInstruction,
    SerializedValue,
    StructuredContext,
    from_context,
    from_serialized,
)
from ferry.renderer import DeferredRenderer, attach
from ferry.response import Response
from ferry.serialization import serialize

__version__ = "0.1.0"

__all__ = [
    "Context",
    "DeferredRenderer",
    "ErrorCode",
    "FerryError",
    "JinjaEngine",
    "RenderData",
    "RenderError",
    "RenderInstruction",
    "RendererConfig",
    "Response",
    "ResponseError",
    "SerializationError",
    "SerializedValue",
    "StructuredContext",
    "TemplateEngine",
    "ValueNotAMapError",
    "attach",
    "from_context",
    "from_serialized",
    "serialize",
]

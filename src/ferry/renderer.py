"""Deferred renderer — the shared post-processing stage.

Handlers attach a RenderInstruction to their Response; the pipeline calls
``process`` once per response after the handler returns, and ``catch`` when
the handler raised a ResponseError. Both paths run the same rendering logic,
so a handler that attaches an instruction to an error response (a custom 404
page) gets it rendered exactly as it would on the success path.

Response states:
1. No instruction: ``process`` returns the response unchanged
2. Instruction attached: ``process`` removes it, then renders
3. Rendered: body replaced, content type defaulted if unset
4. Render failed: ``process`` raises RenderError, body left untouched

Thread-Safety:
A DeferredRenderer is immutable after construction and shared by every
request. The instruction slot belongs to a single Response, so no locking is
needed anywhere.

Example:
    >>> renderer = DeferredRenderer(JinjaEngine.from_mapping({"greet.html": "Hello {{ name }}"}))
    >>> response = Response()
    >>> renderer.attach(response, RenderInstruction.from_context("greet.html", {"name": "Ada"}))
    >>> renderer.process(response).body
    'Hello Ada'

"""

from __future__ import annotations

import logging
from typing import NoReturn

from ferry.config import RendererConfig
from ferry.engine import TemplateEngine, error_code_for
from ferry.exceptions import RenderError, ResponseError
from ferry.instruction import RenderInstruction, SerializedValue, StructuredContext
from ferry.response import CONTENT_TYPE, Response

logger = logging.getLogger(__name__)


def attach(response: Response, instruction: RenderInstruction) -> Response:
    """Store ``instruction`` on ``response`` for the renderer to pick up.

    Replaces any instruction already attached. Never fails and performs no
    rendering.
    """
    response.render_instruction = instruction
    return response


class DeferredRenderer:
    """Renders attached instructions after handler logic completes.

    Attributes:
        engine: TemplateEngine the instructions are rendered with
        config: Content-type policy
    """

    __slots__ = ("config", "engine")

    def __init__(self, engine: TemplateEngine, config: RendererConfig | None = None):
        self.engine = engine
        self.config = config or RendererConfig()

    def attach(self, response: Response, instruction: RenderInstruction) -> Response:
        """Attach ``instruction`` to ``response``. See ``ferry.attach``."""
        return attach(response, instruction)

    def peek(self, response: Response) -> RenderInstruction | None:
        """Return the pending instruction without consuming it.

        For diagnostics and tests only; rendering happens in ``process``.
        """
        return response.render_instruction

    def process(self, response: Response) -> Response:
        """Render the attached instruction into ``response``, if any.

        Returns:
            The same response, rendered or untouched

        Raises:
            RenderError: If the engine fails; the cause is chained
        """
        instruction = response.render_instruction
        if instruction is None:
            return response
        response.render_instruction = None

        name = instruction.template_name
        try:
            match instruction.data:
                case StructuredContext(bindings):
                    page = self.engine.render(name, bindings)
                case SerializedValue(value):
                    page = self.engine.render_value(name, value)
                case other:
                    raise TypeError(f"Unknown render data: {type(other).__name__}")
        except Exception as e:
            code = error_code_for(e)
            raise RenderError(
                f"Failed to render template '{name}': {e}",
                template_name=name,
                code=code,
            ) from e

        if not response.has_header(CONTENT_TYPE):
            content_type = self.config.content_type_for(name)
            if content_type is not None:
                response.content_type = content_type
        response.body = page
        logger.debug("Rendered %s (%d chars)", name, len(page))
        return response

    def catch(self, error: ResponseError) -> NoReturn:
        """Render the error's response, then re-raise the error.

        Raises:
            ResponseError: ``error`` itself, with its response rendered
            RenderError: If rendering the error page fails
        """
        error.response = self.process(error.response)
        raise error

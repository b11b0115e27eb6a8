"""Exceptions for Ferry deferred rendering.

Exception Hierarchy:
FerryError (base)
├── SerializationError   # Value could not be converted to a tree value
└── RenderError          # Engine failed to render an attached instruction

ResponseError            # Pipeline error carrying its own partial Response

Classification:
Every FerryError carries an ``ErrorCode`` and an HTTP ``status_code``.
Rendering failures are always server-side (500): by the time the renderer
runs, the handler's inputs were already accepted, so a failure points at the
template or its variable contract. Serialization failures are classified by
the caller, since only the handler knows whether the data came from
untrusted input (400) or from the application itself (500, the default).

Example:
    ```
    F-REN-001: Failed to render template 'missing.html': missing.html
      Caused by: TemplateNotFound: missing.html
    ```

"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ferry.response import Response


class ErrorCode(Enum):
    """Searchable error codes for Ferry errors.

    Format: F-{CATEGORY}-{NUMBER}
    Categories: SER (serialization), REN (rendering)
    """

    # Serialization errors (F-SER-xxx)
    UNSUPPORTED_TYPE = "F-SER-001"
    NON_FINITE_NUMBER = "F-SER-002"
    CIRCULAR_REFERENCE = "F-SER-003"
    NESTING_TOO_DEEP = "F-SER-004"

    # Rendering errors (F-REN-xxx)
    TEMPLATE_NOT_FOUND = "F-REN-001"
    UNDEFINED_VARIABLE = "F-REN-002"
    TEMPLATE_SYNTAX = "F-REN-003"
    TEMPLATE_RUNTIME = "F-REN-004"
    VALUE_NOT_A_MAP = "F-REN-005"

    @property
    def category(self) -> str:
        """Error category ('serialization' or 'rendering')."""
        prefix = self.value.split("-")[1]
        return {
            "SER": "serialization",
            "REN": "rendering",
        }.get(prefix, "unknown")


class FerryError(Exception):
    """Base exception for all Ferry errors.

    Attributes:
        code: ErrorCode identifying the failure
        status_code: HTTP status the pipeline should answer with
    """

    code: ErrorCode | None = None
    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def format_compact(self) -> str:
        """Format error as a short diagnostic: code, message, cause."""
        header = self.message
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        parts = [header]
        cause = self.__cause__
        if cause is not None:
            parts.append(f"  Caused by: {type(cause).__name__}: {cause}")
        return "\n".join(parts)


class SerializationError(FerryError):
    """A value could not be converted to the opaque tree representation.

    Raised synchronously by ``from_serialized`` / ``RenderInstruction.from_value``
    so the handler decides how to answer. Call ``with_status(400)`` when the
    value came from untrusted input.

    Example:
        >>> from_serialized({"ratio": float("nan")})
        SerializationError: F-SER-002: Value contains a non-finite number
    """

    code: ErrorCode | None = ErrorCode.UNSUPPORTED_TYPE

    def with_status(self, status_code: int) -> SerializationError:
        """Reclassify this error (e.g. 400 for untrusted input) and return it."""
        self.status_code = status_code
        return self


class RenderError(FerryError):
    """The template engine failed to render an attached instruction.

    Always classified as an internal error (500). The engine's exception is
    chained as ``__cause__``.

    Attributes:
        template_name: Name of the template that failed to render
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_RUNTIME

    def __init__(
        self,
        message: str,
        *,
        template_name: str,
        code: ErrorCode | None = None,
    ):
        self.template_name = template_name
        super().__init__(message, code=code, status_code=500)


class ResponseError(Exception):
    """A pipeline error that carries its own partial response.

    Handlers raise this to abort normal processing while still providing the
    response that should be sent (a custom 404 page, for instance). The
    response may carry a render instruction; ``DeferredRenderer.catch`` renders
    it before the error propagates.

    Attributes:
        response: The partial response to send
    """

    def __init__(self, response: Response, message: str | None = None):
        self.response = response
        super().__init__(message or f"HTTP {response.status_code}")

    @property
    def status_code(self) -> int:
        return self.response.status_code

"""Framework-neutral response with an explicit render-instruction slot.

Handlers build a Response, optionally attach a RenderInstruction, and return
it (or raise it inside a ResponseError). The slot is an ordinary field owned by
the response, so it lives and dies with the request that created it.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ferry.instruction import RenderInstruction

CONTENT_TYPE = "content-type"


@dataclass(slots=True)
class Response:
    """Outgoing response as seen by handlers and the renderer.

    Header names are case-insensitive; use ``get_header`` / ``set_header``
    rather than touching ``headers`` directly when case may differ.

    Attributes:
        status_code: HTTP status
        headers: Header name -> value
        body: Response body, ``None`` until something sets it
        render_instruction: Pending instruction, consumed by the renderer
    """

    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: str | bytes | None = None
    render_instruction: RenderInstruction | None = None

    def _find_header(self, name: str) -> str | None:
        lowered = name.lower()
        for key in self.headers:
            if key.lower() == lowered:
                return key
        return None

    def get_header(self, name: str, default: str | None = None) -> str | None:
        key = self._find_header(name)
        return self.headers[key] if key is not None else default

    def has_header(self, name: str) -> bool:
        return self._find_header(name) is not None

    def set_header(self, name: str, value: str) -> Response:
        """Set a header, replacing an existing one regardless of case."""
        key = self._find_header(name)
        if key is not None:
            del self.headers[key]
        self.headers[name] = value
        return self

    @property
    def content_type(self) -> str | None:
        return self.get_header(CONTENT_TYPE)

    @content_type.setter
    def content_type(self, value: str) -> None:
        self.set_header(CONTENT_TYPE, value)

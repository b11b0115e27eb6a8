"""Renderer configuration."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass

HTML_CONTENT_TYPE = "text/html"


@dataclass(frozen=True, slots=True)
class RendererConfig:
    """Content-type policy applied after a successful render.

    A content type set by the handler is never overridden; these options only
    decide what to set when the response has none.

    Attributes:
        default_content_type: Content type for rendered pages. ``None`` leaves
            the header unset.
        guess_content_type: Derive the content type from the template name's
            extension (``notes.txt`` -> ``text/plain``), falling back to
            ``default_content_type`` when the extension is unknown.
    """

    default_content_type: str | None = HTML_CONTENT_TYPE
    guess_content_type: bool = False

    def content_type_for(self, template_name: str) -> str | None:
        """Content type to set for a page rendered from ``template_name``."""
        if self.guess_content_type:
            guessed, _ = mimetypes.guess_type(template_name, strict=False)
            if guessed is not None:
                return guessed
        return self.default_content_type

"""Template engine adapter.

The renderer only needs two entry points from a template engine:

- ``render(name, context)``: render a template with variable bindings
- ``render_value(name, value)``: render a template with one tree value

``JinjaEngine`` provides both over a compiled ``jinja2.Environment``. Any
object with the same two methods can stand in for it (see ``TemplateEngine``).

Strict Undefined:
Environments built by ``JinjaEngine.from_directory`` / ``from_mapping`` use
``StrictUndefined``, so a template referencing a missing variable fails to
render instead of silently producing an empty string.

Thread-Safety:
The engine is built once at startup and only read afterwards. Both
constructors use an unbounded cache with auto-reload disabled, so a compiled
template is never evicted or recompiled. ``from_directory`` compiles every
template up front (``preload=True``); ``from_mapping`` compiles each template
on first use, and ``preload()`` can be called to do it eagerly.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import jinja2

from ferry.exceptions import ErrorCode

logger = logging.getLogger(__name__)


class ValueNotAMapError(TypeError):
    """``render_value`` was given a tree value whose top level is not a map."""


@runtime_checkable
class TemplateEngine(Protocol):
    """The two render entry points the renderer dispatches to."""

    def render(self, name: str, context: Mapping[str, Any]) -> str: ...

    def render_value(self, name: str, value: Any) -> str: ...


def _environment_defaults(kwargs: dict[str, Any]) -> dict[str, Any]:
    kwargs.setdefault("undefined", jinja2.StrictUndefined)
    kwargs.setdefault("autoescape", jinja2.select_autoescape())
    kwargs.setdefault("auto_reload", False)
    kwargs.setdefault("cache_size", -1)
    return kwargs


class JinjaEngine:
    """TemplateEngine backed by a ``jinja2.Environment``.

    Example:
        >>> engine = JinjaEngine.from_mapping({"greet.html": "Hello {{ name }}"})
        >>> engine.render("greet.html", {"name": "Ada"})
        'Hello Ada'
        >>> engine.render_value("greet.html", {"name": "Ada"})
        'Hello Ada'
    """

    __slots__ = ("environment",)

    def __init__(self, environment: jinja2.Environment):
        self.environment = environment

    @classmethod
    def from_directory(
        cls,
        path: str | Path | list[str | Path],
        *,
        preload: bool = True,
        **env_kwargs: Any,
    ) -> JinjaEngine:
        """Build an engine over one or more template directories.

        Args:
            path: Directory (or directories, searched in order)
            preload: Compile every template now so syntax errors fail startup
            **env_kwargs: Extra ``jinja2.Environment`` options

        Raises:
            jinja2.TemplateSyntaxError: If ``preload`` and a template is invalid
        """
        paths = [path] if isinstance(path, (str, Path)) else list(path)
        loader = jinja2.FileSystemLoader([str(p) for p in paths])
        engine = cls(jinja2.Environment(loader=loader, **_environment_defaults(env_kwargs)))
        if preload:
            engine.preload()
        return engine

    @classmethod
    def from_mapping(cls, templates: Mapping[str, str], **env_kwargs: Any) -> JinjaEngine:
        """Build an engine over in-memory templates (tests, single-file apps)."""
        loader = jinja2.DictLoader(dict(templates))
        return cls(jinja2.Environment(loader=loader, **_environment_defaults(env_kwargs)))

    def preload(self) -> int:
        """Compile every template the loader can list. Returns the count."""
        names = self.environment.list_templates()
        for name in names:
            self.environment.get_template(name)
        logger.debug("Compiled %d templates", len(names))
        return len(names)

    def list_templates(self) -> list[str]:
        return self.environment.list_templates()

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        return self.environment.get_template(name).render(context)

    def render_value(self, name: str, value: Any) -> str:
        """Render ``name`` with the keys of a map value as variables.

        Raises:
            ValueNotAMapError: If ``value`` is not a map
        """
        if not isinstance(value, Mapping):
            raise ValueNotAMapError(
                f"Rendering '{name}' from a value requires a map, got {type(value).__name__}"
            )
        return self.environment.get_template(name).render(value)


def error_code_for(exc: BaseException) -> ErrorCode:
    """Classify an engine exception into a rendering ErrorCode."""
    if isinstance(exc, jinja2.TemplateNotFound):
        return ErrorCode.TEMPLATE_NOT_FOUND
    if isinstance(exc, jinja2.UndefinedError):
        return ErrorCode.UNDEFINED_VARIABLE
    if isinstance(exc, jinja2.TemplateSyntaxError):
        return ErrorCode.TEMPLATE_SYNTAX
    if isinstance(exc, ValueNotAMapError):
        return ErrorCode.VALUE_NOT_A_MAP
    return ErrorCode.TEMPLATE_RUNTIME

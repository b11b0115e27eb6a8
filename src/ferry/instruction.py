"""Render instructions — what a handler asks the renderer to do.

A RenderInstruction pairs a template name with RenderData, a tagged union of
two variants:

- ``StructuredContext``: variable bindings, rendered with
  ``TemplateEngine.render``
- ``SerializedValue``: one opaque tree value, rendered with
  ``TemplateEngine.render_value``

Both variants are frozen. ``from_context`` always succeeds;
``from_serialized`` raises ``SerializationError`` when the value cannot be
serialized, so a failed conversion never turns into an empty page.

Example:
    >>> ctx = Context().insert("name", "Ada")
    >>> RenderInstruction.from_context("greet.html", ctx)
    RenderInstruction(template_name='greet.html', data=StructuredContext(...))

    >>> RenderInstruction.from_value("item.html", Item(name="Widget", value=42))
    RenderInstruction(template_name='item.html', data=SerializedValue(...))

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ferry.context import Context
from ferry.serialization import serialize


@dataclass(frozen=True, slots=True)
class StructuredContext:
    """Variable bindings for ``TemplateEngine.render``.

    ``bindings`` is a read-only snapshot; mutating the Context it was built
    from afterwards does not change it.
    """

    bindings: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class SerializedValue:
    """A single tree value for ``TemplateEngine.render_value``."""

    value: Any


RenderData = StructuredContext | SerializedValue


def from_context(context: Context | Mapping[str, Any]) -> StructuredContext:
    """Wrap variable bindings as RenderData. Never fails."""
    if isinstance(context, Context):
        snapshot = context.snapshot()
    else:
        snapshot = dict(context)
    return StructuredContext(MappingProxyType(snapshot))


def from_serialized(value: Any) -> SerializedValue:
    """Serialize ``value`` and wrap the tree as RenderData.

    Raises:
        SerializationError: If ``value`` cannot be serialized
    """
    return SerializedValue(serialize(value))


@dataclass(frozen=True, slots=True)
class RenderInstruction:
    """Template name plus the data to render it with.

    Construction does no I/O and does not check that the template exists;
    the engine reports a missing template when the instruction is processed.

    Attributes:
        template_name: Name resolved by the engine's loader
        data: StructuredContext or SerializedValue
    """

    template_name: str
    data: RenderData

    @classmethod
    def from_context(
        cls, template_name: str, context: Context | Mapping[str, Any]
    ) -> RenderInstruction:
        """Instruction rendering ``template_name`` with variable bindings."""
        return cls(template_name, from_context(context))

    @classmethod
    def from_value(cls, template_name: str, value: Any) -> RenderInstruction:
        """Instruction rendering ``template_name`` with a serialized value.

        Raises:
            SerializationError: If ``value`` cannot be serialized
        """
        return cls(template_name, from_serialized(value))

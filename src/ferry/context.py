"""Ferry Context — incremental builder for template variable bindings.

A handler builds a Context key by key, then hands it to ``from_context`` or
``RenderInstruction.from_context``. Keys are unique and the last write wins.

Example:
    >>> ctx = Context().insert("username", "Bob").insert("numbers", [1, 2, 3])
    >>> ctx["username"]
    'Bob'

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from ferry.serialization import serialize


class Context(Mapping[str, Any]):
    """Mutable mapping of template variable names to values.

    Only ``insert``, ``update`` and ``remove`` mutate it; item assignment is
    not supported so that every write goes through one place.
    """

    __slots__ = ("_data",)

    def __init__(self, initial: Mapping[str, Any] | None = None, /, **kwargs: Any):
        self._data: dict[str, Any] = {}
        self.update(initial, **kwargs)

    @classmethod
    def from_value(cls, value: Any) -> Context:
        """Build a context from a serializable value whose top level is a map.

        Raises:
            SerializationError: If the value cannot be serialized
            TypeError: If the serialized value is not a map
        """
        tree = serialize(value)
        if not isinstance(tree, dict):
            raise TypeError(
                f"Creating a Context from a value requires a map, got {type(tree).__name__}"
            )
        return cls(tree)

    def insert(self, key: str, value: Any) -> Context:
        """Bind ``key`` to ``value``, replacing any previous binding."""
        if not isinstance(key, str):
            raise TypeError(f"Context keys must be str, got {type(key).__name__}")
        self._data[key] = value
        return self

    def update(self, other: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Context:
        """Bind every key of ``other`` and ``kwargs`` (kwargs win on conflict)."""
        if other is not None:
            for key, value in other.items():
                self.insert(key, value)
        for key, value in kwargs.items():
            self.insert(key, value)
        return self

    def remove(self, key: str) -> Any:
        """Unbind ``key`` and return its value.

        Raises:
            KeyError: If ``key`` is not bound
        """
        return self._data.pop(key)

    def snapshot(self) -> dict[str, Any]:
        """Shallow copy of the current bindings."""
        return dict(self._data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Context({self._data!r})"

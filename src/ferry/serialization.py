"""Serialization contract — arbitrary values to opaque tree values.

``serialize(value)`` converts an application value into the generic tree form
understood by ``TemplateEngine.render_value``: dicts with str keys, lists,
str, int, float, bool and None.

Supported inputs:
- JSON scalars, mappings, lists and tuples
- sets and frozensets (become lists)
- dataclass instances (become dicts of their fields)
- Enum members (become their value)

Rejected inputs raise ``SerializationError`` with the original exception
chained as ``__cause__``:
- non-finite floats (``nan``, ``inf``): F-SER-002
- circular structures: F-SER-003
- structures nested deeper than the recursion limit: F-SER-004
- anything else: F-SER-001

The conversion goes through ``json`` so the result is exactly what a JSON
round trip of the value would produce (tuples become lists, non-str keys
become str keys).

"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from ferry.exceptions import ErrorCode, SerializationError


def _default(obj: Any) -> Any:
    """json ``default`` hook for types json does not know natively."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Mapping):
        return dict(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not serializable")


def serialize(value: Any) -> Any:
    """Convert ``value`` into an opaque tree value.

    Args:
        value: Any application value

    Returns:
        A fresh tree of dict / list / str / int / float / bool / None

    Raises:
        SerializationError: If the value cannot be represented
    """
    try:
        encoded = json.dumps(value, default=_default, allow_nan=False)
    except TypeError as e:
        raise SerializationError(
            f"Value is not serializable: {e}",
            code=ErrorCode.UNSUPPORTED_TYPE,
        ) from e
    except ValueError as e:
        # json reports both failure kinds as ValueError
        if "Circular reference" in str(e):
            raise SerializationError(
                "Value contains a circular reference",
                code=ErrorCode.CIRCULAR_REFERENCE,
            ) from e
        raise SerializationError(
            "Value contains a non-finite number",
            code=ErrorCode.NON_FINITE_NUMBER,
        ) from e
    except RecursionError as e:
        raise SerializationError(
            "Value is nested too deeply to serialize",
            code=ErrorCode.NESTING_TOO_DEEP,
        ) from e
    return json.loads(encoded)

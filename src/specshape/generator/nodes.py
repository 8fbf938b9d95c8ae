"""Construction helpers for the JSON Schema nodes emitted by the builders.

Every helper returns a freshly allocated dict.  Object nodes always carry
``properties`` and ``required`` containers, so callers never have to check
for their existence before adding to them.  Schemas taken from the input
document are copied with :func:`clone` before they are placed in a node, so
the output never aliases the caller's document or a sibling branch.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Optional


def clone(schema: Any) -> Any:
    """Return a structurally independent copy of *schema*."""
    return copy.deepcopy(schema)


def object_schema(
    properties: Optional[dict[str, Any]] = None,
    required: Iterable[str] = (),
    additional_properties: bool = False,
) -> dict[str, Any]:
    """Build an object node with ``properties`` and ``required`` allocated up front.

    Args:
        properties: Initial property map. Values are stored as given; pass
            cloned schemas when they come from the input document.
        required: Initial required names. Duplicates are dropped.
        additional_properties: Value of ``additionalProperties``.

    Returns:
        A new object schema dict.
    """
    node: dict[str, Any] = {
        "type": "object",
        "properties": dict(properties or {}),
        "required": [],
        "additionalProperties": additional_properties,
    }
    for name in required:
        require(node, name)
    return node


def union_schema(branches: Iterable[Any] = ()) -> dict[str, Any]:
    """Build a ``oneOf`` node over *branches*."""
    return {"oneOf": list(branches)}


def enum_schema(value: str) -> dict[str, Any]:
    """Build a string schema pinned to a single value."""
    return {"type": "string", "enum": [value]}


def require(node: dict[str, Any], *names: str) -> None:
    """Append *names* to ``node["required"]``, skipping those already listed."""
    required = node["required"]
    for name in names:
        if name not in required:
            required.append(name)

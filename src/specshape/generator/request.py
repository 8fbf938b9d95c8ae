"""Build the request-shape schema of an operation.

The request is modelled as an object with four parameter buckets --
``path``, ``headers``, ``cookies`` and ``query`` -- and an optional
``body``.  When the operation accepts a body, the schema becomes a
``oneOf`` with one branch per declared content type; each branch pins
``headers.Content-Type`` to that content type.

Only required bodies make ``headers``, ``body`` and ``Content-Type``
required.  An optional body still pins the Content-Type value, so a
request that sends the header must send a matching one.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from specshape.generator.nodes import (
    clone,
    enum_schema,
    object_schema,
    require,
    union_schema,
)
from specshape.models import Body, ContentVariant, Param, ParameterLocation

logger = logging.getLogger(__name__)

# Parameter location -> request bucket, in the order buckets are emitted.
_BUCKETS: dict[ParameterLocation, str] = {
    ParameterLocation.PATH: "path",
    ParameterLocation.HEADER: "headers",
    ParameterLocation.COOKIE: "cookies",
    ParameterLocation.QUERY: "query",
}


def resolve_body(request_body: Optional[dict[str, Any]]) -> Optional[Body]:
    """Flatten a ``requestBody`` into its content variants.

    Media types without a ``schema`` are skipped.

    Args:
        request_body: The raw ``requestBody`` dict, or ``None``.

    Returns:
        A :class:`~specshape.models.Body`, or ``None`` when the body is
        absent or declares no usable content.
    """
    if not request_body:
        return None
    content = request_body.get("content")
    if not isinstance(content, dict) or not content:
        return None

    variants = [
        ContentVariant(content_type=content_type, schema=media_type["schema"])
        for content_type, media_type in content.items()
        if isinstance(media_type, dict) and "schema" in media_type
    ]
    if not variants:
        return None
    return Body(content=variants, required=bool(request_body.get("required", False)))


def body_branches(base: dict[str, Any], body: Body) -> list[dict[str, Any]]:
    """Expand *base* into one branch per content variant of *body*.

    *base* must be an object node with a ``headers`` bucket; it is copied,
    never modified.
    """
    branches: list[dict[str, Any]] = []
    for variant in body.content:
        branch = clone(base)
        branch["properties"]["body"] = clone(variant.schema_)
        headers = branch["properties"]["headers"]
        headers["properties"]["Content-Type"] = enum_schema(variant.content_type)
        if body.required:
            require(headers, "Content-Type")
            require(branch, "headers", "body")
        branches.append(branch)
    return branches


def _base_schema(params: Iterable[Param]) -> dict[str, Any]:
    buckets = {
        "path": object_schema(additional_properties=False),
        "headers": object_schema(additional_properties=True),
        "cookies": object_schema(additional_properties=True),
        "query": object_schema(additional_properties=True),
    }
    for param in params:
        bucket = buckets[_BUCKETS[param.location]]
        bucket["properties"][param.name] = clone(param.schema_)
        if param.required:
            require(bucket, param.name)

    base = object_schema(buckets, additional_properties=False)
    for name, bucket in buckets.items():
        if bucket["properties"]:
            require(base, name)
    return base


def build_request_schema(
    params: Iterable[Param], body: Optional[Body] = None
) -> dict[str, Any]:
    """Assemble the request schema for one operation.

    Args:
        params: Merged, resolved parameters of the operation.
        body: The resolved request body, if any.

    Returns:
        A ``oneOf`` node with one branch per content type of *body*, or a
        single branch when there is no body.
    """
    base = _base_schema(params)
    if body is None or not body.content:
        return union_schema([base])

    logger.debug(
        "Request body: %d content type(s), required=%s",
        len(body.content),
        body.required,
    )
    return union_schema(body_branches(base, body))

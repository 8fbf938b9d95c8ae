"""Resolve response declarations and build the response-shape schema.

Each status code of an operation contributes one or more branches to a
``oneOf``: one branch per content type, or a single branch when the
response has no body.  Every branch pins ``status`` to its code.  Unlike
request bodies, a response body is never optional: a branch that carries
content always requires ``headers``, ``body`` and ``headers.Content-Type``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from specshape.exceptions import MissingArgumentError
from specshape.generator.containers import is_extension
from specshape.generator.nodes import (
    clone,
    enum_schema,
    object_schema,
    require,
    union_schema,
)
from specshape.generator.parameters import derive_schema
from specshape.models import ContentVariant, Header, ResponseEntry

logger = logging.getLogger(__name__)


# --- Resolution ---


def resolve_header(name: Optional[str], header: Optional[dict[str, Any]]) -> Header:
    """Normalise one header declaration.

    The schema is taken from ``schema`` or derived from ``content`` exactly
    as for parameters.

    Raises:
        MissingArgumentError: If *name* or *header* is ``None``.
        MissingSchemaError: If the header has neither ``schema`` nor ``content``.
    """
    if name is None:
        raise MissingArgumentError("header name")
    if header is None:
        raise MissingArgumentError("header", field=name)
    return Header(
        name=name,
        schema=derive_schema(header, field=f"header '{name}'"),
        required=bool(header.get("required", False)),
    )


def resolve_headers(response: Optional[dict[str, Any]]) -> list[Header]:
    """Resolve every header of a response, in declaration order."""
    if response is None:
        raise MissingArgumentError("response")
    headers = response.get("headers") or {}
    return [
        resolve_header(name, header)
        for name, header in headers.items()
        if header is not None
    ]


def resolve_content(
    response: Optional[dict[str, Any]],
) -> Optional[list[ContentVariant]]:
    """Resolve the content variants of a response.

    Media types without a ``schema`` are skipped.

    Returns:
        The variants in declaration order, or ``None`` when the response
        has no usable content.
    """
    if response is None:
        return None
    content = response.get("content")
    if not isinstance(content, dict):
        return None
    variants = [
        ContentVariant(content_type=content_type, schema=media_type["schema"])
        for content_type, media_type in content.items()
        if isinstance(media_type, dict) and "schema" in media_type
    ]
    return variants or None


def resolve_response(
    status: Optional[str], response: Optional[dict[str, Any]]
) -> ResponseEntry:
    """Resolve the headers and content of one response.

    Args:
        status: The status code (``"200"``, ``"default"``, ...), or
            ``None`` for a component response.
        response: The raw response object.
    """
    if response is None:
        raise MissingArgumentError("response", field=status)
    return ResponseEntry(
        status=None if status is None else str(status),
        headers=resolve_headers(response),
        content=resolve_content(response),
    )


def resolve_responses(responses: Optional[dict[Any, Any]]) -> list[ResponseEntry]:
    """Resolve every status of a ``responses`` map, in insertion order.

    Status keys are stringified because YAML loads ``200:`` as an integer.
    ``x-`` extension keys are not statuses and are skipped.
    """
    if not responses:
        return []
    return [
        resolve_response(str(status), response)
        for status, response in responses.items()
        if response is not None and not is_extension(status)
    ]


# --- Schema building ---


def build_response_branches(
    entry: ResponseEntry, include_status: bool = True
) -> list[dict[str, Any]]:
    """Build the ``oneOf`` branches contributed by one response.

    Args:
        entry: The resolved response.
        include_status: Whether to pin a ``status`` property. Component
            responses have no status code and pass ``False``.

    Returns:
        One branch per content variant, or a single branch when the
        response has no content.
    """
    node = object_schema(additional_properties=False)
    if include_status and entry.status is not None:
        node["properties"]["status"] = enum_schema(entry.status)
        require(node, "status")

    if entry.headers:
        headers = object_schema(additional_properties=True)
        for header in entry.headers:
            headers["properties"][header.name] = clone(header.schema_)
            if header.required:
                require(headers, header.name)
        node["properties"]["headers"] = headers
        require(node, "headers")

    if not entry.content:
        return [node]

    branches: list[dict[str, Any]] = []
    for variant in entry.content:
        branch = clone(node)
        properties = branch["properties"]
        headers = properties.setdefault(
            "headers", object_schema(additional_properties=True)
        )
        headers["properties"]["Content-Type"] = enum_schema(variant.content_type)
        require(headers, "Content-Type")
        properties["body"] = clone(variant.schema_)
        require(branch, "headers", "body")
        branches.append(branch)
    return branches


def build_responses_schema(entries: Iterable[ResponseEntry]) -> dict[str, Any]:
    """Assemble the responses schema for one operation.

    Branches are emitted status by status, in the order of *entries*.
    """
    branches: list[dict[str, Any]] = []
    for entry in entries:
        produced = build_response_branches(entry)
        logger.debug("Response %s: %d branch(es)", entry.status, len(produced))
        branches.extend(produced)
    return union_schema(branches)

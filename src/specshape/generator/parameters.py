"""Resolve parameter declarations into canonical :class:`~specshape.models.Param` records.

A parameter (and, in :mod:`~specshape.generator.responses`, a header)
describes its value either with an inline ``schema`` or with a ``content``
map holding exactly one media type.  :func:`derive_schema` implements that
choice for both callers.  When the media type declares an ``encoding``,
each property whose encoding names a ``contentType`` is annotated with
``contentMediaType`` on a copy of the schema.

Parameter merging follows the OpenAPI specification: operation-level
parameters are kept as declared, and a path-level parameter is only added
when no operation-level parameter shares its ``name`` and ``in`` values.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specshape.exceptions import (
    ContentDerivationError,
    InvalidShapeError,
    MissingArgumentError,
    MissingSchemaError,
)
from specshape.generator.nodes import clone
from specshape.models import Param, ParameterLocation

logger = logging.getLogger(__name__)


def schema_from_content(
    content: Optional[dict[str, Any]], *, field: str = "content"
) -> Any:
    """Derive a schema from a single-entry ``content`` map.

    Only the first media type is considered.  The returned schema is a copy;
    the input document is left untouched.

    Args:
        content: The ``content`` map of a parameter or header.
        field: Name of the declaring field, used in error messages.

    Returns:
        The media type's schema, with ``contentMediaType`` stamped onto
        properties named by the media type's ``encoding``.

    Raises:
        MissingArgumentError: If *content* is ``None``.
        ContentDerivationError: If the map is empty, its first media type is
            absent, or the media type has no ``schema``.
    """
    if content is None:
        raise MissingArgumentError("content", field=field)
    if not content:
        raise ContentDerivationError("content map is empty", field=field)

    content_type = next(iter(content))
    media_type = content[content_type]
    if media_type is None:
        raise ContentDerivationError(
            f"media type '{content_type}' is undefined", field=field
        )
    if "schema" not in media_type:
        raise ContentDerivationError(
            f"there is no schema in media type '{content_type}'", field=field
        )

    schema = clone(media_type["schema"])
    encoding = media_type.get("encoding")
    if encoding and isinstance(schema, dict) and schema.get("type") == "object":
        properties = schema.get("properties")
        if isinstance(properties, dict):
            for name, spec in encoding.items():
                prop = properties.get(name)
                media = (spec or {}).get("contentType")
                if isinstance(prop, dict) and media is not None:
                    prop["contentMediaType"] = media
    return schema


def derive_schema(declaration: dict[str, Any], *, field: str) -> Any:
    """Return the schema of a parameter or header declaration.

    An inline ``schema`` wins over ``content``.

    Raises:
        MissingSchemaError: If neither ``schema`` nor ``content`` is present.
    """
    if "schema" in declaration:
        return clone(declaration["schema"])
    if "content" in declaration:
        return schema_from_content(declaration["content"], field=field)
    raise MissingSchemaError("schema and content are undefined", field=field)


def resolve_parameter(parameter: Optional[dict[str, Any]]) -> Param:
    """Normalise a raw parameter declaration.

    Path parameters are always required, whatever the document declares;
    the other locations take the declared ``required`` flag (default
    ``False``).

    Raises:
        MissingArgumentError: If *parameter* is ``None``.
        InvalidShapeError: If the parameter has no name or an unknown ``in``.
        MissingSchemaError: If it has neither ``schema`` nor ``content``.
        ContentDerivationError: If its ``content`` map cannot be used.
    """
    if parameter is None:
        raise MissingArgumentError("parameter")

    name = parameter.get("name")
    if not isinstance(name, str):
        raise InvalidShapeError("parameter has no name", field="name")
    try:
        location = ParameterLocation(parameter.get("in"))
    except ValueError:
        raise InvalidShapeError(
            f"parameter '{name}' has unknown location {parameter.get('in')!r}",
            field="in",
        ) from None

    schema = derive_schema(parameter, field=f"parameter '{name}'")
    required = (
        True
        if location == ParameterLocation.PATH
        else bool(parameter.get("required", False))
    )
    return Param(name=name, location=location, schema=schema, required=required)


def resolve_parameters(parameters: Any) -> list[Param]:
    """Resolve a raw parameter list, preserving order.

    Raises:
        InvalidShapeError: If *parameters* is not a list or tuple.
    """
    if parameters is None:
        return []
    if not isinstance(parameters, (list, tuple)):
        raise InvalidShapeError(
            f"parameters are not an array (got {type(parameters).__name__})",
            field="parameters",
        )
    return [resolve_parameter(parameter) for parameter in parameters]


def merge_parameters(path_level: Any, operation_level: Any) -> list[Param]:
    """Merge path-level and operation-level parameter lists.

    Operation-level parameters come first, exactly as declared.  A
    path-level parameter is appended only when no operation-level parameter
    has the same ``(name, location)``.

    Args:
        path_level: Raw ``parameters`` of the path item (or ``None``).
        operation_level: Raw ``parameters`` of the operation (or ``None``).

    Returns:
        The merged, resolved parameters.
    """
    merged = resolve_parameters(operation_level)
    seen = {param.key for param in merged}
    for param in resolve_parameters(path_level):
        if param.key in seen:
            logger.debug(
                "Parameter %s in %s overridden at operation level",
                param.name,
                param.location.value,
            )
            continue
        merged.append(param)
    return merged

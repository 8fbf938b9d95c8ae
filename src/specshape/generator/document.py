"""Build the three named root schemas handed to the schema-to-type compiler."""

from __future__ import annotations

from typing import Any

from specshape.exceptions import MissingArgumentError
from specshape.generator.components import build_components_schema
from specshape.generator.tree import build_paths_schema, build_webhooks_schema

ROOT_NAMES = ("Paths", "Webhooks", "Components")
"""Root names, in the order they are emitted."""


def build_schemas(document: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Transform a dereferenced API description into its root schemas.

    The document is only read; calling this twice on the same document
    yields deep-equal results.

    Args:
        document: The document returned by
            :func:`~specshape.parser.resolver.resolve_refs`.

    Returns:
        ``{"Paths": ..., "Webhooks": ..., "Components": ...}``.

    Raises:
        MissingArgumentError: If *document* is ``None``.
        SchemaBuildError: On the first structural problem in the document.
    """
    if document is None:
        raise MissingArgumentError("document")
    return {
        "Paths": build_paths_schema(document),
        "Webhooks": build_webhooks_schema(document),
        "Components": build_components_schema(document),
    }

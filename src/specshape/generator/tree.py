"""Assemble the ``Paths`` and ``Webhooks`` schema trees.

A tree is an object with one required property per path (or webhook),
each an object with one required property per HTTP method declared on
that path item.  The same traversal serves both containers; see
:class:`~specshape.generator.containers.Container`.

Single-item lookups are strict and raise
:class:`~specshape.exceptions.NoPathInSchema` /
:class:`~specshape.exceptions.NoWebhookInSchema`, whereas the whole-tree
builders return an empty tree when the document has no such container.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specshape.exceptions import MissingArgumentError
from specshape.generator.components import build_components_token
from specshape.generator.containers import PATHS, WEBHOOKS, Container, operation_methods
from specshape.generator.nodes import object_schema, require
from specshape.generator.operation import build_operation_schema

logger = logging.getLogger(__name__)


def build_item_schema(
    document: dict[str, Any], key: Optional[str], container: Container = PATHS
) -> dict[str, Any]:
    """Build the schema of one path item: one property per declared method.

    Raises:
        MissingArgumentError: If *document* or *key* is ``None``.
        StructuralAbsenceError: If the container or *key* is absent.
    """
    if document is None:
        raise MissingArgumentError("document")
    item = container.get_item(document, key)

    node = object_schema(additional_properties=False)
    for method in operation_methods(item):
        node["properties"][method] = build_operation_schema(
            document, key, method, container
        )
        require(node, method)
    return node


def build_tree(document: dict[str, Any], container: Container = PATHS) -> dict[str, Any]:
    """Build the tree of every item in *container*, in declaration order.

    The components token is embedded under a ``components`` key at the root
    so that the tree is self-contained.

    Args:
        document: The fully dereferenced API description.
        container: :data:`~specshape.generator.containers.PATHS` or
            :data:`~specshape.generator.containers.WEBHOOKS`.

    Returns:
        The tree schema; it has no properties when the container is absent.
    """
    if document is None:
        raise MissingArgumentError("document")

    tree = object_schema(additional_properties=False)
    tree["components"] = build_components_token(document)

    if container.get_container(document) is None:
        logger.debug("Document has no %s; emitting an empty tree", container.field)
        return tree

    for key, _item in container.iter_items(document):
        tree["properties"][key] = build_item_schema(document, key, container)
        require(tree, key)
    logger.debug("Built %d %s", len(tree["required"]), container.field)
    return tree


def build_paths_schema(document: dict[str, Any]) -> dict[str, Any]:
    """Build the ``Paths`` tree."""
    return build_tree(document, PATHS)


def build_webhooks_schema(document: dict[str, Any]) -> dict[str, Any]:
    """Build the ``Webhooks`` tree."""
    return build_tree(document, WEBHOOKS)

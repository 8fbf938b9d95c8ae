"""Lookup of path items in the document's ``paths`` and ``webhooks`` containers.

Both containers map a key (a URL template or a webhook name) to a *Path
Item Object*.  :class:`Container` captures the only differences between
them -- which document field to read and which error to raise when a key
is missing -- so the tree and operation builders need a single
implementation for both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

from specshape.exceptions import (
    InvalidShapeError,
    MissingArgumentError,
    NoPathInSchema,
    NoWebhookInSchema,
    StructuralAbsenceError,
)
from specshape.models import HTTPMethod

_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def is_extension(key: Any) -> bool:
    """True for ``x-`` specification extension keys."""
    return isinstance(key, str) and key.startswith("x-")


@dataclass(frozen=True)
class Container:
    """A top-level document field holding path items.

    Attributes:
        field: Document key of the container (``"paths"`` or ``"webhooks"``).
        label: Singular noun used in messages (``"path"`` or ``"webhook"``).
        not_found: Error raised when the container or an item is missing.
    """

    field: str
    label: str
    not_found: type[StructuralAbsenceError]

    def get_container(self, document: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Return the container mapping, or ``None`` when the document has none."""
        if document is None:
            raise MissingArgumentError("document")
        return document.get(self.field)

    def iter_items(self, document: dict[str, Any]) -> Iterator[tuple[str, dict[str, Any]]]:
        """Yield (key, path item) pairs in declaration order.

        Extension keys and null items are skipped.
        """
        for key, item in (self.get_container(document) or {}).items():
            if item is not None and not is_extension(key):
                yield key, item

    def get_item(self, document: dict[str, Any], key: Optional[str]) -> dict[str, Any]:
        """Return the path item stored under *key*.

        Raises:
            MissingArgumentError: If *key* is ``None``.
            StructuralAbsenceError: If the container or the key is absent.
        """
        if key is None:
            raise MissingArgumentError(self.label)
        items = self.get_container(document)
        if items is None:
            raise self.not_found(f"document contains no {self.field}", field=self.field)
        item = None if is_extension(key) else items.get(key)
        if item is None:
            raise self.not_found(
                f"document doesn't contain this {self.label}", path=key, field=self.field
            )
        return item

    def get_operation(
        self, document: dict[str, Any], key: Optional[str], method: Optional[str]
    ) -> tuple[dict[str, Any], dict[str, Any]]:
        """Return the path item under *key* and its operation for *method*.

        Raises:
            MissingArgumentError: If *method* is ``None``.
            StructuralAbsenceError: If the item or the operation is absent.
        """
        if method is None:
            raise MissingArgumentError("operation", path=key)
        item = self.get_item(document, key)
        operation = item.get(method)
        if operation is None:
            raise StructuralAbsenceError(
                f"{self.label} doesn't contain this operation",
                path=key,
                method=method,
            )
        return item, operation


PATHS = Container(field="paths", label="path", not_found=NoPathInSchema)
WEBHOOKS = Container(field="webhooks", label="webhook", not_found=NoWebhookInSchema)

_CONTAINERS = {PATHS.field: PATHS, WEBHOOKS.field: WEBHOOKS}


def get_container_kind(group: Optional[str]) -> Container:
    """Map a group discriminator (``"paths"`` or ``"webhooks"``) to its container.

    Raises:
        MissingArgumentError: If *group* is ``None``.
        InvalidShapeError: If *group* names neither container.
    """
    if group is None:
        raise MissingArgumentError("group name")
    try:
        return _CONTAINERS[group]
    except KeyError:
        raise InvalidShapeError(
            f"group name is not valid: {group!r}", field="group"
        ) from None


def operation_methods(item: dict[str, Any]) -> list[str]:
    """Return the HTTP methods declared on a path item, in declaration order."""
    return [
        key for key, value in item.items() if key in _HTTP_METHODS and value is not None
    ]

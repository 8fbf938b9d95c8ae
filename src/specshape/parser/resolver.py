"""Inline the internal ``$ref`` pointers of an API description.

The schema builders never follow references themselves; they expect every
``{"$ref": "#/..."}`` object to have been replaced by its target first.
:func:`resolve_refs` does that on a private copy of the document.

Rules:

* Only same-document pointers (``#/...``) are followed.  Anything else,
  such as ``other.yaml#/Pet`` or a URL, is a failure.
* A pointer that would re-enter itself is left as a ``$ref`` object at the
  point where the cycle closes, so self-referencing schemas keep one
  expanded level.
* The walk never stops at the first failure.  Each bad pointer is recorded
  with the JSON Pointer of the place it was found, and one
  :class:`~specshape.exceptions.ReferenceResolutionError` reports them all.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from specshape.exceptions import ReferenceFailure, ReferenceResolutionError

logger = logging.getLogger(__name__)


def resolve_refs(spec: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *spec* with every internal reference inlined.

    *spec* itself is left untouched, and targets inlined at several places
    are independent copies.

    Args:
        spec: The raw document, as returned by
            :func:`~specshape.parser.loader.load_spec`.

    Raises:
        ReferenceResolutionError: If at least one reference is external or
            dangling.
    """
    root = copy.deepcopy(spec)
    failures: list[ReferenceFailure] = []
    resolved = _walk(root, root, failures, "#", frozenset())
    if failures:
        raise ReferenceResolutionError(failures)
    logger.debug("All references resolved")
    return resolved


def _escape(segment: Any) -> str:
    return str(segment).replace("~", "~0").replace("/", "~1")


def _step(node: Any, segment: str) -> Any:
    if isinstance(node, dict):
        if segment not in node:
            raise LookupError(f"key '{segment}' not found")
        return node[segment]
    if isinstance(node, list):
        try:
            return node[int(segment)]
        except (ValueError, IndexError):
            raise LookupError(f"invalid array index '{segment}'") from None
    raise LookupError(f"cannot navigate into {type(node).__name__}")


def _resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Follow the JSON Pointer *ref* (``~1`` is ``/``, ``~0`` is ``~``) from *root*.

    Raises:
        LookupError: For external references or a pointer that leads nowhere.
    """
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise LookupError("external references are not supported")
    node: Any = root
    for raw in ref[2:].split("/"):
        node = _step(node, raw.replace("~1", "/").replace("~0", "~"))
    return node


def _walk(
    node: Any,
    root: dict[str, Any],
    failures: list[ReferenceFailure],
    location: str,
    active: frozenset[str],
) -> Any:
    """Rebuild *node* with references replaced.

    *location* is the JSON Pointer of *node* in the document, used in
    failure reports.  *active* holds the references being expanded on the
    current branch only.
    """
    if isinstance(node, list):
        return [
            _walk(item, root, failures, f"{location}/{index}", active)
            for index, item in enumerate(node)
        ]
    if not isinstance(node, dict):
        return node

    if "$ref" not in node:
        return {
            key: _walk(value, root, failures, f"{location}/{_escape(key)}", active)
            for key, value in node.items()
        }

    ref = node["$ref"]
    if isinstance(ref, str) and ref in active:
        return node
    try:
        target = _resolve_ref(ref, root)
    except LookupError as exc:
        failures.append(ReferenceFailure(ref=str(ref), location=location, reason=str(exc)))
        return node
    return _walk(target, root, failures, location, active | {ref})

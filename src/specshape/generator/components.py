"""Project the document's ``components`` section into schema form.

Two views are produced from the same derivation:

* the **token** (:func:`build_components_token`) -- a flat
  ``{kind: {name: schema}}`` map embedded at the root of the ``Paths`` and
  ``Webhooks`` trees for lookup by name;
* the **schema** (:func:`build_components_schema`) -- an object schema whose
  properties are the kinds, each an object requiring every member name.

Only ``schemas``, ``responses``, ``parameters``, ``requestBodies`` and
``headers`` are projected.  Members are shaped exactly as their inline
counterparts: a component response yields the same branches as an inline
response (minus the status code), a component request body the same
Content-Type branches as an inline body.  Kinds that are absent or empty
are omitted from both views.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from specshape.exceptions import MissingArgumentError
from specshape.generator.nodes import clone, object_schema, require, union_schema
from specshape.generator.parameters import resolve_parameter
from specshape.generator.request import body_branches, resolve_body
from specshape.generator.responses import (
    build_response_branches,
    resolve_header,
    resolve_response,
)

logger = logging.getLogger(__name__)


def _schema_member(name: str, schema: Any) -> Any:
    return clone(schema)


def _response_member(name: str, response: Optional[dict[str, Any]]) -> dict[str, Any]:
    if response is None:
        raise MissingArgumentError("response", field=name)
    entry = resolve_response(None, response)
    return union_schema(build_response_branches(entry, include_status=False))


def _parameter_member(name: str, parameter: Optional[dict[str, Any]]) -> Any:
    return resolve_parameter(parameter).schema_


def _request_body_member(
    name: str, request_body: Optional[dict[str, Any]]
) -> dict[str, Any]:
    if request_body is None:
        raise MissingArgumentError("request body", field=name)
    base = object_schema(
        {"headers": object_schema(additional_properties=True)},
        additional_properties=False,
    )
    body = resolve_body(request_body)
    if body is None:
        return union_schema([base])
    return union_schema(body_branches(base, body))


def _header_member(name: str, header: Optional[dict[str, Any]]) -> Any:
    return resolve_header(name, header).schema_


# Component kind -> member derivation.
_KINDS: dict[str, Callable[[str, Any], Any]] = {
    "schemas": _schema_member,
    "responses": _response_member,
    "parameters": _parameter_member,
    "requestBodies": _request_body_member,
    "headers": _header_member,
}


def build_components_token(document: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Build the flat ``{kind: {name: schema}}`` view of ``components``.

    Kinds appear in the order the document declares them.

    Raises:
        MissingArgumentError: If *document* is ``None``.
    """
    if document is None:
        raise MissingArgumentError("document")
    components = document.get("components") or {}

    token: dict[str, dict[str, Any]] = {}
    for kind, members in components.items():
        derive = _KINDS.get(kind)
        if derive is None or not members:
            continue
        token[kind] = {name: derive(name, member) for name, member in members.items()}
        logger.debug("Component %s: %d member(s)", kind, len(token[kind]))
    return token


def build_components_schema(document: dict[str, Any]) -> dict[str, Any]:
    """Build the nested ``Components`` object schema.

    Every present kind becomes a required property; every member of a kind
    becomes a required property of that kind.
    """
    root = object_schema(additional_properties=False)
    for kind, members in build_components_token(document).items():
        root["properties"][kind] = object_schema(
            {name: clone(schema) for name, schema in members.items()},
            required=members,
            additional_properties=False,
        )
        require(root, kind)
    return root

"""Build the schema of a single operation: its request and its responses."""

from __future__ import annotations

import logging
from typing import Any, Optional

from specshape.exceptions import MissingArgumentError, SchemaBuildError
from specshape.generator.containers import PATHS, Container
from specshape.generator.nodes import object_schema
from specshape.generator.parameters import merge_parameters
from specshape.generator.request import build_request_schema, resolve_body
from specshape.generator.responses import build_responses_schema, resolve_responses

logger = logging.getLogger(__name__)


def build_operation_schema(
    document: dict[str, Any],
    key: Optional[str],
    method: Optional[str],
    container: Container = PATHS,
) -> dict[str, Any]:
    """Build the ``{request, responses}`` object for one operation.

    Path-item parameters are merged with the operation's own parameters
    before the request is built; operation-level declarations win.

    Args:
        document: The fully dereferenced API description.
        key: The path (or webhook name) holding the operation.
        method: The lower-case HTTP method.
        container: Which container *key* lives in.

    Returns:
        An object schema requiring both ``request`` and ``responses``.

    Raises:
        MissingArgumentError: If *document*, *key* or *method* is ``None``.
        StructuralAbsenceError: If the item or operation does not exist.
    """
    if document is None:
        raise MissingArgumentError("document")
    item, operation = container.get_operation(document, key, method)

    logger.debug("Building %s %s (%s)", method.upper(), key, container.field)
    try:
        params = merge_parameters(item.get("parameters"), operation.get("parameters"))
        request = build_request_schema(params, resolve_body(operation.get("requestBody")))
        responses = build_responses_schema(resolve_responses(operation.get("responses")))
    except SchemaBuildError as exc:
        exc.locate(path=key, method=method)
        raise

    return object_schema(
        {"request": request, "responses": responses},
        required=("request", "responses"),
        additional_properties=False,
    )

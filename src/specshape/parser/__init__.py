"""API description parser -- load documents and resolve ``$ref`` pointers.

This sub-package is responsible for the first half of the specshape pipeline:
turning a raw OpenAPI 3.x document (JSON or YAML, local file or remote URL)
into the fully dereferenced dict that :mod:`specshape.generator` consumes.

Typical usage::

    from specshape.parser import load_spec, resolve_refs, validate_openapi_version

    raw = load_spec("openapi.yaml")
    validate_openapi_version(raw)
    document = resolve_refs(raw)

Sub-modules:

* :mod:`~specshape.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~specshape.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection and aggregated failure reporting.
"""

from typing import Any

from specshape.parser.loader import load_spec, validate_openapi_version
from specshape.parser.resolver import resolve_refs


def load_document(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load, version-check and dereference a document in one call.

    Raises:
        SpecParseError: If the document cannot be loaded or has an
            unsupported version.
        ReferenceResolutionError: If any ``$ref`` cannot be resolved.
    """
    raw = load_spec(source, timeout=timeout)
    validate_openapi_version(raw)
    return resolve_refs(raw)


__all__ = ["load_document", "load_spec", "validate_openapi_version", "resolve_refs"]

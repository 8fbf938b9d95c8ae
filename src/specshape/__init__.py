"""specshape -- Derive request/response JSON Schemas from OpenAPI 3.0/3.1 documents.

This package turns a dereferenced OpenAPI document into three named JSON
Schema roots that a schema-to-type compiler can consume:

* ``Paths`` -- one property per path, one per HTTP method, each an object
  with a ``request`` and a ``responses`` schema.
* ``Webhooks`` -- the same tree for the document's webhooks.
* ``Components`` -- the reusable component members, shaped like their
  inline counterparts.

Typical workflow::

    specshape build -i openapi.yaml -o schemas.json
    specshape inspect operations -i openapi.yaml

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Document loading and ``$ref`` resolution.
    generator: Schema assembly.
"""

__version__ = "0.1.0"

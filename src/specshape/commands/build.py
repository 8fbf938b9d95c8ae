"""Build command -- emit the root schemas of an API description.

``specshape build`` runs the whole pipeline: load the document, check its
OpenAPI version, resolve every internal ``$ref`` and assemble the
``Paths``, ``Webhooks`` and ``Components`` roots.  The result is written
as a single JSON object keyed by root name, either to stdout or atomically
to the ``--output`` file.  A failed run never creates or truncates the
output file.
"""

from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import Optional

import typer

from specshape.exceptions import SpecshapeError
from specshape.output import debug, print_json, success, warning


class RootName(str, enum.Enum):
    """Names accepted by ``--root``."""

    PATHS = "Paths"
    WEBHOOKS = "Webhooks"
    COMPONENTS = "Components"


def build_command(
    source: str = typer.Option(
        ...,
        "--input",
        "-i",
        help="OpenAPI document: a .json/.yaml/.yml file, an http(s) URL, or '-' for stdin.",
    ),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the schemas to this file instead of stdout."
    ),
    roots: Optional[list[RootName]] = typer.Option(
        None, "--root", help="Only emit this root. Repeatable."
    ),
    indent: Optional[int] = typer.Option(
        None, "--indent", min=0, help="JSON indentation (0 for compact output)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds for URL sources."
    ),
) -> None:
    """Generate the Paths, Webhooks and Components schemas of a document.

    Args:
        source: Path, URL or ``-`` for the input document.
        output_file: Destination file; stdout when omitted.
        roots: Subset of roots to emit; all three when omitted.
        indent: Override of the configured ``output.indent``.
        timeout: Override of the configured ``loader.timeout``.

    Raises:
        typer.Exit: With the failing error's exit code.

    Example::

        specshape build -i openapi.yaml -o schemas.json
        specshape build -i https://example.com/openapi.json --root Paths
        cat openapi.yaml | specshape build -i - --indent 0
    """
    from specshape.app import fail
    from specshape.config import atomic_write, resolve_config
    from specshape.generator import ROOT_NAMES, build_schemas
    from specshape.parser import load_document

    try:
        config = resolve_config(cli_indent=indent, cli_timeout=timeout)
        document = load_document(source, timeout=config.loader.timeout)
        schemas = build_schemas(document)
    except SpecshapeError as exc:
        fail(exc)

    if not document.get("paths") and not document.get("webhooks"):
        warning("Document declares no paths or webhooks; both trees are empty.")

    if roots:
        wanted = {root.value for root in roots}
        schemas = {name: schemas[name] for name in ROOT_NAMES if name in wanted}
    debug(f"Built roots: {', '.join(schemas)}")

    out_indent = config.output.indent
    if output_file is None:
        print_json(schemas, indent=out_indent)
        return

    text = json.dumps(schemas, indent=out_indent or None, ensure_ascii=False)
    atomic_write(output_file, text + "\n")
    success(f"Wrote {len(schemas)} root schema(s) to {output_file}")

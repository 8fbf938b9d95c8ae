"""Inspect commands -- examine what a document contributes to the schemas.

Provides the ``specshape inspect`` sub-command group with read-only
commands that load a document and summarise the generated shapes:
operations with their request and response branch counts, and component
kinds with their member counts.  Output follows the active format
(table, plain TSV or JSON).
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from specshape.exceptions import SpecshapeError
from specshape.output import info, print_table


inspect_app = typer.Typer(no_args_is_help=True)

_INPUT_HELP = "OpenAPI document: a .json/.yaml/.yml file, an http(s) URL, or '-' for stdin."


def _load(source: str, timeout: Optional[float]) -> dict[str, Any]:
    """Resolve config and load the dereferenced document.

    Raises:
        typer.Exit: With the failing error's exit code.
    """
    from specshape.app import fail
    from specshape.config import resolve_config
    from specshape.parser import load_document

    try:
        config = resolve_config(cli_timeout=timeout)
        return load_document(source, timeout=config.loader.timeout)
    except SpecshapeError as exc:
        fail(exc)


@inspect_app.command("operations")
def inspect_operations(
    source: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds for URL sources."
    ),
) -> None:
    """List every operation with its request and response branch counts.

    Paths are listed before webhooks, each in declaration order.

    Example::

        specshape inspect operations -i openapi.yaml
        specshape --json inspect operations -i openapi.yaml
    """
    from specshape.app import fail
    from specshape.generator.containers import PATHS, WEBHOOKS, operation_methods
    from specshape.generator.operation import build_operation_schema

    document = _load(source, timeout)

    rows: list[list[str]] = []
    try:
        for container in (PATHS, WEBHOOKS):
            for key, item in container.iter_items(document):
                for method in operation_methods(item):
                    schema = build_operation_schema(document, key, method, container)
                    properties = schema["properties"]
                    rows.append([
                        container.label,
                        method.upper(),
                        key,
                        str(len(properties["request"]["oneOf"])),
                        str(len(properties["responses"]["oneOf"])),
                    ])
    except SpecshapeError as exc:
        fail(exc)

    if not rows:
        info("No operations defined in this document.")
        return

    print_table(
        ["Kind", "Method", "Key", "Request branches", "Response branches"],
        rows,
        title=f"Operations ({len(rows)})",
    )


@inspect_app.command("components")
def inspect_components(
    source: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="HTTP timeout in seconds for URL sources."
    ),
) -> None:
    """List the component kinds that contribute schemas, with member counts.

    Up to five member names are shown per kind.

    Example::

        specshape inspect components -i openapi.yaml
    """
    from specshape.app import fail
    from specshape.generator import build_components_token

    document = _load(source, timeout)
    try:
        token = build_components_token(document)
    except SpecshapeError as exc:
        fail(exc)

    if not token:
        info("No components defined in this document.")
        return

    rows: list[list[str]] = []
    for kind, members in token.items():
        names = list(members)
        shown = ", ".join(names[:5])
        if len(names) > 5:
            shown += "..."
        rows.append([kind, str(len(names)), shown])

    print_table(
        ["Kind", "Members", "Names"], rows, title=f"Components ({len(rows)})"
    )

"""The ``specshape`` command line.

Builds the Typer application, attaches ``build`` plus the ``inspect`` and
``config`` groups, and provides :func:`main`, the console-script entry
point.  Every command shares one :class:`~specshape.output.OutputManager`
configured by the root callback.

Known failures (:class:`~specshape.exceptions.SpecshapeError`) end the
process with the error's own exit code.  Anything else is treated as a bug:
the traceback goes to ``<data dir>/logs/crash-<timestamp>.log`` and the
process exits with :data:`~specshape.exit_codes.EXIT_GENERIC_FAILURE`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

import typer

from specshape import __version__
from specshape.exceptions import SpecshapeError
from specshape.exit_codes import EXIT_GENERIC_FAILURE

EXIT_CANCELLED = 130

app = typer.Typer(
    name="specshape",
    help="Derive request/response JSON Schemas from OpenAPI 3.0/3.1 documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"specshape {__version__}")
        raise typer.Exit()


def _select_format(json_output: bool, plain_output: bool, use_config: bool) -> str:
    """Pick the output format.

    ``--json`` and ``--plain`` are the CLI layer of ``output.format``; without
    *use_config* the other layers are not read at all.
    """
    flag = "json" if json_output else "plain" if plain_output else None
    if not use_config:
        return flag or "auto"
    from specshape.config import resolve_config

    return resolve_config(cli_format=flag).output.format


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True,
        help="Print the version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit tables as JSON records."),
    plain_output: bool = typer.Option(False, "--plain", help="Emit tables as tab-separated text."),
    no_color: bool = typer.Option(False, "--no-color", help="Never colorize output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide informational messages."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline details to stderr."),
) -> None:
    """Configure output and logging before the chosen command runs.

    The ``config`` group skips reading the configured ``output.format`` so
    that a broken config file can still be inspected or reset.
    """
    from specshape.output import OutputFormat, OutputManager, set_output

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="[debug] %(name)s: %(message)s",
        )

    try:
        fmt = _select_format(
            json_output, plain_output, use_config=ctx.invoked_subcommand != "config"
        )
    except SpecshapeError as exc:
        set_output(OutputManager(no_color=no_color))
        fail(exc)

    set_output(
        OutputManager(
            format=OutputFormat(fmt), no_color=no_color, quiet=quiet, verbose=verbose
        )
    )


def fail(exc: SpecshapeError) -> NoReturn:
    """Print *exc* as an error and leave with its exit code."""
    from specshape.output import error

    error(str(exc))
    raise typer.Exit(code=exc.exit_code)


def _cancel() -> NoReturn:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(EXIT_CANCELLED)


def _setup_signal_handlers() -> None:
    def _on_sigint(signum: int, frame: Any) -> None:  # noqa: ANN401
        _cancel()

    signal.signal(signal.SIGINT, _on_sigint)


def _write_crash_log() -> Path:
    """Save the traceback being handled and return where it went."""
    from specshape.config import get_data_dir

    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return log_path


# --- Commands ---

from specshape.commands.build import build_command  # noqa: E402
from specshape.commands.config import config_app  # noqa: E402
from specshape.commands.inspect import inspect_app  # noqa: E402

app.command("build")(build_command)
app.add_typer(
    inspect_app, name="inspect", help="List the operations or components of a document."
)
app.add_typer(config_app, name="config", help="Show or change the user configuration.")


def main() -> None:
    """Run the CLI and translate uncaught errors into exit codes."""
    from specshape.output import error

    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _cancel()
    except SpecshapeError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        log_path = _write_crash_log()
        error(f"Unexpected error. Traceback saved to {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)

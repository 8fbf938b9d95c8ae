"""``specshape config``: inspect and edit the user configuration.

Only the user file (see :func:`~specshape.config.global_config_path`) is
written here.  Project files and ``SPECSHAPE_*`` variables are shown by
``config show`` but never modified.
"""

from __future__ import annotations

import typer

from specshape.exceptions import SpecshapeError
from specshape.output import info, print_json, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Print the effective settings as JSON.

    The user config location is reported on stderr so that stdout stays
    valid JSON.

    Example::

        SPECSHAPE_TIMEOUT=5 specshape config show
    """
    from specshape.app import fail
    from specshape.config import global_config_path, resolve_config

    try:
        effective = resolve_config()
    except SpecshapeError as exc:
        fail(exc)
    info(f"Config file: {global_config_path()}")
    print_json(effective.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted setting name, such as output.indent."),
    value: str = typer.Argument(help="New value; checked before it is saved."),
) -> None:
    """Change one setting in the user config.

    Example::

        specshape config set loader.timeout 60
    """
    from specshape.app import fail
    from specshape.config import set_config_value

    try:
        set_config_value(key, value)
    except SpecshapeError as exc:
        fail(exc)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
) -> None:
    """Overwrite the user config with the defaults."""
    from specshape.config import save_global_config
    from specshape.models import GlobalConfig

    if not yes and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")

"""Terminal output for the specshape CLI.

Two streams, two purposes:

* **stdout** carries data only: the generated schema document, inspection
  tables and ``config show``.  Piping ``specshape build`` into another
  tool must never pick up a status line.
* **stderr** carries every diagnostic: progress notes, warnings, errors
  and ``--verbose`` debug lines.

The data format is chosen once per invocation.  ``auto`` becomes ``rich``
on an interactive terminal with colour enabled and ``plain`` everywhere
else; ``NO_COLOR`` (any value), ``TERM=dumb`` and ``--no-color`` all
disable colour, following `clig.dev <https://clig.dev/>`_.

:class:`OutputManager` holds those decisions.  :func:`~specshape.app.main_callback`
installs one with :func:`set_output`; commands then call the module-level
helpers (:func:`info`, :func:`error`, :func:`print_json`, ...) without
passing the manager around.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Rendering used for data written to stdout."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Per-invocation output settings and the Rich consoles that apply them.

    Args:
        format: Requested data format; ``AUTO`` is resolved here.
        no_color: Disable colour and markup on both streams.
        quiet: Drop ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved data format (never ``AUTO``)."""
        return self._format

    # --- stdout ---

    def print_data(self, text: str) -> None:
        """Write *text* to stdout unchanged."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any, indent: int = 2) -> None:
        """Write a JSON document to stdout.

        An *indent* of ``0`` produces a single line.  Rich mode highlights
        the document; every other mode writes the bare serialisation.
        """
        text = json.dumps(data, indent=indent or None, ensure_ascii=False)
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows to stdout.

        JSON mode emits one object per row keyed by *headers*; plain mode
        emits tab-separated lines with a header line first; rich mode draws
        a :class:`~rich.table.Table`.
        """
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # --- stderr ---

    def _diagnostic(self, message: str, label: str = "", style: str = "") -> None:
        """Write to stderr. *style* colours *label*, or the whole message when there is no label.

        Messages are printed literally; brackets in them are never markup.
        """
        if self._no_color:
            print(f"{label}{message}", file=sys.stderr, flush=True)
            return
        text = escape(message)
        if not style:
            self._stderr.print(text)
        elif label:
            self._stderr.print(f"[{style}]{escape(label)}[/{style}]{text}")
        else:
            self._stderr.print(f"[{style}]{text}[/{style}]")

    def info(self, message: str) -> None:
        """Status note; hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        """Green completion note; hidden by ``--quiet``."""
        if not self._quiet:
            self._diagnostic(message, style="green")

    def warning(self, message: str) -> None:
        """Yellow warning; always shown."""
        self._diagnostic(message, label="Warning: ", style="yellow")

    def error(self, message: str) -> None:
        """Bold red error; always shown."""
        self._diagnostic(message, label="Error: ", style="bold red")

    def debug(self, message: str) -> None:
        """Dimmed debug line; shown only with ``--verbose``."""
        if self._verbose:
            self._diagnostic(message, label="[debug] ", style="dim")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM`` is ``dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# --- Global instance ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* for the module-level helpers."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def print_json(data: Any, indent: int = 2) -> None:
    get_output().print_json(data, indent)


def print_table(
    headers: list[str], rows: list[list[str]], title: Optional[str] = None
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)

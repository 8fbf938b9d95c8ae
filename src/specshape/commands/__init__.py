"""Built-in CLI sub-commands for specshape.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specshape.commands.build` -- emit the root schemas of a document.
* :mod:`~specshape.commands.inspect` -- list the operations and components
  of a document with their branch and member counts.
* :mod:`~specshape.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``build``).
"""

"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specshape.exceptions.SpecshapeError` subclass.
Build scripts can inspect the exit code to tell a broken document apart
from a broken invocation without parsing stderr.

Example::

    $ specshape build -i openapi.yaml -o schemas.json
    $ echo $?
    8   # EXIT_REFERENCE_ERROR -- one or more $ref pointers could not be resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required options."""

EXIT_NOT_FOUND = 4
"""A requested path, webhook, or operation does not exist in the document."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API description could not be read or parsed."""

EXIT_REFERENCE_ERROR = 8
"""One or more ``$ref`` pointers could not be resolved."""

EXIT_INVALID_DOCUMENT = 9
"""The document is structurally malformed (bad parameter list, empty content map, ...)."""

"""Exception hierarchy for specshape.

All exceptions inherit from :class:`SpecshapeError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specshape.exit_codes`.
The top-level error handler in :func:`specshape.app.main` catches
``SpecshapeError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Errors raised by the schema builders derive from :class:`SchemaBuildError`
and carry an :class:`ErrorKind` plus the context of the failure site (the
path or webhook key, the HTTP method, and the offending field), so callers
can branch on ``exc.kind`` instead of comparing error identities.

Subclass hierarchy::

    SpecshapeError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- ConfigError                (exit 1)
    +-- SpecParseError             (exit 7)
    +-- ReferenceResolutionError   (exit 8)
    +-- SchemaBuildError
        +-- MissingArgumentError   (exit 1)
        +-- StructuralAbsenceError (exit 4)
        |   +-- NoPathInSchema
        |   +-- NoWebhookInSchema
        +-- InvalidShapeError      (exit 9)
        +-- ContentDerivationError (exit 9)
            +-- MissingSchemaError
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from specshape.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_DOCUMENT,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_REFERENCE_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class ErrorKind(str, enum.Enum):
    """Categories of failure reported by the schema-assembly pipeline."""

    MISSING_ARGUMENT = "missing_argument"
    STRUCTURAL_ABSENCE = "structural_absence"
    INVALID_SHAPE = "invalid_shape"
    CONTENT_DERIVATION = "content_derivation"
    REFERENCE_RESOLUTION = "reference_resolution"


class SpecshapeError(Exception):
    """Base exception for all specshape errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specshape.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecshapeError):
    """Raised for invalid CLI arguments or missing required options."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecshapeError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecParseError(SpecshapeError):
    """Raised when the API description cannot be loaded, parsed, or version-checked."""

    exit_code = EXIT_SPEC_PARSE_ERROR


@dataclass(frozen=True)
class ReferenceFailure:
    """A single ``$ref`` that could not be resolved, and where it was found."""

    ref: str
    location: str
    reason: str

    def __str__(self) -> str:
        return f"{self.location}: {self.ref} ({self.reason})"


class ReferenceResolutionError(SpecshapeError):
    """Raised once, after a full resolver pass, listing every failed ``$ref``.

    Args:
        failures: All failures collected during the pass, in document order.
    """

    exit_code = EXIT_REFERENCE_ERROR
    kind = ErrorKind.REFERENCE_RESOLUTION

    def __init__(self, failures: list[ReferenceFailure]):
        self.failures = list(failures)
        lines = "\n".join(f"  {failure}" for failure in self.failures)
        count = len(self.failures)
        noun = "reference" if count == 1 else "references"
        super().__init__(f"Could not resolve {count} {noun}:\n{lines}")


class SchemaBuildError(SpecshapeError):
    """Base class for failures raised while assembling schemas.

    Args:
        message: Human-readable error description.
        path: The path or webhook key being processed, if known.
        method: The HTTP method being processed, if known.
        field: The document field or argument that triggered the failure.
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        method: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.message = message
        self.path = path
        self.method = method
        self.field = field
        super().__init__(self._with_context())

    def locate(self, path: Optional[str] = None, method: Optional[str] = None) -> None:
        """Fill in the path and method when the failure site did not know them.

        Builders deep in the pipeline (parameter and header resolution) do
        not see which operation they serve; the operation builder calls this
        before letting the error propagate.
        """
        if self.path is None:
            self.path = path
        if self.method is None:
            self.method = method
        self.args = (self._with_context(),)

    def _with_context(self) -> str:
        where = " ".join(
            part for part in (self.method.upper() if self.method else None, self.path) if part
        )
        return f"{self.message} (at {where})" if where else self.message


class MissingArgumentError(SchemaBuildError):
    """Raised when a builder is called without a required argument."""

    kind = ErrorKind.MISSING_ARGUMENT
    exit_code = EXIT_GENERIC_FAILURE

    def __init__(self, argument: str, **context: Optional[str]):
        context.setdefault("field", argument)
        super().__init__(f"{argument} is not provided", **context)


class StructuralAbsenceError(SchemaBuildError):
    """Raised when a container, path, webhook, or operation is absent from the document."""

    kind = ErrorKind.STRUCTURAL_ABSENCE
    exit_code = EXIT_NOT_FOUND


class NoPathInSchema(StructuralAbsenceError):
    """The document has no ``paths`` container, or it lacks the requested path."""


class NoWebhookInSchema(StructuralAbsenceError):
    """The document has no ``webhooks`` container, or it lacks the requested webhook."""


class InvalidShapeError(SchemaBuildError):
    """Raised when a value has the wrong shape (non-list parameters, bad group name)."""

    kind = ErrorKind.INVALID_SHAPE
    exit_code = EXIT_INVALID_DOCUMENT


class ContentDerivationError(SchemaBuildError):
    """Raised when a schema cannot be derived from a ``content`` map."""

    kind = ErrorKind.CONTENT_DERIVATION
    exit_code = EXIT_INVALID_DOCUMENT


class MissingSchemaError(ContentDerivationError):
    """Raised when a parameter or header declares neither ``schema`` nor ``content``."""

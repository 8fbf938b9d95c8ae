"""Canonical Pydantic models shared across all specshape modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory
or in a project-local ``specshape.json``:
    :class:`OutputConfig`, :class:`LoaderConfig`, and :class:`GlobalConfig`.

**Resolver output models** -- canonical records produced from the raw API
description and consumed by the schema builders:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`Param`,
    :class:`ContentVariant`, :class:`Body`, :class:`Header`, and
    :class:`ResponseEntry`.

Schema payloads are carried as plain JSON-compatible values (usually dicts)
and are never validated here: a JSON Schema may legitimately be a boolean.
Fields named ``schema`` use the ``schema_`` attribute with a ``schema``
alias so they do not shadow :meth:`pydantic.BaseModel.schema`.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class OutputConfig(BaseModel):
    """Output preferences for ``specshape build`` and ``specshape inspect``."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )
    indent: int = Field(
        default=2, ge=0, description="Indentation of the emitted JSON document"
    )


class LoaderConfig(BaseModel):
    """Settings for fetching API descriptions."""

    timeout: float = Field(
        default=30.0, gt=0, description="HTTP timeout in seconds for URL sources"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specshape/config.json``.

    Loaded by :func:`~specshape.config.load_global_config`. Fields here have
    the lowest precedence and can be overridden by project config,
    environment variables, or CLI flags. See
    :func:`~specshape.config.resolve_config` for the full precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)


# --- Resolver Output Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects.

    Declaration order is irrelevant: path items are walked in the document's
    own key order and non-method keys are skipped.
    """

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    HEADER = "header"
    COOKIE = "cookie"
    QUERY = "query"


class Param(BaseModel):
    """A parameter normalised by :func:`~specshape.generator.parameters.resolve_parameter`.

    A parameter is identified by its ``(name, location)`` pair. Path
    parameters always carry ``required=True``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    location: ParameterLocation
    schema_: Any = Field(alias="schema")
    required: bool = False

    @property
    def key(self) -> tuple[str, str]:
        """The ``(name, location)`` identity of this parameter."""
        return (self.name, self.location.value)


class ContentVariant(BaseModel):
    """One way a body may be encoded: a content type and its schema."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    content_type: str
    schema_: Any = Field(alias="schema")


class Body(BaseModel):
    """A resolved request body: its content variants and whether it is required."""

    model_config = ConfigDict(frozen=True)

    content: list[ContentVariant] = Field(default_factory=list)
    required: bool = False


class Header(BaseModel):
    """A resolved response (or component) header."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    schema_: Any = Field(alias="schema")
    required: bool = False


class ResponseEntry(BaseModel):
    """Headers and content variants declared for one response status.

    ``status`` is ``None`` for responses declared under
    ``components/responses``, which have no status code of their own.
    ``content`` is ``None`` when the response carries no body at all.
    """

    model_config = ConfigDict(frozen=True)

    status: Optional[str] = None
    headers: list[Header] = Field(default_factory=list)
    content: Optional[list[ContentVariant]] = None

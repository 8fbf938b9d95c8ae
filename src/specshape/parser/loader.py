"""Load API descriptions from a local file, a URL, or stdin.

Loading happens in two steps.  :func:`_read_source` fetches the raw text
together with a format hint and a human-readable origin used in error
messages; :func:`_parse_content` turns that text into a mapping.

Local files are only accepted with a ``.json``, ``.yaml`` or ``.yml``
suffix and are parsed strictly in that format.  URL sources take their hint
from the response ``Content-Type``; stdin has no hint.  Without a hint the
text is tried as JSON first and YAML second.

:func:`validate_openapi_version` then rejects anything that is not an
OpenAPI 3.x document.  The result still contains ``$ref`` pointers; pass it
to :func:`~specshape.parser.resolver.resolve_refs` next.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from specshape.exceptions import SpecParseError

logger = logging.getLogger(__name__)

_FILE_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load an API description from a file path, URL, or stdin (``-``).

    Args:
        source: A URL (http/https), file path, or ``-`` for stdin.
        timeout: HTTP timeout in seconds, used for URL sources only.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be read, is empty, or does not
            hold a JSON/YAML object.
    """
    text, hint, origin = _read_source(source, timeout)
    if not text.strip():
        raise SpecParseError(f"{origin} is empty")
    return _parse_content(text, hint=hint, origin=origin)


def _read_source(source: str, timeout: float) -> tuple[str, Optional[str], str]:
    """Return ``(text, format hint, origin)`` for *source*."""
    if source == "-":
        try:
            return sys.stdin.read(), None, "stdin"
        except OSError as exc:
            raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if source.startswith(("http://", "https://")):
        return _fetch(source, timeout)

    path = Path(source)
    hint = _FILE_FORMATS.get(path.suffix.lower())
    if hint is None:
        raise SpecParseError(f"Spec file must be a .json, .yaml or .yml file: {source}")
    if not path.is_file():
        raise SpecParseError(f"Spec file not found: {source}")
    try:
        return path.read_text(encoding="utf-8"), hint, source
    except OSError as exc:
        raise SpecParseError(f"Failed to read {source}: {exc}") from exc


def _fetch(url: str, timeout: float) -> tuple[str, Optional[str], str]:
    logger.debug("Fetching %s (timeout=%ss)", url, timeout)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(f"HTTP {exc.response.status_code} fetching {url}") from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    hint = None
    if "json" in content_type:
        hint = "json"
    elif "yaml" in content_type or "yml" in content_type:
        hint = "yaml"
    return response.text, hint, url


def _parse_content(
    content: str, hint: Optional[str] = None, origin: str = "document"
) -> dict[str, Any]:
    """Parse *content* as the hinted format, or JSON then YAML without a hint.

    Raises:
        SpecParseError: If parsing fails or the root is not a mapping.
    """
    if hint == "json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise SpecParseError(f"Invalid JSON in {origin}: {exc}") from exc
    elif hint == "yaml":
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise SpecParseError(f"Invalid YAML in {origin}: {exc}") from exc
    else:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as json_error:
            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as yaml_error:
                raise SpecParseError(
                    f"Could not parse {origin} as JSON or YAML"
                    f"\n  JSON error: {json_error}"
                    f"\n  YAML error: {yaml_error}"
                ) from yaml_error

    if not isinstance(data, dict):
        got = "nothing" if data is None else type(data).__name__
        raise SpecParseError(f"{origin} must contain a JSON/YAML object (got {got})")
    return data


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Return the document's ``openapi`` version if it is 3.x.

    Raises:
        SpecParseError: For Swagger 2.x documents, a missing ``openapi``
            field, or any other major version.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} documents are not supported; convert to "
            "OpenAPI 3.x first (e.g. with https://converter.swagger.io)"
        )

    version = spec.get("openapi")
    if version is None:
        raise SpecParseError("Missing 'openapi' field; not an OpenAPI 3.x document")

    version = str(version)
    if not version.startswith("3."):
        raise SpecParseError(f"Unsupported OpenAPI version: {version} (expected 3.x)")
    return version

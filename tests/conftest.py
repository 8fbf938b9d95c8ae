"""Fixtures shared by the whole test suite.

Two sample documents live in ``tests/fixtures``:

* ``petstore_3.0.json``: paths only, with component references for a
  parameter, a header, a request body and a response.
* ``events_3.1.yaml``: a path and a webhook, a ``content``-based query
  parameter, an integer status key and a self-referencing schema.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterator

import pytest
import yaml

from specshape.output import reset_output

FIXTURES_DIR = Path(__file__).parent / "fixtures"
PETSTORE = FIXTURES_DIR / "petstore_3.0.json"
EVENTS = FIXTURES_DIR / "events_3.1.yaml"


@pytest.fixture(autouse=True)
def _fresh_output() -> Iterator[None]:
    # A manager built inside CliRunner holds streams that are closed afterwards.
    yield
    reset_output()


@pytest.fixture
def petstore_path() -> Path:
    return PETSTORE


@pytest.fixture
def events_path() -> Path:
    return EVENTS


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Petstore document as stored, ``$ref`` objects included."""
    return json.loads(PETSTORE.read_text(encoding="utf-8"))


@pytest.fixture
def events_raw() -> dict[str, Any]:
    return yaml.safe_load(EVENTS.read_text(encoding="utf-8"))


@pytest.fixture
def petstore(petstore_raw: dict[str, Any]) -> dict[str, Any]:
    """Petstore document after reference resolution."""
    from specshape.parser import resolve_refs

    return resolve_refs(petstore_raw)


@pytest.fixture
def events(events_raw: dict[str, Any]) -> dict[str, Any]:
    from specshape.parser import resolve_refs

    return resolve_refs(events_raw)


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every config and data lookup into *tmp_path*.

    The XDG layout is forced (``tmp_path/config`` and ``tmp_path/data``),
    ``SPECSHAPE_*`` overrides are cleared and the working directory becomes
    *tmp_path*, which is returned.
    """
    monkeypatch.setattr("specshape.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("SPECSHAPE_INDENT", raising=False)
    monkeypatch.delenv("SPECSHAPE_TIMEOUT", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()

"""Integration tests for the specshape CLI.

Drives the real Typer application through ``CliRunner``: ``build`` to
stdout and to a file, ``inspect`` tables, ``config`` management, and the
exit-code mapping of :func:`specshape.app.main`.  Every test runs with
``--no-color`` so diagnostics are printed verbatim and are not wrapped by
Rich.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specshape import __version__
from specshape.app import app, main
from specshape.exceptions import NoPathInSchema
from specshape.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_DOCUMENT,
    EXIT_NOT_FOUND,
    EXIT_REFERENCE_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


@pytest.fixture
def runner(cli_runner: CliRunner) -> CliRunner:
    return cli_runner


def _write_json(path: Path, data: dict) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------


class TestRootOptions:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"specshape {__version__}" in result.output

    def test_no_args_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, [])
        assert "build" in result.output
        assert "inspect" in result.output

    def test_format_from_project_config(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        _write_json(isolated_config / "specshape.json", {"output": {"format": "json"}})
        result = runner.invoke(app, ["inspect", "components", "-i", str(petstore_path)])

        assert result.exit_code == 0, result.output
        assert "schemas" in {r["Kind"] for r in json.loads(result.output)}

    def test_plain_flag_overrides_configured_format(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        _write_json(isolated_config / "specshape.json", {"output": {"format": "json"}})
        result = runner.invoke(
            app, ["--plain", "inspect", "components", "-i", str(petstore_path)]
        )

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0].startswith("Kind\t")


# ---------------------------------------------------------------------------
# build
# ---------------------------------------------------------------------------


class TestBuild:
    """``specshape build`` end to end."""

    def test_build_to_stdout(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        result = runner.invoke(app, ["--no-color", "build", "-i", str(petstore_path)])

        assert result.exit_code == 0, result.output
        roots = json.loads(result.output)
        assert list(roots) == ["Paths", "Webhooks", "Components"]
        get = roots["Paths"]["properties"]["/pets/{id}"]["properties"]["get"]
        assert get["required"] == ["request", "responses"]

    def test_build_to_file(
        self, runner: CliRunner, isolated_config: Path, events_path: Path
    ) -> None:
        out = isolated_config / "out" / "schemas.json"
        result = runner.invoke(
            app, ["--no-color", "build", "-i", str(events_path), "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert "Wrote 3 root schema(s)" in result.output
        roots = json.loads(out.read_text(encoding="utf-8"))
        assert roots["Webhooks"]["required"] == ["reportReady"]

    def test_root_selection(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        result = runner.invoke(
            app,
            ["--no-color", "build", "-i", str(petstore_path), "--root", "Components", "--root", "Paths"],
        )
        assert result.exit_code == 0, result.output
        assert list(json.loads(result.output)) == ["Paths", "Components"]

    def test_indent_from_cli(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        result = runner.invoke(
            app,
            ["--no-color", "build", "-i", str(petstore_path), "--indent", "0", "--root", "Webhooks"],
        )
        assert result.exit_code == 0, result.output
        assert len(result.output.strip().splitlines()) == 1

    def test_indent_from_project_config(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        _write_json(isolated_config / "specshape.json", {"output": {"indent": 4}})
        out = isolated_config / "schemas.json"
        result = runner.invoke(
            app, ["--no-color", "build", "-i", str(petstore_path), "-o", str(out)]
        )
        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8").startswith('{\n    "Paths"')

    def test_warns_when_document_has_no_operations(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        source = _write_json(
            isolated_config / "bare.json",
            {"openapi": "3.1.0", "components": {"schemas": {"Id": {"type": "string"}}}},
        )
        out = isolated_config / "schemas.json"
        result = runner.invoke(
            app, ["--no-color", "build", "-i", str(source), "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert "Warning: Document declares no paths or webhooks" in result.output
        roots = json.loads(out.read_text(encoding="utf-8"))
        assert roots["Paths"]["required"] == []
        assert "Id" in roots["Components"]["properties"]["schemas"]["properties"]

    def test_missing_input_option(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 2

    def test_unsupported_extension(self, runner: CliRunner, isolated_config: Path) -> None:
        source = isolated_config / "spec.txt"
        source.write_text("{}", encoding="utf-8")
        result = runner.invoke(app, ["--no-color", "build", "-i", str(source)])
        assert result.exit_code == EXIT_SPEC_PARSE_ERROR
        assert "must be a .json, .yaml or .yml file" in result.output

    def test_unresolvable_ref_writes_nothing(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        source = _write_json(
            isolated_config / "broken.json",
            {
                "openapi": "3.0.3",
                "paths": {"/a": {"get": {"responses": {"200": {"$ref": "#/nowhere"}}}}},
            },
        )
        out = isolated_config / "schemas.json"
        result = runner.invoke(
            app, ["--no-color", "build", "-i", str(source), "-o", str(out)]
        )

        assert result.exit_code == EXIT_REFERENCE_ERROR
        assert "#/nowhere" in result.output
        assert not out.exists()

    def test_builder_error_exit_code(self, runner: CliRunner, isolated_config: Path) -> None:
        source = _write_json(
            isolated_config / "bad.json",
            {
                "openapi": "3.1.0",
                "paths": {"/a": {"get": {"parameters": {"name": "q"}, "responses": {}}}},
            },
        )
        result = runner.invoke(app, ["--no-color", "build", "-i", str(source)])

        assert result.exit_code == EXIT_INVALID_DOCUMENT
        assert "parameters are not an array" in result.output
        assert "(at GET /a)" in result.output

    def test_existing_output_untouched_on_failure(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        source = _write_json(isolated_config / "swagger.json", {"swagger": "2.0"})
        out = isolated_config / "schemas.json"
        out.write_text("previous", encoding="utf-8")

        result = runner.invoke(
            app, ["--no-color", "build", "-i", str(source), "-o", str(out)]
        )

        assert result.exit_code == EXIT_SPEC_PARSE_ERROR
        assert out.read_text(encoding="utf-8") == "previous"


# ---------------------------------------------------------------------------
# inspect
# ---------------------------------------------------------------------------


class TestInspect:
    def test_operations_json(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        result = runner.invoke(
            app, ["--json", "inspect", "operations", "-i", str(petstore_path)]
        )

        assert result.exit_code == 0, result.output
        records = json.loads(result.output)
        assert [(r["Method"], r["Key"]) for r in records] == [
            ("GET", "/pets"),
            ("POST", "/pets"),
            ("GET", "/pets/{id}"),
            ("DELETE", "/pets/{id}"),
        ]
        post = records[1]
        assert post["Request branches"] == "2"
        assert post["Response branches"] == "2"

    def test_operations_skip_extension_keys(
        self, runner: CliRunner, isolated_config: Path
    ) -> None:
        source = _write_json(
            isolated_config / "ext.json",
            {
                "openapi": "3.1.0",
                "paths": {
                    "x-owner": "team-a",
                    "/a": {"get": {"responses": {"200": {}, "x-internal": True}}},
                },
            },
        )
        result = runner.invoke(app, ["--plain", "inspect", "operations", "-i", str(source)])

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[1:] == ["path\tGET\t/a\t1\t1"]

    def test_operations_include_webhooks(
        self, runner: CliRunner, isolated_config: Path, events_path: Path
    ) -> None:
        result = runner.invoke(
            app, ["--plain", "inspect", "operations", "-i", str(events_path)]
        )

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Kind\tMethod\tKey\tRequest branches\tResponse branches"
        assert "path\tPUT\t/reports\t2\t3" in lines
        assert "webhook\tPOST\treportReady\t1\t1" in lines

    def test_components(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        result = runner.invoke(
            app, ["--json", "inspect", "components", "-i", str(petstore_path)]
        )

        assert result.exit_code == 0, result.output
        records = {r["Kind"]: r for r in json.loads(result.output)}
        assert records["schemas"]["Members"] == "2"
        assert records["schemas"]["Names"] == "Pet, Error"
        assert "securitySchemes" not in records

    def test_components_empty(self, runner: CliRunner, isolated_config: Path) -> None:
        source = _write_json(isolated_config / "empty.json", {"openapi": "3.0.0", "paths": {}})
        result = runner.invoke(
            app, ["--no-color", "inspect", "components", "-i", str(source)]
        )
        assert result.exit_code == 0
        assert "No components defined" in result.output


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_set_then_show(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--no-color", "config", "set", "output.indent", "6"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["--no-color", "--quiet", "config", "show"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["output"]["indent"] == 6

    def test_set_unknown_key(self, runner: CliRunner, isolated_config: Path) -> None:
        result = runner.invoke(app, ["--no-color", "config", "set", "cache.ttl", "5"])
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "Unknown config key" in result.output

    def test_reset(self, runner: CliRunner, isolated_config: Path) -> None:
        runner.invoke(app, ["config", "set", "output.indent", "6"])
        result = runner.invoke(app, ["--no-color", "config", "reset", "--yes"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["--no-color", "--quiet", "config", "show"])
        assert json.loads(result.output)["output"]["indent"] == 2

    def test_broken_config_still_reachable(
        self, runner: CliRunner, isolated_config: Path, petstore_path: Path
    ) -> None:
        config_file = isolated_config / "config" / "specshape" / "config.json"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("{broken", encoding="utf-8")

        result = runner.invoke(app, ["--no-color", "build", "-i", str(petstore_path)])
        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "Invalid global config" in result.output

        result = runner.invoke(app, ["--no-color", "config", "reset", "--yes"])
        assert result.exit_code == 0, result.output


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    """Exit-code mapping of the console-script entry point."""

    @pytest.fixture(autouse=True)
    def _no_signal_handlers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("specshape.app._setup_signal_handlers", lambda: None)

    def test_specshape_error_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def _raise() -> None:
            raise NoPathInSchema("document contains no paths")

        monkeypatch.setattr("specshape.app.app", _raise)
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == EXIT_NOT_FOUND
        assert "document contains no paths" in capsys.readouterr().err

    def test_unexpected_error_writes_crash_log(
        self, monkeypatch: pytest.MonkeyPatch, isolated_config: Path
    ) -> None:
        def _raise() -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr("specshape.app.app", _raise)
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == EXIT_GENERIC_FAILURE
        logs = list((isolated_config / "data" / "specshape" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text()

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _raise() -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("specshape.app.app", _raise)
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 130

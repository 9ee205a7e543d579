"""Tests for CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from modeinjector.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory with no config file and a clean environment."""
    monkeypatch.delenv("MODEINJECTOR_STORE", raising=False)
    monkeypatch.delenv("MODEINJECTOR_LOG_LEVEL", raising=False)
    return tmp_path


def _common(project: Path) -> list[str]:
    return ["--store", str(project / "variables.json"), "--config", str(project / "none.toml")]


def _write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestApplyCommand:
    def test_apply_collections(self, cli_runner, project, collections_doc):
        result = cli_runner.invoke(app, ["apply", str(collections_doc), *_common(project)])

        assert result.exit_code == 0, result.output
        assert "Sync complete." in result.output
        assert "• Collections: 2 created, 0 updated" in result.output
        assert "• Aliases linked: 2" in result.output
        assert "Saved" in result.output

        data = json.loads((project / "variables.json").read_text(encoding="utf-8"))
        assert [c["name"] for c in data["collections"]] == ["Brand", "Semantic"]

    def test_dry_run_does_not_save(self, cli_runner, project, collections_doc):
        result = cli_runner.invoke(
            app, ["apply", str(collections_doc), *_common(project), "--dry-run"]
        )

        assert result.exit_code == 0, result.output
        assert "Dry run: store not saved." in result.output
        assert not (project / "variables.json").exists()

    def test_cycle_aborts_without_saving(self, cli_runner, project):
        doc = _write_json(
            project / "cycle.json",
            [
                {"name": "A", "modes": ["m"], "variables": {"x": {"type": "color", "m": "{B.x}"}}},
                {"name": "B", "modes": ["m"], "variables": {"x": {"type": "color", "m": "{A.x}"}}},
            ],
        )
        result = cli_runner.invoke(app, ["apply", str(doc), *_common(project)])

        assert result.exit_code == 1
        assert "Sync aborted." in result.output
        assert "Store not saved." in result.output
        assert not (project / "variables.json").exists()

    def test_flat_map_needs_target(self, cli_runner, project):
        doc = _write_json(project / "flat.json", {"Primary": "#000000"})
        result = cli_runner.invoke(app, ["apply", str(doc), *_common(project)])

        assert result.exit_code == 1
        assert "Flat token maps need --collection and --mode" in result.output

    def test_flat_map_by_collection_name(self, cli_runner, project, collections_doc):
        cli_runner.invoke(app, ["apply", str(collections_doc), *_common(project)])
        doc = _write_json(project / "flat.json", {"Primary": "#000000"})

        result = cli_runner.invoke(
            app,
            ["apply", str(doc), *_common(project), "--collection", "Brand", "--mode", "hc"],
        )

        assert result.exit_code == 0, result.output
        assert '• Mode: "hc"' in result.output
        data = json.loads((project / "variables.json").read_text(encoding="utf-8"))
        brand = next(c for c in data["collections"] if c["name"] == "Brand")
        assert [mode["name"] for mode in brand["modes"]] == ["light", "dark", "hc"]

    def test_flat_map_unknown_collection(self, cli_runner, project):
        doc = _write_json(project / "flat.json", {"Primary": "#000000"})
        result = cli_runner.invoke(
            app,
            ["apply", str(doc), *_common(project), "--collection", "Ghost", "--mode", "hc"],
        )

        assert result.exit_code == 1
        assert "Collection not found: Ghost" in result.output

    def test_invalid_document(self, cli_runner, project):
        doc = project / "broken.json"
        doc.write_text("[{", encoding="utf-8")
        result = cli_runner.invoke(app, ["apply", str(doc), *_common(project)])

        assert result.exit_code == 1
        assert "Error: Invalid JSON" in result.output


class TestInspectCommands:
    def test_plan(self, cli_runner, collections_doc):
        result = cli_runner.invoke(app, ["plan", str(collections_doc)])

        assert result.exit_code == 0, result.output
        assert "Processing order" in result.output
        assert result.output.index("Brand") < result.output.index("Semantic")

    def test_plan_warns_about_missing_collections(self, cli_runner, project):
        doc = _write_json(
            project / "tokens.json",
            [{"name": "Semantic", "modes": ["m"], "variables": {"x": {"m": "{Ghost.x}"}}}],
        )
        result = cli_runner.invoke(app, ["plan", str(doc)])

        assert result.exit_code == 0, result.output
        assert "'Semantic' references 'Ghost'" in result.output

    def test_plan_cycle(self, cli_runner, project):
        doc = _write_json(
            project / "cycle.json",
            [
                {"name": "A", "modes": ["m"], "variables": {"x": {"m": "{B.x}"}}},
                {"name": "B", "modes": ["m"], "variables": {"x": {"m": "{A.x}"}}},
            ],
        )
        result = cli_runner.invoke(app, ["plan", str(doc)])

        assert result.exit_code == 1
        assert "Circular dependency" in result.output

    def test_collections_empty(self, cli_runner, project):
        result = cli_runner.invoke(app, ["collections", *_common(project)])
        assert result.exit_code == 0
        assert "No collections." in result.output

    def test_collections_after_apply(self, cli_runner, project, collections_doc):
        cli_runner.invoke(app, ["apply", str(collections_doc), *_common(project)])
        result = cli_runner.invoke(app, ["collections", *_common(project)])

        assert result.exit_code == 0, result.output
        assert "Brand" in result.output
        assert "light, dark" in result.output

    def test_export(self, cli_runner, project, collections_doc):
        cli_runner.invoke(app, ["apply", str(collections_doc), *_common(project)])
        output = project / "exported.json"
        result = cli_runner.invoke(app, ["export", "--output", str(output), *_common(project)])

        assert result.exit_code == 0, result.output
        assert "Exported to" in result.output
        exported = json.loads(output.read_text(encoding="utf-8"))
        assert exported[1]["variables"]["accent"]["light"] == "{Brand.Primary}"


class TestColorCommand:
    def test_hex(self, cli_runner):
        result = cli_runner.invoke(app, ["color", "#FF0000"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"r": 1.0, "g": 0.0, "b": 0.0, "a": 1.0}

    def test_not_a_color(self, cli_runner):
        result = cli_runner.invoke(app, ["color", "red"])
        assert result.exit_code == 1
        assert "not a color: red" in result.output

    def test_strict_hex(self, cli_runner):
        result = cli_runner.invoke(app, ["color", "#FFF", "--strict"])
        assert result.exit_code == 1
        assert "Error: Malformed hex color" in result.output


class TestVersion:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "mode-injector version" in result.output

"""Tests for the mlops-parser CLI.

Uses typer.testing.CliRunner for isolated CLI testing.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from mlops_parser.cli import app
from mlops_parser.core.models import manifest_path
from mlops_parser.registry.memory import InMemoryRegistry

runner = CliRunner()

_MANIFEST = {
    "Models": [
        {"name": "mnist", "model": "/res/mnist.tflite", "activate": "true"},
        {"name": "mnist", "model": "/res/mnist_v2.tflite"},
    ],
    "pipeline": {"name": "p1", "pipeline": "videotestsrc ! fakesink"},
    "resources": {"name": "imgs", "description": "samples", "path": ["a.png", "b.png"]},
}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in (
        "MLOPS_PARSER_LOG_LEVEL",
        "MLOPS_PARSER_LOG_DESTINATION",
        "MLOPS_PARSER_MANIFEST_FILENAME",
        "MLOPS_PARSER_PACKAGE_TYPE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def packages_file(tmp_path: Path, package_root: Path) -> Path:
    path = tmp_path / "packages.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "org.example.mnist": {
                    "type": "rpk",
                    "root_path": str(package_root),
                    "res_type": "ml",
                    "res_version": "1.0.0",
                },
                "org.example.tpk": {
                    "type": "tpk",
                    "root_path": str(package_root),
                    "res_type": "ml",
                    "res_version": "1.0.0",
                },
            }
        )
    )
    return path


# =========================================================================
# App structure
# =========================================================================


class TestAppStructure:
    def test_app_has_all_subcommands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for name in ("ingest", "hook", "classify", "manifest-path"):
            assert name in result.output

    def test_hook_lists_every_event(self):
        result = runner.invoke(app, ["hook", "--help"])
        assert result.exit_code == 0
        for event in ("install", "uninstall", "upgrade", "recoveruninstall", "clean", "undo"):
            assert event in result.output

    def test_unknown_log_formatter(self, monkeypatch):
        monkeypatch.setenv("MLOPS_PARSER_LOG_FORMATTER", "nonexistent")
        result = runner.invoke(app, ["classify", "model"])
        assert result.exit_code == 1
        assert "Unknown log formatter" in result.output


# =========================================================================
# classify / manifest-path
# =========================================================================


class TestClassify:
    @pytest.mark.parametrize(
        "key,kind", [("models", "model"), ("PIPELINE", "pipeline"), ("Resources", "resource")]
    )
    def test_known_key(self, key, kind):
        result = runner.invoke(app, ["classify", key])
        assert result.exit_code == 0
        assert result.output.strip() == kind

    def test_unknown_key(self):
        result = runner.invoke(app, ["classify", "datasets"])
        assert result.exit_code == 1
        assert "not a known section" in result.output


class TestManifestPath:
    def test_prints_layout(self):
        result = runner.invoke(app, ["manifest-path", "/opt/apps/pkg", "ml"])
        assert result.exit_code == 0
        assert result.output.strip() == str(Path("/opt/apps/pkg/res/global/ml/rpk_config.json"))

    def test_honors_configured_filename(self, monkeypatch):
        monkeypatch.setenv("MLOPS_PARSER_MANIFEST_FILENAME", "ml.json")
        result = runner.invoke(app, ["manifest-path", "/r", "ml"])
        assert result.output.strip().endswith("ml.json")


# =========================================================================
# ingest file
# =========================================================================


class TestIngestFile:
    def test_human_report(self, write_manifest):
        path = write_manifest(_MANIFEST)
        result = runner.invoke(app, ["ingest", "file", str(path)])
        assert result.exit_code == 0
        assert f"Manifest: {path}" in result.output
        assert "5/5 item(s) registered, 0 failed" in result.output
        assert "FAIL" not in result.output

    def test_json_output(self, write_manifest):
        path = write_manifest(_MANIFEST)
        result = runner.invoke(
            app, ["ingest", "file", str(path), "--pkg-id", "org.example.mnist", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["report"]["total"] == 5
        assert [o["version"] for o in data["report"]["outcomes"][:2]] == [1, 2]
        models = data["registry"]["models"]["mnist"]
        assert [m["active"] for m in models] == [True, False]
        assert json.loads(models[0]["app_info"])["pkg_id"] == "org.example.mnist"
        assert [r["path"] for r in data["registry"]["resources"]["imgs"]] == ["a.png", "b.png"]

    def test_registry_released_after_ingest(self, write_manifest, monkeypatch):
        created: list[InMemoryRegistry] = []

        class TrackedRegistry(InMemoryRegistry):
            def __init__(self) -> None:
                super().__init__()
                created.append(self)

        monkeypatch.setattr("mlops_parser.cli.ingest.InMemoryRegistry", TrackedRegistry)
        result = runner.invoke(app, ["ingest", "file", str(write_manifest(_MANIFEST))])
        assert result.exit_code == 0
        [registry] = created
        assert not registry.is_connected()
        assert registry.snapshot()["pipelines"] == {"p1": "videotestsrc ! fakesink"}

    def test_item_failures_do_not_change_exit_code(self, write_manifest):
        path = write_manifest({"models": [{"name": "m"}, {"name": "ok", "model": "/ok"}]})
        result = runner.invoke(app, ["ingest", "file", str(path)])
        assert result.exit_code == 0
        assert "FAIL" in result.output
        assert "1/2 item(s) registered, 1 failed" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["ingest", "file", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unknown_section(self, write_manifest):
        path = write_manifest({"datasets": []})
        result = runner.invoke(app, ["ingest", "file", str(path)])
        assert result.exit_code == 1
        assert "datasets" in result.output


# =========================================================================
# hook
# =========================================================================


class TestHook:
    def test_install(self, packages_file, install_manifest):
        install_manifest(_MANIFEST)
        result = runner.invoke(
            app, ["hook", "install", "org.example.mnist", "--packages", str(packages_file)]
        )
        assert result.exit_code == 0
        assert "install: org.example.mnist ok" in result.output

    def test_install_show_registry(self, packages_file, install_manifest):
        install_manifest(_MANIFEST)
        result = runner.invoke(
            app,
            [
                "hook",
                "install",
                "org.example.mnist",
                "-p",
                str(packages_file),
                "-m",
                "author=me",
                "--show-registry",
            ],
        )
        assert result.exit_code == 0
        assert '"p1": "videotestsrc ! fakesink"' in result.output

    def test_install_missing_manifest(self, packages_file):
        result = runner.invoke(
            app, ["hook", "install", "org.example.mnist", "--packages", str(packages_file)]
        )
        assert result.exit_code == 1
        assert "install failed for org.example.mnist" in result.output

    def test_install_other_package_type(self, packages_file):
        result = runner.invoke(
            app, ["hook", "install", "org.example.tpk", "--packages", str(packages_file)]
        )
        assert result.exit_code == 0

    def test_uninstall_is_no_op(self, packages_file):
        result = runner.invoke(
            app, ["hook", "uninstall", "org.example.mnist", "--packages", str(packages_file)]
        )
        assert result.exit_code == 0
        assert "uninstall: org.example.mnist ok" in result.output

    def test_bad_metadata(self, packages_file):
        result = runner.invoke(
            app,
            ["hook", "clean", "org.example.mnist", "-p", str(packages_file), "-m", "novalue"],
        )
        assert result.exit_code == 1
        assert "KEY=VALUE" in result.output

    def test_package_table_from_env(self, monkeypatch, packages_file, install_manifest):
        install_manifest(_MANIFEST)
        monkeypatch.setenv("MLOPS_PARSER_PACKAGES", str(packages_file))
        result = runner.invoke(app, ["hook", "upgrade", "org.example.mnist"])
        assert result.exit_code == 0

    def test_manifest_location_matches_manifest_path(self, package_root, install_manifest):
        assert install_manifest(_MANIFEST) == manifest_path(package_root, "ml")

"""Unit tests for the Pipeline orchestrator and CLI entry point.

The toolchain is always mocked (see ``mock_toolchain`` in conftest), so these
tests exercise step ordering, failure handling and exit codes without npm.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from reactforge.config import Config, ToolchainConfig
from reactforge.errors import InvalidProjectName, MissingArgument
from reactforge.pipeline import Pipeline, StepFailed, build_parser, main
from reactforge.scaffolder.manifest import ManifestCorrupt
from reactforge.toolchain import BootstrapFailure, InstallFailure


pytestmark = pytest.mark.unit


def _statuses(state: dict) -> dict[str, str]:
    return {s["name"]: s["status"] for s in state["steps"]}


# ---------------------------------------------------------------------------
# StepFailed
# ---------------------------------------------------------------------------


class TestStepFailed:
    def test_inherits_exit_code(self):
        failure = StepFailed("bootstrap", BootstrapFailure("npm create failed", 1))
        assert failure.exit_code == 4
        assert "bootstrap" in str(failure)

    def test_unexpected_error_maps_to_one(self):
        assert StepFailed("synthesize", RuntimeError("boom")).exit_code == 1


# ---------------------------------------------------------------------------
# Pipeline.run
# ---------------------------------------------------------------------------


class TestPipelineRun:
    async def test_full_run(self, config, mock_toolchain, tmp_path):
        state = await Pipeline(config, mock_toolchain).run("shop")

        assert state["success"] is True
        assert state["exit_code"] == 0
        assert list(_statuses(state)) == [
            "bootstrap", "dependencies", "synthesize", "cleanup", "manifest",
        ]
        assert set(_statuses(state).values()) == {"completed"}
        mock_toolchain.bootstrap.assert_awaited_once_with("shop", tmp_path)
        mock_toolchain.install.assert_awaited_once()

        root = tmp_path / "shop"
        assert (root / "src" / "config" / "index.ts").is_file()
        assert not (root / "src" / "App.css").exists()
        scripts = json.loads((root / "package.json").read_text(encoding="utf-8"))["scripts"]
        assert scripts["dev"] == "vite"

    async def test_missing_name_touches_nothing(self, config, mock_toolchain, tmp_path):
        with pytest.raises(MissingArgument):
            await Pipeline(config, mock_toolchain).run("")
        mock_toolchain.bootstrap.assert_not_awaited()
        assert list(tmp_path.iterdir()) == []

    async def test_invalid_name_touches_nothing(self, config, mock_toolchain, tmp_path):
        with pytest.raises(InvalidProjectName):
            await Pipeline(config, mock_toolchain).run("../evil")
        mock_toolchain.bootstrap.assert_not_awaited()
        assert list(tmp_path.iterdir()) == []

    async def test_bootstrap_failure_stops_run(self, config, mock_toolchain, tmp_path):
        mock_toolchain.bootstrap.side_effect = BootstrapFailure("npm create failed", 1)

        state = await Pipeline(config, mock_toolchain).run("shop")

        assert state["success"] is False
        assert state["exit_code"] == 4
        assert state["failed_step"] == "bootstrap"
        assert _statuses(state) == {"bootstrap": "failed"}
        mock_toolchain.install.assert_not_awaited()

    async def test_install_failure_keeps_skeleton(self, config, mock_toolchain, tmp_path):
        mock_toolchain.install.side_effect = InstallFailure("npm install failed", 1)

        state = await Pipeline(config, mock_toolchain).run("shop")

        assert state["exit_code"] == 5
        assert state["failed_step"] == "dependencies"
        assert (tmp_path / "shop" / "package.json").is_file()
        assert not (tmp_path / "shop" / "src" / "config").exists()

    async def test_deferred_install(self, tmp_path, mock_toolchain):
        config = Config(
            output_dir=tmp_path, toolchain=ToolchainConfig(install_dependencies=False)
        )
        state = await Pipeline(config, mock_toolchain).run("shop")

        assert state["success"] is True
        assert _statuses(state)["dependencies"] == "deferred"
        mock_toolchain.install.assert_not_awaited()

    async def test_cleanup_failure_is_only_a_warning(self, config, mock_toolchain):
        with patch(
            "reactforge.pipeline.ProjectGenerator.remove_default_stylesheet",
            AsyncMock(side_effect=RuntimeError("unexpected")),
        ):
            state = await Pipeline(config, mock_toolchain).run("shop")

        assert state["success"] is True
        assert state["exit_code"] == 0
        assert _statuses(state)["cleanup"] == "warning"
        assert _statuses(state)["manifest"] == "completed"

    async def test_corrupt_manifest_fails_last_step(self, config, mock_toolchain, tmp_path):
        async def broken_bootstrap(project_name: str, output_dir: Path) -> Path:
            root = output_dir / project_name
            (root / "src").mkdir(parents=True)
            (root / "package.json").write_text("{not json", encoding="utf-8")
            return root

        mock_toolchain.bootstrap.side_effect = broken_bootstrap
        state = await Pipeline(config, mock_toolchain).run("shop")

        assert state["exit_code"] == ManifestCorrupt.exit_code
        assert state["failed_step"] == "manifest"
        assert (tmp_path / "shop" / "src" / "config" / "index.ts").is_file()

    async def test_unexpected_error_exit_code_one(self, config, mock_toolchain):
        mock_toolchain.bootstrap.side_effect = RuntimeError("kaboom")
        state = await Pipeline(config, mock_toolchain).run("shop")
        assert state["exit_code"] == 1
        assert state["error"] == "kaboom"

    async def test_rerun_skips_bootstrap_and_manifest(self, config, mock_toolchain):
        await Pipeline(config, mock_toolchain).run("shop")
        mock_toolchain.bootstrap.reset_mock()

        state = await Pipeline(config, mock_toolchain).run("shop")

        assert state["success"] is True
        assert _statuses(state)["bootstrap"] == "skipped"
        assert _statuses(state)["manifest"] == "skipped"
        mock_toolchain.bootstrap.assert_not_awaited()

    async def test_state_records_project(self, config, mock_toolchain, tmp_path):
        state = await Pipeline(config, mock_toolchain).run("  shop  ")
        assert state["project_name"] == "shop"
        assert state["project_root"] == str(tmp_path / "shop")
        assert "total_duration" in state
        assert "finished_at" in state


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


class TestCli:
    def test_parser_accepts_optional_name(self):
        parser = build_parser()
        assert parser.parse_args([]).project_name is None
        assert parser.parse_args(["shop"]).project_name == "shop"

    def test_missing_argument_exit_code(self, tmp_path):
        with patch.dict(os.environ, {"REACTFORGE_OUTPUT_DIR": str(tmp_path)}):
            with pytest.raises(SystemExit) as exc_info:
                main([])
        assert exc_info.value.code == 2
        assert list(tmp_path.iterdir()) == []

    def test_invalid_name_exit_code(self, tmp_path):
        with patch.dict(os.environ, {"REACTFORGE_OUTPUT_DIR": str(tmp_path)}):
            with pytest.raises(SystemExit) as exc_info:
                main(["bad name"])
        assert exc_info.value.code == 3
        assert list(tmp_path.iterdir()) == []

    def test_bad_configuration_exit_code(self):
        with patch.dict(os.environ, {"REACTFORGE_COMMAND_TIMEOUT": "soon"}):
            with pytest.raises(SystemExit) as exc_info:
                main(["shop"])
        assert exc_info.value.code == 1

    def test_failed_run_exits_with_state_code(self):
        failed = {"success": False, "exit_code": 6}
        with patch("reactforge.pipeline.Pipeline.run", AsyncMock(return_value=failed)):
            with pytest.raises(SystemExit) as exc_info:
                main(["shop"])
        assert exc_info.value.code == 6

    def test_successful_run_returns(self):
        ok = {"success": True, "exit_code": 0}
        with patch("reactforge.pipeline.Pipeline.run", AsyncMock(return_value=ok)):
            assert main(["shop"]) is None

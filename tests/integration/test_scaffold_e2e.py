"""End-to-end generation on a real filesystem.

The package manager is never invoked; git runs for real when it is on PATH.
"""

from __future__ import annotations

import json
import shutil
from unittest.mock import patch

import pytest
import yaml

from create_filament.pipeline import Pipeline, StepStatus
from create_filament.resolver import resolve
from create_filament.scaffolder.files import plan_files
from create_filament.utils import run_command

pytestmark = pytest.mark.integration

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def _config(**overrides):
    answers = {
        "name": "demo",
        "template": "minimal",
        "packageManager": "npm",
        "git": False,
        "install": False,
    }
    answers.update(overrides)
    return resolve(answers)


def _tree(root):
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


class TestGeneratedTree:
    @pytest.mark.parametrize("tier", ["minimal", "api", "full"])
    async def test_planned_files_on_disk(self, tmp_path, settings, tier):
        config = _config(template=tier)
        project = tmp_path / "demo"
        result = await Pipeline(settings=settings, show_progress=False).run(project, config)

        assert result.success
        files = _tree(project)
        for spec in plan_files(config):
            assert spec.path in files
        assert "src/index.ts" in files

    async def test_minimal_with_tokens(self, tmp_path, settings):
        config = _config(additionalFeatures=["docker", "ci-gitlab"])
        project = tmp_path / "demo"
        result = await Pipeline(settings=settings, show_progress=False).run(project, config)

        assert result.executed == ["structure", "template", "manifest", "config", "docker", "ci", "docs"]
        files = _tree(project)
        assert {"Dockerfile", ".dockerignore", ".gitlab-ci.yml"} <= files
        assert "docker-compose.yml" not in files
        assert not any(f.startswith(".github/") for f in files)

    async def test_full_outputs_parse(self, tmp_path, settings):
        config = _config(template="full", packageManager="pnpm")
        project = tmp_path / "demo"
        await Pipeline(settings=settings, show_progress=False).run(project, config)

        manifest = json.loads((project / "package.json").read_text(encoding="utf-8"))
        assert "prom-client" in manifest["dependencies"]
        compose = yaml.safe_load((project / "docker-compose.yml").read_text(encoding="utf-8"))
        assert compose["services"]["app"]["depends_on"] == ["redis"]
        workflow = yaml.safe_load(
            (project / ".github" / "workflows" / "ci.yml").read_text(encoding="utf-8")
        )
        assert workflow["jobs"]["docker"]["needs"] == "test"
        assert "pnpm run docker:build" in (project / "README.md").read_text(encoding="utf-8")


class TestSubprocessSteps:
    @requires_git
    async def test_real_git_init(self, tmp_path, settings):
        config = _config(git=True, gitCommit=False)
        project = tmp_path / "demo"
        result = await Pipeline(settings=settings, show_progress=False).run(project, config)

        assert result.status_of("git") is StepStatus.SUCCEEDED
        assert (project / ".git").is_dir()
        _, stdout, _ = await run_command(["git", "status", "--porcelain"], cwd=project)
        assert "A  package.json" in stdout

    async def test_install_failure_keeps_project(self, tmp_path, settings):
        config = _config(install=True)
        project = tmp_path / "demo"
        with patch(
            "create_filament.scaffolder.generator.run_command",
            return_value=(1, "", "npm ERR! network"),
        ):
            result = await Pipeline(settings=settings, show_progress=False).run(project, config)

        assert result.success
        install = result.results[-2]
        assert install.name == "install"
        assert install.status is StepStatus.WARNED
        assert "npm install" in install.message
        assert (project / "package.json").is_file()

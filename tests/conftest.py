"""Shared pytest fixtures for the create-filament test suite.

Provides reusable fixtures for:
- Resolved project configurations for every tier
- Generator settings pointing at a temporary output directory
- A generation context for calling step bodies directly
- A patched subprocess runner so no package manager or git is invoked
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, patch

import pytest

from create_filament.config import Settings
from create_filament.resolver import ProjectConfig, resolve
from create_filament.scaffolder.generator import GenerationContext


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

def _answers(**overrides: Any) -> dict[str, Any]:
    answers: dict[str, Any] = {
        "name": "my-api",
        "template": "minimal",
        "packageManager": "npm",
        "git": True,
        "gitCommit": True,
    }
    answers.update(overrides)
    return answers


@pytest.fixture
def raw_answers() -> Callable[..., dict[str, Any]]:
    """Factory for raw front-end answers with sensible defaults."""
    return _answers


@pytest.fixture
def make_config() -> Callable[..., ProjectConfig]:
    """Factory resolving raw answers (with defaults) into a ProjectConfig."""

    def _make(**overrides: Any) -> ProjectConfig:
        return resolve(_answers(**overrides))

    return _make


@pytest.fixture
def minimal_config(make_config) -> ProjectConfig:
    """Minimal tier with no additional features."""
    return make_config(additionalFeatures=[])


@pytest.fixture
def api_config(make_config) -> ProjectConfig:
    return make_config(template="api")


@pytest.fixture
def full_config(make_config) -> ProjectConfig:
    return make_config(template="full", packageManager="pnpm")


# ---------------------------------------------------------------------------
# Paths & settings
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings writing into a temporary output directory."""
    return Settings(output_dir=tmp_path, install_timeout=30, git_timeout=30)


@pytest.fixture
def project_path(tmp_path: Path) -> Path:
    """Where the generated project goes (not created yet)."""
    return tmp_path / "my-api"


@pytest.fixture
def make_context(project_path: Path, settings: Settings) -> Callable[[ProjectConfig], GenerationContext]:
    """Factory for a GenerationContext bound to *project_path*."""

    def _make(config: ProjectConfig) -> GenerationContext:
        return GenerationContext(project_path=project_path, config=config, settings=settings)

    return _make


# ---------------------------------------------------------------------------
# Subprocess mocking
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_run_command() -> AsyncMock:
    """Patch the generator's command runner to succeed without running anything."""
    with patch(
        "create_filament.scaffolder.generator.run_command",
        new_callable=AsyncMock,
        return_value=(0, "", ""),
    ) as mocked:
        yield mocked

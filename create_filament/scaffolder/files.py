"""Declarative table of generated files.

Each :class:`FileSpec` names an output path, the pipeline step group that
writes it, how its content is produced (a Jinja2 template or a builder
function), and the feature predicate that decides whether it exists at all.
:func:`plan_files` evaluates the table once per run, so "which files exist
for this configuration" can be answered without running any step.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..resolver import CIProvider, FeatureSet, ProjectConfig
from .docker_gen import render_compose
from .manifest import render_manifest


class FileGroup(str, Enum):
    """Pipeline step responsible for writing a file."""
    MANIFEST = "manifest"
    CONFIG = "config"
    DOCKER = "docker"
    CI = "ci"
    DOCS = "docs"


def _always(features: FeatureSet) -> bool:
    return True


@dataclass(frozen=True)
class FileSpec:
    """One generated file."""

    path: str
    group: FileGroup
    template: Optional[str] = None
    build: Optional[Callable[[ProjectConfig], str]] = None
    when: Callable[[FeatureSet], bool] = _always
    executable: bool = False

    def __post_init__(self) -> None:
        if (self.template is None) == (self.build is None):
            raise ValueError(f"{self.path}: exactly one of template/build is required")

    def applies(self, config: ProjectConfig) -> bool:
        return self.when(config.features)


FILE_SPECS: tuple[FileSpec, ...] = (
    # Dependency manifest
    FileSpec("package.json", FileGroup.MANIFEST, build=render_manifest),
    # Static configuration
    FileSpec("tsconfig.json", FileGroup.CONFIG, template="tsconfig.json.j2"),
    FileSpec("eslint.config.js", FileGroup.CONFIG, template="eslint.config.js.j2"),
    FileSpec(".prettierrc", FileGroup.CONFIG, template="prettierrc.j2"),
    FileSpec(".gitignore", FileGroup.CONFIG, template="gitignore.j2"),
    FileSpec(".env.example", FileGroup.CONFIG, template="env.example.j2"),
    FileSpec(".husky/pre-commit", FileGroup.CONFIG, template="husky/pre-commit.j2", executable=True),
    FileSpec(".husky/commit-msg", FileGroup.CONFIG, template="husky/commit-msg.j2", executable=True),
    FileSpec(".lintstagedrc", FileGroup.CONFIG, template="lintstagedrc.j2"),
    FileSpec("commitlint.config.js", FileGroup.CONFIG, template="commitlint.config.js.j2"),
    # Containers
    FileSpec("Dockerfile", FileGroup.DOCKER, template="Dockerfile.j2", when=lambda f: f.docker),
    FileSpec(".dockerignore", FileGroup.DOCKER, template="dockerignore.j2", when=lambda f: f.docker),
    FileSpec(
        "docker-compose.yml",
        FileGroup.DOCKER,
        build=render_compose,
        when=lambda f: f.docker_compose,
    ),
    # CI
    FileSpec(
        ".github/workflows/ci.yml",
        FileGroup.CI,
        template="github-ci.yml.j2",
        when=lambda f: f.ci is CIProvider.GITHUB,
    ),
    FileSpec(
        ".gitlab-ci.yml",
        FileGroup.CI,
        template="gitlab-ci.yml.j2",
        when=lambda f: f.ci is CIProvider.GITLAB,
    ),
    # Documentation
    FileSpec("README.md", FileGroup.DOCS, template="README.md.j2"),
    FileSpec("ARCHITECTURE.md", FileGroup.DOCS, template="ARCHITECTURE.md.j2"),
)


def plan_files(
    config: ProjectConfig, specs: tuple[FileSpec, ...] = FILE_SPECS
) -> tuple[FileSpec, ...]:
    """Return the specs whose predicate holds for *config*, in table order."""
    return tuple(spec for spec in specs if spec.applies(config))


def build_context(config: ProjectConfig) -> dict[str, Any]:
    """Build the Jinja2 template context from the resolved configuration."""
    return {
        "project_name": config.name,
        "template": config.template.value,
        "pm": config.package_manager.value,
        "install_command": config.install_command,
        "features": config.features.model_dump(mode="json"),
    }

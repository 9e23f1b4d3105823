"""Generation step bodies.

Each public coroutine here is the body of one pipeline step.  They take the
shared :class:`GenerationContext`, write into ``ctx.project_path`` and signal
failure by raising a :class:`~create_filament.errors.ScaffoldError`; turning
that into a step result is the pipeline's job.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..config import Settings
from ..errors import FilesystemError, SubprocessError
from ..resolver import ProjectConfig
from ..utils import make_executable, run_command
from .files import FileGroup, FileSpec, build_context, plan_files
from .templates import TemplateRenderer, write_file

SKELETON_DIRS: tuple[str, ...] = (
    "src/meta",
    "src/middleware",
    "src/routes",
    "src/handlers",
    "src/config",
    "tests/integration",
    "tests/unit",
)

# Trees copied from the tier skeleton, replacing the empty ones created above.
TEMPLATE_TREES: tuple[str, ...] = ("src", "tests")

INITIAL_COMMIT_MESSAGE = "feat: initial commit from create-filament"


@dataclass
class GenerationContext:
    """Everything a step needs, built once per run."""

    project_path: Path
    config: ProjectConfig
    settings: Settings = field(default_factory=Settings)
    renderer: TemplateRenderer | None = None
    plan: tuple[FileSpec, ...] = ()
    template_context: dict[str, Any] = field(default_factory=dict)
    written: list[Path] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.renderer is None:
            self.renderer = TemplateRenderer(self.settings.templates_dir)
        if not self.plan:
            self.plan = plan_files(self.config)
        if not self.template_context:
            self.template_context = build_context(self.config)

    def files_in(self, group: FileGroup) -> list[FileSpec]:
        return [spec for spec in self.plan if spec.group is group]


# ---------------------------------------------------------------------------
# Filesystem steps
# ---------------------------------------------------------------------------


async def create_structure(ctx: GenerationContext) -> None:
    """Create the project root and its fixed subdirectory set."""
    try:
        for rel in ("", *SKELETON_DIRS):
            await asyncio.to_thread((ctx.project_path / rel).mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Could not create {ctx.project_path}: {exc}") from exc


async def copy_template(ctx: GenerationContext) -> None:
    """Copy the tier skeleton's ``src/`` and ``tests/`` trees into the project."""
    tier = ctx.config.template.value
    source = ctx.settings.skeleton_path(tier)
    if not source.is_dir():
        raise FilesystemError(f"Template '{tier}' not found at {source}")

    try:
        for tree in TEMPLATE_TREES:
            src = source / tree
            if not src.is_dir():
                continue
            dest = ctx.project_path / tree
            if dest.exists():
                await asyncio.to_thread(shutil.rmtree, dest)
            await asyncio.to_thread(shutil.copytree, src, dest)
    except (OSError, shutil.Error) as exc:
        raise FilesystemError(f"Could not copy template '{tier}': {exc}") from exc


async def write_files(ctx: GenerationContext, group: FileGroup) -> list[Path]:
    """Render and write every planned file of *group*."""
    written: list[Path] = []
    for spec in ctx.files_in(group):
        out = ctx.project_path / spec.path
        try:
            if spec.template is not None:
                await ctx.renderer.render_to_file(spec.template, out, ctx.template_context)
            else:
                await asyncio.to_thread(write_file, out, spec.build(ctx.config))
            if spec.executable:
                await asyncio.to_thread(make_executable, out)
        except OSError as exc:
            raise FilesystemError(f"Could not write {spec.path}: {exc}") from exc
        written.append(out)
    ctx.written.extend(written)
    return written


async def generate_manifest(ctx: GenerationContext) -> None:
    await write_files(ctx, FileGroup.MANIFEST)


async def generate_config_files(ctx: GenerationContext) -> None:
    await write_files(ctx, FileGroup.CONFIG)


async def generate_docker_files(ctx: GenerationContext) -> None:
    await write_files(ctx, FileGroup.DOCKER)


async def generate_ci_files(ctx: GenerationContext) -> None:
    await write_files(ctx, FileGroup.CI)


async def generate_docs(ctx: GenerationContext) -> None:
    await write_files(ctx, FileGroup.DOCS)


# ---------------------------------------------------------------------------
# Subprocess steps
# ---------------------------------------------------------------------------


async def _check_call(cmd: list[str], cwd: Path, timeout: int) -> None:
    returncode, _stdout, stderr = await run_command(cmd, cwd=cwd, timeout=timeout)
    if returncode != 0:
        command = " ".join(cmd)
        raise SubprocessError(
            f"`{command}` exited with code {returncode}" + (f": {stderr}" if stderr else ""),
            command=command,
            returncode=returncode,
            stderr=stderr,
        )


async def install_dependencies(ctx: GenerationContext) -> None:
    """Run the package manager's install command inside the project."""
    await _check_call(
        ctx.config.install_command.split(),
        ctx.project_path,
        ctx.settings.install_timeout,
    )


async def initialize_git(ctx: GenerationContext) -> None:
    """``git init`` and stage everything, then commit if requested."""
    commands = [["git", "init"], ["git", "add", "."]]
    if ctx.config.git_commit:
        commands.append(["git", "commit", "-m", INITIAL_COMMIT_MESSAGE])
    for cmd in commands:
        await _check_call(cmd, ctx.project_path, ctx.settings.git_timeout)

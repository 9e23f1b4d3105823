"""create-filament generation pipeline.

Runs a fixed, ordered list of named steps against one resolved
:class:`~create_filament.resolver.ProjectConfig`:

 1. structure  -- create the directory skeleton
 2. template   -- copy the tier's static src/ and tests/ trees
 3. manifest   -- generate package.json
 4. config     -- generate tooling configuration files
 5. docker     -- generate Dockerfile / docker-compose.yml
 6. ci         -- generate the CI workflow
 7. docs       -- generate README.md and ARCHITECTURE.md
 8. install    -- install dependencies with the chosen package manager
 9. git        -- initialise a repository and optionally commit

Steps run strictly in order.  The first failing step stops the run; nothing
already written is rolled back.  The install step is the one exception: its
failure is reported with the manual command to run and the run continues.
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from rich.markup import escape

from .config import Settings
from .errors import FilesystemError, ScaffoldError
from .resolver import CIProvider, ProjectConfig
from .scaffolder import generator
from .scaffolder.generator import GenerationContext
from .scaffolder.templates import TemplateRenderer
from .utils import console, format_duration


# ---------------------------------------------------------------------------
# Step descriptors and results
# ---------------------------------------------------------------------------


class StepStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    WARNED = "warned"
    FAILED = "failed"


class FailurePolicy(str, Enum):
    """What a step failure does to the rest of the run."""
    ABORT = "abort"
    WARN = "warn"


@dataclass
class StepResult:
    """Outcome of one step."""

    name: str
    status: StepStatus
    error: Optional[ScaffoldError] = None
    message: str = ""
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is not StepStatus.FAILED

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None


def _always(config: ProjectConfig) -> bool:
    return True


@dataclass(frozen=True)
class Step:
    """A named pipeline step.

    Attributes:
        name: Short identifier used in results.
        title: Progress text shown while the step runs.
        action: Coroutine function doing the work; signals failure by
            raising :class:`ScaffoldError`.
        enabled: Predicate on the config; a disabled step is skipped.
        on_failure: Whether a failure aborts the run or only warns.
        remediation: Optional message builder shown when the step fails.
    """

    name: str
    title: str
    action: Callable[[GenerationContext], Awaitable[None]]
    enabled: Callable[[ProjectConfig], bool] = _always
    on_failure: FailurePolicy = FailurePolicy.ABORT
    remediation: Optional[Callable[[ProjectConfig], str]] = None

    async def execute(self, ctx: GenerationContext) -> StepResult:
        """Run the step and report its outcome as a :class:`StepResult`."""
        if not self.enabled(ctx.config):
            return StepResult(self.name, StepStatus.SKIPPED)

        start = time.monotonic()
        error: Optional[ScaffoldError] = None
        try:
            await self.action(ctx)
        except ScaffoldError as exc:
            error = exc
        except OSError as exc:
            error = FilesystemError(str(exc))
        duration = time.monotonic() - start

        if error is None:
            return StepResult(self.name, StepStatus.SUCCEEDED, duration=duration)

        message = self.remediation(ctx.config) if self.remediation else ""
        status = StepStatus.WARNED if self.on_failure is FailurePolicy.WARN else StepStatus.FAILED
        return StepResult(self.name, status, error=error, message=message, duration=duration)


@dataclass
class PipelineResult:
    """Ordered results of every step that was reached."""

    project_path: Path
    results: list[StepResult] = field(default_factory=list)

    @property
    def failure(self) -> Optional[StepResult]:
        return next((r for r in self.results if r.status is StepStatus.FAILED), None)

    @property
    def success(self) -> bool:
        return self.failure is None

    @property
    def executed(self) -> list[str]:
        """Names of steps whose action actually ran."""
        return [r.name for r in self.results if r.status is not StepStatus.SKIPPED]

    def status_of(self, name: str) -> Optional[StepStatus]:
        return next((r.status for r in self.results if r.name == name), None)


# ---------------------------------------------------------------------------
# Default step list
# ---------------------------------------------------------------------------


def _install_remediation(config: ProjectConfig) -> str:
    return (
        "You can install dependencies manually by running:\n"
        f"  cd {config.name} && {config.install_command}"
    )


DEFAULT_STEPS: tuple[Step, ...] = (
    Step("structure", "Creating project structure", generator.create_structure),
    Step("template", "Copying template files", generator.copy_template),
    Step("manifest", "Generating package.json", generator.generate_manifest),
    Step("config", "Generating configuration files", generator.generate_config_files),
    Step(
        "docker",
        "Generating Docker files",
        generator.generate_docker_files,
        enabled=lambda c: c.features.docker or c.features.docker_compose,
    ),
    Step(
        "ci",
        "Generating CI/CD files",
        generator.generate_ci_files,
        enabled=lambda c: c.features.ci is not CIProvider.NONE,
    ),
    Step("docs", "Generating documentation", generator.generate_docs),
    Step(
        "install",
        "Installing dependencies",
        generator.install_dependencies,
        enabled=lambda c: c.install,
        on_failure=FailurePolicy.WARN,
        remediation=_install_remediation,
    ),
    Step(
        "git",
        "Initializing git repository",
        generator.initialize_git,
        enabled=lambda c: c.git,
    ),
)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """Drives the generation steps for one project.

    Attributes:
        steps: Ordered step descriptors.
        settings: Generator settings (template locations, timeouts).
        show_progress: Whether to print a spinner and a status line per step.
    """

    def __init__(
        self,
        steps: Sequence[Step] = DEFAULT_STEPS,
        settings: Settings | None = None,
        renderer: TemplateRenderer | None = None,
        show_progress: bool = True,
    ) -> None:
        self.steps = tuple(steps)
        self.settings = settings or Settings()
        self.renderer = renderer
        self.show_progress = show_progress

    async def run(self, project_path: str | Path, config: ProjectConfig) -> PipelineResult:
        """Run every step in order, stopping at the first failure.

        Returns:
            A :class:`PipelineResult`; ``result.failure`` names the step that
            stopped the run, if any.
        """
        ctx = GenerationContext(
            project_path=Path(project_path),
            config=config,
            settings=self.settings,
            renderer=self.renderer,
        )
        outcome = PipelineResult(project_path=ctx.project_path)

        for step in self.steps:
            written_before = len(ctx.written)
            if self.show_progress and step.enabled(config):
                with console.status(f"{step.title}..."):
                    result = await step.execute(ctx)
            else:
                result = await step.execute(ctx)
            outcome.results.append(result)
            self._report(step, result, ctx.written[written_before:], ctx.project_path)
            if result.status is StepStatus.FAILED:
                break

        return outcome

    # -- Output ------------------------------------------------------------

    def _report(
        self, step: Step, result: StepResult, written: list[Path], root: Path
    ) -> None:
        if not self.show_progress or result.status is StepStatus.SKIPPED:
            return

        if result.status is StepStatus.SUCCEEDED:
            console.print(
                f"[green]✔[/green] {step.title} "
                f"[dim]({format_duration(result.duration)})[/dim]"
            )
            if self.settings.verbose:
                for path in written:
                    console.print(f"    [dim]{escape(str(path.relative_to(root)))}[/dim]")
            return

        colour = "yellow" if result.status is StepStatus.WARNED else "red"
        marker = "!" if result.status is StepStatus.WARNED else "✖"
        console.print(f"[{colour}]{marker} {step.title} failed[/{colour}]")
        console.print(f"  [{colour}]{result.error_kind}: {escape(str(result.error))}[/{colour}]")
        if result.message:
            console.print(f"[cyan]{escape(result.message)}[/cyan]")


async def run(
    project_path: str | Path,
    config: ProjectConfig,
    settings: Settings | None = None,
) -> PipelineResult:
    """Run the default pipeline for *config* into *project_path*."""
    return await Pipeline(settings=settings).run(project_path, config)

"""create-filament -- scaffolds Filament API projects.

Raw answers (from prompts or CLI flags) are resolved into an immutable
``ProjectConfig`` and handed to the generation ``Pipeline``::

    from create_filament import Pipeline, resolve

    config = resolve({"name": "my-api", "template": "api",
                      "packageManager": "pnpm", "git": False})
    result = await Pipeline().run("/tmp/my-api", config)
"""

__version__ = "0.1.0"

from create_filament.errors import (
    ConflictError,
    FilesystemError,
    ScaffoldError,
    SubprocessError,
    ValidationError,
)
from create_filament.pipeline import Pipeline, PipelineResult, Step, StepResult, StepStatus
from create_filament.resolver import (
    CIProvider,
    FeatureSet,
    PackageManager,
    ProjectConfig,
    Tier,
    resolve,
)

__all__ = [
    "CIProvider",
    "ConflictError",
    "FeatureSet",
    "FilesystemError",
    "PackageManager",
    "Pipeline",
    "PipelineResult",
    "ProjectConfig",
    "ScaffoldError",
    "Step",
    "StepResult",
    "StepStatus",
    "SubprocessError",
    "Tier",
    "ValidationError",
    "resolve",
]

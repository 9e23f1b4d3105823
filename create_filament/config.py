"""create-filament generator settings.

Typed settings for the generator itself (where templates live, where projects
are written, how long external commands may run).  These are distinct from
:class:`~create_filament.resolver.ProjectConfig`, which describes the project
being generated.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

_PACKAGE_DIR = Path(__file__).parent

DEFAULT_TEMPLATES_DIR = _PACKAGE_DIR / "scaffolder" / "templates"
DEFAULT_SKELETONS_DIR = _PACKAGE_DIR / "scaffolder" / "skeletons"


class Settings(BaseModel):
    """Generator settings, created once by the CLI and passed to the pipeline."""

    templates_dir: Path = Field(default=DEFAULT_TEMPLATES_DIR)
    skeletons_dir: Path = Field(default=DEFAULT_SKELETONS_DIR)
    output_dir: Path = Field(default_factory=Path.cwd)
    install_timeout: int = Field(
        default=600, ge=1, description="Dependency install timeout in seconds"
    )
    git_timeout: int = Field(default=60, ge=1, description="Per git command timeout in seconds")
    verbose: bool = Field(default=False)

    def project_path(self, name: str) -> Path:
        """Directory the project called *name* is generated into."""
        return (self.output_dir / name).resolve()

    def skeleton_path(self, tier: str) -> Path:
        """Root of the static skeleton tree for *tier*."""
        return self.skeletons_dir / tier

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            CREATE_FILAMENT_TEMPLATES_DIR, CREATE_FILAMENT_SKELETONS_DIR,
            CREATE_FILAMENT_OUTPUT_DIR, CREATE_FILAMENT_INSTALL_TIMEOUT.

        Keyword arguments take precedence over the environment.

        Raises:
            ValidationError: If a variable holds a value the field rejects.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_FILAMENT_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["CREATE_FILAMENT_TEMPLATES_DIR"])
        if os.environ.get("CREATE_FILAMENT_SKELETONS_DIR"):
            kwargs["skeletons_dir"] = Path(os.environ["CREATE_FILAMENT_SKELETONS_DIR"])
        if os.environ.get("CREATE_FILAMENT_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["CREATE_FILAMENT_OUTPUT_DIR"])
        if os.environ.get("CREATE_FILAMENT_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = os.environ["CREATE_FILAMENT_INSTALL_TIMEOUT"]
        kwargs.update(overrides)
        try:
            return cls(**kwargs)
        except PydanticValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise ValidationError(f"Invalid settings: {details}") from exc

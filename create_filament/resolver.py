"""Configuration resolution.

Turns the sparse answers collected by the prompt front-end (or by CLI flags)
into one canonical, immutable :class:`ProjectConfig`.  Resolution is a pure
function of its input: no I/O, no randomness.

Tier defaults live in a lookup table.  For the ``api`` and ``full`` tiers the
table entry *is* the feature set; only the ``minimal`` tier consults the
additional-feature tokens, and when it does, the tokens replace the tier
defaults outright rather than being merged into them.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Tier(str, Enum):
    """Scaffold complexity level. Each tier's defaults are a superset of the previous one."""
    MINIMAL = "minimal"
    API = "api"
    FULL = "full"


class CIProvider(str, Enum):
    """Where the generated CI workflow runs."""
    GITHUB = "github"
    GITLAB = "gitlab"
    NONE = "none"


class PackageManager(str, Enum):
    """JavaScript package manager used for install and in generated docs."""
    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"
    BUN = "bun"

    @property
    def install_command(self) -> str:
        """The command that installs all dependencies of a project."""
        return _INSTALL_COMMANDS[self]


_INSTALL_COMMANDS: dict[PackageManager, str] = {
    PackageManager.NPM: "npm install",
    PackageManager.PNPM: "pnpm install",
    PackageManager.YARN: "yarn",
    PackageManager.BUN: "bun install",
}


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

PROJECT_NAME_PATTERN = re.compile(r"[a-z0-9_-]+")


class FeatureSet(BaseModel):
    """Independent feature flags controlling which optional files are generated."""

    model_config = ConfigDict(frozen=True)

    docker: bool = False
    docker_compose: bool = False
    ci: CIProvider = CIProvider.NONE
    openapi: bool = False
    auth: bool = False
    observability: bool = False


class ProjectConfig(BaseModel):
    """The fully resolved configuration, read-only for the rest of the run."""

    model_config = ConfigDict(frozen=True)

    name: str
    template: Tier
    features: FeatureSet
    package_manager: PackageManager
    git: bool
    git_commit: bool
    install: bool

    @property
    def install_command(self) -> str:
        return self.package_manager.install_command


class RawAnswers(BaseModel):
    """Answers as collected by the front-end, before any rule is applied.

    Accepts both the camelCase keys produced by the prompt layer and their
    snake_case equivalents.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    template: Tier
    additional_features: Optional[list[str]] = Field(default=None, alias="additionalFeatures")
    package_manager: PackageManager = Field(alias="packageManager")
    git: bool
    git_commit: Optional[bool] = Field(default=None, alias="gitCommit")
    install: bool = True


# ---------------------------------------------------------------------------
# Tier table
# ---------------------------------------------------------------------------

_API_FEATURES = FeatureSet(
    docker=True,
    docker_compose=True,
    ci=CIProvider.GITHUB,
    openapi=True,
    auth=True,
)

TIER_FEATURES: dict[Tier, FeatureSet] = {
    Tier.MINIMAL: FeatureSet(),
    Tier.API: _API_FEATURES,
    Tier.FULL: _API_FEATURES.model_copy(update={"observability": True}),
}

# Token offered by the front-end -> flag it switches on.
FEATURE_TOKENS: dict[str, str] = {
    "docker": "docker",
    "dockerCompose": "docker_compose",
    "openapi": "openapi",
    "auth": "auth",
    "observability": "observability",
}

CI_TOKENS: dict[str, CIProvider] = {
    "ci-github": CIProvider.GITHUB,
    # Only produced by `--ci=gitlab`; the interactive prompts never offer it.
    "ci-gitlab": CIProvider.GITLAB,
}


def features_for(tier: Tier, tokens: Optional[Iterable[str]] = None) -> FeatureSet:
    """Return the feature set for *tier*, given the additional-feature *tokens*.

    Tokens are only honoured for the minimal tier.  There, each flag is the
    membership test of its token in *tokens*; tokens that name no flag are
    ignored.
    """
    if tier is not Tier.MINIMAL or tokens is None:
        return TIER_FEATURES[tier]

    selected = set(tokens)
    flags: dict[str, Any] = {
        field: token in selected for token, field in FEATURE_TOKENS.items()
    }
    flags["ci"] = next(
        (provider for token, provider in CI_TOKENS.items() if token in selected),
        CIProvider.NONE,
    )
    return FeatureSet(**flags)


def validate_project_name(name: Optional[str]) -> str:
    """Return *name* unchanged, or raise :class:`ValidationError`."""
    if not name:
        raise ValidationError("Project name is required")
    if not PROJECT_NAME_PATTERN.fullmatch(name):
        raise ValidationError(
            "Project name can only contain lowercase letters, numbers, "
            "hyphens, and underscores"
        )
    return name


def resolve(raw_answers: Mapping[str, Any] | RawAnswers) -> ProjectConfig:
    """Resolve raw front-end answers into a :class:`ProjectConfig`.

    Raises:
        ValidationError: If the name is absent or malformed, or if a
            required answer is missing or has the wrong shape.
    """
    if isinstance(raw_answers, RawAnswers):
        answers = raw_answers
    else:
        try:
            answers = RawAnswers.model_validate(dict(raw_answers))
        except PydanticValidationError as exc:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            )
            raise ValidationError(f"Invalid answers: {details}") from exc

    name = validate_project_name(answers.name)

    return ProjectConfig(
        name=name,
        template=answers.template,
        features=features_for(answers.template, answers.additional_features),
        package_manager=answers.package_manager,
        git=answers.git,
        git_commit=answers.git and bool(answers.git_commit),
        install=answers.install,
    )

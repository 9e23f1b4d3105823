"""Interactive front-end.

Collects raw answers with Rich prompts.  Answers already supplied on the
command line are kept and not asked again, so both invocation styles feed the
same raw-answer record into :func:`~create_filament.resolver.resolve`.
"""

from __future__ import annotations

from typing import Any

from rich.prompt import Confirm, Prompt
from rich.table import Table

from .errors import ValidationError
from .resolver import PackageManager, Tier, validate_project_name
from .utils import console, print_error

TIER_DESCRIPTIONS: dict[str, str] = {
    Tier.MINIMAL.value: "Core framework + tooling",
    Tier.API.value: "+ Auth + RBAC + OpenAPI + Redis",
    Tier.FULL.value: "+ Observability + Analytics + CI/CD",
}

# (token, title, selected by default)
FEATURE_CHOICES: tuple[tuple[str, str, bool], ...] = (
    ("docker", "Docker support", True),
    ("dockerCompose", "Docker Compose (app + Redis)", False),
    ("ci-github", "GitHub Actions CI/CD", True),
    ("openapi", "OpenAPI/Swagger generation", True),
    ("auth", "Authentication (JWT + OAuth + Sessions)", False),
    ("observability", "Observability (OpenTelemetry + Metrics)", False),
)


def ask_name(default: str = "my-api") -> str:
    while True:
        value = Prompt.ask("Project name", default=default, console=console)
        try:
            return validate_project_name(value)
        except ValidationError as exc:
            print_error(str(exc))


def ask_template() -> str:
    table = Table(show_header=False, box=None, padding=(0, 2))
    for tier, description in TIER_DESCRIPTIONS.items():
        table.add_row(f"[cyan]{tier}[/cyan]", description)
    console.print(table)
    return Prompt.ask(
        "Choose a template",
        choices=list(TIER_DESCRIPTIONS),
        default=Tier.MINIMAL.value,
        console=console,
    )


def ask_features() -> list[str]:
    console.print("[bold]Additional features:[/bold]")
    return [
        token
        for token, title, selected in FEATURE_CHOICES
        if Confirm.ask(f"  {title}?", default=selected, console=console)
    ]


def collect_answers(prefilled: dict[str, Any]) -> dict[str, Any]:
    """Ask for every answer missing from *prefilled*.

    The additional-features question is only asked for the minimal tier,
    and the commit question only when git is enabled.

    Raises:
        KeyboardInterrupt, EOFError: If the user aborts a prompt.
    """
    answers = dict(prefilled)

    if not answers.get("name"):
        answers["name"] = ask_name()
    if answers.get("template") is None:
        answers["template"] = ask_template()
    if answers["template"] == Tier.MINIMAL.value and answers.get("additionalFeatures") is None:
        answers["additionalFeatures"] = ask_features()
    if answers.get("packageManager") is None:
        answers["packageManager"] = Prompt.ask(
            "Package manager",
            choices=[pm.value for pm in PackageManager],
            default=PackageManager.NPM.value,
            console=console,
        )
    if answers.get("git") is None:
        answers["git"] = Confirm.ask("Initialize git repository?", default=True, console=console)
    if answers["git"] and answers.get("gitCommit") is None:
        answers["gitCommit"] = Confirm.ask("Create initial commit?", default=True, console=console)

    return answers

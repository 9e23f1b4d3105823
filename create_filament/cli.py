"""Command-line entry point for ``create-filament``.

Usage::

    create-filament my-api
    create-filament my-api --template=api --pm=pnpm --no-install --yes
    python -m create_filament my-api --template=minimal --docker --ci=github
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Optional

from rich.markup import escape

from . import __version__
from .config import Settings
from .errors import ConflictError, ScaffoldError
from .pipeline import Pipeline, StepStatus
from .prompts import collect_answers
from .resolver import CIProvider, PackageManager, ProjectConfig, Tier, resolve
from .utils import (
    console,
    print_banner,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-filament",
        description="Scaffold a new Filament API project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-filament my-api\n"
            "  create-filament my-api --template=api --pm=pnpm --yes\n"
            "  create-filament my-api --docker --ci=github --no-install --yes\n"
        ),
    )
    parser.add_argument("name", nargs="?", default=None, help="Project name (also the directory name)")
    parser.add_argument(
        "--template",
        choices=[t.value for t in Tier],
        default=None,
        help="Template tier (default: minimal)",
    )
    parser.add_argument("--docker", action="store_true", help="Add a Dockerfile (minimal tier)")
    parser.add_argument(
        "--docker-compose", action="store_true", help="Add docker-compose.yml (minimal tier)"
    )
    parser.add_argument(
        "--ci",
        choices=[c.value for c in CIProvider],
        default=None,
        help="CI provider (minimal tier)",
    )
    parser.add_argument("--openapi", action="store_true", help="Add OpenAPI docs (minimal tier)")
    parser.add_argument("--auth", action="store_true", help="Add authentication (minimal tier)")
    parser.add_argument(
        "--observability", action="store_true", help="Add tracing and metrics (minimal tier)"
    )
    parser.add_argument(
        "--pm",
        choices=[pm.value for pm in PackageManager],
        default=None,
        help="Package manager (default: npm)",
    )
    parser.add_argument(
        "--git",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Initialize a git repository (default: yes)",
    )
    parser.add_argument(
        "--no-git-commit", action="store_true", help="Do not create an initial commit"
    )
    parser.add_argument("--no-install", action="store_true", help="Skip dependency installation")
    parser.add_argument(
        "--yes", "-y", action="store_true", help="Do not prompt; use defaults for missing answers"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="List every generated file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def feature_tokens_from_args(args: argparse.Namespace) -> Optional[list[str]]:
    """Translate feature flags into additional-feature tokens.

    Returns ``None`` when no feature flag was given, so the interactive
    front-end still asks.
    """
    tokens = [
        token
        for token, flag in (
            ("docker", args.docker),
            ("dockerCompose", args.docker_compose),
            ("openapi", args.openapi),
            ("auth", args.auth),
            ("observability", args.observability),
        )
        if flag
    ]
    if args.ci is not None and args.ci != CIProvider.NONE.value:
        tokens.append(f"ci-{args.ci}")
    any_given = bool(tokens) or args.ci is not None
    return tokens if any_given else None


def answers_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Raw answers pre-filled from the command line; unset answers are ``None``."""
    return {
        "name": args.name,
        "template": args.template,
        "additionalFeatures": feature_tokens_from_args(args),
        "packageManager": args.pm,
        "git": args.git,
        "gitCommit": False if args.no_git_commit else None,
        "install": not args.no_install,
    }


def apply_defaults(answers: dict[str, Any]) -> dict[str, Any]:
    """Fill unanswered questions with the prompt defaults (non-interactive path)."""
    filled = dict(answers)
    if filled.get("template") is None:
        filled["template"] = Tier.MINIMAL.value
    if filled.get("packageManager") is None:
        filled["packageManager"] = PackageManager.NPM.value
    if filled.get("git") is None:
        filled["git"] = True
    if filled.get("gitCommit") is None:
        filled["gitCommit"] = True
    return filled


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def print_config(config: ProjectConfig) -> None:
    features = config.features
    enabled = [
        label
        for label, on in (
            ("docker", features.docker),
            ("docker-compose", features.docker_compose),
            ("openapi", features.openapi),
            ("auth", features.auth),
            ("observability", features.observability),
        )
        if on
    ]
    print_summary_table(
        {
            "Name": config.name,
            "Template": config.template.value,
            "Features": ", ".join(enabled) or "none",
            "CI": features.ci.value,
            "Package manager": config.package_manager.value,
            "Git": "yes" + (" (initial commit)" if config.git_commit else "") if config.git else "no",
            "Install": "yes" if config.install else "no",
        },
        title="Project",
    )


def print_next_steps(config: ProjectConfig, installed: bool) -> None:
    pm = config.package_manager.value
    print_success(f"\nSuccess! Created {escape(config.name)}\n")
    console.print("Next steps:\n")
    console.print(f"[cyan]  cd {escape(config.name)}[/cyan]")
    if not installed:
        console.print(f"[cyan]  {config.install_command}[/cyan]")
    console.print(f"[cyan]  {pm} run dev[/cyan]")
    console.print("\nYour app will be running at [cyan]http://localhost:3000[/cyan]")

    console.print("\nCommands:")
    console.print(f"  [cyan]{pm + ' run dev':<20}[/cyan] Start development server")
    console.print(f"  [cyan]{pm + ' test':<20}[/cyan] Run tests")
    console.print(f"  [cyan]{pm + ' run build':<20}[/cyan] Build for production")
    if config.features.docker:
        console.print(f"  [cyan]{pm + ' run docker:build':<20}[/cyan] Build Docker image")

    console.print("\nDocumentation:")
    console.print("  README.md            Getting started guide")
    console.print("  ARCHITECTURE.md      Project structure explained")
    console.print()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> int:
    """Run the generator and return the process exit code."""
    args = build_parser().parse_args(argv)

    print_banner()

    try:
        settings = Settings.from_env(verbose=args.verbose)
        if args.name and settings.project_path(args.name).exists():
            raise ConflictError(args.name)

        prefilled = answers_from_args(args)
        interactive = not args.yes and sys.stdin.isatty()
        if interactive:
            try:
                answers = collect_answers(prefilled)
            except (KeyboardInterrupt, EOFError):
                print_error("\n✖ Operation cancelled")
                return 0
        else:
            answers = apply_defaults(prefilled)

        config = resolve(answers)
        if config.template is not Tier.MINIMAL and answers.get("additionalFeatures"):
            print_warning(
                f"Feature flags are ignored for the {config.template.value} template; "
                "its feature set is fixed."
            )
        project_path = settings.project_path(config.name)
        if project_path.exists():
            raise ConflictError(config.name)
    except ScaffoldError as exc:
        print_error(f"\n✖ {escape(str(exc))}\n")
        return 1

    print_config(config)

    result = asyncio.run(Pipeline(settings=settings).run(project_path, config))
    if not result.success:
        print_error(f"\n✖ Setup failed at step '{result.failure.name}'\n")
        return 1

    print_next_steps(config, installed=result.status_of("install") is StepStatus.SUCCEEDED)
    return 0


def cli() -> None:
    """Console-script wrapper around :func:`main`."""
    sys.exit(main())

"""Dependency manifest (``package.json``) generation.

The dependency sets are a fixed baseline plus per-feature additions, each
kept in its own table so the manifest for any feature combination can be
read off directly.
"""

from __future__ import annotations

import json
from typing import Any

from ..resolver import FeatureSet, ProjectConfig

BASE_DEPENDENCIES: dict[str, str] = {
    "filamentjs": "^0.1.0",
    "pino": "^8.17.0",
    "pino-pretty": "^10.3.0",
}

BASE_DEV_DEPENDENCIES: dict[str, str] = {
    "@types/node": "^20.0.0",
    "typescript": "^5.0.0",
    "tsx": "^4.7.0",
    "eslint": "^9.0.0",
    "@typescript-eslint/parser": "^8.0.0",
    "@typescript-eslint/eslint-plugin": "^8.0.0",
    "prettier": "^3.2.4",
    "husky": "^9.0.0",
    "lint-staged": "^15.2.0",
    "@commitlint/cli": "^19.0.0",
    "@commitlint/config-conventional": "^19.0.0",
    "depcheck": "^1.4.7",
    "test-battery": "^3.2.1",
}

# feature flag -> (dependencies, devDependencies)
FEATURE_DEPENDENCIES: dict[str, tuple[dict[str, str], dict[str, str]]] = {
    "auth": (
        {"redis": "^4.6.0", "jsonwebtoken": "^9.0.2"},
        {"@types/jsonwebtoken": "^9.0.5"},
    ),
    "openapi": (
        {"swagger-ui-express": "^5.0.0"},
        {"@types/swagger-ui-express": "^4.1.6"},
    ),
    "observability": (
        {
            "@opentelemetry/api": "^1.9.0",
            "@opentelemetry/sdk-node": "^0.54.0",
            "prom-client": "^15.1.0",
        },
        {},
    ),
}

BASE_SCRIPTS: dict[str, str] = {
    "dev": "tsx watch src/index.ts",
    "build": "tsc",
    "start": "node dist/index.js",
    "test": "node --test --experimental-test-coverage tests/**/*.test.ts",
    "test:watch": "node --test --watch tests/**/*.test.ts",
    "lint": "eslint src/**/*.ts",
    "lint:fix": "eslint src/**/*.ts --fix",
    "format": "prettier --write src/**/*.ts",
    "type-check": "tsc --noEmit",
    "prepare": "husky",
    "depcheck": "depcheck",
}


def collect_dependencies(features: FeatureSet) -> tuple[dict[str, str], dict[str, str]]:
    """Return ``(dependencies, devDependencies)`` for *features*, sorted by name."""
    deps = dict(BASE_DEPENDENCIES)
    dev_deps = dict(BASE_DEV_DEPENDENCIES)
    for flag, (extra, extra_dev) in FEATURE_DEPENDENCIES.items():
        if getattr(features, flag):
            deps.update(extra)
            dev_deps.update(extra_dev)
    return dict(sorted(deps.items())), dict(sorted(dev_deps.items()))


def collect_scripts(config: ProjectConfig) -> dict[str, str]:
    """Return the ``scripts`` table, with docker entries iff the matching flag is set."""
    scripts = dict(BASE_SCRIPTS)
    if config.features.docker:
        scripts["docker:build"] = f"docker build -t {config.name} ."
        scripts["docker:run"] = f"docker run -p 3000:3000 {config.name}"
    if config.features.docker_compose:
        scripts["docker:up"] = "docker compose up"
        scripts["docker:down"] = "docker compose down"
    return scripts


def build_manifest(config: ProjectConfig) -> dict[str, Any]:
    """Build the full ``package.json`` document for *config*."""
    dependencies, dev_dependencies = collect_dependencies(config.features)
    return {
        "name": config.name,
        "version": "1.0.0",
        "description": "A Filament API application",
        "type": "module",
        "scripts": collect_scripts(config),
        "dependencies": dependencies,
        "devDependencies": dev_dependencies,
    }


def render_manifest(config: ProjectConfig) -> str:
    return json.dumps(build_manifest(config), indent=2) + "\n"

"""Tests for package.json generation (create_filament.scaffolder.manifest)."""

from __future__ import annotations

import json

import pytest

from create_filament.scaffolder.manifest import (
    BASE_DEPENDENCIES,
    BASE_DEV_DEPENDENCIES,
    BASE_SCRIPTS,
    build_manifest,
    collect_dependencies,
    render_manifest,
)

pytestmark = pytest.mark.unit


class TestCollectDependencies:
    def test_baseline_only(self, minimal_config):
        deps, dev = collect_dependencies(minimal_config.features)
        assert deps == dict(sorted(BASE_DEPENDENCIES.items()))
        assert dev == dict(sorted(BASE_DEV_DEPENDENCIES.items()))

    def test_auth(self, make_config):
        deps, dev = collect_dependencies(make_config(additionalFeatures=["auth"]).features)
        assert "redis" in deps
        assert "jsonwebtoken" in deps
        assert "@types/jsonwebtoken" in dev
        assert "swagger-ui-express" not in deps

    def test_openapi(self, make_config):
        deps, dev = collect_dependencies(make_config(additionalFeatures=["openapi"]).features)
        assert "swagger-ui-express" in deps
        assert "@types/swagger-ui-express" in dev

    def test_observability(self, make_config):
        deps, _ = collect_dependencies(make_config(additionalFeatures=["observability"]).features)
        assert {"@opentelemetry/api", "@opentelemetry/sdk-node", "prom-client"} <= set(deps)

    def test_full_is_union(self, full_config):
        deps, _ = collect_dependencies(full_config.features)
        for name in ("filamentjs", "pino", "redis", "swagger-ui-express", "prom-client"):
            assert name in deps

    def test_sorted(self, full_config):
        deps, dev = collect_dependencies(full_config.features)
        assert list(deps) == sorted(deps)
        assert list(dev) == sorted(dev)


class TestBuildManifest:
    def test_header(self, minimal_config):
        manifest = build_manifest(minimal_config)
        assert manifest["name"] == "my-api"
        assert manifest["version"] == "1.0.0"
        assert manifest["type"] == "module"

    def test_no_docker_scripts(self, minimal_config):
        scripts = build_manifest(minimal_config)["scripts"]
        assert scripts == BASE_SCRIPTS
        assert not any(key.startswith("docker:") for key in scripts)

    def test_docker_scripts(self, make_config):
        scripts = build_manifest(make_config(additionalFeatures=["docker"]))["scripts"]
        assert scripts["docker:build"] == "docker build -t my-api ."
        assert scripts["docker:run"] == "docker run -p 3000:3000 my-api"
        assert "docker:up" not in scripts

    def test_compose_scripts(self, make_config):
        scripts = build_manifest(make_config(additionalFeatures=["dockerCompose"]))["scripts"]
        assert "docker:up" in scripts
        assert "docker:down" in scripts
        assert "docker:build" not in scripts

    def test_render_is_json(self, api_config):
        parsed = json.loads(render_manifest(api_config))
        assert parsed == build_manifest(api_config)

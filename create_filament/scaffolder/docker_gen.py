"""Docker Compose service graph generation.

The compose file is built as a plain document and dumped with PyYAML.  The
app service is always present; enabling ``auth`` adds a Redis service for
sessions and tokens, a named volume for its data, and a ``depends_on`` edge
from the app to it.
"""

from __future__ import annotations

from typing import Any

import yaml

from ..resolver import ProjectConfig

APP_PORT = 3000
REDIS_IMAGE = "redis:7-alpine"


def build_app_service(config: ProjectConfig) -> dict[str, Any]:
    service: dict[str, Any] = {
        "build": ".",
        "ports": [f"{APP_PORT}:{APP_PORT}"],
        "environment": ["NODE_ENV=production", "LOG_LEVEL=info"],
        "restart": "unless-stopped",
    }
    if config.features.auth:
        service["environment"].append("REDIS_URL=redis://redis:6379")
        service["depends_on"] = ["redis"]
    return service


def build_redis_service() -> dict[str, Any]:
    return {
        "image": REDIS_IMAGE,
        "ports": ["6379:6379"],
        "volumes": ["redis-data:/data"],
        "restart": "unless-stopped",
    }


def build_compose(config: ProjectConfig) -> dict[str, Any]:
    """Build the ``docker-compose.yml`` document for *config*.

    Returns:
        A mapping with a ``services`` key and, when Redis is present, a
        ``volumes`` key declaring its data volume.
    """
    services: dict[str, Any] = {"app": build_app_service(config)}
    document: dict[str, Any] = {"services": services}
    if config.features.auth:
        services["redis"] = build_redis_service()
        document["volumes"] = {"redis-data": {}}
    return document


def render_compose(config: ProjectConfig) -> str:
    return yaml.safe_dump(build_compose(config), sort_keys=False, default_flow_style=False)

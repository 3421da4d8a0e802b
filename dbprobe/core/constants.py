"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
and the fixed bodies returned by the health probes.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    HEALTH = RouteConfig(prefix="/api/health", tag="health")


class HealthBody:
    """Plain-text bodies returned by the health endpoints."""

    OK = "ok"
    DB_NOT_VALID = "db-not-valid"
    DB_ERROR_PREFIX = "db-error: "


# Upper bound (seconds) passed to the connection validity check.
DB_VALIDITY_TIMEOUT_SECONDS = 2


class CommonResponses:
    """Standard HTTP response definitions for OpenAPI documentation."""

    PLAIN_TEXT: dict[str, Any] = {"text/plain": {"schema": {"type": "string"}}}

    DB_UNHEALTHY: dict[int | str, dict[str, Any]] = {
        500: {
            "description": "Database connection is not valid or unavailable",
            "content": PLAIN_TEXT,
        }
    }

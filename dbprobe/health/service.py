"""Database health check.

Acquires one pooled connection, asks it whether it is valid and releases it,
reducing whatever happens to one of three outcomes:

- healthy: the connection answered the validity check positively
- unhealthy: the connection answered negatively (or not in time)
- unavailable: acquiring, checking or releasing the connection raised
"""

import logging
from dataclasses import dataclass
from enum import StrEnum

from dbprobe.core.constants import DB_VALIDITY_TIMEOUT_SECONDS, HealthBody
from dbprobe.core.exceptions import AppException
from dbprobe.db.pool import ConnectionPool, describe_error

logger = logging.getLogger("dbprobe.health")


class HealthStatus(StrEnum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class DatabaseHealth:
    """Outcome of a single database check."""

    status: HealthStatus
    detail: str | None = None

    @property
    def status_code(self) -> int:
        return 200 if self.status is HealthStatus.HEALTHY else 500

    @property
    def body(self) -> str:
        if self.status is HealthStatus.HEALTHY:
            return HealthBody.OK
        if self.status is HealthStatus.UNHEALTHY:
            return HealthBody.DB_NOT_VALID
        return f"{HealthBody.DB_ERROR_PREFIX}{self.detail}"


def _failure_message(exc: Exception) -> str:
    if isinstance(exc, AppException):
        return exc.message
    return describe_error(exc)


def check_database(
    pool: ConnectionPool, timeout: float = DB_VALIDITY_TIMEOUT_SECONDS
) -> DatabaseHealth:
    """Check that the pool can produce a valid connection.

    Never raises for database failures; they become an UNAVAILABLE outcome.
    A connection that was acquired is always released, even when the
    validity check raises.

    Args:
        pool: Connection pool to draw from
        timeout: Upper bound in seconds for the validity check

    Returns:
        DatabaseHealth describing the outcome
    """
    try:
        with pool.acquire() as connection:
            valid = connection.is_valid(timeout)
    except Exception as e:
        result = DatabaseHealth(HealthStatus.UNAVAILABLE, _failure_message(e))
        logger.error(
            "Database health check failed: %s",
            result.detail,
            extra={"health_status": result.status.value, "error_type": type(e).__name__},
        )
        return result

    if valid:
        result = DatabaseHealth(HealthStatus.HEALTHY)
        logger.info(
            "Database health check passed",
            extra={"health_status": result.status.value},
        )
    else:
        result = DatabaseHealth(HealthStatus.UNHEALTHY)
        logger.warning(
            "Database connection reported not valid",
            extra={"health_status": result.status.value},
        )
    return result

"""Health domain router.

Database health check endpoint for monitoring and orchestration.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from dbprobe.core.constants import CommonResponses, Routes
from dbprobe.core.deps import PoolDep
from dbprobe.health.service import check_database

router = APIRouter(prefix=Routes.HEALTH.prefix, tags=[Routes.HEALTH.tag])


@router.get(
    "/db",
    response_class=PlainTextResponse,
    responses=CommonResponses.DB_UNHEALTHY,
)
def database_health(pool: PoolDep) -> PlainTextResponse:
    """Report whether the connection pool can produce a valid connection."""
    result = check_database(pool)
    return PlainTextResponse(result.body, status_code=result.status_code)

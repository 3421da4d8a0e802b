"""Centralized dependency type aliases for FastAPI routes.

Import all dependencies from this single module:
    from dbprobe.core.deps import PoolDep
"""

from typing import Annotated

from fastapi import Depends

from dbprobe.db.pool import ConnectionPool, get_pool

# Database connection pool (override get_pool in tests)
PoolDep = Annotated[ConnectionPool, Depends(get_pool)]

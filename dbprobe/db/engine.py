from functools import lru_cache
from typing import Any

from sqlalchemy import Engine, create_engine

from dbprobe.core.settings import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine (and its connection pool) from settings."""
    connect_args: dict[str, object] = {}
    pool_options: dict[str, Any] = {}
    if settings.is_sqlite:
        # Required for SQLite when connections are used across threads.
        # SQLite pools do not accept QueuePool sizing arguments.
        connect_args = {"check_same_thread": False}
    else:
        pool_options = {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_timeout": settings.db_pool_timeout,
            "pool_recycle": settings.db_pool_recycle,
        }

    return create_engine(
        settings.database_url,
        echo=False,
        connect_args=connect_args,
        **pool_options,
    )


@lru_cache
def get_engine() -> Engine:
    """Get the process-wide engine, created on first use."""
    return build_engine(get_settings())

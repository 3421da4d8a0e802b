import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dbprobe.core.exception_handlers import register_exception_handlers
from dbprobe.core.logging import configure_logging
from dbprobe.core.request_logging import add_request_logging_middleware
from dbprobe.core.settings import get_settings
from dbprobe.db.engine import get_engine
from dbprobe.health.router import router as health_router

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Starting dbprobe in %s environment", get_settings().env_name)
    yield
    # Close pooled connections, but only if a request ever opened the pool.
    if get_engine.cache_info().currsize:
        get_engine().dispose()
        logger.info("Database connection pool disposed")


app = FastAPI(title="dbprobe", version="0.1.0", lifespan=lifespan)

app.include_router(health_router)

add_request_logging_middleware(app)
register_exception_handlers(app)

"""Connection pool collaborator consumed by the health probe.

The probe only needs two capabilities from the pool: hand out a connection
(released when the ``acquire()`` scope exits) and ask that connection whether
it is still usable within a time bound. ``EnginePool`` provides both on top of
a SQLAlchemy ``Engine``; tests substitute their own implementation through
the ``get_pool`` dependency.
"""

import logging
import threading
from collections.abc import Iterator
from concurrent.futures import Future
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from sqlalchemy import Connection, Engine
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from dbprobe.core.exceptions import ConnectionAcquisitionError, ValidityCheckError
from dbprobe.db.engine import get_engine

logger = logging.getLogger(__name__)


class PooledConnection(Protocol):
    def is_valid(self, timeout: float) -> bool: ...


class ConnectionPool(Protocol):
    def acquire(self) -> AbstractContextManager[PooledConnection]: ...


def describe_error(exc: BaseException) -> str:
    """Return the driver-level message for a database error."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        exc = exc.orig
    elif isinstance(exc, SQLAlchemyError) and exc.args:
        # str() would append the sqlalche.me background link.
        return str(exc.args[0])
    return str(exc) or type(exc).__name__


def _start_ping(dialect: Dialect, dbapi_connection) -> Future[bool]:
    """Run the dialect ping on its own daemon thread.

    Each check gets a fresh thread, so a ping stuck on a stalled server never
    delays the checks that come after it.
    """
    future: Future[bool] = Future()

    def run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(dialect.do_ping(dbapi_connection))
        except BaseException as e:
            future.set_exception(e)

    threading.Thread(target=run, name="db-ping", daemon=True).start()
    return future


class EngineConnection:
    """A checked-out SQLAlchemy connection."""

    def __init__(self, connection: Connection):
        self._connection = connection

    def is_valid(self, timeout: float) -> bool:
        """Ping the database, waiting at most ``timeout`` seconds.

        A timeout of 0 waits indefinitely. Returns False for closed or
        invalidated connections, when the driver reports the connection as
        disconnected, and when the ping does not finish in time. In the last
        two cases the connection is invalidated so the pool discards it
        instead of handing it out again.

        Raises:
            ValueError: If timeout is negative
            ValidityCheckError: If the ping fails for any other reason
        """
        if timeout < 0:
            raise ValueError("timeout must not be negative")

        connection = self._connection
        if connection.closed or connection.invalidated:
            return False

        try:
            dbapi_connection = connection.connection.dbapi_connection
        except SQLAlchemyError as e:
            raise ValidityCheckError(describe_error(e)) from e

        dialect = connection.dialect
        future = _start_ping(dialect, dbapi_connection)
        try:
            return bool(future.result(timeout=timeout or None))
        except TimeoutError:
            future.cancel()
            logger.warning("Connection ping exceeded %ss, invalidating", timeout)
            # Closing the DBAPI connection is what aborts a ping stuck on I/O.
            connection.invalidate()
            return False
        except Exception as e:
            if dialect.is_disconnect(e, dbapi_connection, None):
                logger.warning("Connection dropped: %s", describe_error(e))
                connection.invalidate(e)
                return False
            raise ValidityCheckError(describe_error(e)) from e


class EnginePool:
    """``ConnectionPool`` backed by a SQLAlchemy engine's pool."""

    def __init__(self, engine: Engine):
        self._engine = engine

    @contextmanager
    def acquire(self) -> Iterator[EngineConnection]:
        try:
            connection = self._engine.connect()
        except SQLAlchemyError as e:
            raise ConnectionAcquisitionError(describe_error(e)) from e

        # Closing returns the connection to the pool.
        with connection:
            yield EngineConnection(connection)


def get_pool() -> ConnectionPool:
    return EnginePool(get_engine())

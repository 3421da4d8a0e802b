import inspect
import os

# Must be set before app modules read settings.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_REQUESTS", "true")

import anyio
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from dbprobe.db.pool import get_pool
from dbprobe.main import app
from tests.fakes import FakePool


def pytest_configure(config: pytest.Config) -> None:
    # Tests use @pytest.mark.asyncio, but we intentionally rely on anyio.
    config.addinivalue_line(
        "markers",
        "asyncio: run async tests using anyio (project-local hook)",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Run @pytest.mark.asyncio tests with anyio.

    This avoids adding an external pytest-asyncio dependency.
    """
    if pyfuncitem.get_closest_marker("asyncio") is None:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    funcargs = {
        name: pyfuncitem.funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }

    async def _run_async_test() -> None:
        await test_func(**funcargs)

    anyio.run(_run_async_test)
    return True


@pytest.fixture(name="fake_pool")
def fake_pool_fixture():
    return FakePool()


@pytest.fixture(name="client")
def client_fixture(fake_pool: FakePool):
    """Create a test client whose pool dependency is the fake pool."""

    def get_pool_override():
        return fake_pool

    app.dependency_overrides[get_pool] = get_pool_override

    client = TestClient(app, raise_server_exceptions=False)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="sqlite_engine")
def sqlite_engine_fixture():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture(name="file_engine")
def file_engine_fixture(tmp_path):
    """File-backed SQLite engine (QueuePool, so checkouts are counted)."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'probe.db'}",
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()


@pytest.fixture(name="unreachable_engine")
def unreachable_engine_fixture(tmp_path):
    """SQLite engine whose database file can never be opened."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'missing' / 'probe.db'}",
        connect_args={"check_same_thread": False},
    )
    yield engine
    engine.dispose()

"""Pytest configuration and shared fixtures for tracker and API tests."""

import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test DB and storage before app imports so config/engine use them
_TEST_DIR = tempfile.mkdtemp(prefix="mapty-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DIR}/mapty-test.db")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from mapty.main import app
from mapty.services.controller import build_controller
from mapty.services.storage import MemoryStorage

pytest_plugins = ["pytest_asyncio"]

START = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)


class FakeClock:
    """Returns START, then one second later on every call, so workout ids never collide."""

    def __init__(self, start: datetime = START):
        self._next = start

    def __call__(self) -> datetime:
        now = self._next
        self._next = now + timedelta(seconds=1)
        return now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def controller(storage, clock):
    """Started controller on empty in-memory storage; map not loaded yet."""
    return build_controller(storage, clock=clock)


@pytest.fixture
def map_controller(controller):
    """Controller whose map has loaded at (50.0, 30.0)."""
    controller.load_map((50.0, 30.0))
    return controller


@pytest.fixture
def add_workout(map_controller):
    """Create a workout through the map click + form submit path."""

    def _add(kind="running", coords=(50.0, 30.0), **fields):
        raw = {"distance": "5", "duration": "30", "cadence": "170", "elevation": "0"}
        raw.update({k: str(v) for k, v in fields.items()})
        map_controller.click_map(coords)
        return map_controller.submit(kind, raw)

    return _add


@pytest_asyncio.fixture
async def client(controller):
    """Yield AsyncClient against the app with a fresh controller installed (lifespan is not run)."""
    app.state.controller = controller
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.state.controller = None

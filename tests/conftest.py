from types import SimpleNamespace

import httpx
import pytest
from httpx import ASGITransport

from callbook.call_queue import OutboundCallQueue
from callbook.call_state import CallStateStore
from callbook.database import Database
from callbook.domain.providers.seed import seed_demo_providers
from callbook.services.call_placer import SimulatedCallPlacer


class FakeRedis:
    """SETEX/GET/DELETE with a manual clock; values come back as bytes like redis-py"""

    def __init__(self):
        self.now = 0.0
        self._data: dict[str, tuple[bytes, float]] = {}

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def keys(self) -> list[str]:
        return [k for k, (_, expires_at) in self._data.items() if self.now < expires_at]

    def ttl(self, key: str) -> float:
        return self._data[key][1] - self.now

    async def setex(self, key, ttl, value):
        if isinstance(value, str):
            value = value.encode()
        self._data[key] = (value, self.now + ttl)
        return True

    async def get(self, key):
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if self.now >= expires_at:
            del self._data[key]
            return None
        return value

    async def delete(self, *keys):
        return sum(1 for k in keys if self._data.pop(k, None) is not None)


class FakeArqPool:
    """enqueue_job with arq's rule: an existing job id makes the enqueue return None"""

    def __init__(self):
        self.jobs: dict[str, SimpleNamespace] = {}

    async def enqueue_job(self, function, *args, _job_id=None, _queue_name=None, **kwargs):
        if _job_id in self.jobs:
            return None
        self.jobs[_job_id] = SimpleNamespace(
            function=function, args=args, kwargs=kwargs, queue_name=_queue_name
        )
        return SimpleNamespace(job_id=_job_id)


@pytest.fixture
def database():
    database = Database("sqlite://")
    database.init_db()
    yield database
    database.dispose()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def seeded_db(db):
    seed_demo_providers(db)
    return db


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def call_state(fake_redis):
    return CallStateStore(fake_redis)


@pytest.fixture
def arq_pool():
    return FakeArqPool()


@pytest.fixture
def call_queue(arq_pool):
    return OutboundCallQueue(arq_pool)


@pytest.fixture
def worker_ctx(database, call_state):
    return {
        "database": database,
        "call_state": call_state,
        "call_placer": SimulatedCallPlacer(delay=0),
        "job_try": 1,
        "max_tries": 3,
    }


@pytest.fixture
async def client(database, seeded_db, call_queue):
    from callbook.database import get_db
    from callbook.domain.appointments.router import get_call_queue
    from callbook.main import app

    def _get_db():
        session = database.session()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_call_queue] = lambda: call_queue
    try:
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
    finally:
        app.dependency_overrides.clear()

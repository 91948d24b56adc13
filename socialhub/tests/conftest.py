import os
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Configure test environment before the app modules read it
_TEST_ROOT = Path(tempfile.mkdtemp(prefix='socialhub_test_'))
os.environ['DATABASE_URL'] = f"sqlite+aiosqlite:///{_TEST_ROOT / 'socialhub_test.db'}"
os.environ['JWT_SECRET'] = 'test-secret'


class FakeRedis:
    """In-memory stand-in for the handful of Redis commands the app issues"""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.published = []
        self.fail_publish = False

    async def ping(self):
        return True

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def get(self, key):
        return self.store.get(key)

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if key in self.store:
                del self.store[key]
                self.ttls.pop(key, None)
                removed += 1
        return removed

    async def exists(self, *keys):
        return sum(1 for key in keys if key in self.store)

    async def publish(self, channel, message):
        if self.fail_publish:
            raise ConnectionError('redis went away')
        self.published.append((channel, message))
        return 0


@pytest.fixture
def fake_redis(monkeypatch):
    from socialhub import core
    redis = FakeRedis()
    monkeypatch.setattr(core, 'REDIS', redis)
    return redis


@pytest_asyncio.fixture
async def db():
    from socialhub.models import Base, engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def users(db):
    from socialhub.crud import create_user
    created = {}
    for user_id, username, first, last in (
        ('user_alice', 'alice', 'Alice', 'Smith'),
        ('user_bob', 'bob', 'Bob', 'Jones'),
        ('user_carol', 'carol', 'Carol', 'White'),
        ('user_dave', 'dave', 'Dave', 'Brown'),
    ):
        created[username] = await create_user(username, user_id, f'{username}@example.com', first, last, None)
    return created


@pytest_asyncio.fixture
async def client(db, fake_redis):
    from socialhub.main import app
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac


@pytest.fixture
def auth_headers():
    from socialhub.auth import create_access_token

    def make(user_id: str) -> dict:
        return {'Authorization': f'Bearer {create_access_token(user_id)}'}
    return make

"""Shared pytest fixtures."""

from collections.abc import AsyncIterator

import bcrypt
import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from moodmate.app import App
from moodmate.config import Config
from moodmate.core.core import Core, Services
from moodmate.web.server import create_fastapi_app

_gensalt = bcrypt.gensalt


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the minimum bcrypt cost so hashing does not dominate test time."""
    monkeypatch.setattr(bcrypt, "gensalt", lambda rounds=4, prefix=b"2b": _gensalt(rounds=4, prefix=prefix))


@pytest.fixture
def config():
    return Config(database_url="mongodb://localhost:27017/moodmate_test", ml_api_url="http://ml.test")


@pytest.fixture
async def core(config) -> AsyncIterator[Core]:
    """Core wired to an in-memory MongoDB with all services started."""
    core = Core(config, AsyncMongoMockClient())
    await core.services.start_all()
    yield core
    await core.services.stop_all()


@pytest.fixture
def services(core) -> Services:
    return core.services


@pytest.fixture
async def registered(services):
    """Registered account: Ana <ana@x.com> / secret1."""
    return await services.auth.register("Ana", "ANA@X.com", "secret1")


@pytest.fixture
async def token(services, registered):
    """Session token for the registered account."""
    token, _ = await services.auth.login("ana@x.com", "secret1")
    return token


@pytest.fixture
async def app(config) -> AsyncIterator[App]:
    app = App(config, AsyncMongoMockClient())
    await app._core.services.start_all()  # noqa: SLF001
    yield app
    await app._core.services.stop_all()  # noqa: SLF001


@pytest.fixture
async def client(app, config) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the FastAPI app without a network."""
    transport = ASGITransport(app=create_fastapi_app(app, config))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

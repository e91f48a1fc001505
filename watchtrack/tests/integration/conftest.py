import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from watchtrack.core.auth import create_access_token
from watchtrack.db.redis import get_redis
from watchtrack.dependencies import (
    get_account_repository,
    get_catalog_repository,
    get_playback_repository,
)
from watchtrack.main import app


@pytest.fixture
def api(accounts, catalog, sessions):
    async def no_redis():
        return None

    app.dependency_overrides[get_account_repository] = lambda: accounts
    app.dependency_overrides[get_catalog_repository] = lambda: catalog
    app.dependency_overrides[get_playback_repository] = lambda: sessions
    app.dependency_overrides[get_redis] = no_redis
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(api):
    transport = ASGITransport(app=api, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def auth_headers(account_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': account_id})}"}

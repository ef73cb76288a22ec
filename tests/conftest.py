import json
import pytest
from httpx import ASGITransport, AsyncClient
from asgi_lifespan import LifespanManager
from token_service.config.settings import Settings
from token_service.main import create_app


@pytest.fixture
def store_path(tmp_path):
    path = tmp_path / "livenet_t.json"
    path.write_text(json.dumps({}))
    return path


@pytest.fixture
def settings(store_path):
    return Settings(TOKEN_FILE_PATH=str(store_path), ENV="dev")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
async def ac_client(app):
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac

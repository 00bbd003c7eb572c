"""Pytest configuration and fixtures for API tests."""
import io
import os
import shutil
import tempfile
from pathlib import Path

# Set test env BEFORE any imports that use config
_tmp_root = Path(tempfile.mkdtemp(prefix="theming-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_root / 'test.db'}"
os.environ["APP_DATA_DIR"] = str(_tmp_root / "appdata")
os.environ["INITIAL_ADMIN_PASSWORD"] = "testpass123"
os.environ["INITIAL_ADMIN_USERNAME"] = "admin"
os.environ["THEMING_DEFAULT_NAME"] = "Nextcloud"
os.environ["THEMING_DEFAULT_URL"] = "https://nextcloud.com"
os.environ["THEMING_DEFAULT_SLOGAN"] = "a safe home for all your data"
os.environ["THEMING_DEFAULT_COLOR"] = "#0082c9"

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

import config
from theming.models.base import drop_db, engine, init_db
from theming.services.cache import cache_factory
from web.api.dependencies import get_time_factory
from web.api.main import app

FROZEN_TIME = 1_700_000_000  # Tue, 14 Nov 2023 22:13:20 GMT


class FrozenTimeFactory:
    def get_time(self) -> int:
        return FROZEN_TIME


@pytest.fixture(autouse=True)
async def _reset_state():
    """Fresh tables, app data and memo cache for every test (ASGI lifespan doesn't run with httpx)."""
    await drop_db()
    await init_db()
    shutil.rmtree(config.APP_DATA_DIR, ignore_errors=True)
    cache_factory.clear_all()
    yield
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def auth_headers(client):
    """Login as admin and return Authorization headers for protected endpoints."""
    r = await client.post(
        "/api/auth/login",
        json={"username": "admin", "password": "testpass123"},
    )
    assert r.status_code == 200, f"Login failed: {r.text}"
    token = r.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def frozen_time():
    """Pin the clock used for Expires headers."""
    app.dependency_overrides[get_time_factory] = FrozenTimeFactory
    return FROZEN_TIME


def make_image(width: int, height: int, fmt: str = "PNG", color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return make_image(64, 32)


@pytest.fixture
def image_factory():
    return make_image

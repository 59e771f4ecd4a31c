"""Pytest configuration and fixtures."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from photoblog_admin.core.config import Settings
from photoblog_admin.main import app
from photoblog_admin.api.dependencies import get_settings, get_storage_service
from photoblog_admin.services import AlbumOrderService, AlbumService, ImageService
from tests.factories import FakeStorageService, make_image_bytes, make_upload


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at an empty site checkout in a temp directory."""
    return Settings(
        _env_file=None,
        site_root=tmp_path,
        b2_application_key_id="test-key-id",
        b2_application_key="test-key",
        b2_bucket_name="test-bucket",
        b2_config_file=tmp_path / "missing-b2-config.json",
    )


@pytest.fixture
def fake_storage(test_settings: Settings) -> FakeStorageService:
    """Recording stand-in for the B2 storage service."""
    return FakeStorageService(test_settings)


@pytest.fixture
def image_service() -> ImageService:
    return ImageService()


@pytest.fixture
def album_service(test_settings, fake_storage, image_service) -> AlbumService:
    """Album service wired to the temp site and fake storage."""
    return AlbumService(
        test_settings,
        fake_storage,
        image_service,
        AlbumOrderService(test_settings),
    )


@pytest_asyncio.fixture(scope="function")
async def client(test_settings, fake_storage) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with settings and storage overrides."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_storage_service] = lambda: fake_storage

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def jpeg_upload():
    """A 1200x800 JPEG upload."""
    return make_upload("photo.jpg", make_image_bytes("JPEG", (1200, 800)), "image/jpeg")


@pytest.fixture
def png_upload():
    """A 400x300 PNG upload."""
    return make_upload("shot.png", make_image_bytes("PNG", (400, 300)), "image/png")

"""Dependency injection for FastAPI routes."""
from __future__ import annotations

from fastapi import Depends

from photoblog_admin.core.config import Settings, settings
from photoblog_admin.services import (
    StorageService,
    ImageService,
    AlbumOrderService,
    AlbumService,
)


# Singleton service instances
_storage_service: StorageService | None = None
_image_service: ImageService | None = None


def get_settings() -> Settings:
    """Get application settings."""
    return settings


def get_storage_service() -> StorageService:
    """Get storage service (singleton, keeps the B2 session between requests)."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService(settings)
    return _storage_service


def get_image_service() -> ImageService:
    """Get image service (singleton)."""
    global _image_service
    if _image_service is None:
        _image_service = ImageService()
    return _image_service


async def close_services():
    """Release singleton resources on shutdown."""
    global _storage_service
    if _storage_service is not None:
        await _storage_service.aclose()
        _storage_service = None


# Request-scoped services


def get_album_order_service(
    app_settings: Settings = Depends(get_settings),
) -> AlbumOrderService:
    """Get album order service."""
    return AlbumOrderService(app_settings)


def get_album_service(
    app_settings: Settings = Depends(get_settings),
    storage: StorageService = Depends(get_storage_service),
    images: ImageService = Depends(get_image_service),
    order_service: AlbumOrderService = Depends(get_album_order_service),
) -> AlbumService:
    """Get album service."""
    return AlbumService(app_settings, storage, images, order_service)

"""Business logic services."""
from .storage_service import StorageService, B2Session
from .image_service import ImageService, ImageMetadata
from .album_order_service import AlbumOrderService
from .album_service import AlbumService

__all__ = [
    "StorageService",
    "B2Session",
    "ImageService",
    "ImageMetadata",
    "AlbumOrderService",
    "AlbumService",
]

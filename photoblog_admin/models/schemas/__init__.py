"""Pydantic schemas for API validation."""
from __future__ import annotations

from .common import MessageResponse, ErrorResponse, AlbumOrderRequest, AlbumOrderResponse
from .album import (
    AlbumImage,
    AlbumLayout,
    Album,
    AlbumUpdate,
    UploadedImage,
    ImageOrderRequest,
    AlbumCreatedResponse,
    AlbumUpdatedResponse,
    ImagesAddedResponse,
)

__all__ = [
    # Common
    "MessageResponse",
    "ErrorResponse",
    "AlbumOrderRequest",
    "AlbumOrderResponse",
    # Album
    "AlbumImage",
    "AlbumLayout",
    "Album",
    "AlbumUpdate",
    "UploadedImage",
    "ImageOrderRequest",
    "AlbumCreatedResponse",
    "AlbumUpdatedResponse",
    "ImagesAddedResponse",
]

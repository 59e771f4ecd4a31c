"""API routes."""
from fastapi import APIRouter

from . import health, albums, album_order

# Create API router
api_router = APIRouter(prefix="/api")

# Include all route modules
api_router.include_router(health.router, tags=["health"])
api_router.include_router(albums.router, tags=["albums"])
api_router.include_router(album_order.router, tags=["album-order"])

__all__ = ["api_router"]

"""Health check endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from photoblog_admin.api.dependencies import get_settings
from photoblog_admin.core.config import Settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    posts_dir: str
    data_dir: str
    storage: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    app_settings: Settings = Depends(get_settings)
):
    """
    Health check endpoint.

    Reports whether the site directories exist and remote storage is configured.
    """
    posts_status = "healthy" if app_settings.posts_dir.is_dir() else "missing"
    data_status = "healthy" if app_settings.data_dir.is_dir() else "missing"
    storage_status = "configured" if app_settings.storage_configured else "unconfigured"

    status = "healthy" if posts_status == data_status == "healthy" else "unhealthy"

    return HealthResponse(
        status=status,
        posts_dir=posts_status,
        data_dir=data_status,
        storage=storage_status
    )

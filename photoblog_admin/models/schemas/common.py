"""Common Pydantic schemas used across the application."""
from typing import List, Optional
from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Simple success/failure response with a human-readable message."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned by the exception handlers."""

    success: bool = False
    error: str = Field(..., description="Error category")
    detail: str


class AlbumOrderRequest(BaseModel):
    """Manual album order, most prominent first."""

    order: List[Optional[str]]


class AlbumOrderResponse(BaseModel):
    """Manual album order plus albums sorted for the ordering screen."""

    order: List[str]
    albums: List[str] = Field(default_factory=list, description="Album slugs in display order")

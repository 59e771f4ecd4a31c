"""Album order API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from photoblog_admin.api.dependencies import get_album_order_service, get_album_service
from photoblog_admin.models.schemas import AlbumOrderRequest, AlbumOrderResponse, MessageResponse
from photoblog_admin.services import AlbumOrderService, AlbumService

router = APIRouter(prefix="/album-order")


@router.get("", response_model=AlbumOrderResponse)
async def get_album_order(
    album_service: AlbumService = Depends(get_album_service)
):
    """
    Get the manual album order.

    **Returns:**
    - **order**: Saved slugs, most prominent first
    - **albums**: All album slugs with ordered albums first
    """
    order, albums = album_service.get_order_view()
    return AlbumOrderResponse(order=order, albums=[album.slug for album in albums])


@router.put("", response_model=MessageResponse)
async def save_album_order(
    body: AlbumOrderRequest,
    order_service: AlbumOrderService = Depends(get_album_order_service)
):
    """Save the manual album order."""
    order_service.save_order(body.order)
    return MessageResponse(message="Album order saved")

"""Album API routes."""
from __future__ import annotations

import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from photoblog_admin.api.dependencies import get_album_service
from photoblog_admin.core.exceptions import BadRequestException
from photoblog_admin.models.schemas import (
    Album,
    AlbumCreatedResponse,
    AlbumUpdate,
    AlbumUpdatedResponse,
    ImageOrderRequest,
    ImagesAddedResponse,
    MessageResponse,
    UploadedImage,
)
from photoblog_admin.services import AlbumService

router = APIRouter(prefix="/albums")


async def _read_uploads(files: Optional[List[UploadFile]]) -> List[UploadedImage]:
    """Read uploaded files into memory, keeping submission order."""
    uploads = []
    for upload in files or []:
        uploads.append(UploadedImage(
            filename=upload.filename or "image",
            content_type=upload.content_type or "application/octet-stream",
            data=await upload.read(),
        ))
    return uploads


def _parse_date(value: Optional[str]) -> Optional[datetime.date]:
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise BadRequestException(f"Invalid date '{value}', expected YYYY-MM-DD")


@router.get("", response_model=List[Album])
async def list_albums(
    album_service: AlbumService = Depends(get_album_service)
):
    """
    List all albums.

    Albums in the manual order come first; the rest follow newest first.
    """
    return album_service.list_albums()


@router.get("/{slug}", response_model=Album)
async def get_album(
    slug: str,
    album_service: AlbumService = Depends(get_album_service)
):
    """Get album by slug."""
    return album_service.get_album(slug)


@router.post("", response_model=AlbumCreatedResponse, status_code=201)
async def create_album(
    title: str = Form(..., description="Album title, also the source of its slug"),
    developer: str = Form(default=""),
    description: Optional[str] = Form(default=None),
    date: Optional[str] = Form(default=None, description="YYYY-MM-DD, defaults to today"),
    images: Optional[List[UploadFile]] = File(default=None, description="Images in display order"),
    album_service: AlbumService = Depends(get_album_service)
):
    """
    Create an album and upload its images.

    **Returns:** The created album. Nothing is saved if any upload fails.
    """
    files = await _read_uploads(images)
    album = await album_service.create_album(
        title=title,
        developer=developer,
        description=description,
        date=_parse_date(date),
        files=files,
    )
    return AlbumCreatedResponse(
        message=f'Album "{title}" created with {album.image_count} images',
        slug=album.slug,
        album=album,
    )


@router.patch("/{slug}", response_model=AlbumUpdatedResponse)
async def update_album(
    slug: str,
    updates: AlbumUpdate,
    album_service: AlbumService = Depends(get_album_service)
):
    """
    Update album metadata.

    Only the fields present in the body change. `tags` may be a list or a
    comma-separated string.
    """
    album = album_service.update_album_metadata(slug, updates)
    return AlbumUpdatedResponse(message="Album updated", album=album)


@router.post("/{slug}/images", response_model=ImagesAddedResponse)
async def add_images(
    slug: str,
    images: List[UploadFile] = File(..., description="Images to append"),
    album_service: AlbumService = Depends(get_album_service)
):
    """Append images to an album."""
    files = await _read_uploads(images)
    added, total = await album_service.add_images(slug, files)
    return ImagesAddedResponse(
        message=f"Added {added} images",
        added_count=added,
        total_images=total,
    )


@router.put("/{slug}/images/order", response_model=MessageResponse)
async def reorder_images(
    slug: str,
    body: ImageOrderRequest,
    album_service: AlbumService = Depends(get_album_service)
):
    """
    Reorder an album's images.

    **Body:** `order` lists current image indices in their new sequence.
    """
    album_service.reorder_images(slug, body.order)
    return MessageResponse(message="Images reordered")


@router.delete("/{slug}/images/{index}", response_model=MessageResponse)
async def delete_image(
    slug: str,
    index: int,
    album_service: AlbumService = Depends(get_album_service)
):
    """Delete one image by its position in the album."""
    await album_service.delete_image(slug, index)
    return MessageResponse(message="Image deleted")


@router.delete("/{slug}", response_model=MessageResponse)
async def delete_album(
    slug: str,
    album_service: AlbumService = Depends(get_album_service)
):
    """Delete an album with its images."""
    await album_service.delete_album(slug)
    return MessageResponse(message="Album deleted")

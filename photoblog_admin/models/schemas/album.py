"""Album Pydantic schemas."""
import datetime
from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel


# Field names used by descriptors written before width/height were tracked
LEGACY_IMAGE_KEYS = {
    "imageFull-link": "url",
    "thumbnail-link": "thumb",
    "aspect-ratio": "aspectRatio",
}

DEFAULT_ASPECT_RATIO = 1.5


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AlbumImage(CamelModel):
    """One image record of an album descriptor."""

    url: str = Field(default="", description="Public URL of the full-resolution image")
    thumb: str = Field(default="", description="Public URL of the thumbnail")
    aspect_ratio: float = Field(default=DEFAULT_ASPECT_RATIO, description="Width / height")
    width: int = Field(default=0, description="Width in pixels, 0 when unknown")
    height: int = Field(default=0, description="Height in pixels, 0 when unknown")

    @model_validator(mode="before")
    @classmethod
    def normalize_legacy_keys(cls, data: Any) -> Any:
        """Map legacy descriptor keys onto the current shape and fill blanks."""
        if not isinstance(data, dict):
            return data

        normalized = dict(data)
        for legacy_key, key in LEGACY_IMAGE_KEYS.items():
            if legacy_key in normalized:
                legacy_value = normalized.pop(legacy_key)
                if not normalized.get(key):
                    normalized[key] = legacy_value

        # Falsy values fall back to defaults, matching what the site generator expects
        if not normalized.get("aspectRatio") and not normalized.get("aspect_ratio"):
            normalized.pop("aspect_ratio", None)
            normalized["aspectRatio"] = DEFAULT_ASPECT_RATIO
        for key in ("url", "thumb"):
            if not normalized.get(key):
                normalized[key] = ""
        for key in ("width", "height"):
            if not normalized.get(key):
                normalized[key] = 0
        return normalized


class AlbumLayout(CamelModel):
    """Card and banner crop settings used by the site theme."""

    card_image: int = 0
    card_offset: int = 50
    card_offset_x: int = 50
    card_zoom: int = 100
    banner_image: int = 0
    banner_offset: int = 50
    banner_offset_x: int = 50
    banner_zoom: int = 100


class Album(AlbumLayout):
    """An album assembled from its post front matter and image descriptor."""

    slug: str
    title: str
    description: str
    developer: str = ""
    date: Optional[datetime.date] = None
    tags: List[str] = Field(default_factory=list)
    images: List[AlbumImage] = Field(default_factory=list)
    post_file: str = Field(..., description="Markdown file name under the posts directory")
    json_file: str = Field(..., description="Descriptor file name under the data directory")

    @computed_field(alias="imageCount")
    @property
    def image_count(self) -> int:
        return len(self.images)


class AlbumUpdate(CamelModel):
    """Partial album metadata update; unset fields keep their current value."""

    title: Optional[str] = None
    description: Optional[str] = None
    developer: Optional[str] = None
    date: Optional[datetime.date] = None
    tags: Optional[Union[str, List[str]]] = None
    card_image: Optional[int] = None
    card_offset: Optional[int] = None
    card_offset_x: Optional[int] = None
    card_zoom: Optional[int] = None
    banner_image: Optional[int] = None
    banner_offset: Optional[int] = None
    banner_offset_x: Optional[int] = None
    banner_zoom: Optional[int] = None


class UploadedImage(BaseModel):
    """An uploaded image file held in memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class ImageOrderRequest(BaseModel):
    """New image order as indices into the current image list."""

    order: List[int]


class AlbumCreatedResponse(CamelModel):
    """Response for album creation."""

    success: bool = True
    message: str
    slug: str
    album: Album


class AlbumUpdatedResponse(CamelModel):
    """Response for album metadata updates."""

    success: bool = True
    message: str
    album: Album


class ImagesAddedResponse(CamelModel):
    """Response for adding images to an album."""

    success: bool = True
    message: str
    added_count: int
    total_images: int

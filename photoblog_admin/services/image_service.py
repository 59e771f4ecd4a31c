"""Image service for decoding, re-encoding and thumbnailing uploads."""
import io
from dataclasses import dataclass
from typing import Optional

from PIL import Image as PILImage, UnidentifiedImageError

from photoblog_admin.core.exceptions import BadRequestException, ImageProcessingException


@dataclass
class ImageMetadata:
    """Decoded image properties."""

    width: int
    height: int
    format: Optional[str]


class ImageService:
    """Service for image processing with Pillow."""

    def _open(self, data: bytes) -> PILImage.Image:
        try:
            img = PILImage.open(io.BytesIO(data))
            img.load()
            return img
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise BadRequestException(f"Could not decode image: {e}")

    def read_metadata(self, data: bytes) -> ImageMetadata:
        """
        Decode an image and report its size and format.

        Raises:
            BadRequestException: If the data is not a decodable image
        """
        with self._open(data) as img:
            width, height = img.size
            return ImageMetadata(width=width, height=height, format=img.format)

    @staticmethod
    def aspect_ratio(width: int, height: int) -> float:
        """Width / height rounded to 4 decimal places."""
        if not height:
            return 0.0
        return round(width / height, 4)

    def reencode(self, data: bytes, format: str = "JPEG", quality: int = 95) -> bytes:
        """
        Re-encode an image.

        Args:
            data: Source image bytes
            format: Target Pillow format name
            quality: Encoder quality (1-100)

        Returns:
            Encoded image bytes
        """
        with self._open(data) as img:
            return self._encode(img, format, quality)

    def resize_and_encode(
        self,
        data: bytes,
        max_width: int,
        format: str = "WEBP",
        quality: int = 85
    ) -> bytes:
        """
        Scale an image down to max_width, keeping its aspect ratio.

        Images already narrower than max_width keep their size.

        Returns:
            Encoded image bytes
        """
        with self._open(data) as img:
            width, height = img.size
            if width > max_width:
                new_height = max(1, round(height * max_width / width))
                img = img.resize((max_width, new_height), PILImage.Resampling.LANCZOS)
            return self._encode(img, format, quality)

    def _encode(self, img: PILImage.Image, format: str, quality: int) -> bytes:
        format = format.upper()
        try:
            if format == "JPEG" and img.mode != "RGB":
                img = img.convert("RGB")
            elif format == "WEBP" and img.mode not in ("RGB", "RGBA"):
                has_alpha = img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info
                img = img.convert("RGBA" if has_alpha else "RGB")

            output = io.BytesIO()
            img.save(output, format=format, quality=quality)
            return output.getvalue()
        except (OSError, ValueError, KeyError) as e:
            raise ImageProcessingException(f"Failed to encode {format}: {e}")

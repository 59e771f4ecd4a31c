"""Album service: the album/image metadata lifecycle and its remote assets."""
import datetime
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from urllib.parse import unquote, urlsplit

from pydantic import ValidationError

from photoblog_admin.core.config import Settings
from photoblog_admin.core.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    OutOfRangeException,
    StorageException,
)
from photoblog_admin.core.slugs import create_slug
from photoblog_admin.models.schemas.album import Album, AlbumImage, AlbumUpdate, UploadedImage
from photoblog_admin.repositories import DescriptorRepository, FrontMatter, PostRepository
from photoblog_admin.services.album_order_service import AlbumOrderService
from photoblog_admin.services.image_service import ImageService
from photoblog_admin.services.storage_service import StorageService

logger = logging.getLogger(__name__)

LAYOUT_FIELDS = (
    "card_image",
    "card_offset",
    "card_offset_x",
    "card_zoom",
    "banner_image",
    "banner_offset",
    "banner_offset_x",
    "banner_zoom",
)


def remote_keys(image: AlbumImage) -> List[str]:
    """
    Bucket object names of an image and its thumbnail, taken from their URLs.

    `.../{slug}/img000.jpg` and `.../{slug}/thumb/img000.webp` map to
    `{slug}/img000.jpg` and `{slug}/thumb/img000.webp`.
    """
    keys = []
    if image.url:
        keys.append("/".join(unquote(urlsplit(image.url).path).split("/")[-2:]))
    if image.thumb:
        keys.append("/".join(unquote(urlsplit(image.thumb).path).split("/")[-3:]))
    return keys


def sort_albums(albums: List[Album], order: Sequence[str]) -> List[Album]:
    """
    Sort albums for display.

    Albums named in the manual order come first, in that order. The rest
    follow by descending date, undated albums last.
    """
    by_date = sorted(
        albums,
        key=lambda a: (a.date is not None, a.date or datetime.date.min),
        reverse=True,
    )
    if not order:
        return by_date

    positions: Dict[str, int] = {}
    for position, slug in enumerate(order):
        positions.setdefault(slug, position)
    return sorted(
        by_date,
        key=lambda a: (0, positions[a.slug]) if a.slug in positions else (1, 0),
    )


class AlbumService:
    """Service for album operations."""

    def __init__(
        self,
        settings: Settings,
        storage: StorageService,
        images: ImageService,
        order_service: Optional[AlbumOrderService] = None
    ):
        """
        Initialize album service.

        Args:
            settings: Application settings
            storage: Remote storage service
            images: Image processing service
            order_service: Album order service (created from settings when omitted)
        """
        self.settings = settings
        self.storage = storage
        self.images = images
        self.order_service = order_service or AlbumOrderService(settings)
        self.posts = PostRepository(
            settings.posts_dir,
            layout=settings.post_layout,
            category=settings.post_category,
            default_description=settings.default_description,
        )
        self.descriptors = DescriptorRepository(settings.data_dir)

    # Reading

    def list_albums(self) -> List[Album]:
        """
        List all albums in display order.

        Albums without a post, or whose post has no front matter, are
        skipped. An unreadable descriptor leaves its album without images.

        Returns:
            Albums sorted by manual order, then by descending date
        """
        albums = []
        for slug in self.descriptors.list_slugs():
            album = self._load_album(slug)
            if album is not None:
                albums.append(album)
        return sort_albums(albums, self.order_service.get_order())

    def find_album(self, slug: str) -> Optional[Album]:
        """Get album by slug, or None if it doesn't exist."""
        if not slug or slug[0] in "._" or "/" in slug or "\\" in slug:
            return None
        if not self.descriptors.exists(slug):
            return None
        return self._load_album(slug)

    def get_album(self, slug: str) -> Album:
        """
        Get album by slug.

        Raises:
            NotFoundException: If album not found
        """
        album = self.find_album(slug)
        if album is None:
            raise NotFoundException("Album", slug)
        return album

    def get_order_view(self) -> Tuple[List[str], List[Album]]:
        """
        Get the manual order and the albums arranged for the ordering screen.

        Returns:
            Tuple of (manual order, albums with ordered ones first)
        """
        return self.order_service.get_order(), self.list_albums()

    def _load_album(self, slug: str) -> Optional[Album]:
        post_path = self.posts.find(slug)
        if post_path is None:
            return None

        try:
            post = self.posts.read(post_path)
        except OSError as e:
            logger.error(f"Error reading {post_path.name}: {e}")
            return None
        if post is None:
            return None

        json_file = self.descriptors.filename_for(slug)
        try:
            images = self.descriptors.read(slug)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {json_file}: {e}")
            images = []

        front_matter = post.front_matter
        return Album(
            slug=slug,
            title=front_matter.title or slug,
            description=front_matter.description or self.settings.default_description,
            developer=front_matter.developer or "",
            date=front_matter.date,
            tags=front_matter.tags,
            images=images,
            post_file=post_path.name,
            json_file=json_file,
            **front_matter.layout().model_dump(),
        )

    # Creating

    async def create_album(
        self,
        title: str,
        developer: str = "",
        description: Optional[str] = None,
        date: Optional[datetime.date] = None,
        files: Sequence[UploadedImage] = ()
    ) -> Album:
        """
        Create an album, uploading its images first.

        Nothing is written locally unless every image uploads.

        Args:
            title: Album title (the slug is derived from it)
            developer: Game developer credit
            description: Album description
            date: Album date (defaults to today)
            files: Images in display order

        Returns:
            Created album

        Raises:
            BadRequestException: If the title has no usable characters or an upload is invalid
            ConflictException: If an album with the same slug exists
            UpstreamException: If processing or uploading an image fails
        """
        slug = create_slug(title or "")
        if not slug:
            raise BadRequestException("Album title must contain letters or digits")
        if self.descriptors.exists(slug):
            raise ConflictException("Album", slug)
        self._validate_uploads(files)

        album_date = date or datetime.date.today()
        images = await self._upload_images(slug, files, start=0)

        self.descriptors.write(slug, images)
        front_matter = FrontMatter(
            title=title,
            description=description or None,
            developer=developer or "",
            date=album_date,
            slug=slug,
        )
        self.posts.write(
            self.posts.directory / self.posts.filename_for(slug, album_date),
            front_matter,
        )
        logger.info(f"Album {slug} created with {len(images)} images")
        return self.get_album(slug)

    def _validate_uploads(self, files: Sequence[UploadedImage]):
        if len(files) > self.settings.max_upload_files:
            raise BadRequestException(
                f"Too many files: at most {self.settings.max_upload_files} per upload"
            )
        for upload in files:
            if upload.content_type not in self.settings.allowed_content_types:
                raise BadRequestException(
                    f"Invalid file type for {upload.filename}. "
                    f"Allowed types: {', '.join(self.settings.allowed_content_types)}"
                )
            if upload.size > self.settings.max_upload_bytes:
                raise BadRequestException(
                    f"{upload.filename} exceeds {self.settings.max_upload_size_mb}MB"
                )

    async def _upload_images(
        self,
        slug: str,
        files: Sequence[UploadedImage],
        start: int
    ) -> List[AlbumImage]:
        """Encode and upload images in order, numbering them from start."""
        images = []
        for offset, upload in enumerate(files):
            number = f"{start + offset:03d}"
            metadata = self.images.read_metadata(upload.data)

            original = upload.data
            if metadata.format != "JPEG":
                original = self.images.reencode(upload.data, "JPEG", self.settings.jpeg_quality)
            original_name = f"{slug}/img{number}.jpg"
            await self.storage.upload_file(original_name, original, "image/jpeg")

            thumb = self.images.resize_and_encode(
                upload.data,
                self.settings.thumbnail_width,
                "WEBP",
                self.settings.thumbnail_quality,
            )
            thumb_name = f"{slug}/thumb/img{number}.webp"
            await self.storage.upload_file(thumb_name, thumb, "image/webp")

            images.append(AlbumImage(
                url=self.storage.public_url(original_name),
                thumb=self.storage.public_url(thumb_name),
                aspect_ratio=ImageService.aspect_ratio(metadata.width, metadata.height),
                width=metadata.width,
                height=metadata.height,
            ))
        return images

    # Updating

    def update_album_metadata(
        self,
        slug: str,
        updates: Union[AlbumUpdate, Dict[str, Any]]
    ) -> Album:
        """
        Merge metadata changes into an album's post.

        Fields that are not provided keep their current value. A new date
        renames the post to `{date}-{slug}.md`.

        Raises:
            NotFoundException: If album not found
            BadRequestException: If the updates are malformed
        """
        album = self.get_album(slug)
        if not isinstance(updates, AlbumUpdate):
            try:
                updates = AlbumUpdate.model_validate(updates)
            except ValidationError as e:
                raise BadRequestException(f"Invalid album update: {e}")
        changes = {
            name: value
            for name, value in updates.model_dump(exclude_unset=True).items()
            if value is not None
        }

        tags = album.tags
        if "tags" in changes:
            raw_tags = changes["tags"]
            if isinstance(raw_tags, str):
                tags = [tag.strip() for tag in raw_tags.split(",") if tag.strip()]
            else:
                tags = list(raw_tags)

        post_path = self.posts.directory / album.post_file
        document = self.posts.read(post_path) if post_path.exists() else None
        body = document.body if document else ""

        new_date = changes.get("date") or album.date
        if "date" in changes and changes["date"] != album.date:
            target = self.posts.directory / self.posts.filename_for(slug, new_date)
            post_path = self.posts.rename(post_path, target)

        front_matter = FrontMatter(
            title=changes.get("title") or album.title,
            description=changes.get("description", album.description),
            developer=changes.get("developer", album.developer),
            date=new_date,
            slug=slug,
            tags=tags,
            **{name: changes.get(name, getattr(album, name)) for name in LAYOUT_FIELDS},
        )
        self.posts.write(post_path, front_matter, body)
        logger.info(f"Album {slug} updated ({', '.join(sorted(changes)) or 'no changes'})")
        return self.get_album(slug)

    async def add_images(self, slug: str, files: Sequence[UploadedImage]) -> Tuple[int, int]:
        """
        Append images to an album.

        Numbering continues from the current image count.

        Returns:
            Tuple of (images added, total images)

        Raises:
            NotFoundException: If album not found
            BadRequestException: If an upload is invalid
            UpstreamException: If processing or uploading an image fails
        """
        album = self.get_album(slug)
        self._validate_uploads(files)

        added = await self._upload_images(slug, files, start=len(album.images))
        images = album.images + added
        self.descriptors.write(slug, images)
        logger.info(f"Added {len(added)} images to {slug} ({len(images)} total)")
        return len(added), len(images)

    def reorder_images(self, slug: str, order: Any):
        """
        Rearrange an album's images.

        Each entry of order is an index into the current image list. The
        sequence is not required to be a permutation: repeated indices
        repeat an image, missing ones drop it, and out-of-range indices are
        skipped.

        Raises:
            NotFoundException: If album not found
            BadRequestException: If order is not a list of integers
        """
        album = self.get_album(slug)
        if not isinstance(order, (list, tuple)) or not all(
            isinstance(index, int) and not isinstance(index, bool) for index in order
        ):
            raise BadRequestException("Invalid order array")

        images = []
        for index in order:
            if 0 <= index < len(album.images):
                images.append(album.images[index])
            else:
                logger.warning(f"Skipping out-of-range image index {index} for {slug}")
        self.descriptors.write(slug, images)
        logger.info(f"Reordered images of {slug}")

    # Deleting

    async def delete_image(self, slug: str, index: int):
        """
        Remove one image from an album.

        Remote files are deleted best-effort and are not renumbered.

        Raises:
            NotFoundException: If album not found
            OutOfRangeException: If index is not a valid position
        """
        album = self.get_album(slug)
        if index < 0 or index >= len(album.images):
            raise OutOfRangeException(slug, index, len(album.images))

        await self._delete_remote(album.images[index])
        images = album.images[:index] + album.images[index + 1:]
        self.descriptors.write(slug, images)
        logger.info(f"Deleted image {index} of {slug}")

    async def delete_album(self, slug: str):
        """
        Delete an album, its remote images and its local files.

        Raises:
            NotFoundException: If album not found
        """
        album = self.get_album(slug)
        for image in album.images:
            await self._delete_remote(image)

        self.posts.delete(self.posts.directory / album.post_file)
        self.descriptors.delete(slug)
        logger.info(f"Album {slug} deleted")

    async def _delete_remote(self, image: AlbumImage):
        """Delete an image's remote files, logging failures."""
        for key in remote_keys(image):
            try:
                await self.storage.delete_file(key)
            except StorageException as e:
                logger.error(f"Error deleting {key} from B2: {e.message}")

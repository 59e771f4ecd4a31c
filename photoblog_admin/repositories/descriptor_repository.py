"""Repository for album image descriptors (one JSON array per album)."""
from pathlib import Path
from typing import List

from photoblog_admin.models.schemas.album import AlbumImage
from photoblog_admin.repositories.base import BaseRepository


class DescriptorRepository(BaseRepository):
    """Reads and writes `{slug}.json` image arrays in the data directory."""

    def filename_for(self, slug: str) -> str:
        return f"{slug}.json"

    def path_for(self, slug: str) -> Path:
        return self.directory / self.filename_for(slug)

    def list_slugs(self) -> List[str]:
        """
        List slugs of all descriptors.

        Files starting with an underscore (such as the album order file)
        are not descriptors.

        Returns:
            Sorted list of slugs
        """
        return sorted(
            path.stem
            for path in self.directory.glob("*.json")
            if path.is_file() and not path.name.startswith("_")
        )

    def exists(self, slug: str) -> bool:
        return self.path_for(slug).is_file()

    def read(self, slug: str) -> List[AlbumImage]:
        """
        Read an album's image records, normalizing legacy entries.

        Args:
            slug: Album slug

        Returns:
            Image records in display order

        Raises:
            OSError: If the descriptor cannot be read
            ValueError: If the descriptor is not a JSON array of image records
        """
        raw = self.read_json(self.path_for(slug))
        if not isinstance(raw, list):
            raise ValueError(f"{self.filename_for(slug)} does not contain a JSON array")
        return [AlbumImage.model_validate(entry) for entry in raw]

    def write(self, slug: str, images: List[AlbumImage]) -> Path:
        """Replace an album's image records."""
        return self.write_json(
            self.path_for(slug),
            [image.model_dump(by_alias=True) for image in images],
        )

    def delete(self, slug: str) -> bool:
        return self.delete_file(self.path_for(slug))

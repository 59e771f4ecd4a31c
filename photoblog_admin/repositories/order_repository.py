"""Repository for the manual album order file."""
from pathlib import Path
from typing import Any, List

from photoblog_admin.repositories.base import BaseRepository


class AlbumOrderRepository(BaseRepository):
    """Reads and writes the JSON array of slugs defining manual album order."""

    def __init__(self, path: Path):
        """
        Initialize album order repository.

        Args:
            path: Order file path
        """
        self.path = Path(path)
        super().__init__(self.path.parent)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> List[Any]:
        """
        Read the raw order array.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a JSON array
        """
        order = self.read_json(self.path)
        if not isinstance(order, list):
            raise ValueError(f"{self.path.name} does not contain a JSON array")
        return order

    def write(self, order: List[Any]) -> Path:
        """Overwrite the order file verbatim."""
        return self.write_json(self.path, order)

"""Base repository with common file operations."""
import json
import os
import tempfile
from pathlib import Path
from typing import Any


class BaseRepository:
    """Base repository for records kept as files in one directory."""

    def __init__(self, directory: Path):
        """
        Initialize repository.

        Args:
            directory: Directory holding the repository's files
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file."""
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> Path:
        """
        Write a UTF-8 text file, replacing any existing file in one step.

        Args:
            path: Destination path
            content: File content

        Returns:
            Path written
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return path

    def read_json(self, path: Path) -> Any:
        """
        Read and decode a JSON file.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the content is not valid JSON
        """
        return json.loads(self.read_text(path))

    def write_json(self, path: Path, data: Any) -> Path:
        """Write data as indented JSON."""
        return self.write_text(path, json.dumps(data, indent=2, ensure_ascii=False))

    def delete_file(self, path: Path) -> bool:
        """
        Delete a file.

        Returns:
            True if deleted, False if the file didn't exist
        """
        if path.exists():
            path.unlink()
            return True
        return False

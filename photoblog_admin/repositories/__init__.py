"""Data access layer - file-backed repositories."""
from .base import BaseRepository
from .descriptor_repository import DescriptorRepository
from .order_repository import AlbumOrderRepository
from .post_repository import FrontMatter, PostDocument, PostRepository, scan_front_matter

__all__ = [
    "BaseRepository",
    "DescriptorRepository",
    "AlbumOrderRepository",
    "FrontMatter",
    "PostDocument",
    "PostRepository",
    "scan_front_matter",
]

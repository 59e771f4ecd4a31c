"""Album order service for the manual album display order."""
import logging
from typing import Any, List

from photoblog_admin.core.config import Settings
from photoblog_admin.core.exceptions import BadRequestException
from photoblog_admin.repositories import AlbumOrderRepository

logger = logging.getLogger(__name__)


class AlbumOrderService:
    """Service for reading and saving the manual album order."""

    def __init__(self, settings: Settings):
        """
        Initialize album order service.

        Args:
            settings: Application settings
        """
        self.repo = AlbumOrderRepository(settings.album_order_file)

    def get_order(self) -> List[str]:
        """
        Get the manual album order.

        Entries that are not slugs are dropped. A missing or unreadable
        file yields an empty order.

        Returns:
            Slugs, most prominent first
        """
        if not self.repo.exists():
            return []
        try:
            order = self.repo.read()
        except (OSError, ValueError) as e:
            logger.error(f"Error reading album order: {e}")
            return []
        slugs = [entry for entry in order if isinstance(entry, str)]
        dropped = [entry for entry in order if entry is not None and not isinstance(entry, str)]
        if dropped:
            logger.warning(f"Ignoring non-slug album order entries: {dropped}")
        return slugs

    def save_order(self, order: Any):
        """
        Overwrite the manual album order.

        Slugs are not checked against existing albums.

        Raises:
            BadRequestException: If order is not a list
        """
        if not isinstance(order, (list, tuple)):
            raise BadRequestException("Invalid order array")
        self.repo.write(list(order))
        logger.info(f"Album order saved ({len(order)} entries)")

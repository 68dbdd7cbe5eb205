"""
Feed service.

Loads the persisted gallery feed, replacing unreadable content with a fresh
document so a poisoned feed never blocks publishing.
"""

from gallery_core import get_logger
from gallery_feed import CorruptFeedError, FeedDocument, new_feed_document, parse_feed_document

logger = get_logger(__name__)


class FeedService:
    """Service for loading gallery feeds."""

    def load(self, content: bytes | None) -> FeedDocument:
        """
        Load a feed document from persisted content.

        Args:
            content: Existing feed bytes, or None when no feed exists yet.

        Returns:
            Parsed feed, or a fresh one when content is missing or corrupt.
        """
        if not content:
            logger.info("Created brand new feed.")
            return new_feed_document()

        try:
            return parse_feed_document(content)
        except CorruptFeedError as e:
            logger.warning(
                "Failed to load feed, replacing with blank one.", extra={"error": str(e)}
            )
            return new_feed_document()

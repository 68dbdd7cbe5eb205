"""
Publish service.

Applies one uploaded .vsix archive to the gallery: stores its icon, merges
its entry into the feed and reports the publish to GitHub.
"""

from enum import Enum
from typing import BinaryIO

from pydantic import BaseModel

from gallery_core import get_logger
from gallery_core.config import GallerySettings
from gallery_core.storage import FeedStore
from gallery_feed import ArchiveError, merge_entry, read_archive, serialize_feed

from .feed_service import FeedService
from .status_notifier import NotifyResult, StatusNotifier

logger = get_logger(__name__)


class PublishStatus(str, Enum):
    """Publish outcome."""

    PUBLISHED = "published"
    SKIPPED = "skipped"  # Archive unusable; feed untouched


class PublishResult(BaseModel):
    """Result of publishing a single archive."""

    status: PublishStatus
    archive_name: str
    identity: str | None = None
    version: str | None = None
    icon_written: bool = False
    notify_result: NotifyResult | None = None
    reason: str | None = None


class PublishService:
    """Service that publishes archives into a gallery feed."""

    def __init__(
        self,
        store: FeedStore,
        settings: GallerySettings,
        notifier: StatusNotifier | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.notifier = notifier or StatusNotifier(settings)
        self.feed_service = FeedService()

    async def publish(
        self, archive_name: str, archive: bytes | BinaryIO, link_base: str
    ) -> PublishResult:
        """
        Publish an archive.

        Args:
            archive_name: Archive blob name without the .vsix extension.
            archive: Archive bytes or seekable stream.
            link_base: Public URL of the directory holding the feed assets.

        Returns:
            Publish result.

        Raises:
            httpx.HTTPError: If reporting the commit status fails.
        """
        try:
            contents = read_archive(archive)
        except ArchiveError as e:
            logger.warning(
                "Skipping archive %s.vsix: %s", archive_name, e, extra={"archive": archive_name}
            )
            return PublishResult(
                status=PublishStatus.SKIPPED, archive_name=archive_name, reason=str(e)
            )

        manifest = contents.manifest
        icon_written = False
        if contents.icon.found:
            try:
                self.store.write_icon(archive_name, contents.icon.data)
                icon_written = True
            except OSError:
                logger.exception("Failed to store icon", extra={"archive": archive_name})
        elif contents.icon.error:
            logger.debug(contents.icon.error, extra={"archive": archive_name})

        document = self.feed_service.load(self.store.read_feed())
        document = merge_entry(
            document,
            manifest,
            archive_name=archive_name,
            link_base=link_base,
            icon_available=icon_written,
        )
        self.store.write_feed(serialize_feed(document))

        logger.info(
            "Successfully updated feed with %s %s.",
            manifest.identity,
            manifest.version,
        )

        notify_result = await self.notifier.notify(
            contents.source, link_base, source_error=contents.source_error
        )

        return PublishResult(
            status=PublishStatus.PUBLISHED,
            archive_name=archive_name,
            identity=manifest.identity,
            version=manifest.version,
            icon_written=icon_written,
            notify_result=notify_result,
        )

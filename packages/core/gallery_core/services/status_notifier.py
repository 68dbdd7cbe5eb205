"""
Commit status notifier.

Reports a successful feed publish back to the GitHub commit the archive was
built from.
"""

from enum import Enum

import httpx

from gallery_core import get_logger
from gallery_core.config import GallerySettings
from gallery_feed import SourceMetadata

logger = get_logger(__name__)

USER_AGENT = "vsgallery"


class NotifyResult(str, Enum):
    """Outcome of a status report attempt."""

    REPORTED = "reported"
    SKIPPED_NO_TOKEN = "skipped_no_token"  # Notifications not configured
    SKIPPED_NO_SOURCE = "skipped_no_source"  # source.json missing or invalid
    SKIPPED_REPO_UNRESOLVED = "skipped_repo_unresolved"  # No usable owner/repo


def split_repository(repository: str | None) -> tuple[str, str] | None:
    """Split an owner/repo string, returning None unless both parts are present."""
    if not repository:
        return None
    parts = repository.strip().split("/")
    if len(parts) != 2 or not all(parts):
        return None
    return parts[0], parts[1]


def feed_channel(link_base: str) -> str:
    """Return the channel name of a feed, i.e. the last path segment of its link base."""
    segments = [segment for segment in link_base.split("/") if segment]
    return segments[-1] if segments else ""


class StatusNotifier:
    """Reports gallery publishes as GitHub commit statuses."""

    def __init__(
        self,
        settings: GallerySettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    async def notify(
        self,
        source: SourceMetadata | None,
        link_base: str,
        source_error: str | None = None,
    ) -> NotifyResult:
        """
        Report a successful publish for the commit in the archive's source metadata.

        Args:
            source: Metadata read from the archive's source.json.
            link_base: Public URL of the directory holding the updated feed.
            source_error: Why source metadata is unavailable, when known.

        Returns:
            What was done.

        Raises:
            httpx.HTTPError: If the status API call fails.
        """
        token = self.settings.github_token
        if not token:
            logger.debug("No GitHub token configured; skipping commit status")
            return NotifyResult.SKIPPED_NO_TOKEN

        if source is None:
            logger.warning(
                "Skipping commit status: %s",
                source_error or "Could not find source.json in archive",
            )
            return NotifyResult.SKIPPED_NO_SOURCE

        repository = source.repository or self.settings.github_repository
        coordinates = split_repository(repository)
        if coordinates is None:
            logger.warning(
                "Could not determine GitHub repository name.", extra={"repository": repository}
            )
            return NotifyResult.SKIPPED_REPO_UNRESOLVED

        owner, repo = coordinates
        kind = feed_channel(link_base)
        payload = {
            "state": "success",
            "target_url": f"{link_base.rstrip('/')}/{self.settings.feed_file_name}",
            "description": f"Successfully published to {kind} gallery feed",
            "context": f"feed-{kind}",
        }
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": USER_AGENT,
        }
        url = f"{self.settings.github_api_url.rstrip('/')}/repos/{owner}/{repo}/statuses/{source.commit}"

        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout, headers=headers, transport=self._transport
        ) as client:
            response = await client.post(url, json=payload)
            response.raise_for_status()

        logger.info(
            "Successfully reported status for %s@%s.",
            f"{owner}/{repo}",
            source.commit,
        )
        return NotifyResult.REPORTED

"""
Gallery feed merge.

Replaces the entry for a published extension and moves it to the top.
"""

from datetime import UTC, datetime

from .models import ExtensionManifest, FeedDocument, FeedEntry, VsixReference


def entry_link_base(archive_url: str) -> str:
    """
    Derive the link base from the public URL of an uploaded archive.

    >>> entry_link_base("https://x.blob.core.windows.net/stable/Foo.vsix")
    'https://x.blob.core.windows.net/stable'
    """
    return archive_url.rsplit("/", 1)[0]


def _join(base: str, name: str) -> str:
    return f"{base.rstrip('/')}/{name}"


def build_entry(
    manifest: ExtensionManifest,
    *,
    archive_name: str,
    link_base: str,
    icon_available: bool,
    now: datetime,
) -> FeedEntry:
    """Build the feed entry describing a freshly published archive."""
    return FeedEntry(
        id=manifest.identity,
        title=manifest.display_name,
        summary=manifest.description,
        published=now,
        updated=now,
        author_name=manifest.publisher,
        link=_join(link_base, f"{archive_name}.vsix"),
        icon_link=_join(link_base, f"{archive_name}.png") if icon_available else None,
        vsix=VsixReference(id=manifest.identity, version=manifest.version),
    )


def merge_entry(
    document: FeedDocument,
    manifest: ExtensionManifest,
    *,
    archive_name: str,
    link_base: str,
    icon_available: bool = False,
    now: datetime | None = None,
) -> FeedDocument:
    """
    Merge a published extension into the feed.

    Any existing entry with the same identity is dropped and the new entry is
    placed first. Republishing always refreshes both published and updated,
    and no version ordering is enforced.

    Args:
        document: Current feed.
        manifest: Manifest of the published archive.
        archive_name: Archive blob name without the .vsix extension.
        link_base: Public URL of the directory holding the feed assets.
        icon_available: Whether {archive_name}.png was stored next to the archive.
        now: Timestamp to use, defaults to the current UTC time. Naive values are taken as UTC.

    Returns:
        New feed document; the input is not modified.

    Raises:
        ValueError: If the manifest has no identity or version.
    """
    if not manifest.identity or not manifest.version:
        raise ValueError("Manifest identity and version are required")

    now = now or datetime.now(UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    entry = build_entry(
        manifest,
        archive_name=archive_name,
        link_base=link_base,
        icon_available=icon_available,
        now=now,
    )

    remaining = document.without(manifest.identity).entries
    return document.model_copy(update={"entries": (entry, *remaining), "updated": now})

"""
Gallery feed loading.

Rebuilds the in-memory feed document from persisted Atom XML.
"""

import re
from datetime import datetime
from xml.etree import ElementTree as ET

from .models import ATOM_NS, FEED_ID, FEED_TITLE, GALLERY_NS, FeedDocument, FeedEntry, VsixReference

_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


class CorruptFeedError(ValueError):
    """Existing feed content is not a readable Atom feed."""


def _atom(tag: str) -> str:
    return f"{{{ATOM_NS}}}{tag}"


def _gallery(tag: str) -> str:
    return f"{{{GALLERY_NS}}}{tag}"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or unreadable."""
    if not value:
        return None
    # .NET writes seven fractional digits
    value = _EXTRA_FRACTION.sub(r"\1", value.strip())
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def new_feed_document() -> FeedDocument:
    """Create an empty gallery feed."""
    return FeedDocument(title=FEED_TITLE, id=FEED_ID)


def _parse_entry(element: ET.Element) -> FeedEntry | None:
    entry_id = (element.findtext(_atom("id")) or "").strip()
    if not entry_id:
        return None

    link = None
    icon_link = None
    for link_elem in element.findall(_atom("link")):
        rel = link_elem.get("rel", "alternate")
        if rel == "alternate" and link is None:
            link = link_elem.get("href")
        elif rel == "icon" and icon_link is None:
            icon_link = link_elem.get("href")

    vsix = None
    vsix_elem = element.find(_gallery("Vsix"))
    if vsix_elem is not None:
        vsix = VsixReference(
            id=vsix_elem.findtext(_gallery("Id"), default=entry_id),
            version=vsix_elem.findtext(_gallery("Version"), default=""),
        )

    author = element.find(_atom("author"))

    return FeedEntry(
        id=entry_id,
        title=element.findtext(_atom("title"), default=""),
        summary=element.findtext(_atom("summary"), default=""),
        published=parse_timestamp(element.findtext(_atom("published"))),
        updated=parse_timestamp(element.findtext(_atom("updated"))),
        author_name=author.findtext(_atom("name"), default="") if author is not None else "",
        link=link,
        icon_link=icon_link,
        vsix=vsix,
    )


def parse_feed_document(content: bytes | str) -> FeedDocument:
    """
    Parse persisted gallery feed content.

    The title and id are reset to the gallery constants. Entries without an
    id are dropped and only the first entry for each id is kept.

    Args:
        content: Atom XML content.

    Returns:
        Parsed feed document.

    Raises:
        CorruptFeedError: If the content is not well-formed Atom.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise CorruptFeedError(f"Invalid feed XML: {e}")

    if root.tag != _atom("feed"):
        raise CorruptFeedError(f"Unexpected feed root element: {root.tag}")

    entries: list[FeedEntry] = []
    seen: set[str] = set()
    for element in root.findall(_atom("entry")):
        entry = _parse_entry(element)
        if entry is None or entry.id in seen:
            continue
        seen.add(entry.id)
        entries.append(entry)

    return FeedDocument(
        title=FEED_TITLE,
        id=FEED_ID,
        updated=parse_timestamp(root.findtext(_atom("updated"))),
        entries=tuple(entries),
    )

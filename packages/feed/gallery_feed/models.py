"""
Gallery feed models.

Immutable representations of the extension manifest, the source metadata
embedded in an archive, and the Atom feed document.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Feed header constants
FEED_ID = "ExtensionGallery"
FEED_TITLE = "Extension Gallery"

# Namespaces
ATOM_NS = "http://www.w3.org/2005/Atom"
GALLERY_NS = "http://schemas.microsoft.com/developer/vsx-syndication-schema/2010"
VSIX_NS = "http://schemas.microsoft.com/developer/vsx-schema/2011"


class ExtensionManifest(BaseModel):
    """Extension metadata read from extension.vsixmanifest."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(min_length=1)
    version: str = Field(min_length=1)
    display_name: str = ""
    description: str = ""
    publisher: str = ""
    icon_path: str | None = None


class SourceMetadata(BaseModel):
    """Build provenance read from source.json."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    commit: str = Field(min_length=1)
    repository: str | None = None


class IconExtraction(BaseModel):
    """Outcome of a best-effort icon lookup inside an archive."""

    model_config = ConfigDict(frozen=True)

    path: str | None = None
    data: bytes | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.data is not None


class ArchiveContents(BaseModel):
    """Everything the publisher needs from a single archive."""

    model_config = ConfigDict(frozen=True)

    manifest: ExtensionManifest
    icon: IconExtraction = Field(default_factory=IconExtraction)
    source: SourceMetadata | None = None
    source_error: str | None = None


class VsixReference(BaseModel):
    """Gallery extension block nested in each entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    version: str
    # Reserved; always written empty.
    references: tuple[str, ...] = ()


class FeedEntry(BaseModel):
    """One published extension."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    summary: str = ""
    published: datetime | None = None
    updated: datetime | None = None
    author_name: str = ""
    link: str | None = None
    icon_link: str | None = None
    vsix: VsixReference | None = None


class FeedDocument(BaseModel):
    """
    Gallery feed.

    Entries are ordered most recently published first and are unique by id.
    """

    model_config = ConfigDict(frozen=True)

    title: str = FEED_TITLE
    id: str = FEED_ID
    updated: datetime | None = None
    entries: tuple[FeedEntry, ...] = ()

    def find(self, entry_id: str) -> FeedEntry | None:
        """Return the entry with the given id, if any."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def without(self, entry_id: str) -> "FeedDocument":
        """Return a copy of the document with the given entry removed."""
        entries = tuple(entry for entry in self.entries if entry.id != entry_id)
        return self.model_copy(update={"entries": entries})

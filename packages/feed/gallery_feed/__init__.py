"""
Gallery feed package.

Provides VSIX archive reading, Atom gallery feed parsing, merging and
serialization.
"""

from .archive import (
    ArchiveError,
    InvalidManifestError,
    MissingManifestError,
    parse_manifest,
    parse_source_metadata,
    read_archive,
)
from .document import CorruptFeedError, new_feed_document, parse_feed_document
from .merge import entry_link_base, merge_entry
from .models import (
    ArchiveContents,
    ExtensionManifest,
    FeedDocument,
    FeedEntry,
    IconExtraction,
    SourceMetadata,
    VsixReference,
)
from .serializer import serialize_feed

__all__ = [
    "read_archive",
    "parse_manifest",
    "parse_source_metadata",
    "ArchiveError",
    "MissingManifestError",
    "InvalidManifestError",
    "parse_feed_document",
    "new_feed_document",
    "CorruptFeedError",
    "merge_entry",
    "entry_link_base",
    "serialize_feed",
    "ArchiveContents",
    "ExtensionManifest",
    "FeedDocument",
    "FeedEntry",
    "IconExtraction",
    "SourceMetadata",
    "VsixReference",
]

"""
VSIX archive reader.

Reads the extension manifest, the optional source metadata and the declared
icon out of a .vsix (zip) archive held in memory.
"""

import io
import json
import re
import zipfile
import zlib
from typing import BinaryIO
from xml.etree import ElementTree as ET

from pydantic import ValidationError

from .models import VSIX_NS, ArchiveContents, ExtensionManifest, IconExtraction, SourceMetadata

MANIFEST_PATH = "extension.vsixmanifest"
SOURCE_PATH = "source.json"

# Raised by ZipFile.read for corrupt, truncated or encrypted entries
_ENTRY_READ_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, OSError, RuntimeError)

# Matches either a JSON string literal or a comma that only precedes a closing bracket.
_TRAILING_COMMA = re.compile(r'("(?:\\.|[^"\\])*")|,(\s*[}\]])')


class ArchiveError(ValueError):
    """Archive cannot be used to update the feed."""


class MissingManifestError(ArchiveError):
    """Archive has no extension.vsixmanifest entry."""


class InvalidManifestError(ArchiveError):
    """Manifest exists but lacks the required identity or version."""


def _vsix(tag: str) -> str:
    return f"{{{VSIX_NS}}}{tag}"


def parse_manifest(content: bytes) -> ExtensionManifest:
    """
    Parse extension.vsixmanifest content.

    Args:
        content: Raw manifest XML.

    Returns:
        Parsed manifest.

    Raises:
        InvalidManifestError: If the XML is malformed or the identity is incomplete.
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise InvalidManifestError(f"Invalid manifest XML: {e}")

    metadata = root.find(_vsix("Metadata"))
    if metadata is None:
        raise InvalidManifestError("Manifest has no Metadata element")

    identity = metadata.find(_vsix("Identity"))
    if identity is None:
        raise InvalidManifestError("Manifest has no Identity element")

    extension_id = identity.get("Id")
    version = identity.get("Version")
    if not extension_id or not version:
        raise InvalidManifestError("Manifest Identity is missing Id or Version")

    icon = metadata.find(_vsix("Icon"))

    return ExtensionManifest(
        identity=extension_id,
        version=version,
        display_name=metadata.findtext(_vsix("DisplayName"), default=""),
        description=metadata.findtext(_vsix("Description"), default=""),
        publisher=identity.get("Publisher", ""),
        icon_path=icon.text if icon is not None and icon.text else None,
    )


def parse_source_metadata(content: bytes | str) -> SourceMetadata:
    """
    Parse source.json content.

    Trailing commas in objects and arrays are tolerated.

    Raises:
        ValueError: If the content is not valid JSON or lacks a commit.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")

    cleaned = _TRAILING_COMMA.sub(lambda m: m.group(1) or m.group(2), content)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid source metadata JSON: {e}")

    try:
        return SourceMetadata.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid source metadata: {e}")


def normalize_entry_path(path: str) -> str:
    """Convert a manifest-relative path to the archive's forward slash form."""
    normalized = path.strip().replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.lstrip("/")


def extract_icon(archive: zipfile.ZipFile, path: str | None) -> IconExtraction:
    """
    Extract the icon declared by the manifest.

    Never raises; failures are reported on the returned result.
    """
    if not path:
        return IconExtraction()

    entry_path = normalize_entry_path(path)
    try:
        data = archive.read(entry_path)
    except KeyError:
        return IconExtraction(path=path, error=f"Icon {entry_path} not found in archive")
    except _ENTRY_READ_ERRORS as e:
        return IconExtraction(path=path, error=f"Failed to extract icon {entry_path}: {e}")

    return IconExtraction(path=path, data=data)


def _read_source(archive: zipfile.ZipFile) -> tuple[SourceMetadata | None, str | None]:
    try:
        content = archive.read(SOURCE_PATH)
    except KeyError:
        return None, f"Could not find {SOURCE_PATH} in archive"
    except _ENTRY_READ_ERRORS as e:
        return None, f"Failed to read {SOURCE_PATH}: {e}"

    try:
        return parse_source_metadata(content), None
    except (ValueError, UnicodeDecodeError) as e:
        return None, str(e)


def read_archive(archive: bytes | BinaryIO) -> ArchiveContents:
    """
    Read a .vsix archive.

    Args:
        archive: Archive bytes or a seekable binary stream.

    Returns:
        Manifest, icon extraction result and optional source metadata.

    Raises:
        ArchiveError: If the archive is not a zip file.
        MissingManifestError: If extension.vsixmanifest is absent.
        InvalidManifestError: If the manifest is unreadable or lacks Id or Version.
    """
    stream = io.BytesIO(archive) if isinstance(archive, (bytes, bytearray)) else archive

    try:
        zf = zipfile.ZipFile(stream)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Archive is not a valid zip file: {e}")

    with zf:
        try:
            manifest_content = zf.read(MANIFEST_PATH)
        except KeyError:
            raise MissingManifestError(f"Could not find {MANIFEST_PATH} in archive")
        except _ENTRY_READ_ERRORS as e:
            raise InvalidManifestError(f"Failed to read {MANIFEST_PATH}: {e}")

        manifest = parse_manifest(manifest_content)
        icon = extract_icon(zf, manifest.icon_path)
        source, source_error = _read_source(zf)

    return ArchiveContents(manifest=manifest, icon=icon, source=source, source_error=source_error)

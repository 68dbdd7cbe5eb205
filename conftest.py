"""Global pytest fixtures for testing."""

import io
import struct
import zipfile
from collections.abc import Callable
from typing import Any

import pytest

from gallery_core.config import GallerySettings

VSIX_NS = "http://schemas.microsoft.com/developer/vsx-schema/2011"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def manifest_xml(
    extension_id: str | None = "Acme.Tools",
    version: str | None = "1.0.0",
    publisher: str | None = "Acme",
    display_name: str | None = "Acme Tools",
    description: str | None = "Tools for Acme developers",
    icon: str | None = None,
) -> str:
    """Build extension.vsixmanifest content; None omits the attribute or element."""
    attrs = [f'{key}="{value}"' for key, value in (
        ("Id", extension_id),
        ("Version", version),
        ("Language", "en-US"),
        ("Publisher", publisher),
    ) if value is not None]
    children = [f"<Identity {' '.join(attrs)} />"]
    if display_name is not None:
        children.append(f"<DisplayName>{display_name}</DisplayName>")
    if description is not None:
        children.append(f"<Description xml:space=\"preserve\">{description}</Description>")
    if icon is not None:
        children.append(f"<Icon>{icon}</Icon>")

    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        f'<PackageManifest Version="2.0.0" xmlns="{VSIX_NS}">'
        f"<Metadata>{''.join(children)}</Metadata>"
        "<Installation><InstallationTarget Id=\"Microsoft.VisualStudio.Community\" /></Installation>"
        "</PackageManifest>"
    )


def build_vsix(files: dict[str, str | bytes]) -> bytes:
    """Build an in-memory zip archive from a path -> content mapping."""
    output = io.BytesIO()
    with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as zf:
        for path, content in files.items():
            zf.writestr(path, content)
    return output.getvalue()


def corrupt_entry(archive: bytes, name: str) -> bytes:
    """Overwrite the compressed data of one archive entry with 0xFF bytes."""
    with zipfile.ZipFile(io.BytesIO(archive)) as zf:
        info = zf.getinfo(name)

    data = bytearray(archive)
    offset = info.header_offset
    name_length, extra_length = struct.unpack("<HH", data[offset + 26 : offset + 30])
    start = offset + 30 + name_length + extra_length
    data[start : start + info.compress_size] = b"\xff" * info.compress_size
    return bytes(data)


class MemoryFeedStore:
    """In-memory feed store recording every write."""

    def __init__(self, feed: bytes | None = None):
        self.feed = feed
        self.icons: dict[str, bytes] = {}
        self.feed_writes = 0

    def read_feed(self) -> bytes | None:
        return self.feed

    def write_feed(self, content: bytes) -> None:
        self.feed = content
        self.feed_writes += 1

    def write_icon(self, name: str, content: bytes) -> None:
        self.icons[name] = content


@pytest.fixture
def vsix_factory() -> Callable[..., bytes]:
    """Build a .vsix archive from manifest keyword arguments."""

    def _factory(
        extra_files: dict[str, str | bytes] | None = None,
        **manifest_kwargs: Any,
    ) -> bytes:
        files: dict[str, str | bytes] = {"extension.vsixmanifest": manifest_xml(**manifest_kwargs)}
        files.update(extra_files or {})
        return build_vsix(files)

    return _factory


@pytest.fixture
def memory_store() -> MemoryFeedStore:
    return MemoryFeedStore()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> GallerySettings:
    """Settings isolated from the caller's environment, notifications disabled."""
    for name in ("GH_TOKEN", "GITHUB_REPOSITORY", "GALLERY_GITHUB_TOKEN", "GALLERY_GITHUB_REPOSITORY"):
        monkeypatch.delenv(name, raising=False)
    return GallerySettings(_env_file=None)

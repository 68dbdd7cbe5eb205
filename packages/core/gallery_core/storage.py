"""
Feed storage.

Defines the storage contract the publisher writes through, plus a
filesystem implementation.
"""

import os
import tempfile
from pathlib import Path
from typing import Protocol


class FeedStore(Protocol):
    """
    Storage for one gallery feed and its icons.

    The publisher reads the whole feed, then writes the whole feed back.
    Stores shared by concurrent publishers must serialize writers, otherwise
    the last write wins.
    """

    def read_feed(self) -> bytes | None: ...

    def write_feed(self, content: bytes) -> None: ...

    def write_icon(self, name: str, content: bytes) -> None: ...


class FileSystemFeedStore:
    """Feed store backed by a local directory."""

    def __init__(self, root: str | Path, feed_name: str = "atom.xml"):
        self.root = Path(root)
        self.feed_name = feed_name

    @property
    def feed_path(self) -> Path:
        return self.root / self.feed_name

    def icon_path(self, name: str) -> Path:
        return self.root / f"{name}.png"

    def read_feed(self) -> bytes | None:
        try:
            return self.feed_path.read_bytes()
        except FileNotFoundError:
            return None

    def write_feed(self, content: bytes) -> None:
        self._write_atomic(self.feed_path, content)

    def write_icon(self, name: str, content: bytes) -> None:
        self._write_atomic(self.icon_path(name), content)

    def _write_atomic(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(content)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

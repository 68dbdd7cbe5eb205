"""
Gallery command line.

Publishes a .vsix archive into a feed directory, the way the upload trigger
does for hosted feeds.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from .config import GallerySettings
from .logging_config import get_logger, init_logging
from .services import PublishService, PublishStatus
from .storage import FileSystemFeedStore

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vsgallery",
        description="Maintain a Visual Studio extension gallery Atom feed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Publish into ./feed, served from https://cdn.example.com/stable
  vsgallery publish MyExtension.vsix --feed-dir ./feed --base-url https://cdn.example.com/stable

Environment:
  GH_TOKEN           Token used to report a commit status (optional)
  GITHUB_REPOSITORY  owner/repo fallback when source.json omits it
""",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    publish = subparsers.add_parser("publish", help="Publish an archive into the feed")
    publish.add_argument("archive", type=Path, help="Path to the .vsix archive")
    publish.add_argument("--feed-dir", type=Path, required=True, help="Directory holding atom.xml")
    publish.add_argument("--base-url", required=True, help="Public URL of the feed directory")
    publish.add_argument("--name", help="Archive name used for links (default: file stem)")
    publish.add_argument("--log-level", help="Log level (default: GALLERY_LOG_LEVEL or INFO)")

    return parser


async def run_publish(args: argparse.Namespace, settings: GallerySettings) -> int:
    store = FileSystemFeedStore(args.feed_dir, feed_name=settings.feed_file_name)
    service = PublishService(store, settings)

    with args.archive.open("rb") as archive:
        result = await service.publish(args.name or args.archive.stem, archive, args.base_url)

    if result.status == PublishStatus.SKIPPED:
        logger.error("Archive was not published: %s", result.reason)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = GallerySettings()
    init_logging(args.log_level or settings.log_level)

    if args.command == "publish":
        return asyncio.run(run_publish(args, settings))
    return 2


if __name__ == "__main__":
    sys.exit(main())

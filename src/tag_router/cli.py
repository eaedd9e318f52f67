"""
Command-line interface for the tag router.

Usage:
    tag-router <source> <dest_root> [move|copy] [--verbose]

A MODE of "copy" (any case) copies the file; anything else moves it.
Files are placed using the fixed tag table in TAG_TABLE, with untagged
files going to DEFAULT_FOLDER.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .router import DEFAULT_FOLDER, TagRouter
from .types import TagMap, TransferMode

logger = logging.getLogger(__name__)

TAG_TABLE = TagMap({
    "Setup": "Setup",
    "Log": "Logs",
    "Config": "Configs",
})


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for console use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def parse_mode(value: Optional[str]) -> TransferMode:
    """Return COPY for "copy" (case-insensitive), MOVE for anything else."""
    if value is not None and value.strip().lower() == "copy":
        return TransferMode.COPY
    return TransferMode.MOVE


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="tag-router",
        description="Move or copy a file into a folder chosen by its [Tag]",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tag-router "[Log]server.txt" D:\\Sorted          # -> D:\\Sorted\\Logs\\server.txt
  tag-router "[Setup]app.exe" ./sorted copy       # copy, keep the source
  tag-router notes.txt ./sorted                   # -> ./sorted/Unsorted/notes.txt

Tag table:
  Setup -> Setup, Log -> Logs, Config -> Configs (tags are case-insensitive;
  other tags are used as the folder name)
""",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "source",
        help="File to route",
    )
    parser.add_argument(
        "dest_root",
        help="Destination root directory (created if missing)",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default="move",
        help='"copy" to copy the file; anything else moves it (default: move)',
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show detailed logging",
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    router = TagRouter(
        args.dest_root,
        tag_map=TAG_TABLE,
        default_folder=DEFAULT_FOLDER,
        mode=parse_mode(args.mode),
    )

    try:
        result = router.route(args.source)
    except Exception as e:
        logger.exception("Unexpected error while routing")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    verb = "copied" if router.mode is TransferMode.COPY else "moved"
    print(f"File {verb}: {result.dest_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

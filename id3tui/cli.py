import argparse
import curses
import locale
import logging
import os
import stat
import sys
from typing import List, Optional

from . import __version__
from .config import Settings, load_settings
from .errors import Id3TuiError, UsageError
from .log import setup_logging
from .metadata import MetadataStore
from . import tui

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="id3tui",
        description="Terminal editor for the title, artist, album and cover art of MP3 files.",
    )
    parser.add_argument("file", nargs="?", help="edit this MP3 file directly instead of browsing")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def validate_target(path: str) -> str:
    """Absolute path of a file given on the command line; raises UsageError otherwise."""
    try:
        abs_path = os.path.abspath(path)
    except (OSError, ValueError) as e:
        raise UsageError(f"invalid file path: {e}") from e
    try:
        info = os.stat(abs_path)
    except (OSError, ValueError) as e:
        raise UsageError(f"cannot access file: {e}") from e
    if stat.S_ISDIR(info.st_mode):
        raise UsageError("path is a directory, not a file")
    return abs_path


def run(file_path: Optional[str], settings: Settings):
    store = MetadataStore(mode=settings.cover_mode)
    if file_path:
        current_file = validate_target(file_path)
        start_dir = os.path.dirname(current_file)
        log.info("editing %s", current_file)
    else:
        current_file = None
        start_dir = os.getcwd()
        log.info("browsing %s", start_dir)
    os.environ.setdefault("ESCDELAY", "25")
    curses.wrapper(tui.main, store, start_dir, current_file)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        pass
    settings = load_settings()
    setup_logging(settings)
    try:
        run(args.file, settings)
    except Id3TuiError as e:
        log.error("%s", e)
        print(e, file=sys.stderr)
        return 1
    return 0

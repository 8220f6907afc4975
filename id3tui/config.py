import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .commands import is_available
from .metadata import MODE_EMBED, MODE_FFMPEG, MODES

log = logging.getLogger(__name__)

ENV_COVER_MODE = "ID3TUI_COVER_MODE"
ENV_LOG_FILE = "ID3TUI_LOG_FILE"
ENV_LOG_LEVEL = "ID3TUI_LOG_LEVEL"


def default_log_file(environ: Mapping[str, str]) -> str:
    state_home = environ.get("XDG_STATE_HOME") or os.path.join(os.path.expanduser("~"), ".local", "state")
    return os.path.join(state_home, "id3tui", "id3tui.log")


@dataclass(frozen=True)
class Settings:
    cover_mode: str = MODE_EMBED
    log_file: str = ""
    log_level: str = "INFO"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    if environ is None:
        environ = os.environ

    cover_mode = environ.get(ENV_COVER_MODE, MODE_EMBED).strip().lower() or MODE_EMBED
    if cover_mode not in MODES:
        log.warning("unknown %s %r, using %s", ENV_COVER_MODE, cover_mode, MODE_EMBED)
        cover_mode = MODE_EMBED
    elif cover_mode == MODE_FFMPEG and not (is_available("ffmpeg") and is_available("ffprobe")):
        log.warning("ffmpeg/ffprobe not found on PATH, using %s", MODE_EMBED)
        cover_mode = MODE_EMBED

    level = environ.get(ENV_LOG_LEVEL, "INFO").strip().upper() or "INFO"
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    return Settings(
        cover_mode=cover_mode,
        log_file=environ.get(ENV_LOG_FILE) or default_log_file(environ),
        log_level=level,
    )

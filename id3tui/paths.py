import enum
import logging
import os
from typing import Iterable, List, Optional, Sequence

log = logging.getLogger(__name__)

PARENT_ENTRY = ".."
MP3_EXTS = (".mp3",)


class EntryKind(enum.Enum):
    PARENT = "parent"
    DIRECTORY = "directory"
    AUDIO_FILE = "audio_file"


def is_mp3_file(name: str) -> bool:
    return name.lower().endswith(".mp3")


def classify(entry: str) -> EntryKind:
    if entry == PARENT_ENTRY:
        return EntryKind.PARENT
    if entry.endswith(os.sep) or entry.endswith("/"):
        return EntryKind.DIRECTORY
    # Only audio files are ever listed besides directories
    return EntryKind.AUDIO_FILE


def resolve(current_dir: str, entry: str) -> str:
    if classify(entry) is EntryKind.PARENT:
        # dirname("/") is "/", so the root is its own parent
        return os.path.dirname(os.path.normpath(current_dir))
    return os.path.normpath(os.path.join(current_dir, entry))


def selected_path(entries: Sequence[str], selected: Optional[int], current_dir: str) -> Optional[str]:
    """Absolute path of the selected list entry, or None when it is not an editable file."""
    if not entries or selected is None:
        return None
    if selected < 0 or selected >= len(entries):
        return None
    entry = entries[selected]
    if not entry or classify(entry) is not EntryKind.AUDIO_FILE:
        return None
    return resolve(current_dir, entry)


def list_directory(directory: str, exts: Iterable[str] = MP3_EXTS) -> List[str]:
    exts = tuple(e.lower() for e in exts)
    directory = os.path.abspath(directory)
    items: List[str] = []
    try:
        for name in os.listdir(directory):
            path = os.path.join(directory, name)
            if os.path.isdir(path):
                items.append(name + "/")
            elif os.path.splitext(name)[1].lower() in exts:
                items.append(name)
    except OSError as e:
        log.warning("cannot list %s: %s", directory, e)
        items = []
    items.sort(key=lambda n: (not n.endswith("/"), n.lower()))
    if os.path.dirname(directory) != directory:
        items.insert(0, PARENT_ENTRY)
    return items

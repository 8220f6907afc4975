import json
import logging
import os
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import mutagen
from mutagen.id3 import APIC, ID3, ID3NoHeaderError, TALB, TIT2, TPE1, Encoding

from .commands import CommandRunner
from .errors import CommandError, SaveError

log = logging.getLogger(__name__)

MODE_EMBED = "embed"
MODE_FFMPEG = "ffmpeg"
MODES = (MODE_EMBED, MODE_FFMPEG)

# (attribute, label, ID3 frame class)
TEXT_FIELDS: List[Tuple[str, str, type]] = [
    ("track_name", "Track Name", TIT2),
    ("artist", "Artist", TPE1),
    ("album", "Album", TALB),
]

EMPTY_PLACEHOLDER = "(empty)"

COVER_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}


@dataclass
class Metadata:
    track_name: str = ""
    artist: str = ""
    album: str = ""
    cover_path: str = ""


def cover_mime_type(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    return COVER_MIME_TYPES.get(ext, "image/jpeg")


def diff(before: Metadata, after: Metadata) -> str:
    """Describe which text fields changed, one line per field."""
    lines = []
    for attr, label, _ in TEXT_FIELDS:
        old = getattr(before, attr)
        new = getattr(after, attr)
        if old != new:
            lines.append(f"{label}: {old or EMPTY_PLACEHOLDER} → {new or EMPTY_PLACEHOLDER}")
    return "\n".join(lines)


def _frame_text(tags: ID3, frame_id: str) -> str:
    frame = tags.get(frame_id)
    if frame is None:
        return ""
    return str(frame)


def _merge(before: Metadata, new: Metadata) -> Metadata:
    # Empty input leaves the existing value alone
    merged = replace(new)
    for attr, _, _ in TEXT_FIELDS:
        if not getattr(new, attr):
            setattr(merged, attr, getattr(before, attr))
    return merged


class MetadataStore:
    """Reads and writes the title/artist/album tags and cover art of MP3 files.

    ``mode`` picks how a cover image gets into the file: ``embed`` writes an
    APIC frame with mutagen, ``ffmpeg`` remuxes the file with the image as an
    attached picture and swaps the result in over the original.
    """

    def __init__(self, mode: str = MODE_EMBED, runner: Optional[CommandRunner] = None):
        if mode not in MODES:
            raise ValueError(f"unknown cover mode: {mode}")
        self.mode = mode
        self.runner = runner or CommandRunner()

    # -------- Reading --------
    def read(self, file_path: str) -> Metadata:
        if self.mode == MODE_FFMPEG:
            return self._read_ffprobe(file_path)
        return self._read_id3(file_path)

    def _read_id3(self, file_path: str) -> Metadata:
        try:
            tags = ID3(file_path)
        except (mutagen.MutagenError, OSError) as e:
            # A file without a tag is normal, not an error
            log.debug("no readable tag in %s: %s", file_path, e)
            return Metadata()
        return Metadata(
            track_name=_frame_text(tags, "TIT2"),
            artist=_frame_text(tags, "TPE1"),
            album=_frame_text(tags, "TALB"),
        )

    def _read_ffprobe(self, file_path: str) -> Metadata:
        try:
            output = self.runner.run(
                "ffprobe", "-v", "quiet", "-print_format", "json", "-show_format", file_path
            )
            probe = json.loads(output)
        except (CommandError, ValueError) as e:
            log.debug("ffprobe gave nothing for %s: %s", file_path, e)
            return Metadata()
        fmt = probe.get("format") if isinstance(probe, dict) else None
        raw_tags = fmt.get("tags") if isinstance(fmt, dict) else None
        if not isinstance(raw_tags, dict):
            return Metadata()
        tags = {str(k).lower(): str(v) for k, v in raw_tags.items()}
        return Metadata(
            track_name=tags.get("title", ""),
            artist=tags.get("artist", ""),
            album=tags.get("album", ""),
        )

    # -------- Writing --------
    def save(self, file_path: str, new: Metadata, before: Optional[Metadata] = None) -> str:
        """Write ``new`` into ``file_path`` and return the diff against ``before``.

        Empty text fields leave the existing tag value untouched. ``before``
        defaults to what is on disk right now. The diff is computed against a
        fresh read of the file so it reports what was actually written.
        """
        before, after = self.write(file_path, new, before)
        return diff(before, after)

    def write(self, file_path: str, new: Metadata,
              before: Optional[Metadata] = None) -> Tuple[Metadata, Metadata]:
        """Write ``new`` into ``file_path``; returns the (before, after) tag states.

        ``before`` must describe ``file_path`` itself, since the ffmpeg path
        fills empty inputs from it. Pass None to read it from disk.
        """
        if before is None:
            before = self.read(file_path)

        if new.cover_path and self.mode == MODE_FFMPEG:
            self._save_with_ffmpeg(file_path, _merge(before, new))
        else:
            self._save_id3(file_path, new)

        after = self.read(file_path)
        log.info("saved tags to %s", file_path)
        return before, after

    def _save_id3(self, file_path: str, new: Metadata):
        try:
            tags = ID3(file_path)
        except ID3NoHeaderError:
            tags = ID3()
        except (mutagen.MutagenError, OSError) as e:
            raise SaveError(f"failed to open file: {e}") from e

        for attr, _, frame_cls in TEXT_FIELDS:
            value = getattr(new, attr)
            if value:
                tags.add(frame_cls(encoding=Encoding.UTF8, text=value))

        if new.cover_path:
            try:
                with open(new.cover_path, "rb") as f:
                    data = f.read()
            except OSError as e:
                raise SaveError(f"failed to read cover image: {e}") from e
            tags.delall("APIC")
            tags.add(APIC(
                encoding=Encoding.UTF8,
                mime=cover_mime_type(new.cover_path),
                type=3,  # front cover
                desc="Cover",
                data=data,
            ))

        try:
            tags.save(file_path)
        except (mutagen.MutagenError, OSError) as e:
            raise SaveError(f"failed to save metadata: {e}") from e

    def _save_with_ffmpeg(self, file_path: str, meta: Metadata):
        tmp_path = file_path + ".tmp.mp3"
        try:
            self.runner.run(
                "ffmpeg", "-i", file_path, "-i", meta.cover_path,
                "-map", "0:0", "-map", "1:0", "-c:v", "copy", "-id3v2_version", "3",
                "-metadata:s:v", "title=Album cover", "-metadata:s:v", "comment=Cover (front)",
                "-metadata", "title=" + meta.track_name,
                "-metadata", "artist=" + meta.artist,
                "-metadata", "album=" + meta.album,
                "-c:a", "copy", "-y", tmp_path,
            )
        except CommandError as e:
            _remove_quietly(tmp_path)
            raise SaveError(f"failed to set cover: {e}") from e
        try:
            os.replace(tmp_path, file_path)
        except OSError as e:
            _remove_quietly(tmp_path)
            raise SaveError(f"failed to replace original file: {e}") from e


def _remove_quietly(path: str):
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        log.warning("could not remove temp file %s: %s", path, e)

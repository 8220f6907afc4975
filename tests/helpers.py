import os

from mutagen.id3 import ID3, TALB, TIT2, TPE1, Encoding

# A few bytes of "audio"; ID3 tags do not care what follows the header
DUMMY_AUDIO = b"\xff\xfb\x90\x64" + b"\x00" * 413


def make_mp3(path: str, title: str = "", artist: str = "", album: str = "") -> str:
    with open(path, "wb") as f:
        f.write(DUMMY_AUDIO * 4)
    if title or artist or album:
        tags = ID3()
        if title:
            tags.add(TIT2(encoding=Encoding.UTF8, text=title))
        if artist:
            tags.add(TPE1(encoding=Encoding.UTF8, text=artist))
        if album:
            tags.add(TALB(encoding=Encoding.UTF8, text=album))
        tags.save(path)
    return path


def make_image(path: str, data: bytes = b"\x89PNG\r\n\x1a\nfake") -> str:
    with open(path, "wb") as f:
        f.write(data)
    return path


def touch_dir(path: str) -> str:
    os.makedirs(path, exist_ok=True)
    return path

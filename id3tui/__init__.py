"""Terminal editor for MP3 title/artist/album tags and cover art."""

__version__ = "0.1.0"

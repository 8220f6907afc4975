import logging
import logging.handlers
import os

from .config import Settings

LOGGER_NAME = "id3tui"


def setup_logging(settings: Settings) -> logging.Logger:
    """File-only logging; curses owns the terminal while the editor runs."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = False

    try:
        os.makedirs(os.path.dirname(settings.log_file) or ".", exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            settings.log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
    except OSError:
        logger.addHandler(logging.NullHandler())
        return logger

    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logger.addHandler(handler)
    return logger

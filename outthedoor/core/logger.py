import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from outthedoor.core.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(exist_ok=True)

LOG_FILE = LOG_DIR / "outthedoor.log"
LOG_FORMAT = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"
LOG_LEVEL = getattr(logging, settings.LOG_LEVEL)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # Loggers are cached by name; attach handlers once
    if not logger.handlers:
        file_handler = RotatingFileHandler(
            LOG_FILE, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(LOG_LEVEL)

        try:
            console_stream = open(sys.stdout.fileno(), mode="w", encoding="utf-8", closefd=False)
        except Exception:
            # stdout may be swapped out (pytest capture, some servers)
            console_stream = sys.stdout

        console_handler = logging.StreamHandler(console_stream)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_handler.setLevel(LOG_LEVEL)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        logger.setLevel(LOG_LEVEL)
        logger.propagate = False

    return logger

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sentifi.core.config import settings

LOG_DIR = Path(settings.LOG_DIR) if settings.LOG_DIR else Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True, parents=True)
LOG_FILE = LOG_DIR / "app.log"

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _level() -> int:
    return getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Module logger writing to stderr and the rotating app.log"""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(_level())
    # uvicorn configures the root logger too; don't print twice
    logger.propagate = False

    sh = logging.StreamHandler()
    sh.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    fh = RotatingFileHandler(LOG_FILE, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    fh.setFormatter(logging.Formatter(FILE_FORMAT))

    logger.addHandler(sh)
    logger.addHandler(fh)
    return logger

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from meddy.database.config.config import settings

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every provider request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "openai")

logger = logging.getLogger("meddy")


def _rotating_handler(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=settings.LOG_MAX_BYTES, backupCount=settings.LOG_BACKUP_COUNT)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def configure_logging() -> logging.Logger:
    """
    Attach the console handler and, with ``LOG_TO_FILE``, the rotating
    ``app.log`` / ``errors.log`` handlers to the ``meddy`` logger.

    Safe to call again: existing handlers are replaced, not duplicated.
    """
    level = logging.DEBUG if settings.APP_DEBUG else logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    if settings.LOG_TO_FILE:
        logs_dir = Path(settings.LOG_DIR)
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_rotating_handler(logs_dir / "app.log", logging.INFO))
        logger.addHandler(_rotating_handler(logs_dir / "errors.log", logging.ERROR))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance. If name is provided, returns a child logger."""
    if name:
        return logger.getChild(name)
    return logger


configure_logging()

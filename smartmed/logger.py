import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from . import settings

FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _resolve_level(level: Union[int, str]) -> int:
    """Accepts a logging constant or its name ('debug', 'INFO', ...)."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level '{level}'.")
    return resolved


def setup_logger(
    name: str = None,
    log_level: Union[int, str, None] = None,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Configures the logger used by the SmartMed scripts.

    Upload progress goes to stdout as plain messages; the rotating file under
    LOG_DIR keeps timestamps and module names for later review. Level and
    directory default to LOG_LEVEL and LOG_DIR from the environment.
    Calling it again for the same logger is a no-op.
    """
    logger = logging.getLogger(name)

    # Only this logger's own handlers count; pytest and embedding apps add their own to root.
    if logger.handlers:
        return logger

    level = _resolve_level(log_level if log_level is not None else settings.LOG_LEVEL)
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    log_dir = Path(log_dir) if log_dir is not None else settings.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_dir / settings.LOG_FILENAME,
        maxBytes=5 * 1024 * 1024,  # 5 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(file_handler)

    for quiet in settings.QUIET_LOGGERS:
        logging.getLogger(quiet).setLevel(max(level, logging.WARNING))

    return logger

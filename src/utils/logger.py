"""Logging setup for the score scripts (console plus one log file per run)."""

from pathlib import Path
from typing import Optional, Union
import logging
from datetime import datetime

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logger(
    name: str,
    log_dir: Optional[Path] = None,
    level: Union[int, str] = logging.INFO,
    log_to_file: bool = True,
) -> logging.Logger:
    """Configure ``name`` with a console handler and, if ``log_dir`` is given, a run log file.

    Modules log through ``logging.getLogger(__name__)``, so configuring the
    package logger ``"src"`` covers data loader, calculator and helpers at once.
    Calling it again replaces the handlers of the previous run.

    Args:
        name: Logger name.
        log_dir: Directory for ``<name>_<timestamp>.log``; None logs to console only.
        level: Level as int or name (``"DEBUG"``, ``"info"``, ...).
        log_to_file: Set to False to skip the log file even if log_dir is given.

    Returns:
        logging.Logger: The configured logger.
    """
    level = _parse_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    handlers = [logging.StreamHandler()]
    if log_to_file and log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{name}_{datetime.now():%Y%m%d_%H%M%S}.log"
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

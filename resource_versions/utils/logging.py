import logging
import sys
from datetime import datetime
from logging import Logger
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d] [%H:%M:%S"
LOG_FILE_PATTERN = "log-%Y_%m_%d_%H-%M-%S.txt"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    backup_count: int = 14,
) -> Optional[Path]:
    """Log to stdout and, when ``log_dir`` is given, to a dated file rotated at midnight.

    Returns the path of the log file, if one was opened.
    """
    if isinstance(level, str):
        # getLevelName maps unknown names to a "Level X" string
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / datetime.now().strftime(LOG_FILE_PATTERN)
        handlers.append(
            TimedRotatingFileHandler(
                log_file, when="midnight", backupCount=backup_count, encoding="utf-8"
            )
        )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # botocore is very chatty at DEBUG and echoes request signing details
    logging.getLogger("botocore").setLevel(max(level, logging.INFO))
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))

    return log_file


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)

"""
Logging configuration for the House Paint Preview application.
"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from paint_preview.core.config import settings


class CustomFormatter(logging.Formatter):
    """
    Custom formatter with colored output for console logging.
    """
    # ANSI color codes
    GREY = "\x1b[38;20m"
    GREEN = "\x1b[32;20m"
    YELLOW = "\x1b[33;20m"
    RED = "\x1b[31;20m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    BASE_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

    FORMATS = {
        logging.DEBUG: f"{GREY}{BASE_FORMAT}{RESET}",
        logging.INFO: f"{GREEN}{BASE_FORMAT}{RESET}",
        logging.WARNING: f"{YELLOW}{BASE_FORMAT}{RESET}",
        logging.ERROR: f"{RED}{BASE_FORMAT}{RESET}",
        logging.CRITICAL: f"{BOLD_RED}{BASE_FORMAT}{RESET}",
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno, self.BASE_FORMAT)
        formatter = logging.Formatter(log_fmt, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


def setup_logging() -> logging.Logger:
    """
    Set up logging for the application.

    Console output is colored per level; a rotating file in ``settings.LOG_DIR``
    receives the detailed format, one file per run.
    """
    logs_dir = Path(settings.LOG_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)

    current_time = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"paint_preview_{current_time}.log"

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if root_logger.handlers:
        root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(CustomFormatter())
    console_handler.setLevel(level)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10485760,  # 10MB
        backupCount=5,
        encoding="utf-8"
    )
    file_format = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_format)
    file_handler.setLevel(logging.DEBUG)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # Quiet the HTTP client libraries unless we are debugging
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    logger = logging.getLogger("paint_preview")
    logger.info(f"Starting {settings.PROJECT_NAME}")
    logger.info(f"Log file: {log_file}")

    return logger

# Create the application logger
logger = setup_logging()

"""
Logging setup for the analysis service.

Operational events go to backend.log, errors and uncaught exceptions
additionally go to exceptions.log. Both files are appended to and rotated.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'

NOISY_LOGGERS = ('asyncio', 'urllib3', 'httpx', 'httpcore', 'google_genai', 'multipart')


def setup_logging(log_dir, log_level="INFO"):
    """
    Set up console and file logging for the service

    Args:
        log_dir: Directory holding backend.log and exceptions.log
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Tuple of (main log file, exceptions log file)
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "backend.log"
    error_file = log_dir / "exceptions.log"
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        mode='a',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # Error file handler (only errors and critical)
    error_handler = logging.handlers.RotatingFileHandler(
        error_file,
        mode='a',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    sys.excepthook = _log_uncaught_exception

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("LOGGING CONFIGURED")
    logger.info(f"Log level: {logging.getLevelName(level)}")
    logger.info(f"Main log file: {log_file}")
    logger.info(f"Exceptions log file: {error_file}")
    logger.info("=" * 60)

    return log_file, error_file


def _log_uncaught_exception(exc_type, exc_value, exc_traceback):
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logging.getLogger("uncaught").critical(
        "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
    )

"""
Centralized logging configuration for the Knowledge Workspace backend.

Every record carries the id of the HTTP request it was emitted under
(``-`` outside a request), so one request can be followed across the
router, the services and the background queue.
"""
import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

from .config import LOG_LEVEL, LOG_TO_FILE, LOG_DIR

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - [%(request_id)s] %(name)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(filename)s:%(lineno)d - %(message)s'

# Library loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.WARNING,
    "anthropic": logging.WARNING,
    "multipart": logging.WARNING,
    "pypdf": logging.ERROR,
    "passlib": logging.ERROR,
}


class RequestIdFilter(logging.Filter):
    """Stamp records with the current request id."""
    
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def setup_logging(
    log_level: str = LOG_LEVEL,
    log_file: Optional[str] = None,
    enable_file_logging: bool = LOG_TO_FILE
) -> None:
    """
    Configure logging for the application.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file (defaults to <LOG_DIR>/app.log)
        enable_file_logging: Whether to also write a detailed log file
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    request_filter = RequestIdFilter()
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    console_handler.addFilter(request_filter)
    root_logger.addHandler(console_handler)
    
    if enable_file_logging:
        log_path = Path(log_file) if log_file else LOG_DIR / "app.log"
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        file_handler.addFilter(request_filter)
        root_logger.addHandler(file_handler)
    
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (pass ``__name__``)."""
    return logging.getLogger(name)

"""
Logging for the OmnIA engine and API.

Every module logs through one named logger ("omnia_chat"):
- one file per day under LOG_DIR (default logs/YYYY-MM-DD/chat.txt), DEBUG and up
- console at LOG_LEVEL
Pipeline stages log as "Step N: ..." lines; user text goes through
sanitize_log_string and catalog URLs through sanitize_url first.
"""

import os
import re
import logging
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "chat.txt"

# Query parameters that carry catalog / LLM credentials
_SECRET_PARAMS_RE = re.compile(r"(apikey|access_token|api_key)=[^&]*", re.IGNORECASE)


def sanitize_log_string(text: str) -> str:
    """Single-line version of user text: control characters become spaces."""
    if not text:
        return text
    return "".join(ch if ord(ch) >= 32 else " " for ch in text)


def sanitize_url(url: str) -> str:
    """Mask credential query parameters in a catalog URL."""
    if not url:
        return url
    return _SECRET_PARAMS_RE.sub(lambda m: f"{m.group(1)}=***", url)


class MillisecondFormatter(logging.Formatter):
    """`LOG_DATE_FORMAT` timestamps with a .mmm suffix."""

    def formatTime(self, record, datefmt=None):
        if not datefmt:
            return super().formatTime(record, datefmt)
        stamp = datetime.fromtimestamp(record.created).strftime(datefmt)
        return f"{stamp}.{int(record.msecs):03d}"


def _daily_log_file() -> Path:
    log_dir = Path(os.getenv("LOG_DIR", "logs")) / datetime.now().strftime("%Y-%m-%d")
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / LOG_FILE_NAME


def setup_logger(name: str = "omnia_chat", log_level: str = "INFO") -> logging.Logger:
    """Attach the daily file and console handlers once; later calls are no-ops."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = MillisecondFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    file_handler = logging.FileHandler(_daily_log_file(), encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str = "omnia_chat") -> logging.Logger:
    """The engine logger, configured from LOG_LEVEL on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        setup_logger(name, os.getenv("LOG_LEVEL", "INFO"))
    return logger

"""
Logging helpers.

`setup_logging` is called once at process startup; modules grab their
logger with `get_logger(__name__)`.
"""

import logging
import sys
from typing import Optional

from app.config import Config

_configured = False


def setup_logging(config: Optional[Config] = None) -> None:
    """Configure the root logger from config (level and format)."""
    global _configured
    if _configured:
        return

    level = config.LOG_LEVEL if config else "INFO"
    fmt = config.LOG_FORMAT if config else "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=fmt,
        stream=sys.stdout,
    )
    # pymongo is chatty at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

"""Logging setup shared by the API server and command-line entry points."""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LOGGING_CONFIG


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure root logging to stdout (and optionally a file).

    Args:
        level: Log level name, defaults to LOGGING_CONFIG["log_level"]
        log_file: Optional log file path, defaults to LOGGING_CONFIG["log_file"]
    """
    level_name = (level or LOGGING_CONFIG["log_level"]).upper()
    log_file = log_file or LOGGING_CONFIG["log_file"]

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, mode="a", encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOGGING_CONFIG["format"],
        handlers=handlers,
    )

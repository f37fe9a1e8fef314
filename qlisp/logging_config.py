"""Logging configuration for qlisp entry points."""
import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> None:
    """
    Configure logging for the REPL and the servers.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file. If None, logs go to stderr so they
            never mix with printed results.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    config = {
        "level": numeric_level,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    }
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        config["filename"] = str(log_file)
    else:
        config["stream"] = sys.stderr

    logging.basicConfig(**config)
    logging.getLogger(__name__).info("Logging initialized at %s level", level.upper())

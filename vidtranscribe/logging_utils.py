from __future__ import annotations

import logging
import os
from typing import Optional


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for a CLI run.

    Args:
        level: Optional log level name (e.g., "INFO", "DEBUG"). If omitted,
               reads LOG_LEVEL env or defaults to WARNING, keeping stderr
               quiet apart from problems.

    Replaces any handlers installed earlier; logs go to stderr.
    """
    log_level_name = (level or os.getenv("LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

"""Logging utilities."""

import logging
import sys
from typing import Optional, TextIO


def setup_logging(
    level: int = logging.INFO,
    format_str: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Setup logging for the accessibility agent.

    Args:
        level: Logging level (default: INFO)
        format_str: Custom format string
        stream: Output stream (default: stdout). JSON mode passes stderr
            so stdout only carries the result document.

    Returns:
        Configured logger
    """
    if format_str is None:
        format_str = "[%(asctime)s] %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(stream or sys.stdout)
        ],
        force=True,
    )

    logger = logging.getLogger("a11y_agent")
    logger.setLevel(level)

    return logger


def get_logger(name: str = "a11y_agent") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)

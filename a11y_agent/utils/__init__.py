"""Utility functions."""

from .logging import setup_logging, get_logger
from .formatter import (
    format_scan_result,
    format_issues,
    format_fix_result,
    format_rescan_result,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "format_scan_result",
    "format_issues",
    "format_fix_result",
    "format_rescan_result",
]

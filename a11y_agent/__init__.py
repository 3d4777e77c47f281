"""Accessibility scan -> fix -> rescan agent."""

__version__ = "0.1.0"

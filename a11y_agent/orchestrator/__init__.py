"""Scan -> fix -> rescan orchestration.

This module provides:
- A11yOrchestrator: Sequences capture, audit, analysis, fix and rescan
- create_orchestrator: Wires the default collaborators from a ScanConfig
"""

from .orchestrator import (
    NO_PATCHES_MESSAGE,
    A11yOrchestrator,
    AnalysisOutcome,
    ScanOutcome,
    build_collaborators,
    build_provider,
    create_orchestrator,
)

__all__ = [
    "NO_PATCHES_MESSAGE",
    "A11yOrchestrator",
    "AnalysisOutcome",
    "ScanOutcome",
    "build_collaborators",
    "build_provider",
    "create_orchestrator",
]

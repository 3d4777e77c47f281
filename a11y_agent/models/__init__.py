"""Data models for accessibility scanning and patching."""

from .issue import Severity, BoundingBox, Finding, Issue
from .patch import Patch, Rejected, RejectionReason
from .results import (
    AuditReport,
    ScanResult,
    PrResult,
    FixResult,
    Snapshot,
    RescanResult,
    PipelineResult,
)
from .repo import (
    DEFAULT_FILE_PATTERN,
    RepoConfig,
    ResolvedRepoConfig,
    ResolutionMode,
)
from .pipeline import PipelineStep, PipelineCallbacks

__all__ = [
    "Severity",
    "BoundingBox",
    "Finding",
    "Issue",
    "Patch",
    "Rejected",
    "RejectionReason",
    "AuditReport",
    "ScanResult",
    "PrResult",
    "FixResult",
    "Snapshot",
    "RescanResult",
    "PipelineResult",
    "DEFAULT_FILE_PATTERN",
    "RepoConfig",
    "ResolvedRepoConfig",
    "ResolutionMode",
    "PipelineStep",
    "PipelineCallbacks",
]

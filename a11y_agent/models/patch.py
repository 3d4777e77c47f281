"""Data models for patches and patch rejections."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Patch:
    """A validated exact-substring edit of one file."""
    file_path: str     # Relative to the source root
    original: str      # Must occur verbatim in the file at apply time
    replacement: str


class RejectionReason(Enum):
    """Why the validator refused to turn an issue into a patch."""
    NOT_SOURCE_MAPPED = "not source-mapped"
    UNKNOWN_FILE = "unknown file"
    SNIPPET_NOT_FOUND = "snippet not found"


@dataclass(frozen=True)
class Rejected:
    """Validator verdict for an issue that cannot become a patch."""
    issue_id: str
    reason: RejectionReason
    file_path: Optional[str] = None

    @property
    def message(self) -> str:
        location = f" ({self.file_path})" if self.file_path else ""
        return f"Issue {self.issue_id}{location} rejected: {self.reason.value}"

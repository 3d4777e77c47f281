"""Data models for scan, fix and rescan results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .issue import Finding, Issue
from .patch import Rejected


@dataclass
class AuditReport:
    """Output of one accessibility audit run."""
    findings: List[Finding] = field(default_factory=list)
    score: Optional[int] = None   # External 0-100 score, when the auditor provides one
    raw: Optional[str] = None     # Report text handed to the model

    def as_prompt_text(self) -> str:
        """Text describing the findings for the analysis prompt."""
        if self.raw:
            return self.raw
        lines = []
        for finding in self.findings:
            line = f"- [{finding.source}] {finding.id}: {finding.title}"
            if finding.selector:
                line += f" (target: {finding.selector})"
            if finding.display_value:
                line += f"\n  {finding.display_value}"
            lines.append(line)
        return "\n".join(lines) if lines else "No findings reported."


@dataclass(frozen=True)
class ScanResult:
    """Immutable snapshot of one scan."""
    url: str
    timestamp: str
    screenshot: str
    score: int
    lighthouse_score: Optional[int]
    summary: str
    issues: Tuple[Issue, ...]
    violation_count: int
    mode: str = "runtime-dom"

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "mode": self.mode,
            "timestamp": self.timestamp,
            "screenshot": self.screenshot,
            "score": self.score,
            "lighthouseScore": self.lighthouse_score,
            "summary": self.summary,
            "issues": [issue.to_dict() for issue in self.issues],
            "violationCount": self.violation_count,
        }


@dataclass
class PrResult:
    """Pull request opened by the remote applier."""
    pr_url: str
    pr_number: int
    branch_name: str
    files_changed: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prUrl": self.pr_url,
            "prNumber": self.pr_number,
            "branchName": self.branch_name,
            "filesChanged": self.files_changed,
        }


@dataclass
class FixResult:
    """Tally of one fix step."""
    applied: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    pr: Optional[PrResult] = None

    @property
    def total(self) -> int:
        return self.applied + self.failed

    def record_success(self):
        self.applied += 1

    def record_failure(self, message: str):
        self.failed += 1
        self.errors.append(message)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "applied": self.applied,
            "failed": self.failed,
            "errors": list(self.errors),
        }
        if self.pr is not None:
            data["pr"] = self.pr.to_dict()
        return data


@dataclass(frozen=True)
class Snapshot:
    """One side of a before/after comparison."""
    screenshot: str
    score: int
    lighthouse_score: Optional[int]

    @classmethod
    def of(cls, scan: ScanResult) -> "Snapshot":
        return cls(
            screenshot=scan.screenshot,
            score=scan.score,
            lighthouse_score=scan.lighthouse_score,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "screenshot": self.screenshot,
            "score": self.score,
            "lighthouseScore": self.lighthouse_score,
        }


@dataclass(frozen=True)
class RescanResult:
    """Paired before/after snapshots with derived issue counts."""
    before: Snapshot
    after: Snapshot
    issues_fixed: int
    issues_remaining: int

    @classmethod
    def from_counts(
        cls,
        before: Snapshot,
        after: Snapshot,
        before_count: int,
        after_count: int,
    ) -> "RescanResult":
        """Build a result; a regression never reports negative fixes."""
        return cls(
            before=before,
            after=after,
            issues_fixed=max(0, before_count - after_count),
            issues_remaining=after_count,
        )

    @classmethod
    def compare(cls, before_scan: ScanResult, after_scan: ScanResult) -> "RescanResult":
        return cls.from_counts(
            Snapshot.of(before_scan),
            Snapshot.of(after_scan),
            before_scan.issue_count,
            after_scan.issue_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "before": self.before.to_dict(),
            "after": self.after.to_dict(),
            "issuesFixed": self.issues_fixed,
            "issuesRemaining": self.issues_remaining,
        }


@dataclass
class PipelineResult:
    """Aggregated outcome of one scan -> fix -> rescan run."""
    scan: ScanResult
    fix: Optional[FixResult] = None
    rescan: Optional[RescanResult] = None
    mapped_issue_count: int = 0
    rejected: List[Rejected] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"scan": self.scan.to_dict()}
        if self.fix is not None:
            data["fix"] = self.fix.to_dict()
            data["mappedIssueCount"] = self.mapped_issue_count
            if self.fix.pr is not None:
                data["pr"] = self.fix.pr.to_dict()
        if self.rescan is not None:
            data["rescan"] = self.rescan.to_dict()
        return data

"""Finding normalization: audit findings -> severity-classified issues."""

from datetime import datetime, timezone
from typing import List, Optional

from ..models import AuditReport, Finding, Issue, ScanResult, Severity


def to_severity(score: Optional[float]) -> str:
    """
    Map an audit score in [0, 1] to a severity.

    None means the audit gave no evidence either way and maps to moderate.
    """
    if score is None:
        return Severity.MODERATE.value
    if score <= 0:
        return Severity.SERIOUS.value
    if score < 0.5:
        return Severity.MODERATE.value
    return Severity.MINOR.value


def _severity_for(finding: Finding) -> str:
    # axe reports its own impact scale, which matches ours
    if finding.impact and finding.impact in Severity.values():
        return finding.impact
    return to_severity(finding.score)


def normalize_findings(findings: List[Finding]) -> List[Issue]:
    """Convert raw findings into Issues, preserving order."""
    issues = []
    for idx, finding in enumerate(findings):
        description = finding.title
        if finding.description:
            description = f"{finding.title} - {finding.description}"
        issues.append(Issue(
            id=f"{finding.id}-{idx}",
            component=finding.selector or finding.id,
            severity=_severity_for(finding),
            description=description,
            wcag_criteria=finding.id,
            current_code=finding.display_value,
            source_ready=False,
        ))
    return issues


def composite_score(external_score: Optional[int], issue_count: int) -> int:
    """External audit score when present, else 100 minus 7 per issue."""
    if external_score is not None:
        return external_score
    return max(0, 100 - 7 * issue_count)


def summarize(issue_count: int) -> str:
    if issue_count == 0:
        return "No accessibility findings were reported."
    plural = "s" if issue_count != 1 else ""
    return f"{issue_count} accessibility finding{plural} reported."


def build_scan_result(
    url: str,
    screenshot: str,
    report: AuditReport,
    timestamp: Optional[str] = None,
) -> ScanResult:
    """Assemble the immutable scan snapshot from one audit report."""
    issues = normalize_findings(report.findings)
    return ScanResult(
        url=url,
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
        screenshot=screenshot,
        score=composite_score(report.score, len(issues)),
        lighthouse_score=report.score,
        summary=summarize(len(issues)),
        issues=tuple(issues),
        violation_count=len(report.findings),
    )

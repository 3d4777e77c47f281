"""Human-readable console reports for scan, fix and rescan results."""

from typing import Iterable, List, Optional

from ..models.issue import Issue, Severity
from ..models.results import FixResult, RescanResult, ScanResult


def _delta(before: int, after: int) -> str:
    delta = after - before
    return f"+{delta}" if delta >= 0 else str(delta)


def _col(text: Optional[str], width: int) -> str:
    return (text or "")[:width].ljust(width)


def format_scan_result(result: ScanResult) -> str:
    """
    Format a scan as a report.

    Args:
        result: ScanResult to format

    Returns:
        Formatted report string
    """
    score_line = f"- Score: {result.score}/100"
    if result.lighthouse_score is not None:
        score_line += f"  (Lighthouse: {result.lighthouse_score}/100)"

    lines = [
        "## Scan Results",
        f"URL: {result.url}",
        f"Timestamp: {result.timestamp}",
        "",
        score_line,
        f"- Violations: {result.violation_count}",
        f"- Issues found: {result.issue_count}",
    ]

    if result.summary:
        lines.append("")
        lines.append("### Summary")
        lines.append(result.summary)

    counts = {s.value: 0 for s in Severity}
    for issue in result.issues:
        if issue.severity in counts:
            counts[issue.severity] += 1
    lines.append("")
    lines.append("  ".join(f"{name}: {count}" for name, count in counts.items()))

    return "\n".join(lines)


def format_issues(issues: Iterable[Issue]) -> str:
    """Format issues as a fixed-width table."""
    issues = list(issues)
    if not issues:
        return "No issues found."

    lines: List[str] = [
        "### Issues",
        f"{_col('Component', 24)}  {_col('Severity', 10)}  {_col('WCAG', 12)}  Description",
        "-" * 90,
    ]
    for issue in issues:
        lines.append(
            f"{_col(issue.component, 24)}  {_col(issue.severity, 10)}  "
            f"{_col(issue.wcag_criteria, 12)}  {issue.description[:60]}"
        )
    return "\n".join(lines)


def format_fix_result(result: FixResult) -> str:
    lines = [
        "## Fix Results",
        f"- Applied: {result.applied}",
        f"- Failed: {result.failed}",
    ]
    if result.pr is not None:
        lines.append(f"- Pull request: {result.pr.pr_url}")
        lines.append(f"- Branch: {result.pr.branch_name}")

    if result.errors:
        lines.append("")
        lines.append("### Errors")
        lines.extend(f"- {error}" for error in result.errors)

    return "\n".join(lines)


def format_rescan_result(result: RescanResult) -> str:
    before, after = result.before, result.after
    lines = [
        "## Rescan Results",
        f"- Score: {before.score} -> {after.score}  ({_delta(before.score, after.score)})",
    ]
    if before.lighthouse_score is not None and after.lighthouse_score is not None:
        lines.append(
            f"- Lighthouse: {before.lighthouse_score} -> {after.lighthouse_score}  "
            f"({_delta(before.lighthouse_score, after.lighthouse_score)})"
        )
    lines.append(f"- Issues fixed: {result.issues_fixed}")
    lines.append(f"- Issues remaining: {result.issues_remaining}")
    return "\n".join(lines)

"""Lighthouse accessibility audits through the lighthouse CLI."""

import asyncio
import json
import shutil
from typing import Any, Dict, List, Optional

from ..errors import AuditError
from ..models import AuditReport, Finding
from ..utils import get_logger


SKIPPED_DISPLAY_MODES = {"notApplicable", "manual", "informative"}
MAX_NODES_PER_AUDIT = 5


def _nodes(audit: Dict[str, Any]) -> List[Dict[str, Optional[str]]]:
    items = (audit.get("details") or {}).get("items") or []
    nodes = []
    for item in items[:MAX_NODES_PER_AUDIT]:
        node = item.get("node") or {}
        if node:
            nodes.append({"selector": node.get("selector"), "snippet": node.get("snippet")})
    return nodes


def parse_lighthouse_report(report: Dict[str, Any]) -> AuditReport:
    """
    Extract failing accessibility audits and the category score.

    Audits that pass (score 1) or carry no verdict (not applicable,
    manual, informative) are dropped.
    """
    category = (report.get("categories") or {}).get("accessibility") or {}
    audits = report.get("audits") or {}

    category_score = category.get("score")
    score = int(round(category_score * 100)) if category_score is not None else None

    findings = []
    details = []
    for ref in category.get("auditRefs", []):
        audit = audits.get(ref.get("id"))
        if not audit or audit.get("scoreDisplayMode") in SKIPPED_DISPLAY_MODES:
            continue
        audit_score = audit.get("score")
        if audit_score is not None and audit_score >= 1:
            continue

        nodes = _nodes(audit)
        first = nodes[0] if nodes else {}
        findings.append(Finding(
            id=audit["id"],
            title=audit.get("title") or audit["id"],
            description=audit.get("description", ""),
            score=audit_score,
            display_value=audit.get("displayValue") or first.get("snippet"),
            selector=first.get("selector"),
            source="lighthouse",
        ))
        details.append({
            "id": audit["id"],
            "title": audit.get("title"),
            "description": audit.get("description"),
            "score": audit_score,
            "nodes": nodes,
        })

    raw = "Lighthouse accessibility findings:\n" + json.dumps(details, indent=2)
    return AuditReport(findings=findings, score=score, raw=raw)


class LighthouseAuditor:
    """Runs ``lighthouse --only-categories=accessibility`` and parses its JSON."""

    def __init__(self, timeout_seconds: float = 60.0, binary: Optional[str] = None):
        self.timeout_seconds = timeout_seconds
        self.binary = binary
        self.logger = get_logger()

    def _find_binary(self) -> str:
        binary = self.binary or shutil.which("lighthouse")
        if not binary:
            raise AuditError("Lighthouse CLI not found. Install it with `npm install -g lighthouse`.")
        return binary

    async def audit(self, url: str) -> AuditReport:
        binary = self._find_binary()
        proc = await asyncio.create_subprocess_exec(
            binary,
            url,
            "--output=json",
            "--quiet",
            "--chrome-flags=--headless --no-sandbox --disable-setuid-sandbox",
            "--only-categories=accessibility",
            "--preset=desktop",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise AuditError(f"Lighthouse timed out after {self.timeout_seconds}s for {url}") from e

        if proc.returncode != 0 or not stdout:
            message = stderr.decode("utf-8", errors="replace").strip().splitlines()
            raise AuditError(f"Lighthouse failed for {url}: {message[-1] if message else proc.returncode}")

        try:
            report = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise AuditError(f"Failed to parse Lighthouse output: {e}") from e

        parsed = parse_lighthouse_report(report)
        self.logger.info(
            f"Lighthouse score {parsed.score}, {len(parsed.findings)} failing audits"
        )
        return parsed

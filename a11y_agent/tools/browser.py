"""Browser automation: screenshots and axe-core audits through Playwright."""

import base64
import json
from dataclasses import dataclass
from typing import Any, Dict, List

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ..errors import AuditError
from ..models import AuditReport, Finding
from ..utils import get_logger


AXE_CDN_URL = "https://cdnjs.cloudflare.com/ajax/libs/axe-core/4.9.1/axe.min.js"
CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


@dataclass
class BrowserOptions:
    """Viewport and navigation settings shared by capture and audit."""
    width: int = 1280
    height: int = 800
    timeout_ms: int = 30000


class PlaywrightCapture:
    """Full-page PNG screenshots, base64 encoded."""

    def __init__(self, options: BrowserOptions = None):
        self.options = options or BrowserOptions()

    async def capture(self, url: str) -> str:
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=CHROMIUM_ARGS)
                try:
                    page = await browser.new_page(
                        viewport={"width": self.options.width, "height": self.options.height}
                    )
                    await page.goto(url, wait_until="networkidle", timeout=self.options.timeout_ms)
                    png = await page.screenshot(full_page=True, type="png")
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise AuditError(f"Screenshot capture failed for {url}: {e}") from e

        return base64.b64encode(png).decode("ascii")


def violations_to_findings(violations: List[Dict[str, Any]]) -> List[Finding]:
    """One finding per axe violation, pointing at its first node."""
    findings = []
    for violation in violations:
        nodes = violation.get("nodes") or []
        first = nodes[0] if nodes else {}
        target = first.get("target") or []
        findings.append(Finding(
            id=violation["id"],
            title=violation.get("help") or violation["id"],
            description=violation.get("description", ""),
            impact=violation.get("impact"),
            selector=" ".join(str(t) for t in target) or None,
            display_value=first.get("html"),
            source="axe",
        ))
    return findings


class AxeAuditor:
    """Runs axe-core in a headless Chromium page."""

    def __init__(self, options: BrowserOptions = None, axe_url: str = AXE_CDN_URL):
        self.options = options or BrowserOptions()
        self.axe_url = axe_url
        self.logger = get_logger()

    async def audit(self, url: str) -> AuditReport:
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=True, args=CHROMIUM_ARGS)
                try:
                    page = await browser.new_page(
                        viewport={"width": self.options.width, "height": self.options.height}
                    )
                    await page.goto(url, wait_until="networkidle", timeout=self.options.timeout_ms)
                    await page.add_script_tag(url=self.axe_url)
                    results = await page.evaluate("async () => await axe.run()")
                finally:
                    await browser.close()
        except PlaywrightError as e:
            raise AuditError(f"axe audit failed for {url}: {e}") from e

        violations = [
            {
                "id": v["id"],
                "impact": v.get("impact"),
                "help": v.get("help"),
                "description": v.get("description", ""),
                "nodes": [
                    {"html": n.get("html"), "target": n.get("target")}
                    for n in v.get("nodes", [])
                ],
            }
            for v in results.get("violations", [])
        ]
        self.logger.info(f"axe reported {len(violations)} violations")

        return AuditReport(
            findings=violations_to_findings(violations),
            score=None,
            raw="axe-core violations:\n" + json.dumps(violations, indent=2),
        )

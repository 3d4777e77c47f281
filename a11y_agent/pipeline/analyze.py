"""Analysis stage: ask a model to map audit findings onto source fixes."""

import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import jsonschema

from ..analyzers.base import ModelContext, ModelProvider, RawModelResponse
from ..analyzers.cache import ContextCache, cache_key
from ..errors import AnalysisError
from ..models import BoundingBox, Issue, Severity
from ..utils import get_logger


SYSTEM_PROMPT = """
You are an expert web accessibility auditor. You receive a screenshot of a
rendered page, the accessibility audit findings for it, and the source files
that render it. Identify WCAG 2.1 violations and provide source-level fixes.

## For Each Issue
1. Identify the affected component and file path
2. Give the exact current code snippet that is problematic
3. Give a corrected snippet that fixes the issue
4. Map it to a WCAG 2.1 success criterion (e.g. "1.1.1 Non-text Content")
5. Assign severity: critical (WCAG A blocker), serious (WCAG A/AA),
   moderate (usability impact), minor (best practice)
6. Estimate the line number in the source file
7. If visible in the screenshot, give its bounding box in absolute pixels of
   the full image, with x=0, y=0 at the top-left corner

## Rules
- ONLY reference files listed under AVAILABLE SOURCE FILES. Never invent file
  paths or component names.
- If a finding cannot be mapped to a provided file, skip it. Mention it in the
  summary instead.
- "component" must be a name that appears in the provided source.
- "filePath" must exactly match one of the available files.
- "currentCode" must be an exact substring of that file, whitespace and
  indentation included, and long enough to be unique within it.
- "fixedCode" must keep every opening tag matched by a closing tag.
- When changing an element type (e.g. <div> to <button>), include BOTH the
  opening and the closing tag in the snippet.

Wrong:   currentCode "<div onClick={handler}>"  fixedCode "<button onClick={handler}>"
Correct: currentCode "<div onClick={handler}>\\n  <span>Click</span>\\n</div>"
         fixedCode   "<button onClick={handler}>\\n  <span>Click</span>\\n</button>"

## Output
Respond with one JSON object and nothing else:
{"issues": [{"id", "component", "filePath", "severity", "wcagCriteria",
"description", "currentCode", "fixedCode", "line", "boundingBox"?}],
"score": <0-100, 100 = fully accessible>, "summary": "<brief summary>"}
"""


USER_PROMPT = """
## Audit Findings
{findings}

## Source Files
{sources}

## AVAILABLE SOURCE FILES (you may ONLY use these paths)
{available}
{screenshot_note}
Analyze the page and return the JSON report.
"""


_BOUNDING_BOX_SCHEMA = {
    "type": "object",
    "properties": {
        "x": {"type": "number"},
        "y": {"type": "number"},
        "width": {"type": "number"},
        "height": {"type": "number"},
    },
    "required": ["x", "y", "width", "height"],
}

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "issues": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "component": {"type": "string"},
                    "filePath": {"type": "string"},
                    "severity": {"type": "string", "enum": Severity.values()},
                    "wcagCriteria": {"type": "string"},
                    "description": {"type": "string"},
                    "currentCode": {"type": "string"},
                    "fixedCode": {"type": "string"},
                    "line": {"type": "number"},
                    "boundingBox": _BOUNDING_BOX_SCHEMA,
                },
                "required": [
                    "id",
                    "component",
                    "filePath",
                    "severity",
                    "wcagCriteria",
                    "description",
                    "currentCode",
                    "fixedCode",
                    "line",
                ],
            },
        },
        "score": {"type": "number"},
        "summary": {"type": "string"},
    },
    "required": ["issues", "score", "summary"],
}

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z]*\s*\n(.*?)\n?\s*```\s*$", re.DOTALL)


@dataclass
class AnalysisResult:
    """Parsed model report."""
    issues: List[Issue] = field(default_factory=list)
    score: float = 0
    summary: str = ""


def build_user_prompt(findings_text: str, corpus: Dict[str, str], screenshot_width: Optional[int] = None) -> str:
    """
    Format findings and the source corpus for the model.

    Args:
        findings_text: Audit report text (see AuditReport.as_prompt_text)
        corpus: Mapping of file path to file text
        screenshot_width: Width in pixels of the attached screenshot

    Returns:
        User prompt string
    """
    sources = "\n\n".join(f"--- File: {path} ---\n{text}" for path, text in corpus.items())
    available = "\n".join(f"- {path}" for path in corpus) or "(none)"
    note = f"\nThe screenshot is {screenshot_width}px wide.\n" if screenshot_width else ""
    return USER_PROMPT.format(
        findings=findings_text,
        sources=sources or "(no source files provided)",
        available=available,
        screenshot_note=note,
    )


def strip_code_fences(text: str) -> str:
    """Remove one surrounding markdown code fence, if present."""
    match = _FENCE_RE.match(text)
    return match.group(1) if match else text.strip()


def _to_issue(data: dict) -> Issue:
    box = data.get("boundingBox")
    line = data.get("line")
    issue = Issue(
        id=data["id"],
        component=data["component"],
        severity=data["severity"],
        description=data["description"],
        file_path=data["filePath"],
        wcag_criteria=data["wcagCriteria"],
        current_code=data["currentCode"],
        fixed_code=data["fixedCode"],
        line=int(line) if line is not None else None,
        bounding_box=BoundingBox(box["x"], box["y"], box["width"], box["height"]) if box else None,
    )
    issue.source_ready = issue.is_source_mapped
    return issue


def parse_model_response(raw: RawModelResponse) -> AnalysisResult:
    """
    Parse and validate a model response against RESPONSE_SCHEMA.

    Raises:
        AnalysisError: Empty text, invalid JSON, or a schema violation
    """
    text = strip_code_fences(raw.text or "")
    if not text:
        raise AnalysisError(f"Empty response from {raw.provider}")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Invalid JSON from {raw.provider}: {e}") from e

    try:
        jsonschema.validate(instance=data, schema=RESPONSE_SCHEMA)
    except jsonschema.ValidationError as e:
        path = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise AnalysisError(f"Response from {raw.provider} violates schema at {path}: {e.message}") from e

    return AnalysisResult(
        issues=[_to_issue(item) for item in data["issues"]],
        score=data["score"],
        summary=data["summary"],
    )


class AccessibilityAnalyzer:
    """Runs one model call per analysis, using a cached context when available."""

    def __init__(
        self,
        provider: ModelProvider,
        cache: Optional[ContextCache] = None,
        cache_ttl_seconds: int = 3600,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.provider = provider
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds
        self.system_prompt = system_prompt
        self.logger = get_logger()

    async def _cached_context(self) -> Optional[str]:
        if self.cache is None or not self.provider.supports_context_cache:
            return None

        key = cache_key(self.system_prompt)
        entry = await self.cache.get_or_create(
            key,
            lambda: self.provider.create_cached_context(self.system_prompt, self.cache_ttl_seconds),
        )
        if entry is None:
            self.logger.info("Context cache unavailable, sending full system prompt")
            return None
        self.logger.debug(f"Using cached context {key}")
        return entry.name

    async def analyze(
        self,
        screenshot: Optional[str],
        findings_text: str,
        corpus: Dict[str, str],
        screenshot_width: Optional[int] = None,
    ) -> AnalysisResult:
        """
        Ask the provider for source-mapped fixes.

        Args:
            screenshot: Base64 PNG of the page
            findings_text: Audit report text
            corpus: Source files visible to the model
            screenshot_width: Width of the screenshot in pixels

        Returns:
            AnalysisResult with issues, model score and summary
        """
        context = ModelContext(
            system_prompt=self.system_prompt,
            screenshot=screenshot,
            cached_context=await self._cached_context(),
        )
        prompt = build_user_prompt(findings_text, corpus, screenshot_width)

        self.logger.info(f"Analyzing with {self.provider.name} ({len(corpus)} source files)")
        raw = await self.provider.generate(prompt, context)
        self.logger.debug(f"Raw {raw.provider} response: {len(raw.text or '')} chars")

        result = parse_model_response(raw)
        mapped = sum(1 for issue in result.issues if issue.source_ready)
        self.logger.info(f"Model reported {len(result.issues)} issues, {mapped} source-mapped")
        return result

"""Scan -> fix -> rescan orchestration."""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Dict, List, Optional, Protocol, Tuple, TypeVar

from ..analyzers import ClaudeProvider, ContextCache, ModelProvider, OpenAIProvider
from ..config import ScanConfig
from ..errors import ConfigError, StageError
from ..models import (
    AuditReport,
    FixResult,
    Issue,
    Patch,
    PipelineCallbacks,
    PipelineResult,
    PipelineStep,
    Rejected,
    RescanResult,
    ScanResult,
)
from ..pipeline import AccessibilityAnalyzer, build_patches, build_scan_result
from ..tools import (
    AxeAuditor,
    BrowserOptions,
    GitHubSource,
    GitHubTool,
    LighthouseAuditor,
    LocalSource,
    PlaywrightCapture,
)
from ..utils import get_logger


NO_PATCHES_MESSAGE = "No source-mapped fixes were generated from the audit findings."

T = TypeVar("T")


class Capture(Protocol):
    async def capture(self, url: str) -> str: ...


class Auditor(Protocol):
    async def audit(self, url: str) -> AuditReport: ...


class Source(Protocol):
    label: str

    async def read(self) -> Dict[str, str]: ...

    async def apply(self, patches: List[Patch]) -> FixResult: ...


@dataclass
class ScanOutcome:
    """Scan snapshot plus the inputs the analysis step needs."""
    scan: ScanResult
    report: AuditReport
    corpus: Dict[str, str] = field(default_factory=dict)


@dataclass
class AnalysisOutcome:
    issues: List[Issue] = field(default_factory=list)
    patches: List[Patch] = field(default_factory=list)
    rejected: List[Rejected] = field(default_factory=list)


class A11yOrchestrator:
    """
    Runs the accessibility pipeline against one URL.

    Capture, audit and source read run concurrently; analysis starts only
    after all three resolve. Fix and rescan run strictly in sequence. The
    first failing stage aborts the run with a StageError naming it.
    """

    def __init__(
        self,
        config: ScanConfig,
        capture: Capture,
        auditor: Auditor,
        analyzer: Optional[AccessibilityAnalyzer] = None,
        source: Optional[Source] = None,
        callbacks: Optional[PipelineCallbacks] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Run configuration
            capture: Screenshot collaborator
            auditor: Lighthouse or axe auditor
            analyzer: Model analysis step; required unless scan-only
            source: Local directory or GitHub repository; required unless scan-only
            callbacks: Step/progress/error notifications
        """
        self.config = config
        self.capture = capture
        self.auditor = auditor
        self.analyzer = analyzer
        self.source = source
        self.callbacks = callbacks or PipelineCallbacks()
        self.logger = get_logger()

    async def _stage(self, step: PipelineStep, awaitable: Awaitable[T]) -> T:
        """Await one stage; failures become a StageError naming the stage."""
        self.callbacks.step(step)
        try:
            return await awaitable
        except StageError:
            raise
        except Exception as e:
            self.logger.error(f"Stage {step.value} failed: {e}")
            self.callbacks.step(PipelineStep.ERROR)
            self.callbacks.error(e)
            raise StageError(step, e) from e

    @staticmethod
    async def _gather(*awaitables: Awaitable) -> List:
        """Run awaitables concurrently; the first failure cancels the rest."""
        tasks = [asyncio.ensure_future(aw) for aw in awaitables]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

    def _require_fix_collaborators(self):
        if self.analyzer is None or self.source is None:
            raise ConfigError("An analyzer and a source are required to fix")

    async def scan(self, read_sources: bool = False) -> ScanOutcome:
        """
        Capture, audit and (optionally) read sources concurrently.

        Args:
            read_sources: Also read the source corpus for analysis

        Returns:
            ScanOutcome with the immutable ScanResult
        """
        url = self.config.url
        if read_sources:
            self._require_fix_collaborators()
        self.callbacks.progress(f"Scanning {url}...")

        stages = [
            self._stage(PipelineStep.CAPTURING, self.capture.capture(url)),
            self._stage(PipelineStep.SCANNING, self.auditor.audit(url)),
        ]
        if read_sources:
            stages.append(self._stage(PipelineStep.READING, self.source.read()))

        results = await self._gather(*stages)
        screenshot, report = results[0], results[1]
        corpus = results[2] if read_sources else {}

        scan = build_scan_result(url, screenshot, report)
        self.logger.info(f"Scan complete: score {scan.score}, {scan.issue_count} issues")
        if read_sources:
            self.logger.info(f"Read {len(corpus)} source files from {self.source.label}")
        return ScanOutcome(scan=scan, report=report, corpus=corpus)

    async def analyze(self, outcome: ScanOutcome) -> AnalysisOutcome:
        """Ask the model for fixes and keep only those that validate against the corpus."""
        self._require_fix_collaborators()
        self.callbacks.progress(f"Generating source-mapped fixes with {self.analyzer.provider.name}...")

        result = await self._stage(
            PipelineStep.ANALYZING,
            self.analyzer.analyze(
                outcome.scan.screenshot,
                outcome.report.as_prompt_text(),
                outcome.corpus,
                self.config.viewport_width,
            ),
        )
        patches, rejected = build_patches(result.issues, outcome.corpus)
        for item in rejected:
            self.logger.warning(item.message)
        return AnalysisOutcome(issues=result.issues, patches=patches, rejected=rejected)

    async def fix(self, patches: List[Patch]) -> FixResult:
        """
        Apply validated patches through the source.

        With no patches the source is not touched and the result carries
        a single diagnostic.
        """
        if not patches:
            self.logger.info(NO_PATCHES_MESSAGE)
            return FixResult(applied=0, failed=0, errors=[NO_PATCHES_MESSAGE])

        self._require_fix_collaborators()
        self.callbacks.progress(f"Applying {len(patches)} patches to {self.source.label}...")
        result = await self._stage(PipelineStep.FIXING, self.source.apply(patches))
        self.logger.info(f"Fix step: {result.applied} applied, {result.failed} failed")
        return result

    async def rescan(self, before: ScanResult) -> RescanResult:
        """Capture and audit again with the same URL and settings."""
        url = self.config.url
        self.callbacks.progress(f"Rescanning {url}...")

        screenshot, report = await self._stage(
            PipelineStep.RESCANNING,
            self._gather(self.capture.capture(url), self.auditor.audit(url)),
        )
        after = build_scan_result(url, screenshot, report)
        result = RescanResult.compare(before, after)
        self.logger.info(
            f"Rescan: score {before.score} -> {after.score}, "
            f"{result.issues_fixed} fixed, {result.issues_remaining} remaining"
        )
        return result

    async def run(self) -> PipelineResult:
        """
        Run the full pipeline.

        Scan-only mode stops after the scan. Rescan is skipped when
        disabled or when no patch was produced.

        Returns:
            PipelineResult aggregating every stage that ran
        """
        self.config.validate()
        fixing = not self.config.scan_only

        outcome = await self.scan(read_sources=fixing)
        if not fixing:
            self.callbacks.step(PipelineStep.COMPLETE)
            return PipelineResult(scan=outcome.scan)

        analysis = await self.analyze(outcome)
        fix_result = await self.fix(analysis.patches)

        rescan_result = None
        if self.config.rescan and analysis.patches:
            rescan_result = await self.rescan(outcome.scan)

        self.callbacks.step(PipelineStep.COMPLETE)
        return PipelineResult(
            scan=outcome.scan,
            fix=fix_result,
            rescan=rescan_result,
            mapped_issue_count=len(analysis.patches),
            rejected=analysis.rejected,
        )


def build_provider(config: ScanConfig) -> ModelProvider:
    if config.provider == "openai":
        return OpenAIProvider(api_key=config.api_key, model=config.model, base_url=config.base_url)
    return ClaudeProvider(model=config.model, api_key=config.api_key)


def build_collaborators(config: ScanConfig, cache: Optional[ContextCache] = None) -> Tuple:
    """
    Create the default capture, auditor, analyzer and source for a config.

    Analyzer and source are None in scan-only mode.

    Returns:
        Tuple of (capture, auditor, analyzer, source)
    """
    options = BrowserOptions(
        width=config.viewport_width,
        height=config.viewport_height,
        timeout_ms=config.navigation_timeout_ms,
    )
    capture = PlaywrightCapture(options)
    if config.auditor == "axe":
        auditor = AxeAuditor(options)
    else:
        auditor = LighthouseAuditor(timeout_seconds=config.lighthouse_timeout_seconds)

    if config.scan_only:
        return capture, auditor, None, None

    analyzer = AccessibilityAnalyzer(
        build_provider(config),
        cache=cache if config.enable_caching else None,
        cache_ttl_seconds=config.cache_ttl_seconds,
    )
    if config.remote:
        source = GitHubSource(GitHubTool(token=config.github_token), config.github)
    else:
        source = LocalSource(config.src_dir, config.file_glob)
    return capture, auditor, analyzer, source


def create_orchestrator(
    config: ScanConfig,
    callbacks: Optional[PipelineCallbacks] = None,
    cache: Optional[ContextCache] = None,
) -> A11yOrchestrator:
    """Validate the config and wire the default collaborators."""
    config.validate()
    capture, auditor, analyzer, source = build_collaborators(config, cache)
    return A11yOrchestrator(config, capture, auditor, analyzer, source, callbacks)

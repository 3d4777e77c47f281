#!/usr/bin/env python3
"""
a11y-agent - Main Entry Point

Scans a page for accessibility violations, asks a model for source-level
fixes, applies them to a local directory or opens a GitHub pull request,
and re-scans to measure the improvement.

Usage:
    a11y-agent http://localhost:3000 ./src
    a11y-agent https://example.com github:owner/repo@main:apps/web/src
    a11y-agent http://localhost:3000 --scan-only --json
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from .analyzers import ContextCache
from .config import AUDITORS, PROVIDERS, ScanConfig
from .errors import A11yAgentError
from .models import PipelineCallbacks, PipelineResult, RepoConfig
from .orchestrator import create_orchestrator
from .utils import (
    setup_logging,
    get_logger,
    format_scan_result,
    format_issues,
    format_fix_result,
    format_rescan_result,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="a11y-agent",
        description="Accessibility scan -> fix -> rescan agent"
    )
    parser.add_argument(
        "url",
        help="URL of the page to scan"
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=".",
        help="Local source directory or github:owner/repo[@branch][:path] (default: .)"
    )
    parser.add_argument(
        "--provider",
        choices=list(PROVIDERS),
        help="Model provider (default: claude, or A11Y_PROVIDER)"
    )
    parser.add_argument(
        "--model",
        type=str,
        help="Model name passed to the provider"
    )
    parser.add_argument(
        "--api-key",
        type=str,
        help="Provider API key (default: ANTHROPIC_API_KEY / OPENAI_API_KEY)"
    )
    parser.add_argument(
        "--base-url",
        type=str,
        help="Base URL of an OpenAI-compatible endpoint"
    )
    parser.add_argument(
        "--auditor",
        choices=list(AUDITORS),
        help="Accessibility auditor (default: lighthouse)"
    )
    parser.add_argument(
        "--glob",
        type=str,
        help="Source file pattern (default: **/*.{tsx,jsx})"
    )
    parser.add_argument(
        "--scan-only",
        action="store_true",
        help="Scan and report without generating fixes"
    )
    parser.add_argument(
        "--no-rescan",
        action="store_true",
        help="Skip the rescan after fixing"
    )
    parser.add_argument(
        "--no-caching",
        action="store_true",
        help="Disable the model context cache"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON document instead of a report"
    )
    parser.add_argument(
        "--github-token",
        type=str,
        help="GitHub token for repository mode (default: GITHUB_TOKEN)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def build_config(args: argparse.Namespace) -> ScanConfig:
    """
    Merge CLI arguments over environment defaults.

    Raises:
        ConfigError: If the config is invalid
    """
    config = ScanConfig.from_env()
    config.url = args.url

    if args.provider:
        config.provider = args.provider
        if not args.api_key:
            # Re-read the key for the overridden provider
            config.api_key = ScanConfig.api_key_from_env(args.provider)
    if args.model:
        config.model = args.model
    if args.api_key:
        config.api_key = args.api_key
    if args.base_url:
        config.base_url = args.base_url
    if args.auditor:
        config.auditor = args.auditor
    if args.glob:
        config.file_glob = args.glob
    if args.github_token:
        config.github_token = args.github_token

    config.scan_only = args.scan_only
    config.rescan = not args.no_rescan
    if args.no_caching:
        config.enable_caching = False

    if RepoConfig.is_descriptor(args.source):
        config.github = RepoConfig.parse(args.source, file_pattern=config.file_glob)
    else:
        config.src_dir = args.source

    config.validate()
    return config


def print_report(result: PipelineResult):
    """Print the human-readable report for a pipeline result."""
    print(format_scan_result(result.scan))
    print()
    print(format_issues(result.scan.issues))
    if result.fix is not None:
        print()
        print(f"Source-mapped fixes: {result.mapped_issue_count}")
        print(format_fix_result(result.fix))
    if result.rescan is not None:
        print()
        print(format_rescan_result(result.rescan))


def run(config: ScanConfig, json_output: bool = False) -> PipelineResult:
    logger = get_logger()

    callbacks = PipelineCallbacks(
        on_step=lambda step: logger.debug(f"Step: {step.value}"),
        on_progress=logger.info,
    )
    if json_output:
        callbacks.on_progress = logger.debug

    orchestrator = create_orchestrator(config, callbacks, cache=ContextCache())
    return asyncio.run(orchestrator.run())


def main(argv: Optional[List[str]] = None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.debug else logging.INFO,
        stream=sys.stderr if args.json else None,
    )
    logger = get_logger()

    try:
        config = build_config(args)
        result = run(config, json_output=args.json)
    except A11yAgentError as e:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unexpected failure: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_report(result)
    sys.exit(0)


if __name__ == "__main__":
    main()

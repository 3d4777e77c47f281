"""Pipeline stages: normalize, analyze, validate, apply and repair."""

from .normalize import to_severity, normalize_findings, composite_score, build_scan_result
from .validate import validate_patch, build_patches
from .repair import find_orphaned_closing_tags, repair_closing_tags
from .apply import apply_patch_to_text, apply_patches
from .analyze import (
    SYSTEM_PROMPT,
    RESPONSE_SCHEMA,
    AnalysisResult,
    AccessibilityAnalyzer,
    build_user_prompt,
    parse_model_response,
    strip_code_fences,
)

__all__ = [
    "to_severity",
    "normalize_findings",
    "composite_score",
    "build_scan_result",
    "validate_patch",
    "build_patches",
    "find_orphaned_closing_tags",
    "repair_closing_tags",
    "apply_patch_to_text",
    "apply_patches",
    "SYSTEM_PROMPT",
    "RESPONSE_SCHEMA",
    "AnalysisResult",
    "AccessibilityAnalyzer",
    "build_user_prompt",
    "parse_model_response",
    "strip_code_fences",
]

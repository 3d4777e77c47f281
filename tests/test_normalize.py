"""Tests for finding normalization and the scan snapshot."""

import pytest

from a11y_agent.models import AuditReport, Finding
from a11y_agent.pipeline.normalize import (
    build_scan_result,
    composite_score,
    normalize_findings,
    to_severity,
)


class TestToSeverity:
    """Tests for the score -> severity thresholds."""

    @pytest.mark.parametrize("score,expected", [
        (None, "moderate"),
        (0, "serious"),
        (-0.1, "serious"),
        (0.01, "moderate"),
        (0.49, "moderate"),
        (0.5, "minor"),
        (0.9, "minor"),
    ])
    def test_thresholds(self, score, expected):
        """Given an audit score, should map it by the fixed thresholds."""
        assert to_severity(score) == expected


class TestNormalizeFindings:
    """Tests for Finding -> Issue conversion."""

    def test_lighthouse_finding_fields(self):
        """Given a failing Lighthouse audit, should build an unmapped issue."""
        # Given
        findings = [
            Finding(id="image-alt", title="Images lack alt text", description="Add alt.",
                    score=0, display_value='<img src="a.png">', selector="main > img"),
            Finding(id="color-contrast", title="Low contrast", score=0.7),
        ]

        # When
        issues = normalize_findings(findings)

        # Then
        first, second = issues
        assert first.id == "image-alt-0"
        assert first.component == "main > img"
        assert first.severity == "serious"
        assert first.description == "Images lack alt text - Add alt."
        assert first.wcag_criteria == "image-alt"
        assert first.current_code == '<img src="a.png">'
        assert first.source_ready is False
        assert second.id == "color-contrast-1"
        assert second.component == "color-contrast"
        assert second.description == "Low contrast"
        assert second.severity == "minor"

    def test_axe_impact_overrides_score(self):
        """Given an axe finding with an impact level, should use that severity."""
        # Given
        findings = [Finding(id="label", title="Form elements need labels", impact="critical", source="axe")]

        # When
        issues = normalize_findings(findings)

        # Then
        assert issues[0].severity == "critical"


class TestCompositeScore:
    """Tests for the composite score."""

    def test_external_score_wins(self):
        assert composite_score(83, 12) == 83

    def test_fallback_penalizes_each_issue(self):
        """Given no external score, should subtract 7 per issue and floor at 0."""
        assert composite_score(None, 0) == 100
        assert composite_score(None, 3) == 79
        assert composite_score(None, 20) == 0


class TestBuildScanResult:
    """Tests for the immutable scan snapshot."""

    def test_snapshot_from_report(self):
        """Given an audit report, should assemble counts, score and summary."""
        # Given
        report = AuditReport(
            findings=[Finding(id="a", title="A", score=0), Finding(id="b", title="B", score=0.3)],
            score=None,
        )

        # When
        scan = build_scan_result("http://localhost:3000", "cG5n", report, timestamp="2024-01-01T00:00:00Z")

        # Then
        assert scan.score == 86
        assert scan.lighthouse_score is None
        assert scan.issue_count == 2
        assert scan.violation_count == 2
        assert scan.summary == "2 accessibility findings reported."
        assert scan.to_dict()["timestamp"] == "2024-01-01T00:00:00Z"

    def test_snapshot_is_frozen(self):
        """Given a scan result, assigning a field should fail."""
        # Given
        scan = build_scan_result("http://x", "", AuditReport())

        # When/Then
        assert scan.summary == "No accessibility findings were reported."
        with pytest.raises(AttributeError):
            scan.score = 5

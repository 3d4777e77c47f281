"""Tests for auditor parsing and the local code reader."""

import asyncio

import pytest

from a11y_agent.errors import AuditError
from a11y_agent.tools.browser import violations_to_findings
from a11y_agent.tools.code_reader import expand_braces, read_source_files
from a11y_agent.tools.lighthouse import LighthouseAuditor, parse_lighthouse_report


LIGHTHOUSE_REPORT = {
    "categories": {
        "accessibility": {
            "score": 0.78,
            "auditRefs": [
                {"id": "image-alt"},
                {"id": "color-contrast"},
                {"id": "html-has-lang"},
                {"id": "accesskeys"},
            ],
        }
    },
    "audits": {
        "image-alt": {
            "id": "image-alt",
            "title": "Image elements do not have [alt] attributes",
            "description": "Informative elements should aim for short text.",
            "score": 0,
            "scoreDisplayMode": "binary",
            "details": {"items": [{"node": {"selector": "header > img", "snippet": "<img src=\"logo.png\">"}}]},
        },
        "color-contrast": {
            "id": "color-contrast",
            "title": "Contrast is sufficient",
            "score": 1,
            "scoreDisplayMode": "binary",
        },
        "html-has-lang": {
            "id": "html-has-lang",
            "title": "<html> has a lang",
            "score": None,
            "scoreDisplayMode": "notApplicable",
        },
        "accesskeys": {
            "id": "accesskeys",
            "title": "Access keys are unique",
            "score": None,
            "scoreDisplayMode": "manual",
        },
    },
}


class TestParseLighthouseReport:
    """Tests for Lighthouse JSON extraction."""

    def test_failing_audits_only(self):
        """Given passing, failing and not-applicable audits, should keep only the failing one."""
        # When
        report = parse_lighthouse_report(LIGHTHOUSE_REPORT)

        # Then
        assert report.score == 78
        assert [f.id for f in report.findings] == ["image-alt"]
        finding = report.findings[0]
        assert finding.selector == "header > img"
        assert finding.display_value == '<img src="logo.png">'
        assert finding.score == 0
        assert "image-alt" in report.as_prompt_text()

    def test_missing_category(self):
        """Given a report without the accessibility category, should return no score."""
        report = parse_lighthouse_report({})
        assert report.score is None
        assert report.findings == []


class TestLighthouseAuditor:
    def test_missing_binary_raises(self, monkeypatch):
        """Given no lighthouse on PATH, should raise AuditError."""
        # Given
        monkeypatch.setattr("a11y_agent.tools.lighthouse.shutil.which", lambda name: None)
        auditor = LighthouseAuditor()

        # When/Then
        with pytest.raises(AuditError, match="Lighthouse CLI not found"):
            asyncio.run(auditor.audit("http://localhost:3000"))


class TestViolationsToFindings:
    def test_axe_violation(self):
        """Given an axe violation, should keep its impact and first target."""
        # Given
        violations = [{
            "id": "button-name",
            "impact": "critical",
            "help": "Buttons must have discernible text",
            "description": "Ensures buttons have discernible text",
            "nodes": [{"html": "<button></button>", "target": ["#menu", "button"]}],
        }]

        # When
        findings = violations_to_findings(violations)

        # Then
        finding = findings[0]
        assert finding.impact == "critical"
        assert finding.selector == "#menu button"
        assert finding.display_value == "<button></button>"
        assert finding.source == "axe"


class TestCodeReader:
    """Tests for the local corpus reader."""

    def test_expand_braces(self):
        assert expand_braces("**/*.{tsx,jsx}") == ["**/*.tsx", "**/*.jsx"]
        assert expand_braces("src/*.vue") == ["src/*.vue"]

    def test_reads_matching_files_with_posix_keys(self, tmp_path):
        """Given nested files, should read only matching ones keyed by relative path."""
        # Given
        (tmp_path / "components").mkdir()
        (tmp_path / "components" / "Nav.tsx").write_text("<nav />", encoding="utf-8")
        (tmp_path / "App.jsx").write_text("<App />", encoding="utf-8")
        (tmp_path / "util.ts").write_text("export {}", encoding="utf-8")

        # When
        corpus = read_source_files(tmp_path, "**/*.{tsx,jsx}")

        # Then
        assert corpus == {"App.jsx": "<App />", "components/Nav.tsx": "<nav />"}
        assert list(corpus) == sorted(corpus)

    def test_skips_files_that_are_not_utf8(self, tmp_path, caplog):
        """Given one latin-1 file among UTF-8 files, should skip it and keep reading."""
        # Given
        (tmp_path / "Good.tsx").write_text("<p>ok</p>", encoding="utf-8")
        (tmp_path / "Legacy.tsx").write_bytes("<p>caf\xe9</p>".encode("latin-1"))

        # When
        corpus = read_source_files(tmp_path, "**/*.{tsx,jsx}")

        # Then
        assert corpus == {"Good.tsx": "<p>ok</p>"}
        assert "Skipping Legacy.tsx" in caplog.text

"""Tests for patch validation.

- Given-When-Then structure
- Client-perspective behavior verification
"""

from a11y_agent.models import Issue, Patch, Rejected, RejectionReason
from a11y_agent.pipeline.validate import build_patches, validate_patch


CORPUS = {
    "components/Header.tsx": '<div onClick={toggle}>\n  <img src="logo.png">\n</div>\n',
    "components/Footer.tsx": "<footer>\n  <a href=\"/about\">About</a>\n</footer>\n",
}


def make_issue(**overrides) -> Issue:
    fields = dict(
        id="issue-1",
        component="Header",
        severity="serious",
        description="Clickable div is not keyboard accessible",
        file_path="components/Header.tsx",
        current_code="<div onClick={toggle}>",
        fixed_code="<button onClick={toggle}>",
    )
    fields.update(overrides)
    return Issue(**fields)


class TestValidatePatch:
    """Tests for the ordered validation checks."""

    def test_accepts_exact_substring(self):
        """Given a mapped issue whose snippet occurs verbatim, should return a patch."""
        # Given
        issue = make_issue()

        # When
        verdict = validate_patch(issue, CORPUS)

        # Then
        assert verdict == Patch(
            file_path="components/Header.tsx",
            original="<div onClick={toggle}>",
            replacement="<button onClick={toggle}>",
        )

    def test_rejects_missing_replacement(self):
        """Given an issue without a fixed snippet, should reject as not source-mapped."""
        # Given
        issue = make_issue(fixed_code=None)

        # When
        verdict = validate_patch(issue, CORPUS)

        # Then
        assert isinstance(verdict, Rejected)
        assert verdict.reason == RejectionReason.NOT_SOURCE_MAPPED

    def test_rejects_unknown_file(self):
        """Given a file path the model was not shown, should reject as unknown file."""
        # Given
        issue = make_issue(file_path="components/Invented.tsx")

        # When
        verdict = validate_patch(issue, CORPUS)

        # Then
        assert verdict.reason == RejectionReason.UNKNOWN_FILE
        assert "components/Invented.tsx" in verdict.message

    def test_rejects_whitespace_drift(self):
        """Given a snippet that differs only in whitespace, should reject it."""
        # Given
        issue = make_issue(current_code="<div  onClick={toggle}>")

        # When
        verdict = validate_patch(issue, CORPUS)

        # Then
        assert verdict.reason == RejectionReason.SNIPPET_NOT_FOUND

    def test_first_failing_check_wins(self):
        """Given an unmapped issue with an unknown path, should report not source-mapped."""
        # Given
        issue = make_issue(file_path="nope.tsx", current_code=None)

        # When
        verdict = validate_patch(issue, CORPUS)

        # Then
        assert verdict.reason == RejectionReason.NOT_SOURCE_MAPPED


class TestBuildPatches:
    """Tests for batch validation."""

    def test_partitions_in_input_order(self):
        """Given mixed issues, should split into patches and rejections preserving order."""
        # Given
        issues = [
            make_issue(id="a"),
            make_issue(id="b", file_path=None),
            make_issue(
                id="c",
                file_path="components/Footer.tsx",
                current_code='<a href="/about">About</a>',
                fixed_code='<a href="/about" aria-label="About us">About</a>',
            ),
        ]

        # When
        patches, rejected = build_patches(issues, CORPUS)

        # Then
        assert [p.file_path for p in patches] == ["components/Header.tsx", "components/Footer.tsx"]
        assert [r.issue_id for r in rejected] == ["b"]

    def test_every_patch_snippet_is_in_corpus(self):
        """Given any accepted patch, its original must occur in the named corpus file."""
        # Given
        issues = [make_issue(id=str(i), current_code=code) for i, code in enumerate(
            ["<div onClick={toggle}>", '<img src="logo.png">', "</span>", ""]
        )]

        # When
        patches, rejected = build_patches(issues, CORPUS)

        # Then
        assert len(patches) + len(rejected) == len(issues)
        for patch in patches:
            assert patch.original in CORPUS[patch.file_path]

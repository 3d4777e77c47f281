"""Tests for the GitHub tool against a mocked PyGithub client.

- Minimal mocking (only the external GitHub API)
"""

import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from github import GithubException, UnknownObjectException

from a11y_agent.errors import ConfigError
from a11y_agent.models import Patch, RepoConfig, ResolutionMode
from a11y_agent.tools.github_tool import GitHubTool


def blob(path, sha=None):
    return SimpleNamespace(path=path, sha=sha or f"sha-{path}", type="blob")


def make_repo(paths, files=None):
    """Repository mock whose branch tree holds `paths` and whose contents are `files`."""
    files = files or {}
    repo = MagicMock()
    repo.default_branch = "main"
    repo.full_name = "acme/web"
    repo.get_git_tree.return_value.tree = [blob(p) for p in paths] + [
        SimpleNamespace(path="apps", sha="t", type="tree"),
    ]

    def get_git_blob(sha):
        path = sha[len("sha-"):]
        encoded = base64.b64encode(files.get(path, "").encode("utf-8")).decode("ascii")
        return SimpleNamespace(encoding="base64", content=encoded)

    def get_contents(path, ref=None):
        if path not in files:
            raise UnknownObjectException(404, {"message": "Not Found"}, None)
        return SimpleNamespace(decoded_content=files[path].encode("utf-8"))

    repo.get_git_blob.side_effect = get_git_blob
    repo.get_contents.side_effect = get_contents
    repo.create_git_blob.return_value = SimpleNamespace(sha="new-blob")
    repo.create_pull.return_value = SimpleNamespace(number=42, html_url="https://github.com/acme/web/pull/42")
    return repo


def make_tool(repo):
    client = MagicMock()
    client.get_repo.return_value = repo
    return GitHubTool(client=client), client


class TestResolve:
    """Tests for branch and source prefix resolution."""

    def test_explicit_src_path(self):
        """Given an explicit path, should trim slashes and skip the tree walk."""
        # Given
        repo = make_repo([])
        tool, _ = make_tool(repo)

        # When
        resolved = tool.resolve(RepoConfig("acme", "web", src_path="/web/src/"))

        # Then
        assert resolved.resolution_mode == ResolutionMode.EXPLICIT
        assert resolved.src_path == "web/src"
        assert resolved.branch == "main"
        repo.get_git_tree.assert_not_called()

    def test_heuristic_monorepo(self):
        """Given apps/web/src with 3 files and apps/admin/src with 1, should pick apps/web/src."""
        # Given
        repo = make_repo([
            "apps/web/src/x.tsx",
            "apps/web/src/y.tsx",
            "apps/web/src/z.jsx",
            "apps/admin/src/y.tsx",
            "apps/admin/src/readme.md",
        ])
        tool, _ = make_tool(repo)

        # When
        resolved = tool.resolve(RepoConfig("acme", "web", branch="develop"))

        # Then
        assert resolved.resolution_mode == ResolutionMode.HEURISTIC
        assert resolved.src_path == "apps/web/src"
        repo.get_git_ref.assert_called_with("heads/develop")

    def test_fallback_root(self):
        repo = make_repo(["components/Button.tsx"])
        tool, _ = make_tool(repo)

        resolved = tool.resolve(RepoConfig("acme", "web"))

        assert resolved.resolution_mode == ResolutionMode.FALLBACK_ROOT
        assert resolved.src_path is None

    def test_missing_owner(self):
        tool, _ = make_tool(make_repo([]))
        with pytest.raises(ConfigError):
            tool.resolve(RepoConfig("", "web"))

    def test_repo_lookup_is_cached(self):
        """Given repeated calls, should fetch the repository once."""
        tool, client = make_tool(make_repo(["src/a.tsx"]))

        tool.resolve(RepoConfig("acme", "web"))
        tool.resolve(RepoConfig("acme", "web"))

        client.get_repo.assert_called_once_with("acme/web")


class TestReadFiles:
    def test_keys_relative_to_prefix(self):
        """Given a detected src prefix, should return only matching files keyed without it."""
        # Given
        files = {"src/App.tsx": "<App />", "src/util.ts": "export {}", "docs/x.tsx": "<X />"}
        tool, _ = make_tool(make_repo(list(files), files))

        # When
        corpus = tool.read_files(RepoConfig("acme", "web"))

        # Then
        assert corpus == {"App.tsx": "<App />"}


class TestValidateAccess:
    def test_inaccessible_repository(self):
        client = MagicMock()
        client.get_repo.side_effect = GithubException(404, {"message": "Not Found"}, None)
        tool = GitHubTool(client=client)

        assert tool.validate_access("acme", "private") == (False, "main")


class TestCreateFixPr:
    """Tests for the remote apply path."""

    def test_opens_pr_with_repaired_content(self):
        """Given a valid patch, should commit the repaired file on a new branch and open a PR."""
        # Given
        files = {"src/Nav.tsx": "<div onClick={go}>\n  <span>Home</span>\n</div>\n"}
        repo = make_repo(list(files), files)
        tool, _ = make_tool(repo)
        patch = Patch("Nav.tsx", "<div onClick={go}>", "<button onClick={go}>")

        # When
        result = tool.create_fix_pr(RepoConfig("acme", "web"), [patch])

        # Then
        assert (result.applied, result.failed) == (1, 0)
        repo.create_git_blob.assert_called_once_with(
            "<button onClick={go}>\n  <span>Home</span>\n</button>\n", "utf-8"
        )
        ref_name = repo.create_git_ref.call_args.kwargs["ref"]
        assert ref_name.startswith("refs/heads/a11y-fix/")
        repo.create_git_ref.return_value.edit.assert_called_once()
        assert repo.create_pull.call_args.kwargs["title"] == "fix: automated accessibility fixes (1 issue)"
        assert result.pr.pr_number == 42
        assert result.pr.files_changed == 1

    def test_patches_on_same_file_compose(self):
        """Given two patches on one file, should commit one blob containing both edits."""
        # Given
        files = {"src/A.tsx": '<img src="a.png">\n<img src="b.png">\n'}
        repo = make_repo(list(files), files)
        tool, _ = make_tool(repo)
        patches = [
            Patch("A.tsx", '<img src="a.png">', '<img src="a.png" alt="A">'),
            Patch("A.tsx", '<img src="b.png">', '<img src="b.png" alt="B">'),
        ]

        # When
        result = tool.create_fix_pr(RepoConfig("acme", "web"), patches)

        # Then
        assert result.applied == 2
        repo.create_git_blob.assert_called_once_with(
            '<img src="a.png" alt="A">\n<img src="b.png" alt="B">\n', "utf-8"
        )

    def test_no_change_creates_no_branch(self):
        """Given only stale or missing targets, should record failures and not touch git refs."""
        # Given
        files = {"src/A.tsx": "<p>x</p>"}
        repo = make_repo(list(files), files)
        tool, _ = make_tool(repo)
        patches = [
            Patch("A.tsx", "<p>gone</p>", "<p>y</p>"),
            Patch("Missing.tsx", "<p>x</p>", "<p>y</p>"),
        ]

        # When
        result = tool.create_fix_pr(RepoConfig("acme", "web"), patches)

        # Then
        assert (result.applied, result.failed) == (0, 2)
        assert result.errors[0] == "Pattern not found in A.tsx"
        assert "Missing.tsx" in result.errors[1]
        assert result.pr is None
        repo.create_git_ref.assert_not_called()
        repo.create_pull.assert_not_called()

    def test_api_errors_propagate(self):
        """Given a failing GitHub call, should raise instead of recording a failure."""
        # Given
        files = {"src/A.tsx": "<p>x</p>"}
        repo = make_repo(list(files), files)
        repo.create_git_ref.side_effect = GithubException(422, {"message": "Reference already exists"}, None)
        tool, _ = make_tool(repo)

        # When/Then
        with pytest.raises(GithubException):
            tool.create_fix_pr(RepoConfig("acme", "web"), [Patch("A.tsx", "<p>x</p>", "<p>y</p>")])


class TestUndecodableFiles:
    """Tests for repository files that are not valid UTF-8."""

    def test_read_files_skips_them(self):
        """Given a latin-1 blob, should leave it out of the corpus."""
        # Given
        files = {"src/App.tsx": "<App />", "src/Legacy.tsx": ""}
        repo = make_repo(list(files), files)
        legacy = base64.b64encode("<p>caf\xe9</p>".encode("latin-1")).decode("ascii")
        decode_utf8 = repo.get_git_blob.side_effect

        def get_git_blob(sha):
            if sha == "sha-src/Legacy.tsx":
                return SimpleNamespace(encoding="base64", content=legacy)
            return decode_utf8(sha)

        repo.get_git_blob.side_effect = get_git_blob
        tool, _ = make_tool(repo)

        # When
        corpus = tool.read_files(RepoConfig("acme", "web"))

        # Then
        assert corpus == {"App.tsx": "<App />"}

    def test_patch_target_is_a_failure(self):
        """Given a patch on a file that no longer decodes, should record a failure and open no PR."""
        # Given
        files = {"src/A.tsx": "<p>x</p>"}
        repo = make_repo(list(files), files)
        repo.get_contents.side_effect = lambda path, ref=None: SimpleNamespace(
            decoded_content="<p>caf\xe9</p>".encode("latin-1")
        )
        tool, _ = make_tool(repo)

        # When
        result = tool.create_fix_pr(RepoConfig("acme", "web"), [Patch("A.tsx", "<p>x</p>", "<p>y</p>")])

        # Then
        assert (result.applied, result.failed) == (0, 1)
        assert "A.tsx" in result.errors[0]
        repo.create_git_ref.assert_not_called()

"""GitHub API wrapper for reading sources and opening fix pull requests."""

import base64
import os
import time
from typing import Dict, List, Optional, Tuple

from github import Auth, Github, GithubException, InputGitTreeElement, UnknownObjectException
from github.Repository import Repository

from ..errors import ConfigError
from ..models import (
    DEFAULT_FILE_PATTERN,
    FixResult,
    Patch,
    PrResult,
    RepoConfig,
    ResolvedRepoConfig,
    ResolutionMode,
)
from ..pipeline.apply import apply_patch_to_text
from ..utils import get_logger
from .repo_paths import detect_src_path, extract_extensions, has_extension, normalize_src_path


COMMIT_MESSAGE = "fix: apply automated accessibility fixes\n\nGenerated by a11y-agent"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class GitHubTool:
    """
    GitHub API wrapper for remote source mode.

    Handles:
    - Resolving branch and source prefix of a repository
    - Reading the source corpus at a branch
    - Applying patches as one commit on a new branch and opening a PR
    """

    def __init__(self, token: Optional[str] = None, client: Optional[Github] = None):
        """
        Initialize GitHub tool.

        Args:
            token: GitHub token (defaults to GITHUB_TOKEN env var)
            client: Preconfigured PyGithub client
        """
        self.token = token or os.environ.get("GITHUB_TOKEN")
        if client is None and not self.token:
            raise ConfigError("GitHub token required. Set GITHUB_TOKEN env var or pass token parameter.")

        self.gh = client or Github(auth=Auth.Token(self.token))
        self.logger = get_logger()
        self._repos: Dict[str, Repository] = {}

    def get_repo(self, owner: str, repo: str) -> Repository:
        """Get the repository object (cached)."""
        full_name = f"{owner}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self.gh.get_repo(full_name)
        return self._repos[full_name]

    def validate_access(self, owner: str, repo: str) -> Tuple[bool, str]:
        """
        Check that the token can see a repository.

        Returns:
            Tuple of (accessible, default_branch)
        """
        try:
            return True, self.get_repo(owner, repo).default_branch
        except GithubException:
            return False, "main"

    def _blob_paths(self, repo: Repository, branch: str) -> List:
        """All blob entries of the branch head tree."""
        head = repo.get_git_ref(f"heads/{branch}")
        commit = repo.get_git_commit(head.object.sha)
        tree = repo.get_git_tree(commit.tree.sha, recursive=True)
        return [item for item in tree.tree if item.type == "blob" and item.path]

    def resolve(self, config: RepoConfig) -> ResolvedRepoConfig:
        """
        Settle branch and source prefix of a repository.

        An explicit source path wins. Otherwise the branch tree is searched
        for files with allowed extensions and the source directory is
        guessed; with no match the repository root is used.

        Raises:
            ConfigError: If owner or repo is missing
        """
        if not config.owner or not config.repo:
            raise ConfigError("owner and repo are required")

        repo = self.get_repo(config.owner, config.repo)
        branch = config.branch or repo.default_branch
        file_pattern = config.file_pattern or DEFAULT_FILE_PATTERN

        src_path = normalize_src_path(config.src_path)
        if src_path:
            return ResolvedRepoConfig(
                owner=config.owner,
                repo=config.repo,
                branch=branch,
                file_pattern=file_pattern,
                resolution_mode=ResolutionMode.EXPLICIT,
                src_path=src_path,
            )

        extensions = extract_extensions(file_pattern)
        paths = [
            item.path for item in self._blob_paths(repo, branch)
            if has_extension(item.path, extensions)
        ]

        detected = detect_src_path(paths)
        if detected:
            self.logger.info(f"Detected source path {detected!r} in {config.full_name}")
            return ResolvedRepoConfig(
                owner=config.owner,
                repo=config.repo,
                branch=branch,
                file_pattern=file_pattern,
                resolution_mode=ResolutionMode.HEURISTIC,
                src_path=detected,
            )

        self.logger.info(f"No source directory detected in {config.full_name}, using repository root")
        return ResolvedRepoConfig(
            owner=config.owner,
            repo=config.repo,
            branch=branch,
            file_pattern=file_pattern,
            resolution_mode=ResolutionMode.FALLBACK_ROOT,
        )

    def read_files(self, config: RepoConfig) -> Dict[str, str]:
        """
        Read the source corpus of a repository.

        Returns:
            Path relative to the source prefix -> file text
        """
        resolved = self.resolve(config)
        repo = self.get_repo(resolved.owner, resolved.repo)
        extensions = extract_extensions(resolved.file_pattern)
        prefix = resolved.src_prefix

        corpus: Dict[str, str] = {}
        for item in self._blob_paths(repo, resolved.branch):
            if prefix and not item.path.startswith(prefix):
                continue
            if not has_extension(item.path, extensions):
                continue

            blob = repo.get_git_blob(item.sha)
            try:
                if blob.encoding == "base64":
                    content = base64.b64decode(blob.content).decode("utf-8")
                else:
                    content = blob.content
            except UnicodeDecodeError as e:
                self.logger.warning(f"Skipping {item.path}: not valid UTF-8 ({e.reason})")
                continue
            key = item.path[len(prefix):] if prefix else item.path
            corpus[key] = content

        self.logger.info(f"Read {len(corpus)} files from {resolved.full_name}@{resolved.branch}")
        return corpus

    def _read_content(self, repo: Repository, path: str, ref: str) -> Optional[str]:
        try:
            contents = repo.get_contents(path, ref=ref)
        except UnknownObjectException:
            return None
        if isinstance(contents, list):
            return None
        try:
            return contents.decoded_content.decode("utf-8")
        except UnicodeDecodeError as e:
            self.logger.warning(f"Cannot patch {path}: not valid UTF-8 ({e.reason})")
            return None

    def create_fix_pr(self, config: RepoConfig, patches: List[Patch]) -> FixResult:
        """
        Apply patches as one commit on a new branch and open a pull request.

        Each patch is re-checked against the file at the branch head and
        goes through the same replace + structural repair as local mode.
        Patches on the same file compose. When nothing changes, no branch
        is created. GitHub API errors propagate.

        Args:
            config: Target repository
            patches: Validated patches, paths relative to the source prefix

        Returns:
            FixResult with the pull request descriptor when one was opened
        """
        resolved = self.resolve(config)
        repo = self.get_repo(resolved.owner, resolved.repo)

        head = repo.get_git_ref(f"heads/{resolved.branch}")
        base_sha = head.object.sha
        base_commit = repo.get_git_commit(base_sha)

        result = FixResult()
        originals: Dict[str, str] = {}
        working: Dict[str, str] = {}

        for patch in patches:
            path = resolved.repo_path(patch.file_path)

            if path not in working:
                content = self._read_content(repo, path, resolved.branch)
                if content is None:
                    result.record_failure(f"File not found or not UTF-8 in {resolved.full_name}: {patch.file_path}")
                    continue
                originals[path] = content
                working[path] = content

            if patch.original not in working[path]:
                result.record_failure(f"Pattern not found in {patch.file_path}")
                continue

            working[path] = apply_patch_to_text(working[path], patch)
            result.record_success()

        changed = {path: text for path, text in working.items() if text != originals[path]}
        if not changed:
            self.logger.warning("No file changed, skipping pull request")
            return result

        branch_name = f"a11y-fix/{int(time.time() * 1000)}"
        new_ref = repo.create_git_ref(ref=f"refs/heads/{branch_name}", sha=base_sha)
        self.logger.info(f"Created branch {branch_name} from {resolved.branch}")

        elements = []
        for path, text in changed.items():
            blob = repo.create_git_blob(text, "utf-8")
            elements.append(InputGitTreeElement(path=path, mode="100644", type="blob", sha=blob.sha))

        tree = repo.create_git_tree(elements, base_tree=base_commit.tree)
        commit = repo.create_git_commit(COMMIT_MESSAGE, tree, [base_commit])
        new_ref.edit(sha=commit.sha)

        pr = repo.create_pull(
            title=f"fix: automated accessibility fixes ({_plural(result.applied, 'issue')})",
            body=self._format_pr_body(result.applied, len(changed)),
            head=branch_name,
            base=resolved.branch,
        )
        self.logger.info(f"Opened PR #{pr.number}: {pr.html_url}")

        result.pr = PrResult(
            pr_url=pr.html_url,
            pr_number=pr.number,
            branch_name=branch_name,
            files_changed=len(changed),
        )
        return result

    def _format_pr_body(self, applied: int, files_changed: int) -> str:
        parts = [
            "## Automated Accessibility Fixes\n",
            "\nThis PR was generated by a11y-agent.\n",
            "\n### Changes\n",
            f"- Fixed {_plural(applied, 'accessibility issue')} detected by automated scanning\n",
            f"- Patches applied to {_plural(files_changed, 'file')}\n",
        ]
        return "".join(parts)

"""Data models for remote repository access."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import ConfigError


DEFAULT_FILE_PATTERN = "**/*.{tsx,jsx}"

# github:owner/repo[@branch][:src/path]
_SHORT_DESCRIPTOR = re.compile(
    r"^github:(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)"
    r"(?:@(?P<branch>[^:]+))?(?::(?P<path>.+))?$"
)
# https://github.com/owner/repo[.git][/tree/branch[/src/path]]
_URL_DESCRIPTOR = re.compile(
    r"^https?://github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+?)(?:\.git)?"
    r"(?:/tree/(?P<branch>[^/]+)(?:/(?P<path>.+))?)?/?$"
)


class ResolutionMode(Enum):
    """How the source subdirectory of a repository was determined."""
    EXPLICIT = "explicit"
    HEURISTIC = "heuristic"
    FALLBACK_ROOT = "fallback-root"


@dataclass
class RepoConfig:
    """A GitHub repository as given by the user."""
    owner: str
    repo: str
    branch: Optional[str] = None
    src_path: Optional[str] = None
    file_pattern: Optional[str] = None

    @staticmethod
    def is_descriptor(value: str) -> bool:
        """Check if a source argument names a GitHub repository."""
        return value.startswith("github:") or bool(_URL_DESCRIPTOR.match(value))

    @classmethod
    def parse(cls, descriptor: str, file_pattern: Optional[str] = None) -> "RepoConfig":
        """
        Parse a repository descriptor.

        Accepts ``github:owner/repo[@branch][:src/path]`` or a
        ``https://github.com/owner/repo[/tree/branch[/path]]`` URL.

        Raises:
            ConfigError: If the descriptor is malformed
        """
        match = _SHORT_DESCRIPTOR.match(descriptor) or _URL_DESCRIPTOR.match(descriptor)
        if not match:
            raise ConfigError(
                f"Malformed repository descriptor: {descriptor!r} "
                "(expected github:owner/repo[@branch][:path])"
            )
        return cls(
            owner=match.group("owner"),
            repo=match.group("repo"),
            branch=match.group("branch") or None,
            src_path=match.group("path") or None,
            file_pattern=file_pattern,
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class ResolvedRepoConfig:
    """Repository config with branch and source prefix settled."""
    owner: str
    repo: str
    branch: str
    file_pattern: str
    resolution_mode: ResolutionMode
    src_path: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def src_prefix(self) -> Optional[str]:
        """Source path with a trailing slash, or None at repository root."""
        if not self.src_path:
            return None
        return self.src_path if self.src_path.endswith("/") else f"{self.src_path}/"

    def repo_path(self, file_path: str) -> str:
        """Map a corpus-relative path to a repository path."""
        prefix = self.src_prefix
        if prefix and not file_path.startswith(prefix):
            return f"{prefix}{file_path}"
        return file_path

"""Configuration for the accessibility agent."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os

from .errors import ConfigError
from .models.repo import DEFAULT_FILE_PATTERN, RepoConfig


PROVIDERS = ("claude", "openai")
AUDITORS = ("lighthouse", "axe")


@dataclass
class ScanConfig:
    """Configuration for one scan -> fix -> rescan run."""

    # Target
    url: str = ""
    src_dir: str = "."
    file_glob: str = DEFAULT_FILE_PATTERN
    github: Optional[RepoConfig] = None   # Set for remote (pull request) mode
    github_token: Optional[str] = None

    # Model provider
    provider: str = "claude"  # claude, openai
    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None  # OpenAI-compatible endpoint
    enable_caching: bool = True
    cache_ttl_seconds: int = 3600

    # Audit and capture
    auditor: str = "lighthouse"  # lighthouse, axe
    viewport_width: int = 1280
    viewport_height: int = 800
    navigation_timeout_ms: int = 30000
    lighthouse_timeout_seconds: float = 60.0

    # Pipeline behavior
    scan_only: bool = False
    rescan: bool = True

    @property
    def remote(self) -> bool:
        return self.github is not None

    @staticmethod
    def api_key_from_env(provider: str) -> Optional[str]:
        key_var = "OPENAI_API_KEY" if provider == "openai" else "ANTHROPIC_API_KEY"
        return os.environ.get(key_var) or None

    @classmethod
    def from_env(cls) -> "ScanConfig":
        """Create config from environment variables."""
        provider = os.environ.get("A11Y_PROVIDER", "claude").lower()
        return cls(
            provider=provider,
            model=os.environ.get("A11Y_MODEL") or None,
            api_key=cls.api_key_from_env(provider),
            base_url=os.environ.get("OPENAI_BASE_URL") or None,
            auditor=os.environ.get("A11Y_AUDITOR", "lighthouse").lower(),
            file_glob=os.environ.get("A11Y_FILE_GLOB", DEFAULT_FILE_PATTERN),
            github_token=os.environ.get("GITHUB_TOKEN") or None,
            enable_caching=os.environ.get("A11Y_ENABLE_CACHING", "true").lower() == "true",
            cache_ttl_seconds=int(os.environ.get("A11Y_CACHE_TTL", "3600")),
        )

    def validate(self):
        """
        Check the config before any collaborator is called.

        Raises:
            ConfigError: On the first problem found
        """
        if not self.url:
            raise ConfigError("URL required")
        if self.provider not in PROVIDERS:
            raise ConfigError(f"Unknown provider {self.provider!r} (choose from {', '.join(PROVIDERS)})")
        if self.auditor not in AUDITORS:
            raise ConfigError(f"Unknown auditor {self.auditor!r} (choose from {', '.join(AUDITORS)})")

        if self.scan_only:
            return

        if self.remote:
            if not self.github_token:
                raise ConfigError("GitHub token required. Set GITHUB_TOKEN env var or pass --github-token.")
        elif not Path(self.src_dir).is_dir():
            raise ConfigError(f"Source directory not found: {self.src_dir}")

        if self.provider == "openai" and not self.api_key:
            raise ConfigError("API key required for the openai provider. Set OPENAI_API_KEY or pass --api-key.")


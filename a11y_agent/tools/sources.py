"""Source backends: where the corpus is read from and patches go to."""

import asyncio
from pathlib import Path
from typing import Dict, List

from ..models import FixResult, Patch, RepoConfig
from ..pipeline.apply import apply_patches
from .code_reader import read_source_files
from .github_tool import GitHubTool


class LocalSource:
    """A directory on disk; patches are written in place."""

    def __init__(self, src_dir: str, file_glob: str):
        self.src_dir = Path(src_dir)
        self.file_glob = file_glob

    @property
    def label(self) -> str:
        return str(self.src_dir)

    async def read(self) -> Dict[str, str]:
        return await asyncio.to_thread(read_source_files, self.src_dir, self.file_glob)

    async def apply(self, patches: List[Patch]) -> FixResult:
        return await asyncio.to_thread(apply_patches, self.src_dir, patches)


class GitHubSource:
    """A GitHub repository; patches become a pull request."""

    def __init__(self, tool: GitHubTool, config: RepoConfig):
        self.tool = tool
        self.config = config

    @property
    def label(self) -> str:
        return self.config.full_name

    async def read(self) -> Dict[str, str]:
        return await asyncio.to_thread(self.tool.read_files, self.config)

    async def apply(self, patches: List[Patch]) -> FixResult:
        return await asyncio.to_thread(self.tool.create_fix_pr, self.config, patches)

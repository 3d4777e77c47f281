"""Tools for the accessibility agent: browsers, auditors, sources, GitHub."""

from .github_tool import GitHubTool
from .code_reader import read_source_files, expand_braces
from .sources import LocalSource, GitHubSource
from .lighthouse import LighthouseAuditor, parse_lighthouse_report
from .browser import BrowserOptions, PlaywrightCapture, AxeAuditor
from .repo_paths import detect_src_path, extract_extensions
from .storage_tool import StorageTool

__all__ = [
    "GitHubTool",
    "read_source_files",
    "expand_braces",
    "LocalSource",
    "GitHubSource",
    "LighthouseAuditor",
    "parse_lighthouse_report",
    "BrowserOptions",
    "PlaywrightCapture",
    "AxeAuditor",
    "detect_src_path",
    "extract_extensions",
    "StorageTool",
]

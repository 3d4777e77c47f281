"""Source-path heuristics for remote repositories."""

import re
from collections import Counter
from typing import Iterable, List, Optional


DEFAULT_EXTENSIONS = [".tsx", ".jsx"]

_MULTI_EXT_RE = re.compile(r"\*\.\{([^}]+)\}$")
_SINGLE_EXT_RE = re.compile(r"\*\.([a-zA-Z0-9]+)$")


def normalize_src_path(src_path: Optional[str]) -> Optional[str]:
    """Trim leading/trailing slashes; empty becomes None."""
    if not src_path:
        return None
    normalized = src_path.strip("/")
    return normalized or None


def extract_extensions(file_pattern: str) -> List[str]:
    """
    Allowed file extensions of a glob pattern.

    ``**/*.{tsx,jsx}`` -> ``[".tsx", ".jsx"]``, ``**/*.vue`` -> ``[".vue"]``.
    Anything else falls back to the default extensions.
    """
    multi = _MULTI_EXT_RE.search(file_pattern)
    if multi:
        extensions = [
            f".{ext.strip().lstrip('.')}"
            for ext in multi.group(1).split(",")
            if ext.strip().lstrip(".")
        ]
        if extensions:
            return extensions

    single = _SINGLE_EXT_RE.search(file_pattern)
    if single:
        return [f".{single.group(1)}"]

    return list(DEFAULT_EXTENSIONS)


def has_extension(path: str, extensions: Iterable[str]) -> bool:
    return any(path.endswith(ext) for ext in extensions)


def detect_monorepo_src_path(paths: Iterable[str], scope: str) -> Optional[str]:
    """
    Pick the ``<scope>/<name>/src`` prefix holding the most files.

    Ties go to the lexically smallest prefix so the result is stable.
    """
    prefix_re = re.compile(rf"^{re.escape(scope)}/[^/]+/src/")
    counts: Counter = Counter()

    for path in paths:
        if not prefix_re.match(path):
            continue
        segments = path.split("/")
        counts[f"{segments[0]}/{segments[1]}/src"] += 1

    if not counts:
        return None

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ranked[0][0]


def detect_src_path(blob_paths: List[str]) -> Optional[str]:
    """
    Guess the source directory from the paths of matching files.

    Order: top-level ``src/``, then ``app/``, then ``apps/*/src``, then
    ``packages/*/src``. None means the repository root.
    """
    if any(path.startswith("src/") for path in blob_paths):
        return "src"
    if any(path.startswith("app/") for path in blob_paths):
        return "app"

    for scope in ("apps", "packages"):
        detected = detect_monorepo_src_path(blob_paths, scope)
        if detected:
            return detected

    return None

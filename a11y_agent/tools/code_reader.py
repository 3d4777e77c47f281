"""Local source corpus reader."""

import re
from pathlib import Path
from typing import Dict, List, Union

from ..models import DEFAULT_FILE_PATTERN
from ..utils import get_logger

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> List[str]:
    """
    Expand ``{a,b}`` groups, which pathlib globbing does not support.

    ``**/*.{tsx,jsx}`` -> ``["**/*.tsx", "**/*.jsx"]``
    """
    match = _BRACE_RE.search(pattern)
    if not match:
        return [pattern]

    expanded = []
    for option in match.group(1).split(","):
        candidate = pattern[:match.start()] + option + pattern[match.end():]
        expanded.extend(expand_braces(candidate))
    return expanded


def read_source_files(
    src_dir: Union[str, Path],
    file_glob: str = DEFAULT_FILE_PATTERN,
) -> Dict[str, str]:
    """
    Read every file under src_dir matching the glob.

    Files that are not valid UTF-8 are skipped with a warning.

    Args:
        src_dir: Source root
        file_glob: Glob relative to the root, brace groups allowed

    Returns:
        POSIX relative path -> file text, sorted by path
    """
    logger = get_logger()
    root = Path(src_dir)
    corpus: Dict[str, str] = {}

    for pattern in expand_braces(file_glob):
        for path in root.glob(pattern):
            if not path.is_file():
                continue
            key = path.relative_to(root).as_posix()
            if key in corpus:
                continue
            try:
                with open(path, "r", encoding="utf-8", newline="") as f:
                    corpus[key] = f.read()
            except UnicodeDecodeError as e:
                logger.warning(f"Skipping {key}: not valid UTF-8 ({e.reason})")

    return dict(sorted(corpus.items()))

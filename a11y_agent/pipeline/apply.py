"""Local patch application."""

from pathlib import Path
from typing import List, Union

from ..models import FixResult, Patch
from ..utils import get_logger
from .repair import repair_closing_tags


def read_text(path: Path) -> str:
    # newline="" keeps CRLF files byte-exact for snippet matching
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: Path, content: str):
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def apply_patch_to_text(content: str, patch: Patch) -> str:
    """First-occurrence replace followed by the structural repair pass."""
    replaced = content.replace(patch.original, patch.replacement, 1)
    return repair_closing_tags(replaced)


def apply_patches(src_dir: Union[str, Path], patches: List[Patch]) -> FixResult:
    """
    Apply patches to files under a local source root.

    Patches run sequentially. A patch whose original snippet is no longer in
    the file (an earlier patch changed it, or the file changed since
    validation) is counted as failed and the batch continues. Read/write
    errors are recorded per file and never abort the remaining patches.

    Args:
        src_dir: Source root the patch paths are relative to
        patches: Validated patches

    Returns:
        FixResult where applied + failed == len(patches)
    """
    logger = get_logger()
    root = Path(src_dir).resolve()
    result = FixResult()

    for patch in patches:
        full_path = (root / patch.file_path).resolve()
        if full_path != root and root not in full_path.parents:
            result.record_failure(f"Refusing to patch {patch.file_path}: outside source root")
            logger.warning(result.errors[-1])
            continue

        try:
            content = read_text(full_path)

            if patch.original not in content:
                result.record_failure(f"Pattern not found in {patch.file_path}")
                logger.warning(result.errors[-1])
                continue

            write_text(full_path, apply_patch_to_text(content, patch))
            result.record_success()
            logger.info(f"Patched {patch.file_path}")

        except (OSError, UnicodeError) as e:
            result.record_failure(f"Failed to patch {patch.file_path}: {e}")
            logger.warning(result.errors[-1])

    return result

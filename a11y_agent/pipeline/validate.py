"""Patch validation: the gate between model output and the filesystem."""

from typing import Dict, List, Tuple, Union

from ..models import Issue, Patch, Rejected, RejectionReason
from ..utils import get_logger


def validate_patch(issue: Issue, corpus: Dict[str, str]) -> Union[Patch, Rejected]:
    """
    Turn a model-proposed issue into a patch, or reject it.

    Checks run in order and stop at the first failure:
    the issue must carry a file path and both snippets, the path must be a
    key of the corpus the model was shown, and the original snippet must
    occur verbatim in that file.

    Args:
        issue: Candidate issue from the model
        corpus: Relative path -> file text, as given to the model

    Returns:
        Patch when accepted, Rejected otherwise
    """
    if not issue.is_source_mapped:
        return Rejected(issue.id, RejectionReason.NOT_SOURCE_MAPPED, issue.file_path)

    if issue.file_path not in corpus:
        return Rejected(issue.id, RejectionReason.UNKNOWN_FILE, issue.file_path)

    if issue.current_code not in corpus[issue.file_path]:
        return Rejected(issue.id, RejectionReason.SNIPPET_NOT_FOUND, issue.file_path)

    return Patch(
        file_path=issue.file_path,
        original=issue.current_code,
        replacement=issue.fixed_code,
    )


def build_patches(
    issues: List[Issue],
    corpus: Dict[str, str],
) -> Tuple[List[Patch], List[Rejected]]:
    """Validate every issue; returns (patches, rejected) in input order."""
    logger = get_logger()
    patches: List[Patch] = []
    rejected: List[Rejected] = []

    for issue in issues:
        verdict = validate_patch(issue, corpus)
        if isinstance(verdict, Patch):
            patches.append(verdict)
        else:
            logger.debug(verdict.message)
            rejected.append(verdict)

    if rejected:
        logger.info(f"Validator accepted {len(patches)} patches, rejected {len(rejected)}")

    return patches, rejected

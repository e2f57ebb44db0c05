# patchforge/report.py
from __future__ import annotations

from typing import List, Mapping, Optional, Union

from .models import ApplyDiffResult, BlockResult


def _describe(block: BlockResult, file_path: Optional[str]) -> List[str]:
    where = f" in {file_path}" if file_path else ""
    lines = [f"Block {block.index + 1}{where} failed ({block.error_kind.value}): {block.message}"]
    for p in block.candidate_previews:
        lines.append(f"  - {p.location}, similarity {p.similarity:.2f}: {p.preview!r}")
    lines.append("  Search text was:")
    lines.extend(f"    {ln}" for ln in block.search_preview.splitlines() or [""])
    return lines


def format_failure_feedback(
    result: Union[ApplyDiffResult, Mapping[str, ApplyDiffResult]],
) -> str:
    """
    Render failed blocks as plain text for a correction prompt.

    Only the failing blocks (with their search previews and candidate line
    ranges) are included, so a retry does not need the whole file resent.
    Returns "" when nothing failed.
    """
    if isinstance(result, ApplyDiffResult):
        per_file = {None: result}
    else:
        per_file = dict(result)

    out: List[str] = []
    for path, res in per_file.items():
        for block in res.results.failed_blocks:
            if out:
                out.append("")
            out.extend(_describe(block, path))
    if not out:
        return ""
    header = "The following SEARCH/REPLACE blocks could not be applied. Resend only these blocks, corrected:"
    return "\n".join([header, ""] + out)

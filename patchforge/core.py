# patchforge/core.py
from __future__ import annotations

import logging
import time
from dataclasses import replace
from functools import partial, reduce
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from ._logging import for_block, resolve_logger
from .commit import apply_candidate
from .errors import AmbiguousMatchError, InvalidOptionsError, NoMatchFoundError, ParseError
from .extract import parse_diff
from .match import MatchingStrategyChain, resolve_candidates
from .match.chain import ChainMatch
from .match.resolve import Resolution
from .models import (
    ApplyDiffResult,
    ApplyOptions,
    ApplySummary,
    BlockResult,
    BlockStatus,
    CandidatePreview,
    DiffBlock,
    ErrorKind,
    TelemetryEntry,
)
from .utils.text import detect_eol, line_spans, preview

OptionsLike = Union[ApplyOptions, Mapping[str, Any], None]

_STRICT_ERRORS = {
    ErrorKind.NO_MATCH_FOUND: NoMatchFoundError,
    ErrorKind.AMBIGUOUS: AmbiguousMatchError,
}


class _FoldState(NamedTuple):
    """Loop state carried from one block to the next."""

    content: str
    results: Tuple[BlockResult, ...]
    telemetry: Tuple[TelemetryEntry, ...]
    position_hint: Optional[int]


def _coerce_options(options: OptionsLike) -> ApplyOptions:
    if options is None:
        return ApplyOptions()
    if isinstance(options, ApplyOptions):
        options.validate()
        return options
    if isinstance(options, Mapping):
        return ApplyOptions.from_mapping(options)
    raise InvalidOptionsError(f"options must be ApplyOptions or a mapping, got {type(options).__name__}")


def _with_eol(block: DiffBlock, eol: str) -> DiffBlock:
    """Diff text is parsed with '\\n' joins; speak the source's line ending instead."""
    return replace(
        block,
        search_text=block.search_text.replace("\n", eol),
        replace_text=block.replace_text.replace("\n", eol),
    )


def _failure_result(
    block: DiffBlock, match: ChainMatch, resolution: Resolution, options: ApplyOptions
) -> BlockResult:
    search_preview = preview(block.search_text, options.preview_chars)
    if resolution.error_kind is ErrorKind.AMBIGUOUS:
        previews = [
            CandidatePreview(
                strategy=c.strategy,
                start_line=c.start_line,
                end_line=c.end_line,
                similarity=c.similarity,
                preview=preview(c.matched_text, 80),
            )
            for c in resolution.contenders
        ]
        locations = ", ".join(f"{p.location} ({p.similarity:.2f})" for p in previews)
        message = (
            f"Ambiguous search text: {len(previews)} locations match equally well via "
            f"{match.strategy.value if match.strategy else 'n/a'} [{locations}]. "
            "Include more surrounding lines so the search text matches exactly one location."
        )
        return BlockResult(
            index=block.index,
            status=BlockStatus.FAILED,
            strategy_used=match.strategy,
            similarity=resolution.contenders[0].similarity if resolution.contenders else None,
            error_kind=ErrorKind.AMBIGUOUS,
            candidate_previews=previews,
            search_preview=search_preview,
            message=message,
        )

    tried = ", ".join(s.value for s in match.tried)
    message = (
        f"No match found for search text (tried: {tried}; "
        f"fuzzy threshold {options.fuzzy_threshold:.2f}). "
        "The search text must reproduce the current file content."
    )
    return BlockResult(
        index=block.index,
        status=BlockStatus.FAILED,
        error_kind=ErrorKind.NO_MATCH_FOUND,
        search_preview=search_preview,
        message=message,
    )


def _apply_block(
    state: _FoldState,
    block: DiffBlock,
    *,
    source: str,
    chain: MatchingStrategyChain,
    options: ApplyOptions,
    log,
) -> _FoldState:
    """One fold step: Pending -> Matching -> Applied | Failed."""
    started = time.perf_counter()
    blog = for_block(log, block.index)
    blog.debug(f"matching ({len(block.search_text)} chars of search text)")

    match = chain.find(state.content, block.search_text, position_hint=state.position_hint, log=blog)
    resolution = resolve_candidates(match.candidates, options.priority)

    if resolution.accepted is not None:
        candidate = resolution.accepted
        splice = apply_candidate(
            state.content, block, candidate, reindent=options.reindent_replacement
        )
        result = BlockResult(
            index=block.index,
            status=BlockStatus.APPLIED,
            strategy_used=candidate.strategy,
            similarity=candidate.similarity,
            warnings=list(splice.warnings),
            search_preview=preview(block.search_text, options.preview_chars),
            message=(
                f"applied at lines {candidate.start_line}-{candidate.end_line} "
                f"via {candidate.strategy.value} ({candidate.similarity:.2f})"
            ),
        )
        blog.debug(f"✅ {result.message}")
        content, hint = splice.content, splice.start
    else:
        result = _failure_result(block, match, resolution, options)
        blog.warning(f"failed [{result.error_kind.value}]: {result.message}")
        if options.strict:
            raise _STRICT_ERRORS[result.error_kind](result, source)
        content, hint = state.content, state.position_hint

    telemetry = state.telemetry
    if options.enable_telemetry:
        telemetry = telemetry + (
            TelemetryEntry(
                block_index=block.index,
                status=result.status,
                strategy=result.strategy_used,
                candidates_considered=len(match.candidates),
                similarity=result.similarity,
                elapsed_ms=(time.perf_counter() - started) * 1000.0,
            ),
        )
    return _FoldState(content, state.results + (result,), telemetry, hint)


def _apply_blocks(
    source: str, blocks: Sequence[DiffBlock], options: ApplyOptions, log
) -> ApplyDiffResult:
    eol = detect_eol(source)
    if eol != "\n":
        blocks = [_with_eol(b, eol) for b in blocks]

    chain = MatchingStrategyChain.from_options(options)
    step = partial(_apply_block, source=source, chain=chain, options=options, log=log)
    final = reduce(step, blocks, _FoldState(source, (), (), None))

    failed = [r for r in final.results if not r.applied]
    warnings = [f"Block {r.index + 1}: {w}" for r in final.results for w in r.warnings]
    summary = ApplySummary(
        blocks_total=len(final.results),
        blocks_applied=len(final.results) - len(failed),
        blocks_failed=len(failed),
        failed_blocks=failed,
        warnings=warnings,
    )
    log.info(
        f"Applied {summary.blocks_applied}/{summary.blocks_total} block(s); "
        f"{summary.blocks_failed} failed"
    )
    return ApplyDiffResult(
        content=final.content,
        results=summary,
        telemetry=list(final.telemetry) if options.enable_telemetry else None,
        block_results=list(final.results),
    )


def apply_diff(
    source: str,
    diff_text: str,
    options: OptionsLike = None,
    *,
    logger=None,
    log: bool = False,
) -> ApplyDiffResult:
    """
    Apply SEARCH/REPLACE blocks to `source`, in diff order.

    Every block is matched against the content as already modified by the
    blocks before it, through the configured strategy cascade (exact ->
    whitespace-insensitive -> indentation-preserving -> fuzzy by default).
    A block is applied only when its match is unambiguous.

    Args:
        source: Text to patch.
        diff_text: One or more SEARCH/REPLACE blocks; free text between
            blocks is ignored.
        options: ApplyOptions, a mapping of option names (snake_case or the
            camelCase wire names), or None for defaults.
        logger/log: Opt-in diagnostics (see patchforge._logging).

    Returns:
        ApplyDiffResult with the patched content and a per-block report.

    Raises:
        InvalidOptionsError: options are unusable (always).
        ParseError: the diff markers are malformed (always, before any block runs).
        NoMatchFoundError / AmbiguousMatchError: only with strict=True, on the
            first failing block. The error's `content` is the untouched source.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
    options = _coerce_options(options)
    blocks = parse_diff(diff_text)
    log.debug(f"Parsed {len(blocks)} block(s); strategies={[s.value for s in options.matching_strategies]}")
    return _apply_blocks(source, blocks, options, log)


def _group_by_file(diff_text: str, blocks: Sequence[DiffBlock]) -> Dict[str, List[DiffBlock]]:
    grouped: Dict[str, List[DiffBlock]] = {}
    current: Optional[str] = None
    spans = None
    for block in blocks:
        path = block.file_path or current
        if path is None:
            spans = spans or line_spans(diff_text)
            raise ParseError(
                "block has no file path; put the path on the line before its SEARCH marker",
                line=block.line,
                offset=spans[block.line - 1].start,
                block_index=block.index,
            )
        grouped.setdefault(path, []).append(block)
        current = path
    return grouped


def apply_multi_file_diff(
    files: Mapping[str, str],
    diff_text: str,
    options: OptionsLike = None,
    *,
    logger=None,
    log: bool = False,
) -> Dict[str, ApplyDiffResult]:
    """
    Apply a diff whose blocks name their target file on the line before each
    SEARCH marker:

        src/app.ts
        <<<<<<< SEARCH
        ...
        >>>>>>> REPLACE

    A block without a path targets the same file as the block before it.
    Files absent from `files` are patched starting from empty content, so a
    block with an empty search text creates them.

    Returns one ApplyDiffResult per targeted path, in order of first
    appearance. In strict mode the first failing block raises, and its
    error carries that file's untouched source.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
    options = _coerce_options(options)
    blocks = parse_diff(diff_text)
    grouped = _group_by_file(diff_text, blocks)

    results: Dict[str, ApplyDiffResult] = {}
    for path, file_blocks in grouped.items():
        log.debug(f"{path}: {len(file_blocks)} block(s)")
        results[path] = _apply_blocks(files.get(path, ""), file_blocks, options, log)
    return results

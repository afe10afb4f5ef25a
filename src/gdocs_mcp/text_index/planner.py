"""Replace planning: turn matches into ordered, non-interfering edits."""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from gdocs_mcp.text_index.errors import OutOfRangeError, UnmappableError
from gdocs_mcp.text_index.extractor import extract_document
from gdocs_mcp.text_index.models import (
    Delete,
    EditOperation,
    Insert,
    Match,
    ReplacePlan,
    TextRun,
)
from gdocs_mcp.text_index.offsets import map_to_doc_range, run_starts

logger = logging.getLogger(__name__)


def _edits_for(doc_start: int, doc_end: int, replacement: str) -> list[EditOperation]:
    edits: list[EditOperation] = []
    if doc_end > doc_start:
        edits.append(Delete(doc_start, doc_end))
    if replacement:
        edits.append(Insert(doc_start, replacement))
    return edits


def plan_replacements(
    runs: Sequence[TextRun],
    matches: Sequence[Match | tuple[int, int]],
    replacement: str,
    replace_all: bool = False,
) -> ReplacePlan:
    """Plan delete/insert edits replacing each match with ``replacement``.

    Matches are re-mapped against ``runs``. Those that cross non-text content
    or overlap an earlier planned match are skipped and returned in
    ``skipped_matches``; the rest are emitted from the highest document index
    to the lowest so applying the operations in order never shifts an edit
    that has not been applied yet.

    Args:
        runs: Run table the matches were found in.
        matches: Matches (or ``(flat_start, flat_end)`` pairs) in any order.
        replacement: Text to put in place of each match. May be empty.
        replace_all: When False only the first match in document order is planned.

    Returns:
        ReplacePlan with the operations and the planned/skipped matches.
    """
    candidates = sorted(
        (m if isinstance(m, Match) else Match(m[0], m[1]) for m in matches),
        key=lambda m: (m.flat_start, m.flat_end),
    )
    if not replace_all:
        candidates = candidates[:1]

    starts = run_starts(runs)
    planned: list[Match] = []
    skipped: list[Match] = []
    planned_end = 0
    for candidate in candidates:
        if planned and candidate.flat_start < planned_end:
            logger.debug(
                "Skipping match [%d, %d): overlaps a planned match ending at %d",
                candidate.flat_start,
                candidate.flat_end,
                planned_end,
            )
            skipped.append(Match(candidate.flat_start, candidate.flat_end))
            continue
        try:
            doc_start, doc_end = map_to_doc_range(
                runs, candidate.flat_start, candidate.flat_end, starts
            )
        except UnmappableError as e:
            logger.debug("Skipping match: %s", e)
            skipped.append(Match(candidate.flat_start, candidate.flat_end))
            continue
        planned.append(Match(candidate.flat_start, candidate.flat_end, doc_start, doc_end))
        planned_end = candidate.flat_end

    planned.sort(key=lambda m: m.doc_start, reverse=True)

    operations: list[EditOperation] = []
    for match in planned:
        operations.extend(_edits_for(match.doc_start, match.doc_end, replacement))

    return ReplacePlan(
        operations=tuple(operations),
        planned=tuple(planned),
        skipped_matches=tuple(skipped),
    )


def plan_range_rewrite(
    document: dict[str, Any],
    doc_start: int,
    doc_end: int,
    transform: Callable[[str], str],
) -> ReplacePlan:
    """Rewrite the text inside a document range, one run at a time.

    The text of every run overlapping ``[doc_start, doc_end)`` is passed
    through ``transform`` as one string and written back run by run, so
    non-text content between runs is never deleted. Within a run only the
    changed middle is rewritten (shared prefix and suffix are kept), so
    paragraph breaks the transform leaves alone are never touched.

    Raises:
        OutOfRangeError: If the range is empty or contains no text.
    """
    if doc_start >= doc_end:
        raise OutOfRangeError(f"Document range [{doc_start}, {doc_end}) is empty")

    flat = extract_document(document)

    segments: list[tuple[TextRun, int, int]] = []
    for run in flat.runs:
        if run.doc_end <= doc_start or run.doc_start >= doc_end:
            continue
        flat_from = run.flat_offset(max(doc_start, run.doc_start))
        flat_to = run.flat_offset(min(doc_end, run.doc_end))
        if flat_from < flat_to:
            segments.append((run, flat_from, flat_to))

    if not segments:
        raise OutOfRangeError(f"Document range [{doc_start}, {doc_end}) contains no text")

    originals = [flat.text[flat_from:flat_to] for _, flat_from, flat_to in segments]
    joined = transform("".join(originals))
    if len(joined) == sum(len(original) for original in originals):
        rewritten = []
        position = 0
        for original in originals:
            rewritten.append(joined[position : position + len(original)])
            position += len(original)
    else:
        # Length-changing transforms (e.g. "ß".upper()) are applied per run.
        rewritten = [transform(original) for original in originals]

    planned: list[Match] = []
    operations: list[EditOperation] = []
    for (run, flat_from, flat_to), original, replacement in reversed(
        list(zip(segments, originals, rewritten))
    ):
        if replacement == original:
            continue
        prefix, suffix = _common_affixes(original, replacement)
        changed_from = flat_from + prefix
        changed_to = flat_to - suffix
        start = run.doc_offset(changed_from)
        end = run.doc_offset(changed_to)
        planned.append(Match(changed_from, changed_to, start, end))
        operations.extend(_edits_for(start, end, replacement[prefix : len(replacement) - suffix]))

    return ReplacePlan(operations=tuple(operations), planned=tuple(planned))


def _common_affixes(original: str, replacement: str) -> tuple[int, int]:
    """Length of the shared prefix and (non-overlapping) shared suffix of two strings."""
    limit = min(len(original), len(replacement))
    prefix = 0
    while prefix < limit and original[prefix] == replacement[prefix]:
        prefix += 1
    suffix = 0
    while (
        suffix < limit - prefix
        and original[len(original) - 1 - suffix] == replacement[len(replacement) - 1 - suffix]
    ):
        suffix += 1
    return prefix, suffix

"""Mapping between flat-text offsets and document indexes."""

from bisect import bisect_right
from collections.abc import Iterable, Sequence

from gdocs_mcp.text_index.errors import OutOfRangeError, UnmappableError
from gdocs_mcp.text_index.models import Match, TextRun


def run_starts(runs: Sequence[TextRun]) -> list[int]:
    """Return the flat start of every run, for repeated lookups with the same table."""
    return [run.flat_start for run in runs]


def _run_at(runs: Sequence[TextRun], starts: Sequence[int], flat_offset: int) -> int:
    """Return the position in ``runs`` of the run containing ``flat_offset``."""
    position = bisect_right(starts, flat_offset) - 1
    if position < 0 or flat_offset >= runs[position].flat_end:
        raise OutOfRangeError(f"Flat offset {flat_offset} is not inside any text run")
    return position


def map_to_doc_range(
    runs: Sequence[TextRun],
    flat_start: int,
    flat_end: int,
    starts: Sequence[int] | None = None,
) -> tuple[int, int]:
    """Resolve a flat-text range to one contiguous document range.

    Args:
        runs: Run table of the FlatDocument the range was found in.
        flat_start: Range start in flat text (inclusive).
        flat_end: Range end in flat text (exclusive).
        starts: ``run_starts(runs)``, when the caller maps many ranges.

    Returns:
        ``(doc_start, doc_end)``.

    Raises:
        OutOfRangeError: If the range is empty or outside the runs.
        UnmappableError: If the range crosses a gap of non-text content.
    """
    if not runs:
        raise OutOfRangeError("Document has no text runs")
    text_end = runs[-1].flat_end
    if flat_start < 0 or flat_end > text_end or flat_start >= flat_end:
        raise OutOfRangeError(f"Flat range [{flat_start}, {flat_end}) is outside [0, {text_end}]")

    if starts is None:
        starts = run_starts(runs)
    first = _run_at(runs, starts, flat_start)
    last = _run_at(runs, starts, flat_end - 1)

    for position in range(first, last):
        if runs[position].doc_end != runs[position + 1].doc_start:
            raise UnmappableError(
                flat_start,
                flat_end,
                f"non-text content between index {runs[position].doc_end} "
                f"and {runs[position + 1].doc_start}",
            )

    return runs[first].doc_offset(flat_start), runs[last].doc_offset(flat_end)


def doc_index_to_flat(runs: Sequence[TextRun], doc_index: int) -> int:
    """Translate a document index to the nearest flat offset at or after it.

    Indexes inside a gap snap forward to the start of the next run; indexes
    past the last run map to the end of the flat text.
    """
    if not runs:
        return 0
    for run in runs:
        if doc_index < run.doc_start:
            return run.flat_start
        if doc_index < run.doc_end:
            return run.flat_offset(doc_index)
    return runs[-1].flat_end


def locate(runs: Sequence[TextRun], spans: Iterable[tuple[int, int]]) -> list[Match]:
    """Attach document ranges to flat-text spans.

    Spans that cross non-text content are still returned, with
    ``doc_start``/``doc_end`` left as ``None``.
    """
    starts = run_starts(runs)
    matches: list[Match] = []
    for flat_start, flat_end in spans:
        try:
            doc_start, doc_end = map_to_doc_range(runs, flat_start, flat_end, starts)
        except UnmappableError:
            matches.append(Match(flat_start, flat_end))
        else:
            matches.append(Match(flat_start, flat_end, doc_start, doc_end))
    return matches

"""Substring search over flat text."""

import re
from collections.abc import Iterator

from gdocs_mcp.text_index.errors import InvalidQueryError, OutOfRangeError


def find_all(
    text: str,
    query: str,
    case_sensitive: bool = True,
    start: int = 0,
    end: int | None = None,
    max_results: int | None = None,
) -> Iterator[tuple[int, int]]:
    """Find non-overlapping occurrences of ``query`` in ``text``.

    Offsets are always measured against ``text`` itself. Case-insensitive
    matching scans the original string rather than a lowercased copy, whose
    length can differ for some characters, and accepts a candidate only when
    it lowercases to the same text as ``query``.

    Args:
        text: Flat text to scan.
        query: Substring to look for. Must not be empty.
        case_sensitive: Match exact case when True.
        start: First flat offset to scan (inclusive).
        end: Last flat offset to scan (exclusive). Defaults to ``len(text)``.
        max_results: Stop after this many matches when set.

    Returns:
        Lazy iterator of ``(flat_start, flat_end)`` pairs in ascending order.

    Raises:
        InvalidQueryError: If ``query`` is empty.
        OutOfRangeError: If the scan bounds fall outside the text.
    """
    if not query:
        raise InvalidQueryError("Search text must not be empty")

    if end is None:
        end = len(text)
    if start < 0 or end > len(text) or start > end:
        raise OutOfRangeError(f"Scan range [{start}, {end}) is outside [0, {len(text)}]")

    return _scan(text, query, case_sensitive, start, end, max_results)


def _scan(
    text: str,
    query: str,
    case_sensitive: bool,
    start: int,
    end: int,
    max_results: int | None,
) -> Iterator[tuple[int, int]]:
    if max_results is not None and max_results <= 0:
        return

    pattern = re.compile(re.escape(query), 0 if case_sensitive else re.IGNORECASE)
    folded = query.lower()
    found = 0
    position = start
    while position <= end:
        match = pattern.search(text, position, end)
        if match is None:
            return
        if not case_sensitive and match.group().lower() != folded:
            # IGNORECASE also equates characters such as "\u017f" and "s"
            position = match.start() + 1
            continue
        yield match.start(), match.end()
        found += 1
        if max_results is not None and found >= max_results:
            return
        position = match.end()

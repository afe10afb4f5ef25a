"""Unit tests for substring search over flat text."""

import pytest

from gdocs_mcp.text_index import InvalidQueryError, OutOfRangeError, find_all


@pytest.mark.unit
class TestFindAll:
    """Tests for find_all()."""

    def test_should_find_case_insensitive_matches_in_original_offsets(self) -> None:
        """Verify IGNORECASE matches report offsets into the original text."""
        assert list(find_all("Hello WORLD world", "world", case_sensitive=False)) == [
            (6, 11),
            (12, 17),
        ]

    def test_should_respect_case_by_default(self) -> None:
        """Verify case-sensitive search skips differently cased text."""
        assert list(find_all("Hello WORLD world", "world")) == [(12, 17)]

    def test_should_not_return_overlapping_matches(self) -> None:
        """Verify scanning resumes after each match."""
        assert list(find_all("aaaa", "aa")) == [(0, 2), (2, 4)]

    def test_should_treat_query_literally(self) -> None:
        """Verify regex metacharacters in the query are not interpreted."""
        assert list(find_all("1+1=2, 1.5", "1+1")) == [(0, 3)]
        assert list(find_all("a.c abc", "a.c")) == [(0, 3)]

    def test_should_keep_offsets_when_case_folding_changes_length(self) -> None:
        """Verify offsets stay aligned when lowercasing would change length."""
        text = "İstanbul STANBUL"

        assert list(find_all(text, "stanbul", case_sensitive=False)) == [(1, 8), (9, 16)]

    @pytest.mark.parametrize(
        ("text", "query"),
        [("ſ", "s"), ("İ", "i"), ("Kaſe", "kase")],
    )
    def test_should_not_match_characters_that_only_fold_together(
        self, text: str, query: str
    ) -> None:
        """Verify case-insensitive matches must lowercase to the query."""
        assert list(find_all(text, query, case_sensitive=False)) == []

    def test_should_find_real_match_after_rejected_candidate(self) -> None:
        """Verify scanning continues past a candidate that only folds equal."""
        assert list(find_all("ſ S s", "s", case_sensitive=False)) == [(2, 3), (4, 5)]

    def test_should_limit_scan_window(self) -> None:
        """Verify start/end bound the scan and matches must fit inside."""
        text = "cat cat cat"

        assert list(find_all(text, "cat", start=1)) == [(4, 7), (8, 11)]
        assert list(find_all(text, "cat", start=0, end=6)) == [(0, 3)]

    def test_should_stop_at_max_results(self) -> None:
        """Verify max_results caps the output and non-positive means none."""
        assert list(find_all("x x x x", "x", max_results=2)) == [(0, 1), (2, 3)]
        assert list(find_all("x x x x", "x", max_results=0)) == []

    def test_should_return_nothing_for_missing_query(self) -> None:
        """Verify a query not in the text yields no spans."""
        assert list(find_all("abc", "zzz")) == []
        assert list(find_all("", "a")) == []

    def test_should_reject_empty_query_eagerly(self) -> None:
        """Verify the error is raised on call, not on first iteration."""
        with pytest.raises(InvalidQueryError):
            find_all("abc", "")

    @pytest.mark.parametrize(("start", "end"), [(-1, None), (0, 4), (3, 2)])
    def test_should_reject_bad_bounds(self, start: int, end: int | None) -> None:
        """Verify bounds outside the text raise OutOfRangeError."""
        with pytest.raises(OutOfRangeError):
            find_all("abc", "a", start=start, end=end)

    def test_should_be_lazy(self) -> None:
        """Verify results are produced on demand."""
        spans = find_all("ab ab ab", "ab")

        assert next(spans) == (0, 2)
        assert next(spans) == (3, 5)

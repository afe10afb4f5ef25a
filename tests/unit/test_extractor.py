"""Unit tests for flat-text extraction."""

from typing import Any

import pytest

from gdocs_mcp.text_index import (
    FlatDocument,
    TextRun,
    extract,
    extract_document,
    iter_paragraphs,
    paragraph_text,
    utf16_len,
)


def _run(start: int | None, content: str) -> dict[str, Any]:
    element: dict[str, Any] = {"textRun": {"content": content}}
    if start is not None:
        element["startIndex"] = start
        element["endIndex"] = start + utf16_len(content)
    return element


def _para(*elements: dict[str, Any]) -> dict[str, Any]:
    return {"paragraph": {"elements": list(elements)}}


@pytest.mark.unit
class TestUtf16Len:
    """Tests for utf16_len()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("", 0), ("abc", 3), ("é", 1), ("😀", 2), ("a😀b", 4)],
    )
    def test_should_count_code_units(self, text: str, expected: int) -> None:
        """Verify astral characters count twice."""
        assert utf16_len(text) == expected


@pytest.mark.unit
class TestExtract:
    """Tests for extract()."""

    def test_should_concatenate_runs_in_order(self) -> None:
        """Verify flat text is the runs joined with contiguous flat offsets."""
        flat = extract([_para(_run(1, "Hello "), _run(7, "world\n")), _para(_run(13, "Bye\n"))])

        assert flat.text == "Hello world\nBye\n"
        assert [(r.flat_start, r.flat_end) for r in flat.runs] == [(0, 6), (6, 12), (12, 16)]
        assert [(r.doc_start, r.doc_end) for r in flat.runs] == [(1, 7), (7, 13), (13, 17)]
        assert flat.paragraph_count == 2
        assert len(flat) == 16

    def test_should_leave_gap_for_non_text_elements(self, image_document: dict) -> None:
        """Verify an inline image consumes doc indexes but no flat text."""
        flat = extract_document(image_document)

        assert flat.text == "cat and cat\n"
        first, second = flat.runs
        assert first.doc_end == 3
        assert second.doc_start == 4
        assert first.flat_end == second.flat_start == 2

    def test_should_measure_doc_length_in_utf16(self) -> None:
        """Verify emoji occupy two doc indexes but one flat offset."""
        flat = extract([_para(_run(1, "a😀b\n"))])

        run = flat.runs[0]
        assert run.flat_length == 4
        assert run.doc_length == 5

    def test_should_place_runs_without_start_index_after_previous(self) -> None:
        """Verify missing startIndex continues from the previous run (or 0)."""
        flat = extract([_para(_run(None, "ab"), _run(None, "cd\n"))])

        assert [(r.doc_start, r.doc_end) for r in flat.runs] == [(0, 2), (2, 5)]

    def test_should_clamp_overlapping_runs(self) -> None:
        """Verify a run that starts inside its predecessor is moved after it."""
        flat = extract([_para(_run(1, "abc"), _run(2, "de\n"))])

        assert flat.runs[1].doc_start == 4

    def test_should_skip_empty_and_malformed_runs(self) -> None:
        """Verify elements without usable content contribute nothing."""
        flat = extract(
            [
                _para(
                    _run(1, ""),
                    {"startIndex": 1, "textRun": {"content": None}},
                    {"startIndex": 1, "textRun": "oops"},
                    {"startIndex": 1, "pageBreak": {}},
                    _run(2, "x\n"),
                )
            ]
        )

        assert flat.text == "x\n"
        assert len(flat.runs) == 1

    def test_should_descend_into_tables(self) -> None:
        """Verify table cell paragraphs are extracted in row order."""
        table = {
            "startIndex": 1,
            "table": {
                "tableRows": [
                    {
                        "tableCells": [
                            {"content": [_para(_run(4, "A1\n"))]},
                            {"content": [_para(_run(8, "B1\n"))]},
                        ]
                    }
                ]
            },
        }

        flat = extract([table, _para(_run(12, "after\n"))])

        assert flat.text == "A1\nB1\nafter\n"
        assert flat.runs[1].doc_start - flat.runs[0].doc_end == 1

    def test_should_return_empty_document_for_empty_body(self) -> None:
        """Verify an empty or missing body yields no text."""
        assert extract_document({}) == FlatDocument(text="")
        assert extract([]) == FlatDocument(text="")


@pytest.mark.unit
class TestParagraphHelpers:
    """Tests for iter_paragraphs() and paragraph_text()."""

    def test_should_yield_paragraphs_including_table_of_contents(self) -> None:
        """Verify paragraphs inside a tableOfContents are visited."""
        blocks = [
            {"sectionBreak": {}},
            {"tableOfContents": {"content": [_para(_run(2, "Intro\n"))]}},
            _para(_run(9, "Body\n")),
            "not a dict",
        ]

        texts = [paragraph_text(p) for p in iter_paragraphs(blocks)]

        assert texts == ["Intro", "Body"]

    def test_should_strip_only_trailing_newline(self) -> None:
        """Verify paragraph_text joins runs and drops the paragraph break."""
        paragraph = {"elements": [_run(1, "Title "), {"inlineObjectElement": {}}, _run(8, "two\n")]}

        assert paragraph_text(paragraph) == "Title two"


@pytest.mark.unit
class TestTextRunOffsets:
    """Tests for TextRun.doc_offset() and flat_offset()."""

    def test_should_convert_both_ways_across_surrogate_pairs(self) -> None:
        """Verify offsets after an emoji shift by two doc indexes."""
        run = TextRun(flat_start=10, flat_end=14, doc_start=5, doc_end=10, content="a😀bc")

        assert run.doc_offset(12) == 8
        assert run.flat_offset(8) == 12
        assert run.doc_offset(14) == 10

    def test_should_round_up_inside_surrogate_pair(self) -> None:
        """Verify an index between the halves of a pair maps to the next character."""
        run = TextRun(flat_start=0, flat_end=3, doc_start=1, doc_end=5, content="a😀b")

        assert run.flat_offset(3) == 2
        assert run.flat_offset(5) == 3

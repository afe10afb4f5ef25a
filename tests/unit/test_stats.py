"""Unit tests for document statistics, case transforms and spelling hints."""

import pytest

from gdocs_mcp.text_index import (
    FlatDocument,
    document_statistics,
    extract_document,
    spelling_suggestions,
    transform_case,
)


@pytest.mark.unit
class TestDocumentStatistics:
    """Tests for document_statistics()."""

    def test_should_count_words_characters_and_paragraphs(self, simple_document: dict) -> None:
        """Verify counts over the flat text of a two-paragraph document."""
        stats = document_statistics(extract_document(simple_document))

        assert stats == {
            "words": 5,
            "characters": 30,
            "characters_no_spaces": 25,
            "paragraphs": 2,
        }

    def test_should_handle_empty_document(self) -> None:
        """Verify an empty document has zero counts."""
        stats = document_statistics(FlatDocument(text=""))

        assert stats["words"] == 0
        assert stats["characters"] == 0
        assert stats["paragraphs"] == 0


@pytest.mark.unit
class TestTransformCase:
    """Tests for transform_case()."""

    @pytest.mark.parametrize(
        ("case_type", "expected"),
        [
            ("UPPERCASE", "HELLO  WORLD-WIDE\n"),
            ("LOWERCASE", "hello  world-wide\n"),
            ("TITLE_CASE", "Hello  World-wide\n"),
        ],
    )
    def test_should_transform_and_preserve_whitespace(self, case_type: str, expected: str) -> None:
        """Verify each case type and that spacing is untouched."""
        assert transform_case("hELLO  wORLD-WIDE\n", case_type) == expected

    def test_should_reject_unknown_case_type(self) -> None:
        """Verify unknown case types raise ValueError."""
        with pytest.raises(ValueError, match="Unknown case type"):
            transform_case("x", "SPONGEBOB")


@pytest.mark.unit
class TestSpellingSuggestions:
    """Tests for spelling_suggestions()."""

    def test_should_flag_uncommon_words_once(self) -> None:
        """Verify common and short words are ignored and duplicates collapsed."""
        issues = spelling_suggestions("The recieve is on. Recieve it, ok")

        assert [issue["word"] for issue in issues] == ["recieve"]
        assert issues[0]["suggestions"] == ["recieves", "reciev", "recieveed", "recieveing"]

    def test_should_return_nothing_for_common_text(self) -> None:
        """Verify text made only of common or short words has no issues."""
        assert spelling_suggestions("it is on the and by") == []

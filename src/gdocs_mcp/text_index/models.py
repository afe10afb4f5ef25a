"""Data types for the document text index.

All types are immutable and built fresh for every tool call.
"""

from dataclasses import dataclass, field
from typing import Any


def utf16_len(text: str) -> int:
    """Return the length of ``text`` in UTF-16 code units.

    Google Docs counts document indexes in UTF-16 code units, so characters
    outside the Basic Multilingual Plane occupy two index positions.
    """
    return len(text.encode("utf-16-le")) // 2


@dataclass(frozen=True)
class TextRun:
    """One contiguous span of plain text extracted from a text-run payload.

    Attributes:
        flat_start: Start offset in the flat text (code points, inclusive).
        flat_end: End offset in the flat text (code points, exclusive).
        doc_start: Start index in document index space (inclusive).
        doc_end: End index in document index space (exclusive).
        content: The run's text.
    """

    flat_start: int
    flat_end: int
    doc_start: int
    doc_end: int
    content: str

    @property
    def flat_length(self) -> int:
        return self.flat_end - self.flat_start

    @property
    def doc_length(self) -> int:
        return self.doc_end - self.doc_start

    def doc_offset(self, flat_offset: int) -> int:
        """Translate a flat offset inside (or at the end of) this run to a document index."""
        prefix = self.content[: flat_offset - self.flat_start]
        return self.doc_start + utf16_len(prefix)

    def flat_offset(self, doc_index: int) -> int:
        """Translate a document index inside this run to a flat offset.

        An index that falls between the two halves of a surrogate pair rounds up
        to the following character.
        """
        units = 0
        for offset, char in enumerate(self.content):
            if units >= doc_index - self.doc_start:
                return self.flat_start + offset
            units += 2 if ord(char) > 0xFFFF else 1
        return self.flat_end


@dataclass(frozen=True)
class FlatDocument:
    """Flat text of a document plus the run table that maps it back.

    Attributes:
        text: Concatenated text of every text run, in document order.
        runs: Runs in document order; contiguous in flat space.
        paragraph_count: Number of paragraph elements seen while extracting.
    """

    text: str
    runs: tuple[TextRun, ...] = ()
    paragraph_count: int = 0

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class Match:
    """A found occurrence of a query in flat text.

    ``doc_start``/``doc_end`` are ``None`` when the flat range crosses
    non-text content and has no single contiguous document range.
    """

    flat_start: int
    flat_end: int
    doc_start: int | None = None
    doc_end: int | None = None

    @property
    def mappable(self) -> bool:
        return self.doc_start is not None and self.doc_end is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "flat_start": self.flat_start,
            "flat_end": self.flat_end,
            "start_index": self.doc_start,
            "end_index": self.doc_end,
            "mappable": self.mappable,
        }


@dataclass(frozen=True)
class Delete:
    """Delete the document range ``[doc_start, doc_end)``."""

    doc_start: int
    doc_end: int

    def to_request(self) -> dict[str, Any]:
        return {
            "deleteContentRange": {
                "range": {"startIndex": self.doc_start, "endIndex": self.doc_end}
            }
        }


@dataclass(frozen=True)
class Insert:
    """Insert ``text`` at document index ``doc_index``."""

    doc_index: int
    text: str

    def to_request(self) -> dict[str, Any]:
        return {"insertText": {"location": {"index": self.doc_index}, "text": self.text}}


EditOperation = Delete | Insert


@dataclass(frozen=True)
class ReplacePlan:
    """Output of the replace planner.

    Attributes:
        operations: Edits ordered so they can be applied sequentially in one batch.
        planned: Matches that produced edits, in descending document order.
        skipped_matches: Matches left out because they could not be mapped.
    """

    operations: tuple[EditOperation, ...] = ()
    planned: tuple[Match, ...] = ()
    skipped_matches: tuple[Match, ...] = field(default_factory=tuple)

    @property
    def applied(self) -> int:
        return len(self.planned)

    @property
    def skipped(self) -> int:
        return len(self.skipped_matches)

    def to_requests(self) -> list[dict[str, Any]]:
        """Render the plan as Docs ``batchUpdate`` requests."""
        return [op.to_request() for op in self.operations]

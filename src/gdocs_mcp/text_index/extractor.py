"""Run-length text extraction from Google Docs structural content.

Walks ``body.content`` and concatenates every ``textRun`` payload into one
flat string while recording, per run, where it sits in both the flat string
and the document's own index space. Non-text elements (images, breaks, table
and cell boundaries) contribute nothing to the flat text; the index space
they consume shows up as a gap between consecutive runs.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from gdocs_mcp.text_index.models import FlatDocument, TextRun, utf16_len

logger = logging.getLogger(__name__)


def iter_paragraphs(blocks: Iterable[dict[str, Any]] | None) -> Iterator[dict[str, Any]]:
    """Yield every ``paragraph`` object in document order.

    Descends into table cells and table-of-contents content.
    """
    for block in blocks or []:
        if not isinstance(block, dict):
            continue
        if "paragraph" in block:
            yield block["paragraph"]
        elif "table" in block:
            for row in block["table"].get("tableRows", []) or []:
                for cell in row.get("tableCells", []) or []:
                    yield from iter_paragraphs(cell.get("content"))
        elif "tableOfContents" in block:
            yield from iter_paragraphs(block["tableOfContents"].get("content"))


def extract(blocks: Iterable[dict[str, Any]]) -> FlatDocument:
    """Build a FlatDocument from a sequence of structural blocks.

    Elements without a usable ``textRun.content`` contribute nothing. When an
    element has no ``startIndex`` its run is placed right after the previous
    run in document index space.

    Args:
        blocks: Structural elements as returned by the Docs API.

    Returns:
        FlatDocument with contiguous flat offsets and the supplied document indexes.
    """
    parts: list[str] = []
    runs: list[TextRun] = []
    flat_pos = 0
    paragraph_count = 0

    for paragraph in iter_paragraphs(blocks):
        paragraph_count += 1
        for element in paragraph.get("elements", []) or []:
            text_run = element.get("textRun")
            if not isinstance(text_run, dict):
                continue
            content = text_run.get("content")
            if not isinstance(content, str) or not content:
                continue

            start_index = element.get("startIndex")
            if isinstance(start_index, int) and not isinstance(start_index, bool):
                doc_start = start_index
            else:
                doc_start = runs[-1].doc_end if runs else 0

            if runs and doc_start < runs[-1].doc_end:
                logger.debug(
                    "Text run at index %s overlaps previous run ending at %s",
                    doc_start,
                    runs[-1].doc_end,
                )
                doc_start = runs[-1].doc_end

            flat_end = flat_pos + len(content)
            runs.append(
                TextRun(
                    flat_start=flat_pos,
                    flat_end=flat_end,
                    doc_start=doc_start,
                    doc_end=doc_start + utf16_len(content),
                    content=content,
                )
            )
            parts.append(content)
            flat_pos = flat_end

    return FlatDocument(text="".join(parts), runs=tuple(runs), paragraph_count=paragraph_count)


def extract_document(document: dict[str, Any]) -> FlatDocument:
    """Extract flat text from a ``documents.get`` response body."""
    return extract(document.get("body", {}).get("content", []))


def paragraph_text(paragraph: dict[str, Any]) -> str:
    """Concatenate the text runs of one paragraph, without the trailing newline."""
    text = "".join(
        element["textRun"].get("content", "")
        for element in paragraph.get("elements", []) or []
        if isinstance(element.get("textRun"), dict)
    )
    return text.rstrip("\n")

"""Document text index: flat-text extraction, search and replace planning."""

from gdocs_mcp.text_index.errors import (
    InvalidQueryError,
    OutOfRangeError,
    TextIndexError,
    UnmappableError,
)
from gdocs_mcp.text_index.extractor import (
    extract,
    extract_document,
    iter_paragraphs,
    paragraph_text,
)
from gdocs_mcp.text_index.models import (
    Delete,
    EditOperation,
    FlatDocument,
    Insert,
    Match,
    ReplacePlan,
    TextRun,
    utf16_len,
)
from gdocs_mcp.text_index.offsets import doc_index_to_flat, locate, map_to_doc_range, run_starts
from gdocs_mcp.text_index.planner import plan_range_rewrite, plan_replacements
from gdocs_mcp.text_index.search import find_all
from gdocs_mcp.text_index.stats import (
    CASE_TYPES,
    document_statistics,
    spelling_suggestions,
    transform_case,
)

__all__ = [
    "CASE_TYPES",
    "Delete",
    "EditOperation",
    "FlatDocument",
    "Insert",
    "InvalidQueryError",
    "Match",
    "OutOfRangeError",
    "ReplacePlan",
    "TextIndexError",
    "TextRun",
    "UnmappableError",
    "doc_index_to_flat",
    "document_statistics",
    "extract",
    "extract_document",
    "iter_paragraphs",
    "find_all",
    "locate",
    "map_to_doc_range",
    "paragraph_text",
    "plan_range_rewrite",
    "plan_replacements",
    "run_starts",
    "spelling_suggestions",
    "transform_case",
    "utf16_len",
]

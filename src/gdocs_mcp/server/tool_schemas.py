"""MCP tool definitions for the Google Docs server."""

from typing import Any

from mcp.types import Tool

from gdocs_mcp.docs_requests import BULLET_PRESETS, DRAWING_TYPES, NUMBERING_PRESETS, SECTION_TYPES
from gdocs_mcp.text_index.stats import CASE_TYPES
from gdocs_mcp.validation import ALIGNMENTS, HEADING_STYLES

DOCUMENT_ID = {
    "type": "string",
    "description": "Document ID (the long id in the document URL)",
}
INDEX = {"type": "integer", "description": "Document index position (1 = start of body)"}
START_INDEX = {"type": "integer", "description": "Range start index (inclusive)"}
END_INDEX = {"type": "integer", "description": "Range end index (exclusive)"}
TABLE_START_INDEX = {"type": "integer", "description": "Start index of the table element"}
NESTING_LEVEL = {
    "type": "integer",
    "minimum": 0,
    "maximum": 8,
    "default": 0,
    "description": "List nesting level applied to every item",
}
RGB_COLOR = {
    "type": "object",
    "description": "RGB color with components between 0 and 1",
    "properties": {
        "red": {"type": "number", "minimum": 0, "maximum": 1},
        "green": {"type": "number", "minimum": 0, "maximum": 1},
        "blue": {"type": "number", "minimum": 0, "maximum": 1},
    },
    "required": ["red", "green", "blue"],
}


def _schema(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required or []}


def _range_schema(extra: dict[str, Any] | None = None, required: list[str] | None = None) -> dict[str, Any]:
    properties = {
        "document_id": DOCUMENT_ID,
        "start_index": START_INDEX,
        "end_index": END_INDEX,
        **(extra or {}),
    }
    return _schema(properties, ["document_id", "start_index", "end_index", *(required or [])])


TOOLS: list[Tool] = [
    # Auth
    Tool(
        name="check_auth_status",
        description="Check whether the server is authenticated with Google and as whom",
        inputSchema=_schema({}),
    ),
    # Create
    Tool(
        name="create_document",
        description="Create a new Google Document with optional initial content",
        inputSchema=_schema(
            {
                "title": {"type": "string", "description": "Document title"},
                "initial_content": {"type": "string", "description": "Initial text content"},
            },
            ["title"],
        ),
    ),
    Tool(
        name="create_formatted_document",
        description="Create a document with a title, a Heading 1 and body text",
        inputSchema=_schema(
            {
                "title": {"type": "string", "description": "Document title"},
                "heading": {"type": "string", "description": "Heading text"},
                "body": {"type": "string", "description": "Body text"},
            },
            ["title", "heading", "body"],
        ),
    ),
    # Read
    Tool(
        name="read_document",
        description="Read the complete plain-text content of a Google Document",
        inputSchema=_schema({"document_id": DOCUMENT_ID}, ["document_id"]),
    ),
    Tool(
        name="search_documents",
        description="Search Google Docs by name. Empty query or '*' lists recent documents",
        inputSchema=_schema(
            {
                "query": {"type": "string", "description": "Text the document name contains"},
                "max_results": {
                    "type": "integer",
                    "description": "Maximum number of documents (default: 10)",
                    "default": 10,
                },
            },
            ["query"],
        ),
    ),
    # Update
    Tool(
        name="append_text",
        description="Append a paragraph of text to the end of a document",
        inputSchema=_schema(
            {"document_id": DOCUMENT_ID, "text": {"type": "string", "description": "Text to append"}},
            ["document_id", "text"],
        ),
    ),
    Tool(
        name="insert_text",
        description="Insert text at a specific index",
        inputSchema=_schema(
            {"document_id": DOCUMENT_ID, "text": {"type": "string"}, "index": INDEX},
            ["document_id", "text", "index"],
        ),
    ),
    Tool(
        name="delete_text",
        description="Delete the content in an index range",
        inputSchema=_range_schema(),
    ),
    Tool(
        name="replace_text",
        description="Replace the content in an index range with new text",
        inputSchema=_range_schema({"new_text": {"type": "string"}}, ["new_text"]),
    ),
    # Search
    Tool(
        name="find_and_replace",
        description=(
            "Find text in the document and replace it. Replaces the first occurrence "
            "unless replace_all is true. Occurrences spanning non-text content are skipped"
        ),
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "find_text": {"type": "string", "description": "Text to find"},
                "replace_text": {"type": "string", "description": "Replacement text (may be empty)"},
                "match_case": {"type": "boolean", "default": False},
                "replace_all": {"type": "boolean", "default": False},
            },
            ["document_id", "find_text", "replace_text"],
        ),
    ),
    Tool(
        name="search_text_in_document",
        description="Find occurrences of text and return their document index ranges with context",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "search_text": {"type": "string", "description": "Text to search for"},
                "match_case": {"type": "boolean", "default": False},
                "max_results": {"type": "integer", "default": 10},
                "start_index": {
                    "type": "integer",
                    "description": "Only search from this document index (optional)",
                },
                "end_index": {
                    "type": "integer",
                    "description": "Only search up to this document index (optional)",
                },
            },
            ["document_id", "search_text"],
        ),
    ),
    Tool(
        name="get_word_count",
        description="Get word, character and paragraph counts for a document",
        inputSchema=_schema({"document_id": DOCUMENT_ID}, ["document_id"]),
    ),
    Tool(
        name="spell_check",
        description="Heuristic spell check of the given text with simple suggestions",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "text": {"type": "string", "description": "Text to check"},
            },
            ["document_id", "text"],
        ),
    ),
    # Format
    Tool(
        name="change_font",
        description="Change the font family of a text range",
        inputSchema=_range_schema(
            {"font_family": {"type": "string", "description": "Font family, e.g. Arial"}},
            ["font_family"],
        ),
    ),
    Tool(
        name="change_font_size",
        description="Change the font size of a text range",
        inputSchema=_range_schema(
            {"font_size": {"type": "number", "description": "Size in points (6-400)"}},
            ["font_size"],
        ),
    ),
    Tool(
        name="change_font_weight",
        description="Make a text range bold or normal weight",
        inputSchema=_range_schema({"bold": {"type": "boolean"}}, ["bold"]),
    ),
    Tool(
        name="change_font_style",
        description="Make a text range italic or upright",
        inputSchema=_range_schema({"italic": {"type": "boolean"}}, ["italic"]),
    ),
    Tool(
        name="apply_font_formatting",
        description="Apply several font options to a text range at once",
        inputSchema=_range_schema(
            {
                "font_family": {"type": "string"},
                "font_size": {"type": "number"},
                "bold": {"type": "boolean"},
                "italic": {"type": "boolean"},
                "underline": {"type": "boolean"},
                "strikethrough": {"type": "boolean"},
            }
        ),
    ),
    Tool(
        name="format_text",
        description="Apply bold, italic, underline, size and colors to a text range",
        inputSchema=_range_schema(
            {
                "bold": {"type": "boolean"},
                "italic": {"type": "boolean"},
                "underline": {"type": "boolean"},
                "strikethrough": {"type": "boolean"},
                "font_size": {"type": "number"},
                "foreground_color": RGB_COLOR,
                "background_color": RGB_COLOR,
            }
        ),
    ),
    Tool(
        name="apply_heading",
        description="Apply a named paragraph style (title, headings, normal text)",
        inputSchema=_range_schema(
            {"heading_style": {"type": "string", "enum": list(HEADING_STYLES)}},
            ["heading_style"],
        ),
    ),
    Tool(
        name="set_alignment",
        description="Set paragraph alignment",
        inputSchema=_range_schema(
            {"alignment": {"type": "string", "enum": list(ALIGNMENTS)}},
            ["alignment"],
        ),
    ),
    Tool(
        name="insert_table",
        description="Insert an empty table",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "rows": {"type": "integer", "minimum": 1, "maximum": 20},
                "columns": {"type": "integer", "minimum": 1, "maximum": 20},
            },
            ["document_id", "index", "rows", "columns"],
        ),
    ),
    Tool(
        name="insert_page_break",
        description="Insert a page break",
        inputSchema=_schema({"document_id": DOCUMENT_ID, "index": INDEX}, ["document_id", "index"]),
    ),
    Tool(
        name="add_hyperlink",
        description="Link a text range to a URL",
        inputSchema=_range_schema({"url": {"type": "string", "description": "http(s) URL"}}, ["url"]),
    ),
    Tool(
        name="create_bulleted_list",
        description="Insert items as a bulleted list",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "items": {"type": "array", "items": {"type": "string"}},
                "bullet_style": {
                    "type": "string",
                    "enum": list(BULLET_PRESETS),
                    "default": "BULLET_DISC_CIRCLE_SQUARE",
                },
                "nesting_level": NESTING_LEVEL,
            },
            ["document_id", "index", "items"],
        ),
    ),
    Tool(
        name="create_numbered_list",
        description="Insert items as a numbered list",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "items": {"type": "array", "items": {"type": "string"}},
                "numbering_format": {
                    "type": "string",
                    "enum": list(NUMBERING_PRESETS),
                    "default": "DECIMAL_DECIMAL",
                },
                "nesting_level": NESTING_LEVEL,
            },
            ["document_id", "index", "items"],
        ),
    ),
    Tool(
        name="set_line_spacing",
        description="Set line spacing for paragraphs in a range",
        inputSchema=_range_schema(
            {
                "line_spacing": {
                    "type": "string",
                    "enum": ["SINGLE", "ONE_POINT_FIVE", "DOUBLE", "CUSTOM"],
                },
                "custom_spacing": {
                    "type": "number",
                    "description": "Multiplier when line_spacing is CUSTOM (e.g. 1.2)",
                },
            },
            ["line_spacing"],
        ),
    ),
    Tool(
        name="set_paragraph_spacing",
        description="Set space before and after paragraphs, in points",
        inputSchema=_range_schema(
            {"space_before": {"type": "number"}, "space_after": {"type": "number"}}
        ),
    ),
    Tool(
        name="transform_text_case",
        description="Change a text range to upper, lower or title case",
        inputSchema=_range_schema(
            {"case_type": {"type": "string", "enum": list(CASE_TYPES)}},
            ["case_type"],
        ),
    ),
    Tool(
        name="apply_subscript",
        description="Make a text range subscript",
        inputSchema=_range_schema(),
    ),
    Tool(
        name="apply_superscript",
        description="Make a text range superscript",
        inputSchema=_range_schema(),
    ),
    # Tables
    Tool(
        name="format_table",
        description="Set borders, cell background and header row of a table",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "table_start_index": TABLE_START_INDEX,
                "border_style": {"type": "string", "enum": ["SOLID", "DASHED", "DOTTED", "NONE"]},
                "border_color": RGB_COLOR,
                "cell_background_color": RGB_COLOR,
                "header_row": {"type": "boolean", "description": "Make the first row bold"},
            },
            ["document_id", "table_start_index"],
        ),
    ),
    Tool(
        name="merge_table_cells",
        description="Merge a rectangle of table cells (row/column indexes are 0-based, inclusive)",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "table_start_index": TABLE_START_INDEX,
                "start_row": {"type": "integer"},
                "start_column": {"type": "integer"},
                "end_row": {"type": "integer"},
                "end_column": {"type": "integer"},
            },
            ["document_id", "table_start_index", "start_row", "start_column", "end_row", "end_column"],
        ),
    ),
    Tool(
        name="insert_table_row",
        description="Insert a row above or below a table row",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "table_start_index": TABLE_START_INDEX,
                "row_index": {"type": "integer"},
                "insert_below": {"type": "boolean", "default": True},
            },
            ["document_id", "table_start_index", "row_index"],
        ),
    ),
    Tool(
        name="insert_table_column",
        description="Insert a column left or right of a table column",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "table_start_index": TABLE_START_INDEX,
                "column_index": {"type": "integer"},
                "insert_right": {"type": "boolean", "default": True},
            },
            ["document_id", "table_start_index", "column_index"],
        ),
    ),
    Tool(
        name="delete_table_row",
        description="Delete a table row",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "table_start_index": TABLE_START_INDEX,
                "row_index": {"type": "integer"},
            },
            ["document_id", "table_start_index", "row_index"],
        ),
    ),
    Tool(
        name="delete_table_column",
        description="Delete a table column",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "table_start_index": TABLE_START_INDEX,
                "column_index": {"type": "integer"},
            },
            ["document_id", "table_start_index", "column_index"],
        ),
    ),
    Tool(
        name="set_table_column_width",
        description="Set a fixed width for a table column, in points",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "table_start_index": TABLE_START_INDEX,
                "column_index": {"type": "integer"},
                "width": {"type": "number"},
            },
            ["document_id", "table_start_index", "column_index", "width"],
        ),
    ),
    # Media
    Tool(
        name="insert_image_from_url",
        description="Insert an image from a public URL",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "image_url": {"type": "string"},
                "width": {"type": "number", "description": "Width in points"},
                "height": {"type": "number", "description": "Height in points"},
            },
            ["document_id", "index", "image_url"],
        ),
    ),
    Tool(
        name="resize_image",
        description="Resize the inline image found in an index range",
        inputSchema=_range_schema(
            {"width": {"type": "number"}, "height": {"type": "number"}},
            ["width", "height"],
        ),
    ),
    Tool(
        name="set_image_alignment",
        description="Align the paragraph holding an image",
        inputSchema=_range_schema(
            {"alignment": {"type": "string", "enum": ["LEFT", "CENTER", "RIGHT"]}},
            ["alignment"],
        ),
    ),
    Tool(
        name="add_image_caption",
        description="Add a caption paragraph after an image",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "image_index": {"type": "integer", "description": "Index of the image"},
                "caption": {"type": "string"},
            },
            ["document_id", "image_index", "caption"],
        ),
    ),
    Tool(
        name="insert_drawing",
        description="Insert a simple shape as an SVG image",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "drawing_type": {"type": "string", "enum": list(DRAWING_TYPES)},
                "width": {"type": "number", "default": 100},
                "height": {"type": "number", "default": 100},
                "fill_color": RGB_COLOR,
            },
            ["document_id", "index", "drawing_type"],
        ),
    ),
    # Structure
    Tool(
        name="insert_table_of_contents",
        description="Insert a linked list of the document's headings",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "title": {"type": "string", "default": "Table of Contents"},
                "max_depth": {"type": "integer", "minimum": 1, "maximum": 6, "default": 3},
            },
            ["document_id", "index"],
        ),
    ),
    Tool(
        name="insert_section_break",
        description="Insert a section break",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "break_type": {"type": "string", "enum": list(SECTION_TYPES), "default": "NEXT_PAGE"},
            },
            ["document_id", "index"],
        ),
    ),
    Tool(
        name="insert_bookmark",
        description="Create a named range that marks a position or span",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "index": INDEX,
                "end_index": {
                    "type": "integer",
                    "description": "End of the marked span (default: index + 1)",
                },
                "bookmark_name": {"type": "string"},
            },
            ["document_id", "index", "bookmark_name"],
        ),
    ),
    Tool(
        name="add_cross_reference",
        description="Replace a range with reference text linked to a bookmark",
        inputSchema=_range_schema(
            {
                "reference_text": {"type": "string"},
                "target_bookmark": {"type": "string", "description": "Bookmark id to link to"},
            },
            ["reference_text", "target_bookmark"],
        ),
    ),
    Tool(
        name="insert_header",
        description="Set the text of the default page header",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "header_text": {"type": "string"},
                "page_number": {"type": "boolean", "default": False},
            },
            ["document_id", "header_text"],
        ),
    ),
    Tool(
        name="insert_footer",
        description="Set the text of the default page footer",
        inputSchema=_schema(
            {
                "document_id": DOCUMENT_ID,
                "footer_text": {"type": "string"},
                "page_number": {"type": "boolean", "default": True},
            },
            ["document_id", "footer_text"],
        ),
    ),
    Tool(
        name="insert_footnote",
        description="Insert a footnote reference with the given text",
        inputSchema=_schema(
            {"document_id": DOCUMENT_ID, "index": INDEX, "footnote_text": {"type": "string"}},
            ["document_id", "index", "footnote_text"],
        ),
    ),
]

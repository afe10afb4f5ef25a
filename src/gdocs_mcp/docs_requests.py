"""Builders for Google Docs ``batchUpdate`` request bodies.

Every function returns a plain dict ready to be placed in the ``requests``
list of ``documents.batchUpdate``. Nothing here talks to the network.
"""

import base64
from typing import Any

from gdocs_mcp.text_index.models import utf16_len

BULLET_PRESETS = (
    "BULLET_DISC_CIRCLE_SQUARE",
    "BULLET_DIAMONDX_ARROW3D_SQUARE",
    "BULLET_CHECKBOX",
)

NUMBERING_PRESETS = {
    "DECIMAL_DECIMAL": "NUMBERED_DECIMAL_NESTED",
    "UPPER_ROMAN": "NUMBERED_UPPERROMAN_UPPERALPHA_DECIMAL",
    "LOWER_ROMAN": "NUMBERED_DECIMAL_ALPHA_ROMAN",
    "UPPER_ALPHA": "NUMBERED_UPPERALPHA_ALPHA_ROMAN",
    "LOWER_ALPHA": "NUMBERED_DECIMAL_ALPHA_ROMAN_PARENS",
}

LINE_SPACING_PERCENT = {"SINGLE": 100, "ONE_POINT_FIVE": 150, "DOUBLE": 200}

SECTION_TYPES = ("NEXT_PAGE", "CONTINUOUS")

BORDER_DASH_STYLES = {"SOLID": "SOLID", "DASHED": "DASH", "DOTTED": "DOT", "NONE": "SOLID"}

DRAWING_TYPES = ("RECTANGLE", "CIRCLE", "TRIANGLE", "ARROW", "LINE")


def _range(start_index: int, end_index: int, segment_id: str | None = None) -> dict[str, Any]:
    result: dict[str, Any] = {"startIndex": start_index, "endIndex": end_index}
    if segment_id:
        result["segmentId"] = segment_id
    return result


def _location(index: int, segment_id: str | None = None) -> dict[str, Any]:
    result: dict[str, Any] = {"index": index}
    if segment_id:
        result["segmentId"] = segment_id
    return result


def _dimension(magnitude: float, unit: str = "PT") -> dict[str, Any]:
    return {"magnitude": magnitude, "unit": unit}


def _table_cell_location(table_start_index: int, row_index: int, column_index: int) -> dict[str, Any]:
    return {
        "tableStartLocation": {"index": table_start_index},
        "rowIndex": row_index,
        "columnIndex": column_index,
    }


def rgb_color(color: dict[str, float]) -> dict[str, Any]:
    """Wrap an ``{"red", "green", "blue"}`` mapping as an OptionalColor."""
    return {
        "color": {
            "rgbColor": {
                "red": color["red"],
                "green": color["green"],
                "blue": color["blue"],
            }
        }
    }


def text_style_from_options(
    font_family: str | None = None,
    font_size: float | None = None,
    bold: bool | None = None,
    italic: bool | None = None,
    underline: bool | None = None,
    strikethrough: bool | None = None,
    foreground_color: dict[str, float] | None = None,
    background_color: dict[str, float] | None = None,
) -> tuple[dict[str, Any], list[str], list[str]]:
    """Build a TextStyle from optional formatting options.

    Options left as ``None`` are not touched.

    Returns:
        Tuple of (text style, field mask entries, human-readable labels).
    """
    style: dict[str, Any] = {}
    fields: list[str] = []
    labels: list[str] = []

    if font_family:
        style["weightedFontFamily"] = {"fontFamily": font_family}
        fields.append("weightedFontFamily")
        labels.append(f"Font: {font_family}")
    if font_size:
        style["fontSize"] = _dimension(font_size)
        fields.append("fontSize")
        labels.append(f"Size: {font_size}pt")
    for name, value in (
        ("bold", bold),
        ("italic", italic),
        ("underline", underline),
        ("strikethrough", strikethrough),
    ):
        if value is not None:
            style[name] = bool(value)
            fields.append(name)
            labels.append(f"{name.capitalize()}: {'Yes' if value else 'No'}")
    if foreground_color:
        style["foregroundColor"] = rgb_color(foreground_color)
        fields.append("foregroundColor")
        labels.append("Text color")
    if background_color:
        style["backgroundColor"] = rgb_color(background_color)
        fields.append("backgroundColor")
        labels.append("Highlight color")

    return style, fields, labels


# Text


def insert_text(index: int, text: str, segment_id: str | None = None) -> dict[str, Any]:
    return {"insertText": {"location": _location(index, segment_id), "text": text}}


def insert_text_at_end(text: str, segment_id: str | None = None) -> dict[str, Any]:
    """Append ``text`` to the end of the body (or of ``segment_id``)."""
    end_of_segment: dict[str, Any] = {}
    if segment_id:
        end_of_segment["segmentId"] = segment_id
    return {"insertText": {"endOfSegmentLocation": end_of_segment, "text": text}}


def delete_range(start_index: int, end_index: int, segment_id: str | None = None) -> dict[str, Any]:
    return {"deleteContentRange": {"range": _range(start_index, end_index, segment_id)}}


# Styles


def update_text_style(
    start_index: int,
    end_index: int,
    text_style: dict[str, Any],
    fields: list[str] | str,
) -> dict[str, Any]:
    if not isinstance(fields, str):
        fields = ",".join(fields)
    return {
        "updateTextStyle": {
            "range": _range(start_index, end_index),
            "textStyle": text_style,
            "fields": fields,
        }
    }


def update_paragraph_style(
    start_index: int,
    end_index: int,
    paragraph_style: dict[str, Any],
    fields: list[str] | str,
) -> dict[str, Any]:
    if not isinstance(fields, str):
        fields = ",".join(fields)
    return {
        "updateParagraphStyle": {
            "range": _range(start_index, end_index),
            "paragraphStyle": paragraph_style,
            "fields": fields,
        }
    }


def line_spacing_percent(line_spacing: str, custom_spacing: float | None = None) -> float:
    """Translate a named line spacing (or a custom multiplier) to the API's percentage.

    Raises:
        ValueError: If ``line_spacing`` is ``CUSTOM`` without ``custom_spacing``,
            or is not a known name.
    """
    if line_spacing == "CUSTOM":
        if custom_spacing is None:
            raise ValueError("custom_spacing is required when line_spacing is CUSTOM")
        return round(custom_spacing * 100, 2)
    try:
        return LINE_SPACING_PERCENT[line_spacing]
    except KeyError:
        raise ValueError(f"Unknown line spacing: {line_spacing}") from None


def create_paragraph_bullets(start_index: int, end_index: int, preset: str) -> dict[str, Any]:
    return {
        "createParagraphBullets": {
            "range": _range(start_index, end_index),
            "bulletPreset": preset,
        }
    }


# Structural inserts


def insert_table(index: int, rows: int, columns: int) -> dict[str, Any]:
    return {"insertTable": {"location": _location(index), "rows": rows, "columns": columns}}


def insert_page_break(index: int) -> dict[str, Any]:
    return {"insertPageBreak": {"location": _location(index)}}


def insert_section_break(index: int, section_type: str = "NEXT_PAGE") -> dict[str, Any]:
    return {"insertSectionBreak": {"location": _location(index), "sectionType": section_type}}


def create_named_range(name: str, start_index: int, end_index: int) -> dict[str, Any]:
    return {"createNamedRange": {"name": name, "range": _range(start_index, end_index)}}


def create_header(header_type: str = "DEFAULT") -> dict[str, Any]:
    return {"createHeader": {"type": header_type}}


def create_footer(footer_type: str = "DEFAULT") -> dict[str, Any]:
    return {"createFooter": {"type": footer_type}}


def create_footnote(index: int) -> dict[str, Any]:
    return {"createFootnote": {"location": _location(index)}}


def insert_table_of_contents(
    index: int,
    title: str,
    headings: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Build a static, linked table of contents from document headings.

    The title becomes a HEADING_1 paragraph followed by one paragraph per
    heading, indented by level and linked to the heading.

    Args:
        index: Document index to insert at.
        title: Title paragraph text.
        headings: Dicts with ``text``, ``heading_id`` and ``level`` (1-6).

    Returns:
        List of requests, to be sent in order in one batch.
    """
    lines = [title] + [heading["text"] for heading in headings]
    requests = [insert_text(index, "\n".join(lines) + "\n")]

    title_end = index + utf16_len(title)
    requests.append(
        update_paragraph_style(index, title_end + 1, {"namedStyleType": "HEADING_1"}, "namedStyleType")
    )

    cursor = title_end + 1
    for heading in headings:
        length = utf16_len(heading["text"])
        if length:
            requests.append(
                update_paragraph_style(
                    cursor,
                    cursor + length + 1,
                    {
                        "namedStyleType": "NORMAL_TEXT",
                        "indentStart": _dimension(18 * (heading["level"] - 1)),
                    },
                    "namedStyleType,indentStart",
                )
            )
            if heading.get("heading_id"):
                requests.append(
                    update_text_style(
                        cursor,
                        cursor + length,
                        {"link": {"headingId": heading["heading_id"]}},
                        "link",
                    )
                )
        cursor += length + 1

    return requests


# Tables


def insert_table_row(table_start_index: int, row_index: int, insert_below: bool = True) -> dict[str, Any]:
    return {
        "insertTableRow": {
            "tableCellLocation": _table_cell_location(table_start_index, row_index, 0),
            "insertBelow": insert_below,
        }
    }


def insert_table_column(
    table_start_index: int, column_index: int, insert_right: bool = True
) -> dict[str, Any]:
    return {
        "insertTableColumn": {
            "tableCellLocation": _table_cell_location(table_start_index, 0, column_index),
            "insertRight": insert_right,
        }
    }


def delete_table_row(table_start_index: int, row_index: int) -> dict[str, Any]:
    return {
        "deleteTableRow": {
            "tableCellLocation": _table_cell_location(table_start_index, row_index, 0),
        }
    }


def delete_table_column(table_start_index: int, column_index: int) -> dict[str, Any]:
    return {
        "deleteTableColumn": {
            "tableCellLocation": _table_cell_location(table_start_index, 0, column_index),
        }
    }


def merge_table_cells(
    table_start_index: int,
    start_row: int,
    start_column: int,
    end_row: int,
    end_column: int,
) -> dict[str, Any]:
    """Merge the inclusive cell rectangle ``(start_row, start_column)..(end_row, end_column)``."""
    return {
        "mergeTableCells": {
            "tableRange": {
                "tableCellLocation": _table_cell_location(table_start_index, start_row, start_column),
                "rowSpan": end_row - start_row + 1,
                "columnSpan": end_column - start_column + 1,
            }
        }
    }


def update_table_cell_style(
    table_start_index: int,
    cell_style: dict[str, Any],
    fields: list[str] | str,
) -> dict[str, Any]:
    """Apply ``cell_style`` to every cell of the table at ``table_start_index``."""
    if not isinstance(fields, str):
        fields = ",".join(fields)
    return {
        "updateTableCellStyle": {
            "tableStartLocation": {"index": table_start_index},
            "tableCellStyle": cell_style,
            "fields": fields,
        }
    }


def table_border_style(border_style: str, color: dict[str, float] | None = None) -> tuple[dict[str, Any], list[str]]:
    """Build a cell style setting all four borders.

    ``NONE`` produces zero-width borders.
    """
    border = {
        "color": rgb_color(color or {"red": 0.0, "green": 0.0, "blue": 0.0}),
        "width": _dimension(0 if border_style == "NONE" else 1),
        "dashStyle": BORDER_DASH_STYLES[border_style],
    }
    sides = ["borderTop", "borderBottom", "borderLeft", "borderRight"]
    return {side: dict(border) for side in sides}, sides


def update_table_column_width(table_start_index: int, column_index: int, width: float) -> dict[str, Any]:
    return {
        "updateTableColumnProperties": {
            "tableStartLocation": {"index": table_start_index},
            "columnIndices": [column_index],
            "tableColumnProperties": {
                "widthType": "FIXED_WIDTH",
                "width": _dimension(width),
            },
            "fields": "widthType,width",
        }
    }


# Images


def insert_inline_image(
    index: int,
    uri: str,
    width: float | None = None,
    height: float | None = None,
) -> dict[str, Any]:
    request: dict[str, Any] = {"location": _location(index), "uri": uri}
    if width and height:
        request["objectSize"] = {"width": _dimension(width), "height": _dimension(height)}
    return {"insertInlineImage": request}


def drawing_svg_uri(
    drawing_type: str,
    width: float = 100,
    height: float = 100,
    fill_color: dict[str, float] | None = None,
) -> str:
    """Render a simple shape as a base64 SVG data URI."""
    if fill_color:
        red, green, blue = (round(fill_color[c] * 255) for c in ("red", "green", "blue"))
    else:
        red = green = blue = 200
    fill = f"rgb({red},{green},{blue})"
    mid_x, mid_y = width / 2, height / 2

    if drawing_type == "RECTANGLE":
        shape = f'<rect width="{width}" height="{height}" fill="{fill}" stroke="black" stroke-width="2"/>'
    elif drawing_type == "CIRCLE":
        radius = min(width, height) / 2
        shape = (
            f'<circle cx="{mid_x}" cy="{mid_y}" r="{radius}" fill="{fill}" '
            'stroke="black" stroke-width="2"/>'
        )
    elif drawing_type == "TRIANGLE":
        shape = (
            f'<polygon points="{mid_x},0 0,{height} {width},{height}" fill="{fill}" '
            'stroke="black" stroke-width="2"/>'
        )
    elif drawing_type == "ARROW":
        shape = (
            f'<path d="M0,{mid_y} L{width - 20},{mid_y} M{width - 30},{mid_y - 10} '
            f'L{width - 20},{mid_y} L{width - 30},{mid_y + 10}" '
            'stroke="black" stroke-width="3" fill="none"/>'
        )
    elif drawing_type == "LINE":
        shape = f'<line x1="0" y1="0" x2="{width}" y2="{height}" stroke="black" stroke-width="3"/>'
    else:
        raise ValueError(f"Unknown drawing type: {drawing_type}")

    svg = (
        f'<svg width="{width}" height="{height}" xmlns="http://www.w3.org/2000/svg">'
        f"{shape}</svg>"
    )
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")

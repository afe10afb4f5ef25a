"""Input validation, sanitization and API error mapping for tool arguments."""

import math
import re
import unicodedata
from enum import Enum
from typing import Any
from urllib.parse import urlparse

MAX_INDEX = 1_000_000
MAX_RANGE_SIZE = 100_000
MAX_TEXT_LENGTH = 100_000
MAX_TITLE_LENGTH = 255
MAX_TABLE_SIZE = 20
MAX_IMAGE_DIMENSION = 3000
MAX_BATCH_REQUESTS = 500

ALIGNMENTS = ("START", "CENTER", "END", "JUSTIFIED")
HEADING_STYLES = (
    "NORMAL_TEXT",
    "HEADING_1",
    "HEADING_2",
    "HEADING_3",
    "HEADING_4",
    "HEADING_5",
    "HEADING_6",
    "TITLE",
    "SUBTITLE",
)

_DOCUMENT_ID_RE = re.compile(r"^[a-zA-Z0-9_-]+$")


class ValidationError(ValueError):
    """Raised when a tool argument fails validation.

    Attributes:
        field: Name of the offending argument, when one applies.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ErrorCode(str, Enum):
    """Error codes reported in failed tool results."""

    INVALID_DOCUMENT_ID = "INVALID_DOCUMENT_ID"
    INVALID_INDEX = "INVALID_INDEX"
    INVALID_RANGE = "INVALID_RANGE"
    INVALID_TEXT = "INVALID_TEXT"
    INVALID_URL = "INVALID_URL"
    INVALID_COLOR = "INVALID_COLOR"
    INVALID_DIMENSIONS = "INVALID_DIMENSIONS"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    API_ERROR = "API_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def validate_document_id(document_id: Any) -> str:
    """Check that ``document_id`` looks like a Google Docs id and return it."""
    if not document_id or not isinstance(document_id, str):
        raise ValidationError("Document ID must be a non-empty string", "document_id")
    if len(document_id) < 10 or len(document_id) > 100:
        raise ValidationError("Document ID has invalid length", "document_id")
    if not _DOCUMENT_ID_RE.match(document_id):
        raise ValidationError("Document ID contains invalid characters", "document_id")
    return document_id


def validate_index(index: Any, field: str = "index", minimum: int = 0) -> int:
    """Check a document index and return it as an int.

    Body positions start at 1; pass ``minimum=1`` where index 0 is not a
    valid target.
    """
    if not _is_number(index):
        raise ValidationError("Index must be a number", field)
    if not _is_int(index):
        raise ValidationError("Index must be an integer", field)
    if index < minimum:
        raise ValidationError(
            "Index must be non-negative" if minimum == 0 else f"Index must be at least {minimum}",
            field,
        )
    if index > MAX_INDEX:
        raise ValidationError("Index exceeds maximum document size", field)
    return int(index)


def validate_range(start_index: Any, end_index: Any) -> tuple[int, int]:
    """Check a half-open document range and return it as ints."""
    start = validate_index(start_index, "start_index")
    end = validate_index(end_index, "end_index")
    if start >= end:
        raise ValidationError("start_index must be less than end_index", "start_index")
    if end - start > MAX_RANGE_SIZE:
        raise ValidationError(
            f"Range size exceeds maximum ({MAX_RANGE_SIZE:,} characters)", "end_index"
        )
    return start, end


def validate_text(text: Any, max_length: int = MAX_TEXT_LENGTH, field: str = "text") -> str:
    if not isinstance(text, str):
        raise ValidationError("Text must be a string", field)
    if len(text) > max_length:
        raise ValidationError(f"Text exceeds maximum length of {max_length} characters", field)
    return text


def validate_title(title: Any) -> str:
    if not isinstance(title, str):
        raise ValidationError("Title must be a string", "title")
    if not title:
        raise ValidationError("Title cannot be empty", "title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title cannot exceed {MAX_TITLE_LENGTH} characters", "title")
    return title


def validate_color_component(value: Any, component: str) -> float:
    if not _is_number(value):
        raise ValidationError(f"{component} must be a number", component)
    if value < 0 or value > 1:
        raise ValidationError(f"{component} must be between 0 and 1", component)
    return float(value)


def validate_rgb_color(color: Any, field: str = "color") -> dict[str, float]:
    """Check an ``{"red", "green", "blue"}`` mapping with components in [0, 1].

    Returns:
        The color with float components.
    """
    if not isinstance(color, dict):
        raise ValidationError("Color must be an object with red, green, blue properties", field)
    return {
        component: validate_color_component(color.get(component), component)
        for component in ("red", "green", "blue")
    }


def validate_font_size(size: Any) -> float:
    if not _is_number(size):
        raise ValidationError("Font size must be a number", "font_size")
    if not math.isfinite(size):
        raise ValidationError("Font size must be a finite number", "font_size")
    if size < 6 or size > 400:
        raise ValidationError("Font size must be between 6 and 400 points", "font_size")
    return size


def validate_url(url: Any, field: str = "url") -> str:
    """Check that ``url`` is an absolute http(s) URL."""
    if not isinstance(url, str):
        raise ValidationError("URL must be a string", field)
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ValidationError("Invalid URL format", field) from e
    if parsed.scheme not in ("http", "https"):
        raise ValidationError("URL must use HTTP or HTTPS protocol", field)
    if not parsed.netloc:
        raise ValidationError("Invalid URL format", field)
    return url


def validate_table_dimensions(rows: Any, columns: Any) -> tuple[int, int]:
    if not _is_number(rows) or not _is_number(columns):
        raise ValidationError("Rows and columns must be numbers")
    if not _is_int(rows) or not _is_int(columns):
        raise ValidationError("Rows and columns must be integers")
    if rows < 1 or rows > MAX_TABLE_SIZE:
        raise ValidationError(f"Rows must be between 1 and {MAX_TABLE_SIZE}", "rows")
    if columns < 1 or columns > MAX_TABLE_SIZE:
        raise ValidationError(f"Columns must be between 1 and {MAX_TABLE_SIZE}", "columns")
    return int(rows), int(columns)


def validate_image_dimensions(width: Any, height: Any) -> tuple[float, float]:
    if not _is_number(width) or not _is_number(height):
        raise ValidationError("Width and height must be numbers")
    if width <= 0 or height <= 0:
        raise ValidationError("Width and height must be positive")
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise ValidationError(f"Image dimensions cannot exceed {MAX_IMAGE_DIMENSION} pixels")
    return width, height


def validate_choice(value: Any, choices: tuple[str, ...], field: str) -> str:
    """Check that ``value`` is one of ``choices``."""
    if value not in choices:
        raise ValidationError(f"{field} must be one of: {', '.join(choices)}", field)
    return value


def validate_alignment(alignment: Any) -> str:
    return validate_choice(alignment, ALIGNMENTS, "alignment")


def validate_heading_style(style: Any) -> str:
    return validate_choice(style, HEADING_STYLES, "heading_style")


def validate_line_spacing(spacing: Any) -> float:
    if not _is_number(spacing):
        raise ValidationError("Line spacing must be a number", "line_spacing")
    if spacing < 0.5 or spacing > 10:
        raise ValidationError("Line spacing must be between 0.5 and 10", "line_spacing")
    return spacing


def validate_nesting_level(level: Any) -> int:
    if not _is_int(level):
        raise ValidationError("Nesting level must be an integer", "nesting_level")
    if level < 0 or level > 8:
        raise ValidationError("Nesting level must be between 0 and 8", "nesting_level")
    return int(level)


def validate_batch_requests(requests: Any) -> list[dict[str, Any]]:
    if not isinstance(requests, list):
        raise ValidationError("Requests must be a list")
    if not requests:
        raise ValidationError("Requests list cannot be empty")
    if len(requests) > MAX_BATCH_REQUESTS:
        raise ValidationError(
            f"Cannot process more than {MAX_BATCH_REQUESTS} requests in a single batch"
        )
    return requests


def sanitize_text(text: Any) -> str:
    """Drop NUL characters and NFC-normalize ``text``. Non-strings become ``""``."""
    if not isinstance(text, str):
        return ""
    return unicodedata.normalize("NFC", text.replace("\0", ""))


def sanitize_search_query(query: Any) -> str:
    """Make ``query`` safe to embed in a quoted Drive ``q`` string literal."""
    if not isinstance(query, str):
        return ""
    query = query.replace("\\", "\\\\").replace("'", "\\'")
    query = query.replace("<", "").replace(">", "")
    return sanitize_text(query)


def map_api_error(status_code: int | None, message: str | None = None) -> tuple[ErrorCode, str]:
    """Map a Google API HTTP status to an error code and a friendly message.

    Args:
        status_code: HTTP status returned by the API, if any.
        message: Fallback message for statuses without a canned one.

    Returns:
        Tuple of (error code, message).
    """
    if status_code == 400:
        return ErrorCode.VALIDATION_ERROR, "Invalid request parameters"
    if status_code == 403:
        return ErrorCode.PERMISSION_DENIED, "Permission denied. Please check document sharing settings."
    if status_code == 404:
        return ErrorCode.DOCUMENT_NOT_FOUND, "Document not found or has been deleted."
    if status_code == 429:
        return ErrorCode.QUOTA_EXCEEDED, "API quota exceeded. Please try again later."
    if status_code in (500, 502, 503):
        return ErrorCode.API_ERROR, "Google API is temporarily unavailable. Please try again."
    return ErrorCode.API_ERROR, message or "An unexpected error occurred"

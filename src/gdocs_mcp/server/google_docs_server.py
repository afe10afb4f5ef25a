"""Google Docs MCP server.

Exposes Google Docs and Drive operations as MCP tools over stdio. Documents
are fetched fresh for every tool call; text search, replace and statistics
go through the document text index so that offsets found in plain text are
translated back to document indexes before any edit is sent.

OAuth tokens come from TokenStorage and are refreshed through OAuthManager
when they expire.
"""

import asyncio
import json
import logging
import os
from typing import Any

import httpx
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from gdocs_mcp import docs_requests as rq
from gdocs_mcp.auth import SERVICE_NAME, OAuthManager, TokenStatus, TokenStorage
from gdocs_mcp.server.tool_schemas import TOOLS
from gdocs_mcp.text_index import (
    CASE_TYPES,
    InvalidQueryError,
    OutOfRangeError,
    doc_index_to_flat,
    document_statistics,
    extract_document,
    find_all,
    iter_paragraphs,
    locate,
    paragraph_text,
    plan_range_rewrite,
    plan_replacements,
    spelling_suggestions,
    transform_case,
    utf16_len,
)
from gdocs_mcp.validation import (
    ErrorCode,
    ValidationError,
    map_api_error,
    sanitize_search_query,
    sanitize_text,
    validate_alignment,
    validate_batch_requests,
    validate_choice,
    validate_document_id,
    validate_font_size,
    validate_heading_style,
    validate_image_dimensions,
    validate_index,
    validate_line_spacing,
    validate_nesting_level,
    validate_range,
    validate_rgb_color,
    validate_table_dimensions,
    validate_text,
    validate_title,
    validate_url,
)

logging.basicConfig(level=os.environ.get("GDOCS_MCP_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

DOCS_API_BASE = "https://docs.googleapis.com/v1"
DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"
DOCUMENT_URL = "https://docs.google.com/document/d/{document_id}/edit"
DOCS_MIME_TYPE = "application/vnd.google-apps.document"

SEARCH_CONTEXT_CHARS = 20
IMAGE_ALIGNMENTS = {"LEFT": "START", "CENTER": "CENTER", "RIGHT": "END"}


def _document_url(document_id: str) -> str:
    return DOCUMENT_URL.format(document_id=document_id)


def _plural(count: int, singular: str, plural: str | None = None) -> str:
    return f"{count} {singular if count == 1 else (plural or singular + 's')}"


class GoogleDocsServer:
    """MCP server for Google Docs.

    Attributes:
        server: MCP Server instance.
        storage: TokenStorage for retrieving OAuth tokens.
        manager: OAuthManager for token refresh operations.
    """

    def __init__(self) -> None:
        self.server = Server("gdocs-mcp")
        self.storage = TokenStorage()
        self.manager = OAuthManager(storage=self.storage)
        self._http_client: httpx.AsyncClient | None = None
        self._setup_handlers()

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                http2=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._http_client

    async def close(self) -> None:
        """Close the shared HTTP client and release resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    def _setup_handlers(self) -> None:
        """Register MCP tool handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return TOOLS

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            result = await self.call_tool(name, arguments or {})
            return [TextContent(type="text", text=json.dumps(result, indent=2))]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Run a tool and turn any failure into an error result.

        Args:
            name: Tool name.
            arguments: Tool arguments.

        Returns:
            The handler's result, or ``{"success": False, "error", "code"}``.
        """
        logger.debug(f"Calling tool {name}")
        try:
            return await self._dispatch_tool(name, arguments)
        except ValidationError as e:
            logger.info(f"Validation failed for {name}: {e}")
            return {
                "success": False,
                "error": str(e),
                "code": ErrorCode.VALIDATION_ERROR.value,
                "field": e.field,
            }
        except InvalidQueryError as e:
            return {"success": False, "error": str(e), "code": ErrorCode.VALIDATION_ERROR.value}
        except OutOfRangeError as e:
            return {"success": False, "error": str(e), "code": ErrorCode.INVALID_RANGE.value}
        except httpx.HTTPStatusError as e:
            logger.exception(f"Google API error calling tool {name}")
            code, message = map_api_error(e.response.status_code, str(e))
            return {
                "success": False,
                "error": message,
                "code": code.value,
                "status_code": e.response.status_code,
            }
        except Exception as e:
            logger.exception(f"Error calling tool {name}")
            return {"success": False, "error": str(e), "code": ErrorCode.API_ERROR.value}

    # =========================================================================
    # HTTP Plumbing
    # =========================================================================

    async def _get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary.

        Raises:
            RuntimeError: If no token is available or refresh fails.
        """
        status = self.storage.get_status(SERVICE_NAME)

        if status == TokenStatus.MISSING:
            raise RuntimeError(
                f"No OAuth token found for service '{SERVICE_NAME}'. "
                "Please authenticate first using: gdocs-mcp setup"
            )

        if status == TokenStatus.INVALID:
            raise RuntimeError(
                f"OAuth token for service '{SERVICE_NAME}' is invalid or corrupted. "
                "Please re-authenticate using: gdocs-mcp setup"
            )

        if status == TokenStatus.EXPIRED:
            logger.info("Token expired, attempting refresh...")
            token = await self.manager.refresh_if_needed()
            if token is None:
                raise RuntimeError(
                    "Token refresh failed. Please re-authenticate using: gdocs-mcp setup"
                )
            return token.access_token

        stored = self.storage.retrieve(SERVICE_NAME)
        if stored is None:
            raise RuntimeError("Unexpected error: token retrieval failed")

        return stored.token.access_token

    async def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated HTTP request to Google APIs.

        Raises:
            httpx.HTTPStatusError: If the request fails.
        """
        access_token = await self._get_access_token()
        client = await self._get_http_client()

        response = await client.request(
            method=method,
            url=url,
            params=params,
            json=json_data,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )
        response.raise_for_status()
        result: dict[str, Any] = response.json()
        return result

    async def _get_document(self, document_id: str) -> dict[str, Any]:
        return await self._make_request("GET", f"{DOCS_API_BASE}/documents/{document_id}")

    async def _batch_update(
        self, document_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Send ``requests`` as one atomic ``documents.batchUpdate``."""
        validate_batch_requests(requests)
        logger.debug(f"batchUpdate {document_id}: {len(requests)} request(s)")
        return await self._make_request(
            "POST",
            f"{DOCS_API_BASE}/documents/{document_id}:batchUpdate",
            json_data={"requests": requests},
        )

    async def _dispatch_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Dispatch tool call to the appropriate handler.

        Raises:
            ValueError: If tool name is not recognized.
        """
        handlers = {
            "check_auth_status": self._check_auth_status,
            # Create
            "create_document": self._create_document,
            "create_formatted_document": self._create_formatted_document,
            # Read
            "read_document": self._read_document,
            "search_documents": self._search_documents,
            # Update
            "append_text": self._append_text,
            "insert_text": self._insert_text,
            "delete_text": self._delete_text,
            "replace_text": self._replace_text,
            # Search
            "find_and_replace": self._find_and_replace,
            "search_text_in_document": self._search_text_in_document,
            "get_word_count": self._get_word_count,
            "spell_check": self._spell_check,
            # Format
            "change_font": self._change_font,
            "change_font_size": self._change_font_size,
            "change_font_weight": self._change_font_weight,
            "change_font_style": self._change_font_style,
            "apply_font_formatting": self._apply_font_formatting,
            "format_text": self._format_text,
            "apply_heading": self._apply_heading,
            "set_alignment": self._set_alignment,
            "insert_table": self._insert_table,
            "insert_page_break": self._insert_page_break,
            "add_hyperlink": self._add_hyperlink,
            "create_bulleted_list": self._create_bulleted_list,
            "create_numbered_list": self._create_numbered_list,
            "set_line_spacing": self._set_line_spacing,
            "set_paragraph_spacing": self._set_paragraph_spacing,
            "transform_text_case": self._transform_text_case,
            "apply_subscript": self._apply_subscript,
            "apply_superscript": self._apply_superscript,
            # Tables
            "format_table": self._format_table,
            "merge_table_cells": self._merge_table_cells,
            "insert_table_row": self._insert_table_row,
            "insert_table_column": self._insert_table_column,
            "delete_table_row": self._delete_table_row,
            "delete_table_column": self._delete_table_column,
            "set_table_column_width": self._set_table_column_width,
            # Media
            "insert_image_from_url": self._insert_image_from_url,
            "resize_image": self._resize_image,
            "set_image_alignment": self._set_image_alignment,
            "add_image_caption": self._add_image_caption,
            "insert_drawing": self._insert_drawing,
            # Structure
            "insert_table_of_contents": self._insert_table_of_contents,
            "insert_section_break": self._insert_section_break,
            "insert_bookmark": self._insert_bookmark,
            "add_cross_reference": self._add_cross_reference,
            "insert_header": self._insert_header,
            "insert_footer": self._insert_footer,
            "insert_footnote": self._insert_footnote,
        }

        handler = handlers.get(name)
        if handler is None:
            raise ValueError(f"Unknown tool: {name}")

        return await handler(arguments)

    # =========================================================================
    # Argument Helpers
    # =========================================================================

    @staticmethod
    def _document_id(arguments: dict[str, Any]) -> str:
        return validate_document_id(arguments.get("document_id"))

    @staticmethod
    def _text_range(arguments: dict[str, Any]) -> tuple[int, int]:
        return validate_range(arguments.get("start_index"), arguments.get("end_index"))

    @staticmethod
    def _text_argument(arguments: dict[str, Any], field: str, allow_empty: bool = True) -> str:
        text = sanitize_text(validate_text(arguments.get(field), field=field))
        if not allow_empty and not text:
            raise ValidationError(f"{field} must not be empty", field)
        return text

    @staticmethod
    def _int_argument(arguments: dict[str, Any], field: str, default: int | None = None) -> int:
        value = arguments.get(field, default)
        return validate_index(value, field)

    @staticmethod
    def _optional_color(arguments: dict[str, Any], field: str) -> dict[str, float] | None:
        value = arguments.get(field)
        if value is None:
            return None
        return validate_rgb_color(value, field)

    @staticmethod
    def _bool_argument(arguments: dict[str, Any], field: str, default: bool | None = None) -> bool | None:
        value = arguments.get(field, default)
        if value is not None and not isinstance(value, bool):
            raise ValidationError(f"{field} must be a boolean", field)
        return value

    @staticmethod
    def _number_argument(arguments: dict[str, Any], field: str, default: float | None = None) -> float | None:
        value = arguments.get(field, default)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{field} must be a number", field)
        if value < 0:
            raise ValidationError(f"{field} must not be negative", field)
        return value

    @staticmethod
    def _count_argument(arguments: dict[str, Any], field: str, default: int, maximum: int = 100) -> int:
        value = arguments.get(field, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must be an integer", field)
        if value < 1 or value > maximum:
            raise ValidationError(f"{field} must be between 1 and {maximum}", field)
        return value

    # =========================================================================
    # Auth Operations
    # =========================================================================

    async def _check_auth_status(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Report token status and, when usable, the authenticated Drive user."""
        status = self.storage.get_status(SERVICE_NAME)
        if status in (TokenStatus.MISSING, TokenStatus.INVALID):
            return {
                "success": True,
                "authenticated": False,
                "status": status.value,
                "message": "Not authenticated. Run: gdocs-mcp setup",
            }

        about = await self._make_request(
            "GET", f"{DRIVE_API_BASE}/about", params={"fields": "user"}
        )
        user = about.get("user", {})
        return {
            "success": True,
            "authenticated": True,
            "status": TokenStatus.VALID.value,
            "user": user.get("displayName"),
            "email": user.get("emailAddress"),
            "message": f"Authenticated as {user.get('displayName', 'unknown user')}",
        }

    # =========================================================================
    # Create Operations
    # =========================================================================

    async def _create_document(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Create a new Google Doc.

        Args:
            arguments: Tool arguments with title and optional initial_content.

        Returns:
            Created document details.
        """
        title = validate_title(arguments.get("title"))
        initial_content = ""
        if arguments.get("initial_content"):
            initial_content = self._text_argument(arguments, "initial_content")

        response = await self._make_request(
            "POST", f"{DOCS_API_BASE}/documents", json_data={"title": title}
        )
        document_id = response["documentId"]

        if initial_content:
            await self._batch_update(document_id, [rq.insert_text(1, initial_content)])

        logger.info(f"Created document {document_id}")
        return {
            "success": True,
            "document_id": document_id,
            "title": response.get("title", title),
            "url": _document_url(document_id),
            "message": f'Created document "{title}"',
        }

    async def _create_formatted_document(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Create a document with a Heading 1 paragraph followed by body text.

        When the body has more than one word its first word is made bold.
        """
        title = validate_title(arguments.get("title"))
        heading = self._text_argument(arguments, "heading", allow_empty=False)
        body = self._text_argument(arguments, "body", allow_empty=False)

        response = await self._make_request(
            "POST", f"{DOCS_API_BASE}/documents", json_data={"title": title}
        )
        document_id = response["documentId"]

        heading_end = 1 + utf16_len(heading)
        body_start = heading_end + 1
        requests = [
            rq.insert_text(1, f"{heading}\n{body}\n"),
            rq.update_paragraph_style(
                1, heading_end + 1, {"namedStyleType": "HEADING_1"}, "namedStyleType"
            ),
        ]

        words = body.split()
        if len(words) > 1:
            word_start = body_start + utf16_len(body[: body.index(words[0])])
            requests.append(
                rq.update_text_style(
                    word_start, word_start + utf16_len(words[0]), {"bold": True}, "bold"
                )
            )

        await self._batch_update(document_id, requests)

        return {
            "success": True,
            "document_id": document_id,
            "title": title,
            "url": _document_url(document_id),
            "message": f'Created formatted document "{title}"',
        }

    # =========================================================================
    # Read Operations
    # =========================================================================

    async def _read_document(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        document = await self._get_document(document_id)
        flat = extract_document(document)

        return {
            "success": True,
            "document_id": document_id,
            "title": document.get("title", ""),
            "content": flat.text,
            "characters": len(flat.text),
            "message": f'Read "{document.get("title", "")}" ({_plural(len(flat.text), "character")})',
        }

    async def _search_documents(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Search Google Docs in Drive by name.

        Args:
            arguments: Tool arguments with query and optional max_results.

        Returns:
            Matching documents, most recently modified first.
        """
        query = sanitize_search_query(validate_text(arguments.get("query", ""), field="query"))
        max_results = self._count_argument(arguments, "max_results", 10)

        q = f"mimeType='{DOCS_MIME_TYPE}' and trashed=false"
        if query.strip() and query.strip() != "*":
            q += f" and name contains '{query}'"

        response = await self._make_request(
            "GET",
            f"{DRIVE_API_BASE}/files",
            params={
                "q": q,
                "pageSize": max_results,
                "orderBy": "modifiedTime desc",
                "fields": "files(id,name,modifiedTime,webViewLink)",
            },
        )

        documents = [
            {
                "document_id": file.get("id"),
                "name": file.get("name"),
                "modified_time": file.get("modifiedTime"),
                "url": file.get("webViewLink") or _document_url(file.get("id", "")),
            }
            for file in response.get("files", [])
        ]
        return {
            "success": True,
            "documents": documents,
            "count": len(documents),
            "message": f"Found {_plural(len(documents), 'document')}",
        }

    # =========================================================================
    # Update Operations
    # =========================================================================

    async def _append_text(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Append text to the end of the body as a new paragraph."""
        document_id = self._document_id(arguments)
        text = self._text_argument(arguments, "text", allow_empty=False)

        document = await self._get_document(document_id)
        flat = extract_document(document)
        to_insert = f"\n{text}" if flat.text.strip() else text

        await self._batch_update(document_id, [rq.insert_text_at_end(to_insert)])

        return {
            "success": True,
            "document_id": document_id,
            "message": f"Appended {_plural(len(text), 'character')}",
        }

    async def _insert_text(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        text = self._text_argument(arguments, "text", allow_empty=False)
        index = validate_index(arguments.get("index"), "index", minimum=1)

        await self._batch_update(document_id, [rq.insert_text(index, text)])

        return {
            "success": True,
            "document_id": document_id,
            "index": index,
            "message": f"Inserted {_plural(len(text), 'character')} at index {index}",
        }

    async def _delete_text(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        start, end = self._text_range(arguments)

        await self._batch_update(document_id, [rq.delete_range(start, end)])

        return {
            "success": True,
            "document_id": document_id,
            "start_index": start,
            "end_index": end,
            "message": f"Deleted content from index {start} to {end}",
        }

    async def _replace_text(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Replace the content of a document range with new text.

        An empty ``new_text`` deletes the range.
        """
        document_id = self._document_id(arguments)
        start, end = self._text_range(arguments)
        new_text = self._text_argument(arguments, "new_text")

        requests = [rq.delete_range(start, end)]
        if new_text:
            requests.append(rq.insert_text(start, new_text))
        await self._batch_update(document_id, requests)

        return {
            "success": True,
            "document_id": document_id,
            "start_index": start,
            "end_index": start + utf16_len(new_text),
            "message": f"Replaced content from index {start} to {end}",
        }

    # =========================================================================
    # Search Operations
    # =========================================================================

    async def _find_and_replace(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Find text in the document and replace it.

        Matches are found in the flat text and mapped back to document
        indexes. Occurrences that span non-text content are reported as
        skipped. Nothing is sent when no edit is planned.

        Args:
            arguments: Tool arguments with document_id, find_text,
                replace_text, match_case and replace_all.

        Returns:
            Replacement and skip counts with the document range of each
            replaced occurrence.
        """
        document_id = self._document_id(arguments)
        find_text = self._text_argument(arguments, "find_text")
        replace_text = self._text_argument(arguments, "replace_text")
        match_case = self._bool_argument(arguments, "match_case", False)
        replace_all = self._bool_argument(arguments, "replace_all", False)

        document = await self._get_document(document_id)
        flat = extract_document(document)

        spans = list(find_all(flat.text, find_text, case_sensitive=bool(match_case)))
        plan = plan_replacements(flat.runs, spans, replace_text, replace_all=bool(replace_all))

        if plan.operations:
            await self._batch_update(document_id, plan.to_requests())

        logger.info(
            f"find_and_replace on {document_id}: {len(spans)} found, "
            f"{plan.applied} replaced, {plan.skipped} skipped"
        )

        message = f"Replaced {_plural(plan.applied, 'occurrence')} of \"{find_text}\""
        if plan.skipped:
            message += f" ({plan.skipped} skipped: spans non-text content)"
        if not spans:
            message = f'No occurrences of "{find_text}" found'

        return {
            "success": True,
            "document_id": document_id,
            "found": len(spans),
            "replacements": plan.applied,
            "skipped": plan.skipped,
            "matches": [match.to_dict() for match in plan.planned],
            "skipped_matches": [match.to_dict() for match in plan.skipped_matches],
            "message": message,
        }

    async def _search_text_in_document(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Find occurrences of text and report their flat and document ranges.

        The optional start_index/end_index bound the search in document
        indexes; each match carries a short context window of flat text.
        """
        document_id = self._document_id(arguments)
        search_text = self._text_argument(arguments, "search_text")
        match_case = self._bool_argument(arguments, "match_case", False)
        max_results = self._count_argument(arguments, "max_results", 10, maximum=1000)

        document = await self._get_document(document_id)
        flat = extract_document(document)

        flat_start = 0
        flat_end = len(flat.text)
        if arguments.get("start_index") is not None:
            flat_start = doc_index_to_flat(flat.runs, self._int_argument(arguments, "start_index"))
        if arguments.get("end_index") is not None:
            flat_end = doc_index_to_flat(flat.runs, self._int_argument(arguments, "end_index"))
        if flat_start > flat_end:
            raise ValidationError("start_index must not be after end_index", "start_index")

        spans = find_all(
            flat.text,
            search_text,
            case_sensitive=bool(match_case),
            start=flat_start,
            end=flat_end,
            max_results=max_results,
        )

        results = []
        for match in locate(flat.runs, spans):
            context_start = max(0, match.flat_start - SEARCH_CONTEXT_CHARS)
            context_end = min(len(flat.text), match.flat_end + SEARCH_CONTEXT_CHARS)
            results.append(
                {
                    **match.to_dict(),
                    "text": flat.text[match.flat_start : match.flat_end],
                    "context": flat.text[context_start:context_end],
                }
            )

        return {
            "success": True,
            "document_id": document_id,
            "matches": results,
            "total_found": len(results),
            "message": f'Found {_plural(len(results), "occurrence")} of "{search_text}"',
        }

    async def _get_word_count(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        document = await self._get_document(document_id)
        stats = document_statistics(extract_document(document))

        return {
            "success": True,
            "document_id": document_id,
            "title": document.get("title", ""),
            **stats,
            "message": (
                f"{_plural(stats['words'], 'word')}, {_plural(stats['characters'], 'character')}"
                f" and {_plural(stats['paragraphs'], 'paragraph')}"
            ),
        }

    async def _spell_check(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Heuristic spell check of the given text (no dictionary lookup)."""
        document_id = self._document_id(arguments)
        text = self._text_argument(arguments, "text")

        issues = spelling_suggestions(text)
        return {
            "success": True,
            "document_id": document_id,
            "issues": issues,
            "potential_issues": len(issues),
            "message": f"Found {_plural(len(issues), 'potential issue')}",
        }

    # =========================================================================
    # Format Operations
    # =========================================================================

    async def _style_range(
        self,
        arguments: dict[str, Any],
        text_style: dict[str, Any],
        fields: list[str],
        description: str,
    ) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        start, end = self._text_range(arguments)
        if not fields:
            raise ValidationError("At least one formatting option is required")

        await self._batch_update(
            document_id, [rq.update_text_style(start, end, text_style, fields)]
        )

        return {
            "success": True,
            "document_id": document_id,
            "start_index": start,
            "end_index": end,
            "message": f"{description} applied to index {start}-{end}",
        }

    async def _style_paragraphs(
        self,
        arguments: dict[str, Any],
        paragraph_style: dict[str, Any],
        fields: list[str],
        description: str,
    ) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        start, end = self._text_range(arguments)
        if not fields:
            raise ValidationError("At least one paragraph option is required")

        await self._batch_update(
            document_id, [rq.update_paragraph_style(start, end, paragraph_style, fields)]
        )

        return {
            "success": True,
            "document_id": document_id,
            "start_index": start,
            "end_index": end,
            "message": f"{description} applied to index {start}-{end}",
        }

    async def _change_font(self, arguments: dict[str, Any]) -> dict[str, Any]:
        font_family = self._text_argument(arguments, "font_family", allow_empty=False)
        style, fields, _ = rq.text_style_from_options(font_family=font_family)
        return await self._style_range(arguments, style, fields, f"Font {font_family}")

    async def _change_font_size(self, arguments: dict[str, Any]) -> dict[str, Any]:
        font_size = validate_font_size(arguments.get("font_size"))
        style, fields, _ = rq.text_style_from_options(font_size=font_size)
        return await self._style_range(arguments, style, fields, f"Font size {font_size}pt")

    async def _change_font_weight(self, arguments: dict[str, Any]) -> dict[str, Any]:
        bold = self._bool_argument(arguments, "bold")
        if bold is None:
            raise ValidationError("bold is required", "bold")
        style, fields, _ = rq.text_style_from_options(bold=bold)
        return await self._style_range(arguments, style, fields, "Bold" if bold else "Normal weight")

    async def _change_font_style(self, arguments: dict[str, Any]) -> dict[str, Any]:
        italic = self._bool_argument(arguments, "italic")
        if italic is None:
            raise ValidationError("italic is required", "italic")
        style, fields, _ = rq.text_style_from_options(italic=italic)
        return await self._style_range(arguments, style, fields, "Italic" if italic else "Upright")

    def _font_options(self, arguments: dict[str, Any], colors: bool) -> dict[str, Any]:
        options: dict[str, Any] = {
            name: self._bool_argument(arguments, name)
            for name in ("bold", "italic", "underline", "strikethrough")
        }
        if arguments.get("font_family") is not None:
            options["font_family"] = self._text_argument(arguments, "font_family", allow_empty=False)
        if arguments.get("font_size") is not None:
            options["font_size"] = validate_font_size(arguments["font_size"])
        if colors:
            options["foreground_color"] = self._optional_color(arguments, "foreground_color")
            options["background_color"] = self._optional_color(arguments, "background_color")
        return options

    async def _apply_font_formatting(self, arguments: dict[str, Any]) -> dict[str, Any]:
        style, fields, labels = rq.text_style_from_options(**self._font_options(arguments, False))
        return await self._style_range(arguments, style, fields, ", ".join(labels) or "Formatting")

    async def _format_text(self, arguments: dict[str, Any]) -> dict[str, Any]:
        style, fields, labels = rq.text_style_from_options(**self._font_options(arguments, True))
        return await self._style_range(arguments, style, fields, ", ".join(labels) or "Formatting")

    async def _apply_heading(self, arguments: dict[str, Any]) -> dict[str, Any]:
        heading_style = validate_heading_style(arguments.get("heading_style"))
        return await self._style_paragraphs(
            arguments, {"namedStyleType": heading_style}, ["namedStyleType"], heading_style
        )

    async def _set_alignment(self, arguments: dict[str, Any]) -> dict[str, Any]:
        alignment = validate_alignment(arguments.get("alignment"))
        return await self._style_paragraphs(
            arguments, {"alignment": alignment}, ["alignment"], f"Alignment {alignment}"
        )

    async def _insert_table(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        rows, columns = validate_table_dimensions(arguments.get("rows"), arguments.get("columns"))

        await self._batch_update(document_id, [rq.insert_table(index, rows, columns)])

        return {
            "success": True,
            "document_id": document_id,
            "rows": rows,
            "columns": columns,
            "message": f"Inserted {rows}x{columns} table at index {index}",
        }

    async def _insert_page_break(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)

        await self._batch_update(document_id, [rq.insert_page_break(index)])

        return {
            "success": True,
            "document_id": document_id,
            "message": f"Inserted page break at index {index}",
        }

    async def _add_hyperlink(self, arguments: dict[str, Any]) -> dict[str, Any]:
        url = validate_url(arguments.get("url"))
        return await self._style_range(arguments, {"link": {"url": url}}, ["link"], f"Link to {url}")

    async def _insert_list(
        self, arguments: dict[str, Any], preset: str, kind: str
    ) -> dict[str, Any]:
        """Insert ``items`` as paragraphs at ``index`` and turn them into a list.

        Docs reads list nesting from leading tabs and strips them when the
        bullets are created, so the list ends ``nesting_level`` indexes per
        item earlier than the inserted text.
        """
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        items = arguments.get("items")
        if not isinstance(items, list) or not items:
            raise ValidationError("items must be a non-empty list of strings", "items")
        if not all(isinstance(item, str) for item in items):
            raise ValidationError("items must be a non-empty list of strings", "items")

        nesting_level = validate_nesting_level(arguments.get("nesting_level", 0))
        indent = "\t" * nesting_level

        text = sanitize_text("".join(indent + item + "\n" for item in items))
        validate_text(text, field="items")
        end = index + utf16_len(text)

        await self._batch_update(
            document_id,
            [rq.insert_text(index, text), rq.create_paragraph_bullets(index, end, preset)],
        )

        return {
            "success": True,
            "document_id": document_id,
            "start_index": index,
            "end_index": end - nesting_level * len(items),
            "nesting_level": nesting_level,
            "items": len(items),
            "message": f"Created {kind} list with {_plural(len(items), 'item')}",
        }

    async def _create_bulleted_list(self, arguments: dict[str, Any]) -> dict[str, Any]:
        preset = validate_choice(
            arguments.get("bullet_style", "BULLET_DISC_CIRCLE_SQUARE"),
            rq.BULLET_PRESETS,
            "bullet_style",
        )
        return await self._insert_list(arguments, preset, "bulleted")

    async def _create_numbered_list(self, arguments: dict[str, Any]) -> dict[str, Any]:
        numbering_format = validate_choice(
            arguments.get("numbering_format", "DECIMAL_DECIMAL"),
            tuple(rq.NUMBERING_PRESETS),
            "numbering_format",
        )
        return await self._insert_list(
            arguments, rq.NUMBERING_PRESETS[numbering_format], "numbered"
        )

    async def _set_line_spacing(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Set line spacing; CUSTOM takes a multiplier in custom_spacing."""
        line_spacing = validate_choice(
            arguments.get("line_spacing"),
            (*rq.LINE_SPACING_PERCENT, "CUSTOM"),
            "line_spacing",
        )
        custom_spacing = None
        if line_spacing == "CUSTOM":
            if arguments.get("custom_spacing") is None:
                raise ValidationError(
                    "custom_spacing is required when line_spacing is CUSTOM", "custom_spacing"
                )
            custom_spacing = validate_line_spacing(arguments["custom_spacing"])

        percent = rq.line_spacing_percent(line_spacing, custom_spacing)
        return await self._style_paragraphs(
            arguments, {"lineSpacing": percent}, ["lineSpacing"], f"Line spacing {percent}%"
        )

    async def _set_paragraph_spacing(self, arguments: dict[str, Any]) -> dict[str, Any]:
        space_before = self._number_argument(arguments, "space_before")
        space_after = self._number_argument(arguments, "space_after")

        style: dict[str, Any] = {}
        fields: list[str] = []
        if space_before is not None:
            style["spaceAbove"] = {"magnitude": space_before, "unit": "PT"}
            fields.append("spaceAbove")
        if space_after is not None:
            style["spaceBelow"] = {"magnitude": space_after, "unit": "PT"}
            fields.append("spaceBelow")

        return await self._style_paragraphs(arguments, style, fields, "Paragraph spacing")

    async def _transform_text_case(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Rewrite the text in a range to another case.

        Only text runs are rewritten; images, tables and other non-text
        content inside the range stay where they are.
        """
        document_id = self._document_id(arguments)
        start, end = self._text_range(arguments)
        case_type = validate_choice(arguments.get("case_type"), CASE_TYPES, "case_type")

        document = await self._get_document(document_id)
        plan = plan_range_rewrite(document, start, end, lambda text: transform_case(text, case_type))

        if plan.operations:
            await self._batch_update(document_id, plan.to_requests())

        return {
            "success": True,
            "document_id": document_id,
            "case_type": case_type,
            "segments_changed": plan.applied,
            "message": f"Applied {case_type} to index {start}-{end}",
        }

    async def _apply_subscript(self, arguments: dict[str, Any]) -> dict[str, Any]:
        return await self._style_range(
            arguments, {"baselineOffset": "SUBSCRIPT"}, ["baselineOffset"], "Subscript"
        )

    async def _apply_superscript(self, arguments: dict[str, Any]) -> dict[str, Any]:
        return await self._style_range(
            arguments, {"baselineOffset": "SUPERSCRIPT"}, ["baselineOffset"], "Superscript"
        )

    # =========================================================================
    # Table Operations
    # =========================================================================

    @staticmethod
    def _find_table(document: dict[str, Any], table_start_index: int) -> dict[str, Any]:
        """Return the table element starting at ``table_start_index``.

        Raises:
            ValidationError: If no table starts there.
        """
        pending = list(document.get("body", {}).get("content", []))
        while pending:
            element = pending.pop(0)
            table = element.get("table")
            if not table:
                continue
            if element.get("startIndex") == table_start_index:
                return table
            for row in table.get("tableRows", []):
                for cell in row.get("tableCells", []):
                    pending.extend(cell.get("content", []))
        raise ValidationError(
            f"No table starts at index {table_start_index}", "table_start_index"
        )

    @staticmethod
    def _header_row_requests(table: dict[str, Any]) -> list[dict[str, Any]]:
        requests = []
        rows = table.get("tableRows", [])
        for cell in rows[0].get("tableCells", []) if rows else []:
            content = cell.get("content", [])
            if not content:
                continue
            start = content[0].get("startIndex", 0)
            end = content[-1].get("endIndex", start) - 1
            if end > start:
                requests.append(rq.update_text_style(start, end, {"bold": True}, "bold"))
        return requests

    async def _format_table(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Apply borders, cell background and a bold header row to a table.

        Args:
            arguments: Tool arguments with document_id, table_start_index and
                any of border_style, border_color, cell_background_color,
                header_row.

        Returns:
            Confirmation listing the applied options.
        """
        document_id = self._document_id(arguments)
        table_start_index = self._int_argument(arguments, "table_start_index")
        border_color = self._optional_color(arguments, "border_color")
        background = self._optional_color(arguments, "cell_background_color")
        header_row = self._bool_argument(arguments, "header_row", False)

        requests = []
        applied = []
        if arguments.get("border_style") is not None or border_color:
            border_style = validate_choice(
                arguments.get("border_style", "SOLID"), tuple(rq.BORDER_DASH_STYLES), "border_style"
            )
            cell_style, sides = rq.table_border_style(border_style, border_color)
            requests.append(rq.update_table_cell_style(table_start_index, cell_style, sides))
            applied.append(f"{border_style.lower()} borders")
        if background:
            requests.append(
                rq.update_table_cell_style(
                    table_start_index,
                    {"backgroundColor": rq.rgb_color(background)},
                    "backgroundColor",
                )
            )
            applied.append("cell background")
        if header_row:
            document = await self._get_document(document_id)
            requests.extend(self._header_row_requests(self._find_table(document, table_start_index)))
            applied.append("header row")

        if not requests:
            raise ValidationError("At least one table formatting option is required")

        await self._batch_update(document_id, requests)

        return {
            "success": True,
            "document_id": document_id,
            "applied": applied,
            "message": f"Formatted table at index {table_start_index}: {', '.join(applied)}",
        }

    async def _merge_table_cells(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        table_start_index = self._int_argument(arguments, "table_start_index")
        start_row = self._int_argument(arguments, "start_row")
        start_column = self._int_argument(arguments, "start_column")
        end_row = self._int_argument(arguments, "end_row")
        end_column = self._int_argument(arguments, "end_column")

        if end_row < start_row or end_column < start_column:
            raise ValidationError("End cell must not be before start cell", "end_row")
        if end_row == start_row and end_column == start_column:
            raise ValidationError("Merge range must span more than one cell", "end_column")

        await self._batch_update(
            document_id,
            [rq.merge_table_cells(table_start_index, start_row, start_column, end_row, end_column)],
        )

        return {
            "success": True,
            "document_id": document_id,
            "message": (
                f"Merged cells ({start_row},{start_column}) to ({end_row},{end_column})"
            ),
        }

    async def _insert_table_row(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        table_start_index = self._int_argument(arguments, "table_start_index")
        row_index = self._int_argument(arguments, "row_index")
        insert_below = self._bool_argument(arguments, "insert_below", True)

        await self._batch_update(
            document_id, [rq.insert_table_row(table_start_index, row_index, bool(insert_below))]
        )

        where = "below" if insert_below else "above"
        return {
            "success": True,
            "document_id": document_id,
            "message": f"Inserted row {where} row {row_index}",
        }

    async def _insert_table_column(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        table_start_index = self._int_argument(arguments, "table_start_index")
        column_index = self._int_argument(arguments, "column_index")
        insert_right = self._bool_argument(arguments, "insert_right", True)

        await self._batch_update(
            document_id,
            [rq.insert_table_column(table_start_index, column_index, bool(insert_right))],
        )

        where = "right of" if insert_right else "left of"
        return {
            "success": True,
            "document_id": document_id,
            "message": f"Inserted column {where} column {column_index}",
        }

    async def _delete_table_row(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        table_start_index = self._int_argument(arguments, "table_start_index")
        row_index = self._int_argument(arguments, "row_index")

        await self._batch_update(document_id, [rq.delete_table_row(table_start_index, row_index)])

        return {
            "success": True,
            "document_id": document_id,
            "message": f"Deleted row {row_index}",
        }

    async def _delete_table_column(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        table_start_index = self._int_argument(arguments, "table_start_index")
        column_index = self._int_argument(arguments, "column_index")

        await self._batch_update(
            document_id, [rq.delete_table_column(table_start_index, column_index)]
        )

        return {
            "success": True,
            "document_id": document_id,
            "message": f"Deleted column {column_index}",
        }

    async def _set_table_column_width(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        table_start_index = self._int_argument(arguments, "table_start_index")
        column_index = self._int_argument(arguments, "column_index")
        width = self._number_argument(arguments, "width")
        if not width:
            raise ValidationError("width must be a positive number", "width")

        await self._batch_update(
            document_id, [rq.update_table_column_width(table_start_index, column_index, width)]
        )

        return {
            "success": True,
            "document_id": document_id,
            "message": f"Set column {column_index} width to {width}pt",
        }

    # =========================================================================
    # Media Operations
    # =========================================================================

    async def _insert_image_from_url(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        image_url = validate_url(arguments.get("image_url"), "image_url")

        width = height = None
        if arguments.get("width") is not None or arguments.get("height") is not None:
            width, height = validate_image_dimensions(arguments.get("width"), arguments.get("height"))

        response = await self._batch_update(
            document_id, [rq.insert_inline_image(index, image_url, width, height)]
        )
        replies = response.get("replies", [])
        object_id = replies[0].get("insertInlineImage", {}).get("objectId") if replies else None

        return {
            "success": True,
            "document_id": document_id,
            "object_id": object_id,
            "message": f"Inserted image at index {index}",
        }

    @staticmethod
    def _find_inline_image(
        document: dict[str, Any], start: int, end: int
    ) -> tuple[int, int, str]:
        """Find the first inline image in ``[start, end)``.

        Returns:
            Tuple of (element start, element end, image content URI).

        Raises:
            ValidationError: If the range holds no inline image.
        """
        inline_objects = document.get("inlineObjects", {})
        for paragraph in iter_paragraphs(document.get("body", {}).get("content", [])):
            for element in paragraph.get("elements", []):
                inline = element.get("inlineObjectElement")
                element_start = element.get("startIndex", 0)
                if not inline or not start <= element_start < end:
                    continue
                embedded = (
                    inline_objects.get(inline.get("inlineObjectId"), {})
                    .get("inlineObjectProperties", {})
                    .get("embeddedObject", {})
                )
                uri = embedded.get("imageProperties", {}).get("contentUri")
                if uri:
                    return element_start, element.get("endIndex", element_start + 1), uri
        raise ValidationError(f"No image found between index {start} and {end}", "start_index")

    async def _resize_image(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Resize an inline image by re-inserting it at the new size.

        The Docs API cannot change the size of an existing inline object, so
        the image is deleted and inserted again from its content URI in the
        same batch.
        """
        document_id = self._document_id(arguments)
        start, end = self._text_range(arguments)
        width, height = validate_image_dimensions(arguments.get("width"), arguments.get("height"))

        document = await self._get_document(document_id)
        image_start, image_end, uri = self._find_inline_image(document, start, end)

        await self._batch_update(
            document_id,
            [
                rq.delete_range(image_start, image_end),
                rq.insert_inline_image(image_start, uri, width, height),
            ],
        )

        return {
            "success": True,
            "document_id": document_id,
            "index": image_start,
            "width": width,
            "height": height,
            "message": f"Resized image at index {image_start} to {width}x{height}pt",
        }

    async def _set_image_alignment(self, arguments: dict[str, Any]) -> dict[str, Any]:
        alignment = validate_choice(arguments.get("alignment"), tuple(IMAGE_ALIGNMENTS), "alignment")
        return await self._style_paragraphs(
            arguments,
            {"alignment": IMAGE_ALIGNMENTS[alignment]},
            ["alignment"],
            f"Image alignment {alignment}",
        )

    async def _add_image_caption(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Add a centered, italic caption paragraph after an image."""
        document_id = self._document_id(arguments)
        image_index = validate_index(arguments.get("image_index"), "image_index", minimum=1)
        caption = self._text_argument(arguments, "caption", allow_empty=False)

        caption_start = image_index + 2
        caption_end = caption_start + utf16_len(caption)
        await self._batch_update(
            document_id,
            [
                rq.insert_text(image_index + 1, f"\n{caption}"),
                rq.update_paragraph_style(
                    caption_start, caption_end, {"alignment": "CENTER"}, "alignment"
                ),
                rq.update_text_style(caption_start, caption_end, {"italic": True}, "italic"),
            ],
        )

        return {
            "success": True,
            "document_id": document_id,
            "start_index": caption_start,
            "end_index": caption_end,
            "message": f"Added caption after image at index {image_index}",
        }

    async def _insert_drawing(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        drawing_type = validate_choice(arguments.get("drawing_type"), rq.DRAWING_TYPES, "drawing_type")
        width, height = validate_image_dimensions(
            arguments.get("width", 100), arguments.get("height", 100)
        )
        fill_color = self._optional_color(arguments, "fill_color")

        uri = rq.drawing_svg_uri(drawing_type, width, height, fill_color)
        await self._batch_update(document_id, [rq.insert_inline_image(index, uri, width, height)])

        return {
            "success": True,
            "document_id": document_id,
            "drawing_type": drawing_type,
            "message": f"Inserted {drawing_type.lower()} drawing at index {index}",
        }

    # =========================================================================
    # Structure Operations
    # =========================================================================

    @staticmethod
    def _headings(document: dict[str, Any], max_depth: int = 6) -> list[dict[str, Any]]:
        """Collect ``HEADING_n`` paragraphs with ``n <= max_depth`` in document order."""
        headings = []
        for paragraph in iter_paragraphs(document.get("body", {}).get("content", [])):
            style = paragraph.get("paragraphStyle", {})
            named = style.get("namedStyleType", "")
            if not named.startswith("HEADING_"):
                continue
            level = int(named.rsplit("_", 1)[1])
            text = paragraph_text(paragraph).strip()
            if level <= max_depth and text:
                headings.append({"text": text, "heading_id": style.get("headingId"), "level": level})
        return headings

    async def _insert_table_of_contents(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Insert a static table of contents built from the document headings.

        The public API has no table-of-contents insert, so a title and one
        linked, indented paragraph per heading are written instead.
        """
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        title = sanitize_text(validate_title(arguments.get("title", "Table of Contents")))
        max_depth = self._count_argument(arguments, "max_depth", 3, maximum=6)

        document = await self._get_document(document_id)
        headings = self._headings(document, max_depth)
        if not headings:
            raise ValidationError(f"Document has no headings up to level {max_depth}", "max_depth")

        await self._batch_update(document_id, rq.insert_table_of_contents(index, title, headings))

        return {
            "success": True,
            "document_id": document_id,
            "entries": len(headings),
            "message": f"Inserted table of contents with {_plural(len(headings), 'entry', 'entries')}",
        }

    async def _insert_section_break(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        break_type = validate_choice(
            arguments.get("break_type", "NEXT_PAGE"), rq.SECTION_TYPES, "break_type"
        )

        await self._batch_update(document_id, [rq.insert_section_break(index, break_type)])

        return {
            "success": True,
            "document_id": document_id,
            "message": f"Inserted {break_type} section break at index {index}",
        }

    async def _insert_bookmark(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Mark a span with a named range.

        The API cannot create bookmarks, so a named range stands in for one.
        Without ``end_index`` the span is the single character at ``index``.
        """
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        end_index = self._int_argument(arguments, "end_index", index + 1)
        if end_index <= index:
            raise ValidationError("end_index must be greater than index", "end_index")
        name = self._text_argument(arguments, "bookmark_name", allow_empty=False)
        if utf16_len(name) > 256:
            raise ValidationError("bookmark_name cannot exceed 256 characters", "bookmark_name")

        response = await self._batch_update(
            document_id, [rq.create_named_range(name, index, end_index)]
        )
        replies = response.get("replies", [])
        named_range_id = replies[0].get("createNamedRange", {}).get("namedRangeId") if replies else None

        return {
            "success": True,
            "document_id": document_id,
            "bookmark_name": name,
            "named_range_id": named_range_id,
            "message": f'Created bookmark "{name}" at index {index}',
        }

    async def _add_cross_reference(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Replace a range with reference text linked to a heading or bookmark.

        ``target_bookmark`` is treated as a heading when it is a heading id
        (``h.``) or the text of a heading; otherwise as a bookmark id.
        """
        document_id = self._document_id(arguments)
        start, end = self._text_range(arguments)
        reference_text = self._text_argument(arguments, "reference_text", allow_empty=False)
        target = self._text_argument(arguments, "target_bookmark", allow_empty=False)

        document = await self._get_document(document_id)
        link: dict[str, str] = {"bookmarkId": target}
        if target.startswith("h."):
            link = {"headingId": target}
        else:
            for heading in self._headings(document):
                if heading["heading_id"] and heading["text"].lower() == target.lower():
                    link = {"headingId": heading["heading_id"]}
                    break

        reference_end = start + utf16_len(reference_text)
        await self._batch_update(
            document_id,
            [
                rq.delete_range(start, end),
                rq.insert_text(start, reference_text),
                rq.update_text_style(start, reference_end, {"link": link}, "link"),
            ],
        )

        return {
            "success": True,
            "document_id": document_id,
            "start_index": start,
            "end_index": reference_end,
            "link": link,
            "message": f'Added cross-reference "{reference_text}"',
        }

    async def _set_page_segment(
        self, document_id: str, kind: str, text: str, page_number: bool
    ) -> dict[str, Any]:
        """Replace the text of the default header or footer, creating it if needed.

        Args:
            document_id: Document to edit.
            kind: ``"header"`` or ``"footer"``.
            text: New segment text.
            page_number: Whether page numbers were requested.

        Returns:
            Tool result with the segment id.
        """
        capitalized = kind.capitalize()
        document = await self._get_document(document_id)
        segment_id = document.get("documentStyle", {}).get(f"default{capitalized}Id")

        requests = []
        if segment_id:
            content = document.get(f"{kind}s", {}).get(segment_id, {}).get("content", [])
            if content:
                segment_start = content[0].get("startIndex", 0)
                segment_end = content[-1].get("endIndex", segment_start) - 1
                if segment_end > segment_start:
                    requests.append(rq.delete_range(segment_start, segment_end, segment_id))
        else:
            create = rq.create_header() if kind == "header" else rq.create_footer()
            response = await self._batch_update(document_id, [create])
            replies = response.get("replies", [])
            reply = replies[0].get(f"create{capitalized}", {}) if replies else {}
            segment_id = reply.get(f"{kind}Id")
            if not segment_id:
                raise RuntimeError(f"Failed to create {kind}")
            logger.debug(f"Created {kind} {segment_id} in {document_id}")

        requests.append(rq.insert_text(0, text, segment_id))
        await self._batch_update(document_id, requests)

        result: dict[str, Any] = {
            "success": True,
            "document_id": document_id,
            f"{kind}_id": segment_id,
            "message": f"{capitalized} set",
        }
        if page_number:
            result["page_number"] = False
            result["message"] += "; page numbers cannot be inserted through the Docs API"
        return result

    async def _insert_header(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        text = self._text_argument(arguments, "header_text", allow_empty=False)
        page_number = self._bool_argument(arguments, "page_number", False)
        return await self._set_page_segment(document_id, "header", text, bool(page_number))

    async def _insert_footer(self, arguments: dict[str, Any]) -> dict[str, Any]:
        document_id = self._document_id(arguments)
        text = self._text_argument(arguments, "footer_text", allow_empty=False)
        page_number = self._bool_argument(arguments, "page_number", True)
        return await self._set_page_segment(document_id, "footer", text, bool(page_number))

    async def _insert_footnote(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Create a footnote reference at ``index`` and fill in its text."""
        document_id = self._document_id(arguments)
        index = validate_index(arguments.get("index"), "index", minimum=1)
        footnote_text = self._text_argument(arguments, "footnote_text", allow_empty=False)

        response = await self._batch_update(document_id, [rq.create_footnote(index)])
        replies = response.get("replies", [])
        footnote_id = replies[0].get("createFootnote", {}).get("footnoteId") if replies else None
        if not footnote_id:
            raise RuntimeError("Failed to create footnote")

        await self._batch_update(document_id, [rq.insert_text(1, footnote_text, footnote_id)])

        return {
            "success": True,
            "document_id": document_id,
            "footnote_id": footnote_id,
            "message": f"Inserted footnote at index {index}",
        }

    async def run(self) -> None:
        """Run the MCP server using stdio transport."""
        try:
            async with stdio_server() as (read_stream, write_stream):
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        finally:
            await self.close()


def main() -> None:
    """Entry point for the Google Docs MCP server."""
    server = GoogleDocsServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    main()

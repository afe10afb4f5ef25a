"""Shared pytest fixtures for gdocs-mcp tests.

This module provides reusable fixtures for OAuth authentication, token
storage, and Google Docs document bodies.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from gdocs_mcp.auth.models import OAuthToken, StoredToken, TokenMetadata

# =============================================================================
# Token Fixtures
# =============================================================================


@pytest.fixture
def valid_token() -> OAuthToken:
    """Create a valid, non-expired OAuth token."""
    return OAuthToken(
        access_token="test_access_token_abc123",
        refresh_token="test_refresh_token_xyz789",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        scopes=[
            "https://www.googleapis.com/auth/documents",
            "https://www.googleapis.com/auth/drive.file",
        ],
        token_type="Bearer",
    )


@pytest.fixture
def expired_token() -> OAuthToken:
    """Create an expired OAuth token."""
    return OAuthToken(
        access_token="expired_access_token",
        refresh_token="test_refresh_token",
        expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        scopes=["https://www.googleapis.com/auth/documents"],
        token_type="Bearer",
    )


@pytest.fixture
def token_metadata() -> TokenMetadata:
    """Create token metadata for testing."""
    return TokenMetadata(
        service_name="gdocs-mcp",
        provider="google",
        created_at=datetime.now(timezone.utc) - timedelta(days=1),
    )


@pytest.fixture
def stored_token(valid_token: OAuthToken, token_metadata: TokenMetadata) -> StoredToken:
    """Create a complete stored token for testing."""
    return StoredToken(
        version=1,
        metadata=token_metadata,
        token=valid_token,
    )


# =============================================================================
# Token Storage Fixtures
# =============================================================================


@pytest.fixture
def temp_token_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for token storage tests."""
    token_dir = tmp_path / ".gdocs-mcp"
    token_dir.mkdir(parents=True, mode=0o700)
    return token_dir


@pytest.fixture
def temp_token_path(temp_token_dir: Path) -> Path:
    """Get the path for a temporary tokens.json file."""
    return temp_token_dir / "tokens.json"


@pytest.fixture
def token_storage(temp_token_path: Path):
    """Create a TokenStorage instance with temporary storage."""
    from gdocs_mcp.auth.token_storage import TokenStorage

    return TokenStorage(token_path=temp_token_path)


# =============================================================================
# OAuth Manager Fixtures
# =============================================================================


@pytest.fixture
def oauth_manager(token_storage):
    """Create an OAuthManager with temporary storage."""
    from gdocs_mcp.auth.oauth_manager import OAuthManager

    return OAuthManager(storage=token_storage)


# =============================================================================
# Mock Google Credentials
# =============================================================================


@pytest.fixture
def mock_google_credentials() -> MagicMock:
    """Create a mock Google OAuth2 Credentials object."""
    mock_creds = MagicMock()
    mock_creds.token = "mock_access_token"
    mock_creds.refresh_token = "mock_refresh_token"
    mock_creds.expiry = datetime.now(timezone.utc) + timedelta(hours=1)
    mock_creds.expired = False
    mock_creds.valid = True
    mock_creds.scopes = ["https://www.googleapis.com/auth/documents"]
    return mock_creds


# =============================================================================
# Document Fixtures
# =============================================================================


def text_run(start: int, content: str) -> dict[str, Any]:
    """Build a paragraph element holding one text run starting at ``start``."""
    from gdocs_mcp.text_index import utf16_len

    return {
        "startIndex": start,
        "endIndex": start + utf16_len(content),
        "textRun": {"content": content, "textStyle": {}},
    }


def paragraph(*elements: dict[str, Any], style: dict[str, Any] | None = None) -> dict[str, Any]:
    """Wrap paragraph elements in a structural element."""
    return {
        "startIndex": elements[0]["startIndex"],
        "endIndex": elements[-1]["endIndex"],
        "paragraph": {"elements": list(elements), "paragraphStyle": style or {}},
    }


@pytest.fixture
def simple_document() -> dict[str, Any]:
    """A two-paragraph document with no non-text content.

    Flat text: "Hello WORLD world\\nSecond line\\n"
    """
    return {
        "documentId": "doc_1234567890",
        "title": "Simple Doc",
        "body": {
            "content": [
                {"endIndex": 1, "sectionBreak": {}},
                paragraph(text_run(1, "Hello WORLD world\n")),
                paragraph(text_run(19, "Second line\n")),
            ]
        },
    }


@pytest.fixture
def image_document() -> dict[str, Any]:
    """A document whose first paragraph has an inline image splitting "cat".

    Body: "ca" (1-3), image (3-4), "t and cat\\n" (4-14). Flat text is
    "cat and cat\\n"; the first "cat" crosses the image.
    """
    return {
        "documentId": "doc_1234567890",
        "title": "Image Doc",
        "body": {
            "content": [
                {"endIndex": 1, "sectionBreak": {}},
                paragraph(
                    text_run(1, "ca"),
                    {
                        "startIndex": 3,
                        "endIndex": 4,
                        "inlineObjectElement": {"inlineObjectId": "kix.img1"},
                    },
                    text_run(4, "t and cat\n"),
                ),
            ]
        },
        "inlineObjects": {
            "kix.img1": {
                "objectId": "kix.img1",
                "inlineObjectProperties": {
                    "embeddedObject": {
                        "imageProperties": {"contentUri": "https://lh3.example.com/image"},
                    }
                },
            }
        },
    }


# =============================================================================
# CLI Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

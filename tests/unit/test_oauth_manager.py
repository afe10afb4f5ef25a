"""Unit tests for OAuthManager.

Tests cover credential conversion, the authenticate entry point, token
refresh and the consent redirect handling.
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from gdocs_mcp.auth.models import OAuthToken, TokenMetadata, TokenStatus
from gdocs_mcp.auth.oauth_manager import (
    DEFAULT_REDIRECT_URI,
    GOOGLE_DOCS_SCOPES,
    SERVICE_NAME,
    TOKEN_URI,
    OAuthManager,
)
from gdocs_mcp.auth.token_storage import TokenStorage


@pytest.mark.unit
class TestOAuthManagerBasics:
    """Tests for construction and simple accessors."""

    def test_should_use_gdocs_service_name(self, oauth_manager: OAuthManager) -> None:
        """Verify tokens are stored under the gdocs-mcp service."""
        assert oauth_manager._service_name == SERVICE_NAME == "gdocs-mcp"

    def test_should_expose_storage_token_path(
        self, oauth_manager: OAuthManager, token_storage: TokenStorage
    ) -> None:
        """Verify token_path delegates to storage."""
        assert oauth_manager.token_path == token_storage.token_path

    def test_should_request_documents_and_drive_file_scopes(self) -> None:
        """Verify the default scopes are limited to Docs and app-created Drive files."""
        assert GOOGLE_DOCS_SCOPES == [
            "https://www.googleapis.com/auth/documents",
            "https://www.googleapis.com/auth/drive.file",
        ]

    def test_should_report_valid_tokens_only_when_unexpired(
        self,
        oauth_manager: OAuthManager,
        valid_token: OAuthToken,
        expired_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify has_valid_tokens is False for missing and expired tokens."""
        assert oauth_manager.has_valid_tokens() is False

        oauth_manager.storage.store(SERVICE_NAME, expired_token, token_metadata)
        assert oauth_manager.has_valid_tokens() is False

        oauth_manager.storage.store(SERVICE_NAME, valid_token, token_metadata)
        assert oauth_manager.has_valid_tokens() is True

    def test_should_logout(
        self,
        oauth_manager: OAuthManager,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify logout removes the token and reports whether one existed."""
        oauth_manager.storage.store(SERVICE_NAME, valid_token, token_metadata)

        assert oauth_manager.logout() is True
        assert oauth_manager.logout() is False
        assert oauth_manager.get_status() == (TokenStatus.MISSING, None)


@pytest.mark.unit
class TestCredentialConversion:
    """Tests for Credentials <-> OAuthToken conversion."""

    def test_should_convert_credentials_to_token(
        self, oauth_manager: OAuthManager, mock_google_credentials: MagicMock
    ) -> None:
        """Verify token fields are copied from credentials."""
        token = oauth_manager._credentials_to_token(mock_google_credentials, GOOGLE_DOCS_SCOPES)

        assert token.access_token == "mock_access_token"
        assert token.refresh_token == "mock_refresh_token"
        assert token.scopes == GOOGLE_DOCS_SCOPES

    def test_should_default_expiry_to_one_hour(self, oauth_manager: OAuthManager) -> None:
        """Verify credentials without expiry get a one hour lifetime."""
        creds = MagicMock(token="t", refresh_token=None, expiry=None)

        token = oauth_manager._credentials_to_token(creds, [])

        remaining = token.expires_at - datetime.now(timezone.utc)
        assert timedelta(minutes=59) < remaining <= timedelta(hours=1)

    def test_should_make_naive_expiry_aware(self, oauth_manager: OAuthManager) -> None:
        """Verify google-auth's naive UTC expiry is tagged as UTC."""
        naive = datetime(2030, 1, 1, 12, 0, 0)
        creds = MagicMock(token="t", refresh_token=None, expiry=naive)

        token = oauth_manager._credentials_to_token(creds, [])

        assert token.expires_at == naive.replace(tzinfo=timezone.utc)

    def test_should_build_refreshable_credentials_from_environment(
        self, oauth_manager: OAuthManager, valid_token: OAuthToken
    ) -> None:
        """Verify client id and secret come from the environment."""
        env = {"GOOGLE_OAUTH_CLIENT_ID": "cid", "GOOGLE_OAUTH_CLIENT_SECRET": "csecret"}
        with patch.dict(os.environ, env):
            creds = oauth_manager._token_to_credentials(valid_token)

        assert creds.token == valid_token.access_token
        assert creds.refresh_token == valid_token.refresh_token
        assert creds.token_uri == TOKEN_URI
        assert creds.client_id == "cid"
        assert creds.client_secret == "csecret"  # pragma: allowlist secret


@pytest.mark.unit
class TestOAuthManagerAuthenticate:
    """Tests for authenticate()."""

    @pytest.mark.asyncio
    async def test_should_require_client_credentials(self, oauth_manager: OAuthManager) -> None:
        """Verify ValueError without client id or secret."""
        with pytest.raises(ValueError, match="Client ID and secret required"):
            await oauth_manager.authenticate(client_id="only_id")

    @pytest.mark.asyncio
    async def test_should_run_flow_with_default_scopes_and_store_token(
        self, oauth_manager: OAuthManager, mock_google_credentials: MagicMock
    ) -> None:
        """Verify the flow gets a web client config and the token is persisted."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("GOOGLE_OAUTH_REDIRECT_URI", None)
            with patch.object(
                oauth_manager, "_run_oauth_flow", return_value=mock_google_credentials
            ) as mock_flow:
                token = await oauth_manager.authenticate(
                    client_id="test_id", client_secret="test_secret"  # pragma: allowlist secret
                )

        client_config, scopes, redirect_uri = mock_flow.call_args[0]
        assert client_config["web"]["client_id"] == "test_id"
        assert scopes == GOOGLE_DOCS_SCOPES
        assert redirect_uri == DEFAULT_REDIRECT_URI

        assert token.access_token == "mock_access_token"
        stored = oauth_manager.storage.retrieve(SERVICE_NAME)
        assert stored is not None
        assert stored.token.access_token == "mock_access_token"

    @pytest.mark.asyncio
    async def test_should_honour_redirect_uri_override(
        self, oauth_manager: OAuthManager, mock_google_credentials: MagicMock
    ) -> None:
        """Verify GOOGLE_OAUTH_REDIRECT_URI replaces the default."""
        with patch.dict(os.environ, {"GOOGLE_OAUTH_REDIRECT_URI": "http://localhost:9999/cb"}):
            with patch.object(
                oauth_manager, "_run_oauth_flow", return_value=mock_google_credentials
            ) as mock_flow:
                await oauth_manager.authenticate(
                    client_id="test_id", client_secret="test_secret"  # pragma: allowlist secret
                )

        assert mock_flow.call_args[0][2] == "http://localhost:9999/cb"


@pytest.mark.unit
class TestOAuthManagerRefreshIfNeeded:
    """Tests for refresh_if_needed()."""

    @pytest.mark.asyncio
    async def test_should_return_none_without_token(self, oauth_manager: OAuthManager) -> None:
        """Verify None when nothing is stored."""
        assert await oauth_manager.refresh_if_needed() is None

    @pytest.mark.asyncio
    async def test_should_return_valid_token_unchanged(
        self,
        oauth_manager: OAuthManager,
        valid_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify no refresh happens for an unexpired token."""
        oauth_manager.storage.store(SERVICE_NAME, valid_token, token_metadata)

        with patch.object(oauth_manager, "_token_to_credentials") as mock_convert:
            result = await oauth_manager.refresh_if_needed()

        assert result.access_token == valid_token.access_token
        mock_convert.assert_not_called()

    @pytest.mark.asyncio
    async def test_should_return_none_when_expired_without_refresh_token(
        self, oauth_manager: OAuthManager, token_metadata: TokenMetadata
    ) -> None:
        """Verify an expired access-only token cannot be refreshed."""
        token = OAuthToken(
            access_token="expired",
            expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        )
        oauth_manager.storage.store(SERVICE_NAME, token, token_metadata)

        assert await oauth_manager.refresh_if_needed() is None

    @pytest.mark.asyncio
    async def test_should_refresh_and_keep_old_refresh_token(
        self,
        oauth_manager: OAuthManager,
        expired_token: OAuthToken,
        token_metadata: TokenMetadata,
    ) -> None:
        """Verify the refreshed token is stored and keeps the previous refresh token."""
        oauth_manager.storage.store(SERVICE_NAME, expired_token, token_metadata)

        mock_creds = MagicMock()
        mock_creds.token = "refreshed_access_token"
        mock_creds.refresh_token = None
        mock_creds.expiry = datetime.now(timezone.utc) + timedelta(hours=1)

        with patch.object(oauth_manager, "_token_to_credentials", return_value=mock_creds):
            result = await oauth_manager.refresh_if_needed()

        mock_creds.refresh.assert_called_once()
        assert result.access_token == "refreshed_access_token"
        assert result.refresh_token == expired_token.refresh_token

        stored = oauth_manager.storage.retrieve(SERVICE_NAME)
        assert stored.token.access_token == "refreshed_access_token"
        assert stored.metadata.last_refreshed is not None


@pytest.mark.unit
class TestOAuthManagerRunFlow:
    """Tests for the blocking consent flow with the HTTP server mocked out."""

    @staticmethod
    def _client_config() -> dict:
        return {
            "web": {
                "client_id": "test_id",
                "client_secret": "test_secret",  # pragma: allowlist secret
                "redirect_uris": [DEFAULT_REDIRECT_URI],
            }
        }

    def test_should_request_offline_access_and_bind_redirect_port(
        self, oauth_manager: OAuthManager
    ) -> None:
        """Verify consent URL options and the callback server address."""
        mock_flow = MagicMock()
        mock_flow.authorization_url.return_value = ("https://accounts.google.com/auth", "state")

        with patch(
            "gdocs_mcp.auth.oauth_manager.Flow.from_client_config", return_value=mock_flow
        ):
            with patch("gdocs_mcp.auth.oauth_manager.HTTPServer") as mock_server_class:
                with patch("gdocs_mcp.auth.oauth_manager.webbrowser.open") as mock_open:
                    with pytest.raises(RuntimeError, match="No authorization code"):
                        oauth_manager._run_oauth_flow(
                            self._client_config(), GOOGLE_DOCS_SCOPES, DEFAULT_REDIRECT_URI
                        )

        kwargs = mock_flow.authorization_url.call_args.kwargs
        assert kwargs["access_type"] == "offline"
        assert kwargs["prompt"] == "consent"
        assert kwargs["state"]
        assert mock_server_class.call_args[0][0] == ("127.0.0.1", 8789)
        mock_open.assert_called_once_with("https://accounts.google.com/auth")
        mock_server_class.return_value.server_close.assert_called_once()
        mock_flow.fetch_token.assert_not_called()

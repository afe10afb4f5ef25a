"""Google OAuth for gdocs-mcp.

Consent runs once from the CLI (``gdocs-mcp setup``): a browser is pointed
at Google's consent page and a one-shot local HTTP server catches the
redirect. The server only ever refreshes the stored token.

Environment Variables:
    GOOGLE_OAUTH_CLIENT_ID: Google OAuth client ID.
    GOOGLE_OAUTH_CLIENT_SECRET: Google OAuth client secret.
    GOOGLE_OAUTH_REDIRECT_URI: Redirect URI (default: http://127.0.0.1:8789/callback).
"""

import asyncio
import logging
import os
import secrets
import webbrowser
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlparse

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow

from gdocs_mcp.auth.models import OAuthToken, StoredToken, TokenMetadata, TokenStatus
from gdocs_mcp.auth.token_storage import TokenStorage

logger = logging.getLogger(__name__)

GOOGLE_DOCS_SCOPES = [
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/drive.file",
]

SERVICE_NAME = "gdocs-mcp"

TOKEN_URI = "https://oauth2.googleapis.com/token"  # nosec B105 - public endpoint
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"

DEFAULT_OAUTH_HOST = "127.0.0.1"
DEFAULT_OAUTH_PORT = 8789
DEFAULT_REDIRECT_URI = f"http://{DEFAULT_OAUTH_HOST}:{DEFAULT_OAUTH_PORT}/callback"
CALLBACK_TIMEOUT_SECONDS = 300
DEFAULT_TOKEN_LIFETIME = timedelta(hours=1)


def _page(title: str, detail: str) -> bytes:
    return f"<html><body><h1>{title}</h1><p>{detail}</p></body></html>".encode()


@dataclass
class _Redirect:
    """What the callback server saw on the OAuth redirect."""

    code: str | None = None
    error: str | None = None


def _callback_handler(path: str, state: str, redirect: _Redirect) -> type[BaseHTTPRequestHandler]:
    """Build a request handler that records the redirect for ``path`` into ``redirect``."""

    class CallbackHandler(BaseHTTPRequestHandler):
        def log_message(self, format: str, *args: Any) -> None:
            pass

        def _reply(self, status: int, body: bytes) -> None:
            self.send_response(status)
            self.send_header("Content-type", "text/html")
            self.end_headers()
            self.wfile.write(body)

        def do_GET(self) -> None:
            url = urlparse(self.path)
            if url.path != path:
                self._reply(404, b"Not Found")
                return

            query = {key: values[0] for key, values in parse_qs(url.query).items()}
            if "error" in query:
                redirect.error = query["error"]
                self._reply(400, _page("Authorization failed", "Close this window and run setup again."))
            elif query.get("state") != state:
                redirect.error = "state mismatch"
                self._reply(400, _page("Authorization failed", "The state parameter did not match."))
            elif "code" not in query:
                self._reply(400, _page("Authorization failed", "Google sent no authorization code."))
            else:
                redirect.code = query["code"]
                self._reply(200, _page("gdocs-mcp is authorized", "You can close this window."))

    return CallbackHandler


def _client_config(client_id: str, client_secret: str, redirect_uri: str) -> dict[str, Any]:
    return {
        "web": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
            "redirect_uris": [redirect_uri],
        }
    }


def _expiry_of(credentials: Credentials) -> datetime:
    """Return the credentials' expiry as an aware UTC datetime.

    google-auth reports expiry as naive UTC; credentials without one are
    given the standard one hour lifetime.
    """
    if not credentials.expiry:
        return datetime.now(timezone.utc) + DEFAULT_TOKEN_LIFETIME
    if credentials.expiry.tzinfo is None:
        return credentials.expiry.replace(tzinfo=timezone.utc)
    return credentials.expiry


class OAuthManager:
    """Obtains, stores and refreshes the Google token used by the server.

    Attributes:
        storage: Token storage the token is read from and written to.

    Example:
        ```python
        manager = OAuthManager()
        await manager.authenticate(client_id="...", client_secret="...")

        token = await manager.refresh_if_needed()
        ```
    """

    def __init__(self, storage: TokenStorage | None = None) -> None:
        self.storage = storage or TokenStorage()
        self._service_name = SERVICE_NAME

    @property
    def token_path(self) -> Path:
        return self.storage.token_path

    def has_valid_tokens(self) -> bool:
        return self.storage.get_status(self._service_name) == TokenStatus.VALID

    def get_status(self) -> tuple[TokenStatus, StoredToken | None]:
        """Return the token status and, unless it is missing, the stored token."""
        status = self.storage.get_status(self._service_name)
        if status == TokenStatus.MISSING:
            return status, None
        return status, self.storage.retrieve(self._service_name)

    def logout(self) -> bool:
        """Forget the stored token.

        Returns:
            True if a token was removed.
        """
        return self.storage.delete(self._service_name)

    def store_token(self, token: OAuthToken) -> None:
        """Persist ``token`` as the current token for this service."""
        metadata = TokenMetadata(service_name=self._service_name, provider="google")
        self.storage.store(self._service_name, token, metadata)
        logger.info(f"Saved OAuth token to {self.token_path}")

    def _credentials_to_token(self, credentials: Credentials, scopes: list[str]) -> OAuthToken:
        return OAuthToken(  # nosec B106 - "Bearer" is the OAuth token type
            access_token=credentials.token,
            refresh_token=credentials.refresh_token,
            expires_at=_expiry_of(credentials),
            scopes=scopes,
            token_type="Bearer",
        )

    def _token_to_credentials(self, token: OAuthToken) -> Credentials:
        """Build refreshable Credentials for ``token``.

        Refreshing needs the client id and secret, which come from the
        environment rather than the token file.
        """
        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=TOKEN_URI,
            client_id=os.environ.get("GOOGLE_OAUTH_CLIENT_ID"),
            client_secret=os.environ.get("GOOGLE_OAUTH_CLIENT_SECRET"),
            scopes=token.scopes,
        )

    async def authenticate(
        self,
        scopes: list[str] | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
    ) -> OAuthToken:
        """Run browser consent and store the resulting token.

        Args:
            scopes: Scopes to request. Defaults to GOOGLE_DOCS_SCOPES.
            client_id: Google OAuth client ID.
            client_secret: Google OAuth client secret.

        Returns:
            The stored token.

        Raises:
            ValueError: If the client ID or secret is missing.
            RuntimeError: If Google reports an error or no code arrives.
        """
        if not client_id or not client_secret:
            raise ValueError(
                "Client ID and secret required. "
                "Pass them in or set GOOGLE_OAUTH_CLIENT_ID and "
                "GOOGLE_OAUTH_CLIENT_SECRET."
            )
        scopes = scopes or GOOGLE_DOCS_SCOPES
        redirect_uri = os.environ.get("GOOGLE_OAUTH_REDIRECT_URI", DEFAULT_REDIRECT_URI)

        credentials = await asyncio.get_running_loop().run_in_executor(
            None,
            self._run_oauth_flow,
            _client_config(client_id, client_secret, redirect_uri),
            scopes,
            redirect_uri,
        )

        token = self._credentials_to_token(credentials, scopes)
        self.store_token(token)
        return token

    def _run_oauth_flow(
        self, client_config: dict[str, Any], scopes: list[str], redirect_uri: str
    ) -> Credentials:
        """Open the consent page and block until the redirect arrives.

        Offline access with a forced consent prompt makes Google issue a
        refresh token every time.
        """
        flow = Flow.from_client_config(client_config, scopes=scopes, redirect_uri=redirect_uri)
        state = secrets.token_urlsafe(32)
        consent_url, _ = flow.authorization_url(
            access_type="offline", prompt="consent", state=state
        )

        target = urlparse(redirect_uri)
        redirect = _Redirect()
        handler = _callback_handler(target.path or "/callback", state, redirect)
        server = HTTPServer(
            (target.hostname or DEFAULT_OAUTH_HOST, target.port or DEFAULT_OAUTH_PORT), handler
        )
        server.timeout = CALLBACK_TIMEOUT_SECONDS

        print("Opening your browser to authorize gdocs-mcp...")
        print(f"If nothing opens, visit: {consent_url}")
        webbrowser.open(consent_url)
        try:
            server.handle_request()
        finally:
            server.server_close()

        if redirect.error:
            raise RuntimeError(f"OAuth authentication failed: {redirect.error}")
        if not redirect.code:
            raise RuntimeError("No authorization code received from Google")

        flow.fetch_token(code=redirect.code)
        return flow.credentials

    async def refresh_if_needed(self) -> OAuthToken | None:
        """Return a usable token, refreshing the stored one if it has expired.

        Google may omit the refresh token from a refresh response; the
        previous one is kept in that case.

        Returns:
            The current or refreshed token, or None when there is no token
            or it cannot be refreshed.
        """
        stored = self.storage.retrieve(self._service_name)
        if stored is None:
            return None
        if not stored.token.is_expired():
            return stored.token
        if not stored.token.refresh_token:
            logger.warning("Stored token expired and has no refresh token")
            return None

        credentials = self._token_to_credentials(stored.token)
        await asyncio.get_running_loop().run_in_executor(None, credentials.refresh, Request())

        refreshed = self._credentials_to_token(credentials, stored.token.scopes)
        if refreshed.refresh_token is None:
            refreshed = refreshed.model_copy(update={"refresh_token": stored.token.refresh_token})

        stored.metadata.last_refreshed = datetime.now(timezone.utc)
        self.storage.store(self._service_name, refreshed, stored.metadata)
        logger.info("Refreshed OAuth access token")
        return refreshed

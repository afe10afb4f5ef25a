"""OAuth token storage for gdocs-mcp.

Tokens live in one JSON file per project, keyed by service name:

    ./.gdocs-mcp/tokens.json

The directory is kept at 0700 and the file at 0600. Run ``gdocs-mcp setup``
from each project directory that needs its own token.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gdocs_mcp.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)

logger = logging.getLogger(__name__)

CREDENTIALS_DIR_NAME = ".gdocs-mcp"
TOKEN_FILE_NAME = "tokens.json"
STORAGE_VERSION = 1


def get_token_path() -> Path:
    """Return ./.gdocs-mcp/tokens.json under the current directory."""
    return Path.cwd() / CREDENTIALS_DIR_NAME / TOKEN_FILE_NAME


class TokenStorage:
    """Service-keyed token file.

    A file that cannot be read or is not a JSON object is treated as
    holding no tokens; an entry that does not validate reports
    ``TokenStatus.INVALID``.

    Attributes:
        token_path: Path to the tokens.json file.
        credentials_dir: Directory holding ``token_path``.

    Example:
        ```python
        storage = TokenStorage()
        storage.store("gdocs-mcp", token, TokenMetadata(service_name="gdocs-mcp"))
        stored = storage.retrieve("gdocs-mcp")
        ```
    """

    def __init__(self, token_path: Path | None = None) -> None:
        self.token_path = token_path or get_token_path()
        self.credentials_dir = self.token_path.parent
        self._secure_dir()

    def _secure_dir(self) -> None:
        self.credentials_dir.mkdir(parents=True, mode=0o700, exist_ok=True)
        self.credentials_dir.chmod(0o700)

    def _load_tokens(self) -> dict[str, Any]:
        if not self.token_path.exists():
            return {}
        try:
            with open(self.token_path) as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read token file {self.token_path}: {e}")
            return {}
        if isinstance(records, dict):
            return records
        logger.warning(f"Ignoring token file {self.token_path}: expected a JSON object")
        return {}

    def _write_tokens(self, records: dict[str, Any]) -> None:
        self._secure_dir()
        with open(self.token_path, "w") as f:
            json.dump(records, f, indent=2)
        self.token_path.chmod(0o600)

    def store(self, service_name: str, token: OAuthToken, metadata: TokenMetadata) -> None:
        """Write the token for ``service_name``, replacing any previous one."""
        record = StoredToken(version=STORAGE_VERSION, metadata=metadata, token=token)
        records = self._load_tokens()
        records[service_name] = record.model_dump(mode="json")
        self._write_tokens(records)
        logger.debug(f"Stored token for {service_name} at {self.token_path}")

    def retrieve(self, service_name: str) -> StoredToken | None:
        """Return the token for ``service_name``, or None if absent or unparseable."""
        record = self._load_tokens().get(service_name)
        if record is None:
            return None
        try:
            return StoredToken.model_validate(record)
        except ValidationError as e:
            logger.warning(f"Stored token for {service_name} is invalid: {e.error_count()} error(s)")
            return None

    def delete(self, service_name: str) -> bool:
        """Remove the token for ``service_name``.

        Returns:
            True if a token was removed.
        """
        records = self._load_tokens()
        if records.pop(service_name, None) is None:
            return False
        self._write_tokens(records)
        return True

    def list_services(self) -> list[str]:
        return sorted(self._load_tokens())

    def get_status(self, service_name: str) -> TokenStatus:
        records = self._load_tokens()
        if service_name not in records:
            return TokenStatus.MISSING
        stored = self.retrieve(service_name)
        if stored is None:
            return TokenStatus.INVALID
        return TokenStatus.EXPIRED if stored.token.is_expired() else TokenStatus.VALID

    def clear_all(self) -> None:
        """Remove the token file."""
        self.token_path.unlink(missing_ok=True)


def load_client_secrets(path: Path) -> tuple[str, str]:
    """Read the OAuth client id and secret from a Google client secrets file.

    Accepts the ``credentials.json`` downloaded from the Google Cloud console
    for either a Desktop (``installed``) or Web (``web``) OAuth client.

    Args:
        path: Path to the client secrets JSON file.

    Returns:
        Tuple of (client_id, client_secret).

    Raises:
        ValueError: If the file is not a recognisable client secrets file.
    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read client secrets file {path}: {e}") from e

    section: Any = None
    if isinstance(data, dict):
        section = data.get("installed") or data.get("web")
    if not isinstance(section, dict):
        raise ValueError(f"{path} has no 'installed' or 'web' client section")

    client_id = section.get("client_id")
    client_secret = section.get("client_secret")
    if not client_id or not client_secret:
        raise ValueError(f"{path} is missing client_id or client_secret")
    return client_id, client_secret


def token_from_legacy_file(path: Path) -> OAuthToken:
    """Parse a ``token.json`` written by the googleapis Node client.

    The legacy file holds ``access_token``, ``refresh_token``, a
    space-separated ``scope`` string, ``token_type`` and ``expiry_date``
    in epoch milliseconds.

    Raises:
        ValueError: If the file cannot be read or has no access token.
    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read token file {path}: {e}") from e

    if not isinstance(data, dict) or not data.get("access_token"):
        raise ValueError(f"{path} does not contain an access_token")

    expiry_ms = data.get("expiry_date")
    if isinstance(expiry_ms, (int, float)):
        expires_at = datetime.fromtimestamp(expiry_ms / 1000, tz=timezone.utc)
    else:
        # Unknown expiry: treat as already expired so the refresh token is used.
        expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)

    scope = data.get("scope") or ""
    return OAuthToken(
        access_token=data["access_token"],
        refresh_token=data.get("refresh_token"),
        expires_at=expires_at,
        scopes=scope.split(),
        token_type=data.get("token_type") or "Bearer",
    )

"""OAuth authentication for gdocs-mcp.

Quick Start:
    ```python
    from gdocs_mcp.auth import OAuthManager

    manager = OAuthManager()
    token = await manager.authenticate(
        client_id="your-client-id",
        client_secret="your-client-secret"  # pragma: allowlist secret
    )
    current = await manager.refresh_if_needed()
    ```
"""

from gdocs_mcp.auth.models import (
    OAuthToken,
    StoredToken,
    TokenMetadata,
    TokenStatus,
)
from gdocs_mcp.auth.oauth_manager import GOOGLE_DOCS_SCOPES, SERVICE_NAME, OAuthManager
from gdocs_mcp.auth.token_storage import (
    TokenStorage,
    load_client_secrets,
    token_from_legacy_file,
)

__all__ = [
    "OAuthManager",
    "TokenStorage",
    "OAuthToken",
    "StoredToken",
    "TokenMetadata",
    "TokenStatus",
    "GOOGLE_DOCS_SCOPES",
    "SERVICE_NAME",
    "load_client_secrets",
    "token_from_legacy_file",
]

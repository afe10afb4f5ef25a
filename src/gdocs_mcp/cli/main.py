"""Command-line interface for gdocs-mcp."""

import asyncio
import sys
from pathlib import Path

import click

from gdocs_mcp.__version__ import __version__

REQUIRED_MODULES = {
    "google.auth": "google-auth",
    "google_auth_oauthlib": "google-auth-oauthlib",
    "httpx": "httpx",
    "mcp": "mcp",
}


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Google Docs MCP Server - edit Google Docs from an MCP client.

    Tools cover document creation and reading, text editing, find and
    replace, formatting, tables, images and document structure.
    """
    pass


@main.command()
@click.option("--client-id", envvar="GOOGLE_OAUTH_CLIENT_ID", help="Google OAuth client ID")
@click.option(
    "--client-secret", envvar="GOOGLE_OAUTH_CLIENT_SECRET", help="Google OAuth client secret"
)
@click.option(
    "--credentials-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Client secrets JSON downloaded from the Google Cloud console",
)
def setup(
    client_id: str | None,
    client_secret: str | None,
    credentials_file: Path | None,
) -> None:
    """Set up Google OAuth authentication.

    Opens the browser for the OAuth2 consent flow and stores the resulting
    tokens at ./.gdocs-mcp/tokens.json.

    Client credentials come from --client-id/--client-secret (or the
    GOOGLE_OAUTH_CLIENT_ID / GOOGLE_OAUTH_CLIENT_SECRET environment
    variables), or from a client secrets file via --credentials-file.
    """
    from gdocs_mcp.auth import OAuthManager, load_client_secrets

    if credentials_file is not None:
        try:
            client_id, client_secret = load_client_secrets(credentials_file)
        except ValueError as e:
            click.echo(f"❌ Error: {e}")
            sys.exit(1)

    manager = OAuthManager()

    if manager.has_valid_tokens():
        click.echo("✓ Already authenticated!")
        click.echo(f"Token stored at: {manager.token_path}")
        click.echo("")

        if not click.confirm("Re-authenticate?"):
            return

    if not client_id or not client_secret:
        click.echo("❌ Error: OAuth client credentials required")
        click.echo("")
        click.echo("Set environment variables:")
        click.echo("  export GOOGLE_OAUTH_CLIENT_ID='your-client-id'")
        click.echo("  export GOOGLE_OAUTH_CLIENT_SECRET='your-client-secret'")
        click.echo("")
        click.echo("Or pass as options:")
        click.echo("  gdocs-mcp setup --client-id=... --client-secret=...")
        click.echo("  gdocs-mcp setup --credentials-file=credentials.json")
        sys.exit(1)

    click.echo("Starting OAuth authentication flow...")
    click.echo("Browser will open for Google consent...")
    click.echo("")

    try:
        asyncio.run(manager.authenticate(client_id=client_id, client_secret=client_secret))
        click.echo("✓ Authentication successful!")
        click.echo(f"Token stored at: {manager.token_path}")
        click.echo("")
        click.echo("Run 'gdocs-mcp doctor' to verify setup.")
    except Exception as e:
        click.echo(f"❌ Authentication failed: {e}")
        sys.exit(1)


@main.command("import-token")
@click.argument("token_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_token(token_file: Path) -> None:
    """Import an existing token.json into the token store.

    TOKEN_FILE is a token written by the googleapis Node client
    (access_token, refresh_token, scope, expiry_date in milliseconds).
    """
    from gdocs_mcp.auth import OAuthManager, token_from_legacy_file

    try:
        token = token_from_legacy_file(token_file)
    except ValueError as e:
        click.echo(f"❌ Import failed: {e}")
        sys.exit(1)

    manager = OAuthManager()
    manager.store_token(token)

    click.echo(f"✓ Imported token from {token_file}")
    click.echo(f"Token stored at: {manager.token_path}")
    if token.is_expired():
        if token.refresh_token:
            click.echo("Token is expired and will be refreshed on first use.")
        else:
            click.echo("⚠️  Token is expired and has no refresh token. Run 'gdocs-mcp setup'.")


@main.command()
def mcp() -> None:
    """Start the MCP server over stdio.

    Authentication is required before starting the server.
    Run 'gdocs-mcp setup' if not already authenticated.
    """
    from gdocs_mcp.auth import OAuthManager, TokenStatus
    from gdocs_mcp.server import TOOL_COUNT
    from gdocs_mcp.server import main as server_main

    manager = OAuthManager()
    status, _ = manager.get_status()

    if status == TokenStatus.MISSING:
        click.echo("❌ Not authenticated. Run 'gdocs-mcp setup' first.")
        sys.exit(1)

    if status == TokenStatus.INVALID:
        click.echo("❌ Token file corrupted. Run 'gdocs-mcp setup' to re-authenticate.")
        sys.exit(1)

    try:
        click.echo("Starting Google Docs MCP server...", err=True)
        click.echo(f"Server provides {TOOL_COUNT} tools", err=True)
        click.echo("", err=True)
        server_main()
    except KeyboardInterrupt:
        click.echo("\nServer stopped.", err=True)
    except Exception as e:
        click.echo(f"❌ Server error: {e}", err=True)
        sys.exit(1)


@main.command()
def status() -> None:
    """Print the authentication status in one line."""
    from gdocs_mcp.auth import OAuthManager, TokenStatus

    manager = OAuthManager()
    token_status, stored = manager.get_status()

    if token_status == TokenStatus.VALID and stored:
        expires = stored.token.expires_at.strftime("%Y-%m-%d %H:%M:%S UTC")
        click.echo(f"valid (expires {expires})")
    else:
        click.echo(token_status.value)
        if token_status in (TokenStatus.MISSING, TokenStatus.INVALID):
            sys.exit(1)


@main.command()
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def logout(yes: bool) -> None:
    """Remove the stored OAuth token."""
    from gdocs_mcp.auth import OAuthManager

    manager = OAuthManager()

    if not yes and not click.confirm(f"Remove stored token at {manager.token_path}?"):
        return

    if manager.logout():
        click.echo("✓ Token removed.")
    else:
        click.echo("No stored token.")


@main.command()
def doctor() -> None:
    """Check dependencies, OAuth client configuration and the stored token."""
    import importlib.util
    import os

    from gdocs_mcp.auth import OAuthManager, TokenStatus

    click.echo(f"gdocs-mcp {__version__}")
    click.echo("")

    click.echo("Dependencies:")
    missing = [
        distribution
        for module, distribution in REQUIRED_MODULES.items()
        if importlib.util.find_spec(module) is None
    ]
    for distribution in REQUIRED_MODULES.values():
        mark = "❌" if distribution in missing else "✓"
        click.echo(f"  {mark} {distribution}")
    if missing:
        click.echo(f"Install the missing packages: pip install {' '.join(missing)}")
        sys.exit(1)
    click.echo("")

    click.echo("OAuth client:")
    if os.environ.get("GOOGLE_OAUTH_CLIENT_ID") and os.environ.get("GOOGLE_OAUTH_CLIENT_SECRET"):
        click.echo("  ✓ GOOGLE_OAUTH_CLIENT_ID / GOOGLE_OAUTH_CLIENT_SECRET set")
    else:
        click.echo("  ⚠️  Client credentials not set (needed to refresh expired tokens)")
    click.echo("")

    manager = OAuthManager()
    token_status, stored = manager.get_status()
    click.echo(f"Token ({manager.token_path}):")

    if token_status in (TokenStatus.MISSING, TokenStatus.INVALID):
        problem = "no token stored" if token_status == TokenStatus.MISSING else "token file unreadable"
        click.echo(f"  ❌ {problem}; run 'gdocs-mcp setup'")
        sys.exit(1)

    if token_status == TokenStatus.EXPIRED:
        click.echo("  ⚠️  expired, will be refreshed on first use")
    elif stored:
        click.echo(f"  ✓ valid until {stored.token.expires_at:%Y-%m-%d %H:%M:%S UTC}")
        click.echo(f"  Scopes: {', '.join(stored.token.scopes) or 'none recorded'}")

    click.echo("")
    click.echo("✓ Ready to use!")


if __name__ == "__main__":
    main()

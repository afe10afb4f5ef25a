"""CLI tests for setup, import-token, status, logout and doctor."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from gdocs_mcp.auth.models import StoredToken, TokenStatus
from gdocs_mcp.cli.main import main

NO_CLIENT_ENV = {"GOOGLE_OAUTH_CLIENT_ID": None, "GOOGLE_OAUTH_CLIENT_SECRET": None}


def _mock_manager() -> MagicMock:
    mock_manager = MagicMock()
    mock_manager.has_valid_tokens.return_value = False
    mock_manager.authenticate = AsyncMock()
    mock_manager.token_path = "/tmp/.gdocs-mcp/tokens.json"
    return mock_manager


@pytest.mark.unit
class TestSetupCommand:
    """Tests for the setup CLI command."""

    def test_should_show_error_without_credentials(self, cli_runner: CliRunner) -> None:
        """Verify error shown when client ID/secret not provided."""
        with cli_runner.isolated_filesystem():
            result = cli_runner.invoke(main, ["setup"], env=NO_CLIENT_ENV)

        assert result.exit_code == 1
        assert "OAuth client credentials required" in result.output

    def test_should_run_authentication_with_credentials(self, cli_runner: CliRunner) -> None:
        """Verify authentication runs and the browser message is shown."""
        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager = _mock_manager()
            mock_manager_class.return_value = mock_manager

            result = cli_runner.invoke(
                main,
                ["setup", "--client-id=test_id", "--client-secret=test_secret"],
            )

        mock_manager.authenticate.assert_called_once_with(
            client_id="test_id",
            client_secret="test_secret",  # pragma: allowlist secret
        )
        assert "Browser will open" in result.output
        assert "Authentication successful" in result.output

    def test_should_read_client_secrets_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Verify --credentials-file supplies client id and secret."""
        credentials = tmp_path / "credentials.json"
        credentials.write_text(
            json.dumps({"installed": {"client_id": "file_id", "client_secret": "file_secret"}})
        )

        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager = _mock_manager()
            mock_manager_class.return_value = mock_manager

            result = cli_runner.invoke(
                main, ["setup", f"--credentials-file={credentials}"], env=NO_CLIENT_ENV
            )

        assert result.exit_code == 0
        mock_manager.authenticate.assert_called_once_with(
            client_id="file_id",
            client_secret="file_secret",  # pragma: allowlist secret
        )

    def test_should_report_authentication_failure(self, cli_runner: CliRunner) -> None:
        """Verify a failing flow exits with status 1."""
        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager = _mock_manager()
            mock_manager.authenticate = AsyncMock(side_effect=RuntimeError("state mismatch"))
            mock_manager_class.return_value = mock_manager

            result = cli_runner.invoke(
                main, ["setup", "--client-id=test_id", "--client-secret=test_secret"]
            )

        assert result.exit_code == 1
        assert "state mismatch" in result.output


@pytest.mark.unit
class TestImportTokenCommand:
    """Tests for import-token."""

    def test_should_store_imported_token(self, cli_runner: CliRunner) -> None:
        """Verify a legacy token.json lands in ./.gdocs-mcp/tokens.json."""
        with cli_runner.isolated_filesystem():
            Path("token.json").write_text(
                json.dumps(
                    {
                        "access_token": "ya29.legacy",
                        "refresh_token": "1//refresh",
                        "scope": "https://www.googleapis.com/auth/documents",
                        "token_type": "Bearer",
                        "expiry_date": 1000,
                    }
                )
            )

            result = cli_runner.invoke(main, ["import-token", "token.json"])

            assert result.exit_code == 0
            assert "Imported token" in result.output
            assert "will be refreshed" in result.output
            data = json.loads(Path(".gdocs-mcp/tokens.json").read_text())
            stored = StoredToken.model_validate(data["gdocs-mcp"])
            assert stored.token.access_token == "ya29.legacy"

    def test_should_reject_invalid_token_file(self, cli_runner: CliRunner) -> None:
        """Verify files without an access token are refused."""
        with cli_runner.isolated_filesystem():
            Path("token.json").write_text("{}")

            result = cli_runner.invoke(main, ["import-token", "token.json"])

        assert result.exit_code == 1
        assert "Import failed" in result.output


@pytest.mark.unit
class TestStatusAndLogoutCommands:
    """Tests for status and logout."""

    def test_should_exit_nonzero_when_missing(self, cli_runner: CliRunner) -> None:
        """Verify status prints 'missing' and exits 1."""
        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager_class.return_value.get_status.return_value = (TokenStatus.MISSING, None)

            result = cli_runner.invoke(main, ["status"])

        assert result.exit_code == 1
        assert result.output.strip() == "missing"

    def test_should_print_expiry_when_valid(
        self, cli_runner: CliRunner, stored_token: StoredToken
    ) -> None:
        """Verify status shows the expiry of a valid token."""
        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager_class.return_value.get_status.return_value = (
                TokenStatus.VALID,
                stored_token,
            )

            result = cli_runner.invoke(main, ["status"])

        assert result.exit_code == 0
        assert result.output.startswith("valid (expires ")

    def test_should_logout_without_prompt(self, cli_runner: CliRunner) -> None:
        """Verify --yes skips confirmation and removes the token."""
        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager_class.return_value.logout.return_value = True

            result = cli_runner.invoke(main, ["logout", "--yes"])

        assert result.exit_code == 0
        assert "Token removed" in result.output
        mock_manager_class.return_value.logout.assert_called_once()


@pytest.mark.unit
class TestDoctorCommand:
    """Tests for the doctor command."""

    def test_should_report_ready_with_valid_token(
        self, cli_runner: CliRunner, stored_token: StoredToken
    ) -> None:
        """Verify dependencies, client env and token are all reported."""
        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager = _mock_manager()
            mock_manager.get_status.return_value = (TokenStatus.VALID, stored_token)
            mock_manager_class.return_value = mock_manager

            result = cli_runner.invoke(
                main,
                ["doctor"],
                env={"GOOGLE_OAUTH_CLIENT_ID": "cid", "GOOGLE_OAUTH_CLIENT_SECRET": "csecret"},
            )

        assert result.exit_code == 0
        assert "✓ httpx" in result.output
        assert "GOOGLE_OAUTH_CLIENT_ID / GOOGLE_OAUTH_CLIENT_SECRET set" in result.output
        assert "https://www.googleapis.com/auth/documents" in result.output
        assert "Ready to use" in result.output

    def test_should_fail_without_token(self, cli_runner: CliRunner) -> None:
        """Verify a missing token exits 1 with a setup hint."""
        with patch("gdocs_mcp.auth.OAuthManager") as mock_manager_class:
            mock_manager = _mock_manager()
            mock_manager.get_status.return_value = (TokenStatus.MISSING, None)
            mock_manager_class.return_value = mock_manager

            result = cli_runner.invoke(main, ["doctor"], env=NO_CLIENT_ENV)

        assert result.exit_code == 1
        assert "no token stored" in result.output
        assert "Client credentials not set" in result.output

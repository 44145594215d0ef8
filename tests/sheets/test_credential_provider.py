"""Tests for CredentialProvider - cached and interactive OAuth2 tokens."""
import os
import stat
import sys
import webbrowser
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError
from oauthlib.oauth2.rfc6749.errors import (
    AccessDeniedError,
    InvalidGrantError,
    MismatchingStateError,
)

from timetracker.errors import CredentialError
from timetracker.sheets.CredentialProvider import SCOPES, CredentialProvider

MODULE = "timetracker.sheets.CredentialProvider"


@pytest.fixture
def provider(tmp_path):
    return CredentialProvider(
        credentials_file=tmp_path / "credentials.json",
        token_file=tmp_path / "token.json",
    )


def _creds(valid=True, expired=False, refresh_token="refresh", token_json='{"token": "t"}'):
    creds = MagicMock()
    creds.valid = valid
    creds.expired = expired
    creds.refresh_token = refresh_token
    creds.to_json.return_value = token_json
    return creds


class TestLoadCached:

    def test_no_token_file_returns_none(self, provider):
        with patch(f"{MODULE}.Credentials") as MockCredentials:
            assert provider.load_cached() is None
            MockCredentials.from_authorized_user_file.assert_not_called()

    def test_valid_token_returned(self, provider, tmp_path):
        (tmp_path / "token.json").write_text("{}")
        creds = _creds()

        with patch(f"{MODULE}.Credentials") as MockCredentials:
            MockCredentials.from_authorized_user_file.return_value = creds
            assert provider.load_cached() is creds
            MockCredentials.from_authorized_user_file.assert_called_once_with(
                str(tmp_path / "token.json"), SCOPES
            )

    def test_expired_token_refreshed_and_saved(self, provider, tmp_path):
        (tmp_path / "token.json").write_text("{}")
        creds = _creds(valid=False, expired=True, token_json='{"token": "fresh"}')

        with patch(f"{MODULE}.Credentials") as MockCredentials, patch(f"{MODULE}.Request"):
            MockCredentials.from_authorized_user_file.return_value = creds
            assert provider.load_cached() is creds

        creds.refresh.assert_called_once()
        assert (tmp_path / "token.json").read_text() == '{"token": "fresh"}'

    def test_refresh_failure_returns_none(self, provider, tmp_path):
        (tmp_path / "token.json").write_text("{}")
        creds = _creds(valid=False, expired=True)
        creds.refresh.side_effect = RefreshError("invalid_grant")

        with patch(f"{MODULE}.Credentials") as MockCredentials, patch(f"{MODULE}.Request"):
            MockCredentials.from_authorized_user_file.return_value = creds
            assert provider.load_cached() is None

    def test_corrupt_token_returns_none(self, provider, tmp_path):
        (tmp_path / "token.json").write_text("{}")

        with patch(f"{MODULE}.Credentials") as MockCredentials:
            MockCredentials.from_authorized_user_file.side_effect = ValueError("missing fields")
            assert provider.load_cached() is None

    def test_invalid_token_without_refresh_token_returns_none(self, provider, tmp_path):
        (tmp_path / "token.json").write_text("{}")
        creds = _creds(valid=False, expired=True, refresh_token=None)

        with patch(f"{MODULE}.Credentials") as MockCredentials:
            MockCredentials.from_authorized_user_file.return_value = creds
            assert provider.load_cached() is None


class TestObtainInteractive:

    def test_missing_client_secrets_raises(self, provider):
        with pytest.raises(CredentialError, match="credentials file"):
            provider.obtain_interactive()

    def test_flow_token_saved(self, provider, tmp_path):
        (tmp_path / "credentials.json").write_text("{}")
        creds = _creds(token_json='{"token": "new"}')

        with patch(f"{MODULE}.InstalledAppFlow") as MockFlow:
            MockFlow.from_client_secrets_file.return_value.run_local_server.return_value = creds
            assert provider.obtain_interactive() is creds
            MockFlow.from_client_secrets_file.assert_called_once_with(
                str(tmp_path / "credentials.json"), SCOPES
            )

        token_file = tmp_path / "token.json"
        assert token_file.read_text() == '{"token": "new"}'
        if sys.platform != "win32":
            assert stat.S_IMODE(os.stat(token_file).st_mode) == 0o600

    def test_flow_failure_raises_credential_error(self, provider, tmp_path):
        (tmp_path / "credentials.json").write_text("{}")

        with patch(f"{MODULE}.InstalledAppFlow") as MockFlow:
            MockFlow.from_client_secrets_file.side_effect = ValueError("Client secrets must be for a web or installed app")
            with pytest.raises(CredentialError):
                provider.obtain_interactive()

    @pytest.mark.parametrize("error", [
        AccessDeniedError(description="user denied"),
        MismatchingStateError(),
        InvalidGrantError(description="bad code"),
        webbrowser.Error("could not locate runnable browser"),
    ])
    def test_consent_failures_raise_credential_error(self, provider, tmp_path, error):
        (tmp_path / "credentials.json").write_text("{}")

        with patch(f"{MODULE}.InstalledAppFlow") as MockFlow:
            MockFlow.from_client_secrets_file.return_value.run_local_server.side_effect = error
            with pytest.raises(CredentialError):
                provider.build_service()

        assert not (tmp_path / "token.json").exists()


class TestBuildService:

    def test_uses_cached_credentials_when_available(self, provider):
        creds = _creds()

        with patch.object(provider, "load_cached", return_value=creds), \
                patch.object(provider, "obtain_interactive") as interactive, \
                patch(f"{MODULE}.build") as mock_build:
            service = provider.build_service()

        interactive.assert_not_called()
        mock_build.assert_called_once_with("sheets", "v4", credentials=creds, cache_discovery=False)
        assert service is mock_build.return_value

    def test_falls_back_to_interactive(self, provider):
        creds = _creds()

        with patch.object(provider, "load_cached", return_value=None), \
                patch.object(provider, "obtain_interactive", return_value=creds) as interactive, \
                patch(f"{MODULE}.build"):
            provider.build_service()

        interactive.assert_called_once()

    def test_missing_credentials_propagates_credential_error(self, provider):
        with pytest.raises(CredentialError):
            provider.build_service()

    def test_build_failure_wrapped(self, provider):
        with patch.object(provider, "load_cached", return_value=_creds()), \
                patch(f"{MODULE}.build", side_effect=RuntimeError("discovery failed")):
            with pytest.raises(CredentialError, match="discovery failed"):
                provider.build_service()

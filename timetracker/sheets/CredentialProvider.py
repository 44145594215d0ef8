"""OAuth2 credentials for the Google Sheets API.

Uses an installed-app OAuth client (credentials.json) and a persisted
authorized-user token (token.json), both in the user config directory.
"""
import logging
import os
import webbrowser
from pathlib import Path
from typing import List, Optional

from google.auth.exceptions import GoogleAuthError, RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import Resource, build
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from timetracker.errors import CredentialError

logger = logging.getLogger(__name__)

SCOPES: List[str] = ["https://www.googleapis.com/auth/spreadsheets"]


class CredentialProvider:
    """
    Produces authenticated Sheets services.

    load_cached() never prompts the user; obtain_interactive() opens the
    consent page in a browser and blocks until the user completes it.

    Args:
        credentials_file: OAuth2 client secrets downloaded from Google Cloud
        token_file: Where the authorized-user token is persisted
    """

    def __init__(self, credentials_file: Path, token_file: Path, scopes: Optional[List[str]] = None):
        self._credentials_file = credentials_file
        self._token_file = token_file
        self._scopes = list(scopes or SCOPES)

    def load_cached(self) -> Optional[Credentials]:
        """
        Return a usable token from disk, refreshing it if expired.

        Returns:
            Valid credentials, or None if no usable token is stored
        """
        if not self._token_file.exists():
            return None

        try:
            creds = Credentials.from_authorized_user_file(str(self._token_file), self._scopes)
        except (OSError, ValueError) as e:
            logger.warning(f"CredentialProvider: ignoring unreadable token {self._token_file}: {e}")
            return None

        if creds.valid:
            return creds

        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
            except (RefreshError, TransportError) as e:
                logger.warning(f"CredentialProvider: token refresh failed: {e}")
                return None
            self._save_token(creds)
            logger.info("CredentialProvider: refreshed cached token")
            return creds

        return None

    def obtain_interactive(self) -> Credentials:
        """
        Run the browser consent flow and persist the resulting token.

        Raises:
            CredentialError: Missing client secrets or the flow failed
        """
        if not self._credentials_file.exists():
            raise CredentialError(f"unable to read credentials file: {self._credentials_file}")

        try:
            flow = InstalledAppFlow.from_client_secrets_file(str(self._credentials_file), self._scopes)
            creds = flow.run_local_server(port=0, access_type="offline", prompt="consent")
        except (OSError, ValueError, GoogleAuthError, OAuth2Error, webbrowser.Error) as e:
            # OAuth2Error covers denied consent, state mismatch and invalid grant
            raise CredentialError(f"unable to obtain OAuth2 token: {e}") from e

        self._save_token(creds)
        return creds

    def get_credentials(self) -> Credentials:
        creds = self.load_cached()
        if creds is not None:
            return creds
        logger.info("CredentialProvider: no cached token, starting interactive flow")
        return self.obtain_interactive()

    def build_service(self) -> Resource:
        """
        Build an authenticated Sheets v4 service.

        Raises:
            CredentialError: If credentials or the service cannot be created
        """
        creds = self.get_credentials()
        try:
            return build("sheets", "v4", credentials=creds, cache_discovery=False)
        except Exception as e:
            raise CredentialError(f"unable to create Sheets service: {e}") from e

    def _save_token(self, creds: Credentials) -> None:
        """Write token.json with owner-only permissions."""
        try:
            self._token_file.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self._token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as e:
            # A token that cannot be cached still works for this session
            logger.error(f"CredentialProvider: unable to cache token: {e}")
            return

        logger.debug(f"CredentialProvider: token saved to {self._token_file}")


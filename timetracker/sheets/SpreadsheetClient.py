import logging
from typing import Any, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from timetracker.errors import InvalidArgumentError, RemoteSubmitError

logger = logging.getLogger(__name__)


class SpreadsheetClient:
    """
    Appends time entry rows to a Google Sheet.

    One call, no retries: a failed submission is reported and the user
    resubmits from the still-filled form.

    Args:
        service: Authenticated Sheets v4 service from googleapiclient
    """

    COLUMNS = 7
    VALUE_INPUT_OPTION = "USER_ENTERED"

    def __init__(self, service: Resource) -> None:
        self._service = service

    @staticmethod
    def row_range(sheet_name: str) -> str:
        return f"{sheet_name}!A:G"

    def append_row(self, spreadsheet_id: str, sheet_name: str, values: Sequence[Any]) -> None:
        """
        Append one row to the end of the sheet's A:G range.

        Args:
            spreadsheet_id: Target spreadsheet, must be non-empty
            sheet_name: Tab name within the spreadsheet
            values: Exactly seven cell values

        Raises:
            InvalidArgumentError: Empty spreadsheet_id or wrong column count
            RemoteSubmitError: Transport, auth or API failure
        """
        if not spreadsheet_id:
            raise InvalidArgumentError("spreadsheet ID is empty")
        if len(values) != self.COLUMNS:
            raise InvalidArgumentError(
                f"expected {self.COLUMNS} values, got {len(values)}"
            )

        range_ = self.row_range(sheet_name)
        body = {"values": [list(values)]}

        try:
            self._service.spreadsheets().values().append(
                spreadsheetId=spreadsheet_id,
                range=range_,
                valueInputOption=self.VALUE_INPUT_OPTION,
                body=body,
            ).execute()
        except HttpError as e:
            raise RemoteSubmitError(f"Sheets API error {e.status_code}: {e.reason}") from e
        except (httplib2.HttpLib2Error, GoogleAuthError, OSError) as e:
            raise RemoteSubmitError(f"{type(e).__name__}: {e}") from e

        logger.info(f"SpreadsheetClient: appended row to {range_}")

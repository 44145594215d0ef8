"""Error hierarchy for the time tracker.

Every error raised by the package derives from TimeTrackerError so the
orchestrator can tell its own failures apart from programming errors.
"""
from typing import Dict, Optional


class TimeTrackerError(Exception):
    """Base class for all time tracker errors."""


class ConfigReadError(TimeTrackerError):
    """Configuration file exists but could not be read or parsed."""


class ConfigWriteError(TimeTrackerError):
    """Configuration could not be persisted."""


class CredentialError(TimeTrackerError):
    """No authenticated Google Sheets client could be obtained."""


class InvalidArgumentError(TimeTrackerError):
    """A spreadsheet call was attempted with unusable arguments."""


class RemoteSubmitError(TimeTrackerError):
    """The spreadsheet service rejected the request or was unreachable."""


class ValidationError(TimeTrackerError):
    """
    One or more time entry fields are invalid.

    Attributes:
        field_errors: Mapping of field name to a human readable message
    """

    def __init__(self, field_errors: Dict[str, str], message: Optional[str] = None):
        self.field_errors = dict(field_errors)
        if message is None:
            message = "; ".join(self.field_errors.values())
        super().__init__(message)

import math
import re
from dataclasses import dataclass, fields
import datetime as dt
from typing import Dict, List, Mapping, Optional

from timetracker.errors import ValidationError

DATE_FORMAT = "%m/%d/%Y"

# strptime alone accepts single-digit months and days
_DATE_SHAPE = re.compile(r"^\d{2}/\d{2}/\d{4}$")


def format_date(day: dt.date) -> str:
    return day.strftime(DATE_FORMAT)


@dataclass
class TimeEntry:
    """
    One row of the timesheet, as typed into the entry popup.

    Field order matches the spreadsheet columns A..G.
    """
    date: str = ""
    hours: str = ""
    description: str = ""
    project: str = ""
    branch: str = ""
    commit_start: str = ""
    commit_end: str = ""

    FIELD_NAMES = ('date', 'hours', 'description', 'project', 'branch', 'commit_start', 'commit_end')

    @classmethod
    def blank(cls, today: Optional[dt.date] = None) -> "TimeEntry":
        """Empty entry with the date seeded to today."""
        return cls(date=format_date(today or dt.date.today()))

    @classmethod
    def from_form(cls, values: Mapping[str, str]) -> "TimeEntry":
        """Build from raw widget text, trimming surrounding whitespace."""
        return cls(**{
            item.name: (values.get(item.name) or "").strip()
            for item in fields(cls)
        })

    def validate(self) -> Dict[str, str]:
        """
        Check the entry against the submission rules.

        Returns:
            Mapping of field name to error message; empty when valid
        """
        errors: Dict[str, str] = {}

        date_error = self._validate_date(self.date)
        if date_error:
            errors['date'] = date_error

        hours_error = self._validate_hours(self.hours)
        if hours_error:
            errors['hours'] = hours_error

        if not self.description:
            errors['description'] = "description is required"

        if not self.project:
            errors['project'] = "project/repo is required"

        return errors

    def validate_or_raise(self) -> None:
        errors = self.validate()
        if errors:
            raise ValidationError(errors)

    def is_valid(self) -> bool:
        return not self.validate()

    def to_row(self) -> List[str]:
        return [getattr(self, name) for name in self.FIELD_NAMES]

    @staticmethod
    def _validate_date(text: str) -> Optional[str]:
        if not text:
            return "date is required"
        if not _DATE_SHAPE.match(text):
            return "invalid date format, use MM/DD/YYYY"
        try:
            dt.datetime.strptime(text, DATE_FORMAT)
        except ValueError:
            return "invalid date format, use MM/DD/YYYY"
        return None

    @staticmethod
    def _validate_hours(text: str) -> Optional[str]:
        if not text:
            return "hours are required"
        try:
            value = float(text)
        except ValueError:
            return "invalid hours value, must be a number"
        if not math.isfinite(value):
            return "invalid hours value, must be a number"
        return None

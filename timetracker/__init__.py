# timetracker/__init__.py
from .config.ConfigStore import Config, ConfigStore
from .entry.TimeEntry import TimeEntry
from .entry.PopupController import PopupController
from .sheets.SpreadsheetClient import SpreadsheetClient

__all__ = [
    'Config',
    'ConfigStore',
    'TimeEntry',
    'PopupController',
    'SpreadsheetClient',
]

"""Time entry subsystem - the popup form and its state machine.

Components:
- TimeEntry: The seven-field record and its validation rules
- PopupController: Orchestrates show, submit and exit confirmation
- EntryPopup: Borderless tkinter form (GUI)
- ConfigureDialog: Spreadsheet ID / sheet name editor (GUI)
"""

from timetracker.entry.TimeEntry import TimeEntry
from timetracker.entry.PopupController import PopupController

__all__ = ['TimeEntry', 'PopupController']

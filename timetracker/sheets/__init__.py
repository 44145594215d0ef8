from timetracker.sheets.SpreadsheetClient import SpreadsheetClient
from timetracker.sheets.CredentialProvider import CredentialProvider

__all__ = ['SpreadsheetClient', 'CredentialProvider']

from timetracker.config.ConfigStore import Config, ConfigStore, DEFAULT_HOTKEY, DEFAULT_SHEET_NAME

__all__ = ['Config', 'ConfigStore', 'DEFAULT_HOTKEY', 'DEFAULT_SHEET_NAME']

from timetracker.hotkey.GlobalHotkeyListener import GlobalHotkeyListener, parse_hotkey

__all__ = ["GlobalHotkeyListener", "parse_hotkey"]

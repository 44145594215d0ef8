from timetracker.tray.TrayIcon import TrayIcon, make_icon_image

__all__ = ['TrayIcon', 'make_icon_image']

"""System tray icon for the time tracker.

pystray runs its own event loop on a separate thread (run_detached), so
every menu callback here only forwards to handlers that schedule work on
the tkinter main thread.
"""
import logging
from typing import Callable, Optional

import pystray
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

ICON_SIZE = 64
ICON_BG = (52, 120, 246)
ICON_BG_DISABLED = (120, 120, 120)
CORNER_RADIUS = 14


def make_icon_image(enabled: bool = True) -> Image.Image:
    """Generate the 64x64 tray icon: rounded square with a 'T'."""
    img = Image.new('RGBA', (ICON_SIZE, ICON_SIZE), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    draw.rounded_rectangle(
        [0, 0, ICON_SIZE - 1, ICON_SIZE - 1],
        radius=CORNER_RADIUS,
        fill=ICON_BG if enabled else ICON_BG_DISABLED,
    )

    try:
        font = ImageFont.truetype("arial.ttf", 40)
    except (OSError, IOError):
        font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), "T", font=font)
    tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
    draw.text(((ICON_SIZE - tw) // 2 - bbox[0], (ICON_SIZE - th) // 2 - bbox[1]),
              "T", fill=(255, 255, 255), font=font)

    return img


class TrayIcon:
    """
    Tray icon with "Add Time Entry", "Configure" and "Exit".

    Args:
        on_add_entry: Show the entry popup
        on_configure: Open the configuration dialog
        on_exit: Shut the application down
        can_add_entry: Whether an authenticated spreadsheet client exists
    """

    NAME = 'TimeTracker'
    TOOLTIP = 'Google Sheets Time Tracker'

    def __init__(
        self,
        on_add_entry: Callable[[], None],
        on_configure: Callable[[], None],
        on_exit: Callable[[], None],
        can_add_entry: Callable[[], bool],
        verbose: bool = False
    ) -> None:
        self._on_add_entry = on_add_entry
        self._on_configure = on_configure
        self._on_exit = on_exit
        self._can_add_entry = can_add_entry
        self._verbose = verbose
        self._icon: Optional[pystray.Icon] = None

    def build_menu(self) -> pystray.Menu:
        return pystray.Menu(
            pystray.MenuItem(
                'Add Time Entry',
                self._handle_add_entry,
                enabled=lambda item: self._can_add_entry(),
                default=True  # activates on click
            ),
            pystray.MenuItem('Configure', self._handle_configure),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem('Exit', self._handle_exit),
        )

    def start(self) -> None:
        """Create the icon and run its loop on a background thread."""
        if self._icon is not None:
            return

        self._icon = pystray.Icon(
            name=self.NAME,
            icon=make_icon_image(self._can_add_entry()),
            title=self.TOOLTIP,
            menu=self.build_menu()
        )
        self._icon.run_detached()

        if self._verbose:
            logging.info("TrayIcon: started")

    def stop(self) -> None:
        if self._icon is None:
            return

        icon, self._icon = self._icon, None
        icon.stop()

        if self._verbose:
            logging.info("TrayIcon: stopped")

    def _handle_add_entry(self, icon=None, item=None) -> None:
        if not self._can_add_entry():
            logger.warning("TrayIcon: sheet service not available")
            return
        self._on_add_entry()

    def _handle_configure(self, icon=None, item=None) -> None:
        self._on_configure()

    def _handle_exit(self, icon=None, item=None) -> None:
        logger.info("TrayIcon: exit requested")
        self._on_exit()

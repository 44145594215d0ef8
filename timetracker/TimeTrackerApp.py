"""Time tracker orchestrator: config + Sheets client + popup + tray + hotkeys.

TimeTrackerApp owns the hidden tkinter root. Everything that touches widgets
runs on the thread that calls run(); the hotkey listener and the tray loop
only schedule callbacks onto it with root.after().
"""

import logging
import tkinter as tk
from typing import TYPE_CHECKING, List, Optional

from timetracker.PathResolver import ResolvedPaths
from timetracker.config.ConfigStore import Config, ConfigStore
from timetracker.entry.PopupController import PopupController
from timetracker.errors import CredentialError
from timetracker.sheets.CredentialProvider import CredentialProvider
from timetracker.sheets.SpreadsheetClient import SpreadsheetClient

if TYPE_CHECKING:
    from timetracker.entry.ConfigureDialog import ConfigureDialog
    from timetracker.hotkey.GlobalHotkeyListener import GlobalHotkeyListener
    from timetracker.tray.TrayIcon import TrayIcon

logger = logging.getLogger(__name__)

EXIT_CONFIRM_HOTKEY = "esc"


class TimeTrackerApp:
    """Wires configuration, credentials, the entry popup, hotkeys and the tray.

    Responsibilities:
    - Load Config through ConfigStore.
    - Build the Sheets service; without it the add-entry action is disabled.
    - Create the hidden tkinter root and the single PopupController.
    - Register the popup hotkey and the exit-confirmation key.
    - Create the tray icon and route its menu to the UI thread.

    Args:
        paths: Resolved per-user paths.
        config_store: Override for tests; defaults to one at paths.config_file.
        credential_provider: Override for tests.
        root: Override for tests; a withdrawn tk.Tk is created otherwise.
        verbose: Enable verbose logging.
    """

    def __init__(
        self,
        paths: ResolvedPaths,
        config_store: Optional[ConfigStore] = None,
        credential_provider: Optional[CredentialProvider] = None,
        root: Optional[tk.Tk] = None,
        verbose: bool = False,
    ) -> None:
        self._paths = paths
        self._verbose = verbose
        self._running = False

        self._config_store = config_store or ConfigStore(paths.config_file)
        self.config: Config = self._config_store.load()

        self._credential_provider = credential_provider or CredentialProvider(
            credentials_file=paths.credentials_file,
            token_file=paths.token_file,
        )
        self._client: Optional[SpreadsheetClient] = self._connect()

        if root is None:
            root = tk.Tk()
            root.withdraw()
            root.title("Time Tracker")
        self._root = root

        self.controller = PopupController(
            root=self._root,
            submit_row=self._append_entry,
            verbose=verbose,
        )

        self._configure_dialog: Optional['ConfigureDialog'] = None
        self._hotkeys: Optional['GlobalHotkeyListener'] = None
        self._tray: Optional['TrayIcon'] = None

    @property
    def has_client(self) -> bool:
        return self._client is not None

    def get_root(self) -> tk.Tk:
        return self._root

    def _connect(self) -> Optional[SpreadsheetClient]:
        try:
            service = self._credential_provider.build_service()
        except CredentialError as e:
            logger.error(f"Failed to create sheet service: {e}")
            return None

        logger.info("Google Sheets service initialized")
        return SpreadsheetClient(service)

    def _append_entry(self, row: List[str]) -> None:
        """Submitter for PopupController, run on its worker thread."""
        if self._client is None:
            raise CredentialError("Google Sheets service is not available")
        # Config objects are replaced whole, never mutated, so one read is consistent
        config = self.config
        self._client.append_row(config.spreadsheet_id, config.sheet_name, row)

    def _save_config(self, config: Config) -> None:
        """Persist then publish a new Config; raises ConfigWriteError."""
        self._config_store.save(config)
        self.config = config

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the global hotkey listener and the tray icon.

        Algorithm:
            1. Register the configured popup hotkey (skipped when empty or invalid).
            2. Register the exit-confirmation key.
            3. Start the keyboard hook and the tray loop.
        """
        from timetracker.hotkey.GlobalHotkeyListener import GlobalHotkeyListener
        from timetracker.tray.TrayIcon import TrayIcon

        self._hotkeys = GlobalHotkeyListener(verbose=self._verbose)
        if self.config.hotkey:
            try:
                self._hotkeys.register(self.config.hotkey, self.on_add_entry_requested)
            except ValueError as e:
                logger.error(f"Invalid hotkey '{self.config.hotkey}': {e}")
        else:
            logger.warning("No hotkey configured")
        self._hotkeys.register(EXIT_CONFIRM_HOTKEY, self.controller.on_cancel_hotkey)
        self._hotkeys.start()

        self._tray = TrayIcon(
            on_add_entry=self.on_add_entry_requested,
            on_configure=self.on_configure_requested,
            on_exit=self.on_exit_requested,
            can_add_entry=lambda: self.has_client,
            verbose=self._verbose,
        )
        self._tray.start()

        self._running = True
        logger.info("TimeTrackerApp: started")

    def run(self) -> None:
        """Block in the tkinter main loop until exit."""
        self._root.mainloop()

    def stop(self) -> None:
        """Stop hotkeys and tray. Safe to call more than once."""
        if self._hotkeys is not None:
            self._hotkeys.stop()
            self._hotkeys = None
        if self._tray is not None:
            self._tray.stop()
            self._tray = None

        if self._running:
            self._running = False
            logger.info("TimeTrackerApp: stopped")

    # ------------------------------------------------------------------
    # Requests from listener threads
    # ------------------------------------------------------------------

    def on_add_entry_requested(self) -> None:
        if not self.has_client:
            logger.warning("Sheet service not available, ignoring add entry request")
            return
        logger.info("Showing entry popup")
        self.controller.on_hotkey()

    def on_configure_requested(self) -> None:
        self._root.after(0, self.open_configuration)

    def on_exit_requested(self) -> None:
        self._root.after(0, self._shutdown)

    # ------------------------------------------------------------------
    # UI thread
    # ------------------------------------------------------------------

    def open_configuration(self) -> None:
        if self._configure_dialog is not None:
            self._configure_dialog.focus()
            return

        from timetracker.entry.ConfigureDialog import ConfigureDialog
        self._configure_dialog = ConfigureDialog(
            self._root,
            config=self.config,
            save=self._save_config,
            on_close=self._on_configure_closed,
        )

    def _on_configure_closed(self) -> None:
        self._configure_dialog = None

    def _shutdown(self) -> None:
        logger.info("Shutting down...")
        self.controller.close()
        self.stop()
        self._root.quit()

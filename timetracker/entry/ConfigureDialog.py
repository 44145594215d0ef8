import logging
import tkinter as tk
from tkinter import messagebox
from typing import Callable, Optional

from timetracker.config.ConfigStore import DEFAULT_SHEET_NAME, Config
from timetracker.errors import ConfigWriteError


class ConfigureDialog:
    """
    Window for editing the spreadsheet ID and sheet name.

    Args:
        root: tkinter root
        config: Current configuration, used to seed the fields; never modified
        save: Persists and publishes the new configuration; raises ConfigWriteError on failure
        on_close: Called after the window is destroyed
    """

    BG_COLOR = '#1E1E1E'
    INPUT_BG = '#282828'
    TEXT_COLOR = '#F0F0F0'
    BUTTON_BG = '#3C3C3C'
    FONT_TEXT = ('Segoe UI', 11)

    def __init__(
        self,
        root: tk.Tk,
        config: Config,
        save: Callable[[Config], None],
        on_close: Optional[Callable[[], None]] = None
    ) -> None:
        self._root = root
        self._config = config
        self._save = save
        self._on_close = on_close

        self._window = tk.Toplevel(root)
        self._window.title("Configuration")
        self._window.configure(bg=self.BG_COLOR)
        self._window.resizable(False, False)
        self._window.attributes('-topmost', True)
        self._window.protocol('WM_DELETE_WINDOW', self.close)

        self.spreadsheet_id_var = tk.StringVar(master=self._window, value=config.spreadsheet_id)
        self.sheet_name_var = tk.StringVar(master=self._window, value=config.sheet_name)

        self._create_layout()
        self._window.bind('<Return>', lambda event: self.submit())
        self._window.bind('<Escape>', lambda event: self.close())

    def _create_layout(self) -> None:
        form = tk.Frame(self._window, bg=self.BG_COLOR)
        form.pack(fill=tk.BOTH, expand=True, padx=16, pady=16)

        rows = (
            ("Google Sheet ID", self.spreadsheet_id_var, 44),
            ("Sheet Name", self.sheet_name_var, 20),
        )
        for row, (caption, var, width) in enumerate(rows):
            tk.Label(
                form, text=caption, font=self.FONT_TEXT, fg=self.TEXT_COLOR, bg=self.BG_COLOR
            ).grid(row=row, column=0, sticky='w', padx=(0, 10), pady=4)
            tk.Entry(
                form,
                textvariable=var,
                width=width,
                font=self.FONT_TEXT,
                fg=self.TEXT_COLOR,
                bg=self.INPUT_BG,
                insertbackground=self.TEXT_COLOR,
                relief=tk.FLAT
            ).grid(row=row, column=1, sticky='we', pady=4, ipady=4)

        tk.Button(
            form,
            text="Submit",
            font=self.FONT_TEXT,
            fg=self.TEXT_COLOR,
            bg=self.BUTTON_BG,
            relief=tk.FLAT,
            command=self.submit
        ).grid(row=len(rows), column=1, sticky='e', pady=(10, 0))

    def submit(self) -> bool:
        """
        Persist the edited values.

        Returns:
            True if saved; False if the write failed and the window stays open
        """
        updated = Config(
            spreadsheet_id=self.spreadsheet_id_var.get().strip(),
            sheet_name=self.sheet_name_var.get().strip() or DEFAULT_SHEET_NAME,
            hotkey=self._config.hotkey,
        )

        try:
            self._save(updated)
        except ConfigWriteError as e:
            logging.error(f"ConfigureDialog: {e}")
            messagebox.showerror("Error", str(e), parent=self._window)
            return False

        messagebox.showinfo("Success", "Configuration updated!", parent=self._window)
        self.close()
        return True

    def focus(self) -> None:
        if self._window is None:
            return
        self._window.deiconify()
        self._window.lift()
        self._window.focus_force()

    def close(self) -> None:
        if self._window is None:
            return

        window, self._window = self._window, None
        window.destroy()
        if self._on_close is not None:
            self._on_close()

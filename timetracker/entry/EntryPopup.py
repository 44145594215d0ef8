import logging
import tkinter as tk
from tkinter import messagebox
from typing import Callable, Dict, Optional

from timetracker.entry.TimeEntry import TimeEntry


class EntryPopup:
    """
    Borderless popup with one row of time entry fields.

    Enter submits, Escape asks for exit confirmation. Field errors are shown
    under each field; results appear in a small window that closes itself.
    """

    # (field, caption, width in characters)
    FIELDS = (
        ('date', "Date (MM/DD/YYYY)", 12),
        ('hours', "Hours", 7),
        ('description', "Description", 28),
        ('project', "Repo/Project", 16),
        ('branch', "Branch", 14),
        ('commit_start', "Commit Hash (Start)", 16),
        ('commit_end', "Commit Hash (End)", 16),
    )

    BG_COLOR = '#1E1E1E'
    INPUT_BG = '#282828'
    TEXT_COLOR = '#F0F0F0'
    HINT_COLOR = '#AAAAAA'
    BORDER_COLOR = '#3D3D3D'
    ERROR_COLOR = '#FF6B6B'
    SUCCESS_COLOR = '#6BCB77'
    ACCENT_COLOR = '#4A9EFF'
    BUTTON_BG = '#3C3C3C'

    FONT_TITLE = ('Segoe UI Semibold', 11)
    FONT_TEXT = ('Segoe UI', 11)
    FONT_HINT = ('Segoe UI', 9)
    FONT_BUTTON = ('Segoe UI', 11)

    PADDING = 20

    def __init__(
        self,
        root: tk.Tk,
        on_submit: Callable[[], None],
        on_cancel: Callable[[], None],
        verbose: bool = False
    ) -> None:
        self._root = root
        self._on_submit = on_submit
        self._on_cancel = on_cancel
        self._verbose = verbose

        self._vars: Dict[str, tk.StringVar] = {}
        self._entries: Dict[str, tk.Entry] = {}
        self._error_labels: Dict[str, tk.Label] = {}
        self._result_window: Optional[tk.Toplevel] = None

        self._window: Optional[tk.Toplevel] = tk.Toplevel(root)
        self._window.withdraw()
        self._window.title("Time Entry")
        self._window.overrideredirect(True)
        self._window.attributes('-topmost', True)
        self._window.configure(bg=self.BG_COLOR)

        self._create_layout()
        self._bind_events()

        if verbose:
            logging.info("EntryPopup: created")

    def _create_layout(self) -> None:
        """
        Create the layout:
        - Row 0: title and key hints
        - Row 1: field captions
        - Row 2: entries and submit button
        - Row 3: per-field validation messages and status
        """
        self._frame = tk.Frame(
            self._window,
            bg=self.BG_COLOR,
            highlightthickness=1,
            highlightbackground=self.BORDER_COLOR
        )
        self._frame.pack(fill=tk.BOTH, expand=True)

        inner = tk.Frame(self._frame, bg=self.BG_COLOR)
        inner.pack(fill=tk.BOTH, expand=True, padx=self.PADDING, pady=self.PADDING)

        tk.Label(
            inner,
            text="Time Entry",
            font=self.FONT_TITLE,
            fg=self.HINT_COLOR,
            bg=self.BG_COLOR
        ).grid(row=0, column=0, columnspan=3, sticky='w', pady=(0, 8))

        tk.Label(
            inner,
            text="Enter ⏎ submit    Esc ✕",
            font=self.FONT_HINT,
            fg=self.HINT_COLOR,
            bg=self.BG_COLOR
        ).grid(row=0, column=len(self.FIELDS) - 3, columnspan=4, sticky='e', pady=(0, 8))

        for column, (name, caption, width) in enumerate(self.FIELDS):
            tk.Label(
                inner,
                text=caption,
                font=self.FONT_HINT,
                fg=self.HINT_COLOR,
                bg=self.BG_COLOR
            ).grid(row=1, column=column, sticky='w', padx=(0, 10))

            var = tk.StringVar(master=self._window)
            entry = tk.Entry(
                inner,
                textvariable=var,
                width=width,
                font=self.FONT_TEXT,
                fg=self.TEXT_COLOR,
                bg=self.INPUT_BG,
                insertbackground=self.TEXT_COLOR,
                relief=tk.FLAT,
                highlightthickness=1,
                highlightbackground=self.BORDER_COLOR,
                highlightcolor=self.ACCENT_COLOR
            )
            entry.grid(row=2, column=column, sticky='we', padx=(0, 10), ipady=6)

            error_label = tk.Label(
                inner,
                text="",
                font=self.FONT_HINT,
                fg=self.ERROR_COLOR,
                bg=self.BG_COLOR,
                anchor='w',
                justify='left',
                wraplength=max(width * 7, 80)
            )
            error_label.grid(row=3, column=column, sticky='nw', padx=(0, 10))

            self._vars[name] = var
            self._entries[name] = entry
            self._error_labels[name] = error_label

        self._submit_btn = tk.Button(
            inner,
            text="Submit",
            font=self.FONT_BUTTON,
            fg=self.TEXT_COLOR,
            bg=self.BUTTON_BG,
            activebackground=self.ACCENT_COLOR,
            activeforeground=self.TEXT_COLOR,
            relief=tk.FLAT,
            cursor='hand2',
            padx=12,
            command=self._handle_submit
        )
        self._submit_btn.grid(row=2, column=len(self.FIELDS), sticky='ns')

        self._status_label = tk.Label(
            inner,
            text="",
            font=self.FONT_HINT,
            fg=self.HINT_COLOR,
            bg=self.BG_COLOR
        )
        self._status_label.grid(row=3, column=len(self.FIELDS), sticky='n')

    def _bind_events(self) -> None:
        """Bind keyboard and window events."""
        self._window.bind('<Return>', self._handle_submit)
        self._window.bind('<Escape>', self._handle_cancel)
        self._window.protocol('WM_DELETE_WINDOW', self._handle_cancel)

    def _handle_submit(self, event=None) -> None:
        """Handle submit action (Enter key or button click)."""
        if self._verbose:
            logging.info("EntryPopup: Submit triggered")
        self._on_submit()

    def _handle_cancel(self, event=None) -> None:
        """Handle cancel action (Escape key or window close)."""
        if self._verbose:
            logging.info("EntryPopup: Cancel triggered")
        self._on_cancel()

    def _center_window(self) -> None:
        """Center the window on screen, slightly above center."""
        self._window.update_idletasks()

        width = self._window.winfo_reqwidth()
        height = self._window.winfo_reqheight()
        x = (self._window.winfo_screenwidth() - width) // 2
        y = (self._window.winfo_screenheight() - height) // 2 - 100

        self._window.geometry(f"+{max(x, 0)}+{max(y, 0)}")

    def show(self) -> None:
        """Show the popup and focus the hours field."""
        if self._window is None:
            return

        self._center_window()
        self._window.deiconify()
        self._window.lift()
        self._window.focus_force()
        self._entries['hours'].focus_set()

        if self._verbose:
            logging.info("EntryPopup: shown")

    def hide(self) -> None:
        if self._window is None:
            return

        self._window.withdraw()

        if self._verbose:
            logging.info("EntryPopup: hidden")

    def get_values(self) -> Dict[str, str]:
        return {name: var.get() for name, var in self._vars.items()}

    def set_values(self, entry: TimeEntry) -> None:
        for name, var in self._vars.items():
            var.set(getattr(entry, name))

    def show_field_errors(self, errors: Dict[str, str]) -> None:
        """Display inline messages; fields missing from errors are cleared."""
        for name, label in self._error_labels.items():
            message = errors.get(name, "")
            label.config(text=message)
            self._entries[name].config(
                highlightbackground=self.ERROR_COLOR if message else self.BORDER_COLOR
            )

    def set_busy(self, busy: bool) -> None:
        self._submit_btn.config(state=tk.DISABLED if busy else tk.NORMAL)
        self._status_label.config(text="Submitting..." if busy else "")

    def show_result(self, title: str, message: str, success: bool, dismiss_after_ms: int) -> None:
        """Show a small result window that closes itself after dismiss_after_ms."""
        self._close_result_window()

        window = tk.Toplevel(self._root)
        window.title(title)
        window.attributes('-topmost', True)
        window.configure(bg=self.BG_COLOR)
        window.resizable(False, False)

        tk.Label(
            window,
            text=title,
            font=self.FONT_TITLE,
            fg=self.SUCCESS_COLOR if success else self.ERROR_COLOR,
            bg=self.BG_COLOR
        ).pack(padx=self.PADDING, pady=(self.PADDING, 4))
        tk.Label(
            window,
            text=message,
            font=self.FONT_TEXT,
            fg=self.TEXT_COLOR,
            bg=self.BG_COLOR,
            wraplength=320,
            justify='left'
        ).pack(padx=self.PADDING, pady=(0, self.PADDING))

        window.update_idletasks()
        x = (window.winfo_screenwidth() - window.winfo_reqwidth()) // 2
        y = (window.winfo_screenheight() - window.winfo_reqheight()) // 2
        window.geometry(f"+{max(x, 0)}+{max(y, 0)}")
        window.lift()

        self._result_window = window
        # Fire-and-forget: the user may already have closed the window
        self._root.after(dismiss_after_ms, lambda: self._destroy_window(window))

        if self._verbose:
            logging.info(f"EntryPopup: result '{title}': {message}")

    def _close_result_window(self) -> None:
        if self._result_window is not None:
            self._destroy_window(self._result_window)
            self._result_window = None

    def _destroy_window(self, window: tk.Toplevel) -> None:
        try:
            if window.winfo_exists():
                window.destroy()
        except tk.TclError:
            pass
        if self._result_window is window:
            self._result_window = None

    def ask_exit_confirmation(self, on_answer: Callable[[bool], None]) -> None:
        confirmed = messagebox.askyesno(
            "Exit",
            "Are you sure you want to exit?",
            parent=self._window
        )
        on_answer(bool(confirmed))

    def destroy(self) -> None:
        """Destroy the popup window and clean up resources."""
        self._close_result_window()
        if self._window is not None:
            try:
                self._window.destroy()
            except tk.TclError:
                pass
            self._window = None

        if self._verbose:
            logging.info("EntryPopup: destroyed")

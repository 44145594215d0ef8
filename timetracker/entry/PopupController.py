"""
PopupController - state machine behind the time entry popup.

States:
- hidden -> visible
- visible -> submitting, exit_confirm, hidden
- submitting -> visible
- exit_confirm -> visible, hidden

All transitions run on the tkinter main thread. Hotkey and tray threads call
on_hotkey()/on_cancel_hotkey(), which only schedule work via root.after().
The append call runs on a worker thread and reports back the same way.
"""
import logging
import threading
from datetime import date
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Protocol, Set

from timetracker.entry.TimeEntry import TimeEntry
from timetracker.errors import TimeTrackerError, ValidationError

if TYPE_CHECKING:
    import tkinter as tk

logger = logging.getLogger(__name__)


class EntryView(Protocol):
    """Widget side of the popup, implemented by EntryPopup."""

    def show(self) -> None: ...

    def hide(self) -> None: ...

    def get_values(self) -> Dict[str, str]: ...

    def set_values(self, entry: TimeEntry) -> None: ...

    def show_field_errors(self, errors: Dict[str, str]) -> None: ...

    def set_busy(self, busy: bool) -> None: ...

    def show_result(self, title: str, message: str, success: bool, dismiss_after_ms: int) -> None: ...

    def ask_exit_confirmation(self, on_answer: Callable[[bool], None]) -> None: ...

    def destroy(self) -> None: ...


class PopupController:
    """
    Owns the single entry popup and its visibility state.

    Args:
        root: tkinter root used to marshal work onto the UI thread
        submit_row: Appends one row remotely; raises TimeTrackerError on failure
        view: Popup widget; created on first show when omitted
        today: Date source for seeding the date field
        verbose: Log every transition
    """

    RESULT_DISMISS_MS = 1000

    _VALID_TRANSITIONS: Dict[str, Set[str]] = {
        'hidden': {'visible'},
        'visible': {'submitting', 'exit_confirm', 'hidden'},
        'submitting': {'visible'},
        'exit_confirm': {'visible', 'hidden'},
    }

    def __init__(
        self,
        root: 'tk.Tk',
        submit_row: Callable[[List[str]], None],
        view: Optional[EntryView] = None,
        today: Callable[[], date] = date.today,
        verbose: bool = False
    ) -> None:
        self._root = root
        self._submit_row = submit_row
        self._view = view
        self._today = today
        self._verbose = verbose

        self._lock = threading.Lock()
        self._state = 'hidden'
        self._exit_confirm_visible = False
        self._worker: Optional[threading.Thread] = None

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    @property
    def is_showing(self) -> bool:
        return self.state != 'hidden'

    def _set_state(self, new_state: str) -> None:
        with self._lock:
            old_state = self._state
            if new_state not in self._VALID_TRANSITIONS[old_state]:
                raise ValueError(f"Invalid popup transition: {old_state} -> {new_state}")
            self._state = new_state

        if self._verbose:
            logging.info(f"PopupController: {old_state} -> {new_state}")

    def _ensure_view(self) -> EntryView:
        if self._view is None:
            from timetracker.entry.EntryPopup import EntryPopup
            self._view = EntryPopup(
                self._root,
                on_submit=self.submit,
                on_cancel=self.request_exit,
                verbose=self._verbose
            )
        return self._view

    # ------------------------------------------------------------------
    # Thread-safe entry points (hotkey listener, tray)
    # ------------------------------------------------------------------

    def on_hotkey(self) -> None:
        # Schedule on main thread to avoid tkinter threading issues
        self._root.after(0, self.show_popup)

    def on_cancel_hotkey(self) -> None:
        self._root.after(0, self.request_exit)

    # ------------------------------------------------------------------
    # UI thread transitions
    # ------------------------------------------------------------------

    def show_popup(self) -> None:
        """Reset the form and show it. No-op unless the popup is hidden."""
        if self.state != 'hidden':
            logger.debug(f"PopupController: show ignored in state '{self.state}'")
            return

        view = self._ensure_view()
        self._reset_fields(view)
        view.show()
        self._set_state('visible')

    def submit(self) -> None:
        """Validate the form and start the append call."""
        if self.state != 'visible':
            logger.debug(f"PopupController: submit ignored in state '{self.state}'")
            return

        view = self._ensure_view()
        entry = TimeEntry.from_form(view.get_values())
        try:
            entry.validate_or_raise()
        except ValidationError as e:
            logger.info(f"PopupController: validation failed for {sorted(e.field_errors)}")
            view.show_field_errors(e.field_errors)
            return

        view.show_field_errors({})
        self._set_state('submitting')
        view.set_busy(True)

        self._worker = threading.Thread(
            target=self._submit_worker,
            args=(entry.to_row(),),
            daemon=True,
            name="PopupController-Submit"
        )
        self._worker.start()

    def _submit_worker(self, row: List[str]) -> None:
        error: Optional[Exception] = None
        try:
            self._submit_row(row)
        except TimeTrackerError as e:
            logger.warning(f"PopupController: submission failed: {e}")
            error = e
        except Exception as e:
            logger.exception("PopupController: unexpected error during submission")
            error = e

        self._root.after(0, self._on_submit_done, error)

    def _on_submit_done(self, error: Optional[Exception]) -> None:
        if self._view is None:
            logger.info("PopupController: submission finished after close")
            return
        view = self._view
        view.set_busy(False)
        self._set_state('visible')

        if error is not None:
            # Fields stay filled so the user can retry
            view.show_result("Error", f"submission failed: {error}", False, self.RESULT_DISMISS_MS)
            return

        view.show_result("Success", "Time entry added!", True, self.RESULT_DISMISS_MS)
        self._reset_and_hide()

    def request_exit(self) -> None:
        """Ask whether to discard the entry. Only one confirmation at a time."""
        if self.state != 'visible' or self._exit_confirm_visible:
            return

        self._exit_confirm_visible = True
        self._set_state('exit_confirm')
        self._ensure_view().ask_exit_confirmation(self._on_exit_answer)

    def _on_exit_answer(self, confirmed: bool) -> None:
        self._exit_confirm_visible = False
        if confirmed:
            self._reset_and_hide()
        else:
            self._set_state('visible')

    def _reset_and_hide(self) -> None:
        view = self._ensure_view()
        self._reset_fields(view)
        view.hide()
        self._set_state('hidden')

    def _reset_fields(self, view: EntryView) -> None:
        view.set_values(TimeEntry.blank(self._today()))
        view.show_field_errors({})

    def close(self) -> None:
        """Destroy the popup window on shutdown. Safe before first show."""
        if self._view is None:
            return

        view, self._view = self._view, None
        view.destroy()
        with self._lock:
            self._state = 'hidden'
        self._exit_confirm_visible = False

"""Tests for EntryPopup - the seven-field time entry window."""
import time
from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from timetracker.entry.TimeEntry import TimeEntry

pytestmark = pytest.mark.gui


@pytest.fixture
def popup(tk_root):
    from timetracker.entry.EntryPopup import EntryPopup

    popup = EntryPopup(tk_root, on_submit=MagicMock(), on_cancel=MagicMock())
    yield popup
    popup.destroy()


class TestEntryPopup:

    def test_starts_hidden(self, popup):
        assert popup._window.winfo_viewable() == 0

    def test_show_and_hide(self, popup, tk_root):
        popup.show()
        tk_root.update()
        assert popup._window.winfo_viewable() == 1

        popup.hide()
        tk_root.update()
        assert popup._window.winfo_viewable() == 0

    def test_has_all_fields(self, popup):
        assert set(popup.get_values()) == set(TimeEntry.FIELD_NAMES)

    def test_set_values_round_trip(self, popup, scenario_values):
        popup.set_values(TimeEntry.from_form(scenario_values))

        assert popup.get_values() == scenario_values

    def test_blank_entry_seeds_only_date(self, popup):
        popup.set_values(TimeEntry.blank(date(2025, 1, 2)))

        values = popup.get_values()
        assert values['date'] == "01/02/2025"
        assert all(v == "" for name, v in values.items() if name != 'date')

    def test_field_errors_shown_and_cleared(self, popup):
        popup.show_field_errors({'hours': "hours are required"})
        assert popup._error_labels['hours'].cget('text') == "hours are required"
        assert popup._error_labels['date'].cget('text') == ""

        popup.show_field_errors({})
        assert popup._error_labels['hours'].cget('text') == ""

    def test_busy_disables_submit(self, popup):
        popup.set_busy(True)
        assert str(popup._submit_btn.cget('state')) == 'disabled'

        popup.set_busy(False)
        assert str(popup._submit_btn.cget('state')) == 'normal'

    def test_submit_button_calls_handler(self, popup):
        popup._submit_btn.invoke()

        popup._on_submit.assert_called_once()

    def test_cancel_calls_handler(self, popup):
        popup._handle_cancel()

        popup._on_cancel.assert_called_once()

    def test_result_window_closes_itself(self, popup, tk_root):
        popup.show_result("Success", "Time entry added!", True, dismiss_after_ms=10)
        window = popup._result_window
        assert window is not None

        deadline = time.monotonic() + 2
        while popup._result_window is not None and time.monotonic() < deadline:
            tk_root.update()
            time.sleep(0.01)

        assert popup._result_window is None
        assert not window.winfo_exists()

    def test_result_dismiss_tolerates_closed_window(self, popup, tk_root):
        popup.show_result("Error", "submission failed", False, dismiss_after_ms=10)
        popup._result_window.destroy()

        time.sleep(0.05)
        tk_root.update()

        assert popup._result_window is None

    def test_exit_confirmation_reports_answer(self, popup):
        on_answer = MagicMock()

        with patch('timetracker.entry.EntryPopup.messagebox.askyesno', return_value=True) as ask:
            popup.ask_exit_confirmation(on_answer)

        assert ask.call_args.args == ("Exit", "Are you sure you want to exit?")
        on_answer.assert_called_once_with(True)

    def test_destroy_is_idempotent(self, tk_root):
        from timetracker.entry.EntryPopup import EntryPopup

        popup = EntryPopup(tk_root, on_submit=MagicMock(), on_cancel=MagicMock())
        window = popup._window
        popup.show_result("Success", "Time entry added!", True, dismiss_after_ms=1000)

        popup.destroy()
        popup.destroy()

        assert not window.winfo_exists()
        assert popup._result_window is None

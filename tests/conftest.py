# tests/conftest.py
from datetime import date
from typing import Callable, Dict, List

import pytest

from timetracker.PathResolver import PathResolver
from timetracker.entry.TimeEntry import TimeEntry


class FakeRoot:
    """Stands in for tk.Tk: after() queues callbacks until run_pending()."""

    def __init__(self):
        self.scheduled = []
        self.quit_called = False

    def after(self, ms, func=None, *args):
        self.scheduled.append((ms, func, args))
        return f"after#{len(self.scheduled)}"

    def run_pending(self) -> int:
        """Run queued callbacks, including ones queued while running."""
        count = 0
        while self.scheduled:
            _, func, args = self.scheduled.pop(0)
            func(*args)
            count += 1
        return count

    def quit(self):
        self.quit_called = True

    def mainloop(self):
        self.run_pending()


class FakeEntryView:
    """Records what PopupController asks of the popup widget."""

    def __init__(self):
        self.values: Dict[str, str] = {name: "" for name in TimeEntry.FIELD_NAMES}
        self.visible = False
        self.busy = False
        self.field_errors: Dict[str, str] = {}
        self.results: List[tuple] = []
        self.show_count = 0
        self.confirm_callbacks: List[Callable[[bool], None]] = []
        self.destroy_count = 0
        self.destroyed = False

    def show(self) -> None:
        self.visible = True
        self.show_count += 1

    def hide(self) -> None:
        self.visible = False

    def get_values(self) -> Dict[str, str]:
        return dict(self.values)

    def set_values(self, entry: TimeEntry) -> None:
        self.values = {name: getattr(entry, name) for name in TimeEntry.FIELD_NAMES}

    def fill(self, **values: str) -> None:
        self.values.update(values)

    def show_field_errors(self, errors: Dict[str, str]) -> None:
        self.field_errors = dict(errors)

    def set_busy(self, busy: bool) -> None:
        self.busy = busy

    def show_result(self, title: str, message: str, success: bool, dismiss_after_ms: int) -> None:
        self.results.append((title, message, success, dismiss_after_ms))

    def ask_exit_confirmation(self, on_answer: Callable[[bool], None]) -> None:
        self.confirm_callbacks.append(on_answer)

    def destroy(self) -> None:
        self.destroyed = True
        self.destroy_count += 1


@pytest.fixture
def fake_root():
    return FakeRoot()


@pytest.fixture
def fake_view():
    return FakeEntryView()


@pytest.fixture
def fixed_today():
    return date(2025, 1, 2)


@pytest.fixture
def resolved_paths(tmp_path):
    """ResolvedPaths rooted in tmp_path via XDG_CONFIG_HOME."""
    resolver = PathResolver(
        platform_name="linux",
        environ={"XDG_CONFIG_HOME": str(tmp_path / "xdg")},
        home=tmp_path / "home"
    )
    return resolver.paths


@pytest.fixture
def scenario_values():
    return {
        'date': "01/02/2025",
        'hours': "3.5",
        'description': "Fix bug",
        'project': "repoA",
        'branch': "main",
        'commit_start': "abc123",
        'commit_end': "def456",
    }


@pytest.fixture
def tk_root():
    """Real tkinter root; skips when no display is available."""
    tk = pytest.importorskip("tkinter")
    try:
        root = tk.Tk()
    except tk.TclError as e:
        pytest.skip(f"tkinter display not available: {e}")
    root.withdraw()
    yield root
    try:
        root.destroy()
    except tk.TclError:
        pass

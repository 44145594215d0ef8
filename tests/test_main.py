"""Tests for the main entry point - startup, exit codes and cleanup."""
from unittest.mock import MagicMock, patch

import pytest

import main


@pytest.fixture
def patched_startup(resolved_paths):
    resolver = MagicMock()
    resolver.paths = resolved_paths
    with patch('main.PathResolver', return_value=resolver), \
            patch('main.setup_logging') as mock_logging, \
            patch('main.signal.signal'), \
            patch('timetracker.TimeTrackerApp.TimeTrackerApp') as MockApp:
        yield resolver, mock_logging, MockApp


class TestMain:

    def test_clean_exit_returns_zero(self, patched_startup):
        resolver, mock_logging, MockApp = patched_startup

        assert main.main([]) == 0

        resolver.ensure_local_dir_structure.assert_called_once()
        app = MockApp.return_value
        app.start.assert_called_once()
        app.run.assert_called_once()
        app.stop.assert_called_once()

    def test_verbose_flag(self, patched_startup, resolved_paths):
        _, mock_logging, MockApp = patched_startup

        main.main(['-v'])

        assert mock_logging.call_args.kwargs['verbose'] is True
        assert MockApp.call_args.kwargs['verbose'] is True

    def test_logs_go_to_config_logs_dir(self, patched_startup, resolved_paths):
        _, mock_logging, _ = patched_startup

        main.main([])

        assert mock_logging.call_args.args[0] == resolved_paths.logs_dir

    def test_keyboard_interrupt_returns_zero(self, patched_startup):
        _, _, MockApp = patched_startup
        MockApp.return_value.run.side_effect = KeyboardInterrupt

        assert main.main([]) == 0
        MockApp.return_value.stop.assert_called_once()

    def test_startup_fault_returns_one(self, patched_startup):
        _, _, MockApp = patched_startup
        MockApp.return_value.start.side_effect = RuntimeError("tray backend unavailable")

        assert main.main([]) == 1
        MockApp.return_value.stop.assert_called_once()

    def test_construction_fault_returns_one(self, patched_startup):
        _, _, MockApp = patched_startup
        MockApp.side_effect = RuntimeError("no display")

        assert main.main([]) == 1

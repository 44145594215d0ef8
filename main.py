# main.py
"""Time tracker entry script.

Usage:
    python main.py        # run with WARNING-level logging
    python main.py -v     # verbose (DEBUG) logging

Shows a tray icon and listens for the configured hotkey (default
ctrl+alt+q). Exits with code 0 on tray "Exit" or Ctrl+C, 1 on a startup
fault.
"""
import signal
import sys
import logging

from timetracker.PathResolver import PathResolver
from timetracker.LoggingSetup import setup_logging


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    verbose = "-v" in argv
    is_frozen = getattr(sys, 'frozen', False)

    path_resolver = PathResolver()
    path_resolver.ensure_local_dir_structure()
    paths = path_resolver.paths

    # Setup logging BEFORE anything else
    setup_logging(paths.logs_dir, verbose=verbose, is_frozen=is_frozen)
    logging.info(f"Config file: {paths.config_file}")

    app = None
    try:
        from timetracker.TimeTrackerApp import TimeTrackerApp

        app = TimeTrackerApp(paths, verbose=verbose)
        app.start()

        root = app.get_root()
        # Ctrl+C only reaches Python between Tk events; poll so it is noticed
        signal.signal(signal.SIGINT, lambda *_: app.on_exit_requested())
        root.after(250, _keep_alive, root)

        app.run()
        return 0

    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        return 0
    except Exception as e:
        logging.error(f"ERROR: {type(e).__name__}: {e}")
        import traceback
        logging.error(traceback.format_exc())
        return 1
    finally:
        if app is not None:
            app.stop()


def _keep_alive(root) -> None:
    root.after(250, _keep_alive, root)


if __name__ == "__main__":
    sys.exit(main())

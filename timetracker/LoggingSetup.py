# timetracker/LoggingSetup.py
import sys
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_FILE_NAME = "time-tracker.log"
LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def setup_logging(logs_dir: Path, verbose: bool = False, is_frozen: bool = False) -> Path:
    """
    Route the root logger to the time tracker log file.

    Logs go to a rotating file under the config directory, plus stdout when
    started from a terminal. Calling again replaces earlier handlers.

    Args:
        logs_dir: <config dir>/logs
        verbose: DEBUG when True (-v), otherwise WARNING
        is_frozen: Packaged build without a console

    Returns:
        Path of the active log file
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / LOG_FILE_NAME
    level = logging.DEBUG if verbose else logging.WARNING

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    handlers = [RotatingFileHandler(log_file, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding='utf-8')]
    if not is_frozen:
        handlers.append(logging.StreamHandler(sys.stdout))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.info(f"Time tracker logging to {log_file} "
                 f"(level={logging.getLevelName(level)}, console={not is_frozen})")
    return log_file

# sharebox/config/logging_config.py

"""Logging setup shared by the TUI and the CLI.

Every launch writes ``logs/sharebox_<YYYYmmdd_HHMMSS>.log`` at DEBUG
level.  Only the ``sharebox`` logger is configured; module loggers
(``sharebox.store``, ``sharebox.storage`` ...) propagate into it.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from sharebox.config.settings import Settings

LOGGER_NAME = "sharebox"

_FILE_FORMAT = (
    "%(asctime)s %(levelname)-8s [%(name)s] "
    "%(funcName)s:%(lineno)d %(message)s"
)
_STDERR_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _run_log_path(logs_dir: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"sharebox_{stamp}.log"


def _existing_log_path(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(console_level: str | None = None) -> Path:
    """Attach the run-log and stderr handlers to the ``sharebox`` logger.

    *console_level* defaults to ``Settings.CONSOLE_LOG_LEVEL``.  Calling
    this again reuses the handlers already installed and returns the same
    log file.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    existing = _existing_log_path(logger)
    if existing is not None:
        return existing

    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    log_file = _run_log_path(Settings.LOGS_DIR)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(file_handler)

    # Textual owns stdout while the TUI runs
    level_name = (console_level or Settings.CONSOLE_LOG_LEVEL).upper()
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(
        logging.getLevelName(level_name)
        if level_name in logging.getLevelNamesMapping()
        else logging.WARNING
    )
    stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))
    logger.addHandler(stderr_handler)

    logger.debug("Run log opened at %s", log_file)
    return log_file

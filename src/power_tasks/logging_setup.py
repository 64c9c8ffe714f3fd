# src/power_tasks/logging_setup.py

"""
Logging for the interactive tracker.

stderr shares the terminal with the `>>>` prompt, so only our own records
(at the configured level) and serious third-party errors reach it. The log
file under the data directory keeps everything down to DEBUG, including
the per-object decode diagnostics.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "power_tasks"
LOG_FILE_NAME = "power_tasks.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _PromptFilter(logging.Filter):
    """Pass power_tasks.* records; anything else (py.warnings included) only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == APP_LOGGER or record.name.startswith(APP_LOGGER + "."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/power_tasks",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install the stderr and file handlers on the root logger.

    Replaces handlers installed earlier, so calling it twice does not
    duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    to_prompt = logging.StreamHandler(sys.stderr)
    to_prompt.setLevel(console_level)
    to_prompt.addFilter(_PromptFilter())

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    root.setLevel(logging.DEBUG)
    for handler in (to_prompt, to_file):
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # warnings.warn(...) -> 'py.warnings' logger
    logging.captureWarnings(True)
    return log_file

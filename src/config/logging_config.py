# src/config/logging_config.py

"""Per-run timestamped logging configuration for the storefront.

Each launch (TUI, CLI or server) creates a dedicated log file inside
``logs/`` named after the launch timestamp and mode, e.g.
``logs/tui_20260214_153045.log``.  Every ``storefront.*`` logger writes
to that file; the Flask/werkzeug request log is attached as well when
the server runs, so one file holds the whole story of a run.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "storefront"


def setup_logging(
    mode: str = "run",
    console_level: int = logging.WARNING,
    attach: tuple[str, ...] = (),
) -> Path:
    """Initialise the ``storefront`` logger for the current run.

    Args:
        mode: Prefix for the log file name (``tui``, ``cli``, ``server``).
        console_level: Minimum level echoed to stderr.
        attach: Extra third-party logger names that should share the
            same handlers (e.g. ``("werkzeug",)`` for the server).

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"{mode}_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, --serve after TUI import) keep one handler set
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in attach:
        extra = logging.getLogger(name)
        extra.setLevel(logging.INFO)
        extra.addHandler(file_handler)
        extra.addHandler(console_handler)

    root_logger.info("Logging initialised (%s), log file: %s", mode, log_file)

    return log_file

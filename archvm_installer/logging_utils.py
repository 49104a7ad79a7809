from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple

from .lib.env import PATHS

DEFAULT_LOG_PATH = PATHS.log_default
FALLBACK_LOG_NAME = "archvm-installer.log"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


def _open_log_file(log_path: str) -> Tuple[logging.Handler, str]:
    # Unwritable log_path: log to the working directory instead.
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path), log_path
    except OSError:
        fallback = str(Path.cwd() / FALLBACK_LOG_NAME)
        return logging.FileHandler(fallback), fallback


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = False,
) -> str:
    """Send installer logs to a file and return the path actually used.

    The log is the install transcript: every command line (passwords on stdin
    are redacted), tool output at DEBUG, prompt answers and step failures.
    The operator already sees colored progress from archvm_installer.console,
    so the raw stream only goes to stderr with --debug.

    Calling this again keeps the first configuration.
    """

    root = logging.getLogger()
    root.setLevel(level)

    if getattr(root, "_archvm_configured", False):
        return getattr(root, "_archvm_log_path", log_path)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    file_handler, chosen_path = _open_log_file(log_path)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if also_console:
        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        root.addHandler(stream)

    setattr(root, "_archvm_configured", True)
    setattr(root, "_archvm_log_path", chosen_path)

    logging.getLogger(__name__).info("Logging to %s (requested %s)", chosen_path, log_path)
    return chosen_path

"""
Color-coded logging utilities for the API server.

Provides consistent, color-coded console output for request and storage
logging. Uses colorama for cross-platform terminal color support.
"""

import logging
import os
import sys
from typing import Optional, Union

from colorama import Fore, Style, init

# Initialize colorama (auto-reset after each print)
init(autoreset=True)


# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------

class C:
    """Color shortcuts for log output."""
    DEBUG = Style.DIM
    INFO = Fore.WHITE
    WARN = Fore.YELLOW + Style.BRIGHT
    ERR = Fore.RED + Style.BRIGHT
    CRIT = Fore.MAGENTA + Style.BRIGHT
    RESET = Style.RESET_ALL


LEVEL_COLORS = {
    logging.DEBUG: C.DEBUG,
    logging.INFO: C.INFO,
    logging.WARNING: C.WARN,
    logging.ERROR: C.ERR,
    logging.CRITICAL: C.CRIT,
}

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so repeated setup does not duplicate them
_HANDLER_ATTR = "_chameleon_handler"


class ColorFormatter(logging.Formatter):
    """Formatter that colors the whole line by level."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{line}{C.RESET}"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the root logger with a colored console handler and, when
    ``log_file`` is given, a plain file handler.

    Calling it again replaces the handlers it installed earlier.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root.removeHandler(handler)
            handler.close()

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(ch, _HANDLER_ATTR, True)
    root.addHandler(ch)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        setattr(fh, _HANDLER_ATTR, True)
        root.addHandler(fh)

    return root

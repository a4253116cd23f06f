"""
Logging setup for the globe tracker.

Every module logs through logging.getLogger(__name__). main.py calls
configure_logging() once with the level and file taken from Settings;
the window then adds its own QtLogHandler so the same records show up
in the log panel.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output (HTTP pool, font cache)
QUIET_LOGGERS = ("urllib3", "matplotlib", "PIL")


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Route tracker logs to stdout, and to `log_file` when given.

    Replaces any handlers already on the root logger, so calling it again
    (for example with a new TRACKER_LOG_LEVEL) takes effect.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT,
                        handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

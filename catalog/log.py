"""Logging setup for the catalog entry points.

Library code only ever asks for a logger; configuring handlers is left to
the process entry points (CLI and server runner).
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send catalog log records to stderr at the given level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def get_logger(name: str, logger: Optional[logging.Logger] = None) -> logging.Logger:
    """Return the injected logger, or the module logger when none was given."""
    return logger if logger is not None else logging.getLogger(name)

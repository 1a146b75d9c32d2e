"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; this installs the
single console handler they all share.

Usage:
    from vicebank.logging import setup_logging
    setup_logging(logging.DEBUG)
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Send records at ``level`` and above to stderr.

    Calling it again replaces the previous handler rather than adding a
    second one.

    Returns:
        The configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)

    root_logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return root_logger

"""
Package-wide logger.

All modules log through the single "houdini_livelink" logger so that an
application embedding the source can silence or redirect it in one place.
"""

import sys
import logging

LOGGER_NAME = "houdini_livelink"
logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

# Only add the handler once, even if the module is reloaded
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.propagate = False


def set_log_level(level):
    """Set the package log level (e.g. logging.DEBUG or "DEBUG")."""
    logger.setLevel(level)

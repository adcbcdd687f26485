"""
Logging setup for csvcodec.

The codec modules only log at DEBUG (row and field counts) and the HTTP app
logs rejected uploads and options at WARNING. Both go through the "csvcodec"
logger, which this module points at stderr.
"""

import logging
import sys


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Attach a single stderr handler to the "csvcodec" logger.

    Hosts that configure logging themselves should not call this.

    Args:
        verbose: If True, set level to DEBUG
        quiet: If True, set level to WARNING
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))

    logger = logging.getLogger("csvcodec")
    logger.setLevel(level)

    # Calling twice must not duplicate output
    logger.handlers.clear()
    logger.addHandler(handler)

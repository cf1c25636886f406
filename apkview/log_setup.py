"""Console logging for the command line entry point."""

from __future__ import annotations

import logging
import sys

__all__ = ["setup_logging"]

_HANDLER_MARK = "_apkview_console"


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the ``apkview`` logger for console narration.

    ``verbose`` shows the detailed DEBUG narration, ``quiet`` hides progress
    messages. Warnings and errors are always printed.
    """

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger("apkview")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    setattr(handler, _HANDLER_MARK, True)
    if verbose:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    return logger

"""Logging setup for the ledgerkit command line."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(verbose: bool = False) -> None:
    """Attach a single stderr handler to the ledgerkit logger.

    Safe to call more than once; later calls only change the level and
    point the handler at the current sys.stderr.
    """
    global _handler

    root = logging.getLogger("ledgerkit")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
    else:
        _handler.setStream(sys.stderr)


def reset_logging() -> None:
    """Remove the handler installed by configure_logging (used by tests)."""
    global _handler

    if _handler is not None:
        logging.getLogger("ledgerkit").removeHandler(_handler)
        _handler = None

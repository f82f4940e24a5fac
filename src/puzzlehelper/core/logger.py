from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(verbosity: int = 0) -> None:
    """
    0 -> warnings only, 1 -> info, 2+ -> debug.
    Output goes to stderr so it never mixes with solver results on stdout.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=_FORMAT, force=True)

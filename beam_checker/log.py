"""Logging setup for the BEAM checker, built on loguru.

Modules obtain a bound logger with ``get_logger(__name__)``. The first call
installs a default stderr sink at INFO; ``configure_logging`` replaces it and
is idempotent for an unchanged level.
"""

import sys
from typing import Optional

from loguru import logger

_FORMAT = "{time:HH:mm:ss} | {level: <8} | {extra[module]} - {message}"

_current_level: Optional[str] = None
_handler_id: Optional[int] = None


def _stderr_sink(message) -> None:
    # sys.stderr is looked up per write; it may be swapped after setup.
    sys.stderr.write(message)


def configure_logging(level: str = "INFO", force: bool = False) -> None:
    """Install a single stderr sink at the given level."""
    global _current_level, _handler_id

    level = level.upper()
    if not force and _current_level == level:
        return
    logger.configure(extra={"module": "beam"})
    if _handler_id is not None:
        logger.remove(_handler_id)
    else:
        logger.remove()
    _handler_id = logger.add(_stderr_sink, level=level, format=_FORMAT)
    _current_level = level


def get_logger(name: str):
    """Return a logger bound with the calling module's name."""
    if _current_level is None:
        configure_logging()
    return logger.bind(module=name)

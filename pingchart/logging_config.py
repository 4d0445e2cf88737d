"""Logging configuration for pingchart.

Log policy:
    DEBUG    every ping command, return code and parsed average
    INFO     run lifecycle (start, finish, export, consumer disconnect)
    WARNING  skipped iterations (probe or parse failure, the run continues)
    ERROR    unexpected worker exceptions, refused exports, bad startup input

The sampling loop runs on a Qt thread pool thread, so records carry the
thread name to tell sampler and GUI output apart.
"""

import logging
import os
import sys

from pingchart.errors import InvalidStartupArgumentError

LOG_LEVEL_ENV = "PINGCHART_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"


def resolve_log_level(name: str) -> int:
    """Map a level name such as "debug" to its logging constant.

    Raises:
        InvalidStartupArgumentError: name is not a standard level
    """
    level = logging.getLevelName(name.strip().upper())
    # getLevelName() answers unknown names with the string "Level <name>"
    if not isinstance(level, int):
        raise InvalidStartupArgumentError(
            f"{LOG_LEVEL_ENV} must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got {name!r}"
        )
    return level


def configure_logging(level_name: str | None = None) -> int:
    """Send pingchart logs to stderr at the requested level.

    The level comes from ``level_name`` if given, otherwise from
    PINGCHART_LOG_LEVEL, otherwise INFO.

    Examples:
        # Show every ping command and parsed average
        $ PINGCHART_LOG_LEVEL=DEBUG python -m pingchart 1.1.1.1 100

        # Only skipped iterations and errors
        $ PINGCHART_LOG_LEVEL=WARNING python -m pingchart 1.1.1.1 100

    Returns:
        The numeric level that was applied

    Raises:
        InvalidStartupArgumentError: the level name is unknown
    """
    if level_name is None:
        level_name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)
    level = resolve_log_level(level_name)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    logging.getLogger(__name__).debug("Logging configured: level=%s", logging.getLevelName(level))
    return level

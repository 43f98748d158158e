"""Log sink callbacks used to report migration lifecycle events."""

import logging
from collections.abc import Callable
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity of a lifecycle event. Values match the stdlib logging levels."""

    DEBUG = logging.DEBUG
    INFORMATION = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


LogSink = Callable[[LogLevel, str], None]


def null_sink(level: LogLevel, message: str) -> None:
    """Discard an event. Used when no sink is supplied."""


def logger_sink(logger: logging.Logger) -> LogSink:
    """
    Adapt a stdlib logger into a log sink.

    Args:
        logger: Logger that receives every event at the matching level

    Returns:
        Callable accepting ``(level, message)``
    """

    def sink(level: LogLevel, message: str) -> None:
        logger.log(int(level), message)

    return sink

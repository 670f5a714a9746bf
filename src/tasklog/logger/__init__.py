"""
Task Logger

Leveled, multi-destination logging for many concurrent callers.
One explicit TaskLogger instance, a shared default destination and one
lazily-opened file per context destination.
"""

from tasklog.logger.core import TaskLogger
from tasklog.logger.context import LogContext
from tasklog.logger.records import (
    CRITICAL_BANNER,
    DEFAULT_DESTINATION,
    LogLevel,
    level_name,
)
from tasklog.logger.registry import Destination, DestinationRegistry
from tasklog.logger.formatters import BannerFormatter
from tasklog.logger.reconfig import LoggerReconfig
from tasklog.errors import ResourceFailure, TooManyLocks

__all__ = [
    "TaskLogger",
    "LogContext",
    "LogLevel",
    "level_name",
    "CRITICAL_BANNER",
    "DEFAULT_DESTINATION",
    "Destination",
    "DestinationRegistry",
    "BannerFormatter",
    "LoggerReconfig",
    "ResourceFailure",
    "TooManyLocks",
]

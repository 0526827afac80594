import logging

from pypopupanchor.types.enums import LogLevel

_LEVELS = {
    LogLevel.NONE: logging.CRITICAL + 10,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

def to_logging_level(level: LogLevel) -> int:
    """Maps a library LogLevel onto the standard logging levels."""
    return _LEVELS[LogLevel(level)]

def configure_logging(level: LogLevel = LogLevel.INFO) -> logging.Logger:
    """Sets the level of the package logger; handlers are left to the application."""
    package_logger = logging.getLogger("pypopupanchor")
    package_logger.setLevel(to_logging_level(level))
    return package_logger

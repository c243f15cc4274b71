import sys
import logging
if sys.version_info >= (3, 11):
    from enum import StrEnum
else:
    from backports.strenum import StrEnum

from hostconfig.config import Config


class LogLevel(StrEnum):
    """Level names accepted in the `debug.level` field."""
    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"
    PANIC = "panic"

    @property
    def logging_level(self) -> int:
        return _logging_levels[self]


_logging_levels = {
    LogLevel.TRACE: logging.DEBUG,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
    LogLevel.PANIC: logging.CRITICAL,
}


def parse_level(name: str) -> LogLevel:
    try:
        return LogLevel(name.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown log level {name!r}") from None


def reset_logging(level: str = LogLevel.INFO):
    """
    Config the logger such that logging.info(...) works like print(...)
    """
    root_logger = logging.getLogger()

    # clear any existing handlers
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # config logging to console as if calling print(...)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    # set logging level
    root_logger.setLevel(parse_level(level).logging_level)


def switch_log_file(log_file, config: Config | None = None) -> logging.FileHandler:
    """
    Send log records to `log_file` instead of any file used so far.

    With a `config`, the file only receives records at or above its
    `debug.level`; the console keeps the root level.
    """
    root_logger = logging.getLogger()

    # at most one log file at a time
    for handler in list(root_logger.handlers):
        if isinstance(handler, logging.FileHandler):
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    if config is not None:
        file_handler.setLevel(parse_level(config.debug.level).logging_level)
    root_logger.addHandler(file_handler)
    return file_handler


def apply_debug_level(config: Config) -> LogLevel:
    """Set the root logger to the level named in `debug.level`."""
    level = parse_level(config.debug.level)
    logging.getLogger().setLevel(level.logging_level)
    return level

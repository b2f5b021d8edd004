"""Logging setup: one named logger per component, shared handlers."""

import logging
import os

from .ansi import LEVEL_STYLES, RESET, should_colorize, style_prefix

__all__ = [
    "LogObjects",
    "ScreenLogFormatter",
    "get_logger",
    "init_logger",
    "is_debug",
    "set_debug",
]

FILE_FORMAT = r"%(asctime)s [%(levelname)s] %(name)s :: %(message)s :: %(filename)s:%(lineno)d"
DEBUG_SCREEN_FORMAT = r"%(name)10s - %(message)s // %(filename)s:%(lineno)d"
SCREEN_FORMAT = r"%(message)s"


class _DebugState:
    """Debug mode, set from the DEBUG environment variable, `--debug` or the config file."""

    value: bool = bool(os.environ.get("DEBUG"))


def is_debug() -> bool:
    return _DebugState.value


def set_debug(value: bool) -> None:
    _DebugState.value = value


class LogObjects:
    """Handlers shared by every component logger."""

    handlers: list[logging.Handler] = []


class ScreenLogFormatter(logging.Formatter):
    """Terminal formatter, coloring warnings and errors.

    Debug mode adds the component name and the source location.
    """

    def __init__(self, colors: bool | None = None) -> None:
        super().__init__()
        if colors is None:
            colors = should_colorize()
        fmt = DEBUG_SCREEN_FORMAT if is_debug() else SCREEN_FORMAT
        self._plain = logging.Formatter(fmt)
        self._styled = {}
        if colors:
            self._styled = {level: logging.Formatter(style_prefix(*codes) + fmt + RESET) for level, codes in LEVEL_STYLES.items()}

    def format(self, record: logging.LogRecord) -> str:
        return self._styled.get(record.levelno, self._plain).format(record)


def init_logger(filename: str | None = None, force_debug: bool = False) -> None:
    """Initialize the logging system.

    Args:
        filename: Optional filename to log to
        force_debug: If True, force debug level
    """
    if force_debug:
        set_debug(True)

    logging.basicConfig()
    LogObjects.handlers.clear()
    if filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT))
        LogObjects.handlers.append(file_handler)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(ScreenLogFormatter())
    LogObjects.handlers.append(stream_handler)


def get_logger(name: str = "notitlebar", level: int | None = None) -> logging.Logger:
    """Return the logger of a component, attached to the shared handlers.

    Calling it again for an existing logger refreshes its level, which is
    how a late `debug` setting reaches loggers created at startup.

    Args:
        name: component name (`router`, `xorg`, ...)
        level: logger's level, from the debug mode if not set
    """
    logger = logging.getLogger(name)
    if level is None:
        logger.setLevel(logging.DEBUG if is_debug() else logging.WARNING)
    else:
        logger.setLevel(level)
    logger.propagate = False
    for handler in LogObjects.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.debug('Logger "%s" ready', name)
    return logger

"""A levelled logger writing printf-style lines to a sink."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import Any, Callable, Optional

from .util import _expand


class LogLevel(IntEnum):
    ALWAYS = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4


def _stdout_write(text: str) -> None:
    sys.stdout.write(text)


class Logger:
    """Writes messages at or below the configured level, ending each with CRLF."""

    def __init__(
        self,
        write: Optional[Callable[[str], Any]] = None,
        level: LogLevel = LogLevel.WARN,
    ) -> None:
        self._write = write if write is not None else _stdout_write
        self.level = LogLevel(level)

    def set_level(self, level: LogLevel) -> None:
        self.level = LogLevel(level)

    def log(self, level: LogLevel, prefix: str, fmt: str, *args: Any) -> None:
        if level <= self.level:
            self._write(prefix + _expand(fmt, args) + "\r\n")

    def error(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.ERROR, "[ERROR] ", fmt, *args)

    def warn(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.WARN, "[WARN] ", fmt, *args)

    def info(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.INFO, "[INFO] ", fmt, *args)

    def debug(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.DEBUG, "[DEBUG] ", fmt, *args)

    def print(self, fmt: str, *args: Any) -> None:
        self.log(LogLevel.ALWAYS, "", fmt, *args)
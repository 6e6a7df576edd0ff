"""Leveled logging for llmkit.

The pipeline talks to a :class:`Logger`: ``debug``/``info``/``warn``/
``error`` take a message followed by alternating key/value pairs, and
``set_level`` changes verbosity at runtime.  :class:`LoguruLogger` is the
default implementation and forwards to loguru; each instance keeps its own
threshold so adjusting one engine's verbosity leaves the others alone.

Example usage:

>>> from llmkit.logger import get_logger, LogLevel
>>> log = get_logger("demo", LogLevel.DEBUG)
>>> log.debug("Option set", "temperature", 0.7)
"""

from __future__ import annotations

import threading
from enum import IntEnum
from typing import Any, Protocol, Union, runtime_checkable

from loguru import logger as _loguru


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def parse(cls, value: Union["LogLevel", int, str]) -> "LogLevel":
        """Coerce a level name (``"debug"``, ``"warning"``...) or number."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        if name == "WARNING":
            name = "WARN"
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None


# loguru level names for each LogLevel
_LOGURU_LEVELS = {
    LogLevel.DEBUG: "DEBUG",
    LogLevel.INFO: "INFO",
    LogLevel.WARN: "WARNING",
    LogLevel.ERROR: "ERROR",
}


@runtime_checkable
class Logger(Protocol):
    def debug(self, msg: str, *keyvals: Any) -> None: ...

    def info(self, msg: str, *keyvals: Any) -> None: ...

    def warn(self, msg: str, *keyvals: Any) -> None: ...

    def error(self, msg: str, *keyvals: Any) -> None: ...

    def set_level(self, level: Union[LogLevel, int, str]) -> None: ...


def format_keyvals(keyvals: tuple) -> str:
    """Render ``("a", 1, "b", 2)`` as ``"a=1 b=2"``."""
    pairs = []
    for i in range(0, len(keyvals), 2):
        if i + 1 < len(keyvals):
            pairs.append(f"{keyvals[i]}={keyvals[i + 1]!s}")
        else:
            pairs.append(f"!BADKEY={keyvals[i]!s}")
    return " ".join(pairs)


class LoguruLogger:
    """Logger backed by loguru with a per-instance level."""

    def __init__(self, name: str = "llmkit", level: Union[LogLevel, int, str] = LogLevel.INFO) -> None:
        self.name = name
        self._level = LogLevel.parse(level)
        self._lock = threading.Lock()
        self._logger = _loguru.bind(component=name)

    @property
    def level(self) -> LogLevel:
        return self._level

    def set_level(self, level: Union[LogLevel, int, str]) -> None:
        with self._lock:
            self._level = LogLevel.parse(level)

    def child(self, suffix: str) -> "LoguruLogger":
        """Return a logger named ``<name>.<suffix>`` starting at this logger's level."""
        return LoguruLogger(f"{self.name}.{suffix}", self._level)

    def enabled(self, level: LogLevel) -> bool:
        return level >= self._level

    def debug(self, msg: str, *keyvals: Any) -> None:
        self._log(LogLevel.DEBUG, msg, keyvals)

    def info(self, msg: str, *keyvals: Any) -> None:
        self._log(LogLevel.INFO, msg, keyvals)

    def warn(self, msg: str, *keyvals: Any) -> None:
        self._log(LogLevel.WARN, msg, keyvals)

    def error(self, msg: str, *keyvals: Any) -> None:
        self._log(LogLevel.ERROR, msg, keyvals)

    def _log(self, level: LogLevel, msg: str, keyvals: tuple) -> None:
        if not self.enabled(level):
            return
        # Logging never raises into the caller.
        try:
            text = f"{msg} {format_keyvals(keyvals)}" if keyvals else msg
            self._logger.opt(depth=2).log(_LOGURU_LEVELS[level], "{}", text)
        except Exception:
            pass


class NopLogger:
    """Logger that discards everything."""

    def debug(self, msg: str, *keyvals: Any) -> None:
        pass

    def info(self, msg: str, *keyvals: Any) -> None:
        pass

    def warn(self, msg: str, *keyvals: Any) -> None:
        pass

    def error(self, msg: str, *keyvals: Any) -> None:
        pass

    def set_level(self, level: Union[LogLevel, int, str]) -> None:
        pass


class LeveledLogger:
    """Give a logger its own threshold without touching the wrapped one.

    Records below the threshold are dropped here; the rest are forwarded
    and still pass through the wrapped logger's own level.
    """

    def __init__(self, inner: Logger, level: Union[LogLevel, int, str] = LogLevel.DEBUG) -> None:
        self.inner = inner
        self.level = LogLevel.parse(level)

    def set_level(self, level: Union[LogLevel, int, str]) -> None:
        self.level = LogLevel.parse(level)

    def debug(self, msg: str, *keyvals: Any) -> None:
        if self.level <= LogLevel.DEBUG:
            self.inner.debug(msg, *keyvals)

    def info(self, msg: str, *keyvals: Any) -> None:
        if self.level <= LogLevel.INFO:
            self.inner.info(msg, *keyvals)

    def warn(self, msg: str, *keyvals: Any) -> None:
        if self.level <= LogLevel.WARN:
            self.inner.warn(msg, *keyvals)

    def error(self, msg: str, *keyvals: Any) -> None:
        self.inner.error(msg, *keyvals)


def scoped_logger(logger: Logger, name: str) -> Logger:
    """Return a logger for one unit of work whose level is independent of ``logger``."""
    child = getattr(logger, "child", None)
    if callable(child):
        return child(name)
    return LeveledLogger(logger)


def get_logger(name: str = "llmkit", level: Union[LogLevel, int, str] = LogLevel.INFO) -> LoguruLogger:
    """Return a new :class:`LoguruLogger` for ``name``."""
    return LoguruLogger(name, level)


__all__ = [
    "LogLevel",
    "Logger",
    "LoguruLogger",
    "LeveledLogger",
    "NopLogger",
    "get_logger",
    "scoped_logger",
    "format_keyvals",
]

"""Named loggers with handlers, level filtering and redirection."""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from enum import IntEnum

from ppledger.errors import LedgerError


class Level(IntEnum):
    """Severity of a log record, ordered from least to most severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4


def _timestamp() -> str:
    now = datetime.now()
    return f"{now:%Y-%m-%d %H:%M:%S}.{now.microsecond // 1000:03d}"


class Handler(ABC):
    """Destination for formatted log messages, with its own level threshold."""

    def __init__(self, level: Level = Level.DEBUG) -> None:
        self.level = level

    @abstractmethod
    def emit(self, level: Level, logger_name: str, message: str) -> None:
        """Write an already formatted message if ``level`` passes the threshold."""


class ConsoleHandler(Handler):
    """Writes messages to standard output."""

    def emit(self, level: Level, logger_name: str, message: str) -> None:
        if level < self.level:
            return
        sys.stdout.write(message + "\n")
        sys.stdout.flush()


class FileHandler(Handler):
    """Appends messages to a file, one per line."""

    def __init__(self, filename: str, level: Level = Level.DEBUG) -> None:
        super().__init__(level)
        self.filename = filename
        try:
            self._file = open(filename, "a", encoding="utf-8")
        except OSError as exc:
            raise LedgerError(f"Failed to open log file: {filename}") from exc

    def emit(self, level: Level, logger_name: str, message: str) -> None:
        if level < self.level or self._file.closed:
            return
        self._file.write(message + "\n")
        self._file.flush()

    def close(self) -> None:
        """Close the underlying file; later messages are dropped."""
        if not self._file.closed:
            self._file.close()


class Logger:
    """A named logger that formats messages and passes them to its handlers."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.level = Level.DEBUG
        self.redirect_target = ""
        self._handlers: list[Handler] = [ConsoleHandler()]
        self._lock = threading.RLock()

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(self._handlers)

    def log(self, level: Level, message: object) -> None:
        """Log ``message`` at ``level``, forwarding it if a redirect is set."""
        target = self.redirect_target
        if target:
            get_logger(target).log(level, message)
            return
        if level < self.level:
            return
        with self._lock:
            formatted = self.format_message(level, str(message))
            for handler in self._handlers:
                handler.emit(level, self.name, formatted)

    def debug(self, message: object) -> None:
        self.log(Level.DEBUG, message)

    def info(self, message: object) -> None:
        self.log(Level.INFO, message)

    def warning(self, message: object) -> None:
        self.log(Level.WARNING, message)

    def error(self, message: object) -> None:
        self.log(Level.ERROR, message)

    def critical(self, message: object) -> None:
        self.log(Level.CRITICAL, message)

    def format_message(self, level: Level, message: str) -> str:
        """Return ``[timestamp] [LEVEL] [name] message``; the name part is omitted if empty."""
        parts = [f"[{_timestamp()}] ", f"[{Level(level).name}] "]
        if self.name:
            parts.append(f"[{self.name}] ")
        parts.append(message)
        return "".join(parts)

    def add_handler(self, handler: Handler) -> None:
        with self._lock:
            self._handlers.append(handler)

    def add_file_handler(self, filename: str, level: Level = Level.DEBUG) -> FileHandler:
        """Attach a handler appending to ``filename`` and return it."""
        handler = FileHandler(filename, level)
        self.add_handler(handler)
        return handler

    def redirect_to(self, target_logger_name: str) -> None:
        """Send every later message to the logger registered under that name."""
        with self._lock:
            self.redirect_target = target_logger_name

    def clear_redirect(self) -> None:
        with self._lock:
            self.redirect_target = ""

    def has_redirect(self) -> bool:
        return bool(self.redirect_target)


_registry: dict[str, Logger] = {}
_registry_lock = threading.Lock()


def get_logger(name: str = "") -> Logger:
    """Return the logger registered under ``name``, creating it if needed."""
    with _registry_lock:
        logger = _registry.get(name)
        if logger is None:
            logger = Logger(name)
            _registry[name] = logger
        return logger


def get_root_logger() -> Logger:
    """Return the logger with the empty name."""
    return get_logger("")
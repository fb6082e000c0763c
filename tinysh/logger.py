"""
tinysh Logger Module

The logging system used by every part of the shell:
- Structured logging with subsystem and pid context
- Multiple log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- Console output on stderr, optional file output
- Verbose-mode tracing of the process and descriptor plumbing

Console output always goes to stderr: stdout belongs to the programs
the shell runs and may be a pipe or a redirected file at the moment a
message is written.

Author: YSNRFD
Version: 1.0.0
"""

import logging
import os
import sys
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Optional, Any, TextIO


class LogLevel(IntEnum):
    """Log level enumeration with numeric values for comparison."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_name(cls, name: str) -> 'LogLevel':
        """Look up a level by (case-insensitive) name."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}") from None


class LogFormatter(logging.Formatter):
    """
    Custom log formatter for tinysh.

    Provides formatted output with:
    - Optional timestamp with millisecond precision
    - Log level with color coding (if terminal supports it)
    - Subsystem identification
    - Process context
    """

    # ANSI color codes for terminal output
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def __init__(
        self,
        use_colors: bool = True,
        show_timestamp: bool = False,
        stream: Optional[TextIO] = None
    ):
        super().__init__()
        self.use_colors = use_colors and self._supports_color(stream or sys.stderr)
        self.show_timestamp = show_timestamp

    @staticmethod
    def _supports_color(stream: TextIO) -> bool:
        """Check if the stream is a terminal that supports ANSI colors."""
        if not hasattr(stream, 'isatty'):
            return False
        return stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        level = record.levelname

        if self.use_colors and level in self.COLORS:
            level_display = f"{self.COLORS[level]}{level:8s}{self.RESET}"
        else:
            level_display = f"{level:8s}"

        components = []
        if self.show_timestamp:
            timestamp = datetime.fromtimestamp(record.created).strftime(
                '%Y-%m-%d %H:%M:%S.%f'
            )[:-3]
            components.append(f"[{timestamp}]")
        components.append(level_display)

        if hasattr(record, 'subsystem'):
            components.append(f"[{record.subsystem}]")

        if hasattr(record, 'pid') and record.pid is not None:
            components.append(f"(pid={record.pid})")

        components.append(str(record.getMessage()))

        if hasattr(record, 'context') and record.context:
            context_str = " ".join(f"{k}={v}" for k, v in record.context.items())
            components.append(f"{{{context_str}}}")

        message = " ".join(components)

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


class Logger:
    """
    Main logging class for tinysh.

    One instance exists per subsystem ('shell', 'dispatcher', 'pipe', ...),
    each backed by a stdlib logger under the 'tinysh' namespace.

    Example:
        >>> log = Logger('dispatcher')
        >>> log.info("Waiting for child", pid=4242)
        >>> log.trace("Creating a pipe", verbose=config.shell.verbose)
    """

    _instances: dict[str, 'Logger'] = {}
    _initialized = False
    _global_level: int = LogLevel.INFO

    def __new__(cls, subsystem: str = 'shell') -> 'Logger':
        """Get or create a logger for a subsystem."""
        if subsystem not in cls._instances:
            instance = super().__new__(cls)
            instance._subsystem = subsystem
            instance._logger = logging.getLogger(f'tinysh.{subsystem}')
            cls._instances[subsystem] = instance
        return cls._instances[subsystem]

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @property
    def name(self) -> str:
        """Name of the underlying stdlib logger."""
        return self._logger.name

    @classmethod
    def initialize(
        cls,
        level: int = LogLevel.INFO,
        log_file: Optional[str] = None,
        use_colors: bool = True,
        stream: Optional[TextIO] = None
    ) -> None:
        """
        Initialize the logging system.

        Called once at startup; later calls are ignored.

        Args:
            level: Minimum log level to capture
            log_file: Optional file path for log output
            use_colors: Whether to use ANSI colors in console output
            stream: Console stream, stderr by default
        """
        if cls._initialized:
            return

        cls._global_level = level

        root_logger = logging.getLogger('tinysh')
        root_logger.setLevel(level)
        root_logger.propagate = False

        console_stream = stream or sys.stderr
        console_handler = logging.StreamHandler(console_stream)
        console_handler.setLevel(level)
        console_handler.setFormatter(
            LogFormatter(use_colors=use_colors, stream=console_stream)
        )
        root_logger.addHandler(console_handler)

        if log_file:
            file_path = Path(log_file)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(LogLevel.DEBUG)
            file_handler.setFormatter(
                LogFormatter(use_colors=False, show_timestamp=True)
            )
            root_logger.addHandler(file_handler)
            # The file keeps the full trace even when the console is quieter.
            root_logger.setLevel(LogLevel.DEBUG)

        cls._initialized = True

    @classmethod
    def shutdown(cls) -> None:
        """Flush and detach all handlers so initialize() can run again."""
        root_logger = logging.getLogger('tinysh')
        for handler in list(root_logger.handlers):
            handler.flush()
            handler.close()
            root_logger.removeHandler(handler)
        cls._initialized = False

    def _log(
        self,
        level: int,
        message: str,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Internal logging method."""
        extra = {
            'subsystem': self._subsystem,
            'pid': pid,
            'context': context or {},
        }
        self._logger.log(level, message, extra=extra)

    def debug(
        self,
        message: str,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Log a debug message."""
        self._log(LogLevel.DEBUG, message, pid, context)

    def info(
        self,
        message: str,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, message, pid, context)

    def warning(
        self,
        message: str,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Log a warning message."""
        self._log(LogLevel.WARNING, message, pid, context)

    def error(
        self,
        message: str,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Log an error message."""
        self._log(LogLevel.ERROR, message, pid, context)

    def critical(
        self,
        message: str,
        pid: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """Log a critical message."""
        self._log(LogLevel.CRITICAL, message, pid, context)

    def trace(
        self,
        message: str,
        verbose: bool,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Narrate a step of command execution.

        Shown at INFO when the caller runs in verbose mode, otherwise kept
        at DEBUG. The current pid is attached since narration comes from
        several processes of the same pipeline.
        """
        level = LogLevel.INFO if verbose else LogLevel.DEBUG
        self._log(level, message, os.getpid(), context)


def get_logger(subsystem: str) -> Logger:
    """
    Get a logger for the specified subsystem.

    Args:
        subsystem: Name of the subsystem (e.g., 'shell', 'dispatcher', 'pipe')

    Returns:
        Logger instance for the subsystem
    """
    return Logger(subsystem)

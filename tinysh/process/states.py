"""
Process States Module

Defines how the termination of a pipeline is reported back to the
interactive loop.

Author: YSNRFD
Version: 1.0.0
"""

import os
import signal
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_COMMAND_NOT_FOUND = 127

# Signals that mean the user stopped the foreground stage from the terminal.
USER_INTERRUPT_SIGNALS = frozenset({signal.SIGINT, signal.SIGQUIT})


class StatusKind(Enum):
    """
    How a command terminated.

    SUCCESS: exited with status 0
    FAILURE: exited with a non-zero status, or could not be run at all
    KILLED: terminated by a signal
    """

    SUCCESS = auto()
    FAILURE = auto()
    KILLED = auto()


@dataclass(frozen=True)
class ExitStatus:
    """Termination state of a command, as seen by whoever waited on it."""
    kind: StatusKind
    code: Optional[int] = None
    signal: Optional[int] = None

    @classmethod
    def success(cls) -> 'ExitStatus':
        return cls(StatusKind.SUCCESS, code=EXIT_SUCCESS)

    @classmethod
    def failure(cls, code: int = EXIT_FAILURE) -> 'ExitStatus':
        return cls(StatusKind.FAILURE, code=code)

    @classmethod
    def killed(cls, signum: int) -> 'ExitStatus':
        return cls(StatusKind.KILLED, signal=signum)

    @classmethod
    def from_wait_status(cls, status: int) -> 'ExitStatus':
        """Decode a status word as returned by os.waitpid()."""
        if os.WIFSIGNALED(status):
            return cls.killed(os.WTERMSIG(status))
        if os.WIFEXITED(status):
            code = os.WEXITSTATUS(status)
            if code == EXIT_SUCCESS:
                return cls.success()
            return cls.failure(code)
        # Stopped or continued children are not waited for.
        return cls.failure()

    @property
    def ok(self) -> bool:
        return self.kind is StatusKind.SUCCESS

    @property
    def interrupted_by_user(self) -> bool:
        return self.kind is StatusKind.KILLED and self.signal in USER_INTERRUPT_SIGNALS

    @property
    def command_not_found(self) -> bool:
        return self.kind is StatusKind.FAILURE and self.code == EXIT_COMMAND_NOT_FOUND

    def __str__(self) -> str:
        if self.kind is StatusKind.KILLED:
            try:
                name = signal.Signals(self.signal).name
            except ValueError:
                name = str(self.signal)
            return f"killed by {name}"
        if self.kind is StatusKind.SUCCESS:
            return "success"
        return f"failure (exit code {self.code})"

"""
Process Exceptions

Exceptions related to spawning, waiting on and replacing the image of
pipeline processes.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellException


class ProcessException(ShellException):
    """
    Base exception for all process-related errors.

    Attributes:
        message: Human-readable error description
        pid: Process ID associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        pid: Optional[int] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if pid is not None:
            ctx["pid"] = pid
        super().__init__(message, error_code=error_code or 2000, context=ctx)
        self.pid = pid


class SpawnError(ProcessException):
    """
    Error creating a child process.

    Raised when fork() fails, typically because of a process count
    limit or lack of memory for the new process.

    Example:
        >>> raise SpawnError("Resource temporarily unavailable", errno=11)
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(message, error_code=2001, context=ctx)
        self.errno = errno


class WaitError(ProcessException):
    """
    Error waiting for a child process to terminate.

    Example:
        >>> raise WaitError("No child processes", pid=42)
    """

    def __init__(
        self,
        message: str,
        pid: Optional[int] = None,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(message, pid=pid, error_code=2002, context=ctx)
        self.errno = errno


class ExecError(ProcessException):
    """
    Error during the exec() system call.

    This exception is raised when the program was located but its
    image could not replace the current one. Common causes include:
    - Permission denied
    - Invalid executable format
    - Path component is not a directory

    Example:
        >>> raise ExecError("Permission denied", program="./script", errno=13)
    """

    def __init__(
        self,
        message: str,
        program: Optional[str] = None,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if program:
            ctx["program"] = program
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(message, error_code=2003, context=ctx)
        self.program = program
        self.errno = errno


class CommandNotFoundError(ProcessException):
    """
    The named program could not be resolved to an executable.

    Reported quietly, without the raw system error, since it is the
    common case of a mistyped command.

    Example:
        >>> raise CommandNotFoundError("sl")
    """

    def __init__(
        self,
        program: str,
        searched: Optional[list[str]] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if searched:
            ctx["searched"] = ":".join(searched)
        super().__init__(
            f"{program}: command not found",
            error_code=2004,
            context=ctx
        )
        self.program = program
        self.searched = searched or []

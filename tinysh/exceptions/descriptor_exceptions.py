"""
Descriptor Exceptions

Exceptions raised while opening, duplicating or closing the file and
pipe descriptors that connect pipeline stages.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .shell_exceptions import ShellException


class DescriptorException(ShellException):
    """
    Base exception for descriptor plumbing errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        errno: OS error number, when the failure came from a system call
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if errno is not None:
            ctx["errno"] = errno
        super().__init__(message, error_code=error_code or 3000, context=ctx)
        self.errno = errno


class DescriptorError(DescriptorException):
    """
    An open, dup2 or close call failed.

    Example:
        >>> raise DescriptorError("Permission denied", operation="open", path="/out.txt")
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        fd: Optional[int] = None,
        path: Optional[str] = None,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if fd is not None:
            ctx["fd"] = fd
        if path:
            ctx["path"] = path
        super().__init__(message, error_code=3001, errno=errno, context=ctx)
        self.operation = operation
        self.fd = fd
        self.path = path


class PipeError(DescriptorException):
    """
    Error creating a pipe.

    Example:
        >>> raise PipeError("Too many open files", errno=24)
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code=3002, errno=errno, context=context)

"""
Shell Exceptions

Base exception for tinysh plus the configuration and parsing errors
raised before any process is spawned.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ShellException(Exception):
    """
    Base exception for all tinysh errors.

    Every error raised by the engine carries a human-readable message,
    a numeric error code and a context dictionary so that it can be
    logged uniformly by whichever process catches it.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error

    Example:
        >>> raise ShellException("Something went wrong", error_code=1000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 1000
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code})"
        )


class ConfigException(ShellException):
    """Base exception for configuration errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code=error_code or 1100, context=context)


class ConfigValidationError(ConfigException):
    """
    Raised when a configuration file cannot be loaded or validated.

    Example:
        >>> raise ConfigValidationError("Invalid JSON", path="tinysh.json")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message, error_code=1101, context=ctx)
        self.path = path


class ParseException(ShellException):
    """Base exception for command line parsing errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code=error_code or 1200, context=context)


class PipelineSyntaxError(ParseException):
    """
    A command line whose operators cannot form a valid pipeline.

    Raised for empty stages (``| wc``, ``ls |``, ``ls >``) and for a
    redirection target that is followed by a further operator.

    Example:
        >>> raise PipelineSyntaxError("missing command before '|'", token="|")
    """

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if token:
            ctx["token"] = token
        super().__init__(message, error_code=1201, context=ctx)
        self.token = token

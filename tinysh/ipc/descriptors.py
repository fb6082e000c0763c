"""
Descriptor Helpers

Thin wrappers over the descriptor system calls used to plumb pipeline
stages together, raising the shell's exceptions instead of OSError.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Tuple

from tinysh.exceptions import DescriptorError, PipeError
from tinysh.logger import get_logger


STDIN_FILENO = 0
STDOUT_FILENO = 1

READ_END = 0
WRITE_END = 1

_logger = get_logger('descriptors')


def create_pipe() -> Tuple[int, int]:
    """Create a pipe; index 0 of the result is the read end, index 1 the write end."""
    try:
        return os.pipe()
    except OSError as e:
        raise PipeError(f"Error creating pipe: {e.strerror}", errno=e.errno) from e


def open_for_writing(path: str, flags: int, mode: int) -> int:
    """Open path with os.open, wrapping failures in DescriptorError."""
    try:
        return os.open(path, flags, mode)
    except OSError as e:
        raise DescriptorError(
            f"Error opening file: {e.strerror}",
            operation="open",
            path=path,
            errno=e.errno
        ) from e


def duplicate_onto(fd: int, target: int) -> None:
    """Make target refer to the same open file as fd."""
    try:
        os.dup2(fd, target)
    except OSError as e:
        raise DescriptorError(
            f"Error duplicating file descriptor {fd} onto {target}: {e.strerror}",
            operation="dup2",
            fd=fd,
            errno=e.errno
        ) from e


def close_descriptor(fd: int) -> None:
    """Close fd, wrapping failures in DescriptorError."""
    try:
        os.close(fd)
    except OSError as e:
        raise DescriptorError(
            f"Error closing file descriptor {fd}: {e.strerror}",
            operation="close",
            fd=fd,
            errno=e.errno
        ) from e


def close_after_error(*fds: int) -> None:
    """
    Close descriptors on a path that is already failing.

    Failures are logged rather than raised so that the original error is
    the one reported.
    """
    for fd in fds:
        try:
            os.close(fd)
        except OSError as e:
            _logger.warning(f"Error closing file descriptor {fd}: {e.strerror}")

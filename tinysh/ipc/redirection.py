"""
Output Redirection Handler

Sends the standard output of a command to a file, either replacing the
file's contents (``>``) or adding to its end (``>>``).

Author: YSNRFD
Version: 1.0.0
"""

import os
from enum import Enum
from typing import List, NoReturn

from tinysh.core.config_loader import Config
from tinysh.ipc.descriptors import (
    STDOUT_FILENO,
    close_after_error,
    close_descriptor,
    duplicate_onto,
    open_for_writing,
)
from tinysh.logger import get_logger
from tinysh.process.launcher import Launcher
from tinysh.shell.parser import FeatureType


FILE_PERMISSIONS = 0o666


class RedirectMode(Enum):
    """How the destination file is opened."""
    TRUNCATE = "overwrite"
    APPEND = "append"

    @classmethod
    def from_feature(cls, feature: FeatureType) -> 'RedirectMode':
        if feature is FeatureType.APPEND:
            return cls.APPEND
        if feature is FeatureType.OVERWRITE:
            return cls.TRUNCATE
        raise ValueError(f"{feature} is not a redirection")

    @property
    def flags(self) -> int:
        extra = os.O_TRUNC if self is RedirectMode.TRUNCATE else os.O_APPEND
        return os.O_CREAT | os.O_WRONLY | extra


def handle_redirect(
    head: List[str],
    target: List[str],
    mode: RedirectMode,
    config: Config
) -> NoReturn:
    """
    Run head with its standard output sent to the file named by target[0].

    Runs inside the process already forked for this command, whose image
    is replaced by head. Further target tokens are ignored.

    Raises:
        DescriptorError: If the file cannot be opened or installed as stdout
        CommandNotFoundError, ExecError: From the launcher
    """
    logger = get_logger('redirection')
    verbose = config.verbose
    path = target[0]

    if mode is RedirectMode.TRUNCATE:
        logger.trace(f"Overwriting the output of {head[0]} onto {path}", verbose)
    else:
        logger.trace(f"Appending the output of {head[0]} onto the end of {path}", verbose)

    if len(target) > 1:
        logger.warning(
            f"Ignoring extra arguments after {path}: {' '.join(target[1:])}"
        )

    fd = open_for_writing(path, mode.flags, FILE_PERMISSIONS)
    logger.trace(f"Opening {path} for writing ({mode.value}).", verbose)

    try:
        duplicate_onto(fd, STDOUT_FILENO)
    except Exception:
        close_after_error(fd)
        raise
    logger.trace(f"Duplicating the file descriptor for file {path} as stdout.", verbose)

    close_descriptor(fd)
    logger.trace("Closing output file descriptor.", verbose)

    logger.trace(f"Executing the head command: {head[0]}", verbose)
    Launcher(config).launch(head)

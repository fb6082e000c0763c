"""
Executable Launcher

Locates a program and replaces the current process image with it.

Two resolution modes are supported:
- environment mode: no PathList is configured and the inherited PATH is
  searched by execvp
- configured-path mode: the configured directories are tried in order

In configured-path mode only the first directory is tried unless the
fallback setting is enabled, in which case a program that is missing
from one directory is looked up in the next.

launch() never returns: it either replaces the image or raises. It must
only be called in a process forked for that purpose, never in the
interactive shell itself.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import List, NoReturn

from tinysh.core.config_loader import Config
from tinysh.exceptions import CommandNotFoundError, ExecError
from tinysh.logger import get_logger


class Launcher:
    """
    Replaces the calling process with a program.

    Example:
        >>> Launcher(config).launch(['ls', '-la'])  # does not return
    """

    def __init__(self, config: Config):
        self._config = config
        self._logger = get_logger('launcher')

    @property
    def uses_environment_path(self) -> bool:
        return not self._config.paths

    def candidates(self, program: str) -> List[str]:
        """
        Executable paths that would be tried for program, in order.

        A name containing a slash is never joined to a search directory.
        In environment mode the name itself is returned since execvp does
        the lookup.
        """
        if '/' in program or self.uses_environment_path:
            return [program]
        directories = self._config.paths
        if not self._config.search_path.fallback:
            directories = directories[:1]
        return [os.path.join(directory, program) for directory in directories]

    def launch(self, argv: List[str]) -> NoReturn:
        """
        Replace the current process image with argv[0].

        Raises:
            CommandNotFoundError: If the program cannot be located
            ExecError: If it was located but could not be executed
        """
        if not argv:
            raise ExecError("Cannot execute an empty command")

        program = argv[0]
        verbose = self._config.verbose

        if self.uses_environment_path and '/' not in program:
            self._logger.trace(
                f"Using execvp to execute the command: {program}", verbose
            )
            self._exec(program, argv, search=True)

        if '/' in program:
            self._logger.trace(f"Executing {program} directly", verbose)
            self._exec(program, argv, search=False)

        self._logger.trace(
            f"Searching the paths provided in the path file for the command: {program}",
            verbose
        )
        searched = []
        for candidate in self.candidates(program):
            searched.append(os.path.dirname(candidate))
            try:
                self._exec(candidate, argv, search=False)
            except CommandNotFoundError:
                self._logger.debug(f"{candidate} does not exist")
                continue

        raise CommandNotFoundError(program, searched=searched)

    def _exec(self, path: str, argv: List[str], search: bool) -> NoReturn:
        """Call exec, translating OSError into the shell's exceptions."""
        try:
            if search:
                os.execvp(path, argv)
            else:
                os.execv(path, argv)
        except FileNotFoundError:
            raise CommandNotFoundError(argv[0]) from None
        except OSError as e:
            raise ExecError(
                f"Error executing program: {e.strerror}",
                program=path,
                errno=e.errno
            ) from e
        # exec only comes back by raising.
        raise ExecError("exec returned without replacing the process", program=path)

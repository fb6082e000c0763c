"""
Shell Built-in Commands

Implements the commands the shell runs itself instead of dispatching
them to a child process.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Callable, List

from tinysh.logger import get_logger
from tinysh.process.states import EXIT_FAILURE, EXIT_SUCCESS
from tinysh.shell.parser import FeatureType, classify


class BuiltinCommands:
    """
    Built-in shell commands.

    These commands are executed directly by the shell without
    creating a new process: they change the state of the shell itself.
    """

    def __init__(self, shell):
        """
        Initialize built-in commands.

        Args:
            shell: The shell instance
        """
        self._shell = shell
        self._logger = get_logger('builtins')
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'exit': self.cmd_exit,
            'verbose': self.cmd_verbose,
            'brief': self.cmd_brief,
            'pwd': self.cmd_pwd,
            'cd': self.cmd_cd,
        }

    def get_commands(self) -> dict[str, Callable[[List[str]], int]]:
        """Get all built-in commands."""
        return self._commands

    def is_builtin(self, argv: List[str]) -> bool:
        """
        Check if a tokenized command is handled by a built-in.

        pwd followed by a pipe or redirection is left to the dispatcher,
        so that the external pwd writes where the operator says.
        """
        if not argv or argv[0] not in self._commands:
            return False
        if argv[0] == 'pwd' and classify(argv) is not FeatureType.NONE:
            return False
        return True

    def execute(self, argv: List[str]) -> int:
        """
        Execute a built-in command.

        Args:
            argv: Command name followed by its arguments

        Returns:
            Exit code
        """
        cmd = self._commands[argv[0]]
        return cmd(argv[1:])

    @property
    def _verbose(self) -> bool:
        return self._shell.config.shell.verbose

    # Command implementations

    def cmd_exit(self, args: List[str]) -> int:
        """Exit the shell."""
        self._shell.request_exit()
        return EXIT_SUCCESS

    def cmd_verbose(self, args: List[str]) -> int:
        """Turn on narration of process and descriptor handling."""
        self._shell.config.shell.verbose = True
        print("Running in verbose mode.")
        return EXIT_SUCCESS

    def cmd_brief(self, args: List[str]) -> int:
        """Turn verbose mode off."""
        self._shell.config.shell.verbose = False
        return EXIT_SUCCESS

    def cmd_pwd(self, args: List[str]) -> int:
        """Print working directory."""
        self._logger.trace("Getting current working directory...", self._verbose)
        if args:
            print("Error:  pwd should not have any arguments.")
            return EXIT_FAILURE

        try:
            cwd = os.getcwd()
        except OSError as e:
            self._logger.error(
                f"Error:  Getting the current working directory failed: {e.strerror}"
            )
            return EXIT_FAILURE

        print(cwd)
        return EXIT_SUCCESS

    def cmd_cd(self, args: List[str]) -> int:
        """Change directory; with no argument, go to $HOME."""
        self._logger.trace("Changing current directory...", self._verbose)

        if len(args) > 1:
            print("Error:  Too many arguments.\nUsage: cd [dir]")
            return EXIT_FAILURE

        if args:
            path = args[0]
        else:
            path = os.environ.get('HOME')
            if path is None:
                print("Error:  There is no home environment variable defined in your environment.")
                return EXIT_FAILURE

        try:
            os.chdir(path)
        except OSError as e:
            print(f"cd: {path}: {e.strerror}")
            return EXIT_FAILURE

        self._logger.trace(f"Changed current directory to: {os.getcwd()}", self._verbose)
        return EXIT_SUCCESS

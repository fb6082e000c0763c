"""
tinysh Shell Module

The interactive command-line loop: read a line, tokenize it, run it as
a built-in or through the dispatcher, repeat.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional

from .parser import tokenize
from .builtins import BuiltinCommands
from tinysh.core.config_loader import Config
from tinysh.logger import get_logger
from tinysh.process.dispatcher import Dispatcher
from tinysh.process.states import EXIT_FAILURE, EXIT_SUCCESS, ExitStatus


class Shell:
    """
    tinysh Interactive Shell.

    Provides:
    - Line reading and tokenizing
    - Built-in commands (exit, verbose, brief, pwd, cd)
    - Dispatch of everything else to child processes

    One line is fully executed, and every process it started has
    terminated, before the next prompt is shown.

    Example:
        >>> shell = Shell(config)
        >>> shell.run()
    """

    def __init__(self, config: Optional[Config] = None):
        self._config = config or Config()
        self._logger = get_logger('shell')
        self._builtins = BuiltinCommands(self)
        self._dispatcher = Dispatcher(self._config)
        self._running = False
        self._exiting = False
        self._last_status = ExitStatus.success()

    @property
    def config(self) -> Config:
        return self._config

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def last_status(self) -> ExitStatus:
        """Status of the last command line other than exit."""
        return self._last_status

    def run(self) -> int:
        """
        Run the interactive shell.

        This is the main REPL loop.

        Returns:
            Process exit code for the shell
        """
        self._running = True

        if self._config.paths:
            print("Using the path defined in the provided path file.")
        else:
            print("Using the path defined by your environment.")

        while self._running and not self._exiting:
            try:
                line = input(self._config.shell.prompt)
            except EOFError:
                print()
                self._logger.trace(
                    "Encountered EOF, it looks like you pressed CTRL + D.",
                    self._config.shell.verbose
                )
                break
            except KeyboardInterrupt:
                print("^C")
                continue
            except MemoryError:
                return self._out_of_memory()

            try:
                self.execute_line(line)
            except MemoryError:
                return self._out_of_memory()

        self._running = False
        print("Exiting now.  Thanks for using tinysh!")
        return EXIT_SUCCESS

    def _out_of_memory(self) -> int:
        self._logger.critical("Out of memory while reading commands.")
        self._running = False
        return EXIT_FAILURE

    def execute_line(self, line: str) -> ExitStatus:
        """
        Execute a command line.

        Args:
            line: Command line string

        Returns:
            How the command terminated
        """
        argv = tokenize(line, self._config.shell.delimiters)

        # Nothing to run: reprompt without spawning.
        if not argv:
            return ExitStatus.success()

        verbose = self._config.shell.verbose
        if verbose:
            print()

        if self._builtins.is_builtin(argv):
            code = self._builtins.execute(argv)
            status = ExitStatus.success() if code == EXIT_SUCCESS else ExitStatus.failure(code)
        else:
            status = self._dispatcher.dispatch(argv)

        # exit keeps the status of the command before it.
        if not self._exiting:
            self._last_status = status

        # Verbose may just have been switched by a built-in.
        if self._config.shell.verbose and not self._exiting:
            print()
            if status.ok:
                print("Previous command was successful.\n")
            else:
                print("Previous command failed.\n")

        return status

    def run_script(self, script: str) -> ExitStatus:
        """
        Run a script (multiple commands).

        Args:
            script: Script content

        Returns:
            Status of the last command run
        """
        status = ExitStatus.success()

        for line in script.split('\n'):
            line = line.strip()
            if self._exiting:
                break
            if line and not line.startswith('#'):
                status = self.execute_line(line)

        return status

    def request_exit(self) -> None:
        """Request the shell to exit."""
        self._exiting = True

    @property
    def exiting(self) -> bool:
        return self._exiting

    def stop(self) -> None:
        """Stop the shell."""
        self._running = False


def create_shell(config: Optional[Config] = None) -> Shell:
    """Factory function to create a shell."""
    return Shell(config)

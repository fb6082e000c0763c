"""
Command Dispatcher

Entry point of the execution engine for one parsed command line.

The dispatcher forks exactly one child per command line. The child runs
the command (directly, or through the pipe and redirection handlers) and
never returns to the interactive loop; the parent blocks until that
child terminates and reports how it ended.

Author: YSNRFD
Version: 1.0.0
"""

import os
import signal
from contextlib import contextmanager
from typing import Iterator, List, NoReturn, Optional

from tinysh.core.config_loader import Config
from tinysh.exceptions import PipelineSyntaxError, SpawnError, WaitError
from tinysh.ipc.router import run_stages
from tinysh.logger import get_logger
from tinysh.process.child import flush_std_streams, restore_default_signals, run_in_child
from tinysh.process.launcher import Launcher
from tinysh.process.states import ExitStatus
from tinysh.shell.parser import FeatureType, Stage, classify, parse_stages


@contextmanager
def ignore_interactive_signals() -> Iterator[None]:
    """Ignore SIGINT and SIGQUIT in the shell while a command runs in the foreground."""
    previous = {
        signum: signal.signal(signum, signal.SIG_IGN)
        for signum in (signal.SIGINT, signal.SIGQUIT)
    }
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


class Dispatcher:
    """
    Runs a command line in a child process and waits for it.

    Example:
        >>> dispatcher = Dispatcher(config)
        >>> dispatcher.dispatch(['echo', 'hi', '|', 'wc', '-w'])
        ExitStatus(kind=<StatusKind.SUCCESS: 1>, code=0, signal=None)
    """

    def __init__(self, config: Config):
        self._config = config
        self._logger = get_logger('dispatcher')
        self._launcher = Launcher(config)

    @property
    def config(self) -> Config:
        return self._config

    def dispatch(self, argv: List[str]) -> ExitStatus:
        """
        Run argv and wait for every stage of it to terminate.

        Args:
            argv: Tokenized command line, possibly containing operators

        Returns:
            How the command terminated
        """
        if not argv:
            return ExitStatus.success()

        verbose = self._config.verbose

        stages: Optional[List[Stage]] = None
        if classify(argv) is not FeatureType.NONE:
            try:
                stages = parse_stages(argv)
            except PipelineSyntaxError as e:
                self._logger.error(f"syntax error: {e.message}")
                return ExitStatus.failure()

        flush_std_streams()
        # The child resets both signals before it runs anything.
        with ignore_interactive_signals():
            try:
                pid = os.fork()
            except OSError as e:
                error = SpawnError(f"Error forking a process: {e.strerror}", errno=e.errno)
                self._logger.error(str(error))
                return ExitStatus.failure()

            if pid == 0:
                run_in_child(lambda: self._run_child(argv, stages), self._logger)

            self._logger.trace(
                f"Creating a child process to run the command: {argv[0]}",
                verbose,
                context={'child_pid': pid}
            )
            result = self._wait(pid)

        if result.interrupted_by_user:
            print("Process executing a command was killed by the user.")
        return result

    def _run_child(self, argv: List[str], stages: Optional[List[Stage]]) -> NoReturn:
        """Body of the forked child."""
        restore_default_signals()
        verbose = self._config.verbose

        if stages is not None:
            self._logger.trace("Command line uses pipes or redirection.", verbose)
            run_stages(stages, self._config)

        self._logger.trace(f"Executing {argv[0]}...", verbose)
        self._launcher.launch(argv)

    def _wait(self, pid: int) -> ExitStatus:
        """
        Block until the child terminates and decode its status.

        Called with SIGINT and SIGQUIT ignored.
        """
        self._logger.trace("Waiting for child process to terminate.", self._config.verbose)

        try:
            _, status = os.waitpid(pid, 0)
        except OSError as e:
            error = WaitError(
                f"Error waiting for a process: {e.strerror}",
                pid=pid,
                errno=e.errno
            )
            self._logger.error(str(error))
            return ExitStatus.failure()

        result = ExitStatus.from_wait_status(status)
        self._logger.trace(f"Child process finished: {result}", self._config.verbose)
        return result

"""
Pipe Handler

Connects the standard output of one stage to the standard input of the
rest of the pipeline.

An N-stage pipeline runs in exactly N processes: each call forks one
child for the head stage, waits for it, then rewires its own standard
input to the pipe and becomes the next stage (or hands the remaining
stages back to the router, which may pipe again).

Descriptor order:

    head child                      current process
    ----------                      ---------------
    close(read end)                 waitpid(head)
    dup2(write end, 1)              dup2(read end, 0)
    close(write end)                close(read end)
    exec head                       close(write end)
                                    exec tail / pipe again

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import List, NoReturn, Tuple

from tinysh.core.config_loader import Config
from tinysh.exceptions import SpawnError, WaitError
from tinysh.ipc.descriptors import (
    READ_END,
    STDIN_FILENO,
    STDOUT_FILENO,
    WRITE_END,
    close_after_error,
    close_descriptor,
    create_pipe,
    duplicate_onto,
)
from tinysh.logger import get_logger
from tinysh.process.child import flush_std_streams, run_in_child
from tinysh.process.launcher import Launcher
from tinysh.process.states import ExitStatus
from tinysh.shell.parser import Stage


def handle_pipe(head: List[str], tail: List[Stage], config: Config) -> NoReturn:
    """
    Run head with its output piped into the stages of tail.

    Runs inside the process already forked for this command.

    Raises:
        PipeError: If the pipe cannot be created
        SpawnError: If the head process cannot be forked
        WaitError: If waiting for the head process fails
        DescriptorError: If the read end cannot be installed as stdin
    """
    from tinysh.ipc.router import run_stages

    logger = get_logger('pipe')
    verbose = config.verbose

    logger.trace(f"Piping: {head[0]} --> {tail[0].argv[0]}", verbose)
    pipefd = create_pipe()
    logger.trace("Creating a pipe for interprocess communication.", verbose)

    flush_std_streams()
    try:
        pid = os.fork()
    except OSError as e:
        close_after_error(*pipefd)
        raise SpawnError(f"Error forking a process: {e.strerror}", errno=e.errno) from e

    if pid == 0:
        run_in_child(lambda: _run_head(head, pipefd, config), logger)

    logger.trace(f"Creating a child process for the command: {head[0]}", verbose)
    _attach_to_head(pid, pipefd, config)

    run_stages(tail, config)


def _run_head(head: List[str], pipefd: Tuple[int, int], config: Config) -> NoReturn:
    """Head side: write into the pipe, then become head."""
    logger = get_logger('pipe')
    verbose = config.verbose

    try:
        close_descriptor(pipefd[READ_END])
    except Exception:
        close_after_error(pipefd[WRITE_END])
        raise
    logger.trace("Closing the read end of the pipe.", verbose)

    try:
        duplicate_onto(pipefd[WRITE_END], STDOUT_FILENO)
    except Exception:
        close_after_error(pipefd[WRITE_END])
        raise
    logger.trace("Duplicating the write end of the pipe as stdout.", verbose)

    close_descriptor(pipefd[WRITE_END])
    logger.trace(f"Executing the head command: {head[0]}", verbose)
    Launcher(config).launch(head)


def _attach_to_head(pid: int, pipefd: Tuple[int, int], config: Config) -> None:
    """Tail side: wait for the head, then read from the pipe on stdin."""
    logger = get_logger('pipe')
    verbose = config.verbose

    logger.trace("Waiting for child process to terminate.", verbose)
    try:
        _, status = os.waitpid(pid, 0)
    except OSError as e:
        close_after_error(*pipefd)
        raise WaitError(
            f"Error waiting for child process: {e.strerror}",
            pid=pid,
            errno=e.errno
        ) from e
    logger.trace(
        f"Head command finished: {ExitStatus.from_wait_status(status)}",
        verbose,
        context={'head_pid': pid}
    )

    try:
        duplicate_onto(pipefd[READ_END], STDIN_FILENO)
    except Exception:
        close_after_error(*pipefd)
        raise
    logger.trace("Duplicating the read end of the pipe as stdin.", verbose)

    try:
        close_descriptor(pipefd[READ_END])
    except Exception:
        close_after_error(pipefd[WRITE_END])
        raise
    close_descriptor(pipefd[WRITE_END])
    logger.trace("Closing both ends of the pipe.", verbose)

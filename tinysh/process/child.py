"""
Child Process Helpers

Code that runs right after fork() in a process that will become a
pipeline stage.

Author: YSNRFD
Version: 1.0.0
"""

import os
import signal
import sys
from typing import Callable, NoReturn

from tinysh.exceptions import CommandNotFoundError, ShellException
from tinysh.logger import Logger
from tinysh.process.states import EXIT_COMMAND_NOT_FOUND, EXIT_FAILURE


# Python ignores SIGPIPE (and SIGXFSZ) at startup and installs its own
# SIGINT handler; ignored dispositions survive exec.
_RESET_SIGNALS = tuple(
    getattr(signal, name)
    for name in ('SIGINT', 'SIGQUIT', 'SIGPIPE', 'SIGXFSZ')
    if hasattr(signal, name)
)


def restore_default_signals() -> None:
    """Give a process that is about to exec the default signal dispositions."""
    for signum in _RESET_SIGNALS:
        signal.signal(signum, signal.SIG_DFL)


def flush_std_streams() -> None:
    """Flush Python-level buffers so they are not written twice after fork()."""
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            try:
                stream.flush()
            except (OSError, ValueError):
                pass


def report_command_not_found(error: CommandNotFoundError) -> None:
    """Print the short message shown for a program that cannot be found."""
    print(f"tinysh: {error.program}: command not found", file=sys.stderr)


def run_in_child(body: Callable[[], NoReturn], logger: Logger) -> NoReturn:
    """
    Run body in a freshly forked process, then terminate that process.

    body is expected to replace the process image. If it raises instead,
    the error is reported and turned into the exit status; the child
    never unwinds into the frames it inherited from its parent.
    """
    status = EXIT_FAILURE
    try:
        body()
    except CommandNotFoundError as e:
        logger.debug(str(e), pid=os.getpid())
        report_command_not_found(e)
        status = EXIT_COMMAND_NOT_FOUND
    except ShellException as e:
        logger.error(str(e), pid=os.getpid())
    except Exception as e:
        logger.critical(f"Unexpected error in child process: {e!r}", pid=os.getpid())
    finally:
        flush_std_streams()
        os._exit(status)

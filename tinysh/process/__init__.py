"""
tinysh Process Module

Spawning, image replacement and termination status:
- Dispatcher: one child per command line
- Launcher: executable resolution and exec
- ExitStatus: decoded termination state
"""

from .states import (
    ExitStatus,
    StatusKind,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    EXIT_COMMAND_NOT_FOUND,
    USER_INTERRUPT_SIGNALS,
)
from .launcher import Launcher
from .dispatcher import Dispatcher

__all__ = [
    'ExitStatus',
    'StatusKind',
    'EXIT_SUCCESS',
    'EXIT_FAILURE',
    'EXIT_COMMAND_NOT_FOUND',
    'USER_INTERRUPT_SIGNALS',
    'Launcher',
    'Dispatcher',
]

"""
tinysh - A tiny UNIX shell

Runs command lines as real processes, connecting stages with pipes
and sending output to files with > and >>.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .core.config_loader import Config, ConfigLoader
from .process.dispatcher import Dispatcher
from .process.states import ExitStatus, StatusKind
from .shell.shell import Shell, create_shell

__all__ = [
    'Shell',
    'create_shell',
    'Config',
    'ConfigLoader',
    'Dispatcher',
    'ExitStatus',
    'StatusKind',
]

"""
tinysh Core Module

Configuration shared by the shell loop and the execution engine.
"""

from .config_loader import (
    Config,
    ConfigLoader,
    LoggingConfig,
    SearchPathConfig,
    ShellConfig,
    DEFAULT_DELIMITERS,
    DEFAULT_PROMPT,
)

__all__ = [
    'Config',
    'ConfigLoader',
    'LoggingConfig',
    'SearchPathConfig',
    'ShellConfig',
    'DEFAULT_DELIMITERS',
    'DEFAULT_PROMPT',
]

"""
tinysh Exception Hierarchy

All custom exceptions inherit from ShellException, with sub-categories
for the stage of command execution in which they occur.

Architecture:
    ShellException (Base)
    ├── ConfigException
    │   └── ConfigValidationError
    ├── ParseException
    │   └── PipelineSyntaxError
    ├── ProcessException
    │   ├── SpawnError
    │   ├── WaitError
    │   ├── ExecError
    │   └── CommandNotFoundError
    └── DescriptorException
        ├── DescriptorError
        └── PipeError

Running out of memory is not part of the hierarchy: the builtin
MemoryError is left to propagate and is fatal to the shell.
"""

from .shell_exceptions import (
    ShellException,
    ConfigException,
    ConfigValidationError,
    ParseException,
    PipelineSyntaxError,
)

from .process_exceptions import (
    ProcessException,
    SpawnError,
    WaitError,
    ExecError,
    CommandNotFoundError,
)

from .descriptor_exceptions import (
    DescriptorException,
    DescriptorError,
    PipeError,
)

__all__ = [
    # Base and pre-spawn exceptions
    "ShellException",
    "ConfigException",
    "ConfigValidationError",
    "ParseException",
    "PipelineSyntaxError",
    # Process exceptions
    "ProcessException",
    "SpawnError",
    "WaitError",
    "ExecError",
    "CommandNotFoundError",
    # Descriptor exceptions
    "DescriptorException",
    "DescriptorError",
    "PipeError",
]

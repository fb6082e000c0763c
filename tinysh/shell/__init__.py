"""
tinysh Shell Module

Provides the interactive command-line shell:
- Tokenizing and pipeline parsing
- Built-in commands
- The read/eval loop (tinysh.shell.shell)
"""

from .parser import (
    FeatureType,
    Pipeline,
    Stage,
    classify,
    parse_stages,
    split,
    tokenize,
)
from .builtins import BuiltinCommands

__all__ = [
    'FeatureType',
    'Pipeline',
    'Stage',
    'classify',
    'parse_stages',
    'split',
    'tokenize',
    'BuiltinCommands',
]

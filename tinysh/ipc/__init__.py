"""
tinysh IPC Module

Descriptor plumbing between pipeline stages:
- Pipes (|)
- Output redirection (>, >>)
"""

from .pipe import handle_pipe
from .redirection import RedirectMode, handle_redirect
from .router import run_stages

__all__ = [
    'handle_pipe',
    'handle_redirect',
    'RedirectMode',
    'run_stages',
]

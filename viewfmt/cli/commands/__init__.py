"""
Command implementations for the viewfmt CLI.

Each subcommand lives in its own module and is registered by
:func:`viewfmt.cli.main`.
"""

from .format import cmd_format
from .inspect import cmd_tokens, cmd_tree

__all__ = ["cmd_format", "cmd_tokens", "cmd_tree"]

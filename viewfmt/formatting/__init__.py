"""
Formatting engine for PHP view templates.

This package re-emits a parsed template with:
1. Fixed four-space indentation following markup and PHP control flow
2. Normalized spacing inside PHP expressions
3. Over-width lines split within a 120-column budget
"""

from __future__ import annotations

__all__ = [
    "FormattedResult",
    "ViewFormatter",
    "format",
    "format_source",
    "INDENT",
    "MAX_LINE_LENGTH",
]

from .core import FormattedResult, ViewFormatter, format_source
from .engine import format
from .split import INDENT, MAX_LINE_LENGTH

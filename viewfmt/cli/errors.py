"""
Error reporting for the viewfmt command line.

CLI failures are raised as :class:`CLIError` subclasses, each with a stable
code and an optional hint. :func:`handle_cli_exception` turns any exception
into a message on stderr and an exit status.
"""

import os
import sys
import traceback
from typing import Any, Dict, Optional

# Tracebacks printed in verbose mode are cut to this many characters
_CLI_TRACE_LIMIT = 4000

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class CLIError(Exception):
    """
    Base exception for command line failures.

    Attributes:
        message: Human-readable description
        code: Stable identifier shown as ``Error [CODE]``
        hint: Optional suggestion printed below the message
        context: Extra key/value details shown in verbose mode
    """

    code = "CLI_ERROR"

    def __init__(
        self,
        message: str,
        *,
        hint: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        return self.message


class CLIConfigError(CLIError):
    """The workspace configuration could not be loaded."""

    code = "CLI_CONFIG_ERROR"


class CLIValidationError(CLIError):
    """Arguments or options do not make sense together."""

    code = "CLI_VALIDATION_ERROR"


class CLIFileNotFoundError(CLIError):
    """A template path given on the command line does not exist."""

    code = "CLI_FILE_NOT_FOUND"


def format_cli_error(
    exc: BaseException,
    *,
    verbose: bool = False,
    include_traceback: bool = False,
) -> str:
    """
    Render ``exc`` for stderr.

    Examples:
        >>> print(format_cli_error(CLIValidationError("Pick one mode", hint="Use --check")))
        Error [CLI_VALIDATION_ERROR]: Pick one mode
        Hint: Use --check
    """
    if isinstance(exc, CLIError):
        lines = [f"Error [{exc.code}]: {exc.message}"]
        if exc.hint:
            lines.append(f"Hint: {exc.hint}")
        if verbose and exc.context:
            lines.append("\nContext:")
            lines.extend(f"  {key}: {value}" for key, value in exc.context.items())
    elif callable(getattr(exc, "format", None)):
        # ViewFmtError and friends know their own location
        lines = [f"Error: {exc.format()}"]
    else:
        lines = [f"Error: {type(exc).__name__}: {exc}"]

    if include_traceback:
        lines.extend(["\nTraceback:", format_traceback_excerpt()])
    return "\n".join(lines)


def format_traceback_excerpt() -> str:
    """The exception being handled, truncated to the CLI limit."""
    trace = traceback.format_exc().strip()
    if len(trace) > _CLI_TRACE_LIMIT:
        trace = trace[:_CLI_TRACE_LIMIT - 3] + "..."
    return trace


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in _TRUTHY


def cli_verbose_enabled(verbose_flag: bool = False) -> bool:
    """``--verbose``, VIEWFMT_VERBOSE or VIEWFMT_DEBUG."""
    return verbose_flag or _env_flag("VIEWFMT_VERBOSE") or _env_flag("VIEWFMT_DEBUG")


def cli_reraise_enabled() -> bool:
    """VIEWFMT_RERAISE or VIEWFMT_DEBUG lets exceptions escape to the caller."""
    return _env_flag("VIEWFMT_RERAISE") or _env_flag("VIEWFMT_DEBUG")


def handle_cli_exception(exc: BaseException, *, verbose: bool = False, exit_code: int = 1) -> None:
    """Print ``exc`` and exit with ``exit_code``; never returns normally."""
    if cli_reraise_enabled():
        raise exc
    verbose = cli_verbose_enabled(verbose)
    print(format_cli_error(exc, verbose=verbose, include_traceback=verbose), file=sys.stderr)
    sys.exit(exit_code)


__all__ = [
    "CLIError",
    "CLIConfigError",
    "CLIValidationError",
    "CLIFileNotFoundError",
    "format_cli_error",
    "format_traceback_excerpt",
    "cli_verbose_enabled",
    "cli_reraise_enabled",
    "handle_cli_exception",
]

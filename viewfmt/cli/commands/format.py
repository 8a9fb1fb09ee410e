"""
Format command implementation.

This module handles the 'format' subcommand: it formats templates and
prints, rewrites, checks or diffs them.
"""

import argparse
import difflib
import logging
import sys

from ...errors import ViewFmtError
from ...formatting import ViewFormatter
from ..context import read_template, resolve_template_paths
from ..errors import CLIValidationError, handle_cli_exception

logger = logging.getLogger(__name__)


def _unified_diff(original: str, formatted: str, name: str) -> str:
    lines = difflib.unified_diff(
        original.splitlines(keepends=True),
        formatted.splitlines(keepends=True),
        fromfile=f"{name} (original)",
        tofile=f"{name} (formatted)",
    )
    # A source without a trailing newline would glue two diff lines together
    return "".join(line if line.endswith("\n") else f"{line}\n" for line in lines)


def cmd_format(args: argparse.Namespace) -> None:
    """
    Handle the 'format' subcommand.

    Without a mode flag the formatted text is written to stdout. ``--write``
    rewrites files in place, ``--check`` only reports files that would
    change and ``--diff`` prints a unified diff. A file that cannot be read
    is reported and skipped; the command exits with status 1 if any file
    failed or, with ``--check``, if any file would change.

    Args:
        args: Parsed command-line arguments

    Examples:
        >>> args = argparse.Namespace(paths=['views/'], check=True, write=False, diff=False)
        >>> cmd_format(args)  # doctest: +SKIP
        would reformat views/site/index.php
        1 file would be reformatted, 3 files unchanged
    """
    try:
        modes = [name for name in ("write", "check", "diff") if getattr(args, name, False)]
        if len(modes) > 1:
            raise CLIValidationError(
                f"Options --{modes[0]} and --{modes[1]} cannot be used together",
                hint="Pick one of --write, --check or --diff",
            )

        files = resolve_template_paths(args.paths, args.cli_context)
        formatter = ViewFormatter()
        changed = 0
        failed = 0

        for path in files:
            try:
                source = read_template(path)
            except ViewFmtError as exc:
                print(f"error: {exc.format()}", file=sys.stderr)
                failed += 1
                continue

            result = formatter.format_document(source, str(path))
            for warning in result.warnings:
                logger.warning(warning)
            if not result.success():
                for error in result.errors:
                    print(f"error: {path}: {error}", file=sys.stderr)
                failed += 1
                continue

            if result.is_changed:
                changed += 1

            if args.write:
                if result.is_changed:
                    path.write_text(result.formatted_text, encoding="utf-8")
                    print(f"reformatted {path}")
            elif args.check:
                if result.is_changed:
                    print(f"would reformat {path}")
            elif args.diff:
                if result.is_changed:
                    sys.stdout.write(_unified_diff(source, result.formatted_text, str(path)))
            else:
                sys.stdout.write(result.formatted_text)

        if args.write or args.check:
            verb = "reformatted" if args.write else "would be reformatted"
            unchanged = len(files) - changed - failed
            print(
                f"{changed} file{'s' if changed != 1 else ''} {verb}, "
                f"{unchanged} file{'s' if unchanged != 1 else ''} unchanged",
                file=sys.stderr,
            )

        if failed or (args.check and changed):
            sys.exit(1)

    except SystemExit:
        raise
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))

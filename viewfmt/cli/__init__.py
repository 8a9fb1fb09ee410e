"""
Command-line interface for viewfmt.

Subcommands:
    format  Format templates (stdout, --write, --check or --diff)
    tokens  Print the token stream of templates
    tree    Print the node tree of templates
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .. import __version__
from ..config import load_workspace_config
from ..errors import ConfigError
from .commands import cmd_format, cmd_tokens, cmd_tree
from .context import CLIContext
from .errors import CLIConfigError, handle_cli_exception

LOG_LEVEL_ENV = 'VIEWFMT_LOG_LEVEL'


def _configure_runtime_logging(args) -> None:
    """Configure the viewfmt logger from --log-level or the environment."""
    import logging
    import os

    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv(LOG_LEVEL_ENV, 'warning')
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }

    numeric_level = level_map.get(log_level, logging.WARNING)

    package_logger = logging.getLogger('viewfmt')
    package_logger.setLevel(numeric_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        # Prevent propagation to root logger to avoid duplicate messages
        package_logger.propagate = False


def _add_paths_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        'paths',
        nargs='+',
        help='Template files or directories (directories are searched recursively)'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="viewfmt – deterministic pretty-printer for PHP view templates",
        prog="viewfmt"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Path to a viewfmt.toml or .viewfmtrc configuration file'
    )
    parser.add_argument(
        '--workspace',
        default=None,
        help='Workspace root directory (defaults to current working directory)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set VIEWFMT_VERBOSE=1)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help=f'Set logging level (or set {LOG_LEVEL_ENV})'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    format_parser = subparsers.add_parser(
        'format',
        help='Format templates',
        description='Format templates. Prints formatted text unless a mode flag is given.'
    )
    _add_paths_argument(format_parser)
    format_parser.add_argument('--write', '-w', action='store_true', help='Rewrite files in place')
    format_parser.add_argument('--check', action='store_true', help='Exit 1 if any file would change')
    format_parser.add_argument('--diff', action='store_true', help='Print a unified diff of the changes')
    format_parser.set_defaults(func=cmd_format)

    tokens_parser = subparsers.add_parser('tokens', help='Print the token stream of templates')
    _add_paths_argument(tokens_parser)
    tokens_parser.set_defaults(func=cmd_tokens)

    tree_parser = subparsers.add_parser('tree', help='Print the node tree of templates')
    _add_paths_argument(tree_parser)
    tree_parser.set_defaults(func=cmd_tree)

    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        >>> main(['format', '--check', 'views/'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        sys.exit(1)

    args.verbose = getattr(args, "verbose", False)
    _configure_runtime_logging(args)

    workspace_root = Path(args.workspace).resolve() if args.workspace else Path.cwd()
    config_path = Path(args.config).resolve() if args.config else None
    try:
        config = load_workspace_config(workspace_root, config_path)
    except ConfigError as exc:
        handle_cli_exception(
            CLIConfigError(exc.format(), hint="Fix or remove the configuration file"),
            verbose=args.verbose,
        )
        return

    args.cli_context = CLIContext(workspace_root=config.root, config=config)

    args.func(args)


__all__ = ["main", "build_parser"]


if __name__ == '__main__':  # pragma: no cover
    main()

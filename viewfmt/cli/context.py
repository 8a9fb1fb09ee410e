"""
CLI context shared by all subcommands.

This module provides the CLIContext dataclass and the helpers commands use
to turn path arguments into template files and template text.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from ..config import WorkspaceConfig, discover_files
from ..errors import SourceReadError
from .errors import CLIFileNotFoundError, CLIValidationError


@dataclass
class CLIContext:
    """
    Shared context resolved from workspace configuration.

    Attributes:
        workspace_root: Root directory of the workspace
        config: Parsed workspace configuration
    """

    workspace_root: Path
    config: WorkspaceConfig


def resolve_template_paths(raw_paths: Sequence[str], context: CLIContext) -> List[Path]:
    """
    Expand command-line path arguments into template files.

    Raises:
        CLIFileNotFoundError: If a path does not exist
        CLIValidationError: If no template files were found
    """
    paths = []
    for raw in raw_paths:
        path = Path(raw)
        if not path.exists():
            raise CLIFileNotFoundError(
                f"Path not found: {raw}",
                hint="Check the path or run from the workspace root",
                context={"path": raw},
            )
        paths.append(path)

    files = discover_files(paths, context.config)
    if not files:
        raise CLIValidationError(
            "No template files found",
            hint=f"Include patterns: {', '.join(context.config.include)}",
        )
    return files


def read_template(path: Path) -> str:
    """Read a template as UTF-8 text, raising SourceReadError on failure."""
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SourceReadError(f"File is not valid UTF-8: {exc.reason}", path=str(path)) from exc
    except OSError as exc:
        raise SourceReadError(f"Cannot read file: {exc.strerror or exc}", path=str(path)) from exc


__all__ = ["CLIContext", "resolve_template_paths", "read_template"]

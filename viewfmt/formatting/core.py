"""Formatter facade used by the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from viewfmt.parser import parse_document

from .engine import format as format_nodes
from .split import MAX_LINE_LENGTH

logger = logging.getLogger(__name__)


@dataclass
class FormattedResult:
    """Result of a formatting operation."""

    formatted_text: str
    is_changed: bool
    errors: List[str]
    warnings: List[str]

    def success(self) -> bool:
        """Check if formatting was successful."""
        return len(self.errors) == 0


def format_source(source_text: str) -> str:
    """Tokenize, parse and format template text."""
    return format_nodes(parse_document(source_text))


def overlong_lines(text: str) -> List[int]:
    """1-based numbers of lines wider than the width budget."""
    return [
        number
        for number, line in enumerate(text.splitlines(), start=1)
        if len(line) > MAX_LINE_LENGTH
    ]


class ViewFormatter:
    """
    Deterministic formatter for PHP view templates.

    This formatter:
    1. Tokenizes the template and builds its node tree
    2. Re-emits markup and PHP with canonical indentation and spacing
    3. Reports lines that no split strategy could bring under the width
    """

    def format_document(self, source_text: str, file_path: str = "untitled.php") -> FormattedResult:
        """
        Format a complete template.

        Args:
            source_text: The template text to format
            file_path: Path for error reporting (optional)

        Returns:
            FormattedResult with formatted text and status
        """
        errors: List[str] = []
        warnings: List[str] = []

        try:
            formatted_text = format_source(source_text)
        except Exception as exc:
            logger.exception("Unexpected failure while formatting %s", file_path)
            errors.append(f"Formatting error: {exc}")
            return FormattedResult(
                formatted_text=source_text,
                is_changed=False,
                errors=errors,
                warnings=warnings,
            )

        for number in overlong_lines(formatted_text):
            warnings.append(f"{file_path}:{number}: line exceeds {MAX_LINE_LENGTH} columns")

        return FormattedResult(
            formatted_text=formatted_text,
            is_changed=formatted_text != source_text,
            errors=errors,
            warnings=warnings,
        )


__all__ = ["FormattedResult", "ViewFormatter", "format_source", "overlong_lines"]

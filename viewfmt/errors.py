"""Errors raised by viewfmt while loading configuration or reading templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceLocation:
    """Where in a file a problem was found. Every field is optional."""

    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        parts = [self.path or "<unknown>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)

    @property
    def known(self) -> bool:
        return self.path is not None or self.line is not None


class ViewFmtError(Exception):
    """Base class for errors reported to the user with a location and code."""

    code = "VF_ERROR"

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = SourceLocation(path, line, column)
        self.hint = hint

    @property
    def path(self) -> Optional[str]:
        return self.location.path

    @property
    def line(self) -> Optional[int]:
        return self.location.line

    def format(self) -> str:
        """``message (path:line:col; CODE) Hint: ...``, dropping the parts that are unknown."""
        meta = [str(self.location)] if self.location.known else []
        meta.append(self.code)
        text = f"{self.message} ({'; '.join(meta)})"
        if self.hint:
            text = f"{text} Hint: {self.hint}"
        return text


class ConfigError(ViewFmtError):
    """A workspace configuration file is missing, unparsable or has bad values."""

    code = "VF_CONFIG"


class SourceReadError(ViewFmtError):
    """A template file cannot be read or is not UTF-8."""

    code = "VF_READ"


__all__ = [
    "ViewFmtError",
    "ConfigError",
    "SourceReadError",
    "SourceLocation",
]

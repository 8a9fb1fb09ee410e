"""Quote-aware scanning primitives shared by every formatting stage.

All helpers treat ``'...'`` and ``"..."`` as opaque string literals, honor
backslash escapes inside them, and consider an unterminated literal to run
to the end of the input.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

QUOTES = "'\""
OPEN_BRACKETS = "([{"
CLOSE_BRACKETS = ")]}"


def skip_literal(code: str, start: int) -> int:
    """Return the index just past the literal whose opening quote is at ``start``."""
    quote = code[start]
    n = len(code)
    i = start + 1
    while i < n:
        ch = code[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return n


def iter_code(code: str, start: int = 0) -> Iterator[Tuple[int, str]]:
    """Yield ``(index, char)`` for every character outside string literals."""
    n = len(code)
    i = start
    while i < n:
        ch = code[i]
        if ch in QUOTES:
            i = skip_literal(code, i)
            continue
        yield i, ch
        i += 1


def find_outside_literals(code: str, needle: str, start: int = 0) -> int:
    for i, _ in iter_code(code, start):
        if code.startswith(needle, i):
            return i
    return -1


def contains_outside_literals(code: str, needle: str) -> bool:
    return find_outside_literals(code, needle) >= 0


def strip_line_comment(line: str) -> str:
    """``line`` without a trailing ``//`` or ``#`` comment found outside literals.

    ``#[`` starts an attribute, not a comment.
    """
    for i, ch in iter_code(line):
        if line.startswith("//", i) or (ch == "#" and not line.startswith("#[", i)):
            return line[:i].rstrip()
    return line


def is_inside_literal(code: str, pos: int) -> bool:
    """True when ``pos`` falls inside a string literal (quotes included)."""
    n = len(code)
    i = 0
    while i < n and i <= pos:
        if code[i] in QUOTES:
            end = skip_literal(code, i)
            if i <= pos < end:
                return True
            i = end
            continue
        i += 1
    return False


def open_quote(line: str) -> Optional[str]:
    """Return the quote character left open at the end of ``line``, if any."""
    in_str: Optional[str] = None
    n = len(line)
    i = 0
    while i < n:
        ch = line[i]
        if ch == "\\" and in_str is not None:
            i += 2
            continue
        if in_str is not None:
            if ch == in_str:
                in_str = None
        elif ch in QUOTES:
            in_str = ch
        i += 1
    return in_str


def count_unescaped(line: str, quote: str) -> int:
    count = 0
    n = len(line)
    i = 0
    while i < n:
        if line[i] == "\\":
            i += 2
            continue
        if line[i] == quote:
            count += 1
        i += 1
    return count


def count_brackets(code: str) -> Tuple[int, int]:
    """Count opening and closing brackets outside string literals."""
    opens = closes = 0
    for _, ch in iter_code(code):
        if ch in OPEN_BRACKETS:
            opens += 1
        elif ch in CLOSE_BRACKETS:
            closes += 1
    return opens, closes


def count_leading_closers(line: str) -> int:
    count = 0
    for ch in line:
        if ch not in CLOSE_BRACKETS:
            break
        count += 1
    return count


def find_matching_close(code: str, open_pos: int) -> Optional[int]:
    """Index of the bracket closing the one at ``open_pos``, or ``None``."""
    depth = 0
    for i, ch in iter_code(code, open_pos):
        if ch in OPEN_BRACKETS:
            depth += 1
        elif ch in CLOSE_BRACKETS:
            depth -= 1
            if depth == 0:
                return i
    return None


def split_top_level(code: str, sep: str = ",") -> List[str]:
    """Split ``code`` on ``sep`` at bracket depth zero, outside literals.

    Items are trimmed; a trailing empty item (from a trailing separator) is
    dropped.
    """
    items: List[str] = []
    depth = 0
    last = 0
    for i, ch in iter_code(code):
        if ch in OPEN_BRACKETS:
            depth += 1
        elif ch in CLOSE_BRACKETS:
            depth -= 1
        elif ch == sep and depth == 0:
            items.append(code[last:i].strip())
            last = i + 1
    tail = code[last:].strip()
    if tail:
        items.append(tail)
    return items


__all__ = [
    "QUOTES",
    "OPEN_BRACKETS",
    "CLOSE_BRACKETS",
    "skip_literal",
    "iter_code",
    "find_outside_literals",
    "contains_outside_literals",
    "strip_line_comment",
    "is_inside_literal",
    "open_quote",
    "count_unescaped",
    "count_brackets",
    "count_leading_closers",
    "find_matching_close",
    "split_top_level",
]

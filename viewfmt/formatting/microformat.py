"""Expression microformatter: token spacing for a single line of PHP.

Only a handful of normalizations are applied, always outside string
literals:

* a comma is followed by exactly one space,
* ``=>`` gets exactly one space on each side,
* a control keyword directly followed by ``(`` gets a separating space,
* spaces just inside ``(``/``[`` and ``)``/``]`` are removed.

Everything else passes through untouched, and the transform is idempotent.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .scanning import (
    CLOSE_BRACKETS,
    OPEN_BRACKETS,
    QUOTES,
    find_matching_close,
    find_outside_literals,
    is_inside_literal,
    iter_code,
    skip_literal,
    split_top_level,
)

CONTROL_KEYWORDS = frozenset({
    "if", "elseif", "else", "foreach", "for", "while", "switch", "catch", "match",
})

# A keyword preceded by one of these is a variable, member or namespaced name.
_MEMBER_PREFIXES = ("$", "->", "::", "\\")

_HSPACE = " \t"


def _rstrip_spaces(out: List[str]) -> None:
    while out and out[-1] in _HSPACE:
        out.pop()


def _skip_spaces(code: str, i: int) -> int:
    while i < len(code) and code[i] in _HSPACE:
        i += 1
    return i


def _is_control_call(code: str, start: int, end: int) -> bool:
    if code[start:end] not in CONTROL_KEYWORDS:
        return False
    if end >= len(code) or code[end] != "(":
        return False
    before = code[:start]
    if before.endswith(_MEMBER_PREFIXES):
        return False
    return not before.rstrip().endswith("function")


def format_php_code(code: str) -> str:
    """Normalize spacing in one line of PHP code."""
    out: List[str] = []
    n = len(code)
    i = 0

    while i < n:
        ch = code[i]

        if ch in QUOTES:
            end = skip_literal(code, i)
            out.append(code[i:end])
            i = end
            continue

        if ch == "=" and code.startswith("=>", i) and code[i - 1:i] != "<":
            _rstrip_spaces(out)
            if out:
                out.append(" ")
            out.append("=>")
            i = _skip_spaces(code, i + 2)
            if i < n and code[i] != "\n":
                out.append(" ")
            continue

        if ch == ",":
            out.append(",")
            i = _skip_spaces(code, i + 1)
            if i < n and code[i] != "\n":
                out.append(" ")
            continue

        if ch.isalpha() or ch == "_":
            start = i
            while i < n and (code[i].isalnum() or code[i] == "_"):
                i += 1
            out.append(code[start:i])
            if _is_control_call(code, start, i):
                out.append(" ")
            continue

        if ch in ")]":
            _rstrip_spaces(out)
            out.append(ch)
            i += 1
            continue

        if ch in "([":
            out.append(ch)
            i += 1
            while i < n and code[i] == " ":
                i += 1
            continue

        out.append(ch)
        i += 1

    return "".join(out)


def join_php_lines(code: str) -> str:
    """Join a multi-line expression into one line, gluing ``->`` continuations.

    A comma that ends a line right before a closing ``]`` or ``)`` line is a
    layout trailing comma and is dropped.
    """
    joined = ""
    for line in (raw.strip() for raw in code.splitlines()):
        if not line:
            continue
        if (
            line.startswith(("]", ")"))
            and joined.endswith(",")
            and not is_inside_literal(joined, len(joined) - 1)
        ):
            joined = joined[:-1]
        joined = f"{joined} {line}" if joined else line
    return joined.replace(" ->", "->")


def split_by_chain(code: str) -> List[str]:
    """Split ``code`` before every top-level ``->`` (or ``?->``) operator."""
    parts: List[str] = []
    depth = 0
    last = 0
    for i, ch in iter_code(code):
        if ch in OPEN_BRACKETS:
            depth += 1
        elif ch in CLOSE_BRACKETS:
            depth -= 1
        elif depth == 0 and ch == "-" and code.startswith("->", i):
            cut = i - 1 if i > 0 and code[i - 1] == "?" else i
            parts.append(code[last:cut].rstrip())
            last = cut
    tail = code[last:].rstrip()
    if tail:
        parts.append(tail)
    return parts


def _is_concat_operator(code: str, i: int) -> bool:
    prev = code[i - 1] if i > 0 else ""
    following = code[i + 1] if i + 1 < len(code) else ""
    if prev == "." or following in (".", "="):
        return False
    if following.isdigit():
        if prev.isdigit():
            return False
        if not (prev.isalnum() or prev in "_)]'\" "):
            return False
    return True


def split_by_concat(code: str) -> List[str]:
    """Split ``code`` on top-level ``.`` string concatenation operators."""
    parts: List[str] = []
    depth = 0
    last = 0
    for i, ch in iter_code(code):
        if ch in OPEN_BRACKETS:
            depth += 1
        elif ch in CLOSE_BRACKETS:
            depth -= 1
        elif ch == "." and depth == 0 and _is_concat_operator(code, i):
            parts.append(code[last:i].strip())
            last = i + 1
    parts.append(code[last:].strip())
    return [part for part in parts if part]


def split_by_args(code: str) -> Optional[Tuple[str, List[str], str]]:
    """Split the first balanced call group into ``(prefix, args, suffix)``.

    ``prefix`` ends with the opening ``(`` and ``suffix`` starts with the
    closing ``)``. Returns ``None`` unless the group holds at least two
    top-level arguments.
    """
    open_pos = find_outside_literals(code, "(")
    if open_pos < 0:
        return None
    close_pos = find_matching_close(code, open_pos)
    if close_pos is None:
        return None
    args = split_top_level(code[open_pos + 1:close_pos])
    if len(args) <= 1:
        return None
    return code[:open_pos + 1], args, code[close_pos:]


__all__ = [
    "CONTROL_KEYWORDS",
    "format_php_code",
    "join_php_lines",
    "split_by_chain",
    "split_by_concat",
    "split_by_args",
]

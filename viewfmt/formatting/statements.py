"""Statement normalizer: one logical statement per physical line."""

from __future__ import annotations

from .scanning import QUOTES, iter_code, skip_literal

_LABEL_KEYWORDS = ("case ", "default:")


def _keyword_at(code: str, pos: int, keyword: str) -> bool:
    if not code.startswith(keyword, pos):
        return False
    if pos == 0:
        return True
    prev = code[pos - 1]
    return not (prev.isalnum() or prev in "$_>:")


def _at_line_start(text: str) -> bool:
    return text.rstrip(" \t").endswith("\n")


def _docblock_boundaries(code: str, i: int, ch: str, result: str) -> str:
    """Re-flow ``/**``, ``*/`` and fused ``* @tag`` markers after ``ch`` was appended."""
    following = code[i + 1:i + 3]

    if ch == "/" and following == "**" and not _at_line_start(result[:-1]):
        result = result[:-1] + "\n/"

    if ch == "/" and result.endswith("*/"):
        line = result[result.rfind("\n") + 1:]
        more_code = i + 1 < len(code) and code[i + 1] != "\n"
        if line.lstrip().startswith("/**"):
            # Single-line docblock: keep it whole on its own line.
            if more_code:
                result += "\n"
            return result
        result = result[:-2]
        if not result.endswith("\n"):
            result = result.rstrip() + "\n"
        result += "*/\n"
        if more_code:
            result += "\n"
        return result

    if ch == "*" and following == " @" and not result[:-1].endswith("\n") and not result.endswith("/**"):
        result = result[:-1] + "\n*"

    return result


def normalize_statements(code: str) -> str:
    """Put every top-level statement and ``case``/``default:`` label on its own line.

    A newline is inserted after each ``;`` outside parentheses and before each
    ``case``/``default:`` label that is not already at line start. String
    literals are copied verbatim. Docblock markers are re-flowed so that the
    block reindenter sees ``/**`` and ``*/`` on their own lines.

    The result always starts with a newline; callers iterate its lines and
    skip blanks.
    """
    result = "\n"
    n = len(code)
    depth = 0
    i = 0

    while i < n:
        ch = code[i]
        if ch in QUOTES:
            end = skip_literal(code, i)
            result += code[i:end]
            i = end
            continue

        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1

        if (
            depth <= 0
            and not result.endswith("\n")
            and result.strip()
            and any(_keyword_at(code, i, kw) for kw in _LABEL_KEYWORDS)
        ):
            result += "\n"

        result += ch
        if ch == ";" and depth <= 0 and i + 1 < n and code[i + 1] != "\n":
            result += "\n"

        result = _docblock_boundaries(code, i, ch, result)
        i += 1

    return result


def count_top_level_semicolons(code: str) -> int:
    """Count ``;`` outside string literals and parentheses."""
    count = 0
    depth = 0
    for _, ch in iter_code(code):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == ";" and depth <= 0:
            count += 1
    return count


__all__ = ["normalize_statements", "count_top_level_semicolons"]

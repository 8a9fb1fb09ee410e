"""Long-line splitter.

A line that does not fit :data:`MAX_LINE_LENGTH` columns at its padding is
decomposed by the first strategy in :data:`SPLIT_STRATEGIES` that applies.
Every strategy is a pure ``(line, pad) -> str | None`` function returning
fully padded, newline-terminated text. Exploded items always carry a trailing
comma, and each nesting level adds exactly one :data:`INDENT` to the padding
it was given. Recursion always works on a strict substring, so splitting
terminates.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .microformat import split_by_args
from .scanning import (
    CLOSE_BRACKETS,
    OPEN_BRACKETS,
    find_matching_close,
    find_outside_literals,
    iter_code,
    skip_literal,
    split_top_level,
)

logger = logging.getLogger(__name__)

INDENT = "    "
MAX_LINE_LENGTH = 120

SplitStrategy = Callable[[str, str], Optional[str]]


def fits(pad: str, text: str, extra: int = 0) -> bool:
    return len(pad) + len(text) + extra <= MAX_LINE_LENGTH


def bracketed_inner(text: str) -> Optional[str]:
    """Inner text of ``text`` when it is exactly one ``[...]`` literal."""
    if not text.startswith("[") or not text.endswith("]"):
        return None
    if find_matching_close(text, 0) != len(text) - 1:
        return None
    return text[1:-1]


# -- ternary ---------------------------------------------------------------


def find_ternary_positions(code: str) -> Optional[Tuple[int, int]]:
    """Locate the top-level ``?`` and its matching ``:``.

    ``?>``, ``??``, ``?:``, ``?->`` and ``::`` are never taken as ternary
    markers, and anything nested in brackets is ignored.
    """
    depth = 0
    question: Optional[int] = None
    skip_to = 0
    for i, ch in iter_code(code):
        if i < skip_to:
            continue
        if ch in OPEN_BRACKETS:
            depth += 1
        elif ch in CLOSE_BRACKETS:
            depth -= 1
        elif depth != 0:
            continue
        elif ch == "?":
            following = code[i + 1:i + 2]
            if following in (">", "?", ":") or code.startswith("->", i + 1):
                skip_to = i + 2
                continue
            if question is None:
                question = i
        elif ch == ":" and question is not None:
            if code[i + 1:i + 2] == ":":
                skip_to = i + 2
                continue
            return question, i
    return None


def append_ternary_value(marker: str, value: str, line_pad: str) -> str:
    """Render one ``? value`` / ``: value`` branch, splitting it when too long."""
    if fits(line_pad, value, 2):
        return f"{line_pad}{marker} {value}\n"

    split = try_split_long_line(value, line_pad)
    if split is None:
        return f"{line_pad}{marker} {value}\n"

    lines = split.split("\n")
    first = lines[0]
    if first.startswith(line_pad):
        first = first[len(line_pad):]
    out = [f"{line_pad}{marker} {first.lstrip()}\n"]
    out.extend(f"{line}\n" for line in lines[1:] if line.strip())
    return "".join(out)


def split_ternary(line: str, pad: str) -> Optional[str]:
    positions = find_ternary_positions(line)
    if positions is None:
        return None
    q_pos, c_pos = positions
    condition = line[:q_pos].rstrip()
    true_val = line[q_pos + 1:c_pos].strip()
    false_val = line[c_pos + 1:].strip()
    inner_pad = pad + INDENT
    return (
        f"{pad}{condition}\n"
        + append_ternary_value("?", true_val, inner_pad)
        + append_ternary_value(":", false_val, inner_pad)
    )


# -- item emission ---------------------------------------------------------


def emit_item(
    item: str,
    pad: str,
    strategies: Sequence[SplitStrategy],
    explode_sub_arrays: bool = False,
) -> str:
    """Emit one comma-terminated list item, expanding it when over width."""
    if not fits(pad, item, 1):
        for strategy in strategies:
            expanded = strategy(item, pad)
            if expanded is not None:
                return expanded
        split = try_split_long_line(item, pad)
        if split is not None:
            return split.rstrip("\n") + ",\n"
    if explode_sub_arrays:
        expanded = expand_bare_sub_array(item, pad)
        if expanded is not None:
            return expanded
    return f"{pad}{item},\n"


def build_split(prefix: str, args: Sequence[str], suffix: str, pad: str) -> str:
    """Lay out ``prefix`` + one argument per line + ``suffix``."""
    inner_pad = pad + INDENT
    out = [f"{pad}{prefix}\n"]
    out.extend(emit_item(arg, inner_pad, ARGUMENT_STRATEGIES) for arg in args)
    out.append(f"{pad}{suffix}\n")
    return "".join(out)


# -- arrays ----------------------------------------------------------------


def expand_bare_array(arg: str, pad: str) -> Optional[str]:
    """Explode an argument that is a whole ``[...]`` literal."""
    inner = bracketed_inner(arg.strip())
    if inner is None:
        return None
    items = split_top_level(inner)
    if not items:
        return None
    nested_pad = pad + INDENT

    if len(items) == 1:
        if fits(nested_pad, items[0], 1):
            return None
        return f"{pad}[\n" + emit_item(items[0], nested_pad, ()) + f"{pad}],\n"

    out = [f"{pad}[\n"]
    out.extend(
        emit_item(item, nested_pad, (expand_nested_array,), explode_sub_arrays=True)
        for item in items
    )
    out.append(f"{pad}],\n")
    return "".join(out)


def expand_bare_sub_array(item: str, pad: str) -> Optional[str]:
    """Explode an array item that is itself a ``[...]`` list of two or more entries."""
    inner = bracketed_inner(item)
    if inner is None:
        return None
    sub_items = split_top_level(inner)
    if len(sub_items) <= 1:
        return None
    deeper_pad = pad + INDENT
    out = [f"{pad}[\n"]
    out.extend(emit_item(sub, deeper_pad, SUB_ARRAY_STRATEGIES) for sub in sub_items)
    out.append(f"{pad}],\n")
    return "".join(out)


def find_array_arrow(arg: str) -> int:
    """Index of the first ``=>`` in ``arg`` outside string literals, or -1."""
    start = 0
    if arg[:1] in ("'", '"'):
        start = skip_literal(arg, 0)
    return find_outside_literals(arg, "=>", start)


def expand_nested_array(arg: str, pad: str) -> Optional[str]:
    """Explode ``key => [...]`` so the array items sit under the key."""
    arrow = find_array_arrow(arg)
    if arrow < 0:
        return None
    inner = bracketed_inner(arg[arrow + 2:].strip())
    if inner is None:
        return None
    items = split_top_level(inner)
    if len(items) <= 1:
        return None
    key = arg[:arrow + 2]
    nested_pad = pad + INDENT
    out = [f"{pad}{key} [\n"]
    out.extend(
        emit_item(item, nested_pad, ARRAY_ITEM_STRATEGIES, explode_sub_arrays=True)
        for item in items
    )
    out.append(f"{pad}],\n")
    return "".join(out)


# -- closures --------------------------------------------------------------


def find_closure_body(code: str) -> Optional[Tuple[int, int]]:
    """Positions of the braces around the first ``function (...) { ... }`` body."""
    for i, _ in iter_code(code):
        if not code.startswith("function", i):
            continue
        if i > 0 and (code[i - 1].isalnum() or code[i - 1] in "_$"):
            continue
        open_pos = find_outside_literals(code, "{", i + len("function"))
        if open_pos < 0:
            return None
        close_pos = find_matching_close(code, open_pos)
        if close_pos is not None:
            return open_pos, close_pos
    return None


def normalize_closure_body(body: str) -> List[str]:
    """Split a closure body into statements.

    A statement ends at a top-level ``;`` or at the ``}`` closing a braced
    block such as ``if (...) { ... }``.
    """
    statements: List[str] = []
    start = 0
    braces = 0
    parens = 0

    def push(chunk: str) -> None:
        chunk = chunk.strip()
        if chunk:
            statements.append(chunk)

    for i, ch in iter_code(body):
        if ch == "(":
            parens += 1
        elif ch == ")":
            parens -= 1
        elif ch == "{":
            braces += 1
        elif ch == "}" and braces > 0:
            braces -= 1
            if braces == 0:
                push(body[start:i + 1])
                start = i + 1
        elif ch == ";" and braces == 0 and parens <= 0:
            push(body[start:i + 1])
            start = i + 1
    push(body[start:])
    return statements


def find_brace_block(code: str) -> Optional[Tuple[int, int]]:
    for i, ch in iter_code(code):
        if ch == "{":
            close_pos = find_matching_close(code, i)
            if close_pos is not None:
                return i, close_pos
    return None


def _emit_statement(stmt: str, pad: str) -> str:
    if not fits(pad, stmt):
        split = try_split_long_line(stmt, pad)
        if split is not None:
            return split
    return f"{pad}{stmt}\n"


def expand_brace_block(stmt: str, pad: str) -> Optional[str]:
    """Expand ``header { body } after`` into a multi-line block."""
    block = find_brace_block(stmt)
    if block is None:
        return None
    open_pos, close_pos = block
    body = stmt[open_pos + 1:close_pos].strip()
    if not body:
        return None
    body_stmts = normalize_closure_body(body)
    if not body_stmts:
        return None
    header = stmt[:open_pos].rstrip()
    after = stmt[close_pos + 1:].strip()
    inner_pad = pad + INDENT
    out = [f"{pad}{header} {{\n"]
    out.extend(_emit_statement(s, inner_pad) for s in body_stmts)
    out.append(f"{pad}}} {after}\n" if after else f"{pad}}}\n")
    return "".join(out)


def expand_inline_closure(arg: str, pad: str) -> Optional[str]:
    """Expand a ``function (...) { a; b; }`` argument holding several statements."""
    body = find_closure_body(arg)
    if body is None:
        return None
    open_brace, close_brace = body
    stmts = normalize_closure_body(arg[open_brace + 1:close_brace])
    if len(stmts) <= 1:
        return None
    header = arg[:open_brace].rstrip()
    after = arg[close_brace + 1:].lstrip()
    body_pad = pad + INDENT
    out = [f"{pad}{header} {{\n"]
    for stmt in stmts:
        expanded = expand_brace_block(stmt, body_pad)
        out.append(expanded if expanded is not None else _emit_statement(stmt, body_pad))
    out.append(f"{pad}}}{after}\n" if after else f"{pad}}},\n")
    return "".join(out)


# -- whole-line strategies -------------------------------------------------


def split_call_arguments(line: str, pad: str) -> Optional[str]:
    parts = split_by_args(line)
    if parts is None:
        return None
    prefix, args, suffix = parts
    return build_split(prefix, args, suffix, pad)


def split_bare_array_argument(line: str, pad: str) -> Optional[str]:
    """Hoist the brackets of a call whose only argument is an array literal."""
    open_pos = find_outside_literals(line, "(")
    if open_pos < 0:
        return None
    close_pos = find_matching_close(line, open_pos)
    if close_pos is None:
        return None
    inner = bracketed_inner(line[open_pos + 1:close_pos].strip())
    if inner is None:
        return None
    items = split_top_level(inner)
    if len(items) <= 1:
        return None
    prefix = line[:open_pos + 1] + "["
    suffix = "]" + line[close_pos:]
    return build_split(prefix, items, suffix, pad)


SPLIT_STRATEGIES: Tuple[SplitStrategy, ...] = (
    split_ternary,
    split_call_arguments,
    split_bare_array_argument,
    expand_nested_array,
)

ARGUMENT_STRATEGIES: Tuple[SplitStrategy, ...] = (
    expand_nested_array,
    expand_bare_array,
    expand_inline_closure,
)

ARRAY_ITEM_STRATEGIES: Tuple[SplitStrategy, ...] = (
    expand_nested_array,
    expand_bare_sub_array,
    expand_inline_closure,
)

SUB_ARRAY_STRATEGIES: Tuple[SplitStrategy, ...] = (
    expand_nested_array,
    expand_inline_closure,
)


def try_split_long_line(line: str, pad: str) -> Optional[str]:
    """Split ``line`` at padding ``pad``, or return ``None``.

    ``None`` means either that the line already fits or that no strategy
    applies, in which case the caller keeps the overrun.
    """
    if fits(pad, line):
        return None
    for strategy in SPLIT_STRATEGIES:
        result = strategy(line, pad)
        if result is not None:
            logger.debug("Split %d-column line with %s", len(pad) + len(line), strategy.__name__)
            return result
    return None


__all__ = [
    "INDENT",
    "MAX_LINE_LENGTH",
    "SPLIT_STRATEGIES",
    "fits",
    "bracketed_inner",
    "emit_item",
    "find_ternary_positions",
    "append_ternary_value",
    "split_ternary",
    "split_call_arguments",
    "split_bare_array_argument",
    "build_split",
    "expand_bare_array",
    "expand_bare_sub_array",
    "find_array_arrow",
    "expand_nested_array",
    "find_closure_body",
    "normalize_closure_body",
    "find_brace_block",
    "expand_brace_block",
    "expand_inline_closure",
    "try_split_long_line",
]

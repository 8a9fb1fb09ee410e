"""Formatting for short-echo tags (``<?= expr ?>``)."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from .microformat import format_php_code, join_php_lines, split_by_args, split_by_chain, split_by_concat
from .scanning import split_top_level
from .split import (
    INDENT,
    MAX_LINE_LENGTH,
    bracketed_inner,
    emit_item,
    expand_bare_array,
    expand_bare_sub_array,
    expand_nested_array,
    find_ternary_positions,
    try_split_long_line,
)

logger = logging.getLogger(__name__)

EchoStrategy = Callable[[str, str], Optional[str]]


def widest_line(text: str) -> int:
    return max((len(line) for line in text.splitlines()), default=0)


def all_lines_fit(text: str) -> bool:
    return widest_line(text) <= MAX_LINE_LENGTH


def echo_chain(code: str, pad: str) -> Optional[str]:
    """One ``->`` segment per line; the first two stay on the opening line."""
    parts = split_by_chain(code)
    if len(parts) <= 2:
        return None
    chain_pad = pad + INDENT
    out = [f"{pad}<?= {parts[0]}{parts[1]}"]
    for part in parts[2:]:
        split = None if len(chain_pad) + len(part) <= MAX_LINE_LENGTH else try_split_long_line(part, chain_pad)
        if split is not None:
            part = split.strip()
        out.append(f"\n{chain_pad}{part}")
    out.append(" ?>\n")
    return "".join(out)


def echo_ternary(code: str, pad: str) -> Optional[str]:
    positions = find_ternary_positions(code)
    if positions is None:
        return None
    q_pos, c_pos = positions
    condition = code[:q_pos].rstrip()
    true_val = code[q_pos + 1:c_pos].strip()
    false_val = code[c_pos + 1:].strip()
    inner_pad = pad + INDENT
    return f"{pad}<?= {condition}\n{inner_pad}? {true_val}\n{inner_pad}: {false_val} ?>\n"


def echo_concat(code: str, pad: str) -> Optional[str]:
    parts = split_by_concat(code)
    if len(parts) <= 1:
        return None
    concat_pad = pad + INDENT
    lines = [f"{pad}<?= {parts[0]}"]
    lines.extend(f"{concat_pad}. {part}" for part in parts[1:])
    return "\n".join(lines) + " ?>\n"


def echo_array_tail(code: str, pad: str) -> Optional[str]:
    """Keep leading arguments inline and explode a trailing array argument.

    Produces the ``prefix(a, b, [`` ... ``]) ?>`` shape.
    """
    parts = split_by_args(code)
    if parts is None:
        return None
    prefix, args, suffix = parts
    inner = bracketed_inner(args[-1])
    if inner is None:
        return None
    head = f"{pad}<?= {prefix}{', '.join(args[:-1])}, ["
    if len(head) > MAX_LINE_LENGTH:
        return None
    items = split_top_level(inner)
    if len(items) <= 1:
        return None
    inner_pad = pad + INDENT
    out = [head + "\n"]
    out.extend(emit_item(item, inner_pad, (expand_nested_array, expand_bare_sub_array)) for item in items)
    out.append(f"{pad}]{suffix} ?>\n")
    return "".join(out)


def echo_arguments(code: str, pad: str) -> Optional[str]:
    parts = split_by_args(code)
    if parts is None:
        return None
    prefix, args, suffix = parts
    inner_pad = pad + INDENT
    out = [f"{pad}<?= {prefix}\n"]
    out.extend(emit_item(arg, inner_pad, (expand_nested_array, expand_bare_array)) for arg in args)
    out.append(f"{pad}{suffix} ?>\n")
    return "".join(out)


def echo_generic(code: str, pad: str) -> Optional[str]:
    split = try_split_long_line(code, pad)
    if split is None:
        return None
    return f"{pad}<?= {split.strip()} ?>\n"


ECHO_STRATEGIES: Tuple[EchoStrategy, ...] = (
    echo_chain,
    echo_ternary,
    echo_concat,
    echo_array_tail,
    echo_arguments,
    echo_generic,
)


def format_echo(code: str, pad: str) -> str:
    """Render ``<?= code ?>`` at ``pad``, splitting it when it overruns the width.

    The first strategy whose output fits entirely within the width wins.
    When none fits, the split with the narrowest widest line is used, as long
    as it is narrower than the single line; otherwise the tag stays on one
    line.
    """
    formatted = format_php_code(join_php_lines(code))
    single = f"{pad}<?= {formatted} ?>"
    if len(single) <= MAX_LINE_LENGTH:
        return single + "\n"

    best: Optional[str] = None
    for strategy in ECHO_STRATEGIES:
        result = strategy(formatted, pad)
        if result is None:
            continue
        if all_lines_fit(result):
            logger.debug("Split echo tag with %s", strategy.__name__)
            return result
        if best is None or widest_line(result) < widest_line(best):
            best = result
    if best is not None and widest_line(best) < len(single):
        logger.debug("No echo split fits; keeping the narrowest one")
        return best
    return single + "\n"


__all__ = [
    "ECHO_STRATEGIES",
    "format_echo",
    "echo_chain",
    "echo_ternary",
    "echo_concat",
    "echo_array_tail",
    "echo_arguments",
    "echo_generic",
]

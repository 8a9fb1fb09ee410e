"""Heuristic control-flow classification of PHP statements.

PHP fragments inside templates are never parsed. Whether a statement opens
or closes a nesting level is decided from keyword prefixes and suffixes:
``if (...):`` opens, ``endif;`` closes, ``else:`` does both, and widget
``::begin(``/``::end(`` calls behave like a pair of braces around markup.
"""

from __future__ import annotations

from enum import Enum

from .scanning import contains_outside_literals

_CLOSER_PREFIXES = (
    "endif",
    "endforeach",
    "endfor",
    "endwhile",
    "endswitch",
    "else",
    "elseif",
    "}",
    "case ",
    "default:",
)

_CASE_PREFIXES = ("case ", "default:")


class ControlFlow(Enum):
    """How a single statement affects template nesting."""

    SWITCH = "switch"
    CASE_LABEL = "case_label"
    END_SWITCH = "end_switch"
    BREAK = "break"
    REOPENER = "reopener"
    CLOSER = "closer"
    OPENER = "opener"
    NEUTRAL = "neutral"

    @property
    def closes(self) -> bool:
        return self in (ControlFlow.CLOSER, ControlFlow.REOPENER)

    @property
    def opens(self) -> bool:
        return self in (ControlFlow.OPENER, ControlFlow.REOPENER, ControlFlow.SWITCH)


def is_block_opener(code: str) -> bool:
    trimmed = code.strip()
    return trimmed.endswith((":", "{")) or "::begin(" in trimmed


def is_block_closer(code: str) -> bool:
    lower = code.strip().lower()
    return (
        lower.startswith(_CLOSER_PREFIXES)
        or contains_outside_literals(lower, "break;")
        or "::end(" in lower
    )


def is_case_label(code: str) -> bool:
    return code.strip().lower().startswith(_CASE_PREFIXES)


def contains_break(code: str) -> bool:
    return contains_outside_literals(code.strip().lower(), "break;")


def has_switch_case(code: str) -> bool:
    """True when ``code`` mixes switch/break with case/default labels."""
    lower = code.lower()
    has_switch = "switch" in lower or contains_outside_literals(lower, "break")
    return has_switch and ("case " in lower or "default:" in lower)


def is_header_block(code: str) -> bool:
    """True when any line of ``code`` is a ``use`` import or a ``declare(``."""
    for line in code.splitlines():
        stripped = line.strip()
        if stripped.startswith(("use ", "declare(")):
            return True
    return False


def is_echo_block_opener(code: str) -> bool:
    lower = code.strip().lower()
    return "begintag(" in lower or "::begin(" in lower


def is_echo_block_closer(code: str) -> bool:
    lower = code.strip().lower()
    return "endtag(" in lower or "::end(" in lower


def is_single_echo_block(code: str) -> bool:
    trimmed = code.strip()
    return trimmed.startswith("echo ") and "\n" not in trimmed and trimmed.count(";") <= 1


def classify(code: str, in_switch: bool = True) -> ControlFlow:
    """Classify one statement.

    Switch-specific kinds (case labels, ``endswitch`` and ``break``) are only
    reported when ``in_switch`` is true; outside a switch those statements
    fall back to the generic closer rules.
    """
    lower = code.strip().lower()
    opener = is_block_opener(code)
    closer = is_block_closer(code)

    if lower.startswith("switch") and opener and not closer:
        return ControlFlow.SWITCH
    if in_switch:
        if is_case_label(code):
            return ControlFlow.CASE_LABEL
        if lower.startswith("endswitch"):
            return ControlFlow.END_SWITCH
        if contains_break(code):
            return ControlFlow.BREAK
    if closer:
        return ControlFlow.REOPENER if opener else ControlFlow.CLOSER
    if opener:
        return ControlFlow.OPENER
    return ControlFlow.NEUTRAL


__all__ = [
    "ControlFlow",
    "classify",
    "is_block_opener",
    "is_block_closer",
    "is_case_label",
    "contains_break",
    "has_switch_case",
    "is_header_block",
    "is_echo_block_opener",
    "is_echo_block_closer",
    "is_single_echo_block",
]

"""Docblock helpers: body extraction, ``@var`` normalization and merging."""

from __future__ import annotations

from typing import List, Optional, Sequence


def normalize_var_body(body: str) -> str:
    """Rewrite ``@var $name Type [rest]`` as ``@var Type $name [rest]``."""
    if not body.startswith("@var "):
        return body
    parts = body[5:].split(maxsplit=2)
    if len(parts) >= 2 and parts[0].startswith("$") and not parts[1].startswith("$"):
        parts[0], parts[1] = parts[1], parts[0]
        return "@var " + " ".join(parts)
    return body


def _single_line_body(code: str) -> Optional[str]:
    trimmed = code.strip()
    if "\n" in trimmed or not (trimmed.startswith("/**") and trimmed.endswith("*/")):
        return None
    body = trimmed[3:-2].strip()
    if body.startswith("*"):
        body = body[1:].lstrip()
    return body


def expand_single_line_docblock(code: str) -> Optional[str]:
    """Expand ``/** body */`` into the three-line docblock form."""
    body = _single_line_body(code)
    if body is None:
        return None
    if not body:
        return "/**\n */"
    return f"/**\n * {body}\n */"


def extract_docblock_body(code: str) -> Optional[str]:
    """Body of a single-line docblock, ``@var``-normalized; ``None`` if empty or not one."""
    body = _single_line_body(code)
    if not body:
        return None
    return normalize_var_body(body)


def merge_docblock_bodies(bodies: Sequence[str]) -> str:
    lines = ["/**"]
    lines.extend(f" * {body}" if body else " *" for body in bodies)
    lines.append(" */")
    return "\n".join(lines)


def merge_descriptions_and_vars(descriptions: Sequence[str], annotations: Sequence[str]) -> List[str]:
    """Description lines, a blank separator when both groups exist, then annotations."""
    bodies = list(descriptions)
    if descriptions and annotations:
        bodies.append("")
    bodies.extend(annotations)
    return bodies


def is_docblock_only(code: str) -> bool:
    """True when ``code`` consists of nothing but one docblock comment."""
    trimmed = code.strip()
    if not trimmed:
        return False
    if "\n" not in trimmed and trimmed.startswith("/**") and trimmed.endswith("*/"):
        return True

    lines = [line.strip() for line in trimmed.splitlines() if line.strip()]
    if len(lines) < 2 or lines[0] != "/**" or lines[-1] != "*/":
        return False
    return all(line.startswith("*") for line in lines[1:-1])


def render_docblock_island(code: str, pad: str) -> str:
    """Wrap a docblock in its own ``<?php ... ?>`` island at ``pad``."""
    docblock = expand_single_line_docblock(code) or code.strip()
    out = [f"{pad}<?php\n"]
    for line in docblock.splitlines():
        stripped = line.strip()
        if stripped.startswith("*"):
            out.append(f"{pad} {stripped}\n")
        else:
            out.append(f"{pad}{stripped}\n")
    out.append(f"{pad}?>\n")
    return "".join(out)


__all__ = [
    "normalize_var_body",
    "expand_single_line_docblock",
    "extract_docblock_body",
    "merge_docblock_bodies",
    "merge_descriptions_and_vars",
    "is_docblock_only",
    "render_docblock_island",
]

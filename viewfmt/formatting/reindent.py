"""Block reindenter for multi-statement PHP code.

:func:`reindent_php_block` turns raw or single-line PHP into fully indented
text. Nesting comes from bracket counting; each line carries at most one
level of extra depth into the next, and leading closers dedent the line
they start. Heredocs and multi-line string literals are copied verbatim.

Docblocks made only of ``@var`` annotations (and, in header blocks, any
docblock) are buffered and merged into a single docblock, which is written
when the next ordinary statement arrives or the block ends. ``use`` and
``declare(`` lines met while a docblock is buffered are held back and
written first, followed by a blank line, so imports always precede the
merged docblock.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set, Tuple

from .classify import has_switch_case, is_block_opener, is_header_block
from .docblock import (
    extract_docblock_body,
    merge_descriptions_and_vars,
    merge_docblock_bodies,
    normalize_var_body,
)
from .microformat import format_php_code
from .scanning import count_brackets, count_leading_closers, count_unescaped, open_quote, strip_line_comment
from .split import INDENT, try_split_long_line
from .statements import normalize_statements

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("*", "/*", "//", "#")

_HEADER_OPENERS = (
    "if ", "if(", "foreach ", "foreach(", "for ", "for(",
    "while ", "while(", "switch ", "switch(",
)


def is_comment_line(line: str) -> bool:
    return line.startswith(COMMENT_PREFIXES)


def emit_reindented_line(line: str, pad: str, depth: int) -> Tuple[str, int]:
    """Render one trimmed line at ``depth`` and return ``(text, next_depth)``."""
    leading = count_leading_closers(line)
    extra = 1 if line.startswith(("? ", ": ")) else 0
    write_depth = max(depth - leading + extra, 0)
    base_pad = pad + INDENT * write_depth

    split = None if is_comment_line(line) else try_split_long_line(line, base_pad)
    if split is not None:
        text = split
    elif line.startswith("*"):
        text = f"{base_pad} {line}\n"
    else:
        text = f"{base_pad}{line}\n"

    opens, closes = count_brackets(strip_line_comment(line))
    return text, max(depth + min(opens - closes, 1), 0)


def passthrough_flags(lines: Sequence[str]) -> List[bool]:
    """Flag the lines that continue a heredoc or a multi-line string literal."""
    flags: List[bool] = []
    marker: Optional[str] = None
    quote: Optional[str] = None
    for line in lines:
        if marker is not None:
            flags.append(True)
            if is_heredoc_close(line, marker):
                marker = None
            continue
        if quote is not None:
            flags.append(True)
            if count_unescaped(line, quote) % 2 == 1:
                quote = None
            continue
        flags.append(False)
        trimmed = line.strip()
        if trimmed and not is_comment_line(trimmed):
            code = strip_line_comment(trimmed)
            marker = detect_heredoc(code)
            if marker is None:
                quote = open_quote(code)
    return flags


def strip_passthrough(code: str) -> str:
    """``code`` without its heredoc and multi-line string bodies."""
    lines = code.splitlines()
    return "\n".join(line for line, verbatim in zip(lines, passthrough_flags(lines)) if not verbatim)


def join_ternary_lines(code: str) -> str:
    """Fold ternary continuation lines (``? ...``/``: ...``) onto their condition.

    Heredoc and multi-line string bodies are never joined.
    """
    lines = code.splitlines()
    verbatim = passthrough_flags(lines)
    result: List[str] = []
    i = 0
    while i < len(lines):
        trimmed = lines[i].strip()
        dangling = trimmed.endswith("?") and not trimmed.endswith("?>")
        continued = (
            i + 1 < len(lines)
            and not verbatim[i + 1]
            and lines[i + 1].strip().startswith(("? ", ": "))
        )
        if verbatim[i] or is_comment_line(trimmed) or not (dangling or continued):
            result.append(lines[i])
            i += 1
            continue

        joined = trimmed
        i += 1
        while i < len(lines):
            following = lines[i].strip()
            if not following or verbatim[i]:
                break
            joined = f"{joined} {following}"
            i += 1
            if ";" in following:
                break
        result.append(joined)
    return "\n".join(result)


def detect_heredoc(line: str) -> Optional[str]:
    """Marker of a heredoc/nowdoc opened on ``line``, if any."""
    pos = line.find("<<<")
    if pos < 0:
        return None
    marker = line[pos + 3:].strip().strip("'\"").rstrip(",")
    if marker and all(ch.isalnum() or ch == "_" for ch in marker):
        return marker
    return None


def is_heredoc_close(line: str, marker: str) -> bool:
    return line.strip().rstrip(";,)]") == marker


def _is_use(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("use ") and stripped.endswith(";")


def sort_use_runs(lines: Sequence[Tuple[str, bool]]) -> List[Tuple[str, bool]]:
    """Sort each run of ``use ...;`` lines case-insensitively and drop duplicates.

    ``lines`` holds ``(text, verbatim)`` pairs; verbatim lines are never
    moved and end a run.
    """
    result: List[Tuple[str, bool]] = []
    i = 0
    while i < len(lines):
        text, verbatim = lines[i]
        if verbatim or not _is_use(text):
            result.append(lines[i])
            i += 1
            continue
        group: List[str] = []
        while i < len(lines) and not lines[i][1] and _is_use(lines[i][0]):
            group.append(lines[i][0])
            i += 1
        seen: Set[str] = set()
        for line in sorted(group, key=lambda item: item.strip().lower()):
            if line.strip() not in seen:
                seen.add(line.strip())
                result.append((line, False))
    return result


def sort_use_lines(code: str) -> str:
    """:func:`sort_use_runs` over plain text."""
    sorted_lines = sort_use_runs([(line, False) for line in code.splitlines()])
    return "".join(f"{line}\n" for line, _ in sorted_lines)


def split_header_and_opener(code: str) -> Optional[Tuple[str, str]]:
    """Split a header block whose last statement opens a control block.

    Returns ``(header_code, opener_line)`` so that imports and declares can
    live on their own island while the opener starts the template's nesting.
    """
    if not is_block_opener(code):
        return None
    lines = [line for line in normalize_statements(code).splitlines() if line.strip()]
    if len(lines) < 2:
        return None
    last = lines[-1].strip()
    if not (last.lower().startswith(_HEADER_OPENERS) and last.endswith(":")):
        return None

    source_lines = code.splitlines()
    if len(source_lines) > 1:
        end = len(source_lines) - 1
        while end > 0 and not source_lines[end].strip():
            end -= 1
        start = 0
        while start < end and not source_lines[start].strip():
            start += 1
        if start < end and source_lines[end].strip() == last:
            return "\n".join(source_lines[start:end]), last

    return "\n".join(lines[:-1]), last


class BlockReindenter:
    """Line-by-line state machine behind :func:`reindent_php_block`."""

    def __init__(self, pad: str, is_header: bool) -> None:
        self.pad = pad
        self.is_header = is_header
        self.depth = 0
        self.out: List[str] = []
        # indices into ``out`` of heredoc and multi-line string lines
        self.verbatim: Set[int] = set()

        self.prev_blank = False
        self.first_content = True
        self.prev_was_doc_close = False
        self.prev_was_use = False
        self.prev_was_declare = False

        self.quote: Optional[str] = None
        self.heredoc_marker: Optional[str] = None

        self.in_docblock = False
        self.doc_bodies: List[str] = []
        self.annotations: List[str] = []
        self.descriptions: List[str] = []
        self.deferred: List[str] = []

    def emit(self, line: str) -> None:
        text, self.depth = emit_reindented_line(line, self.pad, self.depth)
        self.out.append(text)

    def has_pending(self) -> bool:
        return bool(self.annotations or self.descriptions)

    def pass_through(self, line: str) -> None:
        self.verbatim.add(len(self.out))
        self.out.append(line + "\n")

    def resume_after(self, tail: str) -> None:
        opens, closes = count_brackets(tail)
        self.depth = max(self.depth + opens - closes, 0)

    def flush_pending(self) -> None:
        if self.deferred:
            logger.debug("Writing %d deferred header lines before merged docblock", len(self.deferred))
            for line in self.deferred:
                self.emit(line)
            self.out.append("\n")
            self.deferred.clear()
            self.prev_was_use = self.prev_was_declare = False
        bodies = merge_descriptions_and_vars(self.descriptions, self.annotations)
        for doc_line in merge_docblock_bodies(bodies).splitlines():
            self.emit(doc_line.strip())
        self.annotations.clear()
        self.descriptions.clear()

    def feed(self, line: str) -> None:
        if self.heredoc_marker is not None:
            self.pass_through(line)
            if is_heredoc_close(line, self.heredoc_marker):
                self.resume_after(line.strip()[len(self.heredoc_marker):])
                self.heredoc_marker = None
            return

        if self.quote is not None:
            self.pass_through(line)
            if count_unescaped(line, self.quote) % 2 == 1:
                self.resume_after(line[line.rfind(self.quote) + 1:])
                self.quote = None
            return

        trimmed = line.strip()
        if self.in_docblock:
            self.feed_docblock(trimmed)
            return

        if not trimmed:
            if not self.prev_blank and not self.first_content:
                if not self.has_pending():
                    self.out.append("\n")
                self.prev_blank = True
            return

        if self.first_content and not self.prev_blank and self.is_header:
            self.out.append("\n")
        self.first_content = False

        is_use = trimmed.startswith("use ")
        is_declare = trimmed.startswith("declare(")
        single_body = extract_docblock_body(trimmed)

        if self.has_pending():
            if is_use or is_declare:
                self.deferred.append(trimmed)
                self.prev_was_use = is_use
                self.prev_was_declare = is_declare
                return
            if single_body is None and trimmed != "/**":
                self.flush_pending()
                self.prev_was_doc_close = True
                self.prev_blank = False

        run_ended = (self.prev_was_use and not is_use) or (self.prev_was_declare and not is_declare)
        if (run_ended or self.prev_was_doc_close) and not self.prev_blank:
            self.out.append("\n")
        self.prev_blank = False
        self.prev_was_doc_close = trimmed == "*/"
        self.prev_was_use = is_use
        self.prev_was_declare = is_declare

        if single_body is not None:
            self.annotations.append(single_body)
            self.prev_was_use = self.prev_was_declare = False
            return

        if trimmed == "/**":
            self.in_docblock = True
            self.doc_bodies = []
            return

        if is_comment_line(trimmed):
            self.emit(trimmed)
            return

        self.emit(format_php_code(trimmed))
        code = strip_line_comment(trimmed)
        marker = detect_heredoc(code)
        if marker is not None:
            self.heredoc_marker = marker
        else:
            self.quote = open_quote(code)

    def feed_docblock(self, trimmed: str) -> None:
        if trimmed != "*/":
            if trimmed == "*":
                self.doc_bodies.append("")
            elif trimmed.startswith("*"):
                self.doc_bodies.append(trimmed[1:].strip())
            elif trimmed:
                self.doc_bodies.append(trimmed)
            return

        self.in_docblock = False
        bodies, self.doc_bodies = self.doc_bodies, []
        if bodies and all(body.startswith("@var ") for body in bodies):
            self.annotations.extend(normalize_var_body(body) for body in bodies)
        elif self.is_header:
            self.descriptions.extend(bodies)
        else:
            if self.has_pending():
                self.flush_pending()
            self.emit_docblock(bodies, closed=True)
            self.prev_was_doc_close = True

    def emit_docblock(self, bodies: List[str], closed: bool) -> None:
        self.emit("/**")
        for body in bodies:
            self.emit(f"* {body}" if body else "*")
        if closed:
            self.emit("*/")

    def finish(self) -> List[Tuple[str, bool]]:
        """Output lines as ``(text, verbatim)`` pairs, without trailing blank lines."""
        if self.in_docblock:
            self.emit_docblock(self.doc_bodies, closed=False)
        if self.has_pending():
            self.flush_pending()
        elif self.deferred:
            for line in self.deferred:
                self.emit(line)

        lines: List[Tuple[str, bool]] = []
        for index, chunk in enumerate(self.out):
            verbatim = index in self.verbatim
            body = chunk[:-1] if chunk.endswith("\n") else chunk
            lines.extend((text, verbatim) for text in body.split("\n"))
        while lines and not lines[-1][1] and not lines[-1][0].strip():
            lines.pop()
        return lines


def reindent_php_lines(code: str, pad: str) -> List[Tuple[str, bool]]:
    """Reindent ``code`` at base padding ``pad`` into ``(text, verbatim)`` lines.

    ``verbatim`` marks heredoc and multi-line string lines, which callers
    must copy unchanged.
    """
    if "\n" not in code and (";" in code or has_switch_case(code)):
        code = normalize_statements(code)
    else:
        code = join_ternary_lines(code)

    reindenter = BlockReindenter(pad, is_header_block(strip_passthrough(code)))
    for line in code.splitlines():
        reindenter.feed(line)
    return sort_use_runs(reindenter.finish())


def reindent_php_block(code: str, pad: str) -> str:
    """Reindent ``code`` at base padding ``pad``; the result ends with one newline."""
    lines = reindent_php_lines(code, pad)
    return "".join(f"{text}\n" for text, _ in lines) or "\n"


__all__ = [
    "COMMENT_PREFIXES",
    "BlockReindenter",
    "emit_reindented_line",
    "join_ternary_lines",
    "detect_heredoc",
    "is_heredoc_close",
    "is_comment_line",
    "passthrough_flags",
    "strip_passthrough",
    "sort_use_lines",
    "sort_use_runs",
    "split_header_and_opener",
    "reindent_php_block",
    "reindent_php_lines",
]

"""Document emitter: walks a node tree and writes the formatted template.

The walk is driven by a single :class:`FormatterState` owned by one
:class:`DocumentEmitter`. Markup nesting comes from the tree itself; PHP
control flow (``if (...):`` ... ``endif;``, switches, widget begin/end
pairs) moves ``depth`` as statements are classified. Entering an element's
children saves and restores the state so unbalanced PHP inside one element
cannot shift the indentation of its siblings.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence

from ..parser.nodes import (
    Attribute,
    Comment,
    Doctype,
    Element,
    Node,
    PhpBlock,
    PhpEcho,
    Text,
    is_raw_text_element,
    is_void_element,
)
from .classify import (
    ControlFlow,
    classify,
    has_switch_case,
    is_block_closer,
    is_block_opener,
    is_case_label,
    is_echo_block_closer,
    is_echo_block_opener,
    is_header_block,
    is_single_echo_block,
)
from .docblock import is_docblock_only, render_docblock_island
from .echo import format_echo
from .microformat import format_php_code, join_php_lines
from .reindent import reindent_php_block, reindent_php_lines, split_header_and_opener, strip_passthrough
from .split import INDENT, MAX_LINE_LENGTH, find_ternary_positions
from .statements import count_top_level_semicolons, normalize_statements

logger = logging.getLogger(__name__)


@dataclass
class FormatterState:
    """Indentation depth plus the depths at which open switches started."""

    depth: int = 0
    switch_stack: List[int] = field(default_factory=list)

    @property
    def pad(self) -> str:
        return INDENT * self.depth

    def indent(self) -> None:
        self.depth += 1

    def dedent(self) -> None:
        self.depth = max(self.depth - 1, 0)

    @contextmanager
    def nested(self, depth: int) -> Iterator["FormatterState"]:
        saved_depth, saved_stack = self.depth, self.switch_stack
        self.depth, self.switch_stack = depth, []
        try:
            yield self
        finally:
            self.depth, self.switch_stack = saved_depth, saved_stack


def _php_free(value: str) -> str:
    """``value`` with every ``<?...?>`` segment removed."""
    parts: List[str] = []
    pos = 0
    while True:
        start = value.find("<?", pos)
        if start < 0:
            parts.append(value[pos:])
            break
        parts.append(value[pos:start])
        end = value.find("?>", start + 2)
        if end < 0:
            break
        pos = end + 2
    return "".join(parts)


def render_attribute(attr: Attribute) -> str:
    if attr.value is None:
        return attr.name
    quote = "'" if '"' in _php_free(attr.value) else '"'
    return f"{attr.name}={quote}{attr.value}{quote}"


def render_attributes(attributes: Sequence[Attribute]) -> str:
    return "".join(f" {render_attribute(attr)}" for attr in attributes)


def _echo_expression(code: str) -> str:
    expr = code.strip()[len("echo "):]
    if expr.endswith(";"):
        expr = expr[:-1]
    return expr.strip()


def is_inline_content(children: Sequence[Node]) -> bool:
    for child in children:
        if isinstance(child, PhpBlock):
            if not is_single_echo_block(child.code):
                return False
        elif not isinstance(child, (Text, PhpEcho)):
            return False
    return True


def _inline_text(text: str) -> str:
    if not text.strip():
        return " " if text else ""
    collapsed = " ".join(text.split())
    if text[0].isspace():
        collapsed = " " + collapsed
    if text[-1].isspace():
        collapsed += " "
    return collapsed


def render_inline(element: Element) -> str:
    """Single-line form of an element whose children are text and echoes."""
    parts: List[str] = []
    for child in element.children:
        if isinstance(child, Text):
            parts.append(_inline_text(child.text))
        elif isinstance(child, PhpEcho):
            parts.append(f"<?= {format_php_code(join_php_lines(child.code))} ?>")
        elif isinstance(child, PhpBlock):
            parts.append(f"<?= {format_php_code(_echo_expression(child.code))} ?>")
    content = "".join(parts).strip()
    attrs = render_attributes(element.attributes)
    return f"<{element.name}{attrs}>{content}</{element.name}>"


class DocumentEmitter:
    """Formats one document; create a new emitter for every document."""

    def __init__(self) -> None:
        self.state = FormatterState()
        self.out: List[str] = []

    def write(self, text: str) -> None:
        self.out.append(text)

    def write_line(self, line: str, depth: int) -> None:
        self.out.append(f"{INDENT * depth}{line}\n")

    def at_blank_line(self) -> bool:
        return not self.out or self.out[-1] == "\n" or self.out[-1].endswith("\n\n")

    def render(self, nodes: Sequence[Node]) -> str:
        self.emit_nodes(nodes)
        text = "".join(self.out)
        return text.rstrip("\n") + "\n" if text.strip() else ""

    # -- tree walk ---------------------------------------------------------

    def emit_nodes(self, nodes: Sequence[Node]) -> None:
        i = 0
        while i < len(nodes):
            node = nodes[i]
            if isinstance(node, Element):
                self.emit_element(node)
            elif isinstance(node, Text):
                self.emit_text(node.text)
            elif isinstance(node, PhpBlock):
                last = self.merge_header_blocks(nodes, i)
                if last > i:
                    merged = "\n".join(
                        n.code.strip() for n in nodes[i:last + 1] if isinstance(n, PhpBlock)
                    )
                    self.emit_php_block(merged)
                    i = last + 1
                    continue
                self.emit_php_block(node.code)
            elif isinstance(node, PhpEcho):
                self.emit_php_echo(node.code)
            elif isinstance(node, Doctype):
                self.write_line(f"<!DOCTYPE {node.text}>", self.state.depth)
            elif isinstance(node, Comment):
                self.write_line(f"<!-- {node.text.strip()} -->", self.state.depth)
            i += 1

    def merge_header_blocks(self, nodes: Sequence[Node], start: int) -> int:
        """Index of the last top-level header/docblock PhpBlock mergeable with ``nodes[start]``."""
        if self.state.depth != 0 or not _is_header_or_docblock(nodes[start]):
            return start
        last = start
        j = start + 1
        while j < len(nodes):
            node = nodes[j]
            if isinstance(node, Text) and not node.text.strip():
                j += 1
                continue
            if not _is_header_or_docblock(node):
                break
            last = j
            j += 1
        return last

    def emit_text(self, text: str) -> None:
        trimmed = text.strip()
        if trimmed:
            for line in trimmed.splitlines():
                if line.strip():
                    self.write_line(line.strip(), self.state.depth)
        elif self.state.depth <= 1 and text.count("\n") >= 2 and not self.at_blank_line():
            self.write("\n")

    # -- markup ------------------------------------------------------------

    def emit_open_tag(self, element: Element, self_closing: bool = False) -> None:
        pad = self.state.pad
        tail = " />" if self_closing else ">"
        single = f"{pad}<{element.name}{render_attributes(element.attributes)}{tail}"
        if not element.attributes or len(single) <= MAX_LINE_LENGTH:
            self.write(single + "\n")
            return
        self.write(f"{pad}<{element.name}\n")
        for attr in element.attributes:
            self.write(f"{pad}{INDENT}{render_attribute(attr)}\n")
        self.write(f"{pad}{tail}\n")

    def emit_element(self, element: Element) -> None:
        pad = self.state.pad
        if is_raw_text_element(element.name):
            self.emit_open_tag(element)
            for child in element.children:
                if isinstance(child, Text):
                    self.emit_raw_text(child.text)
            self.write(f"{pad}</{element.name}>\n")
            return

        if not element.children and is_void_element(element.name):
            self.emit_open_tag(element, self_closing=True)
            return

        if is_inline_content(element.children):
            inline = render_inline(element)
            if len(pad) + len(inline) <= MAX_LINE_LENGTH:
                self.write(f"{pad}{inline}\n")
                return

        self.emit_open_tag(element)
        with self.state.nested(self.state.depth + 1):
            self.emit_nodes(element.children)
        self.write(f"{pad}</{element.name}>\n")

    def emit_raw_text(self, text: str) -> None:
        body = text.lstrip("\n").rstrip()
        if not body:
            return
        pad = self.state.pad
        for line in body.splitlines():
            if not line:
                self.write("\n")
            elif line[0].isspace():
                self.write(f"{line}\n")
            else:
                self.write(f"{pad}{line}\n")

    # -- PHP ---------------------------------------------------------------

    def emit_php_echo(self, code: str) -> None:
        if is_echo_block_closer(code):
            self.state.dedent()
            self.write(format_echo(code, self.state.pad))
            return
        self.write(format_echo(code, self.state.pad))
        if is_echo_block_opener(code):
            self.state.indent()

    def emit_php_block(self, code: str) -> None:
        trimmed = code.strip()
        semicolons = count_top_level_semicolons(code)
        if trimmed.startswith("echo "):
            expr = _echo_expression(code)
            if semicolons <= 1 and "\n" not in expr:
                self.emit_php_echo(expr)
                return

        if is_docblock_only(code):
            self.write(render_docblock_island(code, self.state.pad))
            return

        switch_case = has_switch_case(code)
        if switch_case:
            self.emit_php_switch_block(code)
        elif "\n" in code or semicolons > 1:
            self.emit_multiline_php(code)
        else:
            self.emit_single_php(code)

    def emit_php_switch_block(self, code: str) -> None:
        statements = [line.strip() for line in normalize_statements(code).splitlines() if line.strip()]
        state = self.state
        i = 0
        while i < len(statements):
            current = statements[i]
            if (
                classify(current) is ControlFlow.SWITCH
                and i + 1 < len(statements)
                and is_case_label(statements[i + 1])
            ):
                switch_depth = state.depth
                pad = state.pad
                self.write(
                    f"{pad}<?php {format_php_code(current)}\n"
                    f"{pad}{INDENT}{format_php_code(statements[i + 1])} ?>\n"
                )
                state.switch_stack.append(switch_depth)
                state.depth = switch_depth + 2
                i += 2
                continue
            kind = classify(current)
            if not self.apply_switch_kind(kind, current):
                if kind.closes:
                    state.dedent()
                self.write_line(f"<?php {format_php_code(current)} ?>", state.depth)
                if kind.opens:
                    state.indent()
            i += 1

    def apply_switch_kind(self, kind: ControlFlow, code: str) -> bool:
        """Write a switch-structure statement; ``False`` if ``kind`` is not one."""
        state = self.state
        tag = f"<?php {format_php_code(code)} ?>"
        if kind is ControlFlow.SWITCH:
            self.write_line(tag, state.depth)
            state.switch_stack.append(state.depth)
            state.indent()
        elif kind is ControlFlow.CASE_LABEL:
            level = state.switch_stack[-1] if state.switch_stack else max(state.depth - 1, 0)
            self.write_line(tag, level + 1)
            state.depth = level + 2
        elif kind is ControlFlow.END_SWITCH:
            level = state.switch_stack.pop() if state.switch_stack else max(state.depth - 1, 0)
            self.write_line(tag, level)
            state.depth = level
        elif kind is ControlFlow.BREAK:
            self.write_line(tag, state.depth)
        else:
            return False
        return True

    def emit_single_php(self, code: str) -> None:
        state = self.state
        kind = classify(code, in_switch=bool(state.switch_stack))
        if self.apply_switch_kind(kind, code):
            return
        if kind.closes:
            state.dedent()
            self.write_line(f"<?php {format_php_code(code)} ?>", state.depth)
            if kind is ControlFlow.REOPENER:
                state.indent()
            return

        if is_header_block(code):
            self.emit_header_island(code)
            return
        self.emit_statement_tag(code)
        if is_block_opener(code):
            state.indent()

    def emit_multiline_php(self, code: str) -> None:
        state = self.state
        header = is_header_block(strip_passthrough(code))
        if header:
            parts = split_header_and_opener(code)
            if parts is not None:
                header_code, opener = parts
                logger.debug("Moving trailing opener %r out of header block", opener)
                self.emit_header_island(header_code)
                self.write_line(f"<?php {format_php_code(opener)} ?>", state.depth)
                state.indent()
                return
            self.emit_header_island(code)
        else:
            self.emit_statement_tag(code)

        widget_pair = "::begin(" in code or "::end(" in code
        if header and not widget_pair:
            return
        # A block holding a widget ::end( is printed at the depth of the
        # widget body and only dedents what follows it.
        if widget_pair and is_block_closer(code):
            state.dedent()
        elif (widget_pair or not is_block_closer(code)) and is_block_opener(code):
            state.indent()

    def emit_header_island(self, code: str) -> None:
        pad = self.state.pad
        self.write(f"{pad}<?php\n{reindent_php_block(code, pad)}\n{pad}?>\n")

    def emit_statement_tag(self, code: str) -> None:
        """Write ordinary PHP code as one ``<?php ... ?>`` tag.

        Several reindented lines open on the ``<?php`` line and close on the
        last one. A single statement stays inline when it fits, takes the
        ternary shape when it has a top-level ternary, and otherwise moves
        onto its own line between ``<?php`` and ``?>``.
        """
        pad = self.state.pad
        lines = [text for text, verbatim in reindent_php_lines(code, pad) if verbatim or text.strip()]
        if not lines:
            return
        if len(lines) > 1:
            self.write(f"{pad}<?php {lines[0].lstrip()}\n")
            for line in lines[1:-1]:
                self.write(f"{line}\n")
            self.write(f"{lines[-1]} ?>\n")
            return

        statement = lines[0].strip()
        single = f"{pad}<?php {statement} ?>"
        if len(single) <= MAX_LINE_LENGTH:
            self.write(single + "\n")
            return
        positions = find_ternary_positions(statement)
        if positions is not None:
            q_pos, c_pos = positions
            condition = statement[:q_pos].rstrip()
            true_val = statement[q_pos + 1:c_pos].strip()
            false_val = statement[c_pos + 1:].strip()
            inner_pad = pad + INDENT
            self.write(
                f"{pad}<?php {condition}\n{inner_pad}? {true_val}\n{inner_pad}: {false_val} ?>\n"
            )
            return
        self.write(f"{pad}<?php\n{pad}{statement}\n{pad}?>\n")


def _is_header_or_docblock(node: Node) -> bool:
    if not isinstance(node, PhpBlock):
        return False
    return is_header_block(strip_passthrough(node.code)) or is_docblock_only(node.code)


def format(nodes: Sequence[Node]) -> str:
    """Format a parsed template and return the canonical text."""
    return DocumentEmitter().render(nodes)


__all__ = [
    "FormatterState",
    "DocumentEmitter",
    "format",
    "render_attribute",
    "render_attributes",
    "render_inline",
    "is_inline_content",
]

"""Tree-builder turning a token stream into a :data:`~viewfmt.parser.nodes.Node` tree."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .lexer import tokenize
from .nodes import (
    Attribute,
    Comment,
    Doctype,
    Element,
    Node,
    PhpBlock,
    PhpEcho,
    Text,
    Token,
    TokenKind,
    is_void_element,
)

_Frame = Tuple[str, Tuple[Attribute, ...], List[Node]]


def _close(frame: _Frame, children: List[Node]) -> List[Node]:
    name, attributes, parent = frame
    parent.append(Element(name, attributes, tuple(children)))
    return parent


def parse(tokens: Iterable[Token]) -> List[Node]:
    """Build the node tree for ``tokens``.

    Void elements never take children. A close tag closes the innermost
    element with that name, implicitly closing anything opened inside it; a
    close tag with no open counterpart is kept as text so no markup is lost.
    Elements left open at the end of input are closed implicitly.
    """
    stack: List[_Frame] = []
    current: List[Node] = []

    for token in tokens:
        kind = token.kind
        if kind is TokenKind.OPEN_TAG:
            if is_void_element(token.name):
                current.append(Element(token.name, token.attributes))
            else:
                stack.append((token.name, token.attributes, current))
                current = []
        elif kind is TokenKind.CLOSE_TAG:
            wanted = token.name.lower()
            if not any(frame[0].lower() == wanted for frame in stack):
                current.append(Text(f"</{token.name}>"))
                continue
            while stack:
                frame = stack.pop()
                current = _close(frame, current)
                if frame[0].lower() == wanted:
                    break
        elif kind is TokenKind.SELF_CLOSING:
            current.append(Element(token.name, token.attributes))
        elif kind is TokenKind.TEXT:
            current.append(Text(token.value))
        elif kind is TokenKind.PHP_BLOCK:
            current.append(PhpBlock(token.value))
        elif kind is TokenKind.PHP_ECHO:
            current.append(PhpEcho(token.value))
        elif kind is TokenKind.DOCTYPE:
            current.append(Doctype(token.value))
        elif kind is TokenKind.COMMENT:
            current.append(Comment(token.value))

    while stack:
        current = _close(stack.pop(), current)

    return current


def parse_document(source: str) -> List[Node]:
    """Tokenize and parse template ``source`` in one step."""
    return parse(tokenize(source))


__all__ = ["parse", "parse_document"]

"""Template parser package.

Public API:
    tokenize(source) -> list[Token]
    parse(tokens) -> list[Node]
    parse_document(source) -> list[Node]
"""

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
)
from .tree import parse, parse_document

__all__ = [
    "tokenize",
    "parse",
    "parse_document",
    "Attribute",
    "Comment",
    "Doctype",
    "Element",
    "Node",
    "PhpBlock",
    "PhpEcho",
    "Text",
    "Token",
    "TokenKind",
]

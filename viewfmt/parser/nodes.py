"""Token and node types shared by the tokenizer, tree-builder and formatter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Attribute:
    """A markup attribute; ``value`` is ``None`` for boolean attributes."""

    name: str
    value: Optional[str] = None


class TokenKind(Enum):
    """Kinds of lexical tokens produced by :func:`viewfmt.parser.lexer.tokenize`."""

    TEXT = "text"
    OPEN_TAG = "open_tag"
    CLOSE_TAG = "close_tag"
    SELF_CLOSING = "self_closing"
    PHP_BLOCK = "php_block"
    PHP_ECHO = "php_echo"
    DOCTYPE = "doctype"
    COMMENT = "comment"


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    ``value`` carries the payload for text, PHP, doctype and comment tokens;
    ``name`` and ``attributes`` are used by tag tokens.
    """

    kind: TokenKind
    value: str = ""
    name: str = ""
    attributes: Tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class Element:
    name: str
    attributes: Tuple[Attribute, ...] = ()
    children: Tuple["Node", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class PhpBlock:
    """Code between ``<?php`` (or a bare ``<?``) and ``?>``, trimmed."""

    code: str


@dataclass(frozen=True)
class PhpEcho:
    """Expression between ``<?=`` and ``?>``, trimmed."""

    code: str


@dataclass(frozen=True)
class Doctype:
    text: str


@dataclass(frozen=True)
class Comment:
    """Markup comment; ``text`` is the raw content between ``<!--`` and ``-->``."""

    text: str


Node = Union[Element, Text, PhpBlock, PhpEcho, Doctype, Comment]


VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

RAW_TEXT_ELEMENTS = frozenset({"script", "style", "textarea"})


def is_void_element(name: str) -> bool:
    return name.lower() in VOID_ELEMENTS


def is_raw_text_element(name: str) -> bool:
    return name.lower() in RAW_TEXT_ELEMENTS


__all__ = [
    "Attribute",
    "TokenKind",
    "Token",
    "Element",
    "Text",
    "PhpBlock",
    "PhpEcho",
    "Doctype",
    "Comment",
    "Node",
    "VOID_ELEMENTS",
    "RAW_TEXT_ELEMENTS",
    "is_void_element",
    "is_raw_text_element",
]

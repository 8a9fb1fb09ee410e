"""Tokenizer for PHP view templates.

Splits raw template text into markup tags, text runs, comments, doctypes and
PHP islands. The tokenizer is total: malformed markup degrades into text or
best-effort tags, it never raises.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .nodes import Attribute, Token, TokenKind, is_raw_text_element

PHP_CLOSE = "?>"


def _php_end(source: str, start: int) -> Tuple[str, int]:
    """Return the PHP content starting at ``start`` and the index after ``?>``."""
    end = source.find(PHP_CLOSE, start)
    if end < 0:
        return source[start:], len(source)
    return source[start:end], end + len(PHP_CLOSE)


def _match_php(source: str, pos: int) -> Optional[Tuple[Token, int]]:
    if source.startswith("<?=", pos):
        content, end = _php_end(source, pos + 3)
        return Token(TokenKind.PHP_ECHO, value=content.strip()), end

    if source[pos:pos + 5].lower() == "<?php":
        following = source[pos + 5:pos + 6]
        if following == "" or following.isspace() or source.startswith(PHP_CLOSE, pos + 5):
            content, end = _php_end(source, pos + 5)
            return Token(TokenKind.PHP_BLOCK, value=content.strip()), end
        return None

    following = source[pos + 2:pos + 3]
    if source.startswith("<?", pos) and (following == "" or following.isspace()):
        content, end = _php_end(source, pos + 2)
        return Token(TokenKind.PHP_BLOCK, value=content.strip()), end
    return None


def _skip_php_segment(source: str, pos: int) -> int:
    """Index just past the ``?>`` closing a PHP segment opened at ``pos``."""
    end = source.find(PHP_CLOSE, pos + 2)
    return len(source) if end < 0 else end + len(PHP_CLOSE)


def _scan_tag_end(source: str, pos: int) -> int:
    """Index of the ``>`` closing the tag whose body starts at ``pos``."""
    n = len(source)
    i = pos
    while i < n:
        ch = source[i]
        if source.startswith("<?", i):
            i = _skip_php_segment(source, i)
            continue
        if ch in "\"'":
            i = _skip_attribute_quote(source, i)
            continue
        if ch == ">":
            return i
        i += 1
    return n


def _skip_attribute_quote(source: str, pos: int) -> int:
    quote = source[pos]
    n = len(source)
    i = pos + 1
    while i < n:
        if source.startswith("<?", i):
            i = _skip_php_segment(source, i)
            continue
        if source[i] == quote:
            return i + 1
        i += 1
    return n


def parse_attributes(raw: str) -> Tuple[Attribute, ...]:
    """Parse the attribute section of a tag into :class:`Attribute` values."""
    attrs: List[Attribute] = []
    n = len(raw)
    i = 0
    while i < n:
        if raw[i].isspace():
            i += 1
            continue

        if raw.startswith("<?", i):
            end = _skip_php_segment(raw, i)
            attrs.append(Attribute(raw[i:end]))
            i = end
            continue

        start = i
        while i < n and raw[i] != "=" and not raw[i].isspace():
            if raw.startswith("<?", i):
                i = _skip_php_segment(raw, i)
                continue
            i += 1
        name = raw[start:i]
        if not name:
            break

        j = i
        while j < n and raw[j].isspace():
            j += 1
        if j >= n or raw[j] != "=":
            attrs.append(Attribute(name))
            continue

        j += 1
        while j < n and raw[j].isspace():
            j += 1

        if j < n and raw[j] in "\"'":
            end = _skip_attribute_quote(raw, j)
            closed = end - 1 > j and raw[end - 1] == raw[j]
            value = raw[j + 1:end - 1] if closed else raw[j + 1:end]
            i = end
        else:
            start = j
            while j < n and not raw[j].isspace():
                if raw.startswith("<?", j):
                    j = _skip_php_segment(raw, j)
                    continue
                j += 1
            value = raw[start:j]
            i = j
        attrs.append(Attribute(name, value))

    return tuple(attrs)


def parse_tag(tag_content: str) -> Token:
    """Turn the text between ``<`` and ``>`` into a tag token."""
    trimmed = tag_content.strip()

    if trimmed.startswith("/"):
        return Token(TokenKind.CLOSE_TAG, name=trimmed[1:].strip())

    self_closing = trimmed.endswith("/")
    body = trimmed[:-1].strip() if self_closing else trimmed

    split_at = next((idx for idx, ch in enumerate(body) if ch.isspace()), None)
    if split_at is None:
        name, rest = body, ""
    else:
        name, rest = body[:split_at], body[split_at:].lstrip()

    kind = TokenKind.SELF_CLOSING if self_closing else TokenKind.OPEN_TAG
    return Token(kind, name=name, attributes=parse_attributes(rest))


def _find_raw_text_end(source: str, pos: int, name: str) -> int:
    closing = f"</{name.lower()}"
    end = source.lower().find(closing, pos)
    return len(source) if end < 0 else end


def tokenize(source: str) -> List[Token]:
    """Split template ``source`` into a flat list of tokens."""
    tokens: List[Token] = []
    text_buf: List[str] = []
    n = len(source)
    i = 0

    def flush_text() -> None:
        if text_buf:
            tokens.append(Token(TokenKind.TEXT, value="".join(text_buf)))
            text_buf.clear()

    while i < n:
        ch = source[i]
        if ch != "<":
            text_buf.append(ch)
            i += 1
            continue

        php = _match_php(source, i)
        if php is not None:
            flush_text()
            token, i = php
            tokens.append(token)
            continue

        if source.startswith("<!--", i):
            flush_text()
            end = source.find("-->", i + 4)
            if end < 0:
                tokens.append(Token(TokenKind.COMMENT, value=source[i + 4:]))
                i = n
            else:
                tokens.append(Token(TokenKind.COMMENT, value=source[i + 4:end]))
                i = end + 3
            continue

        if source[i + 1:i + 9].upper() == "!DOCTYPE":
            flush_text()
            end = _scan_tag_end(source, i + 1)
            tokens.append(Token(TokenKind.DOCTYPE, value=source[i + 9:end].strip()))
            i = end + 1
            continue

        following = source[i + 1:i + 2]
        if following == "?":
            # Processing instructions such as <?xml ... ?> pass through as text.
            end = _skip_php_segment(source, i)
            text_buf.append(source[i:end])
            i = end
            continue
        if not (following.isalpha() or following == "/"):
            text_buf.append(ch)
            i += 1
            continue

        flush_text()
        end = _scan_tag_end(source, i + 1)
        token = parse_tag(source[i + 1:end])
        tokens.append(token)
        i = end + 1

        if token.kind is TokenKind.OPEN_TAG and is_raw_text_element(token.name):
            body_end = _find_raw_text_end(source, i, token.name)
            if body_end > i:
                tokens.append(Token(TokenKind.TEXT, value=source[i:body_end]))
            i = body_end

    flush_text()
    return tokens


__all__ = ["tokenize", "parse_tag", "parse_attributes"]

"""
Tests for the template tokenizer.
"""

from viewfmt.parser import Attribute, Token, TokenKind, tokenize
from viewfmt.parser.lexer import parse_attributes, parse_tag


def kinds(source):
    return [token.kind for token in tokenize(source)]


class TestTokenize:
    """Splitting template text into tokens."""

    def test_tags_and_text(self):
        """Open tags, text and close tags."""
        assert tokenize("<p>Hi</p>") == [
            Token(TokenKind.OPEN_TAG, name="p"),
            Token(TokenKind.TEXT, value="Hi"),
            Token(TokenKind.CLOSE_TAG, name="p"),
        ]

    def test_php_islands(self):
        """Echo tags, full and short open tags carry trimmed code."""
        tokens = tokenize("<?= $a ?><?php  $b = 1;  ?><? $c ?>")
        assert tokens == [
            Token(TokenKind.PHP_ECHO, value="$a"),
            Token(TokenKind.PHP_BLOCK, value="$b = 1;"),
            Token(TokenKind.PHP_BLOCK, value="$c"),
        ]

    def test_unterminated_php(self):
        """A file may end inside PHP."""
        assert tokenize("<?php $x = 1;") == [Token(TokenKind.PHP_BLOCK, value="$x = 1;")]

    def test_xml_declaration_is_text(self):
        """Processing instructions other than PHP pass through as text."""
        assert tokenize('<?xml version="1.0"?>') == [Token(TokenKind.TEXT, value='<?xml version="1.0"?>')]

    def test_doctype_and_comment(self):
        """Doctype text is trimmed, comment text is raw."""
        assert tokenize("<!DOCTYPE html><!-- x -->") == [
            Token(TokenKind.DOCTYPE, value="html"),
            Token(TokenKind.COMMENT, value=" x "),
        ]

    def test_self_closing(self):
        """A trailing slash marks a self-closing tag."""
        assert kinds("<br/>") == [TokenKind.SELF_CLOSING]

    def test_raw_text_body(self):
        """Markup-like text inside a script stays text."""
        assert tokenize("<script>if (a < b) { x('<p>'); }</script>") == [
            Token(TokenKind.OPEN_TAG, name="script"),
            Token(TokenKind.TEXT, value="if (a < b) { x('<p>'); }"),
            Token(TokenKind.CLOSE_TAG, name="script"),
        ]

    def test_lone_angle_bracket_is_text(self):
        """A '<' not starting a tag is text."""
        assert tokenize("a < b") == [Token(TokenKind.TEXT, value="a < b")]

    def test_php_inside_tag(self):
        """A '>' inside PHP does not end the tag."""
        tokens = tokenize('<a href="<?= $model->url ?>">x</a>')
        assert tokens[0].attributes == (Attribute("href", "<?= $model->url ?>"),)


class TestAttributes:
    """Attribute parsing."""

    def test_quoted_unquoted_and_boolean(self):
        """All attribute forms are recognized."""
        assert parse_attributes("class=\"a b\" id=x disabled data-v='1'") == (
            Attribute("class", "a b"),
            Attribute("id", "x"),
            Attribute("disabled"),
            Attribute("data-v", "1"),
        )

    def test_bare_php_attribute(self):
        """A PHP segment in attribute position is kept as a name."""
        assert parse_attributes("<?= $attrs ?> id=\"a\"") == (
            Attribute("<?= $attrs ?>"),
            Attribute("id", "a"),
        )

    def test_parse_tag(self):
        """Tag names are split from their attributes."""
        token = parse_tag('input type="text" /')
        assert token.kind is TokenKind.SELF_CLOSING
        assert token.name == "input"
        assert token.attributes == (Attribute("type", "text"),)
        assert parse_tag("/div ").kind is TokenKind.CLOSE_TAG

"""
Tests for the tree-builder.
"""

from viewfmt.parser import Element, PhpBlock, PhpEcho, Text, parse_document


class TestParse:
    """Building the node tree."""

    def test_nesting(self):
        """Children are attached to their element."""
        assert parse_document("<div><p>a</p><?= $b ?></div>") == [
            Element("div", (), (Element("p", (), (Text("a"),)), PhpEcho("$b"))),
        ]

    def test_void_elements_take_no_children(self):
        """Content after a void element is its sibling."""
        assert parse_document("<p><br>x</p>") == [
            Element("p", (), (Element("br"), Text("x"))),
        ]

    def test_close_tag_closes_inner_elements(self):
        """Elements left open inside are closed implicitly."""
        assert parse_document("<div><span>a</div>") == [
            Element("div", (), (Element("span", (), (Text("a"),)),)),
        ]

    def test_stray_close_tag_kept_as_text(self):
        """A close tag without a matching open tag survives as text."""
        assert parse_document("a</b>") == [Text("a"), Text("</b>")]

    def test_unclosed_at_end(self):
        """Elements still open at the end are closed."""
        assert parse_document("<div><?php if ($a): ?>") == [
            Element("div", (), (PhpBlock("if ($a):"),)),
        ]

    def test_case_insensitive_close(self):
        """Close tags match regardless of case."""
        assert parse_document("<DIV>x</div>") == [Element("DIV", (), (Text("x"),))]

"""
Tests for the block reindenter, including docblock merging and the ordering
of imports held back while a docblock is buffered.
"""

from viewfmt.formatting.reindent import (
    detect_heredoc,
    emit_reindented_line,
    is_heredoc_close,
    join_ternary_lines,
    passthrough_flags,
    reindent_php_block,
    reindent_php_lines,
    sort_use_lines,
    split_header_and_opener,
)


class TestLineHelpers:
    """Per-line helpers."""

    def test_leading_closer_dedents(self):
        """A line starting with a closer is written one level up."""
        assert emit_reindented_line("}", "", 1) == ("}\n", 0)

    def test_ternary_continuation_indents(self):
        """Continuation lines get one extra level."""
        assert emit_reindented_line("? $a", "", 1) == ("        ? $a\n", 1)

    def test_depth_grows_by_one_at_most(self):
        """Several openers on one line add a single level."""
        text, depth = emit_reindented_line("foo([[", "", 0)
        assert text == "foo([[\n"
        assert depth == 1

    def test_join_ternary_lines(self):
        """Ternary branches are folded back onto their condition."""
        assert join_ternary_lines("$a = $b\n    ? 1\n    : 2;") == "$a = $b ? 1 : 2;"

    def test_heredoc_markers(self):
        """Heredoc and nowdoc openers and closers are recognized."""
        assert detect_heredoc("$x = <<<'EOT'") == "EOT"
        assert detect_heredoc("$x = 1;") is None
        assert is_heredoc_close("EOT;", "EOT")
        assert is_heredoc_close("  EOT),", "EOT")

    def test_sort_use_lines(self):
        """Imports are sorted case-insensitively and deduplicated per run."""
        assert sort_use_lines("use B;\nuse a;\nuse B;\n$x;") == "use a;\nuse B;\n$x;\n"


class TestReindentBlock:
    """Whole-block reindentation."""

    def test_single_line_statements(self):
        """A one-line block is split into statements."""
        assert reindent_php_block("$a = 1; $b = 2;", "") == "$a = 1;\n$b = 2;\n"

    def test_brace_nesting(self):
        """Braces drive indentation relative to the base padding."""
        code = "foreach ($items as $item) {\n$x = 1;\n}"
        assert reindent_php_block(code, "    ") == (
            "    foreach ($items as $item) {\n"
            "        $x = 1;\n"
            "    }\n"
        )

    def test_heredoc_copied_verbatim(self):
        """Heredoc bodies keep their own layout."""
        code = "$s = <<<EOT\n  raw text\nEOT;\n$y = 2;"
        assert reindent_php_block(code, "") == "$s = <<<EOT\n  raw text\nEOT;\n$y = 2;\n"

    def test_docblock_followed_by_blank_line(self):
        """A closed docblock is separated from the next statement."""
        code = "/**\n * Renders.\n */\n$x = 1;"
        assert reindent_php_block(code, "") == "/**\n * Renders.\n */\n\n$x = 1;\n"

    def test_header_imports_sorted(self):
        """Header blocks start with a blank line and sort their imports."""
        code = "use yii\\helpers\\Html;\nuse app\\models\\User;\n\n$this->title = 'X';"
        assert reindent_php_block(code, "") == (
            "\n"
            "use app\\models\\User;\n"
            "use yii\\helpers\\Html;\n"
            "\n"
            "$this->title = 'X';\n"
        )

    def test_var_docblocks_merged(self):
        """Consecutive @var docblocks become one, with normalized order."""
        code = "use yii\\helpers\\Html;\n\n/** @var $this yii\\web\\View */\n/** @var $model User */"
        assert reindent_php_block(code, "") == (
            "\n"
            "use yii\\helpers\\Html;\n"
            "\n"
            "/**\n"
            " * @var yii\\web\\View $this\n"
            " * @var User $model\n"
            " */\n"
        )


class TestDeferredImports:
    """Imports met while a docblock is buffered are written before it."""

    def test_use_written_before_merged_docblock(self):
        """The held-back import comes first, then a blank line, then the docblock."""
        code = "/** @var $this yii\\web\\View */\nuse yii\\helpers\\Html;\n$x = 1;"
        assert reindent_php_block(code, "") == (
            "\n"
            "use yii\\helpers\\Html;\n"
            "\n"
            "/**\n"
            " * @var yii\\web\\View $this\n"
            " */\n"
            "\n"
            "$x = 1;\n"
        )

    def test_held_back_at_block_end(self):
        """Without a following statement the docblock still trails the import."""
        code = "/** @var User $model */\nuse app\\models\\User;"
        assert reindent_php_block(code, "") == (
            "\n"
            "use app\\models\\User;\n"
            "\n"
            "/**\n"
            " * @var User $model\n"
            " */\n"
        )


class TestHeaderOpenerSplit:
    """Trailing control openers leave the header island."""

    def test_multi_line(self):
        """The opener is split from the imports above it."""
        assert split_header_and_opener("use app\\X;\nif ($a):") == ("use app\\X;", "if ($a):")

    def test_single_line(self):
        """Single-line headers are split after statement normalization."""
        assert split_header_and_opener("use app\\X; if ($a):") == ("use app\\X;", "if ($a):")

    def test_no_opener(self):
        """Plain headers are not split."""
        assert split_header_and_opener("use app\\X;") is None


class TestPassThroughRegions:
    """Heredoc and multi-line string bodies are never rewritten."""

    def test_flags(self):
        """Only the lines continuing a heredoc or string are flagged."""
        lines = ["$s = <<<EOT", "a", "EOT;", "$b = 'x", "y';", "$c = 1; // it's"]
        assert passthrough_flags(lines) == [False, True, True, False, True, False]

    def test_use_lines_in_heredoc_not_sorted(self):
        """Import-like heredoc lines keep their order and the block is not a header."""
        code = "$sql = <<<EOT\nuse zeta;\nuse alpha;\nEOT;\n$x = 1;"
        assert reindent_php_block(code, "") == "$sql = <<<EOT\nuse zeta;\nuse alpha;\nEOT;\n$x = 1;\n"

    def test_header_imports_sorted_around_heredoc(self):
        """Real imports are still sorted when a heredoc follows them."""
        code = "use b\\B;\nuse a\\A;\n$sql = <<<EOT\nuse zeta;\nuse alpha;\nEOT;"
        assert reindent_php_block(code, "") == (
            "\n"
            "use a\\A;\n"
            "use b\\B;\n"
            "\n"
            "$sql = <<<EOT\n"
            "use zeta;\n"
            "use alpha;\n"
            "EOT;\n"
        )

    def test_verbatim_lines_marked(self):
        """Blank lines inside a string are reported as verbatim."""
        code = "$x = 'one\n\ntwo';\n\n$y = 2;"
        assert reindent_php_lines(code, "") == [
            ("$x = 'one", False),
            ("", True),
            ("two';", True),
            ("", False),
            ("$y = 2;", False),
        ]

    def test_ternary_mark_in_heredoc_not_joined(self):
        """A heredoc line ending in '?' is not folded onto the next line."""
        code = "$q = <<<EOT\nReally?\n: yes\nEOT;"
        assert join_ternary_lines(code) == code

    def test_apostrophe_in_trailing_comment(self):
        """A quote in a line comment leaves the following lines formatted."""
        code = "if ($a) {\n$x = 1; // don't\n$y = foo( $a,$b );\n}"
        assert reindent_php_block(code, "") == (
            "if ($a) {\n"
            "    $x = 1; // don't\n"
            "    $y = foo($a, $b);\n"
            "}\n"
        )

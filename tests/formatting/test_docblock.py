"""
Tests for docblock helpers.
"""

from viewfmt.formatting.docblock import (
    expand_single_line_docblock,
    extract_docblock_body,
    is_docblock_only,
    merge_descriptions_and_vars,
    merge_docblock_bodies,
    normalize_var_body,
    render_docblock_island,
)


class TestVarNormalization:
    """``@var`` type/name order."""

    def test_swaps_name_first(self):
        """The type always comes first."""
        assert normalize_var_body("@var $model User") == "@var User $model"

    def test_canonical_form_unchanged(self):
        """Already canonical annotations are untouched."""
        assert normalize_var_body("@var User $model") == "@var User $model"

    def test_trailing_description_kept(self):
        """Text after the name survives the swap."""
        assert normalize_var_body("@var $items Item[] the items") == "@var Item[] $items the items"

    def test_other_tags_untouched(self):
        """Only @var is rewritten."""
        assert normalize_var_body("@param $a int") == "@param $a int"


class TestSingleLineDocblocks:
    """One-line ``/** ... */`` comments."""

    def test_expand(self):
        """The body moves onto its own line."""
        assert expand_single_line_docblock("/** @var User $model */") == "/**\n * @var User $model\n */"

    def test_extract_body(self):
        """The body is extracted and normalized."""
        assert extract_docblock_body("/** @var $this yii\\web\\View */") == "@var yii\\web\\View $this"
        assert extract_docblock_body("/** * @var User $model */") == "@var User $model"

    def test_extract_empty_or_other(self):
        """Empty docblocks and ordinary code yield nothing."""
        assert extract_docblock_body("/** */") is None
        assert extract_docblock_body("$x = 1;") is None


class TestMerging:
    """Merging buffered docblock bodies."""

    def test_merge_bodies(self):
        """Empty bodies become bare stars."""
        assert merge_docblock_bodies(["Text", "", "@var User $model"]) == (
            "/**\n * Text\n *\n * @var User $model\n */"
        )

    def test_descriptions_then_vars(self):
        """A blank separator only appears when both groups exist."""
        assert merge_descriptions_and_vars(["Text"], ["@var A $a"]) == ["Text", "", "@var A $a"]
        assert merge_descriptions_and_vars([], ["@var A $a"]) == ["@var A $a"]


class TestDocblockIslands:
    """Docblock-only PHP tags."""

    def test_is_docblock_only(self):
        """Single and multi-line docblocks qualify, code does not."""
        assert is_docblock_only("/** @var User $model */")
        assert is_docblock_only("/**\n * @var User $model\n */")
        assert not is_docblock_only("/** @var User $model */\n$x = 1;")
        assert not is_docblock_only("")

    def test_render_island(self):
        """The docblock is expanded inside its own tag at the given padding."""
        assert render_docblock_island("/** @var User $model */", "    ") == (
            "    <?php\n"
            "    /**\n"
            "     * @var User $model\n"
            "     */\n"
            "    ?>\n"
        )

    def test_render_island_is_stable(self):
        """Rendering an already padded docblock keeps its layout."""
        code = "/**\n     * @var User $model\n     */"
        assert render_docblock_island(code, "    ") == render_docblock_island("/** @var User $model */", "    ")

"""
Tests for short-echo tag formatting.
"""

from viewfmt.formatting.echo import (
    echo_array_tail,
    echo_chain,
    echo_concat,
    echo_ternary,
    format_echo,
)
from viewfmt.formatting.microformat import format_php_code, join_php_lines


class TestFormatEcho:
    """Choosing between the single line and the split strategies."""

    def test_short_echo_single_line(self):
        """A fitting echo stays on one line with normalized spacing."""
        assert format_echo("Html::encode( $title )", "    ") == "    <?= Html::encode($title) ?>\n"

    def test_multi_line_source_joined(self):
        """A previously split chain is joined back when it fits."""
        assert format_echo("$form->field($model, 'name')\n    ->textInput()", "") == (
            "<?= $form->field($model, 'name')->textInput() ?>\n"
        )

    def test_long_call_splits_arguments(self, long_link_echo):
        """An over-width call is split one argument per line and closes with ') ?>'."""
        pad = " " * 16
        inner = " " * 20
        assert format_echo(long_link_echo, pad) == (
            f"{pad}<?= Html::a(\n"
            f"{inner}'Update profile details',\n"
            f"{inner}['user/update', 'id' => $model->id],\n"
            f"{inner}['class' => 'btn btn-primary'],\n"
            f"{pad}) ?>\n"
        )

    def test_unsplittable_echo_kept(self):
        """When nothing applies the overrun is kept."""
        code = "$" + "x" * 130
        assert format_echo(code, "") == f"<?= {code} ?>\n"

    def test_layout_trailing_comma_dropped_when_joined(self):
        """A split array rejoined on one line loses its trailing comma."""
        code = "Html::a('x', [\n    'view',\n    'id' => $item->id,\n])"
        assert format_echo(code, "") == "<?= Html::a('x', ['view', 'id' => $item->id]) ?>\n"

    def test_overrun_split_kept_when_narrower(self, gridview_buttons_echo):
        """When no split fits, the narrowest split still beats one long line."""
        single = f"<?= {format_php_code(join_php_lines(gridview_buttons_echo))} ?>"
        result = format_echo(gridview_buttons_echo, "")
        assert result.startswith("<?= GridView::widget([\n    'dataProvider' => $dataProvider,\n")
        assert result.endswith("\n]) ?>\n")
        assert max(len(line) for line in result.splitlines()) < len(single)


class TestEchoStrategies:
    """Individual echo layouts."""

    def test_chain(self):
        """The first two chain segments stay on the opening line."""
        assert echo_chain("$form->field($model, 'status')->dropDownList($list)->label(false)", "") == (
            "<?= $form->field($model, 'status')\n"
            "    ->dropDownList($list)\n"
            "    ->label(false) ?>\n"
        )

    def test_short_chain_not_split(self):
        """Two segments are not a chain worth splitting."""
        assert echo_chain("$model->name", "") is None

    def test_ternary(self):
        """Ternary branches move onto indented lines."""
        assert echo_ternary("$active ? 'on' : 'off'", "") == (
            "<?= $active\n"
            "    ? 'on'\n"
            "    : 'off' ?>\n"
        )

    def test_concat(self):
        """Concatenated operands start with the dot."""
        assert echo_concat("'<b>' . $model->text . '</b>'", "") == (
            "<?= '<b>'\n"
            "    . $model->text\n"
            "    . '</b>' ?>\n"
        )

    def test_array_tail(self):
        """Leading arguments stay inline and the trailing array is exploded."""
        assert echo_array_tail("Html::a($label, $url, ['class' => 'btn', 'id' => 'go'])", "") == (
            "<?= Html::a($label, $url, [\n"
            "    'class' => 'btn',\n"
            "    'id' => 'go',\n"
            "]) ?>\n"
        )

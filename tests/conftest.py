"""Shared template samples for the viewfmt test suite."""

import pytest


@pytest.fixture
def docblock_merge_source():
    """Header with scattered @var docblocks, a late import and a trailing opener."""
    return r"""<?php

/** @var yii\web\View $this */
/** @var User $model */
/** @var string $title */

use yii\helpers\Html;

/**
 * This is a detailed description
 * of the view file purpose.
 */

/** @var int $count */

if ($count > 0):
?>
<div class="content">
    <h1><?= Html::encode($title) ?></h1>
    <?php
    /** @var Item $item */
    /** @var Category $category */
    foreach ($model->items as $item):
    ?>
        <p><?= $item->name ?></p>
    <?php endforeach; ?>
</div>
<?php endif; ?>
"""


@pytest.fixture
def docblock_merge_expected():
    """Canonical form of ``docblock_merge_source``."""
    return r"""<?php

use yii\helpers\Html;

/**
 * This is a detailed description
 * of the view file purpose.
 *
 * @var yii\web\View $this
 * @var User $model
 * @var string $title
 * @var int $count
 */

?>
<?php if ($count > 0): ?>
    <div class="content">
        <h1><?= Html::encode($title) ?></h1>
        <?php /**
         * @var Item $item
         * @var Category $category
         */
        foreach ($model->items as $item): ?>
            <p><?= $item->name ?></p>
        <?php endforeach; ?>
    </div>
<?php endif; ?>
"""


@pytest.fixture
def compact_header_template():
    """Already formatted header island with imports, @var docblock and statements."""
    return r"""<?php

use app\helpers\Html;
use app\models\User;
use yii\widgets\ActiveForm;

/**
 * @var yii\web\View $this
 * @var User $model
 * @var string $title
 */

$this->title = $title;
$this->params['breadcrumbs'][] = ['label' => 'Users', 'url' => ['index']];
$this->params['breadcrumbs'][] = $this->title;

?>
<div class="user-update">
    <h1><?= Html::encode($this->title) ?></h1>
</div>
"""


@pytest.fixture
def brace_switch_template():
    """Already formatted brace-style switch spread over several PHP tags."""
    return """<div class="wizard">
    <?php switch ($step) {
        case 'start': ?>
            <div class="step">
                <h2>Start</h2>
                <p><?= $intro ?></p>
            </div>
            <?php break; ?>
        <?php case 'form': ?>
            <div class="step">
                <h2>Form</h2>
                <?= $this->render('_form', ['model' => $model]) ?>
            </div>
            <?php break; ?>
        <?php default: ?>
            <div class="step">
                <p>Unknown</p>
            </div>
        <?php } ?>
</div>
"""


@pytest.fixture
def php_attributes_template():
    """Already formatted markup whose attribute values embed echo tags."""
    return """<div class="<?= $isActive ? 'active' : 'inactive' ?>">
    <a href="<?= Url::to(['site/index', 'id' => $model->id]) ?>" class="<?= $class ?>" data-id="<?= $model->id ?>">
        <?= $model->name ?>
    </a>
</div>
<input type="hidden" name="token" value="<?= Yii::$app->request->csrfToken ?>" />
<div
    id="item-<?= $item->id ?>"
    class="<?= $item->isNew ? 'new' : '' ?> item-card"
    data-url="<?= Url::to(['api/get']) ?>"
>
    <span><?= $item->title ?></span>
</div>
"""


@pytest.fixture
def long_link_echo():
    """An ``Html::a`` call that only fits once its arguments are split."""
    return "Html::a('Update profile details', ['user/update', 'id' => $model->id], ['class' => 'btn btn-primary'])"


@pytest.fixture
def gridview_buttons_echo():
    """GridView widget whose action buttons hold arrow functions too long for any split."""
    return r"""GridView::widget([
    'dataProvider' => $dataProvider,
    'columns' => [
        ['class' => 'yii\grid\SerialColumn'],
        [
            'attribute' => 'name',
            'label' => Yii::t('app', 'ui.name'),
            'format' => 'raw',
            'value' => static fn ($m) => Html::a(Html::encode($m->name), ['view', 'id' => $m->id]),
        ],
        [
            'attribute' => 'status',
            'filter' => $statuses,
            'value' => static fn ($m) => $m->statusLabel,
        ],
        [
            'class' => 'yii\grid\ActionColumn',
            'template' => '{view} {update} {delete}',
            'buttons' => [
                'view' => static fn ($url, $m) => Html::a(
                    '<i class="bi bi-eye"></i>',
                    $url,
                    [
                        'class' => 'btn btn-sm btn-outline-primary',
                        'title' => Yii::t('app', 'ui.view'),
                    ],
                ),
                'update' => static fn ($url, $m) => Html::a(
                    '<i class="bi bi-pencil"></i>',
                    $url,
                    [
                        'class' => 'btn btn-sm btn-outline-secondary',
                        'title' => Yii::t('app', 'ui.edit'),
                    ],
                ),
                'delete' => static fn ($url, $m) => Html::a(
                    '<i class="bi bi-trash"></i>',
                    $url,
                    [
                        'class' => 'btn btn-sm btn-outline-danger',
                        'data' => ['confirm' => Yii::t('app', 'ui.confirm_delete'), 'method' => 'post'],
                        'title' => Yii::t('app', 'ui.delete'),
                    ],
                ),
            ],
        ],
    ],
])
"""


@pytest.fixture
def arrow_match_widget():
    """Split widget echo with one arrow-function column that cannot be split further."""
    return r"""<?= GridView::widget([
    'dataProvider' => $dataProvider,
    'columns' => [['attribute' => 'type', 'value' => static fn ($m) => match ($m->type) { 'book' => Yii::t('app', 'ui.book'), 'article' => Yii::t('app', 'ui.article'), 'review' => Yii::t('app', 'ui.review'), default => Yii::t('app', 'ui.unknown') }]],
]) ?>
"""


@pytest.fixture
def workspace(tmp_path):
    """A small view directory tree with one vendored template."""
    views = tmp_path / "views" / "site"
    views.mkdir(parents=True)
    (views / "index.php").write_text("<h1><?= $title ?></h1>\n", encoding="utf-8")
    (views / "about.php").write_text("<div><p>About</p></div>", encoding="utf-8")
    (views / "notes.txt").write_text("not a template", encoding="utf-8")
    vendor = tmp_path / "vendor" / "lib"
    vendor.mkdir(parents=True)
    (vendor / "widget.php").write_text("<p>vendored</p>", encoding="utf-8")
    return tmp_path

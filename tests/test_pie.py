"""Tests for pie chart layout decisions."""

import pytest

from smartchart.config import PieConfig
from smartchart.data_models import EmphasisType, PieSlice, PieType
from smartchart.pie import (
    OTHER_COLOR,
    OUTLIER_COLOR,
    build_pie_chart_layout,
    decide_pie_type,
    extract_pie_feature,
    generate_label,
    generate_legend,
    mark_special_items,
    smart_merge_others,
    to_slices,
)


def _slices(*values):
    return [{'name': f's{i}', 'value': v} for i, v in enumerate(values)]


def test_key_item_forces_pie():
    data = _slices(45, 15, 15, 15, 10)
    feature = extract_pie_feature(data)

    assert feature.max_ratio == pytest.approx(0.45)
    assert feature.has_key_item is True
    assert decide_pie_type(feature) == PieType.PIE


def test_dominant_slice_is_key_item():
    feature = extract_pie_feature(_slices(36, 20, 15, 15, 14))
    assert feature.max_ratio < 0.4
    assert feature.has_key_item is True


def test_many_even_slices_make_a_donut():
    feature = extract_pie_feature(_slices(10, 11, 12, 10, 11, 12, 10, 11))

    assert feature.has_key_item is False
    assert feature.gini < 0.4
    assert decide_pie_type(feature) == PieType.CYCLE


def test_feature_ignores_non_positive_values():
    feature = extract_pie_feature(_slices(0, -5, 10, 30))

    assert feature.count == 2
    assert feature.total == 40
    assert feature.median == pytest.approx(20)
    assert 0 <= feature.gini < 1


def test_feature_of_nothing_is_zero():
    feature = extract_pie_feature(_slices(0, -1))
    assert feature.count == 0
    assert feature.total == 0
    assert feature.has_key_item is False


@pytest.mark.parametrize('data', [
    [],
    [{'name': 'a', 'value': 0}],
    [{'name': 'a', 'value': -5}, {'name': 'b', 'value': 0}],
])
def test_pie_without_positive_slices_stays_pie(data):
    """No positive value means no shape to judge, so no donut."""
    assert decide_pie_type(extract_pie_feature(data)) == PieType.PIE
    assert build_pie_chart_layout(data).pie_type == PieType.PIE


def test_merge_keeps_total_and_bounds_slice_count(pie_rows):
    merged = smart_merge_others(pie_rows)

    assert len(merged) == 7
    assert merged[-1].is_other
    assert merged[-1].name == 'Other'
    assert merged[-1].value == pytest.approx(4257)
    assert sum(s.value for s in merged) == pytest.approx(sum(r['value'] for r in pie_rows))
    assert [s.value for s in merged[:-1]] == sorted((s.value for s in merged[:-1]), reverse=True)


def test_short_lists_are_not_merged():
    data = _slices(5, 1, 1, 1, 1, 1)
    merged = smart_merge_others(data)

    assert [s.value for s in merged] == [5, 1, 1, 1, 1, 1]
    assert not any(s.is_other for s in merged)


def test_merge_label_is_configurable(pie_rows):
    merged = smart_merge_others(pie_rows, PieConfig(other_label='Rest'))
    assert merged[-1].name == 'Rest'


def test_outlier_takes_precedence_over_key():
    data = _slices(100, 1, 1, 1, 1, 1, 1)
    marked = mark_special_items(data, extract_pie_feature(data))

    assert marked[0].emphasis_type == EmphasisType.OUTLIER
    assert all(s.emphasis_type is None for s in marked[1:])
    assert [s.value for s in marked] == [s['value'] for s in data]


def test_key_marking_without_outliers():
    data = _slices(42, 30, 18, 10)
    marked = mark_special_items(data, extract_pie_feature(data))

    assert marked[0].emphasis_type == EmphasisType.KEY
    assert all(s.emphasis_type is None for s in marked[1:])


def test_to_slices_accepts_both_key_styles_and_bad_values():
    slices = to_slices([
        {'name': 'a', 'value': 3, 'isOther': True},
        {'name': 'b', 'value': 'oops', 'emphasis_type': 'key'},
        PieSlice(name='c', value=1.0),
    ])

    assert slices[0].is_other
    assert slices[1].value == 0
    assert slices[1].emphasis_type == EmphasisType.KEY
    assert slices[2].name == 'c'


def test_rendering_hints():
    assert generate_label(7)['position'] == 'outside'
    assert generate_label(6)['position'] == 'inside'
    assert generate_legend(9)['orient'] == 'vertical'
    assert generate_legend(8)['orient'] == 'horizontal'


def test_full_pie_layout(pie_rows):
    layout = build_pie_chart_layout(pie_rows)
    result = layout.to_dict()

    assert layout.pie_type == PieType.PIE
    assert len(layout.merged) == 7
    assert layout.marked[0].emphasis_type == EmphasisType.OUTLIER
    assert layout.colors[0] == OUTLIER_COLOR
    assert layout.colors[-1] == OTHER_COLOR
    assert result['pieType'] == 'pie'
    assert result['label']['position'] == 'outside'
    assert result['merged'][-1] == {'name': 'Other', 'value': pytest.approx(4257), 'isOther': True}
    assert set(result['feature']) >= {'total', 'count', 'maxRatio', 'gini', 'hasKeyItem'}

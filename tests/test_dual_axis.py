"""Tests for the dual axis decision and left/right assignment."""

import pytest

from smartchart.config import DualAxisConfig
from smartchart.data_models import MetricKind, MetricSeries
from smartchart.dual_axis import (
    assign_left_right,
    auto_assign_dual_axis,
    classify_metric,
    should_use_dual_axis,
)
from smartchart.features import compute_stats


def _metrics(**columns):
    return {key: MetricSeries(key=key, values=tuple(values)) for key, values in columns.items()}


def test_classify_metric():
    assert classify_metric(compute_stats([0.1, 0.9, -0.5])) == MetricKind.RATIO
    assert classify_metric(compute_stats([0.1, 1.5])) == MetricKind.ABSOLUTE


def test_ratio_absolute_mix_needs_two_axes():
    metrics = _metrics(rate=[0.2, 0.5, 0.9], revenue=[950, 1200, 1000])
    assert should_use_dual_axis(metrics) is True


def test_exact_ten_times_gap_stays_single_axis():
    metrics = _metrics(value1=[1, 1.5, 2], value2=[10, 15, 20])
    assert should_use_dual_axis(metrics) is False


def test_gap_above_threshold_needs_two_axes():
    metrics = _metrics(value1=[1, 1.5, 2], value2=[10, 15, 20.5])
    assert should_use_dual_axis(metrics) is True


def test_threshold_is_configurable():
    metrics = _metrics(value1=[1, 1.5, 2], value2=[10, 15, 20])
    assert should_use_dual_axis(metrics, DualAxisConfig(gap_threshold=5)) is True


def test_single_metric_and_non_numeric_stay_single_axis():
    assert should_use_dual_axis(_metrics(revenue=[1, 2, 3])) is False
    assert should_use_dual_axis(_metrics(a=[1, 2, 3], b=[100, 'n/a', 300])) is False


def test_zero_maximum_uses_absolute_gap():
    metrics = _metrics(loss=[-5, -3, 0], gain=[10, 20, 30])
    assert should_use_dual_axis(metrics) is True


@pytest.mark.parametrize('fixture_name', ['single_metric_rows', 'ratio_rows', 'small_gap_rows'])
def test_single_axis_datasets(request, fixture_name):
    rows = request.getfixturevalue(fixture_name)
    assignment = auto_assign_dual_axis(rows, x_field='date')

    assert assignment.is_dual is False
    assert assignment.left == ()
    assert assignment.right == ()


def test_large_gap_assignment(large_gap_rows):
    assignment = auto_assign_dual_axis(large_gap_rows, x_field='date', random_state=7)

    assert assignment.is_dual is True
    assert assignment.left == ('largeValue',)
    assert assignment.right == ('smallValue', 'mediumValue')
    assert assignment.axis_index('largeValue') == 0
    assert assignment.axis_index('mediumValue') == 1


def test_mixed_assignment(mixed_rows):
    assignment = auto_assign_dual_axis(mixed_rows, x_field='date', random_state=3)

    assert assignment.is_dual is True
    assert assignment.left == ('revenue',)
    assert set(assignment.right) == {'rate', 'profit'}
    assert set(assignment.left).isdisjoint(assignment.right)


def test_x_field_must_be_excluded(large_gap_rows):
    # Date strings counted as a metric are non-numeric, which forces a single axis
    assert auto_assign_dual_axis(large_gap_rows).is_dual is False


def test_explicit_metric_keys(large_gap_rows):
    assignment = auto_assign_dual_axis(large_gap_rows, ['smallValue', 'mediumValue'], 'date', random_state=1)

    assert assignment.is_dual is True
    assert assignment.left == ('mediumValue',)
    assert assignment.right == ('smallValue',)


def test_assign_left_right_with_one_metric_puts_it_left():
    assignment = assign_left_right({'only': compute_stats([1, 2, 3])})

    assert assignment.left == ('only',)
    assert assignment.right == ()


def test_empty_rows():
    assert auto_assign_dual_axis([], x_field='date').is_dual is False

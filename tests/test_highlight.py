"""Tests for outlier and key point detection."""

import pytest

from smartchart.config import DetectionToggles, HighlightConfig
from smartchart.data_models import HighlightType, SeriesType
from smartchart.highlight import (
    REASON_CONSTANT,
    REASON_GLOBAL_MAX,
    REASON_SHARP_DECREASE,
    REASON_SHARP_INCREASE,
    HighlightDetector,
    auto_detect_outliers_and_keys,
)

ALL_ON = DetectionToggles(
    check_outliers=True,
    check_max_min=True,
    check_sharp_change=True,
    check_trend_deviation=True
)


@pytest.fixture
def spiked_flat_series():
    """Twenty near-flat values with a spike at index 7."""
    values = [10 + 0.1 * (i % 3) for i in range(20)]
    values[7] = 100
    return values


def test_outlier_beats_key_point_on_same_index(spiked_flat_series):
    toggles = DetectionToggles(check_outliers=True, check_max_min=True)
    points = auto_detect_outliers_and_keys(spiked_flat_series, SeriesType.LINE, toggles)
    by_index = {p.index: p for p in points}

    assert by_index[7].type == HighlightType.OUTLIER
    assert by_index[7].value == 100


def test_at_most_one_highlight_per_index_and_sorted(spiked_flat_series):
    points = auto_detect_outliers_and_keys(spiked_flat_series, SeriesType.LINE, ALL_ON)
    indices = [p.index for p in points]

    assert indices == sorted(indices)
    assert len(indices) == len(set(indices))


def test_no_toggles_means_no_highlights(spiked_flat_series):
    assert auto_detect_outliers_and_keys(spiked_flat_series, 'line') == []
    assert auto_detect_outliers_and_keys(spiked_flat_series, 'line', DetectionToggles()) == []


def test_indices_refer_to_original_rows():
    values = [1, None, 2, float('nan'), 3, 100, 2, 1]
    points = auto_detect_outliers_and_keys(values, 'bar', DetectionToggles(check_outliers=True))

    assert [(p.index, p.value) for p in points] == [(5, 100.0)]


def test_zero_iqr_yields_no_outliers():
    detector = HighlightDetector()
    assert detector.detect_iqr_outliers([5, 5, 5, 5, 5, 5, 50]) == []


def test_iqr_needs_minimum_samples():
    assert HighlightDetector().detect_iqr_outliers([1, 2, 100]) == []


def test_sharp_change_flags_the_later_point(spiked_flat_series):
    points = auto_detect_outliers_and_keys(
        spiked_flat_series, 'bar', DetectionToggles(check_sharp_change=True)
    )

    assert [(p.index, p.reason) for p in points] == [
        (7, REASON_SHARP_INCREASE),
        (8, REASON_SHARP_DECREASE),
    ]
    assert all(p.type == HighlightType.KEY_POINT for p in points)


def test_global_extrema_include_ties():
    points = HighlightDetector().detect_global_extrema([3, 9, 1, 9, 1])

    maxima = sorted(p.index for p in points if p.reason == REASON_GLOBAL_MAX)
    minima = sorted(p.index for p in points if p.reason != REASON_GLOBAL_MAX)
    assert maxima == [1, 3]
    assert minima == [2, 4]


def test_constant_series_gets_single_marker():
    points = HighlightDetector().detect_global_extrema([4, 4, 4])

    assert len(points) == 1
    assert points[0].index == 0
    assert points[0].reason == REASON_CONSTANT


def test_trend_deviation_on_line_series():
    values = [10 * i for i in range(20)]
    values[10] += 150
    toggles = DetectionToggles(check_trend_deviation=True)

    points = auto_detect_outliers_and_keys(values, SeriesType.LINE, toggles)

    assert [(p.index, p.type) for p in points] == [(10, HighlightType.TREND_DEVIATION)]


def test_trend_deviation_skipped_for_bar_series():
    values = [10 * i for i in range(20)]
    values[10] += 150
    toggles = DetectionToggles(check_trend_deviation=True)

    assert auto_detect_outliers_and_keys(values, SeriesType.BAR, toggles) == []


def test_trend_deviation_needs_a_real_trend():
    values = [5, 9, 4, 8, 5, 9, 4, 8, 5, 30]
    detector = HighlightDetector(HighlightConfig(min_r2_for_trend=0.9))
    assert detector.detect_trend_deviation(values) == []


def test_all_non_finite_series():
    assert auto_detect_outliers_and_keys([None, float('nan')], 'line', ALL_ON) == []


def test_highlight_point_serialization(spiked_flat_series):
    point = auto_detect_outliers_and_keys(
        spiked_flat_series, 'line', DetectionToggles(check_outliers=True)
    )[0]

    assert point.to_dict() == {
        'index': 7,
        'value': 100.0,
        'type': 'outlier',
        'reason': 'IQR statistical outlier'
    }

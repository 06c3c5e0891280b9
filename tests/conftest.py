"""Pytest fixtures shared across the engine tests."""

import pytest


@pytest.fixture
def single_metric_rows():
    """One metric over three days: always a single axis."""
    return [
        {'date': '2024-01-01', 'revenue': 100},
        {'date': '2024-01-02', 'revenue': 120},
        {'date': '2024-01-03', 'revenue': 95},
    ]


@pytest.fixture
def ratio_rows():
    """Several metrics inside [-1, 1]."""
    return [
        {'date': '2024-01-01', 'rate1': 0.8, 'rate2': 0.6, 'rate3': 0.9},
        {'date': '2024-01-02', 'rate1': 0.7, 'rate2': 0.8, 'rate3': 0.5},
        {'date': '2024-01-03', 'rate1': 0.9, 'rate2': 0.7, 'rate3': 0.8},
    ]


@pytest.fixture
def small_gap_rows():
    """Absolute metrics within a 10x magnitude gap."""
    return [
        {'date': '2024-01-01', 'sales': 100, 'profit': 20, 'cost': 80},
        {'date': '2024-01-02', 'sales': 120, 'profit': 25, 'cost': 95},
        {'date': '2024-01-03', 'sales': 95, 'profit': 18, 'cost': 77},
    ]


@pytest.fixture
def mixed_rows():
    """Revenue far above rate and profit."""
    return [
        {'date': '2024-01-01', 'rate': 20.85, 'revenue': 1000, 'profit': 150},
        {'date': '2024-01-02', 'rate': 50.92, 'revenue': 1200, 'profit': 180},
        {'date': '2024-01-03', 'rate': 30.78, 'revenue': 950, 'profit': 140},
    ]


@pytest.fixture
def large_gap_rows():
    """Absolute metrics with a 200x magnitude gap."""
    return [
        {'date': '2024-01-01', 'smallValue': 2, 'largeValue': 500, 'mediumValue': 50},
        {'date': '2024-01-02', 'smallValue': 3, 'largeValue': 600, 'mediumValue': 45},
        {'date': '2024-01-03', 'smallValue': 1.5, 'largeValue': 450, 'mediumValue': 55},
    ]


@pytest.fixture
def trending_rows():
    """Thirty consecutive days with a clear upward trend plus alternating noise."""
    return [
        {'date': f'2024-01-{day:02d}', 'visits': 100 + 2 * (day - 1) + (5 if day % 2 else -5)}
        for day in range(1, 31)
    ]


@pytest.fixture
def pie_rows():
    """Long-tailed pie data with one extreme slice."""
    values = [4280, 3120, 2860, 1840, 1360, 820, 760, 690, 620,
              310, 260, 220, 190, 160, 90, 60, 40, 25, 12, 9800]
    return [{'name': f'store-{i}', 'value': v} for i, v in enumerate(values)]

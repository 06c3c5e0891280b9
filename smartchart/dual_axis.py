"""
Dual Axis Module

Two-step decision for line/bar charts with several metrics:
1. Does the dataset need a second Y axis? Decided from metric kind
   (ratio vs. absolute) and magnitude gap.
2. Which metrics go left and which go right? k-means++ (k=2) over
   (min, max, median) feature vectors; the cluster with the higher mean of
   medians goes left.

Functions:
- classify_metric: ratio / absolute
- should_use_dual_axis: step 1
- assign_left_right: step 2
- auto_assign_dual_axis: both steps from raw rows
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .clustering import KMeansPlusPlus, silhouette
from .clustering.kmeans_pp import RandomState
from .config import ClusteringConfig, DualAxisConfig, EngineConfig
from .data_models import AxisAssignment, MetricKind, MetricSeries, Stats
from .features import compute_stats, feature_vector, is_numeric_value
from .preprocess import build_metric_series, get_metric_keys, to_frame

# Configure logging
logger = logging.getLogger(__name__)


def classify_metric(stats: Stats) -> MetricKind:
    """A metric whose values all sit within [-1, 1] is a ratio."""
    if stats.min >= -1 and stats.max <= 1:
        return MetricKind.RATIO
    return MetricKind.ABSOLUTE


def is_all_numeric(series: MetricSeries) -> bool:
    return all(is_numeric_value(value) for value in series.values)


def should_use_dual_axis(metrics: Mapping[str, MetricSeries],
                         config: Optional[DualAxisConfig] = None,
                         stats_by_key: Optional[Mapping[str, Stats]] = None) -> bool:
    """
    Decide whether the metrics need two Y axes.

    Args:
        metrics: Metric key -> series of raw values
        config: Gap threshold configuration
        stats_by_key: Precomputed stats, computed here when omitted

    Returns:
        True when a second axis is needed
    """
    config = config or DualAxisConfig()
    keys = list(metrics.keys())

    if len(keys) < 2:
        logger.debug(f"Single axis: only {len(keys)} metric(s)")
        return False

    non_numeric = [key for key in keys if not is_all_numeric(metrics[key])]
    if non_numeric:
        logger.info(f"Single axis: non-numeric values in {non_numeric}")
        return False

    if stats_by_key is None:
        stats_by_key = {key: compute_stats(metrics[key].values) for key in keys}

    kinds = {classify_metric(stats_by_key[key]) for key in keys}
    if MetricKind.RATIO in kinds and MetricKind.ABSOLUTE in kinds:
        logger.info(f"Dual axis: ratio/absolute mix across {len(keys)} metrics")
        return True

    maxima = [stats_by_key[key].max for key in keys]
    largest = max(maxima)
    smallest = min(maxima)

    if smallest <= 0:
        # No ratio possible with a zero/negative magnitude, compare the absolute gap
        needed = abs(largest - smallest) > abs(smallest) * config.gap_threshold
        logger.info(f"Magnitude gap (absolute): |{largest} - {smallest}| vs "
                    f"{abs(smallest) * config.gap_threshold} -> {'dual' if needed else 'single'} axis")
        return needed

    gap = largest / smallest
    needed = gap > config.gap_threshold
    logger.info(f"Magnitude gap {gap:.2f}x (threshold {config.gap_threshold}x) -> "
                f"{'dual' if needed else 'single'} axis")
    return needed


def assign_left_right(stats_by_key: Mapping[str, Stats],
                      config: Optional[ClusteringConfig] = None,
                      random_state: RandomState = None) -> AxisAssignment:
    """
    Split metrics into left (upper magnitude) and right (lower magnitude) groups.

    Args:
        stats_by_key: Metric key -> Stats
        config: Clustering configuration
        random_state: Seed or numpy Generator for reproducible seeding

    Returns:
        Dual AxisAssignment; with a single metric everything lands on the left
    """
    vectors = {key: feature_vector(stats) for key, stats in stats_by_key.items()}
    result = KMeansPlusPlus(n_clusters=2, config=config, random_state=random_state).fit(vectors)
    groups = [group for group in result.groups if group]

    def median_of_group(group: List[str]) -> float:
        return sum(stats_by_key[key].median for key in group) / len(group)

    # Stable sort keeps cluster order on ties
    groups.sort(key=median_of_group, reverse=True)
    left = groups[0] if groups else []
    right = [key for group in groups[1:] for key in group]

    order = list(stats_by_key.keys())
    left = tuple(sorted(left, key=order.index))
    right = tuple(sorted(right, key=order.index))

    score = silhouette(vectors, [list(left), list(right)])
    logger.info(f"Axis assignment: left={list(left)} right={list(right)} (silhouette {score:.3f})")
    return AxisAssignment(is_dual=True, left=left, right=right, silhouette=score)


def auto_assign_dual_axis(rows: Sequence[Mapping[str, Any]], metric_keys: Optional[Sequence[str]] = None,
                          x_field: Optional[str] = None, config: Optional[EngineConfig] = None,
                          random_state: RandomState = None) -> AxisAssignment:
    """
    Decide dual axis and left/right groups straight from dataset rows.

    Args:
        rows: Row records
        metric_keys: Metrics to consider (defaults to every field except x_field)
        x_field: X axis field, excluded from metrics
        config: Engine configuration
        random_state: Seed or numpy Generator for clustering

    Returns:
        AxisAssignment
    """
    config = config or EngineConfig()
    frame = to_frame(rows)
    if frame.empty:
        return AxisAssignment(is_dual=False)

    keys = get_metric_keys(frame, x_field, metric_keys)
    if not keys:
        return AxisAssignment(is_dual=False)

    metrics = build_metric_series(frame, keys)
    stats_by_key: Dict[str, Stats] = {key: compute_stats(series.values) for key, series in metrics.items()}

    if not should_use_dual_axis(metrics, config.dual_axis, stats_by_key):
        return AxisAssignment(is_dual=False)

    return assign_left_right(stats_by_key, config.clustering, random_state)

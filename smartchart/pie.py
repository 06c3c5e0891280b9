"""
Pie Chart Module

Layout decisions for pie charts:
1. Feature extraction over positive slice values
2. Pie vs. donut ("cycle") decision
3. Long tail merge into a single "Other" slice
4. Emphasis marking (outlier / key slices)
5. Rendering hints (colors, label position, legend orientation)
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from .config import PieConfig
from .data_models import EmphasisType, PieFeature, PieSlice, PieType
from .features import gini_coefficient, iqr_fences

# Configure logging
logger = logging.getLogger(__name__)

OTHER_COLOR = "#D9D9D9"
OUTLIER_COLOR = "#FF4D4F"
LABEL_OUTSIDE_ABOVE = 6
LEGEND_VERTICAL_ABOVE = 8
LABEL_MIN_PERCENT = 5

SliceInput = Union[PieSlice, Mapping[str, Any]]


def to_slices(data: Sequence[SliceInput]) -> List[PieSlice]:
    """Normalize {name, value} records into PieSlice objects."""
    slices = []
    for item in data or []:
        if isinstance(item, PieSlice):
            slices.append(item)
            continue
        emphasis = item.get('emphasis_type', item.get('emphasisType'))
        try:
            value = float(item.get('value', 0) or 0)
        except (TypeError, ValueError):
            logger.warning(f"Slice '{item.get('name')}' has non-numeric value {item.get('value')!r} - using 0")
            value = 0.0
        if not np.isfinite(value):
            logger.warning(f"Slice '{item.get('name')}' has non-finite value - using 0")
            value = 0.0
        slices.append(PieSlice(
            name=str(item.get('name', '')),
            value=value,
            is_other=bool(item.get('is_other', item.get('isOther', False))),
            emphasis_type=EmphasisType(emphasis) if emphasis else None
        ))
    return slices


def extract_pie_feature(data: Sequence[SliceInput], config: Optional[PieConfig] = None) -> PieFeature:
    """
    Aggregate statistics over the positive slice values.

    Values <= 0 (and non-finite ones) are ignored. With no positive value a
    zero feature is returned.
    """
    config = config or PieConfig()
    values = np.asarray([s.value for s in to_slices(data) if np.isfinite(s.value) and s.value > 0], dtype=float)
    count = int(values.size)
    if count == 0:
        return PieFeature()

    total = float(values.sum())
    largest = float(values.max())
    sorted_desc = np.sort(values)[::-1]
    second = float(sorted_desc[1]) if count > 1 else 0.0
    max_ratio = largest / total

    has_key_item = bool(
        max_ratio >= config.key_ratio
        or (second > 0 and largest / second >= config.dominance_ratio)
    )

    return PieFeature(
        total=total,
        count=count,
        max=largest,
        min=float(values.min()),
        mean=float(values.mean()),
        median=float(np.median(values)),
        std=float(values.std()),
        max_ratio=max_ratio,
        gini=gini_coefficient(values),
        has_key_item=has_key_item
    )


def decide_pie_type(feature: PieFeature, config: Optional[PieConfig] = None) -> PieType:
    """
    A key item always gets a full pie; otherwise even, many-slice data votes for a donut.

    Data without a positive slice has no shape to judge and stays a plain pie.
    """
    config = config or PieConfig()
    if feature.count == 0 or feature.has_key_item:
        return PieType.PIE

    score = 0
    if feature.count > config.donut_min_count:
        score += 1
    if feature.max_ratio < config.donut_max_ratio:
        score += 1
    if feature.gini < config.donut_max_gini:
        score += 1

    return PieType.CYCLE if score >= config.donut_min_score else PieType.PIE


def smart_merge_others(data: Sequence[SliceInput], config: Optional[PieConfig] = None) -> List[PieSlice]:
    """
    Fold the long tail into one "Other" slice.

    Slices are sorted descending and kept until the cumulative share reaches
    merge_share or merge_max_slices are kept. The rest is summed into "Other".
    The input is returned unchanged when there is nothing to fold.
    """
    config = config or PieConfig()
    slices = to_slices(data)
    if len(slices) <= config.merge_max_count:
        return slices

    ordered = sorted(slices, key=lambda s: s.value, reverse=True)
    total = sum(s.value for s in ordered)
    if not np.isfinite(total) or total <= 0:
        logger.warning(f"Pie total is {total} - slices left unmerged")
        return slices

    cut_index = -1
    accumulated = 0.0
    for i, item in enumerate(ordered):
        accumulated += item.value / total
        if accumulated >= config.merge_share or i >= config.merge_max_slices - 1:
            cut_index = i
            break

    if cut_index == -1 or cut_index == len(ordered) - 1:
        return slices

    tail = ordered[cut_index + 1:]
    other = PieSlice(name=config.other_label, value=sum(s.value for s in tail), is_other=True)
    logger.info(f"Merged {len(tail)} tail slices into '{config.other_label}' ({other.value:g})")
    return ordered[:cut_index + 1] + [other]


def mark_special_items(data: Sequence[SliceInput], feature: PieFeature,
                       config: Optional[PieConfig] = None) -> List[PieSlice]:
    """
    Flag outlier and key slices; values are left untouched.

    Outlier (above the upper IQR fence) is checked first and wins over key.
    """
    config = config or PieConfig()
    slices = to_slices(data)
    if not slices:
        return []

    _, upper, _ = iqr_fences([s.value for s in slices], config.outlier_iqr_multiplier)

    marked = []
    for item in slices:
        if item.value > upper:
            marked.append(replace(item, emphasis_type=EmphasisType.OUTLIER))
        elif feature.total > 0 and item.value / feature.total >= config.key_ratio:
            marked.append(replace(item, emphasis_type=EmphasisType.KEY))
        else:
            marked.append(item)
    return marked


def generate_colors(slices: Sequence[PieSlice]) -> List[str]:
    colors = []
    for index, item in enumerate(slices):
        if item.is_other:
            colors.append(OTHER_COLOR)
        elif item.emphasis_type == EmphasisType.OUTLIER:
            colors.append(OUTLIER_COLOR)
        else:
            hue = index * 360 / len(slices)
            colors.append(f"hsl({hue:g},70%,55%)")
    return colors


def generate_label(count: int) -> Dict[str, Any]:
    return {
        'show': True,
        'position': 'outside' if count > LABEL_OUTSIDE_ABOVE else 'inside',
        'minPercent': LABEL_MIN_PERCENT
    }


def generate_legend(count: int) -> Dict[str, Any]:
    vertical = count > LEGEND_VERTICAL_ABOVE
    return {
        'orient': 'vertical' if vertical else 'horizontal',
        'bottom': 'center' if vertical else 0
    }


@dataclass
class PieChartLayout:
    feature: PieFeature
    pie_type: PieType
    merged: List[PieSlice] = field(default_factory=list)
    marked: List[PieSlice] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    label: Dict[str, Any] = field(default_factory=dict)
    legend: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'feature': self.feature.to_dict(),
            'pieType': self.pie_type.value,
            'merged': [s.to_dict() for s in self.merged],
            'marked': [s.to_dict() for s in self.marked],
            'colors': list(self.colors),
            'label': dict(self.label),
            'legend': dict(self.legend)
        }


def build_pie_chart_layout(data: Sequence[SliceInput], config: Optional[PieConfig] = None) -> PieChartLayout:
    """
    Full pie pipeline: feature -> type -> merge -> mark -> hints.

    Args:
        data: {name, value} records or PieSlice objects
        config: Pie configuration

    Returns:
        PieChartLayout
    """
    config = config or PieConfig()
    slices = to_slices(data)
    feature = extract_pie_feature(slices, config)
    pie_type = decide_pie_type(feature, config)
    merged = smart_merge_others(slices, config)
    marked = mark_special_items(merged, feature, config)
    logger.info(f"Pie layout: {len(slices)} slices -> {len(merged)} after merge, type={pie_type.value}")

    return PieChartLayout(
        feature=feature,
        pie_type=pie_type,
        merged=merged,
        marked=marked,
        colors=generate_colors(marked),
        label=generate_label(len(marked)),
        legend=generate_legend(len(marked))
    )

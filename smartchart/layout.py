"""
Line Chart Layout Module

Assembles the engine's decisions for a line/bar chart into one layout object
handed to the rendering collaborator:

rows -> dual axis decision (+ left/right clustering) -> bar/line per axis
group -> highlight detection per metric -> marker annotations.

Series type priority for each field:
per-field override > axis group override > automatic decision > default
(left axis and single axis default to bar, right axis to line).
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .clustering.kmeans_pp import RandomState
from .config import DetectionToggles, EngineConfig
from .data_models import AxisAssignment, HighlightPoint, SeriesType
from .dual_axis import auto_assign_dual_axis
from .highlight import HighlightDetector
from .preprocess import column_values, get_metric_keys, to_frame
from .series_type import auto_set_series_type
from .utils import convert_numpy_types

# Configure logging
logger = logging.getLogger(__name__)

SINGLE_AXIS_NAME = "Y axis"
LEFT_AXIS_NAME = "Left Y axis"
RIGHT_AXIS_NAME = "Right Y axis"


@dataclass
class SeriesSpec:
    field: str
    name: str
    type: SeriesType
    y_axis_index: int = 0

    @property
    def smooth(self) -> bool:
        return self.type == SeriesType.LINE

    def to_dict(self) -> Dict[str, Any]:
        return {
            'field': self.field,
            'name': self.name,
            'type': self.type.value,
            'yAxisIndex': self.y_axis_index,
            'smooth': self.smooth
        }


@dataclass
class AxisSpec:
    name: str
    type: str = "value"

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'name': self.name}


@dataclass
class MarkerSpec:
    """Renderer-agnostic annotation: position is (row X value, metric Y value)."""
    index: int
    x: Any
    y: float
    name: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'coord': convert_numpy_types([self.x, self.y]),
            'name': self.name,
            'type': self.type
        }


@dataclass
class LineChartLayout:
    x_field: str
    axis: AxisAssignment
    y_axes: List[AxisSpec] = field(default_factory=list)
    series: List[SeriesSpec] = field(default_factory=list)
    group_types: Dict[str, SeriesType] = field(default_factory=dict)
    highlights: Dict[str, List[HighlightPoint]] = field(default_factory=dict)
    markers: Dict[str, List[MarkerSpec]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'xField': self.x_field,
            'axis': self.axis.to_dict(),
            'yAxis': [axis.to_dict() for axis in self.y_axes],
            'series': [spec.to_dict() for spec in self.series],
            'groupTypes': {group: kind.value for group, kind in self.group_types.items()},
            'highlights': {key: [p.to_dict() for p in points] for key, points in self.highlights.items()},
            'markers': {key: [m.to_dict() for m in marks] for key, marks in self.markers.items()}
        }


def build_y_axes(is_dual: bool) -> List[AxisSpec]:
    if not is_dual:
        return [AxisSpec(name=SINGLE_AXIS_NAME)]
    return [AxisSpec(name=LEFT_AXIS_NAME), AxisSpec(name=RIGHT_AXIS_NAME)]


def resolve_series_type(key: str, default_type: SeriesType, auto_type: Optional[SeriesType],
                        series_types: Optional[Mapping[str, Union[SeriesType, str]]] = None,
                        left_series_type: Optional[Union[SeriesType, str]] = None,
                        right_series_type: Optional[Union[SeriesType, str]] = None) -> SeriesType:
    """Pick the series type for one field following the override priority."""
    if series_types and key in series_types:
        return SeriesType(series_types[key])
    if left_series_type and default_type == SeriesType.BAR:
        return SeriesType(left_series_type)
    if right_series_type and default_type == SeriesType.LINE:
        return SeriesType(right_series_type)
    if auto_type is not None:
        return auto_type
    return default_type


def build_line_chart_layout(rows: Sequence[Mapping[str, Any]], x_field: str,
                            metric_keys: Optional[Sequence[str]] = None,
                            detect: Optional[DetectionToggles] = None,
                            series_types: Optional[Mapping[str, Union[SeriesType, str]]] = None,
                            left_series_type: Optional[Union[SeriesType, str]] = None,
                            right_series_type: Optional[Union[SeriesType, str]] = None,
                            series_names: Optional[Mapping[str, str]] = None,
                            auto_series_type: bool = True,
                            config: Optional[EngineConfig] = None,
                            random_state: RandomState = None) -> LineChartLayout:
    """
    Build the complete line/bar chart layout for a dataset.

    Args:
        rows: Row records
        x_field: X axis field name
        metric_keys: Metrics to plot (defaults to every other field)
        detect: Highlight detectors to run; None disables highlights
        series_types: Per-field series type overrides
        left_series_type: Override for bar-default series (single or left axis)
        right_series_type: Override for line-default series (right axis)
        series_names: Display names per field
        auto_series_type: Use the automatic bar/line decision
        config: Engine configuration
        random_state: Seed or numpy Generator for axis clustering

    Returns:
        LineChartLayout
    """
    config = config or EngineConfig()
    series_names = series_names or {}
    frame = to_frame(rows)

    if frame.empty or x_field not in frame.columns:
        logger.warning(f"No data or X field '{x_field}' missing - empty single axis layout")
        return LineChartLayout(x_field=x_field, axis=AxisAssignment(is_dual=False), y_axes=build_y_axes(False))

    keys = get_metric_keys(frame, x_field, metric_keys)
    axis = auto_assign_dual_axis(frame, keys, x_field, config, random_state)

    if axis.is_dual:
        groups = [
            ('left', list(axis.left), SeriesType.BAR),
            ('right', list(axis.right), SeriesType.LINE),
        ]
    else:
        groups = [('all', keys, SeriesType.BAR)]

    layout = LineChartLayout(x_field=x_field, axis=axis, y_axes=build_y_axes(axis.is_dual))

    for group, group_keys, default_type in groups:
        auto_type = None
        if auto_series_type and group_keys:
            auto_type = auto_set_series_type(frame, x_field, group_keys, config.series_type)
        layout.group_types[group] = auto_type or default_type

        for key in group_keys:
            layout.series.append(SeriesSpec(
                field=key,
                name=series_names.get(key, key),
                type=resolve_series_type(key, default_type, auto_type, series_types,
                                         left_series_type, right_series_type),
                y_axis_index=axis.axis_index(key)
            ))

    if detect is not None and detect.any_enabled():
        detector = HighlightDetector(config.highlight)
        x_values = column_values(frame, x_field)
        for spec in layout.series:
            points = detector.detect(column_values(frame, spec.field), spec.type, detect)
            layout.highlights[spec.field] = points
            layout.markers[spec.field] = [
                MarkerSpec(index=p.index, x=x_values[p.index], y=p.value, name=p.reason, type=p.type.value)
                for p in points
            ]

    group_summary = {group: kind.value for group, kind in layout.group_types.items()}
    logger.info(f"Line layout: {len(layout.series)} series, dual={axis.is_dual}, groups={group_summary}")
    return layout

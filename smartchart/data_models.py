"""
Data Models Module

Value objects produced by the engine. All of them are recomputed per call and
expose to_dict() returning plain Python scalars so results serialize to JSON
without numpy types leaking out.

Classes:
- MetricSeries, Stats: per-metric inputs and statistics
- AxisAssignment, Cluster: dual axis decision and clustering output
- HighlightPoint: a proposed marker on one series
- PieSlice, PieFeature: pie chart inputs and aggregate statistics
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class SeriesType(str, Enum):
    BAR = "bar"
    LINE = "line"


class HighlightType(str, Enum):
    OUTLIER = "outlier"
    TREND_DEVIATION = "trendDeviation"
    KEY_POINT = "keyPoint"


class PieType(str, Enum):
    PIE = "pie"
    CYCLE = "cycle"


class EmphasisType(str, Enum):
    KEY = "key"
    OUTLIER = "outlier"


class MetricKind(str, Enum):
    RATIO = "ratio"
    ABSOLUTE = "absolute"


# outlier > trendDeviation > keyPoint
HIGHLIGHT_PRIORITY = {
    HighlightType.OUTLIER: 3,
    HighlightType.TREND_DEVIATION: 2,
    HighlightType.KEY_POINT: 1,
}

FeatureVector = Tuple[float, float, float]


@dataclass(frozen=True)
class MetricSeries:
    """One metric column: a value slot per dataset row, raw as received."""
    key: str
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class Stats:
    """Descriptive statistics over the finite values of a series."""
    min: float = 0.0
    max: float = 0.0
    median: float = 0.0
    mean: float = 0.0
    std: float = 0.0
    q1: float = 0.0
    q3: float = 0.0

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def to_dict(self) -> Dict[str, float]:
        return {
            'min': float(self.min),
            'max': float(self.max),
            'median': float(self.median),
            'mean': float(self.mean),
            'std': float(self.std),
            'q1': float(self.q1),
            'q3': float(self.q3)
        }


@dataclass
class Cluster:
    """Transient k-means output: a centroid and the keys assigned to it."""
    centroid: Tuple[float, ...]
    members: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AxisAssignment:
    """
    Dual axis decision.

    When is_dual is True, left and right are disjoint and together cover every
    eligible metric key. When False both are empty and all metrics share axis 0.
    """
    is_dual: bool
    left: Tuple[str, ...] = ()
    right: Tuple[str, ...] = ()
    silhouette: Optional[float] = None

    def axis_index(self, key: str) -> int:
        return 1 if self.is_dual and key in self.right else 0

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'isDual': self.is_dual,
            'left': list(self.left),
            'right': list(self.right)
        }
        if self.silhouette is not None:
            result['silhouette'] = round(float(self.silhouette), 4)
        return result


@dataclass(frozen=True)
class HighlightPoint:
    """A proposed annotation: index always refers to the original dataset row."""
    index: int
    value: float
    type: HighlightType
    reason: str

    @property
    def priority(self) -> int:
        return HIGHLIGHT_PRIORITY[self.type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': int(self.index),
            'value': float(self.value),
            'type': self.type.value,
            'reason': self.reason
        }


@dataclass(frozen=True)
class PieSlice:
    name: str
    value: float
    is_other: bool = False
    emphasis_type: Optional[EmphasisType] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'name': self.name, 'value': float(self.value)}
        if self.is_other:
            result['isOther'] = True
        if self.emphasis_type is not None:
            result['emphasisType'] = self.emphasis_type.value
        return result


@dataclass(frozen=True)
class PieFeature:
    """Aggregate statistics over the positive slice values."""
    total: float = 0.0
    count: int = 0
    max: float = 0.0
    min: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    std: float = 0.0
    max_ratio: float = 0.0
    gini: float = 0.0
    has_key_item: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': float(self.total),
            'count': int(self.count),
            'max': float(self.max),
            'min': float(self.min),
            'mean': float(self.mean),
            'median': float(self.median),
            'std': float(self.std),
            'maxRatio': float(self.max_ratio),
            'gini': float(self.gini),
            'hasKeyItem': bool(self.has_key_item)
        }

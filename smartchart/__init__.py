from .config import (
    configure_logging,
    ClusteringConfig,
    DualAxisConfig,
    SeriesTypeConfig,
    HighlightConfig,
    PieConfig,
    EngineConfig,
    DetectionToggles,
    DEFAULT_CONFIG
)
from .data_models import (
    SeriesType,
    HighlightType,
    PieType,
    EmphasisType,
    MetricKind,
    MetricSeries,
    Stats,
    Cluster,
    AxisAssignment,
    HighlightPoint,
    PieSlice,
    PieFeature
)
from .features import compute_stats, feature_vector, gini_coefficient, iqr_fences
from .clustering import KMeansPlusPlus, kmeans_plus_plus, silhouette
from .dual_axis import (
    classify_metric,
    should_use_dual_axis,
    assign_left_right,
    auto_assign_dual_axis
)
from .series_type import (
    is_date_value,
    is_continuous_axis,
    extract_y_series,
    calc_linear_trend,
    auto_set_series_type
)
from .highlight import HighlightDetector, auto_detect_outliers_and_keys
from .pie import (
    extract_pie_feature,
    decide_pie_type,
    smart_merge_others,
    mark_special_items,
    build_pie_chart_layout,
    PieChartLayout
)
from .layout import build_line_chart_layout, LineChartLayout

__version__ = "0.1.0"

__all__ = [
    'configure_logging',
    'ClusteringConfig',
    'DualAxisConfig',
    'SeriesTypeConfig',
    'HighlightConfig',
    'PieConfig',
    'EngineConfig',
    'DetectionToggles',
    'DEFAULT_CONFIG',
    'SeriesType',
    'HighlightType',
    'PieType',
    'EmphasisType',
    'MetricKind',
    'MetricSeries',
    'Stats',
    'Cluster',
    'AxisAssignment',
    'HighlightPoint',
    'PieSlice',
    'PieFeature',
    'compute_stats',
    'feature_vector',
    'gini_coefficient',
    'iqr_fences',
    'KMeansPlusPlus',
    'kmeans_plus_plus',
    'silhouette',
    'classify_metric',
    'should_use_dual_axis',
    'assign_left_right',
    'auto_assign_dual_axis',
    'is_date_value',
    'is_continuous_axis',
    'extract_y_series',
    'calc_linear_trend',
    'auto_set_series_type',
    'HighlightDetector',
    'auto_detect_outliers_and_keys',
    'extract_pie_feature',
    'decide_pie_type',
    'smart_merge_others',
    'mark_special_items',
    'build_pie_chart_layout',
    'PieChartLayout',
    'build_line_chart_layout',
    'LineChartLayout'
]

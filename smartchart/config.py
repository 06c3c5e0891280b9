"""
Configuration module for the chart auto-configuration engine.

All tuning constants of the engine live here as pydantic models with
documented defaults. Every component takes its own config section so callers
can override a single threshold without touching the rest.
"""

import os
import logging
from typing import Optional

from pydantic import BaseModel, Field

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVEL_ENV = "SMARTCHART_LOG_LEVEL"

# Configure logging
logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None):
    """
    Configure root logging for processes embedding the engine (e.g. app.py).

    Args:
        level: Log level name. Falls back to $SMARTCHART_LOG_LEVEL, then INFO.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT
    )
    logger.info(f"Logging configured at {level_name}")


class ClusteringConfig(BaseModel):
    """k-means++ clustering used for left/right axis assignment."""
    max_iterations: int = Field(100, ge=1, description="Hard cap on Lloyd iterations")
    convergence_threshold: float = Field(0.001, gt=0, description="Centroid movement threshold (compared squared)")
    init_retries: int = Field(10, ge=1, description="Full init+clustering runs, best inertia kept")
    small_input_size: int = Field(10, ge=1, description="Inputs up to this many points get extra retries")
    small_input_retries: int = Field(20, ge=1, description="Minimum retries for small inputs")


class DualAxisConfig(BaseModel):
    """Dual Y-axis necessity decision."""
    gap_threshold: float = Field(10.0, gt=0, description="Magnitude gap (strictly greater) that forces two axes")


class SeriesTypeConfig(BaseModel):
    """Bar vs. line decision."""
    max_gap_for_crowding: int = Field(80, ge=1, description="rows x series above this renders as line")
    trend_r2_threshold: float = Field(0.6, ge=0, le=1)
    trend_slope_factor: float = Field(0.01, ge=0, description="Minimum |slope| as a fraction of value range")
    point_count_for_bonus: int = Field(12, ge=1)
    point_bonus: float = Field(-0.2, description="Vote threshold adjustment for long datasets")
    base_trend_threshold: float = Field(0.5, ge=0, le=1)
    min_valid_ratio: float = Field(0.5, ge=0, le=1, description="Share of finite values a field needs to count as a series")
    min_retained_ratio: float = Field(0.6, ge=0, le=1, description="Share of rows that must survive the IQR filter")
    high_confidence: float = Field(0.7, ge=0, le=1, description="Above this confidence the strict thresholds apply")
    moderate_factor: float = Field(0.8, gt=0, le=1, description="Threshold scale used below high_confidence")


class HighlightConfig(BaseModel):
    """Outlier / key point detection."""
    iqr_multiplier: float = Field(1.5, gt=0)
    trend_sigma: float = Field(2.5, gt=0)
    sharp_change_sigma: float = Field(2.0, gt=0)
    min_r2_for_trend: float = Field(0.4, ge=0, le=1)
    min_samples_for_iqr: int = Field(5, ge=1)
    min_samples_for_trend: int = Field(6, ge=3)
    min_samples_for_sharp_change: int = Field(3, ge=2)


class PieConfig(BaseModel):
    """Pie vs. donut decision, long tail merge and slice emphasis."""
    key_ratio: float = Field(0.4, gt=0, le=1, description="Share of total that makes a slice a key item")
    dominance_ratio: float = Field(1.8, gt=1, description="max / second-largest that makes a key item")
    donut_min_count: int = Field(5, ge=0, description="Slice count must exceed this to vote for donut")
    donut_max_ratio: float = Field(0.5, gt=0, le=1)
    donut_max_gini: float = Field(0.4, gt=0, le=1)
    donut_min_score: int = Field(2, ge=1, le=3)
    merge_max_count: int = Field(6, ge=1, description="Lists with this many slices or fewer are never merged")
    merge_share: float = Field(0.8, gt=0, le=1, description="Cumulative share kept before folding the tail")
    merge_max_slices: int = Field(6, ge=1, description="Maximum slices kept before folding the tail")
    outlier_iqr_multiplier: float = Field(1.5, gt=0)
    other_label: str = "Other"


class EngineConfig(BaseModel):
    """Complete engine configuration, every section independently defaultable."""
    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig)
    dual_axis: DualAxisConfig = Field(default_factory=DualAxisConfig)
    series_type: SeriesTypeConfig = Field(default_factory=SeriesTypeConfig)
    highlight: HighlightConfig = Field(default_factory=HighlightConfig)
    pie: PieConfig = Field(default_factory=PieConfig)


class DetectionToggles(BaseModel):
    """Which highlight sub-detectors run for a series."""
    check_outliers: bool = False
    check_max_min: bool = False
    check_sharp_change: bool = False
    check_trend_deviation: bool = False

    def any_enabled(self) -> bool:
        return any([
            self.check_outliers,
            self.check_max_min,
            self.check_sharp_change,
            self.check_trend_deviation
        ])


DEFAULT_CONFIG = EngineConfig()

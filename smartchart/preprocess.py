"""
Dataset preprocessing for the engine.

Rows arrive as a list of mappings (field name -> string / number / date).
They are loaded into an object-dtype DataFrame so raw value types survive
(an int stays an int, a date string stays a string) and the numeric checks
downstream see exactly what the caller sent. Cells missing from a row become
NaN and are treated as non-finite gaps.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from .data_models import MetricSeries

# Configure logging
logger = logging.getLogger(__name__)


def to_frame(rows: Optional[Sequence[Mapping[str, Any]]]) -> pd.DataFrame:
    """Load row records into a DataFrame without dtype inference."""
    if rows is None or len(rows) == 0:
        return pd.DataFrame()
    if isinstance(rows, pd.DataFrame):
        return rows.astype(object)
    return pd.DataFrame([dict(row) for row in rows], dtype=object)


def get_metric_keys(frame: pd.DataFrame, x_field: Optional[str],
                    keys: Optional[Sequence[str]] = None) -> List[str]:
    """
    Metric columns of a dataset.

    Args:
        frame: Dataset frame
        x_field: X axis field, never a metric
        keys: Optional explicit selection; unknown keys are dropped

    Returns:
        Metric keys in column order (or in the order given)
    """
    if keys is None:
        return [str(c) for c in frame.columns if c != x_field]

    selected = []
    for key in keys:
        if key == x_field:
            continue
        if key not in frame.columns:
            logger.warning(f"Metric '{key}' not found in dataset columns - skipping")
            continue
        if key not in selected:
            selected.append(key)
    return selected


def column_values(frame: pd.DataFrame, key: str) -> List[Any]:
    if key not in frame.columns:
        return []
    return frame[key].tolist()


def build_metric_series(frame: pd.DataFrame, keys: Sequence[str]) -> Dict[str, MetricSeries]:
    return {
        key: MetricSeries(key=key, values=tuple(column_values(frame, key)))
        for key in keys
    }

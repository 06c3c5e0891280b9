"""
Cluster Quality Module

Silhouette coefficient for a finished clustering, reported alongside the
dual axis assignment so callers can tell a clean split from a forced one.
"""

import logging
from typing import List, Mapping, Sequence

import numpy as np
from sklearn.metrics import silhouette_score

from .kmeans_pp import vectors_to_matrix

# Configure logging
logger = logging.getLogger(__name__)


def silhouette(vectors: Mapping[str, Sequence[float]], clusters: List[List[str]]) -> float:
    """
    Mean silhouette coefficient in [-1, 1], higher is better.

    Returns 0 when there are fewer than two non-empty clusters or when every
    cluster is a singleton (the score is undefined in both cases).
    """
    groups = [group for group in clusters if group]
    if len(groups) < 2:
        return 0.0

    keys = [key for group in groups for key in group]
    if len(groups) > len(keys) - 1:
        return 0.0

    labels = np.asarray([index for index, group in enumerate(groups) for _ in group])
    points = vectors_to_matrix({key: vectors[key] for key in keys})
    score = float(silhouette_score(points, labels, metric='euclidean'))
    return score if np.isfinite(score) else 0.0

"""
Clustering package for axis assignment.

Key Components:
- KMeansPlusPlus: k-means++ with restarts and empty cluster recovery
- silhouette: clustering quality score
"""

from .kmeans_pp import KMeansPlusPlus, KMeansResult, kmeans_plus_plus, vectors_to_matrix
from .quality import silhouette

__all__ = [
    'KMeansPlusPlus',
    'KMeansResult',
    'kmeans_plus_plus',
    'vectors_to_matrix',
    'silhouette'
]

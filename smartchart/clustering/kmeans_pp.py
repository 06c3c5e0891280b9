"""
K-means++ Clustering Module

Standard k-means++ over small sets of named feature vectors (one per metric),
used to split metrics across the left and right Y axes.

Classes:
- KMeansPlusPlus: seeding with D(x)^2 roulette selection, Lloyd iterations,
  farthest-point recovery of empty clusters, best-of-N restarts
- KMeansResult: clusters plus inertia and convergence details

Functions:
- kmeans_plus_plus: convenience wrapper returning member key groups
"""

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Union

import numpy as np
from scipy.spatial.distance import cdist

from ..config import ClusteringConfig
from ..data_models import Cluster

# Configure logging
logger = logging.getLogger(__name__)

# Squared distances at or below this are treated as duplicates during seeding
EPSILON = 1e-10

RandomState = Optional[Union[int, np.random.Generator]]


@dataclass
class KMeansResult:
    clusters: List[Cluster] = field(default_factory=list)
    inertia: float = 0.0
    iterations: int = 0
    converged: bool = True

    @property
    def groups(self) -> List[List[str]]:
        return [list(cluster.members) for cluster in self.clusters]


def vectors_to_matrix(vectors: Mapping[str, Sequence[float]]) -> np.ndarray:
    """
    Stack named vectors into an (n, d) float matrix.

    Raises:
        ValueError: if the vectors do not all share the same dimensionality.
            Mixed dimensions mean the caller built the features wrong.
    """
    keys = list(vectors.keys())
    if not keys:
        return np.empty((0, 0), dtype=float)

    dimension = len(vectors[keys[0]])
    if dimension == 0:
        raise ValueError(f"Feature vector for '{keys[0]}' is empty")
    for key in keys[1:]:
        if len(vectors[key]) != dimension:
            raise ValueError(
                f"Vector dimension mismatch: '{key}' has {len(vectors[key])} values, expected {dimension}"
            )
    return np.asarray([list(vectors[key]) for key in keys], dtype=float)


class KMeansPlusPlus:
    """
    k-means++ with restarts.

    Seeding is random by design. Pass random_state (an int seed or a
    numpy Generator) to make clustering reproducible.
    """

    def __init__(self, n_clusters: int = 2, config: Optional[ClusteringConfig] = None,
                 random_state: RandomState = None):
        self.n_clusters = n_clusters
        self.config = config or ClusteringConfig()
        self.rng = np.random.default_rng(random_state)

    def fit(self, vectors: Mapping[str, Sequence[float]]) -> KMeansResult:
        """
        Cluster the named vectors.

        Args:
            vectors: Mapping of key -> feature vector (all the same length)

        Returns:
            KMeansResult with non-empty clusters
        """
        keys = list(vectors.keys())
        points = vectors_to_matrix(vectors)
        n = len(keys)

        if n == 0 or self.n_clusters <= 0:
            return KMeansResult()

        k = min(self.n_clusters, n)
        if k == n:
            # Every point is its own cluster
            return KMeansResult(
                clusters=[Cluster(centroid=tuple(points[i]), members=[keys[i]]) for i in range(n)],
                inertia=0.0,
                iterations=0,
                converged=True
            )

        retries = self.config.init_retries
        if n <= self.config.small_input_size:
            retries = max(retries, self.config.small_input_retries)

        best = None
        for attempt in range(retries):
            centers = self._seed_centers(points, k)
            if centers is None:
                continue
            labels, iterations, converged = self._lloyd(points, centers)
            labels = self._fill_empty_clusters(points, labels, k)
            inertia = self._inertia(points, labels, k)
            if best is None or inertia < best[0]:
                best = (inertia, labels, iterations, converged)

        if best is None:
            logger.warning(f"k-means++ found fewer than {k} distinct seeds among {n} points, "
                           f"using evenly spaced centers")
            centers = self._evenly_spaced_centers(points, k)
            labels, iterations, converged = self._lloyd(points, centers)
            labels = self._fill_empty_clusters(points, labels, k)
            best = (self._inertia(points, labels, k), labels, iterations, converged)

        inertia, labels, iterations, converged = best
        centroids = self._centroids(points, labels, k)
        clusters = [
            Cluster(
                centroid=tuple(float(v) for v in centroids[c]),
                members=[keys[i] for i in range(n) if labels[i] == c]
            )
            for c in range(k)
        ]
        logger.debug(f"k-means++: {n} points, k={k}, {retries} runs, "
                     f"best inertia {inertia:.6g} after {iterations} iterations")

        return KMeansResult(
            clusters=clusters,
            inertia=float(inertia),
            iterations=iterations,
            converged=converged
        )

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def _seed_centers(self, points: np.ndarray, k: int) -> Optional[np.ndarray]:
        """
        One k-means++ seeding pass.

        Returns None when fewer than k distinct centers could be chosen
        (too many duplicate points).
        """
        n = len(points)
        chosen = [int(self.rng.integers(n))]

        for _ in range(1, k):
            distances = cdist(points, points[chosen], 'sqeuclidean').min(axis=1)
            distances[chosen] = 0.0
            distances[distances <= EPSILON] = 0.0

            candidates = np.flatnonzero(distances > 0)
            total = distances[candidates].sum()
            if candidates.size == 0 or total < EPSILON:
                return None

            # Roulette wheel: probability proportional to D(x)^2
            target = self.rng.random() * total
            cumulative = np.cumsum(distances[candidates])
            position = min(int(np.searchsorted(cumulative, target, side='left')), candidates.size - 1)
            chosen.append(int(candidates[position]))

        return points[chosen].copy()

    @staticmethod
    def _evenly_spaced_centers(points: np.ndarray, k: int) -> np.ndarray:
        n = len(points)
        step = n / k
        indices = [min(int(i * step), n - 1) for i in range(k)]
        return points[indices].copy()

    # ------------------------------------------------------------------
    # Lloyd iterations
    # ------------------------------------------------------------------

    def _lloyd(self, points: np.ndarray, centers: np.ndarray):
        threshold_sq = self.config.convergence_threshold ** 2
        previous = None
        labels = None
        iterations = 0
        converged = False

        while not converged and iterations < self.config.max_iterations:
            iterations += 1
            labels = np.argmin(cdist(points, centers, 'sqeuclidean'), axis=1)

            # Early stop: assignment did not change
            if previous is not None and np.array_equal(labels, previous):
                converged = True
                break
            previous = labels

            new_centers = self._update_centers(points, labels, centers)
            shift = np.sum((new_centers - centers) ** 2, axis=1)
            converged = bool(np.all(shift <= threshold_sq))
            centers = new_centers

        return labels, iterations, converged

    @staticmethod
    def _update_centers(points: np.ndarray, labels: np.ndarray, centers: np.ndarray) -> np.ndarray:
        new_centers = centers.copy()
        k = len(centers)
        for c in range(k):
            members = points[labels == c]
            if len(members) > 0:
                new_centers[c] = members.mean(axis=0)
                continue

            # Empty cluster: reseed at the point farthest from every other center
            others = [j for j in range(k) if j != c]
            if not others:
                new_centers[c] = points[0]
                continue
            nearest = cdist(points, centers[others], 'sqeuclidean').min(axis=1)
            new_centers[c] = points[int(np.argmax(nearest))]
            logger.debug(f"Reseeded empty cluster {c} at point {int(np.argmax(nearest))}")
        return new_centers

    @staticmethod
    def _centroids(points: np.ndarray, labels: np.ndarray, k: int) -> np.ndarray:
        centroids = np.zeros((k, points.shape[1]), dtype=float)
        for c in range(k):
            members = points[labels == c]
            if len(members) > 0:
                centroids[c] = members.mean(axis=0)
        return centroids

    def _fill_empty_clusters(self, points: np.ndarray, labels: np.ndarray, k: int) -> np.ndarray:
        """
        Move a point into every cluster that is still empty.

        The donor is the point farthest from its own centroid among clusters
        with more than one member. Requires n > k, which fit() guarantees.
        """
        labels = labels.copy()
        for c in range(k):
            if np.any(labels == c):
                continue
            centroids = self._centroids(points, labels, k)
            sizes = np.bincount(labels, minlength=k)
            spread = np.sum((points - centroids[labels]) ** 2, axis=1)
            spread[sizes[labels] <= 1] = -1.0
            donor = int(np.argmax(spread))
            labels[donor] = c
        return labels

    def _inertia(self, points: np.ndarray, labels: np.ndarray, k: int) -> float:
        centroids = self._centroids(points, labels, k)
        return float(np.sum((points - centroids[labels]) ** 2))


def kmeans_plus_plus(vectors: Mapping[str, Sequence[float]], k: int = 2,
                     config: Optional[ClusteringConfig] = None,
                     random_state: RandomState = None) -> List[List[str]]:
    """Cluster named vectors and return the member keys of each cluster."""
    return KMeansPlusPlus(n_clusters=k, config=config, random_state=random_state).fit(vectors).groups

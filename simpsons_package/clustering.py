"""
K-means partitioning of numeric feature matrices.

Feature matrices have one row per point. Cluster ids in results are 1-based so
they can be used directly as subgroup labels and plot colors.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np
from sklearn.cluster import KMeans

from .errors import InvalidClusterCount

logger = logging.getLogger(__name__)


@dataclass
class ClusteringResult:
    """Outcome of clustering for a single k."""
    k: int
    assignments: np.ndarray  # cluster id per row, 1..k
    cost: float              # within-cluster sum of squared distances
    centroids: np.ndarray

    @property
    def sizes(self) -> Dict[int, int]:
        ids, counts = np.unique(self.assignments, return_counts=True)
        return {int(i): int(c) for i, c in zip(ids, counts)}


def as_feature_matrix(features) -> np.ndarray:
    """Coerce features to a 2-D float array; 1-D input becomes a single column."""
    matrix = np.asarray(features, dtype=float)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    if matrix.ndim != 2:
        raise ValueError(f"Feature matrix must be 1-D or 2-D, got {matrix.ndim} dimensions")
    return matrix


def count_distinct_points(features) -> int:
    matrix = as_feature_matrix(features)
    if len(matrix) == 0:
        return 0
    return len(np.unique(matrix, axis=0))


def cluster_points(
    features,
    k: int,
    random_state: Optional[int] = None,
    max_iter: int = 300,
    n_init: int = 10,
) -> ClusteringResult:
    """
    Partition rows of a feature matrix into k clusters with Lloyd's k-means.

    Args:
        features: Array of shape (n_points, n_dims), or 1-D for a single dimension
        k: Number of clusters
        random_state: Seed for centroid initialization; None for non-deterministic runs
        max_iter: Iteration cap for each k-means run
        n_init: Number of initializations; the lowest-cost run is kept

    Returns:
        ClusteringResult with 1-based assignments and total cost

    Raises:
        InvalidClusterCount: If k < 1 or k exceeds the number of distinct points
    """
    matrix = as_feature_matrix(features)
    n_distinct = count_distinct_points(matrix)
    if k < 1 or k > n_distinct:
        raise InvalidClusterCount(
            f"Cannot form {k} clusters from {n_distinct} distinct points"
        )

    model = KMeans(
        n_clusters=k,
        algorithm="lloyd",
        n_init=n_init,
        max_iter=max_iter,
        random_state=random_state,
    )
    model.fit(matrix)

    result = ClusteringResult(
        k=k,
        assignments=model.labels_.astype(int) + 1,
        cost=float(model.inertia_),
        centroids=model.cluster_centers_,
    )
    logger.debug(f"[CLUSTER] k={k} cost={result.cost:.6g} sizes={result.sizes}")
    return result


def cost_curve(
    features,
    k_values: Iterable[int],
    random_state: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> List[ClusteringResult]:
    """
    Cluster the same features once per k.

    Each k is independent, so with max_workers > 1 they run on a thread pool.
    Results are returned in the order of k_values regardless of completion order.
    """
    matrix = as_feature_matrix(features)
    k_values = list(k_values)

    if not max_workers or max_workers <= 1:
        results = [cluster_points(matrix, k, random_state=random_state) for k in k_values]
    else:
        by_k: Dict[int, ClusteringResult] = {}
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(cluster_points, matrix, k, random_state): k
                for k in k_values
            }
            for future in as_completed(futures):
                by_k[futures[future]] = future.result()
        results = [by_k[k] for k in k_values]

    logger.info("[ELBOW] COSTS: " + ", ".join(f"k={r.k}:{r.cost:.4g}" for r in results))
    return results

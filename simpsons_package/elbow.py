"""
Elbow selection of a cluster count from a cost curve.

The cost curve holds within-cluster sums of squares for k = 1..cmax+1. A chord
is drawn from the first to the last point; the interior k farthest from that
chord is the visual elbow. If the curve reaches its minimum before the elbow,
the minimum wins instead, but never below cmin.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from .clustering import ClusteringResult
from .errors import InvalidClusterCount

logger = logging.getLogger(__name__)


@dataclass
class ElbowChoice:
    """Chosen cluster count plus the evidence behind it."""
    k: int
    result: Optional[ClusteringResult]  # None when selecting from bare costs
    costs: List[float]                  # costs[i] is the cost for k = i + 1
    distances: Dict[int, float] = field(default_factory=dict)  # k -> distance to chord
    elbow_k: int = 1                    # farthest-from-chord k before any guard
    min_cost_k: int = 1                 # k with the lowest cost
    guarded: bool = False               # True when the minimum-cost fallback was used

    @property
    def k_values(self) -> List[int]:
        return list(range(1, len(self.costs) + 1))


def chord_distances(costs: Sequence[float]) -> Dict[int, float]:
    """
    Perpendicular distance of each interior point (k, cost) to the chord.

    Args:
        costs: Costs for k = 1..K

    Returns:
        Mapping k -> distance for k in 2..K-1
    """
    n = len(costs)
    x1, y1 = 1.0, float(costs[0])
    x2, y2 = float(n), float(costs[-1])
    norm = math.hypot(y2 - y1, x2 - x1)

    distances = {}
    for k in range(2, n):
        numerator = abs((y2 - y1) * k - (x2 - x1) * float(costs[k - 1]) + x2 * y1 - y2 * x1)
        distances[k] = numerator / norm
    return distances


def select_elbow(
    curve: Sequence[Union[ClusteringResult, float]],
    cmin: int = 1,
    cmax: int = 5,
) -> ElbowChoice:
    """
    Pick a cluster count in [cmin, cmax] from costs for k = 1..cmax+1.

    Args:
        curve: ClusteringResults (or plain costs) for consecutive k starting at 1
        cmin: Smallest acceptable cluster count
        cmax: Largest acceptable cluster count

    Returns:
        ElbowChoice whose result is the already computed clustering for the chosen k
    """
    if cmin < 1 or cmin > cmax:
        raise InvalidClusterCount(f"Need 1 <= cmin <= cmax, got cmin={cmin}, cmax={cmax}")

    entries = list(curve)
    if len(entries) != cmax + 1:
        raise ValueError(f"Expected costs for k=1..{cmax + 1} ({cmax + 1} values), got {len(entries)}")

    results = None
    if all(isinstance(entry, ClusteringResult) for entry in entries):
        results = entries
        costs = [float(r.cost) for r in entries]
    else:
        costs = [float(c) for c in entries]

    distances = chord_distances(costs)
    elbow_k = max(distances, key=lambda k: (distances[k], -k)) if distances else 1
    min_cost_k = int(np.argmin(costs)) + 1

    guarded = min_cost_k < elbow_k
    chosen = max(cmin, min_cost_k) if guarded else elbow_k
    chosen = min(max(chosen, cmin), cmax)

    logger.info(
        f"[ELBOW] DECISION: elbow_k={elbow_k} min_cost_k={min_cost_k} "
        f"guarded={guarded} chosen={chosen}"
    )
    logger.debug(f"[ELBOW] DISTANCES: {distances}")

    return ElbowChoice(
        k=chosen,
        result=results[chosen - 1] if results is not None else None,
        costs=costs,
        distances=distances,
        elbow_k=elbow_k,
        min_cost_k=min_cost_k,
        guarded=guarded,
    )

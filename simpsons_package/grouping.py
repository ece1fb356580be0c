"""
Factor grouping: split dataset rows into subgroups by a factor column.

Discrete factors (categorical, or numeric with few distinct values) give one
subgroup per raw value in first-seen order. Continuous numeric factors are
clustered with k-means over k = 1..cmax+1 and the elbow k decides the split.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

import numpy as np
import pandas as pd

from .clustering import cost_curve
from .coercion import ColumnKind, column_kind
from .elbow import ElbowChoice, select_elbow
from .errors import ColumnNotFound, InvalidClusterCount

logger = logging.getLogger(__name__)

DISCRETE = "discrete"
CLUSTERED = "clustered"


@dataclass
class Subgroup:
    label: Any
    rows: np.ndarray  # positional row indices into the dataset

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class FactorGrouping:
    """Subgroups of a dataset for one factor column."""
    factor_column: str
    strategy: str  # DISCRETE or CLUSTERED
    subgroups: List[Subgroup] = field(default_factory=list)
    elbow: Optional[ElbowChoice] = None

    @property
    def labels(self) -> List[Any]:
        return [g.label for g in self.subgroups]


def factor_feature_matrix(values) -> np.ndarray:
    """
    One row per point: column 0 holds the factor, column 1 is reserved (zeros).
    """
    factor = np.asarray(values, dtype=float)
    return np.column_stack([factor, np.zeros_like(factor)])


def _group_discrete(factor: pd.Series) -> List[Subgroup]:
    positions = np.arange(len(factor))
    subgroups = []
    for value in pd.unique(factor):
        subgroups.append(Subgroup(label=value, rows=positions[(factor == value).to_numpy()]))
    return subgroups


def _group_clustered(
    factor: pd.Series,
    n_distinct: int,
    cmin: int,
    cmax: int,
    random_state: Optional[int],
    max_workers: Optional[int],
) -> FactorGrouping:
    # Every k tried must be achievable with the distinct values available
    search_max = min(cmax, n_distinct - 1)
    if cmin > search_max:
        raise InvalidClusterCount(
            f"Factor {factor.name} has {n_distinct} distinct values; "
            f"cannot search cluster counts up to cmin={cmin}"
        )

    features = factor_feature_matrix(factor)
    curve = cost_curve(
        features, range(1, search_max + 2),
        random_state=random_state, max_workers=max_workers,
    )
    choice = select_elbow(curve, cmin=cmin, cmax=search_max)

    positions = np.arange(len(factor))
    assignments = choice.result.assignments
    subgroups = [
        Subgroup(label=f"cluster {cid}", rows=positions[assignments == cid])
        for cid in range(1, choice.k + 1)
    ]
    return FactorGrouping(
        factor_column=factor.name, strategy=CLUSTERED, subgroups=subgroups, elbow=choice
    )


def group_by_factor(
    df: pd.DataFrame,
    factor_column: str,
    continuous_threshold: int = 5,
    cmin: int = 1,
    cmax: int = 5,
    random_state: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> FactorGrouping:
    """
    Split df's rows into subgroups by factor_column.

    Args:
        df: Dataset (not modified)
        factor_column: Column to group by
        continuous_threshold: Numeric factors with at least this many distinct
            values are clustered instead of grouped by raw value
        cmin: Lowest cluster count the elbow may choose
        cmax: Highest cluster count tried (clamped to distinct values - 1)
        random_state: Seed for k-means
        max_workers: Thread count for the per-k clustering runs

    Returns:
        FactorGrouping with subgroups in a stable order
    """
    if factor_column not in df.columns:
        raise ColumnNotFound(factor_column, df.columns)

    factor = df[factor_column].reset_index(drop=True)
    kind = column_kind(factor)
    n_distinct = factor.nunique()

    if kind is ColumnKind.CATEGORICAL or n_distinct < continuous_threshold:
        grouping = FactorGrouping(
            factor_column=factor_column, strategy=DISCRETE, subgroups=_group_discrete(factor)
        )
    else:
        grouping = _group_clustered(factor, n_distinct, cmin, cmax, random_state, max_workers)

    logger.info(
        f"[DATA] GROUPING: {factor_column} ({kind.value}, {n_distinct} distinct) -> "
        f"{grouping.strategy}, {len(grouping.subgroups)} subgroups"
    )
    return grouping


def factor_assignments(grouping: FactorGrouping, n_rows: int) -> np.ndarray:
    """1-based subgroup id for every row, in grouping order; 0 for unassigned rows."""
    ids = np.zeros(n_rows, dtype=int)
    for group_id, subgroup in enumerate(grouping.subgroups, start=1):
        ids[subgroup.rows] = group_id
    return ids

"""
Simpson's paradox detection.

A dataset shows the paradox for a (cause, effect, factor) triple when the
linear trend of cause on effect over all rows has the opposite sign of the
trend inside at least one factor subgroup.

Usage:

    from simpsons_package.detector import has_simpsons_paradox
    has_simpsons_paradox(df, "Atreatment", "recovery", "kidney_stone_size")

Fit orientation is fixed: cause is regressed on effect (cause ≈ a + b·effect)
for the overall fit and for every subgroup. A slope of zero has no sign, so a
flat subgroup never counts as a reversal and a flat overall trend cannot be
reversed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import numpy as np
import pandas as pd

from .coercion import to_numeric_column
from .errors import ColumnNotFound, DegenerateFit, InsufficientData, InvalidColumnRoles
from .grouping import FactorGrouping, group_by_factor
from .trend import describe_direction, fit_linear_trend, is_reversal

logger = logging.getLogger(__name__)


@dataclass
class SubgroupTrend:
    """Trend inside one factor subgroup; slope is None when the subgroup was skipped."""
    label: Any
    n_rows: int
    slope: Optional[float] = None
    reversed: bool = False
    skipped_reason: Optional[str] = None

    @property
    def retained(self) -> bool:
        return self.slope is not None

    @property
    def direction(self) -> str:
        return describe_direction(self.slope) if self.retained else "skipped"


@dataclass
class ParadoxReport:
    """Verdict plus everything needed to explain or plot it."""
    cause_column: str
    effect_column: str
    factor_column: str
    overall_slope: float
    subgroup_trends: List[SubgroupTrend]
    grouping: FactorGrouping
    paradox_detected: bool = False

    @property
    def overall_direction(self) -> str:
        return describe_direction(self.overall_slope)

    @property
    def reversed_subgroups(self) -> List[Any]:
        return [t.label for t in self.subgroup_trends if t.reversed]

    def to_frame(self) -> pd.DataFrame:
        """One row per subgroup with its slope, direction and reversal flag."""
        return pd.DataFrame([
            {
                "factor": self.factor_column,
                "subgroup": t.label,
                "n_rows": t.n_rows,
                "slope": t.slope if t.retained else np.nan,
                "direction": t.direction,
                "reversed": t.reversed,
                "skipped_reason": t.skipped_reason,
            }
            for t in self.subgroup_trends
        ])


def _check_columns(df: pd.DataFrame, cause_column: str, effect_column: str, factor_column: str) -> None:
    for column in (cause_column, effect_column, factor_column):
        if column not in df.columns:
            raise ColumnNotFound(column, df.columns)
    if cause_column == effect_column:
        raise InvalidColumnRoles(f"Cause and effect must be different columns, both are {cause_column!r}")


def detect_simpsons_paradox(
    df: pd.DataFrame,
    cause_column: str,
    effect_column: str,
    factor_column: str,
    continuous_threshold: int = 5,
    cmax: int = 5,
    cmin: int = 1,
    verbose: bool = True,
    random_state: Optional[int] = None,
    max_workers: Optional[int] = None,
    printer: Callable[[str], None] = print,
) -> ParadoxReport:
    """
    Check whether splitting df by factor_column reverses the cause/effect trend.

    Args:
        df: Dataset; not modified
        cause_column: Column regressed on the effect
        effect_column: Independent variable of the fits
        factor_column: Candidate confounder used to form subgroups
        continuous_threshold: Distinct-value count at which a numeric factor is clustered
        cmax: Largest cluster count tried for continuous factors
        cmin: Smallest cluster count the elbow selection may return
        verbose: Write a human-readable trace through printer
        random_state: Seed for k-means, for reproducible groupings
        max_workers: Threads used for the per-k clustering runs
        printer: Sink for the verbose trace

    Returns:
        ParadoxReport; paradox_detected holds the verdict

    Raises:
        ColumnNotFound, InvalidColumnRoles, TypeMismatch: Bad input columns
        InsufficientData, DegenerateFit: The full dataset cannot be fit
        InvalidClusterCount: A continuous factor cannot be clustered as requested
    """
    _check_columns(df, cause_column, effect_column, factor_column)
    logger.info(f"[DATA] INPUT: {len(df)} rows, cause={cause_column}, effect={effect_column}, factor={factor_column}")

    causes = to_numeric_column(df[cause_column])
    effects = to_numeric_column(df[effect_column])

    overall_slope = fit_linear_trend(effects, causes)
    logger.info(f"[FIT] OVERALL: slope={overall_slope:+.6g}")
    if verbose:
        printer(f"Overall linear trend from cause to effect is {describe_direction(overall_slope)}.")

    grouping = group_by_factor(
        df, factor_column,
        continuous_threshold=continuous_threshold,
        cmin=cmin, cmax=cmax,
        random_state=random_state, max_workers=max_workers,
    )

    trends = []
    for position, subgroup in enumerate(grouping.subgroups, start=1):
        trend = SubgroupTrend(label=subgroup.label, n_rows=len(subgroup))
        try:
            trend.slope = fit_linear_trend(effects[subgroup.rows], causes[subgroup.rows])
        except (InsufficientData, DegenerateFit) as e:
            trend.skipped_reason = str(e)
            logger.debug(f"[FIT] SKIP: subgroup {subgroup.label!r} ({len(subgroup)} rows): {e}")
        else:
            trend.reversed = is_reversal(trend.slope, overall_slope)
            logger.debug(f"[FIT] SUBGROUP: {subgroup.label!r} slope={trend.slope:+.6g} reversed={trend.reversed}")
        trends.append(trend)

        if verbose:
            if trend.retained:
                printer(f"Subgroup {position} ({subgroup.label}) trend is {trend.direction}.")
                if trend.reversed:
                    printer(f"  Subgroup {position} ({subgroup.label}) reverses the overall trend: Simpson's paradox.")
            else:
                printer(f"Subgroup {position} ({subgroup.label}) skipped: {trend.skipped_reason}")

    report = ParadoxReport(
        cause_column=cause_column,
        effect_column=effect_column,
        factor_column=factor_column,
        overall_slope=overall_slope,
        subgroup_trends=trends,
        grouping=grouping,
        paradox_detected=any(t.reversed for t in trends),
    )
    logger.info(
        f"[DECISION] PARADOX: {report.paradox_detected} "
        f"(reversed subgroups: {report.reversed_subgroups})"
    )
    if verbose:
        verdict = "exhibits" if report.paradox_detected else "does not exhibit"
        printer(f"Data grouped by {factor_column} {verdict} Simpson's paradox.")
    return report


def has_simpsons_paradox(
    df: pd.DataFrame,
    cause_column: str,
    effect_column: str,
    factor_column: str,
    continuous_threshold: int = 5,
    cmax: int = 5,
    cmin: int = 1,
    verbose: bool = True,
    random_state: Optional[int] = None,
    max_workers: Optional[int] = None,
    printer: Callable[[str], None] = print,
) -> bool:
    """True if the data aggregated by factor_column exhibits Simpson's paradox."""
    report = detect_simpsons_paradox(
        df, cause_column, effect_column, factor_column,
        continuous_threshold=continuous_threshold, cmax=cmax, cmin=cmin,
        verbose=verbose, random_state=random_state,
        max_workers=max_workers, printer=printer,
    )
    return report.paradox_detected

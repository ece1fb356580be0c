"""
Whole-dataset paradox analysis for one cause/effect pair.

simpsons_analysis() tries every other column as the confounding factor,
collects one ParadoxReport per factor, and renders a short narrative:

    from simpsons_package.analysis import simpsons_analysis
    summary = simpsons_analysis(cars_df, "MPG", "Horsepower", show_plots=False)
    print(summary.narrative)
    summary.summary_df
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
from jinja2 import Template

from .coercion import to_numeric_column
from .config import AnalysisSettings
from .detector import ParadoxReport, detect_simpsons_paradox
from .errors import ColumnNotFound, InvalidColumnRoles, SimpsonsError
from .trend import describe_direction, fit_linear_trend
from .visualization import plot_clusters, plot_elbow, plot_factor_grouping

logger = logging.getLogger(__name__)

NARRATIVE_TEMPLATE = """\
Overall, {{ cause }} trends {{ overall_direction }} with {{ effect }} (slope {{ "%+.4g"|format(overall_slope) }}).
{% if paradox_factors -%}
Simpson's paradox found for {{ paradox_factors|length }} of {{ n_factors }} factor(s):
{% for row in paradox_rows -%}
  - {{ row.factor }} ({{ row.strategy }}, {{ row.n_subgroups }} subgroups): reversed in {{ row.reversed }}
{% endfor -%}
{% else -%}
No factor among {{ n_factors }} reverses the overall trend.
{% endif -%}
{% if failed -%}
Factors that could not be analyzed: {{ failed|join(', ') }}.
{% endif -%}
"""


@dataclass
class AnalysisSummary:
    """Per-factor results of simpsons_analysis()."""
    cause_column: str
    effect_column: str
    overall_slope: float
    reports: Dict[str, ParadoxReport] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    summary_df: pd.DataFrame = None
    narrative: str = ""
    figures: Dict[str, Any] = field(default_factory=dict)

    @property
    def paradox_factors(self) -> List[str]:
        return [name for name, report in self.reports.items() if report.paradox_detected]


def _summary_frame(reports: Dict[str, ParadoxReport], errors: Dict[str, str]) -> pd.DataFrame:
    rows = []
    for factor, report in reports.items():
        retained = [t for t in report.subgroup_trends if t.retained]
        rows.append({
            'factor': factor,
            'strategy': report.grouping.strategy,
            'n_subgroups': len(report.subgroup_trends),
            'n_retained': len(retained),
            'clusters_k': report.grouping.elbow.k if report.grouping.elbow else None,
            'paradox': report.paradox_detected,
            'reversed': ', '.join(str(label) for label in report.reversed_subgroups),
            'error': None,
        })
    for factor, message in errors.items():
        rows.append({'factor': factor, 'paradox': False, 'error': message})
    columns = ['factor', 'strategy', 'n_subgroups', 'n_retained', 'clusters_k', 'paradox', 'reversed', 'error']
    return pd.DataFrame(rows, columns=columns)


def render_narrative(summary: AnalysisSummary) -> str:
    paradox_rows = [
        {
            'factor': factor,
            'strategy': report.grouping.strategy,
            'n_subgroups': len(report.subgroup_trends),
            'reversed': ', '.join(str(label) for label in report.reversed_subgroups),
        }
        for factor, report in summary.reports.items() if report.paradox_detected
    ]
    return Template(NARRATIVE_TEMPLATE).render(
        cause=summary.cause_column,
        effect=summary.effect_column,
        overall_direction=describe_direction(summary.overall_slope),
        overall_slope=summary.overall_slope,
        paradox_factors=summary.paradox_factors,
        paradox_rows=paradox_rows,
        n_factors=len(summary.reports) + len(summary.errors),
        failed=list(summary.errors),
    )


def simpsons_analysis(
    df: pd.DataFrame,
    cause_column: str,
    effect_column: str,
    show_plots: bool = True,
    factors: Optional[List[str]] = None,
    settings: Optional[AnalysisSettings] = None,
    printer: Callable[[str], None] = print,
) -> AnalysisSummary:
    """
    Check every other column of df as a possible confounder of cause vs effect.

    Args:
        df: Dataset; not modified
        cause_column: Cause column
        effect_column: Effect column
        show_plots: Build figures (elbow curves, factor groupings, all-column clusters)
        factors: Factor columns to try; defaults to every column except cause and effect
        settings: Detection parameters; defaults to AnalysisSettings()
        printer: Sink for the per-factor trace and the final narrative when verbose

    Returns:
        AnalysisSummary. A factor whose analysis fails is recorded in errors
        rather than aborting the others; failures of the overall fit propagate.
    """
    settings = settings or AnalysisSettings()
    for column in (cause_column, effect_column):
        if column not in df.columns:
            raise ColumnNotFound(column, df.columns)
    if cause_column == effect_column:
        raise InvalidColumnRoles(f"Cause and effect must be different columns, both are {cause_column!r}")

    overall_slope = fit_linear_trend(to_numeric_column(df[effect_column]), to_numeric_column(df[cause_column]))
    if factors is None:
        factors = [c for c in df.columns if c not in (cause_column, effect_column)]

    summary = AnalysisSummary(cause_column=cause_column, effect_column=effect_column, overall_slope=overall_slope)
    for factor in factors:
        if settings.verbose:
            printer(f"--- factor: {factor} ---")
        try:
            summary.reports[factor] = detect_simpsons_paradox(
                df, cause_column, effect_column, factor, printer=printer, **settings.as_kwargs()
            )
        except SimpsonsError as e:
            logger.warning(f"Skipping factor {factor}: {e}")
            summary.errors[factor] = str(e)

    summary.summary_df = _summary_frame(summary.reports, summary.errors)
    summary.narrative = render_narrative(summary)
    if settings.verbose:
        printer(summary.narrative)

    if show_plots:
        for factor, report in summary.reports.items():
            summary.figures[f"{factor}_grouping"] = plot_factor_grouping(df, report)
            if report.grouping.elbow is not None:
                summary.figures[f"{factor}_elbow"] = plot_elbow(report.grouping.elbow)
        try:
            summary.figures["all_columns_clusters"] = plot_clusters(
                df, cause_column, effect_column, random_state=settings.random_state
            )
        except SimpsonsError as e:
            logger.warning(f"Skipping all-column cluster plot: {e}")

    logger.info(f"[DECISION] ANALYSIS: paradox factors={summary.paradox_factors}, failed={list(summary.errors)}")
    return summary

"""
Plots for paradox analysis: scatter plots of cause vs effect colored by cluster
or subgroup, per-subgroup trend lines, and the elbow cost curve.

All functions return the matplotlib Figure and leave displaying/saving to the caller.
"""

import logging
from typing import List, Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

from .clustering import cost_curve
from .coercion import encode_frame, to_numeric_column
from .detector import ParadoxReport
from .elbow import ElbowChoice
from .grouping import factor_assignments

logger = logging.getLogger(__name__)

# Font styling constants for consistent appearance
FONTS = {
    'title': {'size': 14, 'weight': 'normal'},
    'axis_label': {'size': 12, 'weight': 'normal'},
    'annotation': {'size': 10, 'weight': 'bold'},
}

COLORS = {
    'overall_trend': '#34495e',   # Dark blue-gray
    'chord': '#BDC3C7',           # Light gray
    'elbow': '#e74c3c',           # Red
    'curve': '#3498DB',           # Blue
}

# Light rainbow, ordered so neighbouring cluster ids contrast
CLUSTER_PALETTE = [
    '#6a8ed6', '#f2a65a', '#7bc96f', '#e56b6f', '#b388eb',
    '#5cc8c8', '#f6d55c', '#c97b63', '#f08bb5', '#9aa5b1',
]


def cluster_color(cluster_id: int) -> str:
    """Color for a 1-based cluster id; wraps around the palette."""
    return CLUSTER_PALETTE[(int(cluster_id) - 1) % len(CLUSTER_PALETTE)]


def _scatter_by_id(ax: plt.Axes, x, y, ids, labels=None) -> None:
    for cid in np.unique(ids):
        mask = ids == cid
        label = labels[cid - 1] if labels is not None else f"cluster {cid}"
        ax.scatter(x[mask], y[mask], s=25, alpha=0.75, color=cluster_color(cid),
                   edgecolors='white', linewidths=0.5, label=str(label))


def _trend_line(ax: plt.Axes, x, y, color: str, style: str = '--', label: Optional[str] = None) -> None:
    # Fit uses the package orientation (cause on effect); draw it in plot axes
    if len(x) < 2 or np.ptp(x) == 0 or np.ptp(y) == 0:
        return
    slope, intercept = np.polyfit(y, x, 1)
    y_line = np.linspace(y.min(), y.max(), 50)
    ax.plot(slope * y_line + intercept, y_line, style, color=color, linewidth=1.5, label=label)


def plot_clusters(
    df: pd.DataFrame,
    cause_column: str,
    effect_column: str,
    maxclusters: int = 4,
    random_state: Optional[int] = None,
) -> plt.Figure:
    """
    Cluster all (coerced) columns of df for k = 2..maxclusters and plot cause vs
    effect once per k, colored by cluster.
    """
    if maxclusters < 2:
        raise ValueError(f"maxclusters must be at least 2, got {maxclusters}")

    encoded = encode_frame(df)
    results = cost_curve(encoded.to_numpy(dtype=float), range(2, maxclusters + 1), random_state=random_state)
    x = encoded[cause_column].to_numpy()
    y = encoded[effect_column].to_numpy()

    fig, axes = plt.subplots(len(results), 1, figsize=(8, 3.2 * len(results)), squeeze=False)
    for ax, result in zip(axes[:, 0], results):
        _scatter_by_id(ax, x, y, result.assignments)
        ax.set_title(f"k = {result.k} (cost {result.cost:,.1f})", fontsize=FONTS['title']['size'])
        ax.set_ylabel(effect_column, fontsize=FONTS['axis_label']['size'])
        ax.legend(loc='best', fontsize=8)
    axes[-1, 0].set_xlabel(cause_column, fontsize=FONTS['axis_label']['size'])
    fig.tight_layout()
    return fig


def plot_by_factor(
    df: pd.DataFrame,
    cause_column: str,
    effect_column: str,
    factor_column: str,
    n_clusters: int = 2,
    random_state: Optional[int] = None,
) -> plt.Figure:
    """Cluster on the (coerced) factor alone and plot cause vs effect colored by cluster."""
    factor = to_numeric_column(df[factor_column])
    result = cost_curve(factor, [n_clusters], random_state=random_state)[0]

    fig, ax = plt.subplots(figsize=(8, 5))
    _scatter_by_id(ax, to_numeric_column(df[cause_column]), to_numeric_column(df[effect_column]),
                   result.assignments)
    ax.set_title(f"{cause_column} vs {effect_column}, clustered by {factor_column}",
                 fontsize=FONTS['title']['size'])
    ax.set_xlabel(cause_column, fontsize=FONTS['axis_label']['size'])
    ax.set_ylabel(effect_column, fontsize=FONTS['axis_label']['size'])
    ax.legend(loc='best', fontsize=8)
    fig.tight_layout()
    return fig


def plot_factor_grouping(df: pd.DataFrame, report: ParadoxReport) -> plt.Figure:
    """
    Scatter of cause vs effect colored by the report's subgroups, with the overall
    trend and each retained subgroup's trend drawn as lines.
    """
    sns.set_style("whitegrid")
    x = to_numeric_column(df[report.cause_column])
    y = to_numeric_column(df[report.effect_column])
    ids = factor_assignments(report.grouping, len(df))
    labels: List[str] = [str(label) for label in report.grouping.labels]

    fig, ax = plt.subplots(figsize=(9, 6))
    _scatter_by_id(ax, x, y, ids, labels=labels)
    _trend_line(ax, x, y, COLORS['overall_trend'], style='-',
                label=f"overall ({report.overall_direction})")
    for cid, (subgroup, trend) in enumerate(zip(report.grouping.subgroups, report.subgroup_trends), start=1):
        if trend.retained:
            _trend_line(ax, x[subgroup.rows], y[subgroup.rows], cluster_color(cid))

    flag = "Simpson's paradox" if report.paradox_detected else "no paradox"
    ax.set_title(f"{report.cause_column} vs {report.effect_column} by {report.factor_column}: {flag}",
                 fontsize=FONTS['title']['size'])
    ax.set_xlabel(report.cause_column, fontsize=FONTS['axis_label']['size'])
    ax.set_ylabel(report.effect_column, fontsize=FONTS['axis_label']['size'])
    ax.legend(loc='best', fontsize=8)
    sns.despine(fig=fig)
    fig.tight_layout()
    return fig


def plot_elbow(choice: ElbowChoice) -> plt.Figure:
    """Cost curve with the chord used for elbow selection and the chosen k."""
    ks = choice.k_values
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ks, choice.costs, 'o-', color=COLORS['curve'], label='cost')
    ax.plot([ks[0], ks[-1]], [choice.costs[0], choice.costs[-1]], '--', color=COLORS['chord'], label='chord')
    ax.scatter([choice.k], [choice.costs[choice.k - 1]], s=120, color=COLORS['elbow'], zorder=3,
               label=f"chosen k = {choice.k}")
    if choice.guarded:
        ax.annotate("minimum before elbow", (choice.k, choice.costs[choice.k - 1]),
                    xytext=(10, 10), textcoords='offset points',
                    fontsize=FONTS['annotation']['size'])
    ax.set_xticks(ks)
    ax.set_xlabel("number of clusters", fontsize=FONTS['axis_label']['size'])
    ax.set_ylabel("within-cluster sum of squares", fontsize=FONTS['axis_label']['size'])
    ax.legend(loc='best', fontsize=8)
    fig.tight_layout()
    return fig

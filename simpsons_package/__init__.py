"""
Simpson's paradox detection package.

This package provides tools for checking whether a cause/effect trend reverses
inside the subgroups of a confounding factor, clustering continuous factors
with an elbow-selected cluster count, and plotting the results.
"""

__version__ = "0.1.0"

# Import key functions from detector
from .detector import (
    has_simpsons_paradox,
    detect_simpsons_paradox,
    ParadoxReport,
    SubgroupTrend
)

# Import building blocks
from .coercion import column_kind, to_numeric_column, encode_frame, ColumnKind
from .trend import fit_linear_trend, trend_sign, describe_direction
from .clustering import cluster_points, cost_curve, ClusteringResult
from .elbow import select_elbow, ElbowChoice
from .grouping import group_by_factor, factor_assignments, FactorGrouping, Subgroup

# Import whole-dataset analysis and configuration
from .analysis import simpsons_analysis, AnalysisSummary
from .config import AnalysisSettings, load_settings

# Import plotting helpers
from .visualization import (
    plot_clusters,
    plot_by_factor,
    plot_factor_grouping,
    plot_elbow,
    cluster_color
)

# Import data helpers
from .data_io import load_dataset
from .synthetic import make_paradox_data, make_kidney_stone_data

from .errors import (
    SimpsonsError,
    ColumnNotFound,
    InvalidColumnRoles,
    InsufficientData,
    DegenerateFit,
    InvalidClusterCount,
    TypeMismatch,
    GenerationFailed
)

# Define what should be available in "from simpsons_package import *"
__all__ = [
    # Detection
    'has_simpsons_paradox',
    'detect_simpsons_paradox',
    'ParadoxReport',
    'SubgroupTrend',

    # Building blocks
    'column_kind',
    'to_numeric_column',
    'encode_frame',
    'ColumnKind',
    'fit_linear_trend',
    'trend_sign',
    'describe_direction',
    'cluster_points',
    'cost_curve',
    'ClusteringResult',
    'select_elbow',
    'ElbowChoice',
    'group_by_factor',
    'factor_assignments',
    'FactorGrouping',
    'Subgroup',

    # Analysis and configuration
    'simpsons_analysis',
    'AnalysisSummary',
    'AnalysisSettings',
    'load_settings',

    # Plotting
    'plot_clusters',
    'plot_by_factor',
    'plot_factor_grouping',
    'plot_elbow',
    'cluster_color',

    # Data
    'load_dataset',
    'make_paradox_data',
    'make_kidney_stone_data',

    # Errors
    'SimpsonsError',
    'ColumnNotFound',
    'InvalidColumnRoles',
    'InsufficientData',
    'DegenerateFit',
    'InvalidClusterCount',
    'TypeMismatch',
    'GenerationFailed'
]

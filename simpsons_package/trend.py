"""Simple linear trend fitting used for overall and per-subgroup slopes."""

import logging
from typing import Sequence

import numpy as np

from .errors import DegenerateFit, InsufficientData

logger = logging.getLogger(__name__)

# Slopes within this distance of zero have no direction
ZERO_SLOPE_TOLERANCE = 1e-12


def fit_linear_trend(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Fit ``y ≈ a + b·x`` by ordinary least squares and return the slope ``b``.

    Args:
        xs: Independent variable
        ys: Dependent variable, same length as xs

    Returns:
        The degree-1 coefficient of the fit

    Raises:
        InsufficientData: Fewer than two points
        DegenerateFit: Constant xs or ys, non-finite input, or a non-finite slope
    """
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"xs and ys must have the same length ({len(x)} != {len(y)})")
    if len(x) < 2:
        raise InsufficientData(f"Need at least 2 points for a linear fit, got {len(x)}")
    if not (np.isfinite(x).all() and np.isfinite(y).all()):
        raise DegenerateFit("Input contains non-finite values")
    if np.ptp(x) == 0:
        raise DegenerateFit("Independent variable has zero variance")
    if np.ptp(y) == 0:
        # A constant response fits with the intercept alone
        raise DegenerateFit("Dependent variable is constant; fit has a single coefficient")

    slope, intercept = np.polyfit(x, y, 1)
    if not np.isfinite(slope):
        raise DegenerateFit(f"Fit produced a non-finite slope ({slope})")

    logger.debug(f"[FIT] n={len(x)} slope={slope:+.6g} intercept={intercept:+.6g}")
    return float(slope)


def trend_sign(slope: float, tolerance: float = ZERO_SLOPE_TOLERANCE) -> int:
    """Return -1, 0 or +1; slopes within tolerance of zero have sign 0."""
    if abs(slope) <= tolerance:
        return 0
    return 1 if slope > 0 else -1


def describe_direction(slope: float, tolerance: float = ZERO_SLOPE_TOLERANCE) -> str:
    return {1: "positive", -1: "negative", 0: "flat"}[trend_sign(slope, tolerance)]


def is_reversal(slope: float, reference_slope: float, tolerance: float = ZERO_SLOPE_TOLERANCE) -> bool:
    """True when slope and reference_slope have strictly opposite signs."""
    sign = trend_sign(slope, tolerance)
    reference = trend_sign(reference_slope, tolerance)
    return sign != 0 and sign == -reference

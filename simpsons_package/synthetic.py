"""
Synthetic datasets with a known Simpson's paradox.

make_paradox_data() draws groups whose internal trend runs one way while the
group offsets push the pooled trend the other way, and keeps drawing until the
detector confirms the paradox (bounded by max_attempts).
"""

import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .detector import has_simpsons_paradox
from .errors import GenerationFailed

logger = logging.getLogger(__name__)


def _draw_groups(
    rng: np.random.Generator,
    n_groups: int,
    n_per_group: int,
    cause_column: str,
    effect_column: str,
    factor_column: str,
    within_slope: float,
    between_slope: float,
    spacing: float,
    noise: float,
    continuous_factor: bool,
) -> pd.DataFrame:
    frames = []
    for g in range(n_groups):
        center = g * spacing
        effect = rng.uniform(center - spacing / 3, center + spacing / 3, n_per_group)
        cause = (
            within_slope * (effect - center)
            + between_slope * center
            + rng.normal(0, noise, n_per_group)
        )
        if continuous_factor:
            factor = center + rng.normal(0, spacing / 100, n_per_group)
        else:
            factor = np.repeat(f"group_{g + 1}", n_per_group)
        frames.append(pd.DataFrame({cause_column: cause, effect_column: effect, factor_column: factor}))
    return pd.concat(frames, ignore_index=True)


def make_paradox_data(
    n_groups: int = 3,
    n_per_group: int = 50,
    cause_column: str = "cause",
    effect_column: str = "effect",
    factor_column: str = "factor",
    within_slope: float = 1.0,
    between_slope: float = -2.0,
    spacing: float = 10.0,
    noise: float = 1.0,
    continuous_factor: bool = False,
    random_state: Optional[int] = None,
    max_attempts: int = 20,
) -> Tuple[pd.DataFrame, Tuple[str, str, str]]:
    """
    Generate a dataset that exhibits Simpson's paradox.

    Args:
        n_groups: Number of factor levels (at least 2)
        n_per_group: Rows drawn per level
        cause_column, effect_column, factor_column: Output column names
        within_slope: Cause-on-effect slope inside each group
        between_slope: Slope of the group centers; opposite sign to within_slope
        spacing: Distance between group centers along the effect axis
        noise: Standard deviation of the cause noise
        continuous_factor: Emit the factor as jittered numbers around each group
            center instead of string labels
        random_state: Seed for reproducible output
        max_attempts: Draws tried before giving up

    Returns:
        (DataFrame, (cause_column, effect_column, factor_column))

    Raises:
        GenerationFailed: No draw produced a detectable paradox
    """
    if n_groups < 2:
        raise ValueError(f"n_groups must be at least 2, got {n_groups}")
    if within_slope * between_slope >= 0:
        raise ValueError("within_slope and between_slope must have opposite signs")

    rng = np.random.default_rng(random_state)
    triple = (cause_column, effect_column, factor_column)

    for attempt in range(1, max_attempts + 1):
        df = _draw_groups(
            rng, n_groups, n_per_group, cause_column, effect_column, factor_column,
            within_slope, between_slope, spacing, noise, continuous_factor,
        )
        if has_simpsons_paradox(df, *triple, verbose=False, random_state=random_state):
            logger.info(f"[DATA] SYNTHETIC: paradox found on attempt {attempt}")
            return df, triple
        logger.debug(f"[DATA] SYNTHETIC: attempt {attempt} produced no paradox, redrawing")

    raise GenerationFailed(f"No Simpson's paradox after {max_attempts} attempts")


def make_kidney_stone_data() -> pd.DataFrame:
    """
    Classic kidney stone treatment data (Charig et al., 1986).

    Treatment A does better within both stone sizes but worse overall.
    Columns: Atreatment (1 for A, 0 for B), recovery (0/1), kidney_stone_size.
    """
    cells = [
        # (treatment, size, recovered, count)
        ("A", "small", 1, 81), ("A", "small", 0, 6),
        ("B", "small", 1, 234), ("B", "small", 0, 36),
        ("B", "large", 1, 55), ("B", "large", 0, 25),
        ("A", "large", 1, 192), ("A", "large", 0, 71),
    ]
    rows = []
    for treatment, size, recovered, count in cells:
        rows.extend([(1 if treatment == "A" else 0, recovered, size)] * count)
    return pd.DataFrame(rows, columns=["Atreatment", "recovery", "kidney_stone_size"])

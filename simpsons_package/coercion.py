"""
Numeric coercion of dataset columns.

Columns are resolved once to a ColumnKind (numeric or categorical). Categorical
columns are encoded as 1-based ranks of their distinct values ordered by
``str(value)``, so ``["b", "a", "c", "a"]`` becomes ``[2, 1, 3, 1]``.
"""

import logging
import numbers
from enum import Enum
from typing import Dict, Sequence, Union

import numpy as np
import pandas as pd

from .errors import TypeMismatch

logger = logging.getLogger(__name__)

ColumnLike = Union[pd.Series, np.ndarray, Sequence]


class ColumnKind(Enum):
    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


def _as_series(values: ColumnLike) -> pd.Series:
    if isinstance(values, pd.Series):
        # Category dtype maps to Categorical results; inspect the plain values
        if isinstance(values.dtype, pd.CategoricalDtype):
            return values.astype(object)
        return values
    return pd.Series(values if isinstance(values, np.ndarray) else list(values))


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real)


def column_kind(values: ColumnLike) -> ColumnKind:
    """
    Decide whether a column is numeric or categorical.

    Args:
        values: Column values (Series, array or plain sequence)

    Returns:
        ColumnKind.NUMERIC or ColumnKind.CATEGORICAL

    Raises:
        TypeMismatch: If the column has missing values or mixes numbers with
            non-numeric values.
    """
    series = _as_series(values)
    name = series.name if series.name is not None else "<unnamed>"

    if series.isna().any():
        raise TypeMismatch(f"Column {name} has {int(series.isna().sum())} missing values")

    if pd.api.types.is_numeric_dtype(series.dtype):
        return ColumnKind.NUMERIC

    numeric_flags = series.map(_is_number).astype(bool)
    if numeric_flags.all():
        return ColumnKind.NUMERIC
    if not numeric_flags.any():
        return ColumnKind.CATEGORICAL

    examples = series[numeric_flags].head(2).tolist() + series[~numeric_flags].head(2).tolist()
    raise TypeMismatch(
        f"Column {name} mixes numeric and non-numeric values (e.g. {examples})"
    )


def category_codes(values: ColumnLike) -> Dict[str, int]:
    """Map each distinct value's string form to its 1-based rank."""
    keys = sorted(set(_as_series(values).map(str)))
    return {key: rank for rank, key in enumerate(keys, start=1)}


def to_numeric_column(values: ColumnLike) -> np.ndarray:
    """
    Convert a column to numbers.

    Numeric columns are returned as a float copy. Categorical columns are
    encoded with category_codes().

    Args:
        values: Column values

    Returns:
        1-D numpy array with one number per input value, in input order
    """
    series = _as_series(values)
    if column_kind(series) is ColumnKind.NUMERIC:
        return series.to_numpy(dtype=float, copy=True)

    keys = series.map(str)
    codes = category_codes(keys)
    logger.debug(f"[DATA] CODES: {series.name} -> {codes}")
    return keys.map(codes).to_numpy(dtype=int)


def encode_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of df with every column coerced to numbers."""
    encoded = df.copy()
    for column in encoded.columns:
        encoded[column] = to_numeric_column(encoded[column])
    return encoded

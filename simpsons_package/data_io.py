import os
import json
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd


def load_dataset(path: str, units_row: bool = False, skip_rows: Optional[List[int]] = None) -> pd.DataFrame:
    """
    Load a CSV dataset.

    Args:
        path: CSV file path
        units_row: True when the line right after the header holds units
            (e.g. "lbs", "mpg") rather than data
        skip_rows: Extra 0-based file line numbers to skip

    Returns:
        DataFrame with one row per observation
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Dataset not found: {path}")
    skip = set(skip_rows or [])
    if units_row:
        skip.add(1)
    return pd.read_csv(path, skiprows=sorted(skip) or None)


# Convert numpy types to Python native types for JSON serialization
def convert_numpy_types(obj):
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return None if np.isnan(obj) else float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, pd.DataFrame):
        return [convert_numpy_types(r) for r in obj.to_dict(orient='records')]
    elif isinstance(obj, pd.Series):
        return convert_numpy_types(obj.to_dict())
    elif isinstance(obj, dict):
        return {str(key): convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, float) and np.isnan(obj):
        return None
    return obj


def report_to_dict(report) -> Dict[str, Any]:
    """JSON-ready summary of a ParadoxReport."""
    grouping = report.grouping
    record = {
        'cause': report.cause_column,
        'effect': report.effect_column,
        'factor': report.factor_column,
        'overall_slope': report.overall_slope,
        'overall_direction': report.overall_direction,
        'paradox_detected': report.paradox_detected,
        'grouping_strategy': grouping.strategy,
        'subgroups': report.to_frame(),
    }
    if grouping.elbow is not None:
        record['elbow'] = {
            'k': grouping.elbow.k,
            'costs': grouping.elbow.costs,
            'elbow_k': grouping.elbow.elbow_k,
            'min_cost_k': grouping.elbow.min_cost_k,
            'guarded': grouping.elbow.guarded,
        }
    return convert_numpy_types(record)


def save_report_json(report, path: str) -> None:
    with open(path, 'w') as f:
        json.dump(report_to_dict(report), f, indent=2)

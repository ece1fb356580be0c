"""
Analysis settings and their YAML loader.

Example YAML (the ``analysis`` key is optional):

    analysis:
      continuous_threshold: 5
      cmin: 1
      cmax: 5
      verbose: true
      random_state: 42
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSettings:
    """Tunable parameters for paradox detection."""
    continuous_threshold: int = 5   # distinct numeric values at which a factor is clustered
    cmin: int = 1                   # lower bound enforced by the elbow guard
    cmax: int = 5                   # largest cluster count tried
    verbose: bool = True
    random_state: Optional[int] = None
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.continuous_threshold < 1:
            raise ValueError(f"continuous_threshold must be >= 1, got {self.continuous_threshold}")
        if not 1 <= self.cmin <= self.cmax:
            raise ValueError(f"Need 1 <= cmin <= cmax, got cmin={self.cmin}, cmax={self.cmax}")

    def as_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments accepted by detect_simpsons_paradox()."""
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "AnalysisSettings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown analysis settings: {unknown}")
        return cls(**values)


def load_config(yaml_path: str) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        yaml_path: Path to the YAML configuration file

    Returns:
        Dictionary containing the parsed configuration
    """
    try:
        with open(yaml_path, 'r') as file:
            config = yaml.safe_load(file)
        return config or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Error parsing YAML configuration: {e}")


def load_settings(yaml_path: Optional[str] = None, **overrides) -> AnalysisSettings:
    """
    Build AnalysisSettings from an optional YAML file plus keyword overrides.

    Overrides whose value is None are ignored so CLI flags can be passed through
    unconditionally.
    """
    values: Dict[str, Any] = {}
    if yaml_path:
        config = load_config(yaml_path)
        values.update(config.get('analysis', config))
        logger.info(f"Loaded analysis settings from {os.path.abspath(yaml_path)}")
    values.update({k: v for k, v in overrides.items() if v is not None})
    return AnalysisSettings.from_dict(values)

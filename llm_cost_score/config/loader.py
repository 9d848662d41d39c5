"""
Configuration management and loading.

Handles the usage table and cost ceiling used for cost estimation.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from llm_cost_score.core.pricing import MAX_MONTHLY_COST
from llm_cost_score.core.usage import MONTHLY_USAGE, UsagePattern


@dataclass(frozen=True)
class CostConfig:
    """Usage table and cost ceiling for estimation."""
    max_monthly_cost: float
    usage: Tuple[UsagePattern, ...]

    def __post_init__(self):
        """Validate the cost ceiling is positive and finite."""
        if not math.isfinite(self.max_monthly_cost) or self.max_monthly_cost <= 0:
            raise ValueError("max_monthly_cost must be > 0 and finite")


def default_cost_config() -> CostConfig:
    """Built-in usage table and cost ceiling."""
    return CostConfig(max_monthly_cost=MAX_MONTHLY_COST, usage=MONTHLY_USAGE)


def load_cost_config(path: str) -> CostConfig:
    """Load and validate cost configuration from a YAML file.

    Missing sections fall back to the built-in defaults. Unknown keys are
    rejected so that typos never silently change an estimate.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated CostConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Cost config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    allowed_top_keys = {'max_monthly_cost', 'usage'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    max_cost = raw_config.get('max_monthly_cost', MAX_MONTHLY_COST)
    if (isinstance(max_cost, bool) or not isinstance(max_cost, (int, float))
            or not math.isfinite(max_cost) or max_cost <= 0):
        raise ValueError("'max_monthly_cost' must be a finite number > 0")

    if 'usage' in raw_config:
        usage = _parse_usage(raw_config['usage'])
    else:
        usage = MONTHLY_USAGE

    return CostConfig(max_monthly_cost=float(max_cost), usage=usage)


def _parse_usage(data: Any) -> Tuple[UsagePattern, ...]:
    """Parse the usage table, keeping its order."""
    if not isinstance(data, list):
        raise ValueError("'usage' must be a list")

    patterns: List[UsagePattern] = []
    for index, entry in enumerate(data):
        patterns.append(_parse_usage_pattern(entry, f"usage[{index}]"))
    return tuple(patterns)


def _parse_usage_pattern(data: Dict, path: str) -> UsagePattern:
    """Parse and validate a single usage pattern.

    Args:
        data: Usage pattern data
        path: Path for error messages

    Returns:
        Validated UsagePattern

    Raises:
        ValueError: If the pattern is invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"{path} must be a dictionary")

    allowed_keys = {'pattern', 'calls', 'input_tokens', 'output_tokens'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    if 'pattern' not in data:
        raise ValueError(f"Missing required 'pattern' in {path}")
    name = data['pattern']
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"'pattern' in {path} must be a non-empty string")

    counts = {}
    for key in ('calls', 'input_tokens', 'output_tokens'):
        if key not in data:
            raise ValueError(f"Missing required '{key}' in {path}")
        value = data[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"'{key}' in {path} must be an integer >= 0")
        counts[key] = value

    return UsagePattern(pattern=name, **counts)

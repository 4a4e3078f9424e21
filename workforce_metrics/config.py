"""
Metrics Policy Configuration

Named policy constants for the metric calculations, loadable from
config/config.yaml and the environment.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from typing import Optional

import yaml


logger = logging.getLogger(__name__)


DEFAULT_PRIORITY_WEIGHTS = {
    "Highest": 5,
    "High": 4,
    "Medium": 3,
    "Low": 2,
    "Lowest": 1,
}


@dataclass(frozen=True)
class EfficiencyWeights:
    """Coefficients of the composite efficiency scores."""
    # Overall efficiency
    productivity: float = 0.3
    workload_balance: float = 0.2
    quality: float = 0.3
    response_time: float = 0.2

    # Team quality score
    quality_productivity: float = 0.4
    quality_balance: float = 0.3
    quality_effort: float = 0.3

    # Per-user quality score
    user_quality_productivity: float = 0.6
    user_quality_effort: float = 0.4

    # Penalties
    effort_ratio_penalty: float = 10.0
    resolution_day_penalty: float = 5.0

    priority_weights: dict = field(default_factory=lambda: dict(DEFAULT_PRIORITY_WEIGHTS), hash=False)
    default_priority_weight: int = 3

    def priority_weight(self, priority: Optional[str]) -> int:
        """Weight of a closed ticket with the given priority name."""
        if not priority:
            return self.default_priority_weight
        return self.priority_weights.get(priority, self.default_priority_weight)


@dataclass(frozen=True)
class MetricsPolicy:
    """
    Policy constants used by every aggregator.

    None of these are derived from data; they are the organisation's
    working assumptions and can be overridden per deployment.
    """
    standard_hours_per_day: float = 8.0
    forecast_days: int = 30
    trailing_working_days: int = 7
    ranking_size: int = 5

    default_shift_code: str = "G"
    leave_shift_code: str = "L"
    unavailable_shift_codes: tuple = ("H", "L")

    # Category keys containing any of these feed the work-type distribution
    work_type_markers: tuple = ("work type", "type")

    # Project health classification (FTE)
    at_capacity_fte: float = 1.0
    moderate_fte: float = 0.5

    # Member status classification (utilization %)
    underutilized_below: float = 60.0
    overloaded_above: float = 120.0

    # Placeholders until reopen/accuracy history is available
    ticket_reopening_rate: float = 5.0
    resolution_accuracy: float = 95.0

    efficiency: EfficiencyWeights = field(default_factory=EfficiencyWeights)

    def __post_init__(self):
        if self.standard_hours_per_day <= 0:
            raise ValueError("standard_hours_per_day must be positive")
        if self.forecast_days < 0 or self.trailing_working_days < 0:
            raise ValueError("forecast_days and trailing_working_days must not be negative")
        if self.ranking_size < 0:
            raise ValueError("ranking_size must not be negative")
        if self.moderate_fte > self.at_capacity_fte:
            raise ValueError("moderate_fte cannot exceed at_capacity_fte")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "efficiency"}
        data["unavailable_shift_codes"] = list(self.unavailable_shift_codes)
        data["work_type_markers"] = list(self.work_type_markers)
        data["efficiency"] = {
            f.name: getattr(self.efficiency, f.name) for f in fields(self.efficiency)
        }
        return data


def policy_from_dict(data: Optional[dict]) -> MetricsPolicy:
    """
    Build a policy from a plain mapping (e.g. the ``policy`` section of
    config.yaml). Unknown keys are rejected.
    """
    data = dict(data or {})
    efficiency_data = data.pop("efficiency", None) or {}

    policy_fields = {f.name for f in fields(MetricsPolicy)}
    unknown = set(data) - policy_fields
    if unknown:
        raise ValueError(f"Unknown policy settings: {', '.join(sorted(unknown))}")

    weight_fields = {f.name for f in fields(EfficiencyWeights)}
    unknown = set(efficiency_data) - weight_fields
    if unknown:
        raise ValueError(f"Unknown efficiency settings: {', '.join(sorted(unknown))}")

    for key in ("unavailable_shift_codes", "work_type_markers"):
        if key in data:
            data[key] = tuple(data[key])

    if "priority_weights" in efficiency_data:
        weights = dict(DEFAULT_PRIORITY_WEIGHTS)
        weights.update(efficiency_data["priority_weights"] or {})
        efficiency_data["priority_weights"] = weights

    return MetricsPolicy(efficiency=EfficiencyWeights(**efficiency_data), **data)


class Config:
    """Load configuration from config.yaml and environment."""

    DEFAULT_PATH = "config/config.yaml"

    env_mapping = {
        "WORKFORCE_HOURS_PER_DAY": ("standard_hours_per_day", float),
        "WORKFORCE_FORECAST_DAYS": ("forecast_days", int),
        "WORKFORCE_TRAILING_DAYS": ("trailing_working_days", int),
        "WORKFORCE_RANKING_SIZE": ("ranking_size", int),
    }

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or os.getenv("WORKFORCE_METRICS_CONFIG", self.DEFAULT_PATH)
        self.config = {}

        if os.path.exists(self.config_path):
            try:
                with open(self.config_path) as f:
                    self.config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid configuration file {self.config_path}: {e}") from e
            logger.debug("Loaded configuration from %s", self.config_path)

        if not isinstance(self.config, dict):
            raise ValueError(f"Configuration file {self.config_path} must contain a mapping")

        self._load_env()
        self.policy = policy_from_dict(self.config.get("policy"))

    def _load_env(self):
        """Override policy settings from environment variables."""
        for env_var, (key, cast) in self.env_mapping.items():
            value = os.getenv(env_var)
            if not value:
                continue
            try:
                parsed = cast(value)
            except ValueError as e:
                raise ValueError(f"{env_var} must be a number, got {value!r}") from e
            policy = self.config.get("policy") or {}
            policy[key] = parsed
            self.config["policy"] = policy

    def get(self, section: str, key: str, default=None):
        """Get configuration value."""
        return (self.config.get(section) or {}).get(key, default)

    @property
    def cors_origins(self) -> list[str]:
        return self.get("api", "cors_origins", ["*"])

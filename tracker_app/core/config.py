"""Central configuration, constants, thresholds, and the label health config loader."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

# =============================================================================
# Issue Status Configuration
# =============================================================================
STATUS_OPEN = "open"
STATUS_IN_PROGRESS = "in_progress"
STATUS_BLOCKED = "blocked"
STATUS_CLOSED = "closed"

ISSUE_STATUSES: frozenset[str] = frozenset({STATUS_OPEN, STATUS_IN_PROGRESS, STATUS_BLOCKED, STATUS_CLOSED})

# =============================================================================
# Dependency Types
# =============================================================================
DEP_BLOCKS = "blocks"
DEP_RELATED = "related"
DEP_PARENT_CHILD = "parent-child"
DEP_DISCOVERED_FROM = "discovered-from"

# =============================================================================
# Health Levels and Thresholds
# =============================================================================
HEALTH_LEVEL_HEALTHY = "healthy"  # health >= 70
HEALTH_LEVEL_WARNING = "warning"  # health 40-69
HEALTH_LEVEL_CRITICAL = "critical"  # health < 40

HEALTHY_THRESHOLD: int = 70
WARNING_THRESHOLD: int = 40

TREND_IMPROVING = "improving"
TREND_STABLE = "stable"
TREND_DECLINING = "declining"
TREND_THRESHOLD_PCT: float = 10.0

DEFAULT_STALE_THRESHOLD_DAYS: int = 14
DEFAULT_VELOCITY_WEIGHT: float = 0.25
DEFAULT_FRESHNESS_WEIGHT: float = 0.25
DEFAULT_FLOW_WEIGHT: float = 0.25
DEFAULT_CRITICALITY_WEIGHT: float = 0.25

# Points per closure in the 30-day window, and the bonus for an improving trend
VELOCITY_POINTS_PER_CLOSURE: int = 10
VELOCITY_IMPROVING_BONUS: int = 10
# Flow score penalty per incoming cross-label blocker
FLOW_PENALTY_PER_INCOMING: int = 5

# Parallel per-label health tuning
# Threads keep the shared issue list and centrality snapshot in one process.
LABEL_HEALTH_MAX_WORKERS = 8
LABEL_HEALTH_MIN_PARALLEL = 4  # below this, stay sequential to reduce overhead

# Optional YAML override file for LabelHealthConfig
LABEL_HEALTH_CONFIG_FILENAME = "label_health.yaml"


class ConfigError(RuntimeError):
    """Raised when a label health config file exists but cannot be used."""


@dataclass(slots=True, frozen=True)
class LabelHealthConfig:
    stale_threshold_days: int = DEFAULT_STALE_THRESHOLD_DAYS
    velocity_weight: float = DEFAULT_VELOCITY_WEIGHT
    freshness_weight: float = DEFAULT_FRESHNESS_WEIGHT
    flow_weight: float = DEFAULT_FLOW_WEIGHT
    criticality_weight: float = DEFAULT_CRITICALITY_WEIGHT
    # Documented default only; no label is filtered by it.
    min_issues_for_health: int = 1
    include_closed_in_flow: bool = False


DEFAULT_LABEL_HEALTH_CONFIG = LabelHealthConfig()


def config_from_mapping(data: Mapping | None, base: LabelHealthConfig | None = None) -> LabelHealthConfig:
    """Overlay ``data`` onto ``base`` (defaults when omitted).

    Values are applied as given. Weights that do not sum to 1.0 and a
    non-positive stale threshold are accepted unchanged.
    """
    base = base or DEFAULT_LABEL_HEALTH_CONFIG
    if not data:
        return base
    known = {f.name for f in fields(LabelHealthConfig)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        logger.warning("Ignoring unknown label health config keys: %s", ", ".join(unknown))
    overrides = {k: v for k, v in data.items() if k in known}
    return replace(base, **overrides)


def load_label_health_config(base_path: str | Path | None = None) -> LabelHealthConfig:
    """Load ``label_health.yaml`` from ``base_path`` (a directory or a file path).

    Returns the defaults when the file does not exist.
    """
    path = Path(base_path) if base_path is not None else Path.cwd()
    if path.is_dir():
        path = path / LABEL_HEALTH_CONFIG_FILENAME
    if not path.exists():
        logger.debug("No label health config at %s, using defaults", path)
        return DEFAULT_LABEL_HEALTH_CONFIG
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read label health config {path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Label health config {path} must be a mapping, got {type(data).__name__}")
    # Allow the settings to sit under a top-level "label_health" section
    section = data.get("label_health", data)
    if not isinstance(section, Mapping):
        raise ConfigError(f"label_health section in {path} must be a mapping")
    return config_from_mapping(section)

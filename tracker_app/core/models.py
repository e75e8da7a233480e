"""Domain data models for issues and the label health analysis results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .config import (
    DEFAULT_STALE_THRESHOLD_DAYS,
    HEALTH_LEVEL_HEALTHY,
    STATUS_OPEN,
    TREND_STABLE,
)


@dataclass(slots=True)
class DependencyModel:
    depends_on_id: str
    type: str


@dataclass(slots=True)
class IssueModel:
    id: str
    status: str = STATUS_OPEN
    priority: int = 0
    issue_type: str = ""
    labels: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    closed_at: datetime | None = None
    dependencies: list[DependencyModel | None] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Label catalog
# -----------------------------------------------------------------------------
@dataclass(slots=True)
class LabelStats:
    label: str
    total_count: int = 0
    open_count: int = 0
    closed_count: int = 0
    in_progress: int = 0
    blocked: int = 0
    by_priority: dict[int, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)
    issue_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class LabelExtractionResult:
    labels: list[str] = field(default_factory=list)
    label_count: int = 0
    stats: dict[str, LabelStats] = field(default_factory=dict)
    issue_count: int = 0
    unlabeled_count: int = 0
    top_labels: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Per-label metrics
# -----------------------------------------------------------------------------
@dataclass(slots=True)
class VelocityMetrics:
    closed_last_7_days: int = 0
    closed_last_30_days: int = 0
    avg_days_to_close: float = 0.0
    trend_direction: str = TREND_STABLE  # "improving", "stable", "declining"
    trend_percent: float = 0.0
    velocity_score: int = 0


@dataclass(slots=True)
class FreshnessMetrics:
    most_recent_update: datetime | None = None
    oldest_open_issue: datetime | None = None
    avg_days_since_update: float = 0.0
    stale_count: int = 0
    stale_threshold_days: int = DEFAULT_STALE_THRESHOLD_DAYS
    freshness_score: int = 0  # higher = fresher


@dataclass(slots=True)
class FlowMetrics:
    incoming_deps: int = 0
    outgoing_deps: int = 0
    incoming_labels: list[str] = field(default_factory=list)
    outgoing_labels: list[str] = field(default_factory=list)
    blocked_by_external: int = 0
    blocking_external: int = 0
    flow_score: int = 0  # higher = less blocked


@dataclass(slots=True)
class CriticalityMetrics:
    avg_pagerank: float = 0.0
    avg_betweenness: float = 0.0
    max_betweenness: float = 0.0
    critical_path_count: int = 0
    bottleneck_count: int = 0
    criticality_score: int = 0


@dataclass(slots=True)
class LabelHealth:
    label: str
    issue_count: int = 0
    open_count: int = 0
    closed_count: int = 0
    blocked_count: int = 0
    health: int = 0
    health_level: str = HEALTH_LEVEL_HEALTHY
    velocity: VelocityMetrics = field(default_factory=VelocityMetrics)
    freshness: FreshnessMetrics = field(default_factory=FreshnessMetrics)
    flow: FlowMetrics = field(default_factory=FlowMetrics)
    criticality: CriticalityMetrics = field(default_factory=CriticalityMetrics)
    issues: list[str] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Cross-label flow
# -----------------------------------------------------------------------------
@dataclass(slots=True)
class BlockingPair:
    blocker_id: str
    blocked_id: str
    blocker_label: str
    blocked_label: str


@dataclass(slots=True)
class LabelDependency:
    from_label: str
    to_label: str
    issue_count: int = 0
    issue_ids: list[str] = field(default_factory=list)
    blocking_pairs: list[BlockingPair] = field(default_factory=list)


@dataclass(slots=True)
class LabelPath:
    labels: list[str] = field(default_factory=list)
    length: int = 0  # number of label transitions
    issue_count: int = 0
    total_weight: float = 0.0


@dataclass(slots=True)
class CrossLabelFlow:
    labels: list[str] = field(default_factory=list)
    flow_matrix: list[list[int]] = field(default_factory=list)  # [from][to]
    dependencies: list[LabelDependency] = field(default_factory=list)
    critical_paths: list[LabelPath] = field(default_factory=list)
    bottleneck_labels: list[str] = field(default_factory=list)
    total_cross_label_deps: int = 0


# -----------------------------------------------------------------------------
# Top-level analysis result
# -----------------------------------------------------------------------------
@dataclass(slots=True)
class LabelSummary:
    label: str
    issue_count: int = 0
    open_count: int = 0
    health: int = 0
    health_level: str = HEALTH_LEVEL_HEALTHY
    top_issue: str = ""
    needs_attention: bool = False


@dataclass(slots=True)
class LabelAnalysisResult:
    generated_at: datetime | None = None
    total_labels: int = 0
    healthy_count: int = 0
    warning_count: int = 0
    critical_count: int = 0
    labels: list[LabelHealth] = field(default_factory=list)
    summaries: list[LabelSummary] = field(default_factory=list)
    cross_label_flow: CrossLabelFlow | None = None
    attention_needed: list[str] = field(default_factory=list)

"""Composite label health: weighted blend of velocity, freshness, flow and criticality."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime

import pytz

from tracker_app.core.config import (
    DEFAULT_LABEL_HEALTH_CONFIG,
    DEFAULT_STALE_THRESHOLD_DAYS,
    HEALTH_LEVEL_CRITICAL,
    HEALTH_LEVEL_HEALTHY,
    HEALTH_LEVEL_WARNING,
    HEALTHY_THRESHOLD,
    STATUS_BLOCKED,
    STATUS_CLOSED,
    TREND_STABLE,
    WARNING_THRESHOLD,
    LabelHealthConfig,
)
from tracker_app.core.graph_stats import GraphStats, analyze_graph
from tracker_app.core.models import (
    CriticalityMetrics,
    FlowMetrics,
    FreshnessMetrics,
    IssueModel,
    LabelHealth,
    VelocityMetrics,
)
from tracker_app.core.status import label_health_bucket

from .criticality import compute_criticality_metrics
from .flow import compute_flow_metrics
from .freshness import compute_freshness_metrics
from .scoring import clamp_score
from .velocity import compute_velocity_metrics


def health_level_from_score(score: int) -> str:
    if score >= HEALTHY_THRESHOLD:
        return HEALTH_LEVEL_HEALTHY
    if score >= WARNING_THRESHOLD:
        return HEALTH_LEVEL_WARNING
    return HEALTH_LEVEL_CRITICAL


def needs_attention(health: LabelHealth) -> bool:
    return health.health < HEALTHY_THRESHOLD


def compute_composite_health(
    velocity: int,
    freshness: int,
    flow: int,
    criticality: int,
    cfg: LabelHealthConfig = DEFAULT_LABEL_HEALTH_CONFIG,
) -> int:
    """Weighted sum of the four component scores, rounded half up and clamped.

    Weights are applied as configured, without renormalization.
    """
    weighted = (
        velocity * cfg.velocity_weight
        + freshness * cfg.freshness_weight
        + flow * cfg.flow_weight
        + criticality * cfg.criticality_weight
    )
    return clamp_score(int(weighted + 0.5))


def new_label_health(label: str) -> LabelHealth:
    """Neutral starting record: healthy, full component scores, neutral criticality."""
    return LabelHealth(
        label=label,
        health=100,
        health_level=HEALTH_LEVEL_HEALTHY,
        velocity=VelocityMetrics(trend_direction=TREND_STABLE, velocity_score=100),
        freshness=FreshnessMetrics(stale_threshold_days=DEFAULT_STALE_THRESHOLD_DAYS, freshness_score=100),
        flow=FlowMetrics(flow_score=100),
        criticality=CriticalityMetrics(criticality_score=50),
    )


def compute_label_health(
    label: str,
    issues: Sequence[IssueModel],
    cfg: LabelHealthConfig = DEFAULT_LABEL_HEALTH_CONFIG,
    now: datetime | None = None,
    stats: GraphStats | None = None,
    *,
    labels_by_id: Mapping[str, list[str]] | None = None,
) -> LabelHealth:
    """Compute the health record for a single label.

    Parameters
    ----------
    label : str
        Label to assess.
    issues : sequence of IssueModel
        Full issue collection (members are selected here).
    cfg : LabelHealthConfig
        Thresholds and component weights.
    now : datetime, optional
        Reference instant; defaults to the current UTC time.
    stats : GraphStats, optional
        Shared centrality snapshot. When omitted one is computed for
        ``issues``, which is expensive; callers scoring many labels should
        pass a single snapshot.
    labels_by_id : mapping, optional
        Prebuilt ``issue_id -> labels`` index forwarded to the flow metrics.

    Returns
    -------
    LabelHealth
        A label without member issues is returned with health 0 and level
        critical, without computing any metric.
    """
    if now is None:
        now = datetime.now(tz=pytz.UTC)
    health = new_label_health(label)

    labeled = [issue for issue in issues if label in issue.labels]
    health.issues = [issue.id for issue in labeled]
    health.issue_count = len(labeled)
    if health.issue_count == 0:
        health.health = 0
        health.health_level = HEALTH_LEVEL_CRITICAL
        return health

    for issue in labeled:
        bucket = label_health_bucket(issue.status)
        if bucket == STATUS_CLOSED:
            health.closed_count += 1
        elif bucket == STATUS_BLOCKED:
            health.blocked_count += 1
        else:
            health.open_count += 1

    if stats is None:
        stats = analyze_graph(issues)

    velocity = compute_velocity_metrics(labeled, now)
    freshness = compute_freshness_metrics(labeled, now, cfg.stale_threshold_days)
    flow = compute_flow_metrics(label, labeled, issues, labels_by_id)
    criticality = compute_criticality_metrics(labeled, stats)

    health.velocity = velocity
    health.freshness = freshness
    health.flow = flow
    health.criticality = criticality
    health.health = compute_composite_health(
        velocity.velocity_score,
        freshness.freshness_score,
        flow.flow_score,
        criticality.criticality_score,
        cfg,
    )
    health.health_level = health_level_from_score(health.health)
    return health

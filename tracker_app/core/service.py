"""LabelHealthService: orchestrates the catalog, per-label health and cross-label flow."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime

import pytz

from tracker_app.analytics.aggregations.label_flow import compute_cross_label_flow
from tracker_app.analytics.labels.catalog import extract_labels, index_labels_by_issue
from tracker_app.analytics.metrics.health import compute_label_health, needs_attention

from .config import (
    DEFAULT_LABEL_HEALTH_CONFIG,
    HEALTH_LEVEL_CRITICAL,
    HEALTH_LEVEL_HEALTHY,
    HEALTH_LEVEL_WARNING,
    LABEL_HEALTH_MAX_WORKERS,
    LABEL_HEALTH_MIN_PARALLEL,
    LabelHealthConfig,
)
from .graph_stats import GraphStats, analyze_graph
from .models import IssueModel, LabelAnalysisResult, LabelHealth, LabelSummary

ProgressCallback = Callable[[str, int | None, int | None], None]
StatsFactory = Callable[[Sequence[IssueModel]], GraphStats]

logger = logging.getLogger(__name__)


def compute_all_label_health(
    issues: Sequence[IssueModel],
    cfg: LabelHealthConfig = DEFAULT_LABEL_HEALTH_CONFIG,
    now: datetime | None = None,
    stats: GraphStats | None = None,
    *,
    max_workers: int = LABEL_HEALTH_MAX_WORKERS,
    progress: ProgressCallback | None = None,
) -> LabelAnalysisResult:
    """Compute health for every label in ``issues``.

    One centrality snapshot is shared by all labels. Labels are processed in
    alphabetical order (fanned out over a thread pool when there are enough
    of them) and results land in a list indexed by that order, so output
    does not depend on completion order. Summaries are sorted by health
    descending, then label.
    """
    if now is None:
        now = datetime.now(tz=pytz.UTC)
    catalog = extract_labels(issues)
    result = LabelAnalysisResult(generated_at=now, total_labels=catalog.label_count)

    labels = sorted(catalog.labels)
    if not labels:
        return result

    if stats is None:
        stats = analyze_graph(issues)
    labels_by_id = index_labels_by_issue(issues)

    def _task(label: str) -> LabelHealth:
        return compute_label_health(label, issues, cfg, now, stats, labels_by_id=labels_by_id)

    healths: list[LabelHealth | None] = [None] * len(labels)
    if len(labels) < LABEL_HEALTH_MIN_PARALLEL or max_workers <= 1:
        for idx, label in enumerate(labels):
            healths[idx] = _task(label)
            if progress:
                progress("Scoring label health", idx + 1, len(labels))
    else:
        completed = 0
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {pool.submit(_task, label): idx for idx, label in enumerate(labels)}
            for fut in as_completed(futures):
                healths[futures[fut]] = fut.result()
                completed += 1
                if progress:
                    progress("Scoring label health", completed, len(labels))

    for label, health in zip(labels, healths):
        result.labels.append(health)
        summary = LabelSummary(
            label=label,
            issue_count=health.issue_count,
            open_count=health.open_count,
            health=health.health,
            health_level=health.health_level,
            needs_attention=needs_attention(health),
        )
        if health.issues:
            summary.top_issue = health.issues[0]
        result.summaries.append(summary)
        if health.health_level == HEALTH_LEVEL_HEALTHY:
            result.healthy_count += 1
        elif health.health_level == HEALTH_LEVEL_WARNING:
            result.warning_count += 1
            result.attention_needed.append(label)
        elif health.health_level == HEALTH_LEVEL_CRITICAL:
            result.critical_count += 1
            result.attention_needed.append(label)

    result.summaries.sort(key=lambda s: (-s.health, s.label))
    logger.debug(
        "Label health: %s labels (%s healthy, %s warning, %s critical)",
        result.total_labels,
        result.healthy_count,
        result.warning_count,
        result.critical_count,
    )
    return result


class LabelHealthService:
    def __init__(
        self,
        config: LabelHealthConfig | None = None,
        *,
        stats_factory: StatsFactory = analyze_graph,
        max_workers: int = LABEL_HEALTH_MAX_WORKERS,
    ):
        self.config = config or DEFAULT_LABEL_HEALTH_CONFIG
        self._stats_factory = stats_factory
        self._max_workers = max_workers

    def analyze(
        self,
        issues: Sequence[IssueModel],
        now: datetime | None = None,
        *,
        include_flow: bool = True,
        progress: ProgressCallback | None = None,
    ) -> LabelAnalysisResult:
        """Full label analysis: per-label health plus (optionally) the cross-label flow."""
        if progress:
            progress("Building centrality snapshot", None, None)
        stats = self._stats_factory(issues)
        result = compute_all_label_health(
            issues,
            self.config,
            now,
            stats,
            max_workers=self._max_workers,
            progress=progress,
        )
        if include_flow:
            if progress:
                progress("Computing cross-label flow", None, None)
            result.cross_label_flow = compute_cross_label_flow(issues, self.config)
        return result

    def label_health(self, label: str, issues: Sequence[IssueModel], now: datetime | None = None) -> LabelHealth:
        return compute_label_health(label, issues, self.config, now, self._stats_factory(issues))

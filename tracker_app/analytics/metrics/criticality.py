"""Criticality metrics aggregated from a shared centrality snapshot."""

from __future__ import annotations

from collections.abc import Sequence

from tracker_app.core.graph_stats import GraphStats
from tracker_app.core.models import CriticalityMetrics, IssueModel

from .scoring import clamp_score


def compute_criticality_metrics(labeled: Sequence[IssueModel], stats: GraphStats) -> CriticalityMetrics:
    """Aggregate PageRank, betweenness and critical-path membership for one label.

    Normalization uses the maxima over the whole snapshot, so a label is
    scored against every issue in the graph, not only its own.
    """
    pagerank = stats.pagerank()
    betweenness = stats.betweenness()
    max_pr = max(pagerank.values(), default=0.0)
    max_bw = max(betweenness.values(), default=0.0)

    pr_sum = bw_sum = 0.0
    max_bw_label = 0.0
    critical_count = bottleneck_count = 0
    for issue in labeled:
        pr_sum += pagerank.get(issue.id, 0.0)
        bw_value = betweenness.get(issue.id, 0.0)
        bw_sum += bw_value
        if bw_value > max_bw_label:
            max_bw_label = bw_value
        if stats.critical_path_score(issue.id) > 0:
            critical_count += 1
        if bw_value > 0:
            bottleneck_count += 1

    count = len(labeled)
    avg_pr = pr_sum / count if count else 0.0
    avg_bw = bw_sum / count if count else 0.0

    score = 0
    if max_pr > 0:
        score += int(avg_pr / max_pr * 50)
    if max_bw > 0:
        score += int(max_bw_label / max_bw * 50)

    return CriticalityMetrics(
        avg_pagerank=avg_pr,
        avg_betweenness=avg_bw,
        max_betweenness=max_bw_label,
        critical_path_count=critical_count,
        bottleneck_count=bottleneck_count,
        criticality_score=clamp_score(score),
    )

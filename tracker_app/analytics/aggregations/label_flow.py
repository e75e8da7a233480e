"""Cross-label dependency flow: label->label blocking matrix, edge list, bottlenecks."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import networkx as nx

from tracker_app.analytics.labels.catalog import extract_labels
from tracker_app.core.config import DEFAULT_LABEL_HEALTH_CONFIG, DEP_BLOCKS, LabelHealthConfig
from tracker_app.core.models import (
    BlockingPair,
    CrossLabelFlow,
    IssueModel,
    LabelDependency,
    LabelPath,
)
from tracker_app.core.status import is_closed_status

logger = logging.getLogger(__name__)


def compute_cross_label_flow(
    issues: Sequence[IssueModel],
    cfg: LabelHealthConfig = DEFAULT_LABEL_HEALTH_CONFIG,
) -> CrossLabelFlow:
    """Aggregate blocking dependencies between labels.

    Every ``blocks`` dependency contributes the full cross product of the
    blocker's labels (rows, ``from``) and the blocked issue's labels
    (columns, ``to``), skipping empty and self pairs. Closed blocked or
    blocker issues are ignored unless ``cfg.include_closed_in_flow`` is set.
    """
    label_list = sorted(extract_labels(issues).labels)
    n = len(label_list)
    matrix = [[0] * n for _ in range(n)]
    index = {label: i for i, label in enumerate(label_list)}

    issue_map: dict[str, IssueModel] = {}
    for issue in issues:
        issue_map[issue.id] = issue

    dep_map: dict[tuple[str, str], LabelDependency] = {}
    total = 0

    for blocked in issues:
        if not cfg.include_closed_in_flow and is_closed_status(blocked.status):
            continue
        for dep in blocked.dependencies:
            if dep is None or dep.type != DEP_BLOCKS:
                continue
            blocker = issue_map.get(dep.depends_on_id)
            if blocker is None:
                continue
            if not cfg.include_closed_in_flow and is_closed_status(blocker.status):
                continue
            for from_label in blocker.labels:
                for to_label in blocked.labels:
                    if not from_label or not to_label or from_label == to_label:
                        continue
                    i_from = index.get(from_label)
                    i_to = index.get(to_label)
                    if i_from is None or i_to is None:
                        continue
                    matrix[i_from][i_to] += 1
                    total += 1
                    key = (from_label, to_label)
                    entry = dep_map.get(key)
                    if entry is None:
                        entry = LabelDependency(from_label=from_label, to_label=to_label)
                        dep_map[key] = entry
                    entry.issue_count += 1
                    entry.issue_ids.append(blocked.id)
                    entry.blocking_pairs.append(
                        BlockingPair(
                            blocker_id=blocker.id,
                            blocked_id=blocked.id,
                            blocker_label=from_label,
                            blocked_label=to_label,
                        )
                    )

    dependencies = sorted(dep_map.values(), key=lambda d: (d.from_label, d.to_label, -d.issue_count))
    bottlenecks = find_bottleneck_labels(label_list, matrix)
    logger.debug(
        "Cross-label flow: %s labels, %s label pairs, %s deps, bottlenecks=%s",
        n,
        len(dependencies),
        total,
        bottlenecks,
    )

    return CrossLabelFlow(
        labels=label_list,
        flow_matrix=matrix,
        dependencies=dependencies,
        critical_paths=find_label_critical_paths(dependencies),
        bottleneck_labels=bottlenecks,
        total_cross_label_deps=total,
    )


def find_bottleneck_labels(labels: Sequence[str], matrix: Sequence[Sequence[int]]) -> list[str]:
    """Labels whose outgoing row sum ties for the maximum (only when that maximum is positive)."""
    row_sums = {label: sum(row) for label, row in zip(labels, matrix)}
    max_out = max(row_sums.values(), default=0)
    if max_out <= 0:
        return []
    return sorted(label for label, count in row_sums.items() if count == max_out)


def find_label_critical_paths(dependencies: Sequence[LabelDependency]) -> list[LabelPath]:
    """Heaviest label chain through the flow graph.

    Edge weights are dependency counts. A cyclic label graph has no longest
    path, so nothing is reported for it.
    """
    if not dependencies:
        return []
    graph = nx.DiGraph()
    # Sorted insertion keeps networkx's tie-breaking stable across runs
    for dep in dependencies:
        graph.add_edge(dep.from_label, dep.to_label, weight=dep.issue_count)
    if not nx.is_directed_acyclic_graph(graph):
        logger.debug("Label flow graph has cycles; skipping label critical paths")
        return []
    path = nx.dag_longest_path(graph, weight="weight", topo_order=list(nx.lexicographical_topological_sort(graph)))
    if len(path) < 2:
        return []
    by_pair = {(d.from_label, d.to_label): d for d in dependencies}
    total_weight = 0.0
    issue_ids: set[str] = set()
    for from_label, to_label in zip(path, path[1:]):
        dep = by_pair[(from_label, to_label)]
        total_weight += dep.issue_count
        issue_ids.update(dep.issue_ids)
        issue_ids.update(pair.blocker_id for pair in dep.blocking_pairs)
    return [
        LabelPath(
            labels=list(path),
            length=len(path) - 1,
            issue_count=len(issue_ids),
            total_weight=total_weight,
        )
    ]

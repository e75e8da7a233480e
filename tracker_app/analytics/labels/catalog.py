"""Label catalog: unique labels, per-label statistics, and label lookups.

Labels on an issue are taken as recorded. A label listed twice on one issue
is counted twice, empty-string labels are ignored everywhere, and every list
handed back to callers goes through an explicit sort.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence

from tracker_app.core.config import STATUS_BLOCKED, STATUS_CLOSED, STATUS_IN_PROGRESS, STATUS_OPEN
from tracker_app.core.graph_stats import GraphStats
from tracker_app.core.models import IssueModel, LabelExtractionResult, LabelStats
from tracker_app.core.status import is_closed_status, normalize_issue_status


def extract_labels(issues: Sequence[IssueModel]) -> LabelExtractionResult:
    """Extract unique labels and per-label statistics from an issue collection.

    Parameters
    ----------
    issues : sequence of IssueModel
        Issues to scan.

    Returns
    -------
    LabelExtractionResult
        Sorted ``labels``, per-label ``stats``, ``unlabeled_count`` for issues
        without any label, and ``top_labels`` ranked by issue count.
    """
    result = LabelExtractionResult()
    if not issues:
        return result

    result.issue_count = len(issues)
    for issue in issues:
        if not issue.labels:
            result.unlabeled_count += 1
        status = normalize_issue_status(issue.status)
        for label in issue.labels:
            if not label:
                continue
            stats = result.stats.get(label)
            if stats is None:
                stats = LabelStats(label=label)
                result.stats[label] = stats
            stats.total_count += 1
            stats.issue_ids.append(issue.id)
            if status == STATUS_OPEN:
                stats.open_count += 1
            elif status == STATUS_CLOSED:
                stats.closed_count += 1
            elif status == STATUS_IN_PROGRESS:
                stats.in_progress += 1
            elif status == STATUS_BLOCKED:
                stats.blocked += 1
            stats.by_priority[issue.priority] = stats.by_priority.get(issue.priority, 0) + 1
            stats.by_type[issue.issue_type] = stats.by_type.get(issue.issue_type, 0) + 1

    result.labels = sorted(result.stats)
    result.label_count = len(result.labels)
    result.top_labels = sort_labels_by_count(result.stats)
    return result


def sort_labels_by_count(stats: Mapping[str, LabelStats]) -> list[str]:
    """Labels by total issue count descending, alphabetical on ties."""
    ranked = sorted(stats.items(), key=lambda item: (-item[1].total_count, item[0]))
    return [label for label, _ in ranked]


def get_label_issues(issues: Iterable[IssueModel], label: str) -> list[IssueModel]:
    return [issue for issue in issues if label in issue.labels]


def get_labels_for_issue(issues: Iterable[IssueModel], issue_id: str) -> list[str] | None:
    """Labels of the first issue with ``issue_id``; None when the ID is unknown."""
    for issue in issues:
        if issue.id == issue_id:
            return issue.labels
    return None


def index_labels_by_issue(issues: Iterable[IssueModel]) -> dict[str, list[str]]:
    """Issue ID -> labels map with the same first-match rule as ``get_labels_for_issue``."""
    index: dict[str, list[str]] = {}
    for issue in issues:
        index.setdefault(issue.id, issue.labels)
    return index


def get_common_labels(*label_sets: Iterable[str]) -> list[str] | None:
    """Labels present in every given set, sorted. None when called without sets."""
    if not label_sets:
        return None
    counts: dict[str, int] = defaultdict(int)
    for labels in label_sets:
        for label in set(labels):
            counts[label] += 1
    return sorted(label for label, count in counts.items() if count == len(label_sets))


def get_label_cooccurrence(issues: Iterable[IssueModel]) -> dict[str, dict[str, int]]:
    """Symmetric co-occurrence counts for every unordered label pair on the same issue."""
    cooc: dict[str, dict[str, int]] = {}
    for issue in issues:
        labels = issue.labels
        for i in range(len(labels)):
            for j in range(i + 1, len(labels)):
                first, second = labels[i], labels[j]
                if not first or not second or first == second:
                    continue
                cooc.setdefault(first, {})
                cooc.setdefault(second, {})
                cooc[first][second] = cooc[first].get(second, 0) + 1
                cooc[second][first] = cooc[second].get(first, 0) + 1
    return cooc


def compute_blocked_by_label(issues: Iterable[IssueModel], stats: GraphStats) -> dict[str, int]:
    """Count non-closed issues with at least one open blocker, per label."""
    blocked: dict[str, int] = defaultdict(int)
    for issue in issues:
        if is_closed_status(issue.status):
            continue
        if not stats.open_blockers(issue.id):
            continue
        for label in issue.labels:
            if label:
                blocked[label] += 1
    return dict(blocked)

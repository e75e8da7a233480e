"""Per-label flow metrics: cross-label blocking edges touching one label."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from tracker_app.analytics.labels.catalog import index_labels_by_issue
from tracker_app.core.config import DEP_BLOCKS, FLOW_PENALTY_PER_INCOMING
from tracker_app.core.models import FlowMetrics, IssueModel

from .scoring import clamp_score


def compute_flow_metrics(
    label: str,
    labeled: Sequence[IssueModel],
    issues: Sequence[IssueModel],
    labels_by_id: Mapping[str, list[str]] | None = None,
) -> FlowMetrics:
    """Count blocking edges that cross from or into ``label``.

    ``incoming_*`` counts the labels of each blocker other than ``label``,
    once per dependency edge. ``outgoing_*`` counts, for the same edge, the
    blocked issue's own other labels rather than a blocker-to-blocked label
    pair; ``compute_cross_label_flow`` is the place for real label edges.

    Parameters
    ----------
    label : str
        Label being scored.
    labeled : sequence of IssueModel
        Issues carrying ``label``.
    issues : sequence of IssueModel
        Full collection, used to resolve blockers and dependents.
    labels_by_id : mapping, optional
        Prebuilt ``issue_id -> labels`` index (see ``index_labels_by_issue``).
    """
    if labels_by_id is None:
        labels_by_id = index_labels_by_issue(issues)

    incoming = outgoing = 0
    seen_in: set[str] = set()
    seen_out: set[str] = set()
    blocked_by_external = 0

    for issue in labeled:
        externally_blocked = False
        for dep in issue.dependencies:
            if dep is None or dep.type != DEP_BLOCKS:
                continue
            blocker_labels = labels_by_id.get(dep.depends_on_id)
            if blocker_labels is not None and label not in blocker_labels:
                externally_blocked = True
            for bl in blocker_labels or ():
                if bl and bl != label:
                    incoming += 1
                    seen_in.add(bl)
            for tl in issue.labels:
                if not tl or tl == label:
                    continue
                outgoing += 1
                seen_out.add(tl)
        if externally_blocked:
            blocked_by_external += 1

    # Label issues that block at least one issue outside the label
    member_ids = {issue.id for issue in labeled}
    blocking_ids: set[str] = set()
    for issue in issues:
        if label in issue.labels:
            continue
        for dep in issue.dependencies:
            if dep is None or dep.type != DEP_BLOCKS:
                continue
            if dep.depends_on_id in member_ids:
                blocking_ids.add(dep.depends_on_id)

    return FlowMetrics(
        incoming_deps=incoming,
        outgoing_deps=outgoing,
        incoming_labels=sorted(seen_in),
        outgoing_labels=sorted(seen_out),
        blocked_by_external=blocked_by_external,
        blocking_external=len(blocking_ids),
        flow_score=clamp_score(100 - incoming * FLOW_PENALTY_PER_INCOMING),
    )

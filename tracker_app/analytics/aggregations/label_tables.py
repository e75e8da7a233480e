"""Tabular (DataFrame) views of label analysis results.

Public entry points for dashboard-style consumers, built from the dataclass
results after analysis.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from tracker_app.core.models import CrossLabelFlow, LabelAnalysisResult, LabelExtractionResult

LABEL_STATS_COLUMNS = ("label", "total_count", "open_count", "in_progress", "blocked", "closed_count")
SUMMARY_COLUMNS = ("label", "issue_count", "open_count", "health", "health_level", "top_issue", "needs_attention")


def label_stats_frame(extraction: LabelExtractionResult) -> pd.DataFrame:
    """One row per label, in ``top_labels`` order (count desc, label asc)."""
    if not extraction.top_labels:
        return pd.DataFrame(columns=list(LABEL_STATS_COLUMNS))
    rows = []
    for label in extraction.top_labels:
        s = extraction.stats[label]
        rows.append(
            {
                "label": label,
                "total_count": s.total_count,
                "open_count": s.open_count,
                "in_progress": s.in_progress,
                "blocked": s.blocked,
                "closed_count": s.closed_count,
            }
        )
    return pd.DataFrame(rows, columns=list(LABEL_STATS_COLUMNS))


def summaries_frame(result: LabelAnalysisResult) -> pd.DataFrame:
    if not result.summaries:
        return pd.DataFrame(columns=list(SUMMARY_COLUMNS))
    rows = [
        {
            "label": s.label,
            "issue_count": s.issue_count,
            "open_count": s.open_count,
            "health": s.health,
            "health_level": s.health_level,
            "top_issue": s.top_issue,
            "needs_attention": s.needs_attention,
        }
        for s in result.summaries
    ]
    return pd.DataFrame(rows, columns=list(SUMMARY_COLUMNS))


def flow_matrix_frame(flow: CrossLabelFlow) -> pd.DataFrame:
    """Square from/to matrix with an ``outgoing`` row total column."""
    if not flow.labels:
        return pd.DataFrame()
    matrix = np.array(flow.flow_matrix, dtype=int).reshape(len(flow.labels), len(flow.labels))
    out = pd.DataFrame(matrix, index=list(flow.labels), columns=list(flow.labels))
    out.index.name = "from_label"
    out.columns.name = "to_label"
    out["outgoing"] = matrix.sum(axis=1)
    return out


def dependency_edges_frame(flow: CrossLabelFlow) -> pd.DataFrame:
    """Label edges ranked by issue count (desc), then from and to label.

    This ranking is for display only; ``flow.dependencies`` keeps the
    (from, to, count desc) order.
    """
    rows = [
        {
            "from_label": d.from_label,
            "to_label": d.to_label,
            "issue_count": d.issue_count,
            "blocked_issues": ", ".join(sorted(set(d.issue_ids))),
        }
        for d in flow.dependencies
    ]
    if not rows:
        return pd.DataFrame(columns=["from_label", "to_label", "issue_count", "blocked_issues"])
    return pd.DataFrame(rows).sort_values(
        by=["issue_count", "from_label", "to_label"], ascending=[False, True, True]
    ).reset_index(drop=True)

"""Mapping raw issue records (JSON-Lines style dicts) into IssueModel instances.

Public entry point for callers loading issues from a store; the analysis
functions themselves only take ``IssueModel`` sequences.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from .config import DEP_BLOCKS
from .models import DependencyModel, IssueModel
from .status import normalize_issue_status


def parse_dt(val):
    if val is None or val == "":
        return None
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def map_priority(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _map_dependencies(raw_deps: Any) -> list[DependencyModel]:
    deps: list[DependencyModel] = []
    if not isinstance(raw_deps, list):
        return deps
    for d in raw_deps:
        if not isinstance(d, dict):
            continue
        target = d.get("depends_on_id")
        if not target:
            continue
        deps.append(DependencyModel(depends_on_id=str(target), type=str(d.get("type") or "")))
    return deps


def map_issue(raw: dict[str, Any]) -> IssueModel:
    issue_id = raw.get("id")
    if not issue_id:
        raise ValueError(f"Issue record without id: {raw!r}")
    labels = raw.get("labels")
    if not isinstance(labels, list):
        labels = []
    return IssueModel(
        id=str(issue_id),
        status=normalize_issue_status(raw.get("status")),
        priority=map_priority(raw.get("priority")),
        issue_type=str(raw.get("issue_type") or ""),
        # Kept as given (duplicates and empty strings included); the catalog filters
        labels=[str(label) for label in labels if label is not None],
        created_at=parse_dt(raw.get("created_at")),
        updated_at=parse_dt(raw.get("updated_at")),
        closed_at=parse_dt(raw.get("closed_at")),
        dependencies=_map_dependencies(raw.get("dependencies")),
    )


def map_issues(raw_issues: Iterable[dict[str, Any]]) -> list[IssueModel]:
    return [map_issue(r) for r in raw_issues]


def issues_to_dataframe(issues: Iterable[IssueModel]) -> pd.DataFrame:
    rows = []
    for i in issues:
        rows.append(
            {
                "id": i.id,
                "status": i.status,
                "priority": i.priority,
                "issue_type": i.issue_type,
                "labels": list(i.labels),
                "created_at": i.created_at,
                "updated_at": i.updated_at,
                "closed_at": i.closed_at,
                "blocked_by": [d.depends_on_id for d in i.dependencies if d is not None and d.type == DEP_BLOCKS],
            }
        )
    df = pd.DataFrame(rows)
    for col in ("created_at", "updated_at", "closed_at"):
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], utc=True, errors="coerce")
    return df

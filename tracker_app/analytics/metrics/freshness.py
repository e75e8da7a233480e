"""Freshness metrics: update recency and staleness for a label's issues."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from tracker_app.core.config import DEFAULT_STALE_THRESHOLD_DAYS
from tracker_app.core.models import FreshnessMetrics, IssueModel
from tracker_app.core.status import is_closed_status

from .scoring import clamp_score
from .timestamps import days_between, to_utc


def freshness_score(avg_days_since_update: float, stale_days: int) -> int:
    """Linear decay from 100 (just updated) to 0 at twice the stale threshold."""
    threshold = float(stale_days)
    return clamp_score(int(max(0.0, 100 - (avg_days_since_update / (threshold * 2)) * 100)))


def compute_freshness_metrics(
    issues: Sequence[IssueModel],
    now: datetime,
    stale_days: int,
) -> FreshnessMetrics:
    """Compute freshness for one label.

    Parameters
    ----------
    issues : sequence of IssueModel
        Issues carrying the label.
    now : datetime
        Reference instant; naive values are taken as UTC.
    stale_days : int
        Days without an update before an issue counts as stale. Values
        ``<= 0`` fall back to the 14-day default.

    Returns
    -------
    FreshnessMetrics
        ``most_recent_update`` is the latest update across all issues and
        ``oldest_open_issue`` the earliest creation among non-closed ones
        (both ``None`` when nothing qualifies).
    """
    if stale_days <= 0:
        stale_days = DEFAULT_STALE_THRESHOLD_DAYS
    now = to_utc(now)
    threshold = float(stale_days)

    most_recent: datetime | None = None
    oldest_open: datetime | None = None
    total_staleness = 0.0
    count = 0
    stale_count = 0

    for issue in issues:
        updated = to_utc(issue.updated_at)
        if updated is not None and (most_recent is None or updated > most_recent):
            most_recent = updated
        created = to_utc(issue.created_at)
        if not is_closed_status(issue.status) and created is not None:
            if oldest_open is None or created < oldest_open:
                oldest_open = created
        if updated is not None:
            days = days_between(now, updated)
            total_staleness += days
            count += 1
            if days >= threshold:
                stale_count += 1

    avg_staleness = total_staleness / count if count else 0.0

    return FreshnessMetrics(
        most_recent_update=most_recent,
        oldest_open_issue=oldest_open,
        avg_days_since_update=avg_staleness,
        stale_count=stale_count,
        stale_threshold_days=stale_days,
        freshness_score=freshness_score(avg_staleness, stale_days),
    )

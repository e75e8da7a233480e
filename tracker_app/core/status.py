"""Status normalization and categorization utilities.

Issue status is a closed set (open, in_progress, blocked, closed). Anything
outside that set, tracker-specific names such as ``done`` or ``resolved``
included, folds into the open bucket so that it is still counted as
outstanding work.
"""

from __future__ import annotations

from .config import (
    ISSUE_STATUSES,
    STATUS_BLOCKED,
    STATUS_CLOSED,
    STATUS_OPEN,
)


def normalize_issue_status(value: str | None) -> str:
    """Map a raw status string to one of the canonical issue statuses.

    Parameters
    ----------
    value : str | None
        Raw status string from an issue record.

    Returns
    -------
    str
        ``"open"``, ``"in_progress"``, ``"blocked"`` or ``"closed"``.

    Examples
    --------
    >>> normalize_issue_status("in_progress")
    'in_progress'
    >>> normalize_issue_status("closed")
    'closed'
    >>> normalize_issue_status("done")
    'open'
    """
    if isinstance(value, str) and value in ISSUE_STATUSES:
        return value
    return STATUS_OPEN


def is_closed_status(value: str | None) -> bool:
    return normalize_issue_status(value) == STATUS_CLOSED


def label_health_bucket(value: str | None) -> str:
    """Bucket a status for per-label health counts.

    In-progress and unknown statuses count as open; blocked and closed keep
    their own buckets.
    """
    normalized = normalize_issue_status(value)
    if normalized in {STATUS_CLOSED, STATUS_BLOCKED}:
        return normalized
    return STATUS_OPEN


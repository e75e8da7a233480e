from datetime import UTC, datetime, timedelta

import pytest

from tracker_app.analytics.metrics.freshness import compute_freshness_metrics, freshness_score
from tracker_app.analytics.metrics.velocity import classify_trend, compute_velocity_metrics
from tracker_app.core.models import IssueModel

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def _closed(issue_id, days_ago, created_days_before_close=None):
    closed_at = NOW - timedelta(days=days_ago)
    created_at = None
    if created_days_before_close is not None:
        created_at = closed_at - timedelta(days=created_days_before_close)
    return IssueModel(id=issue_id, status="closed", closed_at=closed_at, created_at=created_at)


def test_velocity_empty():
    v = compute_velocity_metrics([], NOW)
    assert v.closed_last_7_days == 0
    assert v.closed_last_30_days == 0
    assert v.avg_days_to_close == 0.0
    assert v.trend_direction == "stable"
    assert v.velocity_score == 0


def test_velocity_counts_windows():
    issues = [
        _closed("bv-1", 2),
        _closed("bv-2", 10),
        _closed("bv-3", 25),
        _closed("bv-4", 45),
        IssueModel(id="bv-5", status="open"),
    ]
    v = compute_velocity_metrics(issues, NOW)
    assert v.closed_last_7_days == 1
    assert v.closed_last_30_days == 3


def test_velocity_improving_trend():
    issues = [_closed(f"cur-{i}", d) for i, d in enumerate([1, 2, 3, 4, 5])]
    issues += [_closed("prev-1", 9), _closed("prev-2", 10)]
    v = compute_velocity_metrics(issues, NOW)
    assert v.trend_direction == "improving"
    assert v.trend_percent == pytest.approx(150.0)
    # 7 closures in 30 days plus the improving bonus
    assert v.velocity_score == 80


def test_velocity_declining_trend():
    issues = [_closed("cur-1", 1)]
    issues += [_closed(f"prev-{i}", d) for i, d in enumerate([8, 9, 10, 11, 12])]
    v = compute_velocity_metrics(issues, NOW)
    assert v.trend_direction == "declining"
    assert v.trend_percent < 0
    assert v.velocity_score == 60


def test_velocity_score_capped_without_bonus():
    issues = [_closed(f"bv-{i}", 1 + (i % 5)) for i in range(12)]
    v = compute_velocity_metrics(issues, NOW)
    assert v.closed_last_30_days == 12
    assert v.trend_direction == "improving"
    assert v.velocity_score == 100


def test_velocity_avg_days_to_close():
    issues = [_closed("bv-1", 3, created_days_before_close=10), _closed("bv-2", 4, created_days_before_close=5)]
    v = compute_velocity_metrics(issues, NOW)
    assert v.avg_days_to_close == pytest.approx(7.5)


def test_velocity_avg_ignores_missing_created():
    issues = [_closed("bv-1", 3, created_days_before_close=4), _closed("bv-2", 4)]
    v = compute_velocity_metrics(issues, NOW)
    assert v.avg_days_to_close == pytest.approx(4.0)


def test_classify_trend_edges():
    assert classify_trend(0, 0) == ("stable", 0.0)
    assert classify_trend(3, 0) == ("improving", 100.0)
    assert classify_trend(10, 10) == ("stable", 0.0)
    direction, percent = classify_trend(2, 4)
    assert direction == "declining"
    assert percent == pytest.approx(-50.0)


def test_freshness_recent_update():
    issues = [IssueModel(id="bv-1", updated_at=NOW - timedelta(hours=1))]
    f = compute_freshness_metrics(issues, NOW, 14)
    assert f.freshness_score >= 90
    assert f.stale_count == 0
    assert f.most_recent_update == NOW - timedelta(hours=1)


def test_freshness_old_update():
    issues = [IssueModel(id="bv-1", updated_at=NOW - timedelta(days=60))]
    f = compute_freshness_metrics(issues, NOW, 14)
    assert f.freshness_score == 0
    assert f.stale_count == 1
    assert f.avg_days_since_update == pytest.approx(60.0)


def test_freshness_stale_count_and_oldest_open():
    issues = [
        IssueModel(id="bv-1", status="open", created_at=NOW - timedelta(days=40), updated_at=NOW - timedelta(days=20)),
        IssueModel(id="bv-2", status="open", created_at=NOW - timedelta(days=5), updated_at=NOW - timedelta(days=2)),
        IssueModel(
            id="bv-3", status="closed", created_at=NOW - timedelta(days=90), updated_at=NOW - timedelta(days=14)
        ),
    ]
    f = compute_freshness_metrics(issues, NOW, 14)
    # Exactly at the threshold counts as stale
    assert f.stale_count == 2
    assert f.oldest_open_issue == NOW - timedelta(days=40)
    assert f.most_recent_update == NOW - timedelta(days=2)


def test_freshness_empty_and_default_threshold():
    f = compute_freshness_metrics([], NOW, 0)
    assert f.stale_threshold_days == 14
    assert f.most_recent_update is None
    assert f.oldest_open_issue is None
    assert f.avg_days_since_update == 0.0
    assert f.freshness_score == 100


def test_freshness_score_decay():
    assert freshness_score(0.0, 14) == 100
    assert freshness_score(14.0, 14) == 50
    assert freshness_score(28.0, 14) == 0
    assert freshness_score(100.0, 14) == 0

"""Velocity metrics: closure throughput and week-over-week trend (pure functions)."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from tracker_app.core.config import (
    TREND_DECLINING,
    TREND_IMPROVING,
    TREND_STABLE,
    TREND_THRESHOLD_PCT,
    VELOCITY_IMPROVING_BONUS,
    VELOCITY_POINTS_PER_CLOSURE,
)
from tracker_app.core.models import IssueModel, VelocityMetrics

from .scoring import clamp_score
from .timestamps import days_between, to_utc


def classify_trend(current_week: int, previous_week: int) -> tuple[str, float]:
    """Return ``(direction, percent)`` comparing the trailing week to the one before.

    With no closures in the previous week there is no ratio to take: any
    current closure counts as a 100% improvement, otherwise the trend is
    stable at 0%.
    """
    if previous_week > 0:
        percent = (current_week - previous_week) / previous_week * 100
        if percent > TREND_THRESHOLD_PCT:
            return TREND_IMPROVING, percent
        if percent < -TREND_THRESHOLD_PCT:
            return TREND_DECLINING, percent
        return TREND_STABLE, percent
    if current_week > 0:
        return TREND_IMPROVING, 100.0
    return TREND_STABLE, 0.0


def compute_velocity_metrics(issues: Sequence[IssueModel], now: datetime) -> VelocityMetrics:
    now = to_utc(now)
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)
    prev_week_start = now - timedelta(days=14)

    closed7 = closed30 = 0
    current_week = previous_week = 0
    total_close_days = 0.0
    close_samples = 0

    for issue in issues:
        closed_at = to_utc(issue.closed_at)
        if closed_at is None:
            continue
        if closed_at > week_ago:
            closed7 += 1
        if closed_at > month_ago:
            closed30 += 1
        # A closure exactly at the week boundary falls in neither week
        if prev_week_start < closed_at < week_ago:
            previous_week += 1
        elif closed_at > week_ago:
            current_week += 1
        if issue.created_at is not None:
            total_close_days += days_between(closed_at, issue.created_at)
            close_samples += 1

    avg_days = total_close_days / close_samples if close_samples else 0.0
    direction, percent = classify_trend(current_week, previous_week)

    score = 0
    if closed30 > 0:
        score = int(min(100, closed30 * VELOCITY_POINTS_PER_CLOSURE))
    if direction == TREND_IMPROVING and score < 100:
        score = clamp_score(score + VELOCITY_IMPROVING_BONUS)

    return VelocityMetrics(
        closed_last_7_days=closed7,
        closed_last_30_days=closed30,
        avg_days_to_close=avg_days,
        trend_direction=direction,
        trend_percent=percent,
        velocity_score=score,
    )

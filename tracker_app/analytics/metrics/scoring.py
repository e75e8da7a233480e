"""Shared score helpers for the 0-100 label metrics."""

from __future__ import annotations


def clamp_score(value: int) -> int:
    if value < 0:
        return 0
    if value > 100:
        return 100
    return value

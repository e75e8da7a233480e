"""JSON-ready conversion of analysis results for machine consumers.

Field names are the dataclass field names and form a stable external API.
A handful of fields are dropped when empty, matching what robot consumers
already expect: ``issues``, ``issue_ids``, ``blocking_pairs``, ``top_issue``
and ``cross_label_flow``.

Public entry point for machine consumers; nothing in the analysis pipeline
calls it.
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from datetime import datetime
from typing import Any

OMIT_WHEN_EMPTY: frozenset[str] = frozenset(
    {"issues", "issue_ids", "blocking_pairs", "top_issue", "cross_label_flow"}
)


def to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if f.name in OMIT_WHEN_EMPTY and (item is None or item == "" or item == []):
                continue
            out[f.name] = to_jsonable(item)
        return out
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        # JSON object keys must be strings (by_priority is keyed by int)
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def dumps(value: Any, *, indent: int | None = 2) -> str:
    return json.dumps(to_jsonable(value), indent=indent, sort_keys=False)

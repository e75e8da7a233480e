import json
from datetime import UTC, datetime

import pytest

from tracker_app.analytics.metrics.health import new_label_health
from tracker_app.core.mappers import issues_to_dataframe, map_issue, map_issues, map_priority
from tracker_app.core.models import LabelAnalysisResult, LabelDependency, LabelStats, LabelSummary
from tracker_app.core.serialize import dumps, to_jsonable


def _raw_issue(**overrides):
    raw = {
        "id": "bv-1",
        "status": "in_progress",
        "priority": "2",
        "issue_type": "bug",
        "labels": ["api", None, "ui"],
        "created_at": "2026-01-01T10:00:00Z",
        "updated_at": "2026-01-02T10:00:00+00:00",
        "closed_at": None,
        "dependencies": [
            {"depends_on_id": "bv-0", "type": "blocks"},
            {"type": "blocks"},
            "garbage",
        ],
    }
    raw.update(overrides)
    return raw


def test_map_issue():
    issue = map_issue(_raw_issue())
    assert issue.id == "bv-1"
    assert issue.status == "in_progress"
    assert issue.priority == 2
    assert issue.labels == ["api", "ui"]
    assert issue.created_at == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
    assert issue.closed_at is None
    assert len(issue.dependencies) == 1
    assert issue.dependencies[0].depends_on_id == "bv-0"
    assert issue.dependencies[0].type == "blocks"


def test_map_issue_requires_id():
    with pytest.raises(ValueError):
        map_issue(_raw_issue(id=""))


def test_map_issue_bad_values():
    issue = map_issue(_raw_issue(priority="high", created_at="not a date", status=None, labels=None))
    assert issue.priority == 0
    assert issue.created_at is None
    assert issue.status == "open"
    assert issue.labels == []


def test_map_priority():
    assert map_priority(None) == 0
    assert map_priority(3) == 3
    assert map_priority("1") == 1


def test_issues_to_dataframe():
    df = issues_to_dataframe(map_issues([_raw_issue(), _raw_issue(id="bv-2", labels=[])]))
    assert list(df["id"]) == ["bv-1", "bv-2"]
    assert df.loc[0, "blocked_by"] == ["bv-0"]
    assert str(df["created_at"].dt.tz) == "UTC"


def test_to_jsonable_label_health_field_names():
    h = new_label_health("api")
    out = to_jsonable(h)
    for key in (
        "label",
        "issue_count",
        "open_count",
        "closed_count",
        "blocked_count",
        "health",
        "health_level",
        "velocity",
        "freshness",
        "flow",
        "criticality",
    ):
        assert key in out
    # Empty member list is omitted
    assert "issues" not in out
    assert out["freshness"]["most_recent_update"] is None
    h.issues = ["bv-1"]
    assert to_jsonable(h)["issues"] == ["bv-1"]


def test_to_jsonable_omits_empty_dependency_lists():
    out = to_jsonable(LabelDependency(from_label="api", to_label="ui"))
    assert out == {"from_label": "api", "to_label": "ui", "issue_count": 0}


def test_to_jsonable_stringifies_int_keys():
    out = to_jsonable(LabelStats(label="api", by_priority={1: 2}))
    assert out["by_priority"] == {"1": 2}


def test_dumps_analysis_result():
    result = LabelAnalysisResult(
        generated_at=datetime(2026, 1, 15, 12, 0, tzinfo=UTC),
        total_labels=1,
        summaries=[LabelSummary(label="api", issue_count=1, health=80, health_level="healthy")],
    )
    data = json.loads(dumps(result))
    assert data["generated_at"] == "2026-01-15T12:00:00+00:00"
    assert "cross_label_flow" not in data
    assert "top_issue" not in data["summaries"][0]
    assert data["attention_needed"] == []


def test_map_issue_string_labels_ignored():
    issue = map_issue(_raw_issue(labels="api"))
    assert issue.labels == []


def test_map_issue_tracker_specific_status_is_open():
    assert map_issue(_raw_issue(status="done")).status == "open"
    assert map_issue(_raw_issue(status="closed")).status == "closed"

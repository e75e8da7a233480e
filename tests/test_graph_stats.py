import pytest

from tracker_app.core.graph_stats import NetworkXGraphStats, analyze_graph, build_dependency_graph
from tracker_app.core.models import DependencyModel, IssueModel


def _blocks(*targets):
    return [DependencyModel(depends_on_id=t, type="blocks") for t in targets]


def _chain(b_status="open"):
    return [
        IssueModel(id="a"),
        IssueModel(id="b", status=b_status, dependencies=_blocks("a")),
        IssueModel(id="c", dependencies=_blocks("b", "b")),
        IssueModel(id="d"),
    ]


def test_build_dependency_graph_edges():
    issues = _chain() + [IssueModel(id="e", dependencies=_blocks("missing", "e"))]
    graph = build_dependency_graph(issues)
    assert set(graph.nodes) == {"a", "b", "c", "d", "e"}
    assert set(graph.edges) == {("b", "a"), ("c", "b")}


def test_pagerank_and_betweenness():
    stats = analyze_graph(_chain())
    pr = stats.pagerank()
    assert set(pr) == {"a", "b", "c", "d"}
    assert sum(pr.values()) == pytest.approx(1.0)
    bw = stats.betweenness()
    assert bw["b"] > 0
    assert bw["a"] == 0
    assert bw["d"] == 0


def test_critical_path_score_longest_chain():
    stats = NetworkXGraphStats(_chain())
    assert stats.critical_path_score("a") == 3.0
    assert stats.critical_path_score("b") == 3.0
    assert stats.critical_path_score("c") == 3.0
    assert stats.critical_path_score("d") == 0.0
    assert stats.critical_path_score("unknown") == 0.0


def test_critical_path_score_collapses_cycles():
    issues = [
        IssueModel(id="x", dependencies=_blocks("y")),
        IssueModel(id="y", dependencies=_blocks("x")),
        IssueModel(id="z", dependencies=_blocks("x")),
    ]
    stats = NetworkXGraphStats(issues)
    assert stats.critical_path_score("x") == stats.critical_path_score("y") == 2.0
    assert stats.critical_path_score("z") == 2.0


def test_no_edges_means_no_critical_path():
    stats = NetworkXGraphStats([IssueModel(id="a"), IssueModel(id="b")])
    assert stats.critical_path_score("a") == 0.0
    assert stats.betweenness() == {"a": 0.0, "b": 0.0}


def test_open_blockers():
    stats = NetworkXGraphStats(_chain())
    assert stats.open_blockers("c") == ["b"]
    assert stats.open_blockers("b") == ["a"]
    assert stats.open_blockers("a") == []
    assert stats.open_blockers("unknown") == []
    closed = NetworkXGraphStats(_chain(b_status="closed"))
    assert closed.open_blockers("c") == []


def test_empty_snapshot():
    stats = NetworkXGraphStats([])
    assert stats.pagerank() == {}
    assert stats.betweenness() == {}

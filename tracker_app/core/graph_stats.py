"""Read-only centrality snapshot consumed by the label health engine.

The engine only needs four queries per issue ID: PageRank, betweenness, a
critical-path score and the open blockers of an issue. ``GraphStats`` is that
contract. ``NetworkXGraphStats`` is the default provider; it builds a
``networkx.DiGraph`` from ``blocks`` dependencies (edge: dependent -> blocker)
and delegates the centrality algorithms to NetworkX.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

import networkx as nx

from .config import DEP_BLOCKS
from .models import IssueModel
from .status import is_closed_status

logger = logging.getLogger(__name__)


class GraphStats(Protocol):
    def pagerank(self) -> dict[str, float]: ...

    def betweenness(self) -> dict[str, float]: ...

    def critical_path_score(self, issue_id: str) -> float: ...

    def open_blockers(self, issue_id: str) -> list[str]: ...


def build_dependency_graph(issues: Sequence[IssueModel]) -> nx.DiGraph:
    """Build the blocking graph. Dangling dependency targets are skipped."""
    graph = nx.DiGraph()
    for issue in issues:
        graph.add_node(issue.id)
    for issue in issues:
        for dep in issue.dependencies:
            if dep is None or dep.type != DEP_BLOCKS:
                continue
            if dep.depends_on_id not in graph or dep.depends_on_id == issue.id:
                continue
            graph.add_edge(issue.id, dep.depends_on_id)
    return graph


def _critical_path_scores(graph: nx.DiGraph) -> dict[str, float]:
    """Score issues lying on a longest dependency chain.

    Cycles are collapsed through the condensation DAG, so every member of a
    strongly connected component shares its component's score. Issues off
    every longest chain score 0, and so does everything when no chain has
    at least one edge.
    """
    if graph.number_of_edges() == 0:
        return {}
    dag = nx.condensation(graph)
    order = list(nx.topological_sort(dag))
    up: dict[int, int] = {}
    for comp in order:
        up[comp] = 1 + max((up[p] for p in dag.predecessors(comp)), default=0)
    down: dict[int, int] = {}
    for comp in reversed(order):
        down[comp] = 1 + max((down[s] for s in dag.successors(comp)), default=0)
    through = {comp: up[comp] + down[comp] - 1 for comp in order}
    longest = max(through.values(), default=0)
    if longest < 2:
        return {}
    scores: dict[str, float] = {}
    for comp, length in through.items():
        if length != longest:
            continue
        for member in dag.nodes[comp]["members"]:
            scores[member] = float(length)
    return scores


class NetworkXGraphStats:
    def __init__(self, issues: Sequence[IssueModel]):
        self._issues: dict[str, IssueModel] = {}
        for issue in issues:
            self._issues.setdefault(issue.id, issue)
        self.graph = build_dependency_graph(issues)
        if self.graph.number_of_nodes() == 0:
            self._pagerank: dict[str, float] = {}
            self._betweenness: dict[str, float] = {}
        else:
            self._pagerank = dict(nx.pagerank(self.graph))
            self._betweenness = dict(nx.betweenness_centrality(self.graph))
        self._critical = _critical_path_scores(self.graph)
        logger.debug(
            "Graph stats computed: %s nodes, %s edges, %s on critical path",
            self.graph.number_of_nodes(),
            self.graph.number_of_edges(),
            len(self._critical),
        )

    def pagerank(self) -> dict[str, float]:
        return self._pagerank

    def betweenness(self) -> dict[str, float]:
        return self._betweenness

    def critical_path_score(self, issue_id: str) -> float:
        return self._critical.get(issue_id, 0.0)

    def open_blockers(self, issue_id: str) -> list[str]:
        issue = self._issues.get(issue_id)
        if issue is None:
            return []
        blockers: list[str] = []
        for dep in issue.dependencies:
            if dep is None or dep.type != DEP_BLOCKS:
                continue
            blocker = self._issues.get(dep.depends_on_id)
            if blocker is None or is_closed_status(blocker.status):
                continue
            if blocker.id not in blockers:
                blockers.append(blocker.id)
        return blockers


def analyze_graph(issues: Sequence[IssueModel]) -> GraphStats:
    return NetworkXGraphStats(issues)

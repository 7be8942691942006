from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Set

LEVEL_HEIGHT = 100


@dataclass(frozen=True)
class Node:
    id: str
    level: int
    x: float = 0.0

    @property
    def y(self) -> float:
        return float(self.level * LEVEL_HEIGHT)

    @property
    def position(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Edge:
    source: str
    target: str

    @property
    def id(self) -> str:
        return f"{self.source}-{self.target}"


@dataclass
class HierarchyGraph:
    focal: str
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node(self, node_id: str) -> Node:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def levels(self) -> Dict[int, List[Node]]:
        grouped: Dict[int, List[Node]] = {}
        for n in self.nodes:
            grouped.setdefault(n.level, []).append(n)
        return grouped


def _check_levels(max_levels: int) -> None:
    if max_levels < 0:
        raise ValueError(f"max_levels must be non-negative, got {max_levels}")


def _parents_of(relation: Mapping[str, Sequence[str]], child: str) -> Iterable[str]:
    for parent, children in relation.items():
        if children and child in children:
            yield parent


def expand_upward(relation: Mapping[str, Sequence[str]], focal: str, max_levels: int) -> HierarchyGraph:
    """Ancestors of ``focal`` up to ``max_levels`` generations, breadth-first.

    Nodes get levels -1, -2, ... and edges still point parent -> child. Each
    ancestor is visited once; a parent shared by two frontier members is linked
    only to the first one found.
    """
    _check_levels(max_levels)
    graph = HierarchyGraph(focal=focal, nodes=[Node(focal, 0)])
    visited: Set[str] = {focal}
    frontier = [focal]

    for step in range(1, max_levels + 1):
        next_frontier: List[str] = []
        for person in frontier:
            for parent in _parents_of(relation, person):
                if parent in visited:
                    continue
                visited.add(parent)
                graph.nodes.append(Node(parent, -step))
                graph.edges.append(Edge(parent, person))
                next_frontier.append(parent)
        if not next_frontier:
            break
        frontier = next_frontier
    return graph


def expand_downward(relation: Mapping[str, Sequence[str]], focal: str, max_levels: int) -> HierarchyGraph:
    """Descendants of ``focal`` up to ``max_levels`` generations, breadth-first.

    Children are taken in the order the relation lists them, which is also the
    left-to-right order the layout uses.
    """
    _check_levels(max_levels)
    graph = HierarchyGraph(focal=focal, nodes=[Node(focal, 0)])
    visited: Set[str] = {focal}
    frontier = [focal]

    for step in range(1, max_levels + 1):
        next_frontier: List[str] = []
        for person in frontier:
            for child in relation.get(person) or ():
                if child in visited:
                    continue
                visited.add(child)
                graph.nodes.append(Node(child, step))
                graph.edges.append(Edge(person, child))
                next_frontier.append(child)
        if not next_frontier:
            break
        frontier = next_frontier
    return graph


def merge_hierarchies(upward: HierarchyGraph, downward: HierarchyGraph) -> HierarchyGraph:
    """Union of both passes. The first node seen for an id wins, so a node that
    is both ancestor and descendant (a cycle through the focal entity) keeps its
    ancestor level. Edges are concatenated, upward ones first."""
    if upward.focal != downward.focal:
        raise ValueError(f"Cannot merge hierarchies of {upward.focal!r} and {downward.focal!r}")
    merged = HierarchyGraph(focal=upward.focal)
    seen: Set[str] = set()
    for n in list(upward.nodes) + list(downward.nodes):
        if n.id in seen:
            continue
        seen.add(n.id)
        merged.nodes.append(n)
    merged.edges = list(upward.edges) + list(downward.edges)
    return merged

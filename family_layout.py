from dataclasses import replace
from typing import Dict, List, Sequence

from family_hierarchy import HierarchyGraph, Node

NODE_SPACING = 150


def layout(nodes: Sequence[Node], spacing: float = NODE_SPACING) -> List[Node]:
    """Return the nodes with x assigned, same order as given.

    Nodes sharing a level keep their discovery order and are spread ``spacing``
    apart, centered on x=0. Levels are centered independently of each other.
    """
    by_level: Dict[int, List[int]] = {}
    for idx, n in enumerate(nodes):
        by_level.setdefault(n.level, []).append(idx)

    placed = list(nodes)
    for indices in by_level.values():
        total_width = (len(indices) - 1) * spacing
        start_x = -total_width / 2 if total_width else 0.0
        for j, idx in enumerate(indices):
            placed[idx] = replace(nodes[idx], x=start_x + j * spacing)
    return placed


def layout_graph(graph: HierarchyGraph, spacing: float = NODE_SPACING) -> HierarchyGraph:
    return HierarchyGraph(focal=graph.focal, nodes=layout(graph.nodes, spacing), edges=list(graph.edges))

from io import BytesIO
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx
import pandas as pd
import requests
from graphviz import Digraph

from family_hierarchy import HierarchyGraph
from family_logger import logger

LEVEL_COLORS = ["#e1bee7", "#ce93d8", "#ba68c8", "#9c27b0", "#7b1fa2", "#4a148c"]
BACKGROUND = "#f7f7f7"
EDGE_COLOR = "#888888"
POINTS_PER_INCH = 72.0

NO_GRAPH_MESSAGE = "No graph to download."


class ExportError(RuntimeError):
    pass


def node_color(level: int) -> str:
    return LEVEL_COLORS[abs(level) % len(LEVEL_COLORS)]


def font_color(level: int) -> str:
    # the three darker purples need light text
    return "white" if abs(level) % len(LEVEL_COLORS) >= 3 else "black"


# --------------------------
# Graphviz DOT
# --------------------------
def build_graph(graph: HierarchyGraph, title: str = "") -> Digraph:
    g = Digraph("G", engine="neato")  # neato honours pinned pos
    g.attr(
        splines="true",
        overlap="false",
        bgcolor=BACKGROUND,
        labelloc="t",
        fontsize="20",
        label=title,
    )
    g.attr("node", shape="box", style="rounded,filled", color="#cccccc", fontname="Helvetica")

    # Internal names avoid graphviz treating ':' in a person's name as a port
    names = {}
    for idx, n in enumerate(graph.nodes):
        names[n.id] = f"node_{idx}"
        attrs = dict(
            label=n.id,
            fillcolor=node_color(n.level),
            fontcolor=font_color(n.level),
            pos=f"{n.x / POINTS_PER_INCH:.3f},{-n.y / POINTS_PER_INCH:.3f}!",
        )
        if n.id == graph.focal:
            attrs.update(penwidth="2", color="#4a148c")
        g.node(names[n.id], **attrs)

    for e in graph.edges:
        if e.source in names and e.target in names:
            g.edge(names[e.source], names[e.target], color=EDGE_COLOR, penwidth="2", arrowhead="normal")
    return g


# --------------------------
# Remote Rendering
# --------------------------
def render_remote(dot_source: str, fmt: str, api_url: str, timeout: float = 60) -> bytes:
    base = (api_url or "").strip()
    if not base:
        raise ExportError("No Graphviz API URL set (Sidebar → Graphviz API URL).")
    url = base.rstrip("/") + "/render"
    resp = requests.post(url, json={"dot": dot_source, "format": fmt}, timeout=timeout)
    if resp.status_code == 200:
        return resp.content
    raise ExportError(f"Remote render failed: HTTP {resp.status_code} - {resp.text[:200]}")


# --------------------------
# Local raster export
# --------------------------
def render_png(graph: HierarchyGraph) -> bytes:
    G = nx.DiGraph()
    for n in graph.nodes:
        G.add_node(n.id, level=n.level)
    for e in graph.edges:
        G.add_edge(e.source, e.target)
    # screen y grows downward, matplotlib y upward
    pos = {n.id: (n.x, -n.y) for n in graph.nodes}

    widest = max(len(level) for level in graph.levels().values())
    depth = len(graph.levels())
    fig, ax = plt.subplots(figsize=(max(6, 2 * widest), max(4, 1.5 * depth)))
    try:
        nx.draw(
            G, pos, ax=ax,
            with_labels=True,
            node_color=[node_color(G.nodes[n]["level"]) for n in G.nodes],
            node_shape="s",
            node_size=2500,
            font_size=10,
            edge_color=EDGE_COLOR,
            width=2,
            arrows=True,
        )
        ax.set_axis_off()
        buf = BytesIO()
        fig.savefig(buf, format="png", facecolor=BACKGROUND, bbox_inches="tight")
    finally:
        plt.close(fig)
    return buf.getvalue()


def export_png(graph: Optional[HierarchyGraph], api_url: str = "") -> bytes:
    """PNG of the report; remote renderer when configured, matplotlib otherwise."""
    if graph is None or not graph.nodes:
        raise ExportError(NO_GRAPH_MESSAGE)
    try:
        if api_url:
            return render_remote(build_graph(graph).source, "png", api_url)
        return render_png(graph)
    except ExportError:
        raise
    except Exception as e:
        logger.error(f"Error downloading graph: {e}")
        raise ExportError(f"Error downloading graph: {str(e) or 'Unknown error'}") from e


def export_dot(graph: Optional[HierarchyGraph], title: str = "") -> str:
    if graph is None or not graph.nodes:
        raise ExportError(NO_GRAPH_MESSAGE)
    return build_graph(graph, title).source


def graph_frames(graph: HierarchyGraph) -> Tuple[pd.DataFrame, pd.DataFrame]:
    nodes = pd.DataFrame(
        [{"id": n.id, "level": n.level, "x": n.x, "y": n.y} for n in graph.nodes],
        columns=["id", "level", "x", "y"],
    )
    edges = pd.DataFrame(
        [{"id": e.id, "source": e.source, "target": e.target} for e in graph.edges],
        columns=["id", "source", "target"],
    )
    return nodes, edges

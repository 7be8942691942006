from typing import Any, Mapping, Optional, Sequence

from family_auth import Identity
from family_hierarchy import HierarchyGraph, expand_downward, expand_upward, merge_hierarchies
from family_layout import layout_graph
from family_logger import logger

NAME_MISSING = "Please enter your name."
UPWARD_INVALID = "Upward Levels must be a non-negative number."
DOWNWARD_INVALID = "Downward Levels must be a non-negative number."
SIGN_IN_REQUIRED = "Please sign in to generate a report."
NAME_NOT_FOUND = "The entered name is not found in the family data."


class ReportError(ValueError):
    """Report generation refused before any traversal ran."""

    def __init__(self, message: str, field: str):
        super().__init__(message)
        self.message = message
        self.field = field


def _levels(value: Any, message: str, field: str) -> int:
    if isinstance(value, bool):
        raise ReportError(message, field)
    if isinstance(value, float) and not value.is_integer():
        raise ReportError(message, field)
    try:
        levels = int(value)
    except (TypeError, ValueError):
        raise ReportError(message, field) from None
    if levels < 0:
        raise ReportError(message, field)
    return levels


def generate_report(
    focal: str,
    up_levels: Any,
    down_levels: Any,
    relation: Mapping[str, Sequence[str]],
    identity: Optional[Identity],
) -> HierarchyGraph:
    """Validate the request, then expand both ways, merge and lay out."""
    name = (focal or "").strip()
    if not name:
        raise ReportError(NAME_MISSING, "name")
    up = _levels(up_levels, UPWARD_INVALID, "upward")
    down = _levels(down_levels, DOWNWARD_INVALID, "downward")
    if identity is None:
        raise ReportError(SIGN_IN_REQUIRED, "auth")
    if name not in relation:
        raise ReportError(NAME_NOT_FOUND, "name")

    upward = expand_upward(relation, name, up)
    downward = expand_downward(relation, name, down)
    graph = layout_graph(merge_hierarchies(upward, downward))
    logger.info(f"Report for {name!r} (up={up}, down={down}): "
                f"{len(graph.nodes)} nodes, {len(graph.edges)} edges")
    return graph

"""Workspace geometry.

Computes the pixel rectangle of every node for a given container, the way a
flex layout would place them, and exposes those rectangles as a
MeasurementProvider for the drag controller.
"""

from dataclasses import asdict, dataclass

from .drag import MeasurementProvider
from .types import Axis, Direction, GroupNode, SplitNode, WorkspaceNode


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixels."""

    x: float
    y: float
    width: float
    height: float

    def extent(self, axis: Axis) -> float:
        return self.width if axis == Axis.WIDTH else self.height

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def to_dict(self) -> dict:
        return asdict(self)


def compute_rects(node: WorkspaceNode, bounds: Rect) -> dict[str, Rect]:
    """Place every node of the tree inside bounds.

    Args:
        node: Tree root
        bounds: Container rectangle for the root

    Returns:
        Mapping of node id -> Rect (split nodes and group leaves)
    """
    rects: dict[str, Rect] = {}
    _place(node, bounds, rects)
    return rects


def _place(node: WorkspaceNode, bounds: Rect, rects: dict[str, Rect]) -> None:
    rects[node.id] = bounds
    if isinstance(node, GroupNode):
        return

    offset = 0.0
    for child, size in zip(node.children, node.sizes):
        if node.direction == Direction.HORIZONTAL:
            extent = bounds.height * size / 100
            child_bounds = Rect(bounds.x, bounds.y + offset, bounds.width, extent)
        else:
            extent = bounds.width * size / 100
            child_bounds = Rect(bounds.x + offset, bounds.y, extent, bounds.height)
        _place(child, child_bounds, rects)
        offset += extent


def layout_measurement(rects: dict[str, Rect]) -> MeasurementProvider:
    """Build a MeasurementProvider reading precomputed rectangles.

    Unknown containers measure 0, which disables moves for that drag.
    """

    def measure(container_id: str, axis: Axis) -> float:
        rect = rects.get(container_id)
        return rect.extent(axis) if rect else 0.0

    return measure


def group_at(node: WorkspaceNode, bounds: Rect, x: float, y: float) -> str | None:
    """Hit-test a point to the pane group under it."""
    rects = compute_rects(node, bounds)
    for candidate_id, rect in rects.items():
        if not rect.contains(x, y):
            continue
        leaf = _find_leaf(node, candidate_id)
        if leaf is not None:
            return leaf.pane_group_id
    return None


def _find_leaf(node: WorkspaceNode, node_id: str) -> GroupNode | None:
    if isinstance(node, GroupNode):
        return node if node.id == node_id else None
    assert isinstance(node, SplitNode)
    for child in node.children:
        found = _find_leaf(child, node_id)
        if found is not None:
            return found
    return None

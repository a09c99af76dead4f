"""Drawable items sharing one scene.

Nodes, edge lines, arrowheads and the placeholder text are all ``Drawable``
values told apart by ``kind``. Every kind answers ``bounding_box``; renderers
dispatch on ``kind`` to draw them.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .geometry import EdgeGeometry, Point, Rect, node_rect
from .models import GraphModel, GraphNode

logger = logging.getLogger(__name__)

PLACEHOLDER_FONT_PX = 21.0  # 16pt
PLACEHOLDER_CHAR_WIDTH = 0.6  # Of the font size, for a proportional font
PLACEHOLDER_LINE_HEIGHT = 1.2


class DrawableKind(str, Enum):
    NODE = "node"
    EDGE_LINE = "edge_line"
    ARROW_HEAD = "arrow_head"
    PLACEHOLDER_TEXT = "placeholder_text"


@dataclass(frozen=True)
class Drawable:
    """One item in the scene."""
    kind: DrawableKind
    points: tuple[Point, ...] = ()
    node: GraphNode | None = None
    text: str = ""
    z: int = 0

    @property
    def bounding_box(self) -> Rect:
        if self.kind == DrawableKind.NODE:
            return node_rect(self.node)
        if self.kind == DrawableKind.PLACEHOLDER_TEXT:
            return placeholder_rect(self.text)
        return Rect.bounding(list(self.points))

    @classmethod
    def for_node(cls, node: GraphNode) -> "Drawable":
        return cls(kind=DrawableKind.NODE, node=node, text=node.display_label)

    @classmethod
    def edge_line(cls, geometry: EdgeGeometry) -> "Drawable":
        return cls(kind=DrawableKind.EDGE_LINE, points=(geometry.start, geometry.end), z=-1)

    @classmethod
    def arrow(cls, geometry: EdgeGeometry) -> "Drawable":
        return cls(kind=DrawableKind.ARROW_HEAD, points=geometry.arrow, z=-1)

    @classmethod
    def placeholder(cls, text: str) -> "Drawable":
        return cls(kind=DrawableKind.PLACEHOLDER_TEXT, text=text)


def placeholder_rect(text: str) -> Rect:
    """Approximate text extent, centered on the scene origin."""
    lines = text.split("\n") or [""]
    width = max(len(line) for line in lines) * PLACEHOLDER_FONT_PX * PLACEHOLDER_CHAR_WIDTH
    height = len(lines) * PLACEHOLDER_FONT_PX * PLACEHOLDER_LINE_HEIGHT
    return Rect(-width / 2, -height / 2, width, height)


@dataclass
class Scene:
    """Ordered collection of drawables."""
    items: list[Drawable] = field(default_factory=list)

    def clear(self) -> None:
        self.items.clear()

    def add(self, item: Drawable) -> Drawable:
        self.items.append(item)
        return item

    def of_kind(self, kind: DrawableKind) -> list[Drawable]:
        return [item for item in self.items if item.kind == kind]

    def painting_order(self) -> list[Drawable]:
        # Stable sort keeps insertion order within a z level
        return sorted(self.items, key=lambda item: item.z)

    def items_bounding_rect(self) -> Rect | None:
        rect = None
        for item in self.items:
            box = item.bounding_box
            rect = box if rect is None else rect.united(box)
        return rect

    def add_graph(self, model: GraphModel, arrow_size: float) -> None:
        """Add node boxes, then one line and arrowhead per edge."""
        for node in model.nodes.values():
            self.add(Drawable.for_node(node))

        for edge in model.edges:
            geometry = EdgeGeometry.between(
                model.nodes[edge.from_node], model.nodes[edge.to_node], arrow_size
            )
            self.add(Drawable.edge_line(geometry))
            self.add(Drawable.arrow(geometry))

        logger.debug(f"Scene holds {len(self.items)} drawables")

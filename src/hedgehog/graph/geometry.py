"""Edge anchors and arrowheads."""

import math
from dataclasses import dataclass

from .models import GraphNode

DEFAULT_ARROW_SIZE = 10.0
ARROW_HALF_ANGLE = math.pi / 6  # 30 degrees either side of the line


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its top-left corner and size."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    def united(self, other: "Rect") -> "Rect":
        left = min(self.x, other.x)
        top = min(self.y, other.y)
        return Rect(left, top, max(self.right, other.right) - left, max(self.bottom, other.bottom) - top)

    def adjusted(self, margin: float) -> "Rect":
        """Grow the rectangle by ``margin`` on every side."""
        return Rect(self.x - margin, self.y - margin, self.width + 2 * margin, self.height + 2 * margin)

    @classmethod
    def bounding(cls, points: list[Point]) -> "Rect":
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def node_rect(node: GraphNode) -> Rect:
    return Rect(node.x, node.y, node.width, node.height)


def source_anchor(node: GraphNode) -> Point:
    """Bottom-center of the node box."""
    return Point(node.x + node.width / 2, node.y + node.height)


def target_anchor(node: GraphNode) -> Point:
    """Top-center of the node box."""
    return Point(node.x + node.width / 2, node.y)


def line_angle(start: Point, end: Point) -> float:
    return math.atan2(end.y - start.y, end.x - start.x)


def arrow_head(start: Point, end: Point, size: float = DEFAULT_ARROW_SIZE) -> tuple[Point, Point, Point]:
    """Triangle with its apex on ``end`` pointing along start -> end."""
    angle = line_angle(start, end)
    left = Point(
        end.x - math.cos(angle - ARROW_HALF_ANGLE) * size,
        end.y - math.sin(angle - ARROW_HALF_ANGLE) * size,
    )
    right = Point(
        end.x - math.cos(angle + ARROW_HALF_ANGLE) * size,
        end.y - math.sin(angle + ARROW_HALF_ANGLE) * size,
    )
    return (end, left, right)


@dataclass(frozen=True)
class EdgeGeometry:
    """Line and arrowhead for one edge."""
    start: Point
    end: Point
    arrow: tuple[Point, Point, Point]

    @classmethod
    def between(cls, source: GraphNode, target: GraphNode, arrow_size: float = DEFAULT_ARROW_SIZE) -> "EdgeGeometry":
        # Anchors stay on the box bottom/top whatever the relative position.
        start = source_anchor(source)
        end = target_anchor(target)
        return cls(start=start, end=end, arrow=arrow_head(start, end, arrow_size))

    @property
    def angle(self) -> float:
        return line_angle(self.start, self.end)

"""Call graph pipeline: artifact parsing, model, layout, geometry and rendering."""

from .geometry import EdgeGeometry, Point, Rect, arrow_head, source_anchor, target_anchor
from .layout import GridLayout
from .models import GraphEdge, GraphModel, GraphNode
from .parser import EdgeDeclaration, NodeDeclaration, ParseResult, parse, parse_artifact, read_artifact, truncate_label
from .scene import Drawable, DrawableKind, Scene
from .svg import SvgRenderer

__all__ = [
    "parse",
    "parse_artifact",
    "read_artifact",
    "truncate_label",
    "ParseResult",
    "NodeDeclaration",
    "EdgeDeclaration",
    "GraphModel",
    "GraphNode",
    "GraphEdge",
    "GridLayout",
    "EdgeGeometry",
    "Point",
    "Rect",
    "arrow_head",
    "source_anchor",
    "target_anchor",
    "Drawable",
    "DrawableKind",
    "Scene",
    "SvgRenderer",
]

"""In-memory call graph built from parsed artifact declarations."""

import logging
from dataclasses import dataclass, field

from .parser import ParseResult, truncate_label

logger = logging.getLogger(__name__)

DEFAULT_NODE_WIDTH = 150.0
DEFAULT_NODE_HEIGHT = 50.0


@dataclass
class GraphNode:
    """A function node with its box geometry."""
    id: str
    label: str
    width: float = DEFAULT_NODE_WIDTH
    height: float = DEFAULT_NODE_HEIGHT
    x: float = 0.0  # Set by the layout engine
    y: float = 0.0

    @property
    def display_label(self) -> str:
        return truncate_label(self.label)

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class GraphEdge:
    """A call from one node to another."""
    from_node: str
    to_node: str


@dataclass
class GraphModel:
    """Insertion-ordered node store plus an edge list.

    Node order drives the layout, so ``nodes`` is never reordered.
    """
    node_width: float = DEFAULT_NODE_WIDTH
    node_height: float = DEFAULT_NODE_HEIGHT
    nodes: dict[str, GraphNode] = field(default_factory=dict)
    edges: list[GraphEdge] = field(default_factory=list)

    def add_node(self, node_id: str, label: str) -> GraphNode:
        """Add a node, or return the existing one with its label untouched."""
        existing = self.nodes.get(node_id)
        if existing is not None:
            return existing

        node = GraphNode(
            id=node_id,
            label=label,
            width=self.node_width,
            height=self.node_height,
        )
        self.nodes[node_id] = node
        return node

    def add_edge(self, from_node: str, to_node: str) -> GraphEdge | None:
        """Append an edge; edges with an unknown endpoint are dropped."""
        if from_node not in self.nodes or to_node not in self.nodes:
            logger.debug(f"Dropping dangling edge {from_node!r} -> {to_node!r}")
            return None

        edge = GraphEdge(from_node=from_node, to_node=to_node)
        self.edges.append(edge)
        return edge

    def clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()

    def populate(self, result: ParseResult) -> None:
        """Fill the model from parser output, nodes before edges."""
        for declaration in result.nodes:
            self.add_node(declaration.id, declaration.label)
        for declaration in result.edges:
            self.add_edge(declaration.from_id, declaration.to_id)

        logger.info(f"Graph model holds {len(self.nodes)} nodes and {len(self.edges)} edges")

    @property
    def is_empty(self) -> bool:
        return not self.nodes

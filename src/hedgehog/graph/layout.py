"""Deterministic grid layout."""

import logging
from dataclasses import dataclass

from ..config import LayoutConfig
from .models import GraphModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridCell:
    column: int
    row: int


@dataclass
class GridLayout:
    """Places nodes row by row in insertion order.

    Edges play no part in placement.
    """
    columns: int = 5
    column_spacing: float = 200.0
    row_spacing: float = 120.0

    def __post_init__(self):
        if self.columns < 1:
            raise ValueError("columns must be >= 1")

    @classmethod
    def from_config(cls, config: LayoutConfig) -> "GridLayout":
        return cls(
            columns=config.columns,
            column_spacing=config.column_spacing,
            row_spacing=config.row_spacing,
        )

    def cell(self, index: int) -> GridCell:
        return GridCell(column=index % self.columns, row=index // self.columns)

    def position(self, index: int) -> tuple[float, float]:
        cell = self.cell(index)
        return (cell.column * self.column_spacing, cell.row * self.row_spacing)

    def apply(self, model: GraphModel) -> None:
        """Assign every node its grid position."""
        for index, node in enumerate(model.nodes.values()):
            node.x, node.y = self.position(index)

        if model.nodes:
            rows = (len(model.nodes) - 1) // self.columns + 1
            logger.debug(f"Laid out {len(model.nodes)} nodes on a {self.columns}x{rows} grid")

"""Interactive viewport over the call graph scene.

The viewport owns the graph model, the scene built from it and the view
transform. It is either showing a graph or showing placeholder text, and only
``load``, ``show_message`` and ``clear`` move it between the two.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .config import LayoutConfig, ViewportConfig
from .errors import EmptyGraphResult, HedgehogError
from .graph.geometry import Point, Rect
from .graph.layout import GridLayout
from .graph.models import GraphModel
from .graph.parser import parse, read_artifact
from .graph.scene import Drawable, DrawableKind, Scene
from .messages import Clear, Load, ShowMessage, ViewMessage

logger = logging.getLogger(__name__)

INITIAL_MESSAGE = "Select a folder and click 'Run Analysis'\nto visualize the call graph"
INITIAL_STATUS = "Ready - Select a folder to begin"


class ViewMode(str, Enum):
    PLACEHOLDER = "placeholder"
    GRAPH = "graph"


@dataclass
class ViewState:
    """Scene-to-view transform: ``view = scene * scale + offset``."""
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def map_to_view(self, point: Point) -> Point:
        return Point(point.x * self.scale + self.offset_x, point.y * self.scale + self.offset_y)

    def map_to_scene(self, point: Point) -> Point:
        return Point((point.x - self.offset_x) / self.scale, (point.y - self.offset_y) / self.scale)


class Viewport:
    """Graph display with pan, zoom and fit-to-view."""

    def __init__(self, config: ViewportConfig | None = None, layout_config: LayoutConfig | None = None):
        self.config = config or ViewportConfig()
        self.layout_config = layout_config or LayoutConfig()
        self.layout = GridLayout.from_config(self.layout_config)
        self.model = GraphModel(
            node_width=self.layout_config.node_width,
            node_height=self.layout_config.node_height,
        )
        self.scene = Scene()
        self.view = ViewState()
        self.mode = ViewMode.PLACEHOLDER
        self.placeholder_text = ""
        self.status = INITIAL_STATUS
        self.last_error: HedgehogError | None = None
        self.show_message(INITIAL_MESSAGE, status=INITIAL_STATUS)

    @property
    def width(self) -> float:
        return self.config.width

    @property
    def height(self) -> float:
        return self.config.height

    @property
    def is_placeholder(self) -> bool:
        return self.mode == ViewMode.PLACEHOLDER

    def handle(self, message: ViewMessage) -> None:
        """Apply a message from the orchestrator."""
        if isinstance(message, Load):
            self.load(message.path, status=message.status)
        elif isinstance(message, ShowMessage):
            self.show_message(message.text, status=message.status or None)
        elif isinstance(message, Clear):
            self.clear(status=message.status)
        else:
            raise TypeError(f"Unknown view message: {message!r}")

    def load(self, artifact_path: str | Path, status: str = "Loaded") -> bool:
        """Read, parse, lay out and frame an artifact.

        Returns:
            True if the viewport now shows a graph, False if it fell back to
            the placeholder
        """
        try:
            text = read_artifact(artifact_path)
            self._reset_content()
            self.model.populate(parse(text))
            if self.model.is_empty:
                raise EmptyGraphResult(artifact_path)
        except HedgehogError as e:
            logger.info(f"Load of {artifact_path} fell back to placeholder: {e.status}")
            self.last_error = e
            self.show_message(e.placeholder_text, status=e.status)
            return False

        self.last_error = None
        self.layout.apply(self.model)
        self.scene.add_graph(self.model, self.layout_config.arrow_size)
        self.mode = ViewMode.GRAPH
        self.placeholder_text = ""
        self.status = status
        self.fit_to_view()

        logger.info(
            f"Loaded {artifact_path}: {len(self.model.nodes)} nodes, {len(self.model.edges)} edges"
        )
        return True

    def show_message(self, text: str, status: str | None = None) -> None:
        """Drop the graph and show ``text`` as the placeholder."""
        self._reset_content()
        self.scene.add(Drawable.placeholder(text))
        self.mode = ViewMode.PLACEHOLDER
        self.placeholder_text = text
        if status is not None:
            self.status = status

    def clear(self, status: str = "Results cleared") -> None:
        """Drop everything, leaving an empty placeholder."""
        self._reset_content()
        self.mode = ViewMode.PLACEHOLDER
        self.placeholder_text = ""
        self.status = status

    def _reset_content(self) -> None:
        self.model.clear()
        self.scene.clear()

    def scene_rect(self) -> Rect | None:
        """Content bounds plus the framing padding."""
        rect = self.scene.items_bounding_rect()
        if rect is None:
            return None
        return rect.adjusted(self.config.padding)

    def fit_to_view(self) -> None:
        """Frame the padded content keeping aspect ratio, then back off a little."""
        content = self.scene.items_bounding_rect()
        if content is None:
            return
        framed = content.adjusted(self.config.padding)
        if framed.width <= 0 or framed.height <= 0:
            return

        scale = min(self.width / framed.width, self.height / framed.height)
        scale *= self.config.fit_margin

        center = framed.center
        self.view = ViewState(
            scale=scale,
            offset_x=self.width / 2 - center.x * scale,
            offset_y=self.height / 2 - center.y * scale,
        )
        logger.debug(f"Fit to view at scale {scale:.4f}")

    def wheel(self, delta: float, anchor: Point | None = None) -> None:
        """Apply one wheel step: positive zooms in, negative zooms out.

        The point under ``anchor`` (view coordinates, default the viewport
        center) stays put. There is no minimum or maximum scale.
        """
        if delta == 0:
            return
        factor = self.config.zoom_step if delta > 0 else 1 / self.config.zoom_step
        if anchor is None:
            anchor = Point(self.width / 2, self.height / 2)

        self.view = ViewState(
            scale=self.view.scale * factor,
            offset_x=anchor.x - (anchor.x - self.view.offset_x) * factor,
            offset_y=anchor.y - (anchor.y - self.view.offset_y) * factor,
        )

    def zoom(self, steps: int, anchor: Point | None = None) -> None:
        for _ in range(abs(steps)):
            self.wheel(1 if steps > 0 else -1, anchor)

    def pan(self, dx: float, dy: float) -> None:
        """Drag the view by (dx, dy) view pixels. Node positions are untouched."""
        self.view = ViewState(
            scale=self.view.scale,
            offset_x=self.view.offset_x + dx,
            offset_y=self.view.offset_y + dy,
        )

    def drawables(self, kind: DrawableKind | None = None) -> list[Drawable]:
        if kind is None:
            return list(self.scene.items)
        return self.scene.of_kind(kind)

"""SVG rendering of a viewport."""

import html
import logging
import math
from pathlib import Path

from .geometry import Rect
from .scene import Drawable, DrawableKind

logger = logging.getLogger(__name__)

BACKGROUND = "#11111b"
GRID_LINE = "#1e1e2e"
NODE_STROKE = "#89b4fa"
NODE_FILL = "#313244"
NODE_TEXT = "#cdd6f4"
EDGE_COLOR = "#a6adc8"
PLACEHOLDER_TEXT = "#6c7086"


class SvgRenderer:
    """Renders the viewport's scene through its current view transform."""

    format_name = "svg"

    def __init__(self, grid_size: float = 50.0, font_family: str = "sans-serif"):
        self.grid_size = grid_size
        self.font_family = font_family

    def get_file_extension(self) -> str:
        return ".svg"

    def render(self, viewport) -> str:
        """Render ``viewport`` as a standalone SVG document."""
        width = _fmt(viewport.width)
        height = _fmt(viewport.height)
        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">',
            f'  <rect x="0" y="0" width="{width}" height="{height}" fill="{BACKGROUND}"/>',
        ]

        view = viewport.view
        lines.append(
            f'  <g class="view" transform="matrix({_fmt(view.scale)} 0 0 {_fmt(view.scale)} '
            f'{_fmt(view.offset_x)} {_fmt(view.offset_y)})">'
        )
        scene_rect = viewport.scene_rect()
        if scene_rect is not None and not viewport.is_placeholder:
            lines.extend(self._render_grid(scene_rect))
        for item in viewport.scene.painting_order():
            if item.kind != DrawableKind.PLACEHOLDER_TEXT:
                lines.append("    " + self.draw(item))
        lines.append("  </g>")

        # Placeholder text is not affected by pan or zoom.
        for item in viewport.scene.of_kind(DrawableKind.PLACEHOLDER_TEXT):
            lines.append("  " + self._draw_placeholder(item, viewport.width, viewport.height))

        lines.append("</svg>")
        return "\n".join(lines) + "\n"

    def write(self, viewport, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(viewport), encoding="utf-8")
        logger.info(f"Wrote {path}")
        return path

    def draw(self, item: Drawable) -> str:
        """SVG element for a single scene item."""
        if item.kind == DrawableKind.NODE:
            return self._draw_node(item)
        if item.kind == DrawableKind.EDGE_LINE:
            start, end = item.points
            return (
                f'<line class="edge" x1="{_fmt(start.x)}" y1="{_fmt(start.y)}" '
                f'x2="{_fmt(end.x)}" y2="{_fmt(end.y)}" stroke="{EDGE_COLOR}" stroke-width="1.5"/>'
            )
        if item.kind == DrawableKind.ARROW_HEAD:
            points = " ".join(f"{_fmt(p.x)},{_fmt(p.y)}" for p in item.points)
            return f'<polygon class="arrow" points="{points}" fill="{EDGE_COLOR}" stroke="{EDGE_COLOR}"/>'
        if item.kind == DrawableKind.PLACEHOLDER_TEXT:
            return self._draw_placeholder(item, 0.0, 0.0)
        raise ValueError(f"Unknown drawable kind: {item.kind}")

    def _draw_node(self, item: Drawable) -> str:
        node = item.node
        cx = node.x + node.width / 2
        cy = node.y + node.height / 2
        return (
            f'<g class="node" data-id="{html.escape(node.id)}">'
            f'<ellipse cx="{_fmt(cx)}" cy="{_fmt(cy)}" rx="{_fmt(node.width / 2)}" '
            f'ry="{_fmt(node.height / 2)}" fill="{NODE_FILL}" stroke="{NODE_STROKE}" stroke-width="2"/>'
            f'<text x="{_fmt(cx)}" y="{_fmt(cy)}" fill="{NODE_TEXT}" font-family="{self.font_family}" '
            f'font-size="12" text-anchor="middle" dominant-baseline="middle">'
            f"{html.escape(item.text)}</text></g>"
        )

    def _draw_placeholder(self, item: Drawable, width: float, height: float) -> str:
        lines = item.text.split("\n")
        line_height = 25
        top = height / 2 - (len(lines) - 1) * line_height / 2
        spans = "".join(
            f'<tspan x="{_fmt(width / 2)}" y="{_fmt(top + i * line_height)}">{html.escape(line)}</tspan>'
            for i, line in enumerate(lines)
        )
        return (
            f'<text class="placeholder" fill="{PLACEHOLDER_TEXT}" font-family="{self.font_family}" '
            f'font-size="21" text-anchor="middle">{spans}</text>'
        )

    def _render_grid(self, rect: Rect) -> list[str]:
        size = self.grid_size
        left = math.floor(rect.x / size) * size
        top = math.floor(rect.y / size) * size
        parts = []
        x = left
        while x < rect.right:
            parts.append(f"M{_fmt(x)} {_fmt(rect.y)}V{_fmt(rect.bottom)}")
            x += size
        y = top
        while y < rect.bottom:
            parts.append(f"M{_fmt(rect.x)} {_fmt(y)}H{_fmt(rect.right)}")
            y += size
        return [f'    <path class="grid" d="{"".join(parts)}" stroke="{GRID_LINE}" stroke-width="0.5" fill="none"/>']


def _fmt(value: float) -> str:
    """Compact number formatting for SVG attributes."""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text

"""
File export functionality for scenes.

This module handles exporting generated primitives to various file formats:
- Excalidraw scene files (.excalidraw) - JSON consumed by the Excalidraw editor
- PNG images - Rasterized preview drawn with Pillow

The SceneExporter class provides methods for saving scenes and handles
font loading, shape rasterization, and file I/O.
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from .primitives import FONT_MONO, TRANSPARENT, Primitive, PrimitiveType

SCENE_SOURCE = "plexscene"
SCENE_BACKGROUND = "#f8fafc"
SCENE_GRID_SIZE = 20

MONOSPACE_FONTS = [
    # Linux
    "DejaVuSansMono",
    "DejaVu Sans Mono",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    # macOS
    "Menlo",
    "/System/Library/Fonts/Menlo.ttc",
    # Windows
    "Consolas",
    "Courier New",
    "C:/Windows/Fonts/consola.ttf",
]

SANS_FONTS = [
    # Linux
    "DejaVuSans",
    "DejaVu Sans",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    # macOS
    "Helvetica",
    "/System/Library/Fonts/Helvetica.ttc",
    # Windows
    "Arial",
    "C:/Windows/Fonts/arial.ttf",
]

RGBA = Tuple[int, int, int, int]


class SceneExporter:
    """
    Exports primitives to various file formats.

    Attributes:
        default_font: Font name or path tried first for PNG text.
    """

    def __init__(self, default_font: Optional[str] = None):
        """
        Initialize the scene exporter.

        Args:
            default_font: Default font name for PNG export (e.g., "Arial").
        """
        self.default_font = default_font
        self._fonts: Dict[Tuple[int, bool], ImageFont.ImageFont] = {}

    def to_scene(self, elements: Sequence[Primitive]) -> Dict[str, Any]:
        """Build the Excalidraw scene document for ``elements``."""
        return {
            "type": "excalidraw",
            "version": 2,
            "source": SCENE_SOURCE,
            "elements": [element.to_dict() for element in elements],
            "appState": {
                "viewBackgroundColor": SCENE_BACKGROUND,
                "gridSize": SCENE_GRID_SIZE,
            },
            "files": {},
        }

    def save_json(self, elements: Sequence[Primitive], filename: str) -> None:
        """
        Save primitives as an Excalidraw scene file.

        Args:
            elements: Primitives in z-order.
            filename: Output filename (usually ending in .excalidraw).
        """
        output_path = Path(filename)
        output_path.write_text(
            json.dumps(self.to_scene(elements), indent=2), encoding="utf-8"
        )

    def save_png(
        self,
        elements: Sequence[Primitive],
        filename: str,
        scale: int = 1,
        padding: int = 20,
        bg_color: str = SCENE_BACKGROUND,
    ) -> Tuple[int, int]:
        """
        Save primitives as a PNG preview.

        Shapes are drawn in z-order with their fill, stroke and opacity.
        The hand-drawn jitter and dash patterns of the editor are not
        reproduced.

        Args:
            elements: Primitives in z-order.
            filename: Output filename (should end in .png).
            scale: Resolution multiplier.
            padding: Padding around the scene bounds in scene units.
            bg_color: Background color as hex string.

        Returns:
            The (width, height) of the written image in pixels.
        """
        min_x, min_y, max_x, max_y = scene_bounds(elements)
        width = max(int((max_x - min_x + 2 * padding) * scale), 100 * scale)
        height = max(int((max_y - min_y + 2 * padding) * scale), 100 * scale)

        img = Image.new("RGBA", (width, height), bg_color)
        draw = ImageDraw.Draw(img, "RGBA")

        def project(x: float, y: float) -> Tuple[float, float]:
            return (x - min_x + padding) * scale, (y - min_y + padding) * scale

        for element in elements:
            self._draw(draw, element, project, scale)

        output_path = Path(filename)
        img.convert("RGB").save(output_path, "PNG")
        return width, height

    def _draw(self, draw: ImageDraw.ImageDraw, element: Primitive, project, scale):
        stroke = _rgba(element.stroke_color, element.opacity)
        fill = _rgba(element.background_color, element.opacity)
        line_width = max(1, int(round(element.stroke_width * scale)))
        left, top = project(element.x, element.y)
        right, bottom = project(element.x + element.width, element.y + element.height)
        box = [left, top, max(left, right), max(top, bottom)]

        if element.type is PrimitiveType.RECTANGLE:
            if element.roundness is not None:
                draw.rounded_rectangle(
                    box, radius=8 * scale, fill=fill, outline=stroke, width=line_width
                )
            else:
                draw.rectangle(box, fill=fill, outline=stroke, width=line_width)
        elif element.type is PrimitiveType.ELLIPSE:
            draw.ellipse(box, fill=fill, outline=stroke, width=line_width)
        elif element.type is PrimitiveType.DIAMOND:
            center_x = (box[0] + box[2]) / 2
            center_y = (box[1] + box[3]) / 2
            corners = [
                (center_x, box[1]),
                (box[2], center_y),
                (center_x, box[3]),
                (box[0], center_y),
            ]
            draw.polygon(corners, fill=fill, outline=stroke, width=line_width)
        elif element.type is PrimitiveType.TEXT:
            self._draw_text(draw, element, (left, top), stroke, scale)
        elif element.type is PrimitiveType.ARROW:
            points = [
                project(element.x + dx, element.y + dy) for dx, dy in element.points
            ]
            if len(points) >= 2:
                draw.line(points, fill=stroke, width=line_width)
                if element.end_arrowhead:
                    _draw_arrowhead(draw, points[-2], points[-1], stroke, scale)

    def _draw_text(self, draw, element: Primitive, origin, color, scale) -> None:
        if not element.text:
            return
        font_size = int(round((element.font_size or 12) * scale))
        font = self._font(font_size, element.font_family == FONT_MONO)
        spacing = max(0, int(font_size * ((element.line_height or 1.25) - 1)))
        anchor_x, anchor_y = origin
        align = element.text_align or "left"
        if align == "center":
            anchor_x += element.width * scale / 2
            anchor = "ma"
        else:
            anchor = "la"
        draw.multiline_text(
            (anchor_x, anchor_y),
            element.text,
            font=font,
            fill=color,
            spacing=spacing,
            anchor=anchor,
            align=align if align in ("left", "center", "right") else "left",
        )

    def _font(self, font_size: int, monospace: bool) -> ImageFont.ImageFont:
        key = (font_size, monospace)
        if key not in self._fonts:
            self._fonts[key] = self._load_font(font_size, monospace)
        return self._fonts[key]

    def _load_font(self, font_size: int, monospace: bool) -> ImageFont.ImageFont:
        """
        Load a font for PNG rendering.

        Tries the following in order:
        1. The default font name if provided
        2. Common system fonts of the requested kind
        3. Pillow's default font

        Args:
            font_size: Font size in pixels.
            monospace: Whether a fixed-width font is wanted (tables).

        Returns:
            A PIL ImageFont object.
        """
        fonts_to_try: List[str] = []
        if self.default_font:
            fonts_to_try.append(self.default_font)
        fonts_to_try.extend(MONOSPACE_FONTS if monospace else SANS_FONTS)

        for font in fonts_to_try:
            try:
                return ImageFont.truetype(font, font_size)
            except OSError:
                continue

        return ImageFont.load_default(size=font_size)


def scene_bounds(elements: Sequence[Primitive]) -> Tuple[float, float, float, float]:
    """
    Bounding box (min_x, min_y, max_x, max_y) of the primitives.

    Arrow extents come from their relative points. An empty scene has
    zero-sized bounds at the origin.
    """
    xs: List[float] = []
    ys: List[float] = []
    for element in elements:
        if element.type is PrimitiveType.ARROW and element.points:
            xs.extend(element.x + dx for dx, _ in element.points)
            ys.extend(element.y + dy for _, dy in element.points)
        else:
            xs.extend([element.x, element.x + element.width])
            ys.extend([element.y, element.y + element.height])
    if not xs:
        return 0.0, 0.0, 0.0, 0.0
    return min(xs), min(ys), max(xs), max(ys)


def _rgba(color: Optional[str], opacity: int = 100) -> Optional[RGBA]:
    """Parse a hex color into RGBA with opacity applied; None when transparent."""
    if not color or color == TRANSPARENT:
        return None
    red, green, blue, alpha = ImageColor.getcolor(color, "RGBA")
    return red, green, blue, int(alpha * opacity / 100)


def _draw_arrowhead(draw, from_point, to_point, color, scale) -> None:
    """Draw a filled arrowhead at the end of a line."""
    x1, y1 = from_point
    x2, y2 = to_point
    if (x1, y1) == (x2, y2):
        return

    arrow_size = 10 * scale
    angle = math.atan2(y2 - y1, x2 - x1)
    angle1 = angle + math.pi * 0.8
    angle2 = angle - math.pi * 0.8

    ax1 = x2 + arrow_size * math.cos(angle1)
    ay1 = y2 + arrow_size * math.sin(angle1)
    ax2 = x2 + arrow_size * math.cos(angle2)
    ay2 = y2 + arrow_size * math.sin(angle2)

    draw.polygon([(x2, y2), (ax1, ay1), (ax2, ay2)], fill=color)

"""
Scene primitives in the Excalidraw element format.

A Primitive is one renderable unit: a rectangle, ellipse, diamond, text or
arrow with geometry, styling, grouping ids and a z-order index. Primitives
are plain records; the Scene assigns z-order indices in insertion order and
``Primitive.to_dict`` produces the camelCase dict the external renderer
consumes.
"""

import zlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class PrimitiveType(Enum):
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"
    DIAMOND = "diamond"
    TEXT = "text"
    ARROW = "arrow"


# Font families understood by the renderer
FONT_HAND = 1
FONT_NORMAL = 2
FONT_MONO = 3

TRANSPARENT = "transparent"
BLACK = "#000000"

# Stroke colors per environment classification
ENVIRONMENT_COLORS = {
    "production": "#dc2626",
    "staging": "#f59e0b",
    "development": "#3b82f6",
    "sandbox": "#8b5cf6",
}

# Stroke colors per cluster kind
CLUSTER_COLORS = {
    "cloud-hosted": "#10b981",
    "on-premises": "#6366f1",
}

NODE_STROKE_COLOR = "#64748b"

# Node fill per status; anything other than running/error uses "other"
NODE_STATUS_COLORS = {
    "running": "#10b981",
    "error": "#dc2626",
    "other": "#fbbf24",
}

ENDPOINT_COLORS = {
    "rest": "#3b82f6",
    "soap": "#0ea5e9",
    "database": "#f59e0b",
    "file": "#8b5cf6",
    "kafka": "#dc2626",
    "sqs": "#f97316",
    "mqtt": "#14b8a6",
}

COMPONENT_COLORS = {
    "gateway": "#0891b2",
    "load-balancer": "#7c3aed",
    "pipeline": "#db2777",
}

CONNECTION_COLORS = {
    "data-flow": "#3b82f6",
    "default": "#6b7280",
}

BADGE_FILL_COLOR = "#1e293b"
BADGE_TEXT_COLOR = "#ffffff"

# Suffix appended to a stroke color to get a light fill ("#rrggbb" + alpha)
TINT_ALPHA = "20"


def tint(color: str) -> str:
    """Return a translucent variant of a ``#rrggbb`` color."""
    return color + TINT_ALPHA


ORDER_KEY_DIGITS = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
)


def order_key(index: int) -> str:
    """
    Fractional-index key for a z-order position.

    Keys are integer keys of the fractional indexing scheme: a head letter
    giving the digit count (``a`` for one, ``b`` for two, ...) followed by
    base-62 digits. They sort as plain strings in index order, so ``a0``
    through ``az`` are followed by ``b00``.
    """
    if index < 0:
        raise ValueError("index must not be negative")
    base = len(ORDER_KEY_DIGITS)
    length = 1
    while index >= base**length:
        index -= base**length
        length += 1
    if length > 26:
        raise ValueError("index too large for an order key")
    digits = []
    for _ in range(length):
        index, digit = divmod(index, base)
        digits.append(ORDER_KEY_DIGITS[digit])
    return chr(ord("a") + length - 1) + "".join(reversed(digits))


def seed_for(element_id: str) -> int:
    """Stable pseudo-random seed for the renderer's hand-drawn jitter."""
    return zlib.crc32(element_id.encode("utf-8")) % 2_000_000_000


@dataclass
class Primitive:
    """
    One renderable element.

    Geometry is absolute except for arrow ``points``, which are relative to
    the arrow's own origin. ``index`` is the z-order and is assigned when
    the primitive is added to a Scene.
    """

    id: str
    type: PrimitiveType
    x: float
    y: float
    width: float
    height: float
    angle: float = 0
    stroke_color: str = BLACK
    background_color: str = TRANSPARENT
    fill_style: str = "solid"
    stroke_width: float = 1
    stroke_style: str = "solid"
    roughness: int = 1
    opacity: int = 100
    group_ids: List[str] = field(default_factory=list)
    index: int = 0
    roundness: Optional[int] = None

    # Text only
    text: Optional[str] = None
    font_size: Optional[float] = None
    font_family: Optional[int] = None
    text_align: Optional[str] = None
    vertical_align: Optional[str] = None
    line_height: Optional[float] = None

    # Arrow only
    start_binding: Optional[str] = None
    end_binding: Optional[str] = None
    points: List[Tuple[float, float]] = field(default_factory=list)
    end_arrowhead: Optional[str] = None

    @property
    def is_text(self) -> bool:
        return self.type is PrimitiveType.TEXT

    @property
    def line_count(self) -> int:
        return len(self.text.split("\n")) if self.text is not None else 0

    def to_dict(self) -> Dict[str, Any]:
        """Excalidraw element dict for this primitive."""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "angle": self.angle,
            "strokeColor": self.stroke_color,
            "backgroundColor": self.background_color,
            "fillStyle": self.fill_style,
            "strokeWidth": self.stroke_width,
            "strokeStyle": self.stroke_style,
            "roughness": self.roughness,
            "opacity": self.opacity,
            "groupIds": list(self.group_ids),
            "frameId": None,
            "index": order_key(self.index),
            "roundness": (
                {"type": self.roundness} if self.roundness is not None else None
            ),
            "seed": seed_for(self.id),
            "versionNonce": seed_for(self.id + ":nonce"),
            "isDeleted": False,
            "boundElements": None,
            "link": None,
            "locked": False,
        }
        if self.is_text:
            data.update(
                {
                    "text": self.text,
                    "originalText": self.text,
                    "fontSize": self.font_size,
                    "fontFamily": self.font_family,
                    "textAlign": self.text_align,
                    "verticalAlign": self.vertical_align,
                    "lineHeight": self.line_height,
                    "containerId": None,
                    "autoResize": False,
                }
            )
        if self.type is PrimitiveType.ARROW:
            data.update(
                {
                    "startBinding": _binding(self.start_binding),
                    "endBinding": _binding(self.end_binding),
                    "points": [list(point) for point in self.points],
                    "lastCommittedPoint": None,
                    "startArrowhead": None,
                    "endArrowhead": self.end_arrowhead,
                    "elbowed": False,
                }
            )
        return data


def _binding(element_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if element_id is None:
        return None
    return {"elementId": element_id, "focus": 0, "gap": 0, "fixedPoint": None}


@dataclass
class TextStyle:
    """
    Typography and color for text primitives.

    Attributes:
        font_size: Font size in scene units.
        line_height: Line height multiplier.
        stroke_color: Text color.
        font_family: Renderer font family id.
        stroke_width: Stroke weight, used as a boldness hint.
        text_align: Horizontal alignment.
        group_ids: Grouping ids applied to every produced primitive.
    """

    font_size: float = 12
    line_height: float = 1.4
    stroke_color: str = "#374151"
    font_family: int = FONT_HAND
    stroke_width: float = 1
    text_align: str = "left"
    group_ids: Tuple[str, ...] = ()


def make_text(
    element_id: str,
    text: str,
    x: float,
    y: float,
    width: float,
    height: float,
    style: TextStyle,
    vertical_align: str = "top",
    group_ids: Optional[List[str]] = None,
) -> Primitive:
    """Build a text primitive from a TextStyle."""
    return Primitive(
        id=element_id,
        type=PrimitiveType.TEXT,
        x=x,
        y=y,
        width=width,
        height=height,
        stroke_color=style.stroke_color,
        stroke_width=style.stroke_width,
        roughness=0,
        group_ids=list(group_ids if group_ids is not None else style.group_ids),
        text=text,
        font_size=style.font_size,
        font_family=style.font_family,
        text_align=style.text_align,
        vertical_align=vertical_align,
        line_height=style.line_height,
    )


class Scene:
    """
    Ordered primitive collection that assigns z-order indices.

    Indices start at 0 and follow insertion order, so later primitives are
    drawn on top of earlier ones.
    """

    def __init__(self):
        self.elements: List[Primitive] = []

    def add(self, primitives: Iterable[Primitive]) -> None:
        for primitive in primitives:
            primitive.index = len(self.elements)
            self.elements.append(primitive)

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def of_type(self, primitive_type: PrimitiveType) -> List[Primitive]:
        return [p for p in self.elements if p.type is primitive_type]

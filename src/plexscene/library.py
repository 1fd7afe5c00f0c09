"""
Shape library support.

The shape factory can draw entities with templated shapes taken from an
Excalidraw library file (``.excalidrawlib``) instead of the built-in
geometry. This module defines the provider protocol the factory depends on,
a catalog that indexes library items by semantic type, a provider backed by
that catalog, a provider that is never available, and the injectable caches
used to avoid re-cloning identical bundles.
"""

import json
import logging
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Tuple

from .primitives import Primitive, PrimitiveType

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """Raised when a shape library cannot be parsed."""

    pass


class SemanticType(Enum):
    ENVIRONMENT = "environment"
    CLOUD_CLUSTER = "cloud-cluster"
    ON_PREM_CLUSTER = "on-prem-cluster"
    CONTROL_NODE = "control-node"
    FEED_NODE = "feed-node"
    GATEWAY = "gateway"
    LOAD_BALANCER = "load-balancer"
    PIPELINE = "pipeline"
    ENDPOINT = "endpoint"
    ZONE = "zone"


class ShapeProvider(Protocol):
    """Capability provider offering templated shapes."""

    def is_available(self) -> bool:
        """Whether templated shapes can currently be produced."""
        ...

    def get_shape(
        self, semantic_type: SemanticType, x: float, y: float
    ) -> List[Primitive]:
        """Templated bundle anchored at (x, y); may be empty or raise."""
        ...


class NullShapeProvider:
    """Provider that never has shapes; forces the built-in generator."""

    def is_available(self) -> bool:
        return False

    def get_shape(
        self, semantic_type: SemanticType, x: float, y: float
    ) -> List[Primitive]:
        return []


CacheKey = Tuple[SemanticType, float, float]


class ShapeCache:
    """Dict-backed bundle cache keyed by (semantic type, x, y)."""

    def __init__(self):
        self._entries: Dict[CacheKey, List[Primitive]] = {}

    def get(self, key: CacheKey) -> Optional[List[Primitive]]:
        return self._entries.get(key)

    def put(self, key: CacheKey, primitives: List[Primitive]) -> None:
        self._entries[key] = primitives

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class NullShapeCache:
    """Cache that stores nothing."""

    def get(self, key: CacheKey) -> Optional[List[Primitive]]:
        return None

    def put(self, key: CacheKey, primitives: List[Primitive]) -> None:
        pass

    def clear(self) -> None:
        pass

    def __len__(self) -> int:
        return 0


# Name patterns matched against lower-cased library item names, in priority
# order. The first pattern that matches wins.
NAME_PATTERNS: List[Tuple[str, str, SemanticType]] = [
    ("prefix", "groundplex", SemanticType.ON_PREM_CLUSTER),
    ("prefix", "cloudplex", SemanticType.CLOUD_CLUSTER),
    ("prefix", "jcc", SemanticType.CONTROL_NODE),
    ("contains", "feedmaster", SemanticType.FEED_NODE),
    ("contains", "api gateway", SemanticType.GATEWAY),
    ("prefix", "load balancer", SemanticType.LOAD_BALANCER),
    ("contains", "ultra pipeline", SemanticType.PIPELINE),
    ("prefix", "environment", SemanticType.ENVIRONMENT),
    ("prefix", "zone", SemanticType.ZONE),
    ("contains", "endpoint", SemanticType.ENDPOINT),
    ("contains", "node", SemanticType.CONTROL_NODE),
]


def match_semantic_type(name: str) -> Optional[SemanticType]:
    """Map a library item name to a semantic type, if any pattern fits."""
    lowered = name.strip().lower()
    for mode, pattern, semantic_type in NAME_PATTERNS:
        if mode == "prefix" and lowered.startswith(pattern):
            return semantic_type
        if mode == "contains" and pattern in lowered:
            return semantic_type
    return None


def primitive_from_element(data: Dict[str, Any]) -> Optional[Primitive]:
    """
    Convert an Excalidraw element dict into a Primitive.

    Returns None for element types the scene format here does not carry
    (free-draw, lines, images).
    """
    try:
        primitive_type = PrimitiveType(data.get("type"))
    except ValueError:
        return None
    roundness = data.get("roundness")
    return Primitive(
        id=str(data.get("id", "")),
        type=primitive_type,
        x=float(data.get("x", 0)),
        y=float(data.get("y", 0)),
        width=float(data.get("width", 0)),
        height=float(data.get("height", 0)),
        angle=float(data.get("angle", 0)),
        stroke_color=data.get("strokeColor", "#000000"),
        background_color=data.get("backgroundColor", "transparent"),
        fill_style=data.get("fillStyle", "solid"),
        stroke_width=data.get("strokeWidth", 1),
        stroke_style=data.get("strokeStyle", "solid"),
        roughness=data.get("roughness", 1),
        opacity=data.get("opacity", 100),
        roundness=roundness.get("type") if isinstance(roundness, dict) else None,
        text=data.get("text"),
        font_size=data.get("fontSize"),
        font_family=data.get("fontFamily"),
        text_align=data.get("textAlign"),
        vertical_align=data.get("verticalAlign"),
        line_height=data.get("lineHeight"),
        points=[tuple(point) for point in data.get("points", [])],
        end_arrowhead=data.get("endArrowhead"),
    )


class ShapeLibrary:
    """
    Catalog of library items indexed by semantic type.

    Only the first item matching a semantic type is kept.
    """

    def __init__(
        self,
        items: Dict[SemanticType, List[Primitive]],
        version: int = 2,
        item_count: int = 0,
    ):
        self.items = items
        self.version = version
        self.item_count = item_count

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShapeLibrary":
        if not isinstance(data, dict) or data.get("type") != "excalidrawlib":
            raise LibraryError("Invalid library format: expected type 'excalidrawlib'")

        raw_items = data.get("libraryItems", data.get("library", []))
        if not isinstance(raw_items, list):
            raise LibraryError("Invalid library format: libraryItems must be a list")

        items: Dict[SemanticType, List[Primitive]] = {}
        for raw in raw_items:
            if not isinstance(raw, dict):
                continue
            name = raw.get("name") or ""
            semantic_type = match_semantic_type(name)
            if semantic_type is None:
                logger.debug("No semantic type for library item %r", name)
                continue
            if semantic_type in items:
                continue
            primitives = [
                p
                for p in (primitive_from_element(e) for e in raw.get("elements", []))
                if p is not None
            ]
            items[semantic_type] = primitives
            logger.debug("Matched library item %r -> %s", name, semantic_type.value)

        logger.info("Indexed %d of %d library items", len(items), len(raw_items))
        return cls(items, version=data.get("version", 2), item_count=len(raw_items))

    @classmethod
    def from_json(cls, content: str) -> "ShapeLibrary":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise LibraryError(f"Library is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, filename: str) -> "ShapeLibrary":
        try:
            content = Path(filename).read_text(encoding="utf-8")
        except OSError as exc:
            raise LibraryError(f"Cannot read library {filename}: {exc}") from exc
        return cls.from_json(content)

    def has(self, semantic_type: SemanticType) -> bool:
        return semantic_type in self.items

    def clone(self, semantic_type: SemanticType, x: float, y: float) -> List[Primitive]:
        """
        Copy an item's primitives so its bounding box starts at (x, y).

        Returns an empty list when the catalog has no such item.
        """
        template = self.items.get(semantic_type)
        if not template:
            return []
        min_x = min(p.x for p in template)
        min_y = min(p.y for p in template)
        clones = []
        for position, primitive in enumerate(template):
            clones.append(
                _moved_copy(
                    primitive,
                    f"{semantic_type.value}-{position}",
                    x + primitive.x - min_x,
                    y + primitive.y - min_y,
                )
            )
        return clones


def _moved_copy(primitive: Primitive, element_id: str, x: float, y: float) -> Primitive:
    return replace(
        primitive,
        id=element_id,
        x=x,
        y=y,
        group_ids=list(primitive.group_ids),
        points=list(primitive.points),
    )


class LibraryShapeProvider:
    """
    Provider backed by a ShapeLibrary.

    Unavailable until a library is attached. ``load`` never raises: a bad
    library file leaves the provider unavailable and logs the failure.
    """

    def __init__(self, library: Optional[ShapeLibrary] = None):
        self.library = library

    def load(self, filename: str) -> bool:
        try:
            self.library = ShapeLibrary.from_file(filename)
        except LibraryError as exc:
            logger.error("Failed to load shape library: %s", exc)
            self.library = None
            return False
        logger.info("Loaded shape library from %s", filename)
        return True

    def is_available(self) -> bool:
        return self.library is not None

    def get_shape(
        self, semantic_type: SemanticType, x: float, y: float
    ) -> List[Primitive]:
        if self.library is None:
            return []
        return self.library.clone(semantic_type, x, y)

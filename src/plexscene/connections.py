"""
Connection resolution.

Turns a logical (source, target) reference pair into an arrow primitive
using the layout's position table. Connection ids are free-form, so a
reference may not match any placed entity; the resolver then anchors that
end at a fixed default point instead of failing, and records the miss so
callers can surface it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .layout import Point
from .models import Connection, ConnectionKind
from .primitives import CONNECTION_COLORS, Primitive, PrimitiveType

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_POINT = Point(0, 0)
DEFAULT_TARGET_POINT = Point(100, 100)


@dataclass(frozen=True)
class UnresolvedReference:
    """
    A connection end that did not match any position.

    Attributes:
        connection_id: Id of the connection.
        end: "source" or "target".
        reference: The id that failed to resolve.
    """

    connection_id: str
    end: str
    reference: str


@dataclass
class ResolvedConnections:
    arrows: List[Primitive] = field(default_factory=list)
    unresolved: List[UnresolvedReference] = field(default_factory=list)


class ConnectionResolver:
    """Creates arrows for connections."""

    def __init__(
        self,
        default_source: Point = DEFAULT_SOURCE_POINT,
        default_target: Point = DEFAULT_TARGET_POINT,
    ):
        self.default_source = default_source
        self.default_target = default_target

    def resolve(self, connection: Connection, positions: Dict[str, Point]) -> Primitive:
        """
        Build the arrow for one connection.

        Missing source or target positions are replaced with the default
        points; this never raises for unknown ids.
        """
        start = positions.get(connection.source, self.default_source)
        end = positions.get(connection.target, self.default_target)
        dx = end.x - start.x
        dy = end.y - start.y

        if connection.kind is ConnectionKind.DATA_FLOW:
            color = CONNECTION_COLORS["data-flow"]
        else:
            color = CONNECTION_COLORS["default"]
        if connection.kind is ConnectionKind.DEPENDENCY:
            stroke_style = "dashed"
        else:
            stroke_style = "solid"

        return Primitive(
            id=f"connection-{connection.id}",
            type=PrimitiveType.ARROW,
            x=start.x,
            y=start.y,
            width=abs(dx),
            height=abs(dy),
            stroke_color=color,
            fill_style="hachure",
            stroke_width=2,
            stroke_style=stroke_style,
            roundness=2,
            start_binding=connection.source,
            end_binding=connection.target,
            points=[(0, 0), (dx, dy)],
            end_arrowhead="arrow",
        )

    def unresolved_ends(
        self, connection: Connection, positions: Dict[str, Point]
    ) -> List[UnresolvedReference]:
        missing = []
        if connection.source not in positions:
            missing.append(
                UnresolvedReference(connection.id, "source", connection.source)
            )
        if connection.target not in positions:
            missing.append(
                UnresolvedReference(connection.id, "target", connection.target)
            )
        return missing

    def resolve_all(
        self, connections: Sequence[Connection], positions: Dict[str, Point]
    ) -> ResolvedConnections:
        """Resolve every connection, collecting unresolved references."""
        result = ResolvedConnections()
        for connection in connections:
            result.arrows.append(self.resolve(connection, positions))
            for missing in self.unresolved_ends(connection, positions):
                logger.warning(
                    "Connection %s has unresolved %s reference %r",
                    missing.connection_id,
                    missing.end,
                    missing.reference,
                )
                result.unresolved.append(missing)
        return result

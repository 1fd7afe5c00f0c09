"""
Auto-layout for architecture diagrams.

Places environments in rows of two, clusters left-to-right inside each
environment, nodes in a fixed-column grid inside each cluster, and endpoints
in a single row below everything else. Container sizes grow with their
contents but never drop below the configured minimums.

The layout is a pure function of the ordered input sequences: insertion order
is the only ordering signal and nothing is sorted, so identical input always
produces identical position and dimension tables.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Sequence

from .models import Cluster, Endpoint, Environment

logger = logging.getLogger(__name__)

# Canvas
LAYOUT_MARGIN = 50

# Environments
ENV_MIN_WIDTH = 1200
ENV_MIN_HEIGHT = 500
ENV_HEADER_HEIGHT = 80
ENV_PADDING_RIGHT = 40
ENV_PADDING_BOTTOM = 30
ENV_HORIZONTAL_GAP = 50
ENV_ROW_GAP = 100
ENVS_PER_ROW = 2

# Clusters
CLUSTER_WIDTH = 450
CLUSTER_BASE_HEIGHT = 300
CLUSTER_INSET = 40
CLUSTER_GAP = 30

# Nodes inside a cluster
NODES_PER_ROW = 5
NODE_OFFSET_X = 50
NODE_OFFSET_Y = 220
NODE_COLUMN_STEP = 70
NODE_ROW_STEP = 70

# Sub-components (gateway, load balancer, pipeline) inside a cluster
COMPONENT_OFFSET_Y = 120
COMPONENT_STEP = 130
COMPONENT_WIDTH = 110
COMPONENT_HEIGHT = 50

# Endpoints
ENDPOINT_ROW_GAP = 50
ENDPOINT_STEP = 200
ENDPOINT_WIDTH = 120
ENDPOINT_HEIGHT = 60


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


def environment_key(env_id: str) -> str:
    return f"env-{env_id}"


def cluster_key(cluster_id: str) -> str:
    return f"snaplex-{cluster_id}"


def node_key(node_id: str) -> str:
    return f"node-{node_id}"


def endpoint_key(endpoint_id: str) -> str:
    return f"endpoint-{endpoint_id}"


def gateway_key(gateway_id: str) -> str:
    return f"gateway-{gateway_id}"


def balancer_key(balancer_id: str) -> str:
    return f"balancer-{balancer_id}"


def pipeline_key(pipeline_id: str) -> str:
    return f"pipeline-{pipeline_id}"


@dataclass
class LayoutResult:
    """
    Result of the layout algorithm.

    Attributes:
        positions: Top-left corner per position key.
        dimensions: Size per position key, for sized containers and
            sub-components.
        bottom: Lowest y reached by any placed entity.
    """

    positions: Dict[str, Point] = field(default_factory=dict)
    dimensions: Dict[str, Size] = field(default_factory=dict)
    bottom: float = 0

    def position(self, key: str, default: Point) -> Point:
        """Return the position for ``key`` or ``default`` when unresolved."""
        return self.positions.get(key, default)

    def dimension(self, key: str, default: Size) -> Size:
        """Return the dimension for ``key`` or ``default`` when unresolved."""
        return self.dimensions.get(key, default)


class GridLayout:
    """
    Deterministic row/grid packing of the container tree.

    Every spacing value defaults to the module constants and can be
    overridden per instance.
    """

    def __init__(
        self,
        margin: float = LAYOUT_MARGIN,
        env_min_width: float = ENV_MIN_WIDTH,
        env_min_height: float = ENV_MIN_HEIGHT,
        envs_per_row: int = ENVS_PER_ROW,
        cluster_width: float = CLUSTER_WIDTH,
        cluster_base_height: float = CLUSTER_BASE_HEIGHT,
        nodes_per_row: int = NODES_PER_ROW,
        node_row_step: float = NODE_ROW_STEP,
        endpoint_step: float = ENDPOINT_STEP,
    ):
        if nodes_per_row < 1:
            raise ValueError("nodes_per_row must be at least 1")
        if envs_per_row < 1:
            raise ValueError("envs_per_row must be at least 1")
        self.margin = margin
        self.env_min_width = env_min_width
        self.env_min_height = env_min_height
        self.envs_per_row = envs_per_row
        self.cluster_width = cluster_width
        self.cluster_base_height = cluster_base_height
        self.nodes_per_row = nodes_per_row
        self.node_row_step = node_row_step
        self.endpoint_step = endpoint_step

    def layout(
        self,
        environments: Sequence[Environment],
        endpoints: Sequence[Endpoint],
    ) -> LayoutResult:
        """
        Compute positions and dimensions for the whole model.

        Args:
            environments: Environments in display order.
            endpoints: Endpoints in display order.

        Returns:
            LayoutResult keyed by namespaced position keys.
        """
        result = LayoutResult()
        cursor_x = self.margin
        cursor_y = self.margin
        row_start_y = cursor_y
        row_height = 0.0

        for index, env in enumerate(environments):
            size = self._layout_environment(env, cursor_x, cursor_y, result)
            row_height = max(row_height, size.height)
            cursor_x += size.width + ENV_HORIZONTAL_GAP

            if (index + 1) % self.envs_per_row == 0:
                cursor_x = self.margin
                cursor_y = row_start_y + row_height + ENV_ROW_GAP
                row_start_y = cursor_y
                row_height = 0.0

        # A partially filled final row wraps the same way a full one does
        if len(environments) % self.envs_per_row != 0:
            cursor_y = row_start_y + row_height + ENV_ROW_GAP

        endpoint_y = cursor_y + ENDPOINT_ROW_GAP
        for index, endpoint in enumerate(endpoints):
            key = endpoint_key(endpoint.id)
            result.positions[key] = Point(
                self.margin + index * self.endpoint_step, endpoint_y
            )
            result.dimensions[key] = Size(ENDPOINT_WIDTH, ENDPOINT_HEIGHT)

        result.bottom = self._compute_bottom(result)
        logger.debug(
            "Laid out %d environments and %d endpoints (bottom=%s)",
            len(environments),
            len(endpoints),
            result.bottom,
        )
        return result

    def _layout_environment(
        self, env: Environment, x: float, y: float, result: LayoutResult
    ) -> Size:
        key = environment_key(env.id)
        result.positions[key] = Point(x, y)

        cluster_x = x + CLUSTER_INSET
        cluster_y = y + ENV_HEADER_HEIGHT
        max_x = x
        max_y = y + ENV_HEADER_HEIGHT

        for cluster in env.clusters:
            size = self._layout_cluster(cluster, cluster_x, cluster_y, result)
            max_x = max(max_x, cluster_x + size.width)
            max_y = max(max_y, cluster_y + size.height)
            cluster_x += size.width + CLUSTER_GAP

        size = Size(
            max(self.env_min_width, max_x - x + ENV_PADDING_RIGHT),
            max(self.env_min_height, max_y - y + ENV_PADDING_BOTTOM),
        )
        result.dimensions[key] = size
        logger.debug("Environment %s at (%s, %s) size %s", env.id, x, y, size)
        return size

    def _layout_cluster(
        self, cluster: Cluster, x: float, y: float, result: LayoutResult
    ) -> Size:
        result.positions[cluster_key(cluster.id)] = Point(x, y)

        container = cluster.container
        components = [
            (gateway_key, container.api_gateway),
            (balancer_key, container.load_balancer),
            (pipeline_key, container.ultra_pipeline),
        ]
        slot = 0
        for make_key, component in components:
            if component is None:
                continue
            key = make_key(component.id)
            result.positions[key] = Point(
                x + NODE_OFFSET_X + slot * COMPONENT_STEP, y + COMPONENT_OFFSET_Y
            )
            result.dimensions[key] = Size(COMPONENT_WIDTH, COMPONENT_HEIGHT)
            slot += 1

        start_x = x + NODE_OFFSET_X
        for index, node in enumerate(cluster.nodes):
            row, column = divmod(index, self.nodes_per_row)
            result.positions[node_key(node.id)] = Point(
                start_x + column * NODE_COLUMN_STEP,
                y + NODE_OFFSET_Y + row * self.node_row_step,
            )

        size = self.cluster_size(len(cluster.nodes))
        size = Size(
            max(size.width, container.min_width),
            max(size.height, container.min_height),
        )
        result.dimensions[cluster_key(cluster.id)] = size
        return size

    def cluster_size(self, node_count: int) -> Size:
        """Size of a cluster holding ``node_count`` nodes."""
        rows = math.ceil(node_count / self.nodes_per_row)
        extra_rows = rows - 1 if rows > 1 else 0
        height = self.cluster_base_height + extra_rows * self.node_row_step
        return Size(self.cluster_width, max(self.cluster_base_height, height))

    def _compute_bottom(self, result: LayoutResult) -> float:
        bottom = 0.0
        for key, point in result.positions.items():
            size = result.dimensions.get(key)
            height = size.height if size else 0
            bottom = max(bottom, point.y + height)
        return bottom

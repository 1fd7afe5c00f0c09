"""
Element synthesis.

The ShapeFactory turns a domain entity plus its resolved geometry into
primitives. It holds one of two interchangeable strategies:

- BuiltInStrategy: pure geometry from ``shapes``; always succeeds.
- LibraryBackedStrategy: templated bundles from a ShapeProvider, degrading
  shape-by-shape to the built-in generator when the provider raises or
  returns nothing.

The strategy is chosen by ``begin_pass()`` from a single availability check,
which the diagram generator calls once per regeneration. Decorations that do
not depend on the strategy (the dashed cluster outline, node indicator
badges) are added by the factory itself.
"""

import logging
from dataclasses import replace
from typing import List

from . import shapes
from .layout import (
    COMPONENT_HEIGHT,
    COMPONENT_WIDTH,
    ENDPOINT_HEIGHT,
    ENDPOINT_WIDTH,
    ENV_MIN_HEIGHT,
    ENV_MIN_WIDTH,
)
from .library import NullShapeProvider, SemanticType, ShapeCache
from .models import (
    ApiGateway,
    Cluster,
    ClusterKind,
    Endpoint,
    Environment,
    LoadBalancer,
    Node,
    NodeRole,
    UltraPipeline,
)
from .primitives import Primitive

logger = logging.getLogger(__name__)

MODE_LIBRARY = "library"
MODE_BASIC = "basic"


def cluster_semantic_type(cluster: Cluster) -> SemanticType:
    if cluster.kind is ClusterKind.CLOUD:
        return SemanticType.CLOUD_CLUSTER
    return SemanticType.ON_PREM_CLUSTER


def node_semantic_type(node: Node) -> SemanticType:
    if node.role is NodeRole.CONTROL:
        return SemanticType.CONTROL_NODE
    return SemanticType.FEED_NODE


class BuiltInStrategy:
    """Draws every entity with the built-in geometric generator."""

    mode = MODE_BASIC

    def __init__(self, node_diameter: float = shapes.NODE_BASE_DIAMETER):
        self.node_diameter = node_diameter

    def environment(self, env: Environment, x, y, width, height) -> List[Primitive]:
        return shapes.environment_shapes(env, x, y, width, height)

    def cluster(self, cluster: Cluster, x, y, width, height) -> List[Primitive]:
        return shapes.cluster_shapes(cluster, x, y, width, height)

    def node(self, node: Node, x, y) -> List[Primitive]:
        return shapes.node_shapes(node, x, y, self.node_diameter)

    def endpoint(self, endpoint: Endpoint, x, y, width, height) -> List[Primitive]:
        return shapes.endpoint_shapes(endpoint, x, y, width, height)

    def gateway(self, gateway: ApiGateway, cluster_id, x, y, width, height):
        return shapes.gateway_shapes(gateway, cluster_id, x, y, width, height)

    def balancer(self, balancer: LoadBalancer, cluster_id, x, y, width, height):
        return shapes.balancer_shapes(balancer, cluster_id, x, y, width, height)

    def pipeline(self, pipeline: UltraPipeline, cluster_id, x, y, width, height):
        return shapes.pipeline_shapes(pipeline, cluster_id, x, y, width, height)


class LibraryBackedStrategy:
    """
    Draws entities with templated shapes from a provider.

    Any exception or empty bundle from the provider falls back to the
    built-in strategy for that one shape.
    """

    mode = MODE_LIBRARY

    def __init__(self, provider, cache, fallback: BuiltInStrategy):
        self.provider = provider
        self.cache = cache
        self.fallback = fallback

    def _bundle(
        self, semantic_type: SemanticType, x, y, owner: str, group: str
    ) -> List[Primitive]:
        key = (semantic_type, x, y)
        template = self.cache.get(key)
        if template is None:
            try:
                template = list(self.provider.get_shape(semantic_type, x, y))
            except Exception as exc:
                logger.warning(
                    "Shape provider failed for %s, using built-in shape: %s",
                    semantic_type.value,
                    exc,
                )
                return []
            if template:
                self.cache.put(key, template)
        if not template:
            logger.debug("No library shape for %s", semantic_type.value)
            return []
        return [
            replace(
                primitive,
                id=f"{owner}-lib-{position}",
                group_ids=[group],
                points=list(primitive.points),
            )
            for position, primitive in enumerate(template)
        ]

    def environment(self, env: Environment, x, y, width, height) -> List[Primitive]:
        bundle = self._bundle(
            SemanticType.ENVIRONMENT,
            x,
            y,
            f"env-{env.id}",
            shapes.environment_group(env.id),
        )
        return bundle or self.fallback.environment(env, x, y, width, height)

    def cluster(self, cluster: Cluster, x, y, width, height) -> List[Primitive]:
        inset = shapes.CLUSTER_HEADER_INSET
        bundle = self._bundle(
            cluster_semantic_type(cluster),
            x + inset,
            y + inset,
            f"snaplex-{cluster.id}",
            shapes.cluster_group(cluster.id),
        )
        return bundle or self.fallback.cluster(cluster, x, y, width, height)

    def node(self, node: Node, x, y) -> List[Primitive]:
        bundle = self._bundle(
            node_semantic_type(node),
            x,
            y,
            f"node-{node.id}",
            shapes.node_group(node.id),
        )
        return bundle or self.fallback.node(node, x, y)

    def endpoint(self, endpoint: Endpoint, x, y, width, height) -> List[Primitive]:
        bundle = self._bundle(
            SemanticType.ENDPOINT,
            x,
            y,
            f"endpoint-{endpoint.id}",
            shapes.endpoint_group(endpoint.id),
        )
        return bundle or self.fallback.endpoint(endpoint, x, y, width, height)

    def gateway(self, gateway: ApiGateway, cluster_id, x, y, width, height):
        bundle = self._bundle(
            SemanticType.GATEWAY,
            x,
            y,
            f"gateway-{gateway.id}",
            shapes.cluster_group(cluster_id),
        )
        return bundle or self.fallback.gateway(gateway, cluster_id, x, y, width, height)

    def balancer(self, balancer: LoadBalancer, cluster_id, x, y, width, height):
        bundle = self._bundle(
            SemanticType.LOAD_BALANCER,
            x,
            y,
            f"balancer-{balancer.id}",
            shapes.cluster_group(cluster_id),
        )
        return bundle or self.fallback.balancer(
            balancer, cluster_id, x, y, width, height
        )

    def pipeline(self, pipeline: UltraPipeline, cluster_id, x, y, width, height):
        bundle = self._bundle(
            SemanticType.PIPELINE,
            x,
            y,
            f"pipeline-{pipeline.id}",
            shapes.cluster_group(cluster_id),
        )
        return bundle or self.fallback.pipeline(
            pipeline, cluster_id, x, y, width, height
        )


class ShapeFactory:
    """
    Creates primitives for domain entities.

    Args:
        provider: Capability provider for templated shapes. Defaults to a
            provider that is never available.
        cache: Bundle cache. Defaults to a fresh ShapeCache; pass a
            NullShapeCache to disable caching.
        node_diameter: Base node diameter before tier scaling.
    """

    def __init__(
        self,
        provider=None,
        cache=None,
        node_diameter: float = shapes.NODE_BASE_DIAMETER,
    ):
        self.provider = provider if provider is not None else NullShapeProvider()
        self.cache = cache if cache is not None else ShapeCache()
        self.builtin = BuiltInStrategy(node_diameter)
        self.strategy = self.builtin
        self.begin_pass()

    def begin_pass(self) -> str:
        """
        Select the strategy for the next regeneration.

        The bundle cache is emptied so memoized shapes never outlive the
        pass that produced them.

        Returns:
            The selected rendering mode ("library" or "basic").
        """
        self.cache.clear()
        if self.provider.is_available():
            self.strategy = LibraryBackedStrategy(
                self.provider, self.cache, self.builtin
            )
        else:
            self.strategy = self.builtin
        logger.debug("Shape factory using %s shapes", self.strategy.mode)
        return self.strategy.mode

    @property
    def rendering_mode(self) -> str:
        return self.strategy.mode

    def force_rendering_mode(self, mode: str) -> None:
        """Pin the strategy regardless of provider availability."""
        if mode == MODE_LIBRARY:
            self.strategy = LibraryBackedStrategy(
                self.provider, self.cache, self.builtin
            )
        elif mode == MODE_BASIC:
            self.strategy = self.builtin
        else:
            raise ValueError(f"mode must be '{MODE_LIBRARY}' or '{MODE_BASIC}'")

    def clear_cache(self) -> None:
        self.cache.clear()

    def create_environment(
        self,
        env: Environment,
        x: float,
        y: float,
        width: float = ENV_MIN_WIDTH,
        height: float = ENV_MIN_HEIGHT,
    ) -> List[Primitive]:
        return self.strategy.environment(env, x, y, width, height)

    def create_cluster(
        self, cluster: Cluster, x: float, y: float, width: float, height: float
    ) -> List[Primitive]:
        """Container and header for a cluster (outline not included)."""
        return self.strategy.cluster(cluster, x, y, width, height)

    def create_cluster_outline(
        self, cluster: Cluster, x: float, y: float, width: float, height: float
    ) -> Primitive:
        """Dashed outline over the full cluster bounds, for either strategy."""
        return shapes.cluster_outline(cluster, x, y, width, height)

    def create_node(self, node: Node, x: float, y: float) -> List[Primitive]:
        """Base node shape followed by its indicator badge, if any."""
        return self.strategy.node(node, x, y) + self.create_node_indicator(node, x, y)

    def create_node_indicator(self, node: Node, x: float, y: float) -> List[Primitive]:
        return shapes.node_indicator(node, x, y)

    def create_endpoint(
        self,
        endpoint: Endpoint,
        x: float,
        y: float,
        width: float = ENDPOINT_WIDTH,
        height: float = ENDPOINT_HEIGHT,
    ) -> List[Primitive]:
        return self.strategy.endpoint(endpoint, x, y, width, height)

    def create_gateway(
        self,
        gateway: ApiGateway,
        cluster_id: str,
        x: float,
        y: float,
        width: float = COMPONENT_WIDTH,
        height: float = COMPONENT_HEIGHT,
    ) -> List[Primitive]:
        return self.strategy.gateway(gateway, cluster_id, x, y, width, height)

    def create_load_balancer(
        self,
        balancer: LoadBalancer,
        cluster_id: str,
        x: float,
        y: float,
        width: float = COMPONENT_WIDTH,
        height: float = COMPONENT_HEIGHT,
    ) -> List[Primitive]:
        return self.strategy.balancer(balancer, cluster_id, x, y, width, height)

    def create_pipeline(
        self,
        pipeline: UltraPipeline,
        cluster_id: str,
        x: float,
        y: float,
        width: float = COMPONENT_WIDTH,
        height: float = COMPONENT_HEIGHT,
    ) -> List[Primitive]:
        return self.strategy.pipeline(pipeline, cluster_id, x, y, width, height)


def count_indicators(primitives: List[Primitive]) -> int:
    """Number of indicator badges in a primitive list."""
    return sum(1 for p in primitives if p.id.startswith("badge-node-"))


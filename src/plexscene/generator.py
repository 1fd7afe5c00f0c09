"""
Main diagram generator module.

Combines layout, element synthesis, connection resolution and the optional
documentation report into one ordered list of scene primitives.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .connections import ConnectionResolver, UnresolvedReference
from .documentation import DocumentationGenerator, DocumentationResult
from .factory import ShapeFactory
from .layout import (
    CLUSTER_INSET,
    COMPONENT_HEIGHT,
    COMPONENT_WIDTH,
    ENDPOINT_HEIGHT,
    ENDPOINT_WIDTH,
    ENV_HEADER_HEIGHT,
    ENV_MIN_HEIGHT,
    ENV_MIN_WIDTH,
    NODE_OFFSET_X,
    NODE_OFFSET_Y,
    GridLayout,
    LayoutResult,
    Point,
    Size,
    balancer_key,
    cluster_key,
    endpoint_key,
    environment_key,
    gateway_key,
    node_key,
    pipeline_key,
)
from .models import ArchitectureModel, Cluster, Environment
from .primitives import Primitive, Scene

logger = logging.getLogger(__name__)


@dataclass
class DiagramResult:
    """
    Output of one regeneration.

    Attributes:
        elements: Primitives in z-order.
        layout: Positions and dimensions used.
        unresolved: Connection ends that matched no placed entity.
        documentation: The report, when requested.
        rendering_mode: "library" or "basic", as selected for this pass.
    """

    elements: List[Primitive] = field(default_factory=list)
    layout: LayoutResult = field(default_factory=LayoutResult)
    unresolved: List[UnresolvedReference] = field(default_factory=list)
    documentation: Optional[DocumentationResult] = None
    rendering_mode: str = ""


class DiagramGenerator:
    """
    Generate architecture diagrams from a model.

    Every collaborator can be injected; the defaults reproduce the standard
    layout, built-in shapes and documentation templates.

    Example:
        >>> generator = DiagramGenerator()
        >>> result = generator.generate(model, with_documentation=True)
        >>> len(result.elements)
    """

    def __init__(
        self,
        layout_engine: Optional[GridLayout] = None,
        shape_factory: Optional[ShapeFactory] = None,
        resolver: Optional[ConnectionResolver] = None,
        documentation: Optional[DocumentationGenerator] = None,
    ):
        self.layout_engine = layout_engine or GridLayout()
        self.shape_factory = shape_factory or ShapeFactory()
        self.resolver = resolver or ConnectionResolver()
        self.documentation = documentation or DocumentationGenerator()

    def generate(
        self,
        model: ArchitectureModel,
        with_documentation: bool = False,
        generated_at: Optional[datetime] = None,
    ) -> DiagramResult:
        """
        Regenerate the full scene for ``model``.

        Args:
            model: Model snapshot to draw.
            with_documentation: Append the documentation report below the
                diagram.
            generated_at: Timestamp for the report title.

        Returns:
            DiagramResult with primitives in drawing order.
        """
        mode = self.shape_factory.begin_pass()
        layout = self.layout_engine.layout(model.environments, model.endpoints)
        scene = Scene()

        for env in model.environments:
            scene.add(self._environment(env, layout))

        for env, cluster in model.iter_clusters():
            scene.add(self._cluster(env, cluster, layout))

        for index, endpoint in enumerate(model.endpoints):
            default = Point(
                self.layout_engine.margin + index * self.layout_engine.endpoint_step,
                layout.bottom,
            )
            position = layout.position(endpoint_key(endpoint.id), default)
            size = layout.dimension(
                endpoint_key(endpoint.id), Size(ENDPOINT_WIDTH, ENDPOINT_HEIGHT)
            )
            scene.add(
                self.shape_factory.create_endpoint(
                    endpoint, position.x, position.y, size.width, size.height
                )
            )

        resolved = self.resolver.resolve_all(model.connections, layout.positions)
        scene.add(resolved.arrows)

        documentation = None
        if with_documentation:
            documentation = self.documentation.generate(
                model, layout.bottom, generated_at
            )
            scene.add(documentation.elements)

        logger.info(
            "Generated %d elements (%s shapes): %d environments, %d clusters, "
            "%d nodes, %d endpoints, %d connections, %d unresolved references",
            len(scene),
            mode,
            len(model.environments),
            sum(1 for _ in model.iter_clusters()),
            model.total_nodes,
            len(model.endpoints),
            len(model.connections),
            len(resolved.unresolved),
        )
        return DiagramResult(
            elements=scene.elements,
            layout=layout,
            unresolved=resolved.unresolved,
            documentation=documentation,
            rendering_mode=mode,
        )

    def _environment(self, env: Environment, layout: LayoutResult) -> List[Primitive]:
        key = environment_key(env.id)
        margin = self.layout_engine.margin
        position = layout.position(key, Point(margin, margin))
        size = layout.dimension(key, Size(ENV_MIN_WIDTH, ENV_MIN_HEIGHT))
        return self.shape_factory.create_environment(
            env, position.x, position.y, size.width, size.height
        )

    def _cluster(
        self, env: Environment, cluster: Cluster, layout: LayoutResult
    ) -> List[Primitive]:
        """Cluster shapes, outline, sub-components and nodes, in that order."""
        factory = self.shape_factory
        env_position = layout.position(
            environment_key(env.id),
            Point(self.layout_engine.margin, self.layout_engine.margin),
        )
        key = cluster_key(cluster.id)
        position = layout.position(
            key,
            Point(env_position.x + CLUSTER_INSET, env_position.y + ENV_HEADER_HEIGHT),
        )
        size = layout.dimension(
            key, self.layout_engine.cluster_size(len(cluster.nodes))
        )

        primitives = factory.create_cluster(
            cluster, position.x, position.y, size.width, size.height
        )
        primitives.append(
            factory.create_cluster_outline(
                cluster, position.x, position.y, size.width, size.height
            )
        )

        container = cluster.container
        component_size = Size(COMPONENT_WIDTH, COMPONENT_HEIGHT)
        components = [
            (gateway_key, factory.create_gateway, container.api_gateway),
            (balancer_key, factory.create_load_balancer, container.load_balancer),
            (pipeline_key, factory.create_pipeline, container.ultra_pipeline),
        ]
        for make_key, create, component in components:
            if component is None:
                continue
            component_position = layout.position(make_key(component.id), position)
            component_dimension = layout.dimension(
                make_key(component.id), component_size
            )
            primitives.extend(
                create(
                    component,
                    cluster.id,
                    component_position.x,
                    component_position.y,
                    component_dimension.width,
                    component_dimension.height,
                )
            )

        node_default = Point(position.x + NODE_OFFSET_X, position.y + NODE_OFFSET_Y)
        for node in cluster.nodes:
            node_position = layout.position(node_key(node.id), node_default)
            primitives.extend(
                factory.create_node(node, node_position.x, node_position.y)
            )
        return primitives

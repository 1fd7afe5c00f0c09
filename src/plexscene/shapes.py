"""
Built-in shape generator.

Pure geometric fallbacks for every entity kind. These functions have no
external dependency and always succeed; the shape factory uses them whenever
the shape library is unavailable or cannot produce a shape.

Each function returns the primitives for one entity, all sharing a grouping
id so the renderer moves them together.
"""

from typing import List

from .models import (
    ApiGateway,
    Cluster,
    Endpoint,
    Environment,
    LoadBalancer,
    Node,
    NodeSize,
    NodeStatus,
    UltraPipeline,
)
from .primitives import (
    BADGE_FILL_COLOR,
    BADGE_TEXT_COLOR,
    BLACK,
    CLUSTER_COLORS,
    COMPONENT_COLORS,
    ENDPOINT_COLORS,
    ENVIRONMENT_COLORS,
    NODE_STATUS_COLORS,
    NODE_STROKE_COLOR,
    TRANSPARENT,
    Primitive,
    PrimitiveType,
    TextStyle,
    make_text,
    tint,
)

NODE_BASE_DIAMETER = 40

# Diameter multiplier per size tier
TIER_SCALE = {
    NodeSize.BASELINE: 1.0,
    NodeSize.TIER2: 1.2,
    NodeSize.TIER3: 1.4,
    NodeSize.TIER4: 1.6,
}

CLUSTER_HEADER_INSET = 30
CLUSTER_HEADER_HEIGHT = 20
CLUSTER_HEADER_WIDTH = 160

BADGE_OFFSET_X = 30
BADGE_OFFSET_Y = -12
BADGE_HEIGHT = 16
BADGE_CHAR_WIDTH = 7
BADGE_MIN_WIDTH = 24

ENV_LABEL_STYLE = TextStyle(font_size=20, line_height=1.25)
CLUSTER_LABEL_STYLE = TextStyle(
    font_size=16, line_height=1.25, stroke_color=BLACK, text_align="center"
)
NODE_LABEL_STYLE = TextStyle(
    font_size=12, line_height=1.25, stroke_color=BLACK, text_align="center"
)
ENDPOINT_LABEL_STYLE = TextStyle(
    font_size=14, line_height=1.25, stroke_color=BLACK, text_align="center"
)
COMPONENT_LABEL_STYLE = TextStyle(
    font_size=12, line_height=1.25, stroke_color=BLACK, text_align="center"
)
BADGE_TEXT_STYLE = TextStyle(
    font_size=10, line_height=1.25, stroke_color=BADGE_TEXT_COLOR, text_align="center"
)


def environment_group(env_id: str) -> str:
    return f"group-env-{env_id}"


def cluster_group(cluster_id: str) -> str:
    return f"group-snaplex-{cluster_id}"


def node_group(node_id: str) -> str:
    return f"group-node-{node_id}"


def endpoint_group(endpoint_id: str) -> str:
    return f"group-endpoint-{endpoint_id}"


def node_diameter(node: Node, base: float = NODE_BASE_DIAMETER) -> float:
    return base * TIER_SCALE[node.size]


def node_fill(status: NodeStatus) -> str:
    if status is NodeStatus.RUNNING:
        return NODE_STATUS_COLORS["running"]
    if status is NodeStatus.ERROR:
        return NODE_STATUS_COLORS["error"]
    return NODE_STATUS_COLORS["other"]


def node_label(node: Node) -> str:
    """Display label: name, size suffix when not baseline, MO marker."""
    label = node.name
    if node.size is not NodeSize.BASELINE:
        label += f" ({node.size.value})"
    if node.is_memory_optimized_control:
        label += " MO"
    return label


def indicator_text(node: Node) -> str:
    """
    Badge text for a node, or an empty string when no badge applies.

    ``<size>`` when only the size differs from baseline, ``mo`` when only
    memory optimization applies, ``mo-<size>`` when both do.
    """
    sized = node.size is not NodeSize.BASELINE
    optimized = node.is_memory_optimized_control
    if sized and optimized:
        return f"mo-{node.size.value}"
    if sized:
        return node.size.value
    if optimized:
        return "mo"
    return ""


def environment_shapes(
    env: Environment, x: float, y: float, width: float, height: float
) -> List[Primitive]:
    color = ENVIRONMENT_COLORS.get(env.classification.value, BLACK)
    group = [environment_group(env.id)]
    background = Primitive(
        id=f"env-{env.id}",
        type=PrimitiveType.RECTANGLE,
        x=x,
        y=y,
        width=width,
        height=height,
        stroke_color=color,
        background_color=TRANSPARENT,
        fill_style="hachure",
        stroke_width=2,
        group_ids=group,
        roundness=3,
    )
    label_text = f"{env.name} ({env.classification.value})"
    style = TextStyle(
        font_size=ENV_LABEL_STYLE.font_size,
        line_height=ENV_LABEL_STYLE.line_height,
        stroke_color=color,
    )
    label = make_text(
        f"label-env-{env.id}",
        label_text,
        x + 10,
        y + 10,
        200,
        25,
        style,
        group_ids=group,
    )
    return [background, label]


def cluster_shapes(
    cluster: Cluster, x: float, y: float, width: float, height: float
) -> List[Primitive]:
    """Filled container rectangle plus a centered header label."""
    color = CLUSTER_COLORS.get(cluster.kind.value, BLACK)
    group = [cluster_group(cluster.id)]
    inner_x = x + CLUSTER_HEADER_INSET
    inner_y = y + CLUSTER_HEADER_INSET
    inner_width = max(width - 2 * CLUSTER_HEADER_INSET, CLUSTER_HEADER_WIDTH)
    inner_height = max(height - 2 * CLUSTER_HEADER_INSET, CLUSTER_HEADER_HEIGHT)
    container = Primitive(
        id=f"snaplex-{cluster.id}",
        type=PrimitiveType.RECTANGLE,
        x=inner_x,
        y=inner_y,
        width=inner_width,
        height=inner_height,
        stroke_color=color,
        background_color=tint(color),
        stroke_width=2,
        group_ids=group,
        roundness=3,
    )
    header = make_text(
        f"label-snaplex-{cluster.id}",
        cluster.name,
        inner_x + inner_width / 2 - CLUSTER_HEADER_WIDTH / 2,
        inner_y + 5,
        CLUSTER_HEADER_WIDTH,
        CLUSTER_HEADER_HEIGHT,
        CLUSTER_LABEL_STYLE,
        vertical_align="middle",
        group_ids=group,
    )
    return [container, header]


def cluster_outline(
    cluster: Cluster, x: float, y: float, width: float, height: float
) -> Primitive:
    """Dashed decorative outline covering the full cluster bounds."""
    return Primitive(
        id=f"container-{cluster.id}",
        type=PrimitiveType.RECTANGLE,
        x=x,
        y=y,
        width=width,
        height=height,
        stroke_color=BLACK,
        background_color=TRANSPARENT,
        fill_style="hachure",
        stroke_width=2,
        stroke_style="dashed",
        group_ids=[cluster_group(cluster.id)],
        roundness=3,
    )


def node_shapes(
    node: Node, x: float, y: float, base_diameter: float = NODE_BASE_DIAMETER
) -> List[Primitive]:
    diameter = node_diameter(node, base_diameter)
    group = [node_group(node.id)]
    circle = Primitive(
        id=f"node-{node.id}",
        type=PrimitiveType.ELLIPSE,
        x=x,
        y=y,
        width=diameter,
        height=diameter,
        stroke_color=NODE_STROKE_COLOR,
        background_color=node_fill(node.status),
        stroke_width=2,
        group_ids=group,
        roundness=2,
    )
    label = make_text(
        f"label-node-{node.id}",
        node_label(node),
        x - 25,
        y + diameter + 5,
        diameter + 50,
        15,
        NODE_LABEL_STYLE,
        group_ids=group,
    )
    return [circle, label]


def node_indicator(node: Node, x: float, y: float) -> List[Primitive]:
    """Rounded badge plus centered text, or nothing when no badge applies."""
    text = indicator_text(node)
    if not text:
        return []
    group = [node_group(node.id)]
    width = max(BADGE_MIN_WIDTH, len(text) * BADGE_CHAR_WIDTH + 8)
    badge_x = x + BADGE_OFFSET_X
    badge_y = y + BADGE_OFFSET_Y
    badge = Primitive(
        id=f"badge-node-{node.id}",
        type=PrimitiveType.RECTANGLE,
        x=badge_x,
        y=badge_y,
        width=width,
        height=BADGE_HEIGHT,
        stroke_color=BADGE_FILL_COLOR,
        background_color=BADGE_FILL_COLOR,
        group_ids=group,
        roughness=0,
        roundness=3,
    )
    label = make_text(
        f"badge-text-node-{node.id}",
        text,
        badge_x,
        badge_y + 2,
        width,
        BADGE_HEIGHT - 4,
        BADGE_TEXT_STYLE,
        vertical_align="middle",
        group_ids=group,
    )
    return [badge, label]


def endpoint_shapes(
    endpoint: Endpoint, x: float, y: float, width: float = 120, height: float = 60
) -> List[Primitive]:
    color = ENDPOINT_COLORS.get(endpoint.protocol.value, BLACK)
    group = [endpoint_group(endpoint.id)]
    diamond = Primitive(
        id=f"endpoint-{endpoint.id}",
        type=PrimitiveType.DIAMOND,
        x=x,
        y=y,
        width=width,
        height=height,
        stroke_color=color,
        background_color=tint(color),
        stroke_width=2,
        group_ids=group,
        roundness=2,
    )
    label = make_text(
        f"label-endpoint-{endpoint.id}",
        endpoint.name,
        x + width / 2 - 30,
        y + height / 2 - 10,
        60,
        20,
        ENDPOINT_LABEL_STYLE,
        vertical_align="middle",
        group_ids=group,
    )
    return [diamond, label]


def _component_shapes(
    element_id: str,
    name: str,
    primitive_type: PrimitiveType,
    color_key: str,
    group: str,
    x: float,
    y: float,
    width: float,
    height: float,
    stroke_style: str = "solid",
) -> List[Primitive]:
    color = COMPONENT_COLORS[color_key]
    body = Primitive(
        id=element_id,
        type=primitive_type,
        x=x,
        y=y,
        width=width,
        height=height,
        stroke_color=color,
        background_color=tint(color),
        stroke_width=1,
        stroke_style=stroke_style,
        group_ids=[group],
        roundness=3 if primitive_type is PrimitiveType.RECTANGLE else 2,
    )
    label = make_text(
        f"label-{element_id}",
        name,
        x,
        y + height / 2 - 8,
        width,
        16,
        COMPONENT_LABEL_STYLE,
        vertical_align="middle",
        group_ids=[group],
    )
    return [body, label]


def gateway_shapes(
    gateway: ApiGateway,
    cluster_id: str,
    x: float,
    y: float,
    width: float,
    height: float,
) -> List[Primitive]:
    return _component_shapes(
        f"gateway-{gateway.id}",
        gateway.name,
        PrimitiveType.RECTANGLE,
        "gateway",
        cluster_group(cluster_id),
        x,
        y,
        width,
        height,
    )


def balancer_shapes(
    balancer: LoadBalancer,
    cluster_id: str,
    x: float,
    y: float,
    width: float,
    height: float,
) -> List[Primitive]:
    return _component_shapes(
        f"balancer-{balancer.id}",
        balancer.name,
        PrimitiveType.DIAMOND,
        "load-balancer",
        cluster_group(cluster_id),
        x,
        y,
        width,
        height,
    )


def pipeline_shapes(
    pipeline: UltraPipeline,
    cluster_id: str,
    x: float,
    y: float,
    width: float,
    height: float,
) -> List[Primitive]:
    return _component_shapes(
        f"pipeline-{pipeline.id}",
        pipeline.name,
        PrimitiveType.RECTANGLE,
        "pipeline",
        cluster_group(cluster_id),
        x,
        y,
        width,
        height,
        stroke_style="dashed",
    )

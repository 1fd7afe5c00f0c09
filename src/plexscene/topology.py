"""
Topology analysis using networkx.

Builds a directed graph over every placeable entity of a model, keyed by
the same namespaced position keys the layout engine produces, so connection
references can be checked before anything is drawn.

Uses networkx for:
- Graph representation of containment and connections
- Cycle detection among connections
- Degree queries for unconnected entities
"""

import logging
from typing import Dict, List, Optional, Tuple

import networkx as nx

from .layout import (
    balancer_key,
    cluster_key,
    endpoint_key,
    environment_key,
    gateway_key,
    node_key,
    pipeline_key,
)
from .models import ArchitectureModel

logger = logging.getLogger(__name__)

CONTAINS = "contains"
UNRESOLVED = "unresolved"


def build_topology(model: ArchitectureModel) -> nx.DiGraph:
    """
    Build the entity graph for a model.

    Every placeable key becomes a graph node with a ``kind`` attribute.
    Containment edges carry ``relation="contains"``; connection edges carry
    the connection kind as ``relation`` and ``connection_kind`` plus the
    connection id. A connection running along a containment edge keeps
    ``relation="contains"`` and adds ``connection`` and ``connection_kind``.
    Connection ends that match no placeable key are added with
    ``kind="unresolved"``.
    """
    graph = nx.DiGraph()

    for env in model.environments:
        env_node = environment_key(env.id)
        graph.add_node(env_node, kind="environment", label=env.name)
        for cluster in env.clusters:
            cluster_node = cluster_key(cluster.id)
            graph.add_node(cluster_node, kind="cluster", label=cluster.name)
            graph.add_edge(env_node, cluster_node, relation=CONTAINS)

            container = cluster.container
            components = [
                ("gateway", gateway_key, container.api_gateway),
                ("load-balancer", balancer_key, container.load_balancer),
                ("pipeline", pipeline_key, container.ultra_pipeline),
            ]
            for kind, make_key, component in components:
                if component is None:
                    continue
                graph.add_node(make_key(component.id), kind=kind, label=component.name)
                graph.add_edge(cluster_node, make_key(component.id), relation=CONTAINS)

            for node in cluster.nodes:
                graph.add_node(node_key(node.id), kind=node.role.value, label=node.name)
                graph.add_edge(cluster_node, node_key(node.id), relation=CONTAINS)

    for endpoint in model.endpoints:
        graph.add_node(endpoint_key(endpoint.id), kind="endpoint", label=endpoint.name)

    for connection in model.connections:
        for reference in (connection.source, connection.target):
            if reference not in graph:
                graph.add_node(reference, kind=UNRESOLVED, label=reference)
        edge = (connection.source, connection.target)
        if graph.has_edge(*edge) and graph.edges[edge]["relation"] == CONTAINS:
            # keep the containment fact; the connection rides on the same edge
            graph.edges[edge].update(
                connection=connection.id, connection_kind=connection.kind.value
            )
        else:
            graph.add_edge(
                *edge,
                relation=connection.kind.value,
                connection=connection.id,
                connection_kind=connection.kind.value,
            )

    logger.debug(
        "Built topology with %d nodes and %d edges",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    return graph


def connection_graph(graph: nx.DiGraph, kind: Optional[str] = None) -> nx.DiGraph:
    """Subgraph view holding only connection edges, optionally of one kind."""

    def keep(u, v):
        edge_kind = graph.edges[u, v].get("connection_kind")
        return edge_kind is not None and kind in (None, edge_kind)

    return nx.subgraph_view(graph, filter_edge=keep)


def unresolved_references(graph: nx.DiGraph) -> List[str]:
    """Connection references that match no placeable entity, in insertion order."""
    return [node for node, kind in graph.nodes(data="kind") if kind == UNRESOLVED]


def dependency_cycles(
    graph: nx.DiGraph, kind: Optional[str] = None
) -> List[List[str]]:
    """
    Simple cycles formed by connections, or by connections of one kind.

    Each cycle is rotated to start at its smallest key so the output is
    stable across runs.
    """
    cycles = []
    for cycle in nx.simple_cycles(connection_graph(graph, kind)):
        start = cycle.index(min(cycle))
        cycles.append(cycle[start:] + cycle[:start])
    return sorted(cycles)


def connection_degree(graph: nx.DiGraph) -> Dict[str, int]:
    """Number of connection edges touching each entity."""
    return dict(connection_graph(graph).degree())


def isolated_components(graph: nx.DiGraph) -> List[Tuple[str, str]]:
    """
    Placed entities that no connection touches.

    Returns:
        (key, kind) pairs in insertion order. Environments and clusters are
        left out since they are usually only containers.
    """
    degree = connection_degree(graph)
    return [
        (node, kind)
        for node, kind in graph.nodes(data="kind")
        if kind not in ("environment", "cluster", UNRESOLVED) and degree[node] == 0
    ]

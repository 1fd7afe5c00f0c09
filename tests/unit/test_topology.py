"""Unit tests for topology analysis."""

import networkx as nx

from plexscene.models import ArchitectureModel, Connection, Endpoint
from plexscene.topology import (
    CONTAINS,
    UNRESOLVED,
    build_topology,
    connection_degree,
    dependency_cycles,
    isolated_components,
    unresolved_references,
)


def endpoint_model(ids, links):
    return ArchitectureModel(
        endpoints=[Endpoint(id=i, name=i.upper()) for i in ids],
        connections=[
            Connection(id=f"c{n}", source=f"endpoint-{a}", target=f"endpoint-{b}")
            for n, (a, b) in enumerate(links)
        ],
    )


class TestBuildTopology:
    """Tests for the entity graph."""

    def test_returns_digraph(self, sample):
        """Test returns digraph."""
        assert isinstance(build_topology(sample), nx.DiGraph)

    def test_containment(self, sample):
        """Test containment."""
        graph = build_topology(sample)

        assert graph.nodes["env-production-aws"]["kind"] == "environment"
        assert graph.nodes["snaplex-cloudplex-1"]["kind"] == "cluster"
        assert graph.nodes["node-fm-01"]["kind"] == "feed-node"
        assert graph.nodes["gateway-gw-1"]["kind"] == "gateway"
        edge = graph.edges["snaplex-cloudplex-1", "node-jcc-01"]
        assert edge["relation"] == CONTAINS

    def test_connection_edges(self, sample):
        """Test connection edges."""
        graph = build_topology(sample)
        edge = graph.edges["snaplex-cloudplex-1", "endpoint-customer-api"]
        assert edge["relation"] == "data-flow"
        assert edge["connection"] == "conn-1"

    def test_unresolved_nodes(self):
        """Test unresolved nodes."""
        model = ArchitectureModel(
            endpoints=[Endpoint(id="a", name="A")],
            connections=[Connection(id="c", source="endpoint-a", target="ghost")],
        )
        graph = build_topology(model)
        assert graph.nodes["ghost"]["kind"] == UNRESOLVED
        assert unresolved_references(graph) == ["ghost"]

    def test_empty_model(self):
        """Test empty model."""
        graph = build_topology(ArchitectureModel())
        assert graph.number_of_nodes() == 0


class TestAnalysis:
    """Tests for cycles, degree and isolated entities."""

    def test_no_cycles_in_sample(self, sample):
        """Test no cycles in sample."""
        assert dependency_cycles(build_topology(sample)) == []

    def test_containment_is_not_a_cycle(self, sample):
        """Containment edges are excluded from cycle detection."""
        sample.connections.append(
            Connection(id="back", source="node-jcc-01", target="snaplex-cloudplex-1")
        )
        assert dependency_cycles(build_topology(sample)) == []

    def test_cycle_rotated_to_smallest_key(self):
        """Test cycle rotated to smallest key."""
        links = [("b", "c"), ("c", "a"), ("a", "b")]
        graph = build_topology(endpoint_model("abc", links))
        assert dependency_cycles(graph) == [["endpoint-a", "endpoint-b", "endpoint-c"]]

    def test_cycles_of_one_kind(self):
        """Only connections of the requested kind form cycles."""
        graph = build_topology(endpoint_model("ab", [("a", "b"), ("b", "a")]))
        assert dependency_cycles(graph) == [["endpoint-a", "endpoint-b"]]
        assert dependency_cycles(graph, "data-flow") == [["endpoint-a", "endpoint-b"]]
        assert dependency_cycles(graph, "dependency") == []

    def test_connection_along_containment_edge(self, sample):
        """A connection from a cluster to its own node keeps the containment."""
        sample.connections.append(
            Connection(id="inner", source="snaplex-cloudplex-1", target="node-jcc-01")
        )
        graph = build_topology(sample)
        edge = graph.edges["snaplex-cloudplex-1", "node-jcc-01"]

        assert edge["relation"] == CONTAINS
        assert edge["connection"] == "inner"
        assert connection_degree(graph)["node-jcc-01"] == 1
        assert ("node-jcc-01", "control-node") not in isolated_components(graph)

    def test_connection_degree(self):
        """Test connection degree."""
        graph = build_topology(endpoint_model("abc", [("a", "b"), ("a", "c")]))
        degree = connection_degree(graph)
        assert degree == {"endpoint-a": 2, "endpoint-b": 1, "endpoint-c": 1}

    def test_isolated_components(self, sample):
        """Test isolated components."""
        isolated = isolated_components(build_topology(sample))
        assert isolated == [
            ("gateway-gw-1", "gateway"),
            ("balancer-lb-1", "load-balancer"),
            ("pipeline-ultra-1", "pipeline"),
            ("node-jcc-01", "control-node"),
            ("node-jcc-02", "control-node"),
            ("node-fm-01", "feed-node"),
            ("node-ground-jcc-01", "control-node"),
            ("endpoint-s3-bucket", "endpoint"),
            ("endpoint-kafka", "endpoint"),
        ]

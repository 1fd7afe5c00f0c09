"""Pytest configuration and shared fixtures for plexscene tests."""

from datetime import datetime

import pytest

from plexscene import (
    ArchitectureModel,
    Cluster,
    ClusterContainer,
    DiagramGenerator,
    Environment,
    GridLayout,
    Node,
    ShapeFactory,
)
from plexscene.primitives import Primitive, PrimitiveType
from plexscene.samples import sample_model


def make_nodes(count, prefix="n", **kwargs):
    """Control nodes named ``<prefix>1``..``<prefix><count>``."""
    return [
        Node(id=f"{prefix}{i}", name=f"Node {i}", **kwargs)
        for i in range(1, count + 1)
    ]


@pytest.fixture
def nodes():
    """Factory for numbered control nodes."""
    return make_nodes


@pytest.fixture
def six_node_environment():
    """One production environment with one cloud cluster of 6 baseline nodes."""
    cluster = Cluster(
        id="cluster-1",
        name="Cloud Cluster",
        kind="cloud-hosted",
        container=ClusterContainer(nodes=make_nodes(6)),
    )
    return Environment(
        id="env-1", name="Prod", classification="production", clusters=[cluster]
    )


@pytest.fixture
def six_node_model(six_node_environment):
    """Model wrapping the six-node environment."""
    return ArchitectureModel(environments=[six_node_environment])


@pytest.fixture
def empty_environment():
    """Environment without clusters."""
    return Environment(id="empty", name="Empty", classification="sandbox")


@pytest.fixture
def sample():
    """The bundled sample architecture."""
    return sample_model()


@pytest.fixture
def layout_engine():
    """Default GridLayout instance."""
    return GridLayout()


@pytest.fixture
def factory():
    """ShapeFactory with no shape library."""
    return ShapeFactory()


@pytest.fixture
def generator():
    """Default DiagramGenerator instance."""
    return DiagramGenerator()


@pytest.fixture
def generated_at():
    """Fixed report timestamp."""
    return datetime(2024, 5, 17, 9, 30)


@pytest.fixture
def library_data():
    """Minimal Excalidraw library with a cloud cluster and a control node."""
    return {
        "type": "excalidrawlib",
        "version": 2,
        "libraryItems": [
            {
                "id": "item-1",
                "name": "Cloudplex",
                "elements": [
                    {
                        "id": "a",
                        "type": "rectangle",
                        "x": 100,
                        "y": 200,
                        "width": 300,
                        "height": 150,
                        "strokeColor": "#10b981",
                    },
                    {
                        "id": "b",
                        "type": "text",
                        "x": 120,
                        "y": 210,
                        "width": 80,
                        "height": 20,
                        "text": "Cloudplex",
                        "fontSize": 16,
                    },
                ],
            },
            {
                "id": "item-2",
                "name": "JCC Node",
                "elements": [
                    {
                        "id": "c",
                        "type": "ellipse",
                        "x": 0,
                        "y": 0,
                        "width": 40,
                        "height": 40,
                    }
                ],
            },
            {
                "id": "item-3",
                "name": "Company logo",
                "elements": [
                    {
                        "id": "d",
                        "type": "freedraw",
                        "x": 0,
                        "y": 0,
                        "width": 1,
                        "height": 1,
                    }
                ],
            },
        ],
    }


class StubProvider:
    """Shape provider returning one rectangle per request."""

    def __init__(self, available=True):
        self.available = available
        self.calls = []

    def is_available(self):
        return self.available

    def get_shape(self, semantic_type, x, y):
        self.calls.append((semantic_type, x, y))
        return [
            Primitive(
                id="template",
                type=PrimitiveType.RECTANGLE,
                x=x,
                y=y,
                width=10,
                height=10,
            )
        ]


class FailingProvider(StubProvider):
    """Shape provider that raises on every request."""

    def get_shape(self, semantic_type, x, y):
        self.calls.append((semantic_type, x, y))
        raise RuntimeError("library exploded")


class EmptyProvider(StubProvider):
    """Shape provider that is available but has no shapes."""

    def get_shape(self, semantic_type, x, y):
        self.calls.append((semantic_type, x, y))
        return []


@pytest.fixture
def stub_provider():
    return StubProvider()


@pytest.fixture
def failing_provider():
    return FailingProvider()


@pytest.fixture
def empty_provider():
    return EmptyProvider()

"""
plexscene - Architecture diagrams for integration platform deployments

A Python library that lays out environments, Snaplexes (execution clusters),
nodes and endpoints, and emits Excalidraw scene primitives plus an optional
documentation report.

Example:
    >>> from plexscene import DiagramGenerator, SceneExporter
    >>> from plexscene.samples import sample_model
    >>> result = DiagramGenerator().generate(sample_model(), with_documentation=True)
    >>> SceneExporter().save_json(result.elements, "architecture.excalidraw")

Shape Library Example:
    >>> provider = LibraryShapeProvider()
    >>> provider.load("snaplogic.excalidrawlib")
    >>> generator = DiagramGenerator(shape_factory=ShapeFactory(provider))
"""

from .connections import ConnectionResolver, ResolvedConnections, UnresolvedReference
from .documentation import DocumentationGenerator, DocumentationResult
from .export import SceneExporter
from .factory import MODE_BASIC, MODE_LIBRARY, ShapeFactory
from .generator import DiagramGenerator, DiagramResult
from .layout import GridLayout, LayoutResult, Point, Size
from .library import (
    LibraryError,
    LibraryShapeProvider,
    NullShapeCache,
    NullShapeProvider,
    SemanticType,
    ShapeCache,
    ShapeLibrary,
)
from .models import (
    ApiGateway,
    ArchitectureModel,
    Cluster,
    ClusterContainer,
    ClusterKind,
    Connection,
    ConnectionKind,
    Endpoint,
    Environment,
    EnvironmentType,
    LoadBalancer,
    ModelError,
    Node,
    NodeRole,
    NodeSize,
    NodeStatus,
    UltraPipeline,
    Zone,
)
from .primitives import Primitive, PrimitiveType, Scene, TextStyle
from .textflow import Column, FlowResult, TextFlow, flow, format_table
from .topology import build_topology

__version__ = "0.1.0"

__all__ = [
    # Main API
    "DiagramGenerator",
    "DiagramResult",
    "SceneExporter",
    # Domain model
    "ArchitectureModel",
    "Environment",
    "EnvironmentType",
    "Cluster",
    "ClusterKind",
    "ClusterContainer",
    "Node",
    "NodeRole",
    "NodeSize",
    "NodeStatus",
    "ApiGateway",
    "LoadBalancer",
    "UltraPipeline",
    "Zone",
    "Endpoint",
    "Connection",
    "ConnectionKind",
    "ModelError",
    # Layout
    "GridLayout",
    "LayoutResult",
    "Point",
    "Size",
    # Synthesis
    "ShapeFactory",
    "MODE_BASIC",
    "MODE_LIBRARY",
    "Primitive",
    "PrimitiveType",
    "Scene",
    "TextStyle",
    # Shape library
    "ShapeLibrary",
    "LibraryShapeProvider",
    "NullShapeProvider",
    "ShapeCache",
    "NullShapeCache",
    "SemanticType",
    "LibraryError",
    # Connections
    "ConnectionResolver",
    "ResolvedConnections",
    "UnresolvedReference",
    # Text flow and documentation
    "TextFlow",
    "FlowResult",
    "Column",
    "flow",
    "format_table",
    "DocumentationGenerator",
    "DocumentationResult",
    # Analysis
    "build_topology",
]

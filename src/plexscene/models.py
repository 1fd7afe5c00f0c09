"""
Domain models for architecture diagram generation.

This module contains the dataclasses that describe an integration platform
deployment: environments own execution clusters (Snaplexes), clusters own a
container of compute nodes, and endpoints and connections live beside them.
The rendering pipeline only reads these objects; creating and mutating them
is the job of whatever store the caller keeps.

Every enumerated field accepts either the enum member or its string value and
is normalised in ``__post_init__``, so an invalid value fails at construction
instead of somewhere inside layout or synthesis.

Classes:
    Environment: Top-level deployment grouping owning clusters and zones.
    Cluster: A named execution group owning a ClusterContainer.
    ClusterContainer: Nodes plus optional single-instance sub-components.
    Node: An individual compute instance.
    Endpoint: An external system reference.
    Connection: A directed reference between any two ids.
    Zone: Grouping of component ids (not used by layout).
    ArchitectureModel: Read-only snapshot handed to the pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Type, TypeVar


class ModelError(ValueError):
    """Raised when a domain object is constructed with invalid data."""

    pass


class EnvironmentType(Enum):
    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"
    SANDBOX = "sandbox"


class ClusterKind(Enum):
    CLOUD = "cloud-hosted"
    ON_PREMISES = "on-premises"


class ClusterStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class NodeRole(Enum):
    CONTROL = "control-node"
    FEED = "feed-node"


class NodeStatus(Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    ERROR = "error"


class NodeSize(Enum):
    """Discrete node size tiers, smallest first."""

    BASELINE = "baseline"
    TIER2 = "tier2"
    TIER3 = "tier3"
    TIER4 = "tier4"


class EndpointProtocol(Enum):
    REST = "rest"
    SOAP = "soap"
    DATABASE = "database"
    FILE = "file"
    KAFKA = "kafka"
    SQS = "sqs"
    MQTT = "mqtt"


class AuthType(Enum):
    NONE = "none"
    BASIC = "basic"
    OAUTH2 = "oauth2"
    APIKEY = "apikey"
    CERTIFICATE = "certificate"


class ConnectionKind(Enum):
    DATA_FLOW = "data-flow"
    NETWORK = "network"
    DEPENDENCY = "dependency"


class ZoneKind(Enum):
    GEOGRAPHICAL = "geographical"
    TECHNICAL = "technical"
    SECURITY = "security"


class GatewayProtocol(Enum):
    HTTP = "http"
    HTTPS = "https"


class BalancerKind(Enum):
    NGINX = "nginx"
    HAPROXY = "haproxy"
    AWS_ELB = "aws-elb"
    AZURE_LB = "azure-lb"


class BalancerAlgorithm(Enum):
    ROUND_ROBIN = "round-robin"
    LEAST_CONNECTIONS = "least-connections"
    IP_HASH = "ip-hash"


E = TypeVar("E", bound=Enum)


def coerce_enum(enum_cls: Type[E], value, field_name: str) -> E:
    """
    Normalise a string or enum member into ``enum_cls``.

    Raises:
        ModelError: If the value is not a member of the enumeration.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ModelError(
            f"Invalid {field_name} {value!r}; expected one of: {allowed}"
        ) from None


def _check_percentage(value: Optional[float], field_name: str) -> None:
    if value is None:
        return
    if not 0 <= value <= 100:
        raise ModelError(f"{field_name} must be between 0 and 100, got {value}")


@dataclass
class Node:
    """
    An individual compute instance inside a cluster container.

    Attributes:
        id: Unique node id.
        name: Display name.
        role: Control node (runs pipelines) or feed node (high-throughput).
        hostname: Network host name.
        ip_address: Optional IP address.
        port: Optional listening port.
        status: Lifecycle status.
        cpu: CPU utilization percentage (0-100).
        memory: Memory utilization percentage (0-100).
        disk_space: Disk utilization percentage (0-100).
        size: Discrete size tier.
        memory_optimized: Memory optimization flag, meaningful for control
            nodes only.
    """

    id: str
    name: str
    role: NodeRole = NodeRole.CONTROL
    hostname: str = ""
    ip_address: Optional[str] = None
    port: Optional[int] = None
    status: NodeStatus = NodeStatus.RUNNING
    cpu: Optional[float] = None
    memory: Optional[float] = None
    disk_space: Optional[float] = None
    size: NodeSize = NodeSize.BASELINE
    memory_optimized: bool = False

    def __post_init__(self):
        self.role = coerce_enum(NodeRole, self.role, "node role")
        self.status = coerce_enum(NodeStatus, self.status, "node status")
        self.size = coerce_enum(NodeSize, self.size, "node size")
        _check_percentage(self.cpu, "cpu")
        _check_percentage(self.memory, "memory")
        _check_percentage(self.disk_space, "disk_space")

    @property
    def is_memory_optimized_control(self) -> bool:
        """True when the memory optimization flag applies to this node."""
        return self.memory_optimized and self.role is NodeRole.CONTROL


@dataclass
class ApiGateway:
    id: str
    name: str
    enabled: bool = True
    port: Optional[int] = None
    protocol: Optional[GatewayProtocol] = None

    def __post_init__(self):
        if self.protocol is not None:
            self.protocol = coerce_enum(
                GatewayProtocol, self.protocol, "gateway protocol"
            )


@dataclass
class LoadBalancer:
    id: str
    name: str
    kind: BalancerKind = BalancerKind.NGINX
    algorithm: BalancerAlgorithm = BalancerAlgorithm.ROUND_ROBIN
    health_check_endpoint: Optional[str] = None

    def __post_init__(self):
        self.kind = coerce_enum(BalancerKind, self.kind, "load balancer kind")
        self.algorithm = coerce_enum(
            BalancerAlgorithm, self.algorithm, "load balancer algorithm"
        )


@dataclass
class UltraPipeline:
    """High-throughput pipeline descriptor; references feed node ids."""

    id: str
    name: str
    enabled: bool = True
    feed_node_ids: List[str] = field(default_factory=list)


@dataclass
class ClusterContainer:
    """
    Contents and layout hints of a cluster.

    Attributes:
        nodes: Ordered compute nodes.
        api_gateway: Optional API gateway.
        load_balancer: Optional load balancer.
        ultra_pipeline: Optional high-throughput pipeline descriptor.
        min_width: Lower bound for the cluster's laid-out width.
        min_height: Lower bound for the cluster's laid-out height.
        x: Last known x position (informational).
        y: Last known y position (informational).
    """

    nodes: List[Node] = field(default_factory=list)
    api_gateway: Optional[ApiGateway] = None
    load_balancer: Optional[LoadBalancer] = None
    ultra_pipeline: Optional[UltraPipeline] = None
    min_width: float = 0
    min_height: float = 0
    x: Optional[float] = None
    y: Optional[float] = None

    def __post_init__(self):
        if self.min_width < 0 or self.min_height < 0:
            raise ModelError("Container minimum dimensions must be non-negative")


@dataclass
class Cluster:
    """A Snaplex: a named execution group owned by one environment."""

    id: str
    name: str
    kind: ClusterKind = ClusterKind.CLOUD
    environment_id: str = ""
    status: ClusterStatus = ClusterStatus.ACTIVE
    container: ClusterContainer = field(default_factory=ClusterContainer)
    version: Optional[str] = None

    def __post_init__(self):
        self.kind = coerce_enum(ClusterKind, self.kind, "cluster kind")
        self.status = coerce_enum(ClusterStatus, self.status, "cluster status")

    @property
    def nodes(self) -> List[Node]:
        return self.container.nodes


@dataclass
class Zone:
    id: str
    name: str
    kind: ZoneKind = ZoneKind.TECHNICAL
    region: Optional[str] = None
    components: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.kind = coerce_enum(ZoneKind, self.kind, "zone kind")


@dataclass
class Environment:
    """
    Top-level deployment grouping.

    Clusters are owned by value; a cluster whose ``environment_id`` is empty
    is stamped with this environment's id.
    """

    id: str
    name: str
    classification: EnvironmentType = EnvironmentType.DEVELOPMENT
    region: str = ""
    description: str = ""
    clusters: List[Cluster] = field(default_factory=list)
    zones: List[Zone] = field(default_factory=list)

    def __post_init__(self):
        self.classification = coerce_enum(
            EnvironmentType, self.classification, "environment classification"
        )
        for cluster in self.clusters:
            if not cluster.environment_id:
                cluster.environment_id = self.id
            elif cluster.environment_id != self.id:
                raise ModelError(
                    f"Cluster {cluster.id!r} belongs to environment "
                    f"{cluster.environment_id!r}, not {self.id!r}"
                )

    @property
    def node_count(self) -> int:
        return sum(len(cluster.nodes) for cluster in self.clusters)


@dataclass
class Endpoint:
    id: str
    name: str
    protocol: EndpointProtocol = EndpointProtocol.REST
    url: Optional[str] = None
    authentication: Optional[AuthType] = None

    def __post_init__(self):
        self.protocol = coerce_enum(
            EndpointProtocol, self.protocol, "endpoint protocol"
        )
        if self.authentication is not None:
            self.authentication = coerce_enum(
                AuthType, self.authentication, "authentication kind"
            )


@dataclass
class Connection:
    """
    A directed reference between two ids.

    ``source`` and ``target`` are free-form; they resolve to a point only
    when they match a position key produced by the layout engine
    (for example ``node-<id>``).
    """

    id: str
    source: str
    target: str
    kind: ConnectionKind = ConnectionKind.DATA_FLOW
    label: Optional[str] = None

    def __post_init__(self):
        self.kind = coerce_enum(ConnectionKind, self.kind, "connection kind")


@dataclass
class ArchitectureModel:
    """Snapshot of the whole model, in insertion order."""

    environments: List[Environment] = field(default_factory=list)
    endpoints: List[Endpoint] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    title: str = "Architecture"
    description: str = ""

    def iter_clusters(self):
        """Yield (environment, cluster) pairs in order."""
        for env in self.environments:
            for cluster in env.clusters:
                yield env, cluster

    def iter_nodes(self):
        """Yield (environment, cluster, node) triples in order."""
        for env, cluster in self.iter_clusters():
            for node in cluster.nodes:
                yield env, cluster, node

    @property
    def total_nodes(self) -> int:
        return sum(env.node_count for env in self.environments)

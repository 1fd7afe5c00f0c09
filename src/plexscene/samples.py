"""
Sample architecture for demos and tests.

Builds a small but complete deployment: one production environment with a
cloud-hosted and an on-premises Snaplex, four external endpoints and two
data-flow connections. Ids are fixed so generated scenes are reproducible.
"""

from typing import List, Sequence

from .layout import cluster_key, endpoint_key
from .models import (
    ApiGateway,
    ArchitectureModel,
    Cluster,
    ClusterContainer,
    Connection,
    Endpoint,
    Environment,
    LoadBalancer,
    Node,
    UltraPipeline,
    Zone,
)


def control_node(
    node_id, name, hostname, ip_address, cpu, memory, disk_space, **kwargs
):
    return Node(
        id=node_id,
        name=name,
        role="control-node",
        hostname=hostname,
        ip_address=ip_address,
        port=8080,
        cpu=cpu,
        memory=memory,
        disk_space=disk_space,
        **kwargs,
    )


def feed_node(node_id, name, hostname, ip_address, cpu, memory, disk_space):
    return Node(
        id=node_id,
        name=name,
        role="feed-node",
        hostname=hostname,
        ip_address=ip_address,
        port=8081,
        cpu=cpu,
        memory=memory,
        disk_space=disk_space,
    )


def sample_environment() -> Environment:
    cloud = Cluster(
        id="cloudplex-1",
        name="Primary Cloudplex",
        kind="cloud-hosted",
        version="4.33",
        container=ClusterContainer(
            nodes=[
                control_node(
                    "jcc-01", "JCC-01", "jcc-01.snaplogic.io", "10.0.1.10", 45, 72, 35
                ),
                control_node(
                    "jcc-02",
                    "JCC-02",
                    "jcc-02.snaplogic.io",
                    "10.0.1.11",
                    62,
                    68,
                    42,
                    size="tier2",
                    memory_optimized=True,
                ),
                feed_node(
                    "fm-01", "FM-01", "fm-01.snaplogic.io", "10.0.1.15", 25, 48, 20
                ),
            ],
            api_gateway=ApiGateway(
                id="gw-1", name="API Gateway", port=443, protocol="https"
            ),
            load_balancer=LoadBalancer(
                id="lb-1",
                name="AWS ALB",
                kind="aws-elb",
                algorithm="round-robin",
                health_check_endpoint="/health",
            ),
            ultra_pipeline=UltraPipeline(
                id="ultra-1", name="Ultra Processing", feed_node_ids=["fm-01"]
            ),
            min_width=400,
            min_height=300,
        ),
    )
    ground = Cluster(
        id="groundplex-1",
        name="On-Premise Groundplex",
        kind="on-premises",
        version="4.33",
        container=ClusterContainer(
            nodes=[
                control_node(
                    "ground-jcc-01",
                    "Ground-JCC-01",
                    "ground-jcc-01.internal",
                    "192.168.1.100",
                    38,
                    55,
                    28,
                ),
            ],
            min_width=300,
            min_height=200,
        ),
    )
    return Environment(
        id="production-aws",
        name="Production AWS",
        classification="production",
        region="us-east-1",
        description="Main production environment for customer data processing",
        clusters=[cloud, ground],
        zones=[
            Zone(
                id="vpc-zone", name="AWS VPC Zone", kind="security", region="us-east-1"
            )
        ],
    )


def sample_endpoints() -> List[Endpoint]:
    return [
        Endpoint(
            id="customer-api",
            name="Customer API",
            protocol="rest",
            url="https://api.customer.com/v2",
            authentication="oauth2",
        ),
        Endpoint(
            id="oracle-db",
            name="Oracle Database",
            protocol="database",
            url="jdbc:oracle:thin:@//db.internal:1521/PROD",
            authentication="basic",
        ),
        Endpoint(
            id="s3-bucket",
            name="S3 Bucket",
            protocol="file",
            url="s3://data-bucket/inbound/",
            authentication="apikey",
        ),
        Endpoint(
            id="kafka",
            name="Kafka Cluster",
            protocol="kafka",
            url="kafka-broker.internal:9092",
            authentication="certificate",
        ),
    ]


def sample_connections(
    environments: Sequence[Environment], endpoints: Sequence[Endpoint]
) -> List[Connection]:
    """Connect the first Snaplex to the first two endpoints."""
    if not environments or not environments[0].clusters or not endpoints:
        return []
    source = cluster_key(environments[0].clusters[0].id)
    connections = [
        Connection(
            id="conn-1",
            source=source,
            target=endpoint_key(endpoints[0].id),
            kind="data-flow",
            label="API Integration",
        )
    ]
    if len(endpoints) > 1:
        connections.append(
            Connection(
                id="conn-2",
                source=source,
                target=endpoint_key(endpoints[1].id),
                kind="data-flow",
                label="Database Sync",
            )
        )
    return connections


def sample_model() -> ArchitectureModel:
    """The full sample architecture."""
    environment = sample_environment()
    endpoints = sample_endpoints()
    return ArchitectureModel(
        environments=[environment],
        endpoints=endpoints,
        connections=sample_connections([environment], endpoints),
        title="SnapLogic Architecture",
        description="Sample integration platform deployment",
    )

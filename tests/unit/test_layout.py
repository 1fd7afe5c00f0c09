"""Unit tests for the layout module."""

import math

import pytest

from plexscene.layout import (
    ENDPOINT_STEP,
    ENV_HORIZONTAL_GAP,
    ENV_ROW_GAP,
    LAYOUT_MARGIN,
    GridLayout,
    LayoutResult,
    Point,
    Size,
)
from plexscene.models import (
    ApiGateway,
    Cluster,
    ClusterContainer,
    Endpoint,
    Environment,
    UltraPipeline,
)


def environment(env_id, clusters=()):
    return Environment(id=env_id, name=env_id, clusters=list(clusters))


def cluster(cluster_id, node_list=(), **container_kwargs):
    return Cluster(
        id=cluster_id,
        name=cluster_id,
        container=ClusterContainer(nodes=list(node_list), **container_kwargs),
    )


class TestLayoutResult:
    """Tests for LayoutResult lookups."""

    def test_defaults(self):
        """Test defaults."""
        result = LayoutResult()
        assert result.positions == {}
        assert result.dimensions == {}
        assert result.bottom == 0

    def test_lookup_falls_back_to_default(self):
        """Missing keys resolve to the supplied default."""
        result = LayoutResult(positions={"env-a": Point(1, 2)})
        assert result.position("env-a", Point(0, 0)) == Point(1, 2)
        assert result.position("env-b", Point(5, 5)) == Point(5, 5)
        assert result.dimension("env-b", Size(3, 4)) == Size(3, 4)


class TestGridLayoutConfiguration:
    """Tests for GridLayout options."""

    def test_invalid_nodes_per_row(self):
        """Test invalid nodes per row."""
        with pytest.raises(ValueError):
            GridLayout(nodes_per_row=0)

    def test_invalid_envs_per_row(self):
        """Test invalid envs per row."""
        with pytest.raises(ValueError):
            GridLayout(envs_per_row=0)


class TestEnvironmentPlacement:
    """Tests for environment positions and sizes."""

    def test_empty_environment_has_minimum_size(
        self, layout_engine, empty_environment
    ):
        """An environment without clusters gets exactly the minimum size."""
        result = layout_engine.layout([empty_environment], [])
        assert result.dimensions["env-empty"] == Size(1200, 500)

    def test_first_environment_at_margin(self, layout_engine):
        """Test first environment at margin."""
        result = layout_engine.layout([environment("a")], [])
        assert result.positions["env-a"] == Point(LAYOUT_MARGIN, LAYOUT_MARGIN)

    def test_two_environments_per_row(self, layout_engine):
        """The second environment sits to the right, the third wraps."""
        envs = [environment("a"), environment("b"), environment("c")]
        result = layout_engine.layout(envs, [])

        assert result.positions["env-b"] == Point(
            LAYOUT_MARGIN + 1200 + ENV_HORIZONTAL_GAP, LAYOUT_MARGIN
        )
        assert result.positions["env-c"] == Point(
            LAYOUT_MARGIN, LAYOUT_MARGIN + 500 + ENV_ROW_GAP
        )

    def test_row_height_uses_tallest_environment(self, layout_engine, nodes):
        """The next row starts below the tallest environment of the row."""
        tall = environment("tall", [cluster("c1", nodes(20))])
        envs = [environment("short"), tall, environment("next")]
        result = layout_engine.layout(envs, [])

        tall_height = result.dimensions["env-tall"].height
        assert tall_height > 500
        expected_y = LAYOUT_MARGIN + tall_height + ENV_ROW_GAP
        assert result.positions["env-next"].y == expected_y

    def test_environment_grows_with_clusters(self, layout_engine):
        """Three clusters do not fit in the minimum width."""
        env = environment("wide", [cluster("c1"), cluster("c2"), cluster("c3")])
        result = layout_engine.layout([env], [])
        # 40 inset + 3 * 450 + 2 * 30 gaps + 40 padding
        assert result.dimensions["env-wide"].width == 40 + 3 * 450 + 2 * 30 + 40


class TestClusterPlacement:
    """Tests for cluster and node placement."""

    @pytest.mark.parametrize("count", [1, 4, 5, 6, 10, 11, 23])
    def test_cluster_height_formula(self, layout_engine, nodes, count):
        """Height is 300 plus 70 per extra row of five nodes."""
        env = environment("e", [cluster("c", nodes(count))])
        result = layout_engine.layout([env], [])
        expected = 300 + max(0, math.ceil(count / 5) - 1) * 70
        assert result.dimensions["snaplex-c"] == Size(450, expected)

    def test_empty_cluster_has_base_size(self, layout_engine):
        """Test empty cluster has base size."""
        assert layout_engine.cluster_size(0) == Size(450, 300)

    def test_cluster_inside_environment(self, layout_engine):
        """Test cluster inside environment."""
        env = environment("e", [cluster("c1"), cluster("c2")])
        result = layout_engine.layout([env], [])
        assert result.positions["snaplex-c1"] == Point(50 + 40, 50 + 80)
        assert result.positions["snaplex-c2"] == Point(50 + 40 + 450 + 30, 50 + 80)

    def test_node_grid(self, layout_engine, nodes):
        """Nodes fill five columns, 70 apart, starting at +50/+220."""
        env = environment("e", [cluster("c", nodes(7))])
        result = layout_engine.layout([env], [])
        origin = result.positions["snaplex-c"]

        assert result.positions["node-n1"] == Point(origin.x + 50, origin.y + 220)
        assert result.positions["node-n5"] == Point(
            origin.x + 50 + 4 * 70, origin.y + 220
        )
        assert result.positions["node-n6"] == Point(origin.x + 50, origin.y + 290)
        assert result.positions["node-n7"] == Point(origin.x + 120, origin.y + 290)

    def test_custom_nodes_per_row(self, nodes):
        """Test custom nodes per row."""
        engine = GridLayout(nodes_per_row=2)
        env = environment("e", [cluster("c", nodes(5))])
        result = engine.layout([env], [])
        assert result.dimensions["snaplex-c"].height == 300 + 2 * 70

    def test_container_minimum_is_honoured(self, layout_engine):
        """Test container minimum is honoured."""
        env = environment("e", [cluster("c", min_width=600, min_height=450)])
        result = layout_engine.layout([env], [])
        assert result.dimensions["snaplex-c"] == Size(600, 450)

    def test_sub_components_are_placed(self, layout_engine):
        """Present sub-components take consecutive slots; absent ones are skipped."""
        env = environment(
            "e",
            [
                cluster(
                    "c",
                    api_gateway=ApiGateway(id="gw", name="Gateway"),
                    ultra_pipeline=UltraPipeline(id="up", name="Ultra"),
                )
            ],
        )
        result = layout_engine.layout([env], [])
        origin = result.positions["snaplex-c"]

        assert result.positions["gateway-gw"] == Point(origin.x + 50, origin.y + 120)
        assert result.positions["pipeline-up"] == Point(origin.x + 180, origin.y + 120)
        assert "balancer-lb" not in result.positions
        assert result.dimensions["gateway-gw"] == Size(110, 50)


class TestEndpointPlacement:
    """Tests for endpoint placement."""

    def test_endpoints_below_environments(self, layout_engine):
        """Test endpoints below environments."""
        endpoints = [Endpoint(id="a", name="A"), Endpoint(id="b", name="B")]
        result = layout_engine.layout([environment("e")], endpoints)

        expected_y = LAYOUT_MARGIN + 500 + ENV_ROW_GAP + 50
        assert result.positions["endpoint-a"] == Point(LAYOUT_MARGIN, expected_y)
        assert result.positions["endpoint-b"] == Point(
            LAYOUT_MARGIN + ENDPOINT_STEP, expected_y
        )

    def test_endpoints_without_environments(self, layout_engine):
        """Test endpoints without environments."""
        result = layout_engine.layout([], [Endpoint(id="a", name="A")])
        expected = Point(LAYOUT_MARGIN, LAYOUT_MARGIN + 50)
        assert result.positions["endpoint-a"] == expected

    def test_bottom_covers_endpoints(self, layout_engine):
        """Test bottom covers endpoints."""
        result = layout_engine.layout([environment("e")], [Endpoint(id="a", name="A")])
        assert result.bottom == result.positions["endpoint-a"].y + 60


class TestDeterminism:
    """Layout is a pure function of its ordered input."""

    def test_identical_runs(self, layout_engine, sample):
        """Test identical runs."""
        first = layout_engine.layout(sample.environments, sample.endpoints)
        second = layout_engine.layout(sample.environments, sample.endpoints)
        assert first.positions == second.positions
        assert first.dimensions == second.dimensions
        assert list(first.positions) == list(second.positions)

    def test_separate_engines_agree(self, sample):
        """Test separate engines agree."""
        first = GridLayout().layout(sample.environments, sample.endpoints)
        second = GridLayout().layout(sample.environments, sample.endpoints)
        assert first == second

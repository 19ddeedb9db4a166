"""
Tests for HNSW layer assignment and neighbor selection helpers.
"""

import pytest
from annviz.sphere import generate_fibonacci_sphere
from annviz.hnsw.graph import MAX_LAYERS
from annviz.hnsw.utils import (
    assign_layer,
    assign_layers,
    layer_seed,
    level_multiplier,
    select_neighbors_simple,
)


def test_layer_seed_in_unit_interval():
    for node_id in range(500):
        seed = layer_seed(node_id)
        assert 0.0 < seed <= 1.0


def test_layer_seed_is_stable():
    """Same id, same seed, forever"""
    assert [layer_seed(i) for i in range(50)] == [layer_seed(i) for i in range(50)]


def test_level_multiplier_clamps_small_m():
    assert level_multiplier(0) == level_multiplier(1) == level_multiplier(2)
    assert level_multiplier(2) > level_multiplier(16)


@pytest.mark.parametrize("M", [2, 3, 4, 8, 16, 64])
def test_assign_layer_within_bounds(M):
    for node_id in range(200):
        assert 0 <= assign_layer(node_id, M) < MAX_LAYERS


def test_assign_layer_degenerate_m_behaves_like_two():
    for node_id in range(50):
        assert assign_layer(node_id, 0) == assign_layer(node_id, 2)


class TestAssignLayers:
    """Tests for whole-topology layer assignment."""

    def test_assigns_every_point(self):
        points = generate_fibonacci_sphere(30)
        nodes = assign_layers(points, 4)

        assert len(nodes) == 30
        for node in nodes:
            assert 0 <= node.layer < MAX_LAYERS

    def test_preserves_point_coordinates_and_ids(self):
        points = generate_fibonacci_sphere(10)
        nodes = assign_layers(points, 4)

        for i, (point, node) in enumerate(zip(points, nodes)):
            assert node.id == i
            assert node.point == point

    def test_empty_input(self):
        assert assign_layers([], 4) == []

    def test_most_nodes_on_base_layer(self):
        nodes = assign_layers(generate_fibonacci_sphere(100), 4)
        base_only = [n for n in nodes if n.layer == 0]
        assert len(base_only) > 30

    def test_guarantees_layer_two(self):
        """Even tiny topologies show an upper layer"""
        for n in (1, 2, 5, 15):
            nodes = assign_layers(generate_fibonacci_sphere(n), 64)
            assert max(node.layer for node in nodes) >= 2

    def test_guarantees_layer_three_above_fifteen_nodes(self):
        for n in (16, 30, 100):
            for M in (2, 4, 16, 64):
                nodes = assign_layers(generate_fibonacci_sphere(n), M)
                assert max(node.layer for node in nodes) == MAX_LAYERS - 1

    def test_deterministic(self):
        points = generate_fibonacci_sphere(50)
        assert assign_layers(points, 8) == assign_layers(points, 8)

    def test_smaller_m_raises_average_layer(self):
        """Smaller M => larger mL => more upper-layer nodes"""
        points = generate_fibonacci_sphere(100)

        def average_layer(M):
            nodes = assign_layers(points, M)
            return sum(n.layer for n in nodes) / len(nodes)

        assert average_layer(2) > average_layer(4) > average_layer(16)


def test_select_neighbors_simple_picks_closest():
    assert select_neighbors_simple([10, 20, 30, 40], [0.5, 0.2, 0.8, 0.3], M=2) == [20, 40]


def test_select_neighbors_simple_edge_cases():
    assert select_neighbors_simple([], [], M=3) == []
    assert select_neighbors_simple([1, 2], [0.1, 0.2], M=0) == []
    assert select_neighbors_simple([1, 2], [0.2, 0.1], M=5) == [2, 1]

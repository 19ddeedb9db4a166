"""
Synthetic HNSW topology construction.

This module turns sphere points into a layered proximity graph:
1. Place nodes on the sphere (Fibonacci spiral)
2. Assign each node a maximum layer (deterministic geometric distribution)
3. On every layer, connect each node to its nearest neighbors among the
   nodes present at that layer (2*M at layer 0, M above)

This is a symmetric nearest-neighbor graph, not the incremental insertion
algorithm of real HNSW. It keeps the topological properties that matter for
display: the base layer is the densest, upper layers thin out, and every edge
lives on a layer both endpoints belong to.

Neighbor search is brute force, O(n^2) per layer. Node counts here are in the
tens to low hundreds.
"""

import logging
from typing import List, Set, Tuple

from annviz.sphere import generate_fibonacci_sphere, sphere_distance
from annviz.hnsw.graph import (
    HNSWData,
    HNSWEdge,
    HNSWNode,
    LAYER_RADII,
    MAX_LAYERS,
    edge_key,
)
from annviz.hnsw.utils import assign_layers, select_neighbors_simple

logger = logging.getLogger(__name__)


def max_degree(layer: int, M: int, layer_size: int) -> int:
    """
    Edge budget per node at a layer.

    Layer 0 gets 2*M connections, upper layers M, both capped at the number
    of other nodes present on the layer.
    """
    limit = 2 * M if layer == 0 else M
    return max(0, min(limit, layer_size - 1))


def generate_edges(nodes: List[HNSWNode], M: int) -> List[HNSWEdge]:
    """
    Generate undirected nearest-neighbor edges for every layer.

    Args:
        nodes: Nodes with assigned layers
        M: Maximum connections per node at upper layers

    Returns:
        Edge list, grouped by layer (0 first). Each unordered pair appears at
        most once per layer.
    """
    edges: List[HNSWEdge] = []
    seen: Set[Tuple[int, int, int]] = set()

    for layer in range(MAX_LAYERS):
        # Nodes that exist at this layer (maximum layer >= layer)
        layer_nodes = [node for node in nodes if node.layer >= layer]
        if len(layer_nodes) < 2:
            continue

        degree = max_degree(layer, M, len(layer_nodes))
        radius = LAYER_RADII[layer]

        for node in layer_nodes:
            others = [other for other in layer_nodes if other.id != node.id]
            distances = [
                sphere_distance(node.point, other.point, radius, radius)
                for other in others
            ]
            nearest = select_neighbors_simple(
                [other.id for other in others], distances, degree
            )

            for target_id in nearest:
                key = edge_key(node.id, target_id, layer)
                if key in seen:
                    continue
                seen.add(key)
                edges.append(HNSWEdge(source=node.id, target=target_id, layer=layer))

        logger.debug(
            "Layer %d: %d nodes, degree bound %d", layer, len(layer_nodes), degree
        )

    return edges


def generate_hnsw_data(node_count: int, M: int) -> HNSWData:
    """
    Build a full synthetic HNSW topology.

    Args:
        node_count: Number of nodes to generate
        M: Maximum connections per node at upper layers (layer 0 uses 2*M)

    Returns:
        HNSWData with nodes and edges

    Example:
        >>> data = generate_hnsw_data(30, 4)
        >>> data.max_layer()
        3
    """
    points = generate_fibonacci_sphere(node_count)
    nodes = assign_layers(points, M)
    edges = generate_edges(nodes, M)

    data = HNSWData(nodes=nodes, edges=edges)
    logger.debug("Generated %r", data)
    return data

"""
HNSW topology data structures.

This module defines the plain data produced by the topology generator:
- HNSWNode: a point on the sphere with the highest layer it is inserted at
- HNSWEdge: an undirected connection between two nodes, scoped to one layer
- HNSWData: container for a full generated topology

Layers are drawn as concentric spheres. Layer 0 (the dense base layer) is the
outermost sphere and the sparse entry layer is the innermost. A node is
visually present on every sphere from 0 up to its own layer.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np
import numpy.typing as npt

from annviz.sphere import SpherePoint, scale_point

Vector = npt.NDArray[np.float64]

# Layer radii: L0 = outer (dense base), L3 = inner (sparse entry)
LAYER_RADII: Tuple[float, ...] = (13.0, 9.5, 6.5, 3.5)
MAX_LAYERS = len(LAYER_RADII)

LAYER_COLORS: Dict[int, int] = {
    0: 0x4DA6FF,  # Blue - base layer
    1: 0xA78BFA,  # Purple
    2: 0xF59E0B,  # Orange
    3: 0xF87171,  # Red - entry layer
}

EDGE_COLORS: Dict[str, int] = {
    "default": 0x2A3A52,
    "highlight": 0x4A5A72,
    "query": 0xFBBF24,
    "explored": 0x34D399,
    "search_path": 0xFBBF24,
}


@dataclass(frozen=True)
class HNSWNode:
    """
    A node in the synthetic HNSW topology.

    Attributes:
        id: Dense 0-based index into the generation input
        layer: Maximum layer this node appears in (0 = base layer only)
        nx, ny, nz: Unit direction of the node on every layer sphere
    """

    id: int
    layer: int
    nx: float
    ny: float
    nz: float

    @property
    def point(self) -> SpherePoint:
        return SpherePoint(self.nx, self.ny, self.nz)

    def position(self, layer: int) -> Vector:
        return node_position(self, layer)


@dataclass(frozen=True)
class HNSWEdge:
    """An undirected edge, stored once per unordered pair and layer."""

    source: int
    target: int
    layer: int

    @property
    def key(self) -> Tuple[int, int, int]:
        return edge_key(self.source, self.target, self.layer)


def edge_key(a: int, b: int, layer: int) -> Tuple[int, int, int]:
    """Deduplication key for an undirected edge."""
    return (min(a, b), max(a, b), layer)


def node_position(node: HNSWNode, layer: int) -> Vector:
    """
    Get the 3D position of a node on a given layer sphere.

    Args:
        node: Node to place
        layer: Layer whose radius is used

    Returns:
        Position as a numpy array of shape (3,)
    """
    return scale_point(node.point, LAYER_RADII[layer])


def get_neighbors(
    node_id: int, layer: int, edges: List[HNSWEdge], nodes: List[HNSWNode]
) -> List[HNSWNode]:
    """
    Get all nodes connected to node_id at exactly the given layer.

    Args:
        node_id: Node to look up
        layer: Layer to query
        edges: Edge list of the topology
        nodes: Node list of the topology

    Returns:
        Neighbor nodes in edge order. Empty if the node is absent at that layer.
    """
    by_id = {node.id: node for node in nodes}
    node = by_id.get(node_id)
    if node is None or node.layer < layer:
        return []

    neighbors = []
    for edge in edges:
        if edge.layer != layer:
            continue
        if edge.source == node_id:
            other = by_id.get(edge.target)
        elif edge.target == node_id:
            other = by_id.get(edge.source)
        else:
            continue
        if other is not None:
            neighbors.append(other)

    return neighbors


@dataclass
class HNSWData:
    """
    Container for a generated HNSW topology.

    Built once per parameter set and never mutated afterwards.
    """

    nodes: List[HNSWNode] = field(default_factory=list)
    edges: List[HNSWEdge] = field(default_factory=list)

    def size(self) -> int:
        return len(self.nodes)

    def get_node(self, node_id: int) -> HNSWNode:
        """Look up a node by id. Raises KeyError for unknown ids."""
        if 0 <= node_id < len(self.nodes) and self.nodes[node_id].id == node_id:
            return self.nodes[node_id]
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(f"Node not found: {node_id}")

    def max_layer(self) -> int:
        """Highest layer in the topology, or -1 if empty."""
        if not self.nodes:
            return -1
        return max(node.layer for node in self.nodes)

    def nodes_at_layer(self, layer: int) -> List[HNSWNode]:
        return [node for node in self.nodes if node.layer >= layer]

    def edges_at_layer(self, layer: int) -> List[HNSWEdge]:
        return [edge for edge in self.edges if edge.layer == layer]

    def adjacency(self, layer: int) -> Dict[int, List[int]]:
        """
        Neighbor ids per node at one layer, in edge order.

        Equivalent to calling get_neighbors for every node, but built in one pass.
        """
        adjacency: Dict[int, List[int]] = {
            node.id: [] for node in self.nodes if node.layer >= layer
        }
        for edge in self.edges:
            if edge.layer != layer:
                continue
            adjacency.setdefault(edge.source, []).append(edge.target)
            adjacency.setdefault(edge.target, []).append(edge.source)
        return adjacency

    def neighbors(self, node_id: int, layer: int) -> List[HNSWNode]:
        return get_neighbors(node_id, layer, self.edges, self.nodes)

    def __repr__(self) -> str:
        return (
            f"HNSWData(nodes={self.size()}, edges={len(self.edges)}, "
            f"max_layer={self.max_layer()})"
        )

"""
Utility functions for synthetic HNSW topology generation.

This module provides helper functions used while building the topology:
- Layer assignment: Determines the highest layer each node is inserted at
- Neighbor selection: Picks the nearest candidates for a node's edges

Real HNSW draws each node's layer from a geometric distribution with a fresh
random number. Here the random number is replaced by a fixed hash of the node
id, so the same id always lands on the same layer across rebuilds while the
overall distribution still follows the HNSW paper.
"""

import logging
import math
from typing import List

from annviz.sphere import SpherePoint
from annviz.hnsw.graph import HNSWNode, MAX_LAYERS

logger = logging.getLogger(__name__)

MIN_SEED = 0.001


def layer_seed(node_id: int) -> float:
    """
    Deterministic pseudo-random value in (0, 1] for a node id.

    Uses the fractional behaviour of sin() at large arguments as a cheap
    stateless hash.

    Example:
        >>> layer_seed(7) == layer_seed(7)
        True
    """
    seed = abs(math.sin(node_id * 9301 + 49297) * 0.5 + 0.5)
    return max(seed, MIN_SEED)


def level_multiplier(M: int) -> float:
    """mL = 1/ln(M) per Malkov & Yashunin, with M clamped to at least 2."""
    return 1.0 / math.log(max(M, 2))


def assign_layer(node_id: int, M: int) -> int:
    """
    Assign the maximum layer for a single node.

    Formula (Malkov & Yashunin 2016): layer = floor(-ln(seed) * mL)
    where mL = 1/ln(M). Smaller M gives a larger mL and more upper-layer nodes.

    Args:
        node_id: Node id used as the hash input
        M: Maximum connections per node at upper layers

    Returns:
        Layer number clamped to [0, MAX_LAYERS - 1]
    """
    layer = int(math.floor(-math.log(layer_seed(node_id)) * level_multiplier(M)))
    return min(max(layer, 0), MAX_LAYERS - 1)


def assign_layers(points: List[SpherePoint], M: int) -> List[HNSWNode]:
    """
    Turn sphere points into HNSW nodes with assigned layers.

    After the probabilistic assignment two guarantees are enforced so the
    visualization always has a hierarchy to show:
    - at least one node reaches layer 2 (node 0 is promoted if needed)
    - with more than 15 nodes, at least one node reaches layer 3

    Args:
        points: Unit directions, one per node (node id = list index)
        M: Maximum connections per node at upper layers

    Returns:
        List of HNSWNode in input order
    """
    layers = [assign_layer(node_id, M) for node_id in range(len(points))]

    if not layers:
        return []

    if max(layers) < 2:
        layers[0] = 2

    if max(layers) < 3 and len(layers) > 15:
        # Promote the highest other node so node 0 is not the only upper node
        candidate = max(range(1, len(layers)), key=lambda i: (layers[i], -i))
        layers[candidate] = 3

    nodes = [
        HNSWNode(id=node_id, layer=layer, nx=point.nx, ny=point.ny, nz=point.nz)
        for node_id, (point, layer) in enumerate(zip(points, layers))
    ]

    logger.debug(
        "Assigned layers for %d nodes (M=%d): max layer %d",
        len(nodes), M, max(layers),
    )
    return nodes


def select_neighbors_simple(
    candidates: List[int], distances: List[float], M: int
) -> List[int]:
    """
    Select the M nearest candidates.

    Ties keep candidate order (stable sort), so the result is deterministic.

    Args:
        candidates: List of node IDs
        distances: List of distances (parallel to candidates, lower = closer)
        M: Maximum number of neighbors to select

    Returns:
        List of selected node IDs (up to M nodes, sorted by distance)

    Example:
        >>> select_neighbors_simple([10, 20, 30, 40], [0.5, 0.2, 0.8, 0.3], M=2)
        [20, 40]
    """
    if len(candidates) == 0 or M <= 0:
        return []

    paired = sorted(zip(candidates, distances), key=lambda x: x[1])
    return [node_id for node_id, _ in paired[:M]]

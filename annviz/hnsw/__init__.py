"""
Synthetic HNSW (Hierarchical Navigable Small World) topology module.

This module builds representative HNSW graphs on concentric spheres and
simulates queries against them. No real vectors are involved: node positions
come from a Fibonacci sphere and layers from a deterministic hash.

Components:
- graph: Node/edge data structures, layer radii, neighbor queries
- utils: Layer assignment and neighbor selection helpers
- builder: Per-layer nearest-neighbor edge generation
- searcher: Two-phase search simulation (greedy descent + layer-0 beam)
"""

from annviz.hnsw.graph import (
    EDGE_COLORS,
    LAYER_COLORS,
    LAYER_RADII,
    MAX_LAYERS,
    HNSWData,
    HNSWEdge,
    HNSWNode,
    get_neighbors,
    node_position,
)
from annviz.hnsw.utils import assign_layer, assign_layers, layer_seed
from annviz.hnsw.builder import generate_edges, generate_hnsw_data
from annviz.hnsw.searcher import HNSWSearchSimulator, SearchEvent, SearchTrace

__all__ = [
    "EDGE_COLORS",
    "LAYER_COLORS",
    "LAYER_RADII",
    "MAX_LAYERS",
    "HNSWData",
    "HNSWEdge",
    "HNSWNode",
    "get_neighbors",
    "node_position",
    "assign_layer",
    "assign_layers",
    "layer_seed",
    "generate_edges",
    "generate_hnsw_data",
    "HNSWSearchSimulator",
    "SearchEvent",
    "SearchTrace",
]

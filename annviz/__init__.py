"""
annviz - Synthetic ANN index topology and search simulation

Builds representative HNSW and IVF index structures on spheres, simulates
queries through them, and estimates storage and performance with closed-form
models. No real vectors are involved; everything is deterministic except the
explicitly randomized search targets and cluster offsets.
"""

__version__ = "0.1.0"

from annviz.explorer import IndexExplorer
from annviz.config import (
    ExplorerConfig,
    get_default_config,
    get_high_recall_config,
    get_low_memory_config,
)

__all__ = [
    "IndexExplorer",
    "ExplorerConfig",
    "get_default_config",
    "get_high_recall_config",
    "get_low_memory_config",
]

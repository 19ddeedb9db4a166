"""Configuration for annviz index explorers.

Usage:
    from annviz import IndexExplorer, ExplorerConfig

    # Default config
    explorer = IndexExplorer()

    # Custom config
    config = ExplorerConfig(M=16, ef_search=64)
    explorer = IndexExplorer(config=config)

All parameters are plain numbers. They are validated here, at the boundary,
so the generators and metrics downstream never see negative, NaN or
fractional-count input.
"""

import math
import numbers
from typing import Dict, Any
from dataclasses import dataclass, asdict, fields

# Used as sizes, ranges and slice bounds downstream
COUNT_FIELDS = frozenset({
    "vector_count", "dimensions", "mrl_dimensions",
    "M", "ef_construction", "ef_search",
    "nlist", "nprobe",
    "visual_node_count", "visual_clusters",
})


@dataclass(frozen=True)
class ExplorerConfig:
    """Configuration for an IndexExplorer.

    Data parameters:
        vector_count: Number of vectors the metrics model assumes
        dimensions: Full embedding dimensions
        mrl_dimensions: Matryoshka-truncated dimensions actually stored

    HNSW parameters:
        M: Maximum connections per node at upper layers (layer 0 uses 2*M)
        ef_construction: Construction beam width
        ef_search: Search beam width

    IVF parameters:
        nlist: Number of clusters
        nprobe: Clusters scanned per query

    Visualization parameters:
        visual_node_count: Nodes/points drawn (not the real vector count)
        visual_clusters: Centroids drawn for the IVF layout
        cluster_spread: Maximum point distance from its centroid
    """

    # Data
    vector_count: int = 100_000
    dimensions: int = 3072
    mrl_dimensions: int = 1536

    # HNSW
    M: int = 4
    ef_construction: int = 100
    ef_search: int = 20

    # IVF
    nlist: int = 100
    nprobe: int = 10

    # Visualization
    visual_node_count: int = 45
    visual_clusters: int = 8
    cluster_spread: float = 1.5

    # Metadata
    config_name: str = "default"

    def __post_init__(self):
        """Validate configuration."""
        for f in fields(self):
            if f.name == "config_name":
                continue
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise ValueError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{f.name} must be finite, got {value}")
            if value < 0:
                raise ValueError(f"{f.name} must be non-negative, got {value}")
            if f.name in COUNT_FIELDS and not isinstance(value, numbers.Integral):
                raise ValueError(f"{f.name} must be an integer, got {value!r}")

        if self.mrl_dimensions > self.dimensions:
            raise ValueError("mrl_dimensions must not exceed dimensions")

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ExplorerConfig':
        """Load configuration from dictionary."""
        return cls(**config_dict)

    def __repr__(self) -> str:
        return (
            f"ExplorerConfig("
            f"{self.config_name}, "
            f"N={self.vector_count}, d={self.mrl_dimensions}/{self.dimensions}, "
            f"M={self.M}, ef={self.ef_search}, "
            f"nlist={self.nlist}, nprobe={self.nprobe})"
        )


# Preset configurations

def get_default_config() -> ExplorerConfig:
    """Default configuration."""
    return ExplorerConfig(config_name="default")


def get_high_recall_config() -> ExplorerConfig:
    """Wide graph and beam, more IVF probes. Slower queries, recall near the cap."""
    return ExplorerConfig(
        config_name="high_recall",
        M=32,
        ef_construction=400,
        ef_search=128,
        nprobe=32,
    )


def get_low_memory_config() -> ExplorerConfig:
    """Aggressive Matryoshka truncation and a sparse graph."""
    return ExplorerConfig(
        config_name="low_memory",
        mrl_dimensions=256,
        M=4,
        ef_construction=64,
    )

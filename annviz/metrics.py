"""
Closed-form performance and storage estimates for HNSW and IVF indexes.

This module provides functions to:
- Estimate HNSW storage, build time, query throughput and recall
- Estimate IVF storage, build time, query latency and recall
- Rate HNSW build speed for a given M

Nothing here is simulated. Every value is a formula over the index
parameters, recomputed from scratch on each call. Degenerate parameters
(zero vectors, zero dimensions, M < 2, nlist = 0) are clamped so the results
stay finite; negative or non-finite parameters are rejected.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict

# Bytes per float32 element / per node id
FLOAT32_BYTES = 4
NODE_ID_BYTES = 4

# HNSW model constants
HNSW_METADATA_BYTES_PER_VECTOR = 16
HNSW_RAM_OVERHEAD = 1.3
HNSW_UPPER_LAYERS = 3
HNSW_BASELINE_OPS_PER_SECOND = 500_000
HNSW_BASELINE_DIMENSIONS = 768
HNSW_MAX_RECALL = 0.995

# IVF model constants
IVF_INVERTED_LIST_BYTES_PER_VECTOR = 8  # id + offset pointer
IVF_KMEANS_ITERATIONS = 10
IVF_MAX_RECALL = 0.99


@dataclass(frozen=True)
class HNSWMetrics:
    """Derived HNSW estimates. Byte counts are in bytes, times as named."""

    vector_storage_bytes: float
    graph_storage_bytes: float
    total_storage_bytes: float
    ram_usage_bytes: float
    build_time_seconds: float
    query_latency_ms: float
    qps: float
    recall: float
    mrl_quality: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class IVFMetrics:
    """Derived IVF estimates."""

    vector_storage_bytes: float
    centroid_storage_bytes: float
    inverted_lists_bytes: float
    total_storage_bytes: float
    build_time_seconds: float
    query_latency_ms: float
    recall: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BuildSpeedRating:
    label: str
    percent: float


def validate_parameters(**params: float) -> None:
    """
    Reject negative or non-finite parameters.

    Raises:
        ValueError: Naming the first offending parameter
    """
    for name, value in params.items():
        if not math.isfinite(value):
            raise ValueError(f"{name} must be a finite number, got {value}")
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")


def calculate_hnsw_metrics(
    vector_count: float,
    dimensions: float,
    mrl_dimensions: float,
    M: float,
    ef_construction: float,
    ef_search: float,
) -> HNSWMetrics:
    """
    Estimate HNSW index storage and performance.

    Args:
        vector_count: N, number of indexed vectors
        dimensions: D, full embedding dimensions
        mrl_dimensions: d, Matryoshka-truncated dimensions actually stored
        M: Maximum connections per node at upper layers (layer 0 uses 2*M)
        ef_construction: Construction beam width
        ef_search: Search beam width

    Returns:
        HNSWMetrics with storage, build time, QPS, latency and recall

    Raises:
        ValueError: If any parameter is negative or not finite

    Example:
        >>> m = calculate_hnsw_metrics(1000, 768, 768, 16, 200, 50)
        >>> m.vector_storage_bytes
        3072000
    """
    validate_parameters(
        vector_count=vector_count,
        dimensions=dimensions,
        mrl_dimensions=mrl_dimensions,
        M=M,
        ef_construction=ef_construction,
        ef_search=ef_search,
    )
    N, D, d = vector_count, dimensions, mrl_dimensions
    log_m = math.log(max(M, 2))

    vector_storage_bytes = N * d * FLOAT32_BYTES

    # Layer 0: every node holds 2*M neighbor ids plus a length header
    layer0_bytes = N * (2 * M * NODE_ID_BYTES + NODE_ID_BYTES)

    # Upper layers: expected population N * exp(-l * ln(M)) at layer l
    upper_layer_bytes = 0.0
    for layer in range(1, HNSW_UPPER_LAYERS + 1):
        expected_nodes = N * math.exp(-layer * log_m)
        upper_layer_bytes += expected_nodes * (M * NODE_ID_BYTES + NODE_ID_BYTES)

    graph_storage_bytes = layer0_bytes + upper_layer_bytes
    total_storage_bytes = (
        vector_storage_bytes + graph_storage_bytes + N * HNSW_METADATA_BYTES_PER_VECTOR
    )
    ram_usage_bytes = total_storage_bytes * HNSW_RAM_OVERHEAD

    # O(N * M * log(N) * efC * d), normalized to a 500K ops/s baseline
    if N > 1:
        build_time_seconds = (
            N * M * math.log2(N) * ef_construction / 100
            * (d / HNSW_BASELINE_DIMENSIONS)
        ) / HNSW_BASELINE_OPS_PER_SECOND
    else:
        build_time_seconds = 0.0

    # Throughput falls with ef and d, and slowly with log(N)
    qps = (
        10000
        * (10 / max(ef_search, 1))
        * (128 / max(d, 1))
        * (math.log(1e5) / math.log(max(N, 2)))
    )
    query_latency_ms = 1000 / max(qps, 1)

    m_recall = 1 - math.exp(-0.12 * M)
    ef_recall = 1 - math.exp(-0.08 * ef_search)
    # Quality degrades slowly with dimension truncation
    mrl_quality = (d / D) ** 0.25 if D > 0 else 0.0
    efc_factor = min(1.0, ef_construction / (M * 10)) if M > 0 else 0.0

    recall = min(
        HNSW_MAX_RECALL, m_recall * ef_recall * mrl_quality * efc_factor * 1.1
    )

    return HNSWMetrics(
        vector_storage_bytes=vector_storage_bytes,
        graph_storage_bytes=graph_storage_bytes,
        total_storage_bytes=total_storage_bytes,
        ram_usage_bytes=ram_usage_bytes,
        build_time_seconds=build_time_seconds,
        query_latency_ms=query_latency_ms,
        qps=qps,
        recall=recall,
        mrl_quality=mrl_quality,
    )


def calculate_ivf_metrics(
    vector_count: float, dimensions: float, nlist: float, nprobe: float
) -> IVFMetrics:
    """
    Estimate IVF index storage and performance.

    Args:
        vector_count: N, number of indexed vectors
        dimensions: Stored dimensions per vector
        nlist: Number of clusters
        nprobe: Clusters scanned per query

    Returns:
        IVFMetrics with storage, k-means build time, latency and recall

    Raises:
        ValueError: If any parameter is negative or not finite

    Example:
        >>> m = calculate_ivf_metrics(100000, 768, 100, 10)
        >>> m.total_storage_bytes
        308307200
    """
    validate_parameters(
        vector_count=vector_count, dimensions=dimensions, nlist=nlist, nprobe=nprobe
    )

    vector_storage_bytes = vector_count * dimensions * FLOAT32_BYTES
    centroid_storage_bytes = nlist * dimensions * FLOAT32_BYTES
    inverted_lists_bytes = vector_count * IVF_INVERTED_LIST_BYTES_PER_VECTOR
    total_storage_bytes = (
        vector_storage_bytes + centroid_storage_bytes + inverted_lists_bytes
    )

    # k-means: O(N * nlist * iterations * d)
    build_time_seconds = (
        vector_count * nlist * IVF_KMEANS_ITERATIONS * dimensions
    ) / 1e9

    if nlist > 0:
        scan_fraction = nprobe / nlist
        # Saturates around nprobe ~ sqrt(nlist)
        recall = min(IVF_MAX_RECALL, 1 - math.exp(-2 * nprobe / math.sqrt(nlist)))
    else:
        scan_fraction = 0.0
        recall = 0.0

    query_latency_ms = scan_fraction * (vector_count / 1e6) * dimensions * 0.001

    return IVFMetrics(
        vector_storage_bytes=vector_storage_bytes,
        centroid_storage_bytes=centroid_storage_bytes,
        inverted_lists_bytes=inverted_lists_bytes,
        total_storage_bytes=total_storage_bytes,
        build_time_seconds=build_time_seconds,
        query_latency_ms=query_latency_ms,
        recall=recall,
    )


def get_build_speed_rating(M: float) -> BuildSpeedRating:
    """
    Coarse build-speed rating for an HNSW M value.

    Returns:
        BuildSpeedRating with percent (never below 5) and label Fast/Med/Slow
    """
    percent = max(5.0, 100 - (M - 2) * 2.2)
    if percent > 70:
        label = "Fast"
    elif percent > 40:
        label = "Med"
    else:
        label = "Slow"
    return BuildSpeedRating(label=label, percent=percent)

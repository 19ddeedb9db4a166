"""Quick start guide for annviz.

This example shows the minimal code needed to:
1. Build a synthetic HNSW topology
2. Simulate a query through it
3. Estimate HNSW and IVF storage and performance
4. Lay out and probe an IVF index
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

import numpy as np
from annviz import IndexExplorer, ExplorerConfig
from annviz.format import format_bytes, format_number, format_time
from annviz.logging_config import setup_logging


def main():
    setup_logging(logging.INFO)

    print("="*60)
    print("annviz Quick Start")
    print("="*60)

    config = ExplorerConfig(M=6, ef_search=16, visual_node_count=45)
    explorer = IndexExplorer(config, rng=np.random.default_rng(42))

    # Step 1: Build HNSW topology
    print("\n1. Building synthetic HNSW topology...")
    data = explorer.hnsw_data
    print(f"   {data.size()} nodes, {len(data.edges)} edges")
    for layer in range(data.max_layer() + 1):
        print(
            f"   Layer {layer}: {len(data.nodes_at_layer(layer))} nodes, "
            f"{len(data.edges_at_layer(layer))} edges"
        )

    # Step 2: Simulate a search
    print("\n2. Simulating a query...")
    trace = explorer.simulate_search()
    print(f"   Entry node {trace.entry_id}, target node {trace.target_id}")
    for event in trace.events[:12]:
        source = "" if event.from_node_id is None else f"{event.from_node_id} -> "
        print(f"      {event.kind:<9} L{event.layer}  {source}{event.node_id}")
    if len(trace.events) > 12:
        print(f"      ... {len(trace.events) - 12} more steps")
    print(f"   Visited {len(trace.visited)} nodes, target found: {trace.found}")

    # Step 3: HNSW metrics
    print("\n3. HNSW estimates for "
          f"{format_number(config.vector_count)} vectors x {config.mrl_dimensions}d...")
    hnsw = explorer.hnsw_metrics
    print(f"   Total storage: {format_bytes(hnsw.total_storage_bytes)}")
    print(f"   RAM usage:     {format_bytes(hnsw.ram_usage_bytes)}")
    print(f"   Build time:    {format_time(hnsw.build_time_seconds)}")
    print(f"   QPS:           {format_number(round(hnsw.qps))}")
    print(f"   Recall:        {hnsw.recall:.1%}")

    # Step 4: IVF layout and metrics
    print("\n4. IVF layout...")
    query = np.array([0.0, 14.0, 0.0])
    probed = explorer.probe(query)
    print(f"   {len(explorer.ivf_centroids)} centroids, {len(explorer.ivf_points)} points")
    print(f"   Probed clusters: {[c.id for c in probed]}")

    ivf = explorer.ivf_metrics
    print(f"   Total storage: {format_bytes(ivf.total_storage_bytes)}")
    print(f"   Query latency: {ivf.query_latency_ms:.3f} ms")
    print(f"   Recall:        {ivf.recall:.1%}")

    # Step 5: Change a parameter and everything is rebuilt
    print("\n5. Raising M to 16...")
    explorer.update(M=16)
    print(f"   {len(explorer.hnsw_data.edges)} edges, "
          f"recall {explorer.hnsw_metrics.recall:.1%}")

    print("\n" + "="*60)
    print("Quick Start Complete!")
    print("="*60)


if __name__ == "__main__":
    main()

"""
Pytest configuration and shared fixtures for annviz tests
"""

import pytest
import numpy as np

from annviz.hnsw.builder import generate_hnsw_data
from annviz.hnsw.graph import HNSWData
from annviz.ivf import IVFCentroid, generate_centroids


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator for reproducible runs."""
    return np.random.default_rng(42)


@pytest.fixture
def hnsw_data() -> HNSWData:
    """Standard 30-node topology with M=4."""
    return generate_hnsw_data(30, 4)


@pytest.fixture
def centroids() -> list[IVFCentroid]:
    """Eight IVF centroids."""
    return generate_centroids(8)

"""
Stateful entry point for exploring synthetic ANN indexes.
"""

import dataclasses
import logging
from typing import Any, Callable, List, Optional

import numpy as np
import numpy.typing as npt

from annviz.config import ExplorerConfig, get_default_config
from annviz.hnsw.builder import generate_hnsw_data
from annviz.hnsw.graph import HNSWData
from annviz.hnsw.searcher import HNSWSearchSimulator, SearchTrace
from annviz.ivf import (
    IVFCentroid,
    IVFPoint,
    find_nearest_centroids,
    generate_centroids,
    generate_clustered_points,
)
from annviz.metrics import (
    HNSWMetrics,
    IVFMetrics,
    calculate_hnsw_metrics,
    calculate_ivf_metrics,
)

logger = logging.getLogger(__name__)

Vector = npt.NDArray[np.float64]
Listener = Callable[["IndexExplorer"], None]


class IndexExplorer:
    """
    Holds a parameter set and the structures derived from it.

    The generators and metrics in annviz are pure functions. This class only
    decides when to call them: every update() replaces the config and drops
    all derived values, which are then rebuilt from scratch on next access.
    Nothing is patched incrementally.

    Example:
        >>> explorer = IndexExplorer()
        >>> config = explorer.update(M=8, ef_search=40)
        >>> trace = explorer.simulate_search(rng=np.random.default_rng(0))
        >>> explorer.hnsw_metrics.recall > 0
        True
    """

    def __init__(
        self,
        config: Optional[ExplorerConfig] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Initialize the explorer.

        Args:
            config: Parameters to start from (default config if None)
            rng: Random generator for IVF point offsets and search targets
        """
        if config is None:
            config = get_default_config()
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()

        self._listeners: List[Listener] = []
        self._clear()

    def update(self, **params: Any) -> ExplorerConfig:
        """
        Replace one or more parameters.

        Raises:
            ValueError: If the resulting config is invalid (config is unchanged)
            TypeError: If a parameter name is unknown
        """
        new_config = dataclasses.replace(self.config, **params)
        if new_config == self.config:
            return self.config

        self.config = new_config
        self._clear()
        logger.debug("Config updated: %r", new_config)

        for listener in list(self._listeners):
            listener(self)
        return self.config

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback run after every effective update.

        Returns:
            Function that removes the callback
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def hnsw_data(self) -> HNSWData:
        if self._hnsw_data is None:
            self._hnsw_data = generate_hnsw_data(
                self.config.visual_node_count, self.config.M
            )
        return self._hnsw_data

    @property
    def hnsw_metrics(self) -> HNSWMetrics:
        if self._hnsw_metrics is None:
            c = self.config
            self._hnsw_metrics = calculate_hnsw_metrics(
                c.vector_count,
                c.dimensions,
                c.mrl_dimensions,
                c.M,
                c.ef_construction,
                c.ef_search,
            )
        return self._hnsw_metrics

    @property
    def ivf_centroids(self) -> List[IVFCentroid]:
        if self._ivf_centroids is None:
            self._ivf_centroids = generate_centroids(self.config.visual_clusters)
        return self._ivf_centroids

    @property
    def ivf_points(self) -> List[IVFPoint]:
        if self._ivf_points is None:
            self._ivf_points = generate_clustered_points(
                self.ivf_centroids,
                self.config.visual_node_count,
                self.config.cluster_spread,
                rng=self.rng,
            )
        return self._ivf_points

    @property
    def ivf_metrics(self) -> IVFMetrics:
        if self._ivf_metrics is None:
            c = self.config
            self._ivf_metrics = calculate_ivf_metrics(
                c.vector_count, c.mrl_dimensions, c.nlist, c.nprobe
            )
        return self._ivf_metrics

    def simulator(self) -> HNSWSearchSimulator:
        return HNSWSearchSimulator(
            self.hnsw_data, ef_search=self.config.ef_search, rng=self.rng
        )

    def simulate_search(
        self,
        target_id: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> SearchTrace:
        """Run one HNSW search simulation with the configured ef_search."""
        simulator = self.simulator()
        if rng is not None:
            simulator.rng = rng
        return simulator.run(target_id=target_id)

    def probe(self, query_position: Vector) -> List[IVFCentroid]:
        """Nearest visual centroids for a query, limited by the configured nprobe."""
        return find_nearest_centroids(
            query_position, self.ivf_centroids, self.config.nprobe
        )

    def _clear(self) -> None:
        self._hnsw_data: Optional[HNSWData] = None
        self._hnsw_metrics: Optional[HNSWMetrics] = None
        self._ivf_centroids: Optional[List[IVFCentroid]] = None
        self._ivf_points: Optional[List[IVFPoint]] = None
        self._ivf_metrics: Optional[IVFMetrics] = None

    def __repr__(self) -> str:
        return f"IndexExplorer({self.config!r})"

"""
HNSW search simulation.

This module replays the two-phase HNSW query algorithm on a synthetic
topology and records every step for playback:
1. Starts at the entry point (the first node on the highest layer)
2. Greedily walks each upper layer towards the target, then descends
3. At layer 0, expands a best-first beam bounded by ef_search
4. Reports whether the target was visited

There are no real vectors. A random node plays the role of the true nearest
neighbor and distances are measured between node positions on the base layer.
The simulator yields events lazily, so a caller abandons a run simply by
not consuming the rest of the generator. Pacing is left to the caller.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

import numpy as np
import numpy.typing as npt

from annviz.hnsw.graph import HNSWData, HNSWNode, LAYER_RADII

logger = logging.getLogger(__name__)

Vector = npt.NDArray[np.float64]

# Query is drawn this far outside the base layer sphere
QUERY_OFFSET = 3.0

EVENT_START = "start"
EVENT_TRAVERSE = "traverse"
EVENT_DESCEND = "descend"
EVENT_EXPLORE = "explore"


@dataclass(frozen=True)
class SearchEvent:
    """
    One playback step.

    Attributes:
        kind: "start", "traverse", "descend" or "explore"
        layer: Layer the step ends on
        node_id: Node reached by this step
        from_node_id: Node the step starts from (None for "start")
    """

    kind: str
    layer: int
    node_id: int
    from_node_id: Optional[int] = None


@dataclass
class SearchTrace:
    """Complete result of one simulated query."""

    entry_id: int
    target_id: int
    query_position: Vector
    events: List[SearchEvent] = field(default_factory=list)
    visited: Set[int] = field(default_factory=set)
    found: bool = False

    def path(self) -> List[int]:
        """Node ids in the order they were reached."""
        return [event.node_id for event in self.events]


class HNSWSearchSimulator:
    """
    Simulates HNSW queries on a generated topology.

    Target and query direction are random per run unless given explicitly.
    Pass a seeded numpy Generator for reproducible runs.
    """

    def __init__(
        self,
        data: HNSWData,
        ef_search: int = 20,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Initialize the simulator.

        Args:
            data: Topology to search
            ef_search: Maximum number of layer-0 expansions
            rng: Random generator for target and query selection
        """
        self.data = data
        self.ef_search = ef_search
        self.rng = rng if rng is not None else np.random.default_rng()

        # Neighbor ids per layer, built once per simulator
        self._adjacency: Dict[int, Dict[int, List[int]]] = {}

    def entry_point(self) -> HNSWNode:
        """First node (lowest id) on the highest layer."""
        if self.data.size() == 0:
            raise ValueError("Cannot search an empty topology")

        best = self.data.nodes[0]
        for node in self.data.nodes:
            if node.layer > best.layer:
                best = node
        return best

    def run(
        self,
        target_id: Optional[int] = None,
        query_direction: Optional[Vector] = None,
    ) -> SearchTrace:
        """
        Run one full query and collect every event.

        Args:
            target_id: Node acting as the true nearest neighbor (random if None)
            query_direction: Direction of the query point (random if None)

        Returns:
            SearchTrace with events, visited set and found flag
        """
        trace = self.begin(target_id, query_direction)
        for _ in self.steps(trace):
            pass
        return trace

    def iter_events(
        self,
        target_id: Optional[int] = None,
        query_direction: Optional[Vector] = None,
    ) -> Iterator[SearchEvent]:
        """Yield search events in playback order for a fresh query."""
        return self.steps(self.begin(target_id, query_direction))

    def begin(
        self,
        target_id: Optional[int] = None,
        query_direction: Optional[Vector] = None,
    ) -> SearchTrace:
        """
        Pick entry point, target and query position for a new query.

        Raises:
            ValueError: If the topology is empty
            KeyError: If target_id is not a node of the topology
        """
        entry = self.entry_point()
        target = self._pick_target(target_id)
        query_position = self._query_position(query_direction)

        return SearchTrace(
            entry_id=entry.id, target_id=target.id, query_position=query_position
        )

    def steps(self, trace: SearchTrace) -> Iterator[SearchEvent]:
        """
        Execute the query prepared by begin(), one event at a time.

        Each event is appended to trace.events before it is yielded, and
        trace.visited grows as nodes are reached. trace.found is set once the
        generator is exhausted.
        """
        for event in self._search(trace):
            trace.events.append(event)
            yield event

    def _search(self, trace: SearchTrace) -> Iterator[SearchEvent]:
        entry = self.data.get_node(trace.entry_id)
        target = self.data.get_node(trace.target_id)
        target_pos = target.position(0)
        visited = trace.visited

        current = entry
        visited.add(current.id)
        yield SearchEvent(EVENT_START, entry.layer, entry.id)

        # Phase 1: greedy descent through upper layers
        for layer in range(entry.layer, 0, -1):
            for step_from, step_to in self._greedy_walk(current, target_pos, layer):
                visited.add(step_to.id)
                current = step_to
                yield SearchEvent(EVENT_TRAVERSE, layer, step_to.id, step_from.id)

            yield SearchEvent(EVENT_DESCEND, layer - 1, current.id, current.id)

        # Phase 2: layer-0 beam search
        # Min-heap of (distance, id), ties pop the lower id
        candidates: List[Tuple[float, int]] = [(self._distance(current, target_pos), current.id)]
        l0_visited: Set[int] = {current.id}
        explored_count = 0
        adjacency = self._layer_adjacency(0)

        while candidates and explored_count < self.ef_search:
            _, closest_id = heapq.heappop(candidates)
            explored_count += 1
            closest = self.data.get_node(closest_id)

            if closest.id != current.id:
                yield SearchEvent(EVENT_EXPLORE, 0, closest.id, current.id)

            visited.add(closest.id)
            current = closest

            for neighbor_id in adjacency.get(closest.id, []):
                if neighbor_id in l0_visited:
                    continue
                l0_visited.add(neighbor_id)
                neighbor = self.data.get_node(neighbor_id)
                heapq.heappush(candidates, (self._distance(neighbor, target_pos), neighbor_id))

        trace.found = target.id in visited
        logger.debug(
            "Search entry=%d target=%d visited=%d found=%s",
            entry.id, target.id, len(visited), trace.found,
        )

    def _greedy_walk(
        self, start: HNSWNode, target_pos: Vector, layer: int
    ) -> Iterator[Tuple[HNSWNode, HNSWNode]]:
        """
        Walk to the first local optimum at one layer.

        Moves to the first neighbor that is strictly closer to the target and
        rescans from there, until no neighbor improves.
        """
        adjacency = self._layer_adjacency(layer)
        current = start

        improved = True
        while improved:
            improved = False
            current_dist = self._distance(current, target_pos)

            for neighbor_id in adjacency.get(current.id, []):
                neighbor = self.data.get_node(neighbor_id)
                if self._distance(neighbor, target_pos) < current_dist:
                    yield current, neighbor
                    current = neighbor
                    improved = True
                    break

    def _layer_adjacency(self, layer: int) -> Dict[int, List[int]]:
        if layer not in self._adjacency:
            self._adjacency[layer] = self.data.adjacency(layer)
        return self._adjacency[layer]

    def _pick_target(self, target_id: Optional[int]) -> HNSWNode:
        if target_id is None:
            index = int(self.rng.integers(0, self.data.size()))
            return self.data.nodes[index]
        return self.data.get_node(target_id)

    def _query_position(self, direction: Optional[Vector]) -> Vector:
        if direction is None:
            direction = self.rng.random(3) - 0.5
        direction = np.asarray(direction, dtype=np.float64)

        norm = np.linalg.norm(direction)
        if norm == 0.0:
            direction = np.array([0.0, 1.0, 0.0])
        else:
            direction = direction / norm

        return direction * (LAYER_RADII[0] + QUERY_OFFSET)

    @staticmethod
    def _distance(node: HNSWNode, target_pos: Vector) -> float:
        return float(np.linalg.norm(node.position(0) - target_pos))

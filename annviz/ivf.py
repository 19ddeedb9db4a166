"""
Synthetic IVF (Inverted File) index layout.

Centroids sit on a sphere like galaxies, each with a cloud of member points
around it. Queries probe the nprobe nearest centroids, and approximate
Voronoi boundaries are drawn between neighboring clusters.

Centroid placement is deterministic (Fibonacci sphere). Point offsets inside
a cluster are random; pass a seeded numpy Generator for reproducible output.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import numpy.typing as npt

from annviz.sphere import SpherePoint, generate_fibonacci_sphere, scale_point

logger = logging.getLogger(__name__)

Vector = npt.NDArray[np.float64]

IVF_RADIUS = 12.0
BOUNDARY_NEIGHBORS = 4
# Boundary segments start this fraction of the way towards the midpoint
BOUNDARY_START = 0.3

CLUSTER_COLORS = (
    0x4DA6FF,  # Blue
    0xA78BFA,  # Purple
    0xF59E0B,  # Orange
    0x34D399,  # Green
    0xF87171,  # Red
    0xFBBF24,  # Yellow
    0x60A5FA,  # Light blue
    0xC084FC,  # Light purple
    0xFB923C,  # Light orange
    0x4ADE80,  # Light green
)


@dataclass(frozen=True)
class IVFCentroid:
    """Cluster center, one per IVF list."""

    id: int
    nx: float
    ny: float
    nz: float
    color: int

    @property
    def point(self) -> SpherePoint:
        return SpherePoint(self.nx, self.ny, self.nz)

    @property
    def position(self) -> Vector:
        return centroid_position(self)


@dataclass(frozen=True, eq=False)
class IVFPoint:
    """
    A vector assigned to a cluster.

    position = centroid position + offset, with |offset| <= cluster spread.
    """

    id: int
    centroid_id: int
    position: Vector
    offset: Vector


@dataclass(frozen=True, eq=False)
class ClusterBoundary:
    """Line segment marking the border between two neighboring clusters."""

    start: Vector
    end: Vector
    color1: int
    color2: int
    source_id: int
    target_id: int


def centroid_position(centroid: IVFCentroid) -> Vector:
    return scale_point(centroid.point, IVF_RADIUS)


def generate_centroids(nlist: int) -> List[IVFCentroid]:
    """
    Place nlist centroids evenly on the IVF sphere.

    Colors cycle through CLUSTER_COLORS.
    """
    return [
        IVFCentroid(
            id=centroid_id,
            nx=point.nx,
            ny=point.ny,
            nz=point.nz,
            color=CLUSTER_COLORS[centroid_id % len(CLUSTER_COLORS)],
        )
        for centroid_id, point in enumerate(generate_fibonacci_sphere(nlist))
    ]


def generate_clustered_points(
    centroids: List[IVFCentroid],
    total_points: int,
    cluster_spread: float = 1.5,
    rng: Optional[np.random.Generator] = None,
) -> List[IVFPoint]:
    """
    Distribute points across clusters as evenly as possible.

    Every cluster gets total_points // nlist points and the first
    total_points % nlist clusters get one extra. Offsets use a uniformly random
    direction scaled by a uniformly random radius in [0, cluster_spread].

    Args:
        centroids: Clusters to fill
        total_points: Number of points to generate
        cluster_spread: Maximum distance of a point from its centroid
        rng: Random generator for offsets

    Returns:
        Points with dense ids, grouped by centroid in centroid order
    """
    if not centroids or total_points <= 0:
        return []

    rng = rng if rng is not None else np.random.default_rng()
    per_cluster, remainder = divmod(total_points, len(centroids))

    points: List[IVFPoint] = []
    for cluster_idx, centroid in enumerate(centroids):
        num_points = per_cluster + (1 if cluster_idx < remainder else 0)
        center = centroid.position

        for _ in range(num_points):
            theta = rng.random() * 2 * np.pi
            phi = np.arccos(2 * rng.random() - 1)
            r = rng.random() * cluster_spread

            offset = np.array([
                r * np.sin(phi) * np.cos(theta),
                r * np.sin(phi) * np.sin(theta),
                r * np.cos(phi),
            ])
            points.append(
                IVFPoint(
                    id=len(points),
                    centroid_id=centroid.id,
                    position=center + offset,
                    offset=offset,
                )
            )

    logger.debug(
        "Generated %d points across %d clusters", len(points), len(centroids)
    )
    return points


def find_nearest_centroids(
    query_position: Vector, centroids: List[IVFCentroid], nprobe: int
) -> List[IVFCentroid]:
    """
    IVF probe step: the nprobe centroids nearest to the query.

    Args:
        query_position: 3D query position
        centroids: All centroids
        nprobe: Number of clusters to probe

    Returns:
        min(nprobe, nlist) centroids, ascending by distance
    """
    if not centroids or nprobe <= 0:
        return []

    query = np.asarray(query_position, dtype=np.float64)
    positions = np.array([c.position for c in centroids])
    distances = np.linalg.norm(positions - query, axis=1)

    order = np.argsort(distances, kind="stable")[: min(nprobe, len(centroids))]
    return [centroids[i] for i in order]


def generate_cluster_boundaries(centroids: List[IVFCentroid]) -> List[ClusterBoundary]:
    """
    Approximate Voronoi edges between neighboring clusters.

    Each centroid is linked to its (up to) 4 nearest other centroids. The
    boundary segment ends at the pair's midpoint projected back onto the
    sphere. Each pair is emitted once.
    """
    boundaries: List[ClusterBoundary] = []
    if len(centroids) < 2:
        return boundaries

    positions = np.array([c.position for c in centroids])

    for i, c1 in enumerate(centroids):
        pos1 = positions[i]
        distances = np.linalg.norm(positions - pos1, axis=1)
        distances[i] = np.inf

        neighbor_count = min(BOUNDARY_NEIGHBORS, len(centroids) - 1)
        for j in np.argsort(distances, kind="stable")[:neighbor_count]:
            c2 = centroids[j]
            if c1.id >= c2.id:
                continue

            midpoint = (pos1 + positions[j]) * 0.5
            norm = np.linalg.norm(midpoint)
            if norm > 0.0:
                midpoint = midpoint / norm * IVF_RADIUS

            boundaries.append(
                ClusterBoundary(
                    start=pos1 + (midpoint - pos1) * BOUNDARY_START,
                    end=midpoint,
                    color1=c1.color,
                    color2=c2.color,
                    source_id=c1.id,
                    target_id=c2.id,
                )
            )

    return boundaries

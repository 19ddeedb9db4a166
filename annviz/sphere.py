"""
Uniform point placement on a sphere.

This module places points evenly on the unit sphere using the golden-angle
(Fibonacci) spiral. Every layout in annviz starts here: HNSW nodes and IVF
centroids are unit directions that later get scaled to a layer or cluster
radius.

The spiral walks the y axis in equal steps from the north pole to the south
pole while rotating by the golden angle, so no region of the sphere is
over- or under-populated and the output is a pure function of (i, n).
"""

import math
from dataclasses import dataclass
from typing import List

import numpy as np
import numpy.typing as npt

Vector = npt.NDArray[np.float64]

PHI = (1 + math.sqrt(5)) / 2  # Golden ratio


@dataclass(frozen=True)
class SpherePoint:
    """A unit-length direction on the sphere."""

    nx: float
    ny: float
    nz: float

    def as_array(self) -> Vector:
        return np.array([self.nx, self.ny, self.nz], dtype=np.float64)


def generate_fibonacci_sphere(n: int) -> List[SpherePoint]:
    """
    Generate n points evenly distributed on the unit sphere.

    Args:
        n: Number of points (0 or negative yields an empty list)

    Returns:
        List of SpherePoint, ordered by index along the spiral

    Example:
        >>> points = generate_fibonacci_sphere(4)
        >>> len(points)
        4
    """
    points: List[SpherePoint] = []

    for i in range(max(n, 0)):
        # Golden angle increment around the y axis
        theta = (2 * math.pi * i) / PHI

        # Latitude steps evenly from +1 to -1
        cos_phi = 1 - (2 * (i + 0.5)) / n
        sin_phi = math.sqrt(1 - cos_phi * cos_phi)

        points.append(
            SpherePoint(
                nx=sin_phi * math.cos(theta),
                ny=cos_phi,
                nz=sin_phi * math.sin(theta),
            )
        )

    return points


def scale_point(point: SpherePoint, radius: float) -> Vector:
    """
    Scale a unit direction to a sphere of the given radius.

    Args:
        point: Unit direction
        radius: Target sphere radius

    Returns:
        3D position as a numpy array of shape (3,)
    """
    return point.as_array() * radius


def sphere_distance(
    a: SpherePoint, b: SpherePoint, radius_a: float, radius_b: float
) -> float:
    """
    Euclidean distance between two directions scaled to their own radii.

    Using different radii measures distance across layers (e.g. the same
    node on the outer and inner spheres).

    Example:
        >>> a = SpherePoint(1.0, 0.0, 0.0)
        >>> sphere_distance(a, a, 13.0, 6.5)
        6.5
    """
    return float(np.linalg.norm(scale_point(a, radius_a) - scale_point(b, radius_b)))

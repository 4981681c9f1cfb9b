"""Best-fit plane and area of 3-D boundary loops.

:func:`compute_plane` returns the unit normal, signed distance from the
origin and area of a closed loop of points approximating one planar face
boundary. Three formulas are used:

* **3 points**: plain cross product ``(b - a) x (c - a)``. The general
  formula below gives a wrong normal for some axis-aligned triangles, e.g.
  ``((-1,-1,-1), (1,-1,-1), (-1,-1,1))``, so triangles never fall through to
  the loop.
* **4 points**: cross product of the two diagonals ``(c - a) x (d - b)``.
* **n > 4**: Newell's method over consecutive vertex triples with
  wraparound.

In every case the polygon area is half the length of the raw (unnormalized)
normal.

The module also carries the 2-D helpers used to cross-check the 3-D area:
flattening a horizontal loop and the signed shoelace area.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from . import vec3 as v3
from .vec3 import Point3, Transform, Vector3

__all__ = [
    "DegeneratePolygonError",
    "PlaneResult",
    "compute_plane",
    "try_compute_plane",
    "polygon_areas",
    "flatten",
    "signed_area_2d",
    "transform_to_z",
    "apply_transform",
    "horizontal_area",
]

log = logging.getLogger(__name__)

Point2 = Tuple[float, float]


class DegeneratePolygonError(ValueError):
    """Fewer than three points, or collinear/coincident points."""


@dataclass(frozen=True, slots=True)
class PlaneResult:
    normal: Vector3
    distance: float
    area: float


def _raw_triangle(a: Point3, b: Point3, c: Point3) -> Tuple[Vector3, float]:
    normal = v3.cross(v3.sub(b, a), v3.sub(c, a))
    return normal, v3.dot(normal, a)


def _raw_quadrilateral(a: Point3, b: Point3, c: Point3, d: Point3) -> Tuple[Vector3, float]:
    normal = (
        (c[1] - a[1]) * (d[2] - b[2]) + (c[2] - a[2]) * (b[1] - d[1]),
        (c[2] - a[2]) * (d[0] - b[0]) + (c[0] - a[0]) * (b[2] - d[2]),
        (c[0] - a[0]) * (d[1] - b[1]) + (c[1] - a[1]) * (b[0] - d[0]),
    )
    dist = 0.25 * (
        normal[0] * (a[0] + b[0] + c[0] + d[0])
        + normal[1] * (a[1] + b[1] + c[1] + d[1])
        + normal[2] * (a[2] + b[2] + c[2] + d[2])
    )
    return normal, dist


def _raw_newell(points: Sequence[Point3]) -> Tuple[Vector3, float]:
    n = len(points)
    nx = ny = nz = 0.0
    sx = sy = sz = 0.0
    b = points[n - 2]
    c = points[n - 1]
    for i in range(n):
        a, b, c = b, c, points[i]
        nx += b[1] * (c[2] - a[2])
        ny += b[2] * (c[0] - a[0])
        nz += b[0] * (c[1] - a[1])
        sx += c[0]
        sy += c[1]
        sz += c[2]
    normal = (nx, ny, nz)
    return normal, v3.dot((sx, sy, sz), normal) / n


def compute_plane(points: Sequence[Point3], tolerance: float = v3.EPS) -> PlaneResult:
    """Return the plane and area of the closed loop *points*.

    Raises :class:`DegeneratePolygonError` for fewer than three points or when
    the raw normal has near-zero length. Consecutive duplicate points are not
    removed.
    """
    n = len(points)
    if n < 3:
        raise DegeneratePolygonError(f"Polygon needs at least 3 points, got {n}")

    if n == 3:
        normal, dist = _raw_triangle(*points)
    elif n == 4:
        normal, dist = _raw_quadrilateral(*points)
    else:
        normal, dist = _raw_newell(points)

    length = v3.norm(normal)
    if v3.is_zero(length, tolerance):
        raise DegeneratePolygonError("Polygon points are collinear or coincident")

    return PlaneResult(
        normal=v3.scale(normal, 1.0 / length),
        distance=dist / length,
        area=0.5 * length,
    )


def try_compute_plane(points: Sequence[Point3], tolerance: float = v3.EPS) -> Optional[PlaneResult]:
    """:func:`compute_plane`, returning ``None`` for a degenerate loop."""
    try:
        return compute_plane(points, tolerance)
    except DegeneratePolygonError as exc:
        log.debug("Skipping degenerate loop of %d points: %s", len(points), exc)
        return None


def polygon_areas(polygons: Sequence[Sequence[Point3]], tolerance: float = v3.EPS) -> List[float]:
    """Area of each polygon; degenerate loops are skipped."""
    areas: List[float] = []
    for polygon in polygons:
        plane = try_compute_plane(polygon, tolerance)
        if plane is not None:
            areas.append(plane.area)
    return areas


# ---------------------------------------------------------------------------
# 2-D helpers
# ---------------------------------------------------------------------------


def flatten(polygon: Sequence[Point3], tolerance: float = v3.EPS) -> List[Point2]:
    """Drop the Z coordinate of a horizontal polygon."""
    if not polygon:
        return []
    z = polygon[0][2]
    flat: List[Point2] = []
    for p in polygon:
        if not v3.is_equal(p[2], z, tolerance):
            raise ValueError(f"Expected horizontal polygon, found z={p[2]!r} and z={z!r}")
        flat.append((p[0], p[1]))
    return flat


def signed_area_2d(points: Sequence[Point2]) -> float:
    """Shoelace area ``0.5 * sum x_i (y_{i+1} - y_{i-1})``.

    Positive for counter-clockwise loops, negative for clockwise ones.
    """
    n = len(points)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        total += points[i][0] * (points[(i + 1) % n][1] - points[i - 1][1])
    return 0.5 * total


def transform_to_z(normal: Vector3, tolerance: float = v3.EPS) -> Transform:
    """Rotation taking *normal* onto +Z."""
    angle = v3.angle_between(v3.BASIS_Z, normal)
    if v3.is_zero(angle, tolerance):
        return Transform.identity()
    if v3.is_equal(angle, math.pi, tolerance):
        axis = v3.BASIS_X
    else:
        axis = v3.cross(normal, v3.BASIS_Z)
    return Transform.rotation(axis, angle)


def apply_transform(polygon: Sequence[Point3], transform: Transform) -> List[Point3]:
    return [transform.of_point(p) for p in polygon]


def horizontal_area(polygon: Sequence[Point3], tolerance: float = 1.0e-6) -> float:
    """Signed 2-D area of *polygon* after rotating its plane onto XY.

    The rotated loop is counter-clockwise seen from +Z, so the result matches
    ``compute_plane(polygon).area`` up to floating-point noise.
    """
    plane = compute_plane(polygon)
    transform = transform_to_z(plane.normal)
    rotated = apply_transform(polygon, transform)
    return signed_area_2d(flatten(rotated, tolerance))

"""3-component vector algebra and tolerance predicates (pure Python).

Points and vectors are both ``Tuple[float, float, float]``; the aliases only
document intent. Floating-point comparisons go through the explicit
epsilon-parameterized predicates below rather than ``==``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Tuple

__all__ = [
    "EPS",
    "Vector3",
    "Point3",
    "ZERO",
    "BASIS_X",
    "BASIS_Y",
    "BASIS_Z",
    "norm",
    "normalize",
    "dot",
    "cross",
    "sub",
    "add",
    "scale",
    "neg",
    "centroid",
    "midpoint",
    "angle_between",
    "is_zero",
    "is_equal",
    "compare",
    "compare_points",
    "points_equal",
    "are_parallel",
    "is_horizontal",
    "is_vertical",
    "Transform",
]

EPS = 1.0e-9

Vector3 = Tuple[float, float, float]
Point3 = Tuple[float, float, float]

ZERO: Vector3 = (0.0, 0.0, 0.0)
BASIS_X: Vector3 = (1.0, 0.0, 0.0)
BASIS_Y: Vector3 = (0.0, 1.0, 0.0)
BASIS_Z: Vector3 = (0.0, 0.0, 1.0)


def norm(v: Vector3) -> float:
    """Euclidean length of *v*."""
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Vector3) -> Vector3:
    """Unit vector along *v*; the zero vector stays zero."""
    n = norm(v)
    if n <= 1e-12:
        return ZERO
    return (v[0] / n, v[1] / n, v[2] / n)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def scale(v: Vector3, s: float) -> Vector3:
    return (v[0] * s, v[1] * s, v[2] * s)


def neg(v: Vector3) -> Vector3:
    return (-v[0], -v[1], -v[2])


def centroid(points: Iterable[Point3]) -> Point3:
    """Average of *points*; the origin for an empty input."""
    sx = sy = sz = 0.0
    count = 0
    for p in points:
        sx += p[0]
        sy += p[1]
        sz += p[2]
        count += 1
    if count == 0:
        return ZERO
    return (sx / count, sy / count, sz / count)


def midpoint(p: Point3, q: Point3) -> Point3:
    return add(p, scale(sub(q, p), 0.5))


def angle_between(a: Vector3, b: Vector3) -> float:
    """Angle in radians within ``[0, pi]``.

    Uses ``atan2(|a x b|, a . b)``, which stays accurate for nearly
    parallel vectors where ``acos`` of the cosine does not.
    """
    if norm(a) < 1e-12 or norm(b) < 1e-12:
        return 0.0
    return math.atan2(norm(cross(a, b)), dot(a, b))


# ---------------------------------------------------------------------------
# Tolerance predicates
# ---------------------------------------------------------------------------


def is_zero(a: float, tolerance: float = EPS) -> bool:
    return tolerance > abs(a)


def is_equal(a: float, b: float, tolerance: float = EPS) -> bool:
    return is_zero(b - a, tolerance)


def compare(a: float, b: float, tolerance: float = EPS) -> int:
    if is_equal(a, b, tolerance):
        return 0
    return -1 if a < b else 1


def compare_points(p: Point3, q: Point3, tolerance: float = EPS) -> int:
    """Lexicographic X, Y, Z comparison with tolerance."""
    for a, b in zip(p, q):
        d = compare(a, b, tolerance)
        if d != 0:
            return d
    return 0


def points_equal(p: Point3, q: Point3, tolerance: float = EPS) -> bool:
    return compare_points(p, q, tolerance) == 0


def are_parallel(v1: Vector3, v2: Vector3, eps: float = EPS) -> bool:
    """True for parallel or anti-parallel directions.

    Both orientations count as one direction family, so opposing faces of a
    box land in the same group.
    """
    angle = angle_between(v1, v2)
    return angle < eps or is_equal(angle, math.pi, eps)


def is_horizontal(v: Vector3, tolerance: float = EPS) -> bool:
    return is_zero(v[2], tolerance)


def is_vertical(v: Vector3, tolerance: float = EPS) -> bool:
    return is_zero(v[0], tolerance) and is_zero(v[1], tolerance)


# ---------------------------------------------------------------------------
# Rigid transforms
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transform:
    """Rotation (row-major 3x3) followed by a translation."""

    rows: Tuple[Vector3, Vector3, Vector3] = (BASIS_X, BASIS_Y, BASIS_Z)
    origin: Vector3 = ZERO

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    @classmethod
    def translation(cls, offset: Vector3) -> "Transform":
        return cls(origin=tuple(float(c) for c in offset))  # type: ignore[arg-type]

    @classmethod
    def rotation(cls, axis: Vector3, angle: float) -> "Transform":
        """Right-handed rotation by *angle* radians about *axis* (Rodrigues)."""
        x, y, z = normalize(axis)
        if (x, y, z) == ZERO:
            raise ValueError("Rotation axis must be non-zero")
        c = math.cos(angle)
        s = math.sin(angle)
        t = 1.0 - c
        rows = (
            (t * x * x + c, t * x * y - s * z, t * x * z + s * y),
            (t * x * y + s * z, t * y * y + c, t * y * z - s * x),
            (t * x * z - s * y, t * y * z + s * x, t * z * z + c),
        )
        return cls(rows=rows)

    def of_vector(self, v: Vector3) -> Vector3:
        r0, r1, r2 = self.rows
        return (dot(r0, v), dot(r1, v), dot(r2, v))

    def of_point(self, p: Point3) -> Point3:
        return add(self.of_vector(p), self.origin)

    def then(self, other: "Transform") -> "Transform":
        """Composite applying ``self`` first, then *other*."""
        columns = list(zip(*self.rows))
        rows = tuple(
            tuple(dot(row, col) for col in columns) for row in other.rows
        )
        return Transform(rows=rows, origin=other.of_point(self.origin))  # type: ignore[arg-type]

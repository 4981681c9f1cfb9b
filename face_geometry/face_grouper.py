"""Group planar face origins by parallel normal direction.

For a box-like solid such as a wall with openings, all faces whose normals
are parallel or anti-parallel belong to one direction family. The largest
separation between origins of one family along its normal is the solid's
overall dimension in that direction.

Usage::

    grouper = FaceNormalGrouper()
    grouper.add_solid(solid)
    for report in grouper.dimensions():
        print(report.normal, report.extent)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from . import vec3 as v3
from .faces import Face, Solid, require_planar
from .vec3 import Point3, Vector3

__all__ = [
    "FaceNormalGroup",
    "DimensionReport",
    "FaceNormalGrouper",
    "max_extent_along",
]

log = logging.getLogger(__name__)


@dataclass(slots=True)
class FaceNormalGroup:
    normal: Vector3  # first normal seen for this family
    origins: List[Point3] = field(default_factory=list)

    @property
    def unit_normal(self) -> Vector3:
        return v3.normalize(self.normal)

    @property
    def max_extent(self) -> float:
        return max_extent_along(self.origins, self.normal)


@dataclass(frozen=True, slots=True)
class DimensionReport:
    normal: Vector3
    extent: Optional[float]  # None when no opposing face exists
    face_count: int


def max_extent_along(origins: Sequence[Point3], normal: Vector3) -> float:
    """Largest ``(p_i - p_j) . n`` over all pairs ``i != j``.

    ``n`` is *normal* normalized. Fewer than two origins give ``0.0``.
    """
    n = v3.normalize(normal)
    dmax = 0.0
    count = len(origins)
    for i in range(count):
        for j in range(count):
            if i == j:
                continue
            d = v3.dot(v3.sub(origins[i], origins[j]), n)
            if d > dmax:
                dmax = d
    return dmax


class FaceNormalGrouper:
    """Incrementally partitions face origins into parallel-normal groups."""

    def __init__(self, eps: float = v3.EPS):
        self.eps = eps
        self._groups: List[FaceNormalGroup] = []

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[FaceNormalGroup]:
        return iter(self._groups)

    @property
    def groups(self) -> List[FaceNormalGroup]:
        return list(self._groups)

    def find_group(self, normal: Vector3) -> Optional[FaceNormalGroup]:
        for group in self._groups:
            if v3.are_parallel(group.normal, normal, self.eps):
                return group
        return None

    def add_face(self, normal: Vector3, origin: Point3) -> FaceNormalGroup:
        group = self.find_group(normal)
        if group is None:
            log.debug("Face at %s has new normal %s", origin, normal)
            group = FaceNormalGroup(normal=normal)
            self._groups.append(group)
        else:
            log.debug("Face at %s normal %s matches %s", origin, normal, group.normal)
        group.origins.append(origin)
        return group

    def add_planar_face(self, face: Face) -> FaceNormalGroup:
        require_planar(face)
        return self.add_face(face.normal, face.origin)

    def add_solid(self, solid: Solid) -> int:
        """Add every planar face of *solid*; returns the number added."""
        added = 0
        for face in solid.faces:
            if not face.is_planar:
                log.debug("Skipping %s face; only planar faces are grouped", face.kind.value)
                continue
            self.add_planar_face(face)
            added += 1
        return added

    def dimensions(self) -> List[DimensionReport]:
        reports: List[DimensionReport] = []
        for group in self._groups:
            count = len(group.origins)
            extent = group.max_extent if count > 1 else None
            reports.append(
                DimensionReport(normal=group.unit_normal, extent=extent, face_count=count)
            )
        return reports

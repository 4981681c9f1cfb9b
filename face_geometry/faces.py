"""Host face model and boundary loop extraction.

A host kernel hands us solids made of faces. Only planar faces carry a
single normal and origin; cylindrical and other faces are kept so callers can
see them, but every planar-only operation rejects them with
:class:`UnsupportedFaceKindError`.

Boundary loops arrive as tessellated edges: each edge is a polyline whose
last point is the first point of the next edge. :func:`loop_vertices` turns
such a chain into one closed vertex loop.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from . import vec3 as v3
from .vec3 import Point3, Vector3

__all__ = [
    "FaceKind",
    "Face",
    "Solid",
    "Element",
    "EdgeLoop",
    "UnsupportedFaceKindError",
    "LoopContinuityError",
    "require_planar",
    "planar_faces",
    "loop_vertices",
    "face_polygons",
    "lowest_horizontal_face",
    "exterior_vertical_face",
    "wall_directions",
    "slab_boundary_polygons",
    "wall_profile_polygons",
]

log = logging.getLogger(__name__)

Edge = List[Point3]
EdgeLoop = List[Edge]


class FaceKind(enum.Enum):
    PLANAR = "planar"
    CYLINDRICAL = "cylindrical"
    OTHER = "other"


class UnsupportedFaceKindError(TypeError):
    """A planar-only operation received a non-planar face."""


class LoopContinuityError(ValueError):
    """Tessellated edges do not chain into a closed loop."""


@dataclass(slots=True)
class Face:
    kind: FaceKind
    normal: Vector3 = v3.ZERO
    origin: Point3 = v3.ZERO
    edge_loops: List[EdgeLoop] = field(default_factory=list)

    @property
    def is_planar(self) -> bool:
        return self.kind is FaceKind.PLANAR


@dataclass(slots=True)
class Solid:
    faces: List[Face] = field(default_factory=list)


@dataclass(slots=True)
class Element:
    """A building element: its category and its geometry solids."""

    name: str
    category: str
    solids: List[Solid] = field(default_factory=list)
    location: Optional[Tuple[Point3, Point3]] = None  # wall centre line
    flipped: bool = False

    @property
    def is_wall(self) -> bool:
        return self.category.lower() == "wall"

    @property
    def is_floor(self) -> bool:
        return self.category.lower() == "floor"


def require_planar(face: Face) -> Face:
    if not face.is_planar:
        raise UnsupportedFaceKindError(f"Unsupported face kind '{face.kind.value}'; expected planar")
    return face


def planar_faces(solid: Solid) -> List[Face]:
    return [face for face in solid.faces if face.is_planar]


def loop_vertices(
    edges: Sequence[Sequence[Point3]],
    offset: Vector3 = v3.ZERO,
    tolerance: float = 1.0e-6,
) -> List[Point3]:
    """Chain tessellated *edges* into a closed vertex loop translated by *offset*.

    Each edge contributes all of its points except the last, which must
    coincide with the first point of the following edge.
    """
    vertices: List[Point3] = []
    previous_end: Point3 | None = None
    for index, edge in enumerate(edges):
        if len(edge) < 2:
            raise LoopContinuityError(f"Edge {index} has fewer than 2 points")
        start = tuple(edge[0])
        if previous_end is not None and not v3.points_equal(start, previous_end, tolerance):
            raise LoopContinuityError(
                f"Edge {index} starts at {start} but previous edge ended at {previous_end}"
            )
        for point in edge[:-1]:
            vertices.append(v3.add(tuple(point), offset))  # type: ignore[arg-type]
        previous_end = tuple(edge[-1])  # type: ignore[assignment]

    if previous_end is None:
        return vertices
    if not v3.points_equal(v3.add(previous_end, offset), vertices[0], tolerance):
        raise LoopContinuityError(
            f"Loop does not close: last point {previous_end} differs from first point"
        )
    return vertices


def face_polygons(face: Face, offset: Vector3 = v3.ZERO, tolerance: float = 1.0e-6) -> List[List[Point3]]:
    return [loop_vertices(loop, offset, tolerance) for loop in face.edge_loops]


def lowest_horizontal_face(solid: Solid, tolerance: float = v3.EPS) -> Optional[Face]:
    """Planar face with a vertical normal and the smallest origin Z."""
    lowest: Optional[Face] = None
    for face in planar_faces(solid):
        if not v3.is_vertical(face.normal, tolerance):
            continue
        if lowest is None or face.origin[2] < lowest.origin[2]:
            lowest = face
    return lowest


def exterior_vertical_face(
    solid: Solid,
    along: Vector3,
    outward: Vector3,
    tolerance: float = v3.EPS,
) -> Optional[Face]:
    """Vertical planar face perpendicular to *along*, furthest along *outward*."""
    outermost: Optional[Face] = None
    dmax = 0.0
    for face in planar_faces(solid):
        if not v3.is_horizontal(face.normal, tolerance):
            continue
        if not v3.is_zero(v3.dot(along, face.normal), tolerance):
            continue
        d = v3.dot(face.origin, outward)
        if outermost is None or dmax < d:
            outermost = face
            dmax = d
    return outermost


def wall_directions(element: Element) -> Tuple[Vector3, Vector3]:
    """Return ``(along, outward)`` unit vectors of a wall's centre line."""
    if element.location is None:
        raise ValueError(f"{element.name}: no wall location line")
    start, end = element.location
    along = v3.normalize(v3.sub(end, start))
    if along == v3.ZERO:
        raise ValueError(f"{element.name}: wall location line has zero length")
    outward = v3.normalize(v3.cross(v3.BASIS_Z, along))
    if element.flipped:
        outward = v3.neg(outward)
    return along, outward


def _collect_loops(face: Face, offset: Vector3, label: str, tolerance: float) -> List[List[Point3]]:
    polygons: List[List[Point3]] = []
    for index, loop in enumerate(face.edge_loops):
        try:
            polygons.append(loop_vertices(loop, offset, tolerance))
        except LoopContinuityError as exc:
            log.warning("%s: skipping boundary loop %d (%s)", label, index, exc)
    return polygons


def slab_boundary_polygons(
    elements: Iterable[Element],
    offset: float = 0.1,
    tolerance: float = v3.EPS,
    loop_tolerance: float = 1.0e-6,
) -> List[Tuple[Element, List[Point3]]]:
    """Loops of the lowest horizontal face of every floor solid, moved down by *offset*."""
    result: List[Tuple[Element, List[Point3]]] = []
    shift = v3.scale(v3.BASIS_Z, -offset)
    for element in elements:
        if not element.is_floor:
            continue
        for solid in element.solids:
            face = lowest_horizontal_face(solid, tolerance)
            if face is None:
                log.info("%s: solid has no horizontal planar face", element.name)
                continue
            for polygon in _collect_loops(face, shift, element.name, loop_tolerance):
                result.append((element, polygon))
    return result


def wall_profile_polygons(
    elements: Iterable[Element],
    offset: float = 1.0,
    tolerance: float = v3.EPS,
    loop_tolerance: float = 1.0e-6,
) -> List[Tuple[Element, List[Point3]]]:
    """Loops of the exterior face of every wall solid, moved outwards by *offset*."""
    result: List[Tuple[Element, List[Point3]]] = []
    for element in elements:
        if not element.is_wall:
            continue
        try:
            along, outward = wall_directions(element)
        except ValueError as exc:
            log.warning("%s: skipping wall profile (%s)", element.name, exc)
            continue
        shift = v3.scale(outward, offset)
        for solid in element.solids:
            face = exterior_vertical_face(solid, along, outward, tolerance)
            if face is None:
                log.info("%s: solid has no exterior vertical planar face", element.name)
                continue
            for polygon in _collect_loops(face, shift, element.name, loop_tolerance):
                result.append((element, polygon))
    return result

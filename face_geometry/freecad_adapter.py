"""Extract analysable faces from FreeCAD ``Part`` shapes.

FreeCAD is the host geometry kernel: it owns the solids, computes face
normals and tessellates edges. This module only reads those results into the
plain :mod:`face_geometry.faces` model. FreeCAD is imported lazily, so the
module can be imported in headless/test environments; any object exposing
the same attributes (``Faces``, ``Surface``, ``Wires``, ``OrderedEdges``,
``OrderedVertexes``, ``discretize``) is accepted.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from . import vec3 as v3
from .faces import EdgeLoop, Element, Face, FaceKind, Solid
from .parameters import AnalysisParameters
from .vec3 import Point3

__all__ = [
    "freecad_available",
    "face_kind",
    "face_from_freecad",
    "element_from_shape",
    "element_category",
    "load_document_elements",
]

log = logging.getLogger(__name__)

_SURFACE_KINDS = {
    "Plane": FaceKind.PLANAR,
    "Cylinder": FaceKind.CYLINDRICAL,
}

_IFC_CATEGORIES = {
    "ifcwall": "wall",
    "ifcwallstandardcase": "wall",
    "wall": "wall",
    "ifcslab": "floor",
    "slab": "floor",
    "floor": "floor",
}


def freecad_available() -> bool:
    try:
        import FreeCAD  # type: ignore  # noqa: F401
    except ImportError:  # pragma: no cover - plain Python environment
        return False
    return True


def _scaled(vector: Any, unit_scale: float) -> Point3:
    return (float(vector.x) * unit_scale, float(vector.y) * unit_scale, float(vector.z) * unit_scale)


def face_kind(face: Any) -> FaceKind:
    surface = getattr(face, "Surface", None)
    return _SURFACE_KINDS.get(type(surface).__name__, FaceKind.OTHER)


def _planar_normal(face: Any) -> Tuple[float, float, float]:
    # normalAt honours the face orientation; Surface.Axis does not.
    u0, u1, v0, v1 = face.ParameterRange
    n = face.normalAt(0.5 * (u0 + u1), 0.5 * (v0 + v1))
    return v3.normalize((float(n.x), float(n.y), float(n.z)))


def _wire_edge_loop(wire: Any, deflection: float, unit_scale: float) -> EdgeLoop:
    edges = list(wire.OrderedEdges)
    vertexes = list(wire.OrderedVertexes)
    loop: EdgeLoop = []
    for index, edge in enumerate(edges):
        points = [_scaled(p, unit_scale) for p in edge.discretize(Deflection=deflection)]
        if len(points) < 2:
            continue
        if index < len(vertexes):
            start = _scaled(vertexes[index].Point, unit_scale)
            if v3.norm(v3.sub(points[-1], start)) < v3.norm(v3.sub(points[0], start)):
                points.reverse()
        loop.append(points)
    return loop


def face_from_freecad(face: Any, params: AnalysisParameters) -> Face:
    kind = face_kind(face)
    result = Face(kind=kind)
    if kind is FaceKind.PLANAR:
        result.normal = _planar_normal(face)
        result.origin = _scaled(face.Surface.Position, params.host_unit_scale)
    for wire in getattr(face, "Wires", []):
        loop = _wire_edge_loop(wire, params.host_deflection, params.host_unit_scale)
        if loop:
            result.edge_loops.append(loop)
    return result


def element_from_shape(
    shape: Any,
    name: str,
    category: str,
    params: AnalysisParameters,
    location: Optional[Tuple[Point3, Point3]] = None,
    flipped: bool = False,
) -> Element:
    """Convert a FreeCAD shape into an :class:`Element`, one solid per ``Solids`` entry."""
    solids: List[Solid] = []
    shape_solids: Sequence[Any] = list(getattr(shape, "Solids", []) or []) or [shape]
    for solid in shape_solids:
        faces = [face_from_freecad(f, params) for f in getattr(solid, "Faces", [])]
        solids.append(Solid(faces=faces))
    log.debug("%s: %d solid(s) extracted", name, len(solids))
    return Element(name=name, category=category, solids=solids, location=location, flipped=flipped)


def element_category(obj: Any) -> str:
    """Category from the object's ``IfcType`` (or ``Category``) property."""
    for attr in ("IfcType", "Category"):
        value = str(getattr(obj, attr, "") or "").strip().lower().replace(" ", "")
        if value in _IFC_CATEGORIES:
            return _IFC_CATEGORIES[value]
    return "other"


def _wall_location(obj: Any, unit_scale: float) -> Optional[Tuple[Point3, Point3]]:
    base = getattr(obj, "Base", None)
    shape = getattr(base, "Shape", None)
    vertexes = list(getattr(shape, "Vertexes", []) or [])
    if len(vertexes) < 2:
        return None
    return (_scaled(vertexes[0].Point, unit_scale), _scaled(vertexes[-1].Point, unit_scale))


def load_document_elements(doc: Any, params: AnalysisParameters) -> List[Element]:
    """Elements for every shape-bearing object of a FreeCAD document."""
    if doc is None:
        return []
    elements: List[Element] = []
    for obj in getattr(doc, "Objects", []):
        shape = getattr(obj, "Shape", None)
        if shape is None or (hasattr(shape, "isNull") and shape.isNull()):
            continue
        category = element_category(obj)
        location = _wall_location(obj, params.host_unit_scale) if category == "wall" else None
        name = str(getattr(obj, "Label", "") or getattr(obj, "Name", "Object"))
        elements.append(element_from_shape(shape, name, category, params, location))
    log.info("Extracted %d element(s) from FreeCAD document", len(elements))
    return elements

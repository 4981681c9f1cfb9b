"""FreeCAD extraction against lightweight stand-ins for Part objects."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

import pytest

from face_geometry.face_grouper import FaceNormalGrouper
from face_geometry.faces import FaceKind, loop_vertices
from face_geometry.freecad_adapter import (
    element_category,
    element_from_shape,
    freecad_available,
    face_from_freecad,
    face_kind,
    load_document_elements,
)
from face_geometry.parameters import AnalysisParameters


_FREECAD_AVAILABLE = False
try:
    import Part  # type: ignore

    _FREECAD_AVAILABLE = True
except ImportError:
    pass


requires_freecad = pytest.mark.skipif(not _FREECAD_AVAILABLE, reason="FreeCAD not available")


@dataclass
class Vector:
    x: float
    y: float
    z: float


@dataclass
class Vertex:
    Point: Vector


class Plane:
    def __init__(self, position):
        self.Position = Vector(*position)


class Cylinder:
    pass


class Edge:
    def __init__(self, points):
        self._points = [Vector(*p) for p in points]

    def discretize(self, Deflection):
        return list(self._points)


class Wire:
    def __init__(self, edges, starts):
        self.OrderedEdges = edges
        self.OrderedVertexes = [Vertex(Vector(*p)) for p in starts]


@dataclass
class FakeFace:
    Surface: object
    normal: tuple = (0.0, 0.0, 1.0)
    Wires: List[Wire] = field(default_factory=list)
    ParameterRange: tuple = (0.0, 1.0, 0.0, 1.0)

    def normalAt(self, u, v):
        return Vector(*self.normal)


@dataclass
class FakeShape:
    Faces: list = field(default_factory=list)
    Solids: list = field(default_factory=list)
    Vertexes: list = field(default_factory=list)
    null: bool = False

    def isNull(self):
        return self.null


@dataclass
class FakeObject:
    Label: str
    Shape: object
    IfcType: str = ""
    Base: object = None


@dataclass
class FakeDocument:
    Objects: list


def _square_face(z, normal, size=1000.0):
    corners = [(0.0, 0.0, z), (size, 0.0, z), (size, size, z), (0.0, size, z)]
    edges = []
    for i in range(4):
        start, end = corners[i], corners[(i + 1) % 4]
        mid = tuple(0.5 * (a + b) for a, b in zip(start, end))
        points = [start, mid, end]
        if i == 1:
            # Host edges may be parameterised against the wire direction.
            points.reverse()
        edges.append(Edge(points))
    return FakeFace(Surface=Plane(corners[0]), normal=normal, Wires=[Wire(edges, corners)])


def test_face_kind_from_surface_type():
    assert face_kind(FakeFace(Surface=Plane((0, 0, 0)))) is FaceKind.PLANAR
    assert face_kind(FakeFace(Surface=Cylinder())) is FaceKind.CYLINDRICAL
    assert face_kind(FakeFace(Surface=object())) is FaceKind.OTHER


def test_face_from_freecad_scales_and_orients_edges():
    params = AnalysisParameters(host_unit_scale=0.001)
    face = face_from_freecad(_square_face(2000.0, (0.0, 0.0, -2.0)), params)

    assert face.is_planar
    assert face.normal == (0.0, 0.0, -1.0)
    assert face.origin == (0.0, 0.0, 2.0)
    [loop] = face.edge_loops
    assert loop[1][0] == (1.0, 0.0, 2.0)
    vertices = loop_vertices(loop)
    assert len(vertices) == 8
    assert all(math.isclose(p[2], 2.0) for p in vertices)


def test_non_planar_faces_keep_loops_without_normal():
    face = face_from_freecad(FakeFace(Surface=Cylinder()), AnalysisParameters())

    assert face.kind is FaceKind.CYLINDRICAL
    assert face.edge_loops == []


def test_element_from_shape_feeds_grouper():
    solid = FakeShape(
        Faces=[
            _square_face(0.0, (0.0, 0.0, -1.0)),
            _square_face(3.0, (0.0, 0.0, 1.0)),
            FakeFace(Surface=Cylinder()),
        ]
    )
    element = element_from_shape(FakeShape(Solids=[solid]), "Slab", "floor", AnalysisParameters())

    assert element.is_floor
    grouper = FaceNormalGrouper()
    assert grouper.add_solid(element.solids[0]) == 2
    [report] = grouper.dimensions()
    assert math.isclose(report.extent, 3.0)


def test_element_category():
    assert element_category(FakeObject("W", None, IfcType="Wall")) == "wall"
    assert element_category(FakeObject("W", None, IfcType="IfcWallStandardCase")) == "wall"
    assert element_category(FakeObject("S", None, IfcType="Slab")) == "floor"
    assert element_category(FakeObject("C", None, IfcType="Column")) == "other"


def test_load_document_elements():
    wall_shape = FakeShape(Faces=[_square_face(0.0, (0.0, 0.0, -1.0))])
    base = FakeObject("Line", FakeShape(Vertexes=[Vertex(Vector(0, 0, 0)), Vertex(Vector(4000, 0, 0))]))
    doc = FakeDocument(
        Objects=[
            FakeObject("Wall", wall_shape, IfcType="Wall", Base=base),
            FakeObject("Empty", FakeShape(null=True), IfcType="Slab"),
            FakeObject("Slab", FakeShape(Faces=[]), IfcType="Slab"),
        ]
    )
    params = AnalysisParameters(host_unit_scale=0.001)

    elements = load_document_elements(doc, params)
    assert [e.name for e in elements] == ["Wall", "Slab"]
    assert elements[0].location == ((0.0, 0.0, 0.0), (4.0, 0.0, 0.0))
    assert elements[1].location is None
    assert load_document_elements(None, params) == []


@requires_freecad
def test_real_box_dimensions():
    params = AnalysisParameters(host_unit_scale=0.001)
    element = element_from_shape(Part.makeBox(1000, 500, 3000), "Box", "wall", params)

    assert freecad_available()
    grouper = FaceNormalGrouper()
    assert grouper.add_solid(element.solids[0]) == 6
    extents = sorted(r.extent for r in grouper.dimensions())
    assert extents == pytest.approx([0.5, 1.0, 3.0])

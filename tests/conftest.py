from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure repo root is importable when running pytest from any CWD.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from face_geometry.faces import Element, Face, FaceKind, Solid  # noqa: E402
from face_geometry.scene_io import edges_from_polygon  # noqa: E402


def box_loops(lo, hi):
    """(normal, loop) per box side; loops run counter-clockwise seen from outside."""
    x0, y0, z0 = lo
    x1, y1, z1 = hi
    return [
        ((0.0, 0.0, -1.0), [(x0, y0, z0), (x0, y1, z0), (x1, y1, z0), (x1, y0, z0)]),
        ((0.0, 0.0, 1.0), [(x0, y0, z1), (x1, y0, z1), (x1, y1, z1), (x0, y1, z1)]),
        ((0.0, -1.0, 0.0), [(x0, y0, z0), (x1, y0, z0), (x1, y0, z1), (x0, y0, z1)]),
        ((0.0, 1.0, 0.0), [(x0, y1, z0), (x0, y1, z1), (x1, y1, z1), (x1, y1, z0)]),
        ((-1.0, 0.0, 0.0), [(x0, y0, z0), (x0, y0, z1), (x0, y1, z1), (x0, y1, z0)]),
        ((1.0, 0.0, 0.0), [(x1, y0, z0), (x1, y1, z0), (x1, y1, z1), (x1, y0, z1)]),
    ]


def box_solid(lo, hi):
    faces = [
        Face(kind=FaceKind.PLANAR, normal=normal, origin=loop[0], edge_loops=[edges_from_polygon(loop)])
        for normal, loop in box_loops(lo, hi)
    ]
    return Solid(faces=faces)


@pytest.fixture
def make_box():
    return box_solid


@pytest.fixture
def wall_element():
    """10 x 0.5 x 3 wall along +X, centred on the X axis."""
    return Element(
        name="Wall 1",
        category="wall",
        solids=[box_solid((0.0, -0.25, 0.0), (10.0, 0.25, 3.0))],
        location=((0.0, 0.0, 0.0), (10.0, 0.0, 0.0)),
    )


@pytest.fixture
def floor_element():
    """8 x 6 slab, 0.3 thick, top at z=0."""
    return Element(
        name="Floor 1",
        category="floor",
        solids=[box_solid((0.0, 0.0, -0.3), (8.0, 6.0, 0.0))],
    )


@pytest.fixture
def scene_data():
    """Scene document with one wall, one floor and a column."""
    wall = box_loops((0.0, -0.25, 0.0), (10.0, 0.25, 3.0))
    floor = box_loops((0.0, 0.0, -0.3), (8.0, 6.0, 0.0))

    def faces(loops):
        return [
            {"kind": "planar", "normal": list(n), "origin": list(loop[0]), "loops": [[list(p) for p in loop]]}
            for n, loop in loops
        ]

    return {
        "elements": [
            {
                "name": "Wall 1",
                "category": "wall",
                "location": [[0, 0, 0], [10, 0, 0]],
                "solids": [{"faces": faces(wall)}],
            },
            {"name": "Floor 1", "category": "floor", "solids": [{"faces": faces(floor)}]},
            {"name": "Column 1", "category": "column", "solids": [{"faces": [{"kind": "cylindrical"}]}]},
        ]
    }

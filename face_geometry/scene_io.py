"""Scene input and report output.

A scene file is a JSON object listing building elements and their solids::

    {
      "elements": [
        {
          "name": "Wall 1",
          "category": "wall",
          "location": [[0, 0, 0], [10, 0, 0]],
          "flipped": false,
          "solids": [
            {"faces": [
              {"kind": "planar", "normal": [0, 1, 0], "origin": [0, 0.5, 0],
               "loops": [[[0, 0.5, 0], [0, 0.5, 3], [10, 0.5, 3], [10, 0.5, 0]]]},
              {"kind": "cylindrical"}
            ]}
          ]
        }
      ]
    }

A face gives its boundary either as ``edge_loops`` (loops of tessellated edge
polylines, as a host kernel reports them) or as ``loops`` (plain vertex
polygons, turned into two-point edges here).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from .faces import EdgeLoop, Element, Face, FaceKind, Solid
from .vec3 import Point3

__all__ = [
    "load_scene",
    "elements_from_dict",
    "edges_from_polygon",
    "write_report",
]

log = logging.getLogger(__name__)


def _point(value: Any, what: str) -> Point3:
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) != 3:
        raise ValueError(f"{what}: expected [x, y, z], got {value!r}")
    try:
        return (float(value[0]), float(value[1]), float(value[2]))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{what}: non-numeric coordinate in {value!r}") from exc


def edges_from_polygon(polygon: Sequence[Point3]) -> EdgeLoop:
    """Two-point edges joining consecutive vertices, closing the loop."""
    count = len(polygon)
    return [[polygon[i], polygon[(i + 1) % count]] for i in range(count)]


def _face_from_dict(data: Mapping[str, Any], where: str) -> Face:
    kind_name = str(data.get("kind", "planar")).lower()
    try:
        kind = FaceKind(kind_name)
    except ValueError as exc:
        raise ValueError(f"{where}: unknown face kind '{kind_name}'") from exc

    face = Face(kind=kind)
    if "normal" in data:
        face.normal = _point(data["normal"], f"{where}.normal")
    if "origin" in data:
        face.origin = _point(data["origin"], f"{where}.origin")
    if kind is FaceKind.PLANAR and ("normal" not in data or "origin" not in data):
        raise ValueError(f"{where}: planar face needs 'normal' and 'origin'")

    for li, loop in enumerate(data.get("edge_loops", [])):
        edges = [
            [_point(p, f"{where}.edge_loops[{li}][{ei}]") for p in edge]
            for ei, edge in enumerate(loop)
        ]
        face.edge_loops.append(edges)
    for li, loop in enumerate(data.get("loops", [])):
        polygon = [_point(p, f"{where}.loops[{li}]") for p in loop]
        face.edge_loops.append(edges_from_polygon(polygon))
    return face


def _element_from_dict(data: Mapping[str, Any], index: int) -> Element:
    name = str(data.get("name", f"Element_{index:04d}"))
    category = str(data.get("category", "other"))
    location = None
    if data.get("location") is not None:
        line = data["location"]
        if not isinstance(line, Sequence) or len(line) != 2:
            raise ValueError(f"{name}: location must be [start, end]")
        location = (_point(line[0], f"{name}.location"), _point(line[1], f"{name}.location"))

    solids: List[Solid] = []
    for si, solid_data in enumerate(data.get("solids", [])):
        faces = [
            _face_from_dict(face_data, f"{name}.solids[{si}].faces[{fi}]")
            for fi, face_data in enumerate(solid_data.get("faces", []))
        ]
        solids.append(Solid(faces=faces))
    return Element(
        name=name,
        category=category,
        solids=solids,
        location=location,
        flipped=bool(data.get("flipped", False)),
    )


def elements_from_dict(data: Mapping[str, Any]) -> List[Element]:
    elements = data.get("elements")
    if not isinstance(elements, list):
        raise ValueError("Scene must contain an 'elements' list")
    return [_element_from_dict(item, idx) for idx, item in enumerate(elements)]


def load_scene(path: Path | str) -> List[Element]:
    """Read the elements of a JSON scene file."""
    scene_path = Path(path)
    if not scene_path.exists():
        raise FileNotFoundError(f"Scene file not found: {scene_path}")
    data = json.loads(scene_path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("Top-level JSON scene must be an object")
    elements = elements_from_dict(data)
    log.info("Loaded %d element(s) from %s", len(elements), scene_path)
    return elements


def write_report(report: Dict[str, Any], destination: Path) -> None:
    """Write the analysis report as JSON."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(report, indent=2), encoding="utf-8")
    log.info("Wrote report %s", destination)

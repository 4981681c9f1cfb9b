import math

import pytest

from face_geometry.face_grouper import FaceNormalGrouper, max_extent_along
from face_geometry.faces import Face, FaceKind, Solid, UnsupportedFaceKindError


def test_antiparallel_normals_share_a_group():
    grouper = FaceNormalGrouper()
    grouper.add_face((1.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    grouper.add_face((-1.0, 0.0, 0.0), (5.0, 0.0, 0.0))
    grouper.add_face((0.0, 1.0, 0.0), (0.0, 0.0, 0.0))
    grouper.add_face((0.0, 0.0, 1.0), (0.0, 0.0, 0.0))

    groups = grouper.groups
    assert len(groups) == 3
    assert groups[0].normal == (1.0, 0.0, 0.0)
    assert groups[0].origins == [(0.0, 0.0, 0.0), (5.0, 0.0, 0.0)]
    assert math.isclose(max_extent_along(groups[0].origins, groups[0].normal), 5.0)
    assert math.isclose(groups[0].max_extent, 5.0)


def test_single_face_group_has_zero_extent():
    grouper = FaceNormalGrouper()
    grouper.add_face((0.0, 0.0, 1.0), (1.0, 2.0, 3.0))

    group = grouper.groups[0]
    assert max_extent_along(group.origins, group.normal) == 0.0
    [report] = grouper.dimensions()
    assert report.extent is None
    assert report.face_count == 1


def test_max_extent_ignores_order_of_origins():
    origins = [(0.0, 0.0, 2.0), (0.0, 0.0, -1.0), (3.0, 4.0, 0.5)]

    assert math.isclose(max_extent_along(origins, (0.0, 0.0, 1.0)), 3.0)
    assert math.isclose(max_extent_along(list(reversed(origins)), (0.0, 0.0, -4.0)), 3.0)
    assert max_extent_along([], (1.0, 0.0, 0.0)) == 0.0


def test_parallel_tolerance_controls_grouping():
    tight = FaceNormalGrouper(eps=1e-9)
    tight.add_face((1.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    tight.add_face((1.0, 1e-6, 0.0), (1.0, 0.0, 0.0))
    assert len(tight) == 2

    loose = FaceNormalGrouper(eps=1e-4)
    loose.add_face((1.0, 0.0, 0.0), (0.0, 0.0, 0.0))
    loose.add_face((1.0, 1e-6, 0.0), (1.0, 0.0, 0.0))
    assert len(loose) == 1


def test_unnormalized_normals_group_and_measure():
    grouper = FaceNormalGrouper()
    grouper.add_face((0.0, 3.0, 0.0), (0.0, 0.0, 0.0))
    grouper.add_face((0.0, -0.5, 0.0), (0.0, 2.0, 0.0))

    [report] = grouper.dimensions()
    assert report.normal == pytest.approx((0.0, 1.0, 0.0))
    assert math.isclose(report.extent, 2.0)


def test_box_solid_dimensions(make_box):
    grouper = FaceNormalGrouper()
    added = grouper.add_solid(make_box((0.0, -0.25, 0.0), (10.0, 0.25, 3.0)))

    assert added == 6
    extents = sorted(report.extent for report in grouper.dimensions())
    assert extents == pytest.approx([0.5, 3.0, 10.0])
    assert all(len(group.origins) == 2 for group in grouper)


def test_wall_with_opening_keeps_overall_dimension(make_box):
    wall = make_box((0.0, 0.0, 0.0), (6.0, 0.3, 3.0))
    # Reveal faces of a window opening between x=2 and x=3.
    wall.faces.append(Face(FaceKind.PLANAR, (1.0, 0.0, 0.0), (2.0, 0.0, 1.0)))
    wall.faces.append(Face(FaceKind.PLANAR, (-1.0, 0.0, 0.0), (3.0, 0.0, 1.0)))

    grouper = FaceNormalGrouper()
    grouper.add_solid(wall)

    x_group = next(g for g in grouper if abs(g.normal[0]) == 1.0)
    assert len(x_group.origins) == 4
    assert math.isclose(x_group.max_extent, 6.0)


def test_non_planar_faces_are_skipped_or_rejected():
    cylinder = Face(FaceKind.CYLINDRICAL)
    solid = Solid(faces=[cylinder, Face(FaceKind.PLANAR, (0.0, 0.0, 1.0), (0.0, 0.0, 0.0))])

    grouper = FaceNormalGrouper()
    assert grouper.add_solid(solid) == 1
    assert len(grouper) == 1
    with pytest.raises(UnsupportedFaceKindError):
        grouper.add_planar_face(cylinder)

import numpy as np
import pytest

from floorgen.geometry.bounds import AABB, BoundsShape, LocalBox, combined_bounds, rotated_aabb
from floorgen.geometry.vector_math import UP, Quaternion


def test_touching_faces_do_not_intersect() -> None:
    a = AABB.from_center_size((0.0, 0.0, 0.0), (2.0, 2.0, 2.0))
    b = AABB.from_center_size((2.0, 0.0, 0.0), (2.0, 2.0, 2.0))

    assert not a.intersects(b)
    assert a.intersects(AABB.from_center_size((1.9, 0.0, 0.0), (2.0, 2.0, 2.0)))


def test_overlap_area_and_volume() -> None:
    a = AABB(0.0, 0.0, 0.0, 4.0, 2.0, 4.0)
    b = AABB(3.0, 0.0, 2.0, 6.0, 2.0, 6.0)

    assert a.overlap_area_xz(b) == pytest.approx(2.0)
    assert a.intersection_volume(b) == pytest.approx(4.0)


def test_rotated_aabb_quarter_turn_swaps_footprint_axes() -> None:
    box = rotated_aabb((0.0, 2.0, 0.0), (4.0, 4.0, 10.0), (5.0, 0.0, 0.0),
                       Quaternion.from_axis_angle(UP, 90.0))

    assert np.allclose(box.size, (10.0, 4.0, 4.0))
    assert np.allclose(box.center, (5.0, 2.0, 0.0))


def test_rotated_aabb_rotates_local_center() -> None:
    box = rotated_aabb((0.0, 0.0, 3.0), (1.0, 1.0, 1.0), (0.0, 0.0, 0.0),
                       Quaternion.from_axis_angle(UP, 90.0))

    assert np.allclose(box.center, (3.0, 0.0, 0.0))


def test_compound_encapsulating_box_covers_sub_boxes() -> None:
    shape = BoundsShape.compound([
        LocalBox((0.0, 2.0, -2.0), (4.0, 4.0, 8.0)),
        LocalBox((4.0, 2.0, 0.0), (4.0, 4.0, 4.0)),
    ])

    assert shape.is_compound
    assert shape.center == pytest.approx((2.0, 2.0, -2.0))
    assert shape.size == pytest.approx((8.0, 4.0, 8.0))

    record = shape.world_record((10.0, 0.0, -3.0), Quaternion.from_axis_angle(UP, 45.0))
    assert record.is_compound
    assert len(record.sub_boxes) == 2
    assert record.contains_all_sub_boxes()


def test_compound_records_ignore_the_empty_corner() -> None:
    l_shape = BoundsShape.compound([
        LocalBox((0.0, 2.0, -2.0), (4.0, 4.0, 8.0)),
        LocalBox((4.0, 2.0, 0.0), (4.0, 4.0, 4.0)),
    ]).world_record((0.0, 0.0, 0.0), Quaternion())
    in_corner = BoundsShape.box((4.0, 2.0, -4.0), (2.0, 4.0, 2.0)).world_record((0.0, 0.0, 0.0), Quaternion())

    assert l_shape.encapsulating.intersects(in_corner.encapsulating)
    assert not l_shape.intersects(in_corner)


def test_single_box_shape_has_no_sub_boxes() -> None:
    record = BoundsShape.box((0.0, 2.0, 0.0), (4.0, 4.0, 4.0)).world_record((1.0, 0.0, 1.0), Quaternion())

    assert not record.is_compound
    assert record.boxes == (record.encapsulating,)
    assert record.footprint_area_xz == pytest.approx(16.0)


def test_shape_dict_keeps_sub_boxes() -> None:
    shape = BoundsShape.compound([
        LocalBox((0.0, 2.0, 2.0), (12.0, 4.0, 4.0), "bar"),
        LocalBox((0.0, 2.0, -3.0), (4.0, 4.0, 6.0), "stem"),
    ])

    restored = BoundsShape.from_dict(shape.to_dict())

    assert restored.sub_boxes == shape.sub_boxes
    assert restored.size == pytest.approx(shape.size)


def test_combined_bounds() -> None:
    shape = BoundsShape.box((0.0, 0.0, 0.0), (2.0, 2.0, 2.0))
    records = [shape.world_record((x, 0.0, 0.0), Quaternion()) for x in (0.0, 10.0)]

    combined = combined_bounds(records)

    assert combined == AABB(-1.0, -1.0, -1.0, 11.0, 1.0, 1.0)
    assert combined_bounds([]) is None

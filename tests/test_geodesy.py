import math

import pytest

from cdb3dtiles.geodesy import (
    WGS84,
    WGS84_A,
    WGS84_F,
    BoundingRegion,
    Cartographic,
    HeadingPitchRoll,
    Rectangle,
    calculate_model_orientation,
    mat4_column,
)


def _region(west, south, east, north, min_h, max_h):
    return BoundingRegion(Rectangle(west, south, east, north), min_h, max_h)


REGION_A = _region(0.10, 0.20, 0.15, 0.25, -10.0, 50.0)
REGION_B = _region(0.30, -0.05, 0.40, 0.10, 5.0, 300.0)
REGION_C = _region(-0.20, 0.00, 0.00, 0.30, 0.0, 20.0)


def test_union_contains_both_regions():
    union = REGION_A.union(REGION_B)
    assert union.contains(REGION_A)
    assert union.contains(REGION_B)
    assert union.to_region_array() == [0.10, -0.05, 0.40, 0.25, -10.0, 300.0]


def test_union_is_commutative_and_associative():
    assert REGION_A.union(REGION_B) == REGION_B.union(REGION_A)
    assert REGION_A.union(REGION_B).union(REGION_C) == REGION_A.union(REGION_B.union(REGION_C))


def test_region_array_round_trip():
    values = [0.1, 0.2, 0.3, 0.4, -5.0, 10.0]
    assert BoundingRegion.from_region_array(values).to_region_array() == values


def test_rectangle_center():
    center = Rectangle(0.0, 0.2, 0.4, 0.6).center()
    assert center.longitude == pytest.approx(0.2)
    assert center.latitude == pytest.approx(0.4)
    assert center.height == 0.0


def test_cartographic_to_cartesian_on_equator_and_pole():
    assert WGS84.cartographic_to_cartesian(Cartographic(0.0, 0.0, 0.0)) == pytest.approx((WGS84_A, 0.0, 0.0))
    x, y, z = WGS84.cartographic_to_cartesian(Cartographic(0.0, math.pi / 2, 0.0))
    assert x == pytest.approx(0.0, abs=1e-6)
    assert y == pytest.approx(0.0, abs=1e-6)
    assert z == pytest.approx(WGS84_A * (1 - WGS84_F))


def test_height_moves_along_surface_normal():
    cartographic = Cartographic.from_degrees(30.0, 40.0, 0.0)
    lifted = Cartographic.from_degrees(30.0, 40.0, 1000.0)
    base = WGS84.cartographic_to_cartesian(cartographic)
    top = WGS84.cartographic_to_cartesian(lifted)
    normal = WGS84.geodetic_surface_normal(cartographic)
    for b, t, n in zip(base, top, normal):
        assert t - b == pytest.approx(1000.0 * n)


def test_east_north_up_frame_at_origin():
    frame = WGS84.east_north_up_to_fixed_frame(Cartographic(0.0, 0.0, 0.0))
    assert mat4_column(frame, 0) == pytest.approx((0.0, 1.0, 0.0))
    assert mat4_column(frame, 1) == pytest.approx((0.0, 0.0, 1.0))
    assert mat4_column(frame, 2) == pytest.approx((1.0, 0.0, 0.0))
    assert mat4_column(frame, 3) == pytest.approx((WGS84_A, 0.0, 0.0))


def test_heading_is_clockwise_from_north():
    origin = Cartographic(0.0, 0.0, 0.0)
    rotation = calculate_model_orientation(origin, HeadingPitchRoll(90.0))
    # Model Y (forward) now points east, model X points south.
    assert mat4_column(rotation, 1) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)
    assert mat4_column(rotation, 0) == pytest.approx((0.0, 0.0, -1.0), abs=1e-12)

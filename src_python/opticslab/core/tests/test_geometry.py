import math

import pytest

from opticslab.core.geometry import (
    Vector2,
    ray_line_intersection,
    ray_segment_intersection,
    reflect,
)


def test_arithmetic_returns_new_vectors():
    a = Vector2(1, 2)
    b = Vector2(3, -4)
    c = a.add(b)
    assert (c.x, c.y) == (4, -2)
    assert (a.x, a.y) == (1, 2)
    assert tuple(a - b) == (-2, 6)
    assert tuple(a * 3) == (3, 6)
    assert tuple(-a) == (-1, -2)


def test_divide_by_zero_gives_signed_infinities():
    v = Vector2(2, -3).divide(0)
    assert v.x == math.inf
    assert v.y == -math.inf
    assert Vector2(0, 5).divide(0).x == 0.0


@pytest.mark.parametrize("x,y", [(3, 4), (-1e-3, 2e-3), (1e6, -7), (0.5, 0)])
def test_normalize_has_unit_length(x, y):
    assert Vector2(x, y).normalize().magnitude() == pytest.approx(1.0)


def test_normalize_zero_vector_is_zero():
    v = Vector2(0, 0).normalize()
    assert v.x == 0 and v.y == 0


def test_dot_cross_and_angle():
    a = Vector2(1, 0)
    b = Vector2(0, 1)
    assert a.dot(b) == 0
    assert a.cross(b) == 1
    assert b.cross(a) == -1
    assert b.angle() == pytest.approx(math.pi / 2)
    assert Vector2(-1, 0).angle() == pytest.approx(math.pi)


def test_rotate_and_from_angle():
    v = Vector2(1, 0).rotate(math.pi / 2)
    assert v.equals(Vector2(0, 1))
    assert Vector2.from_angle(math.pi).equals(Vector2(-1, 0))


def test_distances():
    a = Vector2(0, 0)
    b = Vector2(3, 4)
    assert a.distance_to(b) == 5
    assert a.distance_squared_to(b) == 25
    assert b.magnitude_squared() == 25


def test_lerp_clamps_t():
    a = Vector2(0, 0)
    b = Vector2(10, 0)
    assert Vector2.lerp(a, b, 0.25).x == 2.5
    assert Vector2.lerp(a, b, -1).x == 0
    assert Vector2.lerp(a, b, 5).x == 10


def test_set_is_in_place():
    v = Vector2(1, 1)
    assert v.set(2, 3) is v
    assert (v.x, v.y) == (2, 3)


def test_from_point_accepts_dicts_and_pairs():
    assert Vector2.from_point({'x': 1, 'y': 2}).equals(Vector2(1, 2))
    assert Vector2.from_point((3, 4)).equals(Vector2(3, 4))
    original = Vector2(5, 6)
    copy = Vector2.from_point(original)
    assert copy is not original and copy.equals(original)


def test_reflect_about_normal():
    d = Vector2(1, -1).normalize()
    r = reflect(d, Vector2(0, 1))
    assert r.equals(Vector2(1, 1).normalize())


def test_ray_segment_intersection_hit_and_misses():
    p1 = Vector2(10, -5)
    p2 = Vector2(10, 5)
    t, s = ray_segment_intersection(Vector2(0, 0), Vector2(1, 0), p1, p2)
    assert t == pytest.approx(10)
    assert s == pytest.approx(0.5)

    # behind the origin
    assert ray_segment_intersection(Vector2(0, 0), Vector2(-1, 0), p1, p2) is None
    # outside the segment
    assert ray_segment_intersection(Vector2(0, 20), Vector2(1, 0), p1, p2) is None
    # parallel
    assert ray_segment_intersection(Vector2(0, 0), Vector2(0, 1), p1, p2) is None


def test_ray_line_intersection_on_infinite_line():
    t, s = ray_line_intersection(Vector2(0, 100), Vector2(1, 0), Vector2(10, 0), Vector2(0, 1))
    assert t == pytest.approx(10)
    assert s == pytest.approx(100)

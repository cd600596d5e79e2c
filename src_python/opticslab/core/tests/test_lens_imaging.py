import math

import pytest

from opticslab.core.geometry import Vector2
from opticslab.core.lens_imaging import LensImaging, thin_lens_image
from opticslab.core.scene import Scene
from opticslab.core.scene_objs import LaserSource, ThinLens


def make_lens(focal_length=100.0, **params):
    descriptor = {'pos': {'x': 0, 'y': 0}, 'angle': math.pi / 2, 'size': 200,
                  'focal_length': focal_length}
    descriptor.update(params)
    return ThinLens(None, descriptor)


def solve(obj_x, focal_length=100.0, obj_y=20.0):
    imaging = LensImaging()
    lens = make_lens(focal_length)
    result = imaging.calculate(Vector2(obj_x, obj_y), lens)
    return result, imaging.principal_ray_segments(result)


def ends_at(segment, point):
    return segment.p2.equals(point, tolerance=1e-6)


def test_thin_lens_equation():
    v, m, at_infinity = thin_lens_image(200, 100)
    assert (v, m) == pytest.approx((200, -1))
    assert not at_infinity
    v, m, at_infinity = thin_lens_image(100, 100)
    assert at_infinity and math.isinf(v) and math.isinf(m)
    assert thin_lens_image(50, None) == (-50, 1.0, False)
    assert thin_lens_image(0, 100) == (0.0, 1.0, False)


def test_object_at_twice_focal_length():
    result, _ = solve(-200)
    assert result.u == pytest.approx(200)
    assert result.v == pytest.approx(200)
    assert result.magnification == pytest.approx(-1)
    assert result.is_real_image
    assert not result.image_at_infinity
    assert result.img_tip.equals(Vector2(200, -20))
    assert result.description() == 'real, inverted, same size'


def test_object_at_focal_point():
    result, segments = solve(-100)
    assert result.image_at_infinity
    assert not result.is_real_image
    assert result.img_tip is None
    assert result.description() == 'image at infinity'
    assert segments
    assert not any(s.dashed for s in segments)


def test_object_inside_focal_length():
    result, _ = solve(-50)
    assert result.v < 0
    assert result.magnification > 1
    assert not result.is_real_image
    assert result.img_tip.equals(Vector2(-100, 40))
    assert result.description() == 'virtual, upright, magnified'


@pytest.mark.parametrize("u", [10, 50, 100, 300, 5000])
def test_diverging_lens_always_virtual_and_reduced(u):
    result, _ = solve(-u, focal_length=-100)
    assert result.v < 0
    assert 0 < result.magnification < 1
    assert not result.is_real_image


def test_object_distance_is_positive_from_either_side():
    result, _ = solve(200)
    assert result.u == pytest.approx(200)
    assert result.axis.equals(Vector2(-1, 0))
    assert result.img_tip.equals(Vector2(-200, -20))


def test_flat_lens_images_object_onto_itself():
    result, segments = solve(-150, focal_length=None)
    assert result.is_flat
    assert result.v == pytest.approx(-150)
    assert result.magnification == 1
    assert result.img_tip.equals(result.obj_tip)
    assert {s.role for s in segments} == {'chief'}


def test_object_on_axis_is_lifted():
    imaging = LensImaging(min_diagram_height=5.0)
    result = imaging.calculate(Vector2(-200, 0), make_lens())
    assert result.object_height == 5.0
    assert result.obj_tip.equals(Vector2(-200, 5))


@pytest.mark.parametrize("obj_x,focal_length", [(-50, 100), (-200, -100), (-30, -100)])
def test_virtual_image_segments_are_dashed_at_the_image(obj_x, focal_length):
    result, segments = solve(obj_x, focal_length)
    assert not result.is_real_image and not result.image_at_infinity
    dashed_at_image = [s for s in segments if s.dashed and ends_at(s, result.img_tip)]
    solid_at_image = [s for s in segments if not s.dashed and ends_at(s, result.img_tip)]
    assert len(dashed_at_image) >= 1
    assert solid_at_image == []


def test_virtual_image_back_extensions_meet_at_image():
    result, segments = solve(-50)
    for s in segments:
        if s.dashed and ends_at(s, result.img_tip):
            outgoing = [o for o in segments if not o.dashed and o.role == s.role and o.p1.equals(s.p1)]
            assert outgoing
            forward = outgoing[-1].p2.subtract(s.p1)
            backward = s.p2.subtract(s.p1)
            assert forward.cross(backward) == pytest.approx(0, abs=1e-6 * forward.magnitude() * backward.magnitude())
            assert forward.dot(backward) < 0


def test_real_image_segments_are_solid():
    result, segments = solve(-300)
    assert result.is_real_image
    assert not any(s.dashed for s in segments)
    roles_at_image = {s.role for s in segments if ends_at(s, result.img_tip)}
    assert roles_at_image == {'parallel', 'chief', 'focal'}


def test_no_degenerate_segments():
    _, segments = solve(-200)
    assert all(s.length > 1e-9 for s in segments)


def test_find_prefers_selected_components():
    imaging = LensImaging()
    first = make_lens(id='first')
    second = make_lens(id='second', selected=True)
    source_a = LaserSource(None, {'id': 'a'})
    source_b = LaserSource(None, {'id': 'b', 'selected': True})
    components = [source_a, first, source_b, second]
    assert imaging.find_lens(components) is second
    assert imaging.find_object_source(components) is source_b
    assert imaging.find_lens([first, source_a]) is first


def test_solve_from_scene_components():
    scene = Scene.from_descriptors([
        {'type': 'LaserSource', 'pos': {'x': -300, 'y': 30}},
        {'type': 'ThinLens', 'pos': {'x': 0, 'y': 0}, 'angle': math.pi / 2, 'size': 200, 'focal_length': 100},
    ])
    result, segments = LensImaging().solve(scene.objs)
    assert result.v == pytest.approx(150)
    assert result.magnification == pytest.approx(-0.5)
    assert result.image_height == pytest.approx(-15)
    assert segments


def test_solve_without_lens():
    assert LensImaging().solve([LaserSource(None)]) == (None, [])

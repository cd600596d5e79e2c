import math

import pytest

from opticslab.core.geometry import Vector2
from opticslab.core.lens_imaging import LensImaging
from opticslab.core.ray import Ray
from opticslab.core.scene import Scene
from opticslab.core.simulator import Simulator
from opticslab.core.svg_renderer import SVGRenderer, ray_opacity, wavelength_to_color


def test_wavelength_to_color():
    assert wavelength_to_color(650) == 'rgb(255,0,0)'
    assert wavelength_to_color(470).startswith('rgb(0,')
    assert wavelength_to_color(900) == 'rgb(0,0,0)'


def test_ray_opacity_range():
    assert ray_opacity(0) == pytest.approx(0.02)
    assert ray_opacity(100) == pytest.approx(0.85)
    assert ray_opacity(0.1) < ray_opacity(0.5) < ray_opacity(1.0)


def test_draw_ray_path():
    renderer = SVGRenderer(200, 100)
    ray = Ray(Vector2(0, 50), Vector2(1, 0), wavelength=650)
    ray.advance(150)
    assert renderer.draw_ray_path(ray)
    svg = renderer.to_string()
    assert '<polyline' in svg
    assert 'rgb(255,0,0)' in svg


def test_single_point_path_is_skipped():
    renderer = SVGRenderer()
    assert not renderer.draw_ray_path(Ray(Vector2(0, 0), Vector2(1, 0)))


def test_draw_traced_scene(tmp_path):
    scene = Scene.from_descriptors([
        {'type': 'LaserSource', 'pos': {'x': 50, 'y': 300}, 'num_rays': 3, 'beam_width': 40},
        {'type': 'ThinLens', 'pos': {'x': 300, 'y': 300}, 'angle': math.pi / 2, 'size': 150, 'focal_length': 120},
        {'type': 'Mirror', 'pos': {'x': 600, 'y': 300}, 'angle': math.pi / 3},
        {'type': 'OpticalFiber', 'pos': {'x': 700, 'y': 100}, 'angle': math.pi},
        {'type': 'Blocker', 'pos': {'x': 750, 'y': 500}},
    ])
    rays = Simulator(scene).run()
    renderer = SVGRenderer(800, 600)
    renderer.draw_scene(scene, rays)
    assert renderer.ray_count == len(rays)

    out = tmp_path / 'scene.svg'
    renderer.save(str(out))
    assert out.read_text().count('<polyline') == len(rays)


def test_draw_imaging_diagram_uses_dashes_for_virtual_image():
    lens = Scene.from_descriptors([
        {'type': 'ThinLens', 'pos': {'x': 400, 'y': 300}, 'angle': math.pi / 2, 'size': 200, 'focal_length': 150},
    ]).objs[0]
    imaging = LensImaging()
    result = imaging.calculate(Vector2(320, 260), lens)
    segments = imaging.principal_ray_segments(result)

    renderer = SVGRenderer(800, 600)
    renderer.draw_component(lens)
    renderer.draw_imaging_diagram(result, segments)
    svg = renderer.to_string()
    assert 'stroke-dasharray' in svg
    assert "A'" in svg


def test_draw_glass_mirror_and_screen():
    scene = Scene.from_descriptors([
        {'type': 'Prism', 'pos': {'x': 200, 'y': 300}, 'label': 'P'},
        {'type': 'DielectricBlock', 'pos': {'x': 400, 'y': 300}},
        {'type': 'SphericalMirror', 'pos': {'x': 600, 'y': 300}, 'angle': math.pi / 2},
        {'type': 'SphericalMirror', 'pos': {'x': 650, 'y': 300}, 'radius': None},
        {'type': 'Screen', 'pos': {'x': 750, 'y': 300}, 'angle': math.pi / 2},
    ])
    renderer = SVGRenderer(800, 600)
    assert all(renderer.draw_component(obj) for obj in scene.objs)
    svg = renderer.to_string()
    assert svg.count('<polygon') == 2
    assert svg.count('<polyline') == 1
    assert '>P<' in svg

import pytest

from opticslab.core.scene import Scene
from opticslab.core.scene_objs import LaserSource, Mirror, ThinLens


def test_defaults():
    scene = Scene()
    assert scene.max_rays == 10000
    assert scene.max_bounces == 500
    assert scene.min_intensity == 1e-4
    assert scene.mode == 'ray_trace'
    assert scene.simulate_colors is False


def test_apply_settings_accepts_both_key_styles():
    scene = Scene()
    scene.apply_settings({'maxRays': '250', 'max_bounces': 7, 'minIntensity': 0.01, 'simulateColors': True})
    assert scene.max_rays == 250
    assert scene.max_bounces == 7
    assert scene.min_intensity == 0.01
    assert scene.simulate_colors is True


@pytest.mark.parametrize("value, expected", [
    ('false', False),
    ('FALSE', False),
    ('True', True),
    (0, False),
    (1, True),
])
def test_apply_settings_parses_simulate_colors_flag(value, expected):
    scene = Scene()
    scene.apply_settings({'simulateColors': value})
    assert scene.simulate_colors is expected


def test_apply_settings_ignores_unknown_keys():
    scene = Scene()
    scene.apply_settings({'theme': 'dark'})
    assert scene.max_rays == 10000


@pytest.mark.parametrize("settings", [
    {'mode': 'photon_mapping'},
    {'maxRays': -1},
    {'minIntensity': 'bright'},
    {'simulateColors': 'yes'},
])
def test_apply_settings_rejects_bad_values(settings):
    with pytest.raises(ValueError):
        Scene().apply_settings(settings)


def test_from_descriptors_keeps_order_and_skips_unknown_types():
    scene = Scene.from_descriptors([
        {'type': 'LaserSource', 'id': 'src'},
        {'type': 'Hologram', 'id': 'h'},
        {'type': 'ThinLens', 'id': 'lens'},
        {'type': 'Mirror', 'id': 'm'},
    ], {'maxBounces': 3})
    assert [obj.id for obj in scene.objs] == ['src', 'lens', 'm']
    assert [type(obj) for obj in scene.optical_objs] == [LaserSource, ThinLens, Mirror]
    assert scene.max_bounces == 3
    assert all(obj.scene is scene for obj in scene.objs)


def test_sources_and_lookup():
    scene = Scene.from_descriptors([
        {'type': 'LaserSource', 'id': 'a'},
        {'type': 'LaserSource', 'id': 'b', 'enabled': False},
        {'type': 'Mirror', 'id': 'm'},
    ])
    assert [s.id for s in scene.sources] == ['a']
    assert scene.get_object('m').type == 'Mirror'
    assert scene.get_object('missing') is None


def test_add_remove_and_clear():
    scene = Scene()
    mirror = Mirror(None, {'id': 'm'})
    scene.add_object(mirror)
    assert mirror.scene is scene
    assert scene.optical_objs == [mirror]

    scene.remove_object(mirror)
    assert scene.objs == [] and scene.optical_objs == []

    scene.add_object(mirror)
    scene.warning = 'something'
    scene.clear()
    assert scene.objs == []
    assert scene.warning is None

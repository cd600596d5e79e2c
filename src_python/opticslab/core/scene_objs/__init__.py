"""
Copyright 2024 The Ray Optics Simulation authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
Registry of the optical element kinds a scene may contain.

The set is closed: scene descriptors are dispatched on their 'type' tag to
one of the classes in COMPONENT_TYPES.
"""

import logging

from .base_scene_obj import BaseSceneObj, Hit
from .base_segment_obj import BaseSegmentObj
from .blocker.blocker import Blocker
from .detector.screen import Screen
from .fiber.optical_fiber import OpticalFiber
from .glass.glass import DielectricBlock, Glass, Prism
from .glass.thin_lens import ThinLens
from .grating.diffraction_grating import DiffractionGrating
from .light_source.laser_source import LaserSource, WhiteLightSource
from .mirror.beam_splitter import BeamSplitter
from .mirror.mirror import Mirror
from .mirror.spherical_mirror import SphericalMirror
from .polarizer.polarizer import Polarizer

logger = logging.getLogger(__name__)

COMPONENT_TYPES = {
    cls.type: cls
    for cls in (
        LaserSource,
        WhiteLightSource,
        Mirror,
        SphericalMirror,
        BeamSplitter,
        ThinLens,
        Glass,
        Prism,
        DielectricBlock,
        DiffractionGrating,
        Polarizer,
        OpticalFiber,
        Blocker,
        Screen,
    )
}


def create_scene_obj(scene, descriptor):
    """
    Build a scene object from its descriptor.

    Args:
        scene: The scene the object will belong to.
        descriptor (dict): Object properties, including its 'type' tag.

    Returns:
        BaseSceneObj or None: The new object, or None for an unknown type
    """
    obj_type = descriptor.get('type')
    cls = COMPONENT_TYPES.get(obj_type)
    if cls is None:
        logger.warning("Unknown scene object type %r, skipping", obj_type)
        return None
    return cls(scene, descriptor)


__all__ = [
    'BaseSceneObj',
    'BaseSegmentObj',
    'Hit',
    'COMPONENT_TYPES',
    'create_scene_obj',
    'LaserSource',
    'WhiteLightSource',
    'Mirror',
    'SphericalMirror',
    'BeamSplitter',
    'ThinLens',
    'Glass',
    'Prism',
    'DielectricBlock',
    'DiffractionGrating',
    'Polarizer',
    'OpticalFiber',
    'Blocker',
    'Screen',
]

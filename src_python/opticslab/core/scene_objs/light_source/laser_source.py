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

import logging

from ...constants import GREEN_WAVELENGTH, WHITE_LIGHT_WAVELENGTHS
from ...geometry import Vector2
from ...ray import Ray
from ..base_scene_obj import BaseSceneObj

logger = logging.getLogger(__name__)


class LaserSource(BaseSceneObj):
    """
    Monochromatic source emitting a beam or a fan of rays.

    Rays leave `pos` along `angle`. With `num_rays` > 1 they are spread
    evenly over an angular fan of width `spread` and/or laterally over
    `beam_width`. The source brightness is shared evenly between the rays.

    Attributes:
        wavelength (float): Wavelength in nm
        brightness (float): Total emitted intensity
        num_rays (int): Number of rays emitted
        spread (float): Full angular width of the fan, in radians
        beam_width (float): Lateral extent of a parallel beam
        polarization (float or None): Polarization axis in radians, None for unpolarized
    """

    type = 'LaserSource'
    is_optical = True
    is_source = True
    checked_params = (('brightness', 0.0), ('num_rays', 1))
    serializable_defaults = {
        'wavelength': GREEN_WAVELENGTH,
        'brightness': 1.0,
        'num_rays': 1,
        'spread': 0.0,
        'beam_width': 0.0,
        'polarization': None,
    }

    def emission_wavelengths(self):
        return [self.wavelength]

    def emission_geometry(self):
        """
        Origins and directions of the emitted rays.

        Returns:
            list: (origin, direction) pairs, one per ray
        """
        count = max(1, int(self.num_rays))
        perpendicular = Vector2.from_angle(self.angle).perpendicular()
        geometry = []
        for i in range(count):
            offset = i / (count - 1) - 0.5 if count > 1 else 0.0
            direction = Vector2.from_angle(self.angle + offset * (self.spread or 0.0))
            origin = self.pos.add(perpendicular.multiply(offset * (self.beam_width or 0.0)))
            geometry.append((origin, direction))
        return geometry

    def generate_rays(self):
        if not self.param_is_valid(self.brightness, 'brightness', minimum=0.0):
            return []
        if not self.param_is_valid(self.num_rays, 'num_rays', minimum=1):
            return []

        geometry = self.emission_geometry()
        wavelengths = self.emission_wavelengths()
        intensity = self.brightness / (len(geometry) * len(wavelengths))

        rays = []
        for origin, direction in geometry:
            for wavelength in wavelengths:
                rays.append(Ray(
                    origin,
                    direction,
                    wavelength=wavelength,
                    intensity=intensity,
                    source_id=self.id,
                    polarization_angle=self.polarization,
                ))
        logger.debug("%s %r emitted %d rays", self.type, self.id, len(rays))
        return rays


class WhiteLightSource(LaserSource):
    """
    Source sampling a broadband spectrum at a few wavelengths.

    Each geometric ray is emitted once per wavelength in `wavelengths`, with
    the brightness shared evenly, so that dispersive elements (a lens with
    color simulation on, a grating) separate the colors.
    """

    type = 'WhiteLightSource'
    serializable_defaults = {
        'wavelengths': list(WHITE_LIGHT_WAVELENGTHS),
    }

    def emission_wavelengths(self):
        return list(self.wavelengths) or [GREEN_WAVELENGTH]

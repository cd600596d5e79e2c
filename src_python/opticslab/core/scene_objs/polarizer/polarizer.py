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

import math

from ..base_segment_obj import BaseSegmentObj


class Polarizer(BaseSegmentObj):
    """
    Ideal linear polarizer.

    Polarized light is attenuated by Malus's law, I * cos^2(theta - axis);
    unpolarized light loses half its intensity. The transmitted ray is
    undeviated and polarized along the transmission axis. A polarizer
    without a usable axis lets rays through unchanged.

    Attributes:
        transmission_axis (float): Transmission axis in radians
    """

    type = 'Polarizer'
    checked_params = (('transmission_axis', None),)
    serializable_defaults = {
        'transmission_axis': 0.0,
    }

    @property
    def has_axis(self):
        return (self.param_is_valid(self.transmission_axis, 'transmission_axis')
                and math.isfinite(self.transmission_axis))

    def transmitted_fraction(self, polarization_angle):
        if not self.has_axis:
            return 1.0
        if polarization_angle is None:
            return 0.5
        return math.cos(polarization_angle - self.transmission_axis) ** 2

    def interact(self, ray, hit, hit_counts=None):
        if not self.has_axis:
            ray.terminate('transmitted')
            return [ray.spawn(hit.point, ray.direction)]
        ray.terminate('polarized')
        fraction = self.transmitted_fraction(ray.polarization_angle)
        return [ray.spawn(hit.point, ray.direction, fraction,
                          polarization_angle=self.transmission_axis)]

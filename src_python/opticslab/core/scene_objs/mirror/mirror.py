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

from ...geometry import reflect
from ..base_segment_obj import BaseSegmentObj


class Mirror(BaseSegmentObj):
    """
    Flat mirror.

    Reflects the incoming ray about the surface normal (d' = d - 2(d.n)n).
    The reflected intensity is scaled by `reflectivity`.

    Attributes:
        reflectivity (float): Fraction of intensity reflected, in [0, 1]
    """

    type = 'Mirror'
    checked_params = (('reflectivity', 0.0),)
    serializable_defaults = {
        'reflectivity': 1.0,
    }

    def interact(self, ray, hit, hit_counts=None):
        ray.terminate('reflected')
        if not self.param_is_valid(self.reflectivity, 'reflectivity', minimum=0.0):
            return []
        fraction = min(1.0, self.reflectivity)
        return [ray.spawn(hit.point, reflect(ray.direction, hit.normal), fraction)]

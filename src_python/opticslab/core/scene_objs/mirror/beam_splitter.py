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


class BeamSplitter(BaseSegmentObj):
    """
    Lossless plate beam splitter.

    Every hit yields exactly two rays: the reflected ray carrying
    `split_ratio` of the intensity, then the transmitted ray (undeviated)
    carrying the rest.

    Attributes:
        split_ratio (float): Reflected fraction, clamped to [0, 1]
    """

    type = 'BeamSplitter'
    checked_params = (('split_ratio', None),)
    serializable_defaults = {
        'split_ratio': 0.5,
    }

    @property
    def effective_ratio(self):
        if not self.param_is_valid(self.split_ratio, 'split_ratio'):
            return 0.0
        return max(0.0, min(1.0, self.split_ratio))

    def interact(self, ray, hit, hit_counts=None):
        ray.terminate('split')
        ratio = self.effective_ratio
        reflected = ray.spawn(hit.point, reflect(ray.direction, hit.normal), ratio)
        transmitted = ray.spawn(hit.point, ray.direction, 1.0 - ratio)
        return [reflected, transmitted]

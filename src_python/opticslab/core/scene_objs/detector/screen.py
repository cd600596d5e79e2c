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

from typing import List, Optional

from ..base_segment_obj import BaseSegmentObj


class Screen(BaseSegmentObj):
    """
    Detector screen.

    Absorbs every ray that hits it and records the hit in the pass counters:
    `hit_counts[id]` counts the rays, and `hit_counts[(id, k)]` sums the
    intensity received by bin k, the screen being split into `num_bins`
    equal bins from p1 to p2. The counters belong to the simulation pass,
    so the screen itself keeps no state between passes.

    Attributes:
        num_bins (int): Number of intensity bins along the screen
    """

    type = 'Screen'
    checked_params = (('num_bins', 1),)
    serializable_defaults = {
        'num_bins': 200,
    }

    def bin_index(self, hit) -> Optional[int]:
        """Bin receiving the hit, or None if binning is unusable."""
        if not self.param_is_valid(self.num_bins, 'num_bins', minimum=1) or self.size <= 0:
            return None
        bins = int(self.num_bins)
        s = hit.context.get('height', 0.0) / self.size + 0.5
        return max(0, min(bins - 1, int(s * bins)))

    def interact(self, ray, hit, hit_counts=None):
        ray.terminate('detected')
        if hit_counts is not None:
            hit_counts[self.id] += 1
            k = self.bin_index(hit)
            if k is not None:
                hit_counts[(self.id, k)] += ray.intensity
        return []

    def intensity_pattern(self, hit_counts) -> List[float]:
        """
        Intensity received per bin during a pass.

        Args:
            hit_counts (collections.Counter): Counters of the pass, e.g. Simulator.hit_counts

        Returns:
            list: One intensity sum per bin, from p1 to p2
        """
        if not self.param_is_valid(self.num_bins, 'num_bins', minimum=1):
            return []
        return [hit_counts[(self.id, k)] for k in range(int(self.num_bins))]

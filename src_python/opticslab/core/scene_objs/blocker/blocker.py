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

from ..base_segment_obj import BaseSegmentObj


class Blocker(BaseSegmentObj):
    """Opaque stop. Absorbs every ray that hits it."""

    type = 'Blocker'

    def interact(self, ray, hit, hit_counts=None):
        ray.terminate('absorbed')
        return []

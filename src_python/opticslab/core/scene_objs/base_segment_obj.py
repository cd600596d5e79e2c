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

from typing import List

from ..geometry import Vector2, ray_segment_intersection
from .base_scene_obj import BaseSceneObj, Hit


class BaseSegmentObj(BaseSceneObj):
    """
    Base class for flat elements modelled as a line segment.

    The segment has length `size`, is centred on `pos` and runs along the
    direction `angle`. Mirrors, lenses, splitters, gratings, polarizers and
    blockers all share this geometry.
    """

    type = 'BaseSegmentObj'
    is_optical = True

    @property
    def tangent(self) -> Vector2:
        """Unit vector along the segment, from p1 to p2."""
        return Vector2.from_angle(self.angle)

    @property
    def p1(self) -> Vector2:
        return self.pos.subtract(self.tangent.multiply(self.size / 2))

    @property
    def p2(self) -> Vector2:
        return self.pos.add(self.tangent.multiply(self.size / 2))

    def normal_facing(self, direction: Vector2) -> Vector2:
        """Unit normal of the segment pointing back against `direction`."""
        normal = self.tangent.perpendicular()
        if normal.dot(direction) > 0:
            normal = -normal
        return normal

    def intersect(self, origin: Vector2, direction: Vector2) -> List[Hit]:
        if self.size <= 0:
            return []
        result = ray_segment_intersection(origin, direction, self.p1, self.p2)
        if result is None:
            return []
        distance, s = result
        point = origin.add(direction.multiply(distance))
        return [Hit(
            distance=distance,
            point=point,
            normal=self.normal_facing(direction),
            context={'height': (s - 0.5) * self.size},
        )]

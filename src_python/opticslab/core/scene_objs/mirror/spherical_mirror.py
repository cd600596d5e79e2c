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
from typing import List, Optional

from ...constants import MIN_RAY_SEGMENT_LENGTH
from ...geometry import Vector2, reflect, ray_segment_intersection
from ..base_scene_obj import BaseSceneObj, Hit


class SphericalMirror(BaseSceneObj):
    """
    Mirror shaped as a circular arc.

    The arc vertex is at `pos`. The mirror axis points along `angle` + 90
    degrees; the centre of curvature lies `radius` along the axis, so a
    positive radius is concave towards the axis direction and a negative
    radius is convex. The arc spans `central_angle` around the centre
    (2 pi gives a full circle). A radius of None, 0 or infinity makes a flat
    mirror of length `size` along `angle`.

    Reflection is exact about the radial normal; paraxial rays parallel to
    the axis meet at the focal point, half the radius from the vertex.

    Attributes:
        radius (float or None): Signed radius of curvature
        central_angle (float): Angular extent of the arc in radians, in (0, 2 pi]
        reflectivity (float): Fraction of intensity reflected, in [0, 1]
    """

    type = 'SphericalMirror'
    is_optical = True
    checked_params = (('central_angle', 0.0), ('reflectivity', 0.0))
    serializable_defaults = {
        'radius': 200.0,
        'central_angle': math.pi / 2,
        'reflectivity': 1.0,
    }

    @property
    def axis(self) -> Vector2:
        return Vector2.from_angle(self.angle + math.pi / 2)

    @property
    def is_flat(self):
        r = self.radius
        if r is None or isinstance(r, bool) or not isinstance(r, (int, float)):
            return True
        return r == 0 or math.isinf(r) or math.isnan(r)

    @property
    def center(self) -> Optional[Vector2]:
        """Centre of curvature, None for a flat mirror."""
        if self.is_flat:
            return None
        return self.pos.add(self.axis.multiply(self.radius))

    @property
    def focal_length(self) -> Optional[float]:
        return None if self.is_flat else self.radius / 2

    @property
    def half_angle(self) -> float:
        if not self.param_is_valid(self.central_angle, 'central_angle') or self.central_angle <= 0:
            return 0.0
        return min(math.pi, self.central_angle / 2)

    def arc_endpoints(self):
        """The two ends of the arc (or of the flat segment)."""
        if self.is_flat:
            half = Vector2.from_angle(self.angle).multiply(self.size / 2)
            return self.pos.subtract(half), self.pos.add(half)
        to_vertex = self.pos.subtract(self.center)
        return (self.center.add(to_vertex.rotate(-self.half_angle)),
                self.center.add(to_vertex.rotate(self.half_angle)))

    def _on_arc(self, point: Vector2) -> bool:
        radial = point.subtract(self.center).normalize()
        to_vertex = self.pos.subtract(self.center).normalize()
        return radial.dot(to_vertex) >= math.cos(self.half_angle) - 1e-9

    def intersect(self, origin: Vector2, direction: Vector2) -> List[Hit]:
        if self.is_flat:
            p1, p2 = self.arc_endpoints()
            result = ray_segment_intersection(origin, direction, p1, p2)
            if result is None:
                return []
            distance, _ = result
            normal = p2.subtract(p1).perpendicular().normalize()
            if normal.dot(direction) > 0:
                normal = -normal
            return [Hit(distance=distance, point=origin.add(direction.multiply(distance)),
                        normal=normal, surface_id='plane')]

        if self.half_angle <= 0:
            return []
        center = self.center
        r = abs(self.radius)
        to_origin = origin.subtract(center)
        b = to_origin.dot(direction)
        c = to_origin.magnitude_squared() - r * r
        discriminant = b * b - c
        if discriminant < 0:
            return []

        root = math.sqrt(discriminant)
        hits = []
        for distance in (-b - root, -b + root):
            if distance <= MIN_RAY_SEGMENT_LENGTH:
                continue
            point = origin.add(direction.multiply(distance))
            if not self._on_arc(point):
                continue
            normal = point.subtract(center).normalize()
            if normal.dot(direction) > 0:
                normal = -normal
            hits.append(Hit(distance=distance, point=point, normal=normal, surface_id='arc'))
        return hits

    def interact(self, ray, hit, hit_counts=None):
        ray.terminate('reflected')
        if not self.param_is_valid(self.reflectivity, 'reflectivity', minimum=0.0):
            return []
        return [ray.spawn(hit.point, reflect(ray.direction, hit.normal), min(1.0, self.reflectivity))]

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
from typing import List

from ...constants import MIN_RAY_SEGMENT_LENGTH
from ...geometry import Vector2, reflect, ray_segment_intersection
from ..base_scene_obj import BaseSceneObj, Hit


class Glass(BaseSceneObj):
    """
    Dielectric body bounded by a closed polygon of straight edges.

    A ray hitting an edge is split by the Fresnel equations into a reflected
    and a refracted ray (Snell's law). Going from the denser side at an angle
    beyond the critical angle, the ray is totally internally reflected.
    Fresnel coefficients are averaged over the s and p polarizations.

    When the scene simulates colors, `ref_index` and `cauchy_b` are the
    Cauchy coefficients A and B (B in um^2): n = A + B / lambda_um^2.
    Otherwise `ref_index` is used for every wavelength.

    Light travelling inside the body is attenuated by
    exp(-absorption_coeff * distance) when it reaches the boundary.

    Attributes:
        path (list): Vertices as {x, y} dicts, in order around the polygon
        ref_index (float): The refractive index, or Cauchy coefficient A if colors are simulated
        cauchy_b (float): Cauchy coefficient B in um^2
        absorption_coeff (float): Attenuation per unit length inside the body
    """

    type = 'Glass'
    is_optical = True
    checked_params = (('ref_index', None), ('cauchy_b', None), ('absorption_coeff', 0.0))
    serializable_defaults = {
        'path': [],
        'ref_index': 1.5,
        'cauchy_b': 0.004,
        'absorption_coeff': 0.0,
    }

    def vertices(self) -> List[Vector2]:
        """Polygon vertices in scene coordinates."""
        return [Vector2.from_point(p) for p in self.path or []]

    def edges(self):
        """(p1, p2) pairs of consecutive vertices, closing the polygon."""
        points = self.vertices()
        if len(points) < 3:
            return []
        return [(points[i], points[(i + 1) % len(points)]) for i in range(len(points))]

    def is_counter_clockwise(self, points) -> bool:
        """Orientation of the polygon from its signed (shoelace) area."""
        area = 0.0
        for i, p in enumerate(points):
            area += p.cross(points[(i + 1) % len(points)])
        return area > 0

    def intersect(self, origin: Vector2, direction: Vector2) -> List[Hit]:
        points = self.vertices()
        if len(points) < 3:
            return []
        ccw = self.is_counter_clockwise(points)

        hits = []
        for i, (p1, p2) in enumerate(self.edges()):
            result = ray_segment_intersection(origin, direction, p1, p2)
            if result is None:
                continue
            distance, _ = result
            point = origin.add(direction.multiply(distance))

            edge = p2.subtract(p1)
            outward = Vector2(edge.y, -edge.x).normalize()
            if not ccw:
                outward = -outward
            near_vertex = (point.distance_to(p1) < MIN_RAY_SEGMENT_LENGTH
                           or point.distance_to(p2) < MIN_RAY_SEGMENT_LENGTH)
            hits.append(Hit(
                distance=distance,
                point=point,
                normal=outward if outward.dot(direction) < 0 else -outward,
                surface_id=f'edge{i}',
                context={
                    # 1: from inside to outside, -1: from outside to inside
                    'incident_type': 1 if direction.dot(outward) > 0 else -1,
                    'near_vertex': near_vertex,
                },
            ))
        hits.sort(key=lambda h: h.distance)
        return hits

    def get_ref_index_at(self, wavelength) -> float:
        """
        Refractive index of the body for a ray of the given wavelength.

        An unusable Cauchy B falls back to `ref_index` alone; an unusable
        `ref_index` is returned unchanged for the caller to reject.
        """
        n = self.ref_index
        if not self.param_is_valid(n, 'ref_index'):
            return n
        if not (self.scene is not None and self.scene.simulate_colors):
            return n
        if not self.param_is_valid(self.cauchy_b, 'cauchy_b') or not wavelength:
            return n
        wavelength_um = wavelength / 1000.0
        return n + self.cauchy_b / (wavelength_um * wavelength_um)

    def absorption_factor(self, distance) -> float:
        if not self.param_is_valid(self.absorption_coeff, 'absorption_coeff', minimum=0.0):
            return 1.0
        return math.exp(-self.absorption_coeff * distance)

    def interact(self, ray, hit, hit_counts=None):
        if hit.context.get('near_vertex'):
            # Refraction is undefined at a corner
            ray.terminate('absorbed')
            return []

        n = self.get_ref_index_at(ray.wavelength)
        if not self.param_is_valid(n, 'ref_index') or n <= 0 or math.isinf(n):
            ray.terminate('transmitted')
            return [ray.spawn(hit.point, ray.direction)]

        incident_type = hit.context.get('incident_type', -1)
        if incident_type == 1:
            # From inside to outside
            n1 = n
            attenuation = self.absorption_factor(hit.distance)
        else:
            # From outside to inside
            n1 = 1 / n
            attenuation = 1.0
        return self.refract(ray, hit, n1, attenuation)

    def refract(self, ray, hit, n1, attenuation=1.0):
        """
        Split a ray at the boundary into its reflected and refracted parts.

        Args:
            ray (Ray): The incoming ray, terminated here
            hit (Hit): Boundary hit; its normal faces the incoming ray
            n1 (float): Relative index n_incident / n_transmitted
            attenuation (float): Fraction of intensity left before the split

        Returns:
            list: The reflected ray (if it carries light), then the refracted ray
                  (omitted on total internal reflection)
        """
        normal = hit.normal
        cos_i = max(0.0, min(1.0, -ray.direction.dot(normal)))
        sin_t_squared = n1 * n1 * (1.0 - cos_i * cos_i)
        reflected_direction = reflect(ray.direction, normal)

        if sin_t_squared >= 1.0:
            ray.terminate('total_internal_reflection')
            return [ray.spawn(hit.point, reflected_direction, attenuation)]

        cos_t = math.sqrt(1.0 - sin_t_squared)
        rs = (n1 * cos_i - cos_t) / (n1 * cos_i + cos_t)
        rp = (n1 * cos_t - cos_i) / (n1 * cos_t + cos_i)
        reflectance = max(0.0, min(1.0, 0.5 * (rs * rs + rp * rp)))

        refracted_direction = ray.direction.multiply(n1).add(normal.multiply(n1 * cos_i - cos_t))

        ray.terminate('refracted')
        new_rays = []
        if reflectance > 0:
            new_rays.append(ray.spawn(hit.point, reflected_direction, attenuation * reflectance))
        new_rays.append(ray.spawn(hit.point, refracted_direction, attenuation * (1.0 - reflectance)))
        return new_rays


class Prism(Glass):
    """
    Isosceles triangular prism.

    The base has length `size` and the apex angle is `apex_angle`. The
    triangle is centred on `pos` with its apex along -y before rotation by
    `angle`.

    Attributes:
        apex_angle (float): Angle at the apex in radians, in (0, pi)
    """

    type = 'Prism'
    checked_params = Glass.checked_params + (('apex_angle', 0.0), ('size', 0.0))
    serializable_defaults = {
        'apex_angle': math.pi / 3,
    }

    def vertices(self) -> List[Vector2]:
        if not (self.param_is_valid(self.apex_angle, 'apex_angle') and 0 < self.apex_angle < math.pi):
            return []
        if not self.param_is_valid(self.size, 'size') or self.size <= 0:
            return []
        half_base = self.size / 2
        height = half_base * math.tan((math.pi - self.apex_angle) / 2)
        local = [Vector2(0, -height / 2), Vector2(-half_base, height / 2), Vector2(half_base, height / 2)]
        return [p.rotate(self.angle).add(self.pos) for p in local]


class DielectricBlock(Glass):
    """
    Rectangular slab of width x height centred on `pos`, rotated by `angle`.

    Attributes:
        width (float): Extent along the rotated x axis
        height (float): Extent along the rotated y axis
    """

    type = 'DielectricBlock'
    checked_params = Glass.checked_params + (('width', 0.0), ('height', 0.0))
    serializable_defaults = {
        'width': 100.0,
        'height': 60.0,
        'absorption_coeff': 0.001,
    }

    def vertices(self) -> List[Vector2]:
        if not (self.param_is_valid(self.width, 'width') and self.param_is_valid(self.height, 'height')):
            return []
        if self.width <= 0 or self.height <= 0:
            return []
        w = self.width / 2
        h = self.height / 2
        local = [Vector2(-w, -h), Vector2(w, -h), Vector2(w, h), Vector2(-w, h)]
        return [p.rotate(self.angle).add(self.pos) for p in local]

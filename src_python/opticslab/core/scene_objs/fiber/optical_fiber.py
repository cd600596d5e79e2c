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
import math
from typing import List, Optional

from ...constants import LENGTH_UNITS_PER_KM, N_AIR
from ...geometry import Vector2, ray_segment_intersection
from ..base_scene_obj import BaseSceneObj, Hit

logger = logging.getLogger(__name__)


class OpticalFiber(BaseSceneObj):
    """
    Step-index optical fiber seen as a pair of faces.

    Light enters through the input facet, a segment of length `facet_length`
    centred on `pos` whose outward normal points along `angle`. The fraction
    coupled into the fiber falls linearly from 1 on axis to 0 at the edge of
    the acceptance cone asin(NA / n_air), and from 1 at the core centre to 0
    at `core_radius`. Coupled light leaves from `output_pos` along
    `output_angle`, attenuated by `intrinsic_efficiency` and by the
    propagation loss over `path_length`.

    Rays that reach the facet but are not coupled are absorbed by it.

    Attributes:
        output_pos (dict or None): Output face position, default 100 units behind the input face
        output_angle (float or None): Emission direction in radians, default along the fiber axis
        numerical_aperture (float): NA of the fiber, in (0, 1]
        core_radius (float): Core radius, in scene length units
        facet_length (float): Length of the input facet
        intrinsic_efficiency (float): Fraction surviving the fiber, in [0, 1]
        loss_db_per_km (float): Propagation loss
        path_length (float or None): Fiber length, default the input/output distance
    """

    type = 'OpticalFiber'
    is_optical = True
    checked_params = (
        ('numerical_aperture', None),
        ('core_radius', None),
        ('intrinsic_efficiency', 0.0),
        ('loss_db_per_km', 0.0),
        ('facet_length', 0.0),
    )
    serializable_defaults = {
        'output_pos': None,
        'output_angle': None,
        'numerical_aperture': 0.22,
        'core_radius': 4.5,
        'facet_length': 15.0,
        'intrinsic_efficiency': 1.0,
        'loss_db_per_km': 0.0,
        'path_length': None,
    }

    DEFAULT_LENGTH = 100.0

    def __init__(self, scene, json_obj=None):
        super().__init__(scene, json_obj)
        if self.output_pos is None:
            self.output_pos = self.pos.subtract(self.input_normal.multiply(self.DEFAULT_LENGTH))
        else:
            self.output_pos = Vector2.from_point(self.output_pos)
        if self.output_angle is None:
            self.output_angle = self.angle + math.pi

    def validate_params(self):
        valid = super().validate_params()
        if self.path_length is not None and not self.param_is_valid(
                self.path_length, 'path_length', minimum=0.0, level=logging.WARNING):
            valid = False
        return valid

    @property
    def input_normal(self) -> Vector2:
        """Outward unit normal of the input facet."""
        return Vector2.from_angle(self.angle)

    @property
    def facet_endpoints(self):
        half = self.input_normal.perpendicular().multiply(self.facet_length / 2)
        return self.pos.subtract(half), self.pos.add(half)

    @property
    def fiber_length(self) -> float:
        """`path_length` when it is a usable length, otherwise the input/output distance."""
        if self.path_length is not None and self.param_is_valid(self.path_length, 'path_length', minimum=0.0):
            return float(self.path_length)
        return self.pos.distance_to(self.output_pos)

    @property
    def acceptance_angle(self) -> Optional[float]:
        """Half-angle of the acceptance cone, or None for an unusable NA."""
        na = self.numerical_aperture
        if not self.param_is_valid(na, 'numerical_aperture') or not 0 < na <= 1:
            return None
        return math.asin(min(1.0, na / N_AIR))

    def angle_factor(self, direction: Vector2) -> float:
        acceptance = self.acceptance_angle
        if acceptance is None:
            return 0.0
        cos_incidence = -direction.dot(self.input_normal)
        min_cos = math.cos(acceptance)
        if cos_incidence < min_cos:
            return 0.0
        return min(1.0, (cos_incidence - min_cos) / (1.0 - min_cos))

    def position_factor(self, point: Vector2) -> float:
        if not self.param_is_valid(self.core_radius, 'core_radius') or self.core_radius <= 0:
            return 0.0
        r = point.distance_to(self.pos)
        if r > self.core_radius:
            return 0.0
        return 1.0 - r / self.core_radius

    def _facet_hit(self, origin: Vector2, direction: Vector2) -> Optional[Hit]:
        if not self.param_is_valid(self.facet_length, 'facet_length') or self.facet_length <= 0:
            return None
        p1, p2 = self.facet_endpoints
        result = ray_segment_intersection(origin, direction, p1, p2)
        if result is None:
            return None
        distance, _ = result
        point = origin.add(direction.multiply(distance))
        normal = self.input_normal
        if normal.dot(direction) > 0:
            normal = -normal
        coupling = self.angle_factor(direction) * self.position_factor(point)
        return Hit(distance=distance, point=point, normal=normal, surface_id='input',
                   context={'coupling_factor': coupling})

    def check_input_coupling(self, origin: Vector2, direction: Vector2) -> float:
        """
        Fraction of a ray that would be coupled into the fiber.

        Args:
            origin: Ray origin
            direction: Unit ray direction

        Returns:
            float: Coupling factor in [0, 1]; 0 if the ray misses the facet
        """
        hit = self._facet_hit(origin, direction)
        if hit is None:
            return 0.0
        return hit.context['coupling_factor']

    def intersect(self, origin: Vector2, direction: Vector2) -> List[Hit]:
        hit = self._facet_hit(origin, direction)
        return [hit] if hit is not None else []

    def transmission_efficiency(self) -> float:
        """Intrinsic efficiency times propagation loss, excluding coupling."""
        intrinsic = self.intrinsic_efficiency
        if not self.param_is_valid(intrinsic, 'intrinsic_efficiency', minimum=0.0):
            return 0.0
        loss_per_km = self.loss_db_per_km
        if not self.param_is_valid(loss_per_km, 'loss_db_per_km', minimum=0.0):
            loss_per_km = 0.0
        loss_db = loss_per_km * self.fiber_length / LENGTH_UNITS_PER_KM
        return min(1.0, intrinsic) * 10 ** (-loss_db / 10)

    def handle_input_interaction(self, ray, hit: Hit, hit_counts=None) -> float:
        """
        Consume a ray at the input facet.

        Args:
            ray (Ray): The incoming ray, terminated here
            hit (Hit): Facet hit from intersect()
            hit_counts (collections.Counter or None): Pass counters; incremented under this fiber's id

        Returns:
            float: Total efficiency (coupling times transmission)
        """
        coupling = hit.context.get('coupling_factor')
        if coupling is None:
            coupling = self.angle_factor(ray.direction) * self.position_factor(hit.point)
        efficiency = coupling * self.transmission_efficiency()

        ray.terminate('coupled_fiber' if efficiency > 0 else 'absorbed')
        if hit_counts is not None:
            hit_counts[self.id] += 1
        return efficiency

    def generate_output_rays(self, ray, efficiency: float) -> list:
        """
        Rays leaving the output face for a consumed input ray.

        Returns:
            list: One ray from `output_pos` along `output_angle`, or none if nothing was coupled
        """
        if efficiency <= 0:
            return []
        return [ray.spawn(self.output_pos, Vector2.from_angle(self.output_angle), efficiency)]

    def interact(self, ray, hit, hit_counts=None):
        efficiency = self.handle_input_interaction(ray, hit, hit_counts)
        logger.debug("OpticalFiber %r: coupled %.4f of ray intensity", self.id, efficiency)
        return self.generate_output_rays(ray, efficiency)

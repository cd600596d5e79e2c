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

from ..base_segment_obj import BaseSegmentObj

logger = logging.getLogger(__name__)


class DiffractionGrating(BaseSegmentObj):
    """
    Transmission diffraction grating.

    For each order m in [min_order, max_order] (the zero order is always
    included) the outgoing angle solves the grating equation

        d * (sin(theta_m) - sin(theta_i)) = m * lambda

    with angles measured from the grating normal. Orders with
    |sin(theta_m)| > 1 are evanescent and skipped. Each emitted order
    carries the weight `order_efficiencies[|m|]`; if the weights over the
    configured range add up to more than 1 they are scaled down so the
    grating never creates energy.

    Attributes:
        groove_period (float): Groove spacing d in um
        min_order (int): Lowest diffraction order
        max_order (int): Highest diffraction order
        order_efficiencies (dict): Intensity weight per |m|
    """

    type = 'DiffractionGrating'
    checked_params = (('groove_period', None), ('min_order', None), ('max_order', None))
    serializable_defaults = {
        'groove_period': 1.0,
        'min_order': -2,
        'max_order': 2,
        'order_efficiencies': {0: 0.6, 1: 0.15, 2: 0.05},
    }

    def orders(self):
        """
        Configured diffraction orders, always including the zero order.

        Unusable order bounds leave only the zero order.
        """
        if not (self.param_is_valid(self.min_order, 'min_order')
                and self.param_is_valid(self.max_order, 'max_order')):
            return [0]
        if math.isinf(self.min_order) or math.isinf(self.max_order):
            return [0]
        return list(range(min(int(self.min_order), 0), max(int(self.max_order), 0) + 1))

    def efficiency(self, order):
        """Configured weight of the given order (0 if not listed)."""
        efficiencies = self.order_efficiencies or {}
        key = abs(order)
        value = efficiencies.get(key, efficiencies.get(str(key), 0.0))
        try:
            return max(0.0, float(value))
        except (TypeError, ValueError):
            logger.warning("DiffractionGrating %r: bad efficiency %r for order %d", self.id, value, order)
            return 0.0

    def order_weights(self):
        """
        Normalized intensity weight for each configured order.

        Returns:
            dict: order -> weight, with weights summing to at most 1
        """
        weights = {m: self.efficiency(m) for m in self.orders()}
        total = sum(weights.values())
        if total > 1.0:
            weights = {m: w / total for m, w in weights.items()}
        return weights

    def diffraction_sines(self, sin_incident, wavelength):
        """
        Sine of the outgoing angle for every configured order.

        Args:
            sin_incident (float): Sine of the incidence angle
            wavelength (float): Wavelength in nm

        Returns:
            dict: order -> sin(theta_m), realizable orders only
        """
        wavelength_um = wavelength / 1000.0
        sines = {}
        for m in self.orders():
            sin_m = sin_incident + m * wavelength_um / self.groove_period
            if abs(sin_m) <= 1.0:
                sines[m] = sin_m
        return sines

    def interact(self, ray, hit, hit_counts=None):
        ray.terminate('diffracted')

        if not self.param_is_valid(self.groove_period, 'groove_period') or self.groove_period <= 0:
            return [ray.spawn(hit.point, ray.direction)]

        forward = -hit.normal
        tangent = self.tangent
        sin_incident = max(-1.0, min(1.0, ray.direction.dot(tangent)))

        weights = self.order_weights()
        new_rays = []
        for m, sin_m in self.diffraction_sines(sin_incident, ray.wavelength).items():
            weight = weights.get(m, 0.0)
            if weight <= 0:
                continue
            cos_m = math.sqrt(max(0.0, 1.0 - sin_m * sin_m))
            direction = forward.multiply(cos_m).add(tangent.multiply(sin_m))
            new_rays.append(ray.spawn(hit.point, direction, weight))
        return new_rays

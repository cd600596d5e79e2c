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

from ...constants import REFERENCE_WAVELENGTH
from ...geometry import Vector2
from ..base_segment_obj import BaseSegmentObj

logger = logging.getLogger(__name__)


class ThinLens(BaseSegmentObj):
    """
    Ideal thin lens.

    The lens is a segment; its optical axis is perpendicular to the segment
    (the segment direction rotated by -90 degrees). A ray crossing the lens
    at height h from the centre is bent with the thin-lens slope rule

        tan(theta_out) = tan(theta_in) - h / f

    measured against the axis on the side the ray is travelling towards, so
    rays parallel to the axis meet at the focal point and rays through the
    centre are undeviated. Positive `focal_length` converges, negative
    diverges; None or 0 leaves rays undeviated.

    When the scene simulates colors, `ref_index` and `cauchy_b` are read as
    the Cauchy coefficients A and B (B in um^2) and the focal length, given at
    550 nm, is scaled by (n(550nm) - 1) / (n(lambda) - 1).

    Attributes:
        focal_length (float or None): Focal length at the reference wavelength
        transmission (float): Fraction of intensity transmitted, in [0, 1]
        ref_index (float): Refractive index (Cauchy A)
        cauchy_b (float): Cauchy coefficient B in um^2
    """

    type = 'ThinLens'
    checked_params = (('transmission', 0.0), ('ref_index', None), ('cauchy_b', None))
    serializable_defaults = {
        'focal_length': 100.0,
        'transmission': 1.0,
        'ref_index': 1.5,
        'cauchy_b': 0.004,
    }

    @property
    def axis(self) -> Vector2:
        """Unit optical axis."""
        tangent = self.tangent
        return Vector2(tangent.y, -tangent.x)

    @property
    def is_flat(self):
        """True when the lens has no optical power."""
        f = self.focal_length
        if f is None or isinstance(f, bool) or not isinstance(f, (int, float)):
            return True
        return f == 0 or math.isinf(f) or math.isnan(f)

    def refractive_index(self, wavelength):
        """Cauchy refractive index at `wavelength` nm.

        Callers check that ref_index and cauchy_b are numbers first.
        """
        wavelength_um = wavelength / 1000.0
        return self.ref_index + self.cauchy_b / (wavelength_um * wavelength_um)

    def effective_focal_length(self, wavelength=None):
        """
        Focal length seen by a ray of the given wavelength.

        Returns:
            float or None: The focal length, or None for a flat lens
        """
        if self.is_flat:
            return None
        f = float(self.focal_length)
        if wavelength is None or not (self.scene is not None and self.scene.simulate_colors):
            return f
        if not (self.param_is_valid(self.ref_index, 'ref_index')
                and self.param_is_valid(self.cauchy_b, 'cauchy_b')):
            return f

        n_ref = self.refractive_index(REFERENCE_WAVELENGTH)
        n = self.refractive_index(wavelength)
        if not (math.isfinite(n_ref) and math.isfinite(n)) or n_ref <= 1 or n <= 1:
            logger.debug("ThinLens %r: unusable refractive index, ignoring dispersion", self.id)
            return f
        return f * (n_ref - 1) / (n - 1)

    def deflect(self, direction, point, focal_length):
        """
        Direction of a ray after crossing the lens at `point`.

        Args:
            direction (Vector2): Incoming unit direction
            point (Vector2): Crossing point on the lens
            focal_length (float or None): Focal length to apply

        Returns:
            Vector2: Outgoing unit direction
        """
        if focal_length is None:
            return direction.copy()

        forward = self.axis
        along = direction.dot(forward)
        if along < 0:
            forward = -forward
            along = -along
        if along < 1e-12:
            return direction.copy()

        tangent = self.tangent
        height = point.subtract(self.pos).dot(tangent)
        slope = direction.dot(tangent) / along - height / focal_length
        return forward.add(tangent.multiply(slope)).normalize()

    def interact(self, ray, hit, hit_counts=None):
        ray.terminate('refracted')
        if not self.param_is_valid(self.transmission, 'transmission', minimum=0.0):
            return []
        focal_length = self.effective_focal_length(ray.wavelength)
        new_direction = self.deflect(ray.direction, hit.point, focal_length)
        return [ray.spawn(hit.point, new_direction, min(1.0, self.transmission))]

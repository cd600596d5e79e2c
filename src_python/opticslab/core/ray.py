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

from .constants import GREEN_WAVELENGTH, MIN_RAY_SEGMENT_LENGTH
from .geometry import Vector2

logger = logging.getLogger(__name__)

_INHERIT = object()


class Ray:
    """
    Representation of a light ray for ray tracing simulation.

    A ray starts at `origin` and travels along a unit `direction`. It carries
    a wavelength, an intensity and an optional linear polarization angle.
    The waypoints it visits are accumulated in `path` (starting with the
    origin) so that a terminated ray can be rendered as a polyline.

    A ray is consumed by the first surface it hits: the surface terminates it
    and may spawn child rays, each one bounce deeper in the lineage.

    Attributes:
        origin (Vector2): Starting point
        direction (Vector2): Unit direction of travel
        wavelength (float): Wavelength in nm
        intensity (float): Intensity, never negative
        bounces (int): Number of interactions in this ray's lineage
        source_id (str or None): Id of the source that emitted the lineage
        polarization_angle (float or None): Polarization axis in radians, None for unpolarized
        terminated (bool): True once the ray has been consumed
        end_reason (str or None): Why the ray was terminated
        path (list): Waypoints (Vector2) visited by this ray
    """

    def __init__(self, origin, direction, wavelength=GREEN_WAVELENGTH, intensity=1.0,
                 bounces=0, source_id=None, polarization_angle=None):
        """
        Initialize a ray.

        Args:
            origin (Vector2 or dict): Starting point
            direction (Vector2 or dict): Direction of travel, normalized here
            wavelength (float): Wavelength in nm (default: 532)
            intensity (float): Intensity (default: 1.0), clamped at 0
            bounces (int): Lineage depth (default: 0)
            source_id (str or None): Emitting source id
            polarization_angle (float or None): Polarization axis, None for unpolarized
        """
        self.origin = Vector2.from_point(origin)
        self.direction = Vector2.from_point(direction).normalize()
        self.wavelength = wavelength
        self.intensity = max(0.0, float(intensity))
        self.bounces = bounces
        self.source_id = source_id
        self.polarization_angle = polarization_angle
        self.terminated = False
        self.end_reason = None
        self.path = [self.origin.copy()]

        # A ray without a direction cannot propagate
        if self.direction.magnitude_squared() == 0:
            self.terminate('zero_direction')

    @property
    def is_polarized(self):
        return self.polarization_angle is not None

    @property
    def end_point(self):
        """The last recorded waypoint."""
        return self.path[-1]

    def point_at(self, distance):
        return self.origin.add(self.direction.multiply(distance))

    def advance(self, distance):
        """
        Append the waypoint origin + direction * distance to the path.

        The origin itself is not moved.

        Args:
            distance (float): Distance along the ray

        Returns:
            Vector2: The appended waypoint
        """
        point = self.point_at(distance)
        self.add_path_point(point)
        return point

    def add_path_point(self, point):
        """
        Append a waypoint unless the ray is terminated or the point repeats the last one.

        Args:
            point (Vector2): The waypoint
        """
        if self.terminated:
            return
        point = Vector2.from_point(point)
        if point.distance_to(self.path[-1]) < MIN_RAY_SEGMENT_LENGTH:
            return
        self.path.append(point)

    def terminate(self, reason=None):
        """
        Mark the ray as consumed. Only the first call has an effect.

        Args:
            reason (str or None): Why the ray stopped (e.g. 'reflected', 'absorbed')
        """
        if self.terminated:
            return
        self.terminated = True
        self.end_reason = reason
        logger.debug("Ray terminated (%s) after %d bounces", reason, self.bounces)

    def spawn(self, new_origin, new_direction, intensity_fraction=1.0,
              polarization_angle=_INHERIT, wavelength=None):
        """
        Create a child ray one bounce deeper in this ray's lineage.

        Args:
            new_origin (Vector2): Start of the child ray
            new_direction (Vector2): Direction of the child ray, normalized
            intensity_fraction (float): Share of this ray's intensity carried by the child
            polarization_angle (float or None): Child polarization; inherited when omitted
            wavelength (float or None): Child wavelength; inherited when None

        Returns:
            Ray: The child ray
        """
        if polarization_angle is _INHERIT:
            polarization_angle = self.polarization_angle
        return Ray(
            new_origin,
            new_direction,
            wavelength=self.wavelength if wavelength is None else wavelength,
            intensity=self.intensity * intensity_fraction,
            bounces=self.bounces + 1,
            source_id=self.source_id,
            polarization_angle=polarization_angle,
        )

    def copy(self):
        """
        Create a copy of this ray, including its path and termination state.

        Returns:
            Ray: A new Ray object with the same properties
        """
        new_ray = Ray(
            self.origin,
            self.direction,
            wavelength=self.wavelength,
            intensity=self.intensity,
            bounces=self.bounces,
            source_id=self.source_id,
            polarization_angle=self.polarization_angle,
        )
        new_ray.path = [p.copy() for p in self.path]
        new_ray.terminated = self.terminated
        new_ray.end_reason = self.end_reason
        return new_ray

    def __repr__(self):
        """String representation for debugging."""
        return (f"Ray(origin={self.origin}, direction={self.direction}, "
                f"intensity={self.intensity:.4f}, wavelength={self.wavelength}, "
                f"bounces={self.bounces}, terminated={self.terminated})")

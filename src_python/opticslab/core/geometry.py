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

"""
2D vector algebra and the line-intersection helpers used by scene objects.

All Vector2 operations return new vectors, except set() which updates in place.
Degenerate inputs never raise: division by zero gives signed infinities and
the zero vector normalizes to itself.
"""

import math

from .constants import MIN_RAY_SEGMENT_LENGTH


class Vector2:
    """
    A 2D vector (or point) with x and y components.

    Attributes:
        x (float): X component
        y (float): Y component
    """

    __slots__ = ('x', 'y')

    def __init__(self, x=0.0, y=0.0):
        self.x = float(x)
        self.y = float(y)

    @staticmethod
    def from_point(obj):
        """
        Build a Vector2 from a Vector2, a {'x', 'y'} dict or an (x, y) pair.

        Args:
            obj: The point-like value to convert

        Returns:
            Vector2: A new vector
        """
        if isinstance(obj, Vector2):
            return obj.copy()
        if isinstance(obj, dict):
            return Vector2(obj.get('x', 0.0), obj.get('y', 0.0))
        x, y = obj
        return Vector2(x, y)

    @staticmethod
    def from_angle(angle):
        """Unit vector pointing at `angle` radians (counter-clockwise from +x)."""
        return Vector2(math.cos(angle), math.sin(angle))

    @staticmethod
    def lerp(a, b, t):
        """Linear interpolation between a and b, with t clamped to [0, 1]."""
        t = max(0.0, min(1.0, t))
        return Vector2(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)

    def add(self, v):
        return Vector2(self.x + v.x, self.y + v.y)

    def subtract(self, v):
        return Vector2(self.x - v.x, self.y - v.y)

    def multiply(self, scalar):
        return Vector2(self.x * scalar, self.y * scalar)

    def divide(self, scalar):
        """
        Divide by a scalar.

        Dividing by zero does not raise: each non-zero component becomes an
        infinity carrying its sign, and zero components stay zero.
        """
        if scalar == 0:
            return Vector2(_signed_infinity(self.x), _signed_infinity(self.y))
        return Vector2(self.x / scalar, self.y / scalar)

    def magnitude(self):
        return math.hypot(self.x, self.y)

    def magnitude_squared(self):
        return self.x * self.x + self.y * self.y

    def normalize(self):
        """Unit vector in the same direction; the zero vector stays zero."""
        mag = self.magnitude()
        if mag == 0:
            return Vector2(0.0, 0.0)
        return Vector2(self.x / mag, self.y / mag)

    def dot(self, v):
        return self.x * v.x + self.y * v.y

    def cross(self, v):
        """Scalar 2D cross product (z component of the 3D cross product)."""
        return self.x * v.y - self.y * v.x

    def rotate(self, angle):
        """Rotate counter-clockwise by `angle` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return Vector2(self.x * cos_a - self.y * sin_a,
                       self.x * sin_a + self.y * cos_a)

    def perpendicular(self):
        """This vector rotated by +90 degrees."""
        return Vector2(-self.y, self.x)

    def distance_to(self, v):
        return math.hypot(self.x - v.x, self.y - v.y)

    def distance_squared_to(self, v):
        dx = self.x - v.x
        dy = self.y - v.y
        return dx * dx + dy * dy

    def angle(self):
        """Direction angle in radians, in the range [-pi, pi]."""
        return math.atan2(self.y, self.x)

    def copy(self):
        return Vector2(self.x, self.y)

    def set(self, x, y):
        """Update the components in place and return self."""
        self.x = float(x)
        self.y = float(y)
        return self

    def equals(self, v, tolerance=1e-6):
        return abs(self.x - v.x) <= tolerance and abs(self.y - v.y) <= tolerance

    def is_finite(self):
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_dict(self):
        return {'x': self.x, 'y': self.y}

    def __add__(self, v):
        return self.add(v)

    def __sub__(self, v):
        return self.subtract(v)

    def __mul__(self, scalar):
        return self.multiply(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        return self.divide(scalar)

    def __neg__(self):
        return Vector2(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self):
        return f"Vector2({self.x:.6g}, {self.y:.6g})"


def _signed_infinity(value):
    if value > 0:
        return math.inf
    if value < 0:
        return -math.inf
    return 0.0


def reflect(direction, normal):
    """
    Mirror-reflect a direction about a unit normal: d' = d - 2(d.n)n.

    Args:
        direction (Vector2): Incoming direction
        normal (Vector2): Unit surface normal (either orientation)

    Returns:
        Vector2: The reflected direction, re-normalized
    """
    return direction.subtract(normal.multiply(2 * direction.dot(normal))).normalize()


def ray_line_intersection(origin, direction, point, line_dir):
    """
    Intersect a ray with an infinite line.

    Args:
        origin (Vector2): Ray origin
        direction (Vector2): Ray direction (need not be unit length)
        point (Vector2): Any point on the line
        line_dir (Vector2): Direction of the line

    Returns:
        tuple or None: (t, s) where origin + t*direction == point + s*line_dir,
                       or None if the ray is parallel to the line
    """
    denom = direction.cross(line_dir)
    if abs(denom) < 1e-12:
        return None
    diff = point.subtract(origin)
    t = diff.cross(line_dir) / denom
    s = diff.cross(direction) / denom
    return t, s


def ray_segment_intersection(origin, direction, p1, p2):
    """
    Intersect a ray with the segment p1-p2.

    Hits behind the origin (or closer than MIN_RAY_SEGMENT_LENGTH along a
    unit direction) and hits outside the segment are rejected.

    Args:
        origin (Vector2): Ray origin
        direction (Vector2): Unit ray direction
        p1 (Vector2): First segment endpoint
        p2 (Vector2): Second segment endpoint

    Returns:
        tuple or None: (distance, s) with s in [0, 1] the position along the
                       segment, or None if there is no hit
    """
    result = ray_line_intersection(origin, direction, p1, p2.subtract(p1))
    if result is None:
        return None
    t, s = result
    if t <= MIN_RAY_SEGMENT_LENGTH:
        return None
    if s < -1e-9 or s > 1 + 1e-9:
        return None
    return t, min(1.0, max(0.0, s))

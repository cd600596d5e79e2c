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

import copy
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..geometry import Vector2

logger = logging.getLogger(__name__)


@dataclass
class Hit:
    """
    Result of intersecting a ray with an object's geometry.

    Attributes:
        distance: Distance from the ray origin to the hit point
        point: Hit point
        normal: Unit surface normal at the hit point, facing the incoming ray
        surface_id: Which surface of the object was hit
        context: Extra per-object data needed by interact()
    """
    distance: float
    point: Vector2
    normal: Vector2
    surface_id: str = 'main'
    context: Dict[str, Any] = field(default_factory=dict)


class BaseSceneObj:
    """
    Base class for every element of an optical scene.

    Subclasses declare their defaults in `serializable_defaults`; the dicts
    along the class hierarchy are merged so that each subclass only lists the
    parameters it adds. Values in `json_obj` override the defaults and are
    set as attributes on the instance.

    Attributes:
        scene: The scene this object belongs to
        id (str or None): Identifier, used for hit counters and lookups
        label (str or None): Display label
        pos (Vector2): Reference position
        angle (float): Orientation in radians
        size (float): Extent (segment length or aperture)
        selected (bool): Selection flag, used by LensImaging
        enabled (bool): Disabled objects are ignored by the simulator
    """

    type = 'BaseSceneObj'
    is_optical = False
    is_source = False
    # (name, minimum) of numeric parameters checked once at construction
    checked_params = ()
    serializable_defaults = {
        'id': None,
        'label': None,
        'pos': {'x': 0.0, 'y': 0.0},
        'angle': 0.0,
        'size': 100.0,
        'selected': False,
        'enabled': True,
    }

    def __init__(self, scene, json_obj=None):
        """
        Initialize the object from its descriptor.

        Args:
            scene: The scene this object belongs to (may be None).
            json_obj: Optional dict of properties overriding the defaults.
        """
        self.scene = scene
        json_obj = json_obj or {}

        for key, default in self.get_serializable_defaults().items():
            value = json_obj.get(key, default)
            setattr(self, key, copy.deepcopy(value))

        self.pos = Vector2.from_point(self.pos)
        self.validate_params()

    @classmethod
    def get_serializable_defaults(cls) -> Dict[str, Any]:
        """Merge `serializable_defaults` from the base class down to cls."""
        merged = {}
        for klass in reversed(cls.__mro__):
            merged.update(klass.__dict__.get('serializable_defaults', {}))
        return merged

    def serialize(self) -> Dict[str, Any]:
        """Descriptor dict for this object, including its type tag."""
        data = {'type': self.type}
        for key in self.get_serializable_defaults():
            value = getattr(self, key)
            data[key] = value.to_dict() if isinstance(value, Vector2) else copy.deepcopy(value)
        return data

    def intersect(self, origin: Vector2, direction: Vector2) -> List[Hit]:
        """
        Intersect a ray with this object.

        Args:
            origin: Ray origin
            direction: Unit ray direction

        Returns:
            Hits sorted by ascending distance; empty if the ray misses.
        """
        return []

    def interact(self, ray, hit: Hit, hit_counts=None) -> list:
        """
        Consume a ray that hit this object and return the rays it produces.

        The incoming ray is always terminated.

        Args:
            ray (Ray): The incoming ray
            hit (Hit): The hit returned by intersect()
            hit_counts (collections.Counter or None): Per-pass diagnostic counters

        Returns:
            list: New rays (empty for absorption)
        """
        ray.terminate('absorbed')
        return []

    def generate_rays(self) -> list:
        """Rays emitted at the start of a simulation pass (sources only)."""
        return []

    def validate_params(self) -> bool:
        """
        Check every parameter listed in `checked_params`, warning about each unusable one.

        Returns:
            bool: True if all of them are usable
        """
        valid = True
        for name, minimum in self.checked_params:
            if not self.param_is_valid(getattr(self, name), name, minimum, level=logging.WARNING):
                valid = False
        return valid

    def param_is_valid(self, value, name: str, minimum: Optional[float] = None,
                       level: int = logging.DEBUG) -> bool:
        """
        Check that a numeric parameter is usable, logging when it is not.

        Used to degrade gracefully on bad parameters instead of raising.
        Checks made while tracing log at debug level; validate_params()
        reports the same problems once, at warning level.

        Args:
            value: The parameter value
            name: Parameter name, for the log message
            minimum: Smallest accepted value, if any
            level: Logging level for the report

        Returns:
            bool: True if the value is a number, not NaN and not below minimum
        """
        if value is None or isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
            logger.log(level, "%s %r: parameter %s=%r is not a number", self.type, self.id, name, value)
            return False
        if minimum is not None and value < minimum:
            logger.log(level, "%s %r: parameter %s=%r is below %s", self.type, self.id, name, value, minimum)
            return False
        return True

    def __repr__(self):
        return f"{self.type}(id={self.id!r}, pos={self.pos}, angle={self.angle:.4f})"

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

from .constants import (
    DEFAULT_MAX_BOUNCES,
    DEFAULT_MAX_RAYS,
    DEFAULT_MIN_INTENSITY,
    DEFAULT_MODE,
    SIMULATION_MODES,
)
from .scene_objs import create_scene_obj

logger = logging.getLogger(__name__)


def _parse_bool(value):
    """Read a flag given as a bool, a number or the strings 'true'/'false' (any case)."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == 'true':
            return True
        if lowered == 'false':
            return False
        raise ValueError(f"expected 'true' or 'false', got {value!r}")
    return bool(value)


# External setting name -> (attribute, type)
_SETTINGS = {
    'maxRays': ('max_rays', int),
    'maxBounces': ('max_bounces', int),
    'minIntensity': ('min_intensity', float),
    'mode': ('mode', str),
    'simulateColors': ('simulate_colors', _parse_bool),
}


class Scene:
    """
    Container for scene objects and simulation settings.

    This class owns the ordered list of optical elements and the settings
    record that bounds a simulation pass. Declaration order matters: the
    simulator breaks distance ties in favour of the earlier object.

    Attributes:
        objs (list): All objects in the scene, in declaration order
        optical_objs (list): Only optical objects (those with is_optical=True)
        max_rays (int): Maximum number of rays admitted in one pass
        max_bounces (int): Maximum interaction depth of a ray lineage
        min_intensity (float): Rays dimmer than this are dropped
        mode (str): Simulation mode ('ray_trace' or 'wave'); only 'ray_trace' is traced
        simulate_colors (bool): Whether to simulate wavelength-dependent behavior
        error (str or None): Error message if simulation encountered an error
        warning (str or None): Warning message if simulation has warnings
    """

    def __init__(self):
        """Initialize an empty scene with default settings."""
        self.objs = []
        self.optical_objs = []
        self.max_rays = DEFAULT_MAX_RAYS
        self.max_bounces = DEFAULT_MAX_BOUNCES
        self.min_intensity = DEFAULT_MIN_INTENSITY
        self.mode = DEFAULT_MODE
        self.simulate_colors = False
        self.error = None
        self.warning = None

    @classmethod
    def from_descriptors(cls, components, settings=None):
        """
        Build a scene from an ordered list of object descriptors.

        Args:
            components (list): Descriptor dicts, each with a 'type' tag
            settings (dict or None): Settings record, see apply_settings()

        Returns:
            Scene: The populated scene
        """
        scene = cls()
        if settings:
            scene.apply_settings(settings)
        scene.load_descriptors(components)
        return scene

    def apply_settings(self, settings):
        """
        Apply a settings record.

        Keys may be given in camelCase (maxRays, maxBounces, minIntensity,
        mode, simulateColors) or as the matching attribute names. Unknown keys
        are ignored.

        Args:
            settings (dict): The settings record

        Raises:
            ValueError: If a value cannot be converted, the mode is unknown
                or a budget is negative
        """
        for key, (attr, kind) in _SETTINGS.items():
            if key in settings:
                value = settings[key]
            elif attr in settings:
                value = settings[attr]
            else:
                continue
            try:
                value = kind(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid value for setting {key!r}: {value!r}") from e
            setattr(self, attr, value)

        if self.mode not in SIMULATION_MODES:
            raise ValueError(f"Unknown simulation mode {self.mode!r}, expected one of {SIMULATION_MODES}")
        for attr in ('max_rays', 'max_bounces', 'min_intensity'):
            if getattr(self, attr) < 0:
                raise ValueError(f"Setting {attr} must not be negative")
        logger.debug("Scene settings: max_rays=%d max_bounces=%d min_intensity=%g mode=%s",
                     self.max_rays, self.max_bounces, self.min_intensity, self.mode)

    def load_descriptors(self, components):
        """
        Create and add objects from descriptors, keeping their order.

        Descriptors with an unknown type are skipped.

        Args:
            components (list): Descriptor dicts

        Returns:
            list: The objects that were added
        """
        added = []
        for descriptor in components:
            obj = create_scene_obj(self, descriptor)
            if obj is not None:
                self.add_object(obj)
                added.append(obj)
        logger.info("Loaded %d of %d scene objects", len(added), len(components))
        return added

    @property
    def sources(self):
        """Enabled objects that emit rays."""
        return [obj for obj in self.optical_objs
                if getattr(obj, 'is_source', False) and getattr(obj, 'enabled', True)]

    def get_object(self, obj_id):
        """Return the first object with the given id, or None."""
        for obj in self.objs:
            if getattr(obj, 'id', None) == obj_id:
                return obj
        return None

    def add_object(self, obj):
        """
        Add an object to the scene.

        Automatically adds optical objects (those with is_optical=True)
        to the optical_objs list for efficient simulation.

        Args:
            obj: The scene object to add
        """
        if getattr(obj, 'scene', None) is None:
            obj.scene = self
        self.objs.append(obj)
        if getattr(obj, 'is_optical', False):
            self.optical_objs.append(obj)

    def remove_object(self, obj):
        """
        Remove an object from the scene.

        Args:
            obj: The scene object to remove
        """
        if obj in self.objs:
            self.objs.remove(obj)
        if obj in self.optical_objs:
            self.optical_objs.remove(obj)

    def clear(self):
        """Remove all objects from the scene."""
        self.objs.clear()
        self.optical_objs.clear()
        self.error = None
        self.warning = None

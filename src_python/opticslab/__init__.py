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

"""Light-ray tracing through 2D optical scenes, plus thin-lens imaging."""

from .core.geometry import Vector2
from .core.ray import Ray
from .core.scene import Scene
from .core.simulator import Simulator
from .core.lens_imaging import LensImaging, ImagingResult, DiagramSegment
from .core.scene_objs import COMPONENT_TYPES, create_scene_obj
from .logging_config import setup_logging

__all__ = [
    'Vector2',
    'Ray',
    'Scene',
    'Simulator',
    'LensImaging',
    'ImagingResult',
    'DiagramSegment',
    'COMPONENT_TYPES',
    'create_scene_obj',
    'setup_logging',
]

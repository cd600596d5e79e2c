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
Constants shared by the tracer, the scene objects and the imaging solver.

Kept in one module so that scene objects can read them without importing
the Simulator (avoids circular imports).
"""

# Minimum ray segment length to avoid numerical issues
MIN_RAY_SEGMENT_LENGTH = 1e-6

# Wavelengths (in nanometers)
GREEN_WAVELENGTH = 532  # Default green wavelength for lasers
RED_WAVELENGTH = 650
BLUE_WAVELENGTH = 450
REFERENCE_WAVELENGTH = 550  # Wavelength at which lens focal lengths are specified
WHITE_LIGHT_WAVELENGTHS = (BLUE_WAVELENGTH, GREEN_WAVELENGTH, RED_WAVELENGTH)

# Simulation budgets
DEFAULT_MAX_RAYS = 10000
DEFAULT_MAX_BOUNCES = 500
DEFAULT_MIN_INTENSITY = 1e-4

# Distance a ray travels when it hits nothing
ESCAPE_DISTANCE = 10000.0

SIMULATION_MODES = ('ray_trace', 'wave')
DEFAULT_MODE = 'ray_trace'

# Refractive index of air
N_AIR = 1.000293

# Scene length units are millimetres
LENGTH_UNITS_PER_KM = 1e6

# Tolerance for detecting an object placed at the focal point
FOCAL_TOLERANCE = 1e-6

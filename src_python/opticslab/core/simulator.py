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
from collections import Counter

from .constants import ESCAPE_DISTANCE, MIN_RAY_SEGMENT_LENGTH

logger = logging.getLogger(__name__)


class Simulator:
    """
    Main ray tracing simulation engine.

    This class implements the core ray tracing algorithm that propagates
    rays through a scene containing optical objects. It maintains a queue
    of pending rays and processes them until the queue is empty.

    The simulation uses a breadth-first approach where rays are processed
    in the order they were created, ensuring proper handling of ray trees
    (e.g., a ray splitting at a beam splitter creates child rays). Spawned
    rays go through the same queue instead of being traced recursively, so
    the ray, bounce and intensity budgets are simple admission checks.

    Every ray returned by run() is terminated and covers one straight
    segment of a lineage: from its origin to the surface that consumed it,
    or to ESCAPE_DISTANCE away if it hit nothing.

    Attributes:
        scene (Scene): The scene containing objects and settings
        max_rays (int): Maximum number of rays admitted in one pass
        max_bounces (int): Maximum interaction depth of a lineage
        min_intensity (float): Rays below this intensity are dropped
        escape_distance (float): Length of the final segment of an escaping ray
        pending_rays (list): Queue of rays waiting to be processed
        processed_ray_count (int): Number of rays processed so far
        created_ray_count (int): Number of rays admitted to the queue
        dropped_ray_count (int): Number of rays refused by a budget
        ray_segments (list): Completed rays, in processing order
        hit_counts (Counter): Per-object diagnostic counters for this pass
    """

    def __init__(self, scene, max_rays=None, max_bounces=None, min_intensity=None,
                 escape_distance=ESCAPE_DISTANCE):
        """
        Initialize the simulator.

        Args:
            scene (Scene): The scene to simulate
            max_rays (int or None): Ray budget; defaults to scene.max_rays
            max_bounces (int or None): Bounce budget; defaults to scene.max_bounces
            min_intensity (float or None): Intensity floor; defaults to scene.min_intensity
            escape_distance (float): How far a ray that hits nothing is drawn
        """
        self.scene = scene
        self.max_rays = scene.max_rays if max_rays is None else max_rays
        self.max_bounces = scene.max_bounces if max_bounces is None else max_bounces
        self.min_intensity = scene.min_intensity if min_intensity is None else min_intensity
        self.escape_distance = escape_distance
        self.pending_rays = []
        self.processed_ray_count = 0
        self.created_ray_count = 0
        self.dropped_ray_count = 0
        self.ray_segments = []
        self.hit_counts = Counter()

    def run(self):
        """
        Run the ray tracing simulation.

        This is the main entry point for simulation. It:
        1. Seeds the queue with the rays emitted by every enabled source
        2. Processes all pending rays until the queue is empty
        3. Returns the completed rays for visualization

        Rays added with add_ray() before run() are traced as well.

        Returns:
            list: Terminated Ray objects, each with a path of at least two points
        """
        self.processed_ray_count = 0
        self.created_ray_count = len(self.pending_rays)
        self.dropped_ray_count = 0
        self.ray_segments = []
        self.hit_counts = Counter()
        self.scene.error = None
        self.scene.warning = None

        if self.scene.mode != 'ray_trace':
            self.scene.warning = f"Mode {self.scene.mode!r} is not handled by the ray tracer"
            logger.info("Skipping ray trace in %r mode", self.scene.mode)
            self.pending_rays = []
            return []

        # Manually added rays were admitted by add_ray()
        for source in self.scene.sources:
            for ray in source.generate_rays():
                self._admit(ray)

        self._process_rays()

        logger.info("Simulation finished: %d rays traced, %d dropped by budgets",
                    len(self.ray_segments), self.dropped_ray_count)
        return self.ray_segments

    def _admit(self, ray):
        """
        Queue a ray unless a budget refuses it.

        Budget truncation is deliberate and silent: refused rays are only
        counted and logged at debug level.

        Returns:
            bool: True if the ray was queued
        """
        reason = None
        if ray.terminated:
            reason = ray.end_reason or 'terminated'
        elif self.created_ray_count >= self.max_rays:
            reason = 'max_rays'
        elif ray.bounces > self.max_bounces:
            reason = 'max_bounces'
        elif ray.intensity < self.min_intensity:
            reason = 'min_intensity'

        if reason is not None:
            self.dropped_ray_count += 1
            logger.debug("Dropped ray (%s): %r", reason, ray)
            return False

        self.created_ray_count += 1
        self.pending_rays.append(ray)
        return True

    def _process_rays(self):
        """
        Process all rays in the pending queue.

        For each ray:
        1. Find the nearest intersection with any optical object
        2. Record the hit point on the ray's path
        3. Let the object consume the ray and queue the rays it spawns
        4. If nothing is hit, extend the ray to ESCAPE_DISTANCE and stop it
        """
        while self.pending_rays:
            ray = self.pending_rays.pop(0)  # FIFO queue

            intersection_info = self._find_nearest_intersection(ray)

            if intersection_info is None:
                ray.advance(self.escape_distance)
                ray.terminate('out_of_bounds')
                new_rays = []
            else:
                obj, hit = intersection_info
                ray.add_path_point(hit.point)
                new_rays = obj.interact(ray, hit, self.hit_counts) or []
                # interact() must consume the ray
                ray.terminate(f'hit_{obj.type}')

            self.ray_segments.append(ray)
            self.processed_ray_count += 1

            for new_ray in new_rays:
                self._admit(new_ray)

    def _find_nearest_intersection(self, ray):
        """
        Find the nearest intersection between a ray and all optical objects.

        Hits closer than MIN_RAY_SEGMENT_LENGTH are ignored so that a ray
        leaving a surface does not hit it again. On equal distances the
        object declared first wins.

        Args:
            ray (Ray): The ray to test for intersections

        Returns:
            tuple or None: (object, Hit) if an intersection was found, None otherwise
        """
        nearest_obj = None
        nearest_hit = None

        for obj in self.scene.optical_objs:
            if not getattr(obj, 'enabled', True):
                continue

            for hit in obj.intersect(ray.origin, ray.direction):
                if hit.distance <= MIN_RAY_SEGMENT_LENGTH:
                    continue
                if nearest_hit is None or hit.distance < nearest_hit.distance:
                    nearest_hit = hit
                    nearest_obj = obj
                break

        if nearest_obj is None:
            return None

        return (nearest_obj, nearest_hit)

    def add_ray(self, ray):
        """
        Add a ray to the pending queue.

        Useful for tracing rays that do not come from a source object.
        The ray is subject to the same budgets as spawned rays.

        Args:
            ray (Ray): The ray to add

        Returns:
            bool: True if the ray was queued
        """
        return self._admit(ray)

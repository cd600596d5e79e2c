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
Analytic thin-lens imaging for object/image ray diagrams.

Given a source point (the object tip) and a thin lens, LensImaging computes
the object distance u, the image distance v from 1/f = 1/u + 1/v, the
magnification M = -v/u and the image position, then lays out the three
principal rays (parallel, chief and focal) as drawable segments. It does
not use the tracer and has no side effects.

Sign convention: the optical axis is oriented from the object towards the
lens, so u > 0 for an object in front of the lens and v > 0 for an image on
the far (transmission) side, i.e. a real image.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import FOCAL_TOLERANCE
from .geometry import Vector2, ray_line_intersection
from .scene_objs.glass.thin_lens import ThinLens

logger = logging.getLogger(__name__)

# Below this, an object distance is treated as zero
ZERO_DISTANCE = 1e-9


@dataclass
class ImagingResult:
    """
    Imaging parameters for one object/lens pair.

    Attributes:
        focal_length: Lens focal length, None for a flat lens
        u: Object distance (positive in front of the lens)
        v: Image distance (positive on the transmission side); inf at infinity
        magnification: M = -v/u; inf at infinity
        is_real_image: True for a finite image on the transmission side
        image_at_infinity: True when the object sits at the front focal point
        object_height: Signed object height used for the diagram
        image_height: Signed image height, None at infinity
        obj_base: Foot of the object on the axis
        obj_tip: Object tip used for the diagram
        img_base: Foot of the image on the axis, None at infinity
        img_tip: Image tip, None at infinity
        lens_center: Lens centre
        axis: Unit optical axis, from the object side to the image side
        plane_dir: Unit vector along the lens plane
        front_focal_point: Focal point on the object side, None for a flat lens
        back_focal_point: Focal point on the image side, None for a flat lens
    """
    focal_length: Optional[float]
    u: float
    v: float
    magnification: float
    is_real_image: bool
    image_at_infinity: bool
    object_height: float
    image_height: Optional[float]
    obj_base: Vector2
    obj_tip: Vector2
    img_base: Optional[Vector2]
    img_tip: Optional[Vector2]
    lens_center: Vector2
    axis: Vector2
    plane_dir: Vector2
    front_focal_point: Optional[Vector2] = None
    back_focal_point: Optional[Vector2] = None

    @property
    def is_flat(self):
        return self.focal_length is None

    def description(self):
        """Short description of the image, e.g. 'real, inverted, same size'."""
        if self.image_at_infinity:
            return 'image at infinity'
        parts = ['real' if self.is_real_image else 'virtual',
                 'upright' if self.magnification >= 0 else 'inverted']
        size = abs(self.magnification)
        if size > 1.02:
            parts.append('magnified')
        elif size < 0.98:
            parts.append('reduced')
        else:
            parts.append('same size')
        return ', '.join(parts)


@dataclass
class DiagramSegment:
    """
    One line of a principal-ray diagram.

    Attributes:
        p1: Start point
        p2: End point
        dashed: True for construction lines (virtual paths), False for real light
        role: Which principal ray the segment belongs to: 'parallel', 'chief' or 'focal'
    """
    p1: Vector2
    p2: Vector2
    dashed: bool
    role: str

    @property
    def length(self):
        return self.p1.distance_to(self.p2)


def thin_lens_image(u, f):
    """
    Solve the thin-lens equation 1/f = 1/u + 1/v for v.

    Args:
        u (float): Object distance
        f (float or None): Focal length; None, 0 or inf for a flat lens

    Returns:
        tuple: (v, magnification, image_at_infinity)
    """
    flat = f is None or f == 0 or math.isinf(f)
    if flat:
        return -u, 1.0, False
    if abs(u) < ZERO_DISTANCE:
        return 0.0, 1.0, False
    if abs(u - f) < FOCAL_TOLERANCE:
        return math.inf, math.inf, True

    inverse_v = 1.0 / f - 1.0 / u
    if abs(inverse_v) < ZERO_DISTANCE:
        return math.inf, math.inf, True
    v = 1.0 / inverse_v
    return v, -v / u, False


class LensImaging:
    """
    Object/image solver for a single source and a single thin lens.

    Attributes:
        extension_length (float): Length of the outgoing ray segments drawn past the lens
        min_diagram_height (float): Objects closer to the axis are lifted to this height
    """

    def __init__(self, extension_length=2000.0, min_diagram_height=5.0):
        self.extension_length = extension_length
        self.min_diagram_height = min_diagram_height

    @staticmethod
    def _pick(candidates):
        for obj in candidates:
            if getattr(obj, 'selected', False):
                return obj
        return candidates[0] if candidates else None

    def find_object_source(self, components):
        """The selected source, or the first source if none is selected."""
        return self._pick([c for c in components if getattr(c, 'is_source', False)])

    def find_lens(self, components):
        """The selected thin lens, or the first thin lens if none is selected."""
        return self._pick([c for c in components if isinstance(c, ThinLens)])

    def calculate(self, source, lens) -> Optional[ImagingResult]:
        """
        Compute the imaging parameters of `source` seen through `lens`.

        Args:
            source: Object point, a Vector2 or any object with a `pos`
            lens (ThinLens): The lens

        Returns:
            ImagingResult or None: None if the geometry is not finite
        """
        obj_point = source if isinstance(source, Vector2) else Vector2.from_point(source.pos)
        center = lens.pos.copy()
        if not (obj_point.is_finite() and center.is_finite()):
            logger.debug("LensImaging: non-finite object or lens position")
            return None

        plane_dir = lens.tangent
        axis = lens.axis
        u = center.subtract(obj_point).dot(axis)
        if u < 0:
            axis = -axis
            u = -u

        obj_base = center.subtract(axis.multiply(u))
        object_height = obj_point.subtract(obj_base).dot(plane_dir)
        if abs(object_height) < self.min_diagram_height:
            if abs(object_height) > ZERO_DISTANCE:
                object_height = math.copysign(self.min_diagram_height, object_height)
            else:
                object_height = self.min_diagram_height
        obj_tip = obj_base.add(plane_dir.multiply(object_height))

        f = None if lens.is_flat else float(lens.focal_length)
        v, magnification, at_infinity = thin_lens_image(u, f)

        img_base = img_tip = image_height = None
        if not at_infinity:
            image_height = magnification * object_height
            img_base = center.add(axis.multiply(v))
            img_tip = img_base.add(plane_dir.multiply(image_height))

        front_focal = back_focal = None
        if f is not None:
            front_focal = center.subtract(axis.multiply(f))
            back_focal = center.add(axis.multiply(f))

        result = ImagingResult(
            focal_length=f,
            u=u,
            v=v,
            magnification=magnification,
            is_real_image=(not at_infinity) and v > 0,
            image_at_infinity=at_infinity,
            object_height=object_height,
            image_height=image_height,
            obj_base=obj_base,
            obj_tip=obj_tip,
            img_base=img_base,
            img_tip=img_tip,
            lens_center=center,
            axis=axis,
            plane_dir=plane_dir,
            front_focal_point=front_focal,
            back_focal_point=back_focal,
        )
        logger.debug("LensImaging: f=%s u=%.4g v=%.4g M=%.4g (%s)",
                     f, u, v, magnification, result.description())
        return result

    def _lens_hit(self, result, start, direction):
        """Point where the line start + t*direction (t > 0) crosses the lens plane."""
        crossing = ray_line_intersection(start, direction, result.lens_center, result.plane_dir)
        if crossing is None or crossing[0] <= 0:
            return None
        return start.add(direction.multiply(crossing[0]))

    def _emit(self, segments, result, role, start, hit, dir_out):
        """Segments of one principal ray: incoming leg, outgoing leg and virtual extension."""
        segments.append(DiagramSegment(start, hit, False, role))
        far_end = hit.add(dir_out.multiply(self.extension_length))
        if result.image_at_infinity:
            segments.append(DiagramSegment(hit, far_end, False, role))
        elif result.is_real_image:
            segments.append(DiagramSegment(hit, result.img_tip, False, role))
            segments.append(DiagramSegment(result.img_tip, result.img_tip.add(dir_out.multiply(self.extension_length)), False, role))
        else:
            segments.append(DiagramSegment(hit, far_end, False, role))
            segments.append(DiagramSegment(hit, result.img_tip, True, role))

    def principal_ray_segments(self, result) -> List[DiagramSegment]:
        """
        Lay out the principal rays of a diagram.

        - parallel: leaves the object parallel to the axis and is bent through
          the back focal point (or away from it for a diverging lens)
        - chief: passes undeviated through the lens centre
        - focal: aims at the front focal point and leaves parallel to the axis

        Real light is solid. For a virtual image each outgoing ray also gets a
        dashed back-extension ending at the image tip. No dashed extension is
        drawn when the image is at infinity.

        Args:
            result (ImagingResult): Output of calculate()

        Returns:
            list: DiagramSegment objects, degenerate ones removed
        """
        segments = []
        obj_tip = result.obj_tip
        center = result.lens_center
        axis = result.axis
        f = result.focal_length

        if f is not None:
            hit = self._lens_hit(result, obj_tip, axis)
            if hit is not None:
                if f > 0:
                    dir_out = result.back_focal_point.subtract(hit).normalize()
                else:
                    dir_out = hit.subtract(result.back_focal_point).normalize()
                self._emit(segments, result, 'parallel', obj_tip, hit, dir_out)

        chief_dir = center.subtract(obj_tip).normalize()
        if chief_dir.magnitude_squared() > 0:
            self._emit(segments, result, 'chief', obj_tip, center, chief_dir)

        if f is not None:
            front_focal = result.front_focal_point
            dir_in = front_focal.subtract(obj_tip).normalize()
            hit = self._lens_hit(result, obj_tip, dir_in) if dir_in.magnitude_squared() > 0 else None
            if hit is None and dir_in.magnitude_squared() > 0:
                # Object between the focal point and the lens: the ray comes from F through the object
                hit = self._lens_hit(result, obj_tip, -dir_in)
                if hit is not None:
                    segments.append(DiagramSegment(front_focal, obj_tip, True, 'focal'))
            elif hit is not None and f < 0:
                # Diverging lens: the ray only aims at F beyond the lens
                segments.append(DiagramSegment(hit, front_focal, True, 'focal'))
            if hit is not None:
                self._emit(segments, result, 'focal', obj_tip, hit, axis)

        return [s for s in segments if s.length > 1e-9 and s.p1.is_finite() and s.p2.is_finite()]

    def solve(self, components) -> Tuple[Optional[ImagingResult], List[DiagramSegment]]:
        """
        Find the source and lens among `components`, then solve and lay out the diagram.

        Returns:
            tuple: (ImagingResult or None, list of DiagramSegment)
        """
        source = self.find_object_source(components)
        lens = self.find_lens(components)
        if source is None or lens is None:
            logger.debug("LensImaging: need a source and a thin lens (source=%r, lens=%r)", source, lens)
            return None, []
        result = self.calculate(source, lens)
        if result is None:
            return None, []
        return result, self.principal_ray_segments(result)

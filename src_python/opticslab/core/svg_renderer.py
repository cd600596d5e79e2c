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

import svgwrite

from .geometry import Vector2

logger = logging.getLogger(__name__)

MIN_RAY_OPACITY = 0.02
MAX_RAY_OPACITY = 0.85

ROLE_COLORS = {
    'parallel': '#d62728',
    'chief': '#2ca02c',
    'focal': '#1f77b4',
}

DASH_PATTERN = [4, 3]


def wavelength_to_color(wavelength):
    """
    Approximate display color of a visible wavelength.

    Args:
        wavelength (float): Wavelength in nm

    Returns:
        str: CSS color string 'rgb(r,g,b)'; black outside 380-750 nm
    """
    wl = wavelength
    r = g = b = 0.0
    if 380 <= wl < 440:
        r, b = (440 - wl) / (440 - 380), 1.0
    elif 440 <= wl < 490:
        g, b = (wl - 440) / (490 - 440), 1.0
    elif 490 <= wl < 510:
        g, b = 1.0, (510 - wl) / (510 - 490)
    elif 510 <= wl < 580:
        r, g = (wl - 510) / (580 - 510), 1.0
    elif 580 <= wl < 645:
        r, g = 1.0, (645 - wl) / (645 - 580)
    elif 645 <= wl <= 750:
        r = 1.0

    # Dim the edges of the visible range
    factor = 1.0
    if 380 <= wl < 420:
        factor = 0.3 + 0.7 * (wl - 380) / (420 - 380)
    elif 680 < wl <= 750:
        factor = 0.3 + 0.7 * (750 - wl) / (750 - 680)

    channels = [round(255 * (c * factor) ** 0.8) for c in (r, g, b)]
    return 'rgb({},{},{})'.format(*channels)


def ray_opacity(intensity):
    """Stroke opacity for a ray of the given intensity, in [0.02, 0.85]."""
    return MIN_RAY_OPACITY + (MAX_RAY_OPACITY - MIN_RAY_OPACITY) * math.tanh(2.0 * max(0.0, intensity))


def _xy(point):
    p = Vector2.from_point(point)
    return (p.x, p.y)


class SVGRenderer:
    """
    SVG renderer for traced scenes and lens-imaging diagrams.

    The SVG is organized into three layers:
    - objects: Optical elements (below rays)
    - rays: Light rays and principal-ray diagrams
    - labels: Text annotations (above everything)

    Points may be given as Vector2 or as {'x', 'y'} dicts.

    Attributes:
        width (int): Canvas width in pixels
        height (int): Canvas height in pixels
        viewbox (tuple): SVG viewBox (min_x, min_y, width, height)
        dwg (svgwrite.Drawing): The SVG drawing object
        layer_objects (svgwrite.container.Group): Group for object elements
        layer_rays (svgwrite.container.Group): Group for ray elements
        layer_labels (svgwrite.container.Group): Group for label elements
    """

    def __init__(self, width=800, height=600, viewbox=None):
        """
        Initialize the SVG renderer.

        Args:
            width (int): Canvas width in pixels (default: 800)
            height (int): Canvas height in pixels (default: 600)
            viewbox (tuple or None): SVG viewBox as (min_x, min_y, width, height);
                                     defaults to (0, 0, width, height)
        """
        self.width = width
        self.height = height
        self.viewbox = viewbox if viewbox is not None else (0, 0, width, height)
        self.ray_count = 0

        self.dwg = svgwrite.Drawing(size=(f'{width}px', f'{height}px'), profile='tiny')
        self.dwg.viewbox(*self.viewbox)

        self.dwg.add(self.dwg.rect(
            insert=(self.viewbox[0], self.viewbox[1]),
            size=(self.viewbox[2], self.viewbox[3]),
            fill='white'
        ))

        self.layer_objects = self.dwg.add(self.dwg.g(id='objects'))
        self.layer_rays = self.dwg.add(self.dwg.g(id='rays'))
        self.layer_labels = self.dwg.add(self.dwg.g(id='labels'))

    def draw_ray_path(self, ray, stroke_width=1.5):
        """
        Draw the path of a traced ray as a polyline.

        Color follows the wavelength and opacity follows the intensity.
        Paths with fewer than two finite points are skipped.

        Args:
            ray (Ray): The ray to draw
            stroke_width (float): Line width (default: 1.5)

        Returns:
            bool: True if something was drawn
        """
        points = [(p.x, p.y) for p in ray.path if p.is_finite()]
        if len(points) < 2:
            return False

        polyline = self.dwg.polyline(
            points=points,
            fill='none',
            stroke=wavelength_to_color(ray.wavelength),
            stroke_width=stroke_width,
            stroke_opacity=ray_opacity(ray.intensity),
            id=f'ray-{self.ray_count}-w{ray.wavelength:.0f}'
        )
        self.ray_count += 1
        self.layer_rays.add(polyline)
        return True

    def draw_rays(self, rays, stroke_width=1.5):
        """Draw several ray paths; returns how many were drawn."""
        return sum(1 for ray in rays if self.draw_ray_path(ray, stroke_width))

    def draw_point(self, point, color='black', radius=3, label=None):
        """
        Draw a point (circle).

        Args:
            point (Vector2 or dict): Center
            color (str): Fill color (default: 'black')
            radius (float): Circle radius (default: 3)
            label (str or None): Optional text label to show near point
        """
        x, y = _xy(point)
        self.layer_objects.add(self.dwg.circle(center=(x, y), r=radius, fill=color))

        if label:
            self._draw_label(label, (x + radius + 2, y - radius - 2), color)

    def draw_line_segment(self, p1, p2, color='gray', stroke_width=2, label=None, dashed=False, layer=None):
        """
        Draw a line segment.

        Args:
            p1 (Vector2 or dict): Start point
            p2 (Vector2 or dict): End point
            color (str): Stroke color (default: 'gray')
            stroke_width (float): Line width (default: 2)
            label (str or None): Optional text label at the midpoint
            dashed (bool): Draw with a dash pattern
            layer (Group or None): Target layer (default: objects)
        """
        start = _xy(p1)
        end = _xy(p2)
        line = self.dwg.line(start=start, end=end, stroke=color, stroke_width=stroke_width)
        if dashed:
            line.dasharray(DASH_PATTERN)
        (layer if layer is not None else self.layer_objects).add(line)

        if label:
            mid = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2 - 5)
            self._draw_label(label, mid, color, anchor='middle')

    def draw_lens(self, p1, p2, focal_length, color='blue', label=None):
        """
        Draw an ideal lens with arrows indicating converging/diverging.

        Args:
            p1 (Vector2 or dict): First endpoint of lens
            p2 (Vector2 or dict): Second endpoint of lens
            focal_length (float or None): Positive converges, negative diverges, None is flat
            color (str): Color for lens (default: 'blue')
            label (str or None): Optional label
        """
        self.draw_line_segment(p1, p2, color=color, stroke_width=3, label=label)
        if not focal_length:
            return

        start = Vector2.from_point(p1)
        end = Vector2.from_point(p2)
        along = end.subtract(start)
        if along.magnitude() < 1e-6:
            return
        along = along.normalize()
        across = Vector2(along.y, -along.x)

        arrow_size = 10
        inward = focal_length > 0
        self._draw_arrow_head(start, along if inward else -along, across, arrow_size, color)
        self._draw_arrow_head(end, -along if inward else along, across, arrow_size, color)

    def draw_polygon(self, points, color='#4a90d9', label=None):
        """
        Draw a glass body as a translucent filled polygon.

        Args:
            points (list): Vertices (Vector2 or dict)
            color (str): Outline and fill color
            label (str or None): Optional label at the first vertex
        """
        if len(points) < 3:
            return
        self.layer_objects.add(self.dwg.polygon(
            points=[_xy(p) for p in points],
            fill=color,
            fill_opacity=0.2,
            stroke=color,
            stroke_width=1
        ))
        if label:
            self._draw_label(label, _xy(points[0]), color)

    def draw_arc_mirror(self, obj, color='#555555', label=None, steps=32):
        """
        Draw a spherical mirror as a polyline along its arc.

        Args:
            obj (SphericalMirror): The mirror
            color (str): Stroke color
            label (str or None): Optional label at the vertex
            steps (int): Number of straight pieces approximating the arc
        """
        if obj.is_flat:
            p1, p2 = obj.arc_endpoints()
            self.draw_line_segment(p1, p2, color=color, stroke_width=3, label=label)
            return
        center = obj.center
        to_vertex = obj.pos.subtract(center)
        half = obj.half_angle
        points = [_xy(center.add(to_vertex.rotate(-half + 2 * half * i / steps))) for i in range(steps + 1)]
        self.layer_objects.add(self.dwg.polyline(points=points, stroke=color, stroke_width=3, fill='none'))
        if label:
            self._draw_label(label, _xy(obj.pos), color)

    def _draw_arrow_head(self, tip, pointing, across, size, color):
        """Filled triangle with its tip at `tip`, pointing along `pointing`."""
        back = tip.subtract(pointing.multiply(size))
        points = [
            _xy(tip),
            _xy(back.add(across.multiply(size / 2))),
            _xy(back.subtract(across.multiply(size / 2))),
        ]
        self.layer_objects.add(self.dwg.polygon(points=points, fill=color))

    def _draw_label(self, text, insert, color, anchor='start'):
        self.layer_labels.add(self.dwg.text(
            text,
            insert=insert,
            fill=color,
            font_size='12px',
            font_family='sans-serif',
            text_anchor=anchor
        ))

    def draw_component(self, obj):
        """
        Draw a scene object according to its type.

        Args:
            obj (BaseSceneObj): The object to draw

        Returns:
            bool: False if the type has no drawing
        """
        label = getattr(obj, 'label', None)
        obj_type = obj.type
        if obj_type == 'ThinLens':
            self.draw_lens(obj.p1, obj.p2, None if obj.is_flat else obj.focal_length, label=label)
        elif obj_type == 'Mirror':
            self.draw_line_segment(obj.p1, obj.p2, color='#555555', stroke_width=3, label=label)
        elif obj_type == 'BeamSplitter':
            self.draw_line_segment(obj.p1, obj.p2, color='#6fa8dc', stroke_width=3, label=label)
        elif obj_type == 'DiffractionGrating':
            self.draw_line_segment(obj.p1, obj.p2, color='#8e44ad', stroke_width=2, label=label, dashed=True)
        elif obj_type == 'Polarizer':
            self.draw_line_segment(obj.p1, obj.p2, color='#2e8b57', stroke_width=3, label=label)
        elif obj_type == 'Blocker':
            self.draw_line_segment(obj.p1, obj.p2, color='black', stroke_width=4, label=label)
        elif obj_type == 'Screen':
            self.draw_line_segment(obj.p1, obj.p2, color='#7f8c8d', stroke_width=5, label=label)
        elif obj_type == 'SphericalMirror':
            self.draw_arc_mirror(obj, label=label)
        elif obj_type in ('Glass', 'Prism', 'DielectricBlock'):
            self.draw_polygon(obj.vertices(), label=label)
        elif obj_type == 'OpticalFiber':
            p1, p2 = obj.facet_endpoints
            self.draw_line_segment(p1, p2, color='#e67e22', stroke_width=3, label=label)
            self.draw_line_segment(obj.pos, obj.output_pos, color='#e67e22', stroke_width=1, dashed=True)
            self.draw_point(obj.output_pos, color='#e67e22')
        elif getattr(obj, 'is_source', False):
            self.draw_point(obj.pos, color='red', radius=4, label=label)
        else:
            logger.debug("No SVG drawing for %s", obj_type)
            return False
        return True

    def draw_scene(self, scene, rays=None):
        """
        Draw every object of a scene, then the given traced rays.

        Args:
            scene (Scene): The scene
            rays (list or None): Rays returned by Simulator.run()
        """
        for obj in scene.objs:
            self.draw_component(obj)
        if rays:
            self.draw_rays(rays)

    def draw_imaging_diagram(self, result, segments, stroke_width=1.2):
        """
        Draw a lens-imaging diagram: axis, object, image, focal points and principal rays.

        Args:
            result (ImagingResult): Output of LensImaging.calculate()
            segments (list): DiagramSegment objects from LensImaging.principal_ray_segments()
            stroke_width (float): Line width for the principal rays
        """
        span = max(self.viewbox[2], self.viewbox[3]) * 1.5
        self.draw_line_segment(
            result.lens_center.subtract(result.axis.multiply(span)),
            result.lens_center.add(result.axis.multiply(span)),
            color='#999999', stroke_width=1, dashed=True
        )

        self.draw_line_segment(result.obj_base, result.obj_tip, color='black', stroke_width=2)
        self.draw_point(result.obj_tip, color='black', label='A')

        if result.img_tip is not None and result.img_base is not None:
            color = '#c0392b' if result.is_real_image else '#7f8c8d'
            self.draw_line_segment(result.img_base, result.img_tip, color=color, stroke_width=2,
                                   dashed=not result.is_real_image)
            self.draw_point(result.img_tip, color=color, label="A'")

        if result.front_focal_point is not None:
            self.draw_point(result.front_focal_point, color='#f39c12', label='F')
            self.draw_point(result.back_focal_point, color='#f39c12', label="F'")

        for segment in segments:
            self.draw_line_segment(
                segment.p1, segment.p2,
                color=ROLE_COLORS.get(segment.role, 'gray'),
                stroke_width=stroke_width,
                dashed=segment.dashed,
                layer=self.layer_rays
            )

    def save(self, filename):
        """
        Save the SVG to a file.

        Args:
            filename (str): Output filename (e.g., 'output.svg')
        """
        self.dwg.saveas(filename)

    def to_string(self):
        """
        Get the SVG as a string.

        Returns:
            str: SVG content as XML string
        """
        return self.dwg.tostring()

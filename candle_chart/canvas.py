"""Drawing surface used by plotters.

Canvas coordinates are lengths in points measured from the lower-left corner
of the plotting area. Shapes are clipped against the visible Y extent before
they are filled or stroked.
"""
from __future__ import annotations

from typing import List, NamedTuple, Optional, Protocol, Sequence, Tuple

from matplotlib.axes import Axes
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle, Polygon
from matplotlib.transforms import Affine2D

from .config import GlyphStyle, LineStyle

POINTS_PER_INCH = 72.0

# Shared z-order so artists are drawn in the order they were added.
CANVAS_ZORDER = 2.0


class Point(NamedTuple):
    x: float
    y: float


class Canvas(Protocol):
    """Capability consumed by plotters during a draw pass."""

    x_min: float
    y_min: float
    x_max: float
    y_max: float

    def fill_polygon(self, color: str, points: Sequence[Point]) -> None:
        ...

    def stroke_lines(self, style: LineStyle, *lines: Sequence[Point]) -> None:
        ...

    def draw_glyph(self, style: GlyphStyle, point: Point) -> None:
        ...

    def clip_polygon_y(self, points: Sequence[Point]) -> List[Point]:
        ...

    def clip_lines_y(self, *lines: Sequence[Point]) -> List[List[Point]]:
        ...


def _lerp(a: Point, b: Point, t: float) -> Point:
    return Point(a.x + t * (b.x - a.x), a.y + t * (b.y - a.y))


def _clip_segment_y(
    p0: Point, p1: Point, y_min: float, y_max: float
) -> Optional[Tuple[Point, Point]]:
    """Clip one segment to ``y_min <= y <= y_max``; ``None`` if nothing is visible."""

    dy = p1.y - p0.y
    if dy == 0:
        if p0.y < y_min or p0.y > y_max:
            return None
        return p0, p1

    ta = (y_min - p0.y) / dy
    tb = (y_max - p0.y) / dy
    t0 = max(0.0, min(ta, tb))
    t1 = min(1.0, max(ta, tb))
    if t0 > t1:
        return None
    start = p0 if t0 == 0.0 else _lerp(p0, p1, t0)
    end = p1 if t1 == 1.0 else _lerp(p0, p1, t1)
    return start, end


def clip_lines_y(
    y_min: float, y_max: float, *lines: Sequence[Point]
) -> List[List[Point]]:
    """Clip polylines to a horizontal band.

    A polyline leaving and re-entering the band is split into several pieces.
    Zero-length segments inside the band (including on its edge) are kept.
    """

    clipped: List[List[Point]] = []
    for line in lines:
        points = [Point(*p) for p in line]
        piece: List[Point] = []
        for p0, p1 in zip(points, points[1:]):
            segment = _clip_segment_y(p0, p1, y_min, y_max)
            if segment is None:
                continue
            start, end = segment
            if piece and piece[-1] == start:
                piece.append(end)
            else:
                if piece:
                    clipped.append(piece)
                piece = [start, end]
        if piece:
            clipped.append(piece)
    return clipped


def _clip_polygon_edge(points: List[Point], bound: float, keep_above: bool) -> List[Point]:
    def inside(p: Point) -> bool:
        return p.y >= bound if keep_above else p.y <= bound

    def intersect(a: Point, b: Point) -> Point:
        t = (bound - a.y) / (b.y - a.y)
        return Point(a.x + t * (b.x - a.x), bound)

    out: List[Point] = []
    if not points:
        return out
    prev = points[-1]
    for cur in points:
        if inside(cur):
            if not inside(prev):
                out.append(intersect(prev, cur))
            out.append(cur)
        elif inside(prev):
            out.append(intersect(prev, cur))
        prev = cur
    return out


def clip_polygon_y(y_min: float, y_max: float, points: Sequence[Point]) -> List[Point]:
    """Clip a polygon to a horizontal band (Sutherland-Hodgman on both edges).

    Surviving vertices keep their order. A polygon that collapses to a line
    inside the band is returned as is rather than dropped.
    """

    poly = [Point(*p) for p in points]
    poly = _clip_polygon_edge(poly, y_min, keep_above=True)
    return _clip_polygon_edge(poly, y_max, keep_above=False)


class BaseCanvas:
    """Canvas bounds and clipping; subclasses provide the drawing calls."""

    def __init__(self, x_min: float, y_min: float, x_max: float, y_max: float):
        self.x_min = x_min
        self.y_min = y_min
        self.x_max = x_max
        self.y_max = y_max

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def clip_polygon_y(self, points: Sequence[Point]) -> List[Point]:
        return clip_polygon_y(self.y_min, self.y_max, points)

    def clip_lines_y(self, *lines: Sequence[Point]) -> List[List[Point]]:
        return clip_lines_y(self.y_min, self.y_max, *lines)

    def fill_polygon(self, color: str, points: Sequence[Point]) -> None:
        raise NotImplementedError

    def stroke_lines(self, style: LineStyle, *lines: Sequence[Point]) -> None:
        raise NotImplementedError

    def draw_glyph(self, style: GlyphStyle, point: Point) -> None:
        raise NotImplementedError


class AxesCanvas(BaseCanvas):
    """Canvas drawing onto a matplotlib axes, in points from its lower-left corner."""

    def __init__(self, ax: Axes):
        bbox = ax.get_position()
        fig_width, fig_height = ax.figure.get_size_inches()
        width = bbox.width * fig_width * POINTS_PER_INCH
        height = bbox.height * fig_height * POINTS_PER_INCH
        super().__init__(0.0, 0.0, width, height)
        self.ax = ax
        self._transform = Affine2D().scale(1.0 / width, 1.0 / height) + ax.transAxes

    def fill_polygon(self, color: str, points: Sequence[Point]) -> None:
        if len(points) < 3:
            return
        patch = Polygon(
            [tuple(p) for p in points],
            closed=True,
            facecolor=color,
            edgecolor="none",
            linewidth=0.0,
            transform=self._transform,
            clip_on=False,
            zorder=CANVAS_ZORDER,
        )
        self.ax.add_patch(patch)

    def stroke_lines(self, style: LineStyle, *lines: Sequence[Point]) -> None:
        segments = [[tuple(p) for p in line] for line in lines if len(line) >= 2]
        if not segments:
            return
        collection = LineCollection(
            segments,
            colors=style.color,
            linewidths=style.width,
            capstyle="butt",
            joinstyle="miter",
            transform=self._transform,
            clip_on=False,
            zorder=CANVAS_ZORDER,
        )
        self.ax.add_collection(collection, autolim=False)

    def draw_glyph(self, style: GlyphStyle, point: Point) -> None:
        circle = Circle(
            tuple(point),
            radius=style.radius,
            facecolor=style.color,
            edgecolor="none",
            transform=self._transform,
            clip_on=False,
            zorder=CANVAS_ZORDER,
        )
        self.ax.add_patch(circle)

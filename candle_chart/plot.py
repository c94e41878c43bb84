"""Plot object composing plotters, axes, ticks and labels into a figure."""
from __future__ import annotations

import io
import logging
import math
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from PIL import Image

from .canvas import AxesCanvas, Canvas, Point
from .config import DEFAULT_GLYPH_STYLE, DEFAULT_LINE_STYLE, GlyphStyle, LineStyle, PlotConfig
from .ticks import ConstantTicks, DefaultTicks, Tick, Ticker

LOGGER = logging.getLogger(__name__)

# Axes rectangle in figure fractions: left, bottom, width, height.
AXES_RECT: Tuple[float, float, float, float] = (0.1, 0.12, 0.85, 0.78)

Transform = Callable[[float], float]


class Plotter(Protocol):
    def plot(self, canvas: Canvas, p: "Plot") -> None:
        ...


class Axis:
    """Data range, label and ticker of one plot axis."""

    def __init__(self, label: str = ""):
        self.min = math.inf
        self.max = -math.inf
        self.label = label
        self.ticker: Ticker = DefaultTicks()

    def sanitize_range(self) -> None:
        if math.isinf(self.min):
            self.min = 0.0
        if math.isinf(self.max):
            self.max = 0.0
        if self.min > self.max:
            self.min, self.max = self.max, self.min
        if self.min == self.max:
            self.min -= 1
            self.max += 1

    def norm(self, value: float) -> float:
        """Position of ``value`` within the axis range, 0 at min and 1 at max."""

        return (value - self.min) / (self.max - self.min)


class Plot:
    """Collection of plotters drawn in registration order onto one axes."""

    def __init__(self, title: str = "", x_label: str = "", y_label: str = ""):
        self.title = title
        self.x = Axis(x_label)
        self.y = Axis(y_label)
        self.plotters: List[Plotter] = []
        self._nominal_x = False

    def add(self, *plotters: Plotter) -> None:
        """Register plotters and widen the axes to cover their data ranges."""

        for plotter in plotters:
            data_range = getattr(plotter, "data_range", None)
            if data_range is not None:
                xmin, xmax, ymin, ymax = data_range()
                self.x.min = min(self.x.min, xmin)
                self.x.max = max(self.x.max, xmax)
                self.y.min = min(self.y.min, ymin)
                self.y.max = max(self.y.max, ymax)
            self.plotters.append(plotter)

    def nominal_x(self, *labels: str) -> None:
        """Label X positions ``0..n-1`` with the given names."""

        self.x.ticker = ConstantTicks(Tick(float(i), label) for i, label in enumerate(labels))
        self.x.min = min(self.x.min, -0.5)
        self.x.max = max(self.x.max, len(labels) - 0.5)
        self._nominal_x = True

    def transforms(self, canvas: Canvas) -> Tuple[Transform, Transform]:
        """Functions mapping data X and Y values onto the canvas."""

        def tr_x(value: float) -> float:
            return canvas.x_min + self.x.norm(value) * (canvas.x_max - canvas.x_min)

        def tr_y(value: float) -> float:
            return canvas.y_min + self.y.norm(value) * (canvas.y_max - canvas.y_min)

        return tr_x, tr_y

    @staticmethod
    def _apply_ticks(axis, plot_axis: Axis) -> None:
        ticks = plot_axis.ticker.ticks(plot_axis.min, plot_axis.max)
        major = [t for t in ticks if not t.minor]
        axis.set_ticks([t.value for t in major], labels=[t.label for t in major])
        axis.set_ticks([t.value for t in ticks if t.minor], minor=True)

    def draw(self, fig: Figure) -> Axes:
        """Lay out the axes on ``fig`` and run every plotter against it."""

        self.x.sanitize_range()
        self.y.sanitize_range()

        ax = fig.add_axes(AXES_RECT)
        ax.set_xlim(self.x.min, self.x.max)
        ax.set_ylim(self.y.min, self.y.max)
        self._apply_ticks(ax.xaxis, self.x)
        self._apply_ticks(ax.yaxis, self.y)
        if self._nominal_x:
            ax.tick_params(axis="x", which="both", length=0)

        if self.title:
            ax.set_title(self.title)
        ax.set_xlabel(self.x.label)
        ax.set_ylabel(self.y.label)

        canvas = AxesCanvas(ax)
        for plotter in self.plotters:
            plotter.plot(canvas, self)
        return ax

    def render_figure(self, width: float, height: float, dpi: int) -> Figure:
        """Create a pyplot figure and draw the plot on it; the caller closes it."""

        fig = plt.figure(figsize=(width, height), dpi=dpi)
        try:
            self.draw(fig)
        except Exception:
            plt.close(fig)
            raise
        return fig

    def save(
        self,
        path: Optional[str] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        dpi: Optional[int] = None,
        cfg: PlotConfig = PlotConfig(),
    ) -> str:
        """Render and write the plot; the format follows the file extension."""

        path = path or cfg.output
        dpi = dpi or cfg.dpi
        fig = self.render_figure(width or cfg.width, height or cfg.height, dpi)
        try:
            fig.savefig(path, dpi=dpi)
        finally:
            plt.close(fig)
        LOGGER.debug("Saved plot to %s", path)
        return path

    def to_image(
        self,
        width: Optional[float] = None,
        height: Optional[float] = None,
        dpi: Optional[int] = None,
        cfg: PlotConfig = PlotConfig(),
    ) -> Image.Image:
        """Render the plot into an RGB PIL image."""

        dpi = dpi or cfg.dpi
        fig = self.render_figure(width or cfg.width, height or cfg.height, dpi)
        buf = io.BytesIO()
        try:
            fig.savefig(buf, format="png", dpi=dpi)
        finally:
            plt.close(fig)
        buf.seek(0)
        return Image.open(buf).convert("RGB")


def _xy_arrays(xs: Sequence[float], ys: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    x_arr = np.asarray(xs, dtype=float)
    y_arr = np.asarray(ys, dtype=float)
    if x_arr.shape != y_arr.shape:
        raise ValueError(f"x and y must have the same length ({len(x_arr)} != {len(y_arr)}).")
    if x_arr.size == 0:
        raise ValueError("No data points supplied.")
    return x_arr, y_arr


class _XYPlotter:
    def __init__(self, xs: Sequence[float], ys: Sequence[float]):
        self.xs, self.ys = _xy_arrays(xs, ys)

    def data_range(self) -> Tuple[float, float, float, float]:
        return (
            float(self.xs.min()),
            float(self.xs.max()),
            float(self.ys.min()),
            float(self.ys.max()),
        )

    def _points(self, canvas: Canvas, p: Plot) -> List[Point]:
        tr_x, tr_y = p.transforms(canvas)
        return [Point(tr_x(x), tr_y(y)) for x, y in zip(self.xs, self.ys)]


class Line(_XYPlotter):
    """Polyline through the data points."""

    def __init__(self, xs: Sequence[float], ys: Sequence[float], style: LineStyle = DEFAULT_LINE_STYLE):
        super().__init__(xs, ys)
        self.style = style

    def plot(self, canvas: Canvas, p: Plot) -> None:
        canvas.stroke_lines(self.style, *canvas.clip_lines_y(self._points(canvas, p)))


class Scatter(_XYPlotter):
    """One glyph per data point; points outside the visible Y range are skipped."""

    def __init__(self, xs: Sequence[float], ys: Sequence[float], glyph: GlyphStyle = DEFAULT_GLYPH_STYLE):
        super().__init__(xs, ys)
        self.glyph = glyph

    def plot(self, canvas: Canvas, p: Plot) -> None:
        for point in self._points(canvas, p):
            if canvas.y_min <= point.y <= canvas.y_max:
                canvas.draw_glyph(self.glyph, point)

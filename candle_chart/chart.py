"""Candlestick plotter: body and whisker geometry for each period."""
from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence, Tuple

from .candles import CandleCollection
from .canvas import Canvas, Point
from .config import DEFAULT_STYLE, ChartStyle

LOGGER = logging.getLogger(__name__)

# Right-hand margin applied to the X range so the last candle is not clipped.
X_MARGIN_FACTOR = 1.3

DataRange = Tuple[float, float, float, float]
Transform = Callable[[float], float]


class PlotContext(Protocol):
    """Anything able to map data coordinates onto a canvas."""

    def transforms(self, canvas: Canvas) -> Tuple[Transform, Transform]:
        ...


def data_range(collection: CandleCollection) -> DataRange:
    """Bounding box of a candle collection as ``(x_min, x_max, y_min, y_max)``."""

    return 0.0, len(collection) * X_MARGIN_FACTOR, collection.global_low, collection.global_high


class CandleChart:
    """Plotter drawing one candle per period of a :class:`CandleCollection`.

    Candle width is taken from the distance between the first two candles, so
    periods are expected to be uniformly spaced.
    """

    def __init__(self, collection: CandleCollection, style: ChartStyle = DEFAULT_STYLE):
        self.collection = collection
        self.style = style

    @classmethod
    def from_periods(
        cls, periods: Sequence[Sequence[float]], style: ChartStyle = DEFAULT_STYLE
    ) -> "CandleChart":
        return cls(CandleCollection.build(periods), style=style)

    @property
    def min(self) -> float:
        return self.collection.global_low

    @property
    def max(self) -> float:
        return self.collection.global_high

    def data_range(self) -> DataRange:
        return data_range(self.collection)

    def plot(self, canvas: Canvas, plt: PlotContext) -> None:
        """Fill each body, stroke its outline, then stroke the whiskers."""

        candles = self.collection.candles
        if len(candles) < 2:
            LOGGER.debug("Skipping candle chart with %d candle(s).", len(candles))
            return

        tr_x, tr_y = plt.transforms(canvas)
        width = tr_x(candles[1].position) - tr_x(candles[0].position)
        half = width / 2
        outline = self.style.candle_line

        for candle in candles:
            x = tr_x(candle.position)
            low = tr_y(candle.low)
            high = tr_y(candle.high)
            bottom = tr_y(candle.body_low)
            top = tr_y(candle.body_high)

            body = [
                Point(x - half, bottom),
                Point(x - half, top),
                Point(x + half, top),
                Point(x + half, bottom),
                Point(x - half - outline.width / 2, bottom),
            ]
            canvas.fill_polygon(self.style.body_color(candle.down), canvas.clip_polygon_y(body))
            canvas.stroke_lines(outline, *canvas.clip_lines_y(body))

            whiskers = canvas.clip_lines_y(
                [Point(x, top), Point(x, high)],
                [Point(x, high), Point(x, high)],
                [Point(x, bottom), Point(x, low)],
                [Point(x, low), Point(x, low)],
            )
            canvas.stroke_lines(self.style.whisker_line, *whiskers)

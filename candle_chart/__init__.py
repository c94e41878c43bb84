"""Candlestick chart rendering on top of matplotlib."""
from .candles import Candle, CandleCollection, EmptyInputError, new_candle
from .canvas import AxesCanvas, BaseCanvas, Canvas, Point, clip_lines_y, clip_polygon_y
from .chart import CandleChart, data_range
from .config import (
    DEFAULT_STYLE,
    STYLE_PRESETS,
    BarUnit,
    ChartStyle,
    GlyphStyle,
    LineStyle,
    PlotConfig,
    get_style,
    unit_abbreviation,
)
from .helpers import (
    build_candle_plot,
    candle_chart,
    open_image,
    plot_with_scatter,
    plot_xy,
    scatter_xy,
    single_plot,
    single_scatter,
)
from .plot import Axis, Line, Plot, Scatter
from .ticks import ConstantTicks, DefaultTicks, IntegerTicks, Tick, default_ticks

__all__ = [
    "Candle",
    "CandleCollection",
    "EmptyInputError",
    "new_candle",
    "AxesCanvas",
    "BaseCanvas",
    "Canvas",
    "Point",
    "clip_lines_y",
    "clip_polygon_y",
    "CandleChart",
    "data_range",
    "DEFAULT_STYLE",
    "STYLE_PRESETS",
    "BarUnit",
    "ChartStyle",
    "GlyphStyle",
    "LineStyle",
    "PlotConfig",
    "get_style",
    "unit_abbreviation",
    "build_candle_plot",
    "candle_chart",
    "open_image",
    "plot_with_scatter",
    "plot_xy",
    "scatter_xy",
    "single_plot",
    "single_scatter",
    "Axis",
    "Line",
    "Plot",
    "Scatter",
    "ConstantTicks",
    "DefaultTicks",
    "IntegerTicks",
    "Tick",
    "default_ticks",
]

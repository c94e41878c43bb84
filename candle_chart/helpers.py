"""One-call wrappers that build a plot, save it and open it in the OS viewer."""
from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import Optional, Sequence

from .chart import CandleChart
from .config import DEFAULT_STYLE, BarUnit, ChartStyle, GlyphStyle, PlotConfig
from .plot import Line, Plot, Scatter
from .ticks import IntegerTicks

LOGGER = logging.getLogger(__name__)


def open_image(path: str) -> None:
    """Open ``path`` with the platform's default image viewer."""

    LOGGER.info("Opening %s", path)
    if sys.platform == "win32":
        os.startfile(path)  # type: ignore[attr-defined]
        return
    opener = "open" if sys.platform == "darwin" else "xdg-open"
    subprocess.run([opener, path], check=True)


def _finish(plot: Plot, cfg: PlotConfig, show: bool) -> str:
    path = plot.save(cfg=cfg)
    if show:
        open_image(path)
    return path


def _positions(ys: Sequence[float]) -> list:
    return [float(i) for i in range(len(ys))]


def single_plot(ys: Sequence[float], cfg: PlotConfig = PlotConfig(), show: bool = True) -> str:
    """Line plot of ``ys`` against their index."""

    return plot_xy(_positions(ys), ys, cfg=cfg, show=show)


def plot_xy(
    xs: Sequence[float], ys: Sequence[float], cfg: PlotConfig = PlotConfig(), show: bool = True
) -> str:
    plot = Plot()
    plot.add(Line(xs, ys))
    return _finish(plot, cfg, show)


def single_scatter(ys: Sequence[float], cfg: PlotConfig = PlotConfig(), show: bool = True) -> str:
    """Scatter plot of ``ys`` against their index with small markers."""

    plot = Plot()
    plot.add(Scatter(_positions(ys), ys, glyph=GlyphStyle(radius=1.0)))
    return _finish(plot, cfg, show)


def scatter_xy(
    xs: Sequence[float], ys: Sequence[float], cfg: PlotConfig = PlotConfig(), show: bool = True
) -> str:
    plot = Plot()
    plot.add(Scatter(xs, ys, glyph=GlyphStyle(radius=2.0)))
    return _finish(plot, cfg, show)


def plot_with_scatter(
    xs: Sequence[float], ys: Sequence[float], cfg: PlotConfig = PlotConfig(), show: bool = True
) -> str:
    """Markers and a connecting line for the same points."""

    plot = Plot()
    plot.add(Scatter(xs, ys, glyph=GlyphStyle(radius=2.0)))
    plot.add(Line(xs, ys))
    return _finish(plot, cfg, show)


def build_candle_plot(
    labels: Sequence[str],
    periods: Sequence[Sequence[float]],
    bar_unit: BarUnit,
    currency: str = "yen",
    style: ChartStyle = DEFAULT_STYLE,
    title: Optional[str] = "Candle Chart",
) -> Plot:
    """Assemble a candle chart plot with time and price axis labels.

    ``labels`` name the periods along the X axis; ``periods`` holds each
    period's raw price samples in time order.
    """

    plot = Plot(
        title=title or "",
        x_label=f"Time [{bar_unit.label()}]",
        y_label=f"Price [{currency}]",
    )
    chart = CandleChart.from_periods(periods, style=style)
    plot.add(chart)
    plot.y.ticker = IntegerTicks()
    plot.nominal_x(*labels)

    plot.x.min = -0.5
    plot.x.max = len(periods) * 1.1
    return plot


def candle_chart(
    labels: Sequence[str],
    periods: Sequence[Sequence[float]],
    bar_unit: BarUnit,
    currency: str = "yen",
    style: ChartStyle = DEFAULT_STYLE,
    cfg: PlotConfig = PlotConfig(),
    show: bool = True,
) -> str:
    """Save a candle chart of ``periods`` and optionally open it."""

    plot = build_candle_plot(labels, periods, bar_unit, currency=currency, style=style)
    return _finish(plot, cfg, show)

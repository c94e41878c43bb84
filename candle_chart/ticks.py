"""Tick generation for plot axes."""
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol

import numpy as np
from matplotlib.ticker import AutoLocator


@dataclass(frozen=True)
class Tick:
    """A tick mark; minor ticks carry an empty label."""

    value: float
    label: str = ""

    @property
    def minor(self) -> bool:
        return self.label == ""


class Ticker(Protocol):
    def ticks(self, vmin: float, vmax: float) -> List[Tick]:
        ...


def _decimals(step: float) -> int:
    """Number of decimal places needed to print multiples of ``step``."""

    step = float(f"{step:.3g}")
    decimals = max(0, -math.floor(math.log10(step)))
    while decimals < 20:
        scaled = step * 10 ** decimals
        if math.isclose(scaled, round(scaled), rel_tol=1e-9):
            break
        decimals += 1
    return decimals


def _minor_divisions(step: float) -> int:
    mantissa = 10 ** (math.log10(step) % 1)
    return 5 if np.isclose(mantissa, [1.0, 2.5, 5.0, 10.0]).any() else 4


def default_ticks(vmin: float, vmax: float) -> List[Tick]:
    """Labelled major ticks from matplotlib's auto locator plus unlabelled minors.

    Major labels use fixed-point notation with at least one decimal place.
    """

    if vmin > vmax:
        vmin, vmax = vmax, vmin
    span = vmax - vmin
    tol = 1e-10 * max(span, 1.0)

    values = AutoLocator().tick_values(vmin, vmax)
    majors = [float(v) for v in values if vmin - tol <= v <= vmax + tol]

    step: Optional[float] = None
    if len(majors) >= 2:
        step = majors[1] - majors[0]
    precision = max(1, _decimals(step)) if step else 1

    ticks = [Tick(v + 0.0, f"{v + 0.0:.{precision}f}") for v in majors]

    if step:
        ndivs = _minor_divisions(step)
        minor_step = step / ndivs
        origin = majors[0]
        k_lo = math.ceil((vmin - origin) / minor_step - 1e-9)
        k_hi = math.floor((vmax - origin) / minor_step + 1e-9)
        for k in range(k_lo, k_hi + 1):
            if k % ndivs == 0:
                continue
            ticks.append(Tick(origin + k * minor_step))

    ticks.sort(key=lambda t: t.value)
    return ticks


class DefaultTicks:
    """Ticker backed by :func:`default_ticks`."""

    def ticks(self, vmin: float, vmax: float) -> List[Tick]:
        return default_ticks(vmin, vmax)


class ConstantTicks:
    """Ticker returning a fixed set of ticks whatever the axis range."""

    def __init__(self, ticks: Iterable[Tick]):
        self._ticks = list(ticks)

    def ticks(self, vmin: float, vmax: float) -> List[Tick]:
        return list(self._ticks)


class IntegerTicks:
    """Ticker printing labelled ticks as whole numbers.

    Positions come from the wrapped ticker unchanged; minor ticks pass through.
    A labelled tick whose label is not numeric raises ``ValueError``.
    """

    def __init__(self, base: Optional[Ticker] = None):
        self.base = base if base is not None else DefaultTicks()

    def ticks(self, vmin: float, vmax: float) -> List[Tick]:
        ticks = self.base.ticks(vmin, vmax)
        return [self._reformat(tick) for tick in ticks]

    @staticmethod
    def _reformat(tick: Tick) -> Tick:
        if tick.minor:
            return tick
        try:
            value = float(tick.label)
        except ValueError as exc:
            raise ValueError(f"Tick label {tick.label!r} is not a number.") from exc
        return dataclasses.replace(tick, label=f"{value:.0f}")

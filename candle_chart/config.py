"""Configuration objects and shared constants for candlestick chart rendering."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Mapping

LOGGER = logging.getLogger(__name__)

UNIT_SECOND: Final[str] = "second"
UNIT_MINUTE: Final[str] = "minute"
UNIT_HOUR: Final[str] = "hour"
UNIT_DAY: Final[str] = "day"
UNIT_MONTH: Final[str] = "month"
UNIT_YEAR: Final[str] = "year"

# TODO: weekly bars need both an abbreviation and a label layout.
UNIT_ABBREVIATIONS: Final[Mapping[str, str]] = MappingProxyType(
    {
        UNIT_SECOND: "sec",
        UNIT_MINUTE: "min",
        UNIT_HOUR: "hrs",
        UNIT_DAY: "day",
        UNIT_MONTH: "mon",
        UNIT_YEAR: "yr",
    }
)

LABEL_FORMATS: Final[Mapping[str, str]] = MappingProxyType(
    {
        UNIT_SECOND: "%Y-%m-%dT%H:%M:%S",
        UNIT_MINUTE: "%Y-%m-%dT%H:%M",
        UNIT_HOUR: "%Y-%m-%dT%H",
        UNIT_DAY: "%Y-%m-%d",
        UNIT_MONTH: "%Y-%m",
        UNIT_YEAR: "%Y",
    }
)


def unit_abbreviation(unit: str) -> str:
    """Return the short display form of a calendar unit, or ``""`` if unknown."""

    return UNIT_ABBREVIATIONS.get(unit, "")


@dataclass(frozen=True)
class BarUnit:
    """Calendar granularity of one candle, used only for axis label text."""

    count: int
    unit: str

    @property
    def abbreviation(self) -> str:
        return unit_abbreviation(self.unit)

    def label(self) -> str:
        if not self.abbreviation:
            LOGGER.warning("Unrecognised bar unit %r; label will omit the unit.", self.unit)
        return f"{self.count} {self.abbreviation}"


@dataclass(frozen=True)
class LineStyle:
    """Stroke colour and width (in points)."""

    color: str = "black"
    width: float = 1.0


@dataclass(frozen=True)
class GlyphStyle:
    """Marker colour and radius (in points)."""

    color: str = "black"
    radius: float = 2.5


@dataclass(frozen=True)
class ChartStyle:
    """Fill colours and line styles for candle bodies and whiskers."""

    up_color: str = "white"
    down_color: str = "black"
    candle_line: LineStyle = field(default_factory=LineStyle)
    whisker_line: LineStyle = field(default_factory=LineStyle)

    def body_color(self, down: bool) -> str:
        return self.down_color if down else self.up_color


DEFAULT_STYLE: Final[ChartStyle] = ChartStyle()

STYLE_PRESETS: Final[Mapping[str, ChartStyle]] = MappingProxyType(
    {
        "classic": DEFAULT_STYLE,
        "color": ChartStyle(
            up_color="#089981",
            down_color="#f23645",
            candle_line=LineStyle(color="#333333", width=0.8),
            whisker_line=LineStyle(color="#333333", width=0.8),
        ),
    }
)

DEFAULT_GLYPH_STYLE: Final[GlyphStyle] = GlyphStyle()
DEFAULT_LINE_STYLE: Final[LineStyle] = LineStyle()


def get_style(name: str) -> ChartStyle:
    """Look up a style preset by name."""

    try:
        return STYLE_PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown style preset {name!r}; expected one of {sorted(STYLE_PRESETS)}"
        ) from None


@dataclass(frozen=True)
class PlotConfig:
    """Output size (inches), resolution and destination of a saved plot."""

    width: float = 10.0
    height: float = 6.0
    dpi: int = 96
    output: str = "img.png"

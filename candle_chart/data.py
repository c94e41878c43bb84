"""Data acquisition and conversion helpers feeding the candle chart."""
from __future__ import annotations

import logging
import re
from typing import List, Tuple

import pandas as pd
from dateutil import tz
import yfinance as yf

from .config import (
    LABEL_FORMATS,
    UNIT_DAY,
    UNIT_HOUR,
    UNIT_MINUTE,
    UNIT_MONTH,
    UNIT_SECOND,
    UNIT_YEAR,
    BarUnit,
)

LOGGER = logging.getLogger(__name__)

PRICE_COLUMNS: List[str] = ["Open", "High", "Low", "Close"]
REQUIRED_COLUMNS: List[str] = PRICE_COLUMNS + ["Volume"]

# Largest gap between consecutive bars, in bars, accepted by the gap check.
GAP_TOLERANCE_BARS = 5

_INTERVAL_UNITS = {
    "s": UNIT_SECOND,
    "m": UNIT_MINUTE,
    "min": UNIT_MINUTE,
    "h": UNIT_HOUR,
    "d": UNIT_DAY,
    "mo": UNIT_MONTH,
    "month": UNIT_MONTH,
    "y": UNIT_YEAR,
}

# Nominal lengths; months and years are approximated.
_UNIT_DURATIONS = {
    UNIT_SECOND: pd.Timedelta(seconds=1),
    UNIT_MINUTE: pd.Timedelta(minutes=1),
    UNIT_HOUR: pd.Timedelta(hours=1),
    UNIT_DAY: pd.Timedelta(days=1),
    UNIT_MONTH: pd.Timedelta(days=30),
    UNIT_YEAR: pd.Timedelta(days=365),
}


def _to_local_index(df: pd.DataFrame, timezone: str) -> pd.DataFrame:
    """Express the index as naive wall-clock time in ``timezone``."""

    target_tz = tz.gettz(timezone)
    if target_tz is None:
        raise ValueError(f"Unknown timezone: {timezone!r}")
    index = df.index if df.index.tz is not None else df.index.tz_localize(tz.UTC)
    return df.set_axis(index.tz_convert(target_tz).tz_localize(None), axis=0)


def fetch_ohlcv(
    ticker: str, start: str, end: str, interval: str, timezone: str = "UTC"
) -> pd.DataFrame:
    """Download OHLCV bars from Yahoo Finance, sorted, de-duplicated and NaN-free."""

    try:
        raw = yf.download(
            ticker,
            start=start,
            end=end,
            interval=interval,
            auto_adjust=True,
            prepost=False,
            progress=False,
        )
    except Exception as exc:  # pragma: no cover - network path
        raise RuntimeError(f"Failed to download data for {ticker!r}: {exc}") from exc

    # Single-ticker downloads still come back with (field, ticker) columns.
    if isinstance(raw.columns, pd.MultiIndex):
        raw.columns = raw.columns.get_level_values(0)

    if raw.empty:
        raise ValueError(f"No bars returned for {ticker!r} between {start} and {end}.")
    missing_cols = [col for col in REQUIRED_COLUMNS if col not in raw.columns]
    if missing_cols:
        raise ValueError(f"Downloaded data missing required columns: {missing_cols}")
    if not isinstance(raw.index, pd.DatetimeIndex):
        raise TypeError("Expected DatetimeIndex from yfinance download.")

    bars = _to_local_index(raw[REQUIRED_COLUMNS], timezone)
    bars = bars[~bars.index.duplicated(keep="first")].sort_index()
    return bars.dropna(subset=PRICE_COLUMNS)


def bar_unit_from_interval(interval: str) -> BarUnit:
    """Translate an interval string such as ``"5m"`` or ``"1d"`` into a :class:`BarUnit`."""

    match = re.fullmatch(r"(\d+)([a-zA-Z]+)", interval.strip())
    if not match:
        raise ValueError(f"Unsupported interval format: {interval!r}")
    unit = _INTERVAL_UNITS.get(match.group(2).lower())
    if unit is None:
        raise ValueError(f"Unsupported interval unit in {interval!r}")
    return BarUnit(count=int(match.group(1)), unit=unit)


def bar_duration(bar_unit: BarUnit) -> pd.Timedelta:
    """Nominal length of one bar."""

    if bar_unit.unit not in LABEL_FORMATS:
        raise ValueError(f"Bar unit {bar_unit.unit!r} has no known duration.")
    return bar_unit.count * _UNIT_DURATIONS[bar_unit.unit]


def validate_df(df: pd.DataFrame, interval: str, fail_on_gaps: bool) -> None:
    """Check that bars are present and ascending, and optionally that none are missing.

    With ``fail_on_gaps`` a jump of more than ``GAP_TOLERANCE_BARS`` bars of
    ``interval`` between consecutive rows raises ``ValueError``.
    """

    if df.empty:
        raise ValueError("No bars to chart.")
    if not df.index.is_monotonic_increasing:
        raise ValueError("Datetime index must be monotonic increasing.")
    if not fail_on_gaps or len(df) < 2:
        return

    tolerance = GAP_TOLERANCE_BARS * bar_duration(bar_unit_from_interval(interval))
    steps = df.index.to_series().diff().iloc[1:]
    widest = steps.max()
    if widest > tolerance:
        raise ValueError(
            f"Bars at {steps.idxmax()} follow a gap of {widest}, "
            f"more than {GAP_TOLERANCE_BARS} bars of {interval}."
        )


def periods_from_ohlc(df: pd.DataFrame) -> List[List[float]]:
    """Turn each OHLC row into the sample sequence ``[Open, High, Low, Close]``."""

    missing_cols = [col for col in PRICE_COLUMNS if col not in df.columns]
    if missing_cols:
        raise ValueError(f"Dataframe missing price columns: {missing_cols}")
    return df[PRICE_COLUMNS].astype(float).values.tolist()


def period_labels(index: pd.DatetimeIndex, bar_unit: BarUnit) -> List[str]:
    """Format period start times at the resolution of the bar unit."""

    fmt = LABEL_FORMATS.get(bar_unit.unit)
    if fmt is None:
        return [ts.isoformat() for ts in index]
    return [ts.strftime(fmt) for ts in index]


def load_periods_csv(
    path: str, period_col: str = "period", price_col: str = "price"
) -> Tuple[List[str], List[List[float]]]:
    """Read long-form samples (one price per row) grouped by period.

    Periods keep the order in which they first appear in the file. Rows with
    a blank price are dropped; a period left without prices is dropped too.
    """

    df = pd.read_csv(path)
    missing_cols = [col for col in (period_col, price_col) if col not in df.columns]
    if missing_cols:
        raise ValueError(f"CSV {path!r} missing required columns: {missing_cols}")

    df[period_col] = df[period_col].astype(str)
    df[price_col] = pd.to_numeric(df[price_col], errors="raise")

    blank = df[price_col].isna()
    if blank.any():
        LOGGER.warning(
            "Dropping %d row(s) with no price from %s (periods: %s).",
            int(blank.sum()),
            path,
            ", ".join(df.loc[blank, period_col].unique()),
        )
        df = df.loc[~blank]

    grouped = df[price_col].groupby(df[period_col], sort=False)
    labels = df[period_col].drop_duplicates().tolist()
    periods = [grouped.get_group(label).astype(float).tolist() for label in labels]
    return labels, periods

"""Command line interface for rendering candle charts.

Example usage
-------------

* Daily chart downloaded from Yahoo Finance::

    python make_candle_chart.py --ticker 7203.T --start 2024-01-01 --end 2024-03-31 --interval 1d --limit 40 --out chart.png

* Chart of raw samples stored as ``period,price`` rows::

    python make_candle_chart.py --csv samples.csv --bar_count 5 --bar_unit minute --open
"""
from __future__ import annotations

import argparse
import datetime as dt
import logging
from typing import List, Optional, Sequence, Tuple

from .config import STYLE_PRESETS, UNIT_ABBREVIATIONS, BarUnit, PlotConfig, get_style
from .data import (
    bar_unit_from_interval,
    fetch_ohlcv,
    load_periods_csv,
    period_labels,
    periods_from_ohlc,
    validate_df,
)
from .helpers import build_candle_plot, open_image


LOGGER_NAME = "make_candle_chart"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""

    parser = argparse.ArgumentParser(description="Render a candlestick chart to an image file.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", help="CSV of raw samples with 'period' and 'price' columns.")
    source.add_argument("--ticker", help="Ticker symbol to download (e.g. AAPL).")

    parser.add_argument("--start", help="Start date (YYYY-MM-DD), required with --ticker.")
    parser.add_argument("--end", help="End date (YYYY-MM-DD), required with --ticker.")
    parser.add_argument(
        "--interval",
        default="1d",
        help="Sampling interval supported by Yahoo Finance (e.g. 1d, 1h, 5m).",
    )
    parser.add_argument("--timezone", default="UTC", help="Timezone for period labels.")
    parser.add_argument(
        "--fail_on_gaps",
        action="store_true",
        help="Raise an error if large gaps are detected in the downloaded series.",
    )

    parser.add_argument("--bar_count", type=int, default=1, help="Bar multiplier for --csv input.")
    parser.add_argument(
        "--bar_unit",
        choices=sorted(UNIT_ABBREVIATIONS),
        default="day",
        help="Calendar unit of one bar for --csv input.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=0,
        help="Only chart the last N periods (0 = all).",
    )
    parser.add_argument("--currency", default="yen", help="Currency shown on the price axis.")
    parser.add_argument(
        "--style", choices=sorted(STYLE_PRESETS), default="classic", help="Candle style preset."
    )
    parser.add_argument("--title", default="Candle Chart", help="Chart title.")
    parser.add_argument("--width", type=float, default=10.0, help="Image width in inches.")
    parser.add_argument("--height", type=float, default=6.0, help="Image height in inches.")
    parser.add_argument("--dpi", type=int, default=96, help="Output resolution.")
    parser.add_argument("--out", default="img.png", help="Output image path.")
    parser.add_argument(
        "--open",
        dest="open_image",
        action="store_true",
        help="Open the image with the system viewer once written.",
    )
    return parser.parse_args(argv)


def _load_ticker(
    args: argparse.Namespace, logger: logging.Logger
) -> Tuple[List[str], List[List[float]], BarUnit]:
    if not args.start or not args.end:
        raise SystemExit("--start and --end are required with --ticker.")
    try:
        start_dt = dt.datetime.fromisoformat(args.start)
        end_dt = dt.datetime.fromisoformat(args.end)
    except ValueError as exc:
        raise SystemExit(f"Invalid date provided: {exc}")
    if end_dt < start_dt:
        raise SystemExit("End date must be greater than or equal to start date.")

    bar_unit = bar_unit_from_interval(args.interval)
    logger.info(
        "Fetching data for %s from %s to %s at interval %s",
        args.ticker,
        args.start,
        args.end,
        args.interval,
    )
    df = fetch_ohlcv(args.ticker, args.start, args.end, args.interval, timezone=args.timezone)
    logger.info("Downloaded %d rows of data.", len(df))
    validate_df(df, args.interval, args.fail_on_gaps)
    return period_labels(df.index, bar_unit), periods_from_ohlc(df), bar_unit


def _tail(labels: Sequence[str], periods: Sequence[Sequence[float]], limit: int):
    if limit <= 0 or limit >= len(periods):
        return list(labels), list(periods)
    return list(labels[-limit:]), list(periods[-limit:])


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI utility."""

    args = parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    logger = logging.getLogger(LOGGER_NAME)

    if args.csv:
        labels, periods = load_periods_csv(args.csv)
        bar_unit = BarUnit(count=args.bar_count, unit=args.bar_unit)
        logger.info("Loaded %d period(s) from %s", len(periods), args.csv)
    else:
        labels, periods, bar_unit = _load_ticker(args, logger)

    labels, periods = _tail(labels, periods, args.limit)
    if len(periods) < 2:
        logger.warning("Only %d period(s) available; the chart will have no candles.", len(periods))

    plot = build_candle_plot(
        labels,
        periods,
        bar_unit,
        currency=args.currency,
        style=get_style(args.style),
        title=args.title,
    )
    cfg = PlotConfig(width=args.width, height=args.height, dpi=args.dpi, output=args.out)
    path = plot.save(cfg=cfg)
    logger.info("Saved chart to %s", path)

    if args.open_image:
        open_image(path)

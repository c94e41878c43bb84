#!/usr/bin/env python3
"""make_candle_chart.py
=================================

Entry-point script for rendering a candlestick chart to an image file, either
from raw per-period price samples stored in a CSV file or from OHLCV bars
downloaded from Yahoo Finance. The heavy lifting lives in the ``candle_chart``
package.

Example usage
-------------

* Chart of raw samples, five-minute bars::

    python make_candle_chart.py --csv samples.csv --bar_count 5 --bar_unit minute --out chart.png

* Daily chart from Yahoo Finance, opened in the system viewer::

    python make_candle_chart.py --ticker AAPL --start 2024-01-01 --end 2024-03-31 --interval 1d --currency USD --open

The script requires the following packages: ``matplotlib``, ``numpy``,
``pandas``, ``pillow``, ``python-dateutil`` and ``yfinance``.
"""
from __future__ import annotations

from candle_chart.cli import main


if __name__ == "__main__":
    main()

import pandas as pd
import pytest

from candle_chart.candles import CandleCollection
from candle_chart.config import BarUnit
from candle_chart.data import (
    bar_unit_from_interval,
    load_periods_csv,
    period_labels,
    periods_from_ohlc,
    validate_df,
)


def make_df_with_gap():
    index = pd.to_datetime(["2023-01-01", "2023-01-02", "2023-01-10"])
    data = {
        "Open": [1.0, 1.1, 1.2],
        "High": [1.2, 1.3, 1.4],
        "Low": [0.9, 1.0, 1.1],
        "Close": [1.05, 1.15, 1.25],
        "Volume": [1000, 1100, 1200],
    }
    return pd.DataFrame(data, index=index)


def make_valid_df():
    index = pd.date_range("2023-01-01", periods=5, freq="D")
    data = {
        "Open": [1, 2, 3, 4, 5],
        "High": [2, 3, 4, 5, 6],
        "Low": [0.5, 1.5, 2.5, 3.5, 4.5],
        "Close": [1.5, 2.5, 3.5, 4.5, 5.5],
        "Volume": [100, 120, 140, 160, 180],
    }
    return pd.DataFrame(data, index=index)


def test_validate_df_allows_monotonic_without_gaps():
    df = make_valid_df()
    # Should not raise when gaps are allowed.
    validate_df(df, interval="1d", fail_on_gaps=False)
    validate_df(df, interval="1d", fail_on_gaps=True)


def test_validate_df_raises_on_large_gap_when_requested():
    df = make_df_with_gap()
    with pytest.raises(ValueError):
        validate_df(df, interval="1d", fail_on_gaps=True)


def test_validate_df_rejects_unknown_interval_when_failing_on_gaps():
    df = make_valid_df()
    with pytest.raises(ValueError):
        validate_df(df, interval="weird", fail_on_gaps=True)


def test_validate_df_rejects_unsorted_and_empty_frames():
    df = make_valid_df()
    with pytest.raises(ValueError):
        validate_df(df.iloc[::-1], interval="1d", fail_on_gaps=False)
    with pytest.raises(ValueError):
        validate_df(df.iloc[0:0], interval="1d", fail_on_gaps=False)


@pytest.mark.parametrize(
    "interval, expected",
    [
        ("5m", BarUnit(5, "minute")),
        ("15min", BarUnit(15, "minute")),
        ("1h", BarUnit(1, "hour")),
        ("1d", BarUnit(1, "day")),
        ("3mo", BarUnit(3, "month")),
        ("30s", BarUnit(30, "second")),
        ("1y", BarUnit(1, "year")),
    ],
)
def test_bar_unit_from_interval(interval, expected):
    assert bar_unit_from_interval(interval) == expected


@pytest.mark.parametrize("interval", ["", "d", "1wk", "five minutes"])
def test_bar_unit_from_interval_rejects_unsupported(interval):
    with pytest.raises(ValueError):
        bar_unit_from_interval(interval)


def test_periods_from_ohlc_orders_samples_open_high_low_close():
    df = make_valid_df()
    periods = periods_from_ohlc(df)
    assert periods[0] == [1.0, 2.0, 0.5, 1.5]

    collection = CandleCollection.build(periods)
    first = collection[0]
    assert (first.open, first.close, first.low, first.high) == (1.0, 1.5, 0.5, 2.0)
    assert collection.global_low == 0.5
    assert collection.global_high == 6.0


def test_periods_from_ohlc_requires_price_columns():
    df = make_valid_df().drop(columns=["Low"])
    with pytest.raises(ValueError):
        periods_from_ohlc(df)


def test_period_labels_follow_bar_unit():
    index = pd.to_datetime(["2024-03-01 09:05:00", "2024-03-01 09:10:00"])
    assert period_labels(index, BarUnit(5, "minute")) == ["2024-03-01T09:05", "2024-03-01T09:10"]
    assert period_labels(index, BarUnit(1, "month")) == ["2024-03", "2024-03"]
    assert period_labels(index, BarUnit(1, "week"))[0].startswith("2024-03-01T09:05")


def test_load_periods_csv_groups_in_file_order(tmp_path):
    path = tmp_path / "samples.csv"
    path.write_text(
        "period,price\n"
        "b,10\n"
        "b,12\n"
        "a,11\n"
        "b,9\n"
        "a,13\n"
    )
    labels, periods = load_periods_csv(str(path))
    assert labels == ["b", "a"]
    assert periods == [[10.0, 12.0, 9.0], [11.0, 13.0]]


def test_load_periods_csv_requires_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("when,value\nx,1\n")
    with pytest.raises(ValueError):
        load_periods_csv(str(path))


def test_load_periods_csv_drops_blank_prices(tmp_path):
    path = tmp_path / "blanks.csv"
    path.write_text(
        "period,price\n"
        "a,\n"
        "a,10\n"
        "a,11\n"
        "b,11\n"
        "b,\n"
        "b,9\n"
        "c,\n"
    )
    labels, periods = load_periods_csv(str(path))
    assert labels == ["a", "b"]
    assert periods == [[10.0, 11.0], [11.0, 9.0]]

    collection = CandleCollection.build(periods)
    assert (collection[0].open, collection[0].low, collection[0].high) == (10.0, 10.0, 11.0)
    assert (collection.global_low, collection.global_high) == (9.0, 11.0)


def test_validate_df_gap_tolerance_follows_bar_unit():
    index = pd.to_datetime(["2023-01-01 09:00", "2023-01-01 09:25", "2023-01-01 09:55"])
    df = pd.DataFrame({"Open": [1.0, 2.0, 3.0]}, index=index)
    # 30 minutes is within five 10-minute bars but not five 5-minute bars.
    validate_df(df, interval="10m", fail_on_gaps=True)
    with pytest.raises(ValueError):
        validate_df(df, interval="5m", fail_on_gaps=True)


def test_validate_df_single_row_has_no_gaps():
    validate_df(make_valid_df().iloc[:1], interval="1d", fail_on_gaps=True)

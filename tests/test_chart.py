import pytest

from candle_chart.candles import CandleCollection
from candle_chart.canvas import BaseCanvas, Point
from candle_chart.chart import CandleChart, data_range
from candle_chart.config import ChartStyle, LineStyle


SCENARIO = [[10, 12, 9, 11], [11, 10, 13, 9]]


class RecordingCanvas(BaseCanvas):
    """Canvas that records draw calls instead of drawing."""

    def __init__(self, y_min=0.0, y_max=200.0):
        super().__init__(0.0, y_min, 400.0, y_max)
        self.calls = []

    def fill_polygon(self, color, points):
        self.calls.append(("fill", color, list(points)))

    def stroke_lines(self, style, *lines):
        self.calls.append(("stroke", style, [list(line) for line in lines]))

    def draw_glyph(self, style, point):
        self.calls.append(("glyph", style, point))


class FixedTransforms:
    """Plot context mapping position p to 100p and price v to 200 - 10v."""

    def transforms(self, canvas):
        return (lambda x: 100.0 * x), (lambda y: 200.0 - 10.0 * y)


class ExplodingTransforms:
    def transforms(self, canvas):
        raise AssertionError("transforms should not be requested")


def make_chart(periods=SCENARIO, style=None):
    collection = CandleCollection.build(periods)
    return CandleChart(collection, style=style or ChartStyle())


def test_data_range_scenario():
    chart = make_chart()
    xmin, xmax, ymin, ymax = chart.data_range()
    assert xmin == 0
    assert xmax == pytest.approx(2.6)
    assert (ymin, ymax) == (9, 13)


@pytest.mark.parametrize("count", [1, 2, 5, 17])
def test_data_range_pads_x_by_thirty_percent(count):
    collection = CandleCollection.build([[1.0, 2.0]] * count)
    xmin, xmax, _, _ = data_range(collection)
    assert xmin == 0
    assert xmax == count * 1.3


def test_min_max_follow_collection():
    chart = make_chart()
    assert chart.min == 9
    assert chart.max == 13


def test_plot_single_candle_draws_nothing():
    chart = make_chart(periods=[[1, 2, 3]])
    canvas = RecordingCanvas()
    chart.plot(canvas, ExplodingTransforms())
    assert canvas.calls == []


def test_plot_draw_order_per_candle():
    chart = make_chart()
    canvas = RecordingCanvas()
    chart.plot(canvas, FixedTransforms())

    kinds = [(kind, arg) for kind, arg, _ in canvas.calls]
    style = chart.style
    assert kinds == [
        ("fill", "white"),
        ("stroke", style.candle_line),
        ("stroke", style.whisker_line),
        ("fill", "black"),
        ("stroke", style.candle_line),
        ("stroke", style.whisker_line),
    ]


def test_plot_body_geometry_for_up_candle():
    chart = make_chart()
    canvas = RecordingCanvas()
    chart.plot(canvas, FixedTransforms())

    _, _, body = canvas.calls[0]
    # Width is tr(1) - tr(0) = 100, centred on x = tr(0) = 0.
    # Top is tr(close=11) = 90 and bottom tr(open=10) = 100.
    assert body == [
        Point(-50.0, 100.0),
        Point(-50.0, 90.0),
        Point(50.0, 90.0),
        Point(50.0, 100.0),
        Point(-50.5, 100.0),
    ]

    _, _, outline = canvas.calls[1]
    assert outline == [body]


def test_plot_body_geometry_for_down_candle():
    chart = make_chart()
    canvas = RecordingCanvas()
    chart.plot(canvas, FixedTransforms())

    _, color, body = canvas.calls[3]
    assert color == "black"
    xs = {p.x for p in body[:4]}
    ys = {p.y for p in body}
    assert xs == {50.0, 150.0}
    # open=11 -> 90, close=9 -> 110
    assert ys == {90.0, 110.0}


def test_plot_whiskers_include_caps():
    chart = make_chart()
    canvas = RecordingCanvas()
    chart.plot(canvas, FixedTransforms())

    _, _, whiskers = canvas.calls[2]
    assert whiskers == [
        [Point(0.0, 90.0), Point(0.0, 80.0)],
        [Point(0.0, 80.0), Point(0.0, 80.0)],
        [Point(0.0, 100.0), Point(0.0, 110.0)],
        [Point(0.0, 110.0), Point(0.0, 110.0)],
    ]


def test_plot_outline_offset_follows_line_width():
    style = ChartStyle(candle_line=LineStyle(width=4.0))
    chart = make_chart(style=style)
    canvas = RecordingCanvas()
    chart.plot(canvas, FixedTransforms())

    _, _, body = canvas.calls[0]
    assert body[-1] == Point(-52.0, 100.0)


def test_plot_clips_to_visible_y_range():
    chart = make_chart()
    # Visible band 85..95 cuts through the body of the first candle.
    canvas = RecordingCanvas(y_min=85.0, y_max=95.0)
    chart.plot(canvas, FixedTransforms())

    _, _, body = canvas.calls[0]
    assert body
    assert all(85.0 <= p.y <= 95.0 for p in body)
    assert max(p.y for p in body) == 95.0

    _, _, whiskers = canvas.calls[2]
    # Upper whisker 90 -> 80 is cut at 85; lower whisker and both caps vanish.
    assert whiskers == [[Point(0.0, 90.0), Point(0.0, 85.0)]]


def test_plot_keeps_cap_on_canvas_edge():
    chart = make_chart()
    canvas = RecordingCanvas(y_min=80.0, y_max=200.0)
    chart.plot(canvas, FixedTransforms())

    _, _, whiskers = canvas.calls[2]
    assert [Point(0.0, 80.0), Point(0.0, 80.0)] in whiskers


def test_plot_does_not_mutate_collection():
    chart = make_chart()
    before = chart.collection.candles
    chart.plot(RecordingCanvas(), FixedTransforms())
    assert chart.collection.candles == before
    assert (chart.min, chart.max) == (9, 13)

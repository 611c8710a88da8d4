import math

import pytest

from plugins.function_grapher.core import (
    Instruction,
    Operator,
    Program,
    ViewWindow,
    ZOOM_IN_FACTOR,
    ZOOM_OUT_FACTOR,
    compile_expression,
    sample,
    split_segments,
)
from plugins.function_grapher.core.sampler import column_inputs


def test_identity_is_a_straight_diagonal():
    points = sample(compile_expression("x"), 10, 10, (-1, 1), (-1, 1))
    assert len(points) == 11
    assert all(point is not None for point in points)
    xs = [point[0] for point in points]
    ys = [point[1] for point in points]
    assert xs == [float(i) for i in range(11)]
    assert all(b > a for a, b in zip(xs, xs[1:]))
    # Screen y grows downwards, so an increasing function climbs the screen.
    assert all(b < a for a, b in zip(ys, ys[1:]))
    for x, y in zip(xs, ys):
        assert y == pytest.approx(10 - x)
    assert len(split_segments(points, 10)) == 1


def test_column_inputs_cover_the_window():
    xs = column_inputs(4, (-2.0, 2.0))
    assert xs == [-2.0, -1.0, 0.0, 1.0, 2.0]


def test_domain_failures_become_gaps():
    points = sample(compile_expression("sqrt(x)"), 4, 10, (-2, 2), (-1, 1))
    assert points[0] is None and points[1] is None
    assert points[2] == (2.0, 5.0)
    assert all(point is not None for point in points[2:])


def test_malformed_program_yields_gaps_instead_of_aborting(caplog):
    program = Program((Instruction.push_var(), Instruction.apply(Operator.ADD)), source="x +")
    points = sample(program, 4, 4, (-1, 1), (-1, 1))
    assert points == [None] * 5
    assert split_segments(points, 4) == []
    assert "malformed program" in caplog.text


def test_tan_pole_is_never_bridged():
    width, height = 300, 200
    x_range = (0.0, 3.0)
    points = sample(compile_expression("tan(x)"), width, height, x_range, (-10, 10))
    pole_column = (math.pi / 2 - x_range[0]) / (x_range[1] - x_range[0]) * width
    segments = split_segments(points, height)
    assert len(segments) >= 2
    for segment in segments:
        columns = [point[0] for point in segment]
        assert not (min(columns) < pole_column < max(columns))


def test_split_segments_breaks_on_gaps():
    points = [(0.0, 1.0), (1.0, 2.0), None, (3.0, 2.0), (4.0, 3.0)]
    assert split_segments(points, 100) == [[(0.0, 1.0), (1.0, 2.0)], [(3.0, 2.0), (4.0, 3.0)]]


def test_split_segments_breaks_on_large_vertical_jumps():
    points = [(0.0, 5.0), (1.0, 6.0), (2.0, 500.0), (3.0, 501.0)]
    assert split_segments(points, 100) == [[(0.0, 5.0), (1.0, 6.0)], [(2.0, 500.0), (3.0, 501.0)]]


def test_threaded_sampling_matches_serial():
    program = compile_expression("x * sin(x^2)")
    serial = sample(program, 64, 48, (-3, 3), (-3, 3))
    threaded = sample(program, 64, 48, (-3, 3), (-3, 3), workers=4)
    assert serial == threaded


@pytest.mark.parametrize(
    ("width", "height"),
    [(0, 10), (10, 0), (-1, 10), (10.5, 10), (True, 10)],
)
def test_rejects_invalid_canvas_sizes(width, height):
    with pytest.raises(ValueError):
        sample(compile_expression("x"), width, height)


@pytest.mark.parametrize(
    ("x_range", "y_range"),
    [((1, 1), (-1, 1)), ((2, 1), (-1, 1)), ((-1, 1), (0, float("inf"))), ((1,), (-1, 1))],
)
def test_view_window_rejects_degenerate_ranges(x_range, y_range):
    with pytest.raises(ValueError):
        ViewWindow(x_range, y_range)


def test_view_window_zoom_and_reset():
    window = ViewWindow()
    zoomed = window.zoom(0.8)
    assert zoomed.x_range == pytest.approx((-8.0, 8.0))
    assert zoomed.y_range == pytest.approx((-8.0, 8.0))
    shifted = ViewWindow((0, 4), (1, 3)).zoom(1.5)
    assert shifted.x_range == pytest.approx((-1.0, 5.0))
    assert shifted.y_range == pytest.approx((0.5, 3.5))
    assert zoomed.reset() == ViewWindow((-10, 10), (-10, 10))
    assert window.zoom(ZOOM_IN_FACTOR) == zoomed
    assert window.zoom(ZOOM_OUT_FACTOR).x_range == pytest.approx((-12.0, 12.0))
    with pytest.raises(ValueError):
        window.zoom(0)


def test_view_window_pixel_transform():
    window = ViewWindow((-10, 10), (-5, 5))
    assert window.to_pixel_x(0, 200) == 100
    assert window.to_pixel_y(5, 100) == 0
    assert window.to_pixel_y(-5, 100) == 100

import pytest

from ideaboard.canvas.geometry import (
    Point,
    Rect,
    bounding_rect,
    canvas_to_screen,
    clamp_zoom,
    rects_overlap,
    screen_to_canvas,
    snap_to_grid,
    zoom_about,
)


@pytest.mark.parametrize(
    'pan,zoom',
    [
        (Point(0, 0), 1.0),
        (Point(-120.5, 37.25), 0.25),
        (Point(300, -80), 2.5),
        (Point(12, 12), 4.0),
    ],
)
def test_screen_canvas_round_trip(pan, zoom):
    point = Point(123.4, -56.7)
    assert canvas_to_screen(screen_to_canvas(point, pan, zoom), pan, zoom).is_close(point)
    assert screen_to_canvas(canvas_to_screen(point, pan, zoom), pan, zoom).is_close(point)


def test_transform_formula():
    assert canvas_to_screen(Point(10, 20), Point(5, -5), 2.0) == Point(25, 35)
    assert screen_to_canvas(Point(25, 35), Point(5, -5), 2.0) == Point(10, 20)


@pytest.mark.parametrize('old_zoom,new_zoom', [(1.0, 1.1), (2.0, 0.5), (0.3, 4.0)])
def test_zoom_about_keeps_pivot_fixed(old_zoom, new_zoom):
    pan = Point(40, -25)
    pivot = Point(512, 384)
    before = screen_to_canvas(pivot, pan, old_zoom)

    new_pan = zoom_about(pivot, pan, old_zoom, new_zoom)

    assert screen_to_canvas(pivot, new_pan, new_zoom).is_close(before)


def test_clamp_zoom():
    assert clamp_zoom(10, 0.25, 4.0) == 4.0
    assert clamp_zoom(0.01, 0.25, 4.0) == 0.25
    assert clamp_zoom(1.5, 0.25, 4.0) == 1.5


def test_rects_overlap_partial_inside_and_outside():
    box = Rect(0, 0, 100, 100)
    assert rects_overlap(box, Rect(50, 50, 100, 100))
    assert rects_overlap(box, Rect(10, 10, 20, 20))
    assert rects_overlap(Rect(10, 10, 20, 20), box)
    assert not rects_overlap(box, Rect(101, 0, 10, 10))
    assert not rects_overlap(box, Rect(0, 150, 10, 10))


def test_touching_edges_overlap():
    assert rects_overlap(Rect(0, 0, 100, 100), Rect(100, 100, 10, 10))


def test_rect_from_corners_in_any_direction():
    rect = Rect.from_corners(Point(100, 80), Point(20, 10))
    assert rect == Rect(20, 10, 80, 70)
    assert rect.contains(Point(20, 10))
    assert rect.contains(Point(100, 80))
    assert not rect.contains(Point(101, 80))


def test_bounding_rect():
    assert bounding_rect([]) is None
    bounds = bounding_rect([Rect(0, 0, 10, 10), Rect(-5, 20, 10, 10)])
    assert bounds == Rect(-5, 0, 15, 30)
    assert bounds.center == Point(2.5, 15)


def test_snap_to_grid():
    assert snap_to_grid(Point(13, 27), 20) == Point(20, 20)
    assert snap_to_grid(Point(-9, 41), 20) == Point(0, 40)

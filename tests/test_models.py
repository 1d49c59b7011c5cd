from __future__ import annotations

import pytest

from pizarra.core.models import (
    Circle,
    Line,
    Point,
    Rect,
    Stroke,
    TextBox,
    Triangle,
    anchor_of,
    clamp_font_size,
    points_from,
    translate_to,
)
from pizarra.utils.errors import PizarraValidationError


def test_stroke_needs_two_points():
    with pytest.raises(PizarraValidationError):
        Stroke(points=(Point(0, 0),))
    s = Stroke(points=points_from([(0, 0), (1, 1)]))
    assert len(s.points) == 2


def test_text_box_rejects_blank_text():
    with pytest.raises(PizarraValidationError):
        TextBox(x=0, y=0, width=10, height=10, text="   ")


@pytest.mark.parametrize("raw, expected", [(5, 8), (60, 48), (20, 20), ("30", 30), ("x", 16), (None, 16)])
def test_clamp_font_size(raw, expected):
    assert clamp_font_size(raw) == expected


def test_text_box_font_size_is_clamped_on_construction():
    assert TextBox(x=0, y=0, width=10, height=10, text="a", font_size=100).font_size == 48


def test_negative_radius_and_size_are_floored():
    assert Circle(x=0, y=0, radius=-3).radius == 0
    assert Triangle(x=0, y=0, size=-3).size == 0


def test_objects_get_distinct_ids():
    a = Rect(0, 0, 1, 1)
    b = Rect(0, 0, 1, 1)
    assert a.oid != b.oid
    assert a != b


def test_translate_to_line_moves_both_endpoints():
    ln = Line(x1=0, y1=0, x2=100, y2=50)
    moved = translate_to(ln, 10, 20)
    assert (moved.x1, moved.y1, moved.x2, moved.y2) == (10, 20, 110, 70)
    assert moved.oid == ln.oid


def test_translate_to_preserves_dimensions():
    r = Rect(0, 0, 30, -40)
    moved = translate_to(r, 5, 5)
    assert (moved.x, moved.y, moved.width, moved.height) == (5, 5, 30, -40)
    assert anchor_of(moved) == Point(5, 5)

from __future__ import annotations

import pytest

from pizarra.core.models import Circle, Line, Point, Rect, Stroke, TextBox, Triangle, points_from
from pizarra.geom.hit_test import HitPolicy, coerce_hit_policy, hit_test, hit_test_erase


@pytest.mark.parametrize("rect_first", [True, False])
def test_rect_beats_overlapping_circle_regardless_of_paint_order(rect_first):
    rect = Rect(0, 0, 50, 50)
    circle = Circle(25, 25, 40)
    objects = [rect, circle] if rect_first else [circle, rect]
    assert objects[hit_test(objects, Point(25, 25))] is rect


def test_topmost_policy_picks_last_painted():
    rect = Rect(0, 0, 50, 50)
    circle = Circle(25, 25, 40)
    assert hit_test([rect, circle], Point(25, 25), policy=HitPolicy.TOPMOST) == 1


def test_first_match_within_type_wins():
    objects = [Rect(0, 0, 10, 10), Rect(0, 0, 100, 100)]
    assert hit_test(objects, Point(5, 5)) == 0


def test_textbox_has_lowest_priority():
    objects = [TextBox(0, 0, 100, 100, "hola"), Line(0, 50, 100, 50)]
    assert hit_test(objects, Point(50, 52)) == 1
    assert hit_test(objects, Point(50, 90)) == 0


def test_strokes_are_not_selectable():
    s = Stroke(points=points_from([(0, 0), (10, 0)]))
    assert hit_test([s], Point(5, 0)) is None


def test_triangle_bounding_box_vs_exact():
    tri = Triangle(0, 0, 10)
    assert hit_test([tri], Point(-9, -9)) == 0
    assert hit_test([tri], Point(-9, -9), exact_triangle=True) is None
    assert hit_test([tri], Point(0, 5), exact_triangle=True) == 0


def test_miss_returns_none():
    assert hit_test([Rect(0, 0, 10, 10)], Point(50, 50)) is None
    assert hit_test([], Point(0, 0)) is None


def test_erase_collects_every_match():
    objects = [
        Rect(0, 0, 50, 50),
        Circle(25, 25, 40),
        Stroke(points=points_from([(30, 30), (200, 200)])),
        Rect(100, 100, 10, 10),
    ]
    assert hit_test_erase(objects, Point(25, 25), 16) == [0, 1, 2]


def test_erase_stroke_uses_points_not_segments():
    s = Stroke(points=points_from([(0, 0), (100, 0)]))
    # Sobre el segmento pero lejos de ambos puntos capturados.
    assert hit_test_erase([s], Point(50, 0), 16) == []


def test_erase_line_needs_perpendicular_distance():
    ln = Line(0, 0, 100, 100)
    # Dentro de la caja del segmento pero lejos de la recta.
    assert hit_test_erase([ln], Point(90, 10), 16) == []
    assert hit_test_erase([ln], Point(50, 52), 16) == [0]


def test_coerce_hit_policy():
    assert coerce_hit_policy("TopMost") is HitPolicy.TOPMOST
    assert coerce_hit_policy("cualquiera") is HitPolicy.PRIORITY
    assert coerce_hit_policy(None) is HitPolicy.PRIORITY

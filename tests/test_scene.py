from __future__ import annotations

import pytest

from pizarra.core.models import Circle, Rect
from pizarra.core.scene import Scene
from pizarra.utils.errors import IndexOutOfRange


def _scene(n: int) -> Scene:
    return Scene([Rect(i * 10, 0, 5, 5) for i in range(n)])


def test_append_returns_index_in_paint_order():
    s = Scene()
    assert s.append(Rect(0, 0, 1, 1)) == 0
    assert s.append(Circle(0, 0, 1)) == 1
    assert [o.kind for o in s] == ["rect", "circle"]


def test_replace_at_out_of_range_raises():
    s = _scene(2)
    with pytest.raises(IndexOutOfRange):
        s.replace_at(2, Rect(0, 0, 1, 1))
    with pytest.raises(IndexError):
        s.get(-1)


def test_remove_where_returns_count_and_compacts():
    s = _scene(5)
    n = s.remove_where(lambda o: o.x in (10, 30))
    assert n == 2
    assert [o.x for o in s] == [0, 20, 40]


def test_remove_indices():
    s = _scene(5)
    assert s.remove_indices({0, 4, 99}) == 2
    assert [o.x for o in s] == [10, 20, 30]


def test_index_of_follows_compaction():
    s = _scene(3)
    last = s.get(2)
    s.remove_indices([0])
    assert s.index_of(last.oid) == 1
    assert s.get_by_id("nope") is None

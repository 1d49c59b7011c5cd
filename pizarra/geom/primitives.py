"""Primitivas geométricas puras (sin estado, sin Qt).

Convención: una región de área cero (ancho/alto/radio/tamaño 0) no contiene
ningún punto. Así, una figura degenerada existe en la escena pero no se puede
seleccionar ni borrar por contención.
"""

from __future__ import annotations

import math
from typing import Iterable

from pizarra.core.models import Point


def point_in_rect(p: Point, x: float, y: float, width: float, height: float) -> bool:
    """Contención (bordes incluidos) en un rectángulo con ancho/alto con signo."""
    if width == 0 or height == 0:
        return False
    x0, x1 = sorted((x, x + width))
    y0, y1 = sorted((y, y + height))
    return x0 <= p.x <= x1 and y0 <= p.y <= y1


def point_in_circle(p: Point, cx: float, cy: float, radius: float) -> bool:
    if radius <= 0:
        return False
    return math.hypot(p.x - cx, p.y - cy) <= radius


def point_in_axis_box(p: Point, cx: float, cy: float, half: float) -> bool:
    """Caja cuadrada alineada a ejes con centro (cx, cy) y semi-lado `half`."""
    if half <= 0:
        return False
    return abs(p.x - cx) <= half and abs(p.y - cy) <= half


def point_in_triangle(p: Point, a: Point, b: Point, c: Point) -> bool:
    """Contención exacta por signo de los productos cruz (bordes incluidos)."""
    d1 = _cross(p, a, b)
    d2 = _cross(p, b, c)
    d3 = _cross(p, c, a)
    if d1 == 0 and d2 == 0 and d3 == 0:
        # Triángulo degenerado (área cero).
        return False
    has_neg = d1 < 0 or d2 < 0 or d3 < 0
    has_pos = d1 > 0 or d2 > 0 or d3 > 0
    return not (has_neg and has_pos)


def point_near_segment(p: Point, a: Point, b: Point, threshold: float) -> bool:
    """Cerca de un segmento.

    Distancia perpendicular a la recta infinita < threshold Y el punto dentro de
    la caja del segmento expandida en threshold. Segmento de largo 0: nunca.
    """
    length = math.hypot(b.x - a.x, b.y - a.y)
    if length == 0:
        return False
    dist = abs((b.y - a.y) * p.x - (b.x - a.x) * p.y + b.x * a.y - b.y * a.x) / length
    if dist >= threshold:
        return False
    return (
        min(a.x, b.x) - threshold <= p.x <= max(a.x, b.x) + threshold
        and min(a.y, b.y) - threshold <= p.y <= max(a.y, b.y) + threshold
    )


def any_point_within(p: Point, points: Iterable[Point], radius: float) -> bool:
    """True si algún punto de la lista está a distancia < radius de p."""
    return any(math.hypot(q.x - p.x, q.y - p.y) < radius for q in points)


def _cross(p: Point, a: Point, b: Point) -> float:
    return (p.x - b.x) * (a.y - b.y) - (a.x - b.x) * (p.y - b.y)

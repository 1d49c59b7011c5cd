# File: pizarra/core/ops.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Operadores de mutación (crear, mover, editar fuente, borrar, goma).
# Notes: Normalizan en el borde: trazos de 1 punto y textos vacíos se descartan (None).
from __future__ import annotations

import math
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from pizarra.core.models import (
    Circle,
    Drawable,
    Line,
    Point,
    Rect,
    Stroke,
    TextBox,
    Triangle,
    clamp_font_size,
    translate_to,
)
from pizarra.core.scene import Scene
from pizarra.core.tool_mode import ShapeKind
from pizarra.core.version import DEFAULT_TEXT_BOX, ERASER_RADIUS, LINE_HIT_THRESHOLD
from pizarra.geom.hit_test import erase_predicate
from pizarra.utils.log import get_logger

log = get_logger(__name__)


# ----------------------------
# Construcción (desde gestos)
# ----------------------------

def build_stroke(points: Sequence[Point], color: str, thickness: float) -> Optional[Stroke]:
    if len(points) < 2:
        return None
    return Stroke(points=tuple(points), color=color, thickness=thickness)


def build_shape(kind: ShapeKind, anchor: Point, current: Point, color: str, thickness: float) -> Drawable:
    """Geometría final de una figura a partir del anchor y el punto actual."""
    dx = current.x - anchor.x
    dy = current.y - anchor.y
    if kind == ShapeKind.SQUARE:
        return Rect(x=anchor.x, y=anchor.y, width=dx, height=dy, color=color, thickness=thickness)
    if kind == ShapeKind.CIRCLE:
        return Circle(x=anchor.x, y=anchor.y, radius=math.hypot(dx, dy), color=color, thickness=thickness)
    if kind == ShapeKind.TRIANGLE:
        return Triangle(x=anchor.x, y=anchor.y, size=max(abs(dx), abs(dy)), color=color, thickness=thickness)
    if kind == ShapeKind.LINE:
        return Line(x1=anchor.x, y1=anchor.y, x2=current.x, y2=current.y, color=color, thickness=thickness)
    raise ValueError(f"ShapeKind no soportado: {kind!r}")


def normalize_box(anchor: Point, current: Point) -> tuple[float, float, float, float]:
    """(left, top, width, height) con ancho/alto absolutos; el orden de esquinas no importa."""
    left = min(anchor.x, current.x)
    top = min(anchor.y, current.y)
    return left, top, abs(current.x - anchor.x), abs(current.y - anchor.y)


def build_text_box(box: tuple[float, float, float, float], text: str, font_size: object) -> Optional[TextBox]:
    """TextBox en `box` o None si el texto está vacío/solo espacios.

    Ancho/alto 0 caen a DEFAULT_TEXT_BOX (cada dimensión por separado).
    """
    if not str(text or "").strip():
        return None
    x, y, w, h = box
    dw, dh = DEFAULT_TEXT_BOX
    return TextBox(
        x=x,
        y=y,
        width=w or dw,
        height=h or dh,
        text=str(text),
        font_size=clamp_font_size(font_size),
    )


# ----------------------------
# Mutación
# ----------------------------

def commit(scene: Scene, obj: Optional[Drawable]) -> Optional[int]:
    if obj is None:
        return None
    idx = scene.append(obj)
    log.debug("Commit %s %s en índice %d", obj.kind, obj.oid, idx)
    return idx


def move_to(scene: Scene, index: int, x: float, y: float) -> Drawable:
    """Reubica el anchor del objeto `index` en (x, y). IndexOutOfRange si el índice es viejo."""
    moved = translate_to(scene.get(index), x, y)
    scene.replace_at(index, moved)
    return moved


def set_font_size(scene: Scene, index: int, value: object) -> Optional[TextBox]:
    """Edita el tamaño de fuente de un TextBox (clamp 8..48). Otros tipos: None, sin cambios."""
    obj = scene.get(index)
    if not isinstance(obj, TextBox):
        return None
    size = clamp_font_size(value, default=obj.font_size)
    if size == obj.font_size:
        return obj
    updated = replace(obj, font_size=size)
    scene.replace_at(index, updated)
    return updated


def delete_indices(scene: Scene, indices: Iterable[int]) -> int:
    n = scene.remove_indices(indices)
    if n:
        log.debug("Borrados %d objeto(s) -> %d restantes", n, len(scene))
    return n


def erase_at(
    scene: Scene,
    p: Point,
    radius: float = ERASER_RADIUS,
    *,
    line_threshold: float = LINE_HIT_THRESHOLD,
    exact_triangle: bool = False,
) -> list[str]:
    """Quita todo objeto tocado por la goma en `p`. Devuelve los oids quitados."""
    pred = erase_predicate(p, radius, line_threshold=line_threshold, exact_triangle=exact_triangle)
    removed = [o.oid for o in scene if pred(o)]
    if removed:
        scene.remove_where(pred)
        log.debug("Goma en (%.1f, %.1f): %d objeto(s) quitados", p.x, p.y, len(removed))
    return removed

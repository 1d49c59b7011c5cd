# File: pizarra/render/scene_painter.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Pipeline de render determinista: escena + selección + preview -> QPainter.
# Notes:
#   - Siempre redibuja todo (clear + objetos en orden + preview arriba). Sin diffs.
#   - No toca el modelo: mismas entradas -> mismos píxeles.
from __future__ import annotations

from typing import Callable, Collection, Iterable, Optional

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QImage, QPainter, QPainterPath, QPen, QPolygonF

from pizarra.core import ops
from pizarra.core.interaction import ShapePlacement, StrokePlacement, Style, TextPlacement, Transient
from pizarra.core.models import Circle, Drawable, Line, Point, Rect, Stroke, TextBox, Triangle
from pizarra.core.version import (
    BACKGROUND_COLOR,
    HIGHLIGHT_COLOR,
    TEXT_COLOR,
    TEXT_FONT_FAMILY,
    TEXT_LINE_GAP,
    TEXT_OUTLINE_WIDTH,
    TEXT_PADDING,
)


def wrap_words(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Word-wrap greedy por espacios.

    Corta antes de la palabra cuando `line + palabra + ' '` mide más que
    `max_width`, salvo que sea la primera palabra (una palabra larga nunca queda
    sola en una línea vacía). Las líneas se devuelven sin el espacio final.
    """
    words = str(text).split(" ")
    lines: list[str] = []
    line = ""
    for n, word in enumerate(words):
        test = line + word + " "
        if measure(test) > max_width and n > 0:
            lines.append(line.rstrip(" "))
            line = word + " "
        else:
            line = test
    lines.append(line.rstrip(" "))
    return lines


def text_font(font_size: int) -> QFont:
    f = QFont(TEXT_FONT_FAMILY)
    f.setPixelSize(max(1, int(font_size)))
    return f


def _pen(color: str, width: float) -> QPen:
    pen = QPen(QColor(color))
    pen.setWidthF(float(width))
    pen.setCapStyle(Qt.FlatCap)
    pen.setJoinStyle(Qt.MiterJoin)
    return pen


def _polyline(points: Iterable[Point]) -> QPainterPath:
    path = QPainterPath()
    for i, pt in enumerate(points):
        if i == 0:
            path.moveTo(pt.x, pt.y)
        else:
            path.lineTo(pt.x, pt.y)
    return path


def paint_object(painter: QPainter, obj: Drawable, *, selected: bool, surface_height: float) -> None:
    painter.save()
    painter.setBrush(Qt.NoBrush)
    try:
        if isinstance(obj, TextBox):
            _paint_text_box(painter, obj, selected=selected, surface_height=surface_height)
            return

        painter.setPen(_pen(HIGHLIGHT_COLOR if selected else obj.color, obj.thickness))
        if isinstance(obj, Rect):
            painter.drawRect(QRectF(obj.x, obj.y, obj.width, obj.height).normalized())
        elif isinstance(obj, Circle):
            painter.drawEllipse(QPointF(obj.x, obj.y), obj.radius, obj.radius)
        elif isinstance(obj, Triangle):
            painter.drawPolygon(QPolygonF([QPointF(v.x, v.y) for v in obj.vertices()]))
        elif isinstance(obj, Line):
            painter.drawLine(QPointF(obj.x1, obj.y1), QPointF(obj.x2, obj.y2))
        elif isinstance(obj, Stroke):
            painter.drawPath(_polyline(obj.points))
        else:
            raise TypeError(f"Tipo de objeto no soportado: {type(obj).__name__}")
    finally:
        painter.restore()


def _paint_text_box(painter: QPainter, obj: TextBox, *, selected: bool, surface_height: float) -> None:
    painter.setPen(_pen(HIGHLIGHT_COLOR if selected else TEXT_COLOR, TEXT_OUTLINE_WIDTH))
    painter.drawRect(QRectF(obj.x, obj.y, obj.width, obj.height))

    font = text_font(obj.font_size)
    fm = QFontMetricsF(font)
    painter.setFont(font)
    painter.setPen(QColor(TEXT_COLOR))
    # Recorte horizontal al ancho de la caja; verticalmente puede desbordar.
    painter.setClipRect(QRectF(obj.x, 0.0, obj.width, max(surface_height, obj.y + obj.height)))

    lines = wrap_words(obj.text, obj.width - 2 * TEXT_PADDING, fm.horizontalAdvance)
    line_height = obj.font_size + TEXT_LINE_GAP
    y = obj.y + TEXT_PADDING
    for ln in lines:
        # Baseline = top + ascent (equivale a textBaseline=top).
        painter.drawText(QPointF(obj.x + TEXT_PADDING, y + fm.ascent()), ln)
        y += line_height


def paint_transient(painter: QPainter, transient: Optional[Transient], style: Style, *, surface_height: float) -> None:
    if transient is None:
        return
    if isinstance(transient, StrokePlacement):
        painter.save()
        painter.setBrush(Qt.NoBrush)
        painter.setPen(_pen(transient.color, transient.thickness))
        painter.drawPath(_polyline(transient.points))
        painter.restore()
    elif isinstance(transient, ShapePlacement):
        preview = ops.build_shape(transient.kind, transient.anchor, transient.current, style.color, style.thickness)
        paint_object(painter, preview, selected=False, surface_height=surface_height)
    elif isinstance(transient, TextPlacement):
        painter.save()
        painter.setBrush(Qt.NoBrush)
        painter.setPen(_pen(HIGHLIGHT_COLOR, TEXT_OUTLINE_WIDTH))
        x, y, w, h = transient.box()
        painter.drawRect(QRectF(x, y, w, h))
        painter.restore()


def render(
    painter: QPainter,
    width: int,
    height: int,
    objects: Iterable[Drawable],
    selection: Collection[str] = (),
    transient: Optional[Transient] = None,
    style: Style | None = None,
) -> None:
    """Redibuja la superficie completa.

    `selection` es un conjunto de oids; los objetos seleccionados se pintan con
    el color de resaltado. El preview transitorio va siempre encima.
    """
    style = style or Style()
    painter.save()
    painter.setRenderHint(QPainter.Antialiasing, True)
    painter.setRenderHint(QPainter.TextAntialiasing, True)
    painter.setCompositionMode(QPainter.CompositionMode_Source)
    painter.fillRect(QRectF(0, 0, width, height), QColor(BACKGROUND_COLOR))
    painter.setCompositionMode(QPainter.CompositionMode_SourceOver)

    selected = set(selection)
    for obj in objects:
        paint_object(painter, obj, selected=obj.oid in selected, surface_height=height)

    paint_transient(painter, transient, style, surface_height=height)
    painter.restore()


def new_surface(width: int, height: int) -> QImage:
    img = QImage(max(1, int(width)), max(1, int(height)), QImage.Format_ARGB32_Premultiplied)
    img.fill(QColor(BACKGROUND_COLOR))
    return img


def render_to_image(
    width: int,
    height: int,
    objects: Iterable[Drawable],
    selection: Collection[str] = (),
    transient: Optional[Transient] = None,
    style: Style | None = None,
    *,
    surface: QImage | None = None,
) -> QImage:
    """Render a un QImage (nuevo, o `surface` si se pasa y tiene el tamaño correcto)."""
    img = surface
    if img is None or img.isNull() or img.width() != int(width) or img.height() != int(height):
        img = new_surface(width, height)
    painter = QPainter(img)
    try:
        render(painter, img.width(), img.height(), objects, selection, transient, style)
    finally:
        painter.end()
    return img

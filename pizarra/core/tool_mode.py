# File: pizarra/core/tool_mode.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Herramientas de la pizarra y tipos de figura.
# Notes: Se persisten en settings.json (preferencias, no escena).

from __future__ import annotations

from enum import Enum


class ToolMode(str, Enum):
    """Herramienta activa (exactamente una a la vez).

    - select: click = seleccionar (Ctrl = aditivo), drag = mover, Supr = borrar.
    - draw: trazo a mano alzada.
    - shapes: arrastrar para colocar la figura elegida (ShapeKind).
    - text: arrastrar un recuadro y escribir.
    - image: placeholder (sin gesto).
    - eraser: borra todo lo que toca mientras el botón está presionado.
    """

    SELECT = "select"
    DRAW = "draw"
    SHAPES = "shapes"
    TEXT = "text"
    IMAGE = "image"
    ERASER = "eraser"


class ShapeKind(str, Enum):
    # "square" es el nombre en la UI; el objeto resultante es un Rect.
    SQUARE = "square"
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    LINE = "line"


def coerce_tool_mode(v: object, default: ToolMode = ToolMode.DRAW) -> ToolMode:
    if isinstance(v, ToolMode):
        return v
    s = str(v or "").strip().lower()
    for m in ToolMode:
        if m.value == s:
            return m
    return default


def coerce_shape_kind(v: object, default: ShapeKind = ShapeKind.SQUARE) -> ShapeKind:
    if isinstance(v, ShapeKind):
        return v
    s = str(v or "").strip().lower()
    # Compat: "rect" es como lo llama el modelo.
    if s == "rect":
        return ShapeKind.SQUARE
    for k in ShapeKind:
        if k.value == s:
            return k
    return default

# File: pizarra/core/models.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Modelo de objetos dibujables (unión cerrada de variantes inmutables).
# Notes: Los objetos se reemplazan (dataclasses.replace), nunca se mutan in-place.
from __future__ import annotations

import math
import uuid

from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterable, Union

from pizarra.core.version import (
    DEFAULT_COLOR,
    DEFAULT_FONT_SIZE,
    DEFAULT_THICKNESS,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
)
from pizarra.utils.errors import PizarraValidationError


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


def new_object_id(prefix: str = "obj") -> str:
    """Genera un id corto y único.

    Nota: se usa UUID truncado para evitar colisiones sin depender de estado global.
    """
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def clamp_font_size(value: object, default: int = DEFAULT_FONT_SIZE) -> int:
    """Normaliza un tamaño de fuente al rango [FONT_SIZE_MIN, FONT_SIZE_MAX].

    Entradas no numéricas caen al default (también clampeado).
    """
    try:
        n = int(round(float(value)))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        n = int(default)
    if n < FONT_SIZE_MIN:
        return FONT_SIZE_MIN
    if n > FONT_SIZE_MAX:
        return FONT_SIZE_MAX
    return n


@dataclass(frozen=True)
class Stroke:
    kind: ClassVar[str] = "stroke"

    points: tuple[Point, ...]
    color: str = DEFAULT_COLOR
    thickness: float = DEFAULT_THICKNESS
    oid: str = field(default_factory=lambda: new_object_id("stroke"))

    def __post_init__(self) -> None:
        pts = tuple(self.points)
        if len(pts) < 2:
            raise PizarraValidationError(f"Trazo inválido: {len(pts)} punto(s), se esperan >= 2")
        object.__setattr__(self, "points", pts)


@dataclass(frozen=True)
class Rect:
    kind: ClassVar[str] = "rect"

    # width/height con signo: negativos = el anchor es la esquina opuesta.
    x: float
    y: float
    width: float
    height: float
    color: str = DEFAULT_COLOR
    thickness: float = DEFAULT_THICKNESS
    oid: str = field(default_factory=lambda: new_object_id("rect"))


@dataclass(frozen=True)
class Circle:
    kind: ClassVar[str] = "circle"

    x: float
    y: float
    radius: float
    color: str = DEFAULT_COLOR
    thickness: float = DEFAULT_THICKNESS
    oid: str = field(default_factory=lambda: new_object_id("circle"))

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius", max(0.0, float(self.radius)))


@dataclass(frozen=True)
class Triangle:
    """Triángulo isósceles con el vértice arriba.

    Vértices: (x, y - size), (x - size, y + size), (x + size, y + size).
    """

    kind: ClassVar[str] = "triangle"

    x: float
    y: float
    size: float
    color: str = DEFAULT_COLOR
    thickness: float = DEFAULT_THICKNESS
    oid: str = field(default_factory=lambda: new_object_id("triangle"))

    def __post_init__(self) -> None:
        object.__setattr__(self, "size", max(0.0, float(self.size)))

    def vertices(self) -> tuple[Point, Point, Point]:
        s = self.size
        return (
            Point(self.x, self.y - s),
            Point(self.x - s, self.y + s),
            Point(self.x + s, self.y + s),
        )


@dataclass(frozen=True)
class Line:
    kind: ClassVar[str] = "line"

    x1: float
    y1: float
    x2: float
    y2: float
    color: str = DEFAULT_COLOR
    thickness: float = DEFAULT_THICKNESS
    oid: str = field(default_factory=lambda: new_object_id("line"))


@dataclass(frozen=True)
class TextBox:
    kind: ClassVar[str] = "text"

    x: float
    y: float
    width: float
    height: float
    text: str
    font_size: int = DEFAULT_FONT_SIZE
    oid: str = field(default_factory=lambda: new_object_id("text"))

    def __post_init__(self) -> None:
        if not str(self.text or "").strip():
            raise PizarraValidationError("Texto vacío: no se crea TextBox")
        object.__setattr__(self, "font_size", clamp_font_size(self.font_size))


Drawable = Union[Stroke, Rect, Circle, Triangle, Line, TextBox]


def anchor_of(obj: Drawable) -> Point:
    """Punto de referencia para arrastrar: (x, y), (x1, y1) en Line, primer punto en Stroke."""
    if isinstance(obj, (Rect, Circle, Triangle, TextBox)):
        return Point(obj.x, obj.y)
    if isinstance(obj, Line):
        return Point(obj.x1, obj.y1)
    if isinstance(obj, Stroke):
        return obj.points[0]
    raise TypeError(f"Tipo de objeto no soportado: {type(obj).__name__}")


def translate_to(obj: Drawable, x: float, y: float) -> Drawable:
    """Devuelve una copia con el anchor en (x, y), preservando dimensiones."""
    a = anchor_of(obj)
    dx = float(x) - a.x
    dy = float(y) - a.y
    return translate_by(obj, dx, dy)


def translate_by(obj: Drawable, dx: float, dy: float) -> Drawable:
    if isinstance(obj, (Rect, Circle, Triangle, TextBox)):
        return replace(obj, x=obj.x + dx, y=obj.y + dy)
    if isinstance(obj, Line):
        return replace(obj, x1=obj.x1 + dx, y1=obj.y1 + dy, x2=obj.x2 + dx, y2=obj.y2 + dy)
    if isinstance(obj, Stroke):
        return replace(obj, points=tuple(Point(p.x + dx, p.y + dy) for p in obj.points))
    raise TypeError(f"Tipo de objeto no soportado: {type(obj).__name__}")


def points_from(pairs: Iterable[tuple[float, float]]) -> tuple[Point, ...]:
    return tuple(Point(float(x), float(y)) for x, y in pairs)

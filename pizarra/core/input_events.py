# File: pizarra/core/input_events.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Contrato de entrada del núcleo (puntero/teclado) independiente de Qt.
# Notes: El adaptador de UI traduce sus eventos a estos valores antes de llamar al controller.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pizarra.core.models import Point


@dataclass(frozen=True)
class PointerEvent:
    """Evento de puntero en coordenadas locales de la superficie."""

    x: float
    y: float
    primary_held: bool = True
    modifier: bool = False
    touch: bool = False

    @property
    def point(self) -> Point:
        return Point(float(self.x), float(self.y))


class Key(str, Enum):
    MODIFIER = "modifier"
    DELETE = "delete"
    OTHER = "other"


# Nombres de tecla aceptados (DOM/Qt/humanos) -> Key.
_KEY_ALIASES = {
    "control": Key.MODIFIER,
    "ctrl": Key.MODIFIER,
    "modifier": Key.MODIFIER,
    "delete": Key.DELETE,
    "del": Key.DELETE,
}


def coerce_key(v: object) -> Key:
    if isinstance(v, Key):
        return v
    return _KEY_ALIASES.get(str(v or "").strip().lower(), Key.OTHER)


@dataclass(frozen=True)
class KeyEvent:
    key: Key

    @classmethod
    def named(cls, name: object) -> "KeyEvent":
        return cls(coerce_key(name))

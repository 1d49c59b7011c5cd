# File: pizarra/utils/errors.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Errores tipados del proyecto.
# Notes: Los estados ilegales se evitan normalizando en el borde; estos errores son la red.
from __future__ import annotations


class PizarraError(Exception):
    """Error base del proyecto."""


class PizarraValidationError(PizarraError, ValueError):
    """Objeto dibujable inválido (trazo con <2 puntos, texto vacío, ...)."""


class IndexOutOfRange(PizarraError, IndexError):
    """Índice de escena inexistente (típicamente, un índice viejo tras borrar/borrar con goma)."""

    def __init__(self, index: int, length: int) -> None:
        super().__init__(f"Índice {index} fuera de rango (escena con {length} objetos)")
        self.index = index
        self.length = length

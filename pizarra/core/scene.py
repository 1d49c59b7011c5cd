# File: pizarra/core/scene.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Escena: secuencia ordenada de objetos (orden de inserción = orden de pintado).
# Notes: Única fuente de verdad. Los índices NO son estables tras borrar; usar oid.
from __future__ import annotations

from typing import Callable, Iterable, Iterator, Optional

from pizarra.core.models import Drawable
from pizarra.utils.errors import IndexOutOfRange
from pizarra.utils.log import get_logger

log = get_logger(__name__)


class Scene:
    """Store de objetos dibujables.

    - Índice 0 = pintado primero (queda detrás).
    - Toda operación es atómica: se calcula la lista nueva y recién ahí se publica.
    """

    def __init__(self, objects: Iterable[Drawable] | None = None) -> None:
        self._objects: list[Drawable] = list(objects or [])

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[Drawable]:
        return iter(tuple(self._objects))

    def __bool__(self) -> bool:
        return bool(self._objects)

    @property
    def objects(self) -> tuple[Drawable, ...]:
        return tuple(self._objects)

    def append(self, obj: Drawable) -> int:
        """Agrega al frente visual. Devuelve el índice asignado."""
        self._objects.append(obj)
        log.debug("Escena: +%s (%s) -> %d objetos", obj.kind, obj.oid, len(self._objects))
        return len(self._objects) - 1

    def get(self, index: int) -> Drawable:
        self._check_index(index)
        return self._objects[index]

    def replace_at(self, index: int, obj: Drawable) -> None:
        self._check_index(index)
        self._objects[index] = obj

    def remove_where(self, predicate: Callable[[Drawable], bool]) -> int:
        """Quita todos los objetos que cumplen `predicate`. Devuelve cuántos quitó."""
        keep = [o for o in self._objects if not predicate(o)]
        removed = len(self._objects) - len(keep)
        if removed:
            self._objects = keep
        return removed

    def remove_indices(self, indices: Iterable[int]) -> int:
        drop = {int(i) for i in indices}
        keep = [o for i, o in enumerate(self._objects) if i not in drop]
        removed = len(self._objects) - len(keep)
        if removed:
            self._objects = keep
        return removed

    def index_of(self, oid: str) -> Optional[int]:
        for i, o in enumerate(self._objects):
            if o.oid == oid:
                return i
        return None

    def get_by_id(self, oid: str) -> Optional[Drawable]:
        i = self.index_of(oid)
        return self._objects[i] if i is not None else None

    def _check_index(self, index: int) -> None:
        if not isinstance(index, int) or index < 0 or index >= len(self._objects):
            raise IndexOutOfRange(index, len(self._objects))

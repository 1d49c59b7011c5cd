# File: pizarra/core/interaction.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Máquina de estados de herramientas (gestos down/move/up + teclado).
# Notes: Un solo hilo, eventos en orden de llegada. Todo el estado mutable vive en
#        InteractionState + Scene + Style; la UI solo traduce eventos y repinta.
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Optional, Union

from pizarra.core import ops
from pizarra.core.input_events import Key, KeyEvent, PointerEvent
from pizarra.core.models import Drawable, Point, TextBox, anchor_of, clamp_font_size
from pizarra.core.scene import Scene
from pizarra.core.settings import EngineConfig
from pizarra.core.tool_mode import ShapeKind, ToolMode, coerce_shape_kind, coerce_tool_mode
from pizarra.core.version import DEFAULT_COLOR, DEFAULT_FONT_SIZE, DEFAULT_THICKNESS
from pizarra.geom.hit_test import hit_test
from pizarra.utils.log import get_logger

log = get_logger(__name__)


@dataclass
class Style:
    """Estilo activo (lo escribe la barra de herramientas; el núcleo solo escribe font_size)."""

    color: str = DEFAULT_COLOR
    thickness: float = DEFAULT_THICKNESS
    font_size: int = DEFAULT_FONT_SIZE
    shape_kind: ShapeKind = ShapeKind.SQUARE


# ----------------------------
# Estado transitorio (preview)
# ----------------------------

@dataclass(frozen=True)
class StrokePlacement:
    points: tuple[Point, ...]
    # Estilo capturado al iniciar el gesto.
    color: str
    thickness: float


@dataclass(frozen=True)
class ShapePlacement:
    kind: ShapeKind
    anchor: Point
    current: Point


@dataclass(frozen=True)
class TextPlacement:
    anchor: Point
    current: Point
    font_size: int
    # True tras soltar: el recuadro está normalizado y espera texto.
    editing: bool = False

    def box(self) -> tuple[float, float, float, float]:
        return ops.normalize_box(self.anchor, self.current)


Transient = Union[StrokePlacement, ShapePlacement, TextPlacement]


class Change(str, Enum):
    SCENE = "scene"
    SELECTION = "selection"
    TRANSIENT = "transient"
    STYLE = "style"
    TOOL = "tool"
    TEXT_ENTRY = "text_entry"
    FONT_CONTROL = "font_control"


NO_CHANGE: frozenset = frozenset()


@dataclass
class InteractionState:
    tool: ToolMode = ToolMode.DRAW
    transient: Optional[Transient] = None
    # oids; el último es la selección activa.
    selection: list[str] = field(default_factory=list)
    drag_offset: Point = Point(0.0, 0.0)
    drag_armed: bool = False
    pressed: bool = False
    modifier_held: bool = False
    # oid del TextBox cuyo control de tamaño de fuente está visible.
    font_control_target: Optional[str] = None

    @property
    def active_id(self) -> Optional[str]:
        return self.selection[-1] if self.selection else None


Listener = Callable[[frozenset], None]


class Subscription:
    """Registro de un listener. close() lo libera (idempotente); usable como context manager."""

    def __init__(self, owner: "WhiteboardController", listener: Listener) -> None:
        self._owner: Optional[WhiteboardController] = owner
        self.listener = listener

    @property
    def active(self) -> bool:
        return self._owner is not None

    def close(self) -> None:
        owner, self._owner = self._owner, None
        if owner is not None:
            owner._unsubscribe(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class WhiteboardController:
    """Controlador de la pizarra.

    Cada handler devuelve el conjunto de `Change` que produjo (vacío = nada que
    repintar) y además lo notifica a los listeners suscriptos.
    """

    def __init__(
        self,
        scene: Scene | None = None,
        *,
        style: Style | None = None,
        config: EngineConfig | None = None,
        tool: ToolMode = ToolMode.DRAW,
    ) -> None:
        self.scene = scene if scene is not None else Scene()
        self.style = style or Style()
        self.config = config or EngineConfig()
        self.state = InteractionState(tool=coerce_tool_mode(tool))
        self._subs: list[Subscription] = []

    # ----------------------------
    # Suscripciones
    # ----------------------------
    def subscribe(self, listener: Listener) -> Subscription:
        sub = Subscription(self, listener)
        self._subs.append(sub)
        return sub

    def _unsubscribe(self, sub: Subscription) -> None:
        if sub in self._subs:
            self._subs.remove(sub)

    def close(self) -> None:
        """Libera todas las suscripciones (teardown del núcleo)."""
        for sub in list(self._subs):
            sub.close()

    def _emit(self, changes: set[Change]) -> frozenset:
        out = frozenset(changes)
        if not out:
            return out
        for sub in list(self._subs):
            try:
                sub.listener(out)
            except Exception:
                log.exception("Listener falló procesando %s", sorted(c.value for c in out))
        return out

    # ----------------------------
    # Consultas
    # ----------------------------
    @property
    def tool(self) -> ToolMode:
        return self.state.tool

    def selected_indices(self) -> list[int]:
        """Índices actuales de la selección (en orden de selección; el último es el activo)."""
        out: list[int] = []
        for oid in self.state.selection:
            idx = self.scene.index_of(oid)
            if idx is not None:
                out.append(idx)
        return out

    def active_object(self) -> Optional[Drawable]:
        oid = self.state.active_id
        return self.scene.get_by_id(oid) if oid else None

    def text_entry_box(self) -> Optional[tuple[float, float, float, float]]:
        """Recuadro normalizado donde la UI debe abrir el editor de texto (o None)."""
        t = self.state.transient
        if isinstance(t, TextPlacement) and t.editing:
            return t.box()
        return None

    def font_control_box(self) -> Optional[tuple[float, float, float, float]]:
        """Recuadro del TextBox cuyo control de fuente está visible (o None)."""
        oid = self.state.font_control_target
        obj = self.scene.get_by_id(oid) if oid else None
        if isinstance(obj, TextBox):
            return obj.x, obj.y, obj.width, obj.height
        return None

    # ----------------------------
    # Estilo / herramienta
    # ----------------------------
    def set_tool(self, tool: ToolMode | str) -> frozenset:
        new_tool = coerce_tool_mode(tool, default=self.state.tool)
        if new_tool == self.state.tool:
            return NO_CHANGE
        changes: set[Change] = {Change.TOOL}
        if self.state.transient is not None:
            # Cambio de herramienta en medio de un gesto: se descarta, sin commit.
            if isinstance(self.state.transient, TextPlacement) and self.state.transient.editing:
                changes.add(Change.TEXT_ENTRY)
            self.state.transient = None
            changes.add(Change.TRANSIENT)
        if self.state.font_control_target is not None:
            self.state.font_control_target = None
            changes.add(Change.FONT_CONTROL)
        self.state.pressed = False
        self.state.drag_armed = False
        log.debug("Herramienta: %s -> %s", self.state.tool.value, new_tool.value)
        self.state.tool = new_tool
        return self._emit(changes)

    def set_shape_kind(self, kind: ShapeKind | str) -> frozenset:
        k = coerce_shape_kind(kind, default=self.style.shape_kind)
        if k == self.style.shape_kind:
            return NO_CHANGE
        self.style.shape_kind = k
        return self._emit({Change.STYLE})

    def set_color(self, color: str) -> frozenset:
        if color == self.style.color:
            return NO_CHANGE
        self.style.color = str(color)
        return self._emit({Change.STYLE})

    def set_thickness(self, thickness: float) -> frozenset:
        t = max(1.0, float(thickness))
        if t == self.style.thickness:
            return NO_CHANGE
        self.style.thickness = t
        return self._emit({Change.STYLE})

    def set_font_size(self, value: object) -> frozenset:
        """Tamaño de fuente para el próximo TextBox. Nunca toca objetos ya creados."""
        size = clamp_font_size(value, default=self.style.font_size)
        if size == self.style.font_size:
            return NO_CHANGE
        self.style.font_size = size
        return self._emit({Change.STYLE})

    def edit_selected_font_size(self, value: object) -> frozenset:
        """Edita el TextBox cuyo control de fuente está visible (y el estilo activo).

        Sin control visible (o si el activo ya no es ese TextBox) no hace nada.
        """
        target = self.state.font_control_target
        if target is None or target != self.state.active_id:
            return NO_CHANGE
        idx = self.scene.index_of(target)
        if idx is None:
            return NO_CHANGE
        size = clamp_font_size(value, default=self.style.font_size)
        changes: set[Change] = set()
        if size != self.style.font_size:
            self.style.font_size = size
            changes.add(Change.STYLE)
        before = self.scene.get(idx)
        after = ops.set_font_size(self.scene, idx, size)
        if after is not None and after != before:
            changes.add(Change.SCENE)
        return self._emit(changes)

    # ----------------------------
    # Puntero
    # ----------------------------
    def pointer_down(self, ev: PointerEvent) -> frozenset:
        tool = self.state.tool
        if ev.touch and tool != ToolMode.DRAW:
            return NO_CHANGE
        p = ev.point
        self.state.pressed = True

        if tool == ToolMode.DRAW:
            self.state.transient = StrokePlacement(
                points=(p,), color=self.style.color, thickness=self.style.thickness
            )
            return self._emit({Change.TRANSIENT})

        if tool == ToolMode.SHAPES:
            self.state.transient = ShapePlacement(kind=self.style.shape_kind, anchor=p, current=p)
            return self._emit({Change.TRANSIENT})

        if tool == ToolMode.TEXT:
            changes = {Change.TRANSIENT}
            prev = self.state.transient
            if isinstance(prev, TextPlacement) and prev.editing:
                # Edición pendiente sin commit: la UI ya tuvo su blur; se abandona.
                changes.add(Change.TEXT_ENTRY)
            self.state.transient = TextPlacement(anchor=p, current=p, font_size=self.style.font_size)
            return self._emit(changes)

        if tool == ToolMode.SELECT:
            return self._emit(self._select_at(p, additive=ev.modifier or self.state.modifier_held))

        if tool == ToolMode.ERASER:
            return self._emit(self._erase_at(p))

        # IMAGE: sin gesto.
        return NO_CHANGE

    def pointer_move(self, ev: PointerEvent) -> frozenset:
        # Move tras el up (o sin botón): el gesto ya terminó.
        if not self.state.pressed or not ev.primary_held:
            return NO_CHANGE
        tool = self.state.tool
        if ev.touch and tool != ToolMode.DRAW:
            return NO_CHANGE
        p = ev.point
        t = self.state.transient

        if tool == ToolMode.DRAW and isinstance(t, StrokePlacement):
            self.state.transient = replace(t, points=t.points + (p,))
            return self._emit({Change.TRANSIENT})

        if tool == ToolMode.SHAPES and isinstance(t, ShapePlacement):
            self.state.transient = replace(t, current=p)
            return self._emit({Change.TRANSIENT})

        if tool == ToolMode.TEXT and isinstance(t, TextPlacement) and not t.editing:
            self.state.transient = replace(t, current=p)
            return self._emit({Change.TRANSIENT})

        if tool == ToolMode.SELECT and self.state.drag_armed and self.state.selection:
            return self._emit(self._drag_active_to(p))

        if tool == ToolMode.ERASER:
            return self._emit(self._erase_at(p))

        return NO_CHANGE

    def pointer_up(self, ev: PointerEvent) -> frozenset:
        if not self.state.pressed:
            return NO_CHANGE
        if ev.touch and self.state.tool != ToolMode.DRAW:
            return NO_CHANGE
        self.state.pressed = False
        self.state.drag_armed = False
        tool = self.state.tool
        t = self.state.transient
        p = ev.point

        if tool == ToolMode.DRAW:
            return self._emit(self._finish_stroke())

        if tool == ToolMode.SHAPES and isinstance(t, ShapePlacement):
            obj = ops.build_shape(t.kind, t.anchor, p, self.style.color, self.style.thickness)
            ops.commit(self.scene, obj)
            self.state.transient = None
            return self._emit({Change.SCENE, Change.TRANSIENT})

        if tool == ToolMode.TEXT and isinstance(t, TextPlacement) and not t.editing:
            left, top, w, h = ops.normalize_box(t.anchor, p)
            self.state.transient = TextPlacement(
                anchor=Point(left, top),
                current=Point(left + w, top + h),
                font_size=self.style.font_size,
                editing=True,
            )
            return self._emit({Change.TRANSIENT, Change.TEXT_ENTRY})

        # SELECT: la selección persiste. ERASER/IMAGE: nada.
        return NO_CHANGE

    def pointer_leave(self) -> frozenset:
        """El puntero salió de la superficie (o touchcancel): termina un trazo en curso."""
        if self.state.tool == ToolMode.DRAW and self.state.pressed:
            self.state.pressed = False
            return self._emit(self._finish_stroke())
        return NO_CHANGE

    # ----------------------------
    # Texto
    # ----------------------------
    def commit_text(self, text: str) -> Optional[TextBox]:
        """Blur del editor: crea el TextBox si el texto no está vacío. Siempre cierra la edición."""
        t = self.state.transient
        if not (isinstance(t, TextPlacement) and t.editing):
            return None
        obj = ops.build_text_box(t.box(), text, self.style.font_size)
        self.state.transient = None
        changes = {Change.TRANSIENT, Change.TEXT_ENTRY}
        if obj is not None:
            ops.commit(self.scene, obj)
            changes.add(Change.SCENE)
        else:
            log.debug("Texto vacío descartado")
        self._emit(changes)
        return obj

    # ----------------------------
    # Teclado
    # ----------------------------
    def key_down(self, ev: KeyEvent) -> frozenset:
        if ev.key == Key.MODIFIER:
            self.state.modifier_held = True
            return NO_CHANGE
        if ev.key == Key.DELETE:
            return self.delete_selected()
        return NO_CHANGE

    def key_up(self, ev: KeyEvent) -> frozenset:
        if ev.key == Key.MODIFIER:
            self.state.modifier_held = False
        return NO_CHANGE

    def delete_selected(self) -> frozenset:
        if self.state.tool != ToolMode.SELECT or not self.state.selection:
            return NO_CHANGE
        ops.delete_indices(self.scene, self.selected_indices())
        changes = {Change.SCENE, Change.SELECTION}
        changes |= self._clear_selection()
        return self._emit(changes)

    # ----------------------------
    # Internos
    # ----------------------------
    def _active_index(self) -> Optional[int]:
        oid = self.state.active_id
        return self.scene.index_of(oid) if oid else None

    def _clear_selection(self) -> set[Change]:
        changes: set[Change] = set()
        if self.state.selection:
            self.state.selection = []
            changes.add(Change.SELECTION)
        if self.state.font_control_target is not None:
            self.state.font_control_target = None
            changes.add(Change.FONT_CONTROL)
        self.state.drag_armed = False
        return changes

    def _finish_stroke(self) -> set[Change]:
        t = self.state.transient
        self.state.transient = None
        changes = {Change.TRANSIENT}
        if isinstance(t, StrokePlacement):
            obj = ops.build_stroke(t.points, t.color, t.thickness)
            if obj is not None:
                ops.commit(self.scene, obj)
                changes.add(Change.SCENE)
        return changes

    def _select_at(self, p: Point, *, additive: bool) -> set[Change]:
        cfg = self.config
        idx = hit_test(
            self.scene.objects,
            p,
            policy=cfg.hit_policy,
            line_threshold=cfg.line_hit_threshold,
            exact_triangle=cfg.exact_triangle_hit,
        )
        if idx is None:
            if additive:
                self.state.drag_armed = False
                return set()
            return self._clear_selection()

        obj = self.scene.get(idx)
        changes: set[Change] = {Change.SELECTION}
        if additive:
            if obj.oid not in self.state.selection:
                self.state.selection = self.state.selection + [obj.oid]
        else:
            self.state.selection = [obj.oid]

        # Solo el objeto activo se arrastra; un re-click aditivo sobre otro no lo mueve.
        self.state.drag_armed = obj.oid == self.state.active_id
        self.state.drag_offset = p - anchor_of(obj)

        if isinstance(obj, TextBox):
            self.state.font_control_target = obj.oid
            if self.style.font_size != obj.font_size:
                self.style.font_size = obj.font_size
                changes.add(Change.STYLE)
            changes.add(Change.FONT_CONTROL)
        elif self.state.font_control_target is not None:
            self.state.font_control_target = None
            changes.add(Change.FONT_CONTROL)
        return changes

    def _drag_active_to(self, p: Point) -> set[Change]:
        idx = self._active_index()
        if idx is None:
            # Selección vieja (no debería pasar: borrar/goma la limpian).
            return self._clear_selection()
        off = self.state.drag_offset
        ops.move_to(self.scene, idx, p.x - off.x, p.y - off.y)
        changes = {Change.SCENE}
        if self.state.font_control_target == self.state.active_id:
            changes.add(Change.FONT_CONTROL)
        return changes

    def _erase_at(self, p: Point) -> set[Change]:
        cfg = self.config
        removed = ops.erase_at(
            self.scene,
            p,
            cfg.eraser_radius,
            line_threshold=cfg.line_hit_threshold,
            exact_triangle=cfg.exact_triangle_hit,
        )
        if not removed:
            return set()
        changes = {Change.SCENE}
        if any(oid in self.state.selection for oid in removed):
            changes |= self._clear_selection()
        return changes

# File: pizarra/ui/canvas_view.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Lienzo (QWidget) = adaptador de entrada Qt -> WhiteboardController + superficie raster.
# Notes:
#   - Toda la lógica vive en el controller; acá solo se traducen eventos y se repinta.
#   - La superficie (QImage) se re-crea en cada resize y se redibuja completa.
from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QEvent, QRect, Qt, Signal
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QLineEdit, QSpinBox, QWidget

from pizarra.core.input_events import Key, KeyEvent, PointerEvent
from pizarra.core.interaction import Change, WhiteboardController
from pizarra.core.tool_mode import ToolMode
from pizarra.core.version import FONT_SIZE_MAX, FONT_SIZE_MIN
from pizarra.render.scene_painter import new_surface, render_to_image, text_font
from pizarra.utils.log import get_logger

log = get_logger(__name__)

# Separación vertical entre el TextBox y su control de tamaño de fuente.
FONT_CONTROL_GAP = 10


class CanvasView(QWidget):
    tool_changed = Signal(str)
    style_changed = Signal()
    scene_changed = Signal(int)  # cantidad de objetos

    def __init__(self, controller: WhiteboardController, parent=None):
        super().__init__(parent)
        self._controller = controller
        self._surface = new_surface(1, 1)

        self.setFocusPolicy(Qt.StrongFocus)
        self.setMouseTracking(False)
        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setAttribute(Qt.WA_OpaquePaintEvent, True)

        # Editor de texto inline (se abre al soltar con la herramienta Texto).
        self._text_editor = QLineEdit(self)
        self._text_editor.setObjectName("PizarraTextEditor")
        self._text_editor.setFrame(False)
        self._text_editor.setStyleSheet("background: rgba(255,255,255,230); border: 1px dashed #1976d2;")
        self._text_editor.hide()
        self._text_editor.editingFinished.connect(self.finish_text_entry)
        self._finishing_text = False

        # Control de tamaño de fuente para el TextBox seleccionado.
        self._font_spin = QSpinBox(self)
        self._font_spin.setObjectName("PizarraFontSize")
        self._font_spin.setRange(FONT_SIZE_MIN, FONT_SIZE_MAX)
        self._font_spin.setSuffix(" px")
        self._font_spin.hide()
        self._font_spin.valueChanged.connect(self._on_font_spin_changed)

        self._subscription = controller.subscribe(self._on_controller_changed)

    # ----------------------------
    # API
    # ----------------------------
    @property
    def controller(self) -> WhiteboardController:
        return self._controller

    @property
    def text_editor(self) -> QLineEdit:
        return self._text_editor

    @property
    def font_control(self) -> QSpinBox:
        return self._font_spin

    def surface(self):
        return self._surface

    def shutdown(self) -> None:
        """Suelta la suscripción al controller (idempotente)."""
        self._subscription.close()

    def set_tool(self, tool: ToolMode | str) -> None:
        # Cambio de herramienta: el editor se cierra SIN commit.
        self._dispatch(self._controller.set_tool, tool)

    def finish_text_entry(self) -> None:
        """Blur del editor: commit (o descarte si está vacío)."""
        if self._finishing_text or not self._text_editor.isVisible():
            return
        self._finishing_text = True
        try:
            text = self._text_editor.text()
            self._text_editor.hide()
            self._text_editor.clear()
            self._dispatch(self._controller.commit_text, text)
        finally:
            self._finishing_text = False
        self.setFocus(Qt.OtherFocusReason)

    # ----------------------------
    # Render
    # ----------------------------
    def rerender(self) -> None:
        c = self._controller
        self._surface = render_to_image(
            self.width(),
            self.height(),
            c.scene.objects,
            c.state.selection,
            c.state.transient,
            c.style,
            surface=self._surface,
        )
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        try:
            painter.drawImage(0, 0, self._surface)
        finally:
            painter.end()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._surface = new_surface(self.width(), self.height())
        self.rerender()
        self._sync_overlays()

    # ----------------------------
    # Eventos de entrada
    # ----------------------------
    def mousePressEvent(self, event) -> None:
        if self._text_editor.isVisible():
            self.finish_text_entry()
        if event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        self.setFocus(Qt.MouseFocusReason)
        self._dispatch(self._controller.pointer_down, self._pointer(event, held=True))
        event.accept()

    def mouseMoveEvent(self, event) -> None:
        held = bool(event.buttons() & Qt.LeftButton)
        # Con el botón apretado Qt retiene el mouse: leaveEvent llega recién al soltar.
        if (
            held
            and self._controller.tool == ToolMode.DRAW
            and not self.rect().contains(event.position().toPoint())
        ):
            self._dispatch(self._controller.pointer_leave)
            event.accept()
            return
        self._dispatch(self._controller.pointer_move, self._pointer(event, held=held))
        event.accept()

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._dispatch(self._controller.pointer_up, self._pointer(event, held=False))
        event.accept()

    def leaveEvent(self, event) -> None:
        self._dispatch(self._controller.pointer_leave)
        super().leaveEvent(event)

    def event(self, event) -> bool:
        et = event.type()
        if et in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd, QEvent.TouchCancel):
            self._handle_touch(event)
            return True
        return super().event(event)

    def _handle_touch(self, event) -> None:
        et = event.type()
        if et == QEvent.TouchCancel:
            self._dispatch(self._controller.pointer_leave)
            return
        pts = event.points()
        if not pts:
            return
        pos = pts[0].position()
        ev = PointerEvent(pos.x(), pos.y(), primary_held=et != QEvent.TouchEnd, touch=True)
        if et == QEvent.TouchBegin:
            self._dispatch(self._controller.pointer_down, ev)
        elif et == QEvent.TouchUpdate:
            self._dispatch(self._controller.pointer_move, ev)
        else:
            self._dispatch(self._controller.pointer_up, ev)

    def keyPressEvent(self, event) -> None:
        key = _qt_key(event.key())
        if key is Key.OTHER or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self._dispatch(self._controller.key_down, KeyEvent(key))
        event.accept()

    def keyReleaseEvent(self, event) -> None:
        key = _qt_key(event.key())
        if key is Key.OTHER or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self._dispatch(self._controller.key_up, KeyEvent(key))
        event.accept()

    def closeEvent(self, event) -> None:
        self.shutdown()
        super().closeEvent(event)

    # ----------------------------
    # Internos
    # ----------------------------
    def _pointer(self, event, *, held: bool) -> PointerEvent:
        pos = event.position()
        modifier = bool(event.modifiers() & Qt.ControlModifier)
        return PointerEvent(pos.x(), pos.y(), primary_held=held, modifier=modifier)

    def _dispatch(self, fn: Callable, *args):
        # Nunca dejar que una excepción del núcleo mate el loop de Qt.
        try:
            return fn(*args)
        except Exception:
            log.exception("Error procesando %s", getattr(fn, "__name__", fn))
            return None

    def _on_controller_changed(self, changes: frozenset) -> None:
        if changes & {Change.SCENE, Change.SELECTION, Change.TRANSIENT}:
            self.rerender()
        if Change.SCENE in changes:
            self.scene_changed.emit(len(self._controller.scene))
        if Change.TOOL in changes:
            self.tool_changed.emit(self._controller.tool.value)
        if Change.STYLE in changes:
            self.style_changed.emit()
        if changes & {Change.TEXT_ENTRY, Change.FONT_CONTROL, Change.STYLE, Change.SCENE}:
            self._sync_overlays()

    def _sync_overlays(self) -> None:
        self._sync_text_editor()
        self._sync_font_control()

    def _sync_text_editor(self) -> None:
        box = self._controller.text_entry_box()
        if box is None:
            if self._text_editor.isVisible() and not self._finishing_text:
                # Cerrado por el núcleo (p.ej. cambio de herramienta): descarte sin commit.
                self._text_editor.hide()
                self._text_editor.clear()
            return
        x, y, w, h = box
        self._text_editor.setFont(text_font(self._controller.style.font_size))
        self._text_editor.setGeometry(QRect(int(x), int(y), max(int(w), 80), max(int(h), 24)))
        if not self._text_editor.isVisible():
            self._text_editor.clear()
            self._text_editor.show()
        self._text_editor.setFocus(Qt.OtherFocusReason)

    def _sync_font_control(self) -> None:
        box = self._controller.font_control_box()
        if box is None:
            self._font_spin.hide()
            return
        x, y, w, h = box
        self._font_spin.blockSignals(True)
        try:
            self._font_spin.setValue(int(self._controller.style.font_size))
        finally:
            self._font_spin.blockSignals(False)
        self._font_spin.move(int(x), int(y + h + FONT_CONTROL_GAP))
        self._font_spin.adjustSize()
        self._font_spin.show()

    def _on_font_spin_changed(self, value: int) -> None:
        self._dispatch(self._controller.edit_selected_font_size, value)


def _qt_key(qt_key: int) -> Key:
    if qt_key == Qt.Key_Control:
        return Key.MODIFIER
    if qt_key == Qt.Key_Delete:
        return Key.DELETE
    return Key.OTHER

# File: pizarra/ui/main_window.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Ventana principal: lienzo + barras (herramientas, figura, color, grosor, fuente).
# Notes: La barra solo escribe estilo/herramienta en el controller; no tiene lógica de gestos.
from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QActionGroup, QCloseEvent, QColor, QIcon, QPixmap
from PySide6.QtWidgets import QComboBox, QLabel, QMainWindow, QSpinBox, QStatusBar, QToolBar

from pizarra.core.interaction import Style, WhiteboardController
from pizarra.core.models import Rect
from pizarra.core.scene import Scene
from pizarra.core.settings import AppSettings, EngineConfig
from pizarra.core.tool_mode import ShapeKind, ToolMode
from pizarra.core.version import (
    APP_NAME,
    APP_VERSION,
    COLOR_PALETTE,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    THICKNESS_MAX,
    THICKNESS_MIN,
)
from pizarra.ui.canvas_view import CanvasView
from pizarra.utils.log import get_logger

log = get_logger(__name__)

TOOL_LABELS = (
    (ToolMode.SELECT, "Seleccionar", "Click = seleccionar (Ctrl = sumar), arrastrar = mover, Supr = borrar"),
    (ToolMode.DRAW, "Dibujar", "Trazo a mano alzada"),
    (ToolMode.SHAPES, "Figuras", "Arrastrar para colocar la figura elegida"),
    (ToolMode.TEXT, "Texto", "Arrastrar un recuadro y escribir"),
    (ToolMode.IMAGE, "Imagen", "Imagen (no disponible)"),
    (ToolMode.ERASER, "Goma", "Borra lo que toca"),
)

SHAPE_LABELS = (
    (ShapeKind.SQUARE, "Cuadrado"),
    (ShapeKind.CIRCLE, "Círculo"),
    (ShapeKind.TRIANGLE, "Triángulo"),
    (ShapeKind.LINE, "Línea"),
)

# Rectángulo de demostración (x, y, w, h).
DEMO_RECT = (100.0, 100.0, 120.0, 80.0)


def _color_icon(color: str, size: int = 16) -> QIcon:
    pm = QPixmap(size, size)
    pm.fill(QColor(color))
    return QIcon(pm)


class MainWindow(QMainWindow):
    def __init__(self, *, demo: bool = False, settings: AppSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("{} v{}".format(APP_NAME, APP_VERSION))
        self.resize(1200, 800)

        # Preferencias usuario (estilo + herramienta)
        self._settings = settings or AppSettings.load()
        style = Style(
            color=self._settings.color,
            thickness=self._settings.thickness,
            font_size=self._settings.font_size,
            shape_kind=self._settings.shape_kind,
        )
        scene = Scene([Rect(*DEMO_RECT)] if demo else None)
        self._controller = WhiteboardController(
            scene,
            style=style,
            config=EngineConfig.from_env(),
            tool=self._settings.tool_mode,
        )
        log.debug("EngineConfig: %s", self._controller.config)

        self._tool_actions: dict[ToolMode, QAction] = {}
        self._build_ui()

    @property
    def controller(self) -> WhiteboardController:
        return self._controller

    @property
    def canvas(self) -> CanvasView:
        return self._canvas

    def _build_ui(self) -> None:
        self._canvas = CanvasView(self._controller, self)
        self.setCentralWidget(self._canvas)
        self._canvas.tool_changed.connect(self._on_tool_changed)
        self._canvas.style_changed.connect(self._sync_style_widgets)
        self._canvas.scene_changed.connect(lambda n: self._status(f"{n} objeto(s)"))

        self._build_toolbar()

        sb = QStatusBar(self)
        self.setStatusBar(sb)
        self._status_label = QLabel("Listo", self)
        sb.addPermanentWidget(self._status_label)
        self._on_tool_changed(self._controller.tool.value)

    def _build_toolbar(self) -> None:
        # ------------------------------------------------
        # Barra 1: Herramientas
        # ------------------------------------------------
        tb_tools = QToolBar("Herramientas", self)
        tb_tools.setObjectName("tb_tools")
        tb_tools.setMovable(True)
        tb_tools.setToolButtonStyle(Qt.ToolButtonTextOnly)

        grp = QActionGroup(self)
        grp.setExclusive(True)
        for mode, text, tip in TOOL_LABELS:
            a = QAction(text, self)
            a.setCheckable(True)
            a.setToolTip(tip)
            a.setData(mode.value)
            a.triggered.connect(lambda _=False, m=mode: self._set_tool_mode(m))
            grp.addAction(a)
            tb_tools.addAction(a)
            self._tool_actions[mode] = a

        # ------------------------------------------------
        # Barra 2: Estilo
        # ------------------------------------------------
        tb_style = QToolBar("Estilo", self)
        tb_style.setObjectName("tb_style")
        tb_style.setMovable(True)

        self._cb_shape = QComboBox(self)
        for kind, label in SHAPE_LABELS:
            self._cb_shape.addItem(label, kind.value)
        self._cb_shape.currentIndexChanged.connect(
            lambda _i: self._controller.set_shape_kind(self._cb_shape.currentData())
        )
        tb_style.addWidget(QLabel(" Figura: ", self))
        tb_style.addWidget(self._cb_shape)

        tb_style.addSeparator()
        color_grp = QActionGroup(self)
        color_grp.setExclusive(True)
        self._color_actions: dict[str, QAction] = {}
        for name, value in COLOR_PALETTE:
            a = QAction(_color_icon(value), name, self)
            a.setCheckable(True)
            a.setToolTip(f"{name} ({value})")
            a.triggered.connect(lambda _=False, c=value: self._set_color(c))
            color_grp.addAction(a)
            tb_style.addAction(a)
            self._color_actions[value] = a

        tb_style.addSeparator()
        self._sp_thickness = QSpinBox(self)
        self._sp_thickness.setRange(THICKNESS_MIN, THICKNESS_MAX)
        self._sp_thickness.setSuffix(" px")
        self._sp_thickness.valueChanged.connect(self._set_thickness)
        tb_style.addWidget(QLabel(" Grosor: ", self))
        tb_style.addWidget(self._sp_thickness)

        self._sp_font = QSpinBox(self)
        self._sp_font.setRange(FONT_SIZE_MIN, FONT_SIZE_MAX)
        self._sp_font.setSuffix(" px")
        self._sp_font.valueChanged.connect(self._set_font_size)
        tb_style.addWidget(QLabel(" Fuente: ", self))
        tb_style.addWidget(self._sp_font)

        self.addToolBar(Qt.TopToolBarArea, tb_tools)
        self.addToolBar(Qt.TopToolBarArea, tb_style)
        self._sync_style_widgets()

    # ----------------------------
    # Acciones
    # ----------------------------
    def _set_tool_mode(self, mode: ToolMode) -> None:
        self._canvas.set_tool(mode)

    def _set_color(self, color: str) -> None:
        self._controller.set_color(color)
        self._settings.color = color

    def _set_thickness(self, value: int) -> None:
        self._controller.set_thickness(value)
        self._settings.thickness = int(value)

    def _set_font_size(self, value: int) -> None:
        self._controller.set_font_size(value)

    def _on_tool_changed(self, tool: str) -> None:
        mode = self._controller.tool
        a = self._tool_actions.get(mode)
        if a is not None and not a.isChecked():
            a.setChecked(True)
        self._cb_shape.setEnabled(mode == ToolMode.SHAPES)
        self._sp_font.setEnabled(mode in (ToolMode.TEXT, ToolMode.SELECT))
        self._settings.tool_mode = mode
        self._status(f"Herramienta: {tool}")

    def _sync_style_widgets(self) -> None:
        st = self._controller.style
        for w, value in ((self._sp_thickness, int(st.thickness)), (self._sp_font, int(st.font_size))):
            w.blockSignals(True)
            try:
                w.setValue(value)
            finally:
                w.blockSignals(False)
        idx = self._cb_shape.findData(st.shape_kind.value)
        if idx >= 0 and idx != self._cb_shape.currentIndex():
            self._cb_shape.blockSignals(True)
            try:
                self._cb_shape.setCurrentIndex(idx)
            finally:
                self._cb_shape.blockSignals(False)
        a = self._color_actions.get(st.color)
        if a is not None:
            a.setChecked(True)
        self._settings.font_size = int(st.font_size)
        self._settings.shape_kind = st.shape_kind

    def _status(self, msg: str) -> None:
        self._status_label.setText(msg)

    def closeEvent(self, event: QCloseEvent) -> None:
        self._settings.save()
        self._canvas.shutdown()
        self._controller.close()
        event.accept()

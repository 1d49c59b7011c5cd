from __future__ import annotations

import pytest
from gestures import drag, press, release
from PySide6.QtCore import QEvent, QPointF, Qt
from PySide6.QtGui import QMouseEvent

from pizarra.core.interaction import WhiteboardController
from pizarra.core.models import Point, Stroke, TextBox
from pizarra.core.scene import Scene
from pizarra.core.settings import AppSettings
from pizarra.core.tool_mode import ToolMode
from pizarra.ui.canvas_view import CanvasView
from pizarra.ui.main_window import MainWindow


@pytest.fixture
def canvas(qapp):
    c = WhiteboardController(Scene(), tool=ToolMode.DRAW)
    view = CanvasView(c)
    view.resize(300, 200)
    view.show()
    qapp.processEvents()
    yield view
    view.shutdown()
    view.close()
    view.deleteLater()
    qapp.processEvents()


def test_text_tool_opens_editor_and_commits_on_finish(canvas):
    c = canvas.controller
    committed = []
    canvas.scene_changed.connect(committed.append)

    canvas.set_tool(ToolMode.TEXT)
    press(c, 20, 20)
    drag(c, 120, 60)
    release(c, 120, 60)
    assert canvas.text_editor.isVisible()
    assert canvas.text_editor.geometry().topLeft().x() == 20

    canvas.text_editor.setText("Hola")
    canvas.finish_text_entry()
    assert not canvas.text_editor.isVisible()
    (obj,) = c.scene.objects
    assert isinstance(obj, TextBox)
    assert obj.text == "Hola"
    assert committed[-1] == 1


def test_tool_switch_hides_editor_without_commit(canvas):
    c = canvas.controller
    canvas.set_tool(ToolMode.TEXT)
    press(c, 20, 20)
    release(c, 120, 60)
    canvas.text_editor.setText("descartado")
    canvas.set_tool(ToolMode.DRAW)
    assert not canvas.text_editor.isVisible()
    assert len(c.scene) == 0


def test_font_control_follows_selected_text_box(canvas):
    c = canvas.controller
    c.scene.append(TextBox(10, 10, 100, 40, "hola", font_size=20))
    canvas.set_tool(ToolMode.SELECT)
    press(c, 20, 20)
    release(c, 20, 20)

    spin = canvas.font_control
    assert spin.isVisible()
    assert spin.value() == 20
    assert spin.y() == 10 + 40 + 10

    spin.setValue(30)
    assert c.scene.get(0).font_size == 30


def test_stroke_is_rendered_to_surface(canvas):
    c = canvas.controller
    c.set_color("#e53935")
    press(c, 10, 100)
    drag(c, 200, 100)
    release(c, 200, 100)
    assert canvas.surface().pixelColor(100, 100).name() == "#e53935"


def _mouse(etype, x, y, *, held=True):
    buttons = Qt.LeftButton if held else Qt.NoButton
    return QMouseEvent(etype, QPointF(x, y), QPointF(x, y), Qt.LeftButton, buttons, Qt.NoModifier)


def test_drag_out_of_canvas_commits_stroke(canvas):
    c = canvas.controller
    canvas.mousePressEvent(_mouse(QEvent.MouseButtonPress, 10, 10))
    canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 100, 10))
    canvas.mouseMoveEvent(_mouse(QEvent.MouseMove, 350, 10))

    assert c.state.transient is None
    (stroke,) = c.scene.objects
    assert isinstance(stroke, Stroke)
    assert stroke.points == (Point(10, 10), Point(100, 10))

    # El release fuera del lienzo ya no agrega nada.
    canvas.mouseReleaseEvent(_mouse(QEvent.MouseButtonRelease, 350, 10, held=False))
    assert len(c.scene) == 1


def test_resize_repaints_scene_on_new_surface(canvas, qapp):
    c = canvas.controller
    c.set_color("#e53935")
    press(c, 10, 100)
    drag(c, 200, 100)
    release(c, 200, 100)

    canvas.resize(400, 300)
    qapp.processEvents()
    img = canvas.surface()
    assert (img.width(), img.height()) == (400, 300)
    assert img.pixelColor(100, 100).name() == "#e53935"
    assert img.pixelColor(100, 150).name() == "#ffffff"
    assert img.pixelColor(350, 250).name() == "#ffffff"


def test_shutdown_releases_subscription(canvas):
    tools = []
    canvas.tool_changed.connect(tools.append)
    canvas.controller.set_tool(ToolMode.SELECT)
    assert tools == ["select"]
    canvas.shutdown()
    canvas.controller.set_tool(ToolMode.ERASER)
    assert tools == ["select"]


def test_main_window_demo_and_settings_on_close(qapp, tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    w = MainWindow(demo=True, settings=AppSettings(tool_mode=ToolMode.SHAPES))
    assert len(w.controller.scene) == 1
    assert w.controller.tool is ToolMode.SHAPES

    w.show()
    w.canvas.set_tool(ToolMode.SELECT)
    w.close()
    saved = AppSettings.load(tmp_path / ".pizarra" / "settings.json")
    assert saved.tool_mode is ToolMode.SELECT
    w.deleteLater()

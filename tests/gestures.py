"""Atajos para manejar el controller como lo haría el adaptador de UI."""

from __future__ import annotations

from pizarra.core.input_events import PointerEvent
from pizarra.core.interaction import WhiteboardController
from pizarra.core.scene import Scene
from pizarra.core.tool_mode import ToolMode


def make_controller(objects=(), tool: ToolMode = ToolMode.SELECT) -> WhiteboardController:
    return WhiteboardController(Scene(list(objects)), tool=tool)


def press(c: WhiteboardController, x: float, y: float, *, modifier: bool = False, touch: bool = False):
    return c.pointer_down(PointerEvent(x, y, primary_held=True, modifier=modifier, touch=touch))


def drag(c: WhiteboardController, x: float, y: float, *, held: bool = True, touch: bool = False):
    return c.pointer_move(PointerEvent(x, y, primary_held=held, touch=touch))


def release(c: WhiteboardController, x: float, y: float, *, touch: bool = False):
    return c.pointer_up(PointerEvent(x, y, primary_held=False, touch=touch))


def click(c: WhiteboardController, x: float, y: float, *, modifier: bool = False):
    press(c, x, y, modifier=modifier)
    return release(c, x, y)

"""Pizarra - version constants.

Keep this module tiny and dependency-free. It is imported by many places
(core models, geometry, render, UI) and must not have side effects.
"""

APP_NAME = "Pizarra"

# App semantic version.
APP_VERSION = "0.1.0"

# Style defaults (valores iniciales de la barra de herramientas).
DEFAULT_COLOR = "#222"
DEFAULT_THICKNESS = 5
DEFAULT_FONT_SIZE = 16

# NOTE: el rango de fuente es parte del contrato de TextBox (siempre clamp).
FONT_SIZE_MIN = 8
FONT_SIZE_MAX = 48

THICKNESS_MIN = 1
THICKNESS_MAX = 50

# Paleta (nombre, color CSS).
COLOR_PALETTE = (
    ("Black", "#222"),
    ("Red", "#e53935"),
    ("Blue", "#1976d2"),
    ("Green", "#43a047"),
    ("Yellow", "#fbc02d"),
    ("Purple", "#8e24aa"),
    ("Pink", "#d81b60"),
    ("Grey", "#757575"),
)

# Render
BACKGROUND_COLOR = "#ffffff"
HIGHLIGHT_COLOR = "#1976d2"
TEXT_COLOR = "#222"
TEXT_OUTLINE_WIDTH = 2
TEXT_FONT_FAMILY = "Arial"
TEXT_PADDING = 4
TEXT_LINE_GAP = 4

# Caja de texto por defecto cuando el rectángulo arrastrado es degenerado.
DEFAULT_TEXT_BOX = (80.0, 40.0)

# Hit-testing (unidades de superficie).
LINE_HIT_THRESHOLD = 10.0
ERASER_RADIUS = 16.0

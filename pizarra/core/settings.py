# File: pizarra/core/settings.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Preferencias de usuario (JSON) + settings del proyecto vía env + EngineConfig.
# Notes: No depende de Qt; guarda en ~/.pizarra/settings.json. La escena NO se persiste.
from __future__ import annotations

import json
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from pizarra.core.models import clamp_font_size
from pizarra.core.tool_mode import ShapeKind, ToolMode, coerce_shape_kind, coerce_tool_mode
from pizarra.core.version import (
    DEFAULT_COLOR,
    DEFAULT_FONT_SIZE,
    DEFAULT_THICKNESS,
    ERASER_RADIUS,
    LINE_HIT_THRESHOLD,
    THICKNESS_MAX,
    THICKNESS_MIN,
)
from pizarra.geom.hit_test import HitPolicy, coerce_hit_policy

log = logging.getLogger(__name__)


def settings_dir() -> Path:
    """Carpeta de settings del usuario."""
    return Path.home() / ".pizarra"


def settings_path() -> Path:
    return settings_dir() / "settings.json"


# ------------------------------
# Env helpers (tolerantes)
# ------------------------------

def _env_float(name: str, default: float, *, min_value: float = -1e9, max_value: float = 1e9) -> float:
    try:
        v = float(os.getenv(name, str(default)).strip())
    except (TypeError, ValueError):
        return float(default)
    if v < float(min_value):
        return float(min_value)
    if v > float(max_value):
        return float(max_value)
    return float(v)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return bool(default)
    s = str(raw).strip().lower()
    if s in ("1", "true", "yes", "y", "on"):
        return True
    if s in ("0", "false", "no", "n", "off"):
        return False
    return bool(default)


# ------------------------------
# Project settings (repo-local)
# ------------------------------
# Defaults reproducibles por proyecto (no por usuario) sin tocar el código.
PROJECT_SETTINGS_FILENAME = "pizarra_settings.json"


def find_project_settings_path(start: Path | None = None) -> Path | None:
    """Busca pizarra_settings.json subiendo desde start (o CWD)."""
    start = (start or Path.cwd()).resolve()
    for p in (start, *start.parents):
        candidate = p / PROJECT_SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _deep_get(d: Dict[str, Any], path: str, default: Any = None) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def apply_project_settings(
    start: Path | None = None,
    *,
    logger: logging.Logger | None = None,
    prefer_env: bool = True,
) -> Dict[str, Any]:
    """Carga pizarra_settings.json (si existe) y lo aplica como variables de entorno.

    - Si `prefer_env=True`, una env var ya seteada NO se pisa (ganan los overrides manuales).
    - Si `prefer_env=False`, el JSON pisa la env var.

    Devuelve un dict con los valores *aplicados desde JSON* (útil para logging/debug).
    """
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        return {}

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        _log.warning("No se pudo leer %s: %s", p, e)
        return {}
    if not isinstance(data, dict):
        _log.warning("%s ignorado: la raíz no es un objeto JSON", p)
        return {}

    applied: Dict[str, Any] = {}

    def _set_env(key: str, value: Any) -> None:
        if prefer_env and os.environ.get(key):
            return
        os.environ[key] = str(value)

    radius = _deep_get(data, "engine.eraser_radius")
    if isinstance(radius, (int, float)) and 1 <= float(radius) <= 200:
        applied["engine.eraser_radius"] = float(radius)
        _set_env("PIZARRA_ERASER_RADIUS", float(radius))

    thr = _deep_get(data, "engine.line_hit_threshold")
    if isinstance(thr, (int, float)) and 1 <= float(thr) <= 100:
        applied["engine.line_hit_threshold"] = float(thr)
        _set_env("PIZARRA_LINE_HIT_THRESHOLD", float(thr))

    policy = _deep_get(data, "engine.hit_policy")
    if isinstance(policy, str) and policy.strip().lower() in {m.value for m in HitPolicy}:
        applied["engine.hit_policy"] = policy.strip().lower()
        _set_env("PIZARRA_HIT_POLICY", policy.strip().lower())

    exact = _deep_get(data, "engine.exact_triangle_hit")
    if isinstance(exact, bool):
        applied["engine.exact_triangle_hit"] = exact
        _set_env("PIZARRA_EXACT_TRIANGLE_HIT", "1" if exact else "0")

    if applied:
        _log.info("Project settings aplicados desde %s: %s", p, applied)
    return applied


@dataclass(frozen=True)
class EngineConfig:
    """Parámetros del motor (hit-testing/goma). Inmutable durante una sesión."""

    eraser_radius: float = ERASER_RADIUS
    line_hit_threshold: float = LINE_HIT_THRESHOLD
    hit_policy: HitPolicy = HitPolicy.PRIORITY
    exact_triangle_hit: bool = False

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            eraser_radius=_env_float("PIZARRA_ERASER_RADIUS", ERASER_RADIUS, min_value=1.0, max_value=200.0),
            line_hit_threshold=_env_float(
                "PIZARRA_LINE_HIT_THRESHOLD", LINE_HIT_THRESHOLD, min_value=1.0, max_value=100.0
            ),
            hit_policy=coerce_hit_policy(os.getenv("PIZARRA_HIT_POLICY")),
            exact_triangle_hit=_env_bool("PIZARRA_EXACT_TRIANGLE_HIT", False),
        )


@dataclass
class AppSettings:
    """Preferencias persistentes del usuario (estilo y herramienta activa)."""

    tool_mode: ToolMode = ToolMode.DRAW
    shape_kind: ShapeKind = ShapeKind.SQUARE
    color: str = DEFAULT_COLOR
    thickness: int = DEFAULT_THICKNESS
    font_size: int = DEFAULT_FONT_SIZE

    @classmethod
    def load(cls, path: Path | None = None) -> "AppSettings":
        p = path or settings_path()
        try:
            if not p.exists():
                return cls()
            data = json.loads(p.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                return cls()
            out = cls()
            out.tool_mode = coerce_tool_mode(data.get("tool_mode", out.tool_mode.value))
            out.shape_kind = coerce_shape_kind(data.get("shape_kind", out.shape_kind.value))
            out.color = _coerce_color(data.get("color", out.color))
            out.thickness = _coerce_int(data.get("thickness", out.thickness), THICKNESS_MIN, THICKNESS_MAX, DEFAULT_THICKNESS)
            out.font_size = clamp_font_size(data.get("font_size", out.font_size))
            return out
        except (OSError, ValueError):
            log.debug("No se pudieron cargar settings: %s", p, exc_info=True)
            return cls()

    def save(self, path: Path | None = None) -> None:
        p = path or settings_path()
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            payload: Dict[str, Any] = {
                "schema_version": 1,
                "tool_mode": str(coerce_tool_mode(self.tool_mode).value),
                "shape_kind": str(coerce_shape_kind(self.shape_kind).value),
                "color": _coerce_color(self.color),
                "thickness": _coerce_int(self.thickness, THICKNESS_MIN, THICKNESS_MAX, DEFAULT_THICKNESS),
                "font_size": clamp_font_size(self.font_size),
            }
            p.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError:
            log.debug("No se pudieron guardar settings", exc_info=True)


def _coerce_color(v: Any) -> str:
    s = str(v or "").strip()
    if s.startswith("#") and len(s) in (4, 7) and all(c in "0123456789abcdefABCDEF" for c in s[1:]):
        return s
    return DEFAULT_COLOR


def _coerce_int(v: Any, min_v: int, max_v: int, default: int) -> int:
    try:
        n = int(v)
    except (TypeError, ValueError):
        return int(default)
    if n < min_v:
        return min_v
    if n > max_v:
        return max_v
    return n

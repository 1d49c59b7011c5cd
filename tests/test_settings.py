from __future__ import annotations

import json

import pytest

from pizarra.core.settings import AppSettings, EngineConfig, apply_project_settings
from pizarra.core.tool_mode import ShapeKind, ToolMode
from pizarra.geom.hit_test import HitPolicy

ENV_KEYS = (
    "PIZARRA_ERASER_RADIUS",
    "PIZARRA_LINE_HIT_THRESHOLD",
    "PIZARRA_HIT_POLICY",
    "PIZARRA_EXACT_TRIANGLE_HIT",
)


@pytest.fixture
def clean_env(monkeypatch):
    # Vacío = sin override; apply_project_settings los puede pisar.
    for k in ENV_KEYS:
        monkeypatch.setenv(k, "")
    return monkeypatch


def test_engine_config_defaults(clean_env):
    cfg = EngineConfig.from_env()
    assert cfg == EngineConfig()
    assert cfg.eraser_radius == 16.0
    assert cfg.line_hit_threshold == 10.0
    assert cfg.hit_policy is HitPolicy.PRIORITY
    assert cfg.exact_triangle_hit is False


def test_engine_config_from_env_clamps(clean_env):
    clean_env.setenv("PIZARRA_ERASER_RADIUS", "999")
    clean_env.setenv("PIZARRA_LINE_HIT_THRESHOLD", "abc")
    clean_env.setenv("PIZARRA_HIT_POLICY", "topmost")
    clean_env.setenv("PIZARRA_EXACT_TRIANGLE_HIT", "yes")
    cfg = EngineConfig.from_env()
    assert cfg.eraser_radius == 200.0
    assert cfg.line_hit_threshold == 10.0
    assert cfg.hit_policy is HitPolicy.TOPMOST
    assert cfg.exact_triangle_hit is True


def test_project_settings_seed_env(clean_env, tmp_path):
    (tmp_path / "pizarra_settings.json").write_text(
        json.dumps({"engine": {"eraser_radius": 24, "hit_policy": "TOPMOST", "line_hit_threshold": 500}}),
        encoding="utf-8",
    )
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    applied = apply_project_settings(nested)
    assert applied == {"engine.eraser_radius": 24.0, "engine.hit_policy": "topmost"}
    cfg = EngineConfig.from_env()
    assert cfg.eraser_radius == 24.0
    assert cfg.hit_policy is HitPolicy.TOPMOST


def test_project_settings_do_not_override_env(clean_env, tmp_path):
    clean_env.setenv("PIZARRA_ERASER_RADIUS", "30")
    (tmp_path / "pizarra_settings.json").write_text(json.dumps({"engine": {"eraser_radius": 24}}), encoding="utf-8")
    apply_project_settings(tmp_path)
    assert EngineConfig.from_env().eraser_radius == 30.0


def test_project_settings_invalid_json_is_ignored(clean_env, tmp_path):
    (tmp_path / "pizarra_settings.json").write_text("{nope", encoding="utf-8")
    assert apply_project_settings(tmp_path) == {}


def test_app_settings_save_and_load(tmp_path):
    p = tmp_path / "settings.json"
    s = AppSettings(tool_mode=ToolMode.TEXT, shape_kind=ShapeKind.LINE, color="#e53935", thickness=9, font_size=30)
    s.save(p)
    assert AppSettings.load(p) == s


def test_app_settings_load_is_tolerant(tmp_path):
    p = tmp_path / "settings.json"
    assert AppSettings.load(p) == AppSettings()

    p.write_text(json.dumps({"color": "rojo", "thickness": 500, "font_size": 2, "tool_mode": "??"}), encoding="utf-8")
    s = AppSettings.load(p)
    assert s.color == "#222"
    assert s.thickness == 50
    assert s.font_size == 8
    assert s.tool_mode is ToolMode.DRAW

    p.write_text("[]", encoding="utf-8")
    assert AppSettings.load(p) == AppSettings()

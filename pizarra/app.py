# File: pizarra/app.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Entry-point de la aplicación.
# Notes: python -m pizarra.app [--demo] [--tool draw] [--log-level debug]
from __future__ import annotations

import argparse
import sys
from typing import Sequence

from PySide6.QtWidgets import QApplication

from pizarra.core.settings import AppSettings, apply_project_settings
from pizarra.core.tool_mode import ToolMode, coerce_tool_mode
from pizarra.core.version import APP_NAME, APP_VERSION
from pizarra.ui.main_window import MainWindow
from pizarra.utils.log import get_logger, parse_level, setup_logging

log = get_logger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="pizarra", description=f"{APP_NAME}: pizarra vectorial.")
    ap.add_argument("--demo", action="store_true", help="Arranca con un rectángulo de ejemplo.")
    ap.add_argument(
        "--tool",
        choices=[m.value for m in ToolMode],
        default=None,
        help="Herramienta inicial (por defecto: la última usada).",
    )
    ap.add_argument("--log-level", default="info", help="debug | info | warning | error")
    ap.add_argument("--log-dir", default="logs", help="Carpeta para pizarra.log")
    ap.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return ap


def main(argv: Sequence[str] | None = None) -> int:
    args, qt_args = build_arg_parser().parse_known_args(argv)
    setup_logging(args.log_dir, level=parse_level(args.log_level))
    # Project-level defaults (repo-local): pizarra_settings.json
    apply_project_settings(logger=log, prefer_env=True)

    settings = AppSettings.load()
    if args.tool:
        settings.tool_mode = coerce_tool_mode(args.tool)

    app = QApplication([sys.argv[0], *qt_args])
    w = MainWindow(demo=args.demo, settings=settings)
    w.show()
    log.info("%s iniciado (v%s)", APP_NAME, APP_VERSION)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())

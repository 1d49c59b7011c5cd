# File: pizarra/utils/log.py
# Project: Pizarra
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Logging centralizado (consola + archivo) y helpers.
# Notes: Idempotente: llamar setup_logging() más de una vez no duplica handlers.
from __future__ import annotations

import logging
import os
from pathlib import Path

_LOGGER_CONFIGURED = False

LOG_FILENAME = "pizarra.log"


def setup_logging(log_dir: str | os.PathLike = "logs", level: int = logging.INFO) -> None:
    """Configura logging en consola + archivo.

    Nota:
        - No lanza excepción si no puede escribir el archivo; cae a consola.
    """
    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    logger = logging.getLogger()
    logger.setLevel(level)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Consola
    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # Archivo
    try:
        d = Path(log_dir)
        d.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(d / LOG_FILENAME, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    except OSError as e:
        logging.getLogger(__name__).warning("No se pudo inicializar FileHandler: %s", e)

    _LOGGER_CONFIGURED = True


def parse_level(name: str | None, default: int = logging.INFO) -> int:
    """Nombre de nivel ('debug', 'INFO', ...) -> int. Tolerante."""
    s = str(name or "").strip().upper()
    if not s:
        return default
    lvl = logging.getLevelName(s)
    return lvl if isinstance(lvl, int) else default


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

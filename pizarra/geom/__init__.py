"""Geometry helpers.

This package is intentionally small and dependency-free (no Qt): pure
containment/distance primitives plus the hit-testing engine built on top.
The UI and the controller both call into it with surface coordinates.
"""

from __future__ import annotations

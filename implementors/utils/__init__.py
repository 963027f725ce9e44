"""Utility helpers for the :mod:`implementors` package."""

from __future__ import annotations

from .path import normalise_project_root

__all__ = ["normalise_project_root"]

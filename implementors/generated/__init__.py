"""Generated implementor fragments bundled with :mod:`implementors`."""

from __future__ import annotations

from . import deref

__all__ = ["deref"]

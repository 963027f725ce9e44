"""Trait implementor catalogues and their registration handoff."""

from __future__ import annotations

from .catalogue import Catalogue, CatalogueError, ImplementorRecord, build_catalogue
from .handoff import HandoffContext, HandoffOutcome, hand_off

__all__ = [
    "Catalogue",
    "CatalogueError",
    "HandoffContext",
    "HandoffOutcome",
    "ImplementorRecord",
    "build_catalogue",
    "hand_off",
]

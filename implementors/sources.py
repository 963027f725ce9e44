"""TOML catalogue sources for :mod:`implementors`."""

from __future__ import annotations

import typing as typ
from collections import abc as cabc

from tomlkit import parse
from tomlkit.exceptions import TOMLKitError

from implementors.catalogue import Catalogue, CatalogueError, build_catalogue

if typ.TYPE_CHECKING:
    from pathlib import Path

SOURCE_TOML_KEYS: typ.Final[frozenset[str]] = frozenset({"trait", "modules"})


def _expect_string(value: object, field_name: str) -> str:
    """Return ``value`` when it is a string, raising otherwise."""
    if isinstance(value, str):
        return str(value)
    message = f"{field_name} must be a string; received {type(value).__name__}."
    raise CatalogueError(message)


def _module_rows(value: object, module: str) -> list[list[str]]:
    """Return wire rows for the ``modules.<module>`` array."""
    if not isinstance(value, cabc.Sequence) or isinstance(value, str | bytes):
        message = (
            f"modules.{module} must be an array of strings; "
            f"received {type(value).__name__}."
        )
        raise CatalogueError(message)
    return [
        [_expect_string(entry, f"modules.{module}[{index}]")]
        for index, entry in enumerate(value)
    ]


def catalogue_from_source(
    text: str, *, exclude: cabc.Collection[str] = ()
) -> Catalogue:
    """Build a catalogue from the TOML catalogue description ``text``.

    The document names the trait and lists each module's records as an
    array of markup strings::

        trait = "core::ops::deref::Deref"

        [modules]
        common_base = ["impl Deref for Bytes"]

    """
    try:
        document = parse(text)
    except TOMLKitError as exc:
        message = f"Catalogue source is not valid TOML: {exc}"
        raise CatalogueError(message) from exc
    unknown = set(document) - SOURCE_TOML_KEYS
    if unknown:
        joined = ", ".join(sorted(unknown))
        message = f"Unknown catalogue source key(s): {joined}."
        raise CatalogueError(message)
    trait_value = document.get("trait")
    trait = None if trait_value is None else _expect_string(trait_value, "trait")
    modules = document.get("modules", {})
    if not isinstance(modules, cabc.Mapping):
        message = (
            f"modules must be a TOML table; received {type(modules).__name__}."
        )
        raise CatalogueError(message)
    literal = {
        str(module): _module_rows(rows, str(module)) for module, rows in modules.items()
    }
    return build_catalogue(literal, trait=trait, exclude=exclude)


def load_catalogue_source(
    path: Path, *, exclude: cabc.Collection[str] = ()
) -> Catalogue:
    """Read the TOML catalogue description stored at ``path``."""
    return catalogue_from_source(path.read_text(encoding="utf-8"), exclude=exclude)


__all__ = ["SOURCE_TOML_KEYS", "catalogue_from_source", "load_catalogue_source"]

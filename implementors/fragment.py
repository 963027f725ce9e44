"""Read and write the generated JavaScript implementor fragments.

Summary
-------
The documentation toolchain ships each trait's implementors as a small
script that registers the catalogue with the page, or leaves it in
``window.pending_implementors`` when the page has not initialised yet.
This module converts between that script and :class:`Catalogue` values.

Usage
-----
>>> from pathlib import Path
>>> from implementors import fragment
>>> catalogue = fragment.read_fragment(Path("trait.Deref.js"))
>>> fragment.render_fragment(catalogue).startswith("(function()")
True
"""

from __future__ import annotations

import typing as typ

import msgspec

from implementors.catalogue import Catalogue, CatalogueError, build_catalogue

if typ.TYPE_CHECKING:
    from pathlib import Path

FRAGMENT_PROLOGUE: typ.Final[str] = "(function() {var implementors = {\n"
FRAGMENT_EPILOGUE: typ.Final[str] = (
    "\n};if (window.register_implementors) "
    "{window.register_implementors(implementors);} "
    "else {window.pending_implementors = implementors;}})()"
)
FRAGMENT_DIRECTORY: typ.Final[str] = "implementors"

_LITERAL_DECODER = msgspec.json.Decoder(dict[str, list[list[str]]])


class FragmentError(CatalogueError):
    """Raised when a fragment does not have the generated layout."""


def fragment_path(root: Path, trait_path: str) -> Path:
    """Return where the fragment for ``trait_path`` lives below ``root``.

    ``core::ops::deref::Deref`` maps to
    ``implementors/core/ops/deref/trait.Deref.js``.
    """
    *modules, name = trait_path.split("::")
    if not modules or not name or not all(modules):
        message = f"Trait path {trait_path!r} must include its module path."
        raise FragmentError(message)
    return root.joinpath(FRAGMENT_DIRECTORY, *modules, f"trait.{name}.js")


def trait_from_fragment_path(path: Path) -> str | None:
    """Return the trait path encoded in a fragment location, if any.

    Inverse of :func:`fragment_path`. Files outside an ``implementors``
    directory yield just the trait name.
    """
    name = path.name
    if not (name.startswith("trait.") and name.endswith(".js")):
        return None
    trait_name = name.removeprefix("trait.").removesuffix(".js")
    if not trait_name:
        return None
    parents = path.parent.parts
    if FRAGMENT_DIRECTORY not in parents:
        return trait_name
    anchor = len(parents) - 1 - parents[::-1].index(FRAGMENT_DIRECTORY)
    return "::".join((*parents[anchor + 1 :], trait_name))


def _extract_literal(text: str) -> str:
    """Return the object literal embedded in fragment ``text``."""
    stripped = text.strip()
    if not stripped.startswith(FRAGMENT_PROLOGUE.rstrip("\n")):
        message = "Fragment does not start with the implementors prologue."
        raise FragmentError(message)
    if not stripped.endswith(FRAGMENT_EPILOGUE.lstrip("\n")):
        message = "Fragment does not end with the registration handoff."
        raise FragmentError(message)
    start = len(FRAGMENT_PROLOGUE.rstrip("\n")) - 1
    end = len(stripped) - len(FRAGMENT_EPILOGUE.lstrip("\n")) + 1
    return stripped[start:end]


def parse_fragment(text: str, *, trait: str | None = None) -> Catalogue:
    """Return the catalogue carried by fragment ``text``.

    Raises
    ------
    FragmentError
        If ``text`` is not a generated fragment or its literal is invalid.

    """
    literal = _extract_literal(text)
    try:
        decoded = _LITERAL_DECODER.decode(literal)
    except msgspec.DecodeError as exc:
        message = f"Fragment literal is not valid: {exc}"
        raise FragmentError(message) from exc
    return build_catalogue(decoded, trait=trait)


def render_fragment(catalogue: Catalogue) -> str:
    """Return the fragment script for ``catalogue``, one module per line."""
    lines = [
        f"{msgspec.json.encode(module).decode()}:"
        f"{msgspec.json.encode(rows).decode()}"
        for module, rows in catalogue.to_literal().items()
    ]
    body = ",\n".join(lines)
    return f"{FRAGMENT_PROLOGUE}{body}{FRAGMENT_EPILOGUE}"


def read_fragment(path: Path, *, trait: str | None = None) -> Catalogue:
    """Read and parse the fragment stored at ``path``.

    The trait defaults to the one encoded in ``path``.
    """
    if trait is None:
        trait = trait_from_fragment_path(path)
    return parse_fragment(path.read_text(encoding="utf-8"), trait=trait)


def write_fragment(path: Path, catalogue: Catalogue) -> Path:
    """Write ``catalogue`` as a fragment to ``path`` and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_fragment(catalogue), encoding="utf-8")
    return path


__all__ = [
    "FRAGMENT_DIRECTORY",
    "FRAGMENT_EPILOGUE",
    "FRAGMENT_PROLOGUE",
    "FragmentError",
    "fragment_path",
    "parse_fragment",
    "read_fragment",
    "render_fragment",
    "trait_from_fragment_path",
    "write_fragment",
]

"""Catalogue models and builders for :mod:`implementors`."""

from __future__ import annotations

import html as html_lib
import re
from collections import abc as cabc

import msgspec

_TAG_PATTERN = re.compile(r"<[^>]+>")
_TITLE_PATTERN = re.compile(
    r'title="(?:struct|enum|union|type|trait|primitive) ([^"]+)"'
)
_ANCHOR_PATTERN = re.compile(r"<a [^>]*>([^<]*)</a>")

type ImplementorRow = list[str]
type CatalogueLiteral = cabc.Mapping[str, cabc.Sequence[cabc.Sequence[str]]]


class CatalogueError(RuntimeError):
    """Raised when catalogue data cannot be turned into a :class:`Catalogue`."""


def _strip_markup(markup: str) -> str:
    """Return ``markup`` without tags and with entities unescaped."""
    return html_lib.unescape(_TAG_PATTERN.sub("", markup))


def _split_generics(text: str) -> str | None:
    """Return the generic parameter text of an ``impl<...>`` header."""
    if not text.startswith("impl<"):
        return None
    depth = 0
    for index, char in enumerate(text[len("impl") :], start=len("impl")):
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth == 0:
                return text[len("impl<") : index].strip() or None
    return None


class ImplementorRecord(msgspec.Struct, frozen=True, kw_only=True):
    """Describe one type implementing the catalogued trait within a module."""

    module: str
    html: str
    generics: str | None = None

    @classmethod
    def from_html(cls, module: str, html: str) -> ImplementorRecord:
        """Create a record from generator markup, deriving its generics."""
        generics = _split_generics(_strip_markup(html))
        return cls(module=module, html=html, generics=generics)

    @property
    def text(self) -> str:
        """Return the plain-text rendering of the record."""
        return _strip_markup(self.html)

    @property
    def implementor(self) -> str | None:
        """Return the display name of the implementing type, when linked."""
        _, separator, tail = self.html.rpartition(" for ")
        if not separator:
            return None
        match = _ANCHOR_PATTERN.search(tail)
        return None if match is None else html_lib.unescape(match.group(1))

    @property
    def implementor_path(self) -> str | None:
        """Return the fully qualified path of the implementing type."""
        _, separator, tail = self.html.rpartition(" for ")
        if not separator:
            return None
        match = _TITLE_PATTERN.search(tail)
        return None if match is None else match.group(1)

    def to_row(self) -> ImplementorRow:
        """Return the wire form of the record."""
        return [self.html]


class Catalogue(cabc.Mapping[str, tuple[ImplementorRecord, ...]]):
    """Immutable, ordered mapping of module names to implementor records."""

    __slots__ = ("_modules", "_trait")

    def __init__(
        self,
        modules: (
            cabc.Mapping[str, cabc.Sequence[ImplementorRecord]]
            | cabc.Iterable[tuple[str, cabc.Sequence[ImplementorRecord]]]
        ) = (),
        *,
        trait: str | None = None,
    ) -> None:
        """Validate and freeze ``modules`` preserving their order.

        ``modules`` is either a mapping of module names to records or an
        iterable of ``(module, records)`` pairs.
        """
        if isinstance(modules, cabc.Mapping):
            modules = modules.items()
        frozen: dict[str, tuple[ImplementorRecord, ...]] = {}
        for module, records in modules:
            if module in frozen:
                message = f"Module {module!r} appears more than once."
                raise CatalogueError(message)
            frozen[module] = _freeze_records(module, records)
        self._modules = frozen
        self._trait = trait

    @property
    def trait(self) -> str | None:
        """Return the path of the catalogued trait, if known."""
        return self._trait

    def __getitem__(self, module: str) -> tuple[ImplementorRecord, ...]:
        return self._modules[module]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)

    def __eq__(self, other: object) -> bool:
        """Compare module names and record contents, ignoring ``trait``.

        Records held by ``other`` may be any iterable, so a catalogue equals a
        plain ``{module: [record, ...]}`` dictionary with the same content.
        """
        if not isinstance(other, cabc.Mapping):
            return NotImplemented
        if len(other) != len(self._modules):
            return False
        for module, records in self._modules.items():
            if module not in other:
                return False
            candidate = other[module]
            if not isinstance(candidate, cabc.Iterable) or isinstance(candidate, str):
                return False
            if tuple(candidate) != records:
                return False
        return True

    def __hash__(self) -> int:
        return hash(tuple(self._modules.items()))

    def __repr__(self) -> str:
        modules = ", ".join(
            f"{module}={len(records)}" for module, records in self._modules.items()
        )
        return f"Catalogue(trait={self.trait!r}, {modules})"

    @property
    def records(self) -> tuple[ImplementorRecord, ...]:
        """Return every record in module order."""
        return tuple(
            record for records in self._modules.values() for record in records
        )

    def excluding(self, modules: cabc.Collection[str]) -> Catalogue:
        """Return a copy of the catalogue without ``modules``."""
        if not modules:
            return self
        return Catalogue(
            (
                (module, records)
                for module, records in self._modules.items()
                if module not in modules
            ),
            trait=self._trait,
        )

    def to_literal(self) -> dict[str, list[ImplementorRow]]:
        """Return the wire literal ``{module: [[html], ...]}``."""
        return {
            module: [record.to_row() for record in records]
            for module, records in self._modules.items()
        }


def _freeze_records(
    module: str, records: cabc.Sequence[ImplementorRecord]
) -> tuple[ImplementorRecord, ...]:
    """Return ``records`` as a tuple after checking module invariants."""
    if not isinstance(module, str) or not module:
        message = f"Module names must be non-empty strings; received {module!r}."
        raise CatalogueError(message)
    frozen = tuple(records)
    if not frozen:
        message = f"Module {module!r} must list at least one implementor."
        raise CatalogueError(message)
    for record in frozen:
        if record.module != module:
            message = (
                f"Record for module {record.module!r} cannot be stored "
                f"under {module!r}."
            )
            raise CatalogueError(message)
    return frozen


def _row_markup(row: object, module: str, index: int) -> str:
    """Return the markup held by a single wire row."""
    if (
        isinstance(row, cabc.Sequence)
        and not isinstance(row, str | bytes)
        and len(row) == 1
        and isinstance(row[0], str)
    ):
        return row[0]
    message = (
        f"{module}[{index}] must be a single-element sequence holding a string; "
        f"received {row!r}."
    )
    raise CatalogueError(message)


def _module_records(module: str, rows: object) -> tuple[ImplementorRecord, ...]:
    """Convert the wire rows of ``module`` into records."""
    if not isinstance(rows, cabc.Sequence) or isinstance(rows, str | bytes):
        message = (
            f"{module} must be a sequence of rows; received {type(rows).__name__}."
        )
        raise CatalogueError(message)
    return tuple(
        ImplementorRecord.from_html(module, _row_markup(row, module, index))
        for index, row in enumerate(rows)
    )


def build_catalogue(
    literal: CatalogueLiteral,
    *,
    trait: str | None = None,
    exclude: cabc.Collection[str] = (),
) -> Catalogue:
    """Build a :class:`Catalogue` from the generator's data literal.

    Parameters
    ----------
    literal
        Mapping of module name to rows, each row a one-element sequence
        holding the record markup.
    trait
        Path of the catalogued trait, if known.
    exclude
        Modules to omit from the result.

    Returns
    -------
    Catalogue
        The frozen catalogue, preserving module and record order.

    Raises
    ------
    CatalogueError
        If ``literal`` does not have the expected shape.

    """
    if not isinstance(literal, cabc.Mapping):
        message = (
            f"Catalogue literal must be a mapping; received {type(literal).__name__}."
        )
        raise CatalogueError(message)
    excluded = frozenset(exclude)
    modules: list[tuple[str, tuple[ImplementorRecord, ...]]] = []
    for module, rows in literal.items():
        if not isinstance(module, str):
            message = (
                f"Module names must be strings; received {type(module).__name__}."
            )
            raise CatalogueError(message)
        if module in excluded:
            continue
        modules.append((module, _module_records(module, rows)))
    return Catalogue(modules, trait=trait)


def describe_catalogue(catalogue: Catalogue) -> str:
    """Return a short human-friendly summary of ``catalogue``."""
    count = len(catalogue.records)
    label = "implementor" if count == 1 else "implementors"
    modules = len(catalogue)
    module_label = "module" if modules == 1 else "modules"
    subject = catalogue.trait or "catalogue"
    return f"{subject}: {count} {label} across {modules} {module_label}"


__all__ = [
    "Catalogue",
    "CatalogueError",
    "CatalogueLiteral",
    "ImplementorRecord",
    "ImplementorRow",
    "build_catalogue",
    "describe_catalogue",
]

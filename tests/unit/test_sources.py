"""Tests for TOML catalogue sources."""

from __future__ import annotations

import textwrap
import typing as typ

import pytest
import tomlkit

from implementors import sources
from implementors.catalogue import CatalogueError
from tests.helpers.markup import struct_impl

if typ.TYPE_CHECKING:
    from pathlib import Path


def _source_document(**modules: list[str]) -> str:
    document = tomlkit.document()
    document["trait"] = "core::ops::deref::Deref"
    table = tomlkit.table()
    for module, entries in modules.items():
        table.add(module, entries)
    document["modules"] = table
    return tomlkit.dumps(document)


def test_catalogue_from_source_reads_modules_in_order() -> None:
    """Modules and records keep the order they are written in."""
    text = _source_document(
        meta_srv=[
            struct_impl("meta_srv::keys", "DATANODE_STAT_KEY_PATTERN"),
            struct_impl("meta_srv::keys", "DATANODE_LEASE_KEY_PATTERN"),
        ],
        common_grpc=[struct_impl("common_grpc::channel_manager", "ID")],
    )

    catalogue = sources.catalogue_from_source(text)

    assert catalogue.trait == "core::ops::deref::Deref"
    assert list(catalogue) == ["meta_srv", "common_grpc"]
    assert [record.implementor for record in catalogue["meta_srv"]] == [
        "DATANODE_STAT_KEY_PATTERN",
        "DATANODE_LEASE_KEY_PATTERN",
    ]
    assert all(isinstance(record.html, str) for record in catalogue.records)


def test_catalogue_from_source_applies_exclusions() -> None:
    """Excluded modules are skipped."""
    text = _source_document(alpha=["impl Deref for A"], beta=["impl Deref for B"])

    catalogue = sources.catalogue_from_source(text, exclude={"alpha"})

    assert list(catalogue) == ["beta"]


def test_catalogue_from_source_allows_missing_sections() -> None:
    """An empty document yields an empty, trait-less catalogue."""
    catalogue = sources.catalogue_from_source("")

    assert catalogue == {}
    assert catalogue.trait is None


@pytest.mark.parametrize(
    ("body", "match"),
    [
        pytest.param("modules = [", "not valid TOML", id="invalid_toml"),
        pytest.param('name = "x"', "Unknown catalogue source key", id="unknown_key"),
        pytest.param("trait = 1", "trait must be a string", id="trait_type"),
        pytest.param('modules = "x"', "modules must be a TOML table", id="modules"),
        pytest.param(
            """
            [modules]
            alpha = "impl Deref for A"
            """,
            "array of strings",
            id="module_not_array",
        ),
        pytest.param(
            """
            [modules]
            alpha = [1]
            """,
            r"modules.alpha\[0\] must be a string",
            id="entry_type",
        ),
        pytest.param(
            """
            [modules]
            alpha = []
            """,
            "at least one implementor",
            id="empty_module",
        ),
    ],
)
def test_catalogue_from_source_rejects_invalid_documents(
    body: str, match: str
) -> None:
    """Malformed sources raise :class:`CatalogueError`."""
    with pytest.raises(CatalogueError, match=match):
        sources.catalogue_from_source(textwrap.dedent(body))


def test_load_catalogue_source_reads_file(tmp_path: Path) -> None:
    """Sources are read from disk as UTF-8."""
    path = tmp_path / "catalogue.toml"
    path.write_text(_source_document(alpha=["impl Deref for Å"]), encoding="utf-8")

    catalogue = sources.load_catalogue_source(path)

    assert catalogue["alpha"][0].text == "impl Deref for Å"

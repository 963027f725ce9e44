"""Pytest configuration for the implementors test-suite."""

from __future__ import annotations

import os
import typing as typ

import pytest
import tomlkit

from implementors.catalogue import Catalogue, ImplementorRecord, build_catalogue
from implementors.handoff import HandoffContext
from tests.helpers.markup import struct_impl

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _restore_root_env() -> typ.Iterator[None]:
    """Ensure tests do not leak ``IMPLEMENTORS_ROOT`` between runs."""
    from implementors.cli import PROJECT_ROOT_ENV_VAR

    original = os.environ.get(PROJECT_ROOT_ENV_VAR)
    try:
        yield
    finally:
        if original is None:
            os.environ.pop(PROJECT_ROOT_ENV_VAR, None)
        else:
            os.environ[PROJECT_ROOT_ENV_VAR] = original


@pytest.fixture
def bytes_record() -> ImplementorRecord:
    """Return the single ``common_base`` record."""
    return ImplementorRecord.from_html(
        "common_base", struct_impl("common_base::bytes", "Bytes")
    )


@pytest.fixture
def make_catalogue() -> typ.Callable[..., Catalogue]:
    """Return a factory building catalogues from ``module=[names]`` keywords."""

    def _make_catalogue(**modules: typ.Sequence[str]) -> Catalogue:
        literal = {
            module: [[struct_impl(f"{module}::types", name)] for name in names]
            for module, names in modules.items()
        }
        return build_catalogue(literal, trait="core::ops::deref::Deref")

    return _make_catalogue


@pytest.fixture
def context() -> HandoffContext:
    """Return a fresh handoff context using the default policy."""
    return HandoffContext()


@pytest.fixture
def write_config(tmp_path: Path) -> typ.Callable[..., Path]:
    """Return a helper that writes ``implementors.toml`` into ``tmp_path``."""
    from implementors import config as config_module

    def _write(**tables: typ.Mapping[str, object]) -> Path:
        document = tomlkit.document()
        for name, values in tables.items():
            table = tomlkit.table()
            for key, value in values.items():
                table.add(key, value)
            document[name] = table
        config_path = tmp_path / config_module.CONFIG_FILENAME
        config_path.write_text(tomlkit.dumps(document), encoding="utf-8")
        return config_path

    return _write

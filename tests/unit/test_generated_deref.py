"""Tests for the generated ``Deref`` implementors fragment."""

from __future__ import annotations

from implementors import fragment
from implementors.generated import deref
from implementors.handoff import HandoffContext, HandoffOutcome


def test_build_returns_the_same_catalogue_every_time() -> None:
    """The catalogue is constructed once per process."""
    assert deref.build() is deref.build()


def test_catalogue_lists_modules_in_generated_order() -> None:
    """Modules and their record counts match the generated literal."""
    catalogue = deref.build()

    assert catalogue.trait == "core::ops::deref::Deref"
    assert {module: len(records) for module, records in catalogue.items()} == {
        "common_base": 1,
        "common_grpc": 1,
        "common_meta": 6,
        "meta_srv": 2,
        "mito2": 2,
        "storage": 3,
    }
    assert list(catalogue) == list(deref.IMPLEMENTORS)


def test_catalogue_records_follow_literal_order() -> None:
    """Each module lists its implementors exactly as generated."""
    catalogue = deref.build()

    assert [record.implementor for record in catalogue["common_meta"]] == [
        "CATALOG_NAME_KEY_PATTERN",
        "SCHEMA_NAME_KEY_PATTERN",
        "SCHEMA_KEY_PATTERN",
        "CATALOG_KEY_PATTERN",
        "DATANODE_TABLE_KEY_PATTERN",
        "TABLE_NAME_KEY_PATTERN",
    ]
    assert [record.html for record in catalogue["storage"]] == [
        row[0] for row in deref.IMPLEMENTORS["storage"]
    ]


def test_storage_guard_is_generic() -> None:
    """The transaction guard implementation carries its type parameter."""
    guard = deref.build()["storage"][0]

    assert guard.generics == "T: Clone"
    assert guard.implementor_path == "storage::sync::TxnGuard"
    assert guard.text == "impl<T: Clone> Deref for TxnGuard<'_, T>"


def test_load_defers_until_a_consumer_binds() -> None:
    """Loading before the consumer exists parks the catalogue."""
    context = HandoffContext()
    received: list[object] = []

    assert deref.load(context) is HandoffOutcome.DEFERRED
    assert context.pending is deref.build()

    context.bind(received.append)

    assert received == [deref.build()]


def test_load_delivers_to_a_bound_consumer() -> None:
    """Loading after the consumer exists delivers immediately."""
    context = HandoffContext()
    received: list[object] = []
    context.bind(received.append)

    assert deref.load(context) is HandoffOutcome.DELIVERED
    assert received == [deref.build()]
    assert context.pending is None


def test_rendered_fragment_uses_generated_markup() -> None:
    """Rendering reproduces the generator's escaped markup."""
    text = fragment.render_fragment(deref.build())

    assert '"common_base":[["impl <a class=\\"trait\\" href=' in text
    assert "&lt;'_, T&gt;" in text
    assert text.count("\n") == len(deref.IMPLEMENTORS) + 1

"""Implementors of ``core::ops::deref::Deref`` across the documented crates.

Generated by the documentation toolchain; edit the upstream sources rather
than this file.
"""

# ruff: noqa: E501

from __future__ import annotations

import functools
import typing as typ

from implementors.catalogue import build_catalogue
from implementors.handoff import hand_off

if typ.TYPE_CHECKING:  # pragma: no cover - typing helper only
    from implementors.catalogue import Catalogue
    from implementors.handoff import HandoffContext, HandoffOutcome

TRAIT_PATH: typ.Final[str] = "core::ops::deref::Deref"

IMPLEMENTORS: typ.Final[dict[str, tuple[tuple[str], ...]]] = {
    "common_base": (
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_base/bytes/struct.Bytes.html" title="struct common_base::bytes::Bytes">Bytes</a>',),
    ),
    "common_grpc": (
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_grpc/channel_manager/struct.ID.html" title="struct common_grpc::channel_manager::ID">ID</a>',),
    ),
    "common_meta": (
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_meta/key/struct.CATALOG_NAME_KEY_PATTERN.html" title="struct common_meta::key::CATALOG_NAME_KEY_PATTERN">CATALOG_NAME_KEY_PATTERN</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_meta/key/struct.SCHEMA_NAME_KEY_PATTERN.html" title="struct common_meta::key::SCHEMA_NAME_KEY_PATTERN">SCHEMA_NAME_KEY_PATTERN</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_meta/helper/struct.SCHEMA_KEY_PATTERN.html" title="struct common_meta::helper::SCHEMA_KEY_PATTERN">SCHEMA_KEY_PATTERN</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_meta/helper/struct.CATALOG_KEY_PATTERN.html" title="struct common_meta::helper::CATALOG_KEY_PATTERN">CATALOG_KEY_PATTERN</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_meta/key/struct.DATANODE_TABLE_KEY_PATTERN.html" title="struct common_meta::key::DATANODE_TABLE_KEY_PATTERN">DATANODE_TABLE_KEY_PATTERN</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="common_meta/key/struct.TABLE_NAME_KEY_PATTERN.html" title="struct common_meta::key::TABLE_NAME_KEY_PATTERN">TABLE_NAME_KEY_PATTERN</a>',),
    ),
    "meta_srv": (
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="meta_srv/keys/struct.DATANODE_STAT_KEY_PATTERN.html" title="struct meta_srv::keys::DATANODE_STAT_KEY_PATTERN">DATANODE_STAT_KEY_PATTERN</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="meta_srv/keys/struct.DATANODE_LEASE_KEY_PATTERN.html" title="struct meta_srv::keys::DATANODE_LEASE_KEY_PATTERN">DATANODE_LEASE_KEY_PATTERN</a>',),
    ),
    "mito2": (
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="mito2/manifest/storage/struct.CHECKPOINT_RE.html" title="struct mito2::manifest::storage::CHECKPOINT_RE">CHECKPOINT_RE</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="mito2/manifest/storage/struct.DELTA_RE.html" title="struct mito2::manifest::storage::DELTA_RE">DELTA_RE</a>',),
    ),
    "storage": (
        ("impl&lt;T: <a class=\"trait\" href=\"https://doc.rust-lang.org/nightly/core/clone/trait.Clone.html\" title=\"trait core::clone::Clone\">Clone</a>&gt; <a class=\"trait\" href=\"https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html\" title=\"trait core::ops::deref::Deref\">Deref</a> for <a class=\"struct\" href=\"storage/sync/struct.TxnGuard.html\" title=\"struct storage::sync::TxnGuard\">TxnGuard</a>&lt;'_, T&gt;",),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="storage/manifest/storage/struct.CHECKPOINT_RE.html" title="struct storage::manifest::storage::CHECKPOINT_RE">CHECKPOINT_RE</a>',),
        ('impl <a class="trait" href="https://doc.rust-lang.org/nightly/core/ops/deref/trait.Deref.html" title="trait core::ops::deref::Deref">Deref</a> for <a class="struct" href="storage/manifest/storage/struct.DELTA_RE.html" title="struct storage::manifest::storage::DELTA_RE">DELTA_RE</a>',),
    ),
}


@functools.cache
def build() -> Catalogue:
    """Return the ``Deref`` catalogue, constructing it on first use."""
    return build_catalogue(IMPLEMENTORS, trait=TRAIT_PATH)


def load(context: HandoffContext) -> HandoffOutcome:
    """Hand the ``Deref`` catalogue off to ``context``."""
    return hand_off(build(), context)

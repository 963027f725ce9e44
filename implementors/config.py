"""Configuration loading for the :mod:`implementors` toolkit."""

from __future__ import annotations

import contextlib
import contextvars
import dataclasses as dc
import typing as typ
from collections import abc as cabc

from cyclopts.config import Toml

from implementors.handoff import (
    DEFAULT_PENDING_POLICY,
    PENDING_POLICIES,
    HandoffContext,
    PendingPolicy,
)
from implementors.utils import normalise_project_root

if typ.TYPE_CHECKING:  # pragma: no cover - type checking only
    from pathlib import Path

CONFIG_FILENAME = "implementors.toml"

CONFIG_ROOT_TOML_KEYS: typ.Final[frozenset[str]] = frozenset(
    {"handoff", "catalogue"}
)
HANDOFF_TOML_KEYS: typ.Final[frozenset[str]] = frozenset({"policy"})
CATALOGUE_TOML_KEYS: typ.Final[frozenset[str]] = frozenset({"exclude"})


class ConfigurationError(RuntimeError):
    """Raised when the :mod:`implementors` configuration is invalid."""


class ConfigurationNotLoadedError(ConfigurationError):
    """Raised when code accesses the configuration before it is loaded."""


class MissingConfigurationError(ConfigurationError):
    """Raised when a required configuration file cannot be located."""


@dc.dataclass(frozen=True, slots=True)
class HandoffConfig:
    """Settings for the registration handoff."""

    policy: PendingPolicy = DEFAULT_PENDING_POLICY

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any] | None) -> HandoffConfig:
        """Create a :class:`HandoffConfig` from a TOML table mapping."""
        if mapping is None:
            return cls()
        _validate_mapping_keys(mapping, set(HANDOFF_TOML_KEYS), "handoff")
        return cls(policy=_pending_policy(mapping.get("policy")))

    def create_context(self) -> HandoffContext:
        """Return a fresh :class:`HandoffContext` using these settings."""
        return HandoffContext(policy=self.policy)


@dc.dataclass(frozen=True, slots=True)
class CatalogueConfig:
    """Settings applied when building catalogues."""

    exclude: tuple[str, ...] = ()

    @classmethod
    def from_mapping(
        cls, mapping: cabc.Mapping[str, typ.Any] | None
    ) -> CatalogueConfig:
        """Create a :class:`CatalogueConfig` from a TOML table mapping."""
        if mapping is None:
            return cls()
        _validate_mapping_keys(mapping, set(CATALOGUE_TOML_KEYS), "catalogue")
        return cls(
            exclude=_string_tuple(mapping.get("exclude"), "catalogue.exclude"),
        )


@dc.dataclass(frozen=True, slots=True)
class ImplementorsConfig:
    """Strongly-typed representation of ``implementors.toml``."""

    handoff: HandoffConfig = dc.field(default_factory=HandoffConfig)
    catalogue: CatalogueConfig = dc.field(default_factory=CatalogueConfig)

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any]) -> ImplementorsConfig:
        """Create an :class:`ImplementorsConfig` from a parsed mapping."""
        _validate_mapping_keys(
            mapping, set(CONFIG_ROOT_TOML_KEYS), "configuration section"
        )
        return cls(
            handoff=HandoffConfig.from_mapping(
                _optional_mapping(mapping.get("handoff"), "handoff")
            ),
            catalogue=CatalogueConfig.from_mapping(
                _optional_mapping(mapping.get("catalogue"), "catalogue")
            ),
        )


_active_config: contextvars.ContextVar[ImplementorsConfig] = contextvars.ContextVar(
    "implementors_active_config"
)


def _validate_mapping_keys(
    mapping: cabc.Mapping[str, typ.Any] | None,
    allowed_keys: set[str],
    context: str,
) -> None:
    """Validate that mapping contains only allowed keys.

    Args:
        mapping: The mapping to validate (may be None).
        allowed_keys: Set of permitted key names.
        context: Context for error message (e.g., "handoff", "catalogue").

    Raises:
        ConfigurationError: If mapping contains unknown keys.

    """
    if mapping is None:
        return
    unknown = set(mapping) - allowed_keys
    if unknown:
        joined = ", ".join(sorted(unknown))
        if context.endswith(" section"):
            message = f"Unknown {context}(s): {joined}."
        else:
            message = f"Unknown {context} option(s): {joined}."
        raise ConfigurationError(message)


def build_loader(project_root: Path) -> Toml:
    """Return a Cyclopts loader for ``implementors.toml`` in ``project_root``."""
    resolved = normalise_project_root(project_root)
    return Toml(
        path=resolved / CONFIG_FILENAME,
        must_exist=False,
        search_parents=False,
        allow_unknown=True,
        use_commands_as_keys=True,
    )


def load_from_loader(loader: Toml) -> ImplementorsConfig:
    """Load and validate configuration using ``loader``."""
    try:
        raw = loader.config
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
    if not isinstance(raw, cabc.Mapping):
        message = "Configuration root must be a TOML table."
        raise ConfigurationError(message)
    return ImplementorsConfig.from_mapping(raw)


def load_configuration(project_root: Path) -> ImplementorsConfig:
    """Load configuration for ``project_root`` using Cyclopts."""
    loader = build_loader(project_root)
    return load_from_loader(loader)


def require_configuration(project_root: Path) -> ImplementorsConfig:
    """Load configuration, raising when ``implementors.toml`` is absent."""
    path = normalise_project_root(project_root) / CONFIG_FILENAME
    if not path.is_file():
        message = f"Configuration file not found: {path}"
        raise MissingConfigurationError(message)
    return load_configuration(project_root)


@contextlib.contextmanager
def use_configuration(configuration: ImplementorsConfig) -> typ.Iterator[None]:
    """Set ``configuration`` as the active configuration for the current context."""
    token = _active_config.set(configuration)
    try:
        yield
    finally:
        _active_config.reset(token)


def current_configuration() -> ImplementorsConfig:
    """Return the active configuration or raise if none has been set."""
    try:
        return _active_config.get()
    except LookupError as exc:
        message = "Configuration has not been loaded yet."
        raise ConfigurationNotLoadedError(message) from exc


def _validate_string_sequence(
    sequence: cabc.Sequence[typ.Any], field_name: str
) -> tuple[str, ...]:
    """Validate that ``sequence`` contains only strings and return them."""
    items: list[str] = []
    for index, entry in enumerate(sequence):
        if not isinstance(entry, str):
            message = (
                f"{field_name}[{index}] must be a string, got {type(entry).__name__}."
            )
            raise ConfigurationError(message)
        items.append(entry)
    return tuple(items)


def _string_tuple(value: object, field_name: str) -> tuple[str, ...]:
    """Return a tuple of strings derived from ``value``."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, cabc.Sequence) and not isinstance(value, str | bytes):
        return _validate_string_sequence(value, field_name)
    message = (
        f"{field_name} must be a string or a sequence of strings; "
        f"received {type(value).__name__}."
    )
    raise ConfigurationError(message)


def _pending_policy(value: object) -> PendingPolicy:
    """Normalise the ``handoff.policy`` value."""
    if value is None:
        return DEFAULT_PENDING_POLICY
    if isinstance(value, str) and value in PENDING_POLICIES:
        return typ.cast("PendingPolicy", value)
    message = "handoff.policy must be 'queue' or 'overwrite'."
    raise ConfigurationError(message)


def _optional_mapping(
    value: object, field_name: str
) -> cabc.Mapping[str, typ.Any] | None:
    """Ensure ``value`` is a mapping if provided."""
    if value is None:
        return None
    if isinstance(value, cabc.Mapping):
        return typ.cast("cabc.Mapping[str, typ.Any]", value)
    message = f"{field_name} must be a TOML table; received {type(value).__name__}."
    raise ConfigurationError(message)

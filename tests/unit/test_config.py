"""Tests for ``implementors.config``."""

from __future__ import annotations

import textwrap
import typing as typ

import pytest

from implementors import config as config_module

if typ.TYPE_CHECKING:
    from pathlib import Path


def _write_config(tmp_path: Path, body: str) -> Path:
    config_path = tmp_path / config_module.CONFIG_FILENAME
    config_path.write_text(textwrap.dedent(body).lstrip())
    return config_path


def test_load_configuration_parses_values(
    tmp_path: Path, write_config: typ.Callable[..., Path]
) -> None:
    """Load a representative configuration document."""
    write_config(
        handoff={"policy": "overwrite"},
        catalogue={"exclude": ["mito2", "storage"]},
    )

    configuration = config_module.load_configuration(tmp_path)

    assert configuration.handoff.policy == "overwrite"
    assert configuration.catalogue.exclude == ("mito2", "storage")


@pytest.mark.parametrize(
    "config_body",
    [
        pytest.param(
            """
            [handoff]
            policy = "stack"
            """,
            id="invalid_policy_string",
        ),
        pytest.param(
            """
            [handoff]
            policy = ["queue"]
            """,
            id="invalid_policy_type",
        ),
        pytest.param(
            """
            [handoff]
            unexpected = "value"
            """,
            id="unknown_handoff_key",
        ),
        pytest.param(
            """
            [catalogue]
            exclude = ["alpha", 1]
            """,
            id="exclude_invalid_type",
        ),
        pytest.param(
            """
            [catalogue]
            exclude = 3
            """,
            id="exclude_not_sequence",
        ),
        pytest.param(
            """
            handoff = "queue"
            """,
            id="section_not_table",
        ),
        pytest.param(
            """
            [unknown]
            value = 1
            """,
            id="unknown_sections",
        ),
    ],
)
def test_load_configuration_rejects_invalid_values(
    tmp_path: Path, config_body: str
) -> None:
    """Reject invalid configuration values and structures."""
    _write_config(tmp_path, config_body)

    with pytest.raises(config_module.ConfigurationError):
        config_module.load_configuration(tmp_path)


def test_load_configuration_applies_defaults(tmp_path: Path) -> None:
    """Missing tables fall back to default values."""
    _write_config(tmp_path, "# empty file still constitutes valid TOML")

    configuration = config_module.load_configuration(tmp_path)

    assert configuration.handoff.policy == "queue"
    assert configuration.catalogue.exclude == ()


def test_load_configuration_defaults_without_file(tmp_path: Path) -> None:
    """Missing configuration files fall back to the default configuration."""
    configuration = config_module.load_configuration(tmp_path)

    assert configuration == config_module.ImplementorsConfig()


def test_require_configuration_reports_missing_file(tmp_path: Path) -> None:
    """``require_configuration`` insists on an ``implementors.toml`` file."""
    with pytest.raises(config_module.MissingConfigurationError, match="not found"):
        config_module.require_configuration(tmp_path)


def test_require_configuration_loads_existing_file(
    tmp_path: Path, write_config: typ.Callable[..., Path]
) -> None:
    """An existing file is loaded normally."""
    write_config(catalogue={"exclude": "mito2"})

    configuration = config_module.require_configuration(tmp_path)

    assert configuration.catalogue.exclude == ("mito2",)


def test_handoff_config_creates_matching_context() -> None:
    """Contexts created from configuration use its pending policy."""
    handoff_config = config_module.HandoffConfig.from_mapping({"policy": "overwrite"})

    context = handoff_config.create_context()

    assert context.policy == "overwrite"
    assert context.register is None


def test_use_configuration_sets_and_resets_context() -> None:
    """``use_configuration`` exposes the configuration within its block."""
    configuration = config_module.ImplementorsConfig(
        catalogue=config_module.CatalogueConfig(exclude=("mito2",))
    )

    with config_module.use_configuration(configuration):
        assert config_module.current_configuration() is configuration

    with pytest.raises(config_module.ConfigurationNotLoadedError):
        config_module.current_configuration()

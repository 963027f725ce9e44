"""Command-line interface for the :mod:`implementors` toolkit."""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from contextlib import contextmanager
from pathlib import Path

from cyclopts import App, Parameter

from . import config
from .catalogue import Catalogue, CatalogueError, describe_catalogue
from .fragment import read_fragment, render_fragment, write_fragment
from .generated import deref
from .handoff import HandoffError, hand_off
from .sources import load_catalogue_source
from .utils import normalise_project_root

PROJECT_ROOT_ENV_VAR = "IMPLEMENTORS_ROOT"
PROJECT_ROOT_REQUIRED_MESSAGE = "--root requires a value"

_FRAGMENT_PARAMETER = Parameter(help="Path to a generated implementors fragment.")
FragmentArgument = typ.Annotated[Path, _FRAGMENT_PARAMETER]
FragmentsArgument = typ.Annotated[tuple[Path, ...], _FRAGMENT_PARAMETER]

_OUTPUT_PARAMETER = Parameter(
    name="output",
    help="Write the fragment to this path instead of printing it.",
)
OutputOption = typ.Annotated[Path, _OUTPUT_PARAMETER]

_SOURCE_PARAMETER = Parameter(
    name="source",
    help="TOML catalogue description to render instead of the Deref catalogue.",
)
SourceOption = typ.Annotated[Path, _SOURCE_PARAMETER]

_LATE_PARAMETER = Parameter(
    name="late",
    help="Bind the consumer after every fragment has loaded.",
)
LateFlag = typ.Annotated[bool, _LATE_PARAMETER]

LOG_LEVEL_ENV_VAR = "IMPLEMENTORS_LOG_LEVEL"
_DEFAULT_LOG_LEVEL = logging.INFO
_LOG_FORMAT = "%(levelname)s: %(message)s"
_IMPLEMENTORS_HANDLER_NAME = "implementors-cli-handler"
_LOG_LEVEL_ALIASES: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

LOGGER = logging.getLogger(__name__)

app = App(help="Inspect and hand off generated trait implementor catalogues.")


def _validate_root_value(value: str) -> str:
    """Ensure ``value`` is usable as a project path."""
    if not value or value.startswith("-"):
        raise SystemExit(PROJECT_ROOT_REQUIRED_MESSAGE)
    return value


def _extract_root_override(
    tokens: typ.Sequence[str],
) -> tuple[str | None, list[str]]:
    """Split ``--root`` from CLI tokens.

    Both ``--root <path>`` and ``--root=<path>`` are accepted; the last
    occurrence wins.
    """
    root: str | None = None
    remainder: list[str] = []
    index = 0
    while index < len(tokens):
        current_argument = tokens[index]
        if current_argument == "--root":
            try:
                candidate = tokens[index + 1]
            except IndexError as err:
                raise SystemExit(PROJECT_ROOT_REQUIRED_MESSAGE) from err
            root = _validate_root_value(candidate)
            index += 2
            continue
        if current_argument.startswith("--root="):
            root = _validate_root_value(current_argument.partition("=")[2])
            index += 1
            continue
        remainder.append(current_argument)
        index += 1
    return root, remainder


def _resolve_log_level(value: str | None) -> int:
    """Return the configured log level or :data:`_DEFAULT_LOG_LEVEL`."""
    if value is None:
        return _DEFAULT_LOG_LEVEL
    candidate = value.strip()
    if not candidate:
        return _DEFAULT_LOG_LEVEL
    level = _LOG_LEVEL_ALIASES.get(candidate.upper())
    if level is None:
        choices = ", ".join(sorted(_LOG_LEVEL_ALIASES))
        message = (
            f"Invalid {LOG_LEVEL_ENV_VAR} value {value!r}; expected one of: {choices}"
        )
        raise SystemExit(message)
    return level


def _configure_logging(stream: typ.TextIO | None = None) -> None:
    """Configure root logging so handoff activity is visible."""
    level = _resolve_log_level(os.environ.get(LOG_LEVEL_ENV_VAR))
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    handler = next(
        (
            existing
            for existing in root_logger.handlers
            if getattr(existing, "name", "") == _IMPLEMENTORS_HANDLER_NAME
        ),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler.name = _IMPLEMENTORS_HANDLER_NAME
        root_logger.addHandler(handler)
    elif stream is not None:
        handler.stream = stream
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))


@contextmanager
def _root_env(value: Path) -> typ.Iterator[None]:
    """Temporarily set :data:`PROJECT_ROOT_ENV_VAR` to ``value``."""
    previous = os.environ.get(PROJECT_ROOT_ENV_VAR)
    os.environ[PROJECT_ROOT_ENV_VAR] = str(value)
    try:
        yield
    finally:
        if previous is None:
            os.environ.pop(PROJECT_ROOT_ENV_VAR, None)
        else:
            os.environ[PROJECT_ROOT_ENV_VAR] = previous


def _active_configuration() -> config.ImplementorsConfig:
    """Return the active configuration, loading it from the project root."""
    try:
        return config.current_configuration()
    except config.ConfigurationNotLoadedError:
        root = normalise_project_root(os.environ.get(PROJECT_ROOT_ENV_VAR))
        return config.load_configuration(root)


def _dispatch_and_print(tokens: typ.Sequence[str]) -> int:
    """Execute the Cyclopts app and print command results."""
    try:
        result = app(tokens)
    except SystemExit as err:
        code = err.code
        if code is None:
            return 0
        if isinstance(code, int):
            return code
        print(code, file=sys.stderr)
        return 1
    if isinstance(result, int):
        return result
    if result is not None:
        print(result)
    return 0


def main(argv: typ.Sequence[str] | None = None) -> int:
    """Entry point for the ``implementors`` console script."""
    try:
        if argv is None:
            argv = sys.argv[1:]
        _configure_logging()
        root_override, remaining = _extract_root_override(list(argv))
        project_root = normalise_project_root(
            root_override or os.environ.get(PROJECT_ROOT_ENV_VAR)
        )
        if not remaining:
            _dispatch_and_print(remaining)  # Print usage message
            return 2  # Standard exit code for missing subcommand
        try:
            configuration = config.load_configuration(project_root)
        except config.ConfigurationError as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 1
        with _root_env(project_root), config.use_configuration(configuration):
            try:
                return _dispatch_and_print(remaining)
            except CatalogueError as exc:
                print(f"Catalogue error: {exc}", file=sys.stderr)
                return 1
            except HandoffError as exc:
                print(f"Handoff error: {exc}", file=sys.stderr)
                return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130
    except Exception as exc:  # noqa: BLE001 - fallback guard for CLI entry point
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1


def _format_catalogue(catalogue: Catalogue) -> str:
    """Return a module-by-module listing of ``catalogue``."""
    lines = [describe_catalogue(catalogue)]
    for module, records in catalogue.items():
        label = "implementor" if len(records) == 1 else "implementors"
        lines.append(f"{module}: {len(records)} {label}")
        lines.extend(f"  - {record.text}" for record in records)
    return "\n".join(lines)


@app.command
def inspect(fragment: FragmentArgument) -> str:
    """List the modules and implementors carried by a fragment."""
    configuration = _active_configuration()
    catalogue = read_fragment(fragment)
    return _format_catalogue(catalogue.excluding(configuration.catalogue.exclude))


@app.command
def render(
    *,
    output: OutputOption | None = None,
    source: SourceOption | None = None,
) -> str:
    """Render the Deref catalogue, or a TOML catalogue source, as a fragment."""
    configuration = _active_configuration()
    exclude = configuration.catalogue.exclude
    if source is None:
        catalogue = deref.build().excluding(exclude)
    else:
        catalogue = load_catalogue_source(source, exclude=exclude)
    text = render_fragment(catalogue)
    if output is None:
        return text
    written = write_fragment(output, catalogue)
    LOGGER.info("Wrote %s to %s", describe_catalogue(catalogue), written)
    return f"Wrote {written}"


@app.command
def deliver(fragments: FragmentsArgument, *, late: LateFlag = False) -> str:
    """Simulate a page loading fragments and handing them to a consumer."""
    configuration = _active_configuration()
    context = configuration.handoff.create_context()
    exclude = configuration.catalogue.exclude
    delivered: list[str] = []

    def _register(catalogue: Catalogue) -> None:
        delivered.append(describe_catalogue(catalogue))

    if not late:
        context.bind(_register)
    try:
        for path in fragments:
            catalogue = read_fragment(path).excluding(exclude)
            outcome = hand_off(catalogue, context)
            LOGGER.debug("%s: %s", path, outcome)
        if late:
            context.bind(_register)
    finally:
        context.clear()
    return "\n".join(delivered)


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    raise SystemExit(main())

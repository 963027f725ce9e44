"""Path helpers shared by the :mod:`implementors` command surface."""

from __future__ import annotations

from pathlib import Path


def normalise_project_root(value: Path | str | None) -> Path:
    """Return an absolute project root, defaulting to the working directory."""
    if value is None:
        return Path.cwd().resolve()
    return Path(value).expanduser().resolve()

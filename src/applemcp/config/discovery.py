"""Locate and read ``applemcp.toml``.

Lookup order: an explicit ``--config`` path, then ``APPLEMCP_CONFIG``,
then the first ``applemcp.toml`` found walking up from the working
directory. Having no file at all is normal; every setting has a default.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "applemcp.toml"
CONFIG_ENV_VAR = "APPLEMCP_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A set ``APPLEMCP_CONFIG`` wins over the walk-up search, even when it
    names a file that does not exist.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path).expanduser()
        return candidate if candidate.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for folder in (directory, *directory.parents):
        candidate = folder / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(explicit: str | None, start: Path | None = None) -> Path | None:
    """Pick the config file for a CLI invocation.

    Raises ClickException when *explicit* names a missing file, since a
    typo in ``--config`` would otherwise fall back to defaults silently.
    """
    if not explicit:
        return find_config(start)
    path = Path(explicit).expanduser()
    if not path.is_file():
        msg = f"Config file not found: {path}"
        raise click.ClickException(msg)
    return path


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; malformed TOML is reported as a ClickException."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc

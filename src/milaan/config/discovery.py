"""Locating ``milaan.toml``.

An explicit ``MILAAN_CONFIG`` path wins. Otherwise the directories from
the starting point up to the filesystem root are searched in order and
the nearest ``milaan.toml`` is used.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "milaan.toml"
CONFIG_ENV_VAR = "MILAAN_CONFIG"


def search_dirs(start: Path | None = None) -> Iterator[Path]:
    """Yield *start* (default: cwd) and each of its ancestors, nearest first."""
    here = (start or Path.cwd()).resolve()
    yield here
    yield from here.parents


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file in effect for *start*, or None.

    A ``MILAAN_CONFIG`` pointing at a missing file means "no config";
    the walk-up is not attempted in that case.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    return next(
        (d / CONFIG_FILENAME for d in search_dirs(start) if (d / CONFIG_FILENAME).is_file()),
        None,
    )

"""Locate ``deskctl.toml``.

``DESKCTL_CONFIG`` names the file explicitly. Otherwise the directories
from the working directory up to the filesystem root are searched, the
nearest file winning; its directory becomes the workspace root.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "deskctl.toml"
CONFIG_ENV_VAR = "DESKCTL_CONFIG"


def _search_dirs(start: Path) -> Iterator[Path]:
    current = start.resolve()
    yield current
    yield from current.parents


def find_config(start: Path | None = None) -> Path | None:
    """Path of the config file that applies to *start* (default: cwd), or None.

    An env override pointing at a missing file means "no config", not a
    fallback to the walk-up search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    for directory in _search_dirs(start or Path.cwd()):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None

"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins in ``.deskctl/plugins/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from deskctl.plugins.hookspecs import hookimpl
from deskctl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]

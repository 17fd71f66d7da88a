"""Workspace: the single dependency injected into every service.

A workspace is a directory holding an optional ``deskctl.toml`` and the
``.deskctl/`` state directory. It owns the resolved settings, the
session store and the plugin manager. :meth:`Workspace.session` is the
unit of work: load the session, let the caller replace it, save on a
clean exit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from deskctl.domain.grid import Canvas, GridSpec
from deskctl.domain.session import DesktopSession
from deskctl.infrastructure.store import STATE_DIRNAME, SessionStore

if TYPE_CHECKING:
    from deskctl.config.settings import DeskSettings
    from deskctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


@dataclass
class SessionUnit:
    """Active unit of work yielded by :meth:`Workspace.session`.

    ``exists`` is False when no session file was found; ``state`` then
    holds an empty session.
    """

    state: DesktopSession
    exists: bool
    dirty: bool = False

    def replace(self, state: DesktopSession) -> None:
        self.state = state
        self.dirty = True


class Workspace:
    """Settings, session persistence and plugins for one workspace root."""

    def __init__(self, settings: DeskSettings, *, store: SessionStore | None = None) -> None:
        self._settings = settings
        self._store = store or SessionStore.for_root(settings.workspace_root)
        self._plugins: PluginManager | None = None

    @property
    def root(self) -> Path:
        return self._settings.workspace_root

    @property
    def settings(self) -> DeskSettings:
        return self._settings

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def grid(self) -> GridSpec:
        return self._settings.grid_spec

    @property
    def canvas(self) -> Canvas:
        return self._settings.canvas_spec

    @property
    def plugins(self) -> PluginManager:
        """Plugin manager, discovered lazily on first access."""
        if self._plugins is None:
            self._plugins = self._init_plugins()
        return self._plugins

    def _init_plugins(self) -> PluginManager:
        from deskctl.plugins.builtins.categories import CategoryTagger
        from deskctl.plugins.manager import PluginManager

        pm = PluginManager(blocked=self._settings.plugins.blocked)
        if self._settings.plugins.enabled:
            pm.discover_and_load(local_dir=self.root / STATE_DIRNAME / "plugins")
            pm.register_plugin(
                CategoryTagger(palette=self._settings.tags.palette), name="categories-builtin"
            )
        return pm

    @contextmanager
    def session(self) -> Iterator[SessionUnit]:
        """Load the session and save it when the block exits cleanly and changed it.

        Usage::

            with workspace.session() as unit:
                unit.replace(unit.state.model_copy(update={"items": new_items}))
        """
        loaded = self._store.load()
        unit = SessionUnit(state=loaded or DesktopSession(), exists=loaded is not None)
        yield unit
        if unit.dirty:
            self._store.save(unit.state)

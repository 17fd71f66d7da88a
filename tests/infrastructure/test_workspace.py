"""Tests for the Workspace unit of work and plugin wiring."""

from __future__ import annotations

from pathlib import Path

import pytest

from deskctl.config.settings import DeskSettings
from deskctl.domain.models import DesktopItem
from deskctl.infrastructure.workspace import Workspace


class TestSession:
    def test_empty_session_when_nothing_saved(self, workspace: Workspace) -> None:
        with workspace.session() as unit:
            assert unit.exists is False
            assert unit.state.items == []
        assert not workspace.store.exists()

    def test_replace_is_saved_on_clean_exit(self, workspace: Workspace) -> None:
        with workspace.session() as unit:
            unit.replace(unit.state.model_copy(update={"items": [DesktopItem(id="1", label="a")]}))
        with workspace.session() as unit:
            assert unit.exists is True
            assert [i.id for i in unit.state.items] == ["1"]

    def test_not_saved_when_block_raises(self, workspace: Workspace) -> None:
        with pytest.raises(RuntimeError), workspace.session() as unit:
            unit.replace(unit.state.model_copy(update={"source": "x"}))
            raise RuntimeError("boom")
        assert not workspace.store.exists()

    def test_read_only_block_does_not_write(self, workspace: Workspace) -> None:
        with workspace.session():
            pass
        assert not workspace.store.exists()


class TestWorkspaceProperties:
    def test_grid_and_canvas_from_settings(self, workspace_root: Path) -> None:
        (workspace_root / "deskctl.toml").write_text("[canvas]\nheight = 768\n")
        ws = Workspace(DeskSettings.from_cli(workspace_root=workspace_root))
        assert ws.root == workspace_root
        assert ws.canvas.height == 768
        assert ws.grid.pitch_y == 110


class TestPlugins:
    def test_builtin_tagger_registered(self, workspace: Workspace) -> None:
        assert "categories-builtin" in workspace.plugins.list_plugin_names()
        assert workspace.plugins is workspace.plugins

    def test_disabled_plugins(self, workspace_root: Path) -> None:
        (workspace_root / "deskctl.toml").write_text("[plugins]\nenabled = false\n")
        ws = Workspace(DeskSettings.from_cli(workspace_root=workspace_root))
        assert ws.plugins.list_plugin_names() == []

    def test_blocked_builtin(self, workspace_root: Path) -> None:
        (workspace_root / "deskctl.toml").write_text(
            '[plugins]\nblocked = ["categories-builtin"]\n'
        )
        ws = Workspace(DeskSettings.from_cli(workspace_root=workspace_root))
        assert "categories-builtin" not in ws.plugins.list_plugin_names()

    def test_local_plugins_loaded(self, workspace_root: Path) -> None:
        plugin_dir = workspace_root / ".deskctl" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "probe.py").write_text(
            "from deskctl.plugins import hookimpl\n\n\n"
            "class Probe:\n"
            "    @hookimpl\n"
            "    def post_import(self, source, item_count):\n"
            "        pass\n"
        )
        ws = Workspace(DeskSettings.from_cli(workspace_root=workspace_root))
        assert "deskctl_local_plugin_probe.Probe" in ws.plugins.list_plugin_names()

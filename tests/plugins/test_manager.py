"""Tests for PluginManager: registration and hook relay."""

from __future__ import annotations

from typing import Any

import pytest

from deskctl.plugins import PluginManager, hookimpl


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def post_import(self, source: str, item_count: int) -> None:
        pass


class _ListingPlugin:
    @hookimpl
    def suggest_tags(self, items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [{"name": item["label"].upper()} for item in items]


class TestPluginManager:
    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_is_loaded_after_discover(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load(local_dir=None)
        assert pm.is_loaded is True

    @pytest.mark.parametrize(
        "hook_name",
        ["suggest_tags", "assign_tags", "post_apply", "post_rollback", "post_import"],
    )
    def test_all_hookspecs_registered(self, hook_name: str) -> None:
        assert hasattr(PluginManager().hook, hook_name)

    def test_collaborator_hook_returns_one_list_per_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_ListingPlugin(), name="listing")
        results = pm.hook.suggest_tags(items=[{"id": "1", "label": "a", "type": "file"}])
        assert results == [[{"name": "A"}]]

    def test_blocked_plugin_is_not_registered(self) -> None:
        pm = PluginManager(blocked=["dummy"])
        pm.register_plugin(_DummyPlugin(), name="dummy")
        pm.register_plugin(_ListingPlugin(), name="listing")
        assert pm.list_plugin_names() == ["listing"]
